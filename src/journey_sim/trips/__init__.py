"""Trip simulation: payload validation, status transitions, and the live session."""

from .payload import TripData, parse_trip_data
from .session import SimulationSession, utc_now
from .state_machine import DEFAULT_LEG_RULES, LegRules, LegTransition, next_leg

__all__ = [
    "TripData",
    "parse_trip_data",
    "SimulationSession",
    "utc_now",
    "DEFAULT_LEG_RULES",
    "LegRules",
    "LegTransition",
    "next_leg",
]
