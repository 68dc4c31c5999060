"""Simulated journey-sharing trip feed."""

from journey_sim.controller import JourneySharingController
from journey_sim.core.exceptions import (
    ErrorCode,
    InvalidTripError,
    JourneySharingError,
    NoSessionError,
    SessionActiveError,
)
from journey_sim.pubsub.bus import EventBus, JourneySharingListeners
from journey_sim.trip import LatLng, Trip, TripStatus, TripWaypoint, WaypointType

__version__ = "0.1.0"

__all__ = [
    "JourneySharingController",
    "ErrorCode",
    "InvalidTripError",
    "JourneySharingError",
    "NoSessionError",
    "SessionActiveError",
    "EventBus",
    "JourneySharingListeners",
    "LatLng",
    "Trip",
    "TripStatus",
    "TripWaypoint",
    "WaypointType",
]
