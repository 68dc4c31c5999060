from .factory import EventFactory
from .schemas import (
    EtaUpdated,
    JourneyEvent,
    RemainingDistanceUpdated,
    RemainingWaypointsUpdated,
    TripInfoMessage,
    TripStatusUpdated,
    VehicleLocationMessage,
    VehicleLocationUpdated,
    WaypointMessage,
)

__all__ = [
    "EventFactory",
    "EtaUpdated",
    "JourneyEvent",
    "RemainingDistanceUpdated",
    "RemainingWaypointsUpdated",
    "TripInfoMessage",
    "TripStatusUpdated",
    "VehicleLocationMessage",
    "VehicleLocationUpdated",
    "WaypointMessage",
]
