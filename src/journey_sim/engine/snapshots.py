"""Immutable snapshot dataclasses for thread-safe state transfer.

These frozen dataclasses carry session state out of the lock so the scheduler
thread can build events and hosts can inspect a session without risk of
mutation.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from journey_sim.geo.motion import VehicleTelemetry
from journey_sim.trip import TripStatus, TripWaypoint


@dataclass(frozen=True)
class TripInfo:
    """Trip-identifying fields attached to every published event."""

    trip_id: str
    status: TripStatus
    waypoints: tuple[TripWaypoint, ...]

    def to_dict(self) -> dict[str, Any]:
        """Wire shape expected by journey-sharing clients."""
        return {
            "tripId": self.trip_id,
            "tripStatus": int(self.status),
            "remainingWaypoints": [wp.to_wire() for wp in self.waypoints],
        }


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable snapshot of a simulation session."""

    session_id: str
    trip_id: str
    booking_id: str
    vehicle_type_id: str
    status: TripStatus
    waypoints: tuple[TripWaypoint, ...]
    waypoint_index: int
    telemetry: VehicleTelemetry
    eta: datetime
    remaining_distance_m: float
    tick: int

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def eta_millis(self) -> int:
        return int(self.eta.timestamp() * 1000)

    @property
    def upcoming_waypoints(self) -> tuple[TripWaypoint, ...]:
        """Waypoints not yet reached, starting at the cursor."""
        return self.waypoints[self.waypoint_index :]

    @property
    def trip_info(self) -> TripInfo:
        return TripInfo(trip_id=self.trip_id, status=self.status, waypoints=self.waypoints)

    def to_dict(self) -> dict[str, Any]:
        """Convert snapshot to dictionary with datetimes as ISO strings."""
        return {
            "session_id": self.session_id,
            "trip_id": self.trip_id,
            "booking_id": self.booking_id,
            "vehicle_type_id": self.vehicle_type_id,
            "status": self.status.name,
            "waypoint_index": self.waypoint_index,
            "vehicle_location": self.telemetry.to_wire(),
            "eta": self.eta.isoformat(),
            "remaining_distance_m": self.remaining_distance_m,
            "tick": self.tick,
        }
