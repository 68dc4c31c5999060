"""Trip, waypoint and status models."""

from enum import IntEnum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from journey_sim.core.exceptions import StateError


class TripStatus(IntEnum):
    """Trip lifecycle statuses. Values are the wire codes sent to the host."""

    NEW = 0
    ENROUTE_TO_PICKUP = 1
    ARRIVED_AT_PICKUP = 2
    ENROUTE_TO_DROPOFF = 3
    COMPLETED = 4
    CANCELED = 5

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    def to_event_type(self) -> str:
        """Convert status to an event type (e.g., 'trip.arrived_at_pickup')."""
        return f"trip.{self.name.lower()}"


TERMINAL_STATUSES = frozenset({TripStatus.COMPLETED, TripStatus.CANCELED})


class WaypointType(IntEnum):
    """Kind of stop. Values are the wire codes sent to the host."""

    PICKUP = 0
    DROPOFF = 1
    INTERMEDIATE = 2

    @property
    def default_title(self) -> str:
        return _DEFAULT_TITLES[self]


_DEFAULT_TITLES = {
    WaypointType.PICKUP: "Pickup",
    WaypointType.DROPOFF: "Dropoff",
    WaypointType.INTERMEDIATE: "Stop",
}


class LatLng(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float

    def as_tuple(self) -> tuple[float, float]:
        return self.lat, self.lng


class TripWaypoint(BaseModel):
    """A stop along the trip. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    location: LatLng
    waypoint_type: WaypointType = WaypointType.PICKUP
    trip_id: str
    title: str

    def to_wire(self) -> dict[str, object]:
        return {
            "id": self.id,
            "location": {"lat": self.location.lat, "lng": self.location.lng},
            "waypointType": int(self.waypoint_type),
            "tripId": self.trip_id,
            "title": self.title,
        }


class Trip(BaseModel):
    """Trip being simulated.

    The trip name doubles as the trip id. Waypoint order defines the route.
    """

    trip_name: str
    status: TripStatus = Field(default=TripStatus.NEW)
    waypoints: tuple[TripWaypoint, ...]
    vehicle_type_id: str = "default"
    booking_id: str

    @property
    def trip_id(self) -> str:
        return self.trip_name

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def transition_to(self, new_status: TripStatus) -> None:
        """Move the trip forward through its legs.

        Staying in the same status is allowed. CANCELED goes through cancel().
        """
        if self.status.is_terminal:
            raise StateError(
                f"Cannot transition from terminal status {self.status.name}",
                details={"trip_id": self.trip_id, "target": new_status.name},
            )
        if new_status == TripStatus.CANCELED:
            raise StateError(
                "Use cancel() to cancel a trip", details={"trip_id": self.trip_id}
            )
        if new_status < self.status:
            raise StateError(
                f"Invalid transition from {self.status.name} to {new_status.name}",
                details={"trip_id": self.trip_id},
            )
        self.status = new_status

    def cancel(self) -> None:
        """Cancel the trip. Reachable from any non-terminal status."""
        if self.status.is_terminal:
            raise StateError(
                f"Cannot cancel trip in terminal status {self.status.name}",
                details={"trip_id": self.trip_id},
            )
        self.status = TripStatus.CANCELED
