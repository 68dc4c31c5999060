from typing import Any, ClassVar
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from journey_sim.pubsub.channels import (
    ON_TRIP_ETA_UPDATED,
    ON_TRIP_REMAINING_DISTANCE_UPDATED,
    ON_TRIP_REMAINING_WAYPOINTS_UPDATED,
    ON_TRIP_STATUS_UPDATED,
    ON_TRIP_VEHICLE_LOCATION_UPDATED,
)


class WireModel(BaseModel):
    """snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class LocationMessage(WireModel):
    lat: float
    lng: float


class WaypointMessage(WireModel):
    id: str
    location: LocationMessage
    waypoint_type: int
    trip_id: str
    title: str


class TripInfoMessage(WireModel):
    """Trip snapshot attached to every event."""

    trip_id: str
    trip_status: int
    remaining_waypoints: list[WaypointMessage]


class VehicleLocationMessage(WireModel):
    latitude: float
    longitude: float
    heading: float
    timestamp: int = Field(description="Epoch milliseconds")


class CorrelationMixin(WireModel):
    """Mixin adding tracing fields to events."""

    session_id: str | None = Field(default=None, description="Simulation session identifier")
    correlation_id: str | None = Field(default=None, description="Primary correlation ID (trip id)")


class JourneyEvent(CorrelationMixin):
    """Base class for feed events. ``event_name`` is the listener callback name."""

    event_name: ClassVar[str]

    event_id: UUID = Field(default_factory=uuid4)
    trip_info: TripInfoMessage
    tick: int

    def payload(self) -> Any:
        """Second argument passed to the listener callback."""
        raise NotImplementedError

    def callback_args(self) -> tuple[dict[str, Any], Any]:
        wire = self.to_wire()
        payload = self.payload()
        if isinstance(payload, WireModel):
            payload = payload.to_wire()
        elif isinstance(payload, list):
            payload = [item.to_wire() for item in payload]
        return wire["tripInfo"], payload


class TripStatusUpdated(JourneyEvent):
    event_name: ClassVar[str] = ON_TRIP_STATUS_UPDATED

    status: int

    def payload(self) -> int:
        return self.status


class VehicleLocationUpdated(JourneyEvent):
    event_name: ClassVar[str] = ON_TRIP_VEHICLE_LOCATION_UPDATED

    vehicle_location: VehicleLocationMessage

    def payload(self) -> VehicleLocationMessage:
        return self.vehicle_location


class EtaUpdated(JourneyEvent):
    event_name: ClassVar[str] = ON_TRIP_ETA_UPDATED

    timestamp_millis: int

    def payload(self) -> int:
        return self.timestamp_millis


class RemainingDistanceUpdated(JourneyEvent):
    event_name: ClassVar[str] = ON_TRIP_REMAINING_DISTANCE_UPDATED

    distance_meters: float

    def payload(self) -> float:
        return self.distance_meters


class RemainingWaypointsUpdated(JourneyEvent):
    event_name: ClassVar[str] = ON_TRIP_REMAINING_WAYPOINTS_UPDATED

    waypoint_list: list[WaypointMessage]

    def payload(self) -> list[WaypointMessage]:
        return self.waypoint_list
