"""Validation boundary for inbound start payloads.

Hosts send loosely typed trip data (camelCase keys, optional fields, statuses as
codes or names). Every "use the value if present, else a default" decision is
made here, so the rest of the engine only ever sees a well-formed Trip.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from journey_sim.core.exceptions import InvalidTripError
from journey_sim.trip import LatLng, Trip, TripStatus, TripWaypoint, WaypointType


def _enum_from_name(enum_cls: type[TripStatus] | type[WaypointType], value: Any) -> Any:
    """Accept enum members, integer codes, or case-insensitive member names."""
    if isinstance(value, bool):
        raise ValueError(f"expected {enum_cls.__name__} code or name, got bool")
    if isinstance(value, str):
        name = value.strip().upper()
        if name.lstrip("-").isdigit():
            return int(name)
        try:
            return enum_cls[name]
        except KeyError:
            valid = ", ".join(member.name for member in enum_cls)
            raise ValueError(f"unknown {enum_cls.__name__} '{value}' (expected one of {valid})")
    return value


class LocationPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    lat: float = Field(ge=-90.0, le=90.0, allow_inf_nan=False)
    lng: float = Field(ge=-180.0, le=180.0, allow_inf_nan=False)


class WaypointPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    location: LocationPayload
    waypoint_type: WaypointType = Field(default=WaypointType.PICKUP, alias="waypointType")
    trip_id: str | None = Field(default=None, alias="tripId")
    title: str | None = None

    @field_validator("waypoint_type", mode="before")
    @classmethod
    def parse_waypoint_type(cls, v: Any) -> Any:
        return _enum_from_name(WaypointType, v)


class TripData(BaseModel):
    """Start payload as sent by the host."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    trip_name: str = Field(alias="tripName", min_length=1)
    trip_status: TripStatus = Field(alias="tripStatus")
    remaining_waypoints: list[WaypointPayload] = Field(alias="remainingWaypoints", min_length=1)
    vehicle_type_id: str | None = Field(default=None, alias="vehicleTypeId")
    booking_id: str | None = Field(default=None, alias="bookingId")

    @field_validator("trip_name")
    @classmethod
    def strip_trip_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("tripName must not be blank")
        return v

    @field_validator("trip_status", mode="before")
    @classmethod
    def parse_trip_status(cls, v: Any) -> Any:
        return _enum_from_name(TripStatus, v)

    def to_trip(self) -> Trip:
        waypoints = tuple(
            TripWaypoint(
                location=LatLng(lat=wp.location.lat, lng=wp.location.lng),
                waypoint_type=wp.waypoint_type,
                trip_id=wp.trip_id if wp.trip_id is not None else self.trip_name,
                title=wp.title if wp.title is not None else wp.waypoint_type.default_title,
            )
            for wp in self.remaining_waypoints
        )
        return Trip(
            trip_name=self.trip_name,
            status=self.trip_status,
            waypoints=waypoints,
            vehicle_type_id=self.vehicle_type_id if self.vehicle_type_id is not None else "default",
            booking_id=self.booking_id if self.booking_id is not None else self.trip_name,
        )


def _field_path(loc: tuple[int | str, ...]) -> str:
    return ".".join(str(part) for part in loc) or "<payload>"


def parse_trip_data(payload: Mapping[str, Any] | TripData | Trip) -> Trip:
    """Validate a start payload and build the Trip it describes.

    Raises:
        InvalidTripError: listing every failing field, e.g.
            ``remainingWaypoints.0.location.lat``.
    """
    if isinstance(payload, Trip):
        return payload
    if isinstance(payload, TripData):
        return payload.to_trip()
    if not isinstance(payload, Mapping):
        raise InvalidTripError(
            f"Trip payload must be a mapping, got {type(payload).__name__}",
            fields=["<payload>"],
        )

    try:
        data = TripData.model_validate(dict(payload))
    except ValidationError as e:
        errors = e.errors(include_url=False)
        fields = [_field_path(err["loc"]) for err in errors]
        summary = "; ".join(f"{_field_path(err['loc'])}: {err['msg']}" for err in errors)
        raise InvalidTripError(f"Invalid trip data: {summary}", fields=fields) from e

    return data.to_trip()
