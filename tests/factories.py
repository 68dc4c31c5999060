"""Test factories for trips and a controllable clock."""

from datetime import datetime, timedelta

from journey_sim.trip import LatLng, Trip, TripStatus, TripWaypoint, WaypointType

PICKUP = (37.422, -122.084)
INTERMEDIATE = (37.421, -122.087)
DROPOFF = (37.42, -122.09)


class FakeClock:
    """Manually advanced clock for deterministic sessions."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


def make_waypoint(
    location: tuple[float, float], waypoint_type: WaypointType, trip_id: str = "trip-1"
) -> TripWaypoint:
    return TripWaypoint(
        location=LatLng(lat=location[0], lng=location[1]),
        waypoint_type=waypoint_type,
        trip_id=trip_id,
        title=waypoint_type.default_title,
    )


def make_trip(
    *stops: tuple[tuple[float, float], WaypointType],
    status: TripStatus = TripStatus.NEW,
    trip_name: str = "trip-1",
) -> Trip:
    return Trip(
        trip_name=trip_name,
        status=status,
        waypoints=tuple(make_waypoint(loc, wp_type, trip_name) for loc, wp_type in stops),
        booking_id=trip_name,
    )
