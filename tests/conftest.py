from datetime import UTC, datetime
from typing import Any

import pytest

from journey_sim.settings import SimulationSettings
from journey_sim.trip import Trip, WaypointType
from tests.factories import DROPOFF, INTERMEDIATE, PICKUP, FakeClock, make_trip


@pytest.fixture
def start_time() -> datetime:
    return datetime(2025, 3, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def clock(start_time: datetime) -> FakeClock:
    return FakeClock(start_time)


@pytest.fixture
def pickup_dropoff_trip() -> Trip:
    """Two-stop trip; the vehicle starts on the pickup."""
    return make_trip((PICKUP, WaypointType.PICKUP), (DROPOFF, WaypointType.DROPOFF))


@pytest.fixture
def three_stop_trip() -> Trip:
    return make_trip(
        (PICKUP, WaypointType.PICKUP),
        (INTERMEDIATE, WaypointType.INTERMEDIATE),
        (DROPOFF, WaypointType.DROPOFF),
    )


@pytest.fixture
def near_pickup_settings() -> SimulationSettings:
    """Initial distance already under the pickup departure limit after one tick."""
    return SimulationSettings(initial_distance_m=120.0)


@pytest.fixture
def fast_settings() -> SimulationSettings:
    """Settings for running the real-time scheduler in tests."""
    return SimulationSettings(tick_interval_seconds=0.01, stop_join_timeout_seconds=2.0)


@pytest.fixture
def trip_payload() -> dict[str, Any]:
    """Start payload in the shape hosts send."""
    return {
        "tripName": "trip-payload-1",
        "tripStatus": 0,
        "remainingWaypoints": [
            {"location": {"lat": PICKUP[0], "lng": PICKUP[1]}, "waypointType": 0},
            {
                "location": {"lat": DROPOFF[0], "lng": DROPOFF[1]},
                "waypointType": 1,
                "title": "Office",
            },
        ],
    }
