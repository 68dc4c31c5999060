from datetime import UTC, datetime

import pytest

from journey_sim.geo.motion import MotionModel, VehicleTelemetry
from journey_sim.settings import SimulationSettings
from journey_sim.trip import LatLng
from tests.factories import DROPOFF, PICKUP

NOW = datetime(2025, 3, 1, 12, 0, 0, tzinfo=UTC)


def _at(location: tuple[float, float]) -> VehicleTelemetry:
    return VehicleTelemetry(
        location=LatLng(lat=location[0], lng=location[1]), heading=0.0, timestamp=NOW
    )


@pytest.mark.unit
class TestHeading:
    @pytest.mark.parametrize(
        "target,expected",
        [
            ((1.0, 0.0), 0.0),
            ((0.0, 1.0), 90.0),
            ((-1.0, 0.0), 180.0),
            ((0.0, -1.0), 270.0),
            ((1.0, 1.0), 45.0),
        ],
    )
    def test_compass_directions(self, target, expected):
        origin = LatLng(lat=0.0, lng=0.0)
        heading = MotionModel.calculate_heading(origin, LatLng(lat=target[0], lng=target[1]))
        assert heading == pytest.approx(expected)

    def test_same_point_is_north(self):
        point = LatLng(lat=5.0, lng=5.0)
        assert MotionModel.calculate_heading(point, point) == 0.0

    def test_tiny_negative_angle_stays_below_360(self):
        heading = MotionModel.calculate_heading(
            LatLng(lat=0.0, lng=0.0), LatLng(lat=1.0, lng=-1e-18)
        )
        assert 0.0 <= heading < 360.0


@pytest.mark.unit
class TestInterpolate:
    def test_fraction(self):
        start = LatLng(lat=0.0, lng=0.0)
        end = LatLng(lat=10.0, lng=-20.0)
        assert MotionModel.interpolate(start, end, 0.05).as_tuple() == pytest.approx((0.5, -1.0))

    def test_endpoints(self):
        start = LatLng(lat=1.0, lng=2.0)
        end = LatLng(lat=3.0, lng=4.0)
        assert MotionModel.interpolate(start, end, 0.0) == start
        assert MotionModel.interpolate(start, end, 1.0) == end


@pytest.mark.unit
class TestStep:
    def test_moves_five_percent_toward_target(self):
        model = MotionModel()
        target = LatLng(lat=DROPOFF[0], lng=DROPOFF[1])
        result = model.step(_at(PICKUP), target, NOW)

        lat, lng = result.telemetry.location.as_tuple()
        assert lat == pytest.approx(PICKUP[0] + (DROPOFF[0] - PICKUP[0]) * 0.05)
        assert lng == pytest.approx(PICKUP[1] + (DROPOFF[1] - PICKUP[1]) * 0.05)
        assert result.telemetry.heading == pytest.approx(251.565, abs=1e-3)
        assert result.telemetry.timestamp == NOW
        assert not result.arrived

    def test_arrives_when_on_target(self):
        model = MotionModel()
        target = LatLng(lat=PICKUP[0], lng=PICKUP[1])
        result = model.step(_at(PICKUP), target, NOW)
        assert result.arrived
        assert result.gap_deg == 0.0

    def test_gap_shrinks_geometrically(self):
        model = MotionModel()
        target = LatLng(lat=DROPOFF[0], lng=DROPOFF[1])
        telemetry = _at(PICKUP)
        gaps = []
        for _ in range(5):
            result = model.step(telemetry, target, NOW)
            telemetry = result.telemetry
            gaps.append(result.gap_deg)
        for before, after in zip(gaps, gaps[1:]):
            assert after == pytest.approx(before * 0.95)

    def test_eventually_arrives(self):
        model = MotionModel()
        target = LatLng(lat=DROPOFF[0], lng=DROPOFF[1])
        telemetry = _at(PICKUP)
        for tick in range(1, 300):
            result = model.step(telemetry, target, NOW)
            telemetry = result.telemetry
            if result.arrived:
                break
        assert result.arrived
        assert result.gap_deg < 0.0002
        assert 60 < tick < 80

    def test_haversine_arrival(self):
        model = MotionModel(arrival_metric="haversine", arrival_threshold_m=20.0)
        target = LatLng(lat=37.4201, lng=-122.08)
        assert model.has_arrived(LatLng(lat=37.42, lng=-122.08), target)
        assert not model.has_arrived(LatLng(lat=37.419, lng=-122.08), target)

    def test_from_settings(self):
        settings = SimulationSettings(step_fraction=0.25, arrival_metric="haversine")
        model = MotionModel.from_settings(settings)
        assert model.step_fraction == 0.25
        assert model.arrival_metric == "haversine"


@pytest.mark.unit
class TestTelemetry:
    def test_to_wire(self):
        telemetry = VehicleTelemetry(
            location=LatLng(lat=1.0, lng=2.0), heading=90.0, timestamp=NOW
        )
        assert telemetry.to_wire() == {
            "latitude": 1.0,
            "longitude": 2.0,
            "heading": 90.0,
            "timestamp": int(NOW.timestamp() * 1000),
        }
