import pytest

from journey_sim.geo.distance import haversine_distance_m, is_within_proximity, planar_distance_deg
from journey_sim.trip import LatLng


def p(lat: float, lng: float) -> LatLng:
    return LatLng(lat=lat, lng=lng)


@pytest.mark.unit
class TestPlanarDistance:
    def test_same_point(self):
        assert planar_distance_deg(p(37.42, -122.08), p(37.42, -122.08)) == 0.0

    def test_pythagorean(self):
        assert planar_distance_deg(p(0.0, 0.0), p(3.0, 4.0)) == pytest.approx(5.0)

    def test_symmetric(self):
        a, b = p(37.422, -122.084), p(37.42, -122.09)
        assert planar_distance_deg(a, b) == pytest.approx(planar_distance_deg(b, a))


@pytest.mark.unit
class TestHaversine:
    def test_one_degree_latitude(self):
        assert haversine_distance_m(p(0.0, 0.0), p(1.0, 0.0)) == pytest.approx(111_195, rel=1e-3)

    def test_zero(self):
        assert haversine_distance_m(p(10.0, 20.0), p(10.0, 20.0)) == 0.0

    def test_antipodes(self):
        assert haversine_distance_m(p(0.0, 0.0), p(0.0, 180.0)) == pytest.approx(20_015_087, rel=1e-4)


@pytest.mark.unit
class TestProximity:
    def test_within(self):
        # 0.0001 deg latitude is ~11 m
        assert is_within_proximity(p(37.42, -122.08), p(37.4201, -122.08), threshold_m=20.0)

    def test_outside(self):
        assert not is_within_proximity(p(37.42, -122.08), p(37.421, -122.08), threshold_m=20.0)

    def test_longitude_only_offset(self):
        # Longitude degrees are shorter at 60N, so 0.0003 deg is ~17 m
        assert is_within_proximity(p(60.0, 10.0), p(60.0, 10.0003), threshold_m=20.0)
