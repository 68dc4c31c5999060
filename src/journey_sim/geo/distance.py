"""Distances between waypoint coordinates.

The feed's arrival test compares raw coordinate deltas (``planar_distance_deg``).
Hosts that want a radius in meters use the great-circle helpers instead.
"""

from math import asin, cos, hypot, radians, sin, sqrt

from journey_sim.trip import LatLng

EARTH_RADIUS_M = 6_371_000
METERS_PER_DEGREE_LAT = 111_320


def planar_distance_deg(a: LatLng, b: LatLng) -> float:
    """Straight-line gap in degree space, lat and lng treated as flat axes."""
    return hypot(b.lat - a.lat, b.lng - a.lng)


def haversine_distance_m(a: LatLng, b: LatLng) -> float:
    """Great-circle distance in meters."""
    phi_a, phi_b = radians(a.lat), radians(b.lat)
    half_dphi = (phi_b - phi_a) / 2
    half_dlambda = radians(b.lng - a.lng) / 2

    h = sin(half_dphi) ** 2 + cos(phi_a) * cos(phi_b) * sin(half_dlambda) ** 2
    return 2 * EARTH_RADIUS_M * asin(min(1.0, sqrt(h)))


def is_within_proximity(a: LatLng, b: LatLng, threshold_m: float) -> bool:
    """True when b lies within threshold_m meters of a.

    A degree of longitude is never longer than a degree of latitude, so a
    latitude gap wider than the radius rules the pair out before any trig.
    """
    if abs(b.lat - a.lat) * METERS_PER_DEGREE_LAT > threshold_m * 1.01:
        return False
    return haversine_distance_m(a, b) <= threshold_m
