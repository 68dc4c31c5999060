from .distance import haversine_distance_m, is_within_proximity, planar_distance_deg
from .motion import MotionModel, MotionResult, VehicleTelemetry

__all__ = [
    "haversine_distance_m",
    "is_within_proximity",
    "planar_distance_deg",
    "MotionModel",
    "MotionResult",
    "VehicleTelemetry",
]
