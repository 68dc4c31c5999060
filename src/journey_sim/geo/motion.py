"""Vehicle motion toward a waypoint.

The vehicle closes a fixed fraction of the remaining gap each tick, so it
approaches the target asymptotically and "arrives" once the gap drops under
the arrival threshold.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Literal

from journey_sim.geo.distance import is_within_proximity, planar_distance_deg
from journey_sim.trip import LatLng

if TYPE_CHECKING:
    from journey_sim.settings import SimulationSettings

DEFAULT_STEP_FRACTION = 0.05
# ~20 m at mid latitudes
DEFAULT_ARRIVAL_THRESHOLD_DEG = 0.0002


@dataclass(frozen=True)
class VehicleTelemetry:
    """Vehicle position report. Replaced wholesale on every tick."""

    location: LatLng
    heading: float
    timestamp: datetime

    @property
    def timestamp_millis(self) -> int:
        return int(self.timestamp.timestamp() * 1000)

    def to_wire(self) -> dict[str, float | int]:
        return {
            "latitude": self.location.lat,
            "longitude": self.location.lng,
            "heading": self.heading,
            "timestamp": self.timestamp_millis,
        }


@dataclass(frozen=True)
class MotionResult:
    telemetry: VehicleTelemetry
    arrived: bool
    gap_deg: float


class MotionModel:
    def __init__(
        self,
        step_fraction: float = DEFAULT_STEP_FRACTION,
        arrival_threshold_deg: float = DEFAULT_ARRIVAL_THRESHOLD_DEG,
        arrival_metric: Literal["degrees", "haversine"] = "degrees",
        arrival_threshold_m: float = 20.0,
    ):
        self.step_fraction = step_fraction
        self.arrival_threshold_deg = arrival_threshold_deg
        self.arrival_metric = arrival_metric
        self.arrival_threshold_m = arrival_threshold_m

    @classmethod
    def from_settings(cls, settings: "SimulationSettings") -> "MotionModel":
        return cls(
            step_fraction=settings.step_fraction,
            arrival_threshold_deg=settings.arrival_threshold_deg,
            arrival_metric=settings.arrival_metric,
            arrival_threshold_m=settings.arrival_threshold_m,
        )

    def step(
        self, telemetry: VehicleTelemetry, target: LatLng, now: datetime
    ) -> MotionResult:
        """Move one tick toward target and test for arrival at the new position."""
        current = telemetry.location
        heading = self.calculate_heading(current, target)
        position = self.interpolate(current, target, self.step_fraction)

        gap = planar_distance_deg(position, target)
        return MotionResult(
            telemetry=VehicleTelemetry(location=position, heading=heading, timestamp=now),
            arrived=self.has_arrived(position, target, gap),
            gap_deg=gap,
        )

    def has_arrived(self, position: LatLng, target: LatLng, gap_deg: float | None = None) -> bool:
        if self.arrival_metric == "haversine":
            return is_within_proximity(position, target, self.arrival_threshold_m)
        if gap_deg is None:
            gap_deg = planar_distance_deg(position, target)
        return gap_deg < self.arrival_threshold_deg

    @staticmethod
    def interpolate(start: LatLng, end: LatLng, fraction: float) -> LatLng:
        lat = start.lat + (end.lat - start.lat) * fraction
        lng = start.lng + (end.lng - start.lng) * fraction
        return LatLng(lat=lat, lng=lng)

    @staticmethod
    def calculate_heading(from_loc: LatLng, to_loc: LatLng) -> float:
        """Planar bearing in degrees, clockwise from north, in [0, 360).

        Treats the lat/lng deltas as flat axes rather than computing a true
        great-circle bearing.
        """
        heading = math.degrees(
            math.atan2(to_loc.lng - from_loc.lng, to_loc.lat - from_loc.lat)
        )
        if heading < 0:
            heading += 360.0
        # -1e-15 + 360 rounds to exactly 360.0
        if heading >= 360.0:
            heading -= 360.0
        return heading
