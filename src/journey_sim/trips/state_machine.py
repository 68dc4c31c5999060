"""Trip status transitions on waypoint arrival.

Given the status at the moment the vehicle reaches a waypoint, decide the next
status, whether the waypoint cursor advances, and the distance/ETA horizon of
the next leg.

| Reached      | Condition          | Status               | Cursor | Distance | ETA         |
|--------------|--------------------|----------------------|--------|----------|-------------|
| PICKUP       | distance >= 100 m  | ARRIVED_AT_PICKUP    | same   | same     | same        |
| PICKUP       | distance < 100 m   | ENROUTE_TO_DROPOFF   | +1     | 3000 m   | now+20 min  |
| DROPOFF      | always             | COMPLETED            | same   | 0        | same        |
| INTERMEDIATE | always             | same                 | +1     | 2000 m   | now+10 min  |

Leg resets only apply while the advanced cursor still points at a waypoint.
Statuses never move backwards: reaching a pickup after the dropoff leg has
begun keeps the later status.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from journey_sim.core.exceptions import StateError
from journey_sim.trip import TripStatus, WaypointType

if TYPE_CHECKING:
    from journey_sim.settings import SimulationSettings


@dataclass(frozen=True)
class LegRules:
    """Distance/ETA constants for leg changes."""

    pickup_departure_distance_m: float = 100.0
    dropoff_leg_distance_m: float = 3000.0
    dropoff_leg_eta: timedelta = timedelta(minutes=20)
    intermediate_leg_distance_m: float = 2000.0
    intermediate_leg_eta: timedelta = timedelta(minutes=10)

    @classmethod
    def from_settings(cls, settings: "SimulationSettings") -> "LegRules":
        return cls(
            pickup_departure_distance_m=settings.pickup_departure_distance_m,
            dropoff_leg_distance_m=settings.dropoff_leg_distance_m,
            dropoff_leg_eta=timedelta(seconds=settings.dropoff_leg_eta_seconds),
            intermediate_leg_distance_m=settings.intermediate_leg_distance_m,
            intermediate_leg_eta=timedelta(seconds=settings.intermediate_leg_eta_seconds),
        )


DEFAULT_LEG_RULES = LegRules()


@dataclass(frozen=True)
class LegTransition:
    status: TripStatus
    waypoint_index: int
    remaining_distance_m: float
    eta: datetime
    # Statuses entered during this arrival, in order (may be empty)
    passed_through: tuple[TripStatus, ...] = ()
    leg_reset: bool = False


def _forward(current: TripStatus, target: TripStatus) -> TripStatus:
    return target if target > current else current


def next_leg(
    status: TripStatus,
    waypoint_type: WaypointType,
    remaining_distance_m: float,
    eta: datetime,
    waypoint_index: int,
    waypoint_count: int,
    now: datetime,
    rules: LegRules = DEFAULT_LEG_RULES,
) -> LegTransition:
    """Apply an arrival at the waypoint under the cursor.

    Terminal statuses are returned untouched.
    """
    unchanged = LegTransition(
        status=status,
        waypoint_index=waypoint_index,
        remaining_distance_m=remaining_distance_m,
        eta=eta,
    )
    if status.is_terminal:
        return unchanged

    if waypoint_type == WaypointType.PICKUP:
        arrived = _forward(status, TripStatus.ARRIVED_AT_PICKUP)
        passed = (arrived,) if arrived != status else ()
        if remaining_distance_m >= rules.pickup_departure_distance_m:
            return LegTransition(
                status=arrived,
                waypoint_index=waypoint_index,
                remaining_distance_m=remaining_distance_m,
                eta=eta,
                passed_through=passed,
            )

        departed = _forward(arrived, TripStatus.ENROUTE_TO_DROPOFF)
        if departed != arrived:
            passed += (departed,)
        return _advance_cursor(
            departed,
            waypoint_index,
            waypoint_count,
            remaining_distance_m,
            eta,
            rules.dropoff_leg_distance_m,
            now + rules.dropoff_leg_eta,
            passed,
        )

    if waypoint_type == WaypointType.DROPOFF:
        return LegTransition(
            status=TripStatus.COMPLETED,
            waypoint_index=waypoint_index,
            remaining_distance_m=0.0,
            eta=eta,
            passed_through=(TripStatus.COMPLETED,),
        )

    if waypoint_type == WaypointType.INTERMEDIATE:
        return _advance_cursor(
            status,
            waypoint_index,
            waypoint_count,
            remaining_distance_m,
            eta,
            rules.intermediate_leg_distance_m,
            now + rules.intermediate_leg_eta,
            (),
        )

    raise StateError(
        f"No transition defined for waypoint type {waypoint_type!r}",
        details={"status": status.name},
    )


def _advance_cursor(
    status: TripStatus,
    waypoint_index: int,
    waypoint_count: int,
    remaining_distance_m: float,
    eta: datetime,
    leg_distance_m: float,
    leg_eta: datetime,
    passed_through: tuple[TripStatus, ...],
) -> LegTransition:
    next_index = min(waypoint_index + 1, waypoint_count)
    if next_index < waypoint_count:
        return LegTransition(
            status=status,
            waypoint_index=next_index,
            remaining_distance_m=leg_distance_m,
            eta=leg_eta,
            passed_through=passed_through,
            leg_reset=True,
        )
    return LegTransition(
        status=status,
        waypoint_index=next_index,
        remaining_distance_m=remaining_distance_m,
        eta=eta,
        passed_through=passed_through,
    )
