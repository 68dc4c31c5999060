"""One live trip simulation: vehicle state plus the advance step."""

import logging
import threading
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from journey_sim.core.exceptions import InvalidTripError
from journey_sim.engine.snapshots import SessionSnapshot
from journey_sim.geo.motion import MotionModel, VehicleTelemetry
from journey_sim.settings import SimulationSettings
from journey_sim.trip import Trip, TripStatus, WaypointType
from journey_sim.trips.state_machine import LegRules, LegTransition, next_leg

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


class SimulationSession:
    """Owns a trip's mutable simulation state.

    Every read and write of that state goes through ``_lock`` so the scheduler
    thread can advance the session while control calls inspect or cancel it.
    State only changes through advance() and cancel().
    """

    def __init__(
        self,
        trip: Trip,
        settings: SimulationSettings | None = None,
        clock: Clock | None = None,
        session_id: str | None = None,
    ):
        if not trip.waypoints:
            raise InvalidTripError(
                "Trip must have at least one waypoint", fields=["remainingWaypoints"]
            )

        self._settings = settings or SimulationSettings()
        self._clock = clock or utc_now
        self._motion = MotionModel.from_settings(self._settings)
        self._rules = LegRules.from_settings(self._settings)
        self._lock = threading.Lock()

        self.session_id = session_id or str(uuid4())
        self._trip = trip.model_copy()
        self._waypoint_index = 0
        self._tick = 0
        self._last_transition: LegTransition | None = None

        # Initial conditions are fixed and ignore the actual waypoint spacing
        now = self._clock()
        self._telemetry = VehicleTelemetry(
            location=trip.waypoints[0].location, heading=0.0, timestamp=now
        )
        self._remaining_distance_m = self._settings.initial_distance_m
        self._eta = now + timedelta(seconds=self._settings.initial_eta_seconds)

    @classmethod
    def create(
        cls,
        trip: Trip,
        settings: SimulationSettings | None = None,
        clock: Clock | None = None,
    ) -> "SimulationSession":
        return cls(trip, settings=settings, clock=clock)

    @property
    def trip(self) -> Trip:
        with self._lock:
            return self._trip.model_copy()

    @property
    def telemetry(self) -> VehicleTelemetry:
        with self._lock:
            return self._telemetry

    @property
    def status(self) -> TripStatus:
        with self._lock:
            return self._trip.status

    @property
    def eta(self) -> datetime:
        with self._lock:
            return self._eta

    @property
    def remaining_distance_m(self) -> float:
        with self._lock:
            return self._remaining_distance_m

    @property
    def waypoint_index(self) -> int:
        with self._lock:
            return self._waypoint_index

    @property
    def tick(self) -> int:
        with self._lock:
            return self._tick

    @property
    def is_terminal(self) -> bool:
        with self._lock:
            return self._trip.status.is_terminal

    @property
    def last_transition(self) -> LegTransition | None:
        """Outcome of the most recent arrival, if any."""
        with self._lock:
            return self._last_transition

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return self._snapshot_locked()

    def _snapshot_locked(self) -> SessionSnapshot:
        return SessionSnapshot(
            session_id=self.session_id,
            trip_id=self._trip.trip_id,
            booking_id=self._trip.booking_id,
            vehicle_type_id=self._trip.vehicle_type_id,
            status=self._trip.status,
            waypoints=self._trip.waypoints,
            waypoint_index=self._waypoint_index,
            telemetry=self._telemetry,
            eta=self._eta,
            remaining_distance_m=self._remaining_distance_m,
            tick=self._tick,
        )

    def advance(self) -> bool:
        """Run one simulation step.

        Returns False without touching any state when the trip is terminal.
        """
        with self._lock:
            if self._trip.status.is_terminal:
                return False

            now = self._clock()
            self._decay(now)

            waypoints = self._trip.waypoints
            if self._waypoint_index < len(waypoints):
                target = waypoints[self._waypoint_index]
                result = self._motion.step(self._telemetry, target.location, now)
                self._telemetry = result.telemetry
                if result.arrived:
                    self._arrive(target.waypoint_type, now)
            else:
                # No target left: hold position, refresh the report time
                self._telemetry = VehicleTelemetry(
                    location=self._telemetry.location,
                    heading=self._telemetry.heading,
                    timestamp=now,
                )

            self._tick += 1
            logger.debug(
                "Tick %d: status=%s waypoint=%d distance=%.0fm",
                self._tick,
                self._trip.status.name,
                self._waypoint_index,
                self._remaining_distance_m,
            )
            return True

    def cancel(self) -> None:
        """Mark the trip CANCELED. Subsequent advance() calls are no-ops."""
        with self._lock:
            self._trip.cancel()
        logger.info("Trip %s canceled", self._trip.trip_id, extra={"trip_id": self._trip.trip_id})

    def _decay(self, now: datetime) -> None:
        settings = self._settings
        self._remaining_distance_m = max(
            0.0, self._remaining_distance_m - settings.distance_decay_m
        )

        remaining_s = (self._eta - now).total_seconds()
        remaining_s = max(settings.eta_floor_seconds, remaining_s * settings.eta_decay_factor)
        self._eta = now + timedelta(seconds=remaining_s)

    def _arrive(self, waypoint_type: WaypointType, now: datetime) -> None:
        previous_status = self._trip.status
        transition = next_leg(
            status=previous_status,
            waypoint_type=waypoint_type,
            remaining_distance_m=self._remaining_distance_m,
            eta=self._eta,
            waypoint_index=self._waypoint_index,
            waypoint_count=len(self._trip.waypoints),
            now=now,
            rules=self._rules,
        )
        self._last_transition = transition
        self._waypoint_index = transition.waypoint_index
        self._remaining_distance_m = transition.remaining_distance_m
        self._eta = transition.eta

        for status in transition.passed_through:
            self._trip.transition_to(status)

        if self._trip.status != previous_status:
            logger.info(
                "Trip %s: %s -> %s",
                self._trip.trip_id,
                previous_status.name,
                self._trip.status.name,
                extra={"trip_id": self._trip.trip_id},
            )
