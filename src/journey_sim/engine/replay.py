"""Offline trip replay on a SimPy virtual clock.

Produces the same event batches as the live scheduler, one per virtual tick,
without sleeping. Useful for fixtures, demos and tests that need a whole trip
feed quickly.
"""

import logging
from collections.abc import Callable, Generator
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import simpy

from journey_sim.core.correlation import with_correlation
from journey_sim.core.exceptions import ErrorCode
from journey_sim.engine.snapshots import SessionSnapshot
from journey_sim.events.factory import EventFactory
from journey_sim.settings import SimulationSettings
from journey_sim.trips.session import SimulationSession, utc_now

if TYPE_CHECKING:
    from journey_sim.events.schemas import JourneyEvent
    from journey_sim.trip import Trip

logger = logging.getLogger(__name__)


class VirtualClock:
    """Maps SimPy time (seconds since start) to wall-clock datetimes."""

    def __init__(self, env: simpy.Environment, start_time: datetime):
        self._env = env
        self._start_time = start_time.astimezone(UTC)

    @property
    def start_time(self) -> datetime:
        return self._start_time

    def now(self) -> datetime:
        return self._start_time + timedelta(seconds=self._env.now)

    def elapsed(self) -> timedelta:
        return timedelta(seconds=self._env.now)


@dataclass(frozen=True)
class ReplayResult:
    ticks: int
    failed_ticks: int
    events_published: int
    failed_deliveries: int
    final: SessionSnapshot
    elapsed: timedelta


def replay_trip(
    trip: "Trip",
    on_event: Callable[["JourneyEvent"], None],
    max_ticks: int = 1000,
    settings: SimulationSettings | None = None,
    start_time: datetime | None = None,
    stop_on_terminal: bool = True,
) -> ReplayResult:
    """Simulate up to max_ticks ticks of trip in virtual time.

    Stops early once the trip reaches a terminal status unless
    stop_on_terminal is False.
    """
    if max_ticks < 0:
        raise ValueError("max_ticks must be non-negative")

    settings = settings or SimulationSettings()
    env = simpy.Environment()
    clock = VirtualClock(env, start_time or utc_now())
    session = SimulationSession(trip, settings=settings, clock=clock.now)

    counters = {"ticks": 0, "failed": 0, "events": 0, "failed_events": 0}

    def run_ticks(env: simpy.Environment) -> Generator[simpy.Event, None, None]:
        for _ in range(max_ticks):
            try:
                previous_index = session.waypoint_index
                session.advance()
                snapshot = session.snapshot()
                batch = EventFactory.tick_batch(
                    snapshot,
                    include_waypoints=(
                        settings.publish_waypoint_updates
                        and snapshot.waypoint_index != previous_index
                    ),
                )
            except Exception as e:
                counters["failed"] += 1
                logger.error(
                    f"Replay tick failed, skipping: {e}",
                    exc_info=True,
                    extra={"error_code": ErrorCode.INTERNAL.value},
                )
            else:
                for event in batch:
                    try:
                        on_event(event)
                    except Exception as e:
                        counters["failed_events"] += 1
                        logger.error(
                            f"Event delivery failed for {event.event_name}: {e}",
                            exc_info=True,
                            extra={"error_code": ErrorCode.INTERNAL.value},
                        )
                        continue
                    counters["events"] += 1
                counters["ticks"] += 1
                if stop_on_terminal and snapshot.is_terminal:
                    return

            yield env.timeout(settings.tick_interval_seconds)

    with with_correlation(trip.trip_id):
        env.process(run_ticks(env))
        env.run()

    final = session.snapshot()
    logger.info(
        "Replay of %s finished: %d ticks, status=%s, %s virtual time",
        trip.trip_id,
        counters["ticks"],
        final.status.name,
        clock.elapsed(),
    )
    return ReplayResult(
        ticks=counters["ticks"],
        failed_ticks=counters["failed"],
        events_published=counters["events"],
        failed_deliveries=counters["failed_events"],
        final=final,
        elapsed=clock.elapsed(),
    )
