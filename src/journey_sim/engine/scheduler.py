"""Periodic tick scheduler.

Runs a session's advance() on a dedicated background thread and publishes the
resulting update batch after each tick. Control calls (start/stop) come from
other threads.
"""

import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING

from journey_sim.core.correlation import with_correlation, with_session
from journey_sim.core.exceptions import ErrorCode
from journey_sim.events.factory import EventFactory
from journey_sim.sim_logging.context import log_trip_context

if TYPE_CHECKING:
    from journey_sim.events.schemas import JourneyEvent
    from journey_sim.settings import SimulationSettings
    from journey_sim.trips.session import SimulationSession

logger = logging.getLogger(__name__)

EventCallback = Callable[["JourneyEvent"], None]


class SchedulerAlreadyRunningError(Exception):
    """Raised when start() is called on a scheduler that is still ticking."""

    pass


class TripScheduler:
    """Ticks one session at a fixed period until stopped.

    stop() is the cancellation point: it waits for an in-flight batch to finish
    publishing, marks the scheduler cancelled, and joins the worker. Nothing is
    published once stop() has returned.
    """

    def __init__(
        self,
        interval_seconds: float = 2.0,
        publish_waypoint_updates: bool = False,
        join_timeout: float = 5.0,
    ) -> None:
        self._interval = interval_seconds
        self._publish_waypoint_updates = publish_waypoint_updates
        self._join_timeout = join_timeout

        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        # Reentrant so a listener can call stop() from the worker thread
        self._publish_lock = threading.RLock()
        self._cancelled = False

        self._session: SimulationSession | None = None
        self._on_event: EventCallback | None = None
        self.tick_count = 0
        self.failed_tick_count = 0

    @classmethod
    def from_settings(cls, settings: "SimulationSettings") -> "TripScheduler":
        return cls(
            interval_seconds=settings.tick_interval_seconds,
            publish_waypoint_updates=settings.publish_waypoint_updates,
            join_timeout=settings.stop_join_timeout_seconds,
        )

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive() and not self._stop_event.is_set()

    def start(self, session: "SimulationSession", on_event: EventCallback) -> None:
        """Start ticking session, publishing each batch to on_event."""
        if self._thread is not None and self._thread.is_alive():
            raise SchedulerAlreadyRunningError("Scheduler is already running")

        self._session = session
        self._on_event = on_event
        self._stop_event = threading.Event()
        self._cancelled = False
        self.tick_count = 0
        self.failed_tick_count = 0

        self._thread = threading.Thread(
            target=self._run_loop,
            name=f"trip-scheduler-{session.session_id[:8]}",
            daemon=True,
        )
        self._thread.start()
        logger.info(
            "Scheduler started for session %s (every %.2fs)", session.session_id, self._interval
        )

    def stop(self) -> None:
        """Cancel ticking and wait for the worker to exit.

        Blocks on the publish lock while a listener is running, so a listener
        must never wait on a stop issued from another thread.
        """
        with self._publish_lock:
            self._cancelled = True
            self._stop_event.set()

        thread = self._thread
        if thread is None:
            return
        if thread is threading.current_thread():
            # Called from a listener; the loop exits once the callback returns
            return

        thread.join(timeout=self._join_timeout)
        if thread.is_alive():
            logger.warning(
                "Scheduler worker did not exit within %.1fs; no further events will be published",
                self._join_timeout,
            )
        self._thread = None
        logger.info(
            "Scheduler stopped after %d ticks (%d failed)", self.tick_count, self.failed_tick_count
        )

    def _run_loop(self) -> None:
        session = self._session
        assert session is not None
        trip_id = session.snapshot().trip_id

        with with_session(session.session_id), with_correlation(trip_id), log_trip_context(trip_id):
            while not self._stop_event.is_set():
                self._tick()
                if self._stop_event.wait(self._interval):
                    break

    def _tick(self) -> None:
        session = self._session
        assert session is not None
        try:
            previous_index = session.waypoint_index
            session.advance()
            snapshot = session.snapshot()
            batch = EventFactory.tick_batch(
                snapshot,
                include_waypoints=(
                    self._publish_waypoint_updates and snapshot.waypoint_index != previous_index
                ),
            )
        except Exception as e:
            self.failed_tick_count += 1
            logger.error(
                f"Tick failed, skipping: {e}",
                exc_info=True,
                extra={"error_code": ErrorCode.INTERNAL.value},
            )
            return

        self._publish(batch)
        self.tick_count += 1

    def _publish(self, batch: list["JourneyEvent"]) -> None:
        on_event = self._on_event
        assert on_event is not None
        with self._publish_lock:
            for event in batch:
                if self._cancelled:
                    return
                try:
                    on_event(event)
                except Exception as e:
                    logger.error(
                        f"Event delivery failed for {event.event_name}: {e}",
                        exc_info=True,
                        extra={"error_code": ErrorCode.INTERNAL.value},
                    )
