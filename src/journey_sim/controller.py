"""Host-facing control surface for journey sharing.

All operations are coroutines resolving to True or raising a
JourneySharingError whose ``code`` names the rejection (SESSION_ACTIVE,
NO_SESSION, INVALID_TRIP). At most one session runs per controller; the slot
holding it is only read or swapped under ``_slot_lock``.
"""

import asyncio
import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from journey_sim.core.exceptions import InternalError, NoSessionError, SessionActiveError
from journey_sim.engine.scheduler import TripScheduler
from journey_sim.engine.snapshots import SessionSnapshot
from journey_sim.pubsub.bus import EventBus, EventListener, JourneySharingListeners, Subscription
from journey_sim.settings import ProviderSettings, SimulationSettings
from journey_sim.sim_logging.context import log_trip_context
from journey_sim.trip import Trip
from journey_sim.trips.payload import TripData, parse_trip_data
from journey_sim.trips.session import Clock, SimulationSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActiveSession:
    """Session plus the scheduler ticking it. Owned by the controller slot."""

    session: SimulationSession
    scheduler: TripScheduler

    @property
    def trip_id(self) -> str:
        return self.session.snapshot().trip_id


class JourneySharingController:
    def __init__(
        self,
        settings: SimulationSettings | None = None,
        provider: ProviderSettings | None = None,
        bus: EventBus | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._settings = settings or SimulationSettings()
        provider = provider or ProviderSettings()
        self._provider_id = provider.provider_id
        self._provider_token = provider.token
        self._initialized = False
        self._bus = bus or EventBus()
        self._clock = clock

        self._slot_lock = threading.Lock()
        self._active: ActiveSession | None = None
        # Set while the active session is being stopped; the slot stays occupied
        self._stopping = False

    @property
    def bus(self) -> EventBus:
        return self._bus

    @property
    def provider_id(self) -> str:
        return self._provider_id

    @property
    def has_provider_token(self) -> bool:
        return bool(self._provider_token)

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def is_session_active(self) -> bool:
        with self._slot_lock:
            return self._active is not None

    def active_snapshot(self) -> SessionSnapshot | None:
        with self._slot_lock:
            active = self._active
        return active.session.snapshot() if active is not None else None

    # Listener registration

    def add_listener(
        self, listener: EventListener, events: Iterable[str] | None = None
    ) -> Subscription:
        """Subscribe to feed events. Call unsubscribe() on the result to remove."""
        return self._bus.subscribe(listener, events)

    def add_listeners(self, listeners: JourneySharingListeners) -> Subscription:
        """Subscribe named (tripInfo, payload) callbacks."""
        return listeners.subscribe(self._bus)

    # Control operations

    async def init(self, provider_id: str, token: str | None = None) -> bool:
        logger.debug("Initializing journey sharing with provider %s", provider_id)
        self._provider_id = provider_id
        if token is not None:
            self._provider_token = token
        self._initialized = True
        return True

    async def set_provider_token(self, token: str) -> bool:
        """Store the provider token. The simulator never interprets it."""
        logger.debug("Setting provider token")
        self._provider_token = token
        return True

    async def start_journey_sharing(self, trip_data: Mapping[str, Any] | TripData | Trip) -> bool:
        """Validate trip_data and start simulating it.

        Raises:
            SessionActiveError: a session is already running.
            InvalidTripError: trip_data is malformed.
        """
        if self.is_session_active:
            raise SessionActiveError()

        trip = parse_trip_data(trip_data)
        session = SimulationSession(trip, settings=self._settings, clock=self._clock)
        scheduler = TripScheduler.from_settings(self._settings)

        with self._slot_lock:
            if self._active is not None:
                raise SessionActiveError()
            # Start inside the slot lock so a concurrent stop sees a running scheduler
            try:
                scheduler.start(session, self._bus.publish)
            except Exception as e:
                logger.error(f"Failed to start scheduler: {e}", exc_info=True)
                raise InternalError(
                    f"Failed to start journey sharing: {e}", details={"trip_id": trip.trip_id}
                ) from e
            self._active = ActiveSession(session=session, scheduler=scheduler)

        with log_trip_context(trip.trip_id, booking_id=trip.booking_id):
            logger.info(
                "Started journey sharing for trip %s (%d waypoints, status %s)",
                trip.trip_id,
                len(trip.waypoints),
                trip.status.name,
            )
        return True

    async def stop_journey_sharing(self) -> bool:
        """Stop the running session.

        The slot stays occupied until the scheduler has been joined, so a start
        issued meanwhile is rejected with SESSION_ACTIVE.

        Listeners run on the scheduler thread while it holds the publish lock.
        A listener may schedule this coroutine but must not block waiting for
        its result: the join would wait on that same lock and never return.

        Raises:
            NoSessionError: nothing is running, or a stop is already under way.
        """
        active = self._begin_stop()
        if active is None:
            raise NoSessionError()

        await self._stop_scheduler(active)
        logger.info("Stopped journey sharing for trip %s", active.trip_id)
        return True

    async def cleanup(self) -> bool:
        """Stop any running session and reset initialization. Always succeeds."""
        active = self._begin_stop()
        if active is not None:
            await self._stop_scheduler(active)
            logger.info("Cleaned up journey sharing for trip %s", active.trip_id)
        self._initialized = False
        return True

    def _begin_stop(self) -> ActiveSession | None:
        with self._slot_lock:
            if self._active is None or self._stopping:
                return None
            self._stopping = True
            return self._active

    async def _stop_scheduler(self, active: ActiveSession) -> None:
        try:
            await asyncio.to_thread(active.scheduler.stop)
        finally:
            with self._slot_lock:
                if self._active is active:
                    self._active = None
                self._stopping = False
