"""In-process publish/subscribe for feed events.

Subscribers register a callback and get back a Subscription whose
unsubscribe() removes it. A failing subscriber is logged and skipped; it never
stops delivery to the others or breaks the feed.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from journey_sim.pubsub.channels import (
    ALL_EVENTS,
    ON_TRIP_ETA_UPDATED,
    ON_TRIP_REMAINING_DISTANCE_UPDATED,
    ON_TRIP_REMAINING_WAYPOINTS_UPDATED,
    ON_TRIP_STATUS_UPDATED,
    ON_TRIP_VEHICLE_LOCATION_UPDATED,
)

if TYPE_CHECKING:
    from journey_sim.events.schemas import JourneyEvent

logger = logging.getLogger(__name__)

EventListener = Callable[["JourneyEvent"], None]
# (tripInfo, payload) in wire form, as journey-sharing clients receive them
CallbackListener = Callable[[dict[str, Any], Any], None]


class Subscription:
    """Handle returned by EventBus.subscribe()."""

    def __init__(self, bus: "EventBus", listener: EventListener, events: frozenset[str] | None):
        self._bus = bus
        self.listener = listener
        self.events = events
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def accepts(self, event_name: str) -> bool:
        return self.events is None or event_name in self.events

    def unsubscribe(self) -> None:
        """Stop receiving events. Safe to call more than once."""
        if self._active:
            self._active = False
            self._bus._remove(self)


class EventBus:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscriptions: list[Subscription] = []

    def subscribe(
        self, listener: EventListener, events: Iterable[str] | None = None
    ) -> Subscription:
        """Register listener for the named events (all events when None)."""
        names = None
        if events is not None:
            names = frozenset(events)
            unknown = names - set(ALL_EVENTS)
            if unknown:
                raise ValueError(f"Unknown event names: {', '.join(sorted(unknown))}")

        subscription = Subscription(self, listener, names)
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def clear(self) -> None:
        with self._lock:
            subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            subscription._active = False

    def publish(self, event: "JourneyEvent") -> int:
        """Deliver event to matching subscribers. Returns how many received it."""
        with self._lock:
            targets = [s for s in self._subscriptions if s.accepts(event.event_name)]

        delivered = 0
        for subscription in targets:
            try:
                subscription.listener(event)
                delivered += 1
            except Exception as e:
                logger.error(
                    f"Listener failed for {event.event_name}: {e}",
                    exc_info=True,
                    extra={"trip_id": event.trip_info.trip_id},
                )
        return delivered


@dataclass
class JourneySharingListeners:
    """Named callbacks, one per event, each receiving (tripInfo, payload)."""

    on_trip_status_updated: CallbackListener | None = None
    on_trip_vehicle_location_updated: CallbackListener | None = None
    on_trip_eta_to_next_waypoint_updated: CallbackListener | None = None
    on_trip_active_route_remaining_distance_updated: CallbackListener | None = None
    on_trip_remaining_waypoints_updated: CallbackListener | None = None

    def by_event(self) -> dict[str, CallbackListener]:
        mapping = {
            ON_TRIP_STATUS_UPDATED: self.on_trip_status_updated,
            ON_TRIP_VEHICLE_LOCATION_UPDATED: self.on_trip_vehicle_location_updated,
            ON_TRIP_ETA_UPDATED: self.on_trip_eta_to_next_waypoint_updated,
            ON_TRIP_REMAINING_DISTANCE_UPDATED: self.on_trip_active_route_remaining_distance_updated,
            ON_TRIP_REMAINING_WAYPOINTS_UPDATED: self.on_trip_remaining_waypoints_updated,
        }
        return {name: cb for name, cb in mapping.items() if cb is not None}

    def subscribe(self, bus: EventBus) -> Subscription:
        """Register all set callbacks on bus as one subscription."""
        callbacks = self.by_event()

        def dispatch(event: "JourneyEvent") -> None:
            trip_info, payload = event.callback_args()
            callbacks[event.event_name](trip_info, payload)

        return bus.subscribe(dispatch, events=callbacks.keys())
