from .bus import EventBus, EventListener, JourneySharingListeners, Subscription
from .channels import ALL_EVENTS, TICK_EVENTS

__all__ = [
    "EventBus",
    "EventListener",
    "JourneySharingListeners",
    "Subscription",
    "ALL_EVENTS",
    "TICK_EVENTS",
]
