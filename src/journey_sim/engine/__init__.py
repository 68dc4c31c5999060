"""Tick scheduling: live background scheduler and SimPy replay.

Import the runners from their modules (``engine.scheduler``, ``engine.replay``);
this package only re-exports the snapshot types so that trips.session can
depend on it without an import cycle.
"""

from .snapshots import SessionSnapshot, TripInfo

__all__ = [
    "SessionSnapshot",
    "TripInfo",
]
