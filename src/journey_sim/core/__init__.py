"""Shared error types and correlation context."""

from .correlation import (
    CorrelationFilter,
    get_current_correlation_id,
    get_current_session_id,
    with_correlation,
    with_session,
)
from .exceptions import (
    ConfigurationError,
    ErrorCode,
    InternalError,
    InvalidTripError,
    JourneySharingError,
    NoSessionError,
    SessionActiveError,
    SimulationError,
    StateError,
)

__all__ = [
    "CorrelationFilter",
    "get_current_correlation_id",
    "get_current_session_id",
    "with_correlation",
    "with_session",
    "ConfigurationError",
    "ErrorCode",
    "InternalError",
    "InvalidTripError",
    "JourneySharingError",
    "NoSessionError",
    "SessionActiveError",
    "SimulationError",
    "StateError",
]
