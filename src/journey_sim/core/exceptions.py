"""Exception hierarchy for the journey sharing simulator."""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error kinds reported to the host by control operations."""

    SESSION_ACTIVE = "SESSION_ACTIVE"
    NO_SESSION = "NO_SESSION"
    INVALID_TRIP = "INVALID_TRIP"
    INTERNAL = "INTERNAL"


class SimulationError(Exception):
    """Base exception for all simulation errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class StateError(SimulationError):
    """Invalid trip status transition."""

    pass


class ConfigurationError(SimulationError):
    """Missing or invalid configuration."""

    pass


class JourneySharingError(SimulationError):
    """A control operation was rejected. `code` tells the host why."""

    code: ErrorCode = ErrorCode.INTERNAL

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code.value, "message": self.message, "details": self.details}


class SessionActiveError(JourneySharingError):
    """Start requested while a session is already running."""

    code = ErrorCode.SESSION_ACTIVE

    def __init__(self, message: str = "Journey sharing session is already active", **kwargs: Any):
        super().__init__(message, **kwargs)


class NoSessionError(JourneySharingError):
    """Stop requested with no running session."""

    code = ErrorCode.NO_SESSION

    def __init__(self, message: str = "No active journey sharing session", **kwargs: Any):
        super().__init__(message, **kwargs)


class InvalidTripError(JourneySharingError):
    """Start payload is missing required fields or carries malformed ones."""

    code = ErrorCode.INVALID_TRIP

    def __init__(self, message: str, fields: list[str] | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.fields = fields or []
        self.details.setdefault("fields", self.fields)


class InternalError(JourneySharingError):
    """Unexpected failure inside the engine."""

    code = ErrorCode.INTERNAL
