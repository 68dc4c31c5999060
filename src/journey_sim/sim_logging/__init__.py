"""Logging setup with structured formatters, token masking, and per-trip context."""

from .context import ContextFilter, LogContext, log_context, log_trip_context
from .filters import DefaultCorrelationFilter, TokenMaskingFilter
from .formatters import DevFormatter, JSONFormatter
from .setup import build_handler, setup_logging

__all__ = [
    "setup_logging",
    "build_handler",
    "log_context",
    "log_trip_context",
    "JSONFormatter",
    "DevFormatter",
    "TokenMaskingFilter",
    "DefaultCorrelationFilter",
    "LogContext",
    "ContextFilter",
]
