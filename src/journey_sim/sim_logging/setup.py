"""Root logger configuration.

The CLI writes feed events to stdout, so log records go to stderr unless
another stream is passed in.
"""

import logging
import sys
from typing import TextIO

from journey_sim.core.correlation import CorrelationFilter

from .context import ContextFilter
from .filters import DefaultCorrelationFilter, TokenMaskingFilter
from .formatters import DevFormatter, JSONFormatter

# Masking runs first so later filters and the formatter never see a raw token
HANDLER_FILTERS: tuple[type[logging.Filter], ...] = (
    TokenMaskingFilter,
    ContextFilter,
    CorrelationFilter,
    DefaultCorrelationFilter,
)


def build_handler(
    json_output: bool = False,
    environment: str = "development",
    stream: TextIO | None = None,
) -> logging.Handler:
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONFormatter(environment) if json_output else DevFormatter())
    for filter_class in HANDLER_FILTERS:
        handler.addFilter(filter_class())
    return handler


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    environment: str = "development",
    stream: TextIO | None = None,
) -> None:
    """Replace the root logger's handlers with a single configured handler."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(build_handler(json_output, environment, stream))
    root_logger.setLevel(level.upper())
