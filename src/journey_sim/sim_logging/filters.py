"""Log filters for credential masking and correlation ID injection."""

import logging
import re


class TokenMaskingFilter(logging.Filter):
    """Masks provider tokens and bearer credentials in log messages.

    The provider token is carried for the host and must never reach the logs,
    whether it is interpolated as ``token=...`` or as a JWT-looking string.
    """

    BEARER_PATTERN = re.compile(r"(?i)\bbearer\s+[A-Za-z0-9._~+/=-]+")
    KEY_VALUE_PATTERN = re.compile(r"(?i)\b(token|api_key|secret)(\s*[=:]\s*)(\S+)")
    JWT_PATTERN = re.compile(r"\beyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+")

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            msg = record.msg
            if record.args:
                msg = record.getMessage()
                record.args = None
            msg = self.BEARER_PATTERN.sub("Bearer [TOKEN]", msg)
            msg = self.KEY_VALUE_PATTERN.sub(r"\1\2[TOKEN]", msg)
            msg = self.JWT_PATTERN.sub("[TOKEN]", msg)
            record.msg = msg
        return True


class DefaultCorrelationFilter(logging.Filter):
    """Adds default correlation_id if not present.

    Note: For full correlation support, use journey_sim.core.correlation.CorrelationFilter
    which reads the context variables set by the controller and scheduler.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = "-"
        return True
