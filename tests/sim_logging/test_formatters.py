import io
import json
import logging
import sys

import pytest

from journey_sim.core.correlation import CorrelationFilter
from journey_sim.sim_logging import log_trip_context, setup_logging
from journey_sim.sim_logging.filters import DefaultCorrelationFilter, TokenMaskingFilter
from journey_sim.sim_logging.formatters import DevFormatter, JSONFormatter


def _record(msg: str = "Trip %s started", args: tuple = ("trip-1",)) -> logging.LogRecord:
    return logging.LogRecord(
        name="journey_sim.controller",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=args,
        exc_info=None,
    )


@pytest.mark.unit
class TestJSONFormatter:
    def test_base_fields(self):
        output = json.loads(JSONFormatter(environment="test").format(_record()))
        assert output["level"] == "INFO"
        assert output["logger"] == "journey_sim.controller"
        assert output["message"] == "Trip trip-1 started"
        assert output["env"] == "test"
        assert "timestamp" in output

    def test_context_fields(self):
        record = _record()
        record.trip_id = "trip-1"
        record.correlation_id = "trip-1"
        record.error_code = "INTERNAL"
        output = json.loads(JSONFormatter().format(record))
        assert output["trip_id"] == "trip-1"
        assert output["correlation_id"] == "trip-1"
        assert output["error_code"] == "INTERNAL"
        assert "booking_id" not in output

    def test_exception(self):
        try:
            raise RuntimeError("tick failed")
        except RuntimeError:
            record = logging.LogRecord(
                name="x",
                level=logging.ERROR,
                pathname="",
                lineno=0,
                msg="boom",
                args=(),
                exc_info=sys.exc_info(),
            )
        output = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: tick failed" in output["exception"]


@pytest.mark.unit
class TestDevFormatter:
    def test_includes_correlation(self):
        record = _record()
        DefaultCorrelationFilter().filter(record)
        output = DevFormatter().format(record)
        assert "corr=-]" in output
        assert "Trip trip-1 started" in output


@pytest.mark.unit
class TestSetupLogging:
    def test_configures_root_handler(self):
        root = logging.getLogger()
        saved_handlers = root.handlers[:]
        saved_level = root.level
        try:
            setup_logging(level="DEBUG", json_output=True, environment="test")
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            handler = root.handlers[0]
            assert isinstance(handler.formatter, JSONFormatter)
            filter_types = [type(f) for f in handler.filters]
            assert TokenMaskingFilter in filter_types
            assert CorrelationFilter in filter_types
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_records_reach_given_stream_masked_and_tagged(self):
        root = logging.getLogger()
        saved_handlers = root.handlers[:]
        saved_level = root.level
        stream = io.StringIO()
        try:
            setup_logging(json_output=True, stream=stream)
            with log_trip_context("trip-5"):
                logging.getLogger("journey_sim.test").info("provider token=abc123")
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

        entry = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert entry["message"] == "provider token=[TOKEN]"
        assert entry["trip_id"] == "trip-5"
        assert entry["correlation_id"] == "trip-5"
        assert entry["session_id"] == "-"
