"""
ctxlog Structured Logger Tests

Tests cover: derivation, correlation/tenant IDs, request context,
caller metadata, execution time tracking and level control.
"""

import inspect
import os
import time
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from ctxlog.context import CORRELATION_ID_KEY, RequestContext
from ctxlog.exceptions import InvalidLevelError, PanicError
from ctxlog.levels import Level
from ctxlog.logger import Logger
from ctxlog.structured import StructuredLogger, new_logger, new_nop_logger


# ==================== Fixtures ====================

@pytest.fixture
def logger(buffer):
    """Root logger at info level writing to an in-memory buffer."""
    return new_logger(Level.INFO, output=buffer)


@pytest.fixture
def debug_logger(buffer):
    """Root logger at debug level writing to an in-memory buffer."""
    return new_logger(Level.DEBUG, output=buffer)


# ==================== Tests ====================

class TestConstruction:
    """Test root logger construction."""

    def test_new_logger(self, logger):
        """Test a root logger starts empty at its initial level."""
        assert isinstance(logger, Logger)
        assert logger.get_level() == Level.INFO
        assert logger.get_correlation_id() == ""
        assert logger.get_tenant_id() == ""
        assert dict(logger.fields) == {}

    def test_nop_logger_discards(self, capsys):
        """Test the nop logger writes nothing anywhere."""
        logger = new_nop_logger()
        logger.info("nothing")
        logger.error("still nothing")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""
        assert logger.entry.engine.output is None

    def test_set_output(self, buffer, read_records):
        """Test the root output can be redirected from any derived logger."""
        root = new_nop_logger()
        derived = root.set_area("billing")

        derived.set_output(buffer)
        root.info("now visible")

        assert read_records()[0]["event"] == "now visible"


class TestDerivation:
    """Test copy-on-derive semantics."""

    def test_with_field_does_not_mutate(self, logger):
        """Test deriving leaves the original untouched."""
        a = logger.set_correlation_id("corr-1")
        b = a.with_field("k", "v")

        assert "k" not in a.fields
        assert b.fields["k"] == "v"
        assert a.get_correlation_id() == "corr-1"

        c = b.set_correlation_id("corr-2")
        assert a.get_correlation_id() == "corr-1"
        assert b.get_correlation_id() == "corr-1"
        assert c.get_correlation_id() == "corr-2"

    def test_ids_survive_derivation(self, logger):
        """Test correlation/tenant IDs carry through later derivations."""
        derived = (
            logger.set_correlation_id("corr-1")
            .set_tenant_id("acme")
            .set_area("billing")
            .with_error(ValueError("x"))
        )

        assert derived.get_correlation_id() == "corr-1"
        assert derived.get_tenant_id() == "acme"

    def test_area_and_operation(self, logger, read_records):
        """Test Area/Operation field keys."""
        logger.set_area("billing").set_operation("charge").info("charging")

        record = read_records()[0]
        assert record["Area"] == "billing"
        assert record["Operation"] == "charge"

    def test_with_fields_last_write_wins(self, logger):
        """Test batches behave like sequential with_field calls."""
        derived = logger.with_field("a", 1).with_fields({"a": 2, "b": 3})

        assert dict(derived.fields) == {"a": 2, "b": 3}

    def test_with_error(self, logger, read_records):
        """Test errors are data, not control flow."""
        logger.with_error(RuntimeError("disk full")).warn("retrying")

        record = read_records()[0]
        assert record["error"] == "disk full"
        assert record["level"] == "warn"


class TestCorrelation:
    """Test correlation and tenant IDs."""

    def test_set_correlation_id(self, logger, read_records):
        """Test the ID is stored and attached as a field."""
        derived = logger.set_correlation_id("abc123")
        derived.info("hello")

        assert derived.get_correlation_id() == "abc123"
        assert read_records()[0]["CorrelationID"] == "abc123"

    def test_empty_correlation_id_is_noop(self, logger):
        """Test an empty ID keeps the existing one."""
        derived = logger.set_correlation_id("abc123")

        assert derived.set_correlation_id("") is derived
        assert derived.set_correlation_id("").get_correlation_id() == "abc123"

    def test_empty_tenant_id_is_noop(self, logger):
        """Test an empty tenant ID keeps the existing one."""
        derived = logger.set_tenant_id("acme")

        assert derived.set_tenant_id("").get_tenant_id() == "acme"
        assert "TenantID" not in logger.fields
        assert derived.fields["TenantID"] == "acme"


class TestWithContext:
    """Test request context propagation."""

    def test_correlation_only(self, logger):
        """Test a context with only a correlation ID."""
        ctx = RequestContext().with_value(CORRELATION_ID_KEY, "abc123")
        derived = logger.with_context(ctx)

        assert derived.get_correlation_id() == "abc123"
        assert derived.get_tenant_id() == ""
        assert "TenantID" not in derived.fields

    def test_both_ids_and_binding(self, logger, read_records):
        """Test both IDs are applied and the context is bound."""
        ctx = {"correlationId": "abc123", "tenantId": "acme"}
        derived = logger.with_context(ctx)
        derived.info("handled")

        assert derived.get_tenant_id() == "acme"
        assert derived.context is ctx
        record = read_records()[0]
        assert record["CorrelationID"] == "abc123"
        assert record["TenantID"] == "acme"

    def test_wrong_types_are_ignored(self, logger):
        """Test non-string values keep existing IDs."""
        base = logger.set_correlation_id("keep")
        derived = base.with_context({"correlationId": 7, "tenantId": None})

        assert derived.get_correlation_id() == "keep"
        assert derived.get_tenant_id() == ""

    def test_none_context(self, logger):
        """Test a missing context never fails."""
        derived = logger.with_context(None)

        assert derived.get_correlation_id() == ""
        assert derived.context is None


class TestEmission:
    """Test message emission and caller metadata."""

    def test_message_operands(self, logger, read_records):
        """Test variadic operands are joined into one message."""
        logger.info("processed ", 3, 4, " items")

        assert read_records()[0]["event"] == "processed 3 4 items"

    def test_info_has_no_caller_info(self, logger, read_records):
        """Test caller metadata is only attached to error records."""
        logger.info("plain")
        logger.warning("plain warning")

        for record in read_records():
            assert "File" not in record
            assert "Func" not in record

    def test_error_attaches_caller_info(self, logger, read_records):
        """Test File/Line/Func point at the calling frame."""
        line = inspect.currentframe().f_lineno + 1
        logger.error("boom")

        record = read_records()[0]
        assert record["level"] == "error"
        assert os.path.basename(record["File"]) == os.path.basename(__file__)
        assert record["Line"] == line
        assert record["Func"].endswith("test_error_attaches_caller_info")

    def test_caller_info_does_not_leak(self, logger):
        """Test caller metadata is not kept on the logger."""
        logger.error("boom")

        assert "File" not in logger.fields

    def test_fatal(self, logger, read_records):
        """Test fatal logs with caller info and then exits."""
        exit_func = Mock()
        logger.entry.engine.exit_func = exit_func

        logger.fatal("cannot continue")

        exit_func.assert_called_once_with(1)
        record = read_records()[0]
        assert record["level"] == "fatal"
        assert record["Func"].endswith("test_fatal")

    def test_panic(self, logger, read_records):
        """Test panic logs with caller info and then raises."""
        with pytest.raises(PanicError, match="invariant broken"):
            logger.set_area("ledger").panic("invariant broken")

        record = read_records()[0]
        assert record["level"] == "panic"
        assert record["Area"] == "ledger"
        assert "Line" in record

    def test_log_without_caller_info(self, logger, read_records):
        """Test log() emits at any level without caller metadata or exiting."""
        exit_func = Mock()
        logger.entry.engine.exit_func = exit_func

        logger.log(Level.FATAL, "forwarded")
        logger.log(Level.DEBUG, "dropped")

        records = read_records()
        assert [r["level"] for r in records] == ["fatal"]
        assert "File" not in records[0]
        exit_func.assert_not_called()

    def test_trace_and_debug_gated(self, logger, read_records):
        """Test trace/debug are dropped at info level."""
        logger.trace("t")
        logger.debug("d")

        assert read_records() == []


class TestLevelControl:
    """Test threshold management."""

    def test_nop_logger_set_level_is_silent(self, capsys):
        """Test changing the nop logger threshold writes nothing."""
        logger = new_nop_logger()
        logger.set_level(Level.DEBUG)

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""
        assert logger.get_level() == Level.DEBUG

    def test_new_logger_out_of_range_level(self):
        """Test an invalid initial level falls back to info."""
        assert new_logger(99, output=None).get_level() == Level.INFO

    def test_set_level_shared_by_derived(self, logger):
        """Test the threshold lives on the root engine."""
        derived = logger.set_area("billing")
        derived.set_level(Level.TRACE)

        assert logger.get_level() == Level.TRACE
        assert derived.get_level() == Level.TRACE

    def test_set_level_failure(self, logger, monkeypatch):
        """Test an unparseable level name raises and keeps the threshold."""
        monkeypatch.setattr("ctxlog.structured.parse_level", lambda level: "verbose")

        with pytest.raises(InvalidLevelError):
            logger.set_level(Level.DEBUG)

        assert logger.get_level() == Level.INFO


class TestTrackFuncTime:
    """Test execution time tracking."""

    @pytest.mark.parametrize("level", [Level.WARN, Level.INFO, Level.ERROR])
    def test_noop_below_debug(self, buffer, read_records, level):
        """Test nothing is emitted when debug is disabled."""
        logger = new_logger(level, output=buffer)
        logger.track_func_time(time.perf_counter())

        assert read_records() == []

    @pytest.mark.parametrize("level", [Level.DEBUG, Level.TRACE])
    def test_emits_debug_record(self, buffer, read_records, level):
        """Test one debug record with executionTime is emitted."""
        logger = new_logger(level, output=buffer)

        def operation():
            start = time.perf_counter()
            logger.track_func_time(start)

        operation()

        records = read_records()
        assert len(records) == 1
        assert records[0]["level"] == "debug"
        assert records[0]["event"] == "func execution completed"
        assert "executionTime" in records[0]
        assert records[0]["Func"].endswith("operation")

    def test_datetime_start(self, debug_logger, read_records):
        """Test datetime start values are supported."""
        start = datetime.now(timezone.utc) - timedelta(seconds=2)
        debug_logger.track_func_time(start)

        assert read_records()[0]["executionTime"].startswith("0:00:02")


def test_structured_logger_repr():
    """Test repr shows IDs and fields."""
    logger = new_nop_logger().set_correlation_id("abc").with_field("k", 1)

    assert isinstance(logger, StructuredLogger)
    assert "abc" in repr(logger)
    assert "'k': 1" in repr(logger)
