"""Tests for loguru sink setup and logging helpers."""

from types import SimpleNamespace

import pytest
from loguru import logger

from overlay_menu import logging as menu_logging
from overlay_menu.logging import (
    LoggerFactory,
    ThrottledLogger,
    get_logger,
    operation_context,
    setup_logging,
)


@pytest.fixture
def captured():
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="TRACE")
    yield records
    logger.remove(handler_id)


def make_record(message, level, tags=()):
    return {
        "message": message,
        "level": SimpleNamespace(no=logger.level(level).no),
        "extra": {"tags": list(tags)},
    }


class TestSetupLogging:
    """Sink configuration."""

    def test_creates_log_files(self, tmp_path):
        setup_logging(log_dir=tmp_path)
        logger.info("session opened")
        logger.complete()
        logger.remove()

        assert (tmp_path / "operations.log").exists()
        assert (tmp_path / "structured.jsonl").exists()
        assert not (tmp_path / "debug.log").exists()

    def test_trace_adds_verbose_sinks(self, tmp_path):
        setup_logging(trace=True, log_dir=tmp_path)
        logger.trace("frame rendered")
        logger.complete()
        logger.remove()

        assert (tmp_path / "debug.log").exists()
        assert (tmp_path / "trace.log").exists()


class TestFilters:
    """Key press and per-frame logs are TRACE only."""

    def test_button_logs_need_trace(self):
        assert not menu_logging._combined_filter(
            make_record("Button up pressed", "DEBUG", tags=["button"])
        )
        assert menu_logging._combined_filter(
            make_record("Button up pressed", "TRACE", tags=["button"])
        )

    def test_untagged_press_kept(self):
        assert menu_logging._combined_filter(make_record("Key pressed", "INFO"))

    def test_frame_logs_need_trace(self):
        assert not menu_logging._combined_filter(make_record("Frame rendered", "DEBUG"))
        assert menu_logging._combined_filter(make_record("Frame rendered", "TRACE"))

    def test_other_messages_kept(self):
        assert menu_logging._combined_filter(make_record("Menu opened", "INFO"))


class TestBoundLoggers:
    """Context bound onto log records."""

    def test_get_logger_binds_extras(self, captured):
        get_logger(job_id="job-1", tags=["menu"], source="menu").info("hello")

        extra = captured[-1]["extra"]
        assert extra["job_id"] == "job-1"
        assert extra["tags"] == ["menu"]
        assert extra["source"] == "menu"

    def test_factory_sources(self, captured):
        LoggerFactory.for_system().info("ran")
        LoggerFactory.for_menu().info("moved")

        assert [record["extra"]["source"] for record in captured] == ["system", "menu"]


class TestOperationContext:
    """Start / success / failure records around a side effect."""

    def test_success(self, captured):
        with operation_context("usb", command="share start") as log:
            log.debug("mounting")

        levels = [record["level"].name for record in captured]
        assert levels == ["INFO", "DEBUG", "SUCCESS"]
        assert captured[0]["extra"]["job_id"].startswith("usb-")

    def test_failure_reraised(self, captured):
        with pytest.raises(RuntimeError):
            with operation_context("powerdown"):
                raise RuntimeError("no power")

        assert captured[-1]["level"].name == "ERROR"
        assert captured[-1]["extra"]["error_type"] == "RuntimeError"


class TestThrottledLogger:
    """Per-key throttling."""

    def test_throttles_by_key(self, captured, mocker):
        now = mocker.patch("overlay_menu.logging.time.time", return_value=100.0)
        throttled = ThrottledLogger(logger, interval_seconds=5.0)

        throttled.debug("overrun", "slow frame")
        throttled.debug("overrun", "slow frame")
        throttled.info("other", "different key")
        now.return_value = 106.0
        throttled.debug("overrun", "slow frame")

        messages = [record["message"] for record in captured]
        assert messages == ["slow frame", "different key", "slow frame"]
