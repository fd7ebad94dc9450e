from __future__ import annotations

import os
import sys
import time
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from loguru import Logger

from loguru import logger

DEFAULT_LOG_DIR = Path(
    os.environ.get(
        "OVERLAY_MENU_LOG_DIR",
        Path.home() / ".local" / "state" / "overlay-menu" / "logs",
    )
)


def _should_log_button(record) -> bool:
    """Filter key press logs - only show in TRACE mode."""
    message = record["message"].lower()
    tags = record["extra"].get("tags", [])

    if "button" in tags or "input" in tags:
        if "key" in message or "press" in message:
            return record["level"].no <= logger.level("TRACE").no

    return True


def _should_log_frame(record) -> bool:
    """Filter per-frame render logs, these fire at the frame rate."""
    message = record["message"].lower()

    if "frame rendered" in message:
        return record["level"].no <= logger.level("TRACE").no

    return True


def _combined_filter(record) -> bool:
    """Combined filter for all log suppression rules."""
    return _should_log_button(record) and _should_log_frame(record)


def setup_logging(
    *,
    debug: bool = False,
    trace: bool = False,
    log_dir: Path | None = None,
) -> Logger:
    """
    Setup multi-tier logging with separate sinks for different log levels.

    Logging Tiers:
    - CRITICAL/ERROR: Missing resources, failed commands, empty zone registry
    - SUCCESS/INFO: Session open/close, committed actions
    - DEBUG: State transitions, command execution
    - TRACE: Ultra-verbose (key presses, every rendered frame)

    Log Files:
    - operations.log: INFO+ events (7 day retention)
    - debug.log: DEBUG+ events when --debug is enabled (3 day retention)
    - trace.log: TRACE+ events when --trace is enabled (1 day retention)
    - structured.jsonl: Structured JSON logs for analysis (7 day retention)

    Args:
        debug: Enable DEBUG level logging
        trace: Enable TRACE level logging (very verbose)
        log_dir: Custom log directory (defaults to ~/.local/state/overlay-menu/logs)
    """
    logger.remove()
    logger.configure(extra={"job_id": "-", "tags": [], "source": "APP"})

    if trace:
        console_level = "TRACE"
    elif debug:
        console_level = "DEBUG"
    else:
        console_level = "INFO"

    # SINK 1: Console (stderr) - User-facing, filtered
    logger.add(
        sys.stderr,
        level=console_level,
        enqueue=True,
        backtrace=False,
        diagnose=False,
        filter=_combined_filter,
        colorize=True,
        format=(
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{extra[source]: <10}</cyan> | "
            "<blue>{extra[job_id]: <18}</blue> | "
            "{message}"
        ),
    )

    log_dir = log_dir or DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    # SINK 2: Operations Log - Important events only (INFO+)
    logger.add(
        log_dir / "operations.log",
        level="INFO",
        rotation="5 MB",
        retention="7 days",
        compression="zip",
        enqueue=True,
        backtrace=False,
        diagnose=False,
        filter=lambda record: record["level"].no >= logger.level("INFO").no,
        format=(
            "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
            "{level: <8} | "
            "{extra[source]: <10} | "
            "{extra[job_id]: <18} | "
            "{message}"
        ),
    )

    # SINK 3: Debug Log - Detailed diagnostics (DEBUG+ when debug=True)
    if debug or trace:
        logger.add(
            log_dir / "debug.log",
            level="DEBUG",
            rotation="10 MB",
            retention="3 days",
            compression="zip",
            enqueue=True,
            backtrace=True,
            diagnose=True,
            filter=_combined_filter,
            format=(
                "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
                "{level: <8} | "
                "{extra[source]: <10} | "
                "{extra[job_id]: <18} | "
                "{extra[tags]} | "
                "{message}"
            ),
        )

    # SINK 4: Trace Log - Ultra-verbose (TRACE only, when trace=True)
    if trace:
        logger.add(
            log_dir / "trace.log",
            level="TRACE",
            rotation="50 MB",
            retention="1 day",
            compression="zip",
            enqueue=True,
            backtrace=False,
            diagnose=False,
            format=(
                "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
                "{extra[source]: <10} | "
                "{extra[job_id]: <18} | "
                "{message}"
            ),
        )

    # SINK 5: Structured JSON Log - For analysis tools (INFO+)
    logger.add(
        log_dir / "structured.jsonl",
        level="INFO",
        rotation="10 MB",
        retention="7 days",
        compression="zip",
        enqueue=True,
        serialize=True,
        format="{message}",
    )

    return logger


def get_logger(
    *,
    job_id: str | None = None,
    tags: Iterable[str] | None = None,
    source: str | None = None,
) -> Logger:
    """
    Get a logger with bound context.

    Args:
        job_id: Job identifier for tracking operations
        tags: Tags for filtering (e.g., ["menu", "ui"])
        source: Source component (e.g., "menu", "input", "system")

    Returns:
        Logger with bound context
    """
    extras: dict[str, object] = {}
    if job_id is not None:
        extras["job_id"] = job_id
    if tags is not None:
        extras["tags"] = list(tags)
    if source is not None:
        extras["source"] = source
    return logger.bind(**extras)


@contextmanager
def operation_context(operation: str, **details):
    """
    Context manager for tracking blocking side effects with automatic timing.

    Logs operation start, completion, and failure with duration tracking.

    Args:
        operation: Operation name (e.g., "usb", "powerdown", "theme")
        **details: Operation-specific details to log

    Yields:
        Logger bound with job_id and operation context

    Example:
        with operation_context("usb", command="share start") as log:
            log.debug("Mounting USB share")
    """
    job_id = f"{operation}-{uuid.uuid4().hex[:8]}"

    with logger.contextualize(job_id=job_id, operation=operation, **details):
        start_time = time.time()
        log = logger.bind(source=operation, job_id=job_id, tags=[operation])

        log.info(f"{operation.capitalize()} started", **details)

        try:
            yield log
            duration = time.time() - start_time
            log.success(
                f"{operation.capitalize()} completed", duration_seconds=round(duration, 2)
            )
        except Exception as e:
            duration = time.time() - start_time
            log.error(
                f"{operation.capitalize()} failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_seconds=round(duration, 2),
            )
            raise


class LoggerFactory:
    """
    Factory for creating domain-specific loggers with automatic context.

    Each factory method returns a logger pre-configured with appropriate
    source and tags for the domain.
    """

    @staticmethod
    def for_menu() -> Logger:
        """Logger for zone navigation and menu state transitions."""
        return logger.bind(source="menu", tags=["ui", "menu"])

    @staticmethod
    def for_display() -> Logger:
        """Logger for resource loading and frame presentation."""
        return logger.bind(source="display", tags=["ui", "display"])

    @staticmethod
    def for_input() -> Logger:
        """Logger for button and key events."""
        return logger.bind(source="input", tags=["input", "hardware", "button"])

    @staticmethod
    def for_system() -> Logger:
        """Logger for shell commands and other external side effects."""
        return logger.bind(source="system", tags=["system"])


class ThrottledLogger:
    """
    Logger wrapper that throttles high-frequency log events.

    Useful for per-frame diagnostics that should only be emitted at intervals.
    """

    def __init__(self, log: Logger, interval_seconds: float = 5.0):
        """
        Initialize throttled logger.

        Args:
            log: Base logger to wrap
            interval_seconds: Minimum seconds between log emissions
        """
        self.log = log
        self.interval = interval_seconds
        self.last_log_time: dict[str, float] = {}

    def debug(self, key: str, message: str, **kwargs) -> None:
        """Log at DEBUG level, throttled by key."""
        self._throttled_log("DEBUG", key, message, **kwargs)

    def info(self, key: str, message: str, **kwargs) -> None:
        """Log at INFO level, throttled by key."""
        self._throttled_log("INFO", key, message, **kwargs)

    def _throttled_log(self, level: str, key: str, message: str, **kwargs) -> None:
        now = time.time()
        last_time = self.last_log_time.get(key, 0)

        if now - last_time >= self.interval:
            log_method = getattr(self.log, level.lower())
            log_method(message, **kwargs)
            self.last_log_time[key] = now
