"""Logging configuration for PageStability."""

import logging
import os
import sys
from enum import IntEnum
from typing import Any, Dict, List, Optional

import structlog


class LogLevel(IntEnum):
    """Log levels for PageStability, ordered by the verbosity that enables them."""
    ERROR = 0
    WARN = 1
    INFO = 2
    DEBUG = 3


_STDLIB_LEVELS = {
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}


def _renderer() -> Any:
    # PAGE_STABILITY_LOG_FORMAT=json|console overrides the tty detection
    fmt = os.getenv("PAGE_STABILITY_LOG_FORMAT", "").lower()
    if fmt == "json":
        return structlog.processors.JSONRenderer()
    if fmt == "console":
        return structlog.dev.ConsoleRenderer()
    if sys.stderr.isatty() and os.getenv("NO_COLOR") is None:
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def configure_logging(verbose: int = 0) -> structlog.BoundLogger:
    """
    Configure structlog for PageStability.

    Wait and retry events are emitted at DEBUG, timeouts and exhausted
    retries at WARN, so ``verbose=1`` surfaces only the failures.

    Args:
        verbose: Verbosity level (0-3)

    Returns:
        Logger bound to the ``page_stability`` name
    """
    level = LogLevel(max(0, min(verbose, LogLevel.DEBUG)))

    processors: List[Any] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        _renderer(),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=_STDLIB_LEVELS[level],
    )

    return structlog.get_logger("page_stability").bind(verbose=verbose)


class LogLine:
    """
    One structured event.

    ``category`` is ``<component>:<event>``, e.g. ``wait:timeout`` or
    ``retry:exhausted``. It is emitted as a field next to ``auxiliary`` so
    JSON output can be filtered on it.
    """

    def __init__(
        self,
        category: str,
        message: str,
        level: LogLevel = LogLevel.INFO,
        auxiliary: Optional[Dict[str, Any]] = None,
    ):
        self.category = category
        self.message = message
        self.level = level
        self.auxiliary = auxiliary or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert log line to dictionary."""
        return {
            "category": self.category,
            "level": self.level.name,
            **self.auxiliary,
        }


class PageStabilityLogger:
    """
    Category logger shared by the waiter, retry and session components.

    Categories in use:
        wait:start, wait:poll, wait:ok      debug, one set per wait
        wait:timeout                        warn, deadline passed
        wait:teardown                       error, a probe teardown failed
        retry:attempt, retry:transient      debug, per lookup attempt
        retry:exhausted                     warn, last retryable attempt failed
        session:frame, session:hook         debug
        browser:init, browser:close         info, error on failure

    Events above ``verbose`` (0-3) are dropped before reaching structlog.
    """

    def __init__(self, logger: Any, verbose: int = 0):
        self.logger = logger
        self.verbose = verbose

    def log(self, log_line: LogLine) -> None:
        """Log a structured log line."""
        if log_line.level.value > self.verbose:
            return

        log_data = log_line.to_dict()
        level_name = log_line.level.name.lower()
        if level_name == "warn":
            level_name = "warning"

        log_method = getattr(self.logger, level_name, self.logger.info)
        log_method(log_line.message, **log_data)

    def error(self, category: str, message: str, **kwargs: Any) -> None:
        """Log an error message."""
        self.log(LogLine(category, message, LogLevel.ERROR, kwargs))

    def warn(self, category: str, message: str, **kwargs: Any) -> None:
        """Log a warning message."""
        self.log(LogLine(category, message, LogLevel.WARN, kwargs))

    def info(self, category: str, message: str, **kwargs: Any) -> None:
        """Log an info message."""
        self.log(LogLine(category, message, LogLevel.INFO, kwargs))

    def debug(self, category: str, message: str, **kwargs: Any) -> None:
        """Log a debug message."""
        self.log(LogLine(category, message, LogLevel.DEBUG, kwargs))

    def child(self, **bindings: Any) -> 'PageStabilityLogger':
        """Create a child logger with additional context."""
        child_logger = self.logger.bind(**bindings)
        return PageStabilityLogger(child_logger, self.verbose)


def get_logger(component: Optional[str] = None) -> PageStabilityLogger:
    """Quiet default logger for components constructed without one."""
    logger = structlog.get_logger("page_stability")
    if component:
        logger = logger.bind(component=component)
    return PageStabilityLogger(logger, 0)
