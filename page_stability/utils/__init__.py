"""Utility helpers for PageStability."""

from .logger import (
    LogLevel,
    LogLine,
    PageStabilityLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "LogLevel",
    "LogLine",
    "PageStabilityLogger",
    "configure_logging",
    "get_logger",
]
