"""Type definitions for PageStability."""

from .models import (
    ProbeResult,
    WaitStatus,
    WaitSpec,
    WaitResult,
    RetrySpec,
)

__all__ = [
    "ProbeResult",
    "WaitStatus",
    "WaitSpec",
    "WaitResult",
    "RetrySpec",
]
