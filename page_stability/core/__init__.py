"""Core PageStability components."""

from .errors import (
    PageStabilityError,
    SessionNotInitializedError,
    BrowserNotAvailableError,
    ConfigurationError,
    ExecutionFault,
    NotApplicableFault,
    StaleReferenceFault,
    UnknownFrameError,
    ElementNotFoundError,
    WaitTimeoutError,
    is_transient_fault,
)
from .probe import Probe, predicate_probe
from .waiter import StabilityWaiter
from .retry import RetryingLookup, retrying
from .session import PlaywrightSession, ScriptExecutor
from .browser import StabilityBrowser

__all__ = [
    # Main classes
    "StabilityWaiter",
    "RetryingLookup",
    "retrying",
    "Probe",
    "predicate_probe",
    "PlaywrightSession",
    "ScriptExecutor",
    "StabilityBrowser",
    # Errors
    "PageStabilityError",
    "SessionNotInitializedError",
    "BrowserNotAvailableError",
    "ConfigurationError",
    "ExecutionFault",
    "NotApplicableFault",
    "StaleReferenceFault",
    "UnknownFrameError",
    "ElementNotFoundError",
    "WaitTimeoutError",
    "is_transient_fault",
]
