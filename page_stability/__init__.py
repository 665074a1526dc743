"""
PageStability - readiness waits and retrying lookups for browser tests.

Waits for Angular and AJAX activity to settle before a test step acts on the
page, and retries element and frame lookups that lose a race against a
stale reference.
"""

__version__ = "0.1.0"

from .core import (
    StabilityWaiter,
    RetryingLookup,
    retrying,
    Probe,
    predicate_probe,
    PlaywrightSession,
    ScriptExecutor,
    StabilityBrowser,
    PageStabilityError,
    BrowserNotAvailableError,
    ConfigurationError,
    ExecutionFault,
    NotApplicableFault,
    StaleReferenceFault,
    UnknownFrameError,
    ElementNotFoundError,
    WaitTimeoutError,
)

from .types import (
    ProbeResult,
    WaitStatus,
    WaitSpec,
    WaitResult,
    RetrySpec,
)

from .config import StabilityConfig
from .probes import angular_probe, ajax_probe
from .page_load import (
    page_load_spec,
    wait_for_page_load,
    wait_for_angular_completion,
    wait_for_ajax_completion,
)

__all__ = [
    # Version
    "__version__",
    # Main classes
    "StabilityWaiter",
    "RetryingLookup",
    "retrying",
    "Probe",
    "predicate_probe",
    "PlaywrightSession",
    "ScriptExecutor",
    "StabilityBrowser",
    "StabilityConfig",
    # Probes and page-load hooks
    "angular_probe",
    "ajax_probe",
    "page_load_spec",
    "wait_for_page_load",
    "wait_for_angular_completion",
    "wait_for_ajax_completion",
    # Common types
    "ProbeResult",
    "WaitStatus",
    "WaitSpec",
    "WaitResult",
    "RetrySpec",
    # Common errors
    "PageStabilityError",
    "BrowserNotAvailableError",
    "ConfigurationError",
    "ExecutionFault",
    "NotApplicableFault",
    "StaleReferenceFault",
    "UnknownFrameError",
    "ElementNotFoundError",
    "WaitTimeoutError",
]
