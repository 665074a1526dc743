"""Custom exception hierarchy for PageStability."""

from typing import Optional, Any, Dict


class PageStabilityError(Exception):
    """Base exception for all PageStability errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class SessionNotInitializedError(PageStabilityError):
    """Raised when the browser session is used before initialization."""

    def __init__(self):
        super().__init__(
            "Browser session not initialized. Call init() before using the session.",
            {"error_code": "NOT_INITIALIZED"}
        )


class BrowserNotAvailableError(PageStabilityError):
    """Raised when the browser cannot be launched."""

    def __init__(self, reason: str):
        super().__init__(
            f"Browser not available: {reason}",
            {"reason": reason, "error_code": "BROWSER_NOT_AVAILABLE"}
        )


class ConfigurationError(PageStabilityError):
    """Raised when configuration or a wait/retry spec is invalid."""

    def __init__(self, reason: str):
        super().__init__(
            f"Invalid configuration: {reason}",
            {"reason": reason, "error_code": "CONFIGURATION_ERROR"}
        )


class ExecutionFault(PageStabilityError):
    """Raised when a script cannot be executed against the page. Fatal."""

    def __init__(self, script: str, reason: str):
        super().__init__(
            f"Script execution failed: {reason}",
            {"script": script[:200], "reason": reason, "error_code": "EXECUTION_FAULT"}
        )


class NotApplicableFault(PageStabilityError):
    """
    Raised when a readiness check does not apply to the current page.

    A probe raising this is treated as satisfied, e.g. an Angular probe on a
    page that has no Angular application.
    """

    def __init__(self, reason: str):
        super().__init__(
            f"Check not applicable: {reason}",
            {"reason": reason, "error_code": "NOT_APPLICABLE"}
        )


class StaleReferenceFault(PageStabilityError):
    """Raised when an element or frame reference went stale. Retryable."""

    def __init__(self, reference: str, reason: Optional[str] = None):
        message = f"Stale reference: {reference}"
        if reason:
            message += f" - {reason}"
        super().__init__(
            message,
            {"reference": reference, "reason": reason, "error_code": "STALE_REFERENCE"}
        )


class UnknownFrameError(StaleReferenceFault):
    """Raised when a frame element has no attached content frame yet."""

    def __init__(self, selector: str):
        super().__init__(selector, "frame content is not available")
        self.details["error_code"] = "UNKNOWN_FRAME"


class ElementNotFoundError(PageStabilityError):
    """Raised when element cannot be found."""

    def __init__(self, selector: str):
        super().__init__(
            f"Element not found: {selector}",
            {"selector": selector, "error_code": "ELEMENT_NOT_FOUND"}
        )


class WaitTimeoutError(PageStabilityError):
    """Raised when a stability wait runs out of time."""

    def __init__(self, description: str, timeout: float, elapsed: Optional[float] = None):
        message = f"Timed out after {timeout}s: {description}"
        super().__init__(
            message,
            {
                "description": description,
                "timeout": timeout,
                "elapsed": elapsed,
                "error_code": "TIMEOUT",
            }
        )
        self.description = description
        self.timeout = timeout
        self.elapsed = elapsed


def is_transient_fault(fault: BaseException) -> bool:
    """Default retry predicate: only stale references are worth retrying."""
    return isinstance(fault, StaleReferenceFault)
