"""Script execution and element lookup over a Playwright page."""

from typing import Any, Awaitable, Callable, List, Optional, Protocol, Union, TYPE_CHECKING, runtime_checkable

from playwright.async_api import ElementHandle, Error as PlaywrightError, Frame, Page

from ..config import StabilityConfig
from ..types.models import RetrySpec, WaitResult
from ..utils.logger import PageStabilityLogger, get_logger
from .errors import (
    ElementNotFoundError,
    ExecutionFault,
    StaleReferenceFault,
    UnknownFrameError,
)
from .retry import RetryingLookup

if TYPE_CHECKING:
    from .waiter import StabilityWaiter

# Playwright reports these when the node or document it was holding has gone away
STALE_MARKERS = (
    "execution context was destroyed",
    "frame was detached",
    "not attached to the dom",
    "element is detached",
    "cannot find context with specified id",
)


@runtime_checkable
class ScriptExecutor(Protocol):
    """What probes and lookups need from the page under test."""

    async def execute(self, script: str, *args: Any) -> Any:
        ...

    async def locate(self, selector: str) -> Any:
        ...


AfterHook = Callable[["PlaywrightSession"], Awaitable[Any]]


def _is_stale(error: Exception) -> bool:
    message = str(error).lower()
    return any(marker in message for marker in STALE_MARKERS)


def _translate(error: PlaywrightError, reference: str, operation: str) -> Exception:
    """Map a Playwright error to StaleReferenceFault (retryable) or ExecutionFault (fatal)."""
    if _is_stale(error):
        return StaleReferenceFault(reference, str(error))
    return ExecutionFault(operation, str(error))


class PlaywrightSession:
    """
    ScriptExecutor backed by a Playwright Page or Frame.

    Translates Playwright errors into the fault classes the waiter and the
    retrying lookup understand, switches into iframes, and runs after-hooks
    (typically page-load waits) registered by the caller.
    """

    def __init__(
        self,
        target: Union[Page, Frame],
        config: Optional[StabilityConfig] = None,
        logger: Optional[PageStabilityLogger] = None,
    ):
        """
        Initialize PlaywrightSession.

        Args:
            target: Playwright Page or Frame scripts are evaluated in
            config: Timeouts and retry budget, defaults to StabilityConfig()
            logger: Logger instance
        """
        self._target = target
        self.config = config or StabilityConfig()
        self._logger = logger or get_logger("session")
        self._lookup = RetryingLookup(self._logger)
        self.after_hooks: List[AfterHook] = []

    @property
    def target(self) -> Union[Page, Frame]:
        return self._target

    @property
    def logger(self) -> PageStabilityLogger:
        return self._logger

    async def execute(self, script: str, *args: Any) -> Any:
        """
        Evaluate a JavaScript expression or function in the target.

        Raises:
            StaleReferenceFault: The document navigated away or the frame detached
            ExecutionFault: The script itself failed
        """
        try:
            return await self._target.evaluate(script, *args)
        except PlaywrightError as e:
            raise _translate(e, "execution context", script) from e

    async def locate(self, selector: str) -> ElementHandle:
        """
        Find the first element matching ``selector``.

        Raises:
            ElementNotFoundError: Nothing matches
            StaleReferenceFault: The document went away mid-lookup
            ExecutionFault: The lookup itself failed, e.g. a malformed selector
        """
        try:
            handle = await self._target.query_selector(selector)
        except PlaywrightError as e:
            raise _translate(e, selector, f"query_selector({selector!r})") from e
        if handle is None:
            raise ElementNotFoundError(selector)
        return handle

    async def switch_to_frame(self, selector: str) -> "PlaywrightSession":
        """
        Return a session bound to the content of the iframe at ``selector``.

        A freshly inserted or reloaded iframe can briefly have no content
        frame; that and stale handles are retried within the configured
        frame_switch_attempts.
        """
        async def resolve() -> Frame:
            handle = await self.locate(selector)
            try:
                frame = await handle.content_frame()
            except PlaywrightError as e:
                raise _translate(e, selector, f"content_frame({selector!r})") from e
            if frame is None:
                raise UnknownFrameError(selector)
            return frame

        spec = RetrySpec(
            max_attempts=self.config.frame_switch_attempts,
            description=f"switch to frame {selector}",
        )
        frame = await self._lookup.attempt(spec, resolve)

        self._logger.debug("session:frame", "Switched to frame", selector=selector)
        return PlaywrightSession(frame, self.config, self._logger.child(frame=selector))

    def add_after_hook(self, hook: AfterHook) -> None:
        """Register a hook to run after each browser action, e.g. wait_for_page_load()."""
        self.after_hooks.append(hook)

    async def run_after_hooks(self) -> None:
        """Run after-hooks in registration order. A failing hook stops the chain."""
        for hook in self.after_hooks:
            self._logger.debug(
                "session:hook",
                "Running after-hook",
                hook=getattr(hook, "__name__", repr(hook)),
            )
            await hook(self)

    async def wait_for_page_load(
        self,
        timeout: Optional[float] = None,
        waiter: Optional["StabilityWaiter"] = None,
    ) -> WaitResult:
        """Block until Angular and jQuery (where present) report idle."""
        # Import here to avoid circular dependency
        from ..page_load import page_load_spec
        from .waiter import StabilityWaiter

        spec = page_load_spec(
            self,
            timeout=timeout or self.config.timeout,
            poll_interval=self.config.poll_interval,
        )
        waiter = waiter or StabilityWaiter(self._logger)
        return await waiter.wait_or_raise(spec)

    def __getattr__(self, name: str) -> Any:
        """Proxy other attributes to the Playwright target."""
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._target, name)

    def __repr__(self) -> str:
        return f"PlaywrightSession(target={self._target!r})"
