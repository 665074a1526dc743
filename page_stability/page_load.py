"""
Page-load waits built from the Angular and AJAX probes.

The ``wait_for_*_completion`` factories return hooks meant to be registered
on a session and run after each browser action:

    session.add_after_hook(wait_for_page_load())
    ...
    await session.run_after_hooks()

Waits started on a PlaywrightSession log through that session's logger.
"""

from typing import Any, Awaitable, Callable, Dict, Optional

from .core.session import PlaywrightSession, ScriptExecutor
from .core.waiter import StabilityWaiter
from .probes import ajax_probe, angular_probe
from .types.models import WaitResult, WaitSpec

DEFAULT_TIMEOUT = 30.0
DEFAULT_POLL_INTERVAL = 0.1

PageHook = Callable[[ScriptExecutor], Awaitable[WaitResult]]


def _waiter_for(executor: ScriptExecutor, waiter_options: Dict[str, Any]) -> StabilityWaiter:
    options = dict(waiter_options)
    if isinstance(executor, PlaywrightSession):
        options.setdefault("logger", executor.logger)
    return StabilityWaiter(**options)


def page_load_spec(
    executor: ScriptExecutor,
    timeout: float = DEFAULT_TIMEOUT,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> WaitSpec:
    """Angular idle and AJAX idle, checked together on every poll."""
    return WaitSpec(
        timeout=timeout,
        poll_interval=min(poll_interval, timeout),
        probes=[angular_probe(executor), ajax_probe(executor)],
        description="waiting for page load",
    )


async def wait_for_angular(
    executor: ScriptExecutor,
    timeout: float = DEFAULT_TIMEOUT,
    waiter: Optional[StabilityWaiter] = None,
) -> WaitResult:
    spec = WaitSpec(
        timeout=timeout,
        poll_interval=min(DEFAULT_POLL_INTERVAL, timeout),
        probes=[angular_probe(executor)],
        description="waiting for angular to render",
    )
    return await (waiter or _waiter_for(executor, {})).wait_or_raise(spec)


async def wait_for_ajax(
    executor: ScriptExecutor,
    timeout: float = DEFAULT_TIMEOUT,
    waiter: Optional[StabilityWaiter] = None,
) -> WaitResult:
    spec = WaitSpec(
        timeout=timeout,
        poll_interval=min(DEFAULT_POLL_INTERVAL, timeout),
        probes=[ajax_probe(executor)],
        description="waiting for ajax",
    )
    return await (waiter or _waiter_for(executor, {})).wait_or_raise(spec)


def wait_for_page_load(timeout: float = DEFAULT_TIMEOUT, **waiter_options: Any) -> PageHook:
    """Hook that waits for Angular and AJAX activity to finish."""
    async def hook(executor: ScriptExecutor) -> WaitResult:
        spec = page_load_spec(executor, timeout=timeout)
        return await _waiter_for(executor, waiter_options).wait_or_raise(spec)

    hook.__name__ = "wait_for_page_load"
    return hook


def wait_for_angular_completion(timeout: float = DEFAULT_TIMEOUT, **waiter_options: Any) -> PageHook:
    """Hook that waits for Angular to report stable."""
    async def hook(executor: ScriptExecutor) -> WaitResult:
        return await wait_for_angular(executor, timeout, _waiter_for(executor, waiter_options))

    hook.__name__ = "wait_for_angular_completion"
    return hook


def wait_for_ajax_completion(timeout: float = DEFAULT_TIMEOUT, **waiter_options: Any) -> PageHook:
    """Hook that waits for jQuery AJAX requests to finish."""
    async def hook(executor: ScriptExecutor) -> WaitResult:
        return await wait_for_ajax(executor, timeout, _waiter_for(executor, waiter_options))

    hook.__name__ = "wait_for_ajax_completion"
    return hook
