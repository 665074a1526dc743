"""Readiness probes evaluated by the stability waiter."""

import inspect
from typing import Any, Awaitable, Callable, Optional, Union

from ..types.models import ProbeResult
from .errors import NotApplicableFault

CheckResult = Union[bool, ProbeResult]
CheckFn = Callable[[], Union[CheckResult, Awaitable[CheckResult]]]
SetupFn = Callable[[], Any]


async def _call(fn: Callable[[], Any]) -> Any:
    result = fn()
    if inspect.isawaitable(result):
        result = await result
    return result


class Probe:
    """
    A named readiness condition.

    The check is polled by the waiter and answers whether the condition holds
    right now. An optional setup runs once per wait before the first poll
    (e.g. arming a flag the check then reads) and an optional teardown runs
    once when the wait ends.

    Both setup and check may signal that the probe does not apply to the
    current page, either by returning ProbeResult.NOT_APPLICABLE or by
    raising NotApplicableFault. That is converted here, so callers of
    ``arm``/``poll`` only ever see a ProbeResult or a real fault.
    """

    def __init__(
        self,
        name: str,
        check: CheckFn,
        setup: Optional[SetupFn] = None,
        teardown: Optional[SetupFn] = None,
    ):
        self.name = name
        self._check = check
        self._setup = setup
        self._teardown = teardown

    async def arm(self) -> ProbeResult:
        """
        Run the setup step.

        Returns NOT_APPLICABLE if the probe should be skipped for this wait,
        NOT_SATISFIED otherwise (armed, poll it).
        """
        if self._setup is None:
            return ProbeResult.NOT_SATISFIED
        try:
            result = await _call(self._setup)
        except NotApplicableFault:
            return ProbeResult.NOT_APPLICABLE
        if result is ProbeResult.NOT_APPLICABLE:
            return ProbeResult.NOT_APPLICABLE
        return ProbeResult.NOT_SATISFIED

    async def poll(self) -> ProbeResult:
        """Evaluate the check once."""
        try:
            result = await _call(self._check)
        except NotApplicableFault:
            return ProbeResult.NOT_APPLICABLE
        return ProbeResult.from_value(result)

    async def disarm(self) -> None:
        if self._teardown is not None:
            await _call(self._teardown)

    def __repr__(self) -> str:
        return f"Probe({self.name!r})"


def predicate_probe(name: str, fn: CheckFn) -> Probe:
    """Wrap a plain callable returning a bool (or ProbeResult) as a probe."""
    return Probe(name, fn)
