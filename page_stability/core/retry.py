"""Bounded retry for lookups that can lose a race against a stale reference."""

import functools
import inspect
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_none,
)

from ..types.models import RetrySpec
from ..utils.logger import PageStabilityLogger, get_logger

T = TypeVar("T")

Operation = Callable[[], Union[T, Awaitable[T]]]


class RetryingLookup:
    """
    Runs an operation and re-runs it while it fails with a retryable fault.

    Attempt n fails with a fault the RetrySpec's ``retryable`` predicate accepts
    and n < max_attempts: run attempt n + 1 straight away. Any other failure,
    or a retryable one on the last attempt, re-raises that exact exception.
    """

    def __init__(self, logger: Optional[PageStabilityLogger] = None):
        self._logger = logger or get_logger("retry")

    async def attempt(self, spec: RetrySpec, op: Operation[T]) -> T:
        """
        Execute ``op`` under ``spec``.

        Args:
            spec: Retry policy
            op: Zero-argument callable, sync or async

        Returns:
            The value of the first successful attempt
        """
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(spec.max_attempts),
            wait=wait_none(),
            retry=retry_if_exception(spec.retryable),
            after=self._log_exhausted(spec),
            before_sleep=self._log_retry(spec),
            reraise=True,
        ):
            with attempt:
                self._logger.debug(
                    "retry:attempt",
                    "Running lookup",
                    lookup=spec.description,
                    attempt=attempt.retry_state.attempt_number,
                    max_attempts=spec.max_attempts,
                )
                result = op()
                if inspect.isawaitable(result):
                    result = await result
                return result

    def _log_exhausted(self, spec: RetrySpec) -> Callable[[RetryCallState], None]:
        # tenacity calls ``after`` only for failures the retry predicate accepted
        def after(retry_state: RetryCallState) -> None:
            if retry_state.attempt_number < spec.max_attempts:
                return
            error = retry_state.outcome.exception() if retry_state.outcome else None
            self._logger.warn(
                "retry:exhausted",
                f"Lookup failed after {spec.max_attempts} attempts",
                lookup=spec.description,
                error=str(error),
            )
        return after

    def _log_retry(self, spec: RetrySpec) -> Callable[[RetryCallState], None]:
        def before_sleep(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception() if retry_state.outcome else None
            self._logger.debug(
                "retry:transient",
                "Transient fault, retrying",
                lookup=spec.description,
                attempt=retry_state.attempt_number,
                error=str(error),
            )
        return before_sleep


def retrying(spec: Optional[RetrySpec] = None, logger: Optional[PageStabilityLogger] = None):
    """
    Decorator form of RetryingLookup for async functions.

    Examples:
        @retrying(RetrySpec(max_attempts=2, description="switch frame"))
        async def switch(): ...
    """
    retry_spec = spec or RetrySpec()

    def decorator(fn: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return await RetryingLookup(logger).attempt(retry_spec, lambda: fn(*args, **kwargs))
        return wrapper

    return decorator
