"""Polling engine that waits for a set of probes to report stable."""

import asyncio
import time
from typing import Awaitable, Callable, List, Optional

from ..types.models import ProbeResult, WaitResult, WaitSpec, WaitStatus
from ..utils.logger import PageStabilityLogger, get_logger
from .probe import Probe


class StabilityWaiter:
    """
    Polls probes until all of them hold on a single cycle or the
    WaitSpec's timeout elapses.

    Elapsed time is read from ``clock`` (monotonic seconds) and the pause
    between cycles goes through ``sleep``; both are injectable so timing can
    be driven from tests.
    """

    def __init__(
        self,
        logger: Optional[PageStabilityLogger] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._logger = logger or get_logger("waiter")
        self._clock = clock
        self._sleep = sleep

    async def wait(self, spec: WaitSpec) -> WaitResult:
        """
        Wait until every probe in ``spec`` is satisfied or not applicable.

        Args:
            spec: What to wait for and for how long

        Returns:
            WaitResult with status OK, or TIMED_OUT once the deadline passed

        Raises:
            Any fault raised by a probe other than NotApplicableFault. Such
            faults abort the wait as soon as they happen. A failing teardown
            is raised only when the wait itself completed.
        """
        if not spec.probes:
            return WaitResult(status=WaitStatus.OK, description=spec.description, timeout=spec.timeout)

        start = self._clock()
        self._logger.debug(
            "wait:start",
            "Waiting for stability",
            description=spec.description,
            timeout=spec.timeout,
            probes=[p.name for p in spec.probes],
        )

        pending: List[Probe] = []
        skipped: List[str] = []
        armed: List[Probe] = []
        polls = 0
        failed = False

        try:
            for probe in spec.probes:
                outcome = await probe.arm()
                armed.append(probe)
                if outcome is ProbeResult.NOT_APPLICABLE:
                    skipped.append(probe.name)
                else:
                    pending.append(probe)

            while True:
                polls += 1
                if await self._poll_cycle(pending, skipped):
                    elapsed = self._clock() - start
                    self._logger.debug(
                        "wait:ok",
                        "Page stable",
                        description=spec.description,
                        elapsed=round(elapsed, 3),
                        polls=polls,
                    )
                    return WaitResult(
                        status=WaitStatus.OK,
                        description=spec.description,
                        elapsed=elapsed,
                        polls=polls,
                        timeout=spec.timeout,
                        not_applicable=skipped,
                    )

                elapsed = self._clock() - start
                if elapsed >= spec.timeout:
                    self._logger.warn(
                        "wait:timeout",
                        f"Timed out {spec.description}",
                        timeout=spec.timeout,
                        elapsed=round(elapsed, 3),
                        polls=polls,
                        pending=[p.name for p in pending],
                    )
                    return WaitResult(
                        status=WaitStatus.TIMED_OUT,
                        description=spec.description,
                        elapsed=elapsed,
                        polls=polls,
                        timeout=spec.timeout,
                        not_applicable=skipped,
                    )

                await self._sleep(min(spec.poll_interval, spec.timeout - elapsed))
        except BaseException:
            failed = True
            raise
        finally:
            await self._disarm(armed, raise_errors=not failed)

    async def wait_or_raise(self, spec: WaitSpec) -> WaitResult:
        """Like wait(), but raise WaitTimeoutError instead of returning TIMED_OUT."""
        result = await self.wait(spec)
        return result.raise_for_timeout()

    async def _disarm(self, armed: List[Probe], raise_errors: bool) -> None:
        """
        Tear down every armed probe, even when one of the teardowns fails.

        With ``raise_errors`` the first teardown failure is re-raised after
        all have run. Otherwise failures are only logged so the fault already
        propagating out of the wait reaches the caller unchanged.
        """
        first: Optional[Exception] = None
        for probe in armed:
            try:
                await probe.disarm()
            except Exception as e:
                self._logger.error(
                    "wait:teardown",
                    f"Teardown failed for {probe.name}: {e}",
                    probe=probe.name,
                    error=str(e),
                )
                if first is None:
                    first = e
        if raise_errors and first is not None:
            raise first

    async def _poll_cycle(self, pending: List[Probe], skipped: List[str]) -> bool:
        """Evaluate every pending probe once; True when all of them are done."""
        all_done = True
        for probe in list(pending):
            result = await probe.poll()
            self._logger.debug("wait:poll", "Probe polled", probe=probe.name, result=result.value)
            if result is ProbeResult.NOT_APPLICABLE:
                pending.remove(probe)
                skipped.append(probe.name)
            elif result is ProbeResult.NOT_SATISFIED:
                all_done = False
        return all_done
