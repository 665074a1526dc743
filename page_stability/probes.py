"""Built-in readiness probes for Angular and jQuery applications."""

from .core.probe import Probe, predicate_probe
from .core.session import ScriptExecutor
from .types.models import ProbeResult

NG_APP_ROOT = "document.querySelectorAll('[ng-app]')[0]"

# Arms a flag on the root scope that Angular's testability API flips once
# all outstanding $http requests and $timeouts have settled.
ANGULAR_ARM_SCRIPT = f"""
() => {{
    const root = {NG_APP_ROOT};
    if (!root || typeof angular === 'undefined') return 'absent';
    const scope = angular.element(root).scope();
    if (!scope) return 'absent';
    scope.pageFinishedRendering = false;
    angular.getTestability(root).whenStable(function () {{
        angular.element(root).scope().pageFinishedRendering = true;
    }});
    return 'armed';
}}
"""

ANGULAR_CHECK_SCRIPT = f"""
() => {{
    const root = {NG_APP_ROOT};
    if (!root || typeof angular === 'undefined') return 'absent';
    const scope = angular.element(root).scope();
    if (!scope) return 'absent';
    return scope.pageFinishedRendering === true;
}}
"""

AJAX_CHECK_SCRIPT = """
() => {
    if (typeof jQuery === 'undefined') return 'absent';
    return jQuery.active;
}
"""

ABSENT = "absent"


def angular_probe(executor: ScriptExecutor) -> Probe:
    """
    Probe that holds once Angular reports the page stable.

    Not applicable when the page has no [ng-app] root or no angular global.
    """
    async def arm() -> ProbeResult:
        state = await executor.execute(ANGULAR_ARM_SCRIPT)
        if state == ABSENT:
            return ProbeResult.NOT_APPLICABLE
        return ProbeResult.NOT_SATISFIED

    async def check() -> ProbeResult:
        finished = await executor.execute(ANGULAR_CHECK_SCRIPT)
        if finished == ABSENT:
            return ProbeResult.NOT_APPLICABLE
        return ProbeResult.from_value(finished is True)

    return Probe("angular", check, setup=arm)


def ajax_probe(executor: ScriptExecutor) -> Probe:
    """
    Probe that holds once jQuery has no active AJAX requests.

    Not applicable when jQuery is not loaded.
    """
    async def check() -> ProbeResult:
        active = await executor.execute(AJAX_CHECK_SCRIPT)
        if active == ABSENT:
            return ProbeResult.NOT_APPLICABLE
        return ProbeResult.from_value(not active)

    return Probe("ajax", check)


__all__ = ["angular_probe", "ajax_probe", "predicate_probe", "Probe"]
