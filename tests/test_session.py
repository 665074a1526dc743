"""Tests for the Playwright-backed session adapter."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError

from page_stability.config import StabilityConfig
from page_stability.core.errors import (
    ElementNotFoundError,
    ExecutionFault,
    StaleReferenceFault,
    UnknownFrameError,
    WaitTimeoutError,
)
from page_stability.core.session import PlaywrightSession, ScriptExecutor
from page_stability.page_load import wait_for_page_load
from page_stability.probes import AJAX_CHECK_SCRIPT, ANGULAR_ARM_SCRIPT, ANGULAR_CHECK_SCRIPT

from .fakes import FakeExecutor


@pytest.fixture
def page():
    page = MagicMock()
    page.evaluate = AsyncMock()
    page.query_selector = AsyncMock()
    return page


@pytest.fixture
def session(page):
    return PlaywrightSession(page)


def frame_handle(*frames):
    handle = MagicMock()
    handle.content_frame = AsyncMock(side_effect=list(frames))
    return handle


def test_session_is_a_script_executor(session):
    assert isinstance(session, ScriptExecutor)


@pytest.mark.asyncio
async def test_execute_returns_evaluation_result(session, page):
    page.evaluate.return_value = 3

    assert await session.execute("() => jQuery.active") == 3
    page.evaluate.assert_awaited_once_with("() => jQuery.active")


@pytest.mark.asyncio
async def test_execute_maps_destroyed_context_to_stale_reference(session, page):
    page.evaluate.side_effect = PlaywrightError(
        "Execution context was destroyed, most likely because of a navigation"
    )

    with pytest.raises(StaleReferenceFault):
        await session.execute("() => 1")


@pytest.mark.asyncio
async def test_execute_maps_script_errors_to_execution_fault(session, page):
    page.evaluate.side_effect = PlaywrightError("ReferenceError: angular is not defined")

    with pytest.raises(ExecutionFault) as exc_info:
        await session.execute("() => angular.version")

    assert "angular is not defined" in exc_info.value.details["reason"]
    assert isinstance(exc_info.value.__cause__, PlaywrightError)


@pytest.mark.asyncio
async def test_locate_returns_handle(session, page):
    handle = MagicMock()
    page.query_selector.return_value = handle

    assert await session.locate("#submit") is handle


@pytest.mark.asyncio
async def test_locate_missing_element(session, page):
    page.query_selector.return_value = None

    with pytest.raises(ElementNotFoundError) as exc_info:
        await session.locate("#missing")

    assert exc_info.value.details["selector"] == "#missing"


@pytest.mark.asyncio
async def test_locate_maps_selector_errors_to_execution_fault(session, page):
    page.query_selector.side_effect = PlaywrightError("Unexpected token \"]\" while parsing selector")

    with pytest.raises(ExecutionFault) as exc_info:
        await session.locate("div[")

    assert "query_selector" in exc_info.value.details["script"]
    assert isinstance(exc_info.value.__cause__, PlaywrightError)
    page.query_selector.assert_awaited_once()


@pytest.mark.asyncio
async def test_locate_maps_detached_frame_to_stale_reference(session, page):
    page.query_selector.side_effect = PlaywrightError("Frame was detached")

    with pytest.raises(StaleReferenceFault) as exc_info:
        await session.locate("#submit")

    assert exc_info.value.details["reference"] == "#submit"


@pytest.mark.asyncio
async def test_switch_to_frame_retries_once_when_frame_not_ready(session, page):
    frame = MagicMock()
    page.query_selector.return_value = frame_handle(None, frame)

    frame_session = await session.switch_to_frame("iframe#content")

    assert isinstance(frame_session, PlaywrightSession)
    assert frame_session.target is frame
    assert page.query_selector.await_count == 2


@pytest.mark.asyncio
async def test_switch_to_frame_retries_stale_lookup(session, page):
    frame = MagicMock()
    page.query_selector.side_effect = [
        PlaywrightError("Element is not attached to the DOM"),
        frame_handle(frame),
    ]

    frame_session = await session.switch_to_frame("iframe#content")

    assert frame_session.target is frame


@pytest.mark.asyncio
async def test_switch_to_frame_gives_up_after_configured_attempts(page):
    session = PlaywrightSession(page, StabilityConfig(frame_switch_attempts=3))
    page.query_selector.return_value = frame_handle(None, None, None)

    with pytest.raises(UnknownFrameError):
        await session.switch_to_frame("iframe#content")

    assert page.query_selector.await_count == 3


@pytest.mark.asyncio
async def test_switch_to_missing_frame_is_not_retried(session, page):
    page.query_selector.return_value = None

    with pytest.raises(ElementNotFoundError):
        await session.switch_to_frame("iframe#nope")

    assert page.query_selector.await_count == 1


@pytest.mark.asyncio
async def test_after_hooks_run_in_registration_order(session):
    order = []

    async def first(s):
        order.append(("first", s))

    async def second(s):
        order.append(("second", s))

    session.add_after_hook(first)
    session.add_after_hook(second)
    await session.run_after_hooks()

    assert order == [("first", session), ("second", session)]


@pytest.mark.asyncio
async def test_page_load_hook_logs_through_session_logger(page):
    logger = MagicMock()
    session = PlaywrightSession(page, logger=logger)
    scripted = FakeExecutor({
        ANGULAR_ARM_SCRIPT: ["absent"],
        AJAX_CHECK_SCRIPT: [0],
    })
    page.evaluate.side_effect = scripted.execute

    session.add_after_hook(wait_for_page_load(timeout=5))
    await session.run_after_hooks()

    categories = [c.args[0] for c in logger.debug.call_args_list]
    assert "wait:start" in categories
    assert "wait:ok" in categories


@pytest.mark.asyncio
async def test_wait_for_page_load_through_playwright_evaluate(session, page, waiter):
    scripted = FakeExecutor({
        ANGULAR_ARM_SCRIPT: ["absent"],
        AJAX_CHECK_SCRIPT: [1, 1, 0],
    })
    page.evaluate.side_effect = scripted.execute

    result = await session.wait_for_page_load(timeout=5, waiter=waiter)

    assert result.ok
    assert result.polls == 3
    assert scripted.count(ANGULAR_CHECK_SCRIPT) == 0


@pytest.mark.asyncio
async def test_wait_for_page_load_timeout_uses_config(page, waiter):
    session = PlaywrightSession(page, StabilityConfig(timeout=1, poll_interval=0.5))
    scripted = FakeExecutor({
        ANGULAR_ARM_SCRIPT: ["armed"],
        ANGULAR_CHECK_SCRIPT: [False],
        AJAX_CHECK_SCRIPT: [0],
    })
    page.evaluate.side_effect = scripted.execute

    with pytest.raises(WaitTimeoutError) as exc_info:
        await session.wait_for_page_load(waiter=waiter)

    assert exc_info.value.timeout == 1


def test_unknown_attributes_proxy_to_page(session, page):
    page.url = "https://example.com/orders"

    assert session.url == "https://example.com/orders"
