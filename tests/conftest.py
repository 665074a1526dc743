"""Pytest configuration and fixtures for page_stability tests."""

import pytest

from page_stability.core.waiter import StabilityWaiter

from .fakes import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def waiter(clock: FakeClock) -> StabilityWaiter:
    return StabilityWaiter(clock=clock, sleep=clock.sleep)
