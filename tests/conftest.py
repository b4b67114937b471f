"""Pytest configuration and fixtures for repeater tests."""

import asyncio
from typing import Any, Callable

import pytest
from dotenv import load_dotenv

from repeater import Repeater, repeat

# Load environment variables from .env file
load_dotenv()


class FakeSleep:
    """Delay primitive that records requested durations instead of waiting."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        # Yield once so background tasks and stop() callers can interleave
        await asyncio.sleep(0)

    @property
    def total(self) -> float:
        return sum(self.calls)


@pytest.fixture
def fake_sleep() -> FakeSleep:
    """Provide a recording sleep function."""
    return FakeSleep()


@pytest.fixture
def calls() -> list[int]:
    """Collect call indices passed to an action."""
    return []


@pytest.fixture
def make_repeater(fake_sleep: FakeSleep) -> Callable[..., Repeater]:
    """Build repeaters wired to the fake sleep."""

    def _make(action: Callable[[int], Any], **options: Any) -> Repeater:
        options.setdefault("sleep", fake_sleep)
        return repeat(action, **options)

    return _make
