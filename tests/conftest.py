"""Pytest configuration and shared fixtures."""

import pytest


class FakeClock:
    """Deterministic millisecond clock; each call advances by `step`."""

    def __init__(self, start: int = 1_000, step: int = 250) -> None:
        self.now = start
        self.step = step
        self.calls = 0

    def __call__(self) -> int:
        value = self.now
        self.now += self.step
        self.calls += 1
        return value


@pytest.fixture
def clock() -> FakeClock:
    """Clock starting at 1000 ms, advancing 250 ms per reading."""
    return FakeClock()
