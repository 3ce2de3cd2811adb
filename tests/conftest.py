"""Shared fixtures.

The fake clock replaces the millisecond clock used by every primitive, so the
one second throughput window passes in a deterministic number of calls.
"""

import pytest

from blkarbs_bench import _core


class FakeClock:
    """Millisecond clock that advances ``step`` ms each time it is read."""

    def __init__(self, step: int = 1) -> None:
        self.now = 0
        self.step = step
        self.reads = 0

    def __call__(self) -> int:
        value = self.now
        self.now += self.step
        self.reads += 1
        return value

    def advance(self, ms: int) -> None:
        """Simulate work that takes ``ms`` milliseconds."""
        self.now += ms


@pytest.fixture
def fake_clock(monkeypatch: pytest.MonkeyPatch) -> FakeClock:
    clock = FakeClock()
    monkeypatch.setattr(_core, "_now_ms", clock)
    return clock


@pytest.fixture(scope="session")
def clock_factory() -> type[FakeClock]:
    """FakeClock class for tests that install a fresh clock per example."""
    return FakeClock
