"""Shared fixtures: a console that records instead of printing, and controllable clock/memory."""

from typing import Any, List, Tuple

import pytest

from debug_painter import Console, DebugPainter
from debug_painter.models import LOG_CATEGORIES


class ConsoleRecorder:
    """Host console stand-in. Every call lands in `calls` as (category, args)."""

    def __init__(self):
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []

    def console(self) -> Console:
        return Console(**{category: self._slot(category) for category in LOG_CATEGORIES})

    def _slot(self, category: str):
        def emit(*args):
            self.calls.append((category, args))
        return emit

    @property
    def categories(self) -> List[str]:
        return [category for category, _ in self.calls]

    def lines(self) -> List[Any]:
        """Everything after the prefix of single-argument calls."""
        return [args[1] for _, args in self.calls if len(args) == 2]


class FakeClock:
    """Monotonic clock in milliseconds that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def advance(self, ms: float) -> None:
        self.now += ms

    def __call__(self) -> float:
        return self.now


class FakeMemory:
    def __init__(self, value: int = 50 * 1024 * 1024):
        self.value = value

    def grow(self, n_bytes: int) -> None:
        self.value += n_bytes

    def __call__(self) -> int:
        return self.value


@pytest.fixture
def recorder():
    return ConsoleRecorder()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory():
    return FakeMemory()


@pytest.fixture
def painter(recorder, clock, memory):
    return DebugPainter(console=recorder.console(), clock=clock, memory_probe=memory)


@pytest.fixture
def plain_painter(recorder, clock, memory):
    """Painter with colour turned off."""
    return DebugPainter({"colorize": False}, console=recorder.console(), clock=clock, memory_probe=memory)
