"""Call wrapper: watch() and instrument()."""

import asyncio
import inspect
import logging
from types import SimpleNamespace

import pytest

from debug_painter import DebugPainter, WatchTargetError
from debug_painter.colors import COLORS, RESET

MB = 1024 * 1024


class Inventory:
    def __init__(self, clock, memory):
        self.clock = clock
        self.memory = memory
        self.items = {"bolt": 3}

    def count(self, name, elapsed_ms=10.0):
        self.clock.advance(elapsed_ms)
        self.memory.grow(MB)
        return self.items[name]

    def explode(self, reason):
        raise RuntimeError(reason)

    async def fetch(self, name):
        await asyncio.sleep(0)
        self.clock.advance(25.0)
        return self.items[name]

    async def fetch_missing(self):
        await asyncio.sleep(0)
        raise KeyError("missing")


@pytest.fixture
def inventory(clock, memory):
    return Inventory(clock, memory)


def test_sync_call_logs_calling_and_performance_lines(painter, recorder, inventory):
    painter.watch(inventory, "count")

    assert inventory.count("bolt") == 3

    assert recorder.categories == ["log", "log"]
    calling = recorder.calls[0][1]
    assert calling[1] == f"{COLORS['info']}→ Calling count with:{RESET}"
    assert calling[2] == ("bolt",)

    perf = recorder.calls[1][1]
    assert perf[1:] == (
        f"{COLORS['time']}← count completed in:{RESET}",
        "10.00ms",
        f"{COLORS['info']}(Memory: 1.00MB){RESET}",
    )


def test_receiver_is_preserved(painter, inventory):
    painter.watch(inventory, "count")
    inventory.items["nut"] = 9

    assert inventory.count("nut") == 9


def test_kwargs_are_logged(painter, recorder, inventory):
    painter.watch(inventory, "count")
    inventory.count("bolt", elapsed_ms=1.0)

    calling = recorder.calls[0][1]
    assert calling[2:] == (("bolt",), {"elapsed_ms": 1.0})


def test_slow_call_uses_warn_color(painter, recorder, inventory):
    painter.watch(inventory, "count")
    inventory.count("bolt", elapsed_ms=150.0)

    perf = recorder.calls[-1][1]
    assert perf[1] == f"{COLORS['warn']}← count completed in:{RESET}"
    assert perf[2] == "150.00ms"


def test_threshold_is_exclusive(recorder, clock, memory, inventory):
    painter = DebugPainter({"slowThreshold": 10}, console=recorder.console(), clock=clock, memory_probe=memory)
    painter.watch(inventory, "count")
    inventory.count("bolt", elapsed_ms=10.0)

    assert recorder.calls[-1][1][1].startswith(COLORS["time"])


def test_failure_is_logged_and_reraised(painter, recorder, inventory):
    painter.watch(inventory, "explode")

    with pytest.raises(RuntimeError) as excinfo:
        inventory.explode("gearbox")

    assert str(excinfo.value) == "gearbox"
    assert recorder.categories == ["log", "error"]
    assert "Calling explode" in recorder.calls[0][1][1]
    error_args = recorder.calls[1][1]
    assert error_args[1] == "Error in explode:"
    assert error_args[2] is excinfo.value
    assert painter.get_stats()["by_type"]["error"] >= 1


def test_performance_lines_are_recorded(painter, inventory):
    painter.watch(inventory, "count")
    inventory.count("bolt")

    stats = painter.get_stats()
    assert stats["total_logs"] == 2
    assert stats["recent_logs"][-1].args[1] == "10.00ms"


def test_show_timings_off_suppresses_performance_line(recorder, clock, memory, inventory):
    painter = DebugPainter(show_timings=False, console=recorder.console(), clock=clock, memory_probe=memory)
    painter.watch(inventory, "count")
    inventory.count("bolt")

    assert recorder.categories == ["log"]


def test_show_memory_off_drops_memory_segment(recorder, clock, memory, inventory):
    painter = DebugPainter(
        {"showMemory": False, "colorize": False},
        console=recorder.console(), clock=clock, memory_probe=memory,
    )
    painter.watch(inventory, "count")
    inventory.count("bolt")

    assert recorder.calls[-1][1][1:] == ("← count completed in:", "10.00ms")


class TestAwaitables:

    def test_coroutine_logs_after_settlement(self, painter, recorder, inventory):
        painter.watch(inventory, "fetch")

        pending = inventory.fetch("bolt")
        assert recorder.categories == []

        assert asyncio.run(pending) == 3
        assert recorder.categories == ["log", "log"]
        assert recorder.calls[-1][1][2] == "25.00ms"

    def test_coroutine_function_stays_a_coroutine_function(self, painter, inventory):
        assert inspect.iscoroutinefunction(inventory.fetch)

        painter.watch(inventory, "fetch")

        assert inspect.iscoroutinefunction(inventory.fetch)
        assert inventory.fetch.__name__ == "fetch"

    def test_awaitable_from_plain_function_logs_after_settlement(self, painter, recorder, inventory):
        target = SimpleNamespace(later=lambda name: inventory.fetch(name))
        painter.watch(target, "later")

        pending = target.later("bolt")
        assert recorder.categories == ["log"]

        assert asyncio.run(pending) == 3
        assert recorder.categories == ["log", "log"]
        assert recorder.calls[-1][1][2] == "25.00ms"

    def test_coroutine_failure_propagates_unchanged(self, painter, recorder, inventory):
        painter.watch(inventory, "fetch_missing")

        with pytest.raises(KeyError):
            asyncio.run(inventory.fetch_missing())

        # the performance line still runs; no error line for async failures
        assert recorder.categories == ["log", "log"]
        assert "fetch_missing completed in" in recorder.calls[-1][1][1]

    def test_future_is_returned_as_is(self, painter, recorder):
        async def scenario():
            future = asyncio.get_running_loop().create_future()
            target = SimpleNamespace(pending=lambda: future)
            painter.watch(target, "pending")

            returned = target.pending()
            assert returned is future
            assert recorder.categories == ["log"]

            future.set_result(7)
            value = await returned
            await asyncio.sleep(0)
            return value

        assert asyncio.run(scenario()) == 7
        assert recorder.categories == ["log", "log"]


class TestTargets:

    def test_watch_on_class_keeps_method_binding(self, painter, recorder):
        class Scaler:
            factor = 2

            def scale(self, value):
                return value * self.factor

        painter.watch(Scaler, "scale")

        assert Scaler().scale(4) == 8
        assert recorder.calls[0][1][2][1] == 4

    def test_watch_on_static_and_class_methods(self, painter):
        class Registry:
            @staticmethod
            def add(a, b):
                return a + b

            @classmethod
            def label(cls):
                return cls.__name__

        painter.watch(Registry, "add")
        painter.watch(Registry, "label")

        assert Registry.add(1, 2) == 3
        assert Registry().add(2, 2) == 4
        assert Registry.label() == "Registry"
        assert Registry().label() == "Registry"

    def test_watched_classmethod_binds_subclass(self, painter, recorder):
        class Base:
            @classmethod
            def label(cls):
                return cls.__name__

        class Child(Base):
            pass

        painter.watch(Base, "label")

        assert isinstance(inspect.getattr_static(Base, "label"), classmethod)
        assert Child.label() == "Child"
        assert Child().label() == "Child"
        assert Base.label() == "Base"
        assert recorder.calls[0][1][2] == (Child,)

    def test_watch_on_module_like_namespace(self, painter):
        namespace = SimpleNamespace(square=lambda x: x * x)
        painter.watch(namespace, "square")

        assert namespace.square(5) == 25
        assert painter.get_stats()["total_logs"] == 2

    def test_missing_attribute_is_rejected(self, painter, inventory):
        with pytest.raises(WatchTargetError):
            painter.watch(inventory, "does_not_exist")

    def test_non_callable_attribute_is_rejected(self, painter, inventory):
        with pytest.raises(WatchTargetError):
            painter.watch(inventory, "items")

    def test_watch_twice_composes(self, painter, recorder, inventory, caplog):
        painter.watch(inventory, "count")
        with caplog.at_level(logging.WARNING, logger="debug_painter.painter"):
            painter.watch(inventory, "count")

        assert "already instrumented" in caplog.text
        assert inventory.count("bolt") == 3
        assert recorder.categories == ["log"] * 4


def test_instrument_as_decorator(painter, recorder):
    @painter.instrument(name="load")
    def load_rows(path):
        """Load rows."""
        return [path]

    assert load_rows("a.csv") == ["a.csv"]
    assert load_rows.__name__ == "load_rows"
    assert load_rows.__doc__ == "Load rows."
    assert "Calling load with" in recorder.calls[0][1][1]


def test_instrument_without_arguments(painter, recorder):
    @painter.instrument
    def ping():
        return "pong"

    assert ping() == "pong"
    assert "Calling ping with" in recorder.calls[0][1][1]
