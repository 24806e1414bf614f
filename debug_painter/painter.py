# debug_painter/painter.py
# =============================================================================
# DEBUG PAINTER
# =============================================================================
#
# Console interception, call timing and step breakdowns for local debugging.
#
#   painter = DebugPainter({"slow_threshold": 50})
#   painter.console.info("loading", path)
#   painter.watch(service, "fetch")
#
#   group_id = painter.start_group("import")
#   ...
#   painter.add_step(group_id, "parse")
#   ...
#   painter.add_step(group_id, "store")
#   painter.end_group(group_id)
#
# =============================================================================

import time
import asyncio
import inspect
import logging
import functools
import itertools
from collections import Counter
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .colors import colorize
from .config import PainterConfig
from .console import Console, ConsoleMethod, resolve_call_site, stream_console
from .exceptions import DebugPainterError, WatchTargetError
from .handler import PainterHandler
from .memory import bytes_to_mb, resident_memory
from .models import LOG_CATEGORIES, LogEntry, TimingGroup
from .report import render_group_report

logger = logging.getLogger(__name__)

RECENT_LOG_COUNT = 5

# Set on every callable produced by DebugPainter.instrument
INSTRUMENTED_MARKER = "__debug_painter_instrumented__"

_MISSING = object()


def _perf_counter_ms() -> float:
    return time.perf_counter() * 1000


class DebugPainter:
    """
    Instrumentation facade.

    Owns the recorded log, the live timing groups and the intercepted
    console. Nothing here raises for unknown group ids: instrumentation
    should never take the instrumented program down.
    """

    def __init__(
        self,
        options: Optional[Union[PainterConfig, Mapping[str, Any]]] = None,
        console: Optional[Console] = None,
        clock: Optional[Callable[[], float]] = None,
        memory_probe: Optional[Callable[[], int]] = None,
        **overrides: Any,
    ):
        """
        Args:
            options: Option mapping or PainterConfig merged over the defaults
            console: Host console to intercept (defaults to stdout/stderr printing)
            clock: Monotonic clock in milliseconds
            memory_probe: Returns current process memory in bytes
            **overrides: Option values applied after `options`
        """
        self.options = PainterConfig.build(options, **overrides)

        self._clock = clock or _perf_counter_ms
        self._memory_probe = memory_probe or resident_memory

        self._logs: List[LogEntry] = []
        self._timers: Dict[str, TimingGroup] = {}
        self._group_sequence = itertools.count(1)

        self._installed: List[Tuple[Any, Console]] = []
        self._logging_handlers: List[Tuple[logging.Logger, PainterHandler]] = []

        self.host_console = console or stream_console()
        self.console = self._intercept(self.host_console)

    # =========================================================================
    # LOG INTERCEPTOR
    # =========================================================================

    def colorize(self, text: str, category: str) -> str:
        return colorize(text, category, self.options.colorize)

    def _intercept(self, console: Console) -> Console:
        return Console(**{
            category: self._wrap_entry_point(category, original)
            for category, original in console.entry_points().items()
        })

    def _wrap_entry_point(self, category: str, original: ConsoleMethod) -> ConsoleMethod:
        def entry_point(*args: Any) -> None:
            timestamp = datetime.now().strftime("%H:%M:%S")
            call_site = resolve_call_site()

            prefix = self.colorize(f"[{timestamp}] {call_site} →", category)
            original(prefix, *args)

            self.record_entry(category, args, call_site=call_site, timestamp=timestamp)

        entry_point.__name__ = category
        entry_point.__wrapped__ = original
        return entry_point

    def record_entry(
        self,
        category: str,
        args: Tuple[Any, ...],
        call_site: str,
        timestamp: Optional[str] = None,
    ) -> LogEntry:
        """Append a LogEntry without printing anything."""
        entry = LogEntry(
            category=category,
            timestamp=timestamp or datetime.now().strftime("%H:%M:%S"),
            call_site=call_site,
            args=tuple(args),
        )
        self._logs.append(entry)
        return entry

    @property
    def logs(self) -> Tuple[LogEntry, ...]:
        return tuple(self._logs)

    def install(self, namespace: Any) -> Console:
        """
        Replace the log/error/warn/info attributes of `namespace` with
        intercepted versions.

        Installing twice stacks: the second install wraps whatever is
        currently installed. Use uninstall() to put the originals back.

        Returns:
            The entry points that were replaced
        """
        missing = [name for name in LOG_CATEGORIES if not callable(getattr(namespace, name, None))]
        if missing:
            raise DebugPainterError(
                f"{namespace!r} has no callable entry points for: {', '.join(missing)}",
                context={"missing": missing},
            )

        previous = Console.from_namespace(namespace)
        for name, method in self._intercept(previous).entry_points().items():
            setattr(namespace, name, method)

        self._installed.append((namespace, previous))
        logger.info(f"[DEBUG_PAINTER] Installed console interceptors on {namespace!r}")
        return previous

    def uninstall(self) -> None:
        """Restore every namespace patched by install(), most recent first."""
        while self._installed:
            namespace, previous = self._installed.pop()
            for name, method in previous.entry_points().items():
                setattr(namespace, name, method)
            logger.info(f"[DEBUG_PAINTER] Restored console entry points on {namespace!r}")

    def attach_logging(
        self,
        target: Optional[logging.Logger] = None,
        level: int = logging.NOTSET,
    ) -> PainterHandler:
        """Record records handled by `target` (the root logger by default) as log entries."""
        target = target or logging.getLogger()
        handler = PainterHandler(self, level=level)
        target.addHandler(handler)
        self._logging_handlers.append((target, handler))
        return handler

    def detach_logging(self) -> None:
        while self._logging_handlers:
            target, handler = self._logging_handlers.pop()
            target.removeHandler(handler)

    # =========================================================================
    # CALL WRAPPER
    # =========================================================================

    def watch(self, target: Any, method_name: str) -> None:
        """
        Replace target.<method_name> with an instrumented version.

        Watching the same method twice composes the wrappers; each layer
        measures on its own.

        Raises:
            WatchTargetError: If the attribute is missing or not callable
        """
        original = getattr(target, method_name, _MISSING)
        if original is _MISSING:
            raise WatchTargetError(
                f"Cannot watch {method_name!r}: {target!r} has no such attribute",
                context={"method": method_name},
            )
        if not callable(original):
            raise WatchTargetError(
                f"Cannot watch {method_name!r}: {type(original).__name__} is not callable",
                context={"method": method_name},
            )

        static_attr = inspect.getattr_static(target, method_name, None) if inspect.isclass(target) else None

        wrapper: Any
        if isinstance(static_attr, classmethod):
            # rewrap the unbound function so subclasses still receive their own cls
            wrapper = classmethod(self.instrument(static_attr.__func__, name=method_name))
        else:
            wrapper = self.instrument(original, name=method_name)
            if isinstance(static_attr, staticmethod):
                wrapper = staticmethod(wrapper)

        setattr(target, method_name, wrapper)
        logger.debug(f"[DEBUG_PAINTER] Watching {method_name} on {target!r}")

    def instrument(self, func: Optional[Callable] = None, name: Optional[str] = None):
        """
        Wrap a callable with call, duration and memory logging.

        Usable directly or as a decorator:

            fetch = painter.instrument(fetch)

            @painter.instrument(name="load")
            def load_rows(path):
                ...

        Coroutine functions get a coroutine function back, which logs the
        call when awaited. Other awaitable results are returned still pending;
        the performance line is logged once they settle. Synchronous
        exceptions are logged and re-raised as-is.
        """
        if func is None:
            return functools.partial(self.instrument, name=name)

        method_name = name or getattr(func, "__name__", repr(func))
        if getattr(func, INSTRUMENTED_MARKER, False):
            logger.warning(
                f"[DEBUG_PAINTER] {method_name} is already instrumented; wrappers will compose"
            )

        painter = self

        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                start_time, start_memory = painter._log_call(method_name, args, kwargs)
                try:
                    return await func(*args, **kwargs)
                finally:
                    painter.log_performance(method_name, start_time, start_memory)

            setattr(async_wrapper, INSTRUMENTED_MARKER, True)
            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time, start_memory = painter._log_call(method_name, args, kwargs)

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                painter.console.error(f"Error in {method_name}:", e)
                raise

            if isinstance(result, asyncio.Future):
                result.add_done_callback(
                    lambda _: painter.log_performance(method_name, start_time, start_memory)
                )
                return result

            if inspect.isawaitable(result):
                return painter._settle(result, method_name, start_time, start_memory)

            painter.log_performance(method_name, start_time, start_memory)
            return result

        setattr(wrapper, INSTRUMENTED_MARKER, True)
        return wrapper

    def _log_call(self, method_name: str, args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> Tuple[float, int]:
        start_time = self._clock()
        start_memory = self._memory_probe()

        call_args = (args, kwargs) if kwargs else (args,)
        self.console.log(self.colorize(f"→ Calling {method_name} with:", "info"), *call_args)
        return start_time, start_memory

    async def _settle(self, awaitable: Awaitable, method_name: str, start_time: float, start_memory: int):
        try:
            return await awaitable
        finally:
            self.log_performance(method_name, start_time, start_memory)

    def log_performance(self, method_name: str, start_time: float, start_memory: int) -> None:
        """Log how long a call took and how much memory it added."""
        if not self.options.show_timings:
            return

        duration = self._clock() - start_time
        duration_color = "warn" if duration > self.options.slow_threshold else "time"

        parts = [
            self.colorize(f"← {method_name} completed in:", duration_color),
            f"{duration:.2f}ms",
        ]
        if self.options.show_memory:
            memory_used = bytes_to_mb(self._memory_probe() - start_memory)
            parts.append(self.colorize(f"(Memory: {memory_used:.2f}MB)", "info"))

        self.console.log(*parts)

    # =========================================================================
    # GROUP TIMER
    # =========================================================================

    def start_group(self, name: str) -> str:
        """Start a timing group and return its id."""
        group_id = f"{name}_{int(time.time() * 1000)}_{next(self._group_sequence)}"
        self._timers[group_id] = TimingGroup(group_id=group_id, name=name, start=self._clock())
        logger.debug(f"[DEBUG_PAINTER] START group: {group_id}")
        return group_id

    def add_step(self, group_id: str, step_name: str) -> None:
        """Close a step at the current time. Unknown ids are ignored."""
        group = self._timers.get(group_id)
        if group is None:
            logger.debug(f"[DEBUG_PAINTER] add_step ignored, unknown group: {group_id!r}")
            return

        group.checkpoint(step_name, self._clock())

    def end_group(self, group_id: str) -> None:
        """Print the step breakdown of a group and forget it. Unknown ids are ignored."""
        group = self._timers.get(group_id)
        if group is None:
            logger.debug(f"[DEBUG_PAINTER] end_group ignored, unknown group: {group_id!r}")
            return

        total_duration = self._clock() - group.start
        for line in render_group_report(group, total_duration, self.options.colorize):
            self.console.log(line)

        del self._timers[group_id]
        logger.debug(f"[DEBUG_PAINTER] END group: {group_id} ({total_duration:.2f}ms)")

    @property
    def active_groups(self) -> Tuple[str, ...]:
        return tuple(self._timers)

    # =========================================================================
    # STATS / RESET
    # =========================================================================

    def get_stats(self) -> Dict[str, Any]:
        """
        Summary of the recorded log.

        Keys are snake_case only. The camelCase spellings accepted by
        PainterConfig are an input convenience and are not mirrored here.

        Returns:
            total_logs: Entries recorded since the last clear
            by_type: Count per category (only categories that occurred)
            recent_logs: Up to the last five entries, oldest first
        """
        return {
            "total_logs": len(self._logs),
            "by_type": dict(Counter(entry.category for entry in self._logs)),
            "recent_logs": self._logs[-RECENT_LOG_COUNT:],
        }

    def clear_logs(self) -> None:
        """Drop all recorded entries and abandon live groups without reporting them."""
        abandoned = len(self._timers)
        self._logs.clear()
        self._timers.clear()
        if abandoned:
            logger.debug(f"[DEBUG_PAINTER] Cleared logs, abandoned {abandoned} live group(s)")
