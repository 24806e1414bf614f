"""
Console capability and call-site resolution.

A Console is the logging surface the painter intercepts: four callables,
one per category. The default console prints log/info to stdout and
warn/error to stderr, looking the streams up on every call so redirected
or captured streams are honoured.
"""

import re
import sys
import inspect
import traceback
from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, Optional

from .models import LOG_CATEGORIES

ConsoleMethod = Callable[..., None]

UNKNOWN_CALL_SITE = "<unknown>"

# Matches the location part of a formatted stack frame:
#   File "/path/to/module.py", line 42, in func
_FRAME_LOCATION = re.compile(r'File "(.+?)", line (\d+)')


@dataclass(frozen=True)
class Console:
    """Four logging entry points: log, error, warn, info."""

    log: ConsoleMethod
    error: ConsoleMethod
    warn: ConsoleMethod
    info: ConsoleMethod

    def entry_points(self) -> Dict[str, ConsoleMethod]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_namespace(cls, namespace: Any) -> "Console":
        """Read the four entry points off any object that carries them."""
        return cls(**{name: getattr(namespace, name) for name in LOG_CATEGORIES})


def _stream_printer(stream_name: str) -> ConsoleMethod:
    def emit(*args: Any) -> None:
        print(*args, file=getattr(sys, stream_name))
    emit.__name__ = f"print_to_{stream_name}"
    return emit


def stream_console() -> Console:
    """The default host console."""
    return Console(
        log=_stream_printer("stdout"),
        error=_stream_printer("stderr"),
        warn=_stream_printer("stderr"),
        info=_stream_printer("stdout"),
    )


def resolve_call_site(depth: int = 2) -> str:
    """
    Best-effort source location of a caller.

    Args:
        depth: How many frames above this function's caller to look.
            The default names the caller of the function that called
            resolve_call_site().

    Returns:
        "path:line" when the formatted frame has a recognisable location,
        otherwise the raw frame text, or "<unknown>" when the stack is
        shallower than requested.
    """
    frame: Optional[Any] = inspect.currentframe()
    try:
        for _ in range(depth):
            if frame is None:
                break
            frame = frame.f_back
        if frame is None:
            return UNKNOWN_CALL_SITE

        formatted = traceback.format_stack(frame, limit=1)
        if not formatted:
            return UNKNOWN_CALL_SITE

        raw = formatted[-1]
        match = _FRAME_LOCATION.search(raw)
        if match:
            return f"{match.group(1)}:{match.group(2)}"
        return raw.strip() or UNKNOWN_CALL_SITE
    finally:
        del frame
