# debug_painter/__init__.py
"""
Console painting, call timing and step breakdowns for local debugging.

Usage:
    1. Run the demo:
       python -m debug_painter

    2. In code:
       from debug_painter import DebugPainter

       painter = DebugPainter({"slow_threshold": 50})
       painter.console.warn("cache miss", key)
       painter.watch(client, "fetch")

       group_id = painter.start_group("import")
       painter.add_step(group_id, "parse")
       painter.end_group(group_id)

       print(painter.get_stats())
"""

from .config import PainterConfig
from .console import Console, resolve_call_site, stream_console
from .exceptions import ConfigurationError, DebugPainterError, WatchTargetError
from .handler import PainterHandler
from .models import LogEntry, Step, TimingGroup
from .painter import DebugPainter
from .report import render_group_report

__all__ = [
    "DebugPainter",
    "PainterConfig",
    "Console",
    "stream_console",
    "resolve_call_site",
    "PainterHandler",
    "LogEntry",
    "Step",
    "TimingGroup",
    "render_group_report",
    "DebugPainterError",
    "ConfigurationError",
    "WatchTargetError",
]
