"""
Error types raised by debug_painter.

Instrumentation is best effort: most misuse (unknown group ids, unreadable
memory counters, unmatched stack frames) is absorbed silently. The types
below cover the few places where the caller has to hear about it.
"""

from typing import Any, Dict, Optional


class DebugPainterError(Exception):
    """Base exception for debug_painter errors"""
    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class ConfigurationError(DebugPainterError, ValueError):
    """An option or environment variable holds an unusable value"""
    pass


class WatchTargetError(DebugPainterError, TypeError):
    """watch() was pointed at a missing or non-callable attribute"""
    pass
