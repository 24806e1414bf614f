"""
Bridge from the standard logging module into a painter's log.

Records are stored as LogEntry values without being printed again; the
handlers already attached to the logger take care of output.
"""

import logging
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .painter import DebugPainter


def category_for_level(levelno: int) -> str:
    """Map a logging level onto one of the painter's categories."""
    if levelno >= logging.ERROR:
        return "error"
    if levelno >= logging.WARNING:
        return "warn"
    if levelno >= logging.INFO:
        return "info"
    return "log"


class PainterHandler(logging.Handler):
    """Records every handled logging record into a DebugPainter."""

    def __init__(self, painter: "DebugPainter", level: int = logging.NOTSET):
        super().__init__(level)
        self.painter = painter
        # The painter's own diagnostics would otherwise show up in its stats
        self.addFilter(lambda record: not record.name.startswith("debug_painter"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.painter.record_entry(
                category_for_level(record.levelno),
                (record.getMessage(),),
                call_site=f"{record.pathname}:{record.lineno}",
                timestamp=datetime.fromtimestamp(record.created).strftime("%H:%M:%S"),
            )
        except Exception:
            self.handleError(record)
