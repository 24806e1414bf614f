"""
Process memory probe.

Reads the resident set size of the current process through psutil. When the
counter cannot be read the probe reports 0 bytes, so memory deltas come out
as 0.00MB instead of breaking the instrumented call.
"""

import os
import logging
from typing import Optional

import psutil

logger = logging.getLogger(__name__)

# Cached per pid; a forked child builds its own handle
_process: Optional[psutil.Process] = None

BYTES_PER_MB = 1024 * 1024


def current_process() -> psutil.Process:
    global _process
    if _process is None or _process.pid != os.getpid():
        _process = psutil.Process()
    return _process


def resident_memory() -> int:
    """Current resident memory of this process in bytes (0 if unreadable)."""
    try:
        return current_process().memory_info().rss
    except psutil.Error as e:
        logger.debug(f"[DEBUG_PAINTER] Memory probe unavailable: {type(e).__name__}: {e}")
        return 0


def bytes_to_mb(value: float) -> float:
    return value / BYTES_PER_MB
