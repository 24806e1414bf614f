"""ANSI colour codes for painted output."""

from typing import Dict

RESET = "\x1b[0m"

# "time" is used for performance lines under the slow threshold
COLORS: Dict[str, str] = {
    "log": "\x1b[0m",     # white
    "error": "\x1b[31m",  # red
    "warn": "\x1b[33m",   # yellow
    "info": "\x1b[36m",   # cyan
    "time": "\x1b[32m",   # green
}


def colorize(text: str, category: str, enabled: bool = True) -> str:
    """Wrap text in the colour for `category`. Unknown categories get no colour code."""
    if not enabled:
        return text
    return f"{COLORS.get(category, '')}{text}{RESET}"
