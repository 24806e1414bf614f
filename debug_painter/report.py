"""
Bar-chart rendering for finished timing groups.
"""

import math
from typing import List

from .colors import colorize
from .models import TimingGroup

BAR_WIDTH = 50
FILLED_CELL = "█"
EMPTY_CELL = "░"


def step_percentage(duration: float, total: float) -> float:
    """Share of `total` taken by `duration`, in percent. 0 when total is 0 or the result is not finite."""
    if total <= 0:
        return 0.0
    percentage = duration / total * 100
    return percentage if math.isfinite(percentage) else 0.0


def bar_cells(percentage: float) -> int:
    """Filled cells for a percentage: one cell per 2%, clamped to the bar width."""
    if not math.isfinite(percentage):
        return 0
    return max(0, min(BAR_WIDTH, math.floor(percentage / 2)))


def render_bar(percentage: float) -> str:
    filled = bar_cells(percentage)
    return FILLED_CELL * filled + EMPTY_CELL * (BAR_WIDTH - filled)


def render_group_report(group: TimingGroup, total: float, use_color: bool = True) -> List[str]:
    """
    Render the performance breakdown of a timing group.

    Args:
        group: The group being ended
        total: Wall-clock duration of the group in ms (not the sum of steps)
        use_color: Whether to colour the header

    Returns:
        The report, one string per console line
    """
    lines = [
        "\n" + colorize(f"Performance Analysis: {group.name}", "info", use_color),
        "┌" + "─" * BAR_WIDTH + "┐",
    ]

    for index, step in enumerate(group.steps, 1):
        percentage = step_percentage(step.duration, total)
        lines.append(f"│ {render_bar(percentage)} │")
        lines.append(f"│ Step {index}: {step.name}")
        lines.append(f"│ Duration: {step.duration:.2f}ms ({percentage:.1f}%)")
        lines.append("│" + "─" * BAR_WIDTH + "│")

    lines.append(f"└ Total: {total:.2f}ms ┘\n")
    return lines
