"""
Data models for recorded log calls and timing groups.

LogEntry and Step are frozen once created. TimingGroup is the only mutable
record: steps are appended to it until the group is ended.
"""

from typing import Any, List, Literal, Tuple

from pydantic import BaseModel, ConfigDict, Field

# Categories of the four intercepted entry points
LogCategory = Literal["log", "error", "warn", "info"]

LOG_CATEGORIES: Tuple[str, ...] = ("log", "error", "warn", "info")


class LogEntry(BaseModel):
    """One recorded call of an intercepted logging entry point."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    category: LogCategory
    timestamp: str
    call_site: str
    args: Tuple[Any, ...] = Field(default_factory=tuple)


class Step(BaseModel):
    """A checkpoint inside a timing group. Times are monotonic milliseconds."""

    model_config = ConfigDict(frozen=True)

    name: str
    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start


class TimingGroup(BaseModel):
    """A named run of contiguous steps between start_group and end_group."""

    group_id: str
    name: str
    start: float
    steps: List[Step] = Field(default_factory=list)

    def checkpoint(self, step_name: str, now: float) -> Step:
        """
        Append a step ending at `now`.

        The step starts where the previous one ended (or at the group start),
        so a step measures the time since the last checkpoint.
        """
        step_start = self.steps[-1].end if self.steps else self.start
        step = Step(name=step_name, start=step_start, end=now)
        self.steps.append(step)
        return step
