from dataclasses import dataclass
from typing import NamedTuple, Optional


@dataclass
class Process:
    pid: int
    arrival_time: int

    # Total CPU time the process needs (never mutated, used for metrics)
    burst_time: int

    # Runtime state
    remaining_time: int = 0
    waiting_time: int = 0

    start_time: Optional[int] = None
    completion_time: Optional[int] = None   # None until remaining_time hits 0

    # NEW/READY/RUNNING/DONE
    state: str = "NEW"

    def __post_init__(self):
        self.remaining_time = int(self.burst_time)

    @property
    def done(self) -> bool:
        return self.completion_time is not None

    @property
    def turnaround_time(self) -> Optional[int]:
        if self.completion_time is None:
            return None
        return self.completion_time - self.arrival_time

    @property
    def response_time(self) -> Optional[int]:
        if self.start_time is None:
            return None
        return self.start_time - self.arrival_time


class ProcessSpec(NamedTuple):
    """Static description of a process before it is admitted."""

    pid: int
    arrival_time: int
    burst_time: int


class Slice(NamedTuple):
    """One dispatch: `pid` held the CPU from `start` to `end`."""

    pid: int
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start
