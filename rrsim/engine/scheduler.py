import logging
from collections import deque
from enum import Enum
from typing import Deque, Dict, List, Optional, Protocol

from .errors import InvalidConfiguration, InvariantViolation, SchedulerStateError
from .models import Process, Slice
from .table import ProcessTable

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 4

IDLE = "IDLE"
RUNNING = "RUNNING"
TERMINATED = "TERMINATED"


class SchedulingStrategy(Protocol):
    name: str

    def run(self, scheduler: "Scheduler") -> None:
        ...


class Scheduler:
    """
    Owns the process table, the ready queue (pids, FIFO) and the simulated
    clock, and hands them to a scheduling strategy for one run.

    Lifecycle: IDLE -> RUNNING -> TERMINATED. Only reset() goes back to IDLE.
    """

    def __init__(self, strategy: SchedulingStrategy, event_log_limit: int = 120):
        self.strategy = strategy
        self.table = ProcessTable()
        self.event_log_limit = event_log_limit
        self.reset()

    def reset(self):
        self.time = 0
        self.status = IDLE
        self.table.clear()
        self.ready_queue: Deque[int] = deque()

        # One Slice per dispatch, in dispatch order
        self.gantt_chart: List[Slice] = []

        # Transition log for visualizing process state changes
        self.event_log: List[str] = []

    # -------- Table access --------
    def admit(self, pid: int, arrival_time: int, burst: int) -> Optional[Process]:
        proc = self.table.admit(pid, arrival_time, burst)
        if proc is None:
            self._log_event(f"t={self.time}: rejected {pid} (burst 0)")
        return proc

    def lookup(self, pid: int) -> Process:
        return self.table.lookup(pid)

    def all_processes(self) -> List[Process]:
        return self.table.all()

    def current_time(self) -> int:
        return self.time

    def queued_pids(self) -> List[int]:
        return list(self.ready_queue)

    def done(self) -> bool:
        return all(p.done for p in self.table)

    # -------- Run --------
    def run(self):
        if self.status != IDLE:
            raise SchedulerStateError(f"cannot run a scheduler in state {self.status}; call reset() first")

        self.status = RUNNING
        logger.info(
            "Running %s on %d processes", self.strategy.name, len(self.table)
        )
        self.strategy.run(self)
        self.status = TERMINATED
        logger.info("Finished at t=%d after %d dispatches", self.time, len(self.gantt_chart))

    # -------- Helpers used by strategies --------
    def enqueue(self, proc: Process, detail: str = ""):
        self.ready_queue.append(proc.pid)
        self._set_state(proc, "READY", detail)

    def advance_to(self, new_time: int):
        if new_time < self.time:
            raise InvariantViolation(f"clock cannot move backwards ({self.time} -> {new_time})")
        self._log_event(f"t={self.time}: CPU idle until t={new_time}")
        self.time = new_time

    def dispatch(self, proc: Process):
        self._set_state(proc, "RUNNING")
        if proc.start_time is None:
            proc.start_time = self.time

    def complete(self, proc: Process):
        if proc.completion_time is not None:
            raise InvariantViolation(f"pid {proc.pid} completed twice")
        proc.completion_time = self.time
        self._set_state(proc, "DONE")

    def record_slice(self, item: Slice):
        self.gantt_chart.append(item)

    def update_waiting_times(self, running_pid: int, start: int, end: int, joined: Dict[int, int]):
        """
        Credit waiting time to every queued pid other than the one that just ran.

        A pid admitted during the slice (recorded in `joined` with its
        admission time) only waited from that point until `end`.
        """
        for pid in self.ready_queue:
            if pid == running_pid:
                continue
            proc = self.table.lookup(pid)
            proc.waiting_time += end - joined.get(pid, start)

    def _log_event(self, msg: str):
        self.event_log.append(msg)
        if len(self.event_log) > self.event_log_limit:
            self.event_log = self.event_log[-self.event_log_limit:]

    def _set_state(self, p: Process, new_state: str, detail: str = ""):
        old = p.state
        if old != new_state:
            p.state = new_state
            extra = f" {detail}" if detail else ""
            self._log_event(f"t={self.time}: {p.pid} {old} -> {new_state}{extra}")


class RoundRobinStrategy:
    """Preemptive round robin with a fixed quantum."""

    name = "RR"

    def __init__(self, quantum: int = DEFAULT_QUANTUM):
        if isinstance(quantum, bool) or not isinstance(quantum, int) or quantum < 1:
            raise InvalidConfiguration(f"quantum must be an integer >= 1, got {quantum!r}")
        self.quantum = quantum

    def run(self, scheduler: Scheduler):
        # Arrival schedule: (arrival_time, pid) ascending, computed once
        schedule = sorted(scheduler.all_processes(), key=lambda p: (p.arrival_time, p.pid))
        next_to_admit = 0
        queue = scheduler.ready_queue

        def admit_arrivals() -> List[int]:
            nonlocal next_to_admit
            admitted = []
            while next_to_admit < len(schedule) and schedule[next_to_admit].arrival_time <= scheduler.time:
                proc = schedule[next_to_admit]
                next_to_admit += 1
                scheduler.enqueue(proc)
                admitted.append(proc.pid)
            return admitted

        while queue or next_to_admit < len(schedule):
            admit_arrivals()

            # Nothing ready: jump straight to the next arrival, or stop
            if not queue:
                if next_to_admit < len(schedule):
                    scheduler.advance_to(schedule[next_to_admit].arrival_time)
                    continue
                break

            pid = queue.popleft()
            proc = scheduler.lookup(pid)
            scheduler.dispatch(proc)

            start = scheduler.time
            joined: Dict[int, int] = {}
            for _ in range(min(self.quantum, proc.remaining_time)):
                proc.remaining_time -= 1
                scheduler.time += 1
                # Arrivals during the slice queue up ahead of the preempted process
                for arrived in admit_arrivals():
                    joined[arrived] = scheduler.time
            end = scheduler.time

            if proc.remaining_time > 0:
                scheduler.enqueue(proc, "(time slice)")
            else:
                scheduler.complete(proc)

            scheduler.record_slice(Slice(pid, start, end))
            scheduler.update_waiting_times(pid, start, end, joined)


class SchedulerType(Enum):
    ROUND_ROBIN = "RR"


def create_scheduler(kind: SchedulerType = SchedulerType.ROUND_ROBIN, quantum: int = DEFAULT_QUANTUM) -> Scheduler:
    if kind is SchedulerType.ROUND_ROBIN:
        return Scheduler(RoundRobinStrategy(quantum))
    raise InvalidConfiguration(f"unsupported scheduler type: {kind!r}")
