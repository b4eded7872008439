from typing import Any, Dict, Iterable, List

from .datasets import clone_processes
from .metrics import summarize
from .models import ProcessSpec
from .scheduler import SchedulerType, create_scheduler


def run_once(specs: List[ProcessSpec], quantum: int) -> Dict[str, Any]:
    """Run a full simulation on a fresh clone of `specs` and return summary metrics."""
    sched = create_scheduler(SchedulerType.ROUND_ROBIN, quantum=quantum)
    for spec in clone_processes(specs):
        sched.admit(spec.pid, spec.arrival_time, spec.burst_time)
    sched.run()

    summary = summarize(sched)
    summary["quantum"] = int(quantum)
    return summary


def compare_quanta(specs: List[ProcessSpec], quanta: Iterable[int]) -> List[Dict[str, Any]]:
    """Return one summary per quantum, in the order given."""
    return [run_once(specs, q) for q in quanta]
