from .compare import compare_quanta, run_once
from .datasets import PRESETS, clone_processes, load_preset, load_processes_json
from .errors import (
    DuplicatePID,
    InvalidConfiguration,
    InvalidProcess,
    InvariantViolation,
    NotFound,
    SchedulerError,
    SchedulerStateError,
)
from .metrics import compute_metrics, summarize
from .models import Process, ProcessSpec, Slice
from .scheduler import (
    DEFAULT_QUANTUM,
    RoundRobinStrategy,
    Scheduler,
    SchedulerType,
    SchedulingStrategy,
    create_scheduler,
)
from .table import ProcessTable

__all__ = [
    "Process",
    "ProcessSpec",
    "Slice",
    "ProcessTable",
    "Scheduler",
    "SchedulingStrategy",
    "RoundRobinStrategy",
    "SchedulerType",
    "create_scheduler",
    "DEFAULT_QUANTUM",
    "compute_metrics",
    "summarize",
    "PRESETS",
    "clone_processes",
    "load_preset",
    "load_processes_json",
    "run_once",
    "compare_quanta",
    "SchedulerError",
    "InvalidConfiguration",
    "InvalidProcess",
    "InvariantViolation",
    "DuplicatePID",
    "NotFound",
    "SchedulerStateError",
]
