class SchedulerError(Exception):
    """Base class for every error raised by the simulation engine."""


class InvalidConfiguration(SchedulerError, ValueError):
    """Scheduler configuration is unusable (e.g. a quantum below 1)."""


class InvalidProcess(SchedulerError, ValueError):
    """A process was described with a negative or non-integer field."""


class DuplicatePID(SchedulerError, ValueError):
    def __init__(self, pid: int):
        super().__init__(f"pid {pid} already exists")
        self.pid = pid


class NotFound(SchedulerError, LookupError):
    def __init__(self, pid: int):
        super().__init__(f"pid {pid} not found")
        self.pid = pid


class SchedulerStateError(SchedulerError, RuntimeError):
    """run() was called on a scheduler that is not idle."""


class InvariantViolation(SchedulerError, RuntimeError):
    """Internal bookkeeping broke (clock moved backwards, a process completed twice)."""
