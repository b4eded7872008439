import logging
from typing import Dict, Iterator, List, Optional

from .errors import DuplicatePID, InvalidProcess, NotFound
from .models import Process

logger = logging.getLogger(__name__)


def _check_non_negative(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidProcess(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidProcess(f"{name} must be >= 0, got {value}")
    return value


class ProcessTable:
    """
    Authoritative store of process records.

    Records live in a contiguous list (admission order) and are indexed by
    pid through a dict of slot numbers, so lookup is O(1) and reporting can
    iterate in the order processes were admitted.
    """

    def __init__(self):
        self._records: List[Process] = []
        self._slot_of: Dict[int, int] = {}

    def admit(self, pid: int, arrival_time: int, burst: int) -> Optional[Process]:
        """Create and store a record; zero-burst processes are dropped and None is returned."""
        _check_non_negative("pid", pid)
        _check_non_negative("arrival_time", arrival_time)
        _check_non_negative("burst", burst)

        if burst == 0:
            logger.warning("Ignored process with burst 0 (pid=%d)", pid)
            return None
        if pid in self._slot_of:
            raise DuplicatePID(pid)

        proc = Process(pid=pid, arrival_time=arrival_time, burst_time=burst)
        self._slot_of[pid] = len(self._records)
        self._records.append(proc)
        logger.debug("Added process pid=%d arrival=%d burst=%d", pid, arrival_time, burst)
        return proc

    def lookup(self, pid: int) -> Process:
        slot = self._slot_of.get(pid)
        if slot is None:
            raise NotFound(pid)
        return self._records[slot]

    def all(self) -> List[Process]:
        return list(self._records)

    def clear(self):
        self._records.clear()
        self._slot_of.clear()

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, pid: object) -> bool:
        return pid in self._slot_of

    def __iter__(self) -> Iterator[Process]:
        return iter(self._records)
