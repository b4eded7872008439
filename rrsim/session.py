import logging
from threading import Lock
from typing import Any, Dict, List, Optional, Type

from rrsim.engine import (
    DEFAULT_QUANTUM,
    InvalidConfiguration,
    InvalidProcess,
    ProcessSpec,
    Scheduler,
    SchedulerError,
    SchedulerType,
    create_scheduler,
)
from rrsim.serializers import default_state, serialize_process, serialize_state

logger = logging.getLogger(__name__)

_session_lock = Lock()

scheduler: Optional[Scheduler] = None
base_processes: List[ProcessSpec] = []
settings: Dict[str, Any] = {
    "quantum": DEFAULT_QUANTUM,
    "event_log_limit": 120,
}
event_log: List[str] = []


def _safe_int(value: Any, default: int) -> int:
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return int(default)
        try:
            if text.lower().startswith("0x"):
                return int(text, 16)
            return int(text, 10)
        except ValueError:
            return int(default)
    try:
        return int(value)
    except (TypeError, ValueError):
        return int(default)


def parse_int(value: Any, name: str, error: Type[SchedulerError]) -> int:
    """Coerce a JSON value to int; bools and fractional numbers are rejected with `error`."""
    if isinstance(value, bool):
        raise error(f"{name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip(), 10)
        except ValueError:
            pass
    raise error(f"{name} must be an integer, got {value!r}")


def _parse_quantum(value: Any) -> int:
    quantum = parse_int(value, "quantum", InvalidConfiguration)
    if quantum < 1:
        raise InvalidConfiguration(f"quantum must be an integer >= 1, got {value!r}")
    return quantum


def build_spec(item: Dict[str, Any]) -> ProcessSpec:
    if not isinstance(item, dict):
        raise InvalidProcess(f"process must be an object, got {item!r}")
    if "pid" not in item or "burst_time" not in item:
        raise InvalidProcess("process needs 'pid' and 'burst_time'")
    return ProcessSpec(
        pid=parse_int(item["pid"], "pid", InvalidProcess),
        arrival_time=parse_int(item.get("arrival_time", 0), "arrival_time", InvalidProcess),
        burst_time=parse_int(item["burst_time"], "burst_time", InvalidProcess),
    )


def _new_scheduler_from_base() -> Scheduler:
    sched = create_scheduler(SchedulerType.ROUND_ROBIN, quantum=int(settings["quantum"]))
    sched.event_log_limit = int(settings["event_log_limit"])
    for spec in base_processes:
        sched.admit(spec.pid, spec.arrival_time, spec.burst_time)
    return sched


def _trim_event_log() -> None:
    global event_log
    limit = int(settings["event_log_limit"])
    if len(event_log) > limit:
        event_log = event_log[-limit:]


def _state() -> Dict[str, Any]:
    if scheduler is None:
        return default_state(settings, event_log)
    return serialize_state(scheduler, settings, event_log)


def reset_session() -> Dict[str, Any]:
    global scheduler, base_processes, event_log
    with _session_lock:
        if scheduler is not None:
            scheduler.reset()
        base_processes = []
        event_log = ["Reset"]
        return _state()


def init_session(payload: Dict[str, Any]) -> Dict[str, Any]:
    global scheduler, base_processes, event_log

    data = payload or {}
    with _session_lock:
        quantum = _parse_quantum(data.get("quantum", settings["quantum"]))
        payload_processes = data.get("processes")
        if payload_processes is None:
            payload_processes = []
        if not isinstance(payload_processes, list):
            raise InvalidProcess(f"processes must be an array, got {payload_processes!r}")
        specs = [build_spec(item) for item in payload_processes]

        # Build into a scratch scheduler first so a bad payload leaves the session untouched
        previous = (settings["quantum"], base_processes)
        settings["quantum"] = quantum
        base_processes = specs
        try:
            fresh = _new_scheduler_from_base()
        except Exception:
            settings["quantum"], base_processes = previous
            raise

        # Zero-burst entries were dropped by the table
        base_processes = [s for s in specs if s.pid in fresh.table]
        scheduler = fresh
        event_log = [f"Initialized quantum={quantum} processes={len(base_processes)}"]
        logger.info("Session initialized with %d processes, quantum=%d", len(base_processes), quantum)
        return _state()


def add_process(item: Dict[str, Any]) -> Dict[str, Any]:
    global scheduler, event_log
    with _session_lock:
        spec = build_spec(item)

        # Admission only makes sense before a run; admit into a rebuilt idle
        # scheduler and swap it in only after a successful admit
        target = scheduler
        if target is None or target.status != "IDLE":
            target = _new_scheduler_from_base()

        if target.admit(spec.pid, spec.arrival_time, spec.burst_time) is None:
            event_log.append(f"Ignored {spec.pid} (burst 0)")
        else:
            base_processes.append(spec)
            scheduler = target
            event_log.append(f"Added {spec.pid} AT={spec.arrival_time} BT={spec.burst_time}")
        _trim_event_log()
        return _state()


def run_session() -> Dict[str, Any]:
    global scheduler
    with _session_lock:
        if scheduler is None:
            scheduler = _new_scheduler_from_base()
        scheduler.run()
        event_log.append(f"Run -> t={scheduler.current_time()}")
        _trim_event_log()
        return _state()


def set_config(payload: Dict[str, Any]) -> Dict[str, Any]:
    global scheduler
    data = payload or {}
    with _session_lock:
        if "quantum" in data:
            settings["quantum"] = _parse_quantum(data["quantum"])
        if "event_log_limit" in data:
            settings["event_log_limit"] = max(1, _safe_int(data["event_log_limit"], 120))

        # A new quantum only applies to a fresh run
        scheduler = _new_scheduler_from_base()
        event_log.append(f"Config quantum={settings['quantum']}")
        _trim_event_log()

        return {
            "ok": True,
            "config": {
                "quantum": int(settings["quantum"]),
                "event_log_limit": int(settings["event_log_limit"]),
            },
        }


def lookup_process(pid: Any) -> Dict[str, Any]:
    with _session_lock:
        sched = scheduler if scheduler is not None else _new_scheduler_from_base()
        return serialize_process(sched.lookup(_safe_int(pid, -1)))


def get_state() -> Dict[str, Any]:
    with _session_lock:
        return _state()


def get_processes() -> List[ProcessSpec]:
    return list(base_processes)


def get_settings() -> Dict[str, Any]:
    return dict(settings)
