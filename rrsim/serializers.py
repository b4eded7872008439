from typing import Any, Dict, List, Optional

from rrsim.engine import Process, Scheduler, summarize


def _safe_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return float(default)


def serialize_process(p: Process) -> Dict[str, Any]:
    return {
        "pid": p.pid,
        "arrival_time": p.arrival_time,
        "burst_time": p.burst_time,
        "remaining_time": p.remaining_time,
        "waiting_time": p.waiting_time,
        "start_time": p.start_time,
        "completion_time": p.completion_time,
        "turnaround_time": p.turnaround_time,
        "state": p.state,
    }


def _gantt(scheduler: Scheduler) -> List[Dict[str, int]]:
    return [{"pid": s.pid, "start": s.start, "end": s.end} for s in scheduler.gantt_chart]


def _metrics(scheduler: Scheduler) -> Dict[str, Any]:
    summary = summarize(scheduler)
    return {
        "avg_wt": _safe_float(summary["avg_wt"]),
        "avg_tat": _safe_float(summary["avg_tat"]),
        "avg_rt": _safe_float(summary["avg_rt"]),
        "cpu_util": _safe_float(summary["cpu_util"]),
        "makespan": int(summary["makespan"]),
        "throughput": _safe_float(summary["throughput"]),
    }


def default_state(settings: Optional[Dict[str, Any]] = None, event_log: Optional[List[str]] = None) -> Dict[str, Any]:
    cfg = settings or {}
    return {
        "time": 0,
        "status": "IDLE",
        "algorithm": "RR",
        "quantum": int(cfg.get("quantum", 4)),
        "ready_queue": [],
        "processes": [],
        "gantt": [],
        "metrics": {
            "avg_wt": 0.0,
            "avg_tat": 0.0,
            "avg_rt": 0.0,
            "cpu_util": 0.0,
            "makespan": 0,
            "throughput": 0.0,
        },
        "done": True,
        "event_log": list(event_log or []),
    }


def serialize_state(
    scheduler: Scheduler,
    settings: Optional[Dict[str, Any]] = None,
    event_log: Optional[List[str]] = None,
) -> Dict[str, Any]:
    state = default_state(settings, event_log)
    state.update(
        {
            "time": scheduler.current_time(),
            "status": scheduler.status,
            "algorithm": scheduler.strategy.name,
            "quantum": int(getattr(scheduler.strategy, "quantum", state["quantum"])),
            "ready_queue": scheduler.queued_pids(),
            "processes": [serialize_process(p) for p in scheduler.all_processes()],
            "gantt": _gantt(scheduler),
            "metrics": _metrics(scheduler),
            "done": scheduler.done(),
            "event_log": list(event_log or []) + list(scheduler.event_log),
        }
    )
    return state
