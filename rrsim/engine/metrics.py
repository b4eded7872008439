from typing import Any, Dict, List

from .models import Process


def compute_metrics(processes: List[Process]):
    """Return per-process metric rows.

    - Always returns a row for every process (so the table can list all tasks).
    - Averages are computed only across completed processes.
    """
    rows = []
    completed_rows = []

    # Stable ordering for display
    for p in sorted(processes, key=lambda x: (x.arrival_time, x.pid)):
        st = p.start_time
        ct = p.completion_time

        if ct is not None:
            row = {
                "PID": p.pid,
                "AT": p.arrival_time,
                "BT": p.burst_time,
                "ST": st,
                "CT": ct,
                "TAT": p.turnaround_time,
                "WT": p.waiting_time,
                "RT": p.response_time,
                "_done": True,
            }
            completed_rows.append(row)
        else:
            # Not finished yet (or not started). Keep placeholders.
            row = {
                "PID": p.pid,
                "AT": p.arrival_time,
                "BT": p.burst_time,
                "ST": "-" if st is None else st,
                "CT": "-",
                "TAT": "-",
                "WT": p.waiting_time,
                "RT": "-" if st is None else p.response_time,
                "_done": False,
            }

        rows.append(row)

    if completed_rows:
        avg_wt = sum(r["WT"] for r in completed_rows) / len(completed_rows)
        avg_tat = sum(r["TAT"] for r in completed_rows) / len(completed_rows)
        avg_rt = sum(r["RT"] for r in completed_rows) / len(completed_rows)
    else:
        avg_wt = avg_tat = avg_rt = 0.0

    return rows, avg_wt, avg_tat, avg_rt


def summarize(scheduler) -> Dict[str, Any]:
    """Averages plus CPU utilization, makespan and throughput for a finished run."""
    processes = scheduler.all_processes()
    rows, avg_wt, avg_tat, avg_rt = compute_metrics(processes)

    makespan = scheduler.time
    busy = sum(s.length for s in scheduler.gantt_chart)
    util = (busy / makespan * 100.0) if makespan else 0.0
    completed = sum(1 for p in processes if p.done)
    throughput = (completed / makespan) if makespan > 0 else 0.0

    return {
        "avg_wt": float(avg_wt),
        "avg_tat": float(avg_tat),
        "avg_rt": float(avg_rt),
        "cpu_util": float(util),
        "makespan": int(makespan),
        "throughput": float(throughput),
        "dispatches": len(scheduler.gantt_chart),
        "_rows": rows,
    }
