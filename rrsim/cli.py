"""
Command-line driver: load a workload, run round robin, print the report.

    rrsim --preset 5 --quantum 3
    rrsim --file workload.json --quantum 2 --trace
    rrsim --preset 3 --compare 1 2 4 8
"""

import argparse
import logging
import sys
from typing import List, Optional

from rrsim.engine import (
    DEFAULT_QUANTUM,
    PRESETS,
    Scheduler,
    SchedulerError,
    SchedulerType,
    compare_quanta,
    create_scheduler,
    load_preset,
    load_processes_json,
    summarize,
)

logger = logging.getLogger(__name__)

COL = 12
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def format_process_table(scheduler: Scheduler) -> str:
    lines = [
        "      ==========================Process========================",
        "".join(h.rjust(COL) for h in ("PID", "Start", "End", "Burst", "Waiting")),
    ]
    for p in scheduler.all_processes():
        end = "-" if p.completion_time is None else p.completion_time
        lines.append(
            "".join(str(v).rjust(COL) for v in (p.pid, p.arrival_time, end, p.burst_time, p.waiting_time))
        )
    return "\n".join(lines)


def format_trace(scheduler: Scheduler) -> str:
    return "\n".join(f"  t={s.start:>4} -> {s.end:<4} pid {s.pid}" for s in scheduler.gantt_chart)


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Round-robin CPU scheduling simulator")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--preset", type=int, default=5, choices=sorted(PRESETS), help="Built-in workload number (default: 5)")
    source.add_argument("--file", type=str, default=None, help="JSON workload: [{pid, arrival_time, burst_time}, ...]")
    parser.add_argument("--quantum", type=int, default=DEFAULT_QUANTUM, help=f"Time quantum (default: {DEFAULT_QUANTUM})")
    parser.add_argument("--trace", action="store_true", help="Print every dispatch slice")
    parser.add_argument("--compare", type=int, nargs="+", default=None, metavar="Q", help="Compare several quanta instead of a single run")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default="WARNING",
        choices=LOG_LEVELS,
        help="Logging level (default: WARNING)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        specs = load_processes_json(args.file) if args.file else load_preset(args.preset)

        if args.compare:
            print(f"{'Quantum':>8}{'Avg WT':>10}{'Avg TAT':>10}{'Avg RT':>10}{'Makespan':>10}{'Dispatches':>12}")
            for r in compare_quanta(specs, args.compare):
                print(
                    f"{r['quantum']:>8}{r['avg_wt']:>10.2f}{r['avg_tat']:>10.2f}"
                    f"{r['avg_rt']:>10.2f}{r['makespan']:>10}{r['dispatches']:>12}"
                )
            return 0

        scheduler = create_scheduler(SchedulerType.ROUND_ROBIN, quantum=args.quantum)
        for spec in specs:
            scheduler.admit(spec.pid, spec.arrival_time, spec.burst_time)
        scheduler.run()
    except (SchedulerError, OSError) as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(format_process_table(scheduler))
    if args.trace:
        print("\nDispatch trace:")
        print(format_trace(scheduler))

    summary = summarize(scheduler)
    print(
        f"\nAvg waiting {summary['avg_wt']:.2f}  Avg turnaround {summary['avg_tat']:.2f}  "
        f"CPU util {summary['cpu_util']:.1f}%  Makespan {summary['makespan']}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
