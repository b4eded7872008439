import json
import os
from typing import List

from .errors import InvalidConfiguration, InvalidProcess
from .models import ProcessSpec


def _package_dir() -> str:
    return os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


# Helper: clone a workload (fresh tuples, safe to hand to another scheduler)
def clone_processes(specs: List[ProcessSpec]) -> List[ProcessSpec]:
    return [ProcessSpec(s.pid, s.arrival_time, s.burst_time) for s in specs]


# ------------------------------
# Dataset loaders: presets + JSON
# ------------------------------
PRESETS = {
    # single process, fits in one quantum
    1: [ProcessSpec(0, 0, 4)],
    # two equal processes, quantum >= burst
    2: [ProcessSpec(0, 0, 4), ProcessSpec(1, 0, 4)],
    # three equal processes sliced by a small quantum
    3: [ProcessSpec(0, 0, 3), ProcessSpec(1, 0, 3), ProcessSpec(2, 0, 3)],
    # late arrival leaves the CPU idle for one unit
    4: [ProcessSpec(0, 0, 2), ProcessSpec(1, 3, 2)],
    # staggered arrivals during running slices
    5: [ProcessSpec(0, 0, 5), ProcessSpec(1, 2, 4), ProcessSpec(2, 5, 2)],
}


def load_preset(preset_id: int) -> List[ProcessSpec]:
    if preset_id not in PRESETS:
        raise InvalidConfiguration(f"unknown preset {preset_id!r}; choose one of {sorted(PRESETS)}")
    return clone_processes(PRESETS[preset_id])


def load_processes_json(path: str) -> List[ProcessSpec]:
    # Relative paths resolve from the working directory first, then the package
    if not os.path.isabs(path) and not os.path.exists(path):
        path = os.path.join(_package_dir(), path)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise InvalidProcess(f"{path}: expected a JSON array of processes")

    specs: List[ProcessSpec] = []
    for item in data:
        try:
            specs.append(
                ProcessSpec(
                    pid=int(item["pid"]),
                    arrival_time=int(item.get("arrival_time", 0)),
                    burst_time=int(item["burst_time"]),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidProcess(f"{path}: bad process entry {item!r}") from exc

    return specs
