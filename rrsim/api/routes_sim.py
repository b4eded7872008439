from typing import Any, Dict, List

from fastapi import APIRouter, Body, HTTPException

from rrsim.engine import (
    DuplicatePID,
    InvalidConfiguration,
    InvalidProcess,
    NotFound,
    ProcessSpec,
    SchedulerError,
    SchedulerStateError,
    compare_quanta,
)
from rrsim.session import (
    add_process,
    build_spec,
    get_processes,
    get_settings,
    get_state,
    init_session,
    lookup_process,
    parse_int,
    reset_session,
    run_session,
    set_config,
)

router = APIRouter()


def _http_error(exc: SchedulerError) -> HTTPException:
    if isinstance(exc, NotFound):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, (DuplicatePID, SchedulerStateError)):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, (InvalidProcess, InvalidConfiguration)):
        return HTTPException(status_code=422, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


def _to_spec(item: Dict[str, Any]) -> ProcessSpec:
    try:
        return build_spec(item)
    except SchedulerError as exc:
        raise _http_error(exc)


def _normalize_compare_row(raw: Dict[str, Any]) -> Dict[str, Any]:
    per_process: List[Dict[str, Any]] = []
    for row in raw.get("_rows") or []:
        per_process.append(
            {
                "pid": int(row["PID"]),
                "at": int(row["AT"]),
                "bt": int(row["BT"]),
                "ct": row["CT"],
                "tat": row["TAT"],
                "wt": row["WT"],
                "rt": row["RT"],
            }
        )

    return {
        "quantum": int(raw["quantum"]),
        "avg_wt": float(raw["avg_wt"]),
        "avg_tat": float(raw["avg_tat"]),
        "avg_rt": float(raw["avg_rt"]),
        "cpu_util": float(raw["cpu_util"]),
        "makespan": int(raw["makespan"]),
        "throughput": float(raw["throughput"]),
        "dispatches": int(raw["dispatches"]),
        "per_process": per_process,
    }


@router.post("/sim/init")
def sim_init(payload: Dict[str, Any] = Body(default_factory=dict)) -> Dict[str, Any]:
    try:
        return init_session(payload)
    except SchedulerError as exc:
        raise _http_error(exc)


@router.post("/sim/add")
def sim_add(payload: Dict[str, Any] = Body(default_factory=dict)) -> Dict[str, Any]:
    process_payload = payload.get("process") if isinstance(payload.get("process"), dict) else payload
    try:
        return add_process(process_payload)
    except SchedulerError as exc:
        raise _http_error(exc)


@router.post("/sim/run")
def sim_run() -> Dict[str, Any]:
    try:
        return run_session()
    except SchedulerError as exc:
        raise _http_error(exc)


@router.get("/sim/state")
def sim_state() -> Dict[str, Any]:
    return get_state()


@router.get("/sim/process/{pid}")
def sim_process(pid: int) -> Dict[str, Any]:
    try:
        return lookup_process(pid)
    except SchedulerError as exc:
        raise _http_error(exc)


@router.post("/sim/config")
def sim_config(payload: Dict[str, Any] = Body(default_factory=dict)) -> Dict[str, Any]:
    try:
        return set_config(payload)
    except SchedulerError as exc:
        raise _http_error(exc)


@router.post("/sim/compare")
def sim_compare(payload: Dict[str, Any] = Body(default_factory=dict)) -> Dict[str, Any]:
    payload_processes = payload.get("processes")
    if isinstance(payload_processes, list) and payload_processes:
        specs = [_to_spec(p) for p in payload_processes if isinstance(p, dict)]
    else:
        specs = get_processes()

    quanta_raw = payload.get("quanta") or [get_settings()["quantum"]]
    if not isinstance(quanta_raw, list):
        raise HTTPException(status_code=422, detail="quanta must be an array of integers")
    try:
        quanta = [parse_int(q, "quantum", InvalidConfiguration) for q in quanta_raw]
    except SchedulerError as exc:
        raise _http_error(exc)

    try:
        results = compare_quanta(specs, quanta)
    except SchedulerError as exc:
        raise _http_error(exc)

    return {"results": [_normalize_compare_row(r) for r in results]}


@router.post("/sim/reset")
def sim_reset() -> Dict[str, Any]:
    return reset_session()
