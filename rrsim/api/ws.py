from typing import Any, Dict

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from rrsim.engine import SchedulerError
from rrsim.session import (
    add_process,
    get_state,
    init_session,
    reset_session,
    run_session,
    set_config,
)

router = APIRouter()


async def _send_state(ws: WebSocket) -> None:
    await ws.send_json({"type": "state", "data": get_state()})


@router.websocket("/ws/state")
async def ws_state(websocket: WebSocket) -> None:
    await websocket.accept()
    await _send_state(websocket)

    try:
        while True:
            msg: Dict[str, Any] = await websocket.receive_json()
            mtype = str(msg.get("type", "")).lower()

            try:
                if mtype == "init":
                    payload = dict(msg)
                    payload.pop("type", None)
                    init_session(payload)
                elif mtype == "run":
                    run_session()
                elif mtype == "add_process":
                    add_process(msg.get("process") or {})
                elif mtype == "config":
                    set_config(msg)
                elif mtype == "reset":
                    reset_session()
            except SchedulerError as exc:
                await websocket.send_json({"type": "error", "error": type(exc).__name__, "detail": str(exc)})
                continue

            await _send_state(websocket)
    except WebSocketDisconnect:
        return
