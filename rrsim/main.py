import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rrsim import __version__
from rrsim.api.routes_sim import router as sim_router
from rrsim.api.ws import router as ws_router

logger = logging.getLogger(__name__)

app = FastAPI(title="Round-Robin Scheduling Simulator API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.environ.get("RRSIM_CORS_ORIGINS", "http://localhost:3000").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(sim_router)
app.include_router(ws_router)


@app.get("/health")
def health():
    return {"ok": True}


@app.get("/")
def root():
    return {"ok": True, "version": __version__, "hint": "Use /health, /docs, or /sim/state"}


def serve():
    """Entry point for `rrsim-api`; needs the `serve` extra (uvicorn)."""
    import uvicorn

    host = os.environ.get("RRSIM_HOST", "127.0.0.1")
    port = int(os.environ.get("RRSIM_PORT", "8000"))
    logging.basicConfig(level=os.environ.get("RRSIM_LOG_LEVEL", "INFO").upper())
    logger.info("Serving on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port)
