"""FastAPI server exposing the WebSocket-to-TCP bridge on a fixed local endpoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, WebSocket
from fastapi.responses import ORJSONResponse

from tcpbridge.config.bridge import WS_ENDPOINT_PATH
from tcpbridge.runtime.settings import load_settings
from tcpbridge.runtime.logging import configure_logging
from tcpbridge.runtime.dependencies import build_runtime_deps
from tcpbridge.handlers.websocket.manager import handle_websocket_connection

logger = logging.getLogger(__name__)

configure_logging()


@asynccontextmanager
async def _lifespan(app: FastAPI):
    runtime_deps = build_runtime_deps()
    app.state.runtime_deps = runtime_deps
    logger.info("runtime: ready")
    yield


app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.websocket(WS_ENDPOINT_PATH)
async def websocket_endpoint(websocket: WebSocket) -> None:
    runtime_deps = getattr(app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    await handle_websocket_connection(websocket, runtime_deps)


def main() -> None:
    settings = load_settings()
    logger.info("bridge: listening on ws://%s:%s%s", settings.bridge.host, settings.bridge.port, WS_ENDPOINT_PATH)
    # uvicorn exits non-zero when the endpoint cannot be bound.
    uvicorn.run(app, host=settings.bridge.host, port=settings.bridge.port, log_config=None)


if __name__ == "__main__":
    main()
