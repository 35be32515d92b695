"""
api/server.py — FastAPI surface over BridgeService.

Every tool call arrives as POST /tools/{resource}/{action} with a JSON
object of parameters and comes back as the router's text. Dispatch blocks
(connect waits on the handshake), so it runs in the default executor.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import Body, Depends, FastAPI, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from obs_bridge import __version__
from obs_bridge.config import APISettings, get_settings
from obs_bridge.guides import GUIDES
from obs_bridge.routers import is_error
from obs_bridge.service import BridgeService

log = logging.getLogger(__name__)


class ToolResult(BaseModel):
    resource: str
    action: str
    ok: bool
    result: str


def create_app(service: BridgeService, api_settings: Optional[APISettings] = None) -> FastAPI:
    settings = api_settings or get_settings().api

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info(f"obs-bridge API starting on {settings.host}:{settings.port}")
        yield
        log.info("obs-bridge API shutting down.")
        service.close()

    app = FastAPI(
        title="obs-bridge",
        description="Remote OBS Studio control over obs-websocket",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── REST auth dependency ──────────────────────────────────────────

    async def verify_api_key(authorization: Optional[str] = Header(None)):
        if settings.api_key:
            if not authorization or not authorization.startswith("Bearer "):
                raise HTTPException(status_code=401, detail="Missing Bearer token")
            token = authorization.removeprefix("Bearer ").strip()
            if token != settings.api_key:
                raise HTTPException(status_code=403, detail="Invalid API key")

    auth = Depends(verify_api_key)

    # ─────────────────────────────────────────────────────────────────
    # Health
    # ─────────────────────────────────────────────────────────────────

    @app.get("/health", tags=["System"])
    async def health():
        session = service.connections.session
        return {
            "status": "ok",
            "obs_connected": service.connections.is_connected(),
            "obs_state": service.connections.state.value,
            "obs_address": session.address if session else None,
            "version": __version__,
        }

    @app.get("/healthz", tags=["System"])
    async def healthz():
        """Machine-readable health check. Returns 503 when OBS is disconnected."""
        if not service.connections.is_connected():
            raise HTTPException(
                status_code=503,
                detail={"status": "degraded", "reason": "OBS not connected"},
            )
        return {"status": "ok"}

    # ─────────────────────────────────────────────────────────────────
    # Tools
    # ─────────────────────────────────────────────────────────────────

    @app.get("/tools", tags=["Tools"], dependencies=[auth])
    async def list_tools():
        return service.catalog()

    @app.post("/tools/{resource}/{action}", tags=["Tools"], dependencies=[auth], response_model=ToolResult)
    async def call_tool(resource: str, action: str, params: Optional[dict[str, Any]] = Body(None)):
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, service.dispatch, resource, action, params or {})
        return ToolResult(resource=resource, action=action, ok=not is_error(result), result=result)

    # ─────────────────────────────────────────────────────────────────
    # Guides
    # ─────────────────────────────────────────────────────────────────

    @app.get("/guides", tags=["Guides"])
    async def list_guides():
        return sorted(GUIDES)

    @app.get("/guides/{name}", tags=["Guides"])
    async def guide(name: str):
        if name not in GUIDES:
            raise HTTPException(status_code=404, detail=f"Guide '{name}' not found")
        return {"name": name, "markdown": GUIDES[name]}

    return app
