"""
service.py — Wires the session, request bridge, workflows and routers together.

BridgeService is what an outer shell (HTTP API, CLI) talks to:
dispatch(resource, action, params) -> str. One service owns one
ConnectionManager; pass the service around rather than reaching for a
module-level client.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from obs_bridge.config.settings import OBSSettings
from obs_bridge.core.connection_manager import ConnectionManager
from obs_bridge.core.errors import UnknownAction
from obs_bridge.core.request_bridge import RequestBridge
from obs_bridge.core.transport import TransportFactory, obs_transport_factory
from obs_bridge.routers import (
    ActionRouter,
    AudioRouter,
    ConnectionRouter,
    MediaRouter,
    RecordingRouter,
    SceneRouter,
    SourceRouter,
    StreamingRouter,
)
from obs_bridge.routers.base import render_error
from obs_bridge.workflows.recording import RecordingWorkflow

log = logging.getLogger(__name__)

RESOURCE_PREFIX = "obs_"


class BridgeService:
    def __init__(
        self,
        obs_settings: Optional[OBSSettings] = None,
        transport_factory: Optional[TransportFactory] = None,
    ):
        self.obs_settings = obs_settings or OBSSettings()
        factory = transport_factory or obs_transport_factory(self.obs_settings.request_timeout)

        self.connections = ConnectionManager(factory, default_timeout=self.obs_settings.connect_timeout)
        self.bridge = RequestBridge(self.connections)
        self.recording = RecordingWorkflow(self.bridge)

        routers: list[ActionRouter] = [
            ConnectionRouter(self.connections, self.bridge, self.obs_settings),
            RecordingRouter(self.connections, self.bridge, self.recording),
            StreamingRouter(self.connections, self.bridge),
            SceneRouter(self.connections, self.bridge),
            SourceRouter(self.connections, self.bridge, self.obs_settings.window_capture_kind),
            AudioRouter(self.connections, self.bridge),
            MediaRouter(self.connections, self.bridge),
        ]
        self.routers: dict[str, ActionRouter] = {r.resource: r for r in routers}

    def router(self, resource: str) -> ActionRouter:
        name = (resource or "").strip().lower()
        if not name.startswith(RESOURCE_PREFIX):
            name = RESOURCE_PREFIX + name
        router = self.routers.get(name)
        if router is None:
            raise UnknownAction(
                f"Unknown resource '{resource}'. Valid resources: {', '.join(self.routers)}"
            )
        return router

    def dispatch(self, resource: str, action: str, params: Optional[Mapping[str, Any]] = None) -> str:
        try:
            router = self.router(resource)
        except UnknownAction as e:
            return render_error(e)
        log.debug(f"dispatch {router.resource}.{action} {sorted((params or {}).keys())}")
        return router.handle(action, params)

    def catalog(self) -> dict[str, list[str]]:
        return {name: router.actions for name, router in self.routers.items()}

    def close(self) -> None:
        self.connections.disconnect()
