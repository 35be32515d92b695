"""routers/connection.py — obs_connection: Connect, Disconnect, GetStatus, GetStats."""

from __future__ import annotations

from obs_bridge.config.settings import OBSSettings
from obs_bridge.core.connection_manager import ConnectionManager
from obs_bridge.core.errors import ValidationError
from obs_bridge.core.request_bridge import RequestBridge

from .base import ActionRequest, ActionRouter, Handler


class ConnectionRouter(ActionRouter):
    resource = "obs_connection"

    def __init__(self, connections: ConnectionManager, bridge: RequestBridge, obs_settings: OBSSettings):
        self.obs_settings = obs_settings
        super().__init__(connections, bridge)

    def routes(self) -> dict[str, Handler]:
        return {
            "Connect": self.connect,
            "Disconnect": self.disconnect,
            "GetStatus": self.get_status,
            "GetStats": self.get_stats,
        }

    def connect(self, req: ActionRequest) -> str:
        host = req.optional_str("host") or self.obs_settings.host
        port = req.optional_int("port", 1, 65535) or self.obs_settings.port
        password = req.optional_str("password") or self.obs_settings.password
        timeout = req.optional_float("timeout")
        if timeout is not None and timeout <= 0:
            raise ValidationError("timeout must be greater than 0")

        self.connections.connect(host, port, password, timeout or self.obs_settings.connect_timeout)
        return f"Connected to OBS at {host}:{port}"

    def disconnect(self, req: ActionRequest) -> str:
        self.connections.disconnect()
        return "Disconnected from OBS"

    def get_status(self, req: ActionRequest) -> str:
        if not self.connections.is_connected():
            return "Not connected to OBS"

        recording = self.bridge.get_recording_status()
        streaming = self.bridge.get_streaming_status()
        scene = self.bridge.get_current_scene()
        session = self.connections.session

        return (
            f"Connected to OBS at {session.address}\n"
            f"Current Scene: {scene}\n"
            f"Recording: {'Active' if recording.active else 'Inactive'}"
            f"{' (Paused)' if recording.paused else ''}\n"
            f"Streaming: {'Active' if streaming.active else 'Inactive'}"
        )

    def get_stats(self, req: ActionRequest) -> str:
        stats = self.bridge.get_stats()
        return (
            "OBS Stats:\n"
            f"FPS: {stats.active_fps:.2f}\n"
            f"CPU Usage: {stats.cpu_usage:.2f}%\n"
            f"Memory Usage: {stats.memory_usage:.2f} MB\n"
            f"Render Skipped: {stats.render_skipped_frames}/{stats.render_total_frames}\n"
            f"Output Skipped: {stats.output_skipped_frames}/{stats.output_total_frames}\n"
            f"Average Frame Time: {stats.average_frame_render_time:.2f} ms\n"
            f"Free Disk Space: {stats.available_disk_space:.0f} MB"
        )
