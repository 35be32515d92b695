"""routers/source.py — obs_source: window capture setup and scene item visibility."""

from __future__ import annotations

from obs_bridge.core.connection_manager import ConnectionManager
from obs_bridge.core.request_bridge import RequestBridge

from .base import ActionRequest, ActionRouter, Handler


class SourceRouter(ActionRouter):
    resource = "obs_source"

    def __init__(self, connections: ConnectionManager, bridge: RequestBridge, window_capture_kind: str = "window_capture"):
        self.window_capture_kind = window_capture_kind
        super().__init__(connections, bridge)

    def routes(self) -> dict[str, Handler]:
        return {
            "AddWindowCapture": self.add_window_capture,
            "ListWindows": self.list_windows,
            "SetWindowCapture": self.set_window_capture,
            "Remove": self.remove,
            "SetEnabled": self.set_enabled,
        }

    def add_window_capture(self, req: ActionRequest) -> str:
        source_name = req.require_str("sourceName")
        self.bridge.add_window_capture(source_name, req.optional_str("sceneName"), self.window_capture_kind)
        return (
            f"Added window capture source '{source_name}'. "
            f"NEXT STEP: Use obs_source with action=ListWindows and sourceName='{source_name}' "
            "to see available windows, then use action=SetWindowCapture to select a window."
        )

    def list_windows(self, req: ActionRequest) -> str:
        source_name = req.require_str("sourceName")
        windows = self.bridge.list_windows(source_name)
        if not windows:
            return "No windows available for capture. Make sure the application you want to capture is running."
        lines = [
            f"Available Windows ({len(windows)}):",
            "",
            "Ask the user which window they want to record, then use obs_source with action=SetWindowCapture.",
            "",
        ]
        for window in windows:
            lines.append(f"  - {window.name}")
            lines.append(f"    Value: {window.value}")
        return "\n".join(lines)

    def set_window_capture(self, req: ActionRequest) -> str:
        source_name = req.require_str("sourceName")
        window_value = req.require_str(
            "windowValue", ". Use action=ListWindows first to get available window values."
        )
        self.bridge.set_window_capture(source_name, window_value)
        return (
            f"Window capture source '{source_name}' is now configured to capture: {window_value}. "
            "You can now start recording with obs_recording action=Start."
        )

    def remove(self, req: ActionRequest) -> str:
        source_name = req.require_str("sourceName")
        self.bridge.remove_source(source_name, req.optional_str("sceneName"))
        return f"Removed source '{source_name}'"

    def set_enabled(self, req: ActionRequest) -> str:
        source_name = req.require_str("sourceName")
        enabled = req.require_bool("enabled")
        self.bridge.set_source_enabled(source_name, enabled, req.optional_str("sceneName"))
        return f"Source '{source_name}' is now {'visible' if enabled else 'hidden'}"
