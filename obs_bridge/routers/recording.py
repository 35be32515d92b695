"""routers/recording.py — obs_recording."""

from __future__ import annotations

from obs_bridge.core.connection_manager import ConnectionManager
from obs_bridge.core.request_bridge import RequestBridge
from obs_bridge.workflows.recording import RecordingWorkflow

from .base import ActionRequest, ActionRouter, Handler

VALID_FORMATS = ["mp4", "mkv", "flv", "mov", "ts"]
VALID_QUALITIES = ["Stream", "Small", "HQ", "Lossless"]


class RecordingRouter(ActionRouter):
    resource = "obs_recording"

    def __init__(self, connections: ConnectionManager, bridge: RequestBridge, workflow: RecordingWorkflow):
        self.workflow = workflow
        super().__init__(connections, bridge)

    def routes(self) -> dict[str, Handler]:
        return {
            "Start": self.start,
            "Stop": self.stop,
            "Pause": self.pause,
            "Resume": self.resume,
            "GetStatus": self.get_status,
            "GetSettings": self.get_settings,
            "SetFormat": self.set_format,
            "SetQuality": self.set_quality,
            "SetPath": self.set_path,
            "GetPath": self.get_path,
        }

    def start(self, req: ActionRequest) -> str:
        path = req.optional_str("path")
        mute_audio = req.optional_bool("muteAudio", default=True)
        report = self.workflow.start(mute_audio=mute_audio, directory=path)
        return f"{report.summary()} Use obs_recording with action=Stop when finished."

    def stop(self, req: ActionRequest) -> str:
        return f"Recording stopped and saved to: {self.workflow.stop()}"

    def pause(self, req: ActionRequest) -> str:
        self.bridge.pause_recording()
        return "Recording paused. Use obs_recording with action=Resume to continue."

    def resume(self, req: ActionRequest) -> str:
        self.bridge.resume_recording()
        return "Recording resumed"

    def get_status(self, req: ActionRequest) -> str:
        status = self.bridge.get_recording_status()
        return (
            "Recording Status:\n"
            f"Active: {status.active}\n"
            f"Paused: {status.paused}\n"
            f"Timecode: {status.timecode}"
        )

    def get_settings(self, req: ActionRequest) -> str:
        settings = self.bridge.get_recording_settings()
        directory = self.bridge.get_record_directory()
        return (
            "Recording Settings:\n"
            f"Format: {settings.format}\n"
            f"Quality: {settings.quality}\n"
            f"Encoder: {settings.encoder}\n"
            f"Path: {directory}"
        )

    def set_format(self, req: ActionRequest) -> str:
        fmt = req.choice("format", VALID_FORMATS, label="formats")
        self.bridge.set_recording_format(fmt)
        return f"Recording format set to {fmt}"

    def set_quality(self, req: ActionRequest) -> str:
        quality = req.choice("quality", VALID_QUALITIES)
        self.bridge.set_recording_quality(quality)
        return f"Recording quality set to {quality}"

    def set_path(self, req: ActionRequest) -> str:
        path = req.require_str("path")
        self.bridge.set_record_directory(path)
        return f"Recording output directory set to: {path}"

    def get_path(self, req: ActionRequest) -> str:
        return f"Recording output directory: {self.bridge.get_record_directory()}"
