"""routers/streaming.py — obs_streaming: Start, Stop, GetStatus."""

from __future__ import annotations

from .base import ActionRequest, ActionRouter, Handler


class StreamingRouter(ActionRouter):
    resource = "obs_streaming"

    def routes(self) -> dict[str, Handler]:
        return {
            "Start": self.start,
            "Stop": self.stop,
            "GetStatus": self.get_status,
        }

    def start(self, req: ActionRequest) -> str:
        self.bridge.start_streaming()
        return "Streaming started"

    def stop(self, req: ActionRequest) -> str:
        self.bridge.stop_streaming()
        return "Streaming stopped"

    def get_status(self, req: ActionRequest) -> str:
        status = self.bridge.get_streaming_status()
        return (
            "Streaming Status:\n"
            f"Active: {status.active}\n"
            f"Reconnecting: {status.reconnecting}\n"
            f"Timecode: {status.timecode}\n"
            f"Duration (ms): {status.duration_ms}\n"
            f"Bytes Sent: {status.bytes_sent}"
        )
