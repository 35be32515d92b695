"""
core/models.py — Read-only snapshots decoded from OBS replies.

Nothing here is cached: each query builds fresh snapshots from the reply.
Decoders tolerate missing fields and fall back to neutral defaults.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SceneDescriptor:
    name: str
    index: int
    is_current: bool = False


@dataclass(frozen=True)
class SourceDescriptor:
    name: str
    kind: str
    scene_item_id: int
    enabled: bool = True

    @classmethod
    def from_item(cls, item: dict) -> "SourceDescriptor":
        return cls(
            name=item.get("sourceName", ""),
            kind=item.get("inputKind") or item.get("sourceType") or "unknown",
            scene_item_id=int(item.get("sceneItemId", -1)),
            enabled=bool(item.get("sceneItemEnabled", True)),
        )


@dataclass(frozen=True)
class WindowDescriptor:
    """One capturable window as offered by a window capture source."""
    name: str
    value: str
    enabled: bool = True


@dataclass(frozen=True)
class CaptureInput:
    """A special audio input (desktop audio or mic/aux channel)."""
    name: str
    kind: str


@dataclass(frozen=True)
class VolumeLevel:
    mul: float
    db: float


@dataclass(frozen=True)
class RecordingStatus:
    active: bool = False
    paused: bool = False
    timecode: str = ""
    duration_ms: int = 0
    bytes: int = 0

    @classmethod
    def from_reply(cls, d: dict) -> "RecordingStatus":
        return cls(
            active=bool(d.get("outputActive", False)),
            paused=bool(d.get("outputPaused", False)),
            timecode=d.get("outputTimecode", "") or "",
            duration_ms=int(d.get("outputDuration", 0) or 0),
            bytes=int(d.get("outputBytes", 0) or 0),
        )


@dataclass(frozen=True)
class StreamingStatus:
    active: bool = False
    reconnecting: bool = False
    timecode: str = ""
    duration_ms: int = 0
    bytes_sent: int = 0

    @classmethod
    def from_reply(cls, d: dict) -> "StreamingStatus":
        return cls(
            active=bool(d.get("outputActive", False)),
            reconnecting=bool(d.get("outputReconnecting", False)),
            timecode=d.get("outputTimecode", "") or "",
            duration_ms=int(d.get("outputDuration", 0) or 0),
            bytes_sent=int(d.get("outputBytes", 0) or 0),
        )


@dataclass(frozen=True)
class RecordingSettings:
    format: str = "unknown"
    quality: str = "unknown"
    encoder: str = "unknown"
    path: str = ""


@dataclass(frozen=True)
class PerformanceStats:
    cpu_usage: float = 0.0
    memory_usage: float = 0.0
    active_fps: float = 0.0
    render_total_frames: int = 0
    render_skipped_frames: int = 0
    output_total_frames: int = 0
    output_skipped_frames: int = 0
    available_disk_space: float = 0.0
    average_frame_render_time: float = 0.0

    @classmethod
    def from_reply(cls, d: dict) -> "PerformanceStats":
        return cls(
            cpu_usage=float(d.get("cpuUsage", 0.0) or 0.0),
            memory_usage=float(d.get("memoryUsage", 0.0) or 0.0),
            active_fps=float(d.get("activeFps", 0.0) or 0.0),
            render_total_frames=int(d.get("renderTotalFrames", 0) or 0),
            render_skipped_frames=int(d.get("renderSkippedFrames", 0) or 0),
            output_total_frames=int(d.get("outputTotalFrames", 0) or 0),
            output_skipped_frames=int(d.get("outputSkippedFrames", 0) or 0),
            available_disk_space=float(d.get("availableDiskSpace", 0.0) or 0.0),
            average_frame_render_time=float(d.get("averageFrameRenderTime", 0.0) or 0.0),
        )


@dataclass(frozen=True)
class VersionInfo:
    obs_version: str = ""
    obs_web_socket_version: str = ""
    platform: str = ""
