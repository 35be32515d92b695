"""routers — One action router per OBS resource."""
from .audio import AudioRouter
from .base import ActionRequest, ActionRouter, is_error
from .connection import ConnectionRouter
from .media import MediaRouter
from .recording import RecordingRouter
from .scene import SceneRouter
from .source import SourceRouter
from .streaming import StreamingRouter

__all__ = [
    "ActionRequest",
    "ActionRouter",
    "AudioRouter",
    "ConnectionRouter",
    "MediaRouter",
    "RecordingRouter",
    "SceneRouter",
    "SourceRouter",
    "StreamingRouter",
    "is_error",
]
