"""
core/request_bridge.py — One method per OBS capability.

Most capabilities go straight through the library's structured request
classes (transport.call). Three do not:

  - GetInputPropertiesListPropertyItems (window listing)
  - GetRecordDirectory
  - SetRecordDirectory

For these the structured client has a known reply-decoding defect (the
window list comes back as an array-typed property list it cannot decode),
so they go raw first and only fall back to the structured path when the raw
path raises or returns nothing usable. If both paths fail the raw error is
the one reported. This is not a retry policy; do not route other
capabilities through it.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TypeVar

from .connection_manager import ConnectionManager
from .errors import ProtocolFailure
from .models import (
    CaptureInput,
    PerformanceStats,
    RecordingSettings,
    RecordingStatus,
    SceneDescriptor,
    SourceDescriptor,
    StreamingStatus,
    VersionInfo,
    VolumeLevel,
    WindowDescriptor,
)
from .transport import Transport

log = logging.getLogger(__name__)

T = TypeVar("T")

# OBS names for the fixed-role audio channels, in display order
SPECIAL_INPUTS: list[tuple[str, str]] = [
    ("desktop1", "Desktop Audio"),
    ("desktop2", "Desktop Audio 2"),
    ("mic1", "Mic/Aux"),
    ("mic2", "Mic/Aux 2"),
    ("mic3", "Mic/Aux 3"),
    ("mic4", "Mic/Aux 4"),
]

SIMPLE_OUTPUT = "SimpleOutput"
UNKNOWN_DIRECTORY = "unknown"


class Unusable(Exception):
    """Raised by a decoder when a reply carries no usable payload."""


def raw_then_structured(
    description: str,
    raw: Callable[[], T],
    structured: Callable[[], T],
) -> T:
    """
    Run the raw path, fall back to the structured path once.

    The first failure is kept; when the structured path fails too, that
    first failure is what gets raised, wrapped as ProtocolFailure.
    """
    try:
        return raw()
    except (ProtocolFailure, Unusable) as e:
        first_error: Exception = e
        log.debug(f"{description}: raw request failed ({e}), trying structured request")
    try:
        return structured()
    except (ProtocolFailure, Unusable) as e:
        log.debug(f"{description}: structured request failed too ({e})")
        raise ProtocolFailure(f"Failed to {description}: {first_error}") from first_error


def decode_window_items(reply: Any, strict: bool = True) -> list[WindowDescriptor]:
    """
    Decode a window property list. A reply without the list is Unusable when
    strict, otherwise it means there is nothing to capture.
    """
    items = reply.get("propertyItems") if isinstance(reply, dict) else None
    if not isinstance(items, list):
        if strict:
            raise Unusable("reply has no propertyItems list")
        items = []
    windows = []
    for item in items:
        if not isinstance(item, dict):
            continue
        value = item.get("itemValue") or ""
        if not value:
            continue
        windows.append(WindowDescriptor(
            name=item.get("itemName") or "",
            value=str(value),
            enabled=bool(item.get("itemEnabled", True)),
        ))
    return windows


def decode_record_directory(reply: Any, strict: bool = True) -> str:
    """
    Pull recordDirectory out of a reply. An empty value is Unusable when
    strict; otherwise a well-formed reply without one reads as "unknown".
    """
    if not isinstance(reply, dict):
        raise Unusable("reply is not an object")
    directory = reply.get("recordDirectory")
    if not directory:
        if strict:
            raise Unusable("reply has no recordDirectory")
        return UNKNOWN_DIRECTORY
    return str(directory)


class RequestBridge:
    def __init__(self, connections: ConnectionManager):
        self._connections = connections

    def _client(self) -> Transport:
        return self._connections.get_client()

    def call(self, capability: str, **params: Any) -> dict:
        return self._client().call(capability, params)

    def send_request(self, capability: str, **params: Any) -> Any:
        return self._client().send_request(capability, params)

    # ── Recording ────────────────────────────────────────────────────

    def start_recording(self) -> None:
        self.call("StartRecord")

    def stop_recording(self) -> str:
        """Stop recording. Returns the output file path exactly as OBS reports it."""
        return self.call("StopRecord").get("outputPath", "")

    def pause_recording(self) -> None:
        self.call("PauseRecord")

    def resume_recording(self) -> None:
        self.call("ResumeRecord")

    def get_recording_status(self) -> RecordingStatus:
        return RecordingStatus.from_reply(self.call("GetRecordStatus"))

    def get_recording_settings(self) -> RecordingSettings:
        return RecordingSettings(
            format=self.get_profile_parameter(SIMPLE_OUTPUT, "RecFormat") or "unknown",
            quality=self.get_profile_parameter(SIMPLE_OUTPUT, "RecQuality") or "unknown",
            encoder=self.get_profile_parameter(SIMPLE_OUTPUT, "RecEncoder") or "unknown",
            path=self.get_profile_parameter(SIMPLE_OUTPUT, "FilePath") or "",
        )

    def set_recording_format(self, fmt: str) -> None:
        self.set_profile_parameter(SIMPLE_OUTPUT, "RecFormat", fmt)

    def set_recording_quality(self, quality: str) -> None:
        self.set_profile_parameter(SIMPLE_OUTPUT, "RecQuality", quality)

    def get_record_directory(self) -> str:
        return raw_then_structured(
            "get record directory",
            lambda: decode_record_directory(self.send_request("GetRecordDirectory")),
            lambda: decode_record_directory(self.call("GetRecordDirectory"), strict=False),
        )

    def set_record_directory(self, directory: str) -> None:
        raw_then_structured(
            "set record directory",
            lambda: self.send_request("SetRecordDirectory", recordDirectory=directory),
            lambda: self.call("SetRecordDirectory", recordDirectory=directory),
        )
        log.info(f"Record directory → {directory}")

    def get_profile_parameter(self, category: str, name: str) -> Optional[str]:
        reply = self.call("GetProfileParameter", parameterCategory=category, parameterName=name)
        value = reply.get("parameterValue")
        return None if value is None else str(value)

    def set_profile_parameter(self, category: str, name: str, value: str) -> None:
        self.call("SetProfileParameter", parameterCategory=category, parameterName=name, parameterValue=value)

    # ── Streaming ────────────────────────────────────────────────────

    def start_streaming(self) -> None:
        self.call("StartStream")

    def stop_streaming(self) -> None:
        self.call("StopStream")

    def get_streaming_status(self) -> StreamingStatus:
        return StreamingStatus.from_reply(self.call("GetStreamStatus"))

    # ── Scenes ───────────────────────────────────────────────────────

    def get_scenes(self) -> list[SceneDescriptor]:
        reply = self.call("GetSceneList")
        current = reply.get("currentProgramSceneName", "")
        scenes = []
        for i, s in enumerate(reply.get("scenes") or []):
            name = s.get("sceneName", "")
            scenes.append(SceneDescriptor(name=name, index=int(s.get("sceneIndex", i)), is_current=name == current))
        return scenes

    def get_current_scene(self) -> str:
        return self.call("GetCurrentProgramScene").get("currentProgramSceneName", "")

    def set_scene(self, scene_name: str) -> None:
        self.call("SetCurrentProgramScene", sceneName=scene_name)
        log.info(f"Switched to scene: {scene_name}")

    # ── Sources ──────────────────────────────────────────────────────

    def get_sources(self, scene_name: Optional[str] = None) -> list[SourceDescriptor]:
        scene = scene_name or self.get_current_scene()
        reply = self.call("GetSceneItemList", sceneName=scene)
        return [SourceDescriptor.from_item(item) for item in reply.get("sceneItems") or []]

    def find_scene_item(self, source_name: str, scene_name: Optional[str] = None) -> tuple[str, SourceDescriptor]:
        scene = scene_name or self.get_current_scene()
        for source in self.get_sources(scene):
            if source.name == source_name:
                return scene, source
        raise ProtocolFailure(f"Source '{source_name}' not found in scene '{scene}'")

    def add_window_capture(self, source_name: str, scene_name: Optional[str] = None, input_kind: str = "window_capture") -> int:
        scene = scene_name or self.get_current_scene()
        reply = self.call(
            "CreateInput",
            sceneName=scene,
            inputName=source_name,
            inputKind=input_kind,
            inputSettings={},
            sceneItemEnabled=True,
        )
        log.info(f"Created {input_kind} '{source_name}' in scene '{scene}'")
        return int(reply.get("sceneItemId", -1))

    def list_windows(self, source_name: str) -> list[WindowDescriptor]:
        params = {"inputName": source_name, "propertyName": "window"}
        return raw_then_structured(
            "list windows",
            lambda: decode_window_items(self.send_request("GetInputPropertiesListPropertyItems", **params)),
            lambda: decode_window_items(self.call("GetInputPropertiesListPropertyItems", **params), strict=False),
        )

    def set_window_capture(self, source_name: str, window_value: str) -> None:
        self.call("SetInputSettings", inputName=source_name, inputSettings={"window": window_value}, overlay=True)
        log.info(f"Window capture '{source_name}' → {window_value}")

    def remove_source(self, source_name: str, scene_name: Optional[str] = None) -> None:
        scene, item = self.find_scene_item(source_name, scene_name)
        self.call("RemoveSceneItem", sceneName=scene, sceneItemId=item.scene_item_id)

    def set_source_enabled(self, source_name: str, enabled: bool, scene_name: Optional[str] = None) -> None:
        scene, item = self.find_scene_item(source_name, scene_name)
        self.call("SetSceneItemEnabled", sceneName=scene, sceneItemId=item.scene_item_id, sceneItemEnabled=enabled)

    # ── Audio ────────────────────────────────────────────────────────

    def get_special_inputs(self) -> list[CaptureInput]:
        reply = self.call("GetSpecialInputs")
        return [
            CaptureInput(name=reply[key], kind=kind)
            for key, kind in SPECIAL_INPUTS
            if reply.get(key)
        ]

    def get_input_mute(self, input_name: str) -> bool:
        return bool(self.call("GetInputMute", inputName=input_name).get("inputMuted", False))

    def set_input_mute(self, input_name: str, muted: bool) -> None:
        self.call("SetInputMute", inputName=input_name, inputMuted=muted)

    def get_input_volume(self, input_name: str) -> VolumeLevel:
        reply = self.call("GetInputVolume", inputName=input_name)
        return VolumeLevel(
            mul=float(reply.get("inputVolumeMul", 0.0) or 0.0),
            db=float(reply.get("inputVolumeDb", 0.0) or 0.0),
        )

    def set_input_volume(self, input_name: str, volume_mul: float) -> None:
        self.call("SetInputVolume", inputName=input_name, inputVolumeMul=float(volume_mul))

    # ── Media ────────────────────────────────────────────────────────

    def save_screenshot(
        self,
        file_path: str,
        source_name: Optional[str] = None,
        image_format: str = "png",
        width: Optional[int] = None,
        height: Optional[int] = None,
        quality: Optional[int] = None,
    ) -> str:
        params: dict[str, Any] = {
            "sourceName": source_name or self.get_current_scene(),
            "imageFormat": image_format,
            "imageFilePath": file_path,
        }
        if width is not None:
            params["imageWidth"] = width
        if height is not None:
            params["imageHeight"] = height
        if quality is not None:
            params["imageCompressionQuality"] = quality
        self.call("SaveSourceScreenshot", **params)
        return file_path

    def start_virtual_camera(self) -> None:
        self.call("StartVirtualCam")

    def stop_virtual_camera(self) -> None:
        self.call("StopVirtualCam")

    # ── System ───────────────────────────────────────────────────────

    def get_stats(self) -> PerformanceStats:
        return PerformanceStats.from_reply(self.call("GetStats"))

    def get_version(self) -> VersionInfo:
        d = self.call("GetVersion")
        return VersionInfo(
            obs_version=d.get("obsVersion", ""),
            obs_web_socket_version=d.get("obsWebSocketVersion", ""),
            platform=d.get("platformDescription") or d.get("platform", ""),
        )
