"""
routers/media.py — obs_media: screenshots and the virtual camera.

SaveScreenshot does not create the destination directory; OBS writes the
file and fails if the directory is missing.
"""

from __future__ import annotations

from pathlib import PurePath

from obs_bridge.core.errors import ValidationError

from .base import ActionRequest, ActionRouter, Handler

IMAGE_FORMATS = ["png", "jpg", "jpeg", "bmp"]
_EXTENSION_FORMATS = {".jpg": "jpg", ".jpeg": "jpg", ".bmp": "bmp"}


def format_from_extension(file_path: str) -> str:
    return _EXTENSION_FORMATS.get(PurePath(file_path).suffix.lower(), "png")


class MediaRouter(ActionRouter):
    resource = "obs_media"

    def routes(self) -> dict[str, Handler]:
        return {
            "SaveScreenshot": self.save_screenshot,
            "StartVirtualCamera": self.start_virtual_camera,
            "StopVirtualCamera": self.stop_virtual_camera,
        }

    def save_screenshot(self, req: ActionRequest) -> str:
        file_path = req.require_str(
            "filePath", ". Please provide a full file path (e.g., C:/Screenshots/capture.png)"
        )
        image_format = req.optional_str("imageFormat")
        if image_format is None:
            image_format = format_from_extension(file_path)
        else:
            image_format = image_format.strip().lower()
            if image_format not in IMAGE_FORMATS:
                raise ValidationError(f"Invalid imageFormat. Valid formats: {', '.join(IMAGE_FORMATS)}")
        width = req.optional_int("width", 8, 4096)
        height = req.optional_int("height", 8, 4096)
        quality = req.optional_int("quality", -1, 100)
        if quality == 0:
            raise ValidationError("quality must be between 1 and 100, or -1 for the OBS default")

        self.bridge.save_screenshot(file_path, req.optional_str("sourceName"), image_format, width, height, quality)
        return f"Screenshot saved to: {file_path}"

    def start_virtual_camera(self, req: ActionRequest) -> str:
        self.bridge.start_virtual_camera()
        return "Virtual camera started"

    def stop_virtual_camera(self, req: ActionRequest) -> str:
        self.bridge.stop_virtual_camera()
        return "Virtual camera stopped"
