"""routers/scene.py — obs_scene: List, GetCurrent, Set, ListSources."""

from __future__ import annotations

from .base import ActionRequest, ActionRouter, Handler


class SceneRouter(ActionRouter):
    resource = "obs_scene"

    def routes(self) -> dict[str, Handler]:
        return {
            "List": self.list_scenes,
            "GetCurrent": self.get_current,
            "Set": self.set_scene,
            "ListSources": self.list_sources,
        }

    def list_scenes(self, req: ActionRequest) -> str:
        scenes = self.bridge.get_scenes()
        if not scenes:
            return "No scenes found"
        lines = [f"Available Scenes ({len(scenes)}):"]
        lines += [f"  - {s.name}{' (current)' if s.is_current else ''}" for s in scenes]
        return "\n".join(lines)

    def get_current(self, req: ActionRequest) -> str:
        return f"Current scene: {self.bridge.get_current_scene()}"

    def set_scene(self, req: ActionRequest) -> str:
        scene_name = req.require_str("sceneName")
        self.bridge.set_scene(scene_name)
        return f"Switched to scene: {scene_name}"

    def list_sources(self, req: ActionRequest) -> str:
        sources = self.bridge.get_sources(req.optional_str("sceneName"))
        if not sources:
            return "No sources found in scene"
        lines = [f"Sources ({len(sources)}):"]
        lines += [
            f"  - {s.name} ({s.kind}) [{'visible' if s.enabled else 'hidden'}]"
            for s in sources
        ]
        return "\n".join(lines)
