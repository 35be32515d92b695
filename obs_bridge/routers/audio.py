"""
routers/audio.py — obs_audio.

Volume crosses this boundary as a linear multiplier in [0.0, 1.0]. The dB
figure shown by GetVolume is whatever OBS derives from it, for display only.
"""

from __future__ import annotations

from .base import ActionRequest, ActionRouter, Handler


class AudioRouter(ActionRouter):
    resource = "obs_audio"

    def routes(self) -> dict[str, Handler]:
        return {
            "GetInputs": self.get_inputs,
            "Mute": self.mute,
            "Unmute": self.unmute,
            "GetMuteState": self.get_mute_state,
            "SetVolume": self.set_volume,
            "GetVolume": self.get_volume,
            "MuteAll": self.mute_all,
            "UnmuteAll": self.unmute_all,
        }

    def get_inputs(self, req: ActionRequest) -> str:
        inputs = self.bridge.get_special_inputs()
        if not inputs:
            return "No audio inputs found"
        lines = ["Audio Inputs:"]
        for audio_input in inputs:
            muted = " (muted)" if self.bridge.get_input_mute(audio_input.name) else ""
            lines.append(f"- {audio_input.name}: {audio_input.kind}{muted}")
        return "\n".join(lines)

    def mute(self, req: ActionRequest) -> str:
        input_name = req.require_str("inputName")
        self.bridge.set_input_mute(input_name, True)
        return f"Muted '{input_name}'"

    def unmute(self, req: ActionRequest) -> str:
        input_name = req.require_str("inputName")
        self.bridge.set_input_mute(input_name, False)
        return f"Unmuted '{input_name}'"

    def get_mute_state(self, req: ActionRequest) -> str:
        input_name = req.require_str("inputName")
        muted = self.bridge.get_input_mute(input_name)
        return f"'{input_name}' is {'muted' if muted else 'unmuted'}"

    def set_volume(self, req: ActionRequest) -> str:
        input_name = req.require_str("inputName")
        volume = req.require_float("volume", 0.0, 1.0)
        self.bridge.set_input_volume(input_name, volume)
        return f"Set volume of '{input_name}' to {volume:.0%}"

    def get_volume(self, req: ActionRequest) -> str:
        input_name = req.require_str("inputName")
        level = self.bridge.get_input_volume(input_name)
        return f"Volume of '{input_name}': {level.mul:.0%} ({level.db:.1f} dB)"

    def mute_all(self, req: ActionRequest) -> str:
        names = self._set_all(True)
        if not names:
            return "No audio inputs found to mute"
        return f"Muted all audio inputs: {', '.join(names)}"

    def unmute_all(self, req: ActionRequest) -> str:
        names = self._set_all(False)
        if not names:
            return "No audio inputs found to unmute"
        return f"Unmuted all audio inputs: {', '.join(names)}"

    def _set_all(self, muted: bool) -> list[str]:
        names = []
        for audio_input in self.bridge.get_special_inputs():
            self.bridge.set_input_mute(audio_input.name, muted)
            names.append(audio_input.name)
        return names
