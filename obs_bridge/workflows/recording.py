"""
workflows/recording.py — Start/stop recording with audio safety.

Start runs three steps in order:

  1. set the record directory (when one is given)   → failure aborts
  2. mute every special audio input (when asked)    → failures are reported, never abort
  3. StartRecord                                    → failure aborts

The directory has to be right before OBS opens the output file; muting is a
best-effort safety net. Nothing is rolled back: if step 3 fails, the
directory change from step 1 stays in place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from obs_bridge.core.errors import ProtocolFailure
from obs_bridge.core.request_bridge import RequestBridge

log = logging.getLogger(__name__)


@dataclass
class RecordingStartReport:
    directory: Optional[str] = None
    mute_requested: bool = True
    muted: list[str] = field(default_factory=list)
    mute_failures: list[tuple[str, str]] = field(default_factory=list)

    def summary(self) -> str:
        parts = ["Recording started."]
        if self.muted:
            parts.append("Audio muted.")
        for name, reason in self.mute_failures:
            parts.append(f"Warning: could not mute '{name}': {reason}.")
        if self.directory:
            parts.append(f"Output: {self.directory}")
        return " ".join(parts)


class RecordingWorkflow:
    def __init__(self, bridge: RequestBridge):
        self._bridge = bridge

    def start(self, mute_audio: bool = True, directory: Optional[str] = None) -> RecordingStartReport:
        report = RecordingStartReport(directory=directory or None, mute_requested=mute_audio)

        if directory:
            self._bridge.set_record_directory(directory)

        if mute_audio:
            self._mute_special_inputs(report)

        self._bridge.start_recording()
        log.info(f"Recording started (muted: {', '.join(report.muted) or 'none'})")
        return report

    def _mute_special_inputs(self, report: RecordingStartReport) -> None:
        try:
            inputs = self._bridge.get_special_inputs()
        except ProtocolFailure as e:
            log.warning(f"Could not enumerate audio inputs before recording: {e}")
            report.mute_failures.append(("audio inputs", str(e)))
            return

        for audio_input in inputs:
            try:
                self._bridge.set_input_mute(audio_input.name, True)
            except ProtocolFailure as e:
                log.warning(f"Could not mute '{audio_input.name}' before recording: {e}")
                report.mute_failures.append((audio_input.name, str(e)))
            else:
                report.muted.append(audio_input.name)

    def stop(self) -> str:
        output_path = self._bridge.stop_recording()
        log.info(f"Recording stopped → {output_path}")
        return output_path
