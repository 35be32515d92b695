"""
guides.py — Static markdown guides served by the API and the CLI.
"""

from __future__ import annotations

RECORDING_BEST_PRACTICES = """\
# Recording Best Practices

## Before recording

1. **Add a capture source first.** A scene without a capture source records
   a black frame. Use `obs_source` AddWindowCapture for one application, or
   add a Display Capture in OBS for a whole monitor.
2. **Decide on audio.** Start mutes Desktop Audio and every Mic/Aux input
   unless you pass `muteAudio=false`.
3. **Check the output directory** with `obs_recording` GetPath, or pass
   `path` to Start.

## Format

- **mkv** survives an OBS crash; remux to mp4 afterwards.
- **mp4** plays everywhere but is unreadable if OBS dies mid-recording.
- **mov** suits macOS editing workflows.

## Quality presets

Stream, Small, HQ and Lossless. HQ is the usual choice; Lossless files are
very large.

## Tips

- Connect and check GetStatus before anything else.
- Window titles change: list windows again right before selecting one.
- Prefer Pause/Resume over Stop/Start for short breaks.
"""

COMMAND_REFERENCE = """\
# Command Reference

| Resource | Actions |
|----------|---------|
| obs_connection | Connect, Disconnect, GetStatus, GetStats |
| obs_recording | Start, Stop, Pause, Resume, GetStatus, GetSettings, SetFormat, SetQuality, SetPath, GetPath |
| obs_streaming | Start, Stop, GetStatus |
| obs_scene | List, GetCurrent, Set, ListSources |
| obs_source | AddWindowCapture, ListWindows, SetWindowCapture, Remove, SetEnabled |
| obs_audio | GetInputs, Mute, Unmute, GetMuteState, SetVolume, GetVolume, MuteAll, UnmuteAll |
| obs_media | SaveScreenshot, StartVirtualCamera, StopVirtualCamera |

## Parameters

- obs_connection Connect: `host`, `port`, `password`, `timeout` (seconds).
  Missing values come from OBS_HOST, OBS_PORT, OBS_PASSWORD, then
  localhost:4455.
- obs_recording Start: `path`, `muteAudio` (default true).
  SetFormat: `format` (mp4, mkv, flv, mov, ts).
  SetQuality: `quality` (Stream, Small, HQ, Lossless). SetPath: `path`.
- obs_scene Set: `sceneName`. ListSources: `sceneName` (optional).
- obs_source: `sourceName`, `sceneName` (optional), `windowValue`, `enabled`.
- obs_audio: `inputName`, `volume` (0.0 to 1.0).
- obs_media SaveScreenshot: `filePath`, `sourceName`, `imageFormat`,
  `width`, `height`, `quality`.
"""

ERROR_RECOVERY = """\
# Error Recovery

## "Not connected to OBS"
1. Make sure OBS is running.
2. Enable the WebSocket server under Tools → WebSocket Server Settings.
3. Connect with the port and password shown there.

## "Connection ... timed out" / "Connection failed"
- Wrong host or port, or a firewall is blocking the port.
- Wrong password (it is case-sensitive).

## Recording
- "already active": check GetStatus, then Stop.
- "not active": nothing to stop or pause; Start first.
- Output directory problems: SetPath to an existing directory.

## Sources and scenes
- "Source ... not found in scene": names are case-sensitive; check
  `obs_scene` ListSources.
- "Failed to list windows": the source must be a window capture source.

## Full reset
1. `obs_connection` Disconnect
2. `obs_connection` Connect
3. `obs_connection` GetStatus
4. `obs_scene` ListSources
"""

GUIDES: dict[str, str] = {
    "recording-best-practices": RECORDING_BEST_PRACTICES,
    "command-reference": COMMAND_REFERENCE,
    "error-recovery": ERROR_RECOVERY,
}

