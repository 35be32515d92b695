"""
obs-bridge — Remote control of OBS Studio over obs-websocket.

Modules:
  core/      — OBS session, transport adapter & per-capability requests
  workflows/ — Multi-step operations (recording with audio safety)
  routers/   — One action router per resource (connection, recording, ...)
  api/       — FastAPI surface for tool calls
  config/    — Settings, env loading, YAML config
"""

__version__ = "1.0.0"
