"""api — FastAPI surface for tool calls and guides."""
from .server import create_app

__all__ = ["create_app"]
