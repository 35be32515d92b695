"""
core/errors.py — Failure taxonomy shared by every layer of the bridge.

Every failure a caller can observe is one of these. Routers catch
BridgeError and render it as "Error: <message>"; anything else is a bug
and propagates.
"""

from __future__ import annotations


class BridgeError(Exception):
    kind = "error"


class NotConnected(BridgeError):
    """No live Session. Raised before any request reaches the transport."""
    kind = "not_connected"

    def __init__(self, message: str = "Not connected to OBS. Use obs_connection with action=Connect first."):
        super().__init__(message)


class ConnectTimeout(BridgeError):
    kind = "timeout"


class ProtocolFailure(BridgeError):
    """OBS rejected the request, replied with something unusable, or the socket failed."""
    kind = "protocol"


class ValidationError(BridgeError):
    """Caller-supplied parameters rejected locally; no request was sent."""
    kind = "validation"


class UnknownAction(BridgeError):
    kind = "unknown_action"
