"""core — OBS session, transport and per-capability requests."""
from .connection_manager import ConnectionManager, ConnectionState, PendingConnect, Session
from .errors import BridgeError, ConnectTimeout, NotConnected, ProtocolFailure, UnknownAction, ValidationError
from .request_bridge import RequestBridge
from .transport import ObsWebSocketTransport, Transport, obs_transport_factory

__all__ = [
    "BridgeError",
    "ConnectTimeout",
    "ConnectionManager",
    "ConnectionState",
    "NotConnected",
    "ObsWebSocketTransport",
    "PendingConnect",
    "ProtocolFailure",
    "RequestBridge",
    "Session",
    "Transport",
    "UnknownAction",
    "ValidationError",
    "obs_transport_factory",
]
