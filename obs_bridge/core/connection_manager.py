"""
core/connection_manager.py — Owner of the single OBS Session.

connect() turns the transport's asynchronous connected/disconnected events
into one blocking call bounded by a timeout. Every other component reaches
the socket through get_client(), which refuses with NotConnected unless the
Session is live.

State machine per Session:

    idle → connecting → connected → disconnected
                      ↘ failed
                      ↘ timed_out
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import ConnectTimeout, NotConnected, ProtocolFailure
from .transport import CONNECTED, DISCONNECTED, Transport, TransportFactory

log = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT = 10.0


class ConnectionState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    DISCONNECTED = "disconnected"


class PendingConnect:
    """
    One-shot outcome of a single connect attempt.

    Whichever of succeed()/fail() runs first records the outcome and
    releases the waiter; later calls are ignored.
    """

    def __init__(self):
        self._done = threading.Event()
        self._lock = threading.Lock()
        self.failure: Optional[str] = None

    def succeed(self, _reason: Optional[str] = None) -> None:
        with self._lock:
            if self._done.is_set():
                return
            self._done.set()

    def fail(self, reason: Optional[str] = None) -> None:
        with self._lock:
            if self._done.is_set():
                return
            self.failure = reason or "connection closed during handshake"
            self._done.set()

    def wait(self, timeout: float) -> bool:
        return self._done.wait(timeout)


@dataclass
class Session:
    transport: Transport
    host: str
    port: int
    password: Optional[str] = None
    state: ConnectionState = ConnectionState.IDLE

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


class ConnectionManager:
    def __init__(self, transport_factory: TransportFactory, default_timeout: float = DEFAULT_CONNECT_TIMEOUT):
        self._factory = transport_factory
        self.default_timeout = default_timeout
        self._session: Optional[Session] = None
        self._lock = threading.RLock()

    # ── Lifecycle ────────────────────────────────────────────────────

    def connect(
        self,
        host: str,
        port: int,
        password: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Session:
        timeout = self.default_timeout if timeout is None else timeout
        with self._lock:
            self._teardown()

            transport = self._factory(host, port, password)
            session = Session(transport, host, port, password, ConnectionState.CONNECTING)
            self._session = session
            pending = PendingConnect()
            transport.add_listener(CONNECTED, pending.succeed)
            transport.add_listener(DISCONNECTED, pending.fail)

            log.info(f"Connecting to OBS at {session.address} (timeout {timeout:g}s)")
            try:
                transport.open()
                finished = pending.wait(timeout)
            except Exception:
                session.state = ConnectionState.FAILED
                self._teardown()
                raise
            finally:
                transport.remove_listener(CONNECTED, pending.succeed)
                transport.remove_listener(DISCONNECTED, pending.fail)

            if not finished:
                session.state = ConnectionState.TIMED_OUT
                self._teardown()
                raise ConnectTimeout(f"Connection to OBS at {session.address} timed out after {timeout:g}s")

            if pending.failure is not None:
                session.state = ConnectionState.FAILED
                self._teardown()
                raise ProtocolFailure(f"Connection failed: {pending.failure}")

            session.state = ConnectionState.CONNECTED
            transport.add_listener(DISCONNECTED, self._on_session_lost)
            return session

    def disconnect(self) -> None:
        with self._lock:
            if self._session is not None:
                log.info(f"Disconnecting from OBS at {self._session.address}")
            self._teardown()

    close = disconnect

    def _teardown(self) -> None:
        session, self._session = self._session, None
        if session is None:
            return
        session.transport.remove_listener(DISCONNECTED, self._on_session_lost)
        try:
            session.transport.close()
        finally:
            if session.state in (ConnectionState.CONNECTING, ConnectionState.CONNECTED):
                session.state = ConnectionState.DISCONNECTED

    def _on_session_lost(self, reason: Optional[str] = None) -> None:
        with self._lock:
            session = self._session
            if session is not None and session.state is ConnectionState.CONNECTED:
                session.state = ConnectionState.DISCONNECTED
                log.warning(f"OBS session at {session.address} dropped: {reason or 'unknown reason'}")

    # ── Accessors ────────────────────────────────────────────────────

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def state(self) -> ConnectionState:
        session = self._session
        return session.state if session else ConnectionState.IDLE

    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    def get_client(self) -> Transport:
        session = self._session
        if session is None or session.state is not ConnectionState.CONNECTED:
            raise NotConnected()
        return session.transport

    def __enter__(self) -> "ConnectionManager":
        return self

    def __exit__(self, *exc) -> None:
        self.disconnect()
