"""
core/transport.py — Thin adapter over obs-websocket-py.

The bridge only needs four things from the wire client:
  - open()                     → start the handshake without blocking
  - call(name, params)         → structured request through the library's generated request classes
  - send_request(name, params) → raw request built by name, reply returned undecoded
  - connected / disconnected   → subscribable lifecycle events

obs-websocket-py's connect() blocks, so the handshake runs on its own
daemon thread and reports back through the lifecycle events. Listeners run
on that thread, never on the caller's.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, Protocol

from obswebsocket import obsws, requests as obs_requests, events as obs_events  # type: ignore
from obswebsocket.base_classes import Baserequests  # type: ignore

from .errors import ProtocolFailure

log = logging.getLogger(__name__)

CONNECTED = "connected"
DISCONNECTED = "disconnected"

Listener = Callable[[Optional[str]], None]


class Transport(Protocol):
    def open(self) -> None: ...

    def close(self) -> None: ...

    def call(self, name: str, params: dict) -> dict: ...

    def send_request(self, name: str, params: dict) -> Any: ...

    def add_listener(self, event: str, callback: Listener) -> None: ...

    def remove_listener(self, event: str, callback: Listener) -> None: ...

    def listener_count(self) -> int: ...


TransportFactory = Callable[[str, int, Optional[str]], Transport]


class RawRequest(Baserequests):
    """
    A request assembled from a bare name and parameter dict.

    Skips the generated request class for `name`, so the reply's datain is
    handed back exactly as OBS sent it instead of going through the
    library's typed accessors.
    """

    def __init__(self, name: str, params: Optional[dict] = None):
        Baserequests.__init__(self)
        self.name = name
        self.dataout = dict(params or {})


def _failure_comment(response: Any) -> str:
    datain = getattr(response, "datain", None) or {}
    if isinstance(datain, dict):
        return datain.get("comment") or datain.get("error") or "request rejected by OBS"
    return "request rejected by OBS"


class ObsWebSocketTransport:
    def __init__(
        self,
        host: str = "localhost",
        port: int = 4455,
        password: Optional[str] = None,
        request_timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.password = password or ""
        self.request_timeout = request_timeout

        self._ws: Optional[Any] = None
        self._open = False
        self._closed = False
        self._handshake: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._listeners: dict[str, list[Listener]] = {CONNECTED: [], DISCONNECTED: []}

    @property
    def url(self) -> str:
        return f"ws://{self.host}:{self.port}"

    def is_open(self) -> bool:
        return self._open

    # ── Lifecycle events ─────────────────────────────────────────────

    def add_listener(self, event: str, callback: Listener) -> None:
        with self._lock:
            self._listeners[event].append(callback)

    def remove_listener(self, event: str, callback: Listener) -> None:
        with self._lock:
            if callback in self._listeners[event]:
                self._listeners[event].remove(callback)

    def listener_count(self) -> int:
        with self._lock:
            return sum(len(cbs) for cbs in self._listeners.values())

    def _emit(self, event: str, reason: Optional[str] = None) -> None:
        with self._lock:
            callbacks = list(self._listeners[event])
        for cb in callbacks:
            try:
                cb(reason)
            except Exception as e:
                log.error(f"{event} listener error: {e}")

    # ── Connection ───────────────────────────────────────────────────

    def open(self) -> None:
        self._ws = obsws(
            self.host,
            self.port,
            self.password,
            timeout=self.request_timeout,
            on_disconnect=self._on_socket_lost,
        )
        self._ws.register(self._on_exit_started, obs_events.ExitStarted)
        self._handshake = threading.Thread(
            target=self._run_handshake,
            name=f"obs-handshake-{self.host}:{self.port}",
            daemon=True,
        )
        self._handshake.start()

    def _run_handshake(self) -> None:
        ws = self._ws
        try:
            ws.connect()
        except Exception as e:
            reason = str(e) or type(e).__name__
            log.warning(f"OBS handshake with {self.url} failed: {reason}")
            self._emit(DISCONNECTED, reason)
            return
        with self._lock:
            closed = self._closed
            if not closed:
                self._open = True
        if closed:
            # close() ran while the handshake was in flight; don't leak the socket
            self._disconnect_quietly(ws)
            return
        log.info(f"Connected to OBS at {self.host}:{self.port}")
        self._emit(CONNECTED)

    def _session_lost(self, reason: str) -> None:
        with self._lock:
            was_open, self._open = self._open, False
        if was_open:
            log.warning(f"OBS session at {self.url} lost: {reason}")
            self._emit(DISCONNECTED, reason)

    def _on_exit_started(self, _event: Any = None) -> None:
        """OBS is shutting down; the socket is about to go away."""
        self._session_lost("OBS is shutting down")

    def _on_socket_lost(self, _ws: Any = None) -> None:
        """obsws on_disconnect hook, called from its receive thread when the socket drops."""
        self._session_lost("connection to OBS lost")

    def close(self) -> None:
        with self._lock:
            self._closed = True
            was_open, self._open = self._open, False
        if self._ws is not None:
            if was_open:
                self._disconnect_quietly(self._ws)
            try:
                self._ws.unregister(self._on_exit_started, obs_events.ExitStarted)
            except Exception as e:
                log.debug(f"unregister ExitStarted: {e}")
        self._ws = None

    @staticmethod
    def _disconnect_quietly(ws: Any) -> None:
        try:
            ws.disconnect()
        except Exception as e:
            log.debug(f"OBS disconnect raised: {e}")

    # ── Requests ─────────────────────────────────────────────────────

    def _require_ws(self) -> Any:
        if not self._open or self._ws is None:
            raise ProtocolFailure("OBS socket is not open")
        return self._ws

    def call(self, name: str, params: dict) -> dict:
        ws = self._require_ws()
        log.debug(f"→ {name} {params}")
        try:
            response = ws.call(getattr(obs_requests, name)(**params))
        except Exception as e:
            raise ProtocolFailure(f"{name} failed: {e}") from e
        if getattr(response, "status", True) is False:
            raise ProtocolFailure(f"{name} failed: {_failure_comment(response)}")
        return dict(getattr(response, "datain", None) or {})

    def send_request(self, name: str, params: dict) -> Any:
        ws = self._require_ws()
        log.debug(f"→ raw {name} {params}")
        try:
            response = ws.call(RawRequest(name, params))
        except Exception as e:
            raise ProtocolFailure(f"{name} failed: {e}") from e
        if getattr(response, "status", True) is False:
            raise ProtocolFailure(f"{name} failed: {_failure_comment(response)}")
        return getattr(response, "datain", None)


def obs_transport_factory(request_timeout: float = 10.0) -> TransportFactory:
    def factory(host: str, port: int, password: Optional[str]) -> Transport:
        return ObsWebSocketTransport(host, port, password, request_timeout=request_timeout)
    return factory
