"""
Shared fakes: a scripted in-memory transport standing in for obs-websocket-py.
"""

import math
import threading
import time

import pytest

from obs_bridge.config import OBSSettings
from obs_bridge.core.errors import ProtocolFailure
from obs_bridge.core.transport import CONNECTED, DISCONNECTED
from obs_bridge.service import BridgeService


class FakeTransport:
    """
    behaviour:
      "connect"        emit connected synchronously from open()
      "connect_later"  emit connected from another thread after a short delay
      "fail"           emit disconnected with `fail_reason`
      "hang"           never answer
    """

    def __init__(self, host, port, password, behaviour="connect", fail_reason="Authentication failed"):
        self.host = host
        self.port = port
        self.password = password
        self.behaviour = behaviour
        self.fail_reason = fail_reason
        self.opened = False
        self.closed = False
        self.listeners = {CONNECTED: [], DISCONNECTED: []}
        self.requests = []  # (path, name, params), path is "call" or "raw"
        self.replies = {}
        self.raw_replies = {}
        self.failures = {}
        self.raw_failures = {}
        self.state = {"muted": {}, "volume": {}}

    # ── lifecycle ────────────────────────────────────────────────────

    def open(self):
        self.opened = True
        if self.behaviour == "connect":
            self.emit(CONNECTED)
        elif self.behaviour == "connect_later":
            def later():
                time.sleep(0.05)
                self.emit(CONNECTED)
            threading.Thread(target=later, daemon=True).start()
        elif self.behaviour == "fail":
            self.emit(DISCONNECTED, self.fail_reason)

    def close(self):
        self.closed = True

    def emit(self, event, reason=None):
        for cb in list(self.listeners[event]):
            cb(reason)

    def add_listener(self, event, callback):
        self.listeners[event].append(callback)

    def remove_listener(self, event, callback):
        if callback in self.listeners[event]:
            self.listeners[event].remove(callback)

    def listener_count(self):
        return sum(len(cbs) for cbs in self.listeners.values())

    # ── requests ─────────────────────────────────────────────────────

    def names(self, path=None):
        return [name for p, name, _ in self.requests if path is None or p == path]

    def call(self, name, params):
        self.requests.append(("call", name, dict(params)))
        if name in self.failures:
            raise ProtocolFailure(f"{name} failed: {self.failures[name]}")
        return self._reply(name, params, self.replies)

    def send_request(self, name, params):
        self.requests.append(("raw", name, dict(params)))
        if name in self.raw_failures:
            raise ProtocolFailure(f"{name} failed: {self.raw_failures[name]}")
        if name in self.raw_replies:
            return self.raw_replies[name]
        return self._reply(name, params, self.replies)

    def _reply(self, name, params, table):
        if name in table:
            reply = table[name]
            return reply(params) if callable(reply) else reply
        if name == "SetInputMute":
            self.state["muted"][params["inputName"]] = params["inputMuted"]
        elif name == "GetInputMute":
            return {"inputMuted": self.state["muted"].get(params["inputName"], False)}
        elif name == "SetInputVolume":
            self.state["volume"][params["inputName"]] = params["inputVolumeMul"]
        elif name == "GetInputVolume":
            mul = self.state["volume"].get(params["inputName"], 1.0)
            db = 20 * math.log10(mul) if mul > 0 else -100.0
            return {"inputVolumeMul": mul, "inputVolumeDb": round(db, 1)}
        elif name == "GetCurrentProgramScene":
            return {"currentProgramSceneName": "Main"}
        return {}


class FakeFactory:
    def __init__(self, behaviour="connect"):
        self.behaviour = behaviour
        self.created = []
        # for every transport created: (closed, listener_count) of each earlier one at that moment
        self.prior_snapshots = []

    def __call__(self, host, port, password):
        self.prior_snapshots.append([(t.closed, t.listener_count()) for t in self.created])
        transport = FakeTransport(host, port, password, behaviour=self.behaviour)
        self.created.append(transport)
        return transport

    @property
    def last(self):
        return self.created[-1]


@pytest.fixture
def obs_settings():
    return OBSSettings(host="obs.local", port=4455, password="secret", connect_timeout=1.0)


@pytest.fixture
def factory():
    return FakeFactory()


@pytest.fixture
def service(obs_settings, factory):
    return BridgeService(obs_settings, transport_factory=factory)


@pytest.fixture
def connected(service, factory):
    """A service with a live fake session; returns (service, transport) with no requests recorded yet."""
    result = service.dispatch("obs_connection", "Connect")
    assert result == "Connected to OBS at obs.local:4455"
    transport = factory.last
    transport.requests.clear()
    return service, transport
