"""
tests/test_api.py — HTTP API, configuration loading and the CLI.
Run with: pytest tests/ -v
"""

from pathlib import Path

import pytest
import typer
import yaml
from fastapi.testclient import TestClient
from typer.testing import CliRunner

from obs_bridge import main
from obs_bridge.api import create_app
from obs_bridge.config import APISettings, OBSSettings, Settings
from obs_bridge.guides import GUIDES
from obs_bridge.service import BridgeService

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for var in ("OBS_HOST", "OBS_PORT", "OBS_PASSWORD", "API_HOST", "API_PORT", "API_API_KEY", "BRIDGE_CONFIG_FILE"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def client(service):
    return TestClient(create_app(service, APISettings()))


@pytest.fixture
def secured(service):
    return TestClient(create_app(service, APISettings(api_key="s3cret")))


# ─── HTTP API ─────────────────────────────────────────────────────────────────

def test_health_reports_disconnected(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["obs_connected"] is False
    assert body["obs_state"] == "idle"
    assert body["obs_address"] is None


def test_healthz_is_503_until_connected(client):
    assert client.get("/healthz").status_code == 503

    r = client.post("/tools/obs_connection/Connect", json={})
    assert r.json() == {
        "resource": "obs_connection", "action": "Connect", "ok": True,
        "result": "Connected to OBS at obs.local:4455",
    }

    assert client.get("/healthz").json() == {"status": "ok"}
    assert client.get("/health").json()["obs_address"] == "obs.local:4455"


def test_tool_call_error_is_reported_in_body(client):
    r = client.post("/tools/obs_recording/Start")
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is False
    assert body["result"].startswith("Error: Not connected to OBS")


def test_tool_call_with_params(client, factory):
    client.post("/tools/obs_connection/Connect")
    r = client.post("/tools/obs_scene/Set", json={"sceneName": "Live"})
    assert r.json()["result"] == "Switched to scene: Live"
    assert factory.last.requests[-1] == ("call", "SetCurrentProgramScene", {"sceneName": "Live"})


def test_tools_catalog(client):
    catalog = client.get("/tools").json()
    assert set(catalog) == {
        "obs_connection", "obs_recording", "obs_streaming", "obs_scene", "obs_source", "obs_audio", "obs_media",
    }
    assert "SetWindowCapture" in catalog["obs_source"]


def test_auth_required_when_key_set(secured):
    assert secured.get("/tools").status_code == 401
    assert secured.get("/tools", headers={"Authorization": "Bearer nope"}).status_code == 403
    assert secured.get("/tools", headers={"Authorization": "Bearer s3cret"}).status_code == 200
    assert secured.post("/tools/obs_scene/List").status_code == 401
    # health stays open
    assert secured.get("/health").status_code == 200


def test_guides(client):
    assert client.get("/guides").json() == sorted(GUIDES)
    r = client.get("/guides/error-recovery")
    assert r.json()["markdown"].startswith("# Error Recovery")
    assert client.get("/guides/nope").status_code == 404


def test_lifespan_closes_session(service):
    with TestClient(create_app(service, APISettings())) as c:
        c.post("/tools/obs_connection/Connect")
        assert service.connections.is_connected()
    assert not service.connections.is_connected()


# ─── Configuration ────────────────────────────────────────────────────────────

def test_defaults():
    s = Settings.load()
    assert (s.obs.host, s.obs.port, s.obs.password) == ("localhost", 4455, None)
    assert s.obs.connect_timeout == 10.0
    assert (s.api.host, s.api.port, s.api.api_key) == ("127.0.0.1", 8765, None)


def test_yaml_then_env(tmp_path, monkeypatch):
    path = tmp_path / "bridge.yaml"
    path.write_text(yaml.safe_dump({"obs": {"host": "studio", "port": 4460}, "api": {"port": 9000}}))

    s = Settings.load(path)
    assert (s.obs.host, s.obs.port, s.api.port) == ("studio", 4460, 9000)

    monkeypatch.setenv("OBS_PORT", "4470")
    s = Settings.load(path)
    assert (s.obs.host, s.obs.port) == ("studio", 4470)


def test_port_is_validated():
    with pytest.raises(ValueError):
        OBSSettings(port=70000)


def test_to_yaml_round_trips(tmp_path):
    path = tmp_path / "out.yaml"
    Settings.load().to_yaml(path)
    data = yaml.safe_load(path.read_text())
    assert data["obs"]["port"] == 4455
    assert data["api"]["port"] == 8765


# ─── CLI ──────────────────────────────────────────────────────────────────────

def test_parse_params():
    assert main.parse_params(["sceneName=Live", "path=C:/a=b"]) == {"sceneName": "Live", "path": "C:/a=b"}
    with pytest.raises(typer.BadParameter):
        main.parse_params(["novalue"])


def test_cli_guides():
    result = runner.invoke(main.app, ["guides", "command-reference"])
    assert result.exit_code == 0
    assert "Command Reference" in result.output

    result = runner.invoke(main.app, ["guides", "missing"])
    assert result.exit_code == 1


def test_cli_init_config():
    result = runner.invoke(main.app, ["init-config", "--output", "generated.yaml"])
    assert result.exit_code == 0
    assert Path("generated.yaml").exists()


@pytest.fixture
def fake_cli_service(monkeypatch, factory):
    monkeypatch.setattr(main, "BridgeService", lambda obs_settings=None: BridgeService(obs_settings, factory))
    return factory


def test_cli_call_connects_first(fake_cli_service):
    result = runner.invoke(main.app, ["call", "scene", "GetCurrent"])
    assert result.exit_code == 0
    assert "Current scene: Main" in result.output
    assert fake_cli_service.last.closed


def test_cli_call_error_exits_nonzero(fake_cli_service):
    result = runner.invoke(main.app, ["call", "obs_recording", "SetFormat", "-p", "format=avi"])
    assert result.exit_code == 1
    assert "Invalid format" in result.output


def test_cli_call_without_connect(fake_cli_service):
    result = runner.invoke(main.app, ["call", "obs_scene", "List", "--no-connect"])
    assert result.exit_code == 1
    assert "Not connected to OBS" in result.output
    assert fake_cli_service.created == []
