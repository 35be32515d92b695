"""
config/settings.py — Central configuration via env vars + YAML override.

Priority: explicit action/CLI argument > ENV > config.yaml > defaults
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OBSSettings(BaseSettings):
    host: str = Field("localhost", description="OBS WebSocket host")
    port: int = Field(4455, ge=1, le=65535, description="OBS WebSocket port")
    password: Optional[str] = Field(None, description="OBS WebSocket password")
    connect_timeout: float = Field(10.0, gt=0, description="Seconds to wait for the handshake")
    request_timeout: float = Field(10.0, gt=0, description="Seconds to wait for a single request reply")
    window_capture_kind: str = Field("window_capture", description="Input kind used by AddWindowCapture")

    model_config = SettingsConfigDict(env_prefix="OBS_")


class APISettings(BaseSettings):
    host: str = Field("127.0.0.1", description="API server bind host")
    port: int = Field(8765, description="API server port")
    api_key: Optional[str] = Field(None, description="Bearer token for API auth (optional)")
    cors_origins: list[str] = Field(["*"], description="CORS allowed origins")
    log_level: str = Field("info", description="Log level")

    model_config = SettingsConfigDict(env_prefix="API_")


class Settings(BaseSettings):
    obs: OBSSettings = Field(default_factory=OBSSettings)
    api: APISettings = Field(default_factory=APISettings)
    config_file: Path = Field(Path("config.yaml"), description="Path to YAML config file")

    model_config = SettingsConfigDict(env_prefix="BRIDGE_")

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings, layering environment variables over the YAML file."""
        path = config_path or Path(os.environ.get("BRIDGE_CONFIG_FILE", "config.yaml"))
        yaml_data: dict = {}

        if path.exists():
            with open(path) as f:
                yaml_data = yaml.safe_load(f) or {}

        obs = OBSSettings(**_without_env(yaml_data.get("obs", {}), "OBS_"))
        api = APISettings(**_without_env(yaml_data.get("api", {}), "API_"))

        return cls(obs=obs, api=api, config_file=path)

    def to_yaml(self, path: Path) -> None:
        """Save current settings to YAML."""
        data = {
            "obs": self.obs.model_dump(),
            "api": self.api.model_dump(),
        }
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def _without_env(section: dict, prefix: str) -> dict:
    # init kwargs beat env vars in pydantic-settings; drop the YAML keys the environment sets
    return {k: v for k, v in (section or {}).items() if f"{prefix}{k}".upper() not in os.environ}


# Singleton accessor — call get_settings() anywhere in the app
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings(config_path: Optional[Path] = None) -> Settings:
    global _settings
    _settings = Settings.load(config_path)
    return _settings
