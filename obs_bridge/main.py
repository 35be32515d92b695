"""
main.py — obs-bridge application entrypoint.

CLI:
  python run.py serve                      start the HTTP API
  python run.py call RESOURCE ACTION -p k=v one-shot tool call
  python run.py check                      test OBS connectivity
  python run.py init-config                create a default config.yaml
  python run.py guides [NAME]              print a usage guide
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import typer
import uvicorn
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.table import Table

from obs_bridge import __version__
from obs_bridge.config import Settings, reload_settings
from obs_bridge.core.errors import BridgeError
from obs_bridge.guides import GUIDES
from obs_bridge.routers import is_error
from obs_bridge.service import BridgeService

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(name="obs-bridge", help="Remote OBS Studio control over obs-websocket")


def setup_logging(level: str = "info") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True, show_path=False)],
    )


def _apply_overrides(obs_host: Optional[str], obs_port: Optional[int], obs_password: Optional[str]) -> None:
    if obs_host:
        os.environ["OBS_HOST"] = obs_host
    if obs_port:
        os.environ["OBS_PORT"] = str(obs_port)
    if obs_password:
        os.environ["OBS_PASSWORD"] = obs_password


def parse_params(pairs: list[str]) -> dict[str, str]:
    params: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"expected key=value, got {pair!r}", param_hint="--param")
        params[key.strip()] = value
    return params


# ──────────────────────────────────────────────────────────────────────────────
# CLI commands
# ──────────────────────────────────────────────────────────────────────────────

@app.command()
def serve(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
    host: Optional[str] = typer.Option(None, "--host", help="API bind host"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="API port"),
    obs_host: Optional[str] = typer.Option(None, "--obs-host", help="OBS WebSocket host"),
    obs_port: Optional[int] = typer.Option(None, "--obs-port", help="OBS WebSocket port"),
    obs_password: Optional[str] = typer.Option(None, "--obs-password", help="OBS WebSocket password"),
    connect: bool = typer.Option(False, "--connect/--no-connect", help="Connect to OBS on startup"),
):
    """Start the obs-bridge HTTP API."""
    from obs_bridge.api import create_app

    if host:
        os.environ["API_HOST"] = host
    if port:
        os.environ["API_PORT"] = str(port)
    _apply_overrides(obs_host, obs_port, obs_password)

    settings = reload_settings(config)
    setup_logging(settings.api.log_level)
    console.rule(f"[bold blue]obs-bridge v{__version__}[/bold blue]")

    service = BridgeService(settings.obs)
    if connect:
        result = service.dispatch("obs_connection", "Connect")
        if is_error(result):
            console.print(f"[yellow]⚠ {result} — connect later with obs_connection Connect[/yellow]")
        else:
            console.print(f"[green]✓ OBS[/green]       {result}")

    console.print(f"[green]✓ API[/green]       http://{settings.api.host}:{settings.api.port}/tools")
    if settings.api.api_key:
        console.print("[green]✓ Auth[/green]      API key set — Bearer token required")
    else:
        console.print("[yellow]⚠ Auth[/yellow]      No API key set — open access (bind to localhost only)")
    console.print(f"[green]✓ Docs[/green]      http://{settings.api.host}:{settings.api.port}/docs\n")

    uvicorn.run(
        create_app(service, settings.api),
        host=settings.api.host,
        port=settings.api.port,
        log_level=settings.api.log_level,
    )


@app.command()
def call(
    resource: str = typer.Argument(..., help="Resource, e.g. obs_recording or recording"),
    action: str = typer.Argument(..., help="Action, e.g. Start"),
    param: list[str] = typer.Option([], "--param", "-p", help="Action parameter as key=value (repeatable)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
    connect: bool = typer.Option(True, "--connect/--no-connect", help="Connect first using config/env"),
):
    """Run a single tool call and print its result."""
    settings = reload_settings(config)
    setup_logging(os.environ.get("BRIDGE_LOG_LEVEL", "warning"))
    params = parse_params(param)

    service = BridgeService(settings.obs)
    try:
        if connect and service.router(resource).resource != "obs_connection":
            result = service.dispatch("obs_connection", "Connect")
            if is_error(result):
                console.print(f"[red]{result}[/red]")
                raise typer.Exit(1)
        result = service.dispatch(resource, action, params)
    except BridgeError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    finally:
        service.close()

    if is_error(result):
        console.print(f"[red]{result}[/red]")
        raise typer.Exit(1)
    console.print(result, markup=False)


@app.command("check")
def check_obs(
    host: str = typer.Option("localhost", "--host"),
    port: int = typer.Option(4455, "--port"),
    password: str = typer.Option("", "--password"),
    timeout: float = typer.Option(10.0, "--timeout"),
):
    """Test OBS WebSocket connectivity."""
    setup_logging("warning")
    service = BridgeService()
    try:
        service.connections.connect(host, port, password or None, timeout)
        version = service.bridge.get_version()
        scenes = service.bridge.get_scenes()
        inputs = service.bridge.get_special_inputs()
    except BridgeError as e:
        console.print(f"[red]✗ Could not talk to OBS at {host}:{port}: {e}[/red]")
        sys.exit(1)
    finally:
        service.close()

    console.print("[green]✓ Connected to OBS[/green]")
    console.print(f"  OBS version:       {version.obs_version}")
    console.print(f"  WebSocket version: {version.obs_web_socket_version}")
    console.print(f"  Platform:          {version.platform}")
    console.print(f"  Scenes ({len(scenes)}): {', '.join(s.name for s in scenes)}")
    console.print(f"  Audio inputs: {', '.join(i.name for i in inputs) or 'none'}")


@app.command("init-config")
def init_config(
    output: Path = typer.Option(Path("config.yaml"), "--output", "-o"),
):
    """Generate a default config.yaml."""
    s = Settings.load()
    s.to_yaml(output)
    console.print(f"[green]✓[/green] Config written to [bold]{output}[/bold]")


@app.command("guides")
def guides_cmd(
    name: Optional[str] = typer.Argument(None, help="Guide name; omit to list guides"),
):
    """Print a usage guide."""
    if name is None:
        table = Table(title="Guides", show_header=True)
        table.add_column("Name", style="cyan")
        table.add_column("Title")
        for key, text in GUIDES.items():
            table.add_row(key, text.splitlines()[0].lstrip("# "))
        console.print(table)
        return
    if name not in GUIDES:
        console.print(f"[red]Unknown guide '{name}'. Available: {', '.join(GUIDES)}[/red]")
        raise typer.Exit(1)
    console.print(Markdown(GUIDES[name]))


if __name__ == "__main__":
    app()
