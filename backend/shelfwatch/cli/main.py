"""CLI entrypoint for shelfwatch."""

from __future__ import annotations

import json
import os
from typing import Optional

import requests
import typer

app = typer.Typer(name="shelfwatch", help="shelfwatch command-line interface")

DEFAULT_HOST = "http://127.0.0.1:8000"


def _resolve_host(override: Optional[str]) -> str:
    if override:
        return override.rstrip("/")
    env_host = os.environ.get("SHW_HOST")
    if env_host:
        return env_host.rstrip("/")
    return DEFAULT_HOST


def _request(method: str, path: str, host: Optional[str] = None, **kwargs) -> requests.Response:
    base = _resolve_host(host)
    url = f"{base}{path}"
    resp = requests.request(method, url, timeout=30, **kwargs)
    if not resp.ok:
        try:
            detail = resp.json()
        except ValueError:
            detail = resp.text
        typer.echo(f"Request failed ({resp.status_code}): {detail}", err=True)
        raise typer.Exit(code=1)
    return resp


def _location_path(network_id: str, location_id: str, suffix: str) -> str:
    return f"/networks/{network_id}/locations/{location_id}/{suffix}"


@app.command()
def slots(
    network_id: str = typer.Argument(..., help="Network identifier"),
    location_id: str = typer.Argument(..., help="Location identifier"),
    status: Optional[str] = typer.Option(None, "--status", help="Only show slots with this status"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Show projected slots for a location."""
    payload = _request("GET", _location_path(network_id, location_id, "slots"), host=host).json()
    if status:
        wanted = status.upper()
        payload["slots"] = [slot for slot in payload["slots"] if slot["status"] == wanted]
    typer.echo(json.dumps(payload, indent=2))


@app.command()
def summary(
    network_id: str = typer.Argument(..., help="Network identifier"),
    location_id: str = typer.Argument(..., help="Location identifier"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Show slot counts per status."""
    resp = _request("GET", _location_path(network_id, location_id, "summary"), host=host)
    typer.echo(json.dumps(resp.json(), indent=2))


@app.command()
def devices(
    network_id: str = typer.Argument(..., help="Network identifier"),
    location_id: str = typer.Argument(..., help="Location identifier"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Show brains and nodes with their online state."""
    resp = _request("GET", _location_path(network_id, location_id, "devices"), host=host)
    typer.echo(json.dumps(resp.json(), indent=2))


if __name__ == "__main__":
    app()
