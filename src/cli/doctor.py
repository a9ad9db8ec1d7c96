"""Doctor commands for environment diagnostics and user configuration."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from cli.settings_loader import load_settings
from core.config import ProvisionSettings, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(settings: ProvisionSettings) -> tuple[bool, str]:
    # GET on the root never mutates server state; any HTTP answer means it is up.
    try:
        async with build_async_client(settings) as client:
            response = await client.get("/")
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc) or exc.__class__.__name__


def _check_output_dir(output_path: Path) -> tuple[bool, str]:
    """Check that the keys file can be created where it is configured."""

    directory = output_path.resolve().parent
    probe = directory
    while not probe.exists():
        probe = probe.parent
    if not os.access(probe, os.W_OK):
        return False, f"{probe} is not writable"
    if probe != directory:
        return True, f"{directory} will be created"
    return True, str(directory)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = load_settings()

    table = Table(title="mmx-provision Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Admin server", "OK", settings.base_url)
    table.add_row("Admin user", "OK", settings.admin_username)

    ok_http, detail_http = asyncio.run(_check_http(settings))
    table.add_row("HTTP connectivity", "OK" if ok_http else "FAIL", detail_http)

    ok_dir, detail_dir = _check_output_dir(settings.output_path)
    table.add_row("Output directory", "OK" if ok_dir else "FAIL", detail_dir)

    _console.print(table)

    if not ok_http:
        _console.print(
            "\n[yellow]Note:[/yellow] Start the admin server or point "
            "MMX_PROVISION_HOST / MMX_PROVISION_PORT at it."
        )
    if not (ok_http and ok_dir):
        raise typer.Exit(code=1)


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores config in the user config .env).

    Saves the admin server location and admin credentials so `run` needs no flags.
    """

    defaults = load_settings()

    host = typer.prompt("Admin server host", default=defaults.host, show_default=True).strip()
    port = typer.prompt("Admin server port", default=defaults.port, type=int, show_default=True)
    username = typer.prompt("Admin username", default=defaults.admin_username, show_default=True).strip()
    password = typer.prompt("Admin password", hide_input=True, confirmation_prompt=False).strip()

    if not host or not username or not password:
        raise typer.BadParameter("host, username and password are required")
    if not 1 <= port <= 65535:
        raise typer.BadParameter("port must be between 1 and 65535")

    env_path = write_user_env_vars(
        {
            "MMX_PROVISION_HOST": host,
            "MMX_PROVISION_PORT": str(port),
            "MMX_PROVISION_ADMIN_USERNAME": username,
            "MMX_PROVISION_ADMIN_PASSWORD": password,
        }
    )

    _console.print(f"[green]Saved admin server config to:[/green] {env_path}")
