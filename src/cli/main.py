"""CLI de mmx-provision (Typer + Rich).

Comandos:
- `run`: resetea la DB, autentica al admin, registra la app y escribe keys.json.
- `config`: muestra la configuración efectiva.
- `doctor`: diagnósticos sin mutar el estado del server.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from adapters.admin_client import MagnetAdminClient
from cli import doctor
from cli.settings_loader import load_settings
from cli.ui_components import build_enrollment_panel, build_settings_table, print_banner
from core.config import ProvisionSettings
from core.domain.models import EnrollmentResult, ProvisionResult, ProvisionStage
from core.services.provisioning import ProvisionHooks, provision

app = typer.Typer(
    no_args_is_help=True,
    help="Provision a local Magnet admin server for the Android test suite.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()

_STAGE_MESSAGES = {
    ProvisionStage.DATABASE_RESET: "Resetting database",
    ProvisionStage.AUTHENTICATED: "Authenticating admin",
    ProvisionStage.ENROLLED: "Creating enrollment application",
}


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # httpx/httpcore son muy verbosos en DEBUG.
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def build_admin_client(settings: ProvisionSettings) -> MagnetAdminClient:
    return MagnetAdminClient(settings)


async def _run_provision(settings: ProvisionSettings, hooks: ProvisionHooks) -> ProvisionResult:
    async with build_admin_client(settings) as api:
        return await provision(settings=settings, api=api, hooks=hooks)


def _build_hooks(*, quiet: bool) -> ProvisionHooks:
    def stage_started(stage: ProvisionStage) -> None:
        if not quiet:
            _console.print(f"[cyan]→[/cyan] {_STAGE_MESSAGES[stage]} ...")

    def enrollment_received(enrollment: EnrollmentResult, output_path: Path) -> None:
        if quiet:
            return
        _console.print(f"writing data to {escape(str(output_path))} ...\n")
        _console.out(enrollment.text, highlight=False)

    def warning(message: str) -> None:
        _console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    return ProvisionHooks(
        stage_started=stage_started,
        enrollment_received=enrollment_received,
        warning=warning,
    )


@app.command(name="run")
def run_command(
    host: str | None = typer.Option(None, "--host", help="Admin server host."),
    port: int | None = typer.Option(None, "--port", help="Admin server port."),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Where to write the enrollment keys JSON."
    ),
    timeout: float | None = typer.Option(
        None, "--timeout", help="Per-request timeout in seconds."
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print errors."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging to stderr."),
) -> None:
    """Reset the database, log in as admin, enroll the test app and save its keys."""

    configure_logging(verbose)
    settings = load_settings(
        host=host,
        port=port,
        output_path=output,
        http_timeout_seconds=timeout,
    )

    if not quiet:
        print_banner(_console)

    result = asyncio.run(_run_provision(settings, _build_hooks(quiet=quiet)))

    if result.error is not None:
        message = escape(result.error.message)
        if result.error.status_code is not None:
            message += f" (HTTP {result.error.status_code})"
        _console.print(f"[red]{message}[/red]")
        raise typer.Exit(code=result.exit_code)

    if not quiet:
        payload = result.enrollment.payload if result.enrollment else None
        if payload is not None:
            _console.print(build_enrollment_panel(payload, str(result.output_path)))
        _console.print(f"[green]Done.[/green] Keys written to {escape(str(result.output_path))}")


@app.command(name="config")
def config_command() -> None:
    """Show the effective configuration (env vars + .env files), secrets masked."""

    _console.print(build_settings_table(load_settings()))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
