"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en `run`, `config` y `doctor`.
"""

from __future__ import annotations

from typing import Any

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import ProvisionSettings

_SECRET_FIELDS = {"admin_password", "app_password"}

# Campos que la suite Android lee de keys.json.
_KEY_FIELDS = ("client_id", "client_secret")


def mask_secret(value: str, *, visible: int = 4) -> str:
    if len(value) <= visible:
        return "*" * len(value)
    return value[:visible] + "*" * (len(value) - visible)


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita dependencias circulares (main <-> doctor).
    - Permite desactivar banner en modo `--quiet` (CI/pipelines).
    """

    title = Text("MMX-PROVISION", style="bold cyan")
    subtitle = Text("Reset DB • Admin login • App enrollment", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_settings_table(settings: ProvisionSettings) -> Table:
    """Tabla con la configuración efectiva (secretos enmascarados)."""

    table = Table(title="Effective configuration")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    table.add_row("base_url", settings.base_url)
    for name, value in settings.model_dump().items():
        if name in _SECRET_FIELDS:
            shown = "*" * len(str(value))
        else:
            shown = str(value)
        table.add_row(name, shown)
    return table


def build_enrollment_panel(payload: dict[str, Any], output_path: str) -> Panel:
    """Panel resumen de las credenciales registradas."""

    title = Text("Enrollment", style="bold green")
    body = Text()
    for key in _KEY_FIELDS:
        value = payload.get(key)
        if value is None:
            body.append(f"{key}: ", style="bold")
            body.append("missing\n", style="yellow")
            continue
        shown = mask_secret(str(value)) if key == "client_secret" else str(value)
        body.append(f"{key}: ", style="bold")
        body.append(f"{shown}\n")

    extra = sorted(k for k in payload if k not in _KEY_FIELDS)
    if extra:
        body.append(f"\nOther fields: {', '.join(extra)}", style="dim")
    body.append(f"\nWritten to: {output_path}", style="dim")

    return Panel(body, title=title, border_style="green")
