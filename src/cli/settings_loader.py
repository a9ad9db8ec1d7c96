"""Carga de settings para los comandos de la CLI.

Convierte errores de validación (env vars, .env, flags) en un usage error
de Typer en vez de un traceback de pydantic.
"""

from __future__ import annotations

from typing import Any

import typer
from pydantic import ValidationError

from core.config import ProvisionSettings


def load_settings(**overrides: Any) -> ProvisionSettings:
    """Carga settings aplicando overrides de CLI (los `None` se ignoran)."""

    values = {k: v for k, v in overrides.items() if v is not None}
    try:
        return ProvisionSettings(**values)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc
