"""Configuración del Core.

Por qué aquí:
- Centraliza host/puerto, credenciales de admin y metadata de la app
  (pydantic-settings) sin contaminar la CLI.
- Permite que el adaptador HTTP y el orquestador lean config de forma consistente.

Los defaults reproducen el aprovisionamiento clásico contra `localhost:8888`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.models import EnrollmentRequest

DEFAULT_OUTPUT_PATH = Path("src/androidTest/res/raw/keys.json")


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "mmx-provision"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "mmx-provision"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "mmx-provision"
    return Path.home() / ".config" / "mmx-provision"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str]) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# mmx-provision user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class ProvisionSettings(BaseSettings):
    """Configuración central del aprovisionamiento.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el orquestador.
    - Un único contrato de configuración para CLI/adaptadores/tests.
    """

    model_config = SettingsConfigDict(
        env_prefix="MMX_PROVISION_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    scheme: str = Field(
        default="http",
        pattern=r"^https?$",
        description="Esquema del admin server (http/https).",
    )
    host: str = Field(
        default="localhost",
        min_length=1,
        description="Host del admin server.",
    )
    port: int = Field(
        default=8888,
        ge=1,
        le=65535,
        description="Puerto del admin server.",
    )

    admin_username: str = Field(
        default="admin",
        min_length=1,
        description="Usuario administrador para abrir sesión.",
    )
    admin_password: str = Field(
        default="admin",
        min_length=1,
        description="Password del usuario administrador.",
    )

    app_tag: str = Field(
        default="mobile",
        min_length=1,
        description="Tag de la aplicación a registrar.",
    )
    client_name: str = Field(
        default="test.magnet.com",
        min_length=1,
        description="Nombre del cliente OAuth a registrar.",
    )
    client_description: str = Field(
        default="Test Application",
        description="Descripción de la aplicación.",
    )
    owner_email: str = Field(
        default="no-reply@magnet.com",
        min_length=3,
        description="Email del propietario de la aplicación.",
    )
    app_password: str = Field(
        default="password",
        min_length=1,
        description="Password de la aplicación registrada.",
    )

    output_path: Path = Field(
        default=DEFAULT_OUTPUT_PATH,
        description="Ruta (relativa al cwd) donde se escribe el JSON de enrollment.",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="mmx-provision/0.1",
        min_length=1,
        description="User-Agent para las peticiones al admin server.",
    )

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    def enrollment_request(self) -> EnrollmentRequest:
        """Construye el payload de enrollment a partir de la metadata configurada."""

        return EnrollmentRequest(
            tag=self.app_tag,
            client_name=self.client_name,
            client_description=self.client_description,
            owner_email=self.owner_email,
            password=self.app_password,
        )
