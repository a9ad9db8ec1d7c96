"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- El payload de enrollment se serializa exactamente en el orden de campos
  declarado, que es el que espera el admin server.

Nota:
- Estos modelos describen *qué* se intercambia con el server, no *cómo*.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.domain.errors import ProvisioningError


class ProvisionStage(str, Enum):
    """Etapas de la cadena lineal de aprovisionamiento."""

    START = "start"
    DATABASE_RESET = "database_reset"
    AUTHENTICATED = "authenticated"
    ENROLLED = "enrolled"


class EnrollmentRequest(BaseModel):
    """Metadata de la aplicación que se registra en el admin server."""

    model_config = ConfigDict(frozen=True)

    tag: str = Field(
        ...,
        min_length=1,
        description="Tag de la app (p.ej. 'mobile').",
    )
    client_name: str = Field(
        ...,
        min_length=1,
        description="Nombre del cliente OAuth.",
    )
    client_description: str = Field(
        default="",
        description="Descripción libre de la app.",
    )
    owner_email: str = Field(
        ...,
        min_length=3,
        description="Email del propietario.",
    )
    password: str = Field(
        ...,
        min_length=1,
        description="Password de la app.",
    )


class AdminSession(BaseModel):
    """Sesión efímera de administrador.

    Solo existe tras una autenticación correcta y nunca se persiste.
    """

    access_token: str = Field(
        ...,
        min_length=1,
        description="Bearer token devuelto por el endpoint de sesión.",
    )

    def authorization_header(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}


class EnrollmentResult(BaseModel):
    """Respuesta del endpoint de enrollment.

    Por qué guardar bytes:
    - El fichero de keys debe contener exactamente lo que devolvió el server.
    - El parseo JSON es solo para presentación (`payload`).
    """

    status_code: int = Field(
        ...,
        description="Status HTTP de la respuesta de enrollment.",
    )
    body: bytes = Field(
        ...,
        description="Cuerpo crudo de la respuesta, sin transformar.",
    )

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    @property
    def payload(self) -> dict[str, Any] | None:
        """JSON parseado si el cuerpo es un objeto JSON válido, `None` si no."""

        try:
            data = json.loads(self.body)
        except ValueError:
            return None
        return data if isinstance(data, dict) else None


class ProvisionResult(BaseModel):
    """Resultado de una ejecución del orquestador."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    stage: ProvisionStage = Field(
        default=ProvisionStage.START,
        description="Última etapa completada con éxito.",
    )
    error: ProvisioningError | None = Field(
        default=None,
        description="Error que abortó la secuencia (si lo hubo).",
    )
    enrollment: EnrollmentResult | None = Field(
        default=None,
        description="Respuesta de enrollment (solo si la etapa se completó).",
    )
    output_path: Path | None = Field(
        default=None,
        description="Ruta escrita con las keys (solo tras escribir el fichero).",
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Avisos no fatales (p.ej. cuerpo de enrollment no JSON).",
    )

    @property
    def ok(self) -> bool:
        return self.error is None and self.stage is ProvisionStage.ENROLLED

    @property
    def exit_code(self) -> int:
        if self.error is not None:
            return self.error.exit_code
        return 0 if self.ok else 1
