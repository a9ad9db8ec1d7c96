"""Contrato del admin API.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- El orquestador depende de esta abstracción; el adaptador httpx la implementa
  y los tests pueden sustituirla por un doble en memoria.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import AdminSession, EnrollmentRequest, EnrollmentResult


@runtime_checkable
class AdminAPI(Protocol):
    """Operaciones del admin server que usa el aprovisionamiento.

    Reglas de diseño:
    - Todas son asíncronas porque hacen I/O (HTTP).
    - Un fallo se señala con una subclase de `ProvisioningError`, nunca con
      un valor centinela.
    """

    async def reset_database(self) -> None:
        """Vacía la base de datos de objetos del server."""

        ...

    async def authenticate(self, username: str, password: str) -> AdminSession:
        """Abre una sesión de administrador y devuelve su token."""

        ...

    async def create_enrollment(
        self, session: AdminSession, request: EnrollmentRequest
    ) -> EnrollmentResult:
        """Registra una aplicación y devuelve la respuesta cruda."""

        ...
