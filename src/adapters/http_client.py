"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza base URL, timeouts y headers para todas las llamadas al admin server.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from core.config import ProvisionSettings


def build_async_client(
    settings: ProvisionSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` apuntando al admin server.

    Por qué un builder:
    - Centraliza timeouts/headers para que todas las etapas se comporten igual.
    - Sin redirects: el admin API responde directamente, un 3xx es un fallo.
    """

    settings = settings or ProvisionSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    return httpx.AsyncClient(
        base_url=settings.base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=False,
        headers=headers,
        transport=transport,
    )
