"""Admin API adapter: Magnet admin server over httpx.

Implements `core.interfaces.AdminAPI`. Every non-200 answer and every
transport failure is turned into the matching `ProvisioningError` subclass,
so the orchestrator never sees a raw httpx exception.
"""

from __future__ import annotations

import logging
from types import TracebackType

import httpx

from adapters.http_client import build_async_client
from core.config import ProvisionSettings
from core.domain.errors import (
    AdminConnectionError,
    AuthenticationError,
    DatabaseResetError,
    EnrollmentError,
    MissingAccessTokenError,
)
from core.domain.models import AdminSession, EnrollmentRequest, EnrollmentResult
from core.interfaces.admin_api import AdminAPI

logger = logging.getLogger(__name__)

ADMIN_API_PREFIX = "/admin/com.magnet.server"
RESET_DB_PATH = f"{ADMIN_API_PREFIX}/db/objects"
SESSION_PATH = f"{ADMIN_API_PREFIX}/users/session"
ENROLLMENT_PATH = f"{ADMIN_API_PREFIX}/apps/enrollment"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"


class MagnetAdminClient(AdminAPI):
    """Async client for the three admin endpoints used during provisioning.

    Use it as an async context manager; the underlying `httpx.AsyncClient`
    is closed on exit.
    """

    def __init__(
        self,
        settings: ProvisionSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or ProvisionSettings()
        self._client = build_async_client(self._settings, transport=transport)

    async def __aenter__(self) -> "MagnetAdminClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(self, method: str, path: str, **kwargs: object) -> httpx.Response:
        logger.debug("%s %s%s", method, self._settings.base_url, path)
        try:
            response = await self._client.request(method, path, **kwargs)  # type: ignore[arg-type]
        except httpx.TransportError as exc:
            raise AdminConnectionError(
                f"ERROR connecting to admin server at {self._settings.base_url}: {exc}"
            ) from exc
        logger.debug("%s %s -> HTTP %s", method, path, response.status_code)
        return response

    async def reset_database(self) -> None:
        response = await self._send("PUT", RESET_DB_PATH)
        if response.status_code != 200:
            raise DatabaseResetError(status_code=response.status_code)

    async def authenticate(self, username: str, password: str) -> AdminSession:
        response = await self._send(
            "POST",
            SESSION_PATH,
            data={"username": username, "password": password},
            headers={"Content-Type": FORM_CONTENT_TYPE},
        )
        if response.status_code != 200:
            raise AuthenticationError(status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as exc:
            raise MissingAccessTokenError(
                "ERROR authenticating admin: session response is not valid JSON!",
                status_code=response.status_code,
            ) from exc

        token = body.get("access_token") if isinstance(body, dict) else None
        if not isinstance(token, str) or not token.strip():
            raise MissingAccessTokenError(status_code=response.status_code)
        # Must fit in an ASCII header line: no CR/LF, no control or non-ASCII chars.
        if not token.isascii() or not token.isprintable():
            raise MissingAccessTokenError(
                "ERROR authenticating admin: access_token is not usable in an Authorization header!",
                status_code=response.status_code,
            )
        return AdminSession(access_token=token)

    async def create_enrollment(
        self, session: AdminSession, request: EnrollmentRequest
    ) -> EnrollmentResult:
        # Serialized by pydantic so the body is compact and keeps field order.
        response = await self._send(
            "POST",
            ENROLLMENT_PATH,
            content=request.model_dump_json().encode("utf-8"),
            headers={
                **session.authorization_header(),
                "Content-Type": JSON_CONTENT_TYPE,
            },
        )
        if response.status_code != 200:
            raise EnrollmentError(status_code=response.status_code)
        return EnrollmentResult(status_code=response.status_code, body=response.content)
