"""Shared fixtures: an in-memory admin server behind `httpx.MockTransport`."""

from __future__ import annotations

import json
import os
from typing import Any

import httpx
import pytest

from adapters.admin_client import ENROLLMENT_PATH, RESET_DB_PATH, SESSION_PATH
from core.config import ProvisionSettings

ENROLLMENT_BODY = (
    b'{"client_id":"c1d2e3f4","client_secret":"s3cr3t-value",'
    b'"tag":"mobile","client_name":"test.magnet.com"}'
)
ACCESS_TOKEN = "tok-0123456789"


class FakeAdminServer:
    """Answers the three provisioning endpoints and records every request."""

    def __init__(
        self,
        *,
        reset_status: int = 200,
        login_status: int = 200,
        login_body: Any = None,
        enroll_status: int = 200,
        enroll_body: bytes = ENROLLMENT_BODY,
        fail_with: Exception | None = None,
    ) -> None:
        self.reset_status = reset_status
        self.login_status = login_status
        self.login_body = {"access_token": ACCESS_TOKEN, "token_type": "bearer"} if login_body is None else login_body
        self.enroll_status = enroll_status
        self.enroll_body = enroll_body
        self.fail_with = fail_with
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            raise self.fail_with

        path = request.url.path
        if request.method == "PUT" and path == RESET_DB_PATH:
            return httpx.Response(self.reset_status)
        if request.method == "POST" and path == SESSION_PATH:
            if isinstance(self.login_body, (bytes, str)):
                return httpx.Response(self.login_status, content=self.login_body)
            return httpx.Response(self.login_status, content=json.dumps(self.login_body).encode())
        if request.method == "POST" and path == ENROLLMENT_PATH:
            return httpx.Response(self.enroll_status, content=self.enroll_body)
        return httpx.Response(404)

    @property
    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Run every test from an empty cwd without MMX_PROVISION_* leaking in."""

    for key in list(os.environ):
        if key.upper().startswith("MMX_PROVISION_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings(tmp_path) -> ProvisionSettings:
    return ProvisionSettings(_env_file=None, output_path=tmp_path / "raw" / "keys.json")


@pytest.fixture
def server() -> FakeAdminServer:
    return FakeAdminServer()
