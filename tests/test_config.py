"""Tests for the settings layer (core/config.py)."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

from core.config import (
    DEFAULT_OUTPUT_PATH,
    ProvisionSettings,
    get_user_env_file,
    write_user_env_vars,
)


class TestDefaults:
    def test_defaults_target_local_admin_server(self):
        settings = ProvisionSettings(_env_file=None)
        assert settings.base_url == "http://localhost:8888"
        assert settings.admin_username == "admin"
        assert settings.admin_password == "admin"
        assert settings.output_path == Path("src/androidTest/res/raw/keys.json")
        assert settings.output_path == DEFAULT_OUTPUT_PATH
        assert settings.http_timeout_seconds > 0

    def test_enrollment_request_uses_app_metadata(self):
        request = ProvisionSettings(_env_file=None).enrollment_request()
        assert request.model_dump_json() == (
            '{"tag":"mobile","client_name":"test.magnet.com",'
            '"client_description":"Test Application",'
            '"owner_email":"no-reply@magnet.com","password":"password"}'
        )


class TestOverrides:
    def test_env_vars_override_defaults(self, monkeypatch):
        monkeypatch.setenv("MMX_PROVISION_HOST", "10.0.3.2")
        monkeypatch.setenv("MMX_PROVISION_PORT", "8443")
        monkeypatch.setenv("MMX_PROVISION_SCHEME", "https")
        settings = ProvisionSettings(_env_file=None)
        assert settings.base_url == "https://10.0.3.2:8443"

    def test_project_env_file_is_read(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("MMX_PROVISION_CLIENT_NAME=ci.magnet.com\n", encoding="utf-8")
        settings = ProvisionSettings(_env_file=env_file)
        assert settings.client_name == "ci.magnet.com"
        assert settings.enrollment_request().client_name == "ci.magnet.com"

    def test_init_kwargs_win_over_env(self, monkeypatch):
        monkeypatch.setenv("MMX_PROVISION_PORT", "8443")
        settings = ProvisionSettings(_env_file=None, port=9000)
        assert settings.port == 9000

    @pytest.mark.parametrize(
        "field,value",
        [
            ("port", 0),
            ("port", 70000),
            ("scheme", "ftp"),
            ("http_timeout_seconds", 0),
            ("admin_username", ""),
        ],
    )
    def test_invalid_values_are_rejected(self, field, value):
        with pytest.raises(ValidationError):
            ProvisionSettings(_env_file=None, **{field: value})


@pytest.mark.skipif(sys.platform in ("win32", "darwin"), reason="XDG layout only")
class TestUserEnvFile:
    def test_write_creates_and_merges(self, tmp_path):
        path = write_user_env_vars({"MMX_PROVISION_HOST": "example.local"})
        assert path == get_user_env_file()
        assert path.parent == tmp_path / "xdg" / "mmx-provision"

        write_user_env_vars({"MMX_PROVISION_PORT": "9999"})
        text = path.read_text(encoding="utf-8")
        assert "MMX_PROVISION_HOST=example.local" in text
        assert "MMX_PROVISION_PORT=9999" in text

    def test_written_file_feeds_settings(self):
        path = write_user_env_vars({"MMX_PROVISION_PORT": "9999"})
        settings = ProvisionSettings(_env_file=path)
        assert settings.port == 9999
