"""Errors raised along the provisioning chain.

Each failure class maps to its own process exit code so wrapper scripts
(CI jobs, Gradle tasks) can tell a dead server from bad credentials.
"""

from __future__ import annotations


class ProvisioningError(Exception):
    """Base error for every terminal failure of the provisioning sequence."""

    exit_code: int = 1
    default_message: str = "ERROR provisioning admin server!"

    def __init__(self, message: str | None = None, *, status_code: int | None = None) -> None:
        self.message = message or self.default_message
        self.status_code = status_code
        super().__init__(self.message)


class AdminConnectionError(ProvisioningError):
    """The admin server could not be reached (refused, DNS, timeout)."""

    exit_code = 8
    default_message = "ERROR connecting to admin server!"


class DatabaseResetError(ProvisioningError):
    exit_code = 3
    default_message = "ERROR resetting database!"


class AuthenticationError(ProvisioningError):
    exit_code = 4
    default_message = "ERROR authenticating admin!"


class MissingAccessTokenError(ProvisioningError):
    """Login answered 200 but the body carries no usable `access_token`."""

    exit_code = 5
    default_message = "ERROR authenticating admin: no access_token in response!"


class EnrollmentError(ProvisioningError):
    exit_code = 6
    default_message = "ERROR creating enrollment application!"


class OutputWriteError(ProvisioningError):
    exit_code = 7
    default_message = "ERROR writing enrollment keys!"
