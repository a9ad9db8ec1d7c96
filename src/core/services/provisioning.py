"""Provisioning orchestration.

Runs the linear chain reset -> authenticate -> enroll -> write keys against
any `AdminAPI` implementation. Each stage either completes or raises a
`ProvisioningError`; the first error stops the chain and is returned inside
the `ProvisionResult` instead of propagating, so entry-points (CLI, tests)
only have to inspect one object. Printing stays in the UI layer through
`ProvisionHooks`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from adapters.keys_writer import write_enrollment_keys
from core.config import ProvisionSettings
from core.domain.errors import ProvisioningError
from core.domain.models import EnrollmentResult, ProvisionResult, ProvisionStage
from core.interfaces.admin_api import AdminAPI

logger = logging.getLogger(__name__)


@dataclass
class ProvisionHooks:
    """Optional callbacks for UI layers (progress, raw body echo, warnings)."""

    stage_started: Callable[[ProvisionStage], None] | None = None
    stage_completed: Callable[[ProvisionStage], None] | None = None
    enrollment_received: Callable[[EnrollmentResult, Path], None] | None = None
    warning: Callable[[str], None] | None = None


async def provision(
    *,
    settings: ProvisionSettings,
    api: AdminAPI,
    hooks: ProvisionHooks | None = None,
) -> ProvisionResult:
    hooks = hooks or ProvisionHooks()
    result = ProvisionResult()

    def started(stage: ProvisionStage) -> None:
        if hooks.stage_started:
            hooks.stage_started(stage)

    def completed(stage: ProvisionStage) -> None:
        result.stage = stage
        logger.info("stage completed: %s", stage.value)
        if hooks.stage_completed:
            hooks.stage_completed(stage)

    def warn(message: str) -> None:
        result.warnings.append(message)
        logger.warning(message)
        if hooks.warning:
            hooks.warning(message)

    try:
        started(ProvisionStage.DATABASE_RESET)
        await api.reset_database()
        completed(ProvisionStage.DATABASE_RESET)

        started(ProvisionStage.AUTHENTICATED)
        session = await api.authenticate(settings.admin_username, settings.admin_password)
        completed(ProvisionStage.AUTHENTICATED)

        started(ProvisionStage.ENROLLED)
        enrollment = await api.create_enrollment(session, settings.enrollment_request())
        result.enrollment = enrollment
        if enrollment.payload is None:
            warn("Enrollment response is not a JSON object; writing it verbatim anyway.")
        if hooks.enrollment_received:
            hooks.enrollment_received(enrollment, settings.output_path)

        result.output_path = write_enrollment_keys(
            body=enrollment.body,
            output_path=settings.output_path,
        )
        completed(ProvisionStage.ENROLLED)
    except ProvisioningError as exc:
        logger.debug("provisioning aborted after stage %s", result.stage.value, exc_info=True)
        result.error = exc

    return result
