# ============================================================================
# SCOPE: APPLICATION LAYER (Reception)
# Description: Use case for validating an intake request end to end.
# ============================================================================
"""Validate Intake Use Case.

Entry point for hosts that want a full validation verdict on a create or
edit request before persisting it.
"""

import logging
from dataclasses import dataclass

from app.domains.reception.application.dto import (
    CreateIntakeRequest,
    EditIntakeRequest,
    OrchestrationResult,
    SearchCriteria,
)
from app.domains.reception.application.services.validation_orchestrator import ValidationOrchestrator
from app.domains.reception.domain.value_objects import ValidationMode, ValidationOutcome

logger = logging.getLogger(__name__)


@dataclass
class ValidateIntakeRequest:
    """Request for validating an intake."""

    request: CreateIntakeRequest
    mode: ValidationMode = ValidationMode.CREATE
    timeout: float | None = None

    @classmethod
    def for_edit(cls, request: EditIntakeRequest, timeout: float | None = None) -> "ValidateIntakeRequest":
        return cls(request=request, mode=ValidationMode.EDIT, timeout=timeout)


class ValidateIntakeUseCase:
    """Use case for validating intake requests.

    Runs the orchestrator and returns its aggregated result. Never raises for
    validation problems; check ``result.is_valid`` and ``result.status``.
    """

    def __init__(self, orchestrator: ValidationOrchestrator) -> None:
        """Initialize use case.

        Args:
            orchestrator: Configured validation orchestrator.
        """
        self._orchestrator = orchestrator

    async def execute(self, request: ValidateIntakeRequest) -> OrchestrationResult:
        """Execute the validation.

        Args:
            request: Intake request with validation mode.

        Returns:
            OrchestrationResult with stage outcomes, rule trace and status.
        """
        intake = request.request
        logger.info(
            f"Validating {request.mode.value} intake for patient {intake.patient_id} "
            f"with doctor {intake.doctor_id}"
        )

        result = await self._orchestrator.orchestrate(intake, request.mode, timeout=request.timeout)

        if result.is_valid:
            logger.info(f"Intake for patient {intake.patient_id} is valid ({len(result.warnings)} warning(s))")
        else:
            logger.info(f"Intake for patient {intake.patient_id} rejected: status={result.status.value}")
        return result


class ValidateSearchUseCase:
    """Use case for validating reception list searches."""

    def __init__(self, orchestrator: ValidationOrchestrator) -> None:
        self._orchestrator = orchestrator

    async def execute(self, criteria: SearchCriteria) -> ValidationOutcome:
        return await self._orchestrator.validate_search(criteria)
