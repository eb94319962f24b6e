# ============================================================================
# SCOPE: APPLICATION LAYER (Reception)
# Description: Runs the six validation stages for an intake request.
# ============================================================================
"""
Validation Orchestrator

Runs Basic, BusinessRules, Security, Performance, Integration and
SpecialCase in that order and aggregates them into an OrchestrationResult.

Every stage runs even when an earlier one reported errors. Warnings never
affect validity. The orchestrator never raises:

- a deadline ends the run as CANCELLED, keeping the stages completed so
  far (cancelling the calling task still propagates CancelledError);
- an unexpected fault ends the run as FAILED with a single generic
  configuration issue, and the cause is logged with its traceback.
"""

import asyncio
from datetime import date, datetime
from typing import Callable

from app.core.shared.logger import get_service_logger
from app.core.shared.validators import InputSanitizer
from app.domains.reception.application.config import ReceptionConfig
from app.domains.reception.application.dto import (
    IntakeRequest,
    OrchestrationResult,
    OrchestrationStatus,
    SearchCriteria,
    StageResult,
)
from app.domains.reception.application.ports import ReceptionCollaborators
from app.domains.reception.application.services.business_rules_engine import BusinessRulesEngine
from app.domains.reception.application.services.intake_schema import (
    validate_intake_structure,
    validate_search_structure,
)
from app.domains.reception.domain.services.severity_classifier import SeverityClassifier
from app.domains.reception.domain.value_objects import (
    EmergencyTriageResult,
    IssueKind,
    ReceptionPermission,
    RuleFamily,
    TriageLevel,
    ValidationIssue,
    ValidationMode,
    ValidationOutcome,
    ValidationStage,
)

logger = get_service_logger("validation_orchestrator")

INTERNAL_ERROR_MESSAGE = "internal validation error"

# Security rules run in their own stage
BUSINESS_STAGE_FAMILIES: tuple[RuleFamily, ...] = tuple(f for f in RuleFamily if f != RuleFamily.SECURITY)
SECURITY_STAGE_FAMILIES: tuple[RuleFamily, ...] = (RuleFamily.SECURITY,)


class ValidationOrchestrator:
    """
    Multi-stage intake validation.

    Example:
        ```python
        orchestrator = ValidationOrchestrator(engine, collaborators, ReceptionConfig())

        result = await orchestrator.orchestrate(request, ValidationMode.CREATE)
        if not result.is_valid:
            print(result.errors)
        ```
    """

    def __init__(
        self,
        engine: BusinessRulesEngine,
        collaborators: ReceptionCollaborators,
        config: ReceptionConfig,
        classifier: SeverityClassifier | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._engine = engine
        self._collaborators = collaborators
        self._config = config
        self._classifier = classifier or SeverityClassifier()
        self._clock = clock

    async def orchestrate(
        self,
        request: IntakeRequest,
        mode: ValidationMode = ValidationMode.CREATE,
        timeout: float | None = None,
    ) -> OrchestrationResult:
        """
        Validate an intake request through every stage.

        Args:
            request: Create or edit request
            mode: Validation mode; edit runs use ``...EditValidation`` stage names
            timeout: Deadline in seconds; defaults to the configured timeout

        Returns:
            OrchestrationResult with per-stage outcomes and the run status
        """
        deadline = timeout if timeout is not None else self._config.validation_timeout
        started_at = self._clock()
        stages: list[StageResult] = []
        triage: EmergencyTriageResult | None = None
        failure_issues: tuple[ValidationIssue, ...] = ()

        try:
            async with asyncio.timeout(deadline):
                for stage in ValidationStage:
                    stage_result, stage_triage = await self._run_stage(stage, request, mode)
                    stages.append(stage_result)
                    triage = stage_triage or triage
            status = OrchestrationStatus.COMPLETED
        except TimeoutError:
            logger.warning(f"Validation deadline reached after {len(stages)} stage(s)", mode=mode.value)
            status = OrchestrationStatus.CANCELLED
        except Exception as e:
            logger.error(f"Unexpected error during {mode.value} validation: {e}", exc_info=True)
            status = OrchestrationStatus.FAILED
            failure_issues = (ValidationIssue(kind=IssueKind.CONFIGURATION, message=INTERNAL_ERROR_MESSAGE),)

        result = OrchestrationResult(
            mode=mode,
            status=status,
            stages=tuple(stages),
            started_at=started_at,
            ended_at=self._clock(),
            triage=triage,
            failure_issues=failure_issues,
        )
        logger.info(
            f"Validation {status.value}: valid={result.is_valid}, errors={len(result.errors)}, "
            f"warnings={len(result.warnings)}",
            mode=mode.value,
        )
        return result

    async def _run_stage(
        self,
        stage: ValidationStage,
        request: IntakeRequest,
        mode: ValidationMode,
    ) -> tuple[StageResult, EmergencyTriageResult | None]:
        started_at = self._clock()
        applied: tuple[str, ...] = ()
        skipped: tuple[str, ...] = ()
        triage = None

        match stage:
            case ValidationStage.BASIC:
                outcome = validate_intake_structure(request, mode)
            case ValidationStage.BUSINESS_RULES:
                rules = await self._engine.run(request, mode, families=BUSINESS_STAGE_FAMILIES)
                outcome, applied, skipped = rules.outcome, rules.applied_rules, rules.skipped_rules
            case ValidationStage.SECURITY:
                rules = await self._engine.run(request, mode, families=SECURITY_STAGE_FAMILIES)
                outcome, applied, skipped = rules.outcome, rules.applied_rules, rules.skipped_rules
            case ValidationStage.PERFORMANCE:
                outcome = self._check_performance(request)
            case ValidationStage.INTEGRATION:
                outcome = ValidationOutcome.success()
            case ValidationStage.SPECIAL_CASE:
                outcome, triage = self._check_special_cases(request)
            case _:
                raise ValueError(f"Unhandled validation stage: {stage}")

        stage_result = StageResult(
            name=stage.trace_name(mode),
            stage=stage,
            started_at=started_at,
            ended_at=self._clock(),
            outcome=outcome,
            applied_rules=applied,
            skipped_rules=skipped,
        )
        logger.debug(
            f"Stage {stage_result.name} finished: errors={len(outcome.errors)}, warnings={len(outcome.warnings)}"
        )
        return stage_result, triage

    # ------------------------------------------------------------------
    # Performance
    # ------------------------------------------------------------------

    def _check_performance(self, request: IntakeRequest) -> ValidationOutcome:
        warnings: list[ValidationIssue] = []

        if isinstance(request.reception_date, date):
            days_ahead = self._engine.checks.days_from_today(request.reception_date)
            if days_ahead > self._config.performance_future_days:
                warnings.append(
                    ValidationIssue(
                        IssueKind.PERFORMANCE,
                        f"reception date is more than {self._config.performance_future_days} days ahead",
                    )
                )
            elif days_ahead < -self._config.performance_past_days:
                warnings.append(
                    ValidationIssue(
                        IssueKind.PERFORMANCE,
                        f"reception date is more than {self._config.performance_past_days} day(s) in the past",
                    )
                )

        if len(request.service_ids) > self._config.performance_max_services:
            warnings.append(
                ValidationIssue(
                    IssueKind.PERFORMANCE,
                    f"more than {self._config.performance_max_services} services selected, "
                    f"processing may take longer",
                )
            )

        return ValidationOutcome.success(warnings)

    # ------------------------------------------------------------------
    # Special cases
    # ------------------------------------------------------------------

    def _check_special_cases(
        self, request: IntakeRequest
    ) -> tuple[ValidationOutcome, EmergencyTriageResult | None]:
        if not request.is_emergency:
            return ValidationOutcome.success(), None

        triage = self._classifier.assess_emergency(
            request.complaint_category,
            list(request.symptoms),
            notes=request.notes or "",
            now=self._clock(),
        )

        warnings = [
            ValidationIssue(
                IssueKind.BUSINESS_RULE,
                f"emergency triage level {triage.level.value}: {triage.priority.value} priority, "
                f"maximum wait {triage.max_wait_minutes} minutes",
            )
        ]
        if triage.level == TriageLevel.ESI1:
            warnings.append(ValidationIssue(IssueKind.BUSINESS_RULE, "immediate medical attention required"))
        if triage.fallback_used:
            warnings.append(
                ValidationIssue(IssueKind.BUSINESS_RULE, "triage classification failed, default level applied")
            )

        logger.warning(
            f"Emergency reception escalated: level={triage.level.value}, priority={triage.priority.value}",
            patient_id=request.patient_id,
        )
        return ValidationOutcome.success(warnings), triage

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def validate_search(self, criteria: SearchCriteria) -> ValidationOutcome:
        """
        Validate reception list search parameters.

        Permission and sanitization problems are errors; overly broad
        searches only produce warnings.
        """
        outcomes = [validate_search_structure(criteria)]
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []

        try:
            allowed = await self._collaborators.security.has_role(
                criteria.actor_id, ReceptionPermission.VIEW_LIST.value
            )
        except Exception as e:
            logger.error(f"Error checking search permission for {criteria.actor_id}: {e}", exc_info=True)
            errors.append(
                ValidationIssue.from_exception(e, "error validating user permissions", default_kind=IssueKind.SECURITY)
            )
        else:
            if not allowed:
                errors.append(ValidationIssue(IssueKind.SECURITY, "you are not authorized to view receptions"))

        threat = InputSanitizer.find_threat(criteria.search_term)
        if threat:
            logger.warning(f"Rejected search term from {criteria.actor_id}: matched {threat}")
            errors.append(ValidationIssue(IssueKind.SECURITY, "search term contains potentially malicious content"))

        if criteria.start_date is not None and criteria.end_date is not None:
            if criteria.start_date > criteria.end_date:
                errors.append(ValidationIssue(IssueKind.STRUCTURAL, "start date must be before end date"))
            elif (criteria.end_date - criteria.start_date).days > self._config.search_max_range_days:
                warnings.append(
                    ValidationIssue(
                        IssueKind.PERFORMANCE,
                        f"search range exceeds {self._config.search_max_range_days} days",
                    )
                )

        if criteria.page_size > self._config.search_max_page_size:
            warnings.append(
                ValidationIssue(
                    IssueKind.PERFORMANCE,
                    f"page size exceeds {self._config.search_max_page_size}",
                )
            )

        outcomes.append(ValidationOutcome(errors=errors, warnings=warnings))
        return ValidationOutcome.combine(outcomes)
