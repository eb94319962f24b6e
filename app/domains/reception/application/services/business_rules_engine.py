# ============================================================================
# SCOPE: APPLICATION LAYER (Reception)
# Description: Runs the ordered, registry-gated reception business rules.
# ============================================================================
"""
Business Rules Engine

Runs every rule family against an intake request and accumulates errors,
warnings and an applied/skipped trace. Nothing short-circuits: a failing
rule, or a collaborator that raises, never prevents the remaining rules from
reporting.

Family order: business (patient, doctor, service, date, time conflict),
security, validation, special case, performance, integration.

Emergency receptions skip the time-conflict, doctor-capacity and
working-hours checks entirely; only patient and doctor existence stay
mandatory.
"""

import logging
from datetime import date, datetime
from typing import Awaitable, Callable, Iterable

from app.core.shared.date_utils import as_date
from app.core.shared.validators import InputSanitizer
from app.domains.reception.application.config import ReceptionConfig
from app.domains.reception.application.dto import BusinessRulesResult, EditIntakeRequest, IntakeRequest
from app.domains.reception.application.ports import ReceptionCollaborators, entity_key
from app.domains.reception.application.services.intake_checks import ReceptionRuleChecks
from app.domains.reception.domain.services.rule_registry import RuleRegistry
from app.domains.reception.domain.value_objects import (
    CORE_BUSINESS_RULES,
    EMERGENCY_RELAXED_RULES,
    IssueKind,
    ReceptionPermission,
    RuleFamily,
    RuleId,
    ValidationIssue,
    ValidationMode,
    ValidationOutcome,
)

logger = logging.getLogger(__name__)


def _reception_day(request: IntakeRequest) -> date | None:
    """The reception date when it is usable, otherwise None."""
    return request.reception_date if isinstance(request.reception_date, date) else None

FAMILY_ORDER: tuple[RuleFamily, ...] = (
    RuleFamily.BUSINESS,
    RuleFamily.SECURITY,
    RuleFamily.VALIDATION,
    RuleFamily.SPECIAL_CASE,
    RuleFamily.PERFORMANCE,
    RuleFamily.INTEGRATION,
)

RULE_LABELS: dict[RuleId, str] = {
    RuleId.PATIENT_VALIDATION: "patient",
    RuleId.DOCTOR_VALIDATION: "doctor",
    RuleId.SERVICE_VALIDATION: "services",
    RuleId.DATE_VALIDATION: "reception date",
    RuleId.TIME_CONFLICT_VALIDATION: "time conflict",
    RuleId.DOCTOR_CAPACITY_VALIDATION: "doctor capacity",
    RuleId.WORKING_HOURS_VALIDATION: "working hours",
    RuleId.USER_PERMISSION_VALIDATION: "user permissions",
    RuleId.DATA_SECURITY_VALIDATION: "data security",
    RuleId.INPUT_SECURITY_VALIDATION: "input security",
    RuleId.DATA_TYPE_VALIDATION: "data types",
    RuleId.RANGE_VALIDATION: "value ranges",
    RuleId.FORMAT_VALIDATION: "formats",
    RuleId.EMERGENCY_RECEPTION: "emergency reception rules",
    RuleId.ONLINE_RECEPTION: "online reception rules",
    RuleId.SPECIAL_RECEPTION: "special reception rules",
}


class RuleRun:
    """Mutable accumulator for a single engine run."""

    def __init__(self):
        self.errors: list[ValidationIssue] = []
        self.warnings: list[ValidationIssue] = []
        self.applied: list[str] = []
        self.skipped: list[str] = []

    def merge(self, outcome: ValidationOutcome) -> None:
        self.errors.extend(outcome.errors)
        self.warnings.extend(outcome.warnings)

    def apply(self, rule: RuleId) -> None:
        self.applied.append(rule.value)

    def skip(self, rule: RuleId) -> None:
        self.skipped.append(rule.value)

    def was_skipped(self, rule: RuleId) -> bool:
        return rule.value in self.skipped

    def result(self) -> BusinessRulesResult:
        return BusinessRulesResult(
            outcome=ValidationOutcome(errors=tuple(self.errors), warnings=tuple(self.warnings)),
            applied_rules=tuple(self.applied),
            skipped_rules=tuple(self.skipped),
        )


class BusinessRulesEngine:
    """
    Registry-gated rule runner.

    Example:
        ```python
        engine = BusinessRulesEngine(registry, collaborators, ReceptionConfig())

        result = await engine.run(request, ValidationMode.CREATE)
        print(result.errors, result.applied_rules, result.skipped_rules)
        ```
    """

    def __init__(
        self,
        registry: RuleRegistry,
        collaborators: ReceptionCollaborators,
        config: ReceptionConfig,
        clock: Callable[[], datetime] = datetime.now,
        checks: ReceptionRuleChecks | None = None,
    ):
        self._registry = registry
        self._collaborators = collaborators
        self._config = config
        self._clock = clock
        self._checks = checks or ReceptionRuleChecks(collaborators, config, clock)

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    @property
    def checks(self) -> ReceptionRuleChecks:
        return self._checks

    async def run(
        self,
        request: IntakeRequest,
        mode: ValidationMode,
        families: Iterable[RuleFamily] | None = None,
    ) -> BusinessRulesResult:
        """
        Run the requested rule families (all of them by default).

        Args:
            request: Create or edit intake request
            mode: Validation mode
            families: Subset of families to run; execution order is fixed

        Returns:
            BusinessRulesResult with accumulated issues and rule trace
        """
        selected = set(families) if families is not None else set(FAMILY_ORDER)
        run = RuleRun()

        for family in FAMILY_ORDER:
            if family not in selected:
                continue
            match family:
                case RuleFamily.BUSINESS:
                    await self._run_core_rules(request, mode, run)
                case RuleFamily.SECURITY:
                    await self._run_security_rules(request, mode, run)
                case RuleFamily.VALIDATION:
                    await self._run_validation_rules(request, run)
                case RuleFamily.SPECIAL_CASE:
                    await self._run_special_case_rules(request, run)
                case RuleFamily.PERFORMANCE:
                    await self._run_placeholders((RuleId.LOAD_BALANCING, RuleId.RESOURCE_OPTIMIZATION), run)
                case RuleFamily.INTEGRATION:
                    await self._run_placeholders(
                        (RuleId.EXTERNAL_SYSTEM_INTEGRATION, RuleId.DATA_SYNCHRONIZATION), run
                    )

        result = run.result()
        logger.info(
            f"Business rules finished: valid={result.is_valid}, errors={len(result.errors)}, "
            f"applied={len(result.applied_rules)}, skipped={len(result.skipped_rules)}"
        )
        return result

    # ------------------------------------------------------------------
    # Gating
    # ------------------------------------------------------------------

    async def _apply(
        self,
        rule: RuleId,
        run: RuleRun,
        check: Callable[[], Awaitable[ValidationOutcome]],
        error_kind: IssueKind = IssueKind.BUSINESS_RULE,
    ) -> None:
        if not self._registry.is_enabled(rule):
            logger.debug(f"Rule {rule.value} disabled, skipping")
            run.skip(rule)
            return

        try:
            outcome = await check()
        except Exception as e:
            label = RULE_LABELS.get(rule, rule.value)
            logger.error(f"Error executing rule {rule.value}: {e}", exc_info=True)
            run.errors.append(
                ValidationIssue.from_exception(e, f"error validating {label}", rule=rule.value, default_kind=error_kind)
            )
        else:
            run.merge(outcome)
        run.apply(rule)

    # ------------------------------------------------------------------
    # Business family
    # ------------------------------------------------------------------

    async def _run_core_rules(self, request: IntakeRequest, mode: ValidationMode, run: RuleRun) -> None:
        for rule in CORE_BUSINESS_RULES:
            match rule:
                case RuleId.PATIENT_VALIDATION:
                    await self._apply(rule, run, lambda: self._patient_rule(request))
                case RuleId.DOCTOR_VALIDATION:
                    await self._apply(rule, run, lambda: self._doctor_rule(request))
                case RuleId.SERVICE_VALIDATION:
                    await self._apply(rule, run, lambda: self._checks.validate_services(request.service_ids))
                case RuleId.DATE_VALIDATION:
                    await self._apply(rule, run, lambda: self._date_rule(request))
                case RuleId.TIME_CONFLICT_VALIDATION:
                    await self._run_time_conflict_rules(request, mode, run)

    async def _patient_rule(self, request: IntakeRequest) -> ValidationOutcome:
        if request.patient_id <= 0:
            return ValidationOutcome.failure("invalid patient id", rule=RuleId.PATIENT_VALIDATION.value)
        return await self._checks.validate_patient(request.patient_id)

    async def _doctor_rule(self, request: IntakeRequest) -> ValidationOutcome:
        if request.doctor_id <= 0:
            return ValidationOutcome.failure("invalid doctor id", rule=RuleId.DOCTOR_VALIDATION.value)
        return await self._checks.validate_doctor(request.doctor_id, request.reception_date)

    async def _date_rule(self, request: IntakeRequest) -> ValidationOutcome:
        if request.reception_date is not None and _reception_day(request) is None:
            return ValidationOutcome.failure(
                "reception date is not a valid date", kind=IssueKind.STRUCTURAL, rule=RuleId.DATE_VALIDATION.value
            )
        return self._checks.validate_reception_date(request.reception_date)

    async def _run_time_conflict_rules(self, request: IntakeRequest, mode: ValidationMode, run: RuleRun) -> None:
        if request.is_emergency:
            logger.debug("Emergency reception: skipping time conflict, capacity and working hours")
            for rule in EMERGENCY_RELAXED_RULES:
                run.skip(rule)
            return

        reception_date = _reception_day(request)
        exclude_id = request.reception_id if isinstance(request, EditIntakeRequest) else None

        async def time_conflict() -> ValidationOutcome:
            if request.patient_id <= 0 or request.doctor_id <= 0 or reception_date is None:
                return ValidationOutcome.success()
            return await self._checks.validate_time_conflict(
                request.patient_id, request.doctor_id, reception_date, exclude_reception_id=exclude_id
            )

        async def capacity() -> ValidationOutcome:
            if request.doctor_id <= 0 or reception_date is None:
                return ValidationOutcome.success()
            return await self._checks.validate_doctor_capacity(request.doctor_id, reception_date)

        async def working_hours() -> ValidationOutcome:
            if reception_date is None:
                return ValidationOutcome.success()
            return self._checks.validate_working_hours(reception_date)

        await self._apply(RuleId.TIME_CONFLICT_VALIDATION, run, time_conflict)
        await self._apply(RuleId.DOCTOR_CAPACITY_VALIDATION, run, capacity)
        await self._apply(RuleId.WORKING_HOURS_VALIDATION, run, working_hours)

    # ------------------------------------------------------------------
    # Security family
    # ------------------------------------------------------------------

    async def _run_security_rules(self, request: IntakeRequest, mode: ValidationMode, run: RuleRun) -> None:
        await self._apply(
            RuleId.USER_PERMISSION_VALIDATION,
            run,
            lambda: self._permission_rule(request, mode),
            error_kind=IssueKind.SECURITY,
        )
        await self._apply(
            RuleId.DATA_SECURITY_VALIDATION,
            run,
            lambda: self._data_security_rule(request),
            error_kind=IssueKind.SECURITY,
        )
        await self._apply(
            RuleId.INPUT_SECURITY_VALIDATION,
            run,
            lambda: self._input_security_rule(request),
            error_kind=IssueKind.SECURITY,
        )

    async def _permission_rule(self, request: IntakeRequest, mode: ValidationMode) -> ValidationOutcome:
        security = self._collaborators.security
        rule = RuleId.USER_PERMISSION_VALIDATION.value

        if mode == ValidationMode.EDIT:
            if not await security.has_role(request.actor_id, ReceptionPermission.EDIT.value):
                return ValidationOutcome.failure(
                    "you are not authorized to edit receptions", kind=IssueKind.SECURITY, rule=rule
                )
            if isinstance(request, EditIntakeRequest):
                reception_key = entity_key("reception", request.reception_id)
                if not await security.can_access_entity(reception_key, request.actor_id):
                    return ValidationOutcome.failure(
                        "you are not authorized to edit this reception", kind=IssueKind.SECURITY, rule=rule
                    )
            return ValidationOutcome.success()

        if not await security.has_role(request.actor_id, ReceptionPermission.CREATE.value):
            return ValidationOutcome.failure(
                "you are not authorized to create receptions", kind=IssueKind.SECURITY, rule=rule
            )
        return ValidationOutcome.success()

    async def _data_security_rule(self, request: IntakeRequest) -> ValidationOutcome:
        security = self._collaborators.security
        rule = RuleId.DATA_SECURITY_VALIDATION.value
        errors: list[ValidationIssue] = []

        if request.patient_id > 0 and not await security.can_access_entity(
            entity_key("patient", request.patient_id), request.actor_id
        ):
            errors.append(
                ValidationIssue(IssueKind.SECURITY, "you are not authorized to access this patient's data", rule)
            )
        if request.doctor_id > 0 and not await security.can_access_entity(
            entity_key("doctor", request.doctor_id), request.actor_id
        ):
            errors.append(
                ValidationIssue(IssueKind.SECURITY, "you are not authorized to access this doctor's data", rule)
            )
        return ValidationOutcome(errors=errors)

    async def _input_security_rule(self, request: IntakeRequest) -> ValidationOutcome:
        threat = InputSanitizer.find_threat(request.notes)
        if threat:
            logger.warning(f"Rejected notes from actor {request.actor_id}: matched {threat}")
            return ValidationOutcome.failure(
                "notes contain potentially malicious content",
                kind=IssueKind.SECURITY,
                rule=RuleId.INPUT_SECURITY_VALIDATION.value,
            )
        return ValidationOutcome.success()

    # ------------------------------------------------------------------
    # Validation family
    # ------------------------------------------------------------------

    async def _run_validation_rules(self, request: IntakeRequest, run: RuleRun) -> None:
        await self._apply(RuleId.DATA_TYPE_VALIDATION, run, lambda: self._data_type_rule(request))
        await self._apply(RuleId.RANGE_VALIDATION, run, lambda: self._range_rule(request))
        await self._apply(RuleId.FORMAT_VALIDATION, run, lambda: self._format_rule(request))

    async def _data_type_rule(self, request: IntakeRequest) -> ValidationOutcome:
        rule = RuleId.DATA_TYPE_VALIDATION.value
        errors: list[ValidationIssue] = []

        for label, value in (("patient id", request.patient_id), ("doctor id", request.doctor_id)):
            if not isinstance(value, int) or isinstance(value, bool):
                errors.append(ValidationIssue(IssueKind.STRUCTURAL, f"{label} must be an integer", rule))
        if any(not isinstance(s, int) or isinstance(s, bool) or s <= 0 for s in request.service_ids):
            errors.append(ValidationIssue(IssueKind.STRUCTURAL, "service ids must be positive integers", rule))
        if request.reception_date is not None and not isinstance(request.reception_date, date):
            errors.append(ValidationIssue(IssueKind.STRUCTURAL, "reception date must be a date", rule))
        return ValidationOutcome(errors=errors)

    async def _range_rule(self, request: IntakeRequest) -> ValidationOutcome:
        rule = RuleId.RANGE_VALIDATION.value
        errors: list[ValidationIssue] = []

        reception_date = _reception_day(request)
        if reception_date is not None:
            if as_date(reception_date) < self._checks.earliest_accepted_date():
                errors.append(
                    ValidationIssue(
                        IssueKind.BUSINESS_RULE,
                        f"reception date cannot be more than {self._config.max_past_days} days in the past",
                        rule,
                    )
                )
        if len(request.service_ids) > self._config.max_services:
            errors.append(
                ValidationIssue(
                    IssueKind.BUSINESS_RULE,
                    f"no more than {self._config.max_services} services can be selected",
                    rule,
                )
            )
        return ValidationOutcome(errors=errors)

    async def _format_rule(self, request: IntakeRequest) -> ValidationOutcome:
        if request.notes and len(request.notes) > self._config.max_notes_length:
            return ValidationOutcome.failure(
                f"notes cannot exceed {self._config.max_notes_length} characters",
                kind=IssueKind.STRUCTURAL,
                rule=RuleId.FORMAT_VALIDATION.value,
            )
        return ValidationOutcome.success()

    # ------------------------------------------------------------------
    # Special-case family
    # ------------------------------------------------------------------

    async def _run_special_case_rules(self, request: IntakeRequest, run: RuleRun) -> None:
        if request.is_emergency:
            await self._apply(RuleId.EMERGENCY_RECEPTION, run, lambda: self._emergency_rule(request, run))
        if request.is_online:
            await self._apply(RuleId.ONLINE_RECEPTION, run, self._passthrough)
        if request.is_special:
            await self._apply(RuleId.SPECIAL_RECEPTION, run, self._passthrough)

    async def _emergency_rule(self, request: IntakeRequest, run: RuleRun) -> ValidationOutcome:
        """
        Patient and doctor checks are mandatory for emergencies.

        They are re-run here only when the registry disabled the regular
        rules in this run, so the same failure is never reported twice.
        """
        outcomes: list[ValidationOutcome] = []
        if run.was_skipped(RuleId.PATIENT_VALIDATION):
            outcomes.append(await self._patient_rule(request))
        if run.was_skipped(RuleId.DOCTOR_VALIDATION):
            outcomes.append(await self._doctor_rule(request))
        return ValidationOutcome.combine(outcomes)

    # ------------------------------------------------------------------
    # Reserved extension points
    # ------------------------------------------------------------------

    async def _passthrough(self) -> ValidationOutcome:
        return ValidationOutcome.success()

    async def _run_placeholders(self, rules: tuple[RuleId, ...], run: RuleRun) -> None:
        for rule in rules:
            await self._apply(rule, run, self._passthrough)
