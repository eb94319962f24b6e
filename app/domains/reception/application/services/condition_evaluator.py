# ============================================================================
# SCOPE: APPLICATION LAYER (Reception)
# Description: Evaluates one transition condition through a per-type strategy.
# ============================================================================
"""
Condition Evaluator

Dispatches a TransitionCondition to the strategy registered for its
ConditionType. A condition whose type has no strategy fails with
"invalid condition type"; it never passes silently.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Callable, Mapping, Protocol

from app.domains.reception.application.dto import TransitionContext
from app.domains.reception.application.ports import ISecurityPort
from app.domains.reception.application.services.intake_checks import ReceptionRuleChecks
from app.domains.reception.domain.value_objects import (
    ConditionType,
    IssueKind,
    TransitionCondition,
    ValidationIssue,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConditionResult:
    passed: bool
    message: str | None = None
    kind: IssueKind = IssueKind.BUSINESS_RULE

    @classmethod
    def ok(cls) -> "ConditionResult":
        return cls(passed=True)

    @classmethod
    def fail(cls, message: str | None = None, kind: IssueKind = IssueKind.BUSINESS_RULE) -> "ConditionResult":
        return cls(passed=False, message=message, kind=kind)

    def to_issue(self, condition: TransitionCondition, rule: str | None = None) -> ValidationIssue:
        return ValidationIssue(kind=self.kind, message=self.message or condition.description, rule=rule)


class IConditionStrategy(Protocol):
    async def evaluate(self, context: TransitionContext, condition: TransitionCondition) -> ConditionResult: ...


class DataValidationStrategy:
    """Required context fields must be present and non-empty."""

    DEFAULT_REQUIRED_FIELDS = ("patient_id",)

    async def evaluate(self, context: TransitionContext, condition: TransitionCondition) -> ConditionResult:
        required = condition.param("required_fields", self.DEFAULT_REQUIRED_FIELDS)
        missing = [name for name in required if not self._has_value(context.get(name))]
        if missing:
            logger.debug(f"Reception {context.reception_id} missing fields: {missing}")
            return ConditionResult.fail()
        return ConditionResult.ok()

    @staticmethod
    def _has_value(value) -> bool:
        if value is None:
            return False
        if isinstance(value, bool):
            return True
        if isinstance(value, (int, float)):
            return value > 0
        if isinstance(value, (str, list, tuple, set, dict)):
            return len(value) > 0
        return True


class BusinessLogicStrategy:
    """Referenced records must exist and be active."""

    def __init__(self, checks: ReceptionRuleChecks | None):
        self._checks = checks

    async def evaluate(self, context: TransitionContext, condition: TransitionCondition) -> ConditionResult:
        if self._checks is None:
            return ConditionResult.fail("business checks are not configured", IssueKind.CONFIGURATION)

        check = condition.param("check", "patient_active")
        match check:
            case "patient_active":
                patient_id = context.get("patient_id")
                if not patient_id:
                    return ConditionResult.fail()
                outcome = await self._checks.validate_patient(patient_id)
            case "doctor_active":
                doctor_id = context.get("doctor_id")
                if not doctor_id:
                    return ConditionResult.fail()
                outcome = await self._checks.validate_doctor(doctor_id, context.get("reception_date"))
            case "services_active":
                outcome = await self._checks.validate_services(context.get("service_ids") or [])
            case _:
                return ConditionResult.fail(f"unknown business check '{check}'", IssueKind.CONFIGURATION)

        if outcome.is_valid:
            return ConditionResult.ok()
        return ConditionResult.fail()


class TimeConstraintStrategy:
    """Reception time must fall in working hours and within a horizon."""

    def __init__(self, checks: ReceptionRuleChecks | None, clock: Callable[[], datetime] = datetime.now):
        self._checks = checks
        self._clock = clock

    async def evaluate(self, context: TransitionContext, condition: TransitionCondition) -> ConditionResult:
        reception_date = context.get("reception_date")
        if not isinstance(reception_date, datetime):
            return ConditionResult.ok()

        if condition.param("working_hours", False) and self._checks is not None:
            if not self._checks.validate_working_hours(reception_date).is_valid:
                return ConditionResult.fail()

        max_days_ahead = condition.param("max_days_ahead")
        if max_days_ahead is not None:
            if (reception_date.date() - self._clock().date()).days > max_days_ahead:
                return ConditionResult.fail()

        return ConditionResult.ok()


class UserPermissionStrategy:
    """Actor must hold the configured role. Passes when no security port is wired."""

    def __init__(self, security: ISecurityPort | None):
        self._security = security

    async def evaluate(self, context: TransitionContext, condition: TransitionCondition) -> ConditionResult:
        role = condition.param("role")
        if self._security is None or not role:
            return ConditionResult.ok()
        if await self._security.has_role(context.actor_id, role):
            return ConditionResult.ok()
        return ConditionResult.fail(kind=IssueKind.SECURITY)


class ConditionEvaluator:
    """
    Evaluates transition conditions.

    Example:
        ```python
        evaluator = ConditionEvaluator.with_defaults(checks=checks, security=security)

        result = await evaluator.evaluate(context, condition)
        if not result.passed:
            print(result.message or condition.description)
        ```
    """

    def __init__(self, strategies: Mapping[ConditionType, IConditionStrategy]):
        self._strategies = MappingProxyType(dict(strategies))

    @classmethod
    def with_defaults(
        cls,
        checks: ReceptionRuleChecks | None = None,
        security: ISecurityPort | None = None,
        clock: Callable[[], datetime] = datetime.now,
        overrides: Mapping[ConditionType, IConditionStrategy] | None = None,
    ) -> "ConditionEvaluator":
        strategies: dict[ConditionType, IConditionStrategy] = {}
        for condition_type in ConditionType:
            match condition_type:
                case ConditionType.DATA_VALIDATION:
                    strategies[condition_type] = DataValidationStrategy()
                case ConditionType.BUSINESS_LOGIC:
                    strategies[condition_type] = BusinessLogicStrategy(checks)
                case ConditionType.TIME_CONSTRAINT:
                    strategies[condition_type] = TimeConstraintStrategy(checks, clock)
                case ConditionType.USER_PERMISSION:
                    strategies[condition_type] = UserPermissionStrategy(security)
        strategies.update(overrides or {})
        return cls(strategies)

    async def evaluate(self, context: TransitionContext, condition: TransitionCondition) -> ConditionResult:
        strategy = self._strategies.get(condition.condition_type) if condition.is_known_type else None
        if strategy is None:
            logger.error(
                f"Invalid condition type '{condition.condition_type}' for reception {context.reception_id}"
            )
            return ConditionResult.fail("invalid condition type", IssueKind.CONFIGURATION)

        try:
            return await strategy.evaluate(context, condition)
        except Exception as e:
            logger.error(
                f"Error evaluating {condition.condition_type} condition for reception {context.reception_id}: {e}",
                exc_info=True,
            )
            kind = ValidationIssue.from_exception(e, "error evaluating condition").kind
            return ConditionResult.fail("error evaluating condition", kind)
