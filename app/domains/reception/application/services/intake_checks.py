# ============================================================================
# SCOPE: APPLICATION LAYER (Reception)
# Description: Collaborator-backed checks reused by the rules engine and the
#              transition condition strategies.
# ============================================================================
"""Reception rule checks.

Each check returns a ValidationOutcome. Collaborator failures propagate to
the caller, which converts them into issues at rule scope.
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Callable, Iterable

from app.core.shared.date_utils import add_months, as_date
from app.domains.reception.application.config import ReceptionConfig
from app.domains.reception.application.ports import EntityStatus, ReceptionCollaborators
from app.domains.reception.domain.value_objects import (
    IssueKind,
    RuleId,
    ValidationIssue,
    ValidationOutcome,
)

logger = logging.getLogger(__name__)


def _error(message: str, rule: RuleId) -> ValidationIssue:
    return ValidationIssue(kind=IssueKind.BUSINESS_RULE, message=message, rule=rule.value)


class ReceptionRuleChecks:
    """
    Individual reception checks against the collaborator ports.

    Example:
        ```python
        checks = ReceptionRuleChecks(collaborators, ReceptionConfig())

        outcome = await checks.validate_patient(42)
        if not outcome.is_valid:
            print(outcome.error_messages)
        ```
    """

    def __init__(
        self,
        collaborators: ReceptionCollaborators,
        config: ReceptionConfig,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._collaborators = collaborators
        self._config = config
        self._clock = clock

    @property
    def today(self) -> date:
        return self._clock().date()

    @staticmethod
    def _entity_errors(status: EntityStatus, label: str, rule: RuleId) -> list[ValidationIssue]:
        if not status.exists:
            return [_error(f"{label} not found", rule)]
        if status.is_deleted:
            return [_error(f"{label} has been deleted", rule)]
        if not status.is_active:
            return [_error(f"{label} is inactive", rule)]
        return []

    async def validate_patient(self, patient_id: int) -> ValidationOutcome:
        logger.debug(f"Validating patient {patient_id}")
        status = await self._collaborators.patients.get_by_id(patient_id)
        errors = self._entity_errors(status, "patient", RuleId.PATIENT_VALIDATION)
        if errors:
            logger.warning(f"Patient {patient_id} rejected: {[e.message for e in errors]}")
        return ValidationOutcome(errors=errors)

    async def validate_doctor(self, doctor_id: int, reception_date: datetime | None = None) -> ValidationOutcome:
        logger.debug(f"Validating doctor {doctor_id} for {reception_date}")
        status = await self._collaborators.doctors.get_by_id(doctor_id)
        errors = self._entity_errors(status, "doctor", RuleId.DOCTOR_VALIDATION)
        if errors:
            logger.warning(f"Doctor {doctor_id} rejected: {[e.message for e in errors]}")
        return ValidationOutcome(errors=errors)

    async def validate_services(self, service_ids: Iterable[int]) -> ValidationOutcome:
        service_ids = list(service_ids)
        logger.debug(f"Validating {len(service_ids)} services")

        if not service_ids:
            return ValidationOutcome.failure(
                "at least one service must be selected", rule=RuleId.SERVICE_VALIDATION.value
            )

        errors: list[ValidationIssue] = []
        for service_id in service_ids:
            status = await self._collaborators.services.get_by_id(service_id)
            errors.extend(
                self._entity_errors(status, f"service {status.display_name}", RuleId.SERVICE_VALIDATION)
            )

        if errors:
            logger.warning(f"Service validation failed: {[e.message for e in errors]}")
        return ValidationOutcome(errors=errors)

    def validate_reception_date(self, reception_date: datetime | None) -> ValidationOutcome:
        if reception_date is None:
            return ValidationOutcome.failure("reception date is required", rule=RuleId.DATE_VALIDATION.value)

        day = as_date(reception_date)
        errors: list[ValidationIssue] = []

        if day < self.today:
            errors.append(_error("reception date cannot be in the past", RuleId.DATE_VALIDATION))

        if day > add_months(self.today, self._config.max_future_months):
            errors.append(
                _error(
                    f"reception date cannot be more than {self._config.max_future_months} months ahead",
                    RuleId.DATE_VALIDATION,
                )
            )

        if day.weekday() in self._config.weekend_days:
            errors.append(_error("reception date cannot fall on a weekend", RuleId.DATE_VALIDATION))

        if errors:
            logger.warning(f"Reception date {day} rejected: {[e.message for e in errors]}")
        return ValidationOutcome(errors=errors)

    async def validate_time_conflict(
        self,
        patient_id: int,
        doctor_id: int,
        reception_date: datetime,
        exclude_reception_id: int | None = None,
    ) -> ValidationOutcome:
        """Reject a second active reception for the same patient on the same day."""
        day = as_date(reception_date)
        has_active = await self._collaborators.schedule.has_active_reception(
            patient_id, day, exclude_reception_id=exclude_reception_id
        )
        if has_active:
            logger.warning(f"Patient {patient_id} already has an active reception on {day}")
            return ValidationOutcome.failure(
                "patient already has an active reception on this date",
                rule=RuleId.TIME_CONFLICT_VALIDATION.value,
            )
        return ValidationOutcome.success()

    async def validate_doctor_capacity(self, doctor_id: int, reception_date: datetime) -> ValidationOutcome:
        day = as_date(reception_date)
        count = await self._collaborators.schedule.count_receptions(doctor_id, day)
        if count >= self._config.max_daily_receptions_per_doctor:
            logger.warning(
                f"Doctor {doctor_id} at capacity on {day}: {count}/{self._config.max_daily_receptions_per_doctor}"
            )
            return ValidationOutcome.failure(
                "doctor has no remaining capacity on this date",
                rule=RuleId.DOCTOR_CAPACITY_VALIDATION.value,
            )
        return ValidationOutcome.success()

    def validate_working_hours(self, reception_date: date) -> ValidationOutcome:
        """Check the time of day; a bare date carries no time and passes."""
        if not isinstance(reception_date, datetime):
            return ValidationOutcome.success()

        start_hour = self._config.working_hours_start
        end_hour = self._config.working_hours_end
        moment = reception_date.time()

        too_early = moment < time(start_hour)
        too_late = end_hour < 24 and moment > time(end_hour)
        if too_early or too_late:
            return ValidationOutcome.failure(
                f"reception time must be between {start_hour:02d}:00 and {end_hour:02d}:00",
                rule=RuleId.WORKING_HOURS_VALIDATION.value,
            )
        return ValidationOutcome.success()

    def days_from_today(self, reception_date: datetime) -> int:
        return (as_date(reception_date) - self.today).days

    def earliest_accepted_date(self) -> date:
        return self.today - timedelta(days=self._config.max_past_days)
