# ============================================================================
# Tests for BusinessRulesEngine
# ============================================================================
"""Unit tests for BusinessRulesEngine.

Covers core rule ordering, registry gating, emergency relaxation, the
security/validation/special-case families and per-rule error capture.
"""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from app.domains.reception.application.config import ReceptionConfig
from app.domains.reception.application.ports import ReceptionCollaborators, entity_key
from app.domains.reception.application.services import BusinessRulesEngine, ReceptionRuleChecks
from app.domains.reception.domain.services import RuleRegistry
from app.domains.reception.domain.value_objects import (
    IssueKind,
    RuleDescriptor,
    RuleFamily,
    RuleId,
    ValidationMode,
)
from app.domains.reception.infrastructure.in_memory import InMemorySchedule, InMemorySecurity
from tests.utils import (
    NOW,
    VISITOR,
    IntakeRequestBuilder,
    assert_has_error,
    assert_no_error,
    create_collaborators,
    fixed_clock,
)

CREATE = ValidationMode.CREATE
EDIT = ValidationMode.EDIT


def build_engine(
    registry: RuleRegistry | None = None,
    collaborators: ReceptionCollaborators | None = None,
    config: ReceptionConfig | None = None,
) -> BusinessRulesEngine:
    return BusinessRulesEngine(
        registry or RuleRegistry.default(),
        collaborators or create_collaborators(),
        config or ReceptionConfig(),
        fixed_clock,
    )


def booked_schedule() -> InMemorySchedule:
    """Patient 1 already has a reception on the default request date."""
    schedule = InMemorySchedule()
    schedule.book(500, patient_id=1, doctor_id=10, on_date=date(2026, 3, 12))
    return schedule


# ============================================================================
# CORE RULES
# ============================================================================


class TestCoreRules:
    """Tests for the five core business rules."""

    @pytest.mark.asyncio
    async def test_valid_request_passes(self, engine: BusinessRulesEngine, intake: IntakeRequestBuilder) -> None:
        """Should accept a well-formed request with no errors."""
        result = await engine.run(intake.build(), CREATE)

        assert result.is_valid is True
        assert result.errors == []
        assert result.skipped_rules == ()

    @pytest.mark.asyncio
    async def test_core_rules_applied_in_order(self, engine: BusinessRulesEngine, intake: IntakeRequestBuilder) -> None:
        """Should apply the core rules in their fixed order."""
        result = await engine.run(intake.build(), CREATE, families=[RuleFamily.BUSINESS])

        assert result.applied_rules == (
            "PatientValidation",
            "DoctorValidation",
            "ServiceValidation",
            "DateValidation",
            "TimeConflictValidation",
            "DoctorCapacityValidation",
            "WorkingHoursValidation",
        )

    @pytest.mark.asyncio
    async def test_empty_services(self, engine: BusinessRulesEngine, intake: IntakeRequestBuilder) -> None:
        """Should report exactly one service error for an empty selection."""
        result = await engine.run(intake.with_services().build(), CREATE)

        service_errors = [e for e in result.outcome.errors if e.rule == RuleId.SERVICE_VALIDATION.value]
        assert [e.message for e in service_errors] == ["at least one service must be selected"]
        assert result.is_valid is False

    @pytest.mark.asyncio
    async def test_entity_failures(self, engine: BusinessRulesEngine, intake: IntakeRequestBuilder) -> None:
        """Should report missing, inactive and deleted records."""
        request = intake.with_patient(3).with_doctor(11).with_services(100, 102, 999).build()

        result = await engine.run(request, CREATE)

        assert "patient has been deleted" in result.errors
        assert "doctor is inactive" in result.errors
        assert "service X-ray is inactive" in result.errors
        assert "service 999 not found" in result.errors

    @pytest.mark.asyncio
    async def test_invalid_ids_skip_lookup_and_conflict_check(self, intake: IntakeRequestBuilder) -> None:
        """Should reject non-positive ids without calling the collaborators."""
        base = create_collaborators()
        schedule = AsyncMock()
        collaborators = ReceptionCollaborators(
            patients=base.patients,
            doctors=base.doctors,
            services=base.services,
            security=base.security,
            schedule=schedule,
        )
        engine = build_engine(collaborators=collaborators)

        result = await engine.run(intake.with_patient(0).with_doctor(-1).build(), CREATE)

        assert "invalid patient id" in result.errors
        assert "invalid doctor id" in result.errors
        schedule.has_active_reception.assert_not_awaited()
        schedule.count_receptions.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_date(self, engine: BusinessRulesEngine, intake: IntakeRequestBuilder) -> None:
        """Should require a reception date."""
        result = await engine.run(intake.on(None).build(), CREATE)

        assert "reception date is required" in result.errors

    @pytest.mark.asyncio
    async def test_date_too_far_ahead(self, engine: BusinessRulesEngine, intake: IntakeRequestBuilder) -> None:
        """Should reject dates more than three months ahead."""
        result = await engine.run(intake.days_ahead(100).build(), CREATE)

        assert "reception date cannot be more than 3 months ahead" in result.errors

    @pytest.mark.asyncio
    async def test_past_date_rejected_in_both_modes(
        self, engine: BusinessRulesEngine, intake: IntakeRequestBuilder
    ) -> None:
        """Should reject past dates on create and on edit."""
        created = await engine.run(intake.days_ahead(-2).build(), CREATE)
        edited = await engine.run(intake.days_ahead(-2).build_edit(), EDIT)

        assert "reception date cannot be in the past" in created.errors
        assert "reception date cannot be in the past" in edited.errors

    @pytest.mark.asyncio
    async def test_weekend_date_rejected(self, engine: BusinessRulesEngine, intake: IntakeRequestBuilder) -> None:
        """Should reject Friday and Saturday receptions."""
        friday = await engine.run(intake.days_ahead(3).build(), CREATE)
        saturday = await engine.run(intake.days_ahead(4).build(), CREATE)
        sunday = await engine.run(intake.days_ahead(5).build(), CREATE)

        assert_has_error(friday.outcome, "reception date cannot fall on a weekend")
        assert "reception date cannot fall on a weekend" in saturday.errors
        assert sunday.is_valid

    @pytest.mark.asyncio
    async def test_weekend_days_configurable(self, intake: IntakeRequestBuilder) -> None:
        """Should close only the configured weekdays."""
        engine = build_engine(config=ReceptionConfig(weekend_days=(5, 6)))

        friday = await engine.run(intake.days_ahead(3).build(), CREATE)
        sunday = await engine.run(intake.days_ahead(5).build(), CREATE)

        assert friday.is_valid
        assert "reception date cannot fall on a weekend" in sunday.errors

    @pytest.mark.asyncio
    async def test_malformed_date_reported_without_crashing(
        self, engine: BusinessRulesEngine, intake: IntakeRequestBuilder
    ) -> None:
        """Should report a non-date value instead of failing the date-dependent rules."""
        result = await engine.run(intake.on("2026-03-12T11:00").build(), CREATE)  # type: ignore[arg-type]

        assert_has_error(result.outcome, "reception date is not a valid date", IssueKind.STRUCTURAL)
        assert_has_error(result.outcome, "reception date must be a date", IssueKind.STRUCTURAL)
        assert not any(e.startswith("error validating") for e in result.errors)
        assert "reception time must be between 08:00 and 20:00" not in result.errors

    @pytest.mark.asyncio
    async def test_time_conflict(self, intake: IntakeRequestBuilder) -> None:
        """Should reject a second reception for the patient on the same day."""
        engine = build_engine(collaborators=create_collaborators(schedule=booked_schedule()))

        result = await engine.run(intake.build(), CREATE)

        assert_has_error(result.outcome, "patient already has an active reception on this date")

    @pytest.mark.asyncio
    async def test_edit_excludes_own_reception(self, intake: IntakeRequestBuilder) -> None:
        """Should not conflict with the reception being edited."""
        engine = build_engine(collaborators=create_collaborators(schedule=booked_schedule()))

        result = await engine.run(intake.build_edit(reception_id=500), EDIT)

        assert "patient already has an active reception on this date" not in result.errors

    @pytest.mark.asyncio
    async def test_doctor_at_capacity(self, intake: IntakeRequestBuilder) -> None:
        """Should reject when the doctor reached the daily limit."""
        schedule = InMemorySchedule()
        for reception_id in range(3):
            schedule.book(reception_id, patient_id=50 + reception_id, doctor_id=10, on_date=date(2026, 3, 12))
        engine = build_engine(
            collaborators=create_collaborators(schedule=schedule),
            config=ReceptionConfig(max_daily_receptions_per_doctor=3),
        )

        result = await engine.run(intake.build(), CREATE)

        assert "doctor has no remaining capacity on this date" in result.errors

    @pytest.mark.asyncio
    async def test_outside_working_hours(self, engine: BusinessRulesEngine, intake: IntakeRequestBuilder) -> None:
        """Should reject receptions outside 08:00-20:00."""
        result = await engine.run(intake.days_ahead(2, hour=21).build(), CREATE)

        assert "reception time must be between 08:00 and 20:00" in result.errors


# ============================================================================
# REGISTRY GATING
# ============================================================================


class TestRegistryGating:
    """Tests for rules disabled in the registry."""

    @pytest.mark.asyncio
    async def test_disabled_rule_skipped(self, intake: IntakeRequestBuilder) -> None:
        """Should skip a disabled rule and record it."""
        registry = RuleRegistry([RuleDescriptor(RuleId.SERVICE_VALIDATION, enabled=False)])
        engine = build_engine(registry=registry)

        result = await engine.run(intake.with_services().build(), CREATE)

        assert "at least one service must be selected" not in result.errors
        assert "ServiceValidation" in result.skipped_rules
        assert "ServiceValidation" not in result.applied_rules

    @pytest.mark.asyncio
    async def test_disabled_capacity_check(self, intake: IntakeRequestBuilder) -> None:
        """Should gate the capacity check separately from time conflicts."""
        registry = RuleRegistry([RuleDescriptor(RuleId.DOCTOR_CAPACITY_VALIDATION, enabled=False)])
        engine = build_engine(registry=registry)

        result = await engine.run(intake.build(), CREATE)

        assert result.skipped_rules == ("DoctorCapacityValidation",)
        assert "TimeConflictValidation" in result.applied_rules


# ============================================================================
# EMERGENCY RELAXATION
# ============================================================================


class TestEmergencyRelaxation:
    """Tests for emergency receptions."""

    @pytest.mark.asyncio
    async def test_scheduling_checks_skipped(self, intake: IntakeRequestBuilder) -> None:
        """Should skip time conflict, capacity and working hours for emergencies."""
        engine = build_engine(
            collaborators=create_collaborators(schedule=booked_schedule()),
            config=ReceptionConfig(max_daily_receptions_per_doctor=1),
        )
        request = intake.days_ahead(2, hour=23).emergency("cardiac", "chest pain").build()

        result = await engine.run(request, CREATE)

        assert_no_error(result.outcome, "patient already has an active reception on this date")
        assert_no_error(result.outcome, "doctor has no remaining capacity on this date")
        assert_no_error(result.outcome, "reception time must be between 08:00 and 20:00")
        for rule in ("TimeConflictValidation", "DoctorCapacityValidation", "WorkingHoursValidation"):
            assert rule in result.skipped_rules
            assert rule not in result.applied_rules
        assert "EmergencyReceptionRules" in result.applied_rules
        assert result.is_valid is True

    @pytest.mark.asyncio
    async def test_patient_still_mandatory(self, engine: BusinessRulesEngine, intake: IntakeRequestBuilder) -> None:
        """Should still reject an inactive patient in an emergency, exactly once."""
        result = await engine.run(intake.with_patient(2).emergency().build(), CREATE)

        assert result.errors.count("patient is inactive") == 1

    @pytest.mark.asyncio
    async def test_emergency_enforces_patient_when_rule_disabled(self, intake: IntakeRequestBuilder) -> None:
        """Should check patient and doctor even when their rules are disabled."""
        registry = RuleRegistry(
            [
                RuleDescriptor(RuleId.PATIENT_VALIDATION, enabled=False),
                RuleDescriptor(RuleId.DOCTOR_VALIDATION, enabled=False),
            ]
        )
        engine = build_engine(registry=registry)

        emergency = await engine.run(intake.with_patient(2).with_doctor(11).emergency().build(), CREATE)
        regular = await engine.run(IntakeRequestBuilder().with_patient(2).with_doctor(11).build(), CREATE)

        assert "patient is inactive" in emergency.errors
        assert "doctor is inactive" in emergency.errors
        assert "patient is inactive" not in regular.errors


# ============================================================================
# OTHER FAMILIES
# ============================================================================


class TestSecurityRules:
    """Tests for the security family."""

    @pytest.mark.asyncio
    async def test_actor_without_role(self, engine: BusinessRulesEngine, intake: IntakeRequestBuilder) -> None:
        """Should reject actors without the create role."""
        result = await engine.run(intake.by(VISITOR).build(), CREATE, families=[RuleFamily.SECURITY])

        assert_has_error(result.outcome, "you are not authorized to create receptions", IssueKind.SECURITY)

    @pytest.mark.asyncio
    async def test_edit_requires_reception_access(self, intake: IntakeRequestBuilder) -> None:
        """Should check access to the reception being edited."""
        security = InMemorySecurity()
        security.grant("editor", "reception.edit")
        security.restrict(entity_key("reception", 500), "someone-else")
        engine = build_engine(collaborators=create_collaborators(security=security))

        result = await engine.run(intake.by("editor").build_edit(500), EDIT, families=[RuleFamily.SECURITY])

        assert result.errors == ["you are not authorized to edit this reception"]

    @pytest.mark.asyncio
    async def test_restricted_patient(self, intake: IntakeRequestBuilder) -> None:
        """Should reject access to a restricted patient record."""
        security = InMemorySecurity()
        security.grant("clerk-2", "reception.create")
        security.restrict(entity_key("patient", 1), "head-nurse")
        engine = build_engine(collaborators=create_collaborators(security=security))

        result = await engine.run(intake.by("clerk-2").build(), CREATE, families=[RuleFamily.SECURITY])

        assert result.errors == ["you are not authorized to access this patient's data"]

    @pytest.mark.asyncio
    async def test_malicious_notes(self, engine: BusinessRulesEngine, intake: IntakeRequestBuilder) -> None:
        """Should reject script payloads in notes."""
        request = intake.with_notes("<script>alert(1)</script>").build()

        result = await engine.run(request, CREATE, families=[RuleFamily.SECURITY])

        assert_has_error(result.outcome, "notes contain potentially malicious content", IssueKind.SECURITY)


class TestValidationRules:
    """Tests for the validation family."""

    @pytest.mark.asyncio
    async def test_notes_too_long(self, engine: BusinessRulesEngine, intake: IntakeRequestBuilder) -> None:
        """Should reject notes over 1000 characters."""
        result = await engine.run(intake.with_notes("a" * 1001).build(), CREATE, families=[RuleFamily.VALIDATION])

        assert result.errors == ["notes cannot exceed 1000 characters"]

    @pytest.mark.asyncio
    async def test_too_many_services(self, engine: BusinessRulesEngine, intake: IntakeRequestBuilder) -> None:
        """Should reject more than ten services."""
        request = intake.with_services(*range(103, 114)).build()

        result = await engine.run(request, CREATE, families=[RuleFamily.VALIDATION])

        assert result.errors == ["no more than 10 services can be selected"]

    @pytest.mark.asyncio
    async def test_date_far_in_past(self, engine: BusinessRulesEngine, intake: IntakeRequestBuilder) -> None:
        """Should reject dates older than the accepted window, even on edit."""
        result = await engine.run(intake.days_ahead(-45).build_edit(), EDIT, families=[RuleFamily.VALIDATION])

        assert result.errors == ["reception date cannot be more than 30 days in the past"]

    @pytest.mark.asyncio
    async def test_wrong_types(self, engine: BusinessRulesEngine, intake: IntakeRequestBuilder) -> None:
        """Should flag service ids that are not positive integers."""
        request = intake.with_services(100, True, -4).build()

        result = await engine.run(request, CREATE, families=[RuleFamily.VALIDATION])

        assert_has_error(result.outcome, "service ids must be positive integers", IssueKind.STRUCTURAL)


class TestSpecialCaseAndPlaceholders:
    """Tests for flag-conditioned and placeholder rules."""

    @pytest.mark.asyncio
    async def test_flags_select_special_rules(self, engine: BusinessRulesEngine, intake: IntakeRequestBuilder) -> None:
        """Should apply only the special-case rules whose flags are set."""
        result = await engine.run(intake.online().special().build(), CREATE, families=[RuleFamily.SPECIAL_CASE])

        assert result.applied_rules == ("OnlineReceptionRules", "SpecialReceptionRules")

    @pytest.mark.asyncio
    async def test_standard_reception_skips_special_rules(self, engine: BusinessRulesEngine) -> None:
        """Should apply the special reception rules only for special receptions."""
        standard = IntakeRequestBuilder().build()
        special = IntakeRequestBuilder().special().build()

        result = await engine.run(standard, CREATE, families=[RuleFamily.SPECIAL_CASE])

        assert standard.is_special is False
        assert special.is_special is True
        assert result.applied_rules == ()

    @pytest.mark.asyncio
    async def test_placeholders_always_pass(self, engine: BusinessRulesEngine, intake: IntakeRequestBuilder) -> None:
        """Should apply the performance and integration placeholders without issues."""
        result = await engine.run(
            intake.build(), CREATE, families=[RuleFamily.PERFORMANCE, RuleFamily.INTEGRATION]
        )

        assert result.applied_rules == (
            "LoadBalancing",
            "ResourceOptimization",
            "ExternalSystemIntegration",
            "DataSynchronization",
        )
        assert result.outcome.errors == ()


# ============================================================================
# ERROR CAPTURE
# ============================================================================


class TestRuleErrorCapture:
    """Tests for collaborator failures inside rules."""

    @pytest.mark.asyncio
    async def test_lookup_failure_does_not_stop_other_rules(self, intake: IntakeRequestBuilder) -> None:
        """Should turn a raising lookup into a generic error and keep going."""
        base = create_collaborators()
        patients = AsyncMock()
        patients.get_by_id.side_effect = ConnectionError("patient registry unreachable")
        collaborators = ReceptionCollaborators(
            patients=patients,
            doctors=base.doctors,
            services=base.services,
            security=base.security,
            schedule=base.schedule,
        )
        engine = build_engine(collaborators=collaborators)

        result = await engine.run(intake.with_doctor(11).build(), CREATE)

        assert_has_error(result.outcome, "error validating patient", IssueKind.BUSINESS_RULE)
        assert "doctor is inactive" in result.errors
        assert "patient registry unreachable" not in " ".join(result.errors)
        assert "PatientValidation" in result.applied_rules

    @pytest.mark.asyncio
    async def test_security_failure_is_security_issue(self, intake: IntakeRequestBuilder) -> None:
        """Should classify a raising security port as a security issue."""
        base = create_collaborators()
        security = AsyncMock()
        security.has_role.side_effect = TimeoutError("identity provider timeout")
        security.can_access_entity.return_value = True
        collaborators = ReceptionCollaborators(
            patients=base.patients,
            doctors=base.doctors,
            services=base.services,
            security=security,
            schedule=base.schedule,
        )
        engine = build_engine(collaborators=collaborators)

        result = await engine.run(intake.build(), CREATE, families=[RuleFamily.SECURITY])

        assert_has_error(result.outcome, "error validating user permissions", IssueKind.SECURITY)


class TestRuleChecks:
    """Tests for the individual checks shared with transition conditions."""

    @pytest.mark.asyncio
    async def test_patient_not_found(self, checks: ReceptionRuleChecks) -> None:
        """Should report a missing patient."""
        outcome = await checks.validate_patient(404)

        assert outcome.error_messages == ["patient not found"]

    def test_working_hours_boundaries(self, checks: ReceptionRuleChecks) -> None:
        """Should accept 08:00 and 20:00 but not 07:59 or 20:01."""
        day = NOW.replace(hour=0)

        assert checks.validate_working_hours(day.replace(hour=8)).is_valid
        assert checks.validate_working_hours(day.replace(hour=20)).is_valid
        assert not checks.validate_working_hours(day.replace(hour=7, minute=59)).is_valid
        assert not checks.validate_working_hours(day.replace(hour=20, minute=1)).is_valid

    def test_working_hours_skip_bare_date(self, checks: ReceptionRuleChecks) -> None:
        """Should accept a date without a time of day."""
        assert checks.validate_working_hours(NOW.date()).is_valid
