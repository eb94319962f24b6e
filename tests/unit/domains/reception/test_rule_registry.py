# ============================================================================
# Tests for RuleRegistry enablement lookups
# ============================================================================
"""Unit tests for RuleRegistry."""

import pytest

from app.core.domain import ConfigurationException
from app.domains.reception.domain.services import RuleRegistry
from app.domains.reception.domain.value_objects import RuleDescriptor, RuleFamily, RuleId


class TestRuleRegistryDefaults:
    """Tests for the default registry."""

    def test_core_rules_enabled(self) -> None:
        """Should enable every core business rule."""
        registry = RuleRegistry.default()

        for rule in (
            RuleId.PATIENT_VALIDATION,
            RuleId.DOCTOR_VALIDATION,
            RuleId.SERVICE_VALIDATION,
            RuleId.DATE_VALIDATION,
            RuleId.TIME_CONFLICT_VALIDATION,
        ):
            assert registry.is_enabled(rule) is True

    def test_unregistered_rule_is_enabled(self) -> None:
        """Should treat rules without a descriptor as enabled."""
        registry = RuleRegistry.default()

        assert RuleId.EMERGENCY_RECEPTION not in registry
        assert registry.is_enabled(RuleId.EMERGENCY_RECEPTION) is True

    def test_unknown_name_is_enabled(self) -> None:
        """Should be default-allow for names that are not rules at all."""
        assert RuleRegistry().is_enabled("SomethingNobodyConfigured") is True

    def test_lookup_by_name(self) -> None:
        """Should resolve configured names to descriptors."""
        registry = RuleRegistry.default()

        assert registry.descriptor("PatientValidation").rule == RuleId.PATIENT_VALIDATION
        assert "DoctorValidation" in registry
        assert registry.priority(RuleId.DATE_VALIDATION) == 4

    def test_family_rules_sorted_by_priority(self) -> None:
        """Should list a family's descriptors by ascending priority value."""
        security = RuleRegistry.default().family_rules(RuleFamily.SECURITY)

        assert [d.rule for d in security] == [
            RuleId.USER_PERMISSION_VALIDATION,
            RuleId.DATA_SECURITY_VALIDATION,
            RuleId.INPUT_SECURITY_VALIDATION,
        ]


class TestRuleRegistryConfiguration:
    """Tests for custom registries."""

    def test_disabled_rule(self) -> None:
        """Should report disabled rules."""
        registry = RuleRegistry([RuleDescriptor(RuleId.PATIENT_VALIDATION, enabled=False)])

        assert registry.is_enabled(RuleId.PATIENT_VALIDATION) is False
        assert registry.disabled_rules() == [RuleId.PATIENT_VALIDATION]
        assert registry.is_enabled(RuleId.DOCTOR_VALIDATION) is True

    def test_duplicate_rule_rejected(self) -> None:
        """Should refuse a rule configured twice."""
        with pytest.raises(ConfigurationException):
            RuleRegistry(
                [
                    RuleDescriptor(RuleId.PATIENT_VALIDATION),
                    RuleDescriptor(RuleId.PATIENT_VALIDATION, enabled=False),
                ]
            )

    def test_registry_is_read_only(self) -> None:
        """Should not expose a mutable table."""
        registry = RuleRegistry.default()

        with pytest.raises(TypeError):
            registry._descriptors[RuleId.PATIENT_VALIDATION] = RuleDescriptor(RuleId.PATIENT_VALIDATION)

    def test_every_rule_has_a_family(self) -> None:
        """Should assign every rule id to a family."""
        for rule in RuleId:
            assert isinstance(rule.family, RuleFamily)
