# ============================================================================
# SCOPE: DOMAIN LAYER (Reception)
# Description: Closed set of rule identifiers and their registry metadata.
# ============================================================================
"""Rule identifiers for the reception business rules engine.

Every rule the engine can run has a ``RuleId``. The value is the name used in
configuration files and in applied/skipped traces.
"""

from dataclasses import dataclass

from app.core.domain import StatusEnum, ValidationException, ValueObject


class RuleFamily(StatusEnum):
    BUSINESS = "business"
    SECURITY = "security"
    VALIDATION = "validation"
    SPECIAL_CASE = "special_case"
    PERFORMANCE = "performance"
    INTEGRATION = "integration"


class RuleId(StatusEnum):
    """Identifier of a rule run by the business rules engine."""

    # Core business rules, in execution order
    PATIENT_VALIDATION = "PatientValidation"
    DOCTOR_VALIDATION = "DoctorValidation"
    SERVICE_VALIDATION = "ServiceValidation"
    DATE_VALIDATION = "DateValidation"
    TIME_CONFLICT_VALIDATION = "TimeConflictValidation"
    # Checks folded into the time-conflict step
    DOCTOR_CAPACITY_VALIDATION = "DoctorCapacityValidation"
    WORKING_HOURS_VALIDATION = "WorkingHoursValidation"

    USER_PERMISSION_VALIDATION = "UserPermissionValidation"
    DATA_SECURITY_VALIDATION = "DataSecurityValidation"
    INPUT_SECURITY_VALIDATION = "InputSecurityValidation"

    DATA_TYPE_VALIDATION = "DataTypeValidation"
    RANGE_VALIDATION = "RangeValidation"
    FORMAT_VALIDATION = "FormatValidation"

    EMERGENCY_RECEPTION = "EmergencyReceptionRules"
    ONLINE_RECEPTION = "OnlineReceptionRules"
    SPECIAL_RECEPTION = "SpecialReceptionRules"

    LOAD_BALANCING = "LoadBalancing"
    RESOURCE_OPTIMIZATION = "ResourceOptimization"

    EXTERNAL_SYSTEM_INTEGRATION = "ExternalSystemIntegration"
    DATA_SYNCHRONIZATION = "DataSynchronization"

    @property
    def family(self) -> RuleFamily:
        return RULE_FAMILIES[self]

    @classmethod
    def lookup(cls, name: str) -> "RuleId | None":
        """Resolve a configured rule name, or None when it is not a known rule."""
        try:
            return cls.from_string(name)
        except ValueError:
            return None


RULE_FAMILIES: dict[RuleId, RuleFamily] = {
    RuleId.PATIENT_VALIDATION: RuleFamily.BUSINESS,
    RuleId.DOCTOR_VALIDATION: RuleFamily.BUSINESS,
    RuleId.SERVICE_VALIDATION: RuleFamily.BUSINESS,
    RuleId.DATE_VALIDATION: RuleFamily.BUSINESS,
    RuleId.TIME_CONFLICT_VALIDATION: RuleFamily.BUSINESS,
    RuleId.DOCTOR_CAPACITY_VALIDATION: RuleFamily.BUSINESS,
    RuleId.WORKING_HOURS_VALIDATION: RuleFamily.BUSINESS,
    RuleId.USER_PERMISSION_VALIDATION: RuleFamily.SECURITY,
    RuleId.DATA_SECURITY_VALIDATION: RuleFamily.SECURITY,
    RuleId.INPUT_SECURITY_VALIDATION: RuleFamily.SECURITY,
    RuleId.DATA_TYPE_VALIDATION: RuleFamily.VALIDATION,
    RuleId.RANGE_VALIDATION: RuleFamily.VALIDATION,
    RuleId.FORMAT_VALIDATION: RuleFamily.VALIDATION,
    RuleId.EMERGENCY_RECEPTION: RuleFamily.SPECIAL_CASE,
    RuleId.ONLINE_RECEPTION: RuleFamily.SPECIAL_CASE,
    RuleId.SPECIAL_RECEPTION: RuleFamily.SPECIAL_CASE,
    RuleId.LOAD_BALANCING: RuleFamily.PERFORMANCE,
    RuleId.RESOURCE_OPTIMIZATION: RuleFamily.PERFORMANCE,
    RuleId.EXTERNAL_SYSTEM_INTEGRATION: RuleFamily.INTEGRATION,
    RuleId.DATA_SYNCHRONIZATION: RuleFamily.INTEGRATION,
}

CORE_BUSINESS_RULES: tuple[RuleId, ...] = (
    RuleId.PATIENT_VALIDATION,
    RuleId.DOCTOR_VALIDATION,
    RuleId.SERVICE_VALIDATION,
    RuleId.DATE_VALIDATION,
    RuleId.TIME_CONFLICT_VALIDATION,
)

# Skipped for emergency receptions
EMERGENCY_RELAXED_RULES: tuple[RuleId, ...] = (
    RuleId.TIME_CONFLICT_VALIDATION,
    RuleId.WORKING_HOURS_VALIDATION,
    RuleId.DOCTOR_CAPACITY_VALIDATION,
)


@dataclass(frozen=True)
class RuleDescriptor(ValueObject):
    """Registry metadata for one rule."""

    rule: RuleId
    enabled: bool = True
    priority: int = 0
    description: str = ""

    def _validate(self) -> None:
        if self.priority < 0:
            raise ValidationException("Rule priority cannot be negative", field="priority")

    @property
    def family(self) -> RuleFamily:
        return self.rule.family
