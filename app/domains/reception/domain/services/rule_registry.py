# ============================================================================
# SCOPE: DOMAIN LAYER (Reception)
# Description: Read-only rule enablement and priority lookup.
# ============================================================================
"""
Rule Registry

Maps each RuleId to its descriptor. Built once at startup and shared by
every request; there is no mutation API.

Lookups are default-allow: a rule with no descriptor, or a name that is not
a known RuleId at all, is reported as enabled.
"""

import logging
from types import MappingProxyType
from typing import Iterable, Mapping

from app.core.domain import ConfigurationException
from app.domains.reception.domain.value_objects import RuleDescriptor, RuleFamily, RuleId

logger = logging.getLogger(__name__)


DEFAULT_RULE_DESCRIPTORS: tuple[RuleDescriptor, ...] = (
    # Business
    RuleDescriptor(RuleId.PATIENT_VALIDATION, True, 1, "Patient exists and is active"),
    RuleDescriptor(RuleId.DOCTOR_VALIDATION, True, 2, "Doctor exists and is active"),
    RuleDescriptor(RuleId.SERVICE_VALIDATION, True, 3, "Selected services exist and are active"),
    RuleDescriptor(RuleId.DATE_VALIDATION, True, 4, "Reception date is present and bookable"),
    RuleDescriptor(RuleId.TIME_CONFLICT_VALIDATION, True, 5, "No overlapping active reception"),
    RuleDescriptor(RuleId.DOCTOR_CAPACITY_VALIDATION, True, 6, "Doctor has daily capacity left"),
    RuleDescriptor(RuleId.WORKING_HOURS_VALIDATION, True, 7, "Reception time is within working hours"),
    # Validation
    RuleDescriptor(RuleId.DATA_TYPE_VALIDATION, True, 1, "Identifiers and dates are well-typed"),
    RuleDescriptor(RuleId.RANGE_VALIDATION, True, 2, "Dates and counts are within range"),
    RuleDescriptor(RuleId.FORMAT_VALIDATION, True, 3, "Free text has an acceptable format"),
    # Security
    RuleDescriptor(RuleId.USER_PERMISSION_VALIDATION, True, 1, "Actor holds the required role"),
    RuleDescriptor(RuleId.DATA_SECURITY_VALIDATION, True, 2, "Actor may access patient and doctor"),
    RuleDescriptor(RuleId.INPUT_SECURITY_VALIDATION, True, 3, "Free text carries no injection payload"),
)


class RuleRegistry:
    """
    Immutable rule metadata store.

    Example:
        ```python
        registry = RuleRegistry.default()

        registry.is_enabled(RuleId.PATIENT_VALIDATION)  # True
        registry.is_enabled("SomethingNobodyConfigured")  # True
        ```
    """

    def __init__(self, descriptors: Iterable[RuleDescriptor] = ()):
        table: dict[RuleId, RuleDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.rule in table:
                raise ConfigurationException(
                    f"Rule {descriptor.rule.value} is configured more than once",
                    source="rule_registry",
                )
            table[descriptor.rule] = descriptor
        self._descriptors: Mapping[RuleId, RuleDescriptor] = MappingProxyType(table)

    @classmethod
    def default(cls) -> "RuleRegistry":
        return cls(DEFAULT_RULE_DESCRIPTORS)

    def _resolve(self, rule: RuleId | str) -> RuleId | None:
        if isinstance(rule, RuleId):
            return rule
        return RuleId.lookup(rule)

    def descriptor(self, rule: RuleId | str) -> RuleDescriptor | None:
        rule_id = self._resolve(rule)
        if rule_id is None:
            return None
        return self._descriptors.get(rule_id)

    def is_enabled(self, rule: RuleId | str) -> bool:
        """Whether the rule should run. Unknown rules are enabled."""
        descriptor = self.descriptor(rule)
        if descriptor is None:
            logger.debug(f"Rule {rule} not in registry, treating as enabled")
            return True
        return descriptor.enabled

    def priority(self, rule: RuleId | str) -> int:
        descriptor = self.descriptor(rule)
        return descriptor.priority if descriptor else 0

    def family_rules(self, family: RuleFamily) -> list[RuleDescriptor]:
        """Descriptors of one family, ordered by ascending priority value."""
        rules = [d for d in self._descriptors.values() if d.family == family]
        return sorted(rules, key=lambda d: d.priority)

    def disabled_rules(self) -> list[RuleId]:
        return [rule for rule, d in self._descriptors.items() if not d.enabled]

    def __contains__(self, rule: object) -> bool:
        if not isinstance(rule, (RuleId, str)):
            return False
        return self.descriptor(rule) is not None

    def __len__(self) -> int:
        return len(self._descriptors)
