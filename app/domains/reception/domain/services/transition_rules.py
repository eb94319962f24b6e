# ============================================================================
# SCOPE: DOMAIN LAYER (Reception)
# Description: Immutable table of declared transitions and state rules.
# ============================================================================
"""
Transition Rule Set

Holds the declared TransitionRules indexed by source state, and the state
business rules indexed by the state they guard. Built once; shared by every
transition check.
"""

from types import MappingProxyType
from typing import Iterable, Mapping

from app.core.domain import ConfigurationException
from app.domains.reception.domain.value_objects import (
    ConditionType,
    RulePriority,
    StateBusinessRule,
    TransitionCondition,
    TransitionRule,
    WorkflowState,
    valid_transition_pairs,
)


class TransitionRuleSet:
    """Read-only transition table."""

    def __init__(
        self,
        rules: Iterable[TransitionRule] = (),
        state_rules: Iterable[StateBusinessRule] = (),
    ):
        by_source: dict[WorkflowState, dict[WorkflowState, TransitionRule]] = {}
        for rule in rules:
            targets = by_source.setdefault(rule.from_state, {})
            if rule.target_state in targets:
                raise ConfigurationException(
                    f"Duplicate transition rule {rule.from_state.value} -> {rule.target_state.value}",
                    source="transition_rules",
                    details={"from_state": rule.from_state.value, "target_state": rule.target_state.value},
                )
            targets[rule.target_state] = rule

        by_state: dict[WorkflowState, list[StateBusinessRule]] = {}
        for state_rule in state_rules:
            by_state.setdefault(state_rule.state, []).append(state_rule)

        self._rules: Mapping[WorkflowState, Mapping[WorkflowState, TransitionRule]] = MappingProxyType(
            {source: MappingProxyType(targets) for source, targets in by_source.items()}
        )
        # Highest priority first; stable for equal priorities
        self._state_rules: Mapping[WorkflowState, tuple[StateBusinessRule, ...]] = MappingProxyType(
            {
                state: tuple(sorted(items, key=lambda r: r.priority, reverse=True))
                for state, items in by_state.items()
            }
        )

    @classmethod
    def default(cls) -> "TransitionRuleSet":
        return cls(DEFAULT_TRANSITION_RULES, DEFAULT_STATE_RULES)

    def has_source(self, state: WorkflowState) -> bool:
        return state in self._rules

    def find(self, from_state: WorkflowState, target_state: WorkflowState) -> TransitionRule | None:
        return self._rules.get(from_state, {}).get(target_state)

    def targets(self, from_state: WorkflowState) -> list[WorkflowState]:
        return list(self._rules.get(from_state, {}).keys())

    def state_rules(self, state: WorkflowState) -> tuple[StateBusinessRule, ...]:
        return self._state_rules.get(state, ())

    def __iter__(self):
        for targets in self._rules.values():
            yield from targets.values()

    def __len__(self) -> int:
        return sum(len(targets) for targets in self._rules.values())


def _build_default_rules() -> tuple[TransitionRule, ...]:
    conditions: dict[tuple[WorkflowState, WorkflowState], tuple[TransitionCondition, ...]] = {
        (WorkflowState.INITIALIZED, WorkflowState.PATIENT_VERIFICATION): (
            TransitionCondition(
                ConditionType.DATA_VALIDATION,
                "patient info must be complete",
                {"required_fields": ["patient_id"]},
            ),
        ),
        (WorkflowState.PATIENT_VERIFICATION, WorkflowState.INSURANCE_VALIDATION): (
            TransitionCondition(
                ConditionType.BUSINESS_LOGIC,
                "patient info must be verified",
                {"check": "patient_active"},
            ),
        ),
        (WorkflowState.SERVICE_SELECTION, WorkflowState.PAYMENT_PROCESSING): (
            TransitionCondition(
                ConditionType.DATA_VALIDATION,
                "at least one service must be selected",
                {"required_fields": ["service_ids"]},
            ),
        ),
    }
    return tuple(
        TransitionRule(source, target, conditions.get((source, target), ()))
        for source, target in valid_transition_pairs()
    )


DEFAULT_TRANSITION_RULES: tuple[TransitionRule, ...] = _build_default_rules()

DEFAULT_STATE_RULES: tuple[StateBusinessRule, ...] = (
    StateBusinessRule(
        name="PatientDataValidation",
        state=WorkflowState.PATIENT_VERIFICATION,
        condition=TransitionCondition(
            ConditionType.BUSINESS_LOGIC,
            "patient data must be valid",
            {"check": "patient_active"},
        ),
        description="Patient record is present and active",
        priority=RulePriority.HIGH,
    ),
)
