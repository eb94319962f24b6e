# ============================================================================
# SCOPE: DOMAIN LAYER (Reception)
# Description: Declarative transition rules and their guard conditions.
# ============================================================================
"""Transition rule value objects.

A TransitionRule is keyed by ``(from_state, target_state)`` and lists the
conditions that must all pass before the caller may move a reception to the
target state. State business rules hang off the *current* state and run on
every transition leaving it.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import Any, Mapping

from app.core.domain import StatusEnum, ValidationException, ValueObject

from .workflow import WorkflowState


class ConditionType(StatusEnum):
    """Kinds of guard condition understood by the condition evaluator."""

    DATA_VALIDATION = "data_validation"
    BUSINESS_LOGIC = "business_logic"
    TIME_CONSTRAINT = "time_constraint"
    USER_PERMISSION = "user_permission"


class RulePriority(IntEnum):
    """Priority of a state business rule. Higher runs first."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    @classmethod
    def from_string(cls, value: str) -> "RulePriority":
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Invalid RulePriority: {value}") from None


@dataclass(frozen=True)
class TransitionCondition(ValueObject):
    """
    A single guard evaluated fresh on every transition check.

    ``condition_type`` stays a plain string when configuration names a type
    the evaluator does not know; such conditions always fail.
    """

    condition_type: ConditionType | str
    description: str
    parameters: Mapping[str, Any] = field(default_factory=dict)

    def _validate(self) -> None:
        if not self.description:
            raise ValidationException("Transition condition requires a description", field="description")
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    @property
    def is_known_type(self) -> bool:
        return isinstance(self.condition_type, ConditionType)

    def param(self, key: str, default: Any = None) -> Any:
        return self.parameters.get(key, default)


@dataclass(frozen=True)
class TransitionRule(ValueObject):
    """Declared permission to move from one workflow state to another."""

    from_state: WorkflowState
    target_state: WorkflowState
    conditions: tuple[TransitionCondition, ...] = ()
    description: str = ""

    def _validate(self) -> None:
        if self.from_state == self.target_state:
            raise ValidationException(
                f"Transition rule cannot loop on {self.from_state.value}", field="target_state"
            )
        object.__setattr__(self, "conditions", tuple(self.conditions))

    @property
    def key(self) -> tuple[WorkflowState, WorkflowState]:
        return (self.from_state, self.target_state)


@dataclass(frozen=True)
class StateBusinessRule(ValueObject):
    """Business rule checked on every transition out of ``state``."""

    name: str
    state: WorkflowState
    condition: TransitionCondition
    description: str = ""
    priority: RulePriority = RulePriority.MEDIUM

    def _validate(self) -> None:
        if not self.name:
            raise ValidationException("State business rule requires a name", field="name")
