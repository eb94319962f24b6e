"""
Reception Domain Value Objects

Enums and immutable value objects for the reception domain.
"""

from app.domains.reception.domain.value_objects.intake import (
    ReceptionPermission,
    ReceptionType,
    ValidationMode,
    ValidationStage,
)
from app.domains.reception.domain.value_objects.outcome import (
    IssueKind,
    ValidationIssue,
    ValidationOutcome,
)
from app.domains.reception.domain.value_objects.rules import (
    CORE_BUSINESS_RULES,
    EMERGENCY_RELAXED_RULES,
    RuleDescriptor,
    RuleFamily,
    RuleId,
)
from app.domains.reception.domain.value_objects.transition import (
    ConditionType,
    RulePriority,
    StateBusinessRule,
    TransitionCondition,
    TransitionRule,
)
from app.domains.reception.domain.value_objects.triage import (
    EmergencyPriority,
    EmergencyTriageResult,
    TriageLevel,
    TriageScore,
)
from app.domains.reception.domain.value_objects.workflow import (
    WorkflowEvent,
    WorkflowState,
    events_for_state,
    valid_transition_pairs,
)

__all__ = [
    # Intake
    "ReceptionType",
    "ReceptionPermission",
    "ValidationMode",
    "ValidationStage",
    # Outcomes
    "IssueKind",
    "ValidationIssue",
    "ValidationOutcome",
    # Rules
    "RuleFamily",
    "RuleId",
    "RuleDescriptor",
    "CORE_BUSINESS_RULES",
    "EMERGENCY_RELAXED_RULES",
    # Transitions
    "ConditionType",
    "RulePriority",
    "TransitionCondition",
    "TransitionRule",
    "StateBusinessRule",
    # Triage
    "TriageLevel",
    "EmergencyPriority",
    "TriageScore",
    "EmergencyTriageResult",
    # Workflow
    "WorkflowState",
    "WorkflowEvent",
    "events_for_state",
    "valid_transition_pairs",
]
