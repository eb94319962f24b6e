# ============================================================================
# SCOPE: APPLICATION LAYER (Reception)
# Description: Results produced by the rules engine and the orchestrator.
# ============================================================================
"""Validation result DTOs."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from app.domains.reception.domain.value_objects import (
    EmergencyTriageResult,
    ValidationIssue,
    ValidationMode,
    ValidationOutcome,
    ValidationStage,
    WorkflowEvent,
    WorkflowState,
)


def _unique(names: list[str]) -> tuple[str, ...]:
    """Order-preserving de-duplication."""
    return tuple(dict.fromkeys(names))


@dataclass(frozen=True)
class BusinessRulesResult:
    """Outcome of one business rules engine run."""

    outcome: ValidationOutcome
    applied_rules: tuple[str, ...] = ()
    skipped_rules: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return self.outcome.is_valid

    @property
    def errors(self) -> list[str]:
        return self.outcome.error_messages

    @property
    def warnings(self) -> list[str]:
        return self.outcome.warning_messages


@dataclass(frozen=True)
class StageResult:
    """One timed orchestrator stage. Never mutated after creation."""

    name: str
    stage: ValidationStage
    started_at: datetime
    ended_at: datetime
    outcome: ValidationOutcome
    applied_rules: tuple[str, ...] = ()
    skipped_rules: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return self.outcome.is_valid

    @property
    def duration_ms(self) -> float:
        return (self.ended_at - self.started_at).total_seconds() * 1000

    def to_dict(self, include_timing: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "is_valid": self.is_valid,
            "errors": self.outcome.error_messages,
            "warnings": self.outcome.warning_messages,
            "applied_rules": list(self.applied_rules),
            "skipped_rules": list(self.skipped_rules),
        }
        if include_timing:
            data["started_at"] = self.started_at.isoformat()
            data["ended_at"] = self.ended_at.isoformat()
            data["duration_ms"] = self.duration_ms
        return data


class OrchestrationStatus(str, Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class OrchestrationResult:
    """
    Aggregate of every stage in one orchestration run.

    ``failure_issues`` holds the single generic error reported when the run
    aborted on an unexpected internal fault.
    """

    mode: ValidationMode
    status: OrchestrationStatus
    stages: tuple[StageResult, ...]
    started_at: datetime
    ended_at: datetime
    triage: EmergencyTriageResult | None = None
    failure_issues: tuple[ValidationIssue, ...] = ()

    @property
    def outcome(self) -> ValidationOutcome:
        combined = ValidationOutcome.combine(stage.outcome for stage in self.stages)
        return ValidationOutcome(errors=combined.errors + self.failure_issues, warnings=combined.warnings)

    @property
    def is_valid(self) -> bool:
        return self.status == OrchestrationStatus.COMPLETED and self.outcome.is_valid

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrchestrationStatus.CANCELLED

    @property
    def errors(self) -> list[str]:
        return self.outcome.error_messages

    @property
    def warnings(self) -> list[str]:
        return self.outcome.warning_messages

    @property
    def applied_rules(self) -> tuple[str, ...]:
        return _unique([name for stage in self.stages for name in stage.applied_rules])

    @property
    def skipped_rules(self) -> tuple[str, ...]:
        return _unique([name for stage in self.stages for name in stage.skipped_rules])

    def stage(self, stage: ValidationStage) -> StageResult | None:
        return next((s for s in self.stages if s.stage == stage), None)

    def to_dict(self, include_timing: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {
            "mode": self.mode.value,
            "status": self.status.value,
            "is_valid": self.is_valid,
            "errors": self.errors,
            "warnings": self.warnings,
            "applied_rules": list(self.applied_rules),
            "skipped_rules": list(self.skipped_rules),
            "stages": [stage.to_dict(include_timing) for stage in self.stages],
        }
        if self.triage is not None:
            data["triage"] = {
                "level": self.triage.level.value,
                "severity_score": self.triage.score.severity_score,
                "priority": self.triage.priority.value,
                "max_wait_minutes": self.triage.max_wait_minutes,
                "recommended_actions": list(self.triage.recommended_actions),
            }
        if include_timing:
            data["started_at"] = self.started_at.isoformat()
            data["ended_at"] = self.ended_at.isoformat()
        return data


@dataclass(frozen=True)
class TransitionCheckResult:
    """Answer to "may this reception move to that state?"."""

    reception_id: int
    from_state: WorkflowState
    to_state: WorkflowState
    outcome: ValidationOutcome
    cancelled: bool = False
    valid_next_states: tuple[WorkflowState, ...] = ()
    events: tuple[WorkflowEvent, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.cancelled and self.outcome.is_valid

    @property
    def errors(self) -> list[str]:
        return self.outcome.error_messages

    @property
    def warnings(self) -> list[str]:
        return self.outcome.warning_messages

    def to_dict(self) -> dict[str, Any]:
        return {
            "reception_id": self.reception_id,
            "from_state": self.from_state.value,
            "to_state": self.to_state.value,
            "is_valid": self.is_valid,
            "cancelled": self.cancelled,
            "errors": self.errors,
            "warnings": self.warnings,
            "valid_next_states": [state.value for state in self.valid_next_states],
            "events": [event.value for event in self.events],
        }
