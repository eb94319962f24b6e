# ============================================================================
# SCOPE: DOMAIN LAYER (Reception)
# Description: Triage levels, emergency priorities and the triage score.
# ============================================================================
"""Triage value objects (ESI - Emergency Severity Index)."""

from dataclasses import dataclass, field
from datetime import datetime

from app.core.domain import StatusEnum, ValidationException, ValueObject


class TriageLevel(StatusEnum):
    """ESI level. ESI1 is the most urgent, ESI5 the least."""

    ESI1 = "esi1"  # Immediate life-saving intervention
    ESI2 = "esi2"  # High risk
    ESI3 = "esi3"  # Several resources needed
    ESI4 = "esi4"  # One resource needed
    ESI5 = "esi5"  # No resources needed

    @property
    def rank(self) -> int:
        return int(self.value[-1])


class EmergencyPriority(StatusEnum):
    """Queue priority derived from the triage level."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    def get_max_wait_minutes(self) -> int:
        """Get maximum recommended wait time in minutes."""
        wait_times = {
            "critical": 0,
            "high": 5,
            "medium": 15,
            "low": 30,
        }
        return wait_times.get(self.value, 60)

    @classmethod
    def from_triage_level(cls, level: TriageLevel) -> "EmergencyPriority":
        match level:
            case TriageLevel.ESI1:
                return cls.CRITICAL
            case TriageLevel.ESI2:
                return cls.HIGH
            case TriageLevel.ESI3:
                return cls.MEDIUM
            case _:
                return cls.LOW


@dataclass(frozen=True)
class TriageScore(ValueObject):
    """
    Classification of one complaint.

    ``triage_score`` is the per-category score that drives ``level``.
    ``severity_score`` is the overall severity, computed separately.
    """

    severity_score: int
    triage_score: int
    level: TriageLevel

    def _validate(self) -> None:
        if not 1 <= self.severity_score <= 10:
            raise ValidationException("Severity score must be between 1 and 10", field="severity_score")
        if not 0 <= self.triage_score <= 10:
            raise ValidationException("Triage score must be between 0 and 10", field="triage_score")


@dataclass(frozen=True)
class EmergencyTriageResult(ValueObject):
    """Full triage assessment handed to the emergency intake path."""

    score: TriageScore
    priority: EmergencyPriority
    recommended_actions: tuple[str, ...]
    triaged_at: datetime
    notes: str = ""
    fallback_used: bool = False
    symptoms: tuple[str, ...] = field(default_factory=tuple)

    @property
    def level(self) -> TriageLevel:
        return self.score.level

    @property
    def max_wait_minutes(self) -> int:
        return self.priority.get_max_wait_minutes()
