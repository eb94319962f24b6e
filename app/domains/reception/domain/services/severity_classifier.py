# ============================================================================
# SCOPE: DOMAIN LAYER (Reception)
# Description: Complaint severity scoring and ESI triage level mapping.
# ============================================================================
"""
Severity Classifier

Domain service that scores an emergency complaint. Two scores are produced
independently and are never added together:

- the *triage score*: per-category symptom weights, clamped to [0, 10],
  which drives the ESI level;
- the *severity score*: symptom intensity plus a category offset,
  clamped to [1, 10].
"""

import logging
from datetime import datetime

from app.domains.reception.domain.value_objects import (
    EmergencyPriority,
    EmergencyTriageResult,
    TriageLevel,
    TriageScore,
)

logger = logging.getLogger(__name__)


class SeverityClassifier:
    """
    Maps a complaint category and symptom list to a TriageScore.

    Example:
        ```python
        classifier = SeverityClassifier()

        score = classifier.classify("cardiac", ["chest pain", "dizziness"])
        print(score.level)  # TriageLevel.ESI1
        ```
    """

    CATEGORY_SYMPTOM_WEIGHTS: dict[str, dict[str, int]] = {
        "cardiac": {
            "chest pain": 8,
            "shortness of breath": 7,
            "irregular heartbeat": 6,
            "dizziness": 4,
        },
        "trauma": {
            "severe bleeding": 9,
            "unconscious": 8,
            "broken bone": 6,
            "minor cut": 3,
        },
        "respiratory": {
            "severe breathing difficulty": 9,
            "wheezing": 6,
            "cough": 3,
        },
        "neurological": {
            "severe headache": 7,
            "seizure": 9,
            "confusion": 6,
            "numbness": 5,
        },
    }
    UNMATCHED_SYMPTOM_WEIGHT = 2
    GENERAL_SYMPTOM_WEIGHT = 2

    CATEGORY_OFFSETS: dict[str, int] = {
        "cardiac": 3,
        "trauma": 4,
        "respiratory": 3,
        "neurological": 2,
    }
    DEFAULT_CATEGORY_OFFSET = 1

    # Matched against the whole symptom, not a substring
    INTENSITY_WEIGHTS: dict[str, int] = {
        "severe": 5,
        "moderate": 3,
        "mild": 1,
    }
    DEFAULT_INTENSITY_WEIGHT = 2

    FALLBACK_LEVEL = TriageLevel.ESI2
    FALLBACK_SEVERITY = 5

    IMMEDIATE_ACTIONS = (
        "call the on-duty specialist immediately",
        "prepare the resuscitation room",
        "start emergency medication",
        "alert the emergency team",
    )
    RAPID_ACTIONS = (
        "perform rapid initial assessment",
        "examine without delay",
        "record vital signs",
        "queue for specialist review",
    )
    ROUTINE_ACTIONS = (
        "register complaint details",
        "schedule routine visit",
        "perform standard examination",
    )

    @staticmethod
    def _normalize(category: str | None) -> str:
        return (category or "").strip().lower()

    def triage_score(self, category: str | None, symptoms: list[str] | None) -> int:
        """Per-category score in [0, 10]."""
        symptoms = symptoms or []
        weights = self.CATEGORY_SYMPTOM_WEIGHTS.get(self._normalize(category))

        if weights is None:
            return min(10, len(symptoms) * self.GENERAL_SYMPTOM_WEIGHT)

        total = 0
        for symptom in symptoms:
            total += weights.get(symptom.strip().lower(), self.UNMATCHED_SYMPTOM_WEIGHT)
        return max(0, min(10, total))

    def severity_score(self, category: str | None, symptoms: list[str] | None) -> int:
        """Overall severity in [1, 10]."""
        total = 0
        for symptom in symptoms or []:
            total += self.INTENSITY_WEIGHTS.get(symptom.strip().lower(), self.DEFAULT_INTENSITY_WEIGHT)
        total += self.CATEGORY_OFFSETS.get(self._normalize(category), self.DEFAULT_CATEGORY_OFFSET)
        return max(1, min(10, total))

    @staticmethod
    def determine_triage_level(score: int) -> TriageLevel:
        """
        Map a triage score to an ESI level.

        Only ESI1, ESI2 and ESI5 are produced. ESI3 and ESI4 exist in the
        enum for other callers but this mapping never yields them.
        """
        if score >= 8:
            return TriageLevel.ESI1
        if score >= 5:
            return TriageLevel.ESI2
        return TriageLevel.ESI5

    def classify(self, category: str | None, symptoms: list[str] | None) -> TriageScore:
        """Classify a complaint, falling back to ESI2 on any failure."""
        score, _ = self._classify_with_fallback(category, symptoms)
        return score

    def _classify_with_fallback(
        self, category: str | None, symptoms: list[str] | None
    ) -> tuple[TriageScore, bool]:
        fallback_used = False
        try:
            triage = self.triage_score(category, symptoms)
            level = self.determine_triage_level(triage)
        except Exception as e:
            logger.error(f"Triage scoring failed for category '{category}', defaulting to ESI2: {e}")
            triage = 5
            level = self.FALLBACK_LEVEL
            fallback_used = True

        try:
            severity = self.severity_score(category, symptoms)
        except Exception as e:
            logger.error(f"Severity scoring failed for category '{category}', defaulting to 5: {e}")
            severity = self.FALLBACK_SEVERITY
            fallback_used = True

        return TriageScore(severity_score=severity, triage_score=triage, level=level), fallback_used

    def recommended_actions(self, level: TriageLevel, severity_score: int) -> list[str]:
        match level:
            case TriageLevel.ESI1:
                actions = list(self.IMMEDIATE_ACTIONS)
            case TriageLevel.ESI2:
                actions = list(self.RAPID_ACTIONS)
            case _:
                actions = list(self.ROUTINE_ACTIONS)

        if severity_score >= 8:
            actions.append("high priority: continuous monitoring")
        elif severity_score >= 5:
            actions.append("medium priority: regular review")
        return actions

    def assess_emergency(
        self,
        category: str | None,
        symptoms: list[str] | None,
        notes: str = "",
        now: datetime | None = None,
    ) -> EmergencyTriageResult:
        """Classify a complaint and attach priority, wait time and actions."""
        score, fallback_used = self._classify_with_fallback(category, symptoms)
        priority = EmergencyPriority.from_triage_level(score.level)

        logger.info(
            f"Triage decision: category={category or 'general'}, level={score.level.value}, "
            f"severity={score.severity_score}, priority={priority.value}"
        )

        return EmergencyTriageResult(
            score=score,
            priority=priority,
            recommended_actions=tuple(self.recommended_actions(score.level, score.severity_score)),
            triaged_at=now or datetime.now(),
            notes=notes,
            fallback_used=fallback_used,
            symptoms=tuple(s for s in symptoms or [] if isinstance(s, str)),
        )
