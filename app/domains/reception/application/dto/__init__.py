"""
Reception Application DTOs

Data Transfer Objects for the Reception domain.
"""

from .intake_dtos import (
    CreateIntakeRequest,
    EditIntakeRequest,
    IntakeRequest,
    SearchCriteria,
    TransitionContext,
)
from .result_dtos import (
    BusinessRulesResult,
    OrchestrationResult,
    OrchestrationStatus,
    StageResult,
    TransitionCheckResult,
)

__all__ = [
    # Requests
    "IntakeRequest",
    "CreateIntakeRequest",
    "EditIntakeRequest",
    "SearchCriteria",
    "TransitionContext",
    # Results
    "BusinessRulesResult",
    "StageResult",
    "OrchestrationStatus",
    "OrchestrationResult",
    "TransitionCheckResult",
]
