"""
Reception Use Cases

Application layer use cases for the reception domain.
"""

from app.domains.reception.application.use_cases.check_transition import CheckTransitionUseCase
from app.domains.reception.application.use_cases.validate_intake import (
    ValidateIntakeRequest,
    ValidateIntakeUseCase,
    ValidateSearchUseCase,
)

__all__ = [
    # Validate Intake
    "ValidateIntakeRequest",
    "ValidateIntakeUseCase",
    "ValidateSearchUseCase",
    # Check Transition
    "CheckTransitionUseCase",
]
