"""
Reception Application Services

Rule checks, condition evaluation, transition guarding and the validation
pipeline for intake requests.
"""

from app.domains.reception.application.services.business_rules_engine import BusinessRulesEngine
from app.domains.reception.application.services.condition_evaluator import (
    BusinessLogicStrategy,
    ConditionEvaluator,
    ConditionResult,
    DataValidationStrategy,
    IConditionStrategy,
    TimeConstraintStrategy,
    UserPermissionStrategy,
)
from app.domains.reception.application.services.intake_checks import ReceptionRuleChecks
from app.domains.reception.application.services.intake_schema import (
    EditIntakeSchema,
    IntakeSchema,
    SearchCriteriaSchema,
    validate_intake_structure,
    validate_search_structure,
)
from app.domains.reception.application.services.transition_guard import TransitionGuard
from app.domains.reception.application.services.validation_orchestrator import ValidationOrchestrator

__all__ = [
    # Checks
    "ReceptionRuleChecks",
    # Conditions
    "ConditionEvaluator",
    "ConditionResult",
    "IConditionStrategy",
    "DataValidationStrategy",
    "BusinessLogicStrategy",
    "TimeConstraintStrategy",
    "UserPermissionStrategy",
    # Transitions
    "TransitionGuard",
    # Intake validation
    "IntakeSchema",
    "EditIntakeSchema",
    "SearchCriteriaSchema",
    "validate_intake_structure",
    "validate_search_structure",
    "BusinessRulesEngine",
    "ValidationOrchestrator",
]
