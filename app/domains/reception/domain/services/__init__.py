"""
Reception Domain Services

Pure domain logic: severity classification and the immutable rule tables.
"""

from app.domains.reception.domain.services.rule_registry import DEFAULT_RULE_DESCRIPTORS, RuleRegistry
from app.domains.reception.domain.services.severity_classifier import SeverityClassifier
from app.domains.reception.domain.services.transition_rules import (
    DEFAULT_STATE_RULES,
    DEFAULT_TRANSITION_RULES,
    TransitionRuleSet,
)

__all__ = [
    "SeverityClassifier",
    "RuleRegistry",
    "DEFAULT_RULE_DESCRIPTORS",
    "TransitionRuleSet",
    "DEFAULT_TRANSITION_RULES",
    "DEFAULT_STATE_RULES",
]
