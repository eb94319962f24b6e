# ============================================================================
# SCOPE: GLOBAL
# Description: Wires the reception validation pipeline from settings and the
#              host-supplied collaborator adapters.
# ============================================================================
"""
Reception Domain Container.

Single Responsibility: Wire all reception domain dependencies.
"""

import logging
from datetime import datetime
from typing import Callable

from app.config.settings import Settings, get_settings
from app.domains.reception.application.config import ReceptionConfig
from app.domains.reception.application.ports import (
    ITransitionPermissionPolicy,
    ITransitionTimePolicy,
    ReceptionCollaborators,
)
from app.domains.reception.application.services import (
    BusinessRulesEngine,
    ConditionEvaluator,
    ReceptionRuleChecks,
    TransitionGuard,
    ValidationOrchestrator,
)
from app.domains.reception.application.use_cases import (
    CheckTransitionUseCase,
    ValidateIntakeUseCase,
    ValidateSearchUseCase,
)
from app.domains.reception.domain.services import SeverityClassifier
from app.domains.reception.infrastructure.config import ReceptionRules, load_reception_rules

logger = logging.getLogger(__name__)


class ReceptionContainer:
    """
    Reception domain container.

    Rule tables and limits are loaded once per container; every service it
    creates shares them.
    """

    def __init__(
        self,
        collaborators: ReceptionCollaborators,
        settings: Settings | None = None,
        rules: ReceptionRules | None = None,
        time_policy: ITransitionTimePolicy | None = None,
        permission_policy: ITransitionPermissionPolicy | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize reception container.

        Args:
            collaborators: Patient, doctor, service, security and schedule adapters
            settings: Application settings (cached settings when omitted)
            rules: Pre-loaded rule tables (loaded from RECEPTION_RULES_PATH when omitted)
            time_policy: Optional transition time-constraint hook
            permission_policy: Optional transition permission hook
            clock: Source of "now"
        """
        self.settings = settings or get_settings()
        self.config = ReceptionConfig.from_settings(self.settings)
        self.rules = rules or load_reception_rules(self.settings.RECEPTION_RULES_PATH)
        self._collaborators = collaborators
        self._time_policy = time_policy
        self._permission_policy = permission_policy
        self._clock = clock

        logger.info(f"ReceptionContainer initialized with rules from {self.rules.source}")

    # ==================== SERVICES ====================

    def create_rule_checks(self) -> ReceptionRuleChecks:
        return ReceptionRuleChecks(self._collaborators, self.config, self._clock)

    def create_business_rules_engine(self) -> BusinessRulesEngine:
        """Create BusinessRulesEngine with the loaded registry."""
        return BusinessRulesEngine(
            registry=self.rules.registry,
            collaborators=self._collaborators,
            config=self.config,
            clock=self._clock,
            checks=self.create_rule_checks(),
        )

    def create_orchestrator(self) -> ValidationOrchestrator:
        """Create ValidationOrchestrator with dependencies."""
        return ValidationOrchestrator(
            engine=self.create_business_rules_engine(),
            collaborators=self._collaborators,
            config=self.config,
            classifier=SeverityClassifier(),
            clock=self._clock,
        )

    def create_transition_guard(self) -> TransitionGuard:
        """Create TransitionGuard with the loaded transition table."""
        evaluator = ConditionEvaluator.with_defaults(
            checks=self.create_rule_checks(),
            security=self._collaborators.security,
            clock=self._clock,
        )
        return TransitionGuard(
            rules=self.rules.transitions,
            evaluator=evaluator,
            time_policy=self._time_policy,
            permission_policy=self._permission_policy,
        )

    # ==================== USE CASES ====================

    def create_validate_intake_use_case(self) -> ValidateIntakeUseCase:
        return ValidateIntakeUseCase(orchestrator=self.create_orchestrator())

    def create_validate_search_use_case(self) -> ValidateSearchUseCase:
        return ValidateSearchUseCase(orchestrator=self.create_orchestrator())

    def create_check_transition_use_case(self) -> CheckTransitionUseCase:
        return CheckTransitionUseCase(
            guard=self.create_transition_guard(),
            default_timeout=self.config.validation_timeout,
        )
