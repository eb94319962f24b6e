"""
Shared pytest fixtures for all tests.

This module provides a fixed clock, in-memory collaborators, request
builders and fully wired reception services.
"""

import os
from datetime import datetime
from typing import Callable

import pytest

from app.config.settings import reset_settings
from app.domains.reception.application.config import ReceptionConfig
from app.domains.reception.application.ports import ReceptionCollaborators
from app.domains.reception.application.services import (
    BusinessRulesEngine,
    ConditionEvaluator,
    ReceptionRuleChecks,
    TransitionGuard,
    ValidationOrchestrator,
)
from app.domains.reception.domain.services import RuleRegistry, SeverityClassifier, TransitionRuleSet
from app.domains.reception.infrastructure.in_memory import InMemorySchedule, InMemorySecurity
from tests.utils import (
    NOW,
    IntakeRequestBuilder,
    create_doctors,
    create_patients,
    create_security,
    create_services,
    fixed_clock,
)

# Ensure test environment
os.environ["ENVIRONMENT"] = "test"


# ============================================================================
# CLOCK AND SETTINGS
# ============================================================================


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return fixed_clock


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Drop the cached settings around every test."""
    reset_settings()
    yield
    reset_settings()


# ============================================================================
# COLLABORATORS
# ============================================================================


@pytest.fixture
def security() -> InMemorySecurity:
    return create_security()


@pytest.fixture
def schedule() -> InMemorySchedule:
    return InMemorySchedule()


@pytest.fixture
def collaborators(security, schedule) -> ReceptionCollaborators:
    return ReceptionCollaborators(
        patients=create_patients(),
        doctors=create_doctors(),
        services=create_services(),
        security=security,
        schedule=schedule,
    )


# ============================================================================
# REQUESTS
# ============================================================================


@pytest.fixture
def intake() -> IntakeRequestBuilder:
    """Builder for a valid create request two days ahead."""
    return IntakeRequestBuilder()


# ============================================================================
# SERVICES
# ============================================================================


@pytest.fixture
def reception_config() -> ReceptionConfig:
    return ReceptionConfig()


@pytest.fixture
def checks(collaborators, reception_config, clock) -> ReceptionRuleChecks:
    return ReceptionRuleChecks(collaborators, reception_config, clock)


@pytest.fixture
def registry() -> RuleRegistry:
    return RuleRegistry.default()


@pytest.fixture
def engine(registry, collaborators, reception_config, clock, checks) -> BusinessRulesEngine:
    return BusinessRulesEngine(registry, collaborators, reception_config, clock, checks)


@pytest.fixture
def orchestrator(engine, collaborators, reception_config, clock) -> ValidationOrchestrator:
    return ValidationOrchestrator(engine, collaborators, reception_config, SeverityClassifier(), clock)


@pytest.fixture
def evaluator(checks, security, clock) -> ConditionEvaluator:
    return ConditionEvaluator.with_defaults(checks=checks, security=security, clock=clock)


@pytest.fixture
def guard(evaluator) -> TransitionGuard:
    return TransitionGuard(TransitionRuleSet.default(), evaluator)
