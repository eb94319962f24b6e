"""
Domain Layer - Core DDD building blocks

This module provides base classes for Domain-Driven Design:
- Value Objects: Immutable objects compared by value
- Exceptions: Domain-specific error handling
"""

from app.core.domain.exceptions import (
    AuthorizationException,
    BusinessRuleViolationException,
    ConfigurationException,
    DomainException,
    IntegrationException,
    SecurityViolationException,
    ValidationException,
)
from app.core.domain.value_objects import (
    StatusEnum,
    ValueObject,
)

__all__ = [
    # Value Objects
    "ValueObject",
    "StatusEnum",
    # Exceptions
    "DomainException",
    "ValidationException",
    "BusinessRuleViolationException",
    "AuthorizationException",
    "SecurityViolationException",
    "IntegrationException",
    "ConfigurationException",
]
