"""
Domain Exceptions for Domain-Driven Design

These exceptions represent business rule violations and domain-specific errors.
Validation engines catch them at rule scope and translate them into validation issues.
"""

from typing import Any


class DomainException(Exception):
    """
    Base exception for all domain-related errors.

    Provides a standardized way to communicate business rule violations.
    """

    def __init__(self, message: str, code: str | None = None, details: dict[str, Any] | None = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "CONFIGURATION_ERROR")
            details: Additional context about the error
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(DomainException):
    """
    Raised when domain validation fails.

    Use for malformed value objects and structurally invalid input.
    """

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, "VALIDATION_ERROR", details)
        self.field = field


class BusinessRuleViolationException(DomainException):
    """
    Raised when a rule check fails in a way the caller cannot continue from.

    Rule engines report it as a business-rule issue.
    """

    def __init__(self, rule: str, message: str | None = None, details: dict[str, Any] | None = None):
        self.rule = rule
        msg = message or f"Business rule violated: {rule}"
        details = details or {}
        details["rule"] = rule
        super().__init__(msg, "BUSINESS_RULE_VIOLATION", details)


class AuthorizationException(DomainException):
    """Raised when a user is not authorized to perform an operation."""

    def __init__(self, operation: str, resource: str | None = None, user_id: str | None = None):
        self.operation = operation
        self.resource = resource
        self.user_id = user_id
        msg = f"Not authorized to perform '{operation}'"
        if resource:
            msg += f" on '{resource}'"
        super().__init__(
            msg,
            "AUTHORIZATION_ERROR",
            {
                "operation": operation,
                "resource": resource,
            },
        )


class SecurityViolationException(DomainException):
    """Raised when input or access checks detect a security problem."""

    def __init__(self, message: str, field: str | None = None, pattern: str | None = None):
        self.field = field
        self.pattern = pattern
        details: dict[str, Any] = {}
        if field:
            details["field"] = field
        if pattern:
            details["pattern"] = pattern
        super().__init__(message, "SECURITY_VIOLATION", details)


class IntegrationException(DomainException):
    """Raised by collaborator adapters when the backing service fails."""

    def __init__(self, service: str, message: str, original_error: Exception | None = None):
        self.service = service
        self.original_error = original_error
        details: dict[str, Any] = {"service": service}
        if original_error:
            details["original_error"] = str(original_error)
        super().__init__(message, "INTEGRATION_ERROR", details)


class ConfigurationException(DomainException):
    """
    Raised when rule or transition configuration is inconsistent.

    Distinct from business violations so operators can tell misconfiguration
    apart from problems in user-supplied data.
    """

    def __init__(self, message: str, source: str | None = None, details: dict[str, Any] | None = None):
        self.source = source
        details = details or {}
        if source:
            details["source"] = source
        super().__init__(message, "CONFIGURATION_ERROR", details)
