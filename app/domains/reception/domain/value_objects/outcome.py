# ============================================================================
# SCOPE: DOMAIN LAYER (Reception)
# Description: The universal result shape returned by every validation step.
# ============================================================================
"""Validation outcome value objects."""

from dataclasses import dataclass
from typing import Any, Iterable

from app.core.domain import (
    AuthorizationException,
    BusinessRuleViolationException,
    ConfigurationException,
    SecurityViolationException,
    StatusEnum,
    ValidationException,
    ValueObject,
)


class IssueKind(StatusEnum):
    """Error taxonomy for validation issues."""

    STRUCTURAL = "structural"
    BUSINESS_RULE = "business_rule"
    SECURITY = "security"
    PERFORMANCE = "performance"  # advisory, warnings only
    CONFIGURATION = "configuration"


@dataclass(frozen=True)
class ValidationIssue(ValueObject):
    kind: IssueKind
    message: str
    rule: str | None = None

    def _validate(self) -> None:
        if not self.message:
            raise ValidationException("Validation issue requires a message", field="message")

    @classmethod
    def from_exception(
        cls,
        error: Exception,
        message: str,
        rule: str | None = None,
        default_kind: IssueKind = IssueKind.BUSINESS_RULE,
    ) -> "ValidationIssue":
        """
        Convert a caught exception into an issue.

        The caller-supplied message is used verbatim so exception text never
        reaches the user; only the kind is derived from the exception type.
        """
        match error:
            case ConfigurationException():
                kind = IssueKind.CONFIGURATION
            case AuthorizationException() | SecurityViolationException():
                kind = IssueKind.SECURITY
            case ValidationException():
                kind = IssueKind.STRUCTURAL
            case BusinessRuleViolationException():
                kind = IssueKind.BUSINESS_RULE
            case _:
                kind = default_kind
        return cls(kind=kind, message=message, rule=rule)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message, "rule": self.rule}


@dataclass(frozen=True)
class ValidationOutcome(ValueObject):
    """
    Result of a validation primitive.

    ``is_valid`` is derived from ``errors`` so the two can never disagree.
    """

    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationIssue, ...] = ()

    def _validate(self) -> None:
        object.__setattr__(self, "errors", tuple(self.errors))
        object.__setattr__(self, "warnings", tuple(self.warnings))

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def error_messages(self) -> list[str]:
        return [issue.message for issue in self.errors]

    @property
    def warning_messages(self) -> list[str]:
        return [issue.message for issue in self.warnings]

    def has_kind(self, kind: IssueKind) -> bool:
        return any(issue.kind == kind for issue in self.errors)

    @classmethod
    def success(cls, warnings: Iterable[ValidationIssue] = ()) -> "ValidationOutcome":
        return cls(errors=(), warnings=tuple(warnings))

    @classmethod
    def failure(
        cls,
        message: str,
        kind: IssueKind = IssueKind.BUSINESS_RULE,
        rule: str | None = None,
    ) -> "ValidationOutcome":
        return cls(errors=(ValidationIssue(kind=kind, message=message, rule=rule),))

    @classmethod
    def combine(cls, outcomes: Iterable["ValidationOutcome"]) -> "ValidationOutcome":
        """Concatenate errors and warnings, preserving order."""
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []
        for outcome in outcomes:
            errors.extend(outcome.errors)
            warnings.extend(outcome.warnings)
        return cls(errors=tuple(errors), warnings=tuple(warnings))

    def merge(self, other: "ValidationOutcome") -> "ValidationOutcome":
        return ValidationOutcome.combine((self, other))

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": [issue.to_dict() for issue in self.errors],
            "warnings": [issue.to_dict() for issue in self.warnings],
        }
