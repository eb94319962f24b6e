# ============================================================================
# SCOPE: APPLICATION LAYER (Reception)
# Description: Structural (Basic stage) validation of intake requests.
# ============================================================================
"""
Intake structural schemas.

Pydantic models describing the shape of a well-formed request. They run in
strict mode, so a bool passed as an id or a string passed as a date is
rejected here before any rule looks at it. Emptiness of the service list is
left to the service rule.
"""

import logging
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic_core import PydanticCustomError

from app.domains.reception.application.dto import IntakeRequest, SearchCriteria
from app.domains.reception.domain.value_objects import (
    IssueKind,
    ReceptionType,
    ValidationIssue,
    ValidationMode,
    ValidationOutcome,
)

logger = logging.getLogger(__name__)

PositiveId = Annotated[int, Field(gt=0)]


class IntakeSchema(BaseModel):
    """Shape of a create request."""

    model_config = ConfigDict(strict=True, extra="ignore", frozen=True)

    patient_id: PositiveId = Field(..., description="Patient identifier")
    doctor_id: PositiveId = Field(..., description="Doctor identifier")
    reception_date: datetime | None = Field(..., description="Scheduled date and time")
    service_ids: tuple[PositiveId, ...] = Field(default=(), description="Selected services")
    notes: str | None = Field(None, description="Free-text notes")
    is_emergency: bool = False
    is_online: bool = False
    reception_type: ReceptionType = ReceptionType.STANDARD
    actor_id: str = Field(..., min_length=1, description="Acting user")

    @field_validator("reception_date")
    @classmethod
    def require_reception_date(cls, v: datetime | None) -> datetime:
        if v is None:
            raise PydanticCustomError("reception_date_required", "reception date is required", {})
        return v

    @model_validator(mode="after")
    def check_channel_flags(self) -> "IntakeSchema":
        if self.is_emergency and self.is_online:
            raise PydanticCustomError(
                "emergency_online_conflict", "a reception cannot be both emergency and online", {}
            )
        return self


class EditIntakeSchema(IntakeSchema):
    """Shape of an edit request."""

    reception_id: PositiveId = Field(..., description="Reception being edited")


class SearchCriteriaSchema(BaseModel):
    """Shape of a reception list search."""

    model_config = ConfigDict(strict=True, extra="ignore", frozen=True)

    actor_id: str = Field(..., min_length=1)
    search_term: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1)


def _issues_from_error(error: ValidationError) -> list[ValidationIssue]:
    issues = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail.get("loc", ()))
        message = f"{location}: {detail['msg']}" if location else detail["msg"]
        issues.append(ValidationIssue(kind=IssueKind.STRUCTURAL, message=message))
    return issues


def validate_intake_structure(request: IntakeRequest, mode: ValidationMode) -> ValidationOutcome:
    """
    Validate request structure.

    Args:
        request: Create or edit request
        mode: Selects the create or edit schema

    Returns:
        ValidationOutcome with one STRUCTURAL issue per schema error
    """
    schema = EditIntakeSchema if mode == ValidationMode.EDIT else IntakeSchema
    try:
        schema.model_validate(request, from_attributes=True)
    except ValidationError as e:
        issues = _issues_from_error(e)
        logger.info(f"Structural validation failed with {len(issues)} issue(s)")
        return ValidationOutcome(errors=issues)
    return ValidationOutcome.success()


def validate_search_structure(criteria: SearchCriteria) -> ValidationOutcome:
    try:
        SearchCriteriaSchema.model_validate(criteria, from_attributes=True)
    except ValidationError as e:
        return ValidationOutcome(errors=_issues_from_error(e))
    return ValidationOutcome.success()
