# ============================================================================
# SCOPE: APPLICATION LAYER (Reception)
# Description: Request shapes consumed by the validation pipeline.
# ============================================================================
"""Intake request DTOs.

Create and edit requests share the ``IntakeRequest`` protocol, so every rule
reads the same attributes regardless of which variant it was handed.
"""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping, Protocol, runtime_checkable

from app.domains.reception.domain.value_objects import ReceptionType


@runtime_checkable
class IntakeRequest(Protocol):
    """Fields every intake request exposes to the validation pipeline."""

    @property
    def patient_id(self) -> int: ...

    @property
    def doctor_id(self) -> int: ...

    @property
    def reception_date(self) -> datetime | None: ...

    @property
    def service_ids(self) -> tuple[int, ...]: ...

    @property
    def notes(self) -> str | None: ...

    @property
    def is_emergency(self) -> bool: ...

    @property
    def is_online(self) -> bool: ...

    @property
    def reception_type(self) -> ReceptionType: ...

    @property
    def actor_id(self) -> str: ...

    @property
    def complaint_category(self) -> str | None: ...

    @property
    def symptoms(self) -> tuple[str, ...]: ...


@dataclass(frozen=True, kw_only=True)
class CreateIntakeRequest:
    """Request to register a new reception."""

    patient_id: int
    doctor_id: int
    reception_date: datetime | None
    service_ids: tuple[int, ...] = ()
    notes: str | None = None
    is_emergency: bool = False
    is_online: bool = False
    reception_type: ReceptionType = ReceptionType.STANDARD
    actor_id: str = ""
    complaint_category: str | None = None
    symptoms: tuple[str, ...] = ()

    def __post_init__(self):
        # Accept lists from callers; store tuples
        object.__setattr__(self, "service_ids", tuple(self.service_ids or ()))
        object.__setattr__(self, "symptoms", tuple(self.symptoms or ()))

    @property
    def is_special(self) -> bool:
        return self.reception_type == ReceptionType.SPECIAL


@dataclass(frozen=True, kw_only=True)
class EditIntakeRequest(CreateIntakeRequest):
    """Request to modify an existing reception."""

    reception_id: int


@dataclass(frozen=True, kw_only=True)
class SearchCriteria:
    """Reception list search parameters."""

    actor_id: str
    search_term: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    page: int = 1
    page_size: int = 20


@dataclass(frozen=True)
class TransitionContext:
    """
    Everything the transition guard knows about a reception.

    ``extra_data`` is free-form host data (patient_id, doctor_id,
    reception_date, service_ids, ...) read by condition strategies.
    """

    reception_id: int
    actor_id: str
    extra_data: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "extra_data", MappingProxyType(dict(self.extra_data or {})))

    def get(self, key: str, default: Any = None) -> Any:
        return self.extra_data.get(key, default)

    @classmethod
    def from_request(cls, reception_id: int, request: IntakeRequest) -> "TransitionContext":
        """Build a context from an intake request, e.g. before the first transition."""
        return cls(
            reception_id=reception_id,
            actor_id=request.actor_id,
            extra_data={
                "patient_id": request.patient_id,
                "doctor_id": request.doctor_id,
                "reception_date": request.reception_date,
                "service_ids": list(request.service_ids),
                "is_emergency": request.is_emergency,
            },
        )
