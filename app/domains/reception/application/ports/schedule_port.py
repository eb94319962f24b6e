"""
Schedule Provider Interface

Protocol for doctor capacity and patient booking lookups.
"""

from datetime import date
from typing import Protocol, runtime_checkable


@runtime_checkable
class ISchedulePort(Protocol):
    """Interface for the schedule/capacity provider."""

    async def count_receptions(self, doctor_id: int, on_date: date) -> int:
        """Number of receptions the doctor already has on a day."""
        ...

    async def has_active_reception(
        self,
        patient_id: int,
        on_date: date,
        exclude_reception_id: int | None = None,
    ) -> bool:
        """Whether the patient already has an active reception on a day."""
        ...


__all__ = ["ISchedulePort"]
