"""
Entity Lookup Interface

Protocol for the patient, doctor and service lookup collaborators.
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class EntityStatus:
    """What the core needs to know about a referenced record."""

    entity_id: int
    exists: bool
    is_active: bool = True
    is_deleted: bool = False
    name: str | None = None

    @classmethod
    def missing(cls, entity_id: int) -> "EntityStatus":
        return cls(entity_id=entity_id, exists=False, is_active=False)

    @property
    def display_name(self) -> str:
        return self.name or str(self.entity_id)


@runtime_checkable
class IEntityLookupPort(Protocol):
    """
    Interface for a lookup by primary key.

    One instance serves patients, another doctors, another services.
    """

    async def get_by_id(self, entity_id: int) -> EntityStatus:
        """Return the status of the record; ``exists=False`` when not found."""
        ...


__all__ = ["EntityStatus", "IEntityLookupPort"]
