"""
Security Provider Interface

Protocol for role and per-entity access checks.
"""

from typing import Protocol, runtime_checkable


def entity_key(entity_type: str, entity_id: int) -> str:
    """Build the entity identifier passed to ``can_access_entity``."""
    return f"{entity_type}:{entity_id}"


@runtime_checkable
class ISecurityPort(Protocol):
    """Interface for the security provider."""

    async def has_role(self, actor_id: str, role: str) -> bool:
        """Check whether the actor holds a role."""
        ...

    async def can_access_entity(self, entity_id: str, actor_id: str) -> bool:
        """Check whether the actor may read an entity (see ``entity_key``)."""
        ...


__all__ = ["ISecurityPort", "entity_key"]
