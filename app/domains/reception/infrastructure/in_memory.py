# ============================================================================
# SCOPE: INFRASTRUCTURE LAYER (Reception)
# Description: Dictionary-backed port adapters for demos and tests.
# ============================================================================
"""
In-memory reception adapters.

Implement the reception ports over plain dictionaries. Hosts wire real
adapters (database, identity provider) instead; these exist so the
validation pipeline can run end to end without external services.
"""

import logging
from dataclasses import dataclass
from datetime import date

from app.domains.reception.application.ports import EntityStatus

logger = logging.getLogger(__name__)


class InMemoryEntityLookup:
    """Entity lookup over a dict of id -> EntityStatus."""

    def __init__(self, entities: dict[int, EntityStatus] | None = None):
        self._entities: dict[int, EntityStatus] = dict(entities or {})

    def add(self, entity_id: int, name: str = "", is_active: bool = True, is_deleted: bool = False) -> EntityStatus:
        status = EntityStatus(
            entity_id=entity_id,
            exists=True,
            is_active=is_active,
            is_deleted=is_deleted,
            name=name or None,
        )
        self._entities[entity_id] = status
        return status

    async def get_by_id(self, entity_id: int) -> EntityStatus:
        return self._entities.get(entity_id) or EntityStatus.missing(entity_id)


class InMemorySecurity:
    """
    Role and entity-access table.

    ``restricted_entities`` maps an entity key to the actors allowed to see
    it; entities not listed are accessible to everyone.
    """

    def __init__(
        self,
        roles: dict[str, set[str]] | None = None,
        restricted_entities: dict[str, set[str]] | None = None,
    ):
        self._roles = {actor: set(r) for actor, r in (roles or {}).items()}
        self._restricted = {key: set(a) for key, a in (restricted_entities or {}).items()}

    def grant(self, actor_id: str, *roles: str) -> None:
        self._roles.setdefault(actor_id, set()).update(roles)

    def restrict(self, entity_id: str, *allowed_actors: str) -> None:
        self._restricted[entity_id] = set(allowed_actors)

    async def has_role(self, actor_id: str, role: str) -> bool:
        return role in self._roles.get(actor_id, set())

    async def can_access_entity(self, entity_id: str, actor_id: str) -> bool:
        allowed = self._restricted.get(entity_id)
        return allowed is None or actor_id in allowed


@dataclass(frozen=True)
class ScheduledReception:
    reception_id: int
    patient_id: int
    doctor_id: int
    on_date: date
    is_active: bool = True


class InMemorySchedule:
    """Reception calendar kept as a list of ScheduledReception."""

    def __init__(self, receptions: list[ScheduledReception] | None = None):
        self._receptions: list[ScheduledReception] = list(receptions or [])

    def book(self, reception_id: int, patient_id: int, doctor_id: int, on_date: date, is_active: bool = True) -> None:
        self._receptions.append(ScheduledReception(reception_id, patient_id, doctor_id, on_date, is_active))

    async def count_receptions(self, doctor_id: int, on_date: date) -> int:
        return sum(1 for r in self._receptions if r.doctor_id == doctor_id and r.on_date == on_date and r.is_active)

    async def has_active_reception(
        self,
        patient_id: int,
        on_date: date,
        exclude_reception_id: int | None = None,
    ) -> bool:
        return any(
            r.patient_id == patient_id
            and r.on_date == on_date
            and r.is_active
            and r.reception_id != exclude_reception_id
            for r in self._receptions
        )
