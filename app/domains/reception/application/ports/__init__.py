"""
Reception Domain Ports

Interfaces (ports) for the collaborators the reception core consumes.
"""

from dataclasses import dataclass

from app.domains.reception.application.ports.entity_lookup import EntityStatus, IEntityLookupPort
from app.domains.reception.application.ports.schedule_port import ISchedulePort
from app.domains.reception.application.ports.security_port import ISecurityPort, entity_key
from app.domains.reception.application.ports.transition_hooks import (
    ITransitionPermissionPolicy,
    ITransitionTimePolicy,
)


@dataclass(frozen=True)
class ReceptionCollaborators:
    """The external services one validation run talks to."""

    patients: IEntityLookupPort
    doctors: IEntityLookupPort
    services: IEntityLookupPort
    security: ISecurityPort
    schedule: ISchedulePort


__all__ = [
    "EntityStatus",
    "IEntityLookupPort",
    "ISecurityPort",
    "ISchedulePort",
    "ITransitionTimePolicy",
    "ITransitionPermissionPolicy",
    "ReceptionCollaborators",
    "entity_key",
]
