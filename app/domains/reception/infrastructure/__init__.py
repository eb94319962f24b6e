"""
Reception Infrastructure

Rule configuration loading and in-memory port adapters.
"""

from app.domains.reception.infrastructure.config import ReceptionRules, load_reception_rules
from app.domains.reception.infrastructure.in_memory import (
    InMemoryEntityLookup,
    InMemorySchedule,
    InMemorySecurity,
    ScheduledReception,
)

__all__ = [
    "ReceptionRules",
    "load_reception_rules",
    "InMemoryEntityLookup",
    "InMemorySecurity",
    "InMemorySchedule",
    "ScheduledReception",
]
