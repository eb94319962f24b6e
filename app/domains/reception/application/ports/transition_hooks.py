"""
Transition Hook Interfaces

Optional collaborators consulted by the transition guard for time
constraints and user permissions. When a hook is not wired in, its check
passes.
"""

from typing import Protocol, runtime_checkable

from app.domains.reception.application.dto import TransitionContext
from app.domains.reception.domain.value_objects import ValidationOutcome, WorkflowState


@runtime_checkable
class ITransitionTimePolicy(Protocol):
    """Time-window restrictions on state changes."""

    async def check(
        self,
        context: TransitionContext,
        current_state: WorkflowState,
        target_state: WorkflowState,
    ) -> ValidationOutcome:
        ...


@runtime_checkable
class ITransitionPermissionPolicy(Protocol):
    """Per-actor restrictions on state changes."""

    async def check(
        self,
        context: TransitionContext,
        current_state: WorkflowState,
        target_state: WorkflowState,
    ) -> ValidationOutcome:
        ...


__all__ = ["ITransitionTimePolicy", "ITransitionPermissionPolicy"]
