# ============================================================================
# SCOPE: APPLICATION LAYER (Reception)
# Description: Use case for checking a reception workflow transition.
# ============================================================================
"""Check Transition Use Case.

Answers whether a reception may move to a target workflow state. The use
case only validates; the host assigns the new state and fires the returned
events.
"""

import asyncio
import logging
from typing import Any, Mapping

from app.domains.reception.application.dto import TransitionCheckResult, TransitionContext
from app.domains.reception.application.services.transition_guard import TransitionGuard
from app.domains.reception.domain.value_objects import (
    ValidationOutcome,
    WorkflowState,
    events_for_state,
)

logger = logging.getLogger(__name__)


class CheckTransitionUseCase:
    """Use case for checking workflow transitions."""

    def __init__(self, guard: TransitionGuard, default_timeout: float | None = None) -> None:
        """Initialize use case.

        Args:
            guard: Transition guard with the loaded transition table.
            default_timeout: Deadline in seconds when the caller passes none.
        """
        self._guard = guard
        self._default_timeout = default_timeout

    async def execute(
        self,
        reception_id: int,
        current_state: WorkflowState,
        target_state: WorkflowState,
        actor_id: str,
        extra_data: Mapping[str, Any] | None = None,
        timeout: float | None = None,
    ) -> TransitionCheckResult:
        """Execute the transition check.

        Args:
            reception_id: Reception being moved.
            current_state: State the reception is in.
            target_state: Requested state.
            actor_id: Acting user.
            extra_data: Host data read by the transition conditions.
            timeout: Deadline in seconds.

        Returns:
            TransitionCheckResult with the outcome, the declared next states
            and the events to fire when the transition is applied.
        """
        context = TransitionContext(reception_id=reception_id, actor_id=actor_id, extra_data=extra_data or {})
        deadline = timeout if timeout is not None else self._default_timeout
        cancelled = False

        try:
            async with asyncio.timeout(deadline):
                outcome = await self._guard.validate_transition(current_state, target_state, context)
        except TimeoutError:
            logger.warning(
                f"Transition check timed out for reception {reception_id}: "
                f"{current_state.value} -> {target_state.value}"
            )
            outcome = ValidationOutcome.success()
            cancelled = True

        events = tuple(events_for_state(target_state)) if outcome.is_valid and not cancelled else ()
        return TransitionCheckResult(
            reception_id=reception_id,
            from_state=current_state,
            to_state=target_state,
            outcome=outcome,
            cancelled=cancelled,
            valid_next_states=tuple(self._guard.rules.targets(current_state)),
            events=events,
        )
