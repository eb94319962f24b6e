# ============================================================================
# SCOPE: DOMAIN LAYER (Reception)
# Description: Reception lifecycle states and the events fired on entering them.
# ============================================================================
"""Reception workflow value objects.

The workflow graph is linear with a cancellation exit from every active
stage:

    INITIALIZED -> PATIENT_VERIFICATION -> INSURANCE_VALIDATION
        -> SERVICE_SELECTION -> PAYMENT_PROCESSING -> COMPLETED -> ARCHIVED

    any active stage -> CANCELLED -> ARCHIVED
"""

from app.core.domain import StatusEnum


class WorkflowState(StatusEnum):
    """Lifecycle stage of a single reception record."""

    INITIALIZED = "initialized"
    PATIENT_VERIFICATION = "patient_verification"
    INSURANCE_VALIDATION = "insurance_validation"
    SERVICE_SELECTION = "service_selection"
    PAYMENT_PROCESSING = "payment_processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ARCHIVED = "archived"

    def valid_next_states(self) -> list["WorkflowState"]:
        """States reachable from this one in a single step."""
        return list(_VALID_TRANSITIONS.get(self, ()))

    def can_transition_to(self, target: "WorkflowState") -> bool:
        return target in _VALID_TRANSITIONS.get(self, ())

    def is_terminal(self) -> bool:
        return not _VALID_TRANSITIONS.get(self)

    def is_active(self) -> bool:
        """Whether the reception is still moving through intake."""
        return self not in (WorkflowState.COMPLETED, WorkflowState.CANCELLED, WorkflowState.ARCHIVED)


class WorkflowEvent(StatusEnum):
    """Side effects the host fires after a state has been entered."""

    PATIENT_VALIDATION = "patient_validation"
    INSURANCE_VALIDATION = "insurance_validation"
    PAYMENT_PROCESSING = "payment_processing"
    NOTIFICATION_SENDING = "notification_sending"
    AUDIT_LOGGING = "audit_logging"


_VALID_TRANSITIONS: dict[WorkflowState, tuple[WorkflowState, ...]] = {
    WorkflowState.INITIALIZED: (WorkflowState.PATIENT_VERIFICATION, WorkflowState.CANCELLED),
    WorkflowState.PATIENT_VERIFICATION: (WorkflowState.INSURANCE_VALIDATION, WorkflowState.CANCELLED),
    WorkflowState.INSURANCE_VALIDATION: (WorkflowState.SERVICE_SELECTION, WorkflowState.CANCELLED),
    WorkflowState.SERVICE_SELECTION: (WorkflowState.PAYMENT_PROCESSING, WorkflowState.CANCELLED),
    WorkflowState.PAYMENT_PROCESSING: (WorkflowState.COMPLETED, WorkflowState.CANCELLED),
    WorkflowState.COMPLETED: (WorkflowState.ARCHIVED,),
    WorkflowState.CANCELLED: (WorkflowState.ARCHIVED,),
    WorkflowState.ARCHIVED: (),
}

_STATE_EVENTS: dict[WorkflowState, tuple[WorkflowEvent, ...]] = {
    WorkflowState.PATIENT_VERIFICATION: (WorkflowEvent.PATIENT_VALIDATION, WorkflowEvent.AUDIT_LOGGING),
    WorkflowState.INSURANCE_VALIDATION: (WorkflowEvent.INSURANCE_VALIDATION, WorkflowEvent.AUDIT_LOGGING),
    WorkflowState.PAYMENT_PROCESSING: (WorkflowEvent.PAYMENT_PROCESSING, WorkflowEvent.AUDIT_LOGGING),
    WorkflowState.COMPLETED: (WorkflowEvent.NOTIFICATION_SENDING, WorkflowEvent.AUDIT_LOGGING),
}


def valid_transition_pairs() -> list[tuple[WorkflowState, WorkflowState]]:
    """Every (from, to) edge of the workflow graph, in declaration order."""
    return [(source, target) for source, targets in _VALID_TRANSITIONS.items() for target in targets]


def events_for_state(state: WorkflowState) -> list[WorkflowEvent]:
    """Events to fire after entering state."""
    return list(_STATE_EVENTS.get(state, ()))
