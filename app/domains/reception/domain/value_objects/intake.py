# ============================================================================
# SCOPE: DOMAIN LAYER (Reception)
# Description: Intake request classifiers.
# ============================================================================
"""Reception type and validation mode enums."""

from app.core.domain import StatusEnum


class ReceptionType(StatusEnum):
    STANDARD = "standard"
    SPECIAL = "special"


class ValidationMode(StatusEnum):
    """Whether a request creates a reception or edits an existing one."""

    CREATE = "create"
    EDIT = "edit"

    def stage_name(self, base: str) -> str:
        """Stage trace name; edit runs carry an ``Edit`` infix."""
        if self is ValidationMode.EDIT:
            return f"{base}EditValidation"
        return f"{base}Validation"


class ValidationStage(StatusEnum):
    """Orchestrator stages, in execution order."""

    BASIC = "Basic"
    BUSINESS_RULES = "BusinessRules"
    SECURITY = "Security"
    PERFORMANCE = "Performance"
    INTEGRATION = "Integration"
    SPECIAL_CASE = "SpecialCase"

    def trace_name(self, mode: ValidationMode) -> str:
        return mode.stage_name(self.value)


class ReceptionPermission(StatusEnum):
    """Roles checked against the security port."""

    CREATE = "reception.create"
    EDIT = "reception.edit"
    VIEW_LIST = "reception.view_list"
