# ============================================================================
# SCOPE: APPLICATION LAYER (Reception)
# Description: Guards reception state changes against the declared rules.
# ============================================================================
"""
Transition Guard

Checks whether a reception may move from its current workflow state to a
target state. Four checks run and all must pass:

1. the declared TransitionRule and each of its conditions (fail-closed);
2. the state business rules of the current state (fail-closed);
3. the time-constraint hook (passes when no hook is wired);
4. the user-permission hook (passes when no hook is wired).

Transitions are default-deny: no declared rule means no transition. The
guard only validates; assigning the new state is the caller's job.
"""

from app.core.shared.logger import get_rule_logger
from app.domains.reception.application.dto import TransitionContext
from app.domains.reception.application.ports import ITransitionPermissionPolicy, ITransitionTimePolicy
from app.domains.reception.application.services.condition_evaluator import ConditionEvaluator
from app.domains.reception.domain.services.transition_rules import TransitionRuleSet
from app.domains.reception.domain.value_objects import (
    IssueKind,
    ValidationIssue,
    ValidationOutcome,
    WorkflowState,
)

logger = get_rule_logger("transition_guard")


class TransitionGuard:
    """Default-deny guard over the reception workflow."""

    def __init__(
        self,
        rules: TransitionRuleSet,
        evaluator: ConditionEvaluator,
        time_policy: ITransitionTimePolicy | None = None,
        permission_policy: ITransitionPermissionPolicy | None = None,
    ):
        self._rules = rules
        self._evaluator = evaluator
        self._time_policy = time_policy
        self._permission_policy = permission_policy

    @property
    def rules(self) -> TransitionRuleSet:
        return self._rules

    async def validate_transition(
        self,
        current_state: WorkflowState,
        target_state: WorkflowState,
        context: TransitionContext,
    ) -> ValidationOutcome:
        log = logger.with_context(
            reception_id=context.reception_id,
            from_state=current_state.value,
            to_state=target_state.value,
        )
        log.debug("Validating transition")

        outcome = ValidationOutcome.combine(
            [
                await self._check_transition_rule(current_state, target_state, context),
                await self._check_state_rules(current_state, context),
                await self._run_hook(self._time_policy, "time constraints", IssueKind.BUSINESS_RULE,
                                     current_state, target_state, context),
                await self._run_hook(self._permission_policy, "user permissions", IssueKind.SECURITY,
                                     current_state, target_state, context),
            ]
        )

        if outcome.is_valid:
            log.info("Transition allowed")
        else:
            log.warning("Transition rejected", errors=outcome.error_messages)
        return outcome

    async def _check_transition_rule(
        self,
        current_state: WorkflowState,
        target_state: WorkflowState,
        context: TransitionContext,
    ) -> ValidationOutcome:
        if not self._rules.has_source(current_state):
            return ValidationOutcome.failure(
                f"no transition rules defined for state {current_state.value}",
                kind=IssueKind.CONFIGURATION,
            )

        rule = self._rules.find(current_state, target_state)
        if rule is None:
            return ValidationOutcome.failure(
                f"transition from {current_state.value} to {target_state.value} not allowed",
                kind=IssueKind.CONFIGURATION,
            )

        rule_name = f"{current_state.value}->{target_state.value}"
        errors: list[ValidationIssue] = []
        for condition in rule.conditions:
            result = await self._evaluator.evaluate(context, condition)
            if not result.passed:
                errors.append(result.to_issue(condition, rule=rule_name))
        return ValidationOutcome(errors=errors)

    async def _check_state_rules(
        self,
        current_state: WorkflowState,
        context: TransitionContext,
    ) -> ValidationOutcome:
        errors: list[ValidationIssue] = []
        for state_rule in self._rules.state_rules(current_state):
            result = await self._evaluator.evaluate(context, state_rule.condition)
            if not result.passed:
                errors.append(result.to_issue(state_rule.condition, rule=state_rule.name))
        return ValidationOutcome(errors=errors)

    async def _run_hook(
        self,
        hook: ITransitionTimePolicy | ITransitionPermissionPolicy | None,
        label: str,
        error_kind: IssueKind,
        current_state: WorkflowState,
        target_state: WorkflowState,
        context: TransitionContext,
    ) -> ValidationOutcome:
        if hook is None:
            return ValidationOutcome.success()
        try:
            return await hook.check(context, current_state, target_state)
        except Exception as e:
            logger.error(
                f"Error validating {label} for reception {context.reception_id}: {e}",
                exc_info=True,
            )
            return ValidationOutcome(
                errors=(ValidationIssue.from_exception(e, f"error validating {label}", default_kind=error_kind),)
            )
