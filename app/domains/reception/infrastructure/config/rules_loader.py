"""Loader for reception rule configuration from YAML.

Rule enablement, transition rules and state business rules live in a YAML
file so they can be tuned without code changes. A missing, empty or
unparsable file falls back to the built-in defaults. A file that parses but
describes an impossible table (unknown states, duplicate transitions,
entries that are not mappings) raises ConfigurationException.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from app.core.domain import ConfigurationException
from app.domains.reception.domain.services.rule_registry import RuleRegistry
from app.domains.reception.domain.services.transition_rules import TransitionRuleSet
from app.domains.reception.domain.value_objects import (
    ConditionType,
    RuleDescriptor,
    RuleId,
    RulePriority,
    StateBusinessRule,
    TransitionCondition,
    TransitionRule,
    WorkflowState,
)

logger = logging.getLogger(__name__)

DEFAULT_YAML_PATH = Path(__file__).parent / "reception_rules.yaml"


@dataclass(frozen=True)
class ReceptionRules:
    """Rule tables loaded at startup."""

    registry: RuleRegistry = field(default_factory=RuleRegistry.default)
    transitions: TransitionRuleSet = field(default_factory=TransitionRuleSet.default)
    source: str = "defaults"


def load_reception_rules(yaml_path: Path | str | None = None) -> ReceptionRules:
    """Load reception rules from YAML configuration.

    Args:
        yaml_path: Optional path to the YAML file. Uses the bundled file if not provided.

    Returns:
        ReceptionRules built from the file, or from the defaults when the
        file cannot be read.

    Raises:
        ConfigurationException: If the file declares unknown states, duplicate
            transitions, invalid priorities or entries that are not mappings.

    Example:
        rules = load_reception_rules()
        rules.registry.is_enabled(RuleId.PATIENT_VALIDATION)
    """
    path = Path(yaml_path) if yaml_path else DEFAULT_YAML_PATH

    try:
        with open(path, encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        logger.warning(f"Reception rules YAML not found at {path}, using defaults")
        return ReceptionRules()
    except yaml.YAMLError as e:
        logger.error(f"Error parsing reception rules YAML: {e}")
        return ReceptionRules()

    if not config:
        logger.warning(f"Empty YAML file at {path}, using defaults")
        return ReceptionRules()
    if not isinstance(config, dict):
        logger.error(f"Reception rules YAML at {path} is not a mapping, using defaults")
        return ReceptionRules()

    registry = _build_registry(config.get("rules")) if "rules" in config else RuleRegistry.default()
    if "transitions" in config or "state_rules" in config:
        transitions = TransitionRuleSet(
            _parse_transitions(config.get("transitions") or []),
            _parse_state_rules(config.get("state_rules") or []),
        )
    else:
        transitions = TransitionRuleSet.default()

    logger.info(f"Loaded {len(registry)} rule descriptors and {len(transitions)} transitions from YAML: {path}")
    return ReceptionRules(registry=registry, transitions=transitions, source=str(path))


def _build_registry(rules: Any) -> RuleRegistry:
    if not isinstance(rules, dict):
        raise ConfigurationException("'rules' must be a mapping of rule name to settings", source="rules")

    descriptors = []
    for name, settings in rules.items():
        rule = RuleId.lookup(str(name))
        if rule is None:
            logger.warning(f"Ignoring unknown rule '{name}' in reception rules YAML")
            continue
        settings = _require_mapping(settings or {}, f"rule '{name}'", "rules")
        try:
            priority = int(settings.get("priority", 0))
        except (TypeError, ValueError):
            raise ConfigurationException(
                f"Invalid priority '{settings.get('priority')}' for rule '{name}'",
                source="rules",
                details={"priority": settings.get("priority")},
            ) from None
        descriptors.append(
            RuleDescriptor(
                rule=rule,
                enabled=bool(settings.get("enabled", True)),
                priority=priority,
                description=str(settings.get("description", "")),
            )
        )
    return RuleRegistry(descriptors)


def _require_mapping(value: Any, where: str, source: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigurationException(
            f"Expected a mapping for {where}, got {type(value).__name__}",
            source=source,
            details={"value": value},
        )
    return value


def _parse_state(value: Any, where: str) -> WorkflowState:
    try:
        return WorkflowState.from_string(str(value))
    except ValueError:
        raise ConfigurationException(
            f"Unknown workflow state '{value}' in {where}",
            source="transitions",
            details={"state": value},
        ) from None


def _parse_condition(raw: Any, where: str) -> TransitionCondition:
    raw = _require_mapping(raw, f"condition in {where}", "transitions")
    type_name = str(raw.get("type", ""))
    try:
        condition_type: ConditionType | str = ConditionType.from_string(type_name)
    except ValueError:
        # Kept as-is; the evaluator rejects it on every check
        logger.error(f"Unknown condition type '{type_name}' in {where}")
        condition_type = type_name

    return TransitionCondition(
        condition_type=condition_type,
        description=str(raw.get("description") or type_name or "condition"),
        parameters=_require_mapping(raw.get("parameters") or {}, f"condition parameters in {where}", "transitions"),
    )


def _parse_transitions(items: list[Any]) -> list[TransitionRule]:
    rules = []
    for item in items:
        item = _require_mapping(item, "transition entry", "transitions")
        from_state = _parse_state(item.get("from"), "transition source")
        target_state = _parse_state(item.get("to"), "transition target")
        where = f"transition {from_state.value} -> {target_state.value}"
        if from_state == target_state:
            raise ConfigurationException(f"Self-loop declared for {from_state.value}", source="transitions")
        rules.append(
            TransitionRule(
                from_state=from_state,
                target_state=target_state,
                conditions=tuple(_parse_condition(c, where) for c in item.get("conditions") or []),
                description=str(item.get("description", "")),
            )
        )
    return rules


def _parse_state_rules(items: list[Any]) -> list[StateBusinessRule]:
    state_rules = []
    for item in items:
        item = _require_mapping(item, "state rule entry", "state_rules")
        name = str(item.get("name", ""))
        state = _parse_state(item.get("state"), f"state rule '{name}'")
        try:
            priority = RulePriority.from_string(str(item.get("priority", "medium")))
        except ValueError:
            raise ConfigurationException(
                f"Invalid priority '{item.get('priority')}' for state rule '{name}'",
                source="state_rules",
            ) from None
        state_rules.append(
            StateBusinessRule(
                name=name,
                state=state,
                condition=_parse_condition(item.get("condition") or {}, f"state rule '{name}'"),
                description=str(item.get("description", "")),
                priority=priority,
            )
        )
    return state_rules
