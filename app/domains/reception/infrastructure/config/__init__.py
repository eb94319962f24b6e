"""Reception rule configuration loading."""

from app.domains.reception.infrastructure.config.rules_loader import (
    DEFAULT_YAML_PATH,
    ReceptionRules,
    load_reception_rules,
)

__all__ = ["DEFAULT_YAML_PATH", "ReceptionRules", "load_reception_rules"]
