"""
Shared utilities module

This module provides common utilities used across the entire application.
All utilities are domain-agnostic and reusable.
"""

# Logging
from .logger import (
    ContextLogger,
    configure_logging,
    configure_logging_from_settings,
    get_rule_logger,
    get_service_logger,
)

# Input validation
from .validators import (
    InputSanitizer,
    ValidationError,
)

__all__ = [
    # Logging
    "ContextLogger",
    "configure_logging",
    "configure_logging_from_settings",
    "get_rule_logger",
    "get_service_logger",
    # Input validation
    "InputSanitizer",
    "ValidationError",
]
