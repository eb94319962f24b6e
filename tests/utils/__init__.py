"""Test utilities and helpers."""

from tests.utils.assertions import (
    assert_has_error,
    assert_has_warning,
    assert_no_error,
)
from tests.utils.builders import IntakeRequestBuilder
from tests.utils.factories import (
    CLERK,
    NOW,
    VISITOR,
    create_collaborators,
    create_doctors,
    create_patients,
    create_security,
    create_services,
    fixed_clock,
)

__all__ = [
    # Builders
    "IntakeRequestBuilder",
    # Factories
    "NOW",
    "CLERK",
    "VISITOR",
    "fixed_clock",
    "create_patients",
    "create_doctors",
    "create_services",
    "create_security",
    "create_collaborators",
    # Assertions
    "assert_has_error",
    "assert_no_error",
    "assert_has_warning",
]
