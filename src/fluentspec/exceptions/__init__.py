"""
fluentspec exception classes.

This package provides all exception types used throughout fluentspec for
consistent error handling and reporting.
"""

from fluentspec.exceptions.core import (
    ConfigurationError,
    ExpectationFailedError,
    FluentSpecError,
    InvocationError,
    MissingMemberError,
    format_expected_actual,
)

__all__ = [
    "FluentSpecError",
    "ExpectationFailedError",
    "MissingMemberError",
    "InvocationError",
    "ConfigurationError",
    "format_expected_actual",
]
