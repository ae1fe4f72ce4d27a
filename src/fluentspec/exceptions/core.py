"""
Exception classes for fluentspec.

This module defines the error kinds raised while building, realizing and
executing an action tree. Assertion failures and missing members also
subclass the matching builtin (`AssertionError`, `AttributeError`) so test
runners and `getattr` fallbacks treat them the usual way.
"""

from typing import Any

from fluentspec.formatting import render_args, render_value


class FluentSpecError(Exception):
    """Base exception for all fluentspec errors."""

    pass


class ExpectationFailedError(FluentSpecError, AssertionError):
    """Raised by the assertion engine when an expectation does not hold."""

    def __init__(
        self,
        message: str,
        expected: Any = None,
        actual: Any = None,
        operator: str | None = None,
    ):
        """
        Initialize the exception.

        Params:
            message: Human-readable description of the failed expectation
            expected: Value the expectation compared against
            actual: Value that was observed
            operator: Name of the predicate that failed (e.g. "equal")
        """
        self.expected = expected
        self.actual = actual
        self.operator = operator
        super().__init__(message)

    def reformatted(self) -> "ExpectationFailedError":
        """
        Return a copy whose message carries the expected and actual values.

        Returns:
            New exception with message `expected: <json>   actual: <json>`
        """
        error = ExpectationFailedError(
            format_expected_actual(self.expected, self.actual),
            expected=self.expected,
            actual=self.actual,
            operator=self.operator,
        )
        error.__cause__ = self.__cause__
        return error


class MissingMemberError(FluentSpecError, AttributeError):
    """Raised when a value lacks a member or the member has the wrong kind."""

    def __init__(self, owner: Any, member: str, kind: str, reason: str = "does not exist"):
        """
        Initialize the exception.

        Params:
            owner: Value the member was looked up on
            member: Member name
            kind: Expected kind, "function" or "property"
            reason: Why the lookup failed
        """
        self.owner = owner
        self.member = member
        self.kind = kind
        self.reason = reason
        super().__init__(
            f"{kind.capitalize()} '{member}' {reason} on {type(owner).__name__} {render_value(owner)}"
        )


class InvocationError(FluentSpecError):
    """Raised when a handle whose node already absorbed a call is called again."""

    def __init__(self, description: str, recorded: tuple, attempted: tuple):
        """
        Initialize the exception.

        Params:
            description: Description of the node
            recorded: Arguments already stored on the node
            attempted: Arguments of the rejected second call
        """
        self.description = description
        self.recorded = recorded
        self.attempted = attempted
        super().__init__(
            f"'{description}' was already called with ({render_args(recorded)}); "
            f"cannot call it again with ({render_args(attempted)})"
        )


class ConfigurationError(FluentSpecError, ValueError):
    """Raised when a configuration value cannot be used."""

    def __init__(self, setting: str, value: Any, reason: str):
        """
        Initialize the exception.

        Params:
            setting: Name of the setting or environment variable
            value: Rejected raw value
            reason: Why the value was rejected
        """
        self.setting = setting
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for {setting}: {value!r} ({reason})")


def format_expected_actual(expected: Any, actual: Any) -> str:
    """Format the expected/actual message used for final assertion failures."""
    return f"expected: {render_value(expected)}   actual: {render_value(actual)}"
