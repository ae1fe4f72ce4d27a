"""
Tests for fluentspec exception classes and message formatting.
"""

import pytest

from fluentspec.exceptions import (
    ConfigurationError,
    ExpectationFailedError,
    FluentSpecError,
    InvocationError,
    MissingMemberError,
    format_expected_actual,
)


class TestExpectationFailedError:
    """Tests for the assertion failure kind."""

    def test_carries_expected_and_actual(self):
        error = ExpectationFailedError("expected 4 to equal 5", expected=5, actual=4, operator="equal")
        assert error.expected == 5
        assert error.actual == 4
        assert error.operator == "equal"
        assert str(error) == "expected 4 to equal 5"

    def test_is_assertion_error(self):
        error = ExpectationFailedError("nope", expected=1, actual=2)
        assert isinstance(error, AssertionError)
        assert isinstance(error, FluentSpecError)

    def test_reformatted_message(self):
        error = ExpectationFailedError("expected 4 to equal 5", expected=5, actual=4)
        reformatted = error.reformatted()
        assert str(reformatted) == "expected: 5   actual: 4"
        assert reformatted.expected == 5
        assert reformatted.actual == 4

    def test_reformatted_renders_json(self):
        error = ExpectationFailedError("mismatch", expected={"a": [1, 2]}, actual="x")
        assert str(error.reformatted()) == 'expected: {"a":[1,2]}   actual: "x"'


class TestOtherErrors:
    """Tests for missing member, invocation and configuration errors."""

    def test_missing_member_is_attribute_error(self):
        error = MissingMemberError(5, "upper", "function")
        assert isinstance(error, AttributeError)
        assert error.member == "upper"
        assert error.kind == "function"
        assert "Function 'upper' does not exist on int 5" == str(error)

    def test_missing_member_reason(self):
        error = MissingMemberError("abc", "upper", "property", reason="is a function, not a plain value")
        assert "is a function" in str(error)

    def test_invocation_error_message(self):
        error = InvocationError("add", (1,), (2, 3))
        assert str(error) == "'add' was already called with (1); cannot call it again with (2,3)"

    def test_configuration_error_is_value_error(self):
        error = ConfigurationError("FLUENTSPEC_MAX_RETRIES", "abc", "not a number")
        assert isinstance(error, ValueError)
        assert error.setting == "FLUENTSPEC_MAX_RETRIES"
        assert "'abc'" in str(error)


@pytest.mark.parametrize(
    "expected,actual,message",
    [
        (5, 4, "expected: 5   actual: 4"),
        (None, True, "expected: null   actual: true"),
        ("a", ["a"], 'expected: "a"   actual: ["a"]'),
    ],
)
def test_format_expected_actual(expected, actual, message):
    assert format_expected_actual(expected, actual) == message
