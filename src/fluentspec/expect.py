"""
Default assertion engine.

Provides a compact expect-style assertion context used as the entry value of
`should` / `should_eventually` chains. Language chains (`to`, `be`, `have`,
...) return the same context; predicates either run on property access
(`true`, `empty`) or on call (`equal(5)`), and raise `ExpectationFailedError`
carrying `expected` and `actual` when they do not hold.

Any object implementing `AssertionEngine` can replace this module as the
collaborator of the interception layer.
"""

import re
from collections.abc import Callable, Sized
from typing import Any, Literal, Protocol

from fluentspec.exceptions import ExpectationFailedError, MissingMemberError
from fluentspec.formatting import render_value

MemberKind = Literal["function", "property"]

_UNSET = object()


class AssertionEngine(Protocol):
    """Collaborator supplying assertion entry points and checked member lookup."""

    def expect(self, value: Any) -> Any: ...

    def get_checked_property(self, value: Any, name: str, kind: MemberKind) -> Any: ...


class Assertion:
    """
    Assertion context over a single subject value.

    Params:
        subject: Value under assertion
    """

    def __init__(self, subject: Any, negated: bool = False):
        self._subject = subject
        self._negated = negated

    def __repr__(self) -> str:
        prefix = "not " if self._negated else ""
        return f"Assertion({prefix}{render_value(self._subject)})"

    @property
    def subject(self) -> Any:
        return self._subject

    # Language chains: readability only, no effect.

    @property
    def to(self) -> "Assertion":
        return self

    @property
    def be(self) -> "Assertion":
        return self

    @property
    def been(self) -> "Assertion":
        return self

    @property
    def is_(self) -> "Assertion":
        return self

    @property
    def that(self) -> "Assertion":
        return self

    @property
    def which(self) -> "Assertion":
        return self

    @property
    def and_(self) -> "Assertion":
        return self

    @property
    def has(self) -> "Assertion":
        return self

    @property
    def have(self) -> "Assertion":
        return self

    @property
    def with_(self) -> "Assertion":
        return self

    @property
    def at(self) -> "Assertion":
        return self

    @property
    def of(self) -> "Assertion":
        return self

    @property
    def same(self) -> "Assertion":
        return self

    @property
    def does(self) -> "Assertion":
        return self

    @property
    def not_(self) -> "Assertion":
        """Negate every following predicate; the receiver is left unchanged."""
        return Assertion(self._subject, negated=not self._negated)

    def _check(
        self,
        condition: bool,
        message: str,
        negated_message: str,
        expected: Any,
        operator: str,
        actual: Any = _UNSET,
    ) -> "Assertion":
        if actual is _UNSET:
            actual = self._subject
        if self._negated:
            condition = not condition
            message = negated_message
        if not condition:
            raise ExpectationFailedError(message, expected=expected, actual=actual, operator=operator)
        return self

    # Property predicates

    @property
    def ok(self) -> "Assertion":
        subject = render_value(self._subject)
        return self._check(
            bool(self._subject),
            f"expected {subject} to be truthy",
            f"expected {subject} to be falsy",
            True,
            "ok",
        )

    @property
    def true(self) -> "Assertion":
        subject = render_value(self._subject)
        return self._check(
            self._subject is True,
            f"expected {subject} to be true",
            f"expected {subject} not to be true",
            True,
            "true",
        )

    @property
    def false(self) -> "Assertion":
        subject = render_value(self._subject)
        return self._check(
            self._subject is False,
            f"expected {subject} to be false",
            f"expected {subject} not to be false",
            False,
            "false",
        )

    @property
    def none(self) -> "Assertion":
        subject = render_value(self._subject)
        return self._check(
            self._subject is None,
            f"expected {subject} to be None",
            f"expected {subject} not to be None",
            None,
            "none",
        )

    @property
    def empty(self) -> "Assertion":
        subject = render_value(self._subject)
        if not isinstance(self._subject, Sized):
            raise ExpectationFailedError(
                f"expected {subject} to have a length",
                expected="sized",
                actual=self._subject,
                operator="empty",
            )
        return self._check(
            len(self._subject) == 0,
            f"expected {subject} to be empty",
            f"expected {subject} not to be empty",
            0,
            "empty",
            actual=len(self._subject),
        )

    # Call predicates

    def equal(self, expected: Any) -> "Assertion":
        subject = render_value(self._subject)
        return self._check(
            self._subject == expected,
            f"expected {subject} to equal {render_value(expected)}",
            f"expected {subject} not to equal {render_value(expected)}",
            expected,
            "equal",
        )

    eql = equal
    equals = equal

    def above(self, bound: Any) -> "Assertion":
        subject = render_value(self._subject)
        return self._check(
            self._subject > bound,
            f"expected {subject} to be above {render_value(bound)}",
            f"expected {subject} to be at most {render_value(bound)}",
            bound,
            "above",
        )

    def below(self, bound: Any) -> "Assertion":
        subject = render_value(self._subject)
        return self._check(
            self._subject < bound,
            f"expected {subject} to be below {render_value(bound)}",
            f"expected {subject} to be at least {render_value(bound)}",
            bound,
            "below",
        )

    def least(self, bound: Any) -> "Assertion":
        subject = render_value(self._subject)
        return self._check(
            self._subject >= bound,
            f"expected {subject} to be at least {render_value(bound)}",
            f"expected {subject} to be below {render_value(bound)}",
            bound,
            "least",
        )

    def most(self, bound: Any) -> "Assertion":
        subject = render_value(self._subject)
        return self._check(
            self._subject <= bound,
            f"expected {subject} to be at most {render_value(bound)}",
            f"expected {subject} to be above {render_value(bound)}",
            bound,
            "most",
        )

    def within(self, low: Any, high: Any) -> "Assertion":
        subject = render_value(self._subject)
        span = f"{render_value(low)}..{render_value(high)}"
        return self._check(
            low <= self._subject <= high,
            f"expected {subject} to be within {span}",
            f"expected {subject} not to be within {span}",
            [low, high],
            "within",
        )

    def include(self, member: Any) -> "Assertion":
        subject = render_value(self._subject)
        return self._check(
            member in self._subject,
            f"expected {subject} to include {render_value(member)}",
            f"expected {subject} not to include {render_value(member)}",
            member,
            "include",
        )

    contain = include

    def a(self, type_name: str) -> "Assertion":
        actual = type(self._subject).__name__
        subject = render_value(self._subject)
        return self._check(
            actual.lower() == type_name.lower(),
            f"expected {subject} to be a {type_name}",
            f"expected {subject} not to be a {type_name}",
            type_name,
            "a",
            actual=actual,
        )

    an = a

    def instance_of(self, cls: type) -> "Assertion":
        subject = render_value(self._subject)
        return self._check(
            isinstance(self._subject, cls),
            f"expected {subject} to be an instance of {cls.__name__}",
            f"expected {subject} not to be an instance of {cls.__name__}",
            cls.__name__,
            "instance_of",
            actual=type(self._subject).__name__,
        )

    def length_of(self, length: int) -> "Assertion":
        subject = render_value(self._subject)
        actual = len(self._subject)
        return self._check(
            actual == length,
            f"expected {subject} to have a length of {length} but got {actual}",
            f"expected {subject} not to have a length of {length}",
            length,
            "length_of",
            actual=actual,
        )

    def match(self, pattern: str) -> "Assertion":
        subject = render_value(self._subject)
        return self._check(
            re.search(pattern, str(self._subject)) is not None,
            f"expected {subject} to match {pattern!r}",
            f"expected {subject} not to match {pattern!r}",
            pattern,
            "match",
        )

    def satisfy(self, predicate: Callable[[Any], bool]) -> "Assertion":
        subject = render_value(self._subject)
        name = getattr(predicate, "__name__", "predicate")
        return self._check(
            bool(predicate(self._subject)),
            f"expected {subject} to satisfy {name}",
            f"expected {subject} not to satisfy {name}",
            name,
            "satisfy",
        )

    # Defined last: the name shadows the `property` builtin inside the class body.
    def property(self, name: str, *value: Any) -> "Assertion":
        """
        Assert the subject has attribute (or key) `name`, optionally equal to `value`.

        The returned context asserts on the attribute's value, so chains can
        continue with e.g. `.that.equals(5)`.
        """
        subject = render_value(self._subject)
        if isinstance(self._subject, dict):
            present = name in self._subject
            member = self._subject.get(name)
        else:
            present = hasattr(self._subject, name)
            member = getattr(self._subject, name, None)
        if value:
            self._check(
                present and member == value[0],
                f"expected {subject} to have property {name!r} of {render_value(value[0])}",
                f"expected {subject} not to have property {name!r} of {render_value(value[0])}",
                value[0],
                "property",
                actual=member,
            )
        else:
            self._check(
                present,
                f"expected {subject} to have property {name!r}",
                f"expected {subject} not to have property {name!r}",
                name,
                "property",
                actual=None if not present else name,
            )
        return Assertion(member)


def expect(value: Any) -> Assertion:
    """Entry point of an assertion chain."""
    return Assertion(value)


def get_checked_property(value: Any, name: str, kind: MemberKind) -> Any:
    """
    Look up `name` on `value`, checking it has the expected kind.

    Params:
        value: Object to resolve the member on
        name: Member name
        kind: "function" for callables, "property" for plain values

    Returns:
        The member (bound method or attribute value)

    Raises:
        MissingMemberError: If the member is absent or has the other kind
    """
    try:
        member = getattr(value, name)
    except MissingMemberError:
        raise
    except AttributeError as e:
        raise MissingMemberError(value, name, kind) from e
    if kind == "function" and not callable(member):
        raise MissingMemberError(value, name, kind, reason="is not callable")
    if kind == "property" and callable(member):
        raise MissingMemberError(value, name, kind, reason="is a function, not a plain value")
    return member


class ExpectEngine:
    """`AssertionEngine` backed by this module's `expect` and `get_checked_property`."""

    def expect(self, value: Any) -> Assertion:
        return expect(value)

    def get_checked_property(self, value: Any, name: str, kind: MemberKind) -> Any:
        return get_checked_property(value, name, kind)


DEFAULT_ENGINE = ExpectEngine()
