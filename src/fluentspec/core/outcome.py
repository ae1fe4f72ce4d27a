"""
Step outcome variants.

Executing a step inside the retry engine yields either an `Ok` carrying the
step's result or an `Err` carrying the raised exception. Callers classify and
decide explicitly instead of relying on nested try/except blocks.
"""

from collections.abc import Callable
from typing import Any

from attrs import frozen


@frozen
class Ok:
    """Successful step execution."""

    value: Any

    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> Any:
        return self.value


@frozen
class Err:
    """Failed step execution holding the raised exception."""

    error: BaseException

    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise self.error


Outcome = Ok | Err


def capture(function: Callable[[], Any]) -> Outcome:
    """Run a zero-argument callable and wrap its result or exception.

    Only `Exception` subclasses are captured; `KeyboardInterrupt` and friends
    propagate untouched.

    Params:
        function: Callable to run

    Returns:
        `Ok` with the returned value or `Err` with the raised exception
    """
    try:
        return Ok(function())
    except Exception as e:
        return Err(e)
