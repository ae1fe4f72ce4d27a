"""
Retry engine for eventual assertions.

Assertion chain steps run through `RetryEngine.run`. A step that fails with
an assertion failure below a `should_eventually` entry (or below any `should`
entry when eventual behaviour is forced) is retried: each attempt hands a
callback to the configured delay function, and the callback recomputes the
whole ancestor chain root-first before running the step again. Retries are
therefore only meaningful when upstream state changes between attempts, e.g.
a value converging asynchronously elsewhere.

Failures other than assertion failures are never retried.
"""

import logging
from enum import Enum
from typing import Any

from fluentspec.core.actions import ActionNode, ancestors, execute
from fluentspec.core.outcome import Err, Outcome, capture
from fluentspec.core.types import Delay
from fluentspec.exceptions import ExpectationFailedError, FluentSpecError
from fluentspec.proxy import SHOULD, SHOULD_EVENTUALLY
from fluentspec.settings import DEFAULT_MAX_RETRIES, Settings, immediate_delay

logger = logging.getLogger(__name__)


class FailureKind(Enum):
    """Classification of a failed step execution."""

    ASSERTION = "assertion"
    OTHER = "other"


def classify_failure(error: BaseException) -> FailureKind:
    """Only the assertion engine's expectation failures count as assertion failures."""
    if isinstance(error, ExpectationFailedError):
        return FailureKind.ASSERTION
    return FailureKind.OTHER


class RetryEngine:
    """
    Executes assertion chain steps with bounded retries.

    Params:
        max_retries: Retry attempts after the first failure
        delay: Function receiving the retry callback; must call it at least once
            and let its exceptions propagate
        eventual_by_default: Treat every `should` chain like `should_eventually`
    """

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        delay: Delay = immediate_delay,
        eventual_by_default: bool = False,
    ):
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.max_retries = max_retries
        self.delay = delay
        self.eventual_by_default = eventual_by_default

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryEngine":
        return cls(
            max_retries=settings.max_retries,
            delay=settings.resolve_delay(),
            eventual_by_default=settings.should_means_should_eventually,
        )

    def is_eventual(self, node: ActionNode) -> bool:
        """Whether assertion failures of `node` may be retried."""
        if node.is_descendant_of(SHOULD_EVENTUALLY):
            return True
        return self.eventual_by_default and node.is_descendant_of(SHOULD)

    def run(self, node: ActionNode, previous_result: Any) -> Any:
        """
        Execute `node` against `previous_result`, retrying when eligible.

        Params:
            node: Assertion chain step to execute
            previous_result: Result of the parent step

        Returns:
            Result of the first successful execution

        Raises:
            ExpectationFailedError: Final assertion failure, with an
                `expected: ...   actual: ...` message
            Exception: Any other failure raised by the step or by the
                re-executed ancestors
        """
        outcome = capture(lambda: execute(node, previous_result))
        if (
            not outcome.is_ok()
            and classify_failure(outcome.error) is FailureKind.ASSERTION
            and self.is_eventual(node)
        ):
            first_error = outcome.error
            outcome = self._retry(node, first_error)
            if (
                not outcome.is_ok()
                and classify_failure(outcome.error) is FailureKind.OTHER
                and outcome.error.__cause__ is None
            ):
                # keep the assertion failure the retries were chasing
                raise outcome.error from first_error
        return _finalize(outcome).unwrap()

    def _retry(self, node: ActionNode, first_error: Exception) -> Outcome:
        outcome: Outcome = Err(first_error)
        for attempt in range(1, self.max_retries + 1):
            logger.info("Assertion failed; retrying... %d/%d", attempt, self.max_retries)
            outcome = capture(lambda: self._attempt(node))
            if outcome.is_ok():
                logger.info("Assertion passed on retry %d/%d: %s", attempt, self.max_retries, node.label)
                return outcome
            if classify_failure(outcome.error) is FailureKind.OTHER:
                logger.info("Retry %d/%d failed with a non-assertion error; giving up", attempt, self.max_retries)
                return outcome
        return outcome

    def _attempt(self, node: ActionNode) -> Any:
        results = []
        self.delay(lambda: results.append(rerun_from_root(node)))
        if not results:
            raise FluentSpecError("delay function returned without running the retry callback")
        return results[-1]


def rerun_from_root(node: ActionNode) -> Any:
    """
    Recompute the node's previous result from the root, then execute the node.

    Each ancestor runs through its own `execute`, root first, starting from None.

    Params:
        node: Node to execute again

    Returns:
        Fresh result of the node's step
    """
    previous = None
    if not node.is_root:
        for ancestor in reversed(ancestors(node.parent)):
            previous = execute(ancestor, previous)
    return execute(node, previous)


def _finalize(outcome: Outcome) -> Outcome:
    if not outcome.is_ok() and isinstance(outcome.error, ExpectationFailedError):
        error = outcome.error
        return Err(error.reformatted().with_traceback(error.__traceback__))
    return outcome
