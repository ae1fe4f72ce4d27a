"""
fluentspec - fluent, deferred specifications with eventual assertions

Chain member access and calls on a subject handle to build a tree of
deferred actions, then realize the tree into nested groups and cases of a
spec runner. Assertion chains under `should_eventually` are retried from the
root until they pass or the retry budget runs out.
"""

from importlib.metadata import version

from fluentspec.core.actions import ActionHooks, ActionNode, ActionVariant, log_execution
from fluentspec.exceptions import (
    ConfigurationError,
    ExpectationFailedError,
    FluentSpecError,
    MissingMemberError,
)
from fluentspec.expect import expect
from fluentspec.proxy import ActionHandle, subject
from fluentspec.realization import Realizer, realize
from fluentspec.retry import RetryEngine
from fluentspec.runner import SuiteRunner
from fluentspec.settings import Settings

__version__ = version("fluentspec")

__all__ = [
    "__version__",
    "subject",
    "realize",
    "expect",
    "ActionHandle",
    "ActionHooks",
    "ActionNode",
    "ActionVariant",
    "Realizer",
    "RetryEngine",
    "Settings",
    "SuiteRunner",
    "log_execution",
    "FluentSpecError",
    "ExpectationFailedError",
    "MissingMemberError",
    "ConfigurationError",
]
