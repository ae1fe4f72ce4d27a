"""
Core fluentspec components.

This package provides the action tree model, its execution hooks, step
outcome variants and shared type definitions.
"""

from fluentspec.core.actions import (
    ActionHooks,
    ActionNode,
    ActionVariant,
    ancestors,
    attach_child,
    create_root,
    execute,
    log_execution,
)
from fluentspec.core.outcome import Err, Ok, Outcome, capture
from fluentspec.core.types import AfterHook, BeforeHook, Delay, PreviousResult, Step

__all__ = [
    "ActionHooks",
    "ActionNode",
    "ActionVariant",
    "ancestors",
    "attach_child",
    "create_root",
    "execute",
    "log_execution",
    "Ok",
    "Err",
    "Outcome",
    "capture",
    "Step",
    "Delay",
    "BeforeHook",
    "AfterHook",
    "PreviousResult",
]
