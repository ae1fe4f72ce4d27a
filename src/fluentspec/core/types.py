"""
Core type definitions for the fluentspec framework.

Type aliases shared by the action tree, the retry engine and the
configuration layer.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fluentspec.core.actions import ActionNode

Step = Callable[[Any], Any]

Delay = Callable[[Callable[[], None]], None]

BeforeHook = Callable[["ActionNode"], None]

AfterHook = Callable[["ActionNode", Any], None]

PreviousResult = Callable[[], Any]
