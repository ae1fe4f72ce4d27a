"""
Action tree model for the fluentspec framework.

An action node is one deferred step of a specification: a label, a
one-argument function turning the previous node's result into this node's
result, and an ordered list of children. The variant decides how the node is
realized (group block, test case, or immediate assertion-chain step).

Nodes are only created through `create_root` and `attach_child`. Parent
pointers are set once at construction, so ancestry walks always terminate at
the single root.
"""

import logging
import time
from enum import Enum
from typing import Any

from fluentspec.core.types import AfterHook, BeforeHook, Step
from fluentspec.exceptions import InvocationError
from fluentspec.formatting import describe_instance, render_args

logger = logging.getLogger(__name__)


class ActionVariant(Enum):
    """Closed set of node kinds; fixed at construction."""

    GROUP = "group"
    LEAF_CASE = "leaf_case"
    CHAIN_STEP = "chain_step"


class ActionHooks:
    """
    Before/after execution listeners shared by every node of a tree.

    Instrumentation (timing, logging) subscribes here instead of wrapping
    steps, so the node model itself stays free of side effects.
    """

    def __init__(self):
        self.before: list[BeforeHook] = []
        self.after: list[AfterHook] = []

    def subscribe(
        self, before: BeforeHook | None = None, after: AfterHook | None = None
    ) -> None:
        """
        Register optional before/after listeners.

        Params:
            before: Called with the node right before its step runs
            after: Called with the node and its result once the step returned
        """
        if before is not None:
            self.before.append(before)
        if after is not None:
            self.after.append(after)

    def notify_before(self, node: "ActionNode") -> None:
        for listener in self.before:
            listener(node)

    def notify_after(self, node: "ActionNode", result: Any) -> None:
        for listener in self.after:
            listener(node, result)


class ActionNode:
    """
    One node of the action tree.

    Params:
        parent: Owning node, or None for the root
        description: Human-readable label (member name or subject description)
        step: Function of the previous result producing this node's result
        variant: How this node is realized
        hooks: Execution listeners; inherited from the parent when omitted
    """

    def __init__(
        self,
        parent: "ActionNode | None",
        description: str,
        step: Step,
        variant: ActionVariant,
        hooks: ActionHooks | None = None,
    ):
        self._parent = parent
        self._variant = variant
        self.description = description
        self.step = step
        self.children: list[ActionNode] = []
        self.invocation_args: tuple | None = None
        if hooks is None:
            hooks = parent.hooks if parent is not None else ActionHooks()
        self.hooks = hooks

    @property
    def parent(self) -> "ActionNode | None":
        return self._parent

    @property
    def variant(self) -> ActionVariant:
        return self._variant

    @property
    def is_root(self) -> bool:
        return self._parent is None

    @property
    def invoked(self) -> bool:
        """Whether the node's handle was called (as opposed to only accessed)."""
        return self.invocation_args is not None

    @property
    def label(self) -> str:
        """Description including the rendered call arguments, e.g. `add(1,"a")`."""
        if not self.invoked:
            return self.description
        return f"{self.description}({render_args(self.invocation_args)})"

    def record_invocation(self, args: tuple) -> None:
        """
        Store the arguments of the call that followed this node's access.

        Params:
            args: Positional arguments supplied to the handle

        Raises:
            InvocationError: If the node already absorbed a call
        """
        if self.invoked:
            raise InvocationError(self.description, self.invocation_args, args)
        self.invocation_args = tuple(args)

    def is_descendant_of(self, *descriptions: str) -> bool:
        """Check whether this node or any ancestor carries one of the descriptions."""
        return any(a.description in descriptions for a in ancestors(self))

    def __repr__(self) -> str:
        return f"ActionNode({self._variant.value}, {self.label!r}, children={len(self.children)})"


def create_root(description: str, step: Step, hooks: ActionHooks | None = None) -> ActionNode:
    """
    Create the root of a new action tree.

    The root is always a group.

    Params:
        description: Label of the subject under specification
        step: Function producing the subject (receives None)
        hooks: Optional listeners shared by the whole tree

    Returns:
        The new root node
    """
    return ActionNode(None, description, step, ActionVariant.GROUP, hooks=hooks)


def attach_child(
    parent: ActionNode, description: str, step: Step, variant: ActionVariant
) -> ActionNode:
    """
    Create a node and append it to `parent.children`.

    Params:
        parent: Owning node
        description: Label of the new node
        step: Function of the parent's result
        variant: Realization kind of the new node

    Returns:
        The attached child
    """
    child = ActionNode(parent, description, step, variant)
    parent.children.append(child)
    return child


def ancestors(node: ActionNode) -> list[ActionNode]:
    """
    Return `[node, node.parent, ..., root]`, nearest first.

    Params:
        node: Starting node

    Returns:
        Ancestor chain including the node itself
    """
    chain = []
    current: ActionNode | None = node
    while current is not None:
        chain.append(current)
        current = current.parent
    return chain


def execute(node: ActionNode, previous_result: Any) -> Any:
    """
    Run a node's step against the previous result.

    Listeners in `node.hooks` are notified before the step runs and after it
    returns; errors raised by the step propagate and skip the after listeners.

    Params:
        node: Node to execute
        previous_result: Result of the parent's step

    Returns:
        Result of the node's step
    """
    node.hooks.notify_before(node)
    result = node.step(previous_result)
    node.hooks.notify_after(node, result)
    return result


def log_execution(hooks: ActionHooks, level: int = logging.DEBUG) -> None:
    """
    Subscribe a listener pair logging every step execution with its duration.

    Params:
        hooks: Tree listeners to subscribe to
        level: Logging level of the emitted records
    """
    started: dict[int, float] = {}

    def before(node: ActionNode) -> None:
        started[id(node)] = time.perf_counter()
        logger.log(level, "executing action: %s", node.label)

    def after(node: ActionNode, result: Any) -> None:
        elapsed = time.perf_counter() - started.pop(id(node), time.perf_counter())
        logger.log(
            level, "action executed: %s -> %s (%.3fs)", node.label, describe_instance(result), elapsed
        )

    hooks.subscribe(before=before, after=after)
