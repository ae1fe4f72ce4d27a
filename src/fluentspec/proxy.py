"""
Dynamic member interception.

Every action node is exposed through an `ActionHandle`. Accessing a member
the handle does not define synthesizes a child node and returns its handle,
so `subject.total.should.equal(5)` grows the tree one node per access.
Calling a handle only records the arguments on its node; execution is
deferred until realization.

Node kinds created on access:
    - `should` / `should_eventually` -> test case (assertion entry)
    - any member below an assertion entry -> assertion chain step
    - any other member -> group ("when doing ...")

The explicit builder form `handle.step(name, *args)` is equivalent to member
access followed by an optional call, and reaches member names the handle
itself defines (such as `step`).
"""

import logging
from typing import Any

from fluentspec.core.actions import (
    ActionHooks,
    ActionNode,
    ActionVariant,
    attach_child,
    create_root,
)
from fluentspec.expect import DEFAULT_ENGINE, AssertionEngine
from fluentspec.formatting import describe_instance, render_args

logger = logging.getLogger(__name__)

SHOULD = "should"
SHOULD_EVENTUALLY = "should_eventually"
ASSERTION_ENTRIES = (SHOULD, SHOULD_EVENTUALLY)

# Names probed by host tooling (debuggers, pytest collection) on arbitrary objects.
RESERVED_MEMBERS = frozenset({"inspect", "pytestmark", "getdoc", "trait_names"})


class MemberTrap:
    """
    Base class turning unknown attribute access into `resolve_member` calls.

    Private and dunder names, as well as `RESERVED_MEMBERS`, are never
    trapped. When `resolve_member` returns None the usual `AttributeError`
    is raised.
    """

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_") or name in RESERVED_MEMBERS:
            raise AttributeError(name)
        member = self.resolve_member(name)
        if member is None:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")
        return member

    def resolve_member(self, name: str) -> Any:
        """Resolve an unknown member; None means no interception applies."""
        return None


class ActionHandle(MemberTrap):
    """
    Chaining surface of a single action node.

    Params:
        node: Node this handle exposes
        engine: Assertion engine used by synthesized steps
    """

    def __init__(self, node: ActionNode, engine: AssertionEngine = DEFAULT_ENGINE):
        self._node = node
        self._engine = engine

    def __repr__(self) -> str:
        return f"<ActionHandle {self._node.label!r}>"

    def __call__(self, *args: Any) -> "ActionHandle":
        self._node.record_invocation(args)
        return self

    def resolve_member(self, name: str) -> "ActionHandle":
        node = self._node
        engine = self._engine
        if name in ASSERTION_ENTRIES:
            logger.debug("creating proxy property: %s", name)
            child = attach_child(node, name, engine.expect, ActionVariant.LEAF_CASE)
            return ActionHandle(child, engine)

        variant = (
            ActionVariant.CHAIN_STEP
            if node.is_descendant_of(*ASSERTION_ENTRIES)
            else ActionVariant.GROUP
        )
        logger.debug("creating proxy %s: %s", variant.value, name)

        def step(previous: Any) -> Any:
            return invoke_member(engine, previous, name, child.invocation_args)

        child = attach_child(node, name, step, variant)
        return ActionHandle(child, engine)

    def step(self, name: str, *args: Any) -> "ActionHandle":
        """
        Explicit form of `handle.<name>` / `handle.<name>(*args)`.

        Params:
            name: Member to resolve on the previous result
            *args: Call arguments; when omitted the member is read as a property

        Returns:
            Handle of the synthesized child
        """
        handle = self.resolve_member(name)
        if args:
            handle(*args)
        return handle


def invoke_member(engine: AssertionEngine, context: Any, name: str, args: tuple | None) -> Any:
    """
    Resolve `name` on `context`: call it with `args` when given, read it otherwise.

    Params:
        engine: Assertion engine supplying the checked lookup
        context: Result of the previous step
        name: Member name
        args: Captured call arguments, or None for property access

    Returns:
        Call result or property value
    """
    if args is not None:
        logger.debug("invoking %s.%s(%s)", describe_instance(context), name, render_args(args))
        return engine.get_checked_property(context, name, "function")(*args)
    return engine.get_checked_property(context, name, "property")


def handle_node(handle: ActionHandle) -> ActionNode:
    """Return the node behind a handle."""
    return handle._node


def subject(
    description: str,
    factory: Any,
    engine: AssertionEngine = DEFAULT_ENGINE,
    hooks: ActionHooks | None = None,
) -> ActionHandle:
    """
    Start a specification tree for the value produced by `factory`.

    Params:
        description: Label of the subject, used as the outermost group name
        factory: Zero-argument callable producing a fresh subject for each run
        engine: Assertion engine for the tree's assertion chains
        hooks: Execution listeners shared by the whole tree

    Returns:
        Handle of the root node
    """
    root = create_root(description, lambda _previous: factory(), hooks)
    return ActionHandle(root, engine)
