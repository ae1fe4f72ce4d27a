"""
Realization of action trees into spec-runner registrations.

Walks a built tree once and registers it with a `SpecRunner`:

    - group nodes become named groups whose before hook executes the node's
      step and stores its result for the children
    - leaf-case nodes become cases; the body executes the node and realizes
      its children synchronously
    - chain-step nodes execute right away (inside the enclosing case body)
      through the retry engine, then realize their children

Results thread down the tree through zero-argument "previous result"
callables, so nothing executes until the runner drives the registered hooks
and cases.
"""

import logging
from collections.abc import Callable
from typing import Any

from fluentspec.core.actions import ActionNode, ActionVariant, execute
from fluentspec.core.types import PreviousResult
from fluentspec.formatting import render_args
from fluentspec.proxy import ActionHandle, handle_node
from fluentspec.retry import RetryEngine
from fluentspec.runner import SpecRunner, SuiteRunner
from fluentspec.settings import Settings

logger = logging.getLogger(__name__)


def _no_previous_result() -> None:
    return None


def case_title(node: ActionNode) -> str:
    """
    Title of the case realized for `node`.

    Joins the description (and rendered call arguments) of every node along
    the single-child spine starting at `node`, stopping at the first node
    with no children or with several.

    Params:
        node: Leaf-case node

    Returns:
        Title such as `should have property "x" that equals 5`
    """
    chunks = []
    current = node
    while True:
        chunks.append(current.description)
        if current.invocation_args:
            chunks.append(render_args(current.invocation_args))
        if len(current.children) != 1:
            break
        current = current.children[0]
    return " ".join(chunks)


def group_title(node: ActionNode) -> str:
    """Title of the group realized for `node`, the root included."""
    return f"when doing {node.label}"


class Realizer:
    """
    Registers an action tree with a spec runner.

    Params:
        runner: Spec runner receiving groups, hooks and cases
        retry_engine: Engine executing chain steps
    """

    def __init__(self, runner: SpecRunner, retry_engine: RetryEngine | None = None):
        self.runner = runner
        self.retry_engine = retry_engine if retry_engine is not None else RetryEngine()

    def realize(self, node: ActionNode, previous: PreviousResult = _no_previous_result) -> None:
        """
        Realize `node` and its subtree.

        Params:
            node: Node to realize
            previous: Returns the parent's result once it has been computed
        """
        _REALIZERS[node.variant](self, node, previous)

    def _realize_children(self, node: ActionNode, result: PreviousResult) -> None:
        for child in node.children:
            self.realize(child, result)

    def _realize_group(self, node: ActionNode, previous: PreviousResult) -> None:
        title = group_title(node)
        logger.debug("registering group: %s", title)

        def body() -> None:
            state: dict[str, Any] = {}

            def before() -> None:
                state["result"] = execute(node, previous())

            self.runner.before(before)
            self._realize_children(node, lambda: state["result"])

        self.runner.group(title, body)

    def _realize_case(self, node: ActionNode, previous: PreviousResult) -> None:
        title = case_title(node)
        logger.debug("registering case: %s", title)

        def body() -> None:
            result = execute(node, previous())
            self._realize_children(node, lambda: result)

        self.runner.case(title, body)

    def _realize_chain_step(self, node: ActionNode, previous: PreviousResult) -> None:
        result = self.retry_engine.run(node, previous())
        self._realize_children(node, lambda: result)


_REALIZERS: dict[ActionVariant, Callable[[Realizer, ActionNode, PreviousResult], None]] = {
    ActionVariant.GROUP: Realizer._realize_group,
    ActionVariant.LEAF_CASE: Realizer._realize_case,
    ActionVariant.CHAIN_STEP: Realizer._realize_chain_step,
}


def realize(
    target: ActionHandle | ActionNode,
    runner: SpecRunner | None = None,
    settings: Settings | None = None,
    retry_engine: RetryEngine | None = None,
) -> SpecRunner:
    """
    Realize a specification tree.

    Params:
        target: Any handle or node of the tree; realization starts at its root
        runner: Spec runner to register with (a new `SuiteRunner` by default)
        settings: Retry configuration (read from the environment by default)
        retry_engine: Explicit retry engine; takes precedence over `settings`

    Returns:
        The runner holding the registrations
    """
    node = handle_node(target) if isinstance(target, ActionHandle) else target
    while not node.is_root:
        node = node.parent
    if retry_engine is None:
        if settings is None:
            settings = Settings.from_env()
        retry_engine = RetryEngine.from_settings(settings)
    if runner is None:
        runner = SuiteRunner()
    Realizer(runner, retry_engine).realize(node)
    return runner
