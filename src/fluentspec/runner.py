"""
Spec-runner collaborator.

Realization talks to a runner through three registration primitives:
`group` (body executed immediately to register nested content), `before`
(setup hook run once before the cases of the current group) and `case`
(body run when the suite executes). `SuiteRunner` implements them in memory
and can either run the whole suite, collecting a report, or hand out the
registered cases one by one (e.g. for `pytest.mark.parametrize`).
"""

import functools
import logging
from collections.abc import Callable, Iterator
from typing import Protocol

from attrs import Factory, define, frozen

logger = logging.getLogger(__name__)

Body = Callable[[], None]


class SpecRunner(Protocol):
    """Registration primitives used by the realization engine; all of them nest."""

    def group(self, name: str, body: Body) -> None: ...

    def before(self, hook: Body) -> None: ...

    def case(self, name: str, body: Body) -> None: ...


@define
class SuiteCase:
    name: str
    body: Body


@define
class SuiteGroup:
    name: str
    hooks: list[Body] = Factory(list)
    entries: list["SuiteGroup | SuiteCase"] = Factory(list)
    prepared: bool = False
    hook_error: Exception | None = None


@frozen
class CaseReport:
    """Outcome of one case; `error` is None when it passed."""

    path: tuple[str, ...]
    error: Exception | None = None

    @property
    def passed(self) -> bool:
        return self.error is None

    @property
    def title(self) -> str:
        return " ".join(self.path)


@frozen
class SuiteReport:
    cases: tuple[CaseReport, ...]

    @property
    def passed(self) -> bool:
        return all(case.passed for case in self.cases)

    @property
    def failures(self) -> list[CaseReport]:
        return [case for case in self.cases if not case.passed]

    @property
    def titles(self) -> list[str]:
        return [case.title for case in self.cases]


class SuiteRunner:
    """
    In-memory `SpecRunner`.

    Before hooks of a group run lazily, once, right before the first case
    below that group. When a hook raises, every case below the group fails
    with that error without running.

    Params:
        name: Optional name of the outermost group, prefixed to case titles
    """

    def __init__(self, name: str = ""):
        self.root = SuiteGroup(name)
        self._stack = [self.root]

    @property
    def _current(self) -> SuiteGroup:
        return self._stack[-1]

    def group(self, name: str, body: Body) -> None:
        logger.debug("describe: %s", name)
        group = SuiteGroup(name)
        self._current.entries.append(group)
        self._stack.append(group)
        try:
            body()
        finally:
            self._stack.pop()

    def before(self, hook: Body) -> None:
        logger.debug("before: %s", self._current.name)
        self._current.hooks.append(hook)

    def case(self, name: str, body: Body) -> None:
        logger.debug("it: %s", name)
        self._current.entries.append(SuiteCase(name, body))

    def iter_cases(self) -> Iterator[tuple[str, Body]]:
        """
        Yield `(title, run)` pairs for every registered case, in registration order.

        Calling `run` executes the pending before hooks of the enclosing
        groups, then the case body. Hook state is reset on each call of this
        method.
        """
        for path, run_case in self._iter_paths():
            yield " ".join(path), run_case

    def run(self) -> SuiteReport:
        """Run every case and collect the outcomes."""
        reports = []
        for path, run_case in self._iter_paths():
            try:
                run_case()
            except Exception as e:
                logger.debug("case failed: %s: %s", " ".join(path), e)
                reports.append(CaseReport(path, e))
            else:
                reports.append(CaseReport(path))
        return SuiteReport(tuple(reports))

    def _iter_paths(self) -> Iterator[tuple[tuple[str, ...], Body]]:
        self._reset(self.root)
        for path, case, lineage in self._walk(self.root, (), ()):
            yield path, functools.partial(self._run_case, lineage, case)

    def _walk(self, group: SuiteGroup, path: tuple, lineage: tuple):
        if group.name:
            path = path + (group.name,)
        lineage = lineage + (group,)
        for entry in group.entries:
            if isinstance(entry, SuiteGroup):
                yield from self._walk(entry, path, lineage)
            else:
                yield path + (entry.name,), entry, lineage

    def _run_case(self, lineage: tuple[SuiteGroup, ...], case: SuiteCase) -> None:
        for group in lineage:
            self._prepare(group)
        case.body()

    def _prepare(self, group: SuiteGroup) -> None:
        if group.prepared:
            if group.hook_error is not None:
                raise group.hook_error
            return
        group.prepared = True
        for hook in group.hooks:
            try:
                hook()
            except Exception as e:
                logger.error("before hook of '%s' failed: %s", group.name, e)
                group.hook_error = e
                raise

    def _reset(self, group: SuiteGroup) -> None:
        group.prepared = False
        group.hook_error = None
        for entry in group.entries:
            if isinstance(entry, SuiteGroup):
                self._reset(entry)
