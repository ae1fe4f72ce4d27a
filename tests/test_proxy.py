"""
Tests for dynamic member interception.

Focus Areas:
1. Node kinds synthesized per member access
2. Call capture on the accessed node (property-then-call is one node)
3. Reserved names and the explicit builder form
4. Step behaviour of synthesized nodes
"""

import pytest

from fluentspec.core.actions import ActionVariant, ancestors, execute
from fluentspec.exceptions import InvocationError, MissingMemberError
from fluentspec.expect import Assertion, expect
from fluentspec.proxy import ActionHandle, MemberTrap, handle_node, subject


class Counter:
    def __init__(self, start=0):
        self.count = start

    def add(self, amount):
        self.count += amount
        return self

    def reset(self):
        self.count = 0
        return self


def collect(node):
    nodes = [node]
    for child in node.children:
        nodes.extend(collect(child))
    return nodes


class TestTreeGrowth:
    """Tests for node synthesis through attribute access."""

    def test_subject_returns_root_handle(self):
        handle = subject("a counter", Counter)
        root = handle_node(handle)
        assert isinstance(handle, ActionHandle)
        assert root.is_root
        assert root.variant is ActionVariant.GROUP
        assert root.description == "a counter"

    def test_plain_access_creates_groups_only(self):
        handle = subject("a counter", Counter)
        handle.add(1).add(2).count
        variants = {node.variant for node in collect(handle_node(handle))}
        assert variants == {ActionVariant.GROUP}

    def test_should_creates_leaf_case(self):
        handle = subject("a counter", Counter)
        should = handle.count.should
        node = handle_node(should)
        assert node.variant is ActionVariant.LEAF_CASE
        assert node.description == "should"

    def test_should_eventually_creates_leaf_case(self):
        node = handle_node(subject("a counter", Counter).should_eventually)
        assert node.variant is ActionVariant.LEAF_CASE
        assert node.description == "should_eventually"

    def test_members_below_should_are_chain_steps(self):
        handle = subject("a counter", Counter)
        equal = handle.count.should.be.equal
        chain = ancestors(handle_node(equal))
        assert [n.variant for n in chain] == [
            ActionVariant.CHAIN_STEP,
            ActionVariant.CHAIN_STEP,
            ActionVariant.LEAF_CASE,
            ActionVariant.GROUP,
            ActionVariant.GROUP,
        ]
        assert [n.description for n in reversed(chain)] == [
            "a counter",
            "count",
            "should",
            "be",
            "equal",
        ]

    def test_each_access_appends_a_child(self):
        handle = subject("a counter", Counter)
        handle.count.should.equal(0)
        handle.count.should.be.above(-1)
        root = handle_node(handle)
        assert [c.description for c in root.children] == ["count", "count"]


class TestCallCapture:
    """Tests for __call__ recording arguments on the accessed node."""

    def test_call_records_arguments_without_executing(self):
        created = []

        def factory():
            created.append(True)
            return Counter()

        handle = subject("a counter", factory)
        added = handle.add(5)
        node = handle_node(added)
        assert node.invocation_args == (5,)
        assert created == []

    def test_property_then_call_is_one_node(self):
        handle = subject("a counter", Counter)
        handle.add(1)
        root = handle_node(handle)
        assert len(root.children) == 1
        assert root.children[0].children == []

    def test_call_returns_same_handle(self):
        handle = subject("a counter", Counter)
        add = handle.add
        assert add(1) is add

    def test_calling_twice_is_rejected(self):
        add = subject("a counter", Counter).add
        add(1)
        with pytest.raises(InvocationError):
            add(2)


class TestReservedAndExplicit:
    """Tests for reserved names and the explicit builder API."""

    @pytest.mark.parametrize("name", ["_private", "__wrapped__", "inspect", "pytestmark"])
    def test_reserved_names_are_not_trapped(self, name):
        handle = subject("a counter", Counter)
        with pytest.raises(AttributeError):
            getattr(handle, name)
        assert handle_node(handle).children == []

    def test_hasattr_on_reserved_name(self):
        handle = subject("a counter", Counter)
        assert not hasattr(handle, "__test__")

    def test_step_without_args_is_property_access(self):
        handle = subject("a counter", Counter)
        node = handle_node(handle.step("count"))
        assert node.description == "count"
        assert not node.invoked

    def test_step_with_args_records_call(self):
        handle = subject("a counter", Counter)
        node = handle_node(handle.step("add", 3))
        assert node.invocation_args == (3,)

    def test_step_reaches_names_defined_on_handle(self):
        handle = subject("a stepper", Counter)
        node = handle_node(handle.step("step"))
        assert node.description == "step"

    def test_member_trap_without_resolution(self):
        class Plain(MemberTrap):
            pass

        with pytest.raises(AttributeError, match="'Plain' object has no attribute 'anything'"):
            Plain().anything


class TestSynthesizedSteps:
    """Tests for the steps of synthesized nodes."""

    def test_group_step_calls_method_with_captured_args(self):
        node = handle_node(subject("a counter", Counter).add(4))
        result = execute(node, Counter(1))
        assert result.count == 5

    def test_group_step_reads_property(self):
        node = handle_node(subject("a counter", Counter).count)
        assert execute(node, Counter(7)) == 7

    def test_zero_argument_call_invokes_method(self):
        node = handle_node(subject("a counter", Counter).reset())
        assert execute(node, Counter(7)).count == 0

    def test_leaf_case_step_produces_assertion(self):
        node = handle_node(subject("a counter", Counter).should)
        assertion = execute(node, 3)
        assert isinstance(assertion, Assertion)
        assert assertion.subject == 3

    def test_chain_step_resolves_on_assertion(self):
        handle = subject("a counter", Counter)
        equal_node = handle_node(handle.should.equal(3))
        assert isinstance(execute(equal_node, expect(3)), Assertion)

    def test_missing_member_fails_at_execution(self):
        node = handle_node(subject("a counter", Counter).missing)
        with pytest.raises(MissingMemberError):
            execute(node, Counter())

    def test_property_access_of_method_is_wrong_kind(self):
        node = handle_node(subject("a counter", Counter).reset)
        with pytest.raises(MissingMemberError, match="is a function"):
            execute(node, Counter())
