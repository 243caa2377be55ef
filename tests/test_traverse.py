"""Tests for the depth-first traversal and value merging."""

from typing import Any

import numpy as np
import pytest

from bayesnet import (
    CyclicGraphError,
    DeterministicNode,
    KernelNormal,
    KernelUniform,
    Node,
    SimpleNode,
    merge_value,
    sample,
    traverse,
)


def record_visit(visits: list[str]) -> Any:
    def fn(node: Node, _variables: dict[str, Any]) -> str:
        visits.append(node.name)
        return node.name

    return fn


class TestTraverse:
    def test_dependencies_first_in_declared_order(self, simple_graph: SimpleNode) -> None:
        visits: list[str] = []
        record = traverse(record_visit(visits), simple_graph)
        assert visits == ["a", "b", "c", "d"]
        assert list(record) == ["a", "b", "c", "d"]

    def test_shared_node_visited_once(self, rng: np.random.Generator) -> None:
        # diamond: a -> b, a -> c, (b, c) -> d
        a = SimpleNode("a", rng, KernelUniform())
        b = SimpleNode("b", rng, KernelNormal, (a,))
        c = SimpleNode("c", rng, KernelNormal, (a,))
        d = SimpleNode("d", rng, KernelNormal, (b, c))
        visits: list[str] = []
        traverse(record_visit(visits), d)
        assert sorted(visits) == ["a", "b", "c", "d"]
        assert len(visits) == len(set(visits))

    def test_bound_node_is_not_visited(self, simple_graph: SimpleNode) -> None:
        visits: list[str] = []
        record = traverse(record_visit(visits), simple_graph, {"c": 0.5})
        # a only feeds c, so it is pruned with it
        assert visits == ["b", "d"]
        assert record["c"] == 0.5

    def test_bound_root_short_circuits(self, simple_graph: SimpleNode) -> None:
        visits: list[str] = []
        record = traverse(record_visit(visits), simple_graph, {"d": 1.0})
        assert visits == []
        assert record == {"d": 1.0}

    def test_caller_mapping_is_not_mutated(self, simple_graph: SimpleNode) -> None:
        given = {"a": 0.5}
        record = traverse(record_visit([]), simple_graph, given)
        assert given == {"a": 0.5}
        assert record is not given

    def test_none_results_are_not_bound(self, simple_graph: SimpleNode) -> None:
        visits: list[str] = []

        def fn(node: Node, _variables: dict[str, Any]) -> None:
            visits.append(node.name)

        record = traverse(fn, simple_graph)
        assert record == {}
        # visited set still prevents the shared node b from running twice
        assert visits == ["a", "b", "c", "d"]

    def test_extra_arguments_are_forwarded(self, simple_graph: SimpleNode) -> None:
        def fn(node: Node, _variables: dict[str, Any], scale: int) -> int:
            return scale * len(node.children)

        record = traverse(fn, simple_graph, None, 10)
        assert record == {"a": 0, "b": 0, "c": 20, "d": 20}

    def test_cycle_is_detected(self, rng: np.random.Generator) -> None:
        a = SimpleNode("a", rng, KernelUniform())
        b = SimpleNode("b", rng, KernelNormal, (a,))
        # nodes are immutable; force a cycle a -> b -> a
        object.__setattr__(a, "children", (b,))
        with pytest.raises(CyclicGraphError) as exc_info:
            traverse(record_visit([]), b)
        assert exc_info.value.cycle == ("b", "a", "b")

    def test_deep_chain_does_not_recurse(self, rng: np.random.Generator) -> None:
        node: Node = SimpleNode("x0", rng, KernelNormal())
        for i in range(1, 2000):
            node = DeterministicNode(f"x{i}", lambda v: v + 1, (node,))
        variables = sample(node)
        assert len(variables) == 2000
        assert variables["x1999"] == pytest.approx(variables["x0"] + 1999)


class TestMergeValue:
    def test_binds_new_name(self, simple_graph: SimpleNode) -> None:
        variables: dict[str, Any] = {}
        result = merge_value(variables, simple_graph, 1.0)
        assert result is variables
        assert variables == {"d": 1.0}

    def test_none_is_a_no_op(self, simple_graph: SimpleNode) -> None:
        variables: dict[str, Any] = {"a": 0.1}
        assert merge_value(variables, simple_graph, None) == {"a": 0.1}

    def test_existing_value_wins(self, simple_graph: SimpleNode) -> None:
        variables: dict[str, Any] = {"d": 1.0}
        merge_value(variables, simple_graph, 2.0)
        assert variables == {"d": 1.0}
