"""Tests for graph query and discovery functions used by the CLI."""

from pathlib import Path

import numpy as np
import pytest

from bayesnet import (
    DeterministicNode,
    KernelNormal,
    ModifierNode,
    NodeKind,
    SequentializedGraph,
    SimpleNode,
    SumLogdensityModifier,
    sequentialize,
)
from bayesnet._cli.discover import get_module_data_from_path, instantiate_graph, load_graph_from_script
from bayesnet._cli.graph_query import NodeInfo, find_dependents, list_nodes, summarize_variables

# --- Fixtures ---


@pytest.fixture
def mixed_graph(rng: np.random.Generator) -> ModifierNode:
    """mu -> y, sigma -> scale -> y, with y wrapped by a modifier."""
    mu = SimpleNode("mu", rng, KernelNormal())
    sigma = SimpleNode("sigma", rng, KernelNormal())
    scale = DeterministicNode("scale", lambda s: 1 + s**2, (sigma,))
    y = SimpleNode("y", rng, KernelNormal, (mu, scale))
    return ModifierNode(y, rng, SumLogdensityModifier(axes=(0,)))


# --- list_nodes ---


class TestListNodes:
    def test_execution_order_and_kinds(self, mixed_graph: ModifierNode) -> None:
        nodes = list_nodes(mixed_graph)

        assert [n.name for n in nodes] == ["mu", "sigma", "scale", "y"]
        assert [n.kind for n in nodes] == [NodeKind.LEAF, NodeKind.LEAF, NodeKind.DETERMINISTIC, NodeKind.MODIFIER]

    def test_dependencies_and_dependents(self, mixed_graph: ModifierNode) -> None:
        info = {n.name: n for n in list_nodes(mixed_graph)}

        assert info["y"] == NodeInfo(
            name="y",
            kind=NodeKind.MODIFIER,
            event_shape=(),
            dependencies=("mu", "scale"),
            dependents=(),
        )
        assert info["sigma"].dependents == ("scale",)

    def test_accepts_sequentialized_graph(self, mixed_graph: ModifierNode) -> None:
        assert list_nodes(sequentialize(mixed_graph)) == list_nodes(mixed_graph)

    def test_dependents_restricted_to_subgraph(self, mixed_graph: ModifierNode) -> None:
        graph = sequentialize(mixed_graph).without("y")
        info = {n.name: n for n in list_nodes(graph)}
        assert info["mu"].dependents == ()


# --- find_dependents ---


class TestFindDependents:
    def test_from_root_node(self, mixed_graph: ModifierNode) -> None:
        assert [n.name for n in find_dependents(mixed_graph, "sigma")] == ["scale", "y"]

    def test_from_sequentialized_graph(self, mixed_graph: ModifierNode) -> None:
        graph = sequentialize(mixed_graph)
        assert [n.name for n in find_dependents(graph, "sigma")] == ["scale", "y"]

    def test_root_has_no_dependents(self, mixed_graph: ModifierNode) -> None:
        assert find_dependents(mixed_graph, "y") == []

    def test_unknown_node(self, mixed_graph: ModifierNode) -> None:
        with pytest.raises(KeyError, match="Node not found"):
            find_dependents(mixed_graph, "nonexistent")


# --- summarize_variables ---


def test_summarize_variables() -> None:
    summaries = summarize_variables({"a": 2.0, "b": np.array([[1.0, 3.0]])})

    assert [s.name for s in summaries] == ["a", "b"]
    assert summaries[0].shape == ()
    assert summaries[0].mean == 2.0
    assert summaries[1].shape == (1, 2)
    assert summaries[1].mean == 2.0
    assert summaries[1].std == 1.0


# --- discovery ---


class TestDiscovery:
    def test_module_data_for_plain_script(self, tmp_path: Path) -> None:
        script = tmp_path / "model.py"
        script.write_text("")

        data = get_module_data_from_path(script)

        assert data.module_import_str == "model"
        assert data.extra_sys_path == tmp_path.resolve()

    def test_module_data_inside_package(self, tmp_path: Path) -> None:
        package = tmp_path / "pkg"
        package.mkdir()
        (package / "__init__.py").write_text("")
        script = package / "graphs.py"
        script.write_text("")

        assert get_module_data_from_path(script).module_import_str == "pkg.graphs"

    def test_infers_single_root_node(self, tmp_path: Path) -> None:
        script = tmp_path / "single_root_graph.py"
        script.write_text(
            """
import numpy as np
from bayesnet import KernelNormal, SimpleNode

rng = np.random.default_rng(0)
location = SimpleNode("location", rng, KernelNormal())
observation = SimpleNode("observation", rng, KernelNormal, (location,))
""",
        )

        graph = load_graph_from_script(script)

        assert isinstance(graph, SimpleNode)
        assert graph.name == "observation"

    def test_several_roots_are_ambiguous(self, tmp_path: Path) -> None:
        script = tmp_path / "two_roots_graph.py"
        script.write_text(
            """
import numpy as np
from bayesnet import KernelNormal, SimpleNode

rng = np.random.default_rng(0)
first = SimpleNode("first", rng, KernelNormal())
second = SimpleNode("second", rng, KernelNormal())
""",
        )

        with pytest.raises(ValueError, match="several root nodes"):
            load_graph_from_script(script)

    def test_named_variable_must_be_graph_like(self, tmp_path: Path) -> None:
        script = tmp_path / "not_a_graph.py"
        script.write_text("value = 42\n")

        with pytest.raises(TypeError, match="not a Node"):
            load_graph_from_script(script, "value")

    def test_instantiate_factory_with_seed(self) -> None:
        def factory(rng: np.random.Generator) -> SimpleNode:
            return SimpleNode("x", rng, KernelNormal())

        first = instantiate_graph(factory, 3)
        second = instantiate_graph(factory, 3)

        assert first.sample({}) == second.sample({})

    def test_instantiate_ready_graph(self, mixed_graph: ModifierNode) -> None:
        assert instantiate_graph(mixed_graph) is mixed_graph
        graph = sequentialize(mixed_graph)
        assert instantiate_graph(graph) is graph

    def test_factory_must_return_graph(self) -> None:
        with pytest.raises(TypeError, match="expected a Node or a SequentializedGraph"):
            instantiate_graph(lambda _rng: 42)

    def test_empty_sequentialized_graph_is_graph_like(self) -> None:
        assert isinstance(instantiate_graph(SequentializedGraph()), SequentializedGraph)
