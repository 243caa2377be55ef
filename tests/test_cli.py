"""Tests for the bayesnet command line."""

import json
from pathlib import Path

import numpy as np
import pytest
from typer.testing import CliRunner

from bayesnet import load_variables, log_density
from bayesnet._cli.discover import load_graph_from_script
from bayesnet._cli.graph_render import format_log_density
from bayesnet._cli.main import app

EXAMPLES = Path(__file__).parent.parent / "examples"
BROADCASTED = str(EXAMPLES / "broadcasted_graph.py")
REPEATED = str(EXAMPLES / "repeated_observations.py")

runner = CliRunner()


def extract_json(output: str) -> dict:
    """Cut the JSON document out of the combined stdout/stderr output."""
    return json.loads(output[output.index("{") : output.rindex("}") + 1])


class TestSampleCommand:
    def test_json_report(self) -> None:
        result = runner.invoke(app, ["sample", BROADCASTED, "--dims", "2", "--seed", "42", "--json"])

        assert result.exit_code == 0, result.output
        report = extract_json(result.output)
        assert report["seed"] == 42
        assert report["dims"] == [2]
        assert np.shape(report["variables"]["a"]) == (3, 2)
        assert np.shape(report["variables"]["c"]) == (3, 4, 2)
        assert np.shape(report["log_density"]) == (2,)

    def test_seed_is_reproducible(self, tmp_path: Path) -> None:
        first, second = tmp_path / "first.toml", tmp_path / "second.toml"
        for path in (first, second):
            result = runner.invoke(app, ["sample", BROADCASTED, "--seed", "7", "-o", str(path)])
            assert result.exit_code == 0, result.output

        assert first.read_text() == second.read_text()

    def test_sequential_matches_recursive(self) -> None:
        args = ["sample", BROADCASTED, "--dims", "3", "--seed", "5", "--json"]
        recursive = runner.invoke(app, args)
        sequential = runner.invoke(app, [*args, "--sequential"])

        assert extract_json(recursive.output) == extract_json(sequential.output)

    def test_conditioned_sample(self, tmp_path: Path) -> None:
        conditioned = tmp_path / "given.toml"
        conditioned.write_text("c = [[0.0, 0.0, 0.0, 0.0], [1.0, 1.0, 1.0, 1.0], [2.0, 2.0, 2.0, 2.0]]\n")

        result = runner.invoke(app, ["sample", BROADCASTED, "--seed", "1", "-c", str(conditioned), "--json"])

        assert result.exit_code == 0, result.output
        variables = extract_json(result.output)["variables"]
        assert "a" not in variables
        assert variables["c"][2] == [2.0, 2.0, 2.0, 2.0]
        assert np.shape(variables["d"]) == (3, 4)
        assert extract_json(result.output)["log_density"] is None

    def test_table_output(self) -> None:
        result = runner.invoke(app, ["sample", REPEATED])

        assert result.exit_code == 0, result.output
        assert "scale" in result.output
        assert "Log-density:" in result.output


class TestLogdensityCommand:
    def test_matches_library(self, tmp_path: Path) -> None:
        samples = tmp_path / "samples.toml"
        result = runner.invoke(app, ["sample", BROADCASTED, "--dims", "2", "--seed", "3", "-o", str(samples)])
        assert result.exit_code == 0, result.output

        result = runner.invoke(app, ["logdensity", BROADCASTED, "-i", str(samples)])

        assert result.exit_code == 0, result.output
        factory = load_graph_from_script(Path(BROADCASTED))
        expected = log_density(factory(np.random.default_rng(0)), load_variables(samples))
        assert format_log_density(expected) in result.output

    def test_missing_variable_is_reported(self, tmp_path: Path) -> None:
        values = tmp_path / "values.toml"
        values.write_text("mu = 0.0\n")

        result = runner.invoke(app, ["logdensity", REPEATED, "-i", str(values)])

        assert result.exit_code == 1
        assert "No value bound" in result.output


class TestBijectorsCommand:
    def test_table(self) -> None:
        result = runner.invoke(app, ["bijectors", BROADCASTED, "--seed", "0"])

        assert result.exit_code == 0, result.output
        assert "BroadcastedBijector(KernelUniform, ndims=1)" in result.output
        assert "BroadcastedBijector(KernelNormal, ndims=2)" in result.output


class TestGraphCommand:
    def test_execution_order(self) -> None:
        result = runner.invoke(app, ["graph", REPEATED])

        assert result.exit_code == 0, result.output
        assert "DETERMINISTIC" in result.output
        assert "MODIFIER" in result.output
        assert "Total: 4 nodes" in result.output

    def test_dependents_of_node(self) -> None:
        result = runner.invoke(app, ["graph", BROADCASTED, "--node", "a"])

        assert result.exit_code == 0, result.output
        assert "Dependents of a" in result.output
        assert "Total: 2 nodes" in result.output

    def test_unknown_node(self) -> None:
        result = runner.invoke(app, ["graph", BROADCASTED, "--node", "zzz"])

        assert result.exit_code == 1
        assert "Node not found: zzz" in result.output

    def test_unknown_variable(self) -> None:
        result = runner.invoke(app, ["graph", REPEATED, "--var", "missing"])

        assert result.exit_code == 1
        assert "Could not find graph 'missing'" in result.output


class TestConfiguredGraph:
    @pytest.fixture
    def project(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
        (tmp_path / "pyproject.toml").write_text(
            f"""
[tool.bayesnet]
graph = {{ script = "{Path(BROADCASTED).as_posix()}", name = "make_graph" }}
seed = 11
dims = [4]
output = "out/samples.toml"
""",
        )
        monkeypatch.chdir(tmp_path)
        return tmp_path

    def test_sample_uses_configuration(self, project: Path) -> None:
        result = runner.invoke(app, ["sample"])

        assert result.exit_code == 0, result.output
        variables = load_variables(project / "out" / "samples.toml")
        assert variables["a"].shape == (3, 4)

    def test_command_line_overrides_configuration(self, project: Path) -> None:
        result = runner.invoke(app, ["sample", "--dims", "2", "-o", "cli.toml"])

        assert result.exit_code == 0, result.output
        assert load_variables(project / "cli.toml")["a"].shape == (3, 2)

    def test_no_graph_configured(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "pyproject.toml").write_text("[project]\nname = 'empty'\n")
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["graph"])

        assert result.exit_code == 1
        assert "No graph given" in result.output
