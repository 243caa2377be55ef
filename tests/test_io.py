"""Tests for exporting and loading variables records."""

import json
import tomllib
from pathlib import Path

import numpy as np
import pytest
from numpy.testing import assert_array_equal
from pydantic import ValidationError

from bayesnet import SampleReport, SimpleNode, export_variables, load_variables, log_density, sample


class TestExportVariables:
    def test_toml_document(self, tmp_path: Path) -> None:
        path = tmp_path / "out" / "samples.toml"
        export_variables({"a": np.float64(0.5), "b": np.arange(3.0), "c": np.ones((2, 2))}, path)

        with path.open("rb") as f:
            document = tomllib.load(f)
        assert document == {"a": 0.5, "b": [0.0, 1.0, 2.0], "c": [[1.0, 1.0], [1.0, 1.0]]}

    def test_json_document(self, tmp_path: Path) -> None:
        path = tmp_path / "samples.json"
        export_variables({"a": np.arange(2.0)}, path)
        assert json.loads(path.read_text()) == {"a": [0.0, 1.0]}


class TestLoadVariables:
    def test_lists_become_arrays(self, tmp_path: Path) -> None:
        path = tmp_path / "values.toml"
        path.write_text("a = 0.25\nb = [[1, 2], [3, 4]]\n")

        variables = load_variables(path)

        assert variables["a"] == 0.25
        assert isinstance(variables["b"], np.ndarray)
        assert_array_equal(variables["b"], [[1.0, 2.0], [3.0, 4.0]])

    def test_non_numeric_value_is_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "values.toml"
        path.write_text('a = "abc"\n')
        with pytest.raises(ValidationError):
            load_variables(path)

    def test_sampled_values_survive_a_file(self, simple_graph: SimpleNode, tmp_path: Path) -> None:
        variables = sample(simple_graph, 3)
        path = tmp_path / "samples.toml"
        export_variables(variables, path)
        loaded = load_variables(path)
        assert list(loaded) == list(variables)
        np.testing.assert_allclose(log_density(simple_graph, loaded), log_density(simple_graph, variables))


class TestSampleReport:
    def test_json_serialization(self) -> None:
        report = SampleReport(
            seed=1,
            dims=(2,),
            variables={"a": np.array([0.5, 0.25])},
            log_density=np.array([-1.0, -2.0]),
        )
        document = json.loads(report.model_dump_json())
        assert document == {
            "seed": 1,
            "dims": [2],
            "variables": {"a": [0.5, 0.25]},
            "log_density": [-1.0, -2.0],
        }

    def test_scalar_log_density(self) -> None:
        report = SampleReport(variables={"a": np.float64(1.0)}, log_density=np.float64(-3.5))
        document = json.loads(report.model_dump_json())
        assert document["log_density"] == -3.5
        assert document["seed"] is None
