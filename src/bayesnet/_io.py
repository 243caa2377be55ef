"""Import and export of variables records (TOML or JSON)."""

from __future__ import annotations

import json
import logging
import tomllib
from typing import TYPE_CHECKING, Any

import numpy as np
import tomli_w
from pydantic import BaseModel, ConfigDict, TypeAdapter, field_serializer

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

logger = logging.getLogger(__name__)

type NumericValue = float | list[NumericValue]

_variables_adapter: TypeAdapter[dict[str, NumericValue]] = TypeAdapter(dict[str, NumericValue])


def to_builtin(value: Any) -> Any:
    """Convert numpy scalars and arrays to floats and nested lists."""
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    return value


class SampleReport(BaseModel):
    """Document describing one sampling run, as printed by the CLI."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    seed: int | None = None
    dims: tuple[int, ...] = ()
    variables: dict[str, Any]
    log_density: Any = None

    @field_serializer("variables")
    def serialize_variables(self, variables: dict[str, Any]) -> dict[str, Any]:
        return {name: to_builtin(value) for name, value in variables.items()}

    @field_serializer("log_density")
    def serialize_log_density(self, value: Any) -> Any:
        return to_builtin(value)


def export_variables(variables: Mapping[str, Any], path: Path) -> None:
    """Write `variables` to a TOML file, or to JSON if the suffix is `.json`."""
    document = {name: to_builtin(value) for name, value in variables.items()}
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix == ".json":
        path.write_text(json.dumps(document, indent=2))
    else:
        with path.open("wb") as f:
            tomli_w.dump(document, f)
    logger.debug("Exported %d variables to %s", len(document), path)


def load_variables(path: Path) -> dict[str, Any]:
    """Read a variables record written by `export_variables`.

    Lists become numpy arrays; numbers stay scalars.

    Raises:
        pydantic.ValidationError: If a value is not a number or a nested list of numbers.

    """
    if path.suffix == ".json":
        data = json.loads(path.read_text())
    else:
        with path.open("rb") as f:
            data = tomllib.load(f)
    validated = _variables_adapter.validate_python(data)
    logger.debug("Loaded %d variables from %s", len(validated), path)
    return {name: np.asarray(value) if isinstance(value, list) else value for name, value in validated.items()}
