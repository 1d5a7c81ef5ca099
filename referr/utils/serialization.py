"""Serialization utilities for configs, error matrices and run results."""

from __future__ import annotations

from dataclasses import asdict, fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict

import numpy as np
import pandas as pd
import yaml

from referr.exceptions import ConfigurationError
from referr.types import BasePair, ErrorMatrix, ErrorModelConfig, ErrorModelResult


def _convert_values(value: Any, precision: int | None) -> Any:
    """
    Recursively convert dataclasses/dicts/lists/arrays and optionally round floats.
    """
    if is_dataclass(value):
        return _convert_values(asdict(value), precision)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, np.ndarray):
        return _convert_values(value.tolist(), precision)
    if isinstance(value, dict):
        return {key: _convert_values(val, precision) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [_convert_values(item, precision) for item in value]
    if isinstance(value, np.generic):
        return _convert_values(value.item(), precision)
    if isinstance(value, float) and precision is not None:
        return round(value, precision)
    return value


def config_to_dict(config: ErrorModelConfig) -> Dict[str, Any]:
    """Convert an ErrorModelConfig into a plain dictionary suitable for YAML."""
    return _convert_values(config, None)


def load_config(yaml_path: Path, **overrides: Any) -> ErrorModelConfig:
    """Load an ErrorModelConfig from YAML; non-None ``overrides`` win."""
    with Path(yaml_path).open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}

    options = dict(payload.get("config", payload))
    known = {f.name for f in fields(ErrorModelConfig)}
    unexpected = sorted(set(options) - known)
    if unexpected:
        raise ConfigurationError(f"Unknown configuration keys: {unexpected}")
    options.update({k: v for k, v in overrides.items() if v is not None})
    return ErrorModelConfig(**options)


def error_matrix_to_dict(
    error_matrix: ErrorMatrix, float_precision: int | None = None
) -> Dict[str, Any]:
    """
    Convert an ErrorMatrix into ``{"qualities": [...], "rates": {"A2C": [...]}}``.
    """
    return {
        "qualities": error_matrix.qualities.tolist(),
        "rates": {
            pair.label: _convert_values(error_matrix.row(pair), float_precision)
            for pair in BasePair
        },
    }


def error_matrix_from_dict(payload: Dict[str, Any]) -> ErrorMatrix:
    rates = payload["rates"]
    missing = [pair.label for pair in BasePair if pair.label not in rates]
    if missing:
        raise ValueError(f"Error matrix missing base pairs: {missing}")
    return ErrorMatrix(np.array([rates[pair.label] for pair in BasePair], dtype=float))


def save_error_matrix(
    error_matrix: ErrorMatrix,
    yaml_path: Path,
    metadata: Dict[str, Any] | None = None,
    float_precision: int | None = None,
) -> None:
    payload = {
        "metadata": metadata or {},
        "error_matrix": error_matrix_to_dict(error_matrix, float_precision),
    }
    yaml_path.parent.mkdir(parents=True, exist_ok=True)
    with yaml_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(payload, handle, sort_keys=False)


def load_error_matrix(yaml_path: Path) -> ErrorMatrix:
    """Load an ErrorMatrix from a YAML file."""
    with yaml_path.open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle)
    return error_matrix_from_dict(payload.get("error_matrix", payload))


def error_matrix_frame(error_matrix: ErrorMatrix) -> pd.DataFrame:
    """Error matrix as a DataFrame, base pairs as rows and qualities as columns."""
    return pd.DataFrame(
        error_matrix.probabilities,
        index=[pair.label for pair in BasePair],
        columns=error_matrix.qualities,
    )


def reference_frame(result: ErrorModelResult) -> pd.DataFrame:
    """Filtered references with observed and estimated abundance."""
    return pd.DataFrame(
        {
            "ref_id": [ref.identifier for ref in result.references],
            "ref_seq": [ref.sequence for ref in result.references],
            "abundance": [ref.abundance for ref in result.references],
            "estimated_abundance": [
                ref.estimated_abundance for ref in result.references
            ],
        }
    )


def assignment_frame(result: ErrorModelResult) -> pd.DataFrame:
    """One row per unique sequence with its count and best reference."""
    uniques = result.dereplication.uniques
    return pd.DataFrame(
        {
            "unique_index": [u.index for u in uniques],
            "sequence": [u.sequence for u in uniques],
            "count": [u.count for u in uniques],
            "best_reference": result.best_references,
        }
    )


__all__ = [
    "config_to_dict",
    "load_config",
    "error_matrix_to_dict",
    "error_matrix_from_dict",
    "save_error_matrix",
    "load_error_matrix",
    "error_matrix_frame",
    "reference_frame",
    "assignment_frame",
]
