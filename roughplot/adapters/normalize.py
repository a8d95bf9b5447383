from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from roughplot.errors import ConfigurationError, PlotDataError


DELIMITED_EXTENSIONS = {".csv": ",", ".tsv": "\t"}


def delimited_source_separator(data: Any) -> str | None:
    """Return the field separator when ``data`` names a delimited-text file."""
    if isinstance(data, Path):
        data = str(data)
    if not isinstance(data, str):
        return None
    lowered = data.lower()
    for ext, sep in DELIMITED_EXTENSIONS.items():
        if ext in lowered:
            return sep
    raise ConfigurationError(f"data source must be a .csv or .tsv path, got {data!r}")


def object_form_columns(data: Any) -> dict[str, np.ndarray]:
    if isinstance(data, pd.DataFrame):
        return {str(col): coerce_1d_numeric(data[col], label=str(col)) for col in data.columns}
    if not isinstance(data, Mapping):
        raise PlotDataError(f"unsupported data input type: {type(data)!r}")
    return {str(key): coerce_1d_numeric(values, label=str(key)) for key, values in data.items()}


def row_column(rows: Sequence[Mapping[str, Any]], key: str) -> np.ndarray:
    if rows and key not in rows[0]:
        raise PlotDataError(f"column not found: {key}")
    return _coerce_ndarray(np.asarray([row.get(key) for row in rows], dtype=object), label=key)


def coerce_1d_numeric(value: Any, *, label: str) -> np.ndarray:
    if isinstance(value, pd.Series):
        if value.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        return _coerce_ndarray(value.to_numpy(), label=label)

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        return _coerce_ndarray(value, label=label)

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return _coerce_ndarray(np.asarray(list(value), dtype=object), label=label)

    raise PlotDataError(f"unsupported {label} input type: {type(value)!r}")


def _coerce_ndarray(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.dtype.kind in {"i", "u", "f", "b"}:
        return arr.astype(np.float64, copy=False)

    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        if raw is None:
            out[i] = np.nan
            continue
        if isinstance(raw, Decimal):
            out[i] = float(raw)
            continue
        if isinstance(raw, str) and not raw.strip():
            out[i] = np.nan
            continue
        try:
            out[i] = float(raw)
        except (TypeError, ValueError):
            # Non-numeric cells behave like missing samples.
            out[i] = np.nan
    return out
