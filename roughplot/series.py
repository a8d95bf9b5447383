from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
import logging
import math
from typing import Any, ClassVar, Literal

import numpy as np

from roughplot.adapters.normalize import object_form_columns, row_column
from roughplot.errors import NoDataError, PlotDataError

LOGGER = logging.getLogger(__name__)

DataForm = Literal["object", "file"]


@dataclass(frozen=True, eq=False)
class DataSeries:
    """One named series of numeric samples addressed by sample index."""

    form: ClassVar[DataForm]

    key: str
    values: np.ndarray = field(repr=False)

    def __len__(self) -> int:
        return int(self.values.size)

    def value_at(self, index: int) -> float | None:
        if index < 0 or index >= self.values.size:
            return None
        value = float(self.values[index])
        if not math.isfinite(value):
            return None
        return value

    def extent(self) -> tuple[float, float] | None:
        finite = self.values[np.isfinite(self.values)]
        if finite.size == 0:
            return None
        return (float(np.min(finite)), float(np.max(finite)))


@dataclass(frozen=True, eq=False)
class ObjectSeries(DataSeries):
    form: ClassVar[DataForm] = "object"


@dataclass(frozen=True, eq=False)
class FileColumnSeries(DataSeries):
    form: ClassVar[DataForm] = "file"

    row_count: int = 0


def series_from_object(data: Any) -> list[DataSeries]:
    columns = object_form_columns(data)
    return [ObjectSeries(key=key, values=values) for key, values in columns.items()]


def series_from_rows(rows: Sequence[Mapping[str, Any]], keys: Sequence[str] | None) -> list[DataSeries]:
    if not keys:
        raise NoDataError("no series columns selected for file data")
    out: list[DataSeries] = []
    for key in keys:
        try:
            values = row_column(rows, key)
        except PlotDataError as exc:
            LOGGER.warning("skipping series %r: %s", key, exc)
            continue
        out.append(FileColumnSeries(key=key, values=values, row_count=len(rows)))
    return out


def index_length(series: Sequence[DataSeries]) -> int:
    """Length of the shared index space: the longest series (object form) or the row count."""
    lengths = [s.row_count if isinstance(s, FileColumnSeries) else len(s) for s in series]
    return max(lengths, default=0)
