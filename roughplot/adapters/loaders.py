from __future__ import annotations

import asyncio
from collections.abc import Mapping
import logging
from pathlib import Path
from typing import Callable, Sequence

import pandas as pd

from roughplot.adapters.normalize import delimited_source_separator
from roughplot.errors import AcquisitionError

LOGGER = logging.getLogger(__name__)

RowRecords = list[Mapping[str, str]]
RowLoader = Callable[[str], Sequence[Mapping[str, str]]]


def read_delimited(source: str | Path) -> RowRecords:
    """Parse a .csv/.tsv file into string-valued row records."""
    sep = delimited_source_separator(source)
    assert sep is not None
    frame = pd.read_csv(source, sep=sep, dtype=str, keep_default_na=False)
    return frame.to_dict(orient="records")


def load_rows(source: str | Path, loader: RowLoader | None = None) -> RowRecords:
    fetch = loader or read_delimited
    LOGGER.debug("loading rows from %s", source)
    try:
        return [dict(row) for row in fetch(str(source))]
    except AcquisitionError:
        raise
    except Exception as exc:
        raise AcquisitionError(f"failed to load {source}: {exc}") from exc


async def load_rows_async(source: str | Path, loader: RowLoader | None = None) -> RowRecords:
    return await asyncio.to_thread(load_rows, source, loader)
