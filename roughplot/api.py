from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from roughplot.line import Line
from roughplot.surface import Surface


def line(data: Mapping[str, Any] | str | Path, *, surface: Surface | None = None, **options: Any) -> Line:
    """Build a line chart and draw it right away."""
    return Line(data, surface=surface, **options).draw()
