from __future__ import annotations

from bisect import bisect_left
from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from functools import lru_cache
import logging
import math
from typing import Any

import numpy as np

from roughplot.config import ChartConfig
from roughplot.errors import InteractionIndexError, NoDataError
from roughplot.series import DataSeries, index_length

LOGGER = logging.getLogger(__name__)

Y_PAD_RATIO = 0.05


@dataclass(frozen=True)
class PointScale:
    """Maps an ordered discrete domain onto evenly spaced positions of a range."""

    domain: tuple[Any, ...]
    range: tuple[float, float]
    _index: dict[Any, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_index", {value: i for i, value in enumerate(self.domain)})

    @property
    def step(self) -> float:
        r0, r1 = self.range
        return (r1 - r0) / max(1, len(self.domain) - 1)

    def position_of_index(self, index: int) -> float:
        r0, r1 = self.range
        if len(self.domain) == 1:
            return r0 + (r1 - r0) / 2.0
        return r0 + self.step * index

    def __call__(self, value: Any) -> float | None:
        try:
            index = self._index.get(value)
        except TypeError:
            return None
        if index is None:
            return None
        return self.position_of_index(index)

    def positions(self) -> list[float]:
        return [self.position_of_index(i) for i in range(len(self.domain))]

    def nearest_index(self, position: float) -> int:
        """Index of the domain value closest to ``position``, clamped to the domain."""
        positions = self.positions()
        if not positions:
            raise InteractionIndexError("point scale has an empty domain")
        i = bisect_left(positions, position)
        if i <= 0:
            return 0
        if i >= len(positions):
            return len(positions) - 1
        before = positions[i - 1]
        after = positions[i]
        return i - 1 if position - before <= after - position else i


@dataclass(frozen=True)
class LinearScale:
    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return r0 + (r1 - r0) / 2.0
        return r0 + (float(value) - d0) / (d1 - d0) * (r1 - r0)

    def ticks(self, count: int = 10) -> list[float]:
        lo, hi = sorted(self.domain)
        return [float(t) for t in nice_ticks(lo, hi, count)]


@dataclass(frozen=True)
class ScaleModel:
    x_scale: PointScale
    y_scale: LinearScale
    intercept_height: float
    extent: tuple[float, float]
    index_length: int
    explicit_x: bool

    def x_value(self, index: int) -> Any | None:
        """Domain value addressing sample ``index`` (category or the index itself)."""
        if self.explicit_x:
            if 0 <= index < len(self.x_scale.domain):
                return self.x_scale.domain[index]
            return None
        return index

    def x_position(self, index: int) -> float | None:
        value = self.x_value(index)
        if value is None:
            return None
        return self.x_scale(value)

    def domain_value_at(self, index: int) -> Any:
        domain = self.x_scale.domain
        if index < 0 or index >= len(domain):
            raise InteractionIndexError(f"index {index} outside x-domain of length {len(domain)}")
        return domain[index]


def data_extent(series: Sequence[DataSeries]) -> tuple[float, float]:
    extents = [ext for ext in (s.extent() for s in series) if ext is not None]
    if not extents:
        raise NoDataError("no finite values in any series")
    return (min(e[0] for e in extents), max(e[1] for e in extents))


def padded_domain(extent: tuple[float, float], pad_ratio: float = Y_PAD_RATIO) -> tuple[float, float]:
    lo, hi = extent
    pad = (hi - lo) * pad_ratio
    return (lo - pad, hi + pad)


def intercept_height(extent: tuple[float, float], height: float) -> float:
    """Screen y of the x-axis baseline.

    Bottom of the plot for non-negative data, top for non-positive data,
    otherwise ``height * max / (max - min)`` over the unpadded extent.
    """
    lo, hi = extent
    if lo >= 0:
        return float(height)
    if hi <= 0:
        return 0.0
    return float(height) * hi / (hi - lo)


def build_scale_model(series: Sequence[DataSeries], config: ChartConfig) -> ScaleModel:
    if not series:
        raise NoDataError("chart has no series")
    extent = data_extent(series)
    length = index_length(series)

    width = config.plot_width
    height = config.plot_height
    if config.x is None:
        x_domain: tuple[Any, ...] = tuple(range(length))
    else:
        x_domain = tuple(config.x)
    x_scale = PointScale(domain=x_domain, range=(0.0, float(width)))

    y_domain = config.y_domain if config.y_domain is not None else padded_domain(extent)
    y_scale = LinearScale(domain=(float(y_domain[0]), float(y_domain[1])), range=(float(height), 0.0))

    return ScaleModel(
        x_scale=x_scale,
        y_scale=y_scale,
        intercept_height=intercept_height(extent, height),
        extent=extent,
        index_length=length,
        explicit_x=config.x is not None,
    )


def nice_ticks(vmin: float, vmax: float, target: int = 10) -> np.ndarray:
    """Round-valued ticks inside ``[vmin, vmax]``."""
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)

    span = _nice_number(vmax - vmin, round_result=False)
    step = _nice_number(span / max(target - 1, 1), round_result=True)
    tick_min = np.ceil(vmin / step) * step
    tick_max = np.floor(vmax / step) * step

    ticks = np.arange(tick_min, tick_max + 0.5 * step, step, dtype=np.float64)
    # Normalize floating-point drift so values like -4.44e-16 become 0.
    ticks = np.rint(ticks / step) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return ticks


def format_value(value: Any, spec: str | None = None, *, step: float | None = None) -> str:
    """Format an axis or tooltip value.

    ``spec`` is a format spec such as ``".2f"`` or ``",.0f"``; a printf-style
    leading ``%`` is accepted. Non-numeric values pass through unchanged.
    """
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, float, np.integer, np.floating)):
        return str(value)
    if spec:
        fmt = spec[1:] if spec.startswith("%") else spec
        try:
            return format(float(value), fmt)
        except ValueError:
            _warn_unsupported_format(spec)
            return str(value)
    return format_tick(float(value), step=step)


def format_tick(value: float, *, step: float | None = None) -> str:
    if not math.isfinite(value):
        return str(value)
    if step is not None and math.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    abs_v = abs(value)
    decimals = _decimals_from_step(step) if step is not None else 6
    if abs_v != 0 and (abs_v >= 1e6 or abs_v < 1e-6):
        return f"{value:.4e}"

    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def _nice_number(value: float, *, round_result: bool) -> float:
    exp = np.floor(np.log10(value))
    frac = value / (10**exp)

    if round_result:
        if frac < 1.5:
            nice_frac = 1.0
        elif frac < 3.0:
            nice_frac = 2.0
        elif frac < 7.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0
    else:
        if frac <= 1.0:
            nice_frac = 1.0
        elif frac <= 2.0:
            nice_frac = 2.0
        elif frac <= 5.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0

    return float(nice_frac * (10**exp))


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not math.isfinite(step):
        return 6
    d = Decimal(str(step)).normalize()
    exp = d.as_tuple().exponent
    decimals = max(0, -int(exp))
    return min(12, decimals)


@lru_cache(maxsize=None)
def _warn_unsupported_format(spec: str) -> None:
    LOGGER.warning("unsupported value format %r; falling back to plain str()", spec)
