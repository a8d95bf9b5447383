from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, fields, replace
import math
from typing import Any, Literal, TypeVar

from roughplot.errors import ConfigurationError


T = TypeVar("T")

InterpolationMode = Literal["curve", "straight"]
LegendPosition = Literal["right", "left"]

ROUGHNESS_CEILING = 30.0
DEFAULT_COLORS = (
    "coral",
    "skyblue",
    "#66c2a5",
    "tan",
    "#8da0cb",
    "#e78ac3",
    "#a6d854",
    "#ffd92f",
    "tan",
    "orange",
)
FONT_FAMILIES = ("Gaegu", "Indie Flower")


@dataclass(frozen=True)
class Margin:
    top: float = 50
    right: float = 20
    bottom: float = 50
    left: float = 100


@dataclass(frozen=True)
class Note:
    x: float
    y: float
    text: str


@dataclass(frozen=True)
class ReferenceLine:
    value: Any
    dash: tuple[float, ...] = ()


def rough_ceiling(roughness: float | None, default: float, ceiling: float = ROUGHNESS_CEILING) -> float:
    if roughness is None:
        return float(default)
    value = float(roughness)
    if not math.isfinite(value) or value < 0:
        raise ConfigurationError(f"roughness must be a finite value >= 0, got {roughness!r}")
    return min(value, ceiling)


def resolve_style(values: Sequence[T], index: int) -> T:
    """Pick the style entry for series ``index``.

    A single entry applies to every series; longer sequences are indexed by
    series position and wrap when there are more series than entries.
    """
    if not values:
        raise ConfigurationError("style sequence must not be empty")
    if len(values) == 1:
        return values[0]
    return values[index % len(values)]


@dataclass(frozen=True)
class ChartConfig:
    element: str = "#roughplot"
    margin: Margin = field(default_factory=Margin)
    width: float = 300
    height: float = 400
    x: tuple[Any, ...] | None = None
    y_keys: tuple[str, ...] | None = None
    column_keys: tuple[str, ...] = ()
    y_domain: tuple[float, float] | None = None
    x_value_format: str | None = None
    y_value_format: str | None = None
    x_axis: bool = True
    y_axis: bool = True
    axis_font_size: str | None = None
    legend: bool = True
    legend_position: LegendPosition = "right"
    circle: bool = True
    circle_radius: float = 10
    circle_roughness: float = 2.0
    colors: tuple[str, ...] = DEFAULT_COLORS
    interpolation: tuple[str, ...] = ("curve",)
    dash: tuple[float, ...] = (0,)
    stroke: str = "black"
    stroke_width: float = 8
    fill_weight: float = 0.85
    roughness: float = 2.2
    axis_roughness: float = 0.9
    axis_stroke_width: float = 0.4
    bowing: float = 1.0
    x_label: str = ""
    y_label: str = ""
    x_label_delta: float = 0
    y_label_delta: float = 0
    label_font_size: str = "1rem"
    notes: tuple[Note, ...] = ()
    notes_font_size: str | None = None
    x_lines: tuple[ReferenceLine, ...] = ()
    y_lines: tuple[ReferenceLine, ...] = ()
    interactive: bool = True
    tooltip_font_size: str = "0.95rem"
    title: str | None = None
    title_font_size: str | None = None
    font: int | str = 0
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError("width and height must be > 0")
        if self.plot_width <= 0 or self.plot_height <= 0:
            raise ConfigurationError(
                f"plot area must be positive after margins, got {self.plot_width}x{self.plot_height}"
            )
        if self.legend_position not in {"right", "left"}:
            raise ConfigurationError(f"unsupported legend position: {self.legend_position!r}")
        if not self.colors:
            raise ConfigurationError("colors must contain at least one color")
        if not self.interpolation:
            raise ConfigurationError("interpolation must contain at least one mode")
        if not self.dash:
            raise ConfigurationError("dash must contain at least one value")
        if self.x is not None and len(self.x) == 0:
            raise ConfigurationError("explicit x domain must not be empty")
        if self.x is not None and len(set(self.x)) != len(self.x):
            raise ConfigurationError("explicit x domain values must be unique")
        if self.circle_radius <= 0:
            raise ConfigurationError("circle_radius must be > 0")
        if self.stroke_width < 0 or self.axis_stroke_width < 0:
            raise ConfigurationError("stroke widths must be >= 0")
        if self.y_domain is not None:
            lo, hi = self.y_domain
            if not (math.isfinite(lo) and math.isfinite(hi)):
                raise ConfigurationError("y_domain bounds must be finite")
        if isinstance(self.font, int) and not 0 <= self.font < len(FONT_FAMILIES):
            raise ConfigurationError(f"font index must be in [0, {len(FONT_FAMILIES) - 1}]")

    @property
    def plot_width(self) -> float:
        return self.width - self.margin.left - self.margin.right

    @property
    def plot_height(self) -> float:
        return self.height - self.margin.top - self.margin.bottom

    @property
    def graph_class(self) -> str:
        return self.element.lstrip("#.")

    @property
    def font_family(self) -> str:
        if isinstance(self.font, int):
            return FONT_FAMILIES[self.font]
        return self.font

    @property
    def resolved_notes_font_size(self) -> str:
        return self.notes_font_size if self.notes_font_size is not None else self.label_font_size

    @property
    def file_columns(self) -> tuple[str, ...] | None:
        """Columns read from file input: ``y_keys`` if set, else loose ``y*`` option values."""
        if self.y_keys is not None:
            return self.y_keys
        return self.column_keys or None

    def with_options(self, **options: Any) -> "ChartConfig":
        return replace(self, **options)

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None, **kwargs: Any) -> "ChartConfig":
        merged: dict[str, Any] = dict(options or {})
        merged.update(kwargs)

        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        column_keys: list[str] = []
        for raw_key, raw_value in merged.items():
            key = _ALIASES.get(raw_key, raw_key)
            if key in known:
                values[key] = raw_value
            elif "y" in raw_key:
                # Unrecognized keys containing "y" name data columns for file input.
                column_keys.append(str(raw_value))
            else:
                raise ConfigurationError(f"unknown chart option: {raw_key!r}")

        if column_keys:
            values["column_keys"] = tuple(column_keys)
        return cls(**_normalize(values))


_ALIASES: dict[str, str] = {
    "el": "element",
    "yKeys": "y_keys",
    "yDomain": "y_domain",
    "xValueFormat": "x_value_format",
    "yValueFormat": "y_value_format",
    "xAxis": "x_axis",
    "yAxis": "y_axis",
    "axisFontSize": "axis_font_size",
    "legendPosition": "legend_position",
    "circleRadius": "circle_radius",
    "circleRoughness": "circle_roughness",
    "strokeWidth": "stroke_width",
    "fillWeight": "fill_weight",
    "axisRoughness": "axis_roughness",
    "axisStrokeWidth": "axis_stroke_width",
    "xLabel": "x_label",
    "yLabel": "y_label",
    "xLabelDelta": "x_label_delta",
    "yLabelDelta": "y_label_delta",
    "labelFontSize": "label_font_size",
    "notesFontSize": "notes_font_size",
    "xLines": "x_lines",
    "yLines": "y_lines",
    "tooltipFontSize": "tooltip_font_size",
    "titleFontSize": "title_font_size",
}


def _normalize(values: dict[str, Any]) -> dict[str, Any]:
    out = dict(values)
    if "margin" in out:
        out["margin"] = _coerce_margin(out["margin"])
    if out.get("x") is not None:
        out["x"] = _as_tuple(out["x"], label="x")
    if out.get("y_keys") is not None:
        out["y_keys"] = tuple(str(k) for k in _as_tuple(out["y_keys"], label="y_keys"))
    if out.get("column_keys") is not None:
        out["column_keys"] = tuple(str(k) for k in _as_tuple(out["column_keys"], label="column_keys"))
    if out.get("y_domain") is not None:
        domain = _as_tuple(out["y_domain"], label="y_domain")
        if len(domain) != 2:
            raise ConfigurationError("y_domain must be a [min, max] pair")
        out["y_domain"] = (_as_float(domain[0], "y_domain"), _as_float(domain[1], "y_domain"))
    if "colors" in out:
        out["colors"] = tuple(str(c) for c in _as_tuple(out["colors"], label="colors"))
    if "interpolation" in out:
        out["interpolation"] = tuple(str(m) for m in _as_tuple(out["interpolation"], label="interpolation"))
    if "dash" in out:
        out["dash"] = tuple(_as_float(d, "dash") for d in _as_tuple(out["dash"], label="dash"))
    if "notes" in out:
        out["notes"] = tuple(_coerce_note(n) for n in (out["notes"] or ()))
    for key, legacy in (("x_lines", "x"), ("y_lines", "y")):
        if key in out:
            out[key] = tuple(_coerce_reference_line(line, legacy_key=legacy) for line in (out[key] or ()))
    out["roughness"] = rough_ceiling(out.get("roughness"), default=2.2)
    out["axis_roughness"] = rough_ceiling(out.get("axis_roughness"), default=0.9)
    out["circle_roughness"] = rough_ceiling(out.get("circle_roughness"), default=2.0)
    for key in ("width", "height", "circle_radius", "stroke_width", "axis_stroke_width", "bowing", "fill_weight"):
        if key in out and out[key] is not None:
            out[key] = _as_float(out[key], key)
    return out


def _as_tuple(value: Any, *, label: str) -> tuple[Any, ...]:
    if isinstance(value, (str, bytes, int, float)):
        return (value,)
    if isinstance(value, Sequence) or hasattr(value, "tolist"):
        items = value.tolist() if hasattr(value, "tolist") else list(value)
        return tuple(items)
    raise ConfigurationError(f"{label} must be a value or a sequence, got {type(value)!r}")


def _as_float(value: Any, label: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{label} must be numeric, got {value!r}") from exc


def _coerce_margin(value: Any) -> Margin:
    if isinstance(value, Margin):
        return value
    if not isinstance(value, Mapping):
        raise ConfigurationError("margin must be a mapping with top/right/bottom/left")
    unknown = set(value) - {"top", "right", "bottom", "left"}
    if unknown:
        raise ConfigurationError(f"unknown margin keys: {sorted(unknown)}")
    return Margin(**{k: _as_float(v, f"margin.{k}") for k, v in value.items()})


def _coerce_note(value: Any) -> Note:
    if isinstance(value, Note):
        return value
    if not isinstance(value, Mapping) or not {"x", "y", "text"} <= set(value):
        raise ConfigurationError(f"note must provide x, y and text: {value!r}")
    return Note(x=_as_float(value["x"], "note.x"), y=_as_float(value["y"], "note.y"), text=str(value["text"]))


def _coerce_reference_line(value: Any, *, legacy_key: str) -> ReferenceLine:
    if isinstance(value, ReferenceLine):
        return value
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"reference line must be a mapping: {value!r}")
    if "value" in value:
        position = value["value"]
    elif legacy_key in value:
        position = value[legacy_key]
    else:
        raise ConfigurationError(f"reference line needs a value: {value!r}")
    if legacy_key == "y":
        position = _as_float(position, "y line value")
    dash = value.get("dash") or ()
    return ReferenceLine(value=position, dash=tuple(_as_float(d, "dash") for d in _as_tuple(dash, label="dash")))
