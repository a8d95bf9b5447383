from __future__ import annotations

from dataclasses import dataclass, field
import logging
import xml.etree.ElementTree as ET

from roughplot.config import ChartConfig, resolve_style
from roughplot.scales import ScaleModel
from roughplot.series import DataSeries
from roughplot.sketch import SketchRenderer, SketchStyle
from roughplot.surface import add_class

LOGGER = logging.getLogger(__name__)

INTERPOLATION_MODES = ("curve", "straight")


@dataclass(frozen=True)
class SeriesStyle:
    color: str
    dash: float
    interpolation: str


@dataclass
class RenderedSeries:
    key: str
    style: SeriesStyle
    points: list[tuple[float, float]] = field(default_factory=list)
    dropped: int = 0
    missing: int = 0
    path: ET.Element | None = None
    markers: list[ET.Element] = field(default_factory=list)


def series_style(config: ChartConfig, index: int) -> SeriesStyle:
    return SeriesStyle(
        color=resolve_style(config.colors, index),
        dash=resolve_style(config.dash, index),
        interpolation=resolve_style(config.interpolation, index),
    )


class SeriesRenderer:
    def __init__(self, svg: ET.Element, generator: SketchRenderer, config: ChartConfig) -> None:
        self._svg = svg
        self._generator = generator
        self._config = config

    def render(self, series: DataSeries, index: int, scale: ScaleModel) -> RenderedSeries:
        style = series_style(self._config, index)
        out = RenderedSeries(key=series.key, style=style)

        for i in range(len(series)):
            x = scale.x_position(i)
            if x is None:
                out.dropped += 1
                continue
            value = series.value_at(i)
            if value is None:
                out.missing += 1
                continue
            out.points.append((x, scale.y_scale(value)))

        if out.dropped:
            LOGGER.warning("series %r: %d samples fall outside the x-domain and are not drawn", series.key, out.dropped)

        out.path = self._draw_line(out)
        if self._config.circle:
            out.markers = self._draw_markers(out)
        return out

    def _draw_line(self, rendered: RenderedSeries) -> ET.Element | None:
        cfg = self._config
        mode = rendered.style.interpolation
        if mode not in INTERPOLATION_MODES:
            LOGGER.warning("series %r: unknown interpolation %r, line not drawn", rendered.key, mode)
            return None
        if not rendered.points:
            return None
        line_style = SketchStyle(
            stroke=rendered.style.color,
            stroke_width=cfg.stroke_width,
            roughness=cfg.roughness,
            bowing=cfg.bowing,
            dash_pattern=(rendered.style.dash,),
        )
        if mode == "curve":
            node = self._generator.curve(rendered.points, line_style)
        else:
            node = self._generator.linear_path(rendered.points, line_style)
        add_class(node, self._config.graph_class)
        self._svg.append(node)
        return node

    def _draw_markers(self, rendered: RenderedSeries) -> list[ET.Element]:
        cfg = self._config
        marker_style = SketchStyle(
            stroke=rendered.style.color,
            stroke_width=1,
            roughness=cfg.circle_roughness,
            bowing=cfg.bowing,
            fill=rendered.style.color,
            fill_style="solid",
        )
        markers: list[ET.Element] = []
        for x, y in rendered.points:
            # circle_radius is the marker diameter
            node = self._generator.circle(x, y, cfg.circle_radius / 2, marker_style)
            add_class(add_class(node, cfg.graph_class), f"{cfg.graph_class}-marker")
            self._svg.append(node)
            markers.append(node)
        return markers
