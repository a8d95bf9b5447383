from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

from roughplot.config import ChartConfig, ReferenceLine
from roughplot.scales import ScaleModel
from roughplot.sketch import SketchRenderer, SketchStyle
from roughplot.surface import add_class, set_style, text_element

LOGGER = logging.getLogger(__name__)


class AnnotationRenderer:
    """Axis labels, free-text notes and vertical/horizontal reference lines."""

    def __init__(self, svg: ET.Element, generator: SketchRenderer, config: ChartConfig, font_family: str) -> None:
        self._svg = svg
        self._generator = generator
        self._config = config
        self._font_family = font_family

    def render(self, scale: ScaleModel) -> None:
        cfg = self._config
        if cfg.x_label:
            self._label(
                text_element(
                    cfg.plot_width / 2,
                    cfg.plot_height + cfg.margin.bottom / 1.3 + cfg.x_label_delta,
                    cfg.x_label,
                    dx="1em",
                ),
                cfg.label_font_size,
            )
        if cfg.y_label:
            node = text_element(
                -(cfg.plot_height / 2),
                -(cfg.margin.left / 2) + cfg.y_label_delta,
                cfg.y_label,
                dy="1em",
                transform="rotate(-90)",
            )
            self._label(node, cfg.label_font_size)
        for note in cfg.notes:
            node = text_element(note.x, note.y, note.text, **{"class": "notesText"})
            set_style(node, text_anchor="middle", font_family=self._font_family, font_size=cfg.resolved_notes_font_size)
            self._svg.append(node)

        for line in cfg.x_lines:
            x = self.x_line_position(line, scale)
            if x is None:
                LOGGER.warning("vertical line at %r cannot be placed on the x-domain", line.value)
                continue
            self._reference_line([(x, 0.0), (x, cfg.plot_height)], line, "xLine")
        for line in cfg.y_lines:
            y = scale.y_scale(float(line.value))
            self._reference_line([(0.0, y), (cfg.plot_width, y)], line, "yLine")

    def x_line_position(self, line: ReferenceLine, scale: ScaleModel) -> float | None:
        """Screen x of a vertical line: its category position, else proportional to the index span."""
        if scale.explicit_x:
            direct = scale.x_scale(line.value)
            if direct is not None:
                return direct
        span = len(scale.x_scale.domain) - 1
        if span <= 0:
            return None
        try:
            value = float(line.value)
        except (TypeError, ValueError):
            return None
        return self._config.plot_width * value / span

    def _label(self, node: ET.Element, font_size: str) -> None:
        add_class(node, "labelText")
        set_style(node, text_anchor="middle", font_family=self._font_family, font_size=font_size)
        self._svg.append(node)

    def _reference_line(self, points: list[tuple[float, float]], line: ReferenceLine, kind: str) -> ET.Element:
        cfg = self._config
        style = SketchStyle(
            stroke=cfg.colors[0],
            stroke_width=cfg.stroke_width,
            roughness=cfg.roughness,
            bowing=cfg.bowing,
            dash_pattern=line.dash,
        )
        node = self._generator.linear_path(points, style)
        add_class(node, f"{kind}{cfg.graph_class}")
        self._svg.append(node)
        return node
