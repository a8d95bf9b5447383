from __future__ import annotations

import xml.etree.ElementTree as ET

from roughplot.config import ChartConfig
from roughplot.scales import ScaleModel, format_value
from roughplot.sketch import SketchRenderer, SketchStyle
from roughplot.surface import add_class, fmt_num, has_class, set_style, translate


TICK_PADDING = 3
Y_TICK_COUNT = 10


def axis_font_size(config: ChartConfig) -> str:
    if config.axis_font_size is not None:
        return config.axis_font_size
    return f"{fmt_num(min(0.95, min(config.plot_width, config.plot_height) / 140))}rem"


class AxisRenderer:
    """Tick-labelled bottom/left axes whose baselines are redrawn as sketchy strokes."""

    def __init__(self, svg: ET.Element, generator: SketchRenderer, config: ChartConfig, font_family: str) -> None:
        self._svg = svg
        self._generator = generator
        self._config = config
        self._font_family = font_family

    @property
    def x_axis_class(self) -> str:
        return f"xAxis{self._config.graph_class}"

    @property
    def y_axis_class(self) -> str:
        return f"yAxis{self._config.graph_class}"

    def render(self, scale: ScaleModel) -> None:
        cfg = self._config
        if cfg.x_axis:
            self._svg.append(self._bottom_axis(scale))
        if cfg.y_axis:
            self._svg.append(self._left_axis(scale))

        # the crisp baselines stay in the tree as the source for the sketchy overlay
        for el in self._svg.iter("path"):
            if has_class(el, "domain"):
                el.set("stroke", "transparent")

    def render_sketch_overlay(self, scale: ScaleModel) -> list[ET.Element]:
        sources: list[tuple[str, float | None, str]] = []
        for axis_class, offset in ((self.x_axis_class, scale.intercept_height), (self.y_axis_class, None)):
            for group in self._svg.iter("g"):
                if not has_class(group, axis_class):
                    continue
                for domain in group.iter("path"):
                    if has_class(domain, "domain"):
                        sources.append((axis_class, offset, domain.get("d", "")))

        overlays: list[ET.Element] = []
        for axis_class, offset, d in sources:
            node = self._generator.path(d, self._axis_style())
            add_class(node, f"rough-{axis_class}")
            if offset is not None:
                node.set("transform", translate(0, offset))
            self._svg.append(node)
            overlays.append(node)
        return overlays

    def _axis_style(self) -> SketchStyle:
        cfg = self._config
        return SketchStyle(
            stroke="black",
            stroke_width=cfg.axis_stroke_width,
            roughness=cfg.axis_roughness,
            bowing=cfg.bowing,
            fill_style="hachure",
        )

    def _bottom_axis(self, scale: ScaleModel) -> ET.Element:
        cfg = self._config
        group = ET.Element(
            "g",
            {
                "class": self.x_axis_class,
                "transform": translate(0, scale.intercept_height),
                "fill": "none",
                "text-anchor": "middle",
            },
        )
        r0, r1 = scale.x_scale.range
        group.append(ET.Element("path", {"class": "domain", "stroke": "currentColor", "d": f"M{fmt_num(r0)},0H{fmt_num(r1)}"}))
        for value in scale.x_scale.domain:
            x = scale.x_scale(value)
            assert x is not None
            label = format_value(value, cfg.x_value_format)
            tick = self._tick(translate(x, 0), label, {"y": fmt_num(TICK_PADDING), "dy": "0.71em"})
            text = tick.find("text")
            assert text is not None
            text.set("transform", "translate(-10, 0)rotate(-45)")
            set_style(text, text_anchor="end")
            group.append(tick)
        return group

    def _left_axis(self, scale: ScaleModel) -> ET.Element:
        cfg = self._config
        group = ET.Element("g", {"class": self.y_axis_class, "fill": "none", "text-anchor": "end"})
        r0, r1 = scale.y_scale.range
        group.append(ET.Element("path", {"class": "domain", "stroke": "currentColor", "d": f"M0,{fmt_num(r0)}V{fmt_num(r1)}"}))
        ticks = scale.y_scale.ticks(Y_TICK_COUNT)
        step = abs(ticks[1] - ticks[0]) if len(ticks) > 1 else None
        for value in ticks:
            label = format_value(value, cfg.y_value_format, step=step)
            group.append(self._tick(translate(0, scale.y_scale(value)), label, {"x": fmt_num(-TICK_PADDING), "dy": "0.32em"}))
        return group

    def _tick(self, transform: str, label: str, text_attrs: dict[str, str]) -> ET.Element:
        tick = ET.Element("g", {"class": "tick", "opacity": "1", "transform": transform})
        # zero-length tick mark: ticks carry labels only
        tick.append(ET.Element("line", {"stroke": "currentColor", "x2": "0", "y2": "0"}))
        text = ET.Element("text", {"fill": "currentColor", **text_attrs})
        text.text = label
        set_style(text, font_family=self._font_family, font_size=axis_font_size(self._config))
        tick.append(text)
        return tick
