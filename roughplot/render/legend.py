from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Callable, Protocol
import xml.etree.ElementTree as ET

from roughplot.config import ChartConfig, resolve_style
from roughplot.sketch import SketchRenderer, SketchStyle
from roughplot.surface import fmt_num, set_style, text_element, translate


LEGEND_PADDING = 7
LEGEND_ITEM_HEIGHT = 11
LEGEND_FONT_SIZE = "0.65rem"


@dataclass(frozen=True)
class LegendItem:
    color: str
    text: str


class LegendHost(Protocol):
    config: ChartConfig
    generator: SketchRenderer
    font_family: str

    def require_svg(self) -> ET.Element:
        ...


LegendRenderer = Callable[[LegendHost, Sequence[LegendItem], float, float, float], ET.Element]


def legend_dimensions(labels: Sequence[str]) -> tuple[float, float]:
    longest = max((len(label) for label in labels), default=0)
    return (6 * longest + 35, 11 * len(labels) + 8)


def add_legend(chart: LegendHost, items: Sequence[LegendItem], width: float, height: float, padding: float) -> ET.Element:
    """Place a sketchy legend box in the top corner selected by ``legend_position``."""
    cfg = chart.config
    if cfg.legend_position == "left":
        x = padding
    else:
        x = cfg.plot_width - width - padding
    group = ET.Element("g", {"class": "legend", "transform": translate(x, padding)})

    frame = chart.generator.rectangle(
        0,
        0,
        width,
        height,
        SketchStyle(stroke="black", stroke_width=0.4, roughness=0.1, bowing=0.0, fill="white", fill_style="solid"),
    )
    group.append(frame)
    for i, item in enumerate(items):
        row_y = 4 + LEGEND_ITEM_HEIGHT * i
        group.append(
            ET.Element(
                "rect",
                {
                    "x": "6",
                    "y": fmt_num(row_y + 1),
                    "width": "8",
                    "height": "8",
                    "fill": item.color,
                    "class": "legend-swatch",
                },
            )
        )
        label = text_element(20, row_y + 8, item.text, **{"class": "legend-text"})
        set_style(label, font_family=chart.font_family, font_size=LEGEND_FONT_SIZE)
        group.append(label)
    chart.require_svg().append(group)
    return group


class LegendAdapter:
    def __init__(self, chart: LegendHost, renderer: LegendRenderer = add_legend) -> None:
        self._chart = chart
        self._renderer = renderer

    def render(self, labels: Sequence[str], colors: Sequence[str]) -> ET.Element | None:
        if not self._chart.config.legend:
            return None
        width, height = legend_dimensions(labels)
        items = [LegendItem(color=resolve_style(colors, i), text=label) for i, label in enumerate(labels)]
        return self._renderer(self._chart, items, width, height, LEGEND_PADDING)
