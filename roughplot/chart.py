from __future__ import annotations

import xml.etree.ElementTree as ET

from roughplot.config import ChartConfig, Margin
from roughplot.surface import Surface, fmt_num, has_class, set_style, text_element, translate


class Chart:
    """Base chart: owns the margin-translated plot group on a shared surface."""

    def __init__(self, config: ChartConfig, surface: Surface | None = None) -> None:
        self.config = config
        self.surface = surface if surface is not None else Surface(width=config.width, height=config.height)
        self.svg: ET.Element | None = None
        self.font_family = config.font_family

    @property
    def width(self) -> float:
        return self.config.plot_width

    @property
    def height(self) -> float:
        return self.config.plot_height

    @property
    def margin(self) -> Margin:
        return self.config.margin

    @property
    def graph_class(self) -> str:
        return self.config.graph_class

    @property
    def rough_id(self) -> str:
        return f"{self.graph_class}_svg"

    def set_svg(self) -> ET.Element:
        """(Re)create the plot group; anything drawn by a previous cycle is dropped."""
        self.remove_svg()
        self.svg = ET.Element("g", {"id": self.rough_id, "transform": translate(self.margin.left, self.margin.top)})
        self.surface.append(self.svg)
        return self.svg

    def remove_svg(self) -> None:
        if self.svg is not None and self.svg in list(self.surface.root):
            self.surface.root.remove(self.svg)
        self.svg = None

    def require_svg(self) -> ET.Element:
        if self.svg is None:
            raise RuntimeError("chart has not been drawn")
        return self.svg

    def set_title(self, title: str) -> ET.Element:
        cfg = self.config
        font_size = cfg.title_font_size or f"{fmt_num(min(20.0, min(self.width, self.height) / 4))}px"
        node = text_element(self.width / 2, -(self.margin.top / 2), title, **{"text-anchor": "middle", "class": "titleText"})
        set_style(node, font_size=font_size, font_family=self.font_family, opacity=0.8)
        self.require_svg().append(node)
        return node

    def find_class(self, name: str) -> list[ET.Element]:
        svg = self.require_svg()
        return [el for el in svg.iter() if has_class(el, name)]
