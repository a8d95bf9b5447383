from __future__ import annotations

import asyncio
from collections.abc import Mapping
import logging
from pathlib import Path
from typing import Any

import numpy as np

from roughplot.adapters import RowLoader, delimited_source_separator, load_rows, load_rows_async
from roughplot.chart import Chart
from roughplot.config import ChartConfig
from roughplot.errors import ConfigurationError, NoDataError, PlotDataError
from roughplot.interaction import InteractionLayer, InteractionState, parse_pointer_event
from roughplot.raster import rasterize, save_png
from roughplot.render import (
    AnnotationRenderer,
    AxisRenderer,
    LegendAdapter,
    RenderedSeries,
    SeriesRenderer,
)
from roughplot.render.legend import LegendRenderer, add_legend
from roughplot.scales import ScaleModel, build_scale_model
from roughplot.series import DataForm, DataSeries, series_from_object, series_from_rows
from roughplot.sketch import SketchGenerator, SketchRenderer
from roughplot.surface import Surface, set_style, text_element

LOGGER = logging.getLogger(__name__)

EMPTY_CHART_TEXT = "no data"


class Line(Chart):
    """Sketchy multi-series line chart.

    ``data`` is either a mapping of series name to values or a path to a
    ``.csv``/``.tsv`` file whose columns are picked by ``y_keys`` (or by
    option keys containing ``"y"``).
    """

    def __init__(
        self,
        data: Mapping[str, Any] | str | Path,
        config: ChartConfig | None = None,
        *,
        surface: Surface | None = None,
        generator: SketchRenderer | None = None,
        loader: RowLoader | None = None,
        legend_renderer: LegendRenderer = add_legend,
        **options: Any,
    ) -> None:
        if config is not None and options:
            raise ConfigurationError("pass either a ChartConfig or keyword options, not both")
        cfg = config if config is not None else ChartConfig.from_options(options)
        super().__init__(cfg, surface=surface)

        self.data = data
        self.data_form: DataForm = "file" if delimited_source_separator(data) is not None else "object"
        self.generator: SketchRenderer = generator if generator is not None else SketchGenerator(cfg.seed)
        self.loader = loader
        self.legend_renderer = legend_renderer

        self.series: list[DataSeries] = []
        self.scale: ScaleModel | None = None
        self.rendered: list[RenderedSeries] = []
        self.interaction: InteractionLayer | None = None
        self.interaction_state: InteractionState | None = None
        self.empty = False
        self.destroyed = False
        self._pending: asyncio.Task[None] | None = None

    def draw(self) -> "Line":
        if self.data_form == "file":
            rows = load_rows(self.data, self.loader)  # type: ignore[arg-type]
            self._render(rows)
        else:
            self._render(self.data)
        return self

    async def draw_async(self) -> "Line":
        if self.data_form == "object":
            self._render(self.data)
            return self
        if self._pending is None or self._pending.done():
            self._pending = asyncio.ensure_future(self._fetch_and_render())
        # a second caller shares the in-flight fetch instead of starting another
        await asyncio.shield(self._pending)
        return self

    async def _fetch_and_render(self) -> None:
        rows = await load_rows_async(self.data, self.loader)  # type: ignore[arg-type]
        self._render(rows)

    def _render(self, data: Any) -> None:
        if self.destroyed:
            LOGGER.warning("drawing chart %s after destroy()", self.graph_class)
        svg = self.set_svg()
        self._reset()

        try:
            self.series = self._build_series(data)
            self.scale = build_scale_model(self.series, self.config)
        except NoDataError as exc:
            LOGGER.warning("chart %s has no data: %s", self.graph_class, exc)
            self._draw_empty()
            return

        cfg = self.config
        LOGGER.debug("drawing %d series on %s", len(self.series), self.graph_class)
        series_renderer = SeriesRenderer(svg, self.generator, cfg)
        for index, s in enumerate(self.series):
            try:
                self.rendered.append(series_renderer.render(s, index, self.scale))
            except PlotDataError as exc:
                LOGGER.warning("series %r not drawn: %s", s.key, exc)

        axes = AxisRenderer(svg, self.generator, cfg, self.font_family)
        axes.render(self.scale)
        AnnotationRenderer(svg, self.generator, cfg, self.font_family).render(self.scale)
        axes.render_sketch_overlay(self.scale)

        LegendAdapter(self, renderer=self.legend_renderer).render([s.key for s in self.series], cfg.colors)

        if cfg.interactive:
            self.interaction = InteractionLayer(svg, cfg, self.scale, self.series, self.font_family)
            self.interaction_state = self.interaction.attach()
        if cfg.title:
            self.set_title(cfg.title)

    def _build_series(self, data: Any) -> list[DataSeries]:
        if self.data_form == "file":
            return series_from_rows(data, self.config.file_columns)
        series = series_from_object(data)
        if self.config.y_keys is not None:
            wanted = set(self.config.y_keys)
            series = [s for s in series if s.key in wanted]
        return series

    def _reset(self) -> None:
        self.series = []
        self.scale = None
        self.rendered = []
        self.interaction = None
        self.interaction_state = None
        self.empty = False

    def _draw_empty(self) -> None:
        self.empty = True
        node = text_element(self.width / 2, self.height / 2, EMPTY_CHART_TEXT, **{"class": "emptyText"})
        set_style(node, text_anchor="middle", font_family=self.font_family, font_size=self.config.label_font_size)
        self.require_svg().append(node)
        if self.config.title:
            self.set_title(self.config.title)

    def handle_event(self, event_type: str, payload: object = None) -> bool:
        """Route a pointer event to the hover layer; returns True when it was consumed."""
        if self.interaction is None or self.interaction_state is None:
            return False
        event = parse_pointer_event(event_type, payload)
        if event is None:
            return False
        self.interaction.handle(self.interaction_state, event)
        return True

    @property
    def hovered_index(self) -> int | None:
        if self.interaction_state is None:
            return None
        return self.interaction_state.hovered_index

    def destroy(self) -> None:
        if self._pending is not None and not self._pending.done():
            LOGGER.warning("chart %s destroyed while a data fetch is pending", self.graph_class)
        self.remove_svg()
        self._reset()
        self.destroyed = True

    def to_svg(self) -> str:
        return self.surface.to_markup()

    def save_svg(self, path: str | Path) -> Path:
        return self.surface.save(path)

    def to_rgba(self) -> np.ndarray:
        return rasterize(self.surface)

    def save_png(self, path: str | Path) -> Path:
        return save_png(self.surface, path)
