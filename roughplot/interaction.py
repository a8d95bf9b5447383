from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Literal
import xml.etree.ElementTree as ET

from roughplot.config import ChartConfig
from roughplot.scales import ScaleModel, format_value
from roughplot.series import DataSeries, FileColumnSeries
from roughplot.surface import fmt_num, set_style


PointerPhase = Literal["move", "leave"]

# file-form tooltips sit above the point; object-form ones sit on it
FILE_TOOLTIP_OFFSET = 6
_MOVE_EVENTS = {"pointer_move", "mouse_move", "mousemove", "trackpad_move"}
_LEAVE_EVENTS = {"pointer_leave", "mouse_leave", "mouseout", "mouse_out", "pointer_out"}


@dataclass(frozen=True)
class PointerEvent:
    """Pointer event in surface coordinates."""

    phase: PointerPhase
    x: float = 0.0
    y: float = 0.0


def parse_pointer_event(event_type: str, payload: object = None) -> PointerEvent | None:
    """Parse a normalized pointer event; anything that is not a move/leave yields ``None``."""
    if event_type in _LEAVE_EVENTS:
        return PointerEvent(phase="leave")
    if event_type not in _MOVE_EVENTS or not isinstance(payload, Mapping):
        return None
    try:
        x = float(payload["x"])
        y = float(payload["y"])
    except (KeyError, TypeError, ValueError):
        return None
    return PointerEvent(phase="move", x=x, y=y)


@dataclass
class InteractionState:
    """Hover state owned by a chart; mutated only by pointer handlers."""

    tooltips: dict[str, ET.Element] = field(default_factory=dict)
    hovered_index: int | None = None

    @property
    def hovering(self) -> bool:
        return self.hovered_index is not None


class InteractionLayer:
    """Hit-test rectangle plus one tooltip per series, driven by pointer events."""

    def __init__(
        self,
        svg: ET.Element,
        config: ChartConfig,
        scale: ScaleModel,
        series: Sequence[DataSeries],
        font_family: str,
    ) -> None:
        self._svg = svg
        self._config = config
        self._scale = scale
        self._series = list(series)
        self._font_family = font_family

    def attach(self) -> InteractionState:
        state = InteractionState()
        for s in self._series:
            group = ET.Element("g", {"class": f"{s.key}class-text"})
            text = ET.Element("text", {"text-anchor": "middle", "alignment-baseline": "middle"})
            set_style(text, font_size=self._config.tooltip_font_size, opacity=0, font_family=self._font_family)
            group.append(text)
            self._svg.append(group)
            state.tooltips[s.key] = text

        screen = ET.Element("g", {"pointer-events": "all", "class": f"{self._config.graph_class}-screen"})
        screen.append(
            ET.Element(
                "rect",
                {
                    "width": fmt_num(self._config.plot_width),
                    "height": fmt_num(self._config.plot_height),
                    "fill": "none",
                },
            )
        )
        self._svg.append(screen)
        return state

    def handle(self, state: InteractionState, event: PointerEvent) -> None:
        if event.phase == "leave":
            self.pointer_leave(state)
            return
        local_x = event.x - self._config.margin.left
        local_y = event.y - self._config.margin.top
        if not self.contains(local_x, local_y):
            self.pointer_leave(state)
            return
        self.pointer_move(state, local_x)

    def contains(self, x: float, y: float) -> bool:
        return 0 <= x <= self._config.plot_width and 0 <= y <= self._config.plot_height

    def pointer_move(self, state: InteractionState, x: float) -> int:
        index = self._scale.x_scale.nearest_index(x)
        state.hovered_index = index
        domain_value = self._scale.domain_value_at(index)
        screen_x = self._scale.x_scale.position_of_index(index)
        for s in self._series:
            text = state.tooltips.get(s.key)
            if text is None:
                continue
            value = s.value_at(index)
            if value is None:
                set_style(text, opacity=0)
                continue
            text.text = f"({format_value(domain_value)}, {format_value(value, self._config.y_value_format)})"
            text.set("x", fmt_num(screen_x))
            offset = FILE_TOOLTIP_OFFSET if isinstance(s, FileColumnSeries) else 0
            text.set("y", fmt_num(self._scale.y_scale(value) - offset))
            set_style(text, opacity=1)
        return index

    def pointer_leave(self, state: InteractionState) -> None:
        # text and position are left as-is; only visibility changes
        state.hovered_index = None
        for text in state.tooltips.values():
            set_style(text, opacity=0)
