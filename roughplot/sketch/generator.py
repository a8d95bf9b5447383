from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import math
from typing import Protocol
import xml.etree.ElementTree as ET

import numpy as np

from roughplot.sketch.path_data import Point, parse_path, sample_cubic


@dataclass(frozen=True)
class SketchStyle:
    stroke: str = "black"
    stroke_width: float = 1.0
    roughness: float = 1.0
    bowing: float = 1.0
    fill: str | None = None
    fill_style: str = "hachure"
    dash_pattern: tuple[float, ...] = ()
    max_randomness_offset: float = 2.0


class SketchRenderer(Protocol):
    """Turns precise geometry into hand-drawn SVG nodes."""

    def curve(self, points: Sequence[Point], style: SketchStyle) -> ET.Element:
        ...

    def linear_path(self, points: Sequence[Point], style: SketchStyle) -> ET.Element:
        ...

    def circle(self, cx: float, cy: float, r: float, style: SketchStyle) -> ET.Element:
        ...

    def path(self, d: str, style: SketchStyle) -> ET.Element:
        ...

    def rectangle(self, x: float, y: float, width: float, height: float, style: SketchStyle) -> ET.Element:
        ...


def dash_array(pattern: Sequence[float]) -> str | None:
    if not pattern or all(v == 0 for v in pattern):
        return None
    if len(pattern) == 1:
        pattern = (pattern[0], pattern[0])
    return " ".join(_fmt(v) for v in pattern)


def _fmt(value: float) -> str:
    out = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if out == "-0" else out


class SketchGenerator:
    """Default sketch renderer: double-stroked, randomly perturbed strokes.

    Every primitive returns a ``<g>`` holding one or more ``<path>`` nodes.
    A fixed ``seed`` makes the perturbation, and so the markup, repeatable.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._rng = np.random.default_rng(seed)

    def curve(self, points: Sequence[Point], style: SketchStyle) -> ET.Element:
        pts = [(float(x), float(y)) for x, y in points]
        if len(pts) < 3:
            return self.linear_path(pts, style)
        first = self._curve_ops(pts, 1.0 * (1 + style.roughness * 0.2), style)
        second = self._curve_ops(pts, 1.5 * (1 + style.roughness * 0.22), style)
        return self._node([first + " " + second], style)

    def linear_path(self, points: Sequence[Point], style: SketchStyle, *, closed: bool = False) -> ET.Element:
        pts = [(float(x), float(y)) for x, y in points]
        segments: list[str] = []
        if closed and len(pts) > 2:
            pts = pts + [pts[0]]
        for (x1, y1), (x2, y2) in zip(pts, pts[1:]):
            segments.append(self._double_line(x1, y1, x2, y2, style))
        return self._node([" ".join(segments)] if segments else [], style)

    def circle(self, cx: float, cy: float, r: float, style: SketchStyle) -> ET.Element:
        rough = style.roughness
        steps = max(9, int(math.ceil(2 * math.pi * r / 8)))
        outlines: list[str] = []
        fill_d: str | None = None
        for overlay in (False, True):
            start = float(self._rng.uniform(0.0, 2 * math.pi))
            radius_jitter = r * (0.05 if overlay else 0.1)
            ring: list[Point] = []
            for k in range(steps):
                angle = start + 2 * math.pi * k / steps
                rad = r + self._jitter(radius_jitter, rough)
                ring.append((cx + rad * math.cos(angle), cy + rad * math.sin(angle)))
            d = self._closed_curve(ring)
            if fill_d is None:
                fill_d = d
            outlines.append(d)
        node = self._node([" ".join(outlines)], style)
        if style.fill is not None and style.fill_style == "solid" and fill_d is not None:
            node.insert(0, _path_element(fill_d, stroke="none", stroke_width=0, fill=style.fill))
        return node

    def path(self, d: str, style: SketchStyle) -> ET.Element:
        segments: list[str] = []
        cursor: Point | None = None
        start: Point | None = None
        for op in parse_path(d):
            if op.op == "M":
                cursor = start = op.points[0]
            elif op.op == "L" and cursor is not None:
                (x1, y1), (x2, y2) = cursor, op.points[0]
                segments.append(self._double_line(x1, y1, x2, y2, style))
                cursor = op.points[0]
            elif op.op == "C" and cursor is not None:
                sampled = sample_cubic(cursor, *op.points, steps=6)
                segments.append(self._curve_ops(sampled, 1.0 + style.roughness * 0.2, style))
                cursor = op.points[2]
            elif op.op == "Z" and cursor is not None and start is not None:
                (x1, y1), (x2, y2) = cursor, start
                segments.append(self._double_line(x1, y1, x2, y2, style))
                cursor = start
        return self._node([" ".join(segments)] if segments else [], style)

    def rectangle(self, x: float, y: float, width: float, height: float, style: SketchStyle) -> ET.Element:
        corners = [(x, y), (x + width, y), (x + width, y + height), (x, y + height)]
        node = self.linear_path(corners, style, closed=True)
        if style.fill is not None and style.fill_style == "solid":
            d = "M{} {} H{} V{} H{} Z".format(_fmt(x), _fmt(y), _fmt(x + width), _fmt(y + height), _fmt(x))
            node.insert(0, _path_element(d, stroke="none", stroke_width=0, fill=style.fill))
        return node

    def _jitter(self, magnitude: float, roughness: float) -> float:
        if magnitude == 0 or roughness == 0:
            return 0.0
        m = abs(magnitude)
        return roughness * float(self._rng.uniform(-m, m))

    def _double_line(self, x1: float, y1: float, x2: float, y2: float, style: SketchStyle) -> str:
        return self._line(x1, y1, x2, y2, style, overlay=False) + " " + self._line(x1, y1, x2, y2, style, overlay=True)

    def _line(self, x1: float, y1: float, x2: float, y2: float, style: SketchStyle, *, overlay: bool) -> str:
        length = math.hypot(x2 - x1, y2 - y1)
        if length < 200:
            gain = 1.0
        elif length > 500:
            gain = 0.4
        else:
            gain = -0.0016668 * length + 1.233334
        rough = style.roughness * gain

        offset = style.max_randomness_offset
        if offset * offset * 100 > length * length:
            offset = length / 10
        spread = offset / 2 if overlay else offset

        diverge = 0.2 + float(self._rng.random()) * 0.2
        mid_dx = style.bowing * style.max_randomness_offset * (y2 - y1) / 200
        mid_dy = style.bowing * style.max_randomness_offset * (x1 - x2) / 200
        mid_dx = self._jitter(mid_dx, rough)
        mid_dy = self._jitter(mid_dy, rough)

        def r() -> float:
            return self._jitter(spread, rough)

        sx, sy = x1 + r(), y1 + r()
        c1x = mid_dx + x1 + (x2 - x1) * diverge + r()
        c1y = mid_dy + y1 + (y2 - y1) * diverge + r()
        c2x = mid_dx + x1 + 2 * (x2 - x1) * diverge + r()
        c2y = mid_dy + y1 + 2 * (y2 - y1) * diverge + r()
        ex, ey = x2 + r(), y2 + r()
        return (
            f"M{_fmt(sx)} {_fmt(sy)} "
            f"C{_fmt(c1x)} {_fmt(c1y)}, {_fmt(c2x)} {_fmt(c2y)}, {_fmt(ex)} {_fmt(ey)}"
        )

    def _curve_ops(self, points: Sequence[Point], offset: float, style: SketchStyle) -> str:
        jittered = [(x + self._jitter(offset, style.roughness), y + self._jitter(offset, style.roughness)) for x, y in points]
        padded = [jittered[0]] + jittered + [jittered[-1]]
        return _catmull_rom(padded)

    def _closed_curve(self, ring: Sequence[Point]) -> str:
        padded = [ring[-1]] + list(ring) + [ring[0], ring[1]]
        return _catmull_rom(padded)

    def _node(self, path_data: Sequence[str], style: SketchStyle) -> ET.Element:
        group = ET.Element("g")
        for d in path_data:
            if not d:
                continue
            group.append(
                _path_element(
                    d,
                    stroke=style.stroke,
                    stroke_width=style.stroke_width,
                    fill="none",
                    dash=dash_array(style.dash_pattern),
                )
            )
        return group


def _catmull_rom(ps: Sequence[Point]) -> str:
    """Cubic Bezier form of a Catmull-Rom spline through ``ps[1:-1]``."""
    parts = [f"M{_fmt(ps[1][0])} {_fmt(ps[1][1])}"]
    for i in range(1, len(ps) - 2):
        b1x = ps[i][0] + (ps[i + 1][0] - ps[i - 1][0]) / 6
        b1y = ps[i][1] + (ps[i + 1][1] - ps[i - 1][1]) / 6
        b2x = ps[i + 1][0] - (ps[i + 2][0] - ps[i][0]) / 6
        b2y = ps[i + 1][1] - (ps[i + 2][1] - ps[i][1]) / 6
        parts.append(
            f"C{_fmt(b1x)} {_fmt(b1y)}, {_fmt(b2x)} {_fmt(b2y)}, {_fmt(ps[i + 1][0])} {_fmt(ps[i + 1][1])}"
        )
    return " ".join(parts)


def _path_element(d: str, *, stroke: str, stroke_width: float, fill: str, dash: str | None = None) -> ET.Element:
    el = ET.Element("path", {"d": d, "stroke": stroke, "stroke-width": _fmt(stroke_width), "fill": fill})
    if dash is not None:
        el.set("stroke-dasharray", dash)
    return el
