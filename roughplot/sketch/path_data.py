from __future__ import annotations

from dataclasses import dataclass
import re

import numpy as np

from roughplot.errors import PlotDataError


Point = tuple[float, float]

_TOKEN_RE = re.compile(r"[MmLlHhVvCcZz]|[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_ARITY = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "Z": 0}


@dataclass(frozen=True)
class PathOp:
    """Absolute path operation; ``points`` holds 1 point for M/L, 3 for C, none for Z."""

    op: str
    points: tuple[Point, ...] = ()


def parse_path(d: str) -> list[PathOp]:
    """Parse an SVG path description into absolute M/L/C/Z operations."""
    tokens = _TOKEN_RE.findall(d or "")
    ops: list[PathOp] = []
    cursor: Point = (0.0, 0.0)
    start: Point = (0.0, 0.0)
    command: str | None = None
    i = 0
    while i < len(tokens):
        tok = tokens[i]
        if tok.isalpha():
            command = tok
            i += 1
            if command in "Zz":
                ops.append(PathOp("Z"))
                cursor = start
                continue
        elif command is None:
            raise PlotDataError(f"path data must start with a command: {d!r}")

        assert command is not None
        upper = command.upper()
        arity = _ARITY[upper]
        args = tokens[i : i + arity]
        if len(args) < arity or any(a.isalpha() for a in args):
            raise PlotDataError(f"truncated path data near token {i}: {d!r}")
        nums = [float(a) for a in args]
        i += arity
        relative = command.islower()
        cx, cy = cursor

        if upper == "M":
            pt = (cx + nums[0], cy + nums[1]) if relative else (nums[0], nums[1])
            ops.append(PathOp("M", (pt,)))
            cursor = start = pt
            # Extra coordinate pairs after a move are implicit line-tos.
            command = "l" if relative else "L"
        elif upper == "L":
            pt = (cx + nums[0], cy + nums[1]) if relative else (nums[0], nums[1])
            ops.append(PathOp("L", (pt,)))
            cursor = pt
        elif upper == "H":
            pt = (cx + nums[0] if relative else nums[0], cy)
            ops.append(PathOp("L", (pt,)))
            cursor = pt
        elif upper == "V":
            pt = (cx, cy + nums[0] if relative else nums[0])
            ops.append(PathOp("L", (pt,)))
            cursor = pt
        elif upper == "C":
            if relative:
                pts = ((cx + nums[0], cy + nums[1]), (cx + nums[2], cy + nums[3]), (cx + nums[4], cy + nums[5]))
            else:
                pts = ((nums[0], nums[1]), (nums[2], nums[3]), (nums[4], nums[5]))
            ops.append(PathOp("C", pts))
            cursor = pts[2]
    return ops


def flatten_path(d: str, *, bezier_steps: int = 8) -> list[list[Point]]:
    """Polyline approximation of a path, one list per subpath."""
    polylines: list[list[Point]] = []
    current: list[Point] = []
    for op in parse_path(d):
        if op.op == "M":
            if len(current) > 1:
                polylines.append(current)
            current = [op.points[0]]
        elif op.op == "L":
            current.append(op.points[0])
        elif op.op == "C":
            p0 = current[-1] if current else op.points[0]
            current.extend(sample_cubic(p0, *op.points, steps=bezier_steps)[1:])
        elif op.op == "Z" and current:
            current.append(current[0])
    if len(current) > 1:
        polylines.append(current)
    return polylines


def sample_cubic(p0: Point, p1: Point, p2: Point, p3: Point, *, steps: int = 8) -> list[Point]:
    t = np.linspace(0.0, 1.0, max(2, steps + 1))
    mt = 1.0 - t
    ctrl = np.asarray([p0, p1, p2, p3], dtype=np.float64)
    coeffs = np.stack([mt**3, 3 * mt**2 * t, 3 * mt * t**2, t**3], axis=1)
    out = coeffs @ ctrl
    return [(float(x), float(y)) for x, y in out]
