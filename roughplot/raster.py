from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import math
from pathlib import Path
import re
import xml.etree.ElementTree as ET

import numpy as np
from PIL import Image, ImageColor, ImageDraw, ImageFont

from roughplot.sketch.path_data import flatten_path
from roughplot.surface import Surface, style_of


RGBA = tuple[int, int, int, int]

ROOT_FONT_PX = 16.0
DEFAULT_FONT_PX = 10.0
HANDWRITING_FONT_FALLBACK_PATTERNS = (
    "gaegu",
    "indieflower",
    "comic",
    "dejavusans",
    "dejavu sans",
)

_TRANSFORM_RE = re.compile(r"(translate|rotate)\s*\(([^)]*)\)")


@dataclass(frozen=True)
class Affine:
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    def then(self, other: "Affine") -> "Affine":
        """Apply ``other`` in this frame (SVG nesting order)."""
        return Affine(
            a=self.a * other.a + self.c * other.b,
            b=self.b * other.a + self.d * other.b,
            c=self.a * other.c + self.c * other.d,
            d=self.b * other.c + self.d * other.d,
            e=self.a * other.e + self.c * other.f + self.e,
            f=self.b * other.e + self.d * other.f + self.f,
        )

    def apply(self, x: float, y: float) -> tuple[float, float]:
        return (self.a * x + self.c * y + self.e, self.b * x + self.d * y + self.f)

    @property
    def angle_deg(self) -> float:
        return math.degrees(math.atan2(self.b, self.a))


def parse_transform(value: str | None) -> Affine:
    out = Affine()
    for name, raw_args in _TRANSFORM_RE.findall(value or ""):
        args = [float(v) for v in re.split(r"[\s,]+", raw_args.strip()) if v]
        if name == "translate":
            tx = args[0] if args else 0.0
            ty = args[1] if len(args) > 1 else 0.0
            out = out.then(Affine(e=tx, f=ty))
        else:
            rad = math.radians(args[0] if args else 0.0)
            out = out.then(Affine(a=math.cos(rad), b=math.sin(rad), c=-math.sin(rad), d=math.cos(rad)))
    return out


def parse_font_size(value: str | None) -> float:
    if not value:
        return DEFAULT_FONT_PX
    raw = value.strip()
    scale = 1.0
    for suffix, px in (("rem", ROOT_FONT_PX), ("em", ROOT_FONT_PX), ("px", 1.0)):
        if raw.endswith(suffix):
            raw = raw[: -len(suffix)]
            scale = px
            break
    try:
        return float(raw) * scale
    except ValueError:
        return DEFAULT_FONT_PX


def parse_color(value: str | None, opacity: float = 1.0) -> RGBA | None:
    if value is None:
        return None
    raw = value.strip()
    if raw in {"", "none", "transparent", "currentColor"}:
        return None
    try:
        rgb = ImageColor.getrgb(raw)
    except ValueError:
        return None
    alpha = rgb[3] if len(rgb) == 4 else 255
    return (rgb[0], rgb[1], rgb[2], int(round(alpha * max(0.0, min(1.0, opacity)))))


def rasterize(surface: Surface, background: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    """Render the surface's SVG tree into an ``(H, W, 4)`` uint8 array."""
    width = max(1, int(round(surface.width)))
    height = max(1, int(round(surface.height)))
    image = Image.new("RGBA", (width, height), background)
    _draw_element(image, surface.root, Affine(), 1.0)
    return np.asarray(image, dtype=np.uint8).copy()


def save_png(surface: Surface, path: str | Path) -> Path:
    out = Path(path)
    Image.fromarray(rasterize(surface)).save(out)
    return out


def _attr(el: ET.Element, name: str) -> str | None:
    style = style_of(el)
    return style.get(name, el.get(name))


def _draw_element(image: Image.Image, el: ET.Element, transform: Affine, opacity: float) -> None:
    if _attr(el, "visibility") == "hidden":
        return
    raw_opacity = _attr(el, "opacity")
    if raw_opacity is not None:
        try:
            opacity *= float(raw_opacity)
        except ValueError:
            pass
    if opacity <= 0:
        return
    local = transform.then(parse_transform(el.get("transform")))

    tag = el.tag.split("}", 1)[-1]
    if tag == "path":
        _draw_path(image, el, local, opacity)
    elif tag == "rect":
        _draw_rect(image, el, local, opacity)
    elif tag == "text":
        _draw_text(image, el, local, opacity)
    for child in el:
        _draw_element(image, child, local, opacity)


def _draw_path(image: Image.Image, el: ET.Element, transform: Affine, opacity: float) -> None:
    polylines = [[transform.apply(x, y) for x, y in line] for line in flatten_path(el.get("d", ""))]
    if not polylines:
        return
    draw = ImageDraw.Draw(image, "RGBA")
    fill = parse_color(_attr(el, "fill"), opacity)
    if fill is not None:
        for line in polylines:
            if len(line) > 2:
                draw.polygon(line, fill=fill)
    stroke = parse_color(_attr(el, "stroke"), opacity)
    if stroke is None:
        return
    try:
        stroke_width = float(_attr(el, "stroke-width") or 1.0)
    except ValueError:
        stroke_width = 1.0
    width = max(1, int(round(stroke_width)))
    for line in polylines:
        draw.line(line, fill=stroke, width=width, joint="curve")


def _draw_rect(image: Image.Image, el: ET.Element, transform: Affine, opacity: float) -> None:
    fill = parse_color(_attr(el, "fill"), opacity)
    if fill is None:
        return
    x = float(el.get("x", 0))
    y = float(el.get("y", 0))
    w = float(el.get("width", 0))
    h = float(el.get("height", 0))
    corners = [transform.apply(px, py) for px, py in ((x, y), (x + w, y), (x + w, y + h), (x, y + h))]
    ImageDraw.Draw(image, "RGBA").polygon(corners, fill=fill)


def _draw_text(image: Image.Image, el: ET.Element, transform: Affine, opacity: float) -> None:
    text = "".join(el.itertext())
    if not text:
        return
    fill = parse_color(_attr(el, "fill"), opacity) or (0, 0, 0, int(round(255 * opacity)))
    font_px = parse_font_size(_attr(el, "font-size"))
    font = _load_font(_attr(el, "font-family") or "", font_px)
    left, top, right, bottom = font.getbbox(text)
    tw = max(1, int(right - left))
    th = max(1, int(bottom - top))

    anchor = _attr(el, "text-anchor") or "start"
    shift = {"middle": tw / 2, "end": tw}.get(anchor, 0.0)
    x = float(el.get("x", 0)) - shift
    y = float(el.get("y", 0)) - th

    patch = Image.new("RGBA", (tw, th), (0, 0, 0, 0))
    ImageDraw.Draw(patch).text((-left, -top), text, fill=fill, font=font)
    angle = transform.angle_deg
    ox, oy = transform.apply(x, y)
    if abs(angle) > 1e-6:
        patch = patch.rotate(-angle, expand=True, resample=Image.Resampling.BICUBIC)
    # alpha_composite rejects destinations outside the canvas
    dest = (int(round(ox)), int(round(oy)))
    if 0 <= dest[0] < image.width and 0 <= dest[1] < image.height:
        clipped = patch.crop((0, 0, min(patch.width, image.width - dest[0]), min(patch.height, image.height - dest[1])))
        image.alpha_composite(clipped, dest=dest)


@lru_cache(maxsize=64)
def _load_font(font_family: str, font_size_px: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    size = max(1, int(round(font_size_px)))
    font_path = _resolve_font_path(font_family)
    if font_path is None:
        return ImageFont.load_default()
    try:
        return ImageFont.truetype(str(font_path), size=size)
    except OSError:
        return ImageFont.load_default()


def _resolve_font_path(font_family: str) -> Path | None:
    wanted = font_family.strip().lower()
    patterns = ((wanted,) if wanted else ()) + HANDWRITING_FONT_FALLBACK_PATTERNS

    font_dirs = [
        Path.home() / "Library" / "Fonts",
        Path("/Library/Fonts"),
        Path("/System/Library/Fonts"),
        Path("/usr/share/fonts"),
        Path("/usr/local/share/fonts"),
    ]

    candidates: list[Path] = []
    for base in font_dirs:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf"):
            candidates.extend(base.rglob(ext))

    for pattern in patterns:
        p = pattern.replace(" ", "")
        for path in candidates:
            if p in path.name.lower().replace(" ", ""):
                return path
    return None
