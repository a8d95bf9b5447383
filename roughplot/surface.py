from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
import xml.etree.ElementTree as ET


SVG_NS = "http://www.w3.org/2000/svg"


def fmt_num(value: float) -> str:
    out = f"{float(value):.3f}".rstrip("0").rstrip(".")
    return "0" if out == "-0" else out


def translate(x: float = 0, y: float = 0) -> str:
    return f"translate({fmt_num(x)},{fmt_num(y)})"


def rotate(degrees: float) -> str:
    return f"rotate({fmt_num(degrees)})"


def classes_of(el: ET.Element) -> list[str]:
    return el.get("class", "").split()


def has_class(el: ET.Element, name: str) -> bool:
    return name in classes_of(el)


def add_class(el: ET.Element, name: str) -> ET.Element:
    names = classes_of(el)
    if name not in names:
        names.append(name)
    el.set("class", " ".join(names))
    return el


def style_of(el: ET.Element) -> dict[str, str]:
    out: dict[str, str] = {}
    for decl in el.get("style", "").split(";"):
        if ":" not in decl:
            continue
        name, value = decl.split(":", 1)
        out[name.strip()] = value.strip()
    return out


def set_style(el: ET.Element, **props: object) -> ET.Element:
    """Merge CSS properties (``font_size`` -> ``font-size``) into the style attribute."""
    merged = style_of(el)
    for name, value in props.items():
        merged[name.replace("_", "-")] = str(value)
    el.set("style", "; ".join(f"{k}: {v}" for k, v in merged.items()))
    return el


def text_element(x: float, y: float, text: str, **attrs: str) -> ET.Element:
    el = ET.Element("text", {"x": fmt_num(x), "y": fmt_num(y), **attrs})
    el.text = text
    return el


@dataclass
class Surface:
    """Root ``<svg>`` drawing surface shared by every renderer of a chart."""

    width: float
    height: float
    root: ET.Element = field(init=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("surface width/height must be > 0")
        self.root = ET.Element(
            "svg",
            {
                "xmlns": SVG_NS,
                "width": fmt_num(self.width),
                "height": fmt_num(self.height),
                "viewBox": f"0 0 {fmt_num(self.width)} {fmt_num(self.height)}",
            },
        )

    def append(self, node: ET.Element) -> ET.Element:
        self.root.append(node)
        return node

    def iter_class(self, name: str) -> Iterator[ET.Element]:
        return (el for el in self.root.iter() if has_class(el, name))

    def find_id(self, element_id: str) -> ET.Element | None:
        for el in self.root.iter():
            if el.get("id") == element_id:
                return el
        return None

    def to_markup(self) -> str:
        return ET.tostring(self.root, encoding="unicode")

    def save(self, path: str | Path) -> Path:
        out = Path(path)
        out.write_text(self.to_markup(), encoding="utf-8")
        return out
