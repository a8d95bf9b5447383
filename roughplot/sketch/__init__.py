from .generator import SketchGenerator, SketchRenderer, SketchStyle, dash_array
from .path_data import PathOp, flatten_path, parse_path, sample_cubic

__all__ = [
    "PathOp",
    "SketchGenerator",
    "SketchRenderer",
    "SketchStyle",
    "dash_array",
    "flatten_path",
    "parse_path",
    "sample_cubic",
]
