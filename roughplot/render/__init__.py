from .annotations import AnnotationRenderer
from .axes import AxisRenderer, axis_font_size
from .legend import LegendAdapter, LegendItem, add_legend, legend_dimensions
from .series import RenderedSeries, SeriesRenderer, SeriesStyle, series_style

__all__ = [
    "AnnotationRenderer",
    "AxisRenderer",
    "LegendAdapter",
    "LegendItem",
    "RenderedSeries",
    "SeriesRenderer",
    "SeriesStyle",
    "add_legend",
    "axis_font_size",
    "legend_dimensions",
    "series_style",
]
