from roughplot.api import line
from roughplot.chart import Chart
from roughplot.config import ChartConfig, Margin, Note, ReferenceLine
from roughplot.errors import (
    AcquisitionError,
    ConfigurationError,
    DataShapeError,
    InteractionIndexError,
    NoDataError,
    PlotDataError,
    PlotError,
)
from roughplot.interaction import InteractionState, PointerEvent
from roughplot.line import Line
from roughplot.scales import ScaleModel, build_scale_model
from roughplot.sketch import SketchGenerator, SketchStyle
from roughplot.surface import Surface

__all__ = [
    "AcquisitionError",
    "Chart",
    "ChartConfig",
    "ConfigurationError",
    "DataShapeError",
    "InteractionIndexError",
    "InteractionState",
    "Line",
    "Margin",
    "NoDataError",
    "Note",
    "PlotDataError",
    "PlotError",
    "PointerEvent",
    "ReferenceLine",
    "ScaleModel",
    "SketchGenerator",
    "SketchStyle",
    "Surface",
    "build_scale_model",
    "line",
]
