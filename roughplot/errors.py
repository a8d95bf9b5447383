from __future__ import annotations


class PlotError(Exception):
    """Base class for every error raised by roughplot."""


class ConfigurationError(PlotError, ValueError):
    """Malformed or contradictory chart configuration."""


class PlotDataError(PlotError):
    """Input data cannot be turned into a drawable series."""


DataShapeError = PlotDataError


class NoDataError(PlotDataError):
    """No series, or only empty series, so no extent can be computed."""


class AcquisitionError(PlotError):
    """A delimited-text data source could not be fetched or parsed."""


class InteractionIndexError(PlotError, IndexError):
    """A hover index falls outside the x-domain."""
