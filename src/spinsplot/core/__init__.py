"""Core data model: grid, parameters, options, errors and IO."""

from .grid import GridModel, SimParams, build_regular_grid_view
from .errors import ConfigError, UnknownFieldError, ResourceError, InterpolationWarning
from .config import PlotOptions, make_options

__all__ = [
    "GridModel",
    "SimParams",
    "build_regular_grid_view",
    "ConfigError",
    "UnknownFieldError",
    "ResourceError",
    "InterpolationWarning",
    "PlotOptions",
    "make_options",
]
