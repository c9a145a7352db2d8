"""Configuration schemas for validation."""

from .schemas import PlotOptions, make_options

__all__ = [
    "PlotOptions",
    "make_options",
]
