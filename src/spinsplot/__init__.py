"""
spinsplot: 2D cross-section plots of SPINS simulation output.

Usage:
    from spinsplot import plot2d, GridModel, ArrayFieldReader

    info = plot2d('rho', range(10), reader, grid, dimen='Y', slice=0.5)
"""

from .core import (
    GridModel,
    SimParams,
    PlotOptions,
    make_options,
    ConfigError,
    UnknownFieldError,
    ResourceError,
    InterpolationWarning,
)
from .core.io import ArrayFieldReader, RawFieldReader, load_options, load_params
from .postprocessing import FieldResolver, CrossSectionExtractor
from .visualization import (
    plot2d,
    AnimationDriver,
    SnapshotRenderer,
    RenderTarget,
    PlotInfo,
    console_speed_prompt,
)
from .logging_config import setup_logging

__version__ = "0.1.0"

__all__ = [
    'plot2d',
    'AnimationDriver',
    'SnapshotRenderer',
    'RenderTarget',
    'PlotInfo',
    'console_speed_prompt',
    'FieldResolver',
    'CrossSectionExtractor',
    'GridModel',
    'SimParams',
    'PlotOptions',
    'make_options',
    'ArrayFieldReader',
    'RawFieldReader',
    'load_options',
    'load_params',
    'ConfigError',
    'UnknownFieldError',
    'ResourceError',
    'InterpolationWarning',
    'setup_logging',
]
