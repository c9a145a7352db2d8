"""Visualization: colour scales, overlays, frame rendering and sequences."""

from .colorscale import ColorScaleSelector, trim
from .overlay import OverlayComposer, Overlay, OverlayStyle
from .streamlines import draw_streamlines, regular_streamfield
from .renderer import (
    SnapshotRenderer,
    RenderTarget,
    OutputManager,
    PlotInfo,
    compose_title,
    console_speed_prompt,
)
from .animation import AnimationDriver, plot2d, resolve_time_indices

__all__ = [
    # Primary API
    'plot2d',
    'AnimationDriver',
    'SnapshotRenderer',
    'RenderTarget',
    'OutputManager',
    'PlotInfo',
    # Building blocks
    'ColorScaleSelector',
    'trim',
    'OverlayComposer',
    'Overlay',
    'OverlayStyle',
    'draw_streamlines',
    'regular_streamfield',
    'compose_title',
    'console_speed_prompt',
    'resolve_time_indices',
]
