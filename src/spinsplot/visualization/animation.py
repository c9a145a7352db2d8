"""
Frame sequences and the plot2d entry point.
"""

from __future__ import annotations
from typing import Callable, Iterable, List, Optional, Sequence, Union
import logging
import numpy as np

from ..core.config.schemas import PlotOptions, make_options
from ..core.errors import ConfigError
from ..core.grid import GridModel, SimParams, build_regular_grid_view
from ..core.io.readers import RawFieldReader
from ..postprocessing.cross_section import default_slice
from .renderer import PlotInfo, RenderTarget, SnapshotRenderer

logger = logging.getLogger(__name__)


TimeArg = Union[int, str, Sequence[int], Iterable[int]]


def resolve_time_indices(t_index: TimeArg, params: SimParams) -> List[int]:
    """
    Normalise a time argument to a list of output indices.

    Args:
        t_index: Output index, iterable of indices, or a time in seconds
            given as a string (e.g. '12.5'), converted with the output interval
        params: Simulation parameters (plot_interval for times in seconds)

    Returns:
        List of output indices, in order
    """
    if isinstance(t_index, str):
        if params.plot_interval is None:
            raise ConfigError(f"Time '{t_index}' given in seconds but plot_interval is not set")
        try:
            seconds = float(t_index)
        except ValueError as e:
            raise ConfigError(f"Cannot read a time from '{t_index}'") from e
        return [int(round(seconds / params.plot_interval))]

    if isinstance(t_index, (int, np.integer)):
        indices = [int(t_index)]
    else:
        indices = [int(ii) for ii in t_index]

    if not indices:
        raise ConfigError("No output indices to plot")
    if any(ii < 0 for ii in indices):
        raise ConfigError(f"Output indices must be non-negative, got {indices}")
    return indices


class AnimationDriver:
    """
    Renders one frame per output index onto a single target.

    Options are fixed for the whole run; frames are rendered in order and
    only the last frame's PlotInfo is returned.

    Usage:
        driver = AnimationDriver(reader, target)
        info = driver.run("rho", range(0, 20), grid, params, options)
    """

    def __init__(self,
                 reader: RawFieldReader,
                 target: Optional[RenderTarget] = None,
                 speed_prompt: Optional[Callable[[], float]] = None):
        self.reader = reader
        self.target = target
        self.speed_prompt = speed_prompt

    def run(self,
            field_name: str,
            t_indices: Iterable[int],
            grid: GridModel,
            params: SimParams,
            options: PlotOptions) -> PlotInfo:
        """
        Render field_name at each index of t_indices.

        Returns:
            PlotInfo of the last frame
        """
        t_indices = [int(ii) for ii in t_indices]
        if len(t_indices) == 0:
            raise ConfigError("No output indices to plot")
        if params.mapped_grid != grid.mapped:
            raise ConfigError(
                f"params.mapped_grid={params.mapped_grid} does not match the grid (mapped={grid.mapped})"
            )

        if self.target is None:
            self.target = RenderTarget.create(options.fnum, visible=options.visible)

        renderer = SnapshotRenderer(
            self.target, self.reader, grid, params, options, speed_prompt=self.speed_prompt
        )

        multiple = len(t_indices) > 1
        if multiple:
            logger.info("Plotting %s at %d outputs (%d to %d)",
                        field_name, len(t_indices), t_indices[0], t_indices[-1])

        info = None
        for ii in t_indices:
            info = renderer.render(field_name, ii, sync=multiple)
        return info


def plot2d(field_name: str,
           t_index: TimeArg,
           reader: RawFieldReader,
           grid: GridModel,
           params: Optional[SimParams] = None,
           options: Optional[PlotOptions] = None,
           target: Optional[RenderTarget] = None,
           speed_prompt: Optional[Callable[[], float]] = None,
           **overrides) -> PlotInfo:
    """
    Plot a 2D cross-section of a field at one or more outputs.

    Args:
        field_name: Field to plot, e.g. 'rho', 'Mean u', 'Ri', 'Streamline'
        t_index: Output index, indices, or a time in seconds as a string
        reader: Raw field source
        grid: Simulation grid
        params: Simulation parameters (derived from the grid if omitted)
        options: Base plot options
        target: Figure/axes to draw into (created from options.fnum if omitted)
        speed_prompt: Asks for a streamline reference speed when speed=-1
        **overrides: Plot option overrides (dimen='X', slice=0.5, ...)

    Returns:
        PlotInfo of the last frame

    Usage:
        info = plot2d('rho', range(10), reader, grid, dimen='Y', slice=0.2)
    """
    if not grid.mapped:
        grid = build_regular_grid_view(grid)
    if params is None:
        params = SimParams.from_grid(grid)

    options = make_options(options, **overrides)
    if grid.ndims == 3 and options.slice is None:
        options = make_options(options, slice=default_slice(grid, options.dimen))
        logger.debug("No slice given, using %s=%g", options.dimen, options.slice)

    indices = resolve_time_indices(t_index, params)
    driver = AnimationDriver(reader, target=target, speed_prompt=speed_prompt)
    return driver.run(field_name, indices, grid, params, options)
