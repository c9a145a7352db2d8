"""
Single-frame rendering of a cross-section.

One call to SnapshotRenderer.render() walks a frame through:
    init -> title/labels -> data -> primary style -> overlay -> finalize

Handles:
- Explicit render target (figure + axes) reused across frames
- Reference speed for streamline plots (option or injected prompt)
- Terrain outline, aspect ratio and axis limits
- Saving frames (directories created as needed)
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Optional, Tuple, Union
import logging
import warnings
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from matplotlib.axes import Axes
from numpy.typing import NDArray

from ..core.config.schemas import PlotOptions, make_options
from ..core.errors import ConfigError, InterpolationWarning, ResourceError
from ..core.grid import GridModel, SimParams
from ..core.io.readers import RawFieldReader
from ..postprocessing.cross_section import CrossSectionExtractor, IndexWindow, default_slice, nearest_index
from ..postprocessing.derived import FieldResolver
from ..postprocessing.fields import FieldFrame, FieldKind, FieldRequest
from .colorscale import ColorScaleSelector, trim
from .overlay import Overlay, OverlayComposer
from .streamlines import draw_streamlines

logger = logging.getLogger(__name__)


AXIS_LABELS = {
    "X": ("y (m)", "z (m)"),
    "Y": ("x (m)", "z (m)"),
    "Z": ("x (m)", "y (m)"),
}

RI_CRITICAL = 0.25

# Width/height ratio above which the plot is stretched instead of kept to scale
ASPECT_LIMIT = 5.0


@dataclass
class PlotInfo:
    """
    Data plotted in one frame.

    data1/data2 are in grid-index order (the plotting transpose of
    rectilinear sections is undone).
    """
    xvar: NDArray
    yvar: NDArray
    data1: NDArray
    var1: str
    dimen: str
    slice: Optional[float]
    data2: Optional[NDArray] = None
    var2: Optional[str] = None


def console_speed_prompt() -> float:
    """Ask for the streamline background speed on the console."""
    return float(input("Provide a sensible wave speed in m/s: "))


def compose_title(request: FieldRequest, t_index: int, params: SimParams,
                  options: PlotOptions) -> str:
    """
    Frame title: field, section location (3D only), then time.

    Example: 'Spanwise Mean rho, Y=0.5 m, t=12 s'
    """
    title = request.name
    if request.is_spanwise:
        title = "Spanwise " + title
    if params.ndims == 3 and options.slice is not None:
        title += f", {options.dimen}={options.slice:g} m"
    if params.plot_interval is not None:
        title += f", t={t_index * params.plot_interval:g} s"
    else:
        title += f", t_n={t_index}"
    return title


def plot_limits(frame: FieldFrame, options: PlotOptions) -> Tuple[float, float, float, float]:
    """Plot axis (x1, x2, z1, z2): options.axis or the extent of the section."""
    if options.axis is not None:
        return tuple(options.axis)
    return (
        float(np.nanmin(frame.xvar)), float(np.nanmax(frame.xvar)),
        float(np.nanmin(frame.yvar)), float(np.nanmax(frame.yvar)),
    )


class RenderTarget:
    """
    Figure and axes a run draws into.

    Each frame clears and redraws the same figure; nothing else should draw
    on it while a run is in progress.
    """

    def __init__(self, fig: Figure, visible: bool = True):
        self.fig = fig
        self.visible = visible
        self.ax: Axes = fig.axes[0] if fig.axes else fig.add_subplot(111)

    @classmethod
    def create(cls,
               fnum: Union[int, str] = "new",
               visible: bool = True,
               figsize: Tuple[float, float] = (10, 6)) -> RenderTarget:
        """
        Create (or select) a figure.

        Args:
            fnum: Figure number, or 'new' for a fresh figure
            visible: Show the window on interactive backends
            figsize: Size of newly created figures
        """
        if fnum == "new":
            fig = plt.figure(figsize=figsize)
        else:
            fig = plt.figure(num=fnum, figsize=figsize)

        target = cls(fig, visible=visible)
        if visible and plt.isinteractive():
            fig.show()
        return target

    def clear(self) -> Axes:
        """Clear the previous frame (colour bars included)."""
        self.fig.clf()
        self.ax = self.fig.add_subplot(111)
        return self.ax

    def sync(self):
        """Flush drawing so successive frames are seen while a sequence renders."""
        self.fig.canvas.draw_idle()
        self.fig.canvas.flush_events()


class OutputManager:
    """
    Manages output paths and save behavior.

    The output directory (and its parents) is created on first use.
    """

    def __init__(self, base_dir: Union[str, Path]):
        """
        Args:
            base_dir: Directory for saved figures
        """
        self.base_dir = Path(base_dir)

    @property
    def output_dir(self) -> Path:
        """Get (and create) the output directory."""
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ResourceError(f"Cannot create figure directory '{self.base_dir}': {e}") from e
        return self.base_dir

    def get_path(self, filename: str) -> Path:
        """Get full path for a file in the output directory."""
        return self.output_dir / filename

    def save(self, fig: Figure, filename: str, dpi: int = 150) -> Path:
        """Save a figure, reporting failures as ResourceError."""
        save_path = self.get_path(filename)
        try:
            fig.savefig(save_path, dpi=dpi)
        except (OSError, ValueError) as e:
            raise ResourceError(f"Cannot save figure '{save_path}': {e}") from e
        logger.info("Saved: %s", save_path)
        return save_path


class SnapshotRenderer:
    """
    Renders one frame (field at one output index) onto a RenderTarget.

    Usage:
        target = RenderTarget.create()
        renderer = SnapshotRenderer(target, reader, grid, params, options)
        info = renderer.render("rho", 3)
    """

    def __init__(self,
                 target: RenderTarget,
                 reader: RawFieldReader,
                 grid: GridModel,
                 params: SimParams,
                 options: PlotOptions,
                 speed_prompt: Optional[Callable[[], float]] = None):
        """
        Args:
            target: Figure/axes to draw into
            reader: Raw field source
            grid: Simulation grid
            params: Simulation parameters
            options: Plot options (read-only for the whole run); a missing
                slice on 3D grids is fixed to the domain mid-point
            speed_prompt: Called once when options.speed is -1 and a
                streamline reference speed is needed
        """
        self.target = target
        self.grid = grid
        self.params = params
        if grid.ndims == 3 and options.slice is None:
            options = make_options(options, slice=default_slice(grid, options.dimen))
        self.options = options
        self.speed_prompt = speed_prompt

        self.resolver = FieldResolver(reader, grid, params)
        self.extractor = CrossSectionExtractor()
        self.colors = ColorScaleSelector()
        self.overlays = OverlayComposer(self.resolver, self.extractor, grid)
        self.window = IndexWindow.from_options(grid, options)
        self.output = OutputManager(options.dir) if options.savefig else None

        self._speed: Optional[float] = None

    # -------------------------------------------------------------------------
    # Frame
    # -------------------------------------------------------------------------

    def render(self, field_name: str, t_index: int, sync: bool = False) -> PlotInfo:
        """
        Render one frame.

        Args:
            field_name: Primary field
            t_index: Output index
            sync: Flush drawing after the frame (used for sequences)

        Returns:
            PlotInfo of the frame
        """
        request = FieldRequest.parse(field_name)
        logger.debug("Rendering %s at output %d", request.name, t_index)

        ax = self.target.clear()
        self._title_and_labels(ax, request, t_index)

        frame = self._data_ready(request, t_index)
        frame = self._styled(ax, request, frame)
        overlay = self._overlaid(ax, request, frame, t_index)
        self._finalize(ax, request, frame, t_index, sync)

        return PlotInfo(
            xvar=frame.xvar,
            yvar=frame.yvar,
            data1=frame.grid_order(),
            var1=request.name,
            dimen=self.options.dimen,
            slice=self.options.slice,
            data2=overlay.frame.grid_order() if overlay is not None else None,
            var2=overlay.name if overlay is not None else None,
        )

    def _title_and_labels(self, ax: Axes, request: FieldRequest, t_index: int):
        ax.set_title(compose_title(request, t_index, self.params, self.options))
        xlabel, ylabel = AXIS_LABELS[self.options.dimen]
        ax.set_xlabel(xlabel)
        ax.set_ylabel(ylabel)

    def _data_ready(self, request: FieldRequest, t_index: int) -> FieldFrame:
        """Resolve, extract and (optionally) trim the primary field."""
        field = self.resolver.resolve(request, t_index, self.options.dimen)
        frame = self.extractor.extract(
            field, self.options.dimen, self.options.slice, self.grid, self.window
        )
        if self.options.trim:
            frame = replace(frame, data=trim(frame.data, self.options.colaxis))
        return frame

    def _styled(self, ax: Axes, request: FieldRequest, frame: FieldFrame) -> FieldFrame:
        """Draw the primary layer; returns the frame as plotted."""
        opts = self.options

        if request.is_streamline:
            frame = self._subtract_speed(frame)
            draw_streamlines(ax, frame.xvar, frame.yvar, frame.data)
            return frame

        colaxis, cmap = self.colors.choose(request, frame.data, opts)
        vmin, vmax = (None, None) if colaxis == "auto" else colaxis

        if opts.style == "pcolor":
            handle = ax.pcolormesh(frame.xvar, frame.yvar, frame.data,
                                   cmap=cmap, vmin=vmin, vmax=vmax, shading='auto')
        elif opts.style == "contourf":
            handle = ax.contourf(frame.xvar, frame.yvar, frame.data, levels=opts.ncontourf,
                                 cmap=cmap, vmin=vmin, vmax=vmax)
        elif opts.style == "contour":
            handle = ax.contour(frame.xvar, frame.yvar, frame.data, levels=opts.ncontour,
                                cmap=cmap, vmin=vmin, vmax=vmax)
        else:
            raise ConfigError(f"Unknown plot style '{opts.style}'")

        if opts.colorbar:
            self.target.fig.colorbar(handle, ax=ax)
        return frame

    def _overlaid(self, ax: Axes, request: FieldRequest, frame: FieldFrame,
                  t_index: int) -> Optional[Overlay]:
        """Draw the secondary field and the critical Richardson contour."""
        overlay = self.overlays.resolve(request, frame, self.options, t_index, self.window)

        if overlay is not None:
            if overlay.request.is_streamline and not overlay.reused:
                overlay.frame = self._subtract_speed(overlay.frame)
                draw_streamlines(ax, overlay.frame.xvar, overlay.frame.yvar, overlay.data)
            elif not overlay.request.is_streamline:
                style = self.overlays.style(request, self.options)
                ax.contour(overlay.frame.xvar, overlay.frame.yvar, overlay.data,
                           levels=style.levels, colors=style.color, linestyles=style.linestyle)

        if request.kind is FieldKind.RI:
            ax.contour(frame.xvar, frame.yvar, frame.data,
                       levels=[RI_CRITICAL], colors='r', linestyles='-')

        return overlay

    def _finalize(self, ax: Axes, request: FieldRequest, frame: FieldFrame,
                  t_index: int, sync: bool):
        """Terrain outline, aspect ratio, limits, sync and save."""
        opts = self.options

        if self.grid.mapped and (self.grid.ndims == 2 or opts.dimen != "Z"):
            hill_x, hill = self._terrain_outline()
            ax.plot(hill_x, hill, 'k')

        x1, x2, z1, z2 = plot_limits(frame, opts)
        if z2 > z1 and (x2 - x1) / (z2 - z1) > ASPECT_LIMIT:
            ax.set_aspect('auto')
        else:
            ax.set_aspect('equal')
        ax.set_xlim(x1, x2)
        ax.set_ylim(z1, z2)
        ax.set_axisbelow(False)

        if sync:
            self.target.sync()

        if self.output is not None:
            filename = f"{opts.figure_basename(request.name)}_{t_index}.{opts.fileformat}"
            self.output.save(self.target.fig, filename, dpi=opts.dpi)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _reference_speed(self) -> float:
        """Streamline background speed, asking once if the option is -1."""
        if self._speed is None:
            if self.options.speed != -1:
                self._speed = float(self.options.speed)
            elif self.speed_prompt is not None:
                self._speed = float(self.speed_prompt())
            else:
                raise ConfigError(
                    "Streamline plots need a reference speed: set speed=<m/s> or pass a speed_prompt"
                )
            logger.info("background speed = %g m/s", self._speed)
        return self._speed

    def _subtract_speed(self, frame: FieldFrame) -> FieldFrame:
        """Remove the background speed from the first velocity component."""
        if self.grid.mapped:
            warnings.warn("Streamline has not been tested for mapped grids.",
                          InterpolationWarning, stacklevel=3)
        data = frame.data.copy()
        data[..., 0] -= self._reference_speed()
        return replace(frame, data=data)

    def _terrain_outline(self) -> Tuple[NDArray, NDArray]:
        """
        Physical coordinates of the terrain along the section.

        Taken at the last vertical index, along the free horizontal axis of
        the section.
        """
        grid = self.grid
        top = self.params.Nz - 1

        if grid.ndims == 2:
            return grid.x[self.window.x, top], grid.z[self.window.x, top]

        if self.options.dimen == "X":
            i = nearest_index(grid.axis_vector("X"), self.options.slice)
            return grid.y[i, self.window.y, top], grid.z[i, self.window.y, top]

        j = nearest_index(grid.axis_vector("Y"), self.options.slice)
        return grid.x[self.window.x, j, top], grid.z[self.window.x, j, top]
