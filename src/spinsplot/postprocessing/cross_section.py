"""
Cross-section extraction.

Reduces full-domain field data to the 2D plane normal to one axis:
- rectilinear grids: nearest-index slice, transposed into plotting order
  (rows = vertical plot axis) for every field except streamlines
- mapped grids, horizontal (Z) sections: each column's vertical profile is
  linearly interpolated onto the requested height; columns that do not
  reach that height give NaN
- mapped grids, vertical (X/Y) sections: nearest-index slice on the
  physical coordinate arrays of the plane
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
import logging
import warnings
import numpy as np
from numpy.typing import NDArray

from ..core.config.schemas import PlotOptions
from ..core.errors import ConfigError, InterpolationWarning
from ..core.grid import GridModel
from .fields import FieldFrame, ResolvedField

logger = logging.getLogger(__name__)


PLANE_AXES = {"X": ("Y", "Z"), "Y": ("X", "Z"), "Z": ("X", "Y")}


def default_slice(grid: GridModel, dimen: str) -> float:
    """Mid-point of the domain along `dimen`."""
    lo, hi = grid.extent(dimen)
    return 0.5 * (lo + hi)


def nearest_index(coord: NDArray, value: float) -> int:
    """Index of the coordinate closest to `value`."""
    return int(np.nanargmin(np.abs(coord - value)))


@dataclass(frozen=True)
class IndexWindow:
    """
    Index arrays selecting the plotted part of the grid along each axis.

    Built from the plot axis limits and skip factors. The axis normal to the
    section is never subsampled, and the vertical axis of a mapped grid is
    never cropped (its physical height varies per column).
    """
    x: NDArray
    y: Optional[NDArray]
    z: NDArray

    @classmethod
    def full(cls, grid: GridModel) -> IndexWindow:
        """Window covering the whole grid."""
        return cls(
            x=np.arange(grid.Nx),
            y=np.arange(grid.Ny) if grid.ndims == 3 else None,
            z=np.arange(grid.Nz),
        )

    @classmethod
    def from_options(cls, grid: GridModel, options: PlotOptions) -> IndexWindow:
        """Window from options.axis and the x/y/z skip factors."""
        window = {}
        in_plane = PLANE_AXES[options.dimen] if grid.ndims == 3 else ("X", "Z")
        skips = dict(zip(("X", "Y", "Z"), options.skips()))
        limits = {}
        if options.axis is not None:
            limits[in_plane[0]] = options.axis[0:2]
            limits[in_plane[1]] = options.axis[2:4]

        for axis in ("X", "Y", "Z"):
            if axis == "Y" and grid.ndims == 2:
                window[axis] = None
                continue

            n = {"X": grid.Nx, "Y": grid.Ny, "Z": grid.Nz}[axis]
            idx = np.arange(n)
            if axis not in in_plane:
                window[axis] = idx
                continue

            if axis in limits and not (grid.mapped and axis == "Z"):
                lo, hi = limits[axis]
                coord = grid.axis_vector(axis)
                idx = idx[(coord >= lo) & (coord <= hi)]
                if idx.size == 0:
                    raise ConfigError(
                        f"axis limits {lo}..{hi} contain no grid points along {axis.lower()}"
                    )

            window[axis] = idx[::skips[axis]]

        return cls(x=window["X"], y=window["Y"], z=window["Z"])


def interpolate_to_height(z: NDArray, values: NDArray, height: float) -> NDArray:
    """
    Linear interpolation of every vertical column onto one height.

    Args:
        z: Column heights (..., Nz), monotonic along the last axis
        values: Field values (..., Nz)
        height: Target height [m]

    Returns:
        (...) array; NaN where `height` lies outside a column's extent
    """
    order = np.argsort(z, axis=-1)
    zs = np.take_along_axis(z, order, axis=-1)
    fs = np.take_along_axis(values, order, axis=-1)

    nz = zs.shape[-1]
    if nz < 2:
        raise ValueError("Interpolation needs at least two vertical points")

    hi = np.clip(np.sum(zs <= height, axis=-1), 1, nz - 1)[..., None]
    lo = hi - 1
    z_lo = np.take_along_axis(zs, lo, axis=-1)[..., 0]
    z_hi = np.take_along_axis(zs, hi, axis=-1)[..., 0]
    f_lo = np.take_along_axis(fs, lo, axis=-1)[..., 0]
    f_hi = np.take_along_axis(fs, hi, axis=-1)[..., 0]

    dz = z_hi - z_lo
    with np.errstate(invalid="ignore", divide="ignore"):
        w = np.where(dz != 0, (height - z_lo) / dz, 0.0)
    out = f_lo + w * (f_hi - f_lo)

    outside = (height < zs[..., 0]) | (height > zs[..., -1])
    return np.where(outside, np.nan, out)


class CrossSectionExtractor:
    """
    Cuts a 2D FieldFrame out of a resolved field.

    Usage:
        extractor = CrossSectionExtractor()
        frame = extractor.extract(field, "Y", 0.5, grid)
        ax.pcolormesh(frame.xvar, frame.yvar, frame.data)
    """

    def extract(self,
                field: ResolvedField,
                dimen: str,
                slice_loc: Optional[float],
                grid: GridModel,
                window: Optional[IndexWindow] = None) -> FieldFrame:
        """
        Extract the cross-section normal to `dimen` at `slice_loc`.

        Args:
            field: Resolved full-domain (or spanwise-reduced) field
            dimen: Axis normal to the section ('X', 'Y' or 'Z')
            slice_loc: Physical location of the section (None = mid-domain)
            grid: Grid of the field
            window: Index window (None = whole grid)

        Returns:
            FieldFrame whose data matches (xvar, yvar)
        """
        dimen = dimen.upper()
        if dimen not in PLANE_AXES:
            raise ConfigError(f"dimen must be one of X, Y, Z, got '{dimen}'")
        if grid.ndims == 2 and dimen != "Y":
            raise ConfigError(f"2D grids are x-z planes; dimen must be 'Y', got '{dimen}'")

        if window is None:
            window = IndexWindow.full(grid)

        if grid.ndims == 2 or field.reduced:
            data, xvar, yvar = self._xz_plane(field.data, grid, window)
        elif grid.mapped and dimen == "Z":
            if slice_loc is None:
                slice_loc = default_slice(grid, dimen)
            data, xvar, yvar = self._fixed_height(field, grid, window, slice_loc)
        else:
            if slice_loc is None:
                slice_loc = default_slice(grid, dimen)
            data, xvar, yvar = self._index_slice(field.data, grid, window, dimen, slice_loc)

        transposed = not grid.mapped and not field.is_vector
        if transposed:
            data = data.T

        return FieldFrame(data=data, xvar=xvar, yvar=yvar, name=field.name, transposed=transposed)

    # -------------------------------------------------------------------------
    # Slicing
    # -------------------------------------------------------------------------

    def _xz_plane(self, data: NDArray, grid: GridModel,
                  window: IndexWindow) -> Tuple[NDArray, NDArray, NDArray]:
        """Data already lives on the x-z plane (2D grids, spanwise statistics)."""
        sub = data[np.ix_(window.x, window.z)]
        if not grid.mapped:
            return sub, grid.x[window.x], grid.z[window.z]

        x, z = grid.x, grid.z
        if grid.ndims == 3:
            x, z = x[:, 0, :], z[:, 0, :]
        plane = np.ix_(window.x, window.z)
        return sub, x[plane], z[plane]

    def _index_slice(self, data: NDArray, grid: GridModel, window: IndexWindow,
                     dimen: str, slice_loc: float) -> Tuple[NDArray, NDArray, NDArray]:
        """Nearest-index slice normal to `dimen` of a 3D field."""
        k = nearest_index(grid.axis_vector(dimen), slice_loc)
        logger.debug("Section %s=%g at index %d", dimen.lower(), slice_loc, k)

        first, second = PLANE_AXES[dimen]
        normal = {"X": (k,), "Y": (slice(None), k), "Z": (slice(None), slice(None), k)}[dimen]
        vectors = [getattr(window, a.lower()) for a in (first, second)]
        coords = [getattr(grid, a.lower()) for a in (first, second)]
        plane = np.ix_(*vectors)

        sub = data[normal][plane]
        if grid.mapped:
            return sub, coords[0][normal][plane], coords[1][normal][plane]
        return sub, coords[0][vectors[0]], coords[1][vectors[1]]

    def _fixed_height(self, field: ResolvedField, grid: GridModel, window: IndexWindow,
                      height: float) -> Tuple[NDArray, NDArray, NDArray]:
        """Constant-height surface of a mapped 3D field."""
        columns = np.ix_(window.x, window.y)
        z = grid.z[columns]
        values = field.data[columns]

        if field.is_vector:
            data = np.stack(
                [interpolate_to_height(z, values[..., c], height) for c in range(values.shape[-1])],
                axis=-1,
            )
        else:
            data = interpolate_to_height(z, values, height)

        missing = np.isnan(data).all(axis=-1) if field.is_vector else np.isnan(data)
        if missing.all():
            warnings.warn(
                f"'{field.name}': height z={height:g} m lies outside every grid column",
                InterpolationWarning,
                stacklevel=3,
            )
        elif missing.any():
            logger.debug("%d of %d columns do not reach z=%g m", missing.sum(), missing.size, height)

        return data, grid.x[columns][..., 0], grid.y[columns][..., 0]
