"""
Streamline plotting for in-plane velocity cross-sections.

matplotlib's streamplot needs evenly spaced 1D coordinates, so stretched
rectilinear sections (e.g. Chebyshev in z) and mapped sections are first
interpolated onto a uniform grid of the same resolution.
"""

from typing import Tuple
import numpy as np
from numpy.typing import NDArray
from matplotlib.axes import Axes
from scipy.interpolate import RegularGridInterpolator, griddata


def _is_uniform(coord: NDArray) -> bool:
    """Check 1D coordinates are strictly increasing and evenly spaced."""
    if coord.size < 2:
        return False
    steps = np.diff(coord)
    return bool(np.all(steps > 0) and np.allclose(steps, steps[0], rtol=1e-6))


def regular_streamfield(xvar: NDArray,
                        yvar: NDArray,
                        u: NDArray,
                        v: NDArray) -> Tuple[NDArray, NDArray, NDArray, NDArray]:
    """
    Velocity components on a uniform grid in streamplot orientation.

    Args:
        xvar, yvar: Section coordinates, 1D vectors or 2D arrays (n1, n2)
        u, v: Components in grid-index order (n1, n2)

    Returns:
        (x, y, U, V) with x (nx,), y (ny,) evenly spaced and U, V (ny, nx)
    """
    if xvar.ndim == 1 and _is_uniform(xvar) and _is_uniform(yvar):
        return xvar, yvar, u.T, v.T

    nx, ny = u.shape
    x = np.linspace(np.nanmin(xvar), np.nanmax(xvar), nx)
    y = np.linspace(np.nanmin(yvar), np.nanmax(yvar), ny)
    XX, YY = np.meshgrid(x, y)

    if xvar.ndim == 1:
        # Stretched rectilinear section
        ix = np.argsort(xvar)
        iy = np.argsort(yvar)
        U, V = (
            RegularGridInterpolator(
                (xvar[ix], yvar[iy]), comp[np.ix_(ix, iy)],
                bounds_error=False, fill_value=np.nan,
            )((XX, YY))
            for comp in (u, v)
        )
    else:
        # Mapped section: scattered physical points
        points = np.column_stack([xvar.ravel(), yvar.ravel()])
        U = griddata(points, u.ravel(), (XX, YY), method='linear')
        V = griddata(points, v.ravel(), (XX, YY), method='linear')

    return x, y, U, V


def draw_streamlines(ax: Axes,
                     xvar: NDArray,
                     yvar: NDArray,
                     velocity: NDArray,
                     color: str = 'k',
                     density: float = 2.0):
    """
    Draw arrowless streamlines of a two-component section.

    Args:
        ax: Target axes
        xvar, yvar: Section coordinates
        velocity: (n1, n2, 2) in-plane velocity in grid-index order
        color: Line colour
        density: Streamline density

    Returns:
        matplotlib StreamplotSet
    """
    x, y, U, V = regular_streamfield(xvar, yvar, velocity[..., 0], velocity[..., 1])
    return ax.streamplot(
        x, y, U, V,
        color=color,
        density=density,
        linewidth=0.8,
        arrowstyle='-',
    )
