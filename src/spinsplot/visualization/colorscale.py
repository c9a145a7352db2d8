"""
Colour-axis and colormap selection.
"""

from __future__ import annotations
from typing import Tuple, Union
import numpy as np
from numpy.typing import NDArray
from matplotlib import colormaps
from matplotlib.colors import Colormap

from ..core.config.schemas import PlotOptions
from ..core.errors import ConfigError
from ..postprocessing.fields import FieldKind, FieldRequest


ColorAxis = Union[str, Tuple[float, float]]

DIVERGING_CMAP = "RdBu_r"
SEQUENTIAL_CMAP = "viridis"

# Fields centred on zero
SIGNED_FIELDS = {"u", "v", "w", "vorticity", "vortx", "vorty", "vortz"}
# Fields shown on a sequential scale from data minimum to maximum
SEQUENTIAL_FIELDS = {"rho", "Density", "KE", "speed", "Salt", "Temp", "dye", "tracer"}

RI_LIMITS = (-1.0, 1.0)


def trim(data: NDArray, colaxis: ColorAxis) -> NDArray:
    """
    Clamp data into [c1, c2].

    Applied before contour levels are computed, so that levels concentrate
    inside the colour range instead of being stretched by outliers.
    """
    if isinstance(colaxis, str):
        raise ConfigError("Trim requires an axis range (set colaxis=(c1, c2))")
    c1, c2 = colaxis
    return np.clip(data, c1, c2)


class ColorScaleSelector:
    """
    Chooses colour-axis limits and a colormap for a field.

    Signed, velocity-like fields get a diverging map symmetric about zero;
    positive fields a sequential map spanning the data. An explicit
    options.colaxis always wins.
    """

    def choose(self,
               field_name: Union[str, FieldRequest],
               data: NDArray,
               options: PlotOptions) -> Tuple[ColorAxis, Colormap]:
        """
        Args:
            field_name: Field name or parsed request
            data: Plotted 2D data
            options: Plot options (colaxis override, ncmap)

        Returns:
            (colaxis, colormap); colaxis is (c1, c2) or 'auto'
        """
        request = field_name if isinstance(field_name, FieldRequest) else FieldRequest.parse(field_name)
        colaxis, cmap_name = self._heuristic(request, data)

        if options.colaxis != "auto":
            colaxis = tuple(options.colaxis)

        return colaxis, colormaps[cmap_name].resampled(options.ncmap)

    def _heuristic(self, request: FieldRequest, data: NDArray) -> Tuple[ColorAxis, str]:
        """Default limits and colormap name by field kind."""
        if request.kind is FieldKind.RI:
            return RI_LIMITS, DIVERGING_CMAP

        finite = data[np.isfinite(data)]
        if finite.size == 0:
            return "auto", SEQUENTIAL_CMAP

        dmin, dmax = float(finite.min()), float(finite.max())
        base = request.base if request.kind is FieldKind.MEAN else request.name

        if request.kind in (FieldKind.SD, FieldKind.SCALED_SD, FieldKind.KE, FieldKind.SPEED):
            signed = False
        elif base in SIGNED_FIELDS:
            signed = True
        elif base in SEQUENTIAL_FIELDS or request.kind is FieldKind.DENSITY:
            signed = False
        else:
            signed = dmin < 0 < dmax

        if signed:
            m = max(abs(dmin), abs(dmax))
            if m == 0:
                return "auto", DIVERGING_CMAP
            return (-m, m), DIVERGING_CMAP

        if dmin == dmax:
            return "auto", SEQUENTIAL_CMAP
        return (dmin, dmax), SEQUENTIAL_CMAP
