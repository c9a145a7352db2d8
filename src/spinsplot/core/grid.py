"""
Grid and simulation parameters for 2D and 3D snapshot output.

Two grid flavours are supported:
- rectilinear ("unmapped"): separable 1D coordinate vectors per axis
- terrain-following ("mapped"): full-dimensional coordinate arrays giving the
  physical position of every grid index

2D grids are x-z planes (y is None).
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Optional, Any, Mapping
import numpy as np
from numpy.typing import NDArray


AXES = ("X", "Y", "Z")


@dataclass
class GridModel:
    """
    Coordinates of a simulation grid.

    Attributes:
        x: x coordinates, (Nx,) unmapped or (Nx, [Ny,] Nz) mapped
        y: y coordinates, (Ny,) unmapped or (Nx, Ny, Nz) mapped; None in 2D
        z: z coordinates, (Nz,) unmapped or (Nx, [Ny,] Nz) mapped
        mapped: True for terrain-following grids
        ndims: Grid dimension (2 or 3)
    """

    x: NDArray[np.float64]
    y: Optional[NDArray[np.float64]]
    z: NDArray[np.float64]
    mapped: bool = False
    ndims: int = 3

    def __post_init__(self):
        """Coerce coordinates to arrays and validate shapes."""
        self.x = np.asarray(self.x, dtype=np.float64)
        self.z = np.asarray(self.z, dtype=np.float64)
        if self.y is not None:
            self.y = np.asarray(self.y, dtype=np.float64)
        self._validate()

    def _validate(self):
        """Check coordinate consistency."""
        if self.ndims not in (2, 3):
            raise ValueError(f"ndims must be 2 or 3, got {self.ndims}")

        if self.ndims == 3 and self.y is None:
            raise ValueError("3D grids require y coordinates")

        if self.ndims == 2 and self.y is not None:
            raise ValueError("2D grids are x-z planes; y must be None")

        if self.mapped:
            expected = self.x.shape
            if len(expected) != self.ndims:
                raise ValueError(
                    f"Mapped {self.ndims}D grid needs {self.ndims}D coordinate arrays, "
                    f"got x with shape {expected}"
                )
            coords = [self.z] if self.y is None else [self.y, self.z]
            for c in coords:
                if c.shape != expected:
                    raise ValueError(
                        f"Mapped grid coordinates must share one shape, "
                        f"got {expected} and {c.shape}"
                    )

    @property
    def is_vector(self) -> bool:
        """True when every coordinate is a separable 1D vector."""
        coords = [self.x, self.z] if self.y is None else [self.x, self.y, self.z]
        return all(c.ndim == 1 for c in coords)

    @property
    def shape(self) -> tuple:
        """Index-space shape (Nx, [Ny,] Nz)."""
        if self.mapped or not self.is_vector:
            return self.x.shape
        if self.ndims == 2:
            return (self.x.size, self.z.size)
        return (self.x.size, self.y.size, self.z.size)

    @property
    def Nx(self) -> int:
        return self.shape[0]

    @property
    def Ny(self) -> int:
        return self.shape[1] if self.ndims == 3 else 1

    @property
    def Nz(self) -> int:
        return self.shape[-1]

    def axis_vector(self, dimen: str) -> NDArray:
        """
        1D coordinate vector along an axis.

        On mapped grids the horizontal axes are regular, so the first row of
        the coordinate array is used. The vertical axis of a mapped grid has
        no single vector; the first column is returned.
        """
        dimen = dimen.upper()
        if dimen == "Y" and self.ndims == 2:
            raise ValueError("2D grids have no y axis")

        coord = {"X": self.x, "Y": self.y, "Z": self.z}[dimen]
        if coord.ndim == 1:
            return coord

        if dimen == "X":
            return coord[(slice(None),) + (0,) * (coord.ndim - 1)]
        if dimen == "Y":
            return coord[0, :, 0]
        return coord[(0,) * (coord.ndim - 1) + (slice(None),)]

    def extent(self, dimen: str) -> tuple[float, float]:
        """(min, max) physical extent along an axis."""
        coord = {"X": self.x, "Y": self.y, "Z": self.z}[dimen.upper()]
        return (float(np.nanmin(coord)), float(np.nanmax(coord)))

    def __repr__(self) -> str:
        kind = "mapped" if self.mapped else "rectilinear"
        return f"GridModel({kind}, {self.ndims}D, shape={self.shape})"


def build_regular_grid_view(grid: GridModel) -> GridModel:
    """
    Reduce an unmapped meshgrid-style grid to separable 1D vectors.

    Mapped grids and grids that are already vectors are returned unchanged.
    """
    if grid.mapped or grid.is_vector:
        return grid

    if grid.ndims == 2:
        return replace(grid, x=grid.x[:, 0], z=grid.z[0, :])

    return replace(
        grid,
        x=grid.x[:, 0, 0],
        y=grid.y[0, :, 0],
        z=grid.z[0, 0, :],
    )


@dataclass(frozen=True)
class SimParams:
    """
    Simulation metadata shared by every frame of a run.

    Attributes:
        ndims: Dimension of the simulation (2 or 3)
        Nz: Number of vertical grid points
        mapped_grid: True for terrain-following grids
        plot_interval: Seconds between outputs (None = unknown)
        g: Gravitational acceleration [m/s²]
        rho_0: Reference density [kg/m³] for the equation of state
    """

    ndims: int
    Nz: int
    mapped_grid: bool = False
    plot_interval: Optional[float] = None
    g: float = 9.81
    rho_0: float = 1000.0

    def __post_init__(self):
        if self.ndims not in (2, 3):
            raise ValueError(f"ndims must be 2 or 3, got {self.ndims}")
        if self.Nz < 1:
            raise ValueError(f"Nz must be positive, got {self.Nz}")
        if self.plot_interval is not None and self.plot_interval <= 0:
            raise ValueError(f"plot_interval must be positive, got {self.plot_interval}")

    @classmethod
    def from_grid(cls, grid: GridModel, **kwargs) -> SimParams:
        """Derive ndims/Nz/mapped_grid from a grid."""
        return cls(ndims=grid.ndims, Nz=grid.Nz, mapped_grid=grid.mapped, **kwargs)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SimParams:
        """Create from a parameter mapping (e.g. a parsed YAML file)."""
        mapped = data.get("mapped_grid", False)
        if isinstance(mapped, str):
            mapped = mapped.strip().lower() == "true"
        interval = data.get("plot_interval")

        return cls(
            ndims=int(data["ndims"]),
            Nz=int(data["Nz"]),
            mapped_grid=bool(mapped),
            plot_interval=None if interval is None else float(interval),
            g=float(data.get("g", 9.81)),
            rho_0=float(data.get("rho_0", 1000.0)),
        )
