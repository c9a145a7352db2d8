"""
Shared fixtures: small synthetic grids and readers.

Rectilinear and mapped 3D grids have shape (Nx, Ny, Nz) = (9, 5, 7); the 2D
grid is an x-z plane of (9, 7). Mapped grids follow the SPINS ordering: the
vertical index runs from the lid (k=0, z=0) down to the terrain (k=Nz-1).
"""

import matplotlib
matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest

from spinsplot.core.grid import GridModel, SimParams
from spinsplot.core.io.readers import ArrayFieldReader


NX, NY, NZ = 9, 5, 7
LX, LY, DEPTH = 2.0, 1.0, 1.0


def hill(x, y):
    """Terrain height above the flat bottom; a ridge rising towards y = LY."""
    return 0.3 * (1 + 0.5 * y / LY) * np.exp(-((x - LX / 2) / 0.3) ** 2)


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


@pytest.fixture
def rect_grid():
    return GridModel(
        x=np.linspace(0.0, LX, NX),
        y=np.linspace(0.0, LY, NY),
        z=np.linspace(-DEPTH, 0.0, NZ),
    )


@pytest.fixture
def rect_params(rect_grid):
    return SimParams.from_grid(rect_grid, plot_interval=2.0)


@pytest.fixture
def rect_fields(rect_grid):
    """
    Analytic fields on the rectilinear grid.

    rho = x + 10 z + 100 y makes every index recoverable from a value.
    """
    X, Y, Z = np.meshgrid(rect_grid.x, rect_grid.y, rect_grid.z, indexing="ij")
    return {
        "rho": X + 10 * Z + 100 * Y,
        "u": np.sin(np.pi * X / LX) * (Z + 1),
        "v": 0.1 * np.ones_like(X),
        "w": -0.5 * Z,
    }


@pytest.fixture
def rect_reader(rect_fields):
    return ArrayFieldReader(rect_fields)


@pytest.fixture
def mapped_grid():
    x = np.linspace(0.0, LX, NX)
    y = np.linspace(0.0, LY, NY)
    eta = np.linspace(0.0, 1.0, NZ)
    X, Y, ETA = np.meshgrid(x, y, eta, indexing="ij")
    bottom = -DEPTH + hill(X, Y)
    Z = bottom * ETA
    return GridModel(x=X, y=Y, z=Z, mapped=True)


@pytest.fixture
def mapped_params(mapped_grid):
    return SimParams.from_grid(mapped_grid)


@pytest.fixture
def mapped_reader(mapped_grid):
    X, Z = mapped_grid.x, mapped_grid.z
    return ArrayFieldReader({
        "rho": -0.01 * Z,
        "u": 0.2 + 0.05 * Z,
        "v": np.zeros_like(X),
        "w": 0.01 * X,
    })


@pytest.fixture
def grid_2d():
    return GridModel(
        x=np.linspace(0.0, LX, NX),
        y=None,
        z=np.linspace(-DEPTH, 0.0, NZ),
        ndims=2,
    )


@pytest.fixture
def reader_2d(grid_2d):
    X, Z = np.meshgrid(grid_2d.x, grid_2d.z, indexing="ij")
    return ArrayFieldReader({
        "rho": -0.01 * Z,
        "u": [0.1 * X, 0.2 * X, 0.3 * X],
        "w": [np.zeros_like(X)] * 3,
    })
