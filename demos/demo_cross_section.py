#!/usr/bin/env python3
"""
Demo: Cross-section plots of a synthetic internal wave

Builds a stratified flow with a mode-1 internal wave over a Gaussian hill
(or a flat bottom), then plots cross-sections of it.
Usage:
    python demo_cross_section.py [field] [--dimen D] [--slice S] [--times T ...]
                                 [--mapped] [--cont2 F] [--save] [--show]

Example:
    python demo_cross_section.py rho --dimen Y --cont2 u --show
    python demo_cross_section.py "Mean u" --times 0 1 2 3 --save
    python demo_cross_section.py Streamline --mapped --speed 0.05 --show
    python demo_cross_section.py Ri --options plot.yaml
"""

import sys
import argparse
import logging
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from spinsplot import (
    ArrayFieldReader,
    GridModel,
    SimParams,
    console_speed_prompt,
    load_options,
    make_options,
    plot2d,
    setup_logging,
)

logger = logging.getLogger("spinsplot.demo")

LX, LY, DEPTH = 4.0, 1.0, 1.0
N2 = 0.5           # buoyancy frequency squared [1/s²]
AMPLITUDE = 0.02   # wave velocity amplitude [m/s]
HILL = 0.25        # hill height [m]


def build_grid(nx, ny, nz, mapped):
    """Rectilinear box, or terrain-following grid over a Gaussian hill."""
    x = np.linspace(0.0, LX, nx)
    y = np.linspace(0.0, LY, ny)
    if not mapped:
        return GridModel(x=x, y=y, z=np.linspace(-DEPTH, 0.0, nz))

    # Vertical index runs from the lid (k=0) down to the terrain
    eta = np.linspace(0.0, 1.0, nz)
    X, Y, ETA = np.meshgrid(x, y, eta, indexing="ij")
    bottom = -DEPTH + HILL * np.exp(-((X - LX / 2) / 0.4) ** 2)
    return GridModel(x=X, y=Y, z=bottom * ETA, mapped=True)


def wave_fields(grid, n_outputs, dt, g=9.81):
    """Velocity and density of a mode-1 wave, one array per output."""
    if grid.mapped:
        X, Y, Z = grid.x, grid.y, grid.z
    else:
        X, Y, Z = np.meshgrid(grid.x, grid.y, grid.z, indexing="ij")

    k = 2 * np.pi / LX
    m = np.pi / DEPTH
    omega = np.sqrt(N2) * k / np.sqrt(k**2 + m**2)
    span = 1 + 0.2 * np.cos(2 * np.pi * Y / LY)

    fields = {"u": [], "v": [], "w": [], "rho": []}
    for n in range(n_outputs):
        phase = k * X - omega * n * dt
        fields["u"].append(AMPLITUDE * span * np.cos(m * Z) * np.cos(phase))
        fields["v"].append(0.1 * AMPLITUDE * np.sin(2 * np.pi * Y / LY) * np.sin(phase))
        fields["w"].append(AMPLITUDE * span * (k / m) * np.sin(m * Z) * np.sin(phase))
        displacement = AMPLITUDE / omega * (k / m) * np.sin(m * Z) * np.cos(phase)
        fields["rho"].append(-N2 / g * (Z - displacement))
    return fields


def main():
    parser = argparse.ArgumentParser(description="Plot cross-sections of a synthetic internal wave")
    parser.add_argument("field", nargs="?", default="rho", help="Field to plot (default: rho)")
    parser.add_argument("--dimen", default="Y", help="Axis normal to the section (default: Y)")
    parser.add_argument("--slice", type=float, default=None, help="Section location [m]")
    parser.add_argument("--times", type=int, nargs="+", default=[0], help="Output indices")
    parser.add_argument("--style", default="pcolor", help="pcolor, contourf or contour")
    parser.add_argument("--cont2", default="None", help="Secondary field drawn as contours")
    parser.add_argument("--speed", type=float, default=-1.0,
                        help="Background speed for streamlines (default: ask)")
    parser.add_argument("--mapped", action="store_true", help="Use a terrain-following grid")
    parser.add_argument("--resolution", type=int, nargs=3, default=[64, 16, 32],
                        metavar=("NX", "NY", "NZ"), help="Grid size (default: 64 16 32)")
    parser.add_argument("--options", type=str, default=None, help="YAML file of plot options")
    parser.add_argument("--save", action="store_true", help="Save frames to ./figures")
    parser.add_argument("--show", action="store_true", help="Display plot interactively")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    grid = build_grid(*args.resolution, mapped=args.mapped)
    params = SimParams.from_grid(grid, plot_interval=5.0)
    n_outputs = max(args.times) + 1
    reader = ArrayFieldReader(wave_fields(grid, n_outputs, params.plot_interval, params.g))
    logger.info("Grid: %r, %d outputs", grid, n_outputs)

    overrides = dict(
        dimen=args.dimen,
        style=args.style,
        cont2=args.cont2,
        speed=args.speed,
        savefig=args.save,
        visible=args.show,
    )
    if args.slice is not None:
        overrides["slice"] = args.slice

    if args.options:
        options = load_options(args.options, **overrides)
    else:
        options = make_options(**overrides)

    info = plot2d(args.field, args.times, reader, grid, params, options,
                  speed_prompt=console_speed_prompt)

    data = info.data1[np.isfinite(info.data1)]
    logger.info("%s: range [%.4g, %.4g]", info.var1, data.min(), data.max())
    if info.var2 is not None:
        logger.info("Overlay: %s", info.var2)

    if args.show:
        plt.show()

    print("Done.")


if __name__ == "__main__":
    main()
