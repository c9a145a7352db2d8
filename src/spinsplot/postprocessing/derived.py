"""
Field resolution: map a field name to data.

Raw variables are read through a RawFieldReader. Derived quantities are
computed by small processors, each declaring the raw variables it needs so
that a missing input is reported by name before any work is done.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, Tuple, Union
import logging
import numpy as np
from numpy.typing import NDArray

from ..core.errors import ConfigError, UnknownFieldError
from ..core.grid import GridModel, SimParams
from ..core.io.readers import RawFieldReader
from .eos import density_anomaly
from .fields import FieldKind, FieldRequest, ResolvedField

logger = logging.getLogger(__name__)


def velocity_names(grid: GridModel) -> Tuple[str, ...]:
    """Velocity components present for the grid's dimensionality."""
    return ("u", "v", "w") if grid.ndims == 3 else ("u", "w")


def streamline_components(grid: GridModel, dimen: str) -> Tuple[str, str]:
    """In-plane velocity pair for a cross-section normal to `dimen`."""
    if grid.ndims == 2:
        return ("u", "w")
    return {"X": ("v", "w"), "Y": ("u", "w"), "Z": ("u", "v")}[dimen]


def vertical_derivative(f: NDArray, grid: GridModel) -> NDArray:
    """
    ∂f/∂z along the last (vertical) index axis.

    On mapped grids x does not vary with the vertical index, so
    ∂f/∂z = (∂f/∂k) / (∂z/∂k) holds column by column.
    """
    if grid.z.ndim > 1:
        dz_dk = np.gradient(grid.z, axis=-1)
        return np.gradient(f, axis=-1) / dz_dk
    return np.gradient(f, grid.z, axis=-1)


class DerivedProcessor(ABC):
    """
    Base class for derived-field processors.

    Each processor declares the raw variables it reads and computes one
    full-domain field from them.
    """

    kind: FieldKind

    @abstractmethod
    def requires(self, resolver: FieldResolver, t_index: int, dimen: str) -> Tuple[str, ...]:
        """Raw variable names this processor reads."""
        pass

    @abstractmethod
    def process(self, resolver: FieldResolver, t_index: int, dimen: str) -> NDArray:
        """Compute the field."""
        pass

    @property
    def name(self) -> str:
        return self.kind.value

    def validate(self, resolver: FieldResolver, t_index: int, dimen: str) -> None:
        """Check that every required raw variable exists."""
        for raw in self.requires(resolver, t_index, dimen):
            if not resolver.reader.exists(raw, t_index):
                raise UnknownFieldError(raw, t_index, required_by=self.name)


class DensityProcessor(DerivedProcessor):
    """Raw `rho` if written, else the equation of state applied to Temp and Salt."""

    kind = FieldKind.DENSITY

    def requires(self, resolver, t_index, dimen):
        if resolver.reader.exists("rho", t_index):
            return ("rho",)
        return ("Temp", "Salt")

    def process(self, resolver, t_index, dimen):
        if resolver.reader.exists("rho", t_index):
            return resolver.read_raw("rho", t_index)

        logger.debug("Density not written at output %d, using equation of state", t_index)
        temp = resolver.read_raw("Temp", t_index)
        salt = resolver.read_raw("Salt", t_index)
        return density_anomaly(temp, salt, resolver.params.rho_0)


class KineticEnergyProcessor(DerivedProcessor):
    """Local kinetic energy ½|u|²."""

    kind = FieldKind.KE

    def requires(self, resolver, t_index, dimen):
        return velocity_names(resolver.grid)

    def process(self, resolver, t_index, dimen):
        ke = None
        for comp in velocity_names(resolver.grid):
            vel = resolver.read_raw(comp, t_index)
            ke = vel**2 if ke is None else ke + vel**2
        return 0.5 * ke


class SpeedProcessor(KineticEnergyProcessor):
    """Magnitude of the local velocity."""

    kind = FieldKind.SPEED

    def process(self, resolver, t_index, dimen):
        return np.sqrt(2.0 * super().process(resolver, t_index, dimen))


class RichardsonProcessor(DerivedProcessor):
    """
    Gradient Richardson number Ri = N² / S².

    N² = -g ∂ρ/∂z with ρ the normalised density, and
    S² = (∂u/∂z)² + (∂v/∂z)². Points without shear are NaN.
    """

    kind = FieldKind.RI

    def requires(self, resolver, t_index, dimen):
        density = DensityProcessor().requires(resolver, t_index, dimen)
        horizontal = tuple(c for c in velocity_names(resolver.grid) if c != "w")
        return density + horizontal

    def process(self, resolver, t_index, dimen):
        grid = resolver.grid
        rho = DensityProcessor().process(resolver, t_index, dimen)
        N2 = -resolver.params.g * vertical_derivative(rho, grid)

        S2 = np.zeros_like(N2)
        for comp in velocity_names(grid):
            if comp == "w":
                continue
            S2 += vertical_derivative(resolver.read_raw(comp, t_index), grid) ** 2

        Ri = np.full_like(N2, np.nan)
        np.divide(N2, S2, out=Ri, where=S2 > 0)
        return Ri


class StreamlineProcessor(DerivedProcessor):
    """In-plane velocity pair stacked on a trailing axis of length 2."""

    kind = FieldKind.STREAMLINE

    def requires(self, resolver, t_index, dimen):
        return streamline_components(resolver.grid, dimen)

    def process(self, resolver, t_index, dimen):
        first, second = streamline_components(resolver.grid, dimen)
        return np.stack(
            [resolver.read_raw(first, t_index), resolver.read_raw(second, t_index)],
            axis=-1,
        )


DEFAULT_PROCESSORS = (
    DensityProcessor(),
    KineticEnergyProcessor(),
    SpeedProcessor(),
    RichardsonProcessor(),
    StreamlineProcessor(),
)


class FieldResolver:
    """
    Resolves field names to full-domain data at one output index.

    Usage:
        resolver = FieldResolver(reader, grid, params)
        field = resolver.resolve("Mean rho", t_index=3)
        field.data.shape   # (Nx, Nz)
    """

    def __init__(self, reader: RawFieldReader, grid: GridModel, params: SimParams):
        self.reader = reader
        self.grid = grid
        self.params = params
        self._processors: Dict[FieldKind, DerivedProcessor] = {
            proc.kind: proc for proc in DEFAULT_PROCESSORS
        }

    def read_raw(self, name: str, t_index: int) -> NDArray:
        """Read a raw variable, reporting a missing one as UnknownFieldError."""
        if not self.reader.exists(name, t_index):
            raise UnknownFieldError(name, t_index)
        return np.asarray(self.reader.read(name, t_index), dtype=np.float64)

    def resolve(self,
                name: Union[str, FieldRequest],
                t_index: int,
                dimen: str = "Y") -> ResolvedField:
        """
        Resolve a field at an output index.

        Args:
            name: Field name or parsed request
            t_index: Output index
            dimen: Axis normal to the cross-section (selects streamline components)

        Returns:
            ResolvedField with full-domain data, or (Nx, Nz) data for
            spanwise statistics
        """
        request = name if isinstance(name, FieldRequest) else FieldRequest.parse(name)

        if request.is_spanwise:
            return self._resolve_spanwise(request, t_index, dimen)

        return ResolvedField(request=request, data=self._compute(request, t_index, dimen))

    def _compute(self, request: FieldRequest, t_index: int, dimen: str) -> NDArray:
        """Data of a non-spanwise field."""
        if request.kind is FieldKind.RAW:
            return self.read_raw(request.name, t_index)

        proc = self._processors[request.kind]
        proc.validate(self, t_index, dimen)
        logger.debug("Computing %s at output %d", proc.name, t_index)
        return proc.process(self, t_index, dimen)

    def _resolve_spanwise(self, request: FieldRequest, t_index: int, dimen: str) -> ResolvedField:
        """
        Mean / SD / Scaled SD along the spanwise (y) axis.

        Scaled SD divides by max|X| over the data the statistic is taken from,
        i.e. every y-slice of the x-z section.
        """
        if self.grid.ndims != 3:
            raise ConfigError(f"'{request.name}': spanwise statistics need a 3D grid")
        if dimen != "Y":
            raise ConfigError(
                f"'{request.name}': spanwise statistics are x-z sections, use dimen='Y' (got '{dimen}')"
            )

        base = request.base_request
        if base.is_spanwise or base.is_streamline:
            raise ConfigError(f"'{request.name}': cannot take spanwise statistics of '{base.name}'")

        data = self._compute(base, t_index, dimen)

        if request.kind is FieldKind.MEAN:
            reduced = np.mean(data, axis=1)
        else:
            reduced = np.std(data, axis=1)
            if request.kind is FieldKind.SCALED_SD:
                scale = np.nanmax(np.abs(data))
                if scale > 0:
                    reduced = reduced / scale

        return ResolvedField(request=request, data=reduced, reduced=True)
