"""
Field names and field data containers.

A requested field name is parsed once into a FieldRequest; the rest of the
pipeline dispatches on its FieldKind instead of re-inspecting the string.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from numpy.typing import NDArray


class FieldKind(Enum):
    """How a field is obtained."""
    RAW = "raw"
    MEAN = "Mean"
    SD = "SD"
    SCALED_SD = "Scaled SD"
    DENSITY = "Density"
    KE = "KE"
    SPEED = "speed"
    RI = "Ri"
    STREAMLINE = "Streamline"

    @property
    def is_spanwise(self) -> bool:
        """True for spanwise statistics (the field is reduced along y)."""
        return self in (FieldKind.MEAN, FieldKind.SD, FieldKind.SCALED_SD)


_PREFIXES = (
    ("Mean ", FieldKind.MEAN),
    ("SD ", FieldKind.SD),
    ("Scaled SD ", FieldKind.SCALED_SD),
)

_NAMED = {
    "Density": FieldKind.DENSITY,
    "KE": FieldKind.KE,
    "speed": FieldKind.SPEED,
    "Ri": FieldKind.RI,
    "Streamline": FieldKind.STREAMLINE,
}


@dataclass(frozen=True)
class FieldRequest:
    """
    A parsed field name.

    Attributes:
        name: The name as requested (e.g. "Mean rho")
        kind: How the field is obtained
        base: Name of the underlying field for spanwise statistics and raw
            reads (e.g. "rho"); equal to name for the other kinds
    """
    name: str
    kind: FieldKind
    base: str

    @classmethod
    def parse(cls, name: str) -> FieldRequest:
        """Parse a field name (prefixes are case-sensitive)."""
        for prefix, kind in _PREFIXES:
            if name.startswith(prefix) and len(name) > len(prefix):
                return cls(name=name, kind=kind, base=name[len(prefix):])

        return cls(name=name, kind=_NAMED.get(name, FieldKind.RAW), base=name)

    @property
    def is_spanwise(self) -> bool:
        return self.kind.is_spanwise

    @property
    def is_streamline(self) -> bool:
        return self.kind is FieldKind.STREAMLINE

    @property
    def base_request(self) -> FieldRequest:
        """Request for the underlying field of a spanwise statistic."""
        return FieldRequest.parse(self.base)

    def __str__(self) -> str:
        return self.name


@dataclass
class ResolvedField:
    """
    Field data before cross-sectioning.

    Attributes:
        request: The parsed field name
        data: (Nx, [Ny,] Nz) array, or (Nx, Nz) for spanwise statistics;
            streamline fields carry a trailing axis of length 2
        reduced: True when the spanwise (y) axis has been averaged out
    """
    request: FieldRequest
    data: NDArray
    reduced: bool = False

    @property
    def name(self) -> str:
        return self.request.name

    @property
    def is_vector(self) -> bool:
        return self.request.is_streamline

    def __repr__(self) -> str:
        return f"ResolvedField({self.name}, shape={self.data.shape}, reduced={self.reduced})"


@dataclass
class FieldFrame:
    """
    One extracted 2D cross-section, oriented for plotting.

    Attributes:
        data: 2D array matching (xvar, yvar), or (n1, n2, 2) for streamlines
        xvar: Horizontal plot coordinates
        yvar: Vertical plot coordinates
        name: Field name
        transposed: True when data was transposed from grid-index order
    """
    data: NDArray
    xvar: NDArray
    yvar: NDArray
    name: str
    transposed: bool = False

    @property
    def shape(self) -> tuple:
        return self.data.shape

    def grid_order(self, data: Optional[NDArray] = None) -> NDArray:
        """Return data (default: self.data) in grid-index orientation."""
        data = self.data if data is None else data
        return data.T if self.transposed else data

    def __repr__(self) -> str:
        return f"FieldFrame({self.name}, shape={self.shape})"
