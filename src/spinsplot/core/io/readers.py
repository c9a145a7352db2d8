"""
Raw field readers.

The plotting pipeline only needs two operations from a data source: ask
whether a variable exists at an output index, and read it as a full-domain
array in (x, [y,] z) index order. Anything providing them can be used as a
reader; ArrayFieldReader keeps the arrays in memory.
"""

from __future__ import annotations
from typing import Dict, Mapping, Protocol, Sequence, Union, runtime_checkable
import numpy as np
from numpy.typing import NDArray

from ..errors import UnknownFieldError


@runtime_checkable
class RawFieldReader(Protocol):
    """Interface of raw snapshot data sources."""

    def exists(self, name: str, t_index: int) -> bool:
        """True if variable `name` is available at output `t_index`."""
        ...

    def read(self, name: str, t_index: int) -> NDArray:
        """Full-domain array of variable `name` at output `t_index`."""
        ...


FieldSeriesLike = Union[NDArray, Sequence[NDArray], Mapping[int, NDArray]]


class ArrayFieldReader:
    """
    In-memory reader.

    Each variable is either a single array (the same at every output), a
    sequence of arrays indexed by output number, or a mapping from output
    number to array.

    Usage:
        reader = ArrayFieldReader({"rho": rho_t, "u": [u0, u1, u2]})
        reader.read("u", 1)

    Attributes:
        reads: Log of (name, t_index) pairs actually read, in order
    """

    def __init__(self, fields: Mapping[str, FieldSeriesLike]):
        self._fields: Dict[str, FieldSeriesLike] = dict(fields)
        self.reads: list[tuple[str, int]] = []

    @property
    def available(self) -> list[str]:
        """Names of all stored variables."""
        return list(self._fields.keys())

    def exists(self, name: str, t_index: int) -> bool:
        if name not in self._fields:
            return False
        series = self._fields[name]
        if isinstance(series, np.ndarray):
            return True
        if isinstance(series, Mapping):
            return t_index in series
        return 0 <= t_index < len(series)

    def read(self, name: str, t_index: int) -> NDArray:
        if not self.exists(name, t_index):
            raise UnknownFieldError(name, t_index)

        self.reads.append((name, t_index))
        series = self._fields[name]
        if isinstance(series, np.ndarray):
            return series
        return np.asarray(series[t_index], dtype=np.float64)

    def __repr__(self) -> str:
        return f"ArrayFieldReader({self.available})"
