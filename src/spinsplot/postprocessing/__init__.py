"""
Post-processing: from field names to 2D cross-sections.

Key classes:
- FieldRequest / FieldKind: parsed field names
- FieldResolver: raw reads and derived quantities (Density, KE, speed, Ri,
  Streamline, spanwise statistics)
- CrossSectionExtractor: 2D slices, with constant-height interpolation on
  mapped grids
"""

from .fields import FieldKind, FieldRequest, ResolvedField, FieldFrame
from .derived import FieldResolver, DerivedProcessor, vertical_derivative
from .cross_section import CrossSectionExtractor, IndexWindow, interpolate_to_height, default_slice
from .eos import eqn_of_state, density_anomaly

__all__ = [
    # Field names and containers
    "FieldKind",
    "FieldRequest",
    "ResolvedField",
    "FieldFrame",
    # Resolution
    "FieldResolver",
    "DerivedProcessor",
    "vertical_derivative",
    # Slicing
    "CrossSectionExtractor",
    "IndexWindow",
    "interpolate_to_height",
    "default_slice",
    # Equation of state
    "eqn_of_state",
    "density_anomaly",
]
