"""IO utilities: raw field readers and YAML loaders."""

from .readers import RawFieldReader, ArrayFieldReader
from .options_loader import load_options, load_params

__all__ = [
    "RawFieldReader",
    "ArrayFieldReader",
    "load_options",
    "load_params",
]
