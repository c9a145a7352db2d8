"""
YAML loaders for plot options and simulation parameters.
"""

from pathlib import Path
from typing import Any, Dict, Union
import logging
import yaml

from ..config.schemas import PlotOptions, make_options
from ..errors import ConfigError
from ..grid import SimParams

logger = logging.getLogger(__name__)


def _read_yaml(filepath: Union[str, Path]) -> Dict[str, Any]:
    """Load a YAML mapping, raising FileNotFoundError for missing files."""
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    with open(filepath, 'r') as f:
        raw = yaml.safe_load(f)

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{filepath}: expected a mapping at top level, got {type(raw).__name__}")
    return raw


def load_options(filepath: Union[str, Path], **overrides: Any) -> PlotOptions:
    """
    Load plot options from a YAML file.

    Keys of the file are PlotOptions fields; keyword overrides take
    precedence over the file.

    Args:
        filepath: Path to YAML options file
        **overrides: Option values applied on top of the file

    Returns:
        Validated PlotOptions
    """
    raw = _read_yaml(filepath)
    raw.update(overrides)
    logger.debug("Loaded %d plot options from %s", len(raw), filepath)
    return make_options(**raw)


def load_params(filepath: Union[str, Path]) -> SimParams:
    """
    Load simulation parameters from a YAML file.

    Required keys: ndims, Nz. Optional: mapped_grid, plot_interval, g, rho_0.
    """
    raw = _read_yaml(filepath)
    try:
        return SimParams.from_dict(raw)
    except KeyError as e:
        raise ConfigError(f"{filepath}: missing simulation parameter {e}") from e
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{filepath}: {e}") from e
