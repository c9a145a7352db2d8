"""
Error taxonomy for the plotting pipeline.

All errors propagate to the caller of a run; nothing is retried because
frames are drawn onto a shared surface.
"""


class ConfigError(ValueError):
    """Invalid or contradictory plot configuration."""


class UnknownFieldError(LookupError):
    """Field name matches no derivation rule and no raw variable."""

    def __init__(self, name: str, t_index=None, required_by=None):
        self.name = name
        self.t_index = t_index
        self.required_by = required_by
        where = f" at output {t_index}" if t_index is not None else ""
        if required_by is not None:
            msg = f"Field '{required_by}' needs raw variable '{name}', which is missing{where}"
        else:
            msg = f"Unknown field '{name}'{where}: no derivation rule and no raw variable"
        super().__init__(msg)


class ResourceError(OSError):
    """Figure persistence failed (directory creation or file write)."""


class InterpolationWarning(UserWarning):
    """Non-fatal warning raised by slicing or rendering on mapped grids."""
