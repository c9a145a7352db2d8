"""
Pydantic schemas for plot options.
"""

from typing import Optional, Tuple, Literal, Union, Any
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..errors import ConfigError


def describe_errors(error: ValidationError) -> str:
    """One-line summary naming each offending option."""
    problems = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "options"
        problems.append(f"{loc}: {err['msg']}")
    return "Invalid plot options: " + "; ".join(problems)


class PlotOptions(BaseModel):
    """Options controlling a single cross-section plot (or a sequence of them)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    def __init__(self, **data: Any):
        """Validate options, reporting failures as ConfigError."""
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConfigError(describe_errors(e)) from e

    # Cross-section
    dimen: Literal["X", "Y", "Z"] = Field(
        default="Y",
        description="Axis normal to the cross-section"
    )
    slice: Optional[float] = Field(
        default=None,
        description="Location of the cross-section [m] (None = domain mid-point)"
    )
    axis: Optional[Tuple[float, float, float, float]] = Field(
        default=None,
        description="Plot domain (x1, x2, z1, z2) in the section's own axes"
    )

    # Style
    style: Literal["pcolor", "contourf", "contour"] = Field(
        default="pcolor",
        description="Rendering style of the primary field"
    )
    xskp: int = Field(default=1, ge=1, description="x grid points to skip")
    yskp: int = Field(default=1, ge=1, description="y grid points to skip")
    zskp: int = Field(default=1, ge=1, description="z grid points to skip")
    fnum: Union[int, Literal["new"]] = Field(
        default=1,
        description="Figure number to draw into ('new' = fresh figure)"
    )

    # Secondary field
    cont2: str = Field(default="None", description="Secondary field drawn as contours")
    ncont2: int = Field(default=10, ge=1, description="Contours for the secondary field")
    ncontourf: int = Field(default=64, ge=1, description="Levels for contourf")
    ncontour: int = Field(default=20, ge=1, description="Levels for contour")
    ncmap: int = Field(default=64, ge=2, description="Colormap levels")

    # Colour axis
    colaxis: Union[Literal["auto"], Tuple[float, float]] = Field(
        default="auto",
        description="Colour axis limits (c1, c2) or 'auto'"
    )
    colorbar: bool = Field(default=True, description="Draw a colour bar")
    trim: bool = Field(default=False, description="Clamp data into colaxis before plotting")
    visible: bool = Field(default=True, description="Show the figure window")

    # Streamlines
    speed: float = Field(
        default=-1.0,
        description="Background speed subtracted in streamline plots (-1 = ask)"
    )

    # Persistence
    savefig: bool = Field(default=False, description="Save every frame to disk")
    filename: Optional[str] = Field(default=None, description="Base name of saved figures")
    dir: str = Field(default="figures", description="Directory for saved figures")
    fileformat: str = Field(default="png", description="Image format of saved figures")
    dpi: int = Field(default=150, gt=0, description="Resolution of saved figures")

    @field_validator("dimen", mode="before")
    @classmethod
    def upper_dimen(cls, v):
        """Accept lower-case axis names."""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("fnum", mode="before")
    @classmethod
    def lower_fnum(cls, v):
        if isinstance(v, str):
            return v.lower()
        return v

    @field_validator("axis")
    @classmethod
    def check_axis(cls, v):
        """Axis ranges must be increasing."""
        if v is not None and (v[0] >= v[1] or v[2] >= v[3]):
            raise ValueError(f"axis must be increasing (x1 < x2, z1 < z2), got {v}")
        return v

    @field_validator("colaxis")
    @classmethod
    def check_colaxis(cls, v):
        if v != "auto" and v[0] >= v[1]:
            raise ValueError(f"colaxis must satisfy c1 < c2, got {v}")
        return v

    @model_validator(mode="after")
    def check_trim(self):
        """Trimming needs a range to trim into."""
        if self.trim and self.colaxis == "auto":
            raise ValueError("Trim requires an axis range (set colaxis=(c1, c2))")
        return self

    @property
    def has_overlay(self) -> bool:
        return self.cont2 != "None"

    def skips(self) -> Tuple[int, int, int]:
        """Skip factors as an (x, y, z) tuple."""
        return (self.xskp, self.yskp, self.zskp)

    def figure_basename(self, field_name: str) -> str:
        """Base name of saved figures, defaulting to the field name."""
        if self.filename:
            return self.filename
        return field_name.replace(" ", "_")


def make_options(base: Optional[PlotOptions] = None, **overrides: Any) -> PlotOptions:
    """
    Build PlotOptions from keyword overrides.

    Validation failures are reported as ConfigError naming the offending
    option.

    Args:
        base: Options to start from (defaults when None)
        **overrides: Option values to change
    """
    values = base.model_dump() if base is not None else {}
    values.update(overrides)
    return PlotOptions(**values)
