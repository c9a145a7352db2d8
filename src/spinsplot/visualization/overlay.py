"""
Secondary ("contour") field overlay.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import logging

from ..core.config.schemas import PlotOptions
from ..core.grid import GridModel
from ..postprocessing.cross_section import CrossSectionExtractor, IndexWindow
from ..postprocessing.derived import FieldResolver
from ..postprocessing.fields import FieldFrame, FieldRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverlayStyle:
    """Line style of overlay contours, fixed per primary plot style."""
    color: str
    linestyle: str
    levels: int


@dataclass
class Overlay:
    """
    A resolved secondary field.

    Attributes:
        request: Parsed (possibly coerced) overlay name
        frame: Extracted cross-section
        reused: True when the primary frame was reused instead of re-read
    """
    request: FieldRequest
    frame: FieldFrame
    reused: bool = False

    @property
    def name(self) -> str:
        return self.request.name

    @property
    def data(self):
        return self.frame.data


class OverlayComposer:
    """
    Resolves the secondary field drawn as contours on top of the primary.

    Usage:
        composer = OverlayComposer(resolver, extractor, grid)
        overlay = composer.resolve(primary, primary_frame, options, t_index)
        if overlay is not None:
            ax.contour(overlay.frame.xvar, overlay.frame.yvar, overlay.data)
    """

    def __init__(self, resolver: FieldResolver, extractor: CrossSectionExtractor, grid: GridModel):
        self.resolver = resolver
        self.extractor = extractor
        self.grid = grid

    @staticmethod
    def overlay_name(primary: FieldRequest, cont2: str) -> str:
        """
        Name of the overlay field.

        Spanwise statistics are overlaid with the spanwise mean of the
        secondary field (except streamlines) so both layers live on the same
        reduced x-z plane. A cont2 already named "Mean ..." is used as is
        rather than prefixed a second time.
        """
        if primary.is_spanwise and cont2 != "Streamline" and not cont2.startswith("Mean "):
            return "Mean " + cont2
        return cont2

    @staticmethod
    def style(primary: FieldRequest, options: PlotOptions) -> OverlayStyle:
        """Overlay line style for the primary field's rendering."""
        color = "r" if primary.is_streamline else "k"
        return OverlayStyle(color=color, linestyle="-", levels=options.ncont2)

    def resolve(self,
                primary: FieldRequest,
                primary_frame: FieldFrame,
                options: PlotOptions,
                t_index: int,
                window: Optional[IndexWindow] = None) -> Optional[Overlay]:
        """
        Resolve and extract the overlay field.

        Args:
            primary: Parsed primary field name
            primary_frame: Primary cross-section as plotted
            options: Plot options (cont2, dimen, slice)
            t_index: Output index
            window: Index window used for the primary field

        Returns:
            Overlay, or None when options.cont2 is 'None'
        """
        if not options.has_overlay:
            return None

        request = FieldRequest.parse(self.overlay_name(primary, options.cont2))

        if request.name == primary.name:
            logger.debug("Overlay '%s' is the primary field, reusing its data", request.name)
            return Overlay(request=request, frame=primary_frame, reused=True)

        field = self.resolver.resolve(request, t_index, options.dimen)
        frame = self.extractor.extract(field, options.dimen, options.slice, self.grid, window)
        return Overlay(request=request, frame=frame)
