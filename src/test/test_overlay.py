"""
Test secondary field overlays.
"""

import numpy as np
import pytest

from spinsplot.core.config import make_options
from spinsplot.postprocessing import CrossSectionExtractor, FieldRequest, FieldResolver
from spinsplot.visualization.overlay import OverlayComposer


@pytest.fixture
def composer_parts(rect_reader, rect_grid, rect_params):
    resolver = FieldResolver(rect_reader, rect_grid, rect_params)
    extractor = CrossSectionExtractor()
    return resolver, extractor, OverlayComposer(resolver, extractor, rect_grid)


def primary_frame(resolver, extractor, grid, name, options, t_index=0):
    request = FieldRequest.parse(name)
    field = resolver.resolve(request, t_index, options.dimen)
    return request, extractor.extract(field, options.dimen, options.slice, grid)


class TestOverlayNames:
    """Test overlay name coercion."""

    @pytest.mark.parametrize("primary, cont2, expected", [
        ("rho", "u", "u"),
        ("Mean rho", "u", "Mean u"),
        ("SD rho", "u", "Mean u"),
        ("Scaled SD rho", "u", "Mean u"),
        ("Mean rho", "Mean u", "Mean u"),
        ("Mean rho", "Streamline", "Streamline"),
    ])
    def test_overlay_name(self, primary, cont2, expected):
        assert OverlayComposer.overlay_name(FieldRequest.parse(primary), cont2) == expected

    def test_style(self):
        opts = make_options(ncont2=7)
        style = OverlayComposer.style(FieldRequest.parse("Streamline"), opts)
        assert style.color == "r"
        assert style.levels == 7
        assert OverlayComposer.style(FieldRequest.parse("rho"), opts).color == "k"


class TestOverlayResolution:
    """Test resolution and reuse of overlay data."""

    def test_no_overlay(self, composer_parts, rect_grid, rect_reader):
        resolver, extractor, composer = composer_parts
        opts = make_options(slice=0.5)
        request, frame = primary_frame(resolver, extractor, rect_grid, "rho", opts)
        reads = len(rect_reader.reads)

        assert composer.resolve(request, frame, opts, 0) is None
        assert len(rect_reader.reads) == reads

    def test_same_field_reuses_data(self, composer_parts, rect_grid, rect_reader):
        resolver, extractor, composer = composer_parts
        opts = make_options(slice=0.5, cont2="rho")
        request, frame = primary_frame(resolver, extractor, rect_grid, "rho", opts)
        reads = len(rect_reader.reads)

        overlay = composer.resolve(request, frame, opts, 0)
        assert overlay.reused
        assert overlay.frame is frame
        assert len(rect_reader.reads) == reads

    def test_different_field(self, composer_parts, rect_grid, rect_fields):
        resolver, extractor, composer = composer_parts
        opts = make_options(slice=0.5, cont2="u")
        request, frame = primary_frame(resolver, extractor, rect_grid, "rho", opts)

        overlay = composer.resolve(request, frame, opts, 0)
        assert overlay.name == "u"
        assert not overlay.reused
        assert overlay.data.shape == frame.data.shape
        np.testing.assert_array_equal(overlay.frame.grid_order(), rect_fields["u"][:, 2, :])

    def test_spanwise_primary_gets_mean(self, composer_parts, rect_grid, rect_fields):
        resolver, extractor, composer = composer_parts
        opts = make_options(slice=0.5, cont2="u")
        request, frame = primary_frame(resolver, extractor, rect_grid, "SD rho", opts)

        overlay = composer.resolve(request, frame, opts, 0)
        assert overlay.name == "Mean u"
        np.testing.assert_allclose(overlay.frame.grid_order(), rect_fields["u"].mean(axis=1))

    def test_mean_self_overlay(self, composer_parts, rect_grid, rect_reader):
        resolver, extractor, composer = composer_parts
        opts = make_options(slice=0.5, cont2="rho")
        request, frame = primary_frame(resolver, extractor, rect_grid, "Mean rho", opts)
        reads = len(rect_reader.reads)

        overlay = composer.resolve(request, frame, opts, 0)
        assert overlay.reused
        assert len(rect_reader.reads) == reads


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
