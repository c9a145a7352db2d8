"""
Test field name parsing, readers and field resolution.
"""

import numpy as np
import pytest

from spinsplot.core.errors import ConfigError, UnknownFieldError
from spinsplot.core.grid import SimParams
from spinsplot.core.io.readers import ArrayFieldReader, RawFieldReader
from spinsplot.postprocessing import FieldKind, FieldRequest, FieldResolver
from spinsplot.postprocessing.derived import streamline_components, vertical_derivative
from spinsplot.postprocessing.eos import eqn_of_state, density_anomaly


class TestFieldRequest:
    """Test parsing of field names."""

    @pytest.mark.parametrize("name, kind, base", [
        ("rho", FieldKind.RAW, "rho"),
        ("Mean u", FieldKind.MEAN, "u"),
        ("SD rho", FieldKind.SD, "rho"),
        ("Scaled SD w", FieldKind.SCALED_SD, "w"),
        ("Ri", FieldKind.RI, "Ri"),
        ("KE", FieldKind.KE, "KE"),
        ("speed", FieldKind.SPEED, "speed"),
        ("Density", FieldKind.DENSITY, "Density"),
        ("Streamline", FieldKind.STREAMLINE, "Streamline"),
    ])
    def test_parse(self, name, kind, base):
        req = FieldRequest.parse(name)
        assert req.kind is kind
        assert req.base == base
        assert req.name == name

    def test_prefix_is_case_sensitive(self):
        assert FieldRequest.parse("mean u").kind is FieldKind.RAW

    def test_bare_prefix_is_raw(self):
        assert FieldRequest.parse("Mean ").kind is FieldKind.RAW

    def test_spanwise_flags(self):
        req = FieldRequest.parse("Mean KE")
        assert req.is_spanwise
        assert req.base_request.kind is FieldKind.KE
        assert not FieldRequest.parse("KE").is_spanwise


class TestArrayFieldReader:
    """Test the in-memory reader."""

    def test_protocol(self, rect_reader):
        assert isinstance(rect_reader, RawFieldReader)

    def test_series_and_mapping(self):
        a0, a1 = np.zeros(3), np.ones(3)
        reader = ArrayFieldReader({"u": [a0, a1], "w": {5: a1}})
        assert reader.exists("u", 1)
        assert not reader.exists("u", 2)
        assert reader.exists("w", 5)
        assert not reader.exists("w", 0)
        np.testing.assert_array_equal(reader.read("u", 1), a1)
        assert reader.reads == [("u", 1)]

    def test_missing(self, rect_reader):
        with pytest.raises(UnknownFieldError, match="Unknown field 'tracer'"):
            rect_reader.read("tracer", 0)


class TestEquationOfState:
    """Test the UNESCO one-atmosphere density."""

    def test_pure_water(self):
        assert eqn_of_state(0.0, 0.0) == pytest.approx(999.842594)

    def test_unesco_check_value(self):
        # UNESCO (1983) check value: S=35, T=5 at p=0
        assert eqn_of_state(5.0, 35.0) == pytest.approx(1027.67547, abs=1e-4)

    def test_anomaly(self):
        rho = density_anomaly(np.array([5.0]), np.array([35.0]), 1000.0)
        np.testing.assert_allclose(rho, [0.02767547], atol=1e-7)


class TestFieldResolver:
    """Test raw and derived field resolution."""

    def test_raw(self, rect_reader, rect_grid, rect_params, rect_fields):
        resolver = FieldResolver(rect_reader, rect_grid, rect_params)
        field = resolver.resolve("rho", 0)
        np.testing.assert_array_equal(field.data, rect_fields["rho"])
        assert not field.reduced

    def test_unknown(self, rect_reader, rect_grid, rect_params):
        resolver = FieldResolver(rect_reader, rect_grid, rect_params)
        with pytest.raises(UnknownFieldError) as info:
            resolver.resolve("dye", 3)
        assert info.value.name == "dye"
        assert info.value.t_index == 3

    def test_kinetic_energy(self, rect_reader, rect_grid, rect_params, rect_fields):
        resolver = FieldResolver(rect_reader, rect_grid, rect_params)
        ke = resolver.resolve("KE", 0).data
        u, v, w = rect_fields["u"], rect_fields["v"], rect_fields["w"]
        np.testing.assert_allclose(ke, 0.5 * (u**2 + v**2 + w**2))

        speed = resolver.resolve("speed", 0).data
        np.testing.assert_allclose(speed, np.sqrt(u**2 + v**2 + w**2))

    def test_kinetic_energy_2d(self, reader_2d, grid_2d):
        resolver = FieldResolver(reader_2d, grid_2d, SimParams.from_grid(grid_2d))
        ke = resolver.resolve("KE", 1).data
        u = reader_2d.read("u", 1)
        np.testing.assert_allclose(ke, 0.5 * u**2)

    def test_missing_velocity_names_dependency(self, rect_grid, rect_params, rect_fields):
        reader = ArrayFieldReader({"u": rect_fields["u"], "w": rect_fields["w"]})
        resolver = FieldResolver(reader, rect_grid, rect_params)
        with pytest.raises(UnknownFieldError, match="'KE' needs raw variable 'v'"):
            resolver.resolve("KE", 0)

    def test_density_prefers_raw(self, rect_reader, rect_grid, rect_params, rect_fields):
        resolver = FieldResolver(rect_reader, rect_grid, rect_params)
        np.testing.assert_array_equal(resolver.resolve("Density", 0).data, rect_fields["rho"])

    def test_density_from_eos(self, rect_grid, rect_params):
        shape = rect_grid.shape
        reader = ArrayFieldReader({
            "Temp": np.full(shape, 5.0),
            "Salt": np.full(shape, 35.0),
        })
        resolver = FieldResolver(reader, rect_grid, rect_params)
        rho = resolver.resolve("Density", 0).data
        np.testing.assert_allclose(rho, 0.02767547, atol=1e-7)

    def test_density_missing_inputs(self, rect_grid, rect_params):
        reader = ArrayFieldReader({"Temp": np.zeros(rect_grid.shape)})
        resolver = FieldResolver(reader, rect_grid, rect_params)
        with pytest.raises(UnknownFieldError, match="Salt"):
            resolver.resolve("Density", 0)

    def test_richardson(self, rect_grid, rect_params):
        X, Y, Z = np.meshgrid(rect_grid.x, rect_grid.y, rect_grid.z, indexing="ij")
        # N² = 0.981 (rho = -0.1 z / g-scaled), S² = 0.25 everywhere
        reader = ArrayFieldReader({
            "rho": -0.1 * Z,
            "u": 0.5 * Z,
            "v": np.zeros_like(Z),
            "w": np.zeros_like(Z),
        })
        resolver = FieldResolver(reader, rect_grid, rect_params)
        Ri = resolver.resolve("Ri", 0).data
        np.testing.assert_allclose(Ri, 9.81 * 0.1 / 0.25)

    def test_richardson_no_shear_is_nan(self, rect_grid, rect_params):
        Z = np.broadcast_to(rect_grid.z, rect_grid.shape)
        reader = ArrayFieldReader({
            "rho": -0.1 * Z,
            "u": np.ones(rect_grid.shape),
            "v": np.zeros(rect_grid.shape),
        })
        resolver = FieldResolver(reader, rect_grid, rect_params)
        assert np.isnan(resolver.resolve("Ri", 0).data).all()

    def test_vertical_derivative_mapped(self, mapped_grid):
        f = 3.0 * mapped_grid.z
        np.testing.assert_allclose(vertical_derivative(f, mapped_grid), 3.0)

    def test_streamline_components(self, rect_grid, grid_2d):
        assert streamline_components(rect_grid, "X") == ("v", "w")
        assert streamline_components(rect_grid, "Y") == ("u", "w")
        assert streamline_components(rect_grid, "Z") == ("u", "v")
        assert streamline_components(grid_2d, "Y") == ("u", "w")

    def test_streamline_stack(self, rect_reader, rect_grid, rect_params, rect_fields):
        resolver = FieldResolver(rect_reader, rect_grid, rect_params)
        field = resolver.resolve("Streamline", 0, dimen="Z")
        assert field.data.shape == rect_grid.shape + (2,)
        assert field.is_vector
        np.testing.assert_array_equal(field.data[..., 1], rect_fields["v"])


class TestSpanwiseStatistics:
    """Test Mean / SD / Scaled SD reductions along y."""

    def test_mean(self, rect_reader, rect_grid, rect_params, rect_fields):
        resolver = FieldResolver(rect_reader, rect_grid, rect_params)
        field = resolver.resolve("Mean rho", 0)
        assert field.reduced
        assert field.data.shape == (9, 7)
        np.testing.assert_allclose(field.data, rect_fields["rho"].mean(axis=1))

    def test_sd_and_scaled(self, rect_reader, rect_grid, rect_params, rect_fields):
        resolver = FieldResolver(rect_reader, rect_grid, rect_params)
        rho = rect_fields["rho"]
        sd = resolver.resolve("SD rho", 0).data
        np.testing.assert_allclose(sd, rho.std(axis=1))

        scaled = resolver.resolve("Scaled SD rho", 0).data
        np.testing.assert_allclose(scaled, rho.std(axis=1) / np.abs(rho).max())

    def test_mean_of_derived(self, rect_reader, rect_grid, rect_params):
        resolver = FieldResolver(rect_reader, rect_grid, rect_params)
        ke = resolver.resolve("KE", 0).data
        np.testing.assert_allclose(resolver.resolve("Mean KE", 0).data, ke.mean(axis=1))

    def test_needs_3d(self, reader_2d, grid_2d):
        resolver = FieldResolver(reader_2d, grid_2d, SimParams.from_grid(grid_2d))
        with pytest.raises(ConfigError, match="3D grid"):
            resolver.resolve("Mean rho", 0)

    def test_needs_y_sections(self, rect_reader, rect_grid, rect_params):
        resolver = FieldResolver(rect_reader, rect_grid, rect_params)
        with pytest.raises(ConfigError, match="dimen='Y'"):
            resolver.resolve("Mean rho", 0, dimen="X")

    def test_no_nested_statistics(self, rect_reader, rect_grid, rect_params):
        resolver = FieldResolver(rect_reader, rect_grid, rect_params)
        with pytest.raises(ConfigError):
            resolver.resolve("Mean Streamline", 0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
