"""
Test plot options validation and YAML loading.
"""

import pytest
from pydantic import ValidationError

from spinsplot.core.config import PlotOptions, make_options
from spinsplot.core.errors import ConfigError
from spinsplot.core.io import load_options, load_params


class TestPlotOptions:
    """Test PlotOptions defaults and validation."""

    def test_defaults(self):
        opts = PlotOptions()
        assert opts.dimen == "Y"
        assert opts.slice is None
        assert opts.style == "pcolor"
        assert opts.skips() == (1, 1, 1)
        assert opts.cont2 == "None"
        assert not opts.has_overlay
        assert opts.ncont2 == 10
        assert opts.colaxis == "auto"
        assert opts.colorbar
        assert not opts.trim
        assert opts.speed == -1
        assert not opts.savefig

    def test_lower_case_dimen(self):
        assert make_options(dimen="z").dimen == "Z"

    def test_trim_needs_range(self):
        with pytest.raises(ConfigError, match="Trim requires an axis range"):
            make_options(trim=True)

    def test_direct_construction_reports_config_error(self):
        with pytest.raises(ConfigError, match="Trim requires an axis range"):
            PlotOptions(trim=True)
        with pytest.raises(ConfigError, match="dimen"):
            PlotOptions(dimen="W")

    def test_trim_with_range(self):
        opts = make_options(trim=True, colaxis=(-1, 1))
        assert opts.colaxis == (-1.0, 1.0)

    def test_colaxis_order(self):
        with pytest.raises(ConfigError, match="colaxis"):
            make_options(colaxis=(1.0, -1.0))

    def test_axis_order(self):
        with pytest.raises(ConfigError, match="axis"):
            make_options(axis=(0.0, 1.0, 0.0, -1.0))

    def test_unknown_option(self):
        with pytest.raises(ConfigError, match="colour"):
            make_options(colour="red")

    def test_bad_style(self):
        with pytest.raises(ConfigError, match="style"):
            make_options(style="surf")

    def test_frozen(self):
        opts = PlotOptions()
        with pytest.raises(ValidationError):
            opts.dimen = "X"

    def test_overrides_keep_base(self):
        base = make_options(dimen="X", ncont2=5)
        opts = make_options(base, slice=0.25)
        assert opts.dimen == "X"
        assert opts.ncont2 == 5
        assert opts.slice == 0.25
        assert base.slice is None

    def test_figure_basename(self):
        assert PlotOptions().figure_basename("Mean rho") == "Mean_rho"
        assert make_options(filename="run1").figure_basename("Mean rho") == "run1"


class TestLoaders:
    """Test YAML loading of options and parameters."""

    def test_load_options(self, tmp_path):
        path = tmp_path / "plot.yaml"
        path.write_text("dimen: x\nslice: 0.5\ncont2: rho\nncont2: 6\n")

        opts = load_options(path, style="contourf")
        assert opts.dimen == "X"
        assert opts.slice == 0.5
        assert opts.cont2 == "rho"
        assert opts.ncont2 == 6
        assert opts.style == "contourf"

    def test_load_options_override_wins(self, tmp_path):
        path = tmp_path / "plot.yaml"
        path.write_text("ncont2: 6\n")
        assert load_options(path, ncont2=3).ncont2 == 3

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_options(path) == PlotOptions()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_options(tmp_path / "nope.yaml")

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_options(path)

    def test_invalid_option_in_file(self, tmp_path):
        path = tmp_path / "plot.yaml"
        path.write_text("trim: true\n")
        with pytest.raises(ConfigError, match="Trim"):
            load_options(path)

    def test_load_params(self, tmp_path):
        path = tmp_path / "spins.yaml"
        path.write_text("ndims: 3\nNz: 64\nmapped_grid: 'false'\nplot_interval: 0.5\n")

        params = load_params(path)
        assert params.ndims == 3
        assert params.Nz == 64
        assert not params.mapped_grid
        assert params.plot_interval == 0.5

    def test_load_params_missing_key(self, tmp_path):
        path = tmp_path / "spins.yaml"
        path.write_text("ndims: 3\n")
        with pytest.raises(ConfigError, match="Nz"):
            load_params(path)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
