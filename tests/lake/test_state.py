"""Tests for the state, forcing and diagnostics containers."""

import numpy as np
import pytest

from laketherm.lake.layout import ColumnLayout
from laketherm.lake.state import LakeDiagnostics, LakeForcing, LakeState

LAYOUT = ColumnLayout(n_snow_max=3, n_lake=4, n_soil=5, n_soil_hydrologic=3)


def _valid_state(n_columns: int = 2) -> LakeState:
    state = LakeState.allocate(LAYOUT, n_columns)
    state.lake_node_depth_m[:] = np.array([0.25, 1.0, 2.5, 5.0])[:, np.newaxis]
    state.soil_node_depth_m[:] = np.array([0.05, 0.2, 0.5, 1.1, 2.3])[:, np.newaxis]
    return state


def test_allocate_state() -> None:
    state = LakeState.allocate(LAYOUT, 7)
    assert state.n_columns == 7
    assert state.is_lake.all()
    assert (state.n_snow_layers == 0).all()
    assert (state.extinction_coefficient_per_m == -1.0).all()
    assert state.snow_temperature_K.shape == (3, 7)
    assert state.lake_temperature_K.shape == (4, 7)
    assert state.porosity.shape == (5, 7)
    assert state.lake_temperature_K.dtype == np.float64
    assert state.n_snow_layers.dtype == np.int32


def test_lake_columns() -> None:
    state = _valid_state(4)
    state.is_lake[[0, 2]] = False
    np.testing.assert_array_equal(state.lake_columns(), [1, 3])
    assert state.lake_columns().dtype == np.int32


def test_valid_state_passes() -> None:
    _valid_state().validate()


def test_validate_shape() -> None:
    state = _valid_state()
    state.lake_ice_fraction = np.zeros((3, 2))
    with pytest.raises(ValueError, match="lake_ice_fraction has shape"):
        state.validate()


def test_validate_snow_layer_count() -> None:
    state = _valid_state()
    state.n_snow_layers[1] = 4
    with pytest.raises(ValueError, match="Number of snow layers"):
        state.validate()


def test_validate_ice_fraction() -> None:
    state = _valid_state()
    state.lake_ice_fraction[2, 0] = 1.2
    with pytest.raises(ValueError, match="ice fraction"):
        state.validate()


def test_validate_negative_water() -> None:
    state = _valid_state()
    state.soil_ice_kg_per_m2[0, 1] = -1.0
    with pytest.raises(ValueError, match="soil_ice_kg_per_m2"):
        state.validate()


def test_validate_node_depths() -> None:
    state = _valid_state()
    state.lake_node_depth_m[2, 1] = 0.5
    with pytest.raises(ValueError, match="Lake node depths"):
        state.validate()


def _snow_covered_state() -> LakeState:
    """Two active snow layers in column 0, in the bottom snow slots."""
    state = _valid_state()
    state.n_snow_layers[0] = 2
    state.snow_layer_thickness_m[1:, 0] = [0.04, 0.06]
    state.snow_node_depth_m[1:, 0] = [-0.08, -0.03]
    return state


def test_validate_snow_layers() -> None:
    state = _snow_covered_state()
    # the inert slot above the top active slot is not checked
    state.snow_layer_thickness_m[0, 0] = 0.0
    state.snow_node_depth_m[0, 0] = 0.0
    state.validate()


def test_validate_snow_thickness() -> None:
    state = _snow_covered_state()
    state.snow_layer_thickness_m[1, 0] = 0.0
    with pytest.raises(ValueError, match="Snow layer thickness"):
        state.validate()


def test_validate_snow_node_depths() -> None:
    state = _snow_covered_state()
    state.snow_node_depth_m[1:, 0] = [-0.03, -0.08]
    with pytest.raises(ValueError, match="Snow node depths"):
        state.validate()


def test_validate_ignores_non_lake_columns() -> None:
    """Columns that are not lakes may hold anything."""
    state = _valid_state()
    state.is_lake[1] = False
    state.lake_ice_fraction[:, 1] = -5.0
    state.lake_node_depth_m[:, 1] = 0.0
    state.validate()


def test_forcing() -> None:
    forcing = LakeForcing.allocate(LAYOUT, 3)
    assert forcing.absorbed_solar_per_layer_W_per_m2.shape == (4, 3)
    forcing.validate(LAYOUT, 3)

    forcing.absorbed_solar_per_layer_W_per_m2 = np.zeros((3, 3))
    with pytest.raises(ValueError, match="absorbed_solar_per_layer_W_per_m2"):
        forcing.validate(LAYOUT, 3)

    forcing = LakeForcing.allocate(LAYOUT, 3)
    with pytest.raises(ValueError, match="ground_heat_flux_W_per_m2"):
        forcing.validate(LAYOUT, 2)


def test_diagnostics() -> None:
    diagnostics = LakeDiagnostics.allocate(LAYOUT, 6)
    assert diagnostics.energy_error_W_per_m2.shape == (6,)
    assert diagnostics.mixing_skipped.dtype == bool
    assert diagnostics.snow_phase_change_flag.shape == (3, 6)
    assert diagnostics.snow_phase_change_flag.dtype == np.int32
    assert diagnostics.lake_eddy_diffusivity_m2_per_s.shape == (4, 6)
