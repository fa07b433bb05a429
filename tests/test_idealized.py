"""Tests for idealized lakes."""

import numpy as np

from laketherm.config import load_config
from laketherm.config_schema import IdealizedLakeConfig
from laketherm.idealized import (
    build_idealized_lake,
    get_node_depths,
    run_idealized_lake,
)
from laketherm.lake.constants import RHO_ICE_KG_PER_M3, RHO_WATER_KG_PER_M3


def test_node_depths() -> None:
    node_depth, interface_depth = get_node_depths(np.array([0.1, 0.2, 0.4]))
    np.testing.assert_allclose(node_depth, [0.05, 0.2, 0.5])
    np.testing.assert_allclose(interface_depth, [0.1, 0.3, 0.7])


def test_build_idealized_lake() -> None:
    layout, state, forcing = build_idealized_lake(
        IdealizedLakeConfig(
            n_columns=3,
            n_snow_max=4,
            layer_thickness_m=[0.5, 1.5, 3.0],
            initial_temperature_K=280.0,
            snow_water_equivalent_kg_per_m2=2.5,
            forcing={"absorbed_solar_W_per_m2": 100.0, "near_infrared_fraction": 0.3},
            soil={"layer_thickness_m": [0.1, 0.2], "n_hydrologic_layers": 1},
        )
    )
    assert (layout.n_snow_max, layout.n_lake, layout.n_soil) == (4, 3, 2)
    assert layout.n_soil_hydrologic == 1
    assert state.n_columns == 3
    np.testing.assert_allclose(state.lake_depth_m, 5.0)
    np.testing.assert_allclose(state.lake_node_depth_m[:, 0], [0.25, 1.25, 3.5])
    np.testing.assert_allclose(state.soil_interface_depth_m[:, 2], [0.1, 0.3])
    np.testing.assert_array_equal(state.lake_temperature_K, 280.0)
    np.testing.assert_allclose(state.snow_depth_m, 0.01)
    # saturated unfrozen sediment
    np.testing.assert_allclose(
        state.soil_liquid_water_kg_per_m2[:, 0],
        np.array([0.1, 0.2]) * 0.4 * RHO_WATER_KG_PER_M3,
    )
    np.testing.assert_array_equal(state.soil_ice_kg_per_m2, 0.0)
    np.testing.assert_allclose(forcing.absorbed_near_infrared_W_per_m2, 30.0)
    # without a surface temperature the lake temperature is used
    np.testing.assert_array_equal(forcing.ground_temperature_K, 280.0)
    state.validate()
    forcing.validate(layout, 3)


def test_frozen_sediment() -> None:
    _, state, _ = build_idealized_lake(
        IdealizedLakeConfig(
            soil={"layer_thickness_m": [0.5], "initial_temperature_K": 265.0}
        )
    )
    np.testing.assert_allclose(
        state.soil_ice_kg_per_m2, 0.5 * 0.4 * RHO_ICE_KG_PER_M3
    )
    np.testing.assert_array_equal(state.soil_liquid_water_kg_per_m2, 0.0)


def test_run_idealized_lake() -> None:
    config = load_config(
        {
            "idealized": {
                "n_columns": 2,
                "layer_thickness_m": [0.1, 1.0, 2.0],
                "n_steps": 3,
            }
        }
    )
    history = run_idealized_lake(config)
    assert set(history) == {
        "lake_ice_thickness_m",
        "top_lake_temperature_K",
        "energy_error_W_per_m2",
    }
    for values in history.values():
        assert values.shape == (3, 2)
    # a lake at the temperature of maximum density without forcing stays put
    np.testing.assert_allclose(history["top_lake_temperature_K"], 277.0, atol=1e-8)
    np.testing.assert_array_equal(history["lake_ice_thickness_m"], 0.0)


def test_winter_lake_freezes() -> None:
    config = load_config(
        {
            "lake": {"timestep_s": 1800},
            "idealized": {
                "layer_thickness_m": [0.1, 1.0, 2.0, 4.0],
                "initial_temperature_K": 273.5,
                "n_steps": 24,
                "forcing": {
                    "ground_heat_flux_W_per_m2": -150.0,
                    "ground_temperature_K": 265.0,
                    "friction_velocity_m_per_s": 0.0,
                },
            },
        }
    )
    history = run_idealized_lake(config)
    ice_thickness = history["lake_ice_thickness_m"][:, 0]
    assert ice_thickness[-1] > 0.0
    assert (np.diff(ice_thickness) >= 0.0).all()
    assert (np.abs(history["energy_error_W_per_m2"]) < 0.1).all()
