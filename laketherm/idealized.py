"""Idealized lakes: identical columns with homogeneous sediment and constant forcing."""

from __future__ import annotations

import logging

import numpy as np

from laketherm.config_schema import Config, IdealizedLakeConfig
from laketherm.lake.constants import (
    FREEZING_TEMPERATURE_K,
    RHO_ICE_KG_PER_M3,
    RHO_WATER_KG_PER_M3,
)
from laketherm.lake.layout import ColumnLayout
from laketherm.lake.state import LakeForcing, LakeState
from laketherm.model import LakeTemperature

logger = logging.getLogger(__name__)


def get_node_depths(layer_thickness_m: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Node depths at the layer centres and interface depths below each node.

    Args:
        layer_thickness_m: Layer thickness, from the top [m].

    Returns:
        Node depths and the depth of the bottom of each layer [m].
    """
    interface_depth_m = np.cumsum(layer_thickness_m)
    node_depth_m = interface_depth_m - 0.5 * layer_thickness_m
    return node_depth_m, interface_depth_m


def build_idealized_lake(
    config: IdealizedLakeConfig,
) -> tuple[ColumnLayout, LakeState, LakeForcing]:
    """Create the layout, state and forcing of an idealized lake.

    The sediment is saturated: liquid when its temperature is at or above freezing,
    ice otherwise.

    Args:
        config: Configuration of the idealized lake.

    Returns:
        The layout, the initial state and the constant forcing.
    """
    lake_layer_thickness_m = np.asarray(config.layer_thickness_m, dtype=np.float64)
    soil_layer_thickness_m = np.asarray(
        config.soil.layer_thickness_m, dtype=np.float64
    )
    n_soil = soil_layer_thickness_m.size
    n_soil_hydrologic = (
        n_soil
        if config.soil.n_hydrologic_layers is None
        else config.soil.n_hydrologic_layers
    )

    layout = ColumnLayout(
        n_snow_max=config.n_snow_max,
        n_lake=lake_layer_thickness_m.size,
        n_soil=n_soil,
        n_soil_hydrologic=n_soil_hydrologic,
    )
    n_columns = config.n_columns
    state = LakeState.allocate(layout, n_columns)

    lake_node_depth_m, _ = get_node_depths(lake_layer_thickness_m)
    state.lake_layer_thickness_m[:] = lake_layer_thickness_m[:, np.newaxis]
    state.lake_node_depth_m[:] = lake_node_depth_m[:, np.newaxis]
    state.lake_depth_m[:] = lake_layer_thickness_m.sum()
    state.extinction_coefficient_per_m[:] = config.extinction_coefficient_per_m
    state.lake_temperature_K[:] = config.initial_temperature_K
    state.lake_ice_fraction[:] = config.initial_ice_fraction

    soil_node_depth_m, soil_interface_depth_m = get_node_depths(soil_layer_thickness_m)
    state.soil_layer_thickness_m[:] = soil_layer_thickness_m[:, np.newaxis]
    state.soil_node_depth_m[:] = soil_node_depth_m[:, np.newaxis]
    state.soil_interface_depth_m[:] = soil_interface_depth_m[:, np.newaxis]
    state.soil_temperature_K[:] = config.soil.initial_temperature_K

    soil = config.soil
    state.porosity[:] = soil.porosity
    state.thermal_conductivity_saturated_W_per_m_K[:] = (
        soil.thermal_conductivity_saturated_W_per_m_K
    )
    state.thermal_conductivity_minerals_W_per_m_K[:] = (
        soil.thermal_conductivity_minerals_W_per_m_K
    )
    state.thermal_conductivity_dry_W_per_m_K[:] = (
        soil.thermal_conductivity_dry_W_per_m_K
    )
    state.solid_heat_capacity_J_per_m3_K[:] = soil.solid_heat_capacity_J_per_m3_K

    pore_volume_m = soil.porosity * soil_layer_thickness_m[:, np.newaxis]
    if soil.initial_temperature_K >= FREEZING_TEMPERATURE_K:
        state.soil_liquid_water_kg_per_m2[:] = pore_volume_m * RHO_WATER_KG_PER_M3
    else:
        state.soil_ice_kg_per_m2[:] = pore_volume_m * RHO_ICE_KG_PER_M3

    state.snow_water_equivalent_kg_per_m2[:] = config.snow_water_equivalent_kg_per_m2
    state.snow_depth_m[:] = (
        config.snow_water_equivalent_kg_per_m2 / config.snow_density_kg_per_m3
    )

    forcing = LakeForcing.allocate(layout, n_columns)
    forcing_config = config.forcing
    forcing.ground_heat_flux_W_per_m2[:] = forcing_config.ground_heat_flux_W_per_m2
    forcing.absorbed_solar_W_per_m2[:] = forcing_config.absorbed_solar_W_per_m2
    forcing.absorbed_near_infrared_W_per_m2[:] = (
        forcing_config.absorbed_solar_W_per_m2 * forcing_config.near_infrared_fraction
    )
    forcing.ground_temperature_K[:] = (
        config.initial_temperature_K
        if forcing_config.ground_temperature_K is None
        else forcing_config.ground_temperature_K
    )
    forcing.friction_velocity_m_per_s[:] = forcing_config.friction_velocity_m_per_s
    forcing.turbulence_decay_coefficient_per_m[:] = (
        forcing_config.turbulence_decay_coefficient_per_m
    )

    return layout, state, forcing


def run_idealized_lake(config: Config) -> dict[str, np.ndarray]:
    """Run an idealized lake with constant forcing.

    The flux arrays of the forcing are reset every step, because the energy closure
    corrects them in-place.

    Args:
        config: Full configuration.

    Returns:
        Time series with one row per step and one column per lake column:
        `lake_ice_thickness_m`, `top_lake_temperature_K` and `energy_error_W_per_m2`.
    """
    layout, state, forcing = build_idealized_lake(config.idealized)
    model = LakeTemperature(config.lake, layout, timing=config.logging.timing)
    model.spinup(state, forcing)

    ground_heat_flux_W_per_m2 = forcing.ground_heat_flux_W_per_m2.copy()
    n_steps = config.idealized.n_steps
    history = {
        "lake_ice_thickness_m": np.zeros((n_steps, state.n_columns)),
        "top_lake_temperature_K": np.zeros((n_steps, state.n_columns)),
        "energy_error_W_per_m2": np.zeros((n_steps, state.n_columns)),
    }
    for step in range(n_steps):
        forcing.ground_heat_flux_W_per_m2[:] = ground_heat_flux_W_per_m2
        forcing.sensible_heat_flux_W_per_m2[:] = 0.0
        forcing.ground_sensible_heat_flux_W_per_m2[:] = 0.0
        forcing.soil_heat_flux_W_per_m2[:] = 0.0
        if config.idealized.forcing.ground_temperature_K is None:
            forcing.ground_temperature_K[:] = state.lake_temperature_K[0]

        diagnostics = model.step(state, forcing)

        history["lake_ice_thickness_m"][step] = diagnostics.lake_ice_thickness_m
        history["top_lake_temperature_K"][step] = state.lake_temperature_K[0]
        history["energy_error_W_per_m2"][step] = diagnostics.energy_residual_W_per_m2
        logger.info(
            "Step %d: ice thickness %.4f m, top temperature %.3f K, max energy residual %.2e W/m2",
            step + 1,
            diagnostics.lake_ice_thickness_m.max(),
            state.lake_temperature_K[0].max(),
            np.abs(diagnostics.energy_residual_W_per_m2).max(),
        )
    return history
