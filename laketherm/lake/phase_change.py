"""Freezing and thawing of lake water, snow and sediment after the diffusion step.

The diffusion step lets temperatures cross the freezing point freely. Afterwards
each layer converts the heat above (or below) freezing into melt (or freeze) until
either the heat or the available ice (or liquid water) is exhausted. The remaining
heat sets the new temperature with the updated heat capacity. Freezing and thawing
happen exactly at the freezing temperature.
"""

import numpy as np
from numba import njit

from laketherm.types import ArrayFloat64, ArrayInt32

from .constants import (
    FREEZING_TEMPERATURE_K,
    L_FUSION_J_PER_KG,
    RHO_WATER_KG_PER_M3,
    SMALL_NUMBER,
    SPECIFIC_HEAT_CAPACITY_ICE_J_PER_KG_K,
    SPECIFIC_HEAT_CAPACITY_WATER_J_PER_KG_K,
)

NO_PHASE_CHANGE: int = 0
MELTING: int = 1
FREEZING: int = 2


@njit(cache=True)
def melt_thin_snow(
    timestep_s: np.float64,
    snow_water_equivalent_kg_per_m2: np.float64,
    snow_depth_m: np.float64,
    top_lake_temperature_K: np.float64,
    top_lake_heat_capacity_J_per_m2_K: np.float64,
) -> tuple[np.float64, np.float64, np.float64, np.float64]:
    """Melt snow that is too thin for its own layer with the heat of the top lake layer.

    Must only be called for columns without snow layers.

    Args:
        timestep_s: Timestep [s].
        snow_water_equivalent_kg_per_m2: Snow water equivalent [kg/m2].
        snow_depth_m: Snow depth [m].
        top_lake_temperature_K: Temperature of the top lake layer [K].
        top_lake_heat_capacity_J_per_m2_K: Heat capacity of the top lake layer.

    Returns:
        Updated snow water equivalent [kg/m2], updated snow depth [m], updated top lake
        temperature [K] and melt rate [kg/m2/s].
    """
    if not (
        snow_water_equivalent_kg_per_m2 > np.float64(0.0)
        and top_lake_temperature_K > FREEZING_TEMPERATURE_K
    ):
        return (
            snow_water_equivalent_kg_per_m2,
            snow_depth_m,
            top_lake_temperature_K,
            np.float64(0.0),
        )

    heat_available_J_per_m2 = (
        top_lake_temperature_K - FREEZING_TEMPERATURE_K
    ) * top_lake_heat_capacity_J_per_m2_K
    melt_kg_per_m2 = min(
        snow_water_equivalent_kg_per_m2, heat_available_J_per_m2 / L_FUSION_J_PER_KG
    )
    heat_remaining_J_per_m2 = max(
        heat_available_J_per_m2 - melt_kg_per_m2 * L_FUSION_J_PER_KG, np.float64(0.0)
    )
    top_lake_temperature_K = (
        FREEZING_TEMPERATURE_K
        + heat_remaining_J_per_m2 / top_lake_heat_capacity_J_per_m2_K
    )
    snow_depth_m = snow_depth_m * (
        np.float64(1.0) - melt_kg_per_m2 / snow_water_equivalent_kg_per_m2
    )
    snow_water_equivalent_kg_per_m2 = snow_water_equivalent_kg_per_m2 - melt_kg_per_m2

    if snow_water_equivalent_kg_per_m2 < SMALL_NUMBER:
        snow_water_equivalent_kg_per_m2 = np.float64(0.0)
    if snow_depth_m < SMALL_NUMBER:
        snow_depth_m = np.float64(0.0)

    return (
        snow_water_equivalent_kg_per_m2,
        snow_depth_m,
        top_lake_temperature_K,
        melt_kg_per_m2 / timestep_s,
    )


@njit(cache=True)
def get_lake_phase_change(
    lake_layer_thickness_m: ArrayFloat64,
    lake_temperature_K: ArrayFloat64,
    lake_ice_fraction: ArrayFloat64,
    lake_heat_capacity_J_per_m2_K: ArrayFloat64,
) -> np.float64:
    """Freeze or thaw the lake layers in-place.

    Layer thickness is fixed, so the available ice (or liquid) mass of a layer is
    its ice (or liquid) fraction times the mass of a water-filled layer.

    Args:
        lake_layer_thickness_m: Lake layer thickness [m].
        lake_temperature_K: Lake temperatures [K], updated in-place.
        lake_ice_fraction: Lake ice fractions [0-1], updated in-place.
        lake_heat_capacity_J_per_m2_K: Lake heat capacities, updated in-place.

    Returns:
        Latent heat absorbed by melting, negative for net freezing [J/m2].
    """
    latent_heat_absorbed_J_per_m2 = np.float64(0.0)
    for layer_idx in range(lake_temperature_K.size):
        layer_mass_kg_per_m2 = RHO_WATER_KG_PER_M3 * lake_layer_thickness_m[layer_idx]
        temperature_K = lake_temperature_K[layer_idx]
        ice_fraction = lake_ice_fraction[layer_idx]
        heat_available_J_per_m2 = (
            temperature_K - FREEZING_TEMPERATURE_K
        ) * lake_heat_capacity_J_per_m2_K[layer_idx]

        if temperature_K > FREEZING_TEMPERATURE_K and ice_fraction > np.float64(0.0):
            melt_kg_per_m2 = min(
                ice_fraction * layer_mass_kg_per_m2,
                heat_available_J_per_m2 / L_FUSION_J_PER_KG,
            )
            heat_remaining_J_per_m2 = max(
                heat_available_J_per_m2 - melt_kg_per_m2 * L_FUSION_J_PER_KG,
                np.float64(0.0),
            )
        elif temperature_K < FREEZING_TEMPERATURE_K and ice_fraction < np.float64(1.0):
            melt_kg_per_m2 = max(
                -(np.float64(1.0) - ice_fraction) * layer_mass_kg_per_m2,
                heat_available_J_per_m2 / L_FUSION_J_PER_KG,
            )
            heat_remaining_J_per_m2 = min(
                heat_available_J_per_m2 - melt_kg_per_m2 * L_FUSION_J_PER_KG,
                np.float64(0.0),
            )
        else:
            continue

        ice_fraction -= melt_kg_per_m2 / layer_mass_kg_per_m2
        latent_heat_absorbed_J_per_m2 += melt_kg_per_m2 * L_FUSION_J_PER_KG
        lake_heat_capacity_J_per_m2_K[layer_idx] += melt_kg_per_m2 * (
            SPECIFIC_HEAT_CAPACITY_WATER_J_PER_KG_K
            - SPECIFIC_HEAT_CAPACITY_ICE_J_PER_KG_K
        )
        lake_temperature_K[layer_idx] = (
            FREEZING_TEMPERATURE_K
            + heat_remaining_J_per_m2 / lake_heat_capacity_J_per_m2_K[layer_idx]
        )
        if ice_fraction > np.float64(1.0) - SMALL_NUMBER:
            ice_fraction = np.float64(1.0)
        if ice_fraction < SMALL_NUMBER:
            ice_fraction = np.float64(0.0)
        lake_ice_fraction[layer_idx] = ice_fraction

    return latent_heat_absorbed_J_per_m2


@njit(cache=True)
def get_layer_phase_change(
    first_layer: int,
    temperature_K: ArrayFloat64,
    liquid_water_kg_per_m2: ArrayFloat64,
    ice_kg_per_m2: ArrayFloat64,
    heat_capacity_J_per_m2_K: ArrayFloat64,
    phase_change_flag: ArrayInt32,
    freezing_rate_kg_per_m2_s: ArrayFloat64,
    timestep_s: np.float64,
) -> tuple[np.float64, np.float64]:
    """Freeze or thaw snow or soil layers in-place, based on their liquid and ice masses.

    Args:
        first_layer: First active layer, layers above it are skipped.
        temperature_K: Layer temperatures [K], updated in-place.
        liquid_water_kg_per_m2: Liquid water [kg/m2], updated in-place.
        ice_kg_per_m2: Ice [kg/m2], updated in-place.
        heat_capacity_J_per_m2_K: Heat capacities, updated in-place.
        phase_change_flag: Output per layer: 0 none, 1 melting, 2 freezing.
        freezing_rate_kg_per_m2_s: Output per layer, freezing rate [kg/m2/s].
        timestep_s: Timestep [s].

    Returns:
        Latent heat absorbed by melting [J/m2] and the total melt [kg/m2].
    """
    latent_heat_absorbed_J_per_m2 = np.float64(0.0)
    total_melt_kg_per_m2 = np.float64(0.0)
    for layer_idx in range(first_layer, temperature_K.size):
        temperature = temperature_K[layer_idx]
        heat_available_J_per_m2 = (
            temperature - FREEZING_TEMPERATURE_K
        ) * heat_capacity_J_per_m2_K[layer_idx]

        if temperature > FREEZING_TEMPERATURE_K and ice_kg_per_m2[
            layer_idx
        ] > np.float64(0.0):
            melt_kg_per_m2 = min(
                ice_kg_per_m2[layer_idx], heat_available_J_per_m2 / L_FUSION_J_PER_KG
            )
            heat_remaining_J_per_m2 = max(
                heat_available_J_per_m2 - melt_kg_per_m2 * L_FUSION_J_PER_KG,
                np.float64(0.0),
            )
            phase_change_flag[layer_idx] = MELTING
            total_melt_kg_per_m2 += melt_kg_per_m2
        elif temperature < FREEZING_TEMPERATURE_K and liquid_water_kg_per_m2[
            layer_idx
        ] > np.float64(0.0):
            melt_kg_per_m2 = max(
                -liquid_water_kg_per_m2[layer_idx],
                heat_available_J_per_m2 / L_FUSION_J_PER_KG,
            )
            heat_remaining_J_per_m2 = min(
                heat_available_J_per_m2 - melt_kg_per_m2 * L_FUSION_J_PER_KG,
                np.float64(0.0),
            )
            phase_change_flag[layer_idx] = FREEZING
            freezing_rate_kg_per_m2_s[layer_idx] = -melt_kg_per_m2 / timestep_s
        else:
            continue

        ice_kg_per_m2[layer_idx] -= melt_kg_per_m2
        liquid_water_kg_per_m2[layer_idx] += melt_kg_per_m2
        latent_heat_absorbed_J_per_m2 += melt_kg_per_m2 * L_FUSION_J_PER_KG
        heat_capacity_J_per_m2_K[layer_idx] += melt_kg_per_m2 * (
            SPECIFIC_HEAT_CAPACITY_WATER_J_PER_KG_K
            - SPECIFIC_HEAT_CAPACITY_ICE_J_PER_KG_K
        )
        temperature_K[layer_idx] = (
            FREEZING_TEMPERATURE_K
            + heat_remaining_J_per_m2 / heat_capacity_J_per_m2_K[layer_idx]
        )
        if ice_kg_per_m2[layer_idx] < SMALL_NUMBER:
            ice_kg_per_m2[layer_idx] = np.float64(0.0)
        if liquid_water_kg_per_m2[layer_idx] < SMALL_NUMBER:
            liquid_water_kg_per_m2[layer_idx] = np.float64(0.0)

    return latent_heat_absorbed_J_per_m2, total_melt_kg_per_m2
