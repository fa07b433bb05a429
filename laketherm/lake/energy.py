"""Energy content of a lake column and closure of its energy budget."""

import numpy as np
from numba import njit

from laketherm.types import ArrayFloat64

from .constants import (
    FREEZING_TEMPERATURE_K,
    L_FUSION_J_PER_KG,
    L_FUSION_VOLUMETRIC_J_PER_M3,
    RHO_ICE_KG_PER_M3,
    RHO_WATER_KG_PER_M3,
)


@njit(cache=True)
def get_column_energy_content(
    n_snow_layers: int,
    snow_water_equivalent_kg_per_m2: np.float64,
    lake_layer_thickness_m: ArrayFloat64,
    lake_temperature_K: ArrayFloat64,
    lake_ice_fraction: ArrayFloat64,
    lake_heat_capacity_J_per_m2_K: ArrayFloat64,
    snow_temperature_K: ArrayFloat64,
    snow_liquid_water_kg_per_m2: ArrayFloat64,
    snow_heat_capacity_J_per_m2_K: ArrayFloat64,
    soil_temperature_K: ArrayFloat64,
    soil_liquid_water_kg_per_m2: ArrayFloat64,
    soil_heat_capacity_J_per_m2_K: ArrayFloat64,
) -> np.float64:
    """Energy content of a lake column relative to ice at the freezing temperature [J/m2].

    Sensible heat is counted relative to the freezing temperature and all liquid water
    carries its latent heat of fusion. Snow too thin for its own layer is ice at the
    freezing temperature and only lowers the energy by its latent heat.

    Args:
        n_snow_layers: Number of active snow layers.
        snow_water_equivalent_kg_per_m2: Snow water equivalent [kg/m2].
        lake_layer_thickness_m: Lake layer thickness [m].
        lake_temperature_K: Lake temperatures [K].
        lake_ice_fraction: Lake ice fractions [0-1].
        lake_heat_capacity_J_per_m2_K: Lake heat capacities.
        snow_temperature_K: Snow temperatures [K].
        snow_liquid_water_kg_per_m2: Snow liquid water [kg/m2].
        snow_heat_capacity_J_per_m2_K: Snow heat capacities.
        soil_temperature_K: Soil temperatures [K].
        soil_liquid_water_kg_per_m2: Soil liquid water [kg/m2].
        soil_heat_capacity_J_per_m2_K: Soil heat capacities.

    Returns:
        Energy content [J/m2].
    """
    energy_J_per_m2 = np.float64(0.0)
    for layer_idx in range(lake_temperature_K.size):
        energy_J_per_m2 += lake_heat_capacity_J_per_m2_K[layer_idx] * (
            lake_temperature_K[layer_idx] - FREEZING_TEMPERATURE_K
        ) + L_FUSION_VOLUMETRIC_J_PER_M3 * lake_layer_thickness_m[layer_idx] * (
            np.float64(1.0) - lake_ice_fraction[layer_idx]
        )

    n_snow_max = snow_temperature_K.size
    for layer_idx in range(n_snow_max - n_snow_layers, n_snow_max):
        energy_J_per_m2 += (
            snow_heat_capacity_J_per_m2_K[layer_idx]
            * (snow_temperature_K[layer_idx] - FREEZING_TEMPERATURE_K)
            + L_FUSION_J_PER_KG * snow_liquid_water_kg_per_m2[layer_idx]
        )

    for layer_idx in range(soil_temperature_K.size):
        energy_J_per_m2 += (
            soil_heat_capacity_J_per_m2_K[layer_idx]
            * (soil_temperature_K[layer_idx] - FREEZING_TEMPERATURE_K)
            + L_FUSION_J_PER_KG * soil_liquid_water_kg_per_m2[layer_idx]
        )

    if n_snow_layers == 0 and snow_water_equivalent_kg_per_m2 > np.float64(0.0):
        energy_J_per_m2 -= snow_water_equivalent_kg_per_m2 * L_FUSION_J_PER_KG

    return energy_J_per_m2


@njit(cache=True)
def get_heat_contents(
    n_snow_layers: int,
    lake_temperature_K: ArrayFloat64,
    lake_heat_capacity_J_per_m2_K: ArrayFloat64,
    snow_temperature_K: ArrayFloat64,
    snow_heat_capacity_J_per_m2_K: ArrayFloat64,
    soil_temperature_K: ArrayFloat64,
    soil_heat_capacity_J_per_m2_K: ArrayFloat64,
) -> tuple[np.float64, np.float64]:
    """Sensible heat content of the whole column and of the soil alone [MJ/m2].

    Returns:
        Heat content of snow, lake and soil together, and of the soil only.
    """
    column_heat_content = np.float64(0.0)
    soil_heat_content = np.float64(0.0)
    for layer_idx in range(lake_temperature_K.size):
        column_heat_content += (
            lake_heat_capacity_J_per_m2_K[layer_idx] * lake_temperature_K[layer_idx]
        )
    n_snow_max = snow_temperature_K.size
    for layer_idx in range(n_snow_max - n_snow_layers, n_snow_max):
        column_heat_content += (
            snow_heat_capacity_J_per_m2_K[layer_idx] * snow_temperature_K[layer_idx]
        )
    for layer_idx in range(soil_temperature_K.size):
        soil_heat_content += (
            soil_heat_capacity_J_per_m2_K[layer_idx] * soil_temperature_K[layer_idx]
        )
    column_heat_content += soil_heat_content
    return column_heat_content / np.float64(1e6), soil_heat_content / np.float64(1e6)


@njit(cache=True)
def get_lake_ice_thickness(
    lake_layer_thickness_m: ArrayFloat64, lake_ice_fraction: ArrayFloat64
) -> np.float64:
    """Thickness of the lake ice [m], accounting for the lower density of ice."""
    water_equivalent_m = np.float64(0.0)
    for layer_idx in range(lake_ice_fraction.size):
        water_equivalent_m += (
            lake_ice_fraction[layer_idx] * lake_layer_thickness_m[layer_idx]
        )
    return water_equivalent_m * RHO_WATER_KG_PER_M3 / RHO_ICE_KG_PER_M3


@njit(cache=True, inline="always")
def fold_energy_residual(
    energy_error_W_per_m2: np.float64,
    tolerance_W_per_m2: np.float64,
    sensible_heat_flux_W_per_m2: np.float64,
    ground_sensible_heat_flux_W_per_m2: np.float64,
    soil_heat_flux_W_per_m2: np.float64,
    ground_heat_flux_W_per_m2: np.float64,
) -> tuple[np.float64, np.float64, np.float64, np.float64, np.float64, bool]:
    """Fold a small energy residual into the surface fluxes.

    A residual below the tolerance is numerical noise. It is moved from the sensible
    heat flux into the ground heat flux, and the returned error is 0. A larger residual
    is returned unchanged with the fluxes untouched.

    Args:
        energy_error_W_per_m2: Energy change minus boundary input [W/m2].
        tolerance_W_per_m2: Largest residual that is folded [W/m2].
        sensible_heat_flux_W_per_m2: Total sensible heat flux [W/m2].
        ground_sensible_heat_flux_W_per_m2: Sensible heat flux from the ground [W/m2].
        soil_heat_flux_W_per_m2: Heat flux into the ground [W/m2].
        ground_heat_flux_W_per_m2: Net heat flux into the ground [W/m2].

    Returns:
        The remaining error, the four corrected fluxes and whether the residual was folded.
    """
    if abs(energy_error_W_per_m2) < tolerance_W_per_m2:
        return (
            np.float64(0.0),
            sensible_heat_flux_W_per_m2 - energy_error_W_per_m2,
            ground_sensible_heat_flux_W_per_m2 - energy_error_W_per_m2,
            soil_heat_flux_W_per_m2 + energy_error_W_per_m2,
            ground_heat_flux_W_per_m2 + energy_error_W_per_m2,
            True,
        )
    return (
        energy_error_W_per_m2,
        sensible_heat_flux_W_per_m2,
        ground_sensible_heat_flux_W_per_m2,
        soil_heat_flux_W_per_m2,
        ground_heat_flux_W_per_m2,
        False,
    )
