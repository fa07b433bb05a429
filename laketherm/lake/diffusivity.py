"""Eddy diffusivity and effective thermal conductivity of lake layers."""

import numpy as np
from numba import njit

from laketherm.types import ArrayFloat64

from .constants import (
    BACKGROUND_DIFFUSIVITY_COEFFICIENT,
    BACKGROUND_DIFFUSIVITY_EXPONENT,
    FREEZING_TEMPERATURE_K,
    GRAVITY_M_PER_S2,
    LAMBDA_ICE_EFFECTIVE,
    LAMBDA_WATER,
    MOLECULAR_DIFFUSIVITY_M2_PER_S,
    NEUTRAL_TURBULENT_PRANDTL_NUMBER,
    VOLUMETRIC_HEAT_CAPACITY_WATER_J_PER_M3_K,
    VON_KARMAN_CONSTANT,
)
from .density import calculate_water_density


@njit(cache=True, inline="always")
def is_surface_open(
    ground_temperature_K: np.float64,
    top_lake_temperature_K: np.float64,
    n_snow_layers: int,
) -> bool:
    """Whether the lake surface is free of ice and snow, so that wind mixes the water."""
    return (
        ground_temperature_K > FREEZING_TEMPERATURE_K
        and top_lake_temperature_K > FREEZING_TEMPERATURE_K
        and n_snow_layers == 0
    )


@njit(cache=True, inline="always")
def calculate_richardson_number(
    brunt_vaisala_frequency_squared_s2: np.float64,
    node_depth_m: np.float64,
    friction_velocity_m_per_s: np.float64,
    turbulence_decay_coefficient_per_m: np.float64,
) -> np.float64:
    """Gradient Richardson number of Hostetler & Bartlein (1990).

    Args:
        brunt_vaisala_frequency_squared_s2: Squared Brunt-Vaisala frequency [1/s2].
        node_depth_m: Depth of the layer node [m].
        friction_velocity_m_per_s: Surface friction velocity of the water [m/s].
        turbulence_decay_coefficient_per_m: Decay of the turbulence with depth [1/m].

    Returns:
        The Richardson number [-].
    """
    numerator = (
        np.float64(40.0)
        * brunt_vaisala_frequency_squared_s2
        * (VON_KARMAN_CONSTANT * node_depth_m) ** 2
    )
    denominator = max(
        friction_velocity_m_per_s**2
        * np.exp(
            np.float64(-2.0) * turbulence_decay_coefficient_per_m * node_depth_m
        ),
        np.float64(1e-10),
    )
    return (
        np.float64(-1.0)
        + np.sqrt(max(np.float64(1.0) + numerator / denominator, np.float64(0.0)))
    ) / np.float64(20.0)


@njit(cache=True, inline="always")
def calculate_ice_water_conductivity(
    eddy_diffusivity_m2_per_s: np.float64,
    ice_fraction: np.float64,
    include_background_diffusivity: bool,
) -> np.float64:
    """Harmonic blend of the water and ice conductivity of a (partially) frozen layer [W/(m·K)]."""
    if include_background_diffusivity:
        water_conductivity = (
            eddy_diffusivity_m2_per_s * VOLUMETRIC_HEAT_CAPACITY_WATER_J_PER_M3_K
        )
    else:
        water_conductivity = LAMBDA_WATER
    return (
        water_conductivity
        * LAMBDA_ICE_EFFECTIVE
        / (
            (np.float64(1.0) - ice_fraction) * LAMBDA_ICE_EFFECTIVE
            + water_conductivity * ice_fraction
        )
    )


@njit(cache=True)
def get_lake_eddy_diffusivity(
    lake_temperature_K: ArrayFloat64,
    lake_ice_fraction: ArrayFloat64,
    lake_node_depth_m: ArrayFloat64,
    lake_depth_m: np.float64,
    ground_temperature_K: np.float64,
    n_snow_layers: int,
    friction_velocity_m_per_s: np.float64,
    turbulence_decay_coefficient_per_m: np.float64,
    include_background_diffusivity: bool,
    minimum_brunt_vaisala_frequency_squared_s2: np.float64,
    deep_lake_depth_m: np.float64,
    deep_lake_mixing_factor: np.float64,
    eddy_diffusivity_m2_per_s: ArrayFloat64,
    lake_thermal_conductivity_W_per_m_K: ArrayFloat64,
) -> np.float64:
    """Calculate the eddy diffusivity and thermal conductivity of all lake layers.

    Open water (a warm surface without snow) mixes by wind-driven turbulence that
    decays with depth and is damped by stable stratification. Frozen or snow covered
    layers only conduct heat through a harmonic blend of water and ice. Once a layer
    is found frozen, all layers below it are treated as frozen as well for this step.
    The background diffusivity of Fang & Stefan (1996) is optional. Deep lakes multiply
    the diffusivity of open water by a mixing factor; under ice this enhancement only
    applies together with the background diffusivity.

    Args:
        lake_temperature_K: Lake layer temperatures [K].
        lake_ice_fraction: Lake layer ice fractions [0-1].
        lake_node_depth_m: Lake node depths below the surface [m].
        lake_depth_m: Total lake depth [m].
        ground_temperature_K: Surface temperature from the flux module [K].
        n_snow_layers: Number of active snow layers.
        friction_velocity_m_per_s: Surface friction velocity of the water [m/s].
        turbulence_decay_coefficient_per_m: Decay of the turbulence with depth [1/m].
        include_background_diffusivity: Add background diffusion, also enables the deep lake enhancement under ice.
        minimum_brunt_vaisala_frequency_squared_s2: Lower bound of N2 in the background term [1/s2].
        deep_lake_depth_m: Lakes at least this deep get an enhanced diffusivity [m].
        deep_lake_mixing_factor: Enhancement factor for deep lakes [-].
        eddy_diffusivity_m2_per_s: Output, total diffusivity per layer [m2/s].
        lake_thermal_conductivity_W_per_m_K: Output, conductivity at each layer node [W/(m·K)].

    Returns:
        Eddy conductivity of the top layer [W/(m·K)], used by the surface flux scheme.
    """
    n_lake = lake_temperature_K.size

    surface_is_open = is_surface_open(
        ground_temperature_K, lake_temperature_K[0], n_snow_layers
    )
    frozen = False

    for layer_idx in range(n_lake - 1):
        upper_density = calculate_water_density(
            lake_temperature_K[layer_idx], lake_ice_fraction[layer_idx]
        )
        lower_density = calculate_water_density(
            lake_temperature_K[layer_idx + 1], lake_ice_fraction[layer_idx + 1]
        )
        density_gradient = (lower_density - upper_density) / (
            lake_node_depth_m[layer_idx + 1] - lake_node_depth_m[layer_idx]
        )
        brunt_vaisala_frequency_squared = (
            GRAVITY_M_PER_S2 / upper_density * density_gradient
        )
        background_diffusivity = (
            BACKGROUND_DIFFUSIVITY_COEFFICIENT
            * max(
                brunt_vaisala_frequency_squared,
                minimum_brunt_vaisala_frequency_squared_s2,
            )
            ** BACKGROUND_DIFFUSIVITY_EXPONENT
        )

        if (
            surface_is_open
            and not frozen
            and lake_ice_fraction[layer_idx] == np.float64(0.0)
        ):
            node_depth = lake_node_depth_m[layer_idx]
            richardson_number = calculate_richardson_number(
                brunt_vaisala_frequency_squared,
                node_depth,
                friction_velocity_m_per_s,
                turbulence_decay_coefficient_per_m,
            )
            turbulent_diffusivity = (
                VON_KARMAN_CONSTANT
                * friction_velocity_m_per_s
                * node_depth
                / NEUTRAL_TURBULENT_PRANDTL_NUMBER
                * np.exp(-turbulence_decay_coefficient_per_m * node_depth)
                / (np.float64(1.0) + np.float64(37.0) * richardson_number**2)
            )
            diffusivity = MOLECULAR_DIFFUSIVITY_M2_PER_S + turbulent_diffusivity
            if include_background_diffusivity:
                diffusivity += background_diffusivity
            if lake_depth_m >= deep_lake_depth_m:
                diffusivity *= deep_lake_mixing_factor
            eddy_diffusivity_m2_per_s[layer_idx] = diffusivity
            lake_thermal_conductivity_W_per_m_K[layer_idx] = (
                diffusivity * VOLUMETRIC_HEAT_CAPACITY_WATER_J_PER_M3_K
            )
        else:
            diffusivity = MOLECULAR_DIFFUSIVITY_M2_PER_S
            if include_background_diffusivity:
                diffusivity += background_diffusivity
                if lake_depth_m >= deep_lake_depth_m:
                    diffusivity *= deep_lake_mixing_factor
            eddy_diffusivity_m2_per_s[layer_idx] = diffusivity
            lake_thermal_conductivity_W_per_m_K[layer_idx] = (
                calculate_ice_water_conductivity(
                    diffusivity,
                    lake_ice_fraction[layer_idx],
                    include_background_diffusivity,
                )
            )
            frozen = True

    bottom_idx = n_lake - 1
    if n_lake > 1:
        eddy_diffusivity_m2_per_s[bottom_idx] = eddy_diffusivity_m2_per_s[
            bottom_idx - 1
        ]
    else:
        eddy_diffusivity_m2_per_s[bottom_idx] = MOLECULAR_DIFFUSIVITY_M2_PER_S

    bottom_is_open = (
        surface_is_open
        and not frozen
        and lake_ice_fraction[bottom_idx] == np.float64(0.0)
    )
    if bottom_is_open and n_lake > 1:
        lake_thermal_conductivity_W_per_m_K[bottom_idx] = (
            lake_thermal_conductivity_W_per_m_K[bottom_idx - 1]
        )
    elif bottom_is_open:
        lake_thermal_conductivity_W_per_m_K[bottom_idx] = (
            eddy_diffusivity_m2_per_s[bottom_idx]
            * VOLUMETRIC_HEAT_CAPACITY_WATER_J_PER_M3_K
        )
    else:
        lake_thermal_conductivity_W_per_m_K[bottom_idx] = (
            calculate_ice_water_conductivity(
                eddy_diffusivity_m2_per_s[bottom_idx],
                lake_ice_fraction[bottom_idx],
                include_background_diffusivity,
            )
        )

    return eddy_diffusivity_m2_per_s[0] * VOLUMETRIC_HEAT_CAPACITY_WATER_J_PER_M3_K
