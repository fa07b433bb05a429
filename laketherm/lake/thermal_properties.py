"""Heat capacities and thermal conductivities of snow, sediment and bedrock layers below and on top of lakes."""

import numpy as np
from numba import njit

from laketherm.types import ArrayFloat64

from .constants import (
    FREEZING_TEMPERATURE_K,
    LAMBDA_AIR,
    LAMBDA_BEDROCK,
    LAMBDA_ICE,
    RHO_ICE_KG_PER_M3,
    RHO_WATER_KG_PER_M3,
    SPECIFIC_HEAT_CAPACITY_ICE_J_PER_KG_K,
    SPECIFIC_HEAT_CAPACITY_WATER_J_PER_KG_K,
    VOLUMETRIC_HEAT_CAPACITY_ICE_EFFECTIVE_J_PER_M3_K,
    VOLUMETRIC_HEAT_CAPACITY_WATER_J_PER_M3_K,
)


@njit(cache=True, inline="always")
def calculate_soil_thermal_conductivity(
    temperature_K: np.float64,
    liquid_water_kg_per_m2: np.float64,
    ice_kg_per_m2: np.float64,
    layer_thickness_m: np.float64,
    porosity: np.float64,
    thermal_conductivity_saturated_W_per_m_K: np.float64,
    thermal_conductivity_minerals_W_per_m_K: np.float64,
    thermal_conductivity_dry_W_per_m_K: np.float64,
    degree_of_saturation: np.float64 = np.float64(1.0),
) -> np.float64:
    """Calculate the thermal conductivity of a sediment layer [W/(m·K)].

    Based on the Johansen (1975) method as described in Farouki (1981). The Kersten
    number interpolates between dry and saturated conductivity. The unfrozen or frozen
    branch is chosen from the layer temperature; there is no supercooled water.

    Sediment below a lake is kept saturated, so `degree_of_saturation` is 1 unless a
    caller overrides it. Water in excess of the pore volume can only be ice (the layer
    heaves rather than drains while freezing). This excess ice is treated as chunks in
    parallel with the matrix, and the conductivity is reduced by the extra virtual
    volume because the layer thickness does not change.

    Args:
        temperature_K: Layer temperature [K].
        liquid_water_kg_per_m2: Liquid water mass [kg/m2].
        ice_kg_per_m2: Ice mass [kg/m2].
        layer_thickness_m: Layer thickness [m].
        porosity: Porosity [-].
        thermal_conductivity_saturated_W_per_m_K: Conductivity of saturated unfrozen soil.
        thermal_conductivity_minerals_W_per_m_K: Conductivity of the soil minerals.
        thermal_conductivity_dry_W_per_m_K: Conductivity of dry soil.
        degree_of_saturation: Relative total water content [0-1].

    Returns:
        Thermal conductivity at the layer node [W/(m·K)].
    """
    total_water_kg_per_m2 = liquid_water_kg_per_m2 + ice_kg_per_m2
    if total_water_kg_per_m2 > np.float64(0.0):
        liquid_fraction = liquid_water_kg_per_m2 / total_water_kg_per_m2
    else:
        liquid_fraction = np.float64(0.0)

    if temperature_K >= FREEZING_TEMPERATURE_K:
        kersten_number = max(
            np.float64(0.0), np.log10(degree_of_saturation) + np.float64(1.0)
        )
        conductivity_saturated = thermal_conductivity_saturated_W_per_m_K
    else:
        kersten_number = degree_of_saturation
        conductivity_saturated = (
            thermal_conductivity_minerals_W_per_m_K
            * np.float64(0.249) ** (liquid_fraction * porosity)
            * np.float64(2.29) ** porosity
        )

    conductivity = (
        kersten_number * conductivity_saturated
        + (np.float64(1.0) - kersten_number) * thermal_conductivity_dry_W_per_m_K
    )

    pore_volume_m = layer_thickness_m * porosity
    if pore_volume_m > np.float64(0.0):
        water_volume_ratio = (
            liquid_water_kg_per_m2 / RHO_WATER_KG_PER_M3
            + ice_kg_per_m2 / RHO_ICE_KG_PER_M3
        ) / pore_volume_m
        if water_volume_ratio > np.float64(1.0):
            excess_ice_volume = (water_volume_ratio - np.float64(1.0)) * porosity
            conductivity = (
                (conductivity + excess_ice_volume * LAMBDA_ICE)
                / (np.float64(1.0) + excess_ice_volume)
                / (np.float64(1.0) + excess_ice_volume)
            )
    return conductivity


@njit(cache=True, inline="always")
def calculate_snow_thermal_conductivity(
    liquid_water_kg_per_m2: np.float64,
    ice_kg_per_m2: np.float64,
    layer_thickness_m: np.float64,
) -> np.float64:
    """Jordan (1991) thermal conductivity of a snow layer [W/(m·K)].

    Args:
        liquid_water_kg_per_m2: Liquid water mass [kg/m2].
        ice_kg_per_m2: Ice mass [kg/m2].
        layer_thickness_m: Layer thickness [m].

    Returns:
        Thermal conductivity at the layer node [W/(m·K)].
    """
    bulk_density = (ice_kg_per_m2 + liquid_water_kg_per_m2) / layer_thickness_m
    return LAMBDA_AIR + (
        np.float64(7.75e-5) * bulk_density
        + np.float64(1.105e-6) * bulk_density * bulk_density
    ) * (LAMBDA_ICE - LAMBDA_AIR)


@njit(cache=True, inline="always")
def calculate_interface_thermal_conductivity(
    conductivity_upper_W_per_m_K: np.float64,
    conductivity_lower_W_per_m_K: np.float64,
    node_depth_upper_m: np.float64,
    node_depth_lower_m: np.float64,
    interface_depth_m: np.float64,
) -> np.float64:
    """Conductivity at the interface between two nodes [W/(m·K)].

    Assumes the flux from the upper node to the interface equals the flux from the
    interface to the lower node, so the two half-layer resistances add.

    Args:
        conductivity_upper_W_per_m_K: Conductivity at the upper node.
        conductivity_lower_W_per_m_K: Conductivity at the lower node.
        node_depth_upper_m: Depth of the upper node [m].
        node_depth_lower_m: Depth of the lower node [m].
        interface_depth_m: Depth of the interface between both nodes [m].

    Returns:
        Interface conductivity [W/(m·K)].
    """
    return (
        conductivity_upper_W_per_m_K
        * conductivity_lower_W_per_m_K
        * (node_depth_lower_m - node_depth_upper_m)
        / (
            conductivity_upper_W_per_m_K * (node_depth_lower_m - interface_depth_m)
            + conductivity_lower_W_per_m_K * (interface_depth_m - node_depth_upper_m)
        )
    )


@njit(cache=True, inline="always")
def calculate_soil_heat_capacity(
    solid_heat_capacity_J_per_m3_K: np.float64,
    porosity: np.float64,
    layer_thickness_m: np.float64,
    liquid_water_kg_per_m2: np.float64,
    ice_kg_per_m2: np.float64,
) -> np.float64:
    """Areal heat capacity of a sediment or bedrock layer [J/(m2·K)], de Vries (1963)."""
    return (
        solid_heat_capacity_J_per_m3_K * (np.float64(1.0) - porosity) * layer_thickness_m
        + ice_kg_per_m2 * SPECIFIC_HEAT_CAPACITY_ICE_J_PER_KG_K
        + liquid_water_kg_per_m2 * SPECIFIC_HEAT_CAPACITY_WATER_J_PER_KG_K
    )


@njit(cache=True, inline="always")
def calculate_snow_heat_capacity(
    liquid_water_kg_per_m2: np.float64, ice_kg_per_m2: np.float64
) -> np.float64:
    """Areal heat capacity of a snow layer [J/(m2·K)]."""
    return (
        liquid_water_kg_per_m2 * SPECIFIC_HEAT_CAPACITY_WATER_J_PER_KG_K
        + ice_kg_per_m2 * SPECIFIC_HEAT_CAPACITY_ICE_J_PER_KG_K
    )


@njit(cache=True, inline="always")
def calculate_lake_heat_capacity(
    layer_thickness_m: np.float64, ice_fraction: np.float64
) -> np.float64:
    """Areal heat capacity of a lake layer of fixed thickness [J/(m2·K)]."""
    return layer_thickness_m * (
        VOLUMETRIC_HEAT_CAPACITY_WATER_J_PER_M3_K * (np.float64(1.0) - ice_fraction)
        + VOLUMETRIC_HEAT_CAPACITY_ICE_EFFECTIVE_J_PER_M3_K * ice_fraction
    )


@njit(cache=True)
def get_lake_heat_capacities(
    lake_layer_thickness_m: ArrayFloat64,
    lake_ice_fraction: ArrayFloat64,
    lake_heat_capacity_J_per_m2_K: ArrayFloat64,
) -> None:
    """Fill the areal heat capacity of every lake layer in-place."""
    for layer_idx in range(lake_layer_thickness_m.size):
        lake_heat_capacity_J_per_m2_K[layer_idx] = calculate_lake_heat_capacity(
            lake_layer_thickness_m[layer_idx], lake_ice_fraction[layer_idx]
        )


@njit(cache=True)
def get_snow_and_soil_thermal_properties(
    n_snow_layers: int,
    n_soil_hydrologic: int,
    snow_temperature_K: ArrayFloat64,
    snow_liquid_water_kg_per_m2: ArrayFloat64,
    snow_ice_kg_per_m2: ArrayFloat64,
    snow_layer_thickness_m: ArrayFloat64,
    snow_node_depth_m: ArrayFloat64,
    snow_interface_depth_m: ArrayFloat64,
    soil_temperature_K: ArrayFloat64,
    soil_liquid_water_kg_per_m2: ArrayFloat64,
    soil_ice_kg_per_m2: ArrayFloat64,
    soil_layer_thickness_m: ArrayFloat64,
    soil_node_depth_m: ArrayFloat64,
    soil_interface_depth_m: ArrayFloat64,
    porosity: ArrayFloat64,
    thermal_conductivity_saturated_W_per_m_K: ArrayFloat64,
    thermal_conductivity_minerals_W_per_m_K: ArrayFloat64,
    thermal_conductivity_dry_W_per_m_K: ArrayFloat64,
    solid_heat_capacity_J_per_m3_K: ArrayFloat64,
    snow_thermal_conductivity_W_per_m_K: ArrayFloat64,
    snow_heat_capacity_J_per_m2_K: ArrayFloat64,
    soil_thermal_conductivity_W_per_m_K: ArrayFloat64,
    soil_heat_capacity_J_per_m2_K: ArrayFloat64,
) -> np.float64:
    """Set thermal conductivities and heat capacities of the snow and soil layers of one column.

    The conductivity arrays are filled with the conductivity at the interface below
    each layer, except for the bottom snow layer (which borders the lake and gets
    its node conductivity) and the deepest soil layer (insulated, 0). The top soil
    node conductivity is returned separately because the lake-sediment interface is
    assembled elsewhere. Inactive snow slots are left untouched.

    Args:
        n_snow_layers: Number of active snow layers.
        n_soil_hydrologic: Number of sediment layers; deeper layers are bedrock.
        snow_temperature_K: Snow temperatures [K].
        snow_liquid_water_kg_per_m2: Snow liquid water [kg/m2].
        snow_ice_kg_per_m2: Snow ice [kg/m2].
        snow_layer_thickness_m: Snow layer thickness [m].
        snow_node_depth_m: Snow node depth, negative above the lake surface [m].
        snow_interface_depth_m: Depth of the interface below each snow node [m].
        soil_temperature_K: Soil temperatures [K].
        soil_liquid_water_kg_per_m2: Soil liquid water [kg/m2].
        soil_ice_kg_per_m2: Soil ice [kg/m2].
        soil_layer_thickness_m: Soil layer thickness [m].
        soil_node_depth_m: Soil node depth below the sediment top [m].
        soil_interface_depth_m: Depth of the interface below each soil node [m].
        porosity: Soil porosity [-].
        thermal_conductivity_saturated_W_per_m_K: Saturated soil conductivity.
        thermal_conductivity_minerals_W_per_m_K: Mineral conductivity.
        thermal_conductivity_dry_W_per_m_K: Dry soil conductivity.
        solid_heat_capacity_J_per_m3_K: Volumetric heat capacity of the soil solids.
        snow_thermal_conductivity_W_per_m_K: Output, snow interface conductivity.
        snow_heat_capacity_J_per_m2_K: Output, snow heat capacity.
        soil_thermal_conductivity_W_per_m_K: Output, soil interface conductivity.
        soil_heat_capacity_J_per_m2_K: Output, soil heat capacity.

    Returns:
        Thermal conductivity at the node of the top soil layer [W/(m·K)].
    """
    n_snow_max = snow_temperature_K.size
    n_soil = soil_temperature_K.size
    first_snow_layer = n_snow_max - n_snow_layers

    node_conductivity_snow = np.empty(n_snow_max, dtype=np.float64)
    for layer_idx in range(first_snow_layer, n_snow_max):
        node_conductivity_snow[layer_idx] = calculate_snow_thermal_conductivity(
            snow_liquid_water_kg_per_m2[layer_idx],
            snow_ice_kg_per_m2[layer_idx],
            snow_layer_thickness_m[layer_idx],
        )

    node_conductivity_soil = np.empty(n_soil, dtype=np.float64)
    for layer_idx in range(n_soil):
        if layer_idx < n_soil_hydrologic:
            node_conductivity_soil[layer_idx] = calculate_soil_thermal_conductivity(
                soil_temperature_K[layer_idx],
                soil_liquid_water_kg_per_m2[layer_idx],
                soil_ice_kg_per_m2[layer_idx],
                soil_layer_thickness_m[layer_idx],
                porosity[layer_idx],
                thermal_conductivity_saturated_W_per_m_K[layer_idx],
                thermal_conductivity_minerals_W_per_m_K[layer_idx],
                thermal_conductivity_dry_W_per_m_K[layer_idx],
            )
        else:
            node_conductivity_soil[layer_idx] = LAMBDA_BEDROCK

    for layer_idx in range(first_snow_layer, n_snow_max):
        if layer_idx < n_snow_max - 1:
            snow_thermal_conductivity_W_per_m_K[layer_idx] = (
                calculate_interface_thermal_conductivity(
                    node_conductivity_snow[layer_idx],
                    node_conductivity_snow[layer_idx + 1],
                    snow_node_depth_m[layer_idx],
                    snow_node_depth_m[layer_idx + 1],
                    snow_interface_depth_m[layer_idx],
                )
            )
        else:
            snow_thermal_conductivity_W_per_m_K[layer_idx] = node_conductivity_snow[
                layer_idx
            ]
        snow_heat_capacity_J_per_m2_K[layer_idx] = calculate_snow_heat_capacity(
            snow_liquid_water_kg_per_m2[layer_idx], snow_ice_kg_per_m2[layer_idx]
        )

    for layer_idx in range(n_soil):
        if layer_idx < n_soil - 1:
            soil_thermal_conductivity_W_per_m_K[layer_idx] = (
                calculate_interface_thermal_conductivity(
                    node_conductivity_soil[layer_idx],
                    node_conductivity_soil[layer_idx + 1],
                    soil_node_depth_m[layer_idx],
                    soil_node_depth_m[layer_idx + 1],
                    soil_interface_depth_m[layer_idx],
                )
            )
        else:
            soil_thermal_conductivity_W_per_m_K[layer_idx] = np.float64(0.0)
        soil_heat_capacity_J_per_m2_K[layer_idx] = calculate_soil_heat_capacity(
            solid_heat_capacity_J_per_m3_K[layer_idx],
            porosity[layer_idx],
            soil_layer_thickness_m[layer_idx],
            soil_liquid_water_kg_per_m2[layer_idx],
            soil_ice_kg_per_m2[layer_idx],
        )

    return node_conductivity_soil[0]


@njit(cache=True)
def get_snow_ice_fraction(
    n_snow_layers: int,
    snow_liquid_water_kg_per_m2: ArrayFloat64,
    snow_ice_kg_per_m2: ArrayFloat64,
    snow_ice_fraction: ArrayFloat64,
) -> None:
    """Store the ice mass fraction of each active snow layer in-place.

    Layers without any water get an ice fraction of 0.
    """
    n_snow_max = snow_ice_kg_per_m2.size
    for layer_idx in range(n_snow_max - n_snow_layers, n_snow_max):
        total_water_kg_per_m2 = (
            snow_liquid_water_kg_per_m2[layer_idx] + snow_ice_kg_per_m2[layer_idx]
        )
        if total_water_kg_per_m2 > np.float64(0.0):
            snow_ice_fraction[layer_idx] = (
                snow_ice_kg_per_m2[layer_idx] / total_water_kg_per_m2
            )
        else:
            snow_ice_fraction[layer_idx] = np.float64(0.0)
