"""Assembly of the snow, lake and soil layers into one contiguous column."""

import numpy as np
from numba import njit

from laketherm.types import ArrayFloat64

from .layout import lake_slot, snow_slot, soil_slot, top_slot


@njit(cache=True)
def assemble_column(
    n_snow_layers: int,
    snow_temperature_K: ArrayFloat64,
    snow_node_depth_m: ArrayFloat64,
    snow_heat_capacity_J_per_m2_K: ArrayFloat64,
    snow_thermal_conductivity_W_per_m_K: ArrayFloat64,
    snow_radiative_source_W_per_m2: ArrayFloat64,
    lake_temperature_K: ArrayFloat64,
    lake_layer_thickness_m: ArrayFloat64,
    lake_node_depth_m: ArrayFloat64,
    lake_heat_capacity_J_per_m2_K: ArrayFloat64,
    lake_thermal_conductivity_W_per_m_K: ArrayFloat64,
    lake_radiative_source_W_per_m2: ArrayFloat64,
    soil_temperature_K: ArrayFloat64,
    soil_node_depth_m: ArrayFloat64,
    soil_heat_capacity_J_per_m2_K: ArrayFloat64,
    soil_thermal_conductivity_W_per_m_K: ArrayFloat64,
    top_soil_thermal_conductivity_W_per_m_K: np.float64,
    sediment_radiative_source_W_per_m2: np.float64,
    node_depth_m: ArrayFloat64,
    heat_capacity_J_per_m2_K: ArrayFloat64,
    radiative_source_W_per_m2: ArrayFloat64,
    temperature_K: ArrayFloat64,
    interface_conductivity_W_per_m_K: ArrayFloat64,
) -> None:
    """Fill the contiguous column arrays from the layer arrays of one lake column.

    Node depths are measured from the lake surface. Snow nodes are above the surface
    (negative), soil nodes are offset by the depth of the lake bottom. The interface
    conductivity of a slot is the conductivity between the slot and the slot below.
    Across the snow-lake and lake-soil boundaries it follows from flux continuity
    over both half layers. Slots above the top active slot are not written.

    Args:
        n_snow_layers: Number of active snow layers.
        snow_temperature_K: Snow temperatures [K].
        snow_node_depth_m: Snow node depths, negative [m].
        snow_heat_capacity_J_per_m2_K: Snow heat capacities.
        snow_thermal_conductivity_W_per_m_K: Snow interface conductivity, node conductivity for the bottom snow layer.
        snow_radiative_source_W_per_m2: Absorbed solar radiation per snow slot [W/m2].
        lake_temperature_K: Lake temperatures [K].
        lake_layer_thickness_m: Lake layer thickness [m].
        lake_node_depth_m: Lake node depths [m].
        lake_heat_capacity_J_per_m2_K: Lake heat capacities.
        lake_thermal_conductivity_W_per_m_K: Lake conductivity at the layer nodes.
        lake_radiative_source_W_per_m2: Absorbed solar radiation per lake layer [W/m2].
        soil_temperature_K: Soil temperatures [K].
        soil_node_depth_m: Soil node depths below the sediment top [m].
        soil_heat_capacity_J_per_m2_K: Soil heat capacities.
        soil_thermal_conductivity_W_per_m_K: Soil interface conductivity.
        top_soil_thermal_conductivity_W_per_m_K: Conductivity at the top soil node.
        sediment_radiative_source_W_per_m2: Solar radiation reaching the sediment [W/m2].
        node_depth_m: Output, column node depths [m].
        heat_capacity_J_per_m2_K: Output, column heat capacities.
        radiative_source_W_per_m2: Output, column radiative source [W/m2].
        temperature_K: Output, column temperatures [K].
        interface_conductivity_W_per_m_K: Output, column interface conductivities.
    """
    n_snow_max = snow_temperature_K.size
    n_lake = lake_temperature_K.size
    n_soil = soil_temperature_K.size

    for layer_idx in range(top_slot(n_snow_layers, n_snow_max), n_snow_max):
        slot = snow_slot(layer_idx, n_snow_max)
        node_depth_m[slot] = snow_node_depth_m[layer_idx]
        heat_capacity_J_per_m2_K[slot] = snow_heat_capacity_J_per_m2_K[layer_idx]
        radiative_source_W_per_m2[slot] = snow_radiative_source_W_per_m2[layer_idx]
        temperature_K[slot] = snow_temperature_K[layer_idx]
        interface_conductivity_W_per_m_K[slot] = snow_thermal_conductivity_W_per_m_K[
            layer_idx
        ]

    for layer_idx in range(n_lake):
        slot = lake_slot(layer_idx, n_snow_max)
        node_depth_m[slot] = lake_node_depth_m[layer_idx]
        heat_capacity_J_per_m2_K[slot] = lake_heat_capacity_J_per_m2_K[layer_idx]
        radiative_source_W_per_m2[slot] = lake_radiative_source_W_per_m2[layer_idx]
        temperature_K[slot] = lake_temperature_K[layer_idx]

    lake_bottom_node_depth_m = lake_node_depth_m[n_lake - 1]
    lake_bottom_half_thickness_m = np.float64(0.5) * lake_layer_thickness_m[n_lake - 1]
    for layer_idx in range(n_soil):
        slot = soil_slot(layer_idx, n_snow_max, n_lake)
        node_depth_m[slot] = (
            lake_bottom_node_depth_m
            + lake_bottom_half_thickness_m
            + soil_node_depth_m[layer_idx]
        )
        heat_capacity_J_per_m2_K[slot] = soil_heat_capacity_J_per_m2_K[layer_idx]
        radiative_source_W_per_m2[slot] = np.float64(0.0)
        temperature_K[slot] = soil_temperature_K[layer_idx]
        interface_conductivity_W_per_m_K[slot] = soil_thermal_conductivity_W_per_m_K[
            layer_idx
        ]
    radiative_source_W_per_m2[soil_slot(0, n_snow_max, n_lake)] = (
        sediment_radiative_source_W_per_m2
    )

    # snow-lake interface
    if n_snow_layers > 0:
        bottom_snow_slot = snow_slot(n_snow_max - 1, n_snow_max)
        snow_conductivity = snow_thermal_conductivity_W_per_m_K[n_snow_max - 1]
        lake_conductivity = lake_thermal_conductivity_W_per_m_K[0]
        distance_m = lake_node_depth_m[0] - snow_node_depth_m[n_snow_max - 1]
        interface_conductivity_W_per_m_K[bottom_snow_slot] = (
            lake_conductivity
            * snow_conductivity
            * distance_m
            / (
                snow_conductivity * lake_node_depth_m[0]
                + lake_conductivity * (-snow_node_depth_m[n_snow_max - 1])
            )
        )

    for layer_idx in range(n_lake - 1):
        upper_conductivity = lake_thermal_conductivity_W_per_m_K[layer_idx]
        lower_conductivity = lake_thermal_conductivity_W_per_m_K[layer_idx + 1]
        upper_thickness = lake_layer_thickness_m[layer_idx]
        lower_thickness = lake_layer_thickness_m[layer_idx + 1]
        interface_conductivity_W_per_m_K[lake_slot(layer_idx, n_snow_max)] = (
            upper_conductivity
            * lower_conductivity
            * (lower_thickness + upper_thickness)
            / (
                upper_conductivity * lower_thickness
                + lower_conductivity * upper_thickness
            )
        )

    # lake-soil interface
    lake_conductivity = lake_thermal_conductivity_W_per_m_K[n_lake - 1]
    distance_m = lake_bottom_half_thickness_m + soil_node_depth_m[0]
    interface_conductivity_W_per_m_K[lake_slot(n_lake - 1, n_snow_max)] = (
        top_soil_thermal_conductivity_W_per_m_K
        * lake_conductivity
        * distance_m
        / (
            top_soil_thermal_conductivity_W_per_m_K * lake_bottom_half_thickness_m
            + lake_conductivity * soil_node_depth_m[0]
        )
    )


@njit(cache=True)
def scatter_column_temperature(
    n_snow_layers: int,
    temperature_K: ArrayFloat64,
    snow_temperature_K: ArrayFloat64,
    lake_temperature_K: ArrayFloat64,
    soil_temperature_K: ArrayFloat64,
) -> None:
    """Copy solved column temperatures back into the snow, lake and soil arrays."""
    n_snow_max = snow_temperature_K.size
    n_lake = lake_temperature_K.size
    for layer_idx in range(top_slot(n_snow_layers, n_snow_max), n_snow_max):
        snow_temperature_K[layer_idx] = temperature_K[snow_slot(layer_idx, n_snow_max)]
    for layer_idx in range(n_lake):
        lake_temperature_K[layer_idx] = temperature_K[lake_slot(layer_idx, n_snow_max)]
    for layer_idx in range(soil_temperature_K.size):
        soil_temperature_K[layer_idx] = temperature_K[
            soil_slot(layer_idx, n_snow_max, n_lake)
        ]
