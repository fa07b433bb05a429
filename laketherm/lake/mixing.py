"""Convective mixing of unstable density profiles in the lake water.

Starting at the top, each time an unstable density profile is found the lake is
mixed fully from that point to the surface. Instabilities originating at the lake
bottom (for example from sediment heat) are handled separately: they mix upward one
layer at a time for as long as the instability persists, so that they do not
overturn the whole lake in one step.
"""

import numpy as np
from numba import njit

from laketherm.types import ArrayFloat64

from .constants import (
    FREEZING_TEMPERATURE_K,
    VOLUMETRIC_HEAT_CAPACITY_ICE_EFFECTIVE_J_PER_M3_K,
    VOLUMETRIC_HEAT_CAPACITY_WATER_J_PER_M3_K,
)
from .density import calculate_water_density, get_lake_density


@njit(cache=True, inline="always")
def is_unstable(
    lake_density_kg_per_m3: ArrayFloat64,
    lake_ice_fraction: ArrayFloat64,
    layer_idx: int,
) -> bool:
    """Whether the interface below `layer_idx` needs mixing.

    Either the upper layer is denser, or ice lies below a layer that is not fully frozen.
    """
    return lake_density_kg_per_m3[layer_idx] > lake_density_kg_per_m3[
        layer_idx + 1
    ] or (
        lake_ice_fraction[layer_idx] < np.float64(1.0)
        and lake_ice_fraction[layer_idx + 1] > np.float64(0.0)
    )


@njit(cache=True)
def mix_layers(
    first_layer: int,
    last_layer: int,
    lake_layer_thickness_m: ArrayFloat64,
    lake_temperature_K: ArrayFloat64,
    lake_ice_fraction: ArrayFloat64,
    lake_density_kg_per_m3: ArrayFloat64,
) -> None:
    """Mix lake layers `first_layer .. last_layer` (inclusive) in-place.

    Heat content relative to freezing and total ice thickness are conserved. All ice
    is moved to the top of the mixed span. Fully frozen layers get the mean frozen
    temperature, water layers the mean unfrozen temperature, and the layer holding
    the ice-water boundary a temperature that keeps its heat content with its new
    heat capacity. When the span holds only water (or only ice) the heat is assigned
    to the phase that exists.

    Args:
        first_layer: Upper layer of the span.
        last_layer: Lower layer of the span.
        lake_layer_thickness_m: Lake layer thickness [m].
        lake_temperature_K: Lake temperatures [K], updated in-place.
        lake_ice_fraction: Lake ice fractions [0-1], updated in-place.
        lake_density_kg_per_m3: Lake densities, updated in-place.
    """
    heat_content = np.float64(0.0)
    ice_thickness_m = np.float64(0.0)
    span_thickness_m = np.float64(0.0)
    for layer_idx in range(first_layer, last_layer + 1):
        ice_fraction = lake_ice_fraction[layer_idx]
        heat_content += (
            lake_layer_thickness_m[layer_idx]
            * (lake_temperature_K[layer_idx] - FREEZING_TEMPERATURE_K)
            * (
                (np.float64(1.0) - ice_fraction)
                * VOLUMETRIC_HEAT_CAPACITY_WATER_J_PER_M3_K
                + ice_fraction * VOLUMETRIC_HEAT_CAPACITY_ICE_EFFECTIVE_J_PER_M3_K
            )
        )
        ice_thickness_m += ice_fraction * lake_layer_thickness_m[layer_idx]
        span_thickness_m += lake_layer_thickness_m[layer_idx]

    if span_thickness_m <= np.float64(0.0):
        return

    mean_heat_content = heat_content / span_thickness_m
    mean_ice_fraction = ice_thickness_m / span_thickness_m

    water_heat_capacity = (
        np.float64(1.0) - mean_ice_fraction
    ) * VOLUMETRIC_HEAT_CAPACITY_WATER_J_PER_M3_K
    ice_heat_capacity = (
        mean_ice_fraction * VOLUMETRIC_HEAT_CAPACITY_ICE_EFFECTIVE_J_PER_M3_K
    )
    # temperatures relative to freezing
    frozen_temperature = np.float64(0.0)
    unfrozen_temperature = np.float64(0.0)
    if mean_heat_content > np.float64(0.0):
        if water_heat_capacity > np.float64(0.0):
            unfrozen_temperature = mean_heat_content / water_heat_capacity
        else:
            frozen_temperature = mean_heat_content / ice_heat_capacity
    elif mean_heat_content < np.float64(0.0):
        if ice_heat_capacity > np.float64(0.0):
            frozen_temperature = mean_heat_content / ice_heat_capacity
        else:
            unfrozen_temperature = mean_heat_content / water_heat_capacity

    depth_in_span_m = np.float64(0.0)
    for layer_idx in range(first_layer, last_layer + 1):
        layer_thickness = lake_layer_thickness_m[layer_idx]
        if (depth_in_span_m + layer_thickness) / span_thickness_m <= mean_ice_fraction:
            lake_ice_fraction[layer_idx] = np.float64(1.0)
            lake_temperature_K[layer_idx] = frozen_temperature + FREEZING_TEMPERATURE_K
        elif depth_in_span_m / span_thickness_m < mean_ice_fraction:
            ice_fraction = (
                mean_ice_fraction * span_thickness_m - depth_in_span_m
            ) / layer_thickness
            lake_ice_fraction[layer_idx] = ice_fraction
            lake_temperature_K[layer_idx] = (
                ice_fraction
                * frozen_temperature
                * VOLUMETRIC_HEAT_CAPACITY_ICE_EFFECTIVE_J_PER_M3_K
                + (np.float64(1.0) - ice_fraction)
                * unfrozen_temperature
                * VOLUMETRIC_HEAT_CAPACITY_WATER_J_PER_M3_K
            ) / (
                ice_fraction * VOLUMETRIC_HEAT_CAPACITY_ICE_EFFECTIVE_J_PER_M3_K
                + (np.float64(1.0) - ice_fraction)
                * VOLUMETRIC_HEAT_CAPACITY_WATER_J_PER_M3_K
            ) + FREEZING_TEMPERATURE_K
        else:
            lake_ice_fraction[layer_idx] = np.float64(0.0)
            lake_temperature_K[layer_idx] = (
                unfrozen_temperature + FREEZING_TEMPERATURE_K
            )
        depth_in_span_m += layer_thickness

        lake_density_kg_per_m3[layer_idx] = calculate_water_density(
            lake_temperature_K[layer_idx], lake_ice_fraction[layer_idx]
        )


@njit(cache=True)
def get_lake_ice_thickness_sum(
    lake_layer_thickness_m: ArrayFloat64, lake_ice_fraction: ArrayFloat64
) -> np.float64:
    """Thickness of the ice in the lake, as water-equivalent layer thickness [m]."""
    ice_thickness_m = np.float64(0.0)
    for layer_idx in range(lake_ice_fraction.size):
        ice_thickness_m += (
            lake_ice_fraction[layer_idx] * lake_layer_thickness_m[layer_idx]
        )
    return ice_thickness_m


@njit(cache=True)
def mix_unstable_layers(
    lake_layer_thickness_m: ArrayFloat64,
    lake_temperature_K: ArrayFloat64,
    lake_ice_fraction: ArrayFloat64,
    lake_puddling: bool,
    puddling_ice_thickness_m: np.float64,
) -> bool:
    """Remove unstable density profiles from the lake by convective mixing.

    The top-down pass examines the interfaces of the upper layers and mixes the
    whole span from the surface down whenever one is unstable. The bottom interface is
    then examined separately, and when it is unstable a bottom-up pass mixes from the
    bottom up to each interface that is still unstable. Both passes use the profile as
    left by the preceding mixing.

    Args:
        lake_layer_thickness_m: Lake layer thickness [m].
        lake_temperature_K: Lake temperatures [K], updated in-place.
        lake_ice_fraction: Lake ice fractions [0-1], updated in-place.
        lake_puddling: When True, skip mixing once the lake holds enough ice.
        puddling_ice_thickness_m: Ice thickness at which mixing stops [m].

    Returns:
        True if mixing was skipped because of puddling, False otherwise.
    """
    n_lake = lake_temperature_K.size
    if n_lake < 2:
        return False

    if lake_puddling:
        if (
            get_lake_ice_thickness_sum(lake_layer_thickness_m, lake_ice_fraction)
            >= puddling_ice_thickness_m
        ):
            return True

    lake_density_kg_per_m3 = np.empty(n_lake, dtype=np.float64)
    get_lake_density(lake_temperature_K, lake_ice_fraction, lake_density_kg_per_m3)

    for layer_idx in range(n_lake - 2):
        if is_unstable(lake_density_kg_per_m3, lake_ice_fraction, layer_idx):
            mix_layers(
                0,
                layer_idx + 1,
                lake_layer_thickness_m,
                lake_temperature_K,
                lake_ice_fraction,
                lake_density_kg_per_m3,
            )

    bottom_convection = is_unstable(
        lake_density_kg_per_m3, lake_ice_fraction, n_lake - 2
    )
    if bottom_convection:
        for layer_idx in range(n_lake - 2, -1, -1):
            if is_unstable(lake_density_kg_per_m3, lake_ice_fraction, layer_idx):
                mix_layers(
                    layer_idx,
                    n_lake - 1,
                    lake_layer_thickness_m,
                    lake_temperature_K,
                    lake_ice_fraction,
                    lake_density_kg_per_m3,
                )

    return False
