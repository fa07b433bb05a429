"""Density of lake water with a partial ice cover."""

import numpy as np
from numba import njit

from laketherm.types import ArrayFloat64

from .constants import MAXIMUM_DENSITY_TEMPERATURE_K, RHO_ICE_KG_PER_M3


@njit(cache=True, inline="always")
def calculate_water_density(
    temperature_K: np.float64, ice_fraction: np.float64
) -> np.float64:
    """Density of a lake layer [kg/m3] from its temperature and ice fraction.

    Liquid water follows Hostetler & Bartlein (1990), peaking at 1000 kg/m3 at
    277 K. Ice has a constant density. The density only decides on stability and
    mixing, lake layers never change thickness.

    Args:
        temperature_K: Layer temperature [K].
        ice_fraction: Ice mass fraction of the layer [0-1].

    Returns:
        Layer density [kg/m3].
    """
    liquid_density = np.float64(1000.0) * (
        np.float64(1.0)
        - np.float64(1.9549e-5)
        * np.abs(temperature_K - MAXIMUM_DENSITY_TEMPERATURE_K) ** np.float64(1.68)
    )
    return (
        np.float64(1.0) - ice_fraction
    ) * liquid_density + ice_fraction * RHO_ICE_KG_PER_M3


@njit(cache=True)
def get_lake_density(
    lake_temperature_K: ArrayFloat64,
    lake_ice_fraction: ArrayFloat64,
    lake_density_kg_per_m3: ArrayFloat64,
) -> None:
    """Fill the density of every lake layer in-place."""
    for layer_idx in range(lake_temperature_K.size):
        lake_density_kg_per_m3[layer_idx] = calculate_water_density(
            lake_temperature_K[layer_idx], lake_ice_fraction[layer_idx]
        )
