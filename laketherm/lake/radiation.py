"""Solar radiation absorbed inside the lake, the snow on top of it and the sediment below."""

import numpy as np
from numba import njit

from laketherm.types import ArrayFloat64


@njit(cache=True, inline="always")
def calculate_surface_absorption_fraction(
    absorbed_solar_W_per_m2: np.float64,
    absorbed_near_infrared_W_per_m2: np.float64,
    visible_surface_absorption_fraction: np.float64,
) -> np.float64:
    """Fraction of the absorbed solar radiation that is absorbed at the very surface.

    All near-infrared radiation is absorbed at the surface, and a fixed share of the
    visible radiation as well.

    Args:
        absorbed_solar_W_per_m2: Total absorbed solar radiation [W/m2].
        absorbed_near_infrared_W_per_m2: Absorbed near-infrared radiation [W/m2].
        visible_surface_absorption_fraction: Share of visible radiation absorbed at the surface [0-1].

    Returns:
        The surface absorption fraction [0-1].
    """
    fraction = min(
        absorbed_near_infrared_W_per_m2, absorbed_solar_W_per_m2
    ) / max(np.float64(1e-5), absorbed_solar_W_per_m2)
    return fraction + (np.float64(1.0) - fraction) * visible_surface_absorption_fraction


@njit(cache=True, inline="always")
def calculate_extinction_coefficient(
    lake_depth_m: np.float64, extinction_coefficient_per_m: np.float64
) -> np.float64:
    """Light extinction coefficient of the lake water [1/m].

    Uses the supplied coefficient when positive, and otherwise the depth-based
    estimate of Hakanson (1995).
    """
    if extinction_coefficient_per_m > np.float64(0.0):
        return extinction_coefficient_per_m
    return np.float64(1.1925) * max(lake_depth_m, np.float64(1.0)) ** np.float64(
        -0.424
    )


@njit(cache=True)
def get_radiative_source(
    surface_is_open: bool,
    n_snow_layers: int,
    absorbed_solar_W_per_m2: np.float64,
    absorbed_near_infrared_W_per_m2: np.float64,
    absorbed_solar_per_layer_W_per_m2: ArrayFloat64,
    lake_layer_thickness_m: ArrayFloat64,
    lake_node_depth_m: ArrayFloat64,
    lake_depth_m: np.float64,
    extinction_coefficient_per_m: np.float64,
    visible_surface_absorption_fraction: np.float64,
    surface_absorption_depth_m: np.float64,
    lake_radiative_source_W_per_m2: ArrayFloat64,
    snow_radiative_source_W_per_m2: ArrayFloat64,
) -> np.float64:
    """Distribute the absorbed solar radiation over the layers of a lake column.

    In an open lake the radiation that is not absorbed at the surface decays
    exponentially below a shallow surface zone. What passes the lake bottom heats the
    top sediment layer. On a frozen lake without snow layers the top lake layer takes
    all penetrating radiation. With snow layers the supplied per-layer absorption is
    used: the lake surface gets its own value, the snow layers below the top get theirs
    and the top snow layer gets nothing because its absorption is already part of the
    surface heat flux.

    Args:
        surface_is_open: Whether the lake surface is free of ice and snow.
        n_snow_layers: Number of active snow layers.
        absorbed_solar_W_per_m2: Total absorbed solar radiation [W/m2].
        absorbed_near_infrared_W_per_m2: Absorbed near-infrared radiation [W/m2].
        absorbed_solar_per_layer_W_per_m2: Absorbed solar radiation per snow slot, with
            the lake surface as last entry (length n_snow_max + 1) [W/m2].
        lake_layer_thickness_m: Lake layer thickness [m].
        lake_node_depth_m: Lake node depth [m].
        lake_depth_m: Total lake depth [m].
        extinction_coefficient_per_m: Supplied extinction coefficient, <= 0 to derive it from depth.
        visible_surface_absorption_fraction: Share of visible radiation absorbed at the surface [0-1].
        surface_absorption_depth_m: Depth of the surface zone without extinction [m].
        lake_radiative_source_W_per_m2: Output, absorbed radiation per lake layer [W/m2].
        snow_radiative_source_W_per_m2: Output, absorbed radiation per snow slot [W/m2].

    Returns:
        Radiation absorbed by the top sediment layer [W/m2].
    """
    n_lake = lake_layer_thickness_m.size
    n_snow_max = snow_radiative_source_W_per_m2.size

    snow_radiative_source_W_per_m2[:] = np.float64(0.0)
    lake_radiative_source_W_per_m2[:] = np.float64(0.0)
    sediment_radiative_source_W_per_m2 = np.float64(0.0)

    surface_absorption_fraction = calculate_surface_absorption_fraction(
        absorbed_solar_W_per_m2,
        absorbed_near_infrared_W_per_m2,
        visible_surface_absorption_fraction,
    )
    penetrating_solar_W_per_m2 = absorbed_solar_W_per_m2 * (
        np.float64(1.0) - surface_absorption_fraction
    )

    if surface_is_open:
        extinction_coefficient = calculate_extinction_coefficient(
            lake_depth_m, extinction_coefficient_per_m
        )
        for layer_idx in range(n_lake):
            top_depth = (
                lake_node_depth_m[layer_idx]
                - np.float64(0.5) * lake_layer_thickness_m[layer_idx]
            )
            bottom_depth = (
                lake_node_depth_m[layer_idx]
                + np.float64(0.5) * lake_layer_thickness_m[layer_idx]
            )
            transmission_in = np.exp(
                -extinction_coefficient
                * max(top_depth - surface_absorption_depth_m, np.float64(0.0))
            )
            transmission_out = np.exp(
                -extinction_coefficient
                * max(bottom_depth - surface_absorption_depth_m, np.float64(0.0))
            )
            lake_radiative_source_W_per_m2[layer_idx] = (
                transmission_in - transmission_out
            ) * penetrating_solar_W_per_m2
            if layer_idx == n_lake - 1:
                sediment_radiative_source_W_per_m2 = (
                    transmission_out * penetrating_solar_W_per_m2
                )
    elif n_snow_layers == 0:
        lake_radiative_source_W_per_m2[0] = penetrating_solar_W_per_m2
    else:
        lake_radiative_source_W_per_m2[0] = absorbed_solar_per_layer_W_per_m2[
            n_snow_max
        ]
        for layer_idx in range(n_snow_max - n_snow_layers + 1, n_snow_max):
            snow_radiative_source_W_per_m2[layer_idx] = (
                absorbed_solar_per_layer_W_per_m2[layer_idx]
            )

    return sediment_radiative_source_W_per_m2
