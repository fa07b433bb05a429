"""Crank-Nicolson heat diffusion through an assembled lake column."""

import numpy as np
from numba import njit

from laketherm.types import ArrayFloat64
from laketherm.workflows.algebra import tdma_solver


@njit(cache=True)
def build_heat_diffusion_system(
    first_slot: int,
    timestep_s: np.float64,
    crank_nicolson_factor: np.float64,
    surface_heat_flux_W_per_m2: np.float64,
    node_depth_m: ArrayFloat64,
    heat_capacity_J_per_m2_K: ArrayFloat64,
    radiative_source_W_per_m2: ArrayFloat64,
    temperature_K: ArrayFloat64,
    interface_conductivity_W_per_m_K: ArrayFloat64,
    lower_diagonal_a: ArrayFloat64,
    main_diagonal_b: ArrayFloat64,
    upper_diagonal_c: ArrayFloat64,
    rhs_vector_d: ArrayFloat64,
) -> None:
    """Build the tridiagonal system for one timestep of heat diffusion.

    Fluxes are weighted between the old temperatures (`crank_nicolson_factor`) and the
    new temperatures (`1 - crank_nicolson_factor`), so 0 is fully implicit, 0.5 is
    Crank-Nicolson and 1 is fully explicit. The top active slot receives the surface
    heat flux, the bottom slot is insulated.

    Args:
        first_slot: Top active slot.
        timestep_s: Timestep [s].
        crank_nicolson_factor: Weight of the old-temperature fluxes [0-1].
        surface_heat_flux_W_per_m2: Net heat flux into the top slot [W/m2].
        node_depth_m: Column node depths [m].
        heat_capacity_J_per_m2_K: Column heat capacities.
        radiative_source_W_per_m2: Column radiative source [W/m2].
        temperature_K: Column temperatures at the start of the step [K].
        interface_conductivity_W_per_m_K: Conductivity below each slot.
        lower_diagonal_a: Output, lower diagonal.
        main_diagonal_b: Output, main diagonal.
        upper_diagonal_c: Output, upper diagonal.
        rhs_vector_d: Output, right hand side.
    """
    n_slots = temperature_K.size
    bottom_slot = n_slots - 1
    implicit_weight = np.float64(1.0) - crank_nicolson_factor

    heat_flux_W_per_m2 = np.zeros(n_slots, dtype=np.float64)
    for slot in range(first_slot, bottom_slot):
        heat_flux_W_per_m2[slot] = (
            interface_conductivity_W_per_m_K[slot]
            * (temperature_K[slot + 1] - temperature_K[slot])
            / (node_depth_m[slot + 1] - node_depth_m[slot])
        )

    for slot in range(first_slot, n_slots):
        factor = timestep_s / heat_capacity_J_per_m2_K[slot]
        if slot == first_slot:
            conductance_below = (
                interface_conductivity_W_per_m_K[slot]
                / (node_depth_m[slot + 1] - node_depth_m[slot])
            )
            lower_diagonal_a[slot] = np.float64(0.0)
            main_diagonal_b[slot] = (
                np.float64(1.0) + implicit_weight * factor * conductance_below
            )
            upper_diagonal_c[slot] = -implicit_weight * factor * conductance_below
            rhs_vector_d[slot] = temperature_K[slot] + factor * (
                surface_heat_flux_W_per_m2
                + radiative_source_W_per_m2[slot]
                + crank_nicolson_factor * heat_flux_W_per_m2[slot]
            )
        elif slot < bottom_slot:
            conductance_above = interface_conductivity_W_per_m_K[slot - 1] / (
                node_depth_m[slot] - node_depth_m[slot - 1]
            )
            conductance_below = interface_conductivity_W_per_m_K[slot] / (
                node_depth_m[slot + 1] - node_depth_m[slot]
            )
            lower_diagonal_a[slot] = -implicit_weight * factor * conductance_above
            main_diagonal_b[slot] = np.float64(1.0) + implicit_weight * factor * (
                conductance_below + conductance_above
            )
            upper_diagonal_c[slot] = -implicit_weight * factor * conductance_below
            rhs_vector_d[slot] = (
                temperature_K[slot]
                + crank_nicolson_factor
                * factor
                * (heat_flux_W_per_m2[slot] - heat_flux_W_per_m2[slot - 1])
                + factor * radiative_source_W_per_m2[slot]
            )
        else:
            conductance_above = interface_conductivity_W_per_m_K[slot - 1] / (
                node_depth_m[slot] - node_depth_m[slot - 1]
            )
            lower_diagonal_a[slot] = -implicit_weight * factor * conductance_above
            main_diagonal_b[slot] = (
                np.float64(1.0) + implicit_weight * factor * conductance_above
            )
            upper_diagonal_c[slot] = np.float64(0.0)
            rhs_vector_d[slot] = (
                temperature_K[slot]
                - crank_nicolson_factor * factor * heat_flux_W_per_m2[slot - 1]
                + factor * radiative_source_W_per_m2[slot]
            )


@njit(cache=True)
def solve_heat_diffusion(
    first_slot: int,
    timestep_s: np.float64,
    crank_nicolson_factor: np.float64,
    surface_heat_flux_W_per_m2: np.float64,
    node_depth_m: ArrayFloat64,
    heat_capacity_J_per_m2_K: ArrayFloat64,
    radiative_source_W_per_m2: ArrayFloat64,
    temperature_K: ArrayFloat64,
    interface_conductivity_W_per_m_K: ArrayFloat64,
) -> None:
    """Advance the temperatures of an assembled column by one timestep in-place.

    Only slots from `first_slot` downward are solved, inert snow slots above it keep
    their values.

    Args:
        first_slot: Top active slot.
        timestep_s: Timestep [s].
        crank_nicolson_factor: Weight of the old-temperature fluxes [0-1].
        surface_heat_flux_W_per_m2: Net heat flux into the top slot [W/m2].
        node_depth_m: Column node depths [m].
        heat_capacity_J_per_m2_K: Column heat capacities.
        radiative_source_W_per_m2: Column radiative source [W/m2].
        temperature_K: Column temperatures [K], updated in-place.
        interface_conductivity_W_per_m_K: Conductivity below each slot.
    """
    n_slots = temperature_K.size
    lower_diagonal_a = np.zeros(n_slots, dtype=np.float64)
    main_diagonal_b = np.ones(n_slots, dtype=np.float64)
    upper_diagonal_c = np.zeros(n_slots, dtype=np.float64)
    rhs_vector_d = np.zeros(n_slots, dtype=np.float64)
    c_prime = np.zeros(n_slots, dtype=np.float64)
    d_prime = np.zeros(n_slots, dtype=np.float64)

    build_heat_diffusion_system(
        first_slot,
        timestep_s,
        crank_nicolson_factor,
        surface_heat_flux_W_per_m2,
        node_depth_m,
        heat_capacity_J_per_m2_K,
        radiative_source_W_per_m2,
        temperature_K,
        interface_conductivity_W_per_m_K,
        lower_diagonal_a,
        main_diagonal_b,
        upper_diagonal_c,
        rhs_vector_d,
    )
    tdma_solver(
        lower_diagonal_a,
        main_diagonal_b,
        upper_diagonal_c,
        rhs_vector_d,
        temperature_K,
        c_prime,
        d_prime,
        first_slot,
    )
