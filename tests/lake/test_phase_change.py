"""Tests for freezing and thawing of lake water, snow and sediment."""

import numpy as np

from laketherm.lake.constants import (
    FREEZING_TEMPERATURE_K,
    L_FUSION_J_PER_KG,
    RHO_WATER_KG_PER_M3,
    SPECIFIC_HEAT_CAPACITY_ICE_J_PER_KG_K,
    SPECIFIC_HEAT_CAPACITY_WATER_J_PER_KG_K,
)
from laketherm.lake.phase_change import (
    FREEZING,
    MELTING,
    NO_PHASE_CHANGE,
    get_lake_phase_change,
    get_layer_phase_change,
    melt_thin_snow,
)
from laketherm.lake.thermal_properties import calculate_lake_heat_capacity


def _lake_energy(
    thickness: np.ndarray,
    temperature: np.ndarray,
    ice_fraction: np.ndarray,
    heat_capacity: np.ndarray,
) -> float:
    return float(
        (
            heat_capacity * (temperature - FREEZING_TEMPERATURE_K)
            + L_FUSION_J_PER_KG * RHO_WATER_KG_PER_M3 * thickness * (1.0 - ice_fraction)
        ).sum()
    )


def test_partial_freezing_of_supercooled_layer() -> None:
    """A supercooled layer freezes partially and ends exactly at the freezing point."""
    thickness = np.array([1.0])
    temperature = np.array([272.0])
    ice_fraction = np.array([0.0])
    heat_capacity = np.array([calculate_lake_heat_capacity(1.0, 0.0)])
    initial_heat_capacity = heat_capacity[0]
    initial_energy = _lake_energy(thickness, temperature, ice_fraction, heat_capacity)

    latent_heat = get_lake_phase_change(
        thickness, temperature, ice_fraction, heat_capacity
    )

    expected_ice_fraction = (
        (FREEZING_TEMPERATURE_K - 272.0)
        * initial_heat_capacity
        / (L_FUSION_J_PER_KG * RHO_WATER_KG_PER_M3 * 1.0)
    )
    assert temperature[0] == FREEZING_TEMPERATURE_K
    np.testing.assert_allclose(ice_fraction[0], expected_ice_fraction, rtol=1e-12)
    np.testing.assert_allclose(
        latent_heat,
        -expected_ice_fraction * RHO_WATER_KG_PER_M3 * L_FUSION_J_PER_KG,
        rtol=1e-12,
    )
    np.testing.assert_allclose(
        heat_capacity[0],
        initial_heat_capacity
        - expected_ice_fraction
        * RHO_WATER_KG_PER_M3
        * (
            SPECIFIC_HEAT_CAPACITY_WATER_J_PER_KG_K
            - SPECIFIC_HEAT_CAPACITY_ICE_J_PER_KG_K
        ),
        rtol=1e-12,
    )
    np.testing.assert_allclose(
        _lake_energy(thickness, temperature, ice_fraction, heat_capacity),
        initial_energy,
        atol=1e-3,
    )


def test_complete_freezing_cools_below_freezing() -> None:
    """When the heat deficit exceeds the latent heat, the ice cools further."""
    thickness = np.array([0.01])
    temperature = np.array([250.0])
    ice_fraction = np.array([0.99])
    heat_capacity = np.array([calculate_lake_heat_capacity(0.01, 0.99)])
    initial_energy = _lake_energy(thickness, temperature, ice_fraction, heat_capacity)

    get_lake_phase_change(thickness, temperature, ice_fraction, heat_capacity)

    assert ice_fraction[0] == 1.0
    assert temperature[0] < FREEZING_TEMPERATURE_K
    np.testing.assert_allclose(
        heat_capacity[0], calculate_lake_heat_capacity(0.01, 1.0), rtol=1e-12
    )
    np.testing.assert_allclose(
        _lake_energy(thickness, temperature, ice_fraction, heat_capacity),
        initial_energy,
        atol=1e-6,
    )


def test_melting() -> None:
    """Warm ice melts, partially or completely."""
    thickness = np.array([1.0, 0.01])
    temperature = np.array([274.0, 330.0])
    ice_fraction = np.array([1.0, 0.3])
    heat_capacity = np.array(
        [
            calculate_lake_heat_capacity(1.0, 1.0),
            calculate_lake_heat_capacity(0.01, 0.3),
        ]
    )
    initial_energy = _lake_energy(thickness, temperature, ice_fraction, heat_capacity)

    latent_heat = get_lake_phase_change(
        thickness, temperature, ice_fraction, heat_capacity
    )

    assert latent_heat > 0.0
    assert temperature[0] == FREEZING_TEMPERATURE_K
    assert 0.0 < ice_fraction[0] < 1.0
    assert ice_fraction[1] == 0.0
    assert temperature[1] > FREEZING_TEMPERATURE_K
    np.testing.assert_allclose(
        _lake_energy(thickness, temperature, ice_fraction, heat_capacity),
        initial_energy,
        atol=1e-3,
    )


def test_no_phase_change() -> None:
    """Warm water and cold ice are left alone."""
    thickness = np.array([1.0, 1.0])
    temperature = np.array([280.0, 260.0])
    ice_fraction = np.array([0.0, 1.0])
    heat_capacity = np.array(
        [calculate_lake_heat_capacity(1.0, 0.0), calculate_lake_heat_capacity(1.0, 1.0)]
    )
    latent_heat = get_lake_phase_change(
        thickness, temperature, ice_fraction, heat_capacity
    )
    assert latent_heat == 0.0
    np.testing.assert_array_equal(temperature, [280.0, 260.0])
    np.testing.assert_array_equal(ice_fraction, [0.0, 1.0])


def test_layer_phase_change() -> None:
    """Snow or soil layers melt ice and freeze liquid water and report flags and rates."""
    temperature = np.array([0.0, 275.0, 270.0, 260.0])
    liquid = np.array([0.0, 0.0, 5.0, 0.0])
    ice = np.array([0.0, 20.0, 10.0, 30.0])
    heat_capacity = (
        liquid * SPECIFIC_HEAT_CAPACITY_WATER_J_PER_KG_K
        + ice * SPECIFIC_HEAT_CAPACITY_ICE_J_PER_KG_K
    )
    flag = np.zeros(4, dtype=np.int32)
    freezing_rate = np.zeros(4)
    timestep = 600.0

    energy_before = (
        heat_capacity[1:] * (temperature[1:] - FREEZING_TEMPERATURE_K)
        + L_FUSION_J_PER_KG * liquid[1:]
    ).sum()
    total_water = liquid + ice

    latent_heat, total_melt = get_layer_phase_change(
        1, temperature, liquid, ice, heat_capacity, flag, freezing_rate, timestep
    )

    np.testing.assert_array_equal(
        flag, [NO_PHASE_CHANGE, MELTING, FREEZING, NO_PHASE_CHANGE]
    )
    expected_melt = (
        (275.0 - FREEZING_TEMPERATURE_K)
        * 20.0
        * SPECIFIC_HEAT_CAPACITY_ICE_J_PER_KG_K
        / L_FUSION_J_PER_KG
    )
    np.testing.assert_allclose(total_melt, expected_melt, rtol=1e-12)
    assert temperature[1] == FREEZING_TEMPERATURE_K
    assert temperature[2] == FREEZING_TEMPERATURE_K
    assert freezing_rate[2] > 0.0
    assert temperature[3] == 260.0
    np.testing.assert_allclose(liquid + ice, total_water)
    assert (liquid >= 0.0).all() and (ice >= 0.0).all()

    energy_after = (
        heat_capacity[1:] * (temperature[1:] - FREEZING_TEMPERATURE_K)
        + L_FUSION_J_PER_KG * liquid[1:]
    ).sum()
    np.testing.assert_allclose(energy_after, energy_before, atol=1e-6)
    np.testing.assert_allclose(
        latent_heat, L_FUSION_J_PER_KG * (liquid[1:].sum() - 5.0), rtol=1e-12
    )


def test_melt_thin_snow() -> None:
    """Snow without layers melts with the heat of the top lake layer."""
    heat_capacity = 0.1 * 4.188e6
    swe, depth, temperature, melt_rate = melt_thin_snow(
        600.0, 5.0, 0.01, 275.0, heat_capacity
    )
    heat = (275.0 - FREEZING_TEMPERATURE_K) * heat_capacity
    expected_melt = heat / L_FUSION_J_PER_KG
    assert expected_melt < 5.0
    np.testing.assert_allclose(swe, 5.0 - expected_melt)
    np.testing.assert_allclose(depth, 0.01 * (1.0 - expected_melt / 5.0))
    np.testing.assert_allclose(temperature, FREEZING_TEMPERATURE_K)
    np.testing.assert_allclose(melt_rate, expected_melt / 600.0)


def test_melt_thin_snow_completely() -> None:
    """All snow melts when the lake holds enough heat, the rest stays in the lake."""
    heat_capacity = 1.0 * 4.188e6
    swe, depth, temperature, melt_rate = melt_thin_snow(
        600.0, 1.0, 0.005, 280.0, heat_capacity
    )
    assert swe == 0.0
    assert depth == 0.0
    np.testing.assert_allclose(
        temperature,
        FREEZING_TEMPERATURE_K
        + ((280.0 - FREEZING_TEMPERATURE_K) * heat_capacity - L_FUSION_J_PER_KG)
        / heat_capacity,
    )
    np.testing.assert_allclose(melt_rate, 1.0 / 600.0)


def test_melt_thin_snow_cold_lake() -> None:
    """A lake at or below freezing melts no snow."""
    result = melt_thin_snow(600.0, 2.0, 0.01, FREEZING_TEMPERATURE_K, 4.188e5)
    assert result == (2.0, 0.01, FREEZING_TEMPERATURE_K, 0.0)
