import numpy as np

from laketherm.lake.constants import MAXIMUM_DENSITY_TEMPERATURE_K, RHO_ICE_KG_PER_M3
from laketherm.lake.density import calculate_water_density, get_lake_density


def test_water_density_maximum() -> None:
    """Liquid water is densest at 277 K, 1000 kg/m3."""
    np.testing.assert_allclose(
        calculate_water_density(MAXIMUM_DENSITY_TEMPERATURE_K, 0.0), 1000.0
    )
    assert calculate_water_density(273.15, 0.0) < 1000.0
    assert calculate_water_density(290.0, 0.0) < 1000.0


def test_water_density_hostetler() -> None:
    """Density follows the Hostetler & Bartlein (1990) curve."""
    expected = 1000.0 * (1.0 - 1.9549e-5 * 10.0**1.68)
    np.testing.assert_allclose(calculate_water_density(287.0, 0.0), expected)
    np.testing.assert_allclose(calculate_water_density(267.0, 0.0), expected)


def test_ice_density() -> None:
    """Ice has a constant density and partial ice blends linearly."""
    np.testing.assert_allclose(calculate_water_density(260.0, 1.0), RHO_ICE_KG_PER_M3)
    np.testing.assert_allclose(
        calculate_water_density(277.0, 0.5), 0.5 * 1000.0 + 0.5 * RHO_ICE_KG_PER_M3
    )


def test_get_lake_density() -> None:
    """The array version matches the scalar version."""
    temperature = np.array([273.15, 277.0, 285.0])
    ice_fraction = np.array([0.3, 0.0, 0.0])
    density = np.zeros(3)
    get_lake_density(temperature, ice_fraction, density)
    for layer_idx in range(3):
        np.testing.assert_allclose(
            density[layer_idx],
            calculate_water_density(temperature[layer_idx], ice_fraction[layer_idx]),
        )
