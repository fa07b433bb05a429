"""Tests for the eddy diffusivity and conductivity of lake layers."""

import numpy as np
import pytest

from laketherm.lake.constants import (
    LAMBDA_ICE_EFFECTIVE,
    LAMBDA_WATER,
    MOLECULAR_DIFFUSIVITY_M2_PER_S,
    VOLUMETRIC_HEAT_CAPACITY_WATER_J_PER_M3_K,
)
from laketherm.lake.diffusivity import (
    calculate_ice_water_conductivity,
    calculate_richardson_number,
    get_lake_eddy_diffusivity,
    is_surface_open,
)


def _lake(n_lake: int = 4) -> tuple[np.ndarray, np.ndarray, np.ndarray, float]:
    thickness = np.array([0.5, 1.0, 2.0, 4.0, 8.0])[:n_lake]
    node_depth = np.cumsum(thickness) - 0.5 * thickness
    return thickness, node_depth, np.zeros(n_lake), float(thickness.sum())


def _run(
    temperature: np.ndarray,
    ice_fraction: np.ndarray,
    node_depth: np.ndarray,
    lake_depth: float,
    ground_temperature: float = 285.0,
    n_snow_layers: int = 0,
    friction_velocity: float = 0.01,
    include_background_diffusivity: bool = False,
    deep_lake_depth: float = 25.0,
) -> tuple[np.ndarray, np.ndarray, float]:
    n_lake = temperature.size
    diffusivity = np.zeros(n_lake)
    conductivity = np.zeros(n_lake)
    top_conductivity = get_lake_eddy_diffusivity(
        temperature,
        ice_fraction,
        node_depth,
        lake_depth,
        ground_temperature,
        n_snow_layers,
        friction_velocity,
        0.5,
        include_background_diffusivity,
        7.5e-5,
        deep_lake_depth,
        10.0,
        diffusivity,
        conductivity,
    )
    return diffusivity, conductivity, top_conductivity


def test_is_surface_open() -> None:
    """The surface is open when warm on both sides of the surface and free of snow."""
    assert is_surface_open(280.0, 280.0, 0)
    assert not is_surface_open(270.0, 280.0, 0)
    assert not is_surface_open(280.0, 273.15, 0)
    assert not is_surface_open(280.0, 280.0, 1)


def test_richardson_number_neutral() -> None:
    """Without stratification the Richardson number is 0."""
    np.testing.assert_allclose(calculate_richardson_number(0.0, 1.0, 0.01, 0.5), 0.0)
    assert calculate_richardson_number(1e-4, 1.0, 0.01, 0.5) > 0.0


def test_ice_water_conductivity() -> None:
    """Harmonic blend of water and effective ice conductivity."""
    np.testing.assert_allclose(
        calculate_ice_water_conductivity(MOLECULAR_DIFFUSIVITY_M2_PER_S, 0.0, False),
        LAMBDA_WATER,
    )
    np.testing.assert_allclose(
        calculate_ice_water_conductivity(MOLECULAR_DIFFUSIVITY_M2_PER_S, 1.0, False),
        LAMBDA_ICE_EFFECTIVE,
    )
    np.testing.assert_allclose(
        calculate_ice_water_conductivity(1e-5, 0.0, True),
        1e-5 * VOLUMETRIC_HEAT_CAPACITY_WATER_J_PER_M3_K,
    )


def test_open_water_is_turbulent() -> None:
    """Wind raises the diffusivity of open water above the molecular value."""
    _, node_depth, ice_fraction, lake_depth = _lake()
    temperature = np.full(4, 285.0)
    diffusivity, conductivity, top_conductivity = _run(
        temperature, ice_fraction, node_depth, lake_depth
    )

    assert (diffusivity[:-1] > MOLECULAR_DIFFUSIVITY_M2_PER_S).all()
    # the bottom layer copies the layer above
    assert diffusivity[-1] == diffusivity[-2]
    assert conductivity[-1] == conductivity[-2]
    np.testing.assert_allclose(
        conductivity, diffusivity * VOLUMETRIC_HEAT_CAPACITY_WATER_J_PER_M3_K
    )
    np.testing.assert_allclose(
        top_conductivity, diffusivity[0] * VOLUMETRIC_HEAT_CAPACITY_WATER_J_PER_M3_K
    )


def test_no_wind_is_molecular() -> None:
    """Without wind or background diffusion only molecular diffusion remains."""
    _, node_depth, ice_fraction, lake_depth = _lake()
    temperature = np.full(4, 285.0)
    diffusivity, conductivity, _ = _run(
        temperature, ice_fraction, node_depth, lake_depth, friction_velocity=0.0
    )
    np.testing.assert_allclose(diffusivity, MOLECULAR_DIFFUSIVITY_M2_PER_S)
    np.testing.assert_allclose(conductivity, LAMBDA_WATER)


def test_stratification_damps_mixing() -> None:
    """A stable profile lowers the turbulent diffusivity at depth."""
    _, node_depth, ice_fraction, lake_depth = _lake()
    uniform, _, _ = _run(np.full(4, 285.0), ice_fraction, node_depth, lake_depth)
    stratified, _, _ = _run(
        np.array([293.0, 290.0, 285.0, 280.0]), ice_fraction, node_depth, lake_depth
    )
    assert (stratified[:-1] < uniform[:-1]).all()


def test_frozen_surface() -> None:
    """A frozen surface uses the ice-water conductivity for all layers."""
    _, node_depth, _, lake_depth = _lake()
    temperature = np.array([270.0, 273.15, 276.0, 277.0])
    ice_fraction = np.array([1.0, 0.5, 0.0, 0.0])
    diffusivity, conductivity, _ = _run(
        temperature, ice_fraction, node_depth, lake_depth, ground_temperature=265.0
    )
    np.testing.assert_allclose(diffusivity, MOLECULAR_DIFFUSIVITY_M2_PER_S)
    np.testing.assert_allclose(conductivity[0], LAMBDA_ICE_EFFECTIVE)
    np.testing.assert_allclose(
        conductivity[1],
        LAMBDA_WATER
        * LAMBDA_ICE_EFFECTIVE
        / (0.5 * LAMBDA_ICE_EFFECTIVE + 0.5 * LAMBDA_WATER),
    )
    np.testing.assert_allclose(conductivity[2:], LAMBDA_WATER)


def test_frozen_layer_freezes_below() -> None:
    """Once a layer is frozen, all layers below are treated as frozen."""
    _, node_depth, _, lake_depth = _lake()
    temperature = np.full(4, 285.0)
    ice_fraction = np.array([0.0, 0.2, 0.0, 0.0])
    diffusivity, conductivity, _ = _run(
        temperature, ice_fraction, node_depth, lake_depth
    )
    assert diffusivity[0] > MOLECULAR_DIFFUSIVITY_M2_PER_S
    np.testing.assert_allclose(diffusivity[1:], MOLECULAR_DIFFUSIVITY_M2_PER_S)
    np.testing.assert_allclose(conductivity[2:], LAMBDA_WATER)


def test_snow_closes_surface() -> None:
    """Snow layers on the lake stop wind mixing."""
    _, node_depth, ice_fraction, lake_depth = _lake()
    diffusivity, _, _ = _run(
        np.full(4, 285.0), ice_fraction, node_depth, lake_depth, n_snow_layers=1
    )
    np.testing.assert_allclose(diffusivity, MOLECULAR_DIFFUSIVITY_M2_PER_S)


def test_background_and_deep_lake_enhancement() -> None:
    """Background diffusion adds to the molecular value, deep lakes multiply it."""
    _, node_depth, ice_fraction, lake_depth = _lake()
    temperature = np.full(4, 285.0)
    shallow, _, _ = _run(
        temperature,
        ice_fraction,
        node_depth,
        lake_depth,
        ground_temperature=265.0,
        include_background_diffusivity=True,
        deep_lake_depth=100.0,
    )
    deep, _, _ = _run(
        temperature,
        ice_fraction,
        node_depth,
        lake_depth,
        ground_temperature=265.0,
        include_background_diffusivity=True,
        deep_lake_depth=1.0,
    )
    # uniform profile: N2 is 0 and the minimum applies
    background = 1.039e-8 * 7.5e-5**-0.43
    np.testing.assert_allclose(
        shallow, MOLECULAR_DIFFUSIVITY_M2_PER_S + background, rtol=1e-12
    )
    np.testing.assert_allclose(deep, 10.0 * shallow, rtol=1e-12)


def test_single_layer_lake() -> None:
    """A lake with one layer has molecular diffusivity."""
    _, node_depth, ice_fraction, lake_depth = _lake(1)
    diffusivity, conductivity, _ = _run(
        np.array([285.0]), ice_fraction, node_depth, lake_depth
    )
    np.testing.assert_allclose(diffusivity, MOLECULAR_DIFFUSIVITY_M2_PER_S)
    np.testing.assert_allclose(conductivity, LAMBDA_WATER)

    diffusivity, conductivity, _ = _run(
        np.array([270.0]),
        np.array([1.0]),
        node_depth,
        lake_depth,
        ground_temperature=260.0,
    )
    np.testing.assert_allclose(conductivity, LAMBDA_ICE_EFFECTIVE)


@pytest.mark.parametrize("lake_depth", [10.0, 30.0])
@pytest.mark.parametrize("include_background_diffusivity", [False, True])
@pytest.mark.parametrize("surface_is_open", [True, False])
def test_deep_lake_enhancement(
    surface_is_open: bool, include_background_diffusivity: bool, lake_depth: float
) -> None:
    """Deep open water is always enhanced, under ice only with background diffusion."""
    _, node_depth, _, _ = _lake()
    ice_fraction = np.full(4, 0.0 if surface_is_open else 0.5)
    diffusivity, conductivity, top_conductivity = _run(
        np.full(4, 285.0),
        ice_fraction,
        node_depth,
        lake_depth,
        ground_temperature=285.0 if surface_is_open else 265.0,
        friction_velocity=0.02,
        include_background_diffusivity=include_background_diffusivity,
        deep_lake_depth=25.0,
    )

    # uniform profile: N2 and the Richardson number are 0
    expected = np.full(4, MOLECULAR_DIFFUSIVITY_M2_PER_S)
    if surface_is_open:
        expected[:-1] += 0.4 * 0.02 * node_depth[:-1] * np.exp(-0.5 * node_depth[:-1])
    if include_background_diffusivity:
        expected[:-1] += 1.039e-8 * 7.5e-5**-0.43
    if lake_depth >= 25.0 and (surface_is_open or include_background_diffusivity):
        expected[:-1] *= 10.0
    # the deepest layer copies the layer above
    expected[-1] = expected[-2]
    np.testing.assert_allclose(diffusivity, expected, rtol=1e-12)

    if surface_is_open:
        expected_conductivity = expected * VOLUMETRIC_HEAT_CAPACITY_WATER_J_PER_M3_K
    else:
        if include_background_diffusivity:
            water = expected * VOLUMETRIC_HEAT_CAPACITY_WATER_J_PER_M3_K
        else:
            water = np.full(4, LAMBDA_WATER)
        expected_conductivity = (
            water * LAMBDA_ICE_EFFECTIVE / (0.5 * LAMBDA_ICE_EFFECTIVE + 0.5 * water)
        )
    np.testing.assert_allclose(conductivity, expected_conductivity, rtol=1e-12)
    np.testing.assert_allclose(
        top_conductivity, expected[0] * VOLUMETRIC_HEAT_CAPACITY_WATER_J_PER_M3_K
    )


def test_deep_open_lake_without_background() -> None:
    """Deep open water is enhanced without background diffusion."""
    _, node_depth, ice_fraction, _ = _lake()
    temperature = np.full(4, 285.0)
    shallow, _, _ = _run(
        temperature, ice_fraction, node_depth, 10.0, friction_velocity=0.02
    )
    deep, _, _ = _run(
        temperature, ice_fraction, node_depth, 30.0, friction_velocity=0.02
    )
    np.testing.assert_allclose(deep, 10.0 * shallow, rtol=1e-12)
    turbulent = 0.4 * 0.02 * 0.25 * np.exp(-0.5 * 0.25)
    np.testing.assert_allclose(
        deep[0], 10.0 * (MOLECULAR_DIFFUSIVITY_M2_PER_S + turbulent), rtol=1e-12
    )
