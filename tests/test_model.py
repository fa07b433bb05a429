"""Tests for the lake temperature module."""

import logging

import numpy as np
import pytest

from laketherm.config_schema import IdealizedLakeConfig, LakeTemperatureConfig
from laketherm.idealized import build_idealized_lake
from laketherm.lake.layout import ColumnLayout
from laketherm.lake.state import LakeDiagnostics
from laketherm.lake.temperature import update_lake_temperature
from laketherm.model import LakeTemperature


def _setup(raise_on_energy_imbalance: bool = True, n_columns: int = 2) -> tuple:
    layout, state, forcing = build_idealized_lake(
        IdealizedLakeConfig(
            n_columns=n_columns,
            layer_thickness_m=[0.2, 1.0, 3.0],
            initial_temperature_K=281.0,
        )
    )
    forcing.ground_heat_flux_W_per_m2[:] = -50.0
    forcing.ground_temperature_K[:] = 280.0
    model = LakeTemperature(
        LakeTemperatureConfig(raise_on_energy_imbalance=raise_on_energy_imbalance),
        layout,
    )
    return model, state, forcing


def test_name() -> None:
    model, _, _ = _setup()
    assert model.name == "lake_temperature"
    assert model.logger.name == "laketherm.lake_temperature"


def test_spinup_rejects_other_layout() -> None:
    model, state, forcing = _setup()
    other = LakeTemperature(
        LakeTemperatureConfig(),
        ColumnLayout(n_snow_max=1, n_lake=3, n_soil=6, n_soil_hydrologic=6),
    )
    with pytest.raises(ValueError, match="does not match"):
        other.spinup(state, forcing)


def test_spinup_validates_state() -> None:
    model, state, forcing = _setup()
    state.lake_ice_fraction[0, 1] = -0.1
    with pytest.raises(ValueError, match="ice fraction"):
        model.spinup(state, forcing)


def test_step_allocates_and_reuses_diagnostics() -> None:
    model, state, forcing = _setup()
    model.spinup(state, forcing)

    diagnostics = model.step(state, forcing)
    assert isinstance(diagnostics, LakeDiagnostics)
    assert diagnostics.lake_eddy_diffusivity_m2_per_s.shape == (3, 2)

    reused = model.step(state, forcing, diagnostics)
    assert reused is diagnostics
    np.testing.assert_allclose(
        diagnostics.snow_melt_heat_flux_W_per_m2,
        diagnostics.snow_melt_rate_kg_per_m2_s * 3.337e5,
    )
    np.testing.assert_array_equal(
        diagnostics.ground_heat_flux_lake_W_per_m2, forcing.ground_heat_flux_W_per_m2
    )


def _break_energy_balance(*args) -> None:
    update_lake_temperature(*args)
    energy_after_J_per_m2 = args[-9]
    energy_after_J_per_m2[1] += 1.0e7


def test_energy_imbalance_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "laketherm.model.update_lake_temperature", _break_energy_balance
    )
    model, state, forcing = _setup()
    model.spinup(state, forcing)
    with pytest.raises(AssertionError, match="tolerance"):
        model.step(state, forcing)


def test_energy_imbalance_is_logged(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setattr(
        "laketherm.model.update_lake_temperature", _break_energy_balance
    )
    model, state, forcing = _setup(raise_on_energy_imbalance=False)
    model.spinup(state, forcing)
    with caplog.at_level(logging.ERROR):
        model.step(state, forcing)
    assert "column=1" in caplog.text


def test_timing_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    layout, state, forcing = build_idealized_lake(IdealizedLakeConfig(n_columns=1))
    model = LakeTemperature(LakeTemperatureConfig(), layout, timing=True)
    model.spinup(state, forcing)
    with caplog.at_level(logging.INFO, logger="laketherm"):
        model.step(state, forcing)
    assert "Lake temperature - Column kernel" in caplog.text
