"""Tests for the balance check and the timing module."""

import logging

import numpy as np
import pytest

from laketherm.workflows import TimingModule, balance_check


def test_balance_check_cellwise_passes() -> None:
    """Inflow plus storage change that adds up passes the check."""
    assert balance_check(
        name="test",
        how="cellwise",
        influxes=[np.array([1.0, 2.0])],
        outfluxes=[np.array([0.5, 0.5])],
        prestorages=[np.array([10.0, 10.0])],
        poststorages=[np.array([10.5, 11.5])],
        tolerance=1e-10,
    )


def test_balance_check_cellwise_fails(caplog: pytest.LogCaptureFixture) -> None:
    """An imbalance is logged with the identifiers of the worst cell."""
    with caplog.at_level(logging.ERROR, logger="laketherm.workflows"):
        result = balance_check(
            name="energy",
            how="cellwise",
            influxes=[np.array([1.0, 1.0, 1.0])],
            prestorages=[np.array([0.0, 0.0, 0.0])],
            poststorages=[np.array([1.0, 3.0, 1.0])],
            tolerance=0.1,
            error_identifiers={"column": np.array([7, 8, 9])},
        )
    assert not result
    assert "column=8" in caplog.text


def test_balance_check_raises() -> None:
    """With raise_on_error an imbalance raises an AssertionError."""
    with pytest.raises(AssertionError):
        balance_check(
            name="energy",
            influxes=[np.array([1.0])],
            poststorages=[np.array([2.0])],
            tolerance=0.1,
            raise_on_error=True,
        )


def test_balance_check_nan() -> None:
    """NaN values in the balance are an error."""
    with pytest.raises(ValueError):
        balance_check(name="energy", influxes=[np.array([np.nan])], tolerance=0.1)


def test_balance_check_sum() -> None:
    """The sum method checks the totals, not the individual cells."""
    assert balance_check(
        name="energy",
        how="sum",
        influxes=[np.array([1.0, 0.0])],
        poststorages=[np.array([0.0, 1.0])],
        tolerance=1e-10,
    )
    assert not balance_check(
        name="energy",
        how="sum",
        influxes=[np.array([1.0, 0.0])],
        poststorages=[np.array([0.0, 2.0])],
        tolerance=1e-10,
    )


def test_balance_check_unknown_method() -> None:
    """An unknown method raises a ValueError."""
    with pytest.raises(ValueError):
        balance_check(name="energy", how="median")


def test_timing_module() -> None:
    """The timing summary names every split and the total."""
    timer = TimingModule("Lake temperature")
    timer.finish_split("Column kernel")
    timer.finish_split("Energy balance")
    text = str(timer)
    assert text.startswith("Lake temperature - ")
    assert "Column kernel:" in text
    assert "Energy balance:" in text
    assert "Total:" in text
