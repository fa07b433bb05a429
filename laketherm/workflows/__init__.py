"""Workflow helpers used in laketherm."""

import logging
from time import time

import numpy as np

from laketherm.types import ArrayFloat

logger = logging.getLogger(__name__)


class TimingModule:
    """A timing module to measure the time taken for different parts of a workflow."""

    def __init__(self, name: str) -> None:
        """Initializes the TimingModule with a name and starts the timer.

        Args:
            name: The name of the timing module. Will be used when logging the timing results.
        """
        self.name = name
        self.times = [time()]
        self.split_names = []

    def finish_split(self, name: str) -> None:
        """Finish the split with the name given.

        Args:
            name: The name of the split. This is the name of the previous split.
        """
        self.times.append(time())
        self.split_names.append(name)

    def __str__(self) -> str:
        """Converts the timing information into a readable string for logging.

        Returns:
            A formatted string summarizing the time taken for each split and the total time.
        """
        messages = []
        for i in range(1, len(self.times)):
            time_difference = self.times[i] - self.times[i - 1]
            messages.append(f"{self.split_names[i - 1]}: {time_difference:.4f}s")

        total_time = self.times[-1] - self.times[0]
        messages.append(f"Total: {total_time:.4f}s")

        return f"{self.name} - {', '.join(messages)}"


def balance_check(
    name: str,
    how: str = "cellwise",
    influxes: list[ArrayFloat | np.floating] | tuple[ArrayFloat | np.floating] = (),
    outfluxes: list[ArrayFloat | np.floating] | tuple[ArrayFloat | np.floating] = (),
    prestorages: list[ArrayFloat | np.floating]
    | tuple[ArrayFloat | np.floating] = (),
    poststorages: list[ArrayFloat | np.floating]
    | tuple[ArrayFloat | np.floating] = (),
    tolerance: float = 1e-10,
    error_identifiers: dict | None = None,
    raise_on_error: bool = False,
) -> bool:
    """Check the balance of a system, usually for energy.

    Essentially checks that influxes + prestorages = outfluxes + poststorages,
    within a given tolerance.

    Args:
        name: Name of the balance check, used for logging.
        how: Method to use for balance check, either 'cellwise' or 'sum'.
        influxes: List of influx arrays.
        outfluxes: List of outflux arrays.
        prestorages: List of pre-storage arrays.
        poststorages: List of post-storage arrays.
        tolerance: tolerance for the balance check.
        error_identifiers: Dictionary of identifiers to help locate errors, e.g. {'column': column_array}.
            Can only be used with how='cellwise'.
            When an error is found, the values of these identifiers at the location of the maximum error are logged.
        raise_on_error: Whether to raise an error if the balance check fails.

    Returns:
        True if the balance check passes, False otherwise.

    Raises:
        ValueError: If NaN values are found in the balance calculation or `how` is unknown.
        AssertionError: If the balance check fails and raise_on_error is True.
    """
    if error_identifiers is None:
        error_identifiers = {}

    if how == "cellwise":
        inflow = np.add.reduce(influxes) if len(influxes) else 0.0
        outflow = np.add.reduce(outfluxes) if len(outfluxes) else 0.0
        prestorage = np.add.reduce(prestorages) if len(prestorages) else 0.0
        poststorage = np.add.reduce(poststorages) if len(poststorages) else 0.0

        balance = np.asarray(inflow - outflow + prestorage - poststorage)

        if np.isnan(balance).any():
            raise ValueError("Balance check failed, NaN values found.")

        if balance.size == 0:
            return True
        elif np.abs(balance).max() > tolerance:
            index = np.abs(balance).argmax()
            text = f"{balance.flat[index]} > tolerance {tolerance}, max imbalance at index {index}."

            if error_identifiers:
                text += " Error identifiers: " + ", ".join(
                    f"{key}={value[index]}" for key, value in error_identifiers.items()
                )
            if name:
                logger.error("%s %s", name, text)
            else:
                logger.error(text)
            if raise_on_error:
                raise AssertionError(text)
            return False
        else:
            return True

    elif how == "sum":
        assert not error_identifiers, (
            "Error identifiers not supported for 'sum' method."
        )
        income = 0.0
        out = 0.0
        store = 0.0
        for influx in influxes:
            income += np.sum(influx)
        for outflux in outfluxes:
            out += np.sum(outflux)
        for prestorage in prestorages:
            store += np.sum(prestorage)
        for poststorage in poststorages:
            store -= np.sum(poststorage)

        balance = abs(income + store - out)
        if np.isnan(balance):
            raise ValueError("Balance check failed, NaN values found.")
        if balance > tolerance:
            text = f"{balance} is larger than tolerance {tolerance}"
            if name:
                logger.error("%s %s", name, text)
            else:
                logger.error(text)
            if raise_on_error:
                raise AssertionError(text)
            return False
        else:
            return True
    else:
        raise ValueError(f"Method {how} not recognized.")
