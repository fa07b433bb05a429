"""Base class for all modules in laketherm."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import numpy as np


class Module(ABC):
    """Base class for all modules."""

    def __init__(self) -> None:
        """Initialize the module and its logger."""
        self.logger: logging.Logger = logging.getLogger(f"laketherm.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of the module. This method should be overridden by subclasses."""
        pass

    @abstractmethod
    def spinup(self, *args: Any, **kwargs: Any) -> None:
        """Perform any necessary spinup for the module. This method should be overridden by subclasses."""
        pass

    @abstractmethod
    def step(self, *args: Any, **kwargs: Any) -> Any:
        """Perform a single time step of the module. This method should be overridden by subclasses."""
        pass

    def report(self, local_variables: dict[str, Any]) -> None:
        """Log a summary of variables of the module at debug level.

        Array variables are summarized by their minimum, mean and maximum, other
        variables are logged as they are.

        Args:
            local_variables: A dictionary of variables to report, for example the result of locals().
        """
        if not self.logger.isEnabledFor(logging.DEBUG):
            return
        for key, value in local_variables.items():
            if isinstance(value, np.ndarray) and value.size > 0:
                self.logger.debug(
                    "%s.%s: min=%.6g mean=%.6g max=%.6g",
                    self.name,
                    key,
                    value.min(),
                    value.mean(),
                    value.max(),
                )
            elif np.isscalar(value):
                self.logger.debug("%s.%s: %s", self.name, key, value)
