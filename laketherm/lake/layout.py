"""Mapping between layer kinds and slots of the contiguous column arrays.

A lake column is stored as one contiguous array per variable, ordered from the top:

    [ snow slots | lake slots | soil slots ]

Snow slots are filled from the bottom up: with `n` active snow layers, the active snow
slots are `n_snow_max - n .. n_snow_max - 1`, and slot `n_snow_max - 1` is the snow
layer resting on the lake surface. The slots above the top active slot are inert.
"""

from __future__ import annotations

from dataclasses import dataclass

from numba import njit


@njit(cache=True, inline="always")
def snow_slot(snow_layer_index: int, n_snow_max: int) -> int:
    """Return the column slot of a snow layer.

    Args:
        snow_layer_index: Index into the snow arrays, 0 is the uppermost possible snow layer.
        n_snow_max: Maximum number of snow layers.

    Returns:
        Column slot.
    """
    return snow_layer_index


@njit(cache=True, inline="always")
def lake_slot(lake_layer_index: int, n_snow_max: int) -> int:
    """Return the column slot of a lake layer (0 is the surface layer)."""
    return n_snow_max + lake_layer_index


@njit(cache=True, inline="always")
def soil_slot(soil_layer_index: int, n_snow_max: int, n_lake: int) -> int:
    """Return the column slot of a soil or bedrock layer (0 is the top sediment layer)."""
    return n_snow_max + n_lake + soil_layer_index


@njit(cache=True, inline="always")
def top_slot(n_snow_layers: int, n_snow_max: int) -> int:
    """Return the uppermost active slot of a column with `n_snow_layers` snow layers."""
    return n_snow_max - n_snow_layers


@dataclass(frozen=True)
class ColumnLayout:
    """Static layer counts shared by all lake columns.

    Args:
        n_snow_max: Maximum number of resolved snow layers.
        n_lake: Number of lake water layers.
        n_soil: Number of soil layers including bedrock.
        n_soil_hydrologic: Number of sediment layers. Soil layers beyond this index are
            bedrock with a constant conductivity.
    """

    n_snow_max: int
    n_lake: int
    n_soil: int
    n_soil_hydrologic: int

    def __post_init__(self) -> None:
        """Validate the layer counts.

        Raises:
            ValueError: If a layer count is out of range.
        """
        if self.n_snow_max < 0:
            raise ValueError("n_snow_max must be >= 0")
        if self.n_lake < 1:
            raise ValueError("A lake column needs at least one lake layer")
        if self.n_soil < 1:
            raise ValueError("A lake column needs at least one soil layer")
        if not 0 <= self.n_soil_hydrologic <= self.n_soil:
            raise ValueError("n_soil_hydrologic must be between 0 and n_soil")

    @property
    def n_slots(self) -> int:
        """Total number of slots in the contiguous column arrays."""
        return self.n_snow_max + self.n_lake + self.n_soil

    def top_slot(self, n_snow_layers: int) -> int:
        """Return the uppermost active slot for a given number of snow layers.

        Raises:
            ValueError: If there are more snow layers than snow slots.
        """
        if not 0 <= n_snow_layers <= self.n_snow_max:
            raise ValueError(
                f"{n_snow_layers} snow layers do not fit in {self.n_snow_max} slots"
            )
        return top_slot(n_snow_layers, self.n_snow_max)
