"""Containers for the state, forcing and diagnostics of lake columns.

Arrays with a layer dimension have shape (n_layers, n_columns), following the layer
order of `ColumnLayout`: snow slots from the top, lake layers from the surface and soil
layers from the sediment top. Per-column arrays have shape (n_columns,).
"""

from __future__ import annotations

from dataclasses import dataclass, fields

import numpy as np

from laketherm.types import (
    ArrayBool,
    ArrayFloat64,
    ArrayInt32,
    TwoDArrayFloat64,
    TwoDArrayInt32,
)

from .layout import ColumnLayout


def _check_shape(name: str, array: np.ndarray, expected: tuple[int, ...]) -> None:
    if array.shape != expected:
        raise ValueError(
            f"{name} has shape {array.shape}, expected {expected}"
        )


@dataclass
class LakeState:
    """Prognostic state and static properties of all columns."""

    layout: ColumnLayout
    is_lake: ArrayBool

    # snow
    n_snow_layers: ArrayInt32
    snow_water_equivalent_kg_per_m2: ArrayFloat64
    snow_depth_m: ArrayFloat64
    snow_temperature_K: TwoDArrayFloat64
    snow_liquid_water_kg_per_m2: TwoDArrayFloat64
    snow_ice_kg_per_m2: TwoDArrayFloat64
    snow_layer_thickness_m: TwoDArrayFloat64
    snow_node_depth_m: TwoDArrayFloat64  # negative above the lake surface
    snow_interface_depth_m: TwoDArrayFloat64

    # lake
    lake_depth_m: ArrayFloat64
    extinction_coefficient_per_m: ArrayFloat64  # <= 0: derived from depth
    lake_layer_thickness_m: TwoDArrayFloat64
    lake_node_depth_m: TwoDArrayFloat64
    lake_temperature_K: TwoDArrayFloat64
    lake_ice_fraction: TwoDArrayFloat64

    # soil and bedrock
    soil_layer_thickness_m: TwoDArrayFloat64
    soil_node_depth_m: TwoDArrayFloat64
    soil_interface_depth_m: TwoDArrayFloat64
    soil_temperature_K: TwoDArrayFloat64
    soil_liquid_water_kg_per_m2: TwoDArrayFloat64
    soil_ice_kg_per_m2: TwoDArrayFloat64
    porosity: TwoDArrayFloat64
    thermal_conductivity_saturated_W_per_m_K: TwoDArrayFloat64
    thermal_conductivity_minerals_W_per_m_K: TwoDArrayFloat64
    thermal_conductivity_dry_W_per_m_K: TwoDArrayFloat64
    solid_heat_capacity_J_per_m3_K: TwoDArrayFloat64

    @property
    def n_columns(self) -> int:
        """Number of columns, lakes and non-lakes."""
        return self.is_lake.size

    @classmethod
    def allocate(cls, layout: ColumnLayout, n_columns: int) -> LakeState:
        """Create a state of zeros for `n_columns` lake columns.

        Args:
            layout: Layer counts of the columns.
            n_columns: Number of columns.

        Returns:
            A state where every column is a lake without snow.
        """
        snow_shape = (layout.n_snow_max, n_columns)
        lake_shape = (layout.n_lake, n_columns)
        soil_shape = (layout.n_soil, n_columns)
        return cls(
            layout=layout,
            is_lake=np.ones(n_columns, dtype=bool),
            n_snow_layers=np.zeros(n_columns, dtype=np.int32),
            snow_water_equivalent_kg_per_m2=np.zeros(n_columns, dtype=np.float64),
            snow_depth_m=np.zeros(n_columns, dtype=np.float64),
            snow_temperature_K=np.zeros(snow_shape, dtype=np.float64),
            snow_liquid_water_kg_per_m2=np.zeros(snow_shape, dtype=np.float64),
            snow_ice_kg_per_m2=np.zeros(snow_shape, dtype=np.float64),
            snow_layer_thickness_m=np.zeros(snow_shape, dtype=np.float64),
            snow_node_depth_m=np.zeros(snow_shape, dtype=np.float64),
            snow_interface_depth_m=np.zeros(snow_shape, dtype=np.float64),
            lake_depth_m=np.zeros(n_columns, dtype=np.float64),
            extinction_coefficient_per_m=np.full(n_columns, -1.0, dtype=np.float64),
            lake_layer_thickness_m=np.zeros(lake_shape, dtype=np.float64),
            lake_node_depth_m=np.zeros(lake_shape, dtype=np.float64),
            lake_temperature_K=np.zeros(lake_shape, dtype=np.float64),
            lake_ice_fraction=np.zeros(lake_shape, dtype=np.float64),
            soil_layer_thickness_m=np.zeros(soil_shape, dtype=np.float64),
            soil_node_depth_m=np.zeros(soil_shape, dtype=np.float64),
            soil_interface_depth_m=np.zeros(soil_shape, dtype=np.float64),
            soil_temperature_K=np.zeros(soil_shape, dtype=np.float64),
            soil_liquid_water_kg_per_m2=np.zeros(soil_shape, dtype=np.float64),
            soil_ice_kg_per_m2=np.zeros(soil_shape, dtype=np.float64),
            porosity=np.zeros(soil_shape, dtype=np.float64),
            thermal_conductivity_saturated_W_per_m_K=np.zeros(
                soil_shape, dtype=np.float64
            ),
            thermal_conductivity_minerals_W_per_m_K=np.zeros(
                soil_shape, dtype=np.float64
            ),
            thermal_conductivity_dry_W_per_m_K=np.zeros(soil_shape, dtype=np.float64),
            solid_heat_capacity_J_per_m3_K=np.zeros(soil_shape, dtype=np.float64),
        )

    def lake_columns(self) -> ArrayInt32:
        """Indices of the columns that are lakes."""
        return np.flatnonzero(self.is_lake).astype(np.int32)

    def validate(self) -> None:
        """Check array shapes and the physical bounds of the state.

        Raises:
            ValueError: If an array has the wrong shape, a snow layer count does not fit
                the layout, an active snow layer has no thickness, an ice fraction
                is outside [0, 1], water masses are negative or node depths do not
                increase downward.
        """
        n_columns = self.n_columns
        expected_shapes = {
            "snow": (self.layout.n_snow_max, n_columns),
            "lake": (self.layout.n_lake, n_columns),
            "soil": (self.layout.n_soil, n_columns),
        }
        for field in fields(self):
            value = getattr(self, field.name)
            if not isinstance(value, np.ndarray):
                continue
            if value.ndim == 1:
                _check_shape(field.name, value, (n_columns,))
            else:
                kind = field.name.split("_")[0]
                if kind not in expected_shapes:
                    kind = "soil"
                _check_shape(field.name, value, expected_shapes[kind])

        columns = self.lake_columns()
        n_snow_layers = self.n_snow_layers[columns]
        if ((n_snow_layers < 0) | (n_snow_layers > self.layout.n_snow_max)).any():
            raise ValueError(
                f"Number of snow layers must be between 0 and {self.layout.n_snow_max}"
            )

        for column in columns[n_snow_layers > 0]:
            first_slot = self.layout.top_slot(int(self.n_snow_layers[column]))
            if (self.snow_layer_thickness_m[first_slot:, column] <= 0.0).any():
                raise ValueError("Snow layer thickness must be > 0")
            if (np.diff(self.snow_node_depth_m[first_slot:, column]) <= 0.0).any():
                raise ValueError("Snow node depths must increase downward")

        ice_fraction = self.lake_ice_fraction[:, columns]
        if ((ice_fraction < 0.0) | (ice_fraction > 1.0)).any():
            raise ValueError("Lake ice fraction must be between 0 and 1")

        for name in (
            "soil_liquid_water_kg_per_m2",
            "soil_ice_kg_per_m2",
            "snow_liquid_water_kg_per_m2",
            "snow_ice_kg_per_m2",
        ):
            if (getattr(self, name)[:, columns] < 0.0).any():
                raise ValueError(f"{name} must be >= 0")

        if self.layout.n_lake > 1 and (
            np.diff(self.lake_node_depth_m[:, columns], axis=0) <= 0.0
        ).any():
            raise ValueError("Lake node depths must increase downward")
        if self.layout.n_soil > 1 and (
            np.diff(self.soil_node_depth_m[:, columns], axis=0) <= 0.0
        ).any():
            raise ValueError("Soil node depths must increase downward")


@dataclass
class LakeForcing:
    """Surface fluxes and atmospheric state from the surface flux scheme.

    The flux arrays are corrected in-place when small energy residuals are folded in.
    """

    ground_heat_flux_W_per_m2: ArrayFloat64
    sensible_heat_flux_W_per_m2: ArrayFloat64
    ground_sensible_heat_flux_W_per_m2: ArrayFloat64
    soil_heat_flux_W_per_m2: ArrayFloat64
    ground_temperature_K: ArrayFloat64
    friction_velocity_m_per_s: ArrayFloat64
    turbulence_decay_coefficient_per_m: ArrayFloat64
    absorbed_solar_W_per_m2: ArrayFloat64
    absorbed_near_infrared_W_per_m2: ArrayFloat64
    # shape (n_snow_max + 1, n_columns); the last row is the lake surface
    absorbed_solar_per_layer_W_per_m2: TwoDArrayFloat64

    @classmethod
    def allocate(cls, layout: ColumnLayout, n_columns: int) -> LakeForcing:
        """Create forcing of zeros for `n_columns` columns."""
        return cls(
            ground_heat_flux_W_per_m2=np.zeros(n_columns, dtype=np.float64),
            sensible_heat_flux_W_per_m2=np.zeros(n_columns, dtype=np.float64),
            ground_sensible_heat_flux_W_per_m2=np.zeros(n_columns, dtype=np.float64),
            soil_heat_flux_W_per_m2=np.zeros(n_columns, dtype=np.float64),
            ground_temperature_K=np.zeros(n_columns, dtype=np.float64),
            friction_velocity_m_per_s=np.zeros(n_columns, dtype=np.float64),
            turbulence_decay_coefficient_per_m=np.zeros(n_columns, dtype=np.float64),
            absorbed_solar_W_per_m2=np.zeros(n_columns, dtype=np.float64),
            absorbed_near_infrared_W_per_m2=np.zeros(n_columns, dtype=np.float64),
            absorbed_solar_per_layer_W_per_m2=np.zeros(
                (layout.n_snow_max + 1, n_columns), dtype=np.float64
            ),
        )

    def validate(self, layout: ColumnLayout, n_columns: int) -> None:
        """Check the array shapes.

        Raises:
            ValueError: If an array has the wrong shape.
        """
        for field in fields(self):
            value = getattr(self, field.name)
            if field.name == "absorbed_solar_per_layer_W_per_m2":
                _check_shape(field.name, value, (layout.n_snow_max + 1, n_columns))
            else:
                _check_shape(field.name, value, (n_columns,))


@dataclass
class LakeDiagnostics:
    """Diagnostics written by one lake temperature step."""

    energy_error_W_per_m2: ArrayFloat64
    energy_residual_W_per_m2: ArrayFloat64
    boundary_input_W_per_m2: ArrayFloat64
    energy_before_J_per_m2: ArrayFloat64
    energy_after_J_per_m2: ArrayFloat64
    top_eddy_conductivity_W_per_m_K: ArrayFloat64
    snow_melt_rate_kg_per_m2_s: ArrayFloat64
    snow_melt_heat_flux_W_per_m2: ArrayFloat64
    snow_freezing_rate_column_kg_per_m2_s: ArrayFloat64
    latent_heat_absorbed_J_per_m2: ArrayFloat64
    column_heat_content_MJ_per_m2: ArrayFloat64
    soil_heat_content_MJ_per_m2: ArrayFloat64
    lake_ice_thickness_m: ArrayFloat64
    ground_heat_flux_lake_W_per_m2: ArrayFloat64
    mixing_skipped: ArrayBool
    snow_phase_change_flag: TwoDArrayInt32
    snow_freezing_rate_kg_per_m2_s: TwoDArrayFloat64
    snow_ice_fraction_old: TwoDArrayFloat64
    lake_eddy_diffusivity_m2_per_s: TwoDArrayFloat64

    @classmethod
    def allocate(cls, layout: ColumnLayout, n_columns: int) -> LakeDiagnostics:
        """Create zeroed diagnostics for `n_columns` columns."""
        per_column = {
            field.name: np.zeros(n_columns, dtype=np.float64)
            for field in fields(cls)
            if field.name
            not in (
                "mixing_skipped",
                "snow_phase_change_flag",
                "snow_freezing_rate_kg_per_m2_s",
                "snow_ice_fraction_old",
                "lake_eddy_diffusivity_m2_per_s",
            )
        }
        return cls(
            **per_column,
            mixing_skipped=np.zeros(n_columns, dtype=bool),
            snow_phase_change_flag=np.zeros(
                (layout.n_snow_max, n_columns), dtype=np.int32
            ),
            snow_freezing_rate_kg_per_m2_s=np.zeros(
                (layout.n_snow_max, n_columns), dtype=np.float64
            ),
            snow_ice_fraction_old=np.zeros(
                (layout.n_snow_max, n_columns), dtype=np.float64
            ),
            lake_eddy_diffusivity_m2_per_s=np.zeros(
                (layout.n_lake, n_columns), dtype=np.float64
            ),
        )
