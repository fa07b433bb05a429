"""Lake temperature module: runs the column kernels and checks the energy balance."""

from __future__ import annotations

import numpy as np

from laketherm.config_schema import LakeTemperatureConfig
from laketherm.lake.constants import L_FUSION_J_PER_KG
from laketherm.lake.layout import ColumnLayout
from laketherm.lake.state import LakeDiagnostics, LakeForcing, LakeState
from laketherm.lake.temperature import update_lake_temperature
from laketherm.module import Module
from laketherm.workflows import TimingModule, balance_check


class LakeTemperature(Module):
    """Temperature, ice and convective mixing of lake columns.

    Args:
        config: Configuration of the lake temperature scheme.
        layout: Layer counts of the lake columns.
        timing: Whether to log the time taken by the step.
    """

    def __init__(
        self,
        config: LakeTemperatureConfig,
        layout: ColumnLayout,
        timing: bool = False,
    ) -> None:
        self.config = config
        self.layout = layout
        self.timing = timing
        super().__init__()

    @property
    def name(self) -> str:
        """Name of the module."""
        return "lake_temperature"

    def spinup(self, state: LakeState, forcing: LakeForcing) -> None:
        """Validate the state and forcing before the first step.

        Raises:
            ValueError: If the state does not match the layout or violates a physical bound.
        """
        if state.layout != self.layout:
            raise ValueError(
                f"State layout {state.layout} does not match module layout {self.layout}"
            )
        state.validate()
        forcing.validate(self.layout, state.n_columns)
        self.logger.info(
            "Lake temperature initialized for %d lake columns (%d snow, %d lake, %d soil layers)",
            state.lake_columns().size,
            self.layout.n_snow_max,
            self.layout.n_lake,
            self.layout.n_soil,
        )

    def step(
        self,
        state: LakeState,
        forcing: LakeForcing,
        diagnostics: LakeDiagnostics | None = None,
    ) -> LakeDiagnostics:
        """Advance all lake columns by one timestep.

        The state and the flux arrays of the forcing are updated in-place. Small
        energy residuals are folded into the fluxes, larger ones fail the energy
        balance check.

        Args:
            state: State of the lake columns, updated in-place.
            forcing: Surface forcing. Its flux arrays are corrected in-place.
            diagnostics: Diagnostics to write into. Allocated when None.

        Returns:
            The diagnostics of this step.

        Raises:
            AssertionError: If the energy balance of a column cannot be closed and
                `raise_on_energy_imbalance` is set.
        """
        timer = TimingModule("Lake temperature")

        if diagnostics is None:
            diagnostics = LakeDiagnostics.allocate(self.layout, state.n_columns)

        lake_columns = state.lake_columns()
        config = self.config

        update_lake_temperature(
            lake_columns,
            np.float64(config.timestep_s),
            np.float64(config.crank_nicolson_factor),
            np.float64(config.visible_surface_absorption_fraction),
            np.float64(config.surface_absorption_depth_m),
            np.float64(config.minimum_brunt_vaisala_frequency_squared_s2),
            np.float64(config.deep_lake_depth_m),
            np.float64(config.deep_lake_mixing_factor),
            config.include_background_diffusivity,
            config.lake_puddling,
            np.float64(config.puddling_ice_thickness_m),
            np.float64(config.energy_balance_tolerance_W_per_m2),
            self.layout.n_soil_hydrologic,
            forcing.ground_heat_flux_W_per_m2,
            forcing.sensible_heat_flux_W_per_m2,
            forcing.ground_sensible_heat_flux_W_per_m2,
            forcing.soil_heat_flux_W_per_m2,
            forcing.ground_temperature_K,
            forcing.friction_velocity_m_per_s,
            forcing.turbulence_decay_coefficient_per_m,
            forcing.absorbed_solar_W_per_m2,
            forcing.absorbed_near_infrared_W_per_m2,
            forcing.absorbed_solar_per_layer_W_per_m2,
            state.n_snow_layers,
            state.snow_water_equivalent_kg_per_m2,
            state.snow_depth_m,
            state.lake_depth_m,
            state.extinction_coefficient_per_m,
            state.snow_temperature_K,
            state.snow_liquid_water_kg_per_m2,
            state.snow_ice_kg_per_m2,
            state.snow_layer_thickness_m,
            state.snow_node_depth_m,
            state.snow_interface_depth_m,
            state.lake_layer_thickness_m,
            state.lake_node_depth_m,
            state.lake_temperature_K,
            state.lake_ice_fraction,
            state.soil_layer_thickness_m,
            state.soil_node_depth_m,
            state.soil_interface_depth_m,
            state.soil_temperature_K,
            state.soil_liquid_water_kg_per_m2,
            state.soil_ice_kg_per_m2,
            state.porosity,
            state.thermal_conductivity_saturated_W_per_m_K,
            state.thermal_conductivity_minerals_W_per_m_K,
            state.thermal_conductivity_dry_W_per_m_K,
            state.solid_heat_capacity_J_per_m3_K,
            diagnostics.snow_phase_change_flag,
            diagnostics.snow_freezing_rate_kg_per_m2_s,
            diagnostics.snow_ice_fraction_old,
            diagnostics.lake_eddy_diffusivity_m2_per_s,
            diagnostics.energy_error_W_per_m2,
            diagnostics.energy_residual_W_per_m2,
            diagnostics.boundary_input_W_per_m2,
            diagnostics.energy_before_J_per_m2,
            diagnostics.energy_after_J_per_m2,
            diagnostics.top_eddy_conductivity_W_per_m_K,
            diagnostics.snow_melt_rate_kg_per_m2_s,
            diagnostics.snow_freezing_rate_column_kg_per_m2_s,
            diagnostics.latent_heat_absorbed_J_per_m2,
            diagnostics.column_heat_content_MJ_per_m2,
            diagnostics.soil_heat_content_MJ_per_m2,
            diagnostics.lake_ice_thickness_m,
            diagnostics.mixing_skipped,
        )
        timer.finish_split("Column kernel")

        diagnostics.snow_melt_heat_flux_W_per_m2[lake_columns] = (
            diagnostics.snow_melt_rate_kg_per_m2_s[lake_columns] * L_FUSION_J_PER_KG
        )
        diagnostics.ground_heat_flux_lake_W_per_m2[lake_columns] = (
            forcing.ground_heat_flux_W_per_m2[lake_columns]
        )

        residual = diagnostics.energy_residual_W_per_m2[lake_columns]
        reported = (diagnostics.energy_error_W_per_m2[lake_columns] == 0.0) & (
            np.abs(residual) > config.energy_balance_report_threshold_W_per_m2
        )
        for column, column_residual in zip(
            lake_columns[reported], residual[reported]
        ):
            self.logger.debug(
                "Energy residual incorporated into sensible heat: column %d, %.6f W/m2",
                column,
                column_residual,
            )

        balance_check(
            name="lake energy",
            how="cellwise",
            influxes=[
                diagnostics.boundary_input_W_per_m2[lake_columns] * config.timestep_s
            ],
            prestorages=[diagnostics.energy_before_J_per_m2[lake_columns]],
            poststorages=[diagnostics.energy_after_J_per_m2[lake_columns]],
            tolerance=config.energy_balance_tolerance_W_per_m2 * config.timestep_s,
            error_identifiers={"column": lake_columns},
            raise_on_error=config.raise_on_energy_imbalance,
        )
        timer.finish_split("Energy balance")

        if self.timing:
            self.logger.info(timer)

        self.report(
            {
                "lake_ice_thickness_m": diagnostics.lake_ice_thickness_m[lake_columns],
                "top_lake_temperature_K": state.lake_temperature_K[0, lake_columns],
                "energy_residual_W_per_m2": residual,
            }
        )
        return diagnostics
