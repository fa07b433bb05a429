"""Configuration schema for laketherm."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from laketherm.lake import constants


class LakeTemperatureConfig(BaseModel):
    """Configuration of the lake temperature scheme."""

    timestep_s: float = Field(3600.0, gt=0, description="Model timestep (s).")
    crank_nicolson_factor: float = Field(
        constants.CRANK_NICOLSON_FACTOR,
        ge=0,
        le=1,
        description="Weight of the old-temperature fluxes: 0 is fully implicit, 0.5 is Crank-Nicolson, 1 is fully explicit.",
    )
    visible_surface_absorption_fraction: float = Field(
        constants.VISIBLE_SURFACE_ABSORPTION_FRACTION,
        ge=0,
        le=1,
        description="Fraction of the visible solar radiation absorbed at the lake surface.",
    )
    surface_absorption_depth_m: float = Field(
        constants.SURFACE_ABSORPTION_DEPTH_M,
        ge=0,
        description="Depth of the surface zone of an open lake where solar radiation is not extinguished (m).",
    )
    minimum_brunt_vaisala_frequency_squared_s2: float = Field(
        constants.MINIMUM_BRUNT_VAISALA_FREQUENCY_S2,
        gt=0,
        description="Lower bound of the squared Brunt-Vaisala frequency in the background diffusivity (1/s2).",
    )
    deep_lake_depth_m: float = Field(
        constants.DEEP_LAKE_DEPTH_M,
        gt=0,
        description="Lakes at least this deep get an enhanced eddy diffusivity (m).",
    )
    deep_lake_mixing_factor: float = Field(
        constants.DEEP_LAKE_MIXING_FACTOR,
        gt=0,
        description="Enhancement factor of the eddy diffusivity of deep lakes.",
    )
    include_background_diffusivity: bool = Field(
        True,
        description="Whether to add the background eddy diffusivity. Under ice the deep lake enhancement also requires it, open water is always enhanced.",
    )
    lake_puddling: bool = Field(
        False,
        description="Whether to stop convective mixing once the lake holds enough ice.",
    )
    puddling_ice_thickness_m: float = Field(
        constants.PUDDLING_ICE_THICKNESS_M,
        gt=0,
        description="Water-equivalent ice thickness at which convective mixing stops when puddling is enabled (m).",
    )
    energy_balance_tolerance_W_per_m2: float = Field(
        constants.ENERGY_BALANCE_TOLERANCE_W_PER_M2,
        gt=0,
        description="Largest energy residual that is folded into the surface fluxes (W/m2).",
    )
    energy_balance_report_threshold_W_per_m2: float = Field(
        constants.ENERGY_BALANCE_REPORT_THRESHOLD_W_PER_M2,
        ge=0,
        description="Folded energy residuals larger than this are logged (W/m2).",
    )
    raise_on_energy_imbalance: bool = Field(
        True,
        description="Whether to raise an error when the energy balance cannot be closed.",
    )

    @model_validator(mode="after")
    def check_report_threshold(self) -> "LakeTemperatureConfig":
        """Check that the report threshold is below the tolerance.

        Returns:
            The validated configuration.

        Raises:
            ValueError: If the report threshold is not below the tolerance.
        """
        if (
            self.energy_balance_report_threshold_W_per_m2
            >= self.energy_balance_tolerance_W_per_m2
        ):
            raise ValueError(
                "energy_balance_report_threshold_W_per_m2 must be smaller than energy_balance_tolerance_W_per_m2"
            )
        return self


class IdealizedForcingConfig(BaseModel):
    """Constant forcing of an idealized lake."""

    ground_heat_flux_W_per_m2: float = Field(
        0.0, description="Net heat flux into the lake surface (W/m2)."
    )
    absorbed_solar_W_per_m2: float = Field(
        0.0, ge=0, description="Absorbed solar radiation (W/m2)."
    )
    near_infrared_fraction: float = Field(
        0.5,
        ge=0,
        le=1,
        description="Fraction of the absorbed solar radiation that is near-infrared.",
    )
    ground_temperature_K: float | None = Field(
        None,
        gt=0,
        description="Surface temperature (K). null uses the temperature of the top lake layer.",
    )
    friction_velocity_m_per_s: float = Field(
        0.01, ge=0, description="Surface friction velocity of the water (m/s)."
    )
    turbulence_decay_coefficient_per_m: float = Field(
        0.5, ge=0, description="Decay coefficient of turbulence with depth (1/m)."
    )


class IdealizedSoilConfig(BaseModel):
    """Homogeneous saturated sediment below an idealized lake."""

    layer_thickness_m: list[float] = Field(
        [0.1, 0.2, 0.4, 0.8, 1.6, 3.2],
        min_length=1,
        description="Thickness of each soil layer, from the top (m).",
    )
    n_hydrologic_layers: int | None = Field(
        None,
        ge=0,
        description="Number of sediment layers, deeper layers are bedrock. null means all layers are sediment.",
    )
    initial_temperature_K: float = Field(
        277.0, gt=0, description="Initial soil temperature (K)."
    )
    porosity: float = Field(0.4, gt=0, lt=1, description="Soil porosity.")
    thermal_conductivity_saturated_W_per_m_K: float = Field(
        2.0, gt=0, description="Conductivity of saturated unfrozen soil (W/m/K)."
    )
    thermal_conductivity_minerals_W_per_m_K: float = Field(
        3.0, gt=0, description="Conductivity of the soil minerals (W/m/K)."
    )
    thermal_conductivity_dry_W_per_m_K: float = Field(
        0.25, gt=0, description="Conductivity of dry soil (W/m/K)."
    )
    solid_heat_capacity_J_per_m3_K: float = Field(
        2.0e6, gt=0, description="Volumetric heat capacity of the soil solids (J/m3/K)."
    )

    @model_validator(mode="after")
    def check_hydrologic_layers(self) -> "IdealizedSoilConfig":
        """Check that there are not more sediment layers than soil layers.

        Returns:
            The validated configuration.

        Raises:
            ValueError: If n_hydrologic_layers exceeds the number of soil layers.
        """
        if (
            self.n_hydrologic_layers is not None
            and self.n_hydrologic_layers > len(self.layer_thickness_m)
        ):
            raise ValueError("n_hydrologic_layers exceeds the number of soil layers")
        return self


class IdealizedLakeConfig(BaseModel):
    """Configuration of an idealized set of identical lake columns."""

    n_columns: int = Field(1, ge=1, description="Number of lake columns.")
    n_snow_max: int = Field(5, ge=0, description="Maximum number of snow layers.")
    layer_thickness_m: list[float] = Field(
        [0.1, 1.0, 2.0, 3.0, 4.0, 5.0, 7.0, 7.0, 10.45, 10.45],
        min_length=1,
        description="Thickness of each lake layer, from the surface (m).",
    )
    initial_temperature_K: float = Field(
        277.0, gt=0, description="Initial lake temperature (K)."
    )
    initial_ice_fraction: float = Field(
        0.0, ge=0, le=1, description="Initial ice fraction of all lake layers."
    )
    snow_water_equivalent_kg_per_m2: float = Field(
        0.0,
        ge=0,
        description="Initial snow on the lake, too thin to form snow layers (kg/m2).",
    )
    snow_density_kg_per_m3: float = Field(
        250.0, gt=0, description="Density of the initial snow (kg/m3)."
    )
    extinction_coefficient_per_m: float = Field(
        -1.0,
        description="Light extinction coefficient (1/m). Values <= 0 derive it from the lake depth.",
    )
    n_steps: int = Field(24, ge=1, description="Number of timesteps to run.")
    forcing: IdealizedForcingConfig = Field(
        default_factory=IdealizedForcingConfig, description="Constant forcing."
    )
    soil: IdealizedSoilConfig = Field(
        default_factory=IdealizedSoilConfig, description="Sediment configuration."
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    logfile: str = Field("laketherm.log", description="Path of the log file.")
    loglevel: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Log level of the console handler."
    )
    timing: bool = Field(
        False, description="Whether to log the time taken by each stage of a step."
    )


class Config(BaseModel):
    """Main configuration."""

    lake: LakeTemperatureConfig = Field(
        default_factory=LakeTemperatureConfig,
        description="Lake temperature configuration.",
    )
    idealized: IdealizedLakeConfig = Field(
        default_factory=IdealizedLakeConfig,
        description="Idealized lake configuration.",
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration."
    )
