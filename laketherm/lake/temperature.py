"""Temperature of the snow, water and sediment layers of lake columns.

One timestep of a column runs through these stages:

1. thermal properties of snow, lake and soil layers;
2. eddy diffusivity of the water and the absorbed solar radiation per layer;
3. assembly of the layers into one column and a Crank-Nicolson diffusion step;
4. freezing and thawing;
5. convective mixing of unstable water;
6. thermal properties of the new state and closure of the energy budget.

All arrays with a layer dimension have shape (n_layers, n_columns).
"""

import numpy as np
from numba import njit, prange

from laketherm.types import (
    ArrayBool,
    ArrayFloat64,
    ArrayInt32,
    TwoDArrayFloat64,
    TwoDArrayInt32,
)

from .column import assemble_column, scatter_column_temperature
from .constants import L_FUSION_J_PER_KG
from .diffusivity import get_lake_eddy_diffusivity, is_surface_open
from .energy import (
    fold_energy_residual,
    get_column_energy_content,
    get_heat_contents,
    get_lake_ice_thickness,
)
from .layout import top_slot
from .mixing import mix_unstable_layers
from .phase_change import get_lake_phase_change, get_layer_phase_change, melt_thin_snow
from .radiation import get_radiative_source
from .solver import solve_heat_diffusion
from .thermal_properties import (
    get_lake_heat_capacities,
    get_snow_and_soil_thermal_properties,
    get_snow_ice_fraction,
)


@njit(cache=True)
def update_lake_column_temperature(
    timestep_s: np.float64,
    crank_nicolson_factor: np.float64,
    visible_surface_absorption_fraction: np.float64,
    surface_absorption_depth_m: np.float64,
    minimum_brunt_vaisala_frequency_squared_s2: np.float64,
    deep_lake_depth_m: np.float64,
    deep_lake_mixing_factor: np.float64,
    include_background_diffusivity: bool,
    lake_puddling: bool,
    puddling_ice_thickness_m: np.float64,
    energy_balance_tolerance_W_per_m2: np.float64,
    n_soil_hydrologic: int,
    ground_heat_flux_W_per_m2: np.float64,
    sensible_heat_flux_W_per_m2: np.float64,
    ground_sensible_heat_flux_W_per_m2: np.float64,
    soil_heat_flux_W_per_m2: np.float64,
    ground_temperature_K: np.float64,
    friction_velocity_m_per_s: np.float64,
    turbulence_decay_coefficient_per_m: np.float64,
    absorbed_solar_W_per_m2: np.float64,
    absorbed_near_infrared_W_per_m2: np.float64,
    absorbed_solar_per_layer_W_per_m2: ArrayFloat64,
    n_snow_layers: int,
    snow_water_equivalent_kg_per_m2: np.float64,
    snow_depth_m: np.float64,
    lake_depth_m: np.float64,
    extinction_coefficient_per_m: np.float64,
    snow_temperature_K: ArrayFloat64,
    snow_liquid_water_kg_per_m2: ArrayFloat64,
    snow_ice_kg_per_m2: ArrayFloat64,
    snow_layer_thickness_m: ArrayFloat64,
    snow_node_depth_m: ArrayFloat64,
    snow_interface_depth_m: ArrayFloat64,
    lake_layer_thickness_m: ArrayFloat64,
    lake_node_depth_m: ArrayFloat64,
    lake_temperature_K: ArrayFloat64,
    lake_ice_fraction: ArrayFloat64,
    soil_layer_thickness_m: ArrayFloat64,
    soil_node_depth_m: ArrayFloat64,
    soil_interface_depth_m: ArrayFloat64,
    soil_temperature_K: ArrayFloat64,
    soil_liquid_water_kg_per_m2: ArrayFloat64,
    soil_ice_kg_per_m2: ArrayFloat64,
    porosity: ArrayFloat64,
    thermal_conductivity_saturated_W_per_m_K: ArrayFloat64,
    thermal_conductivity_minerals_W_per_m_K: ArrayFloat64,
    thermal_conductivity_dry_W_per_m_K: ArrayFloat64,
    solid_heat_capacity_J_per_m3_K: ArrayFloat64,
    snow_phase_change_flag: ArrayInt32,
    snow_freezing_rate_kg_per_m2_s: ArrayFloat64,
    snow_ice_fraction_old: ArrayFloat64,
    lake_eddy_diffusivity_m2_per_s: ArrayFloat64,
) -> tuple[
    np.float64,
    np.float64,
    np.float64,
    np.float64,
    np.float64,
    np.float64,
    np.float64,
    np.float64,
    np.float64,
    np.float64,
    np.float64,
    np.float64,
    np.float64,
    np.float64,
    np.float64,
    np.float64,
    np.float64,
    np.float64,
    bool,
]:
    """Advance the temperature and phase of one lake column by one timestep.

    The layer arrays are updated in-place. Scalars that change are returned.

    Args:
        timestep_s: Timestep [s].
        crank_nicolson_factor: Weight of the old-temperature fluxes [0-1].
        visible_surface_absorption_fraction: Share of visible radiation absorbed at the surface [0-1].
        surface_absorption_depth_m: Depth of the surface zone without light extinction [m].
        minimum_brunt_vaisala_frequency_squared_s2: Lower bound of N2 in the background diffusivity [1/s2].
        deep_lake_depth_m: Lakes at least this deep get enhanced mixing [m].
        deep_lake_mixing_factor: Enhancement factor for deep lakes [-].
        include_background_diffusivity: Add background diffusion, also enables the deep lake enhancement under ice.
        lake_puddling: Skip convective mixing once the lake holds enough ice.
        puddling_ice_thickness_m: Ice thickness at which mixing stops [m].
        energy_balance_tolerance_W_per_m2: Largest energy residual folded into the fluxes [W/m2].
        n_soil_hydrologic: Number of sediment layers, deeper layers are bedrock.
        ground_heat_flux_W_per_m2: Net heat flux into the column surface [W/m2].
        sensible_heat_flux_W_per_m2: Total sensible heat flux [W/m2].
        ground_sensible_heat_flux_W_per_m2: Sensible heat flux from the ground [W/m2].
        soil_heat_flux_W_per_m2: Heat flux into the ground [W/m2].
        ground_temperature_K: Surface temperature [K].
        friction_velocity_m_per_s: Surface friction velocity of the water [m/s].
        turbulence_decay_coefficient_per_m: Decay of turbulence with depth [1/m].
        absorbed_solar_W_per_m2: Absorbed solar radiation [W/m2].
        absorbed_near_infrared_W_per_m2: Absorbed near-infrared radiation [W/m2].
        absorbed_solar_per_layer_W_per_m2: Absorbed solar radiation per snow slot and the lake surface [W/m2].
        n_snow_layers: Number of active snow layers.
        snow_water_equivalent_kg_per_m2: Snow water equivalent [kg/m2].
        snow_depth_m: Snow depth [m].
        lake_depth_m: Lake depth [m].
        extinction_coefficient_per_m: Light extinction coefficient, <= 0 to derive it from depth.
        snow_temperature_K: Snow temperatures [K].
        snow_liquid_water_kg_per_m2: Snow liquid water [kg/m2].
        snow_ice_kg_per_m2: Snow ice [kg/m2].
        snow_layer_thickness_m: Snow layer thickness [m].
        snow_node_depth_m: Snow node depths, negative [m].
        snow_interface_depth_m: Depth of the interface below each snow node [m].
        lake_layer_thickness_m: Lake layer thickness [m].
        lake_node_depth_m: Lake node depths [m].
        lake_temperature_K: Lake temperatures [K].
        lake_ice_fraction: Lake ice fractions [0-1].
        soil_layer_thickness_m: Soil layer thickness [m].
        soil_node_depth_m: Soil node depths below the sediment top [m].
        soil_interface_depth_m: Depth of the interface below each soil node [m].
        soil_temperature_K: Soil temperatures [K].
        soil_liquid_water_kg_per_m2: Soil liquid water [kg/m2].
        soil_ice_kg_per_m2: Soil ice [kg/m2].
        porosity: Soil porosity [-].
        thermal_conductivity_saturated_W_per_m_K: Saturated soil conductivity.
        thermal_conductivity_minerals_W_per_m_K: Mineral conductivity.
        thermal_conductivity_dry_W_per_m_K: Dry soil conductivity.
        solid_heat_capacity_J_per_m3_K: Volumetric heat capacity of soil solids.
        snow_phase_change_flag: Output, 0 none, 1 melting, 2 freezing per snow slot.
        snow_freezing_rate_kg_per_m2_s: Output, freezing rate per snow slot [kg/m2/s].
        snow_ice_fraction_old: Output, ice fraction of each active snow layer at the start of the step.
        lake_eddy_diffusivity_m2_per_s: Output, diffusivity per lake layer [m2/s].

    Returns:
        snow_water_equivalent_kg_per_m2: Updated snow water equivalent [kg/m2].
        snow_depth_m: Updated snow depth [m].
        ground_heat_flux_W_per_m2: Corrected net ground heat flux [W/m2].
        sensible_heat_flux_W_per_m2: Corrected total sensible heat flux [W/m2].
        ground_sensible_heat_flux_W_per_m2: Corrected ground sensible heat flux [W/m2].
        soil_heat_flux_W_per_m2: Corrected heat flux into the ground [W/m2].
        energy_error_W_per_m2: Energy error left after folding, 0 when folded [W/m2].
        energy_residual_W_per_m2: Energy error before folding [W/m2].
        boundary_input_W_per_m2: Total energy input at the boundaries [W/m2].
        energy_before_J_per_m2: Energy content at the start of the step [J/m2].
        energy_after_J_per_m2: Energy content at the end of the step [J/m2].
        top_eddy_conductivity_W_per_m_K: Eddy conductivity of the top lake layer.
        snow_melt_rate_kg_per_m2_s: Snow melt rate [kg/m2/s].
        snow_freezing_rate_column_kg_per_m2_s: Freezing rate summed over snow layers [kg/m2/s].
        latent_heat_absorbed_J_per_m2: Latent heat absorbed by phase change [J/m2].
        column_heat_content_MJ_per_m2: Heat content of the column [MJ/m2].
        soil_heat_content_MJ_per_m2: Heat content of the soil [MJ/m2].
        lake_ice_thickness_m: Thickness of the lake ice [m].
        mixing_skipped: Whether convective mixing was skipped due to puddling.
    """
    n_snow_max = snow_temperature_K.size
    n_lake = lake_temperature_K.size
    n_soil = soil_temperature_K.size
    n_slots = n_snow_max + n_lake + n_soil
    first_slot = top_slot(n_snow_layers, n_snow_max)

    snow_phase_change_flag[:] = 0
    snow_freezing_rate_kg_per_m2_s[:] = np.float64(0.0)

    # 1. thermal properties
    get_snow_ice_fraction(
        n_snow_layers, snow_liquid_water_kg_per_m2, snow_ice_kg_per_m2, snow_ice_fraction_old
    )

    lake_heat_capacity_J_per_m2_K = np.empty(n_lake, dtype=np.float64)
    get_lake_heat_capacities(
        lake_layer_thickness_m, lake_ice_fraction, lake_heat_capacity_J_per_m2_K
    )

    snow_thermal_conductivity_W_per_m_K = np.zeros(n_snow_max, dtype=np.float64)
    snow_heat_capacity_J_per_m2_K = np.zeros(n_snow_max, dtype=np.float64)
    soil_thermal_conductivity_W_per_m_K = np.zeros(n_soil, dtype=np.float64)
    soil_heat_capacity_J_per_m2_K = np.zeros(n_soil, dtype=np.float64)
    top_soil_thermal_conductivity_W_per_m_K = get_snow_and_soil_thermal_properties(
        n_snow_layers,
        n_soil_hydrologic,
        snow_temperature_K,
        snow_liquid_water_kg_per_m2,
        snow_ice_kg_per_m2,
        snow_layer_thickness_m,
        snow_node_depth_m,
        snow_interface_depth_m,
        soil_temperature_K,
        soil_liquid_water_kg_per_m2,
        soil_ice_kg_per_m2,
        soil_layer_thickness_m,
        soil_node_depth_m,
        soil_interface_depth_m,
        porosity,
        thermal_conductivity_saturated_W_per_m_K,
        thermal_conductivity_minerals_W_per_m_K,
        thermal_conductivity_dry_W_per_m_K,
        solid_heat_capacity_J_per_m3_K,
        snow_thermal_conductivity_W_per_m_K,
        snow_heat_capacity_J_per_m2_K,
        soil_thermal_conductivity_W_per_m_K,
        soil_heat_capacity_J_per_m2_K,
    )

    # 2. diffusivity and radiation
    surface_is_open = is_surface_open(
        ground_temperature_K, lake_temperature_K[0], n_snow_layers
    )
    lake_thermal_conductivity_W_per_m_K = np.empty(n_lake, dtype=np.float64)
    top_eddy_conductivity_W_per_m_K = get_lake_eddy_diffusivity(
        lake_temperature_K,
        lake_ice_fraction,
        lake_node_depth_m,
        lake_depth_m,
        ground_temperature_K,
        n_snow_layers,
        friction_velocity_m_per_s,
        turbulence_decay_coefficient_per_m,
        include_background_diffusivity,
        minimum_brunt_vaisala_frequency_squared_s2,
        deep_lake_depth_m,
        deep_lake_mixing_factor,
        lake_eddy_diffusivity_m2_per_s,
        lake_thermal_conductivity_W_per_m_K,
    )

    lake_radiative_source_W_per_m2 = np.zeros(n_lake, dtype=np.float64)
    snow_radiative_source_W_per_m2 = np.zeros(n_snow_max, dtype=np.float64)
    sediment_radiative_source_W_per_m2 = get_radiative_source(
        surface_is_open,
        n_snow_layers,
        absorbed_solar_W_per_m2,
        absorbed_near_infrared_W_per_m2,
        absorbed_solar_per_layer_W_per_m2,
        lake_layer_thickness_m,
        lake_node_depth_m,
        lake_depth_m,
        extinction_coefficient_per_m,
        visible_surface_absorption_fraction,
        surface_absorption_depth_m,
        lake_radiative_source_W_per_m2,
        snow_radiative_source_W_per_m2,
    )

    energy_before_J_per_m2 = get_column_energy_content(
        n_snow_layers,
        snow_water_equivalent_kg_per_m2,
        lake_layer_thickness_m,
        lake_temperature_K,
        lake_ice_fraction,
        lake_heat_capacity_J_per_m2_K,
        snow_temperature_K,
        snow_liquid_water_kg_per_m2,
        snow_heat_capacity_J_per_m2_K,
        soil_temperature_K,
        soil_liquid_water_kg_per_m2,
        soil_heat_capacity_J_per_m2_K,
    )

    # 3. assemble and solve
    node_depth_m = np.zeros(n_slots, dtype=np.float64)
    heat_capacity_J_per_m2_K = np.ones(n_slots, dtype=np.float64)
    radiative_source_W_per_m2 = np.zeros(n_slots, dtype=np.float64)
    temperature_K = np.zeros(n_slots, dtype=np.float64)
    interface_conductivity_W_per_m_K = np.zeros(n_slots, dtype=np.float64)
    assemble_column(
        n_snow_layers,
        snow_temperature_K,
        snow_node_depth_m,
        snow_heat_capacity_J_per_m2_K,
        snow_thermal_conductivity_W_per_m_K,
        snow_radiative_source_W_per_m2,
        lake_temperature_K,
        lake_layer_thickness_m,
        lake_node_depth_m,
        lake_heat_capacity_J_per_m2_K,
        lake_thermal_conductivity_W_per_m_K,
        lake_radiative_source_W_per_m2,
        soil_temperature_K,
        soil_node_depth_m,
        soil_heat_capacity_J_per_m2_K,
        soil_thermal_conductivity_W_per_m_K,
        top_soil_thermal_conductivity_W_per_m_K,
        sediment_radiative_source_W_per_m2,
        node_depth_m,
        heat_capacity_J_per_m2_K,
        radiative_source_W_per_m2,
        temperature_K,
        interface_conductivity_W_per_m_K,
    )
    solve_heat_diffusion(
        first_slot,
        timestep_s,
        crank_nicolson_factor,
        ground_heat_flux_W_per_m2,
        node_depth_m,
        heat_capacity_J_per_m2_K,
        radiative_source_W_per_m2,
        temperature_K,
        interface_conductivity_W_per_m_K,
    )
    scatter_column_temperature(
        n_snow_layers,
        temperature_K,
        snow_temperature_K,
        lake_temperature_K,
        soil_temperature_K,
    )

    # 4. phase change
    snow_melt_kg_per_m2 = np.float64(0.0)
    latent_heat_absorbed_J_per_m2 = np.float64(0.0)
    if n_snow_layers == 0:
        (
            new_snow_water_equivalent_kg_per_m2,
            snow_depth_m,
            top_lake_temperature_K,
            thin_snow_melt_rate_kg_per_m2_s,
        ) = melt_thin_snow(
            timestep_s,
            snow_water_equivalent_kg_per_m2,
            snow_depth_m,
            lake_temperature_K[0],
            lake_heat_capacity_J_per_m2_K[0],
        )
        lake_temperature_K[0] = top_lake_temperature_K
        thin_snow_melt_kg_per_m2 = thin_snow_melt_rate_kg_per_m2_s * timestep_s
        snow_melt_kg_per_m2 += thin_snow_melt_kg_per_m2
        latent_heat_absorbed_J_per_m2 += thin_snow_melt_kg_per_m2 * L_FUSION_J_PER_KG
        snow_water_equivalent_kg_per_m2 = new_snow_water_equivalent_kg_per_m2

    latent_heat_absorbed_J_per_m2 += get_lake_phase_change(
        lake_layer_thickness_m,
        lake_temperature_K,
        lake_ice_fraction,
        lake_heat_capacity_J_per_m2_K,
    )

    latent_heat_snow_J_per_m2, layered_snow_melt_kg_per_m2 = get_layer_phase_change(
        first_slot,
        snow_temperature_K,
        snow_liquid_water_kg_per_m2,
        snow_ice_kg_per_m2,
        snow_heat_capacity_J_per_m2_K,
        snow_phase_change_flag,
        snow_freezing_rate_kg_per_m2_s,
        timestep_s,
    )
    latent_heat_absorbed_J_per_m2 += latent_heat_snow_J_per_m2
    snow_melt_kg_per_m2 += layered_snow_melt_kg_per_m2

    soil_phase_change_flag = np.zeros(n_soil, dtype=np.int32)
    soil_freezing_rate_kg_per_m2_s = np.zeros(n_soil, dtype=np.float64)
    latent_heat_soil_J_per_m2, _ = get_layer_phase_change(
        0,
        soil_temperature_K,
        soil_liquid_water_kg_per_m2,
        soil_ice_kg_per_m2,
        soil_heat_capacity_J_per_m2_K,
        soil_phase_change_flag,
        soil_freezing_rate_kg_per_m2_s,
        timestep_s,
    )
    latent_heat_absorbed_J_per_m2 += latent_heat_soil_J_per_m2

    snow_freezing_rate_column_kg_per_m2_s = np.float64(0.0)
    for layer_idx in range(n_snow_max):
        snow_freezing_rate_column_kg_per_m2_s += snow_freezing_rate_kg_per_m2_s[
            layer_idx
        ]

    # 5. convective mixing
    mixing_skipped = mix_unstable_layers(
        lake_layer_thickness_m,
        lake_temperature_K,
        lake_ice_fraction,
        lake_puddling,
        puddling_ice_thickness_m,
    )

    # 6. new thermal properties and energy closure
    get_lake_heat_capacities(
        lake_layer_thickness_m, lake_ice_fraction, lake_heat_capacity_J_per_m2_K
    )
    get_snow_and_soil_thermal_properties(
        n_snow_layers,
        n_soil_hydrologic,
        snow_temperature_K,
        snow_liquid_water_kg_per_m2,
        snow_ice_kg_per_m2,
        snow_layer_thickness_m,
        snow_node_depth_m,
        snow_interface_depth_m,
        soil_temperature_K,
        soil_liquid_water_kg_per_m2,
        soil_ice_kg_per_m2,
        soil_layer_thickness_m,
        soil_node_depth_m,
        soil_interface_depth_m,
        porosity,
        thermal_conductivity_saturated_W_per_m_K,
        thermal_conductivity_minerals_W_per_m_K,
        thermal_conductivity_dry_W_per_m_K,
        solid_heat_capacity_J_per_m3_K,
        snow_thermal_conductivity_W_per_m_K,
        snow_heat_capacity_J_per_m2_K,
        soil_thermal_conductivity_W_per_m_K,
        soil_heat_capacity_J_per_m2_K,
    )

    energy_after_J_per_m2 = get_column_energy_content(
        n_snow_layers,
        snow_water_equivalent_kg_per_m2,
        lake_layer_thickness_m,
        lake_temperature_K,
        lake_ice_fraction,
        lake_heat_capacity_J_per_m2_K,
        snow_temperature_K,
        snow_liquid_water_kg_per_m2,
        snow_heat_capacity_J_per_m2_K,
        soil_temperature_K,
        soil_liquid_water_kg_per_m2,
        soil_heat_capacity_J_per_m2_K,
    )

    boundary_input_W_per_m2 = (
        ground_heat_flux_W_per_m2
        + lake_radiative_source_W_per_m2.sum()
        + snow_radiative_source_W_per_m2.sum()
        + sediment_radiative_source_W_per_m2
    )
    energy_residual_W_per_m2 = (
        energy_after_J_per_m2 - energy_before_J_per_m2
    ) / timestep_s - boundary_input_W_per_m2

    (
        energy_error_W_per_m2,
        sensible_heat_flux_W_per_m2,
        ground_sensible_heat_flux_W_per_m2,
        soil_heat_flux_W_per_m2,
        ground_heat_flux_W_per_m2,
        _,
    ) = fold_energy_residual(
        energy_residual_W_per_m2,
        energy_balance_tolerance_W_per_m2,
        sensible_heat_flux_W_per_m2,
        ground_sensible_heat_flux_W_per_m2,
        soil_heat_flux_W_per_m2,
        ground_heat_flux_W_per_m2,
    )

    column_heat_content_MJ_per_m2, soil_heat_content_MJ_per_m2 = get_heat_contents(
        n_snow_layers,
        lake_temperature_K,
        lake_heat_capacity_J_per_m2_K,
        snow_temperature_K,
        snow_heat_capacity_J_per_m2_K,
        soil_temperature_K,
        soil_heat_capacity_J_per_m2_K,
    )

    lake_ice_thickness_m = get_lake_ice_thickness(
        lake_layer_thickness_m, lake_ice_fraction
    )

    return (
        snow_water_equivalent_kg_per_m2,
        snow_depth_m,
        ground_heat_flux_W_per_m2,
        sensible_heat_flux_W_per_m2,
        ground_sensible_heat_flux_W_per_m2,
        soil_heat_flux_W_per_m2,
        energy_error_W_per_m2,
        energy_residual_W_per_m2,
        boundary_input_W_per_m2,
        energy_before_J_per_m2,
        energy_after_J_per_m2,
        top_eddy_conductivity_W_per_m_K,
        snow_melt_kg_per_m2 / timestep_s,
        snow_freezing_rate_column_kg_per_m2_s,
        latent_heat_absorbed_J_per_m2,
        column_heat_content_MJ_per_m2,
        soil_heat_content_MJ_per_m2,
        lake_ice_thickness_m,
        mixing_skipped,
    )


@njit(parallel=True, cache=True)
def update_lake_temperature(
    lake_columns: ArrayInt32,
    timestep_s: np.float64,
    crank_nicolson_factor: np.float64,
    visible_surface_absorption_fraction: np.float64,
    surface_absorption_depth_m: np.float64,
    minimum_brunt_vaisala_frequency_squared_s2: np.float64,
    deep_lake_depth_m: np.float64,
    deep_lake_mixing_factor: np.float64,
    include_background_diffusivity: bool,
    lake_puddling: bool,
    puddling_ice_thickness_m: np.float64,
    energy_balance_tolerance_W_per_m2: np.float64,
    n_soil_hydrologic: int,
    ground_heat_flux_W_per_m2: ArrayFloat64,
    sensible_heat_flux_W_per_m2: ArrayFloat64,
    ground_sensible_heat_flux_W_per_m2: ArrayFloat64,
    soil_heat_flux_W_per_m2: ArrayFloat64,
    ground_temperature_K: ArrayFloat64,
    friction_velocity_m_per_s: ArrayFloat64,
    turbulence_decay_coefficient_per_m: ArrayFloat64,
    absorbed_solar_W_per_m2: ArrayFloat64,
    absorbed_near_infrared_W_per_m2: ArrayFloat64,
    absorbed_solar_per_layer_W_per_m2: TwoDArrayFloat64,
    n_snow_layers: ArrayInt32,
    snow_water_equivalent_kg_per_m2: ArrayFloat64,
    snow_depth_m: ArrayFloat64,
    lake_depth_m: ArrayFloat64,
    extinction_coefficient_per_m: ArrayFloat64,
    snow_temperature_K: TwoDArrayFloat64,
    snow_liquid_water_kg_per_m2: TwoDArrayFloat64,
    snow_ice_kg_per_m2: TwoDArrayFloat64,
    snow_layer_thickness_m: TwoDArrayFloat64,
    snow_node_depth_m: TwoDArrayFloat64,
    snow_interface_depth_m: TwoDArrayFloat64,
    lake_layer_thickness_m: TwoDArrayFloat64,
    lake_node_depth_m: TwoDArrayFloat64,
    lake_temperature_K: TwoDArrayFloat64,
    lake_ice_fraction: TwoDArrayFloat64,
    soil_layer_thickness_m: TwoDArrayFloat64,
    soil_node_depth_m: TwoDArrayFloat64,
    soil_interface_depth_m: TwoDArrayFloat64,
    soil_temperature_K: TwoDArrayFloat64,
    soil_liquid_water_kg_per_m2: TwoDArrayFloat64,
    soil_ice_kg_per_m2: TwoDArrayFloat64,
    porosity: TwoDArrayFloat64,
    thermal_conductivity_saturated_W_per_m_K: TwoDArrayFloat64,
    thermal_conductivity_minerals_W_per_m_K: TwoDArrayFloat64,
    thermal_conductivity_dry_W_per_m_K: TwoDArrayFloat64,
    solid_heat_capacity_J_per_m3_K: TwoDArrayFloat64,
    snow_phase_change_flag: TwoDArrayInt32,
    snow_freezing_rate_kg_per_m2_s: TwoDArrayFloat64,
    snow_ice_fraction_old: TwoDArrayFloat64,
    lake_eddy_diffusivity_m2_per_s: TwoDArrayFloat64,
    energy_error_W_per_m2: ArrayFloat64,
    energy_residual_W_per_m2: ArrayFloat64,
    boundary_input_W_per_m2: ArrayFloat64,
    energy_before_J_per_m2: ArrayFloat64,
    energy_after_J_per_m2: ArrayFloat64,
    top_eddy_conductivity_W_per_m_K: ArrayFloat64,
    snow_melt_rate_kg_per_m2_s: ArrayFloat64,
    snow_freezing_rate_column_kg_per_m2_s: ArrayFloat64,
    latent_heat_absorbed_J_per_m2: ArrayFloat64,
    column_heat_content_MJ_per_m2: ArrayFloat64,
    soil_heat_content_MJ_per_m2: ArrayFloat64,
    lake_ice_thickness_m: ArrayFloat64,
    mixing_skipped: ArrayBool,
) -> None:
    """Advance all lake columns by one timestep.

    Columns are independent and run in parallel over `lake_columns`, the indices of
    the columns that are lakes. Columns outside this set are not touched. State and
    flux arrays are updated in-place and diagnostics are written per column; see
    `update_lake_column_temperature` for the meaning of each argument.
    """
    for i in prange(lake_columns.size):  # ty: ignore[not-iterable]
        column = lake_columns[i]
        column_result = update_lake_column_temperature(
            timestep_s,
            crank_nicolson_factor,
            visible_surface_absorption_fraction,
            surface_absorption_depth_m,
            minimum_brunt_vaisala_frequency_squared_s2,
            deep_lake_depth_m,
            deep_lake_mixing_factor,
            include_background_diffusivity,
            lake_puddling,
            puddling_ice_thickness_m,
            energy_balance_tolerance_W_per_m2,
            n_soil_hydrologic,
            ground_heat_flux_W_per_m2[column],
            sensible_heat_flux_W_per_m2[column],
            ground_sensible_heat_flux_W_per_m2[column],
            soil_heat_flux_W_per_m2[column],
            ground_temperature_K[column],
            friction_velocity_m_per_s[column],
            turbulence_decay_coefficient_per_m[column],
            absorbed_solar_W_per_m2[column],
            absorbed_near_infrared_W_per_m2[column],
            absorbed_solar_per_layer_W_per_m2[:, column],
            n_snow_layers[column],
            snow_water_equivalent_kg_per_m2[column],
            snow_depth_m[column],
            lake_depth_m[column],
            extinction_coefficient_per_m[column],
            snow_temperature_K[:, column],
            snow_liquid_water_kg_per_m2[:, column],
            snow_ice_kg_per_m2[:, column],
            snow_layer_thickness_m[:, column],
            snow_node_depth_m[:, column],
            snow_interface_depth_m[:, column],
            lake_layer_thickness_m[:, column],
            lake_node_depth_m[:, column],
            lake_temperature_K[:, column],
            lake_ice_fraction[:, column],
            soil_layer_thickness_m[:, column],
            soil_node_depth_m[:, column],
            soil_interface_depth_m[:, column],
            soil_temperature_K[:, column],
            soil_liquid_water_kg_per_m2[:, column],
            soil_ice_kg_per_m2[:, column],
            porosity[:, column],
            thermal_conductivity_saturated_W_per_m_K[:, column],
            thermal_conductivity_minerals_W_per_m_K[:, column],
            thermal_conductivity_dry_W_per_m_K[:, column],
            solid_heat_capacity_J_per_m3_K[:, column],
            snow_phase_change_flag[:, column],
            snow_freezing_rate_kg_per_m2_s[:, column],
            snow_ice_fraction_old[:, column],
            lake_eddy_diffusivity_m2_per_s[:, column],
        )
        snow_water_equivalent_kg_per_m2[column] = column_result[0]
        snow_depth_m[column] = column_result[1]
        ground_heat_flux_W_per_m2[column] = column_result[2]
        sensible_heat_flux_W_per_m2[column] = column_result[3]
        ground_sensible_heat_flux_W_per_m2[column] = column_result[4]
        soil_heat_flux_W_per_m2[column] = column_result[5]
        energy_error_W_per_m2[column] = column_result[6]
        energy_residual_W_per_m2[column] = column_result[7]
        boundary_input_W_per_m2[column] = column_result[8]
        energy_before_J_per_m2[column] = column_result[9]
        energy_after_J_per_m2[column] = column_result[10]
        top_eddy_conductivity_W_per_m_K[column] = column_result[11]
        snow_melt_rate_kg_per_m2_s[column] = column_result[12]
        snow_freezing_rate_column_kg_per_m2_s[column] = column_result[13]
        latent_heat_absorbed_J_per_m2[column] = column_result[14]
        column_heat_content_MJ_per_m2[column] = column_result[15]
        soil_heat_content_MJ_per_m2[column] = column_result[16]
        lake_ice_thickness_m[column] = column_result[17]
        mixing_skipped[column] = column_result[18]
