"""Physical constants and default parameters for the lake thermal column.

All constants are stored as `np.float64`. The column energy budget is closed to
0.1 W/m2, which for a 50 m lake corresponds to a relative precision of about 1e-9 of
the column heat content, so the whole scheme runs in double precision.

Notes:
    - Temperatures are in Kelvin. Heat content is always taken relative to the freezing
      temperature so that the jump in heat capacity at freezing does not produce an
      apparent change in energy.
    - Lake layers keep a constant thickness when they freeze. Ice properties per unit
      layer volume are therefore expressed with the density of liquid water
      ("effective" quantities).
"""

from __future__ import annotations

import numpy as np

# Temperature
FREEZING_TEMPERATURE_K: np.float64 = np.float64(273.15)
MAXIMUM_DENSITY_TEMPERATURE_K: np.float64 = np.float64(277.0)

# Densities
RHO_WATER_KG_PER_M3: np.float64 = np.float64(1000.0)
RHO_ICE_KG_PER_M3: np.float64 = np.float64(917.0)

# Specific heat capacities
SPECIFIC_HEAT_CAPACITY_WATER_J_PER_KG_K: np.float64 = np.float64(4188.0)
SPECIFIC_HEAT_CAPACITY_ICE_J_PER_KG_K: np.float64 = np.float64(2117.27)

# Volumetric heat capacities of a lake layer, per unit (fixed) layer volume
VOLUMETRIC_HEAT_CAPACITY_WATER_J_PER_M3_K: np.float64 = (
    RHO_WATER_KG_PER_M3 * SPECIFIC_HEAT_CAPACITY_WATER_J_PER_KG_K
)
VOLUMETRIC_HEAT_CAPACITY_ICE_EFFECTIVE_J_PER_M3_K: np.float64 = (
    RHO_WATER_KG_PER_M3 * SPECIFIC_HEAT_CAPACITY_ICE_J_PER_KG_K
)

# Latent heat
L_FUSION_J_PER_KG: np.float64 = np.float64(3.337e5)
L_FUSION_VOLUMETRIC_J_PER_M3: np.float64 = L_FUSION_J_PER_KG * RHO_WATER_KG_PER_M3

# Thermal conductivities [W/(m K)]
LAMBDA_WATER: np.float64 = np.float64(0.57)
LAMBDA_ICE: np.float64 = np.float64(2.29)
LAMBDA_AIR: np.float64 = np.float64(0.023)
LAMBDA_BEDROCK: np.float64 = np.float64(3.0)
# Layer thickness is not adjusted when lake water freezes
LAMBDA_ICE_EFFECTIVE: np.float64 = LAMBDA_ICE * RHO_ICE_KG_PER_M3 / RHO_WATER_KG_PER_M3

# Molecular thermal diffusivity of water [m2/s]
MOLECULAR_DIFFUSIVITY_M2_PER_S: np.float64 = (
    LAMBDA_WATER / VOLUMETRIC_HEAT_CAPACITY_WATER_J_PER_M3_K
)

# Turbulence
VON_KARMAN_CONSTANT: np.float64 = np.float64(0.4)
GRAVITY_M_PER_S2: np.float64 = np.float64(9.80616)
NEUTRAL_TURBULENT_PRANDTL_NUMBER: np.float64 = np.float64(1.0)

# Background eddy diffusivity, Fang & Stefan (1996) citing Ellis et al. (1991)
BACKGROUND_DIFFUSIVITY_COEFFICIENT: np.float64 = np.float64(1.039e-8)
BACKGROUND_DIFFUSIVITY_EXPONENT: np.float64 = np.float64(-0.43)

# Residual masses and fractions below this value are set to exactly zero
SMALL_NUMBER: np.float64 = np.float64(1e-12)

# Defaults for tunable parameters (see `laketherm.config_schema`)
CRANK_NICOLSON_FACTOR: float = 0.5
VISIBLE_SURFACE_ABSORPTION_FRACTION: float = 0.0
SURFACE_ABSORPTION_DEPTH_M: float = 0.6
MINIMUM_BRUNT_VAISALA_FREQUENCY_S2: float = 7.5e-5
DEEP_LAKE_DEPTH_M: float = 25.0
DEEP_LAKE_MIXING_FACTOR: float = 10.0
PUDDLING_ICE_THICKNESS_M: float = 0.2
ENERGY_BALANCE_TOLERANCE_W_PER_M2: float = 0.10
ENERGY_BALANCE_REPORT_THRESHOLD_W_PER_M2: float = 1e-3
