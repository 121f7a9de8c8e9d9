from dataclasses import dataclass
import math

# 通用气体常数 R (J/(mol*K))
R_CONST = 8.3144626
STEFAN_BOLTZMANN = 5.670374e-8  # W/(m^2*K^4)

# 分子量 (g/mol 或 kg/kmol)
MOLAR_MASS = {
    'CH4': 16.043,
    'O2': 31.998,
    'CO': 28.010,
    'CO2': 44.009,
    'H2O': 18.015,
    'NO2': 46.006,
    'N2': 28.013,
}


@dataclass(frozen=True)
class ModelConstants:
    """
    Central repository for physical constants and default model parameters.
    Replaces magic numbers in the kinetics, heat balance and closure code.
    """

    # Gas-phase two-step CH4 mechanism (SI, concentrations in kmol/m^3)
    # R1: CH4 + 1.5 O2 -> CO + 2 H2O
    A_FUEL_OX: float = 1.739e9          # (kmol/m3)^-0.15 / s
    E_FUEL_OX: float = 1.4853e5         # J/mol (35.5 kcal/mol)
    ORDER_FUEL: float = 0.5
    ORDER_O2_FUEL_OX: float = 0.65
    # R2: CO + 0.5 O2 -> CO2
    A_CO_OX: float = 6.325e6            # (kmol/m3)^-0.5 K^-0.8 / s
    E_CO_OX: float = 5.0208e4           # J/mol (12.0 kcal/mol)
    TEMP_EXPONENT_CO_OX: float = 0.8
    ORDER_CO: float = 1.0
    ORDER_O2_CO_OX: float = 0.5
    # Heats of reaction (J/kmol, exothermic = positive)
    DH_FUEL_OX: float = 5.193e8
    DH_CO_OX: float = 2.830e8

    # Equivalence ratio
    PHI_OXIDIZER_MIN: float = 1e-10     # y_O2 below this -> oxidizer-starved
    PHI_STARVED: float = 100.0

    # Salt: M(NO3)2*2H2O -> M(NO3)2 + 2 H2O ; M(NO3)2 -> MO + 2 NO2 + 0.5 O2
    MW_HYDRATE: float = 184.35          # Mg(NO3)2*2H2O
    MW_SALT: float = 148.31             # Mg(NO3)2
    MW_OXIDE: float = 40.30             # MgO
    A_DEHYDRATION: float = 1.0e5        # mol/(m^2 s)
    E_DEHYDRATION: float = 6.0e4        # J/mol
    A_DENITRATION: float = 5.0e9        # mol/(m^2 s)
    E_DENITRATION: float = 1.6e5        # J/mol
    DEHYDRATION_BETA: float = 2.0       # mol H2O per mol hydrate
    SURFACE_EFFICIENCY: float = 1.0     # eta, active fraction of external area
    DH_DEHYDRATION: float = 1.05e6      # J/kg H2O-equivalent hydrate
    DH_DENITRATION: float = 1.80e6      # J/kg salt
    COMPONENT_MASS_MIN: float = 1e-10   # kg, stage active above this

    # Particle
    PARTICLE_DENSITY: float = 2000.0    # kg/m^3
    PARTICLE_EMISSIVITY: float = 0.85
    HEAT_CAPACITY_SOLID: float = 1100.0  # J/kgK

    # EDC closure
    EDC_C_XI: float = 2.1377
    EDC_C_TAU: float = 0.4083
    EDC_SMALL: float = 1e-10
    EDC_RAMP_START_T: float = 1500.0    # K
    EDC_RAMP_WIDTH: float = 500.0       # K
    EDC_RAMP_MULTIPLIER: float = 1.5
    EDC_INFINITE_TIME: float = math.inf

    @property
    def stoich_o2_fuel_ratio(self) -> float:
        """Stoichiometric O2/CH4 mass ratio (2 O2 per CH4)."""
        return 2.0 * MOLAR_MASS['O2'] / MOLAR_MASS['CH4']

    @property
    def h2o_fraction_of_hydrate(self) -> float:
        return 2.0 * MOLAR_MASS['H2O'] / self.MW_HYDRATE

    @property
    def gas_fraction_of_salt(self) -> float:
        """NO2 + O2 mass released per kg of anhydrous salt."""
        return (2.0 * MOLAR_MASS['NO2'] + 0.5 * MOLAR_MASS['O2']) / self.MW_SALT

    @property
    def no2_fraction_of_salt(self) -> float:
        return 2.0 * MOLAR_MASS['NO2'] / self.MW_SALT


DEFAULT_CONSTANTS = ModelConstants()
