import logging
import numpy as np
from typing import Dict

from .constants import R_CONST, MOLAR_MASS, ModelConstants, DEFAULT_CONSTANTS
from .physics import concentration_kmol
from .state import GasCellState, ReactionRatePair

logger = logging.getLogger(__name__)

# Equivalence-ratio correction parameters for the two-step CH4 mechanism
# (phi breakpoint, width) pairs and weights
F1_PARAMS = {
    'phi0': 1.1,  'sigma0': 0.09,
    'B': 0.37,    'phi1': 1.13, 'sigma1': 0.03,
    'C': 6.7,     'phi2': 1.6,  'sigma2': 0.22,
}
F2_PARAMS = {
    'phi0': 0.95, 'sigma0': 0.08,
    'B': 2.5e-5,  'phi1': 1.3,  'sigma1': 0.04,
    'C': 0.0087,  'phi2': 1.2,  'sigma2': 0.04,
    'phi3': 1.2,  'sigma3': 0.05,
}


def _sigmoid(x, center, width):
    """1 + tanh((x - center)/width), in [0, 2]"""
    return 1.0 + np.tanh((x - center) / width)


def f1(phi):
    """
    Pre-exponential correction for CH4 oxidation.
    Unity on the lean side, falls off past stoichiometric. Always > 0.
    """
    p = F1_PARAMS
    denom = (_sigmoid(p['phi0'], phi, p['sigma0'])
             + p['B'] * _sigmoid(phi, p['phi1'], p['sigma1'])
             + p['C'] * _sigmoid(phi, p['phi2'], p['sigma2']))
    return 2.0 / denom


def f2(phi):
    """
    Pre-exponential correction for CO oxidation.
    Unity lean, rich-side cut-off with a small bump near phi = 1.2. Always >= 0.
    """
    p = F2_PARAMS
    return (0.5 * _sigmoid(p['phi0'], phi, p['sigma0'])
            + 0.5 * p['B'] * _sigmoid(phi, p['phi1'], p['sigma1'])
            + 0.5 * p['C'] * _sigmoid(phi, p['phi2'], p['sigma2'])
            * _sigmoid(p['phi3'], phi, p['sigma3']))


def calculate_phi(y_fuel, y_oxidizer, constants: ModelConstants = DEFAULT_CONSTANTS):
    """
    Equivalence ratio from mass fractions: phi = (Y_fuel / Y_O2) * s
    Oxidizer-starved cells (Y_O2 < 1e-10) return the saturating value 100.
    """
    if y_oxidizer < constants.PHI_OXIDIZER_MIN:
        return constants.PHI_STARVED
    return (y_fuel / y_oxidizer) * constants.stoich_o2_fuel_ratio


def arrhenius(A, E, T):
    """k = A * exp(-E/(R*T))"""
    return A * np.exp(-E / (R_CONST * T))


class CombustionKinetics:
    """Two-step CH4 mechanism with equivalence-ratio corrected pre-exponentials."""

    def __init__(self, constants: ModelConstants = DEFAULT_CONSTANTS):
        self.c = constants

    def _floor(self, name, rate, session=None):
        # Not reachable analytically; flag instead of hiding it
        if rate < 0.0:
            logger.warning(f"Negative {name} rate {rate:.3e} floored to zero")
            if session is not None:
                session.record_clamp()
            return 0.0
        return rate

    def calculate_rates(self, state: GasCellState, session=None) -> ReactionRatePair:
        """
        Calculate both reaction rates [kmol/(m^3*s)] from the local gas state.

        Args:
            state (GasCellState): Cell snapshot (T, rho, mass fractions)
            session (SimulationSession): Optional, receives clamp events

        Returns:
            ReactionRatePair
        """
        c = self.c
        T = state.T
        y_CH4 = state.y('CH4')
        y_O2 = state.y('O2')
        phi = calculate_phi(y_CH4, y_O2, c)

        C_CH4 = concentration_kmol(state.rho, y_CH4, 'CH4')
        C_O2 = concentration_kmol(state.rho, y_O2, 'O2')
        C_CO = concentration_kmol(state.rho, state.y('CO'), 'CO')

        # R1: CH4 + 1.5 O2 -> CO + 2 H2O
        k1 = f1(phi) * arrhenius(c.A_FUEL_OX, c.E_FUEL_OX, T)
        r1 = k1 * C_CH4**c.ORDER_FUEL * C_O2**c.ORDER_O2_FUEL_OX

        # R2: CO + 0.5 O2 -> CO2
        k2 = f2(phi) * arrhenius(c.A_CO_OX, c.E_CO_OX, T) * T**c.TEMP_EXPONENT_CO_OX
        r2 = k2 * C_CO**c.ORDER_CO * C_O2**c.ORDER_O2_CO_OX

        return ReactionRatePair(
            fuel_oxidation=self._floor('fuel oxidation', float(r1), session),
            intermediate_oxidation=self._floor('CO oxidation', float(r2), session),
        )

    def heat_release_rate(self, rates: ReactionRatePair) -> float:
        """Volumetric heat release [W/m^3]"""
        return (rates.fuel_oxidation * self.c.DH_FUEL_OX
                + rates.intermediate_oxidation * self.c.DH_CO_OX)

    def species_production_rates(self, rates: ReactionRatePair) -> Dict[str, float]:
        """Net species production [kg/(m^3*s)] implied by the two reactions."""
        r1, r2 = rates.fuel_oxidation, rates.intermediate_oxidation
        net_kmol = {
            'CH4': -r1,
            'O2': -1.5 * r1 - 0.5 * r2,
            'CO': r1 - r2,
            'CO2': r2,
            'H2O': 2.0 * r1,
        }
        return {sp: n * MOLAR_MASS[sp] for sp, n in net_kmol.items()}
