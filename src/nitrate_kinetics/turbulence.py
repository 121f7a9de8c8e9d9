import numpy as np

from .constants import ModelConstants, DEFAULT_CONSTANTS
from .state import EDCClosureResult, GasCellState


class EDCClosure:
    """
    Eddy Dissipation Concept fine-structure scales.
        gamma = C_xi * (nu*eps/k^2)^0.25
        tau   = C_tau * sqrt(nu/eps)
    Returns (gamma^2, tau). The host scales its kinetic rates with them.

    Above EDC_RAMP_START_T the constants are ramped linearly over
    EDC_RAMP_WIDTH towards faster mixing (C_xi * m, C_tau / m), saturating
    at m = EDC_RAMP_MULTIPLIER.
    """

    def __init__(self, constants: ModelConstants = DEFAULT_CONSTANTS):
        self.c = constants

    def ramp_multiplier(self, T: float) -> float:
        c = self.c
        if T <= c.EDC_RAMP_START_T:
            return 1.0
        r = min((T - c.EDC_RAMP_START_T) / c.EDC_RAMP_WIDTH, 1.0)
        return 1.0 + (c.EDC_RAMP_MULTIPLIER - 1.0) * r

    def model_constants(self, T: float):
        """(C_xi, C_tau) at temperature T"""
        m = self.ramp_multiplier(T)
        return self.c.EDC_C_XI * m, self.c.EDC_C_TAU / m

    def evaluate(self, k: float, epsilon: float, nu: float, T: float = 300.0) -> EDCClosureResult:
        c = self.c
        # Vanishing viscosity would give a zero mixing time
        if k < c.EDC_SMALL or epsilon < c.EDC_SMALL or nu < c.EDC_SMALL:
            return EDCClosureResult(reacting_fraction=0.0, mixing_time=c.EDC_INFINITE_TIME)

        C_xi, C_tau = self.model_constants(T)
        gamma = C_xi * (nu * epsilon / k**2) ** 0.25
        gamma = min(gamma, 1.0)
        tau = C_tau * np.sqrt(nu / epsilon)
        return EDCClosureResult(reacting_fraction=float(gamma**2), mixing_time=float(tau))

    def evaluate_cell(self, state: GasCellState) -> EDCClosureResult:
        return self.evaluate(state.k, state.epsilon, state.nu, state.T)
