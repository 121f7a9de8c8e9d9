import logging
import numpy as np
from scipy.integrate import solve_ivp

from .constants import STEFAN_BOLTZMANN, ModelConstants, DEFAULT_CONSTANTS
from .physics import particle_surface_area
from .state import Particle

logger = logging.getLogger(__name__)


class ParticleHeatBalance:
    """
    Particle heat exchange for the current step (W, positive into the particle):
        q_conv = h * A_p * (Tg - Tp)
        q_rad  = eps_p * A_p * sigma * (Tg^4 - Tp^4)
        q_rxn  = -(m_H2O * dH_deh / f_H2O) - (m_NO2 * dH_den / f_NO2)
    Both decomposition stages are endothermic and cool the particle.
    """

    def __init__(self, constants: ModelConstants = DEFAULT_CONSTANTS):
        self.c = constants

    def convective(self, h, d_p, T_gas, T_p):
        return h * particle_surface_area(d_p) * (T_gas - T_p)

    def radiative(self, d_p, T_gas, T_p):
        return (self.c.PARTICLE_EMISSIVITY * particle_surface_area(d_p)
                * STEFAN_BOLTZMANN * (T_gas**4 - T_p**4))

    def reaction(self, rate_H2O, rate_NO2):
        c = self.c
        return (-(rate_H2O * c.DH_DEHYDRATION / c.h2o_fraction_of_hydrate)
                - (rate_NO2 * c.DH_DENITRATION / c.no2_fraction_of_salt))

    def compute(self, particle: Particle, T_gas: float, h: float, session=None, dt: float = 0.0) -> float:
        """
        Evaluate the three heat terms with the rates already on particle.transfer,
        cache them there and return the net heat rate [W].

        Args:
            particle (Particle): Updated by the decomposition step
            T_gas (float): Local gas temperature [K]
            h (float): Convective coefficient from the host [W/(m^2*K)]
            session (SimulationSession): Optional, accumulates q_rxn*dt
            dt (float): Step duration [s] for the session total
        """
        t = particle.transfer
        t.q_convective = float(self.convective(h, particle.diameter, T_gas, particle.T))
        t.q_radiative = float(self.radiative(particle.diameter, T_gas, particle.T))
        t.q_reaction = float(self.reaction(t.h2o_rate, t.no2_rate))

        if session is not None and dt > 0.0:
            session.add_decomposition_energy(t.q_reaction * dt)
        return t.net_heat


class ParticleEnergyIntegrator:
    """
    Reference integrator for m*cp*dTp/dt = q_conv(Tp) + q_rad(Tp) + q_rxn.
    Reaction heat is frozen over the step; hosts normally supply their own.
    """

    def __init__(self, heat_balance: ParticleHeatBalance = None, rtol=1e-6, atol=1e-3):
        self.heat = heat_balance if heat_balance is not None else ParticleHeatBalance()
        self.rtol = rtol
        self.atol = atol

    def advance(self, particle: Particle, T_gas: float, h: float, dt: float) -> float:
        """Integrate particle temperature over dt with solve_ivp (BDF). Returns new Tp."""
        if dt <= 0.0 or particle.mass <= 0.0:
            return particle.T

        cp = self.heat.c.HEAT_CAPACITY_SOLID
        m_cp = particle.mass * cp
        d_p = particle.diameter
        q_rxn = particle.transfer.q_reaction

        def _dT_dt(t, y):
            Tp = y[0]
            q = (self.heat.convective(h, d_p, T_gas, Tp)
                 + self.heat.radiative(d_p, T_gas, Tp) + q_rxn)
            return [q / m_cp]

        sol = solve_ivp(_dT_dt, (0.0, dt), [particle.T], method='BDF',
                        rtol=self.rtol, atol=self.atol)
        if not sol.success:
            raise RuntimeError(f"Particle temperature integration failed: {sol.message}")

        T_new = float(sol.y[0, -1])
        if not np.isfinite(T_new):
            raise RuntimeError("Particle temperature integration produced a non-finite value")
        particle.T = T_new
        return T_new
