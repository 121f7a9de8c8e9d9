import logging
from typing import Tuple

from .constants import MOLAR_MASS, ModelConstants, DEFAULT_CONSTANTS
from .kinetics import arrhenius
from .physics import particle_diameter, particle_surface_area
from .state import Particle

logger = logging.getLogger(__name__)


class DecompositionService:
    """
    Two-stage thermal decomposition of the hydrated nitrate salt.
        Dehydration:  M(NO3)2*2H2O -> M(NO3)2 + 2 H2O
        Denitration:  M(NO3)2      -> MO + 2 NO2 + 0.5 O2

    Each stage is limited by the gas still bound in its reactant, so a step
    can never release more than the particle holds.
    """

    def __init__(self, constants: ModelConstants = DEFAULT_CONSTANTS):
        self.c = constants

    def dehydration_rate(self, particle: Particle, dt: float) -> float:
        """
        H2O release rate [kg/s], limited by the water bound in the hydrate.
        """
        c = self.c
        m_hyd = particle.composition.hydrate_mass
        if m_hyd <= c.COMPONENT_MASS_MIN or particle.mass <= 0.0 or dt <= 0.0:
            return 0.0

        k_deh = arrhenius(c.A_DEHYDRATION, c.E_DEHYDRATION, particle.T)  # mol/(m2 s)
        y_hyd = m_hyd / particle.mass
        A_p = particle_surface_area(particle.diameter)
        # MW in kg/kmol -> kg/mol
        rate = (c.DEHYDRATION_BETA * y_hyd * c.SURFACE_EFFICIENCY * A_p
                * MOLAR_MASS['H2O'] * 1e-3 * k_deh)

        available = m_hyd * c.h2o_fraction_of_hydrate
        if rate * dt > available:
            logger.debug(f"Dehydration limited: {rate*dt:.3e} kg requested, {available:.3e} kg bound")
            rate = available / dt
        return float(rate)

    def denitration_rates(self, particle: Particle, dt: float) -> Tuple[float, float]:
        """
        (NO2, O2) release rates [kg/s]. Joint limiting keeps the 2 : 0.5 molar ratio.
        """
        c = self.c
        m_salt = particle.composition.salt_mass
        if m_salt <= c.COMPONENT_MASS_MIN or particle.mass <= 0.0 or dt <= 0.0:
            return 0.0, 0.0

        k_den = arrhenius(c.A_DENITRATION, c.E_DENITRATION, particle.T)  # mol/(m2 s)
        y_salt = m_salt / particle.mass
        A_p = particle_surface_area(particle.diameter)
        base = y_salt * c.SURFACE_EFFICIENCY * A_p * k_den * 1e-3
        rate_NO2 = 2.0 * MOLAR_MASS['NO2'] * base
        rate_O2 = 0.5 * MOLAR_MASS['O2'] * base

        available = m_salt * c.gas_fraction_of_salt
        released = (rate_NO2 + rate_O2) * dt
        if released > available:
            scale = available / released
            logger.debug(f"Denitration limited: scale={scale:.4f}")
            rate_NO2 *= scale
            rate_O2 *= scale
        return float(rate_NO2), float(rate_O2)

    def update(self, particle: Particle, dt: float) -> Particle:
        """
        Compute this step's release rates, then advance mass, diameter and composition.
        Rates are stored on particle.transfer; heat terms are left to the heat balance.
        """
        c = self.c
        rate_H2O = self.dehydration_rate(particle, dt)
        rate_NO2, rate_O2 = self.denitration_rates(particle, dt)

        t = particle.transfer
        t.h2o_rate, t.no2_rate, t.o2_rate = rate_H2O, rate_NO2, rate_O2

        m_H2O = rate_H2O * dt
        m_gas = (rate_NO2 + rate_O2) * dt

        # 1. Total mass and diameter (constant particle density)
        particle.mass = max(particle.mass - (m_H2O + m_gas), 0.0)
        particle.diameter = particle_diameter(particle.mass, particle.density)

        # 2. Composition: reactant consumed = gas released / gas mass fraction of reactant
        comp = particle.composition
        hydrate_used = m_H2O / c.h2o_fraction_of_hydrate
        salt_used = m_gas / c.gas_fraction_of_salt
        comp.hydrate_mass = max(comp.hydrate_mass - hydrate_used, 0.0)
        comp.salt_mass = max(comp.salt_mass + (hydrate_used - m_H2O) - salt_used, 0.0)
        comp.oxide_mass = max(comp.oxide_mass + (salt_used - m_gas), 0.0)

        return particle
