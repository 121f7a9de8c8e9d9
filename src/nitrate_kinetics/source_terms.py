from abc import ABC, abstractmethod
import logging
from typing import Iterable

from .kinetics import CombustionKinetics
from .state import CellSourceAccumulators, Particle

logger = logging.getLogger(__name__)


class SourceTerm(ABC):
    """
    Abstract Base Class for contributions to a cell's gas-phase source terms.
    """
    @abstractmethod
    def get_sources(self, cell, dt: float, session=None) -> CellSourceAccumulators:
        """
        Calculate the contribution of this term to one cell.

        Returns:
            CellSourceAccumulators: totals in W (energy) and kg/s (species),
            not yet divided by the cell volume.
        """
        pass


class GasCombustionSource(SourceTerm):
    """
    Gas-phase CH4/CO oxidation in the cell.
    Only feeds the session's combustion-energy diagnostic; the host's own
    reaction model carries the heat and species, so the returned totals are zero.
    """
    def __init__(self, kinetics: CombustionKinetics = None):
        self.kinetics = kinetics if kinetics is not None else CombustionKinetics()

    def get_sources(self, cell, dt: float, session=None) -> CellSourceAccumulators:
        rates = self.kinetics.calculate_rates(cell.gas, session=session)
        q_vol = self.kinetics.heat_release_rate(rates)  # W/m3
        if session is not None and dt > 0.0:
            session.add_combustion_energy(q_vol * cell.volume * dt)
        return CellSourceAccumulators()


class ParticlePopulationSource(SourceTerm):
    """
    Particles resident in the cell:
    - Species: +H2O, +NO2, +O2 released by decomposition
    - Energy: -(q_conv + q_rad + q_rxn), heat leaving the particles enters the gas
    """
    @staticmethod
    def sum_particles(particles: Iterable[Particle]) -> CellSourceAccumulators:
        acc = CellSourceAccumulators()
        for p in particles:
            t = p.transfer
            acc.energy -= t.q_convective + t.q_radiative + t.q_reaction
            acc.h2o += t.h2o_rate
            acc.no2 += t.no2_rate
            acc.o2 += t.o2_rate
        return acc

    def get_sources(self, cell, dt: float, session=None) -> CellSourceAccumulators:
        return self.sum_particles(cell.particles())
