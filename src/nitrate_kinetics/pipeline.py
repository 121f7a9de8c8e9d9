import logging
from typing import Callable, Dict, Iterable, Optional

from .aggregator import CellSourceAggregator
from .cell import Cell
from .constants import ModelConstants, DEFAULT_CONSTANTS
from .heat_balance import ParticleEnergyIntegrator
from .lifecycle import ParticleLifecycle
from .physics import ranz_marshall_coefficient
from .session import SimulationSession
from .state import CellSourceAccumulators, EDCClosureResult, GasCellState, Particle
from .turbulence import EDCClosure

# Set up logging
logger = logging.getLogger(__name__)


def ranz_marshall_provider(particle: Particle, gas: GasCellState) -> float:
    """Default h: Ranz-Marshall with the cell velocity as slip velocity."""
    cp = gas.cp if gas.cp is not None else 1200.0
    return ranz_marshall_coefficient(particle.diameter, gas.T, gas.rho, gas.velocity, cp_gas=cp)


class StepPipeline:
    """
    Explicit per-step ordering for a set of cells:
        1. decomposition update of every resident particle
        2. particle heat balance (same pass, uses this step's rates)
        3. optional particle temperature advance
        4. source aggregation per cell
    ParticleTransferState on each particle is the hand-off between 1-2 and 4.
    """

    def __init__(self, constants: ModelConstants = DEFAULT_CONSTANTS,
                 session: Optional[SimulationSession] = None,
                 heat_transfer_coefficient: Optional[Callable[[Particle, GasCellState], float]] = None,
                 integrate_temperature: bool = False):
        self.constants = constants
        self.session = session if session is not None else SimulationSession()
        self.lifecycle = ParticleLifecycle(constants)
        self.aggregator = CellSourceAggregator()
        self.closure = EDCClosure(constants)
        self.h_provider = heat_transfer_coefficient or ranz_marshall_provider
        self.integrator = ParticleEnergyIntegrator(self.lifecycle.heat) if integrate_temperature else None

    def _validate_step(self, dt):
        if dt <= 0.0:
            raise ValueError(f"Step duration must be positive, got {dt}.")

    def update_particles(self, cell: Cell, dt: float) -> int:
        """Steps 1-3 for the particles of one cell. Returns the particle count."""
        n = 0
        for p in cell.particles():
            h = self.h_provider(p, cell.gas)
            self.lifecycle.advance(p, cell.gas, h, dt, session=self.session)
            if self.integrator is not None:
                self.integrator.advance(p, cell.gas.T, h, dt)
            n += 1
        return n

    def run(self, cells: Iterable[Cell], dt: float) -> Dict[int, CellSourceAccumulators]:
        """Run one step; returns volumetric sources keyed by cell index."""
        self._validate_step(dt)
        cells = list(cells)

        n_particles = 0
        for cell in cells:
            n_particles += self.update_particles(cell, dt)

        sources = {cell.idx: self.aggregator.aggregate(cell, dt, session=self.session) for cell in cells}
        logger.info(f"Step dt={dt:.3e}s: {len(cells)} cells, {n_particles} particles, "
                    f"E_comb={self.session.combustion_energy:.3e} J, "
                    f"E_decomp={self.session.decomposition_energy:.3e} J")
        return sources

    def closure_for(self, cell: Cell) -> EDCClosureResult:
        return self.closure.evaluate_cell(cell.gas)
