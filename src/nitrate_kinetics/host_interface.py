"""
Callback surface for a host flow solver.

Source callbacks have the shape (cell, thread) -> (source, dS/dphi). All
terms are explicit here, so the derivative is always 0.0. The thread argument
is the host's zone handle and is not used by the kernel.
"""
import logging
from typing import Dict, Tuple

from .aggregator import CellSourceAggregator
from .cell import Cell
from .lifecycle import ParticleLifecycle
from .session import SimulationSession
from .state import CellSourceAccumulators, GasCellState, Particle

logger = logging.getLogger(__name__)

EQUATIONS = ('energy', 'h2o', 'no2', 'o2')

_default_lifecycle = ParticleLifecycle()


class SourceCallbacks:
    """
    Per-equation source functions. Each cell is aggregated once per step;
    call new_step() before the host starts assembling the next step.
    """

    def __init__(self, dt: float, session: SimulationSession = None,
                 aggregator: CellSourceAggregator = None):
        self.session = session if session is not None else SimulationSession()
        self.aggregator = aggregator if aggregator is not None else CellSourceAggregator()
        self._cache: Dict[int, CellSourceAccumulators] = {}
        self.dt = 0.0
        self.new_step(dt)

    def new_step(self, dt: float):
        if dt <= 0.0:
            raise ValueError(f"Step duration must be positive, got {dt}.")
        self.dt = dt
        self._cache.clear()

    def _sources(self, cell: Cell) -> CellSourceAccumulators:
        if cell.idx not in self._cache:
            self._cache[cell.idx] = self.aggregator.aggregate(cell, self.dt, session=self.session)
        return self._cache[cell.idx]

    def source(self, cell: Cell, thread, equation: str) -> Tuple[float, float]:
        if equation not in EQUATIONS:
            raise KeyError(f"Unknown equation '{equation}', expected one of {EQUATIONS}")
        return getattr(self._sources(cell), equation), 0.0

    def energy(self, cell: Cell, thread=None) -> Tuple[float, float]:
        return self.source(cell, thread, 'energy')

    def h2o(self, cell: Cell, thread=None) -> Tuple[float, float]:
        return self.source(cell, thread, 'h2o')

    def no2(self, cell: Cell, thread=None) -> Tuple[float, float]:
        return self.source(cell, thread, 'no2')

    def o2(self, cell: Cell, thread=None) -> Tuple[float, float]:
        return self.source(cell, thread, 'o2')


def initialize_particle(particle: Particle, lifecycle: ParticleLifecycle = None) -> Particle:
    """Particle creation hook: all mass as hydrate, transfer scratch zeroed."""
    lc = lifecycle if lifecycle is not None else _default_lifecycle
    return lc.initialize(particle)


def particle_law(particle: Particle, gas: GasCellState, dt: float, h: float,
                 session: SimulationSession = None, lifecycle: ParticleLifecycle = None) -> bool:
    """
    Particle update law: decomposition then heat balance.
    Mutates mass, diameter, composition and transfer; True on success.
    """
    lc = lifecycle if lifecycle is not None else _default_lifecycle
    lc.advance(particle, gas, h, dt, session=session)
    return True
