import logging

from .constants import ModelConstants, DEFAULT_CONSTANTS
from .decomposition_service import DecompositionService
from .heat_balance import ParticleHeatBalance
from .physics import particle_diameter
from .state import GasCellState, Particle, ParticleCompositionState

logger = logging.getLogger(__name__)


class ParticleLifecycle:
    """
    Birth and per-step advance of a particle's composition and size.
    Order within a step: decomposition update -> heat balance.
    The transfer state left on the particle is what the aggregator reads.
    """

    def __init__(self, constants: ModelConstants = DEFAULT_CONSTANTS):
        self.c = constants
        self.decomposition = DecompositionService(constants)
        self.heat = ParticleHeatBalance(constants)

    def create(self, T: float, mass: float, density: float = None, cell_id=None) -> Particle:
        """New all-hydrate particle with diameter consistent with its mass."""
        if mass <= 0.0:
            raise ValueError(f"Particle mass must be positive, got {mass}.")
        rho = density if density is not None else self.c.PARTICLE_DENSITY
        if rho <= 0.0:
            raise ValueError(f"Particle density must be positive, got {rho}.")
        particle = Particle(T=T, mass=mass, diameter=particle_diameter(mass, rho),
                            density=rho, cell_id=cell_id)
        return self.initialize(particle)

    def initialize(self, particle: Particle) -> Particle:
        """Reset scratch: all mass as hydrate, no transfer yet."""
        particle.composition = ParticleCompositionState.all_hydrate(particle.mass)
        particle.transfer.clear()
        return particle

    def advance(self, particle: Particle, gas: GasCellState, h: float, dt: float, session=None) -> float:
        """
        One step for one particle. Returns the net heat rate [W] for the
        host's particle energy equation.
        """
        if dt <= 0.0:
            raise ValueError(f"Step duration must be positive, got {dt}.")
        self.decomposition.update(particle, dt)
        return self.heat.compute(particle, gas.T, h, session=session, dt=dt)
