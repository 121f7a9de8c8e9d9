import logging
from collections import defaultdict
from typing import Callable, Dict, Iterable, List, Optional

from .state import GasCellState, Particle

# Set up logging
logger = logging.getLogger(__name__)


class CellParticleIndex:
    """
    Particle-in-cell lookup. Particles are bucketed by their cell_id;
    hosts with their own tracking can pass any iterable provider to Cell instead.
    The bucket a particle was filed under is remembered, so a particle whose
    cell_id changed can still be removed or moved.
    """
    def __init__(self, particles: Iterable[Particle] = ()):
        self._buckets: Dict[int, List[Particle]] = defaultdict(list)
        self._filed_under: Dict[int, int] = {}
        for p in particles:
            self.add(p)

    def add(self, particle: Particle):
        if particle.cell_id is None:
            raise ValueError("Particle has no cell_id; cannot index it.")
        if id(particle) in self._filed_under:
            raise ValueError(f"Particle already indexed in cell {self._filed_under[id(particle)]}.")
        self._buckets[particle.cell_id].append(particle)
        self._filed_under[id(particle)] = particle.cell_id

    def remove(self, particle: Particle):
        cell_id = self._filed_under.pop(id(particle), None)
        if cell_id is None:
            raise ValueError("Particle is not in the index.")
        # By identity: equal-valued particles are still distinct parcels
        bucket = [p for p in self._buckets.get(cell_id, []) if p is not particle]
        if bucket:
            self._buckets[cell_id] = bucket
        else:
            self._buckets.pop(cell_id, None)

    def move(self, particle: Particle, new_cell_id: int):
        """Re-file a particle under new_cell_id and update its cell_id."""
        if id(particle) in self._filed_under:
            self.remove(particle)
        particle.cell_id = new_cell_id
        self.add(particle)
        logger.debug(f"Particle moved to cell {new_cell_id}")

    def particles_in(self, cell_id: int) -> List[Particle]:
        # Copy so one aggregation pass sees a fixed population
        return list(self._buckets.get(cell_id, ()))

    def all_particles(self) -> List[Particle]:
        return [p for bucket in self._buckets.values() for p in bucket]

    def __len__(self):
        return sum(len(b) for b in self._buckets.values())


class Cell:
    """
    Represents a single Control Volume (CV) as seen by the kernel:
    the host's gas snapshot plus a way to enumerate resident particles.
    """
    def __init__(self, cell_index: int, gas: GasCellState,
                 particle_provider: Optional[Callable[[int], Iterable[Particle]]] = None):
        if gas.volume <= 0.0:
            raise ValueError(f"Cell {cell_index}: volume must be positive, got {gas.volume}.")
        self.idx = cell_index
        self.gas = gas
        self._provider = particle_provider

    @property
    def volume(self) -> float:
        return self.gas.volume

    def particles(self) -> Iterable[Particle]:
        if self._provider is None:
            return ()
        return self._provider(self.idx)

    @classmethod
    def with_index(cls, cell_index: int, gas: GasCellState, index: CellParticleIndex):
        return cls(cell_index, gas, particle_provider=index.particles_in)
