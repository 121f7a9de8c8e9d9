import logging
import threading
from typing import Iterable

logger = logging.getLogger(__name__)


class SimulationSession:
    """
    Diagnostic bookkeeping for one simulation run.

    combustion_energy: heat released by gas-phase CH4/CO oxidation [J]
    decomposition_energy: net reaction heat exchanged by particles [J]
    clamp_events: number of negative rates floored to zero

    Updates are serialized with a lock. For parallel sweeps create one
    partial() per worker and merge() them after the step.
    """

    def __init__(self, name: str = "session"):
        self.name = name
        self._lock = threading.Lock()
        self.combustion_energy = 0.0
        self.decomposition_energy = 0.0
        self.clamp_events = 0

    def reset(self):
        with self._lock:
            self.combustion_energy = 0.0
            self.decomposition_energy = 0.0
            self.clamp_events = 0
        logger.info(f"Session '{self.name}' reset.")

    def add_combustion_energy(self, joules: float):
        with self._lock:
            self.combustion_energy += joules

    def add_decomposition_energy(self, joules: float):
        with self._lock:
            self.decomposition_energy += joules

    def record_clamp(self):
        with self._lock:
            self.clamp_events += 1

    def partial(self) -> 'SimulationSession':
        """Detached zeroed session for one worker's share of a step."""
        return SimulationSession(name=f"{self.name}/partial")

    def merge(self, partials: Iterable['SimulationSession']):
        for p in partials:
            with self._lock:
                self.combustion_energy += p.combustion_energy
                self.decomposition_energy += p.decomposition_energy
                self.clamp_events += p.clamp_events

    def snapshot(self) -> dict:
        with self._lock:
            return {
                'combustion_energy_J': self.combustion_energy,
                'decomposition_energy_J': self.decomposition_energy,
                'clamp_events': self.clamp_events,
            }
