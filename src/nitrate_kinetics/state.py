from dataclasses import dataclass, field
import numpy as np
from typing import Dict, Optional

# Scratch buffer layout kept by hosts that store particle data in flat arrays
# [hydrate, salt, oxide, m_H2O, m_NO2, m_O2, q_conv, q_rad, q_rxn]
SCRATCH_SIZE = 9


@dataclass(frozen=True)
class GasCellState:
    """
    Per-control-volume snapshot handed over by the host solver.
    The kernel reads it and never mutates it.

    T: gas temperature [K]
    rho: gas density [kg/m^3]
    mass_fractions: species name -> Y_i
    k, epsilon, nu: turbulence state (m^2/s^2, m^2/s^3, m^2/s)
    """
    T: float
    rho: float
    mass_fractions: Dict[str, float] = field(default_factory=dict)
    velocity: float = 0.0
    volume: float = 1.0
    k: float = 0.0
    epsilon: float = 0.0
    nu: float = 1.5e-5
    cp: Optional[float] = None

    def y(self, species: str) -> float:
        return self.mass_fractions.get(species, 0.0)


@dataclass(frozen=True)
class ReactionRatePair:
    """Two-step CH4 rates [kmol/(m^3*s)], both non-negative."""
    fuel_oxidation: float
    intermediate_oxidation: float


@dataclass(frozen=True)
class EDCClosureResult:
    reacting_fraction: float
    mixing_time: float


@dataclass
class ParticleCompositionState:
    """Component masses of one particle [kg]."""
    hydrate_mass: float = 0.0
    salt_mass: float = 0.0
    oxide_mass: float = 0.0

    @property
    def total(self) -> float:
        return self.hydrate_mass + self.salt_mass + self.oxide_mass

    @classmethod
    def all_hydrate(cls, mass: float):
        return cls(hydrate_mass=mass, salt_mass=0.0, oxide_mass=0.0)


@dataclass
class ParticleTransferState:
    """
    Per-step hand-off between decomposition, heat balance and aggregation.
    Mass rates in kg/s released to the gas, heat terms in W into the particle.
    """
    h2o_rate: float = 0.0
    no2_rate: float = 0.0
    o2_rate: float = 0.0
    q_convective: float = 0.0
    q_radiative: float = 0.0
    q_reaction: float = 0.0

    @property
    def total_mass_rate(self) -> float:
        return self.h2o_rate + self.no2_rate + self.o2_rate

    @property
    def net_heat(self) -> float:
        return self.q_convective + self.q_radiative + self.q_reaction

    def clear(self):
        self.h2o_rate = self.no2_rate = self.o2_rate = 0.0
        self.q_convective = self.q_radiative = self.q_reaction = 0.0


@dataclass
class Particle:
    """
    Host particle record plus the model's composition/transfer scratch.

    T: particle temperature [K]
    mass: total particle mass [kg]
    diameter: [m], kept consistent with mass and density
    """
    T: float
    mass: float
    diameter: float
    density: float
    composition: ParticleCompositionState = field(default_factory=ParticleCompositionState)
    transfer: ParticleTransferState = field(default_factory=ParticleTransferState)
    cell_id: Optional[int] = None

    def to_array(self) -> np.ndarray:
        """Serialize model scratch to the 9-slot host layout"""
        c, t = self.composition, self.transfer
        return np.array([
            c.hydrate_mass, c.salt_mass, c.oxide_mass,
            t.h2o_rate, t.no2_rate, t.o2_rate,
            t.q_convective, t.q_radiative, t.q_reaction,
        ])

    def load_array(self, arr: np.ndarray):
        """Deserialize model scratch from the 9-slot host layout"""
        if len(arr) < SCRATCH_SIZE:
            raise ValueError(f"Particle scratch buffer needs {SCRATCH_SIZE} slots, got {len(arr)}.")
        self.composition = ParticleCompositionState(
            hydrate_mass=float(arr[0]), salt_mass=float(arr[1]), oxide_mass=float(arr[2])
        )
        self.transfer = ParticleTransferState(
            h2o_rate=float(arr[3]), no2_rate=float(arr[4]), o2_rate=float(arr[5]),
            q_convective=float(arr[6]), q_radiative=float(arr[7]), q_reaction=float(arr[8])
        )


@dataclass
class CellSourceAccumulators:
    """
    Per-cell totals rebuilt on every aggregation call.
    energy [W into the gas], h2o/no2/o2 [kg/s into the gas]
    """
    energy: float = 0.0
    h2o: float = 0.0
    no2: float = 0.0
    o2: float = 0.0

    def add(self, other: 'CellSourceAccumulators'):
        self.energy += other.energy
        self.h2o += other.h2o
        self.no2 += other.no2
        self.o2 += other.o2

    def volumetric(self, volume: float) -> 'CellSourceAccumulators':
        """Divide totals by cell volume -> W/m^3 and kg/(m^3*s)"""
        return CellSourceAccumulators(
            energy=self.energy / volume,
            h2o=self.h2o / volume,
            no2=self.no2 / volume,
            o2=self.o2 / volume,
        )

    def as_dict(self) -> Dict[str, float]:
        return {'energy': self.energy, 'h2o': self.h2o, 'no2': self.no2, 'o2': self.o2}
