import pandas as pd
from typing import Dict, Iterable

from .session import SimulationSession
from .state import CellSourceAccumulators, Particle


def sources_frame(sources: Dict[int, CellSourceAccumulators]) -> pd.DataFrame:
    """Per-cell volumetric sources as a table indexed by cell."""
    rows = [dict(cell=idx, **acc.as_dict()) for idx, acc in sources.items()]
    df = pd.DataFrame(rows, columns=['cell', 'energy', 'h2o', 'no2', 'o2'])
    return df.set_index('cell').sort_index()


def particles_frame(particles: Iterable[Particle]) -> pd.DataFrame:
    data = []
    for p in particles:
        c, t = p.composition, p.transfer
        data.append({
            'cell': p.cell_id, 'T': p.T, 'mass': p.mass, 'd_p': p.diameter,
            'hydrate': c.hydrate_mass, 'salt': c.salt_mass, 'oxide': c.oxide_mass,
            'm_H2O': t.h2o_rate, 'm_NO2': t.no2_rate, 'm_O2': t.o2_rate,
            'q_conv': t.q_convective, 'q_rad': t.q_radiative, 'q_rxn': t.q_reaction,
        })
    return pd.DataFrame(data)


def session_frame(session: SimulationSession) -> pd.DataFrame:
    return pd.DataFrame([session.snapshot()], index=[session.name])
