import logging
from typing import List, Optional

from .cell import Cell
from .source_terms import SourceTerm, GasCombustionSource, ParticlePopulationSource
from .state import CellSourceAccumulators

logger = logging.getLogger(__name__)


class CellSourceAggregator:
    """
    Reduces gas-phase and particle-phase contributions of one cell into
    volumetric source terms (W/m^3, kg/(m^3*s)).
    Pure read-and-reduce: no particle or gas state is written.
    """

    def __init__(self, sources: Optional[List[SourceTerm]] = None):
        if sources is None:
            sources = [GasCombustionSource(), ParticlePopulationSource()]
        self.sources = sources

    def totals(self, cell: Cell, dt: float, session=None) -> CellSourceAccumulators:
        """Aggregate Sources (W, kg/s) for the cell."""
        acc = CellSourceAccumulators()
        for s in self.sources:
            acc.add(s.get_sources(cell, dt, session=session))
        return acc

    def aggregate(self, cell: Cell, dt: float, session=None) -> CellSourceAccumulators:
        """Volumetric sources for the cell, rebuilt from scratch on every call."""
        acc = self.totals(cell, dt, session=session).volumetric(cell.volume)
        logger.debug(f"Cell {cell.idx}: S_E={acc.energy:.3e} W/m3, "
                     f"S_H2O={acc.h2o:.3e}, S_NO2={acc.no2:.3e}, S_O2={acc.o2:.3e} kg/m3s")
        return acc
