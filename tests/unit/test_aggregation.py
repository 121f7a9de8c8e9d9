import unittest
import sys
import os
import logging

# Configure basic logging for tests (INFO level to suppress DEBUG noise)
logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

# Add src to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src')))

from nitrate_kinetics.aggregator import CellSourceAggregator
from nitrate_kinetics.cell import Cell, CellParticleIndex
from nitrate_kinetics.host_interface import SourceCallbacks, particle_law, initialize_particle
from nitrate_kinetics.kinetics import CombustionKinetics
from nitrate_kinetics.lifecycle import ParticleLifecycle
from nitrate_kinetics.pipeline import StepPipeline
from nitrate_kinetics.session import SimulationSession
from nitrate_kinetics.source_terms import ParticlePopulationSource
from nitrate_kinetics.state import GasCellState, ParticleTransferState

FLAME_GAS = {'CH4': 0.05, 'O2': 0.15, 'CO': 0.01, 'N2': 0.79}


class TestCellSourceAggregator(unittest.TestCase):

    def test_empty_cell_without_species(self):
        session = SimulationSession()
        cell = Cell(0, GasCellState(T=1500.0, rho=0.3, volume=1e-3))
        acc = CellSourceAggregator().aggregate(cell, 0.01, session=session)
        self.assertEqual(acc.as_dict(), {'energy': 0.0, 'h2o': 0.0, 'no2': 0.0, 'o2': 0.0})
        self.assertEqual(session.combustion_energy, 0.0)

    def test_particle_sums_are_volumetric(self):
        lc = ParticleLifecycle()
        index = CellParticleIndex()
        p1 = lc.create(T=700.0, mass=1e-6, cell_id=3)
        p2 = lc.create(T=900.0, mass=2e-6, cell_id=3)
        p1.transfer = ParticleTransferState(1e-7, 0.0, 0.0, 0.2, 0.1, -0.05)
        p2.transfer = ParticleTransferState(2e-7, 4e-8, 1e-8, 0.3, 0.2, -0.15)
        index.add(p1)
        index.add(p2)

        V = 2e-3
        cell = Cell.with_index(3, GasCellState(T=1200.0, rho=0.3, volume=V), index)
        acc = CellSourceAggregator([ParticlePopulationSource()]).aggregate(cell, 0.01)

        self.assertAlmostEqual(acc.energy, -(0.25 + 0.35) / V)
        self.assertAlmostEqual(acc.h2o, 3e-7 / V)
        self.assertAlmostEqual(acc.no2, 4e-8 / V)
        self.assertAlmostEqual(acc.o2, 1e-8 / V)

    def test_other_cells_do_not_contribute(self):
        lc = ParticleLifecycle()
        index = CellParticleIndex([lc.create(T=700.0, mass=1e-6, cell_id=1)])
        index.all_particles()[0].transfer.h2o_rate = 1e-7
        cell = Cell.with_index(2, GasCellState(T=1200.0, rho=0.3, volume=1e-3), index)
        self.assertEqual(CellSourceAggregator().aggregate(cell, 0.01).h2o, 0.0)

    def test_combustion_diagnostic(self):
        session = SimulationSession()
        gas = GasCellState(T=1800.0, rho=0.3, mass_fractions=FLAME_GAS, volume=1e-3)
        acc = CellSourceAggregator().aggregate(Cell(0, gas), 0.01, session=session)

        kin = CombustionKinetics()
        expected = kin.heat_release_rate(kin.calculate_rates(gas)) * 1e-3 * 0.01
        self.assertAlmostEqual(session.combustion_energy / expected, 1.0)
        # Gas combustion is reported, not injected
        self.assertEqual(acc.energy, 0.0)

    def test_index_move_and_remove(self):
        lc = ParticleLifecycle()
        p = lc.create(T=700.0, mass=1e-6, cell_id=1)
        twin = lc.create(T=700.0, mass=1e-6, cell_id=1)
        index = CellParticleIndex([p, twin])

        # Host changed cell_id behind the index's back
        p.cell_id = 2
        index.move(p, 2)
        self.assertEqual(len(index.particles_in(1)), 1)
        self.assertIs(index.particles_in(1)[0], twin)
        self.assertIs(index.particles_in(2)[0], p)

        index.remove(p)
        index.remove(twin)
        self.assertEqual(len(index), 0)
        self.assertEqual(index.particles_in(1), [])
        self.assertEqual(index.all_particles(), [])
        with self.assertRaises(ValueError):
            index.remove(p)

    def test_invalid_volume(self):
        with self.assertRaises(ValueError):
            Cell(0, GasCellState(T=1000.0, rho=0.3, volume=0.0))


class TestHostInterface(unittest.TestCase):

    def setUp(self):
        self.lc = ParticleLifecycle()
        self.index = CellParticleIndex()
        p = self.lc.create(T=650.0, mass=1e-6, cell_id=0)
        self.index.add(p)
        self.gas = GasCellState(T=1800.0, rho=0.3, mass_fractions=FLAME_GAS, volume=1e-3)
        self.particle = p

    def test_source_callbacks(self):
        self.assertTrue(particle_law(self.particle, self.gas, 0.01, 100.0))
        session = SimulationSession()
        callbacks = SourceCallbacks(0.01, session=session)
        cell = Cell.with_index(0, self.gas, self.index)

        for fn in (callbacks.energy, callbacks.h2o, callbacks.no2, callbacks.o2):
            value, dS = fn(cell, None)
            self.assertEqual(dS, 0.0)
        self.assertGreater(callbacks.h2o(cell)[0], 0.0)
        self.assertEqual(callbacks.no2(cell)[0], 0.0)
        self.assertAlmostEqual(callbacks.source(cell, None, 'h2o')[0],
                               self.particle.transfer.h2o_rate / 1e-3)

        # Four equations, one aggregation: diagnostic counted once
        kin = CombustionKinetics()
        expected = kin.heat_release_rate(kin.calculate_rates(self.gas)) * 1e-3 * 0.01
        self.assertAlmostEqual(session.combustion_energy / expected, 1.0)

        callbacks.new_step(0.01)
        callbacks.energy(cell)
        self.assertAlmostEqual(session.combustion_energy / expected, 2.0)

    def test_unknown_equation(self):
        callbacks = SourceCallbacks(0.01)
        cell = Cell.with_index(0, self.gas, self.index)
        with self.assertRaises(KeyError):
            callbacks.source(cell, None, 'co2')

    def test_initialize_particle(self):
        self.particle.composition.hydrate_mass = 0.0
        self.particle.transfer.h2o_rate = 1.0
        self.particle.transfer.q_reaction = -2.0
        initialize_particle(self.particle)
        self.assertEqual(self.particle.composition.hydrate_mass, self.particle.mass)
        self.assertEqual(self.particle.composition.salt_mass, 0.0)
        self.assertEqual(self.particle.transfer.h2o_rate, 0.0)
        self.assertEqual(self.particle.transfer.net_heat, 0.0)

    def test_particle_law_rejects_bad_step(self):
        with self.assertRaises(ValueError):
            particle_law(self.particle, self.gas, 0.0, 100.0)


class TestStepPipeline(unittest.TestCase):

    def _setup(self):
        lc = ParticleLifecycle()
        index = CellParticleIndex()
        for i in range(3):
            index.add(lc.create(T=650.0 + 50.0 * i, mass=1e-6, cell_id=0))
        gas0 = GasCellState(T=1200.0, rho=0.3, velocity=5.0,
                            mass_fractions={'O2': 0.23, 'N2': 0.77}, volume=1e-3)
        gas1 = GasCellState(T=1200.0, rho=0.3, volume=1e-3)
        cells = [Cell.with_index(0, gas0, index), Cell.with_index(1, gas1, index)]
        return cells, index

    def test_step_order_and_sources(self):
        cells, index = self._setup()
        session = SimulationSession()
        pipeline = StepPipeline(session=session)
        sources = pipeline.run(cells, 0.01)

        self.assertGreater(sources[0].h2o, 0.0)
        self.assertEqual(sources[0].no2, 0.0)
        self.assertEqual(sources[1].as_dict(), {'energy': 0.0, 'h2o': 0.0, 'no2': 0.0, 'o2': 0.0})
        self.assertLess(session.decomposition_energy, 0.0)

        particles = index.all_particles()
        total_h2o = sum(p.transfer.h2o_rate for p in particles)
        self.assertAlmostEqual(sources[0].h2o, total_h2o / 1e-3)
        # Gas energy source mirrors the particle net heat, reaction cooling included
        total_heat = sum(p.transfer.net_heat for p in particles)
        self.assertNotEqual(total_heat, 0.0)
        self.assertAlmostEqual(sources[0].energy / (-total_heat / 1e-3), 1.0)

    def test_temperature_integration(self):
        cells, index = self._setup()
        pipeline = StepPipeline(integrate_temperature=True)
        pipeline.run(cells, 0.01)
        for p in index.all_particles():
            self.assertGreater(p.T, 640.0)
        self.assertGreater(index.all_particles()[0].T, 650.0)

    def test_closure_for_cell(self):
        cells, _ = self._setup()
        res = StepPipeline().closure_for(cells[0])
        # Default cell carries no turbulence
        self.assertEqual(res.reacting_fraction, 0.0)

    def test_invalid_step(self):
        cells, _ = self._setup()
        with self.assertRaises(ValueError):
            StepPipeline().run(cells, -1.0)


if __name__ == '__main__':
    unittest.main()
