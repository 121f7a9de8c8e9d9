import unittest
import sys
import os
import math

# Add src to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src')))

from nitrate_kinetics.constants import DEFAULT_CONSTANTS
from nitrate_kinetics.state import GasCellState
from nitrate_kinetics.turbulence import EDCClosure


class TestEDCClosure(unittest.TestCase):

    def setUp(self):
        self.edc = EDCClosure()
        self.c = DEFAULT_CONSTANTS

    def test_degenerate_turbulence(self):
        for nu in [0.0, 1.5e-5, 1e-3]:
            for k, eps in [(0.0, 1.0), (1.0, 0.0), (1e-12, 1e-12), (1.0, 5e-11)]:
                with self.subTest(k=k, eps=eps, nu=nu):
                    res = self.edc.evaluate(k, eps, nu)
                    self.assertEqual(res.reacting_fraction, 0.0)
                    self.assertTrue(math.isinf(res.mixing_time))

    def test_vanishing_viscosity(self):
        for nu in [0.0, -1e-6, 1e-12]:
            with self.subTest(nu=nu):
                res = self.edc.evaluate(1.0, 10.0, nu, T=1800.0)
                self.assertEqual(res.reacting_fraction, 0.0)
                self.assertTrue(math.isinf(res.mixing_time))

    def test_low_temperature_scales(self):
        k, eps, nu = 1.0, 10.0, 1.5e-5
        res = self.edc.evaluate(k, eps, nu, T=1000.0)
        gamma = self.c.EDC_C_XI * (nu * eps / k**2) ** 0.25
        self.assertAlmostEqual(res.reacting_fraction, gamma**2)
        self.assertAlmostEqual(res.mixing_time, self.c.EDC_C_TAU * math.sqrt(nu / eps))
        self.assertGreater(res.reacting_fraction, 0.0)
        self.assertLessEqual(res.reacting_fraction, 1.0)

    def test_ramp_multiplier(self):
        self.assertEqual(self.edc.ramp_multiplier(1000.0), 1.0)
        self.assertEqual(self.edc.ramp_multiplier(1500.0), 1.0)
        self.assertAlmostEqual(self.edc.ramp_multiplier(1750.0), 1.25)
        self.assertAlmostEqual(self.edc.ramp_multiplier(2000.0), 1.5)
        self.assertAlmostEqual(self.edc.ramp_multiplier(3000.0), 1.5)

    def test_hot_gas_mixes_faster(self):
        k, eps, nu = 1.0, 10.0, 1.5e-5
        cold = self.edc.evaluate(k, eps, nu, T=1200.0)
        hot = self.edc.evaluate(k, eps, nu, T=2200.0)
        self.assertGreater(hot.reacting_fraction, cold.reacting_fraction)
        self.assertLess(hot.mixing_time, cold.mixing_time)
        self.assertAlmostEqual(hot.reacting_fraction / cold.reacting_fraction, 1.5**2)

    def test_fraction_capped_at_one(self):
        res = self.edc.evaluate(1e-6, 1e3, 1e-3, T=2500.0)
        self.assertEqual(res.reacting_fraction, 1.0)

    def test_cell_state(self):
        gas = GasCellState(T=1800.0, rho=0.3, k=2.0, epsilon=50.0, nu=3e-4)
        self.assertEqual(self.edc.evaluate_cell(gas), self.edc.evaluate(2.0, 50.0, 3e-4, 1800.0))


if __name__ == '__main__':
    unittest.main()
