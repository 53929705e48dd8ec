import unittest
import numpy as np
import sympy as sp

from AINNCS.inclusion import NaturalInclusion


class TestNaturalInclusion(unittest.TestCase):
    def setUp(self):
        self.x, self.y, self.z = sp.symbols("x y z")
        self.rng = np.random.default_rng(1)

    def check_encloses(self, exprs, _z, z_, N=500):
        symbols = [self.x, self.y, self.z]
        f_if = NaturalInclusion(symbols, exprs)
        f = sp.lambdify([symbols], exprs, "numpy")
        _f, f_ = f_if(np.array(_z, dtype=float), np.array(z_, dtype=float))
        for p in self.rng.uniform(_z, z_, (N, 3)):
            v = np.array(f(p), dtype=float)
            self.assertTrue(np.all(_f - 1e-9 <= v), f"{v} below {_f}")
            self.assertTrue(np.all(v <= f_ + 1e-9), f"{v} above {f_}")
        return _f, f_

    def test_polynomial(self):
        x, y, z = self.x, self.y, self.z
        self.check_encloses([x**2 - 3 * x * y + z, x**3 + 0.5], [-1, 0, 2], [1, 2, 3])

    def test_functions(self):
        x, y, z = self.x, self.y, self.z
        exprs = [
            sp.sin(x) * y + sp.cos(z),
            sp.tanh(x) + sp.atan(y) - sp.exp(z / 4),
            sp.tan(x) / sp.cos(y),
            sp.Abs(x - y) + sp.log(z),
            sp.sqrt(x**2 + y**2) - 1 / sp.sqrt(z),
        ]
        self.check_encloses(exprs, [-0.5, 0.1, 1.0], [0.7, 0.9, 2.0])

    def test_point_evaluation(self):
        x, y, z = self.x, self.y, self.z
        _f, f_ = self.check_encloses([2 * x + y * z], [1, 2, 3], [1, 2, 3])
        self.assertAlmostEqual(_f[0], 8.0)
        self.assertAlmostEqual(f_[0], 8.0)

    def test_eval_i(self):
        x, y, z = self.x, self.y, self.z
        f_if = NaturalInclusion([x, y, z], [x + y, y * z])
        self.assertEqual(len(f_if), 2)
        self.assertEqual(f_if.eval_i(1, np.array([0.0, 1.0, -1.0]), np.array([0.0, 2.0, 1.0])), (-2.0, 2.0))

    def test_unsupported(self):
        with self.assertRaises(ValueError):
            NaturalInclusion([self.x], [sp.floor(self.x)])
        with self.assertRaises(ValueError):
            NaturalInclusion([self.x], [self.x + self.y])


if __name__ == "__main__":
    unittest.main()
