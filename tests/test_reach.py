import unittest
import numpy as np
import sympy as sp

from AINNCS.time import ContinuousTimeSpec, DiscreteTimeSpec
from AINNCS.system import System, ControlledSystem
from AINNCS.control import LinearControl, ConstantDisturbance
from AINNCS.reach import UniformPartitioner
from AINNCS.sets import Hyperrectangle


class TestTimeSpec(unittest.TestCase):
    def test_continuous(self):
        t_spec = ContinuousTimeSpec(0.01, 0.1)
        self.assertEqual(t_spec.n_step, 10)
        self.assertEqual(t_spec.tu(0, 1).shape, (10, 10))
        self.assertEqual(len(t_spec.tt(0, 1)), 101)
        self.assertEqual(len(t_spec.uu(0, 1)), 11)

    def test_invalid(self):
        with self.assertRaises(ValueError):
            ContinuousTimeSpec(0.2, 0.1)
        with self.assertRaises(ValueError):
            ContinuousTimeSpec(0.03, 0.1)

    def test_discrete(self):
        t_spec = DiscreteTimeSpec()
        np.testing.assert_allclose(t_spec.uu(0, 3), [0, 1, 2, 3])


class TestReachability(unittest.TestCase):
    def setUp(self):
        x1, x2, u, w = sp.symbols("x1 x2 u w")
        # Damped pendulum-like double integrator with a bounded disturbance
        f_eqn = [x2, u + 0.5 * sp.sin(x1) + w]
        self.sys = System([x1, x2], [u], [w], f_eqn, ContinuousTimeSpec(0.01, 0.1))
        self.clsys = ControlledSystem(self.sys, LinearControl(np.array([[-2.0, -1.5]])),
                                      ConstantDisturbance([0.0], [-0.05], [0.05]))
        self.x0 = Hyperrectangle(low=[0.9, -0.1], high=[1.1, 0.1])
        self.t_end = 1.0

    def check_containment(self, rs, trajs):
        tt = self.sys.t_spec.tt(0, self.t_end)
        for traj in trajs:
            for t, x in zip(tt, traj(tt)):
                _x, x_ = rs(t)
                self.assertTrue(np.all(_x - 1e-6 <= x) and np.all(x <= x_ + 1e-6), f"{x} not in [{_x}, {x_}] at t={t}")

    def test_contains_simulations(self):
        partitioner = UniformPartitioner(self.clsys)
        rs = partitioner.compute_reachable_set(0, self.t_end, self.x0)
        trajs = self.clsys.compute_mc_trajectories(0, self.t_end, self.x0, 10, include_vertices=True,
                                                   rng=np.random.default_rng(0))
        self.check_containment(rs, trajs)

    def test_partitioned_contains_simulations(self):
        partitioner = UniformPartitioner(self.clsys)
        rs = partitioner.compute_reachable_set(0, self.t_end, self.x0, UniformPartitioner.Opts(depth=1, splits=(2, 1)))
        trajs = self.clsys.compute_mc_trajectories(0, self.t_end, self.x0, 5, include_vertices=True,
                                                   rng=np.random.default_rng(2))
        self.check_containment(rs, trajs)

    def test_partition_counts(self):
        partitioner = UniformPartitioner(self.clsys)
        t_end = 0.2
        self.assertEqual(len(partitioner.compute_reachable_set(0, t_end, self.x0)), 1)
        opts = UniformPartitioner.Opts(depth=2, primer_depth=1)
        self.assertEqual(len(partitioner.compute_reachable_set(0, t_end, self.x0, opts)), 16)
        opts = UniformPartitioner.Opts(splits=(2, 3))
        self.assertEqual(len(partitioner.compute_reachable_set(0, t_end, self.x0, opts)), 6)
        opts = UniformPartitioner.Opts(depth=1, splits=(2, 3))
        rs = partitioner.compute_reachable_set(0, t_end, self.x0, opts)
        self.assertEqual(len(rs), 24)
        self.assertEqual(len(rs.get_all(t_end)), 24)

    def test_simulation(self):
        rng = np.random.default_rng(1)
        trajs = self.clsys.compute_mc_trajectories(0, self.t_end, self.x0, 3, include_vertices=True, rng=rng)
        self.assertEqual(len(trajs), 7)
        tt = self.sys.t_spec.tt(0, self.t_end)
        xx = trajs[0](tt)
        self.assertEqual(xx.shape, (len(tt), 2))
        self.assertTrue(self.x0.contains(xx[0]))
        with self.assertRaises(Exception):
            trajs[0](self.t_end + 1)


class TestExpandingSystem(unittest.TestCase):
    def setUp(self):
        x, u, w = sp.symbols("x u w")
        self.sys = System([x], [u], [w], [x + u], ContinuousTimeSpec(0.01, 0.1))
        self.clsys = ControlledSystem(self.sys, LinearControl(np.array([[0.0]])))
        self.x0 = Hyperrectangle(low=[1.0], high=[1.1])
        self.t_end = 1.0

    def test_contains_simulations(self):
        rs = UniformPartitioner(self.clsys).compute_reachable_set(0, self.t_end, self.x0)
        trajs = self.clsys.compute_mc_trajectories(0, self.t_end, self.x0, 10, include_vertices=True,
                                                   rng=np.random.default_rng(0))
        tt = self.sys.t_spec.tt(0, self.t_end)
        for traj in trajs:
            for t, x in zip(tt, traj(tt)):
                _x, x_ = rs(t)
                self.assertTrue(np.all(_x <= x) and np.all(x <= x_), f"{x} not in [{_x}, {x_}] at t={t}")
        # x(t) = x0 exp(t), the flowpipe stays close to it
        _x, x_ = rs(self.t_end)
        self.assertLessEqual(_x[0], np.e)
        self.assertGreaterEqual(x_[0], 1.1 * np.e)
        self.assertLess(x_[0] - _x[0], 0.2 * np.e)

    def test_point_initial_set(self):
        x0 = Hyperrectangle(low=[1.0], high=[1.0])
        rs = UniformPartitioner(self.clsys).compute_reachable_set(0, self.t_end, x0)
        _x, x_ = rs(self.t_end)
        self.assertLess(_x[0], np.e)
        self.assertGreater(x_[0], np.e)


if __name__ == "__main__":
    unittest.main()
