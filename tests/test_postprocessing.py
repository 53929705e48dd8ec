import unittest
import numpy as np

from AINNCS.control import (NoPostprocessing, UniformAdditivePostprocessing, LinearMapPostprocessing,
                            ConstantDisturbance, LinearControl)
from AINNCS.models import tora, unicycle


class TestBenchmarkPostprocessing(unittest.TestCase):
    def setUp(self):
        self.y = np.array([0.25, -3.0])

    def test_tora_relu(self):
        np.testing.assert_allclose(tora.postprocessing_ReLU(self.y[:1]), [0.25 - 10])

    def test_tora_others(self):
        np.testing.assert_allclose(tora.postprocessing_others(self.y[:1]), [11 * 0.25])

    def test_unicycle(self):
        np.testing.assert_allclose(unicycle.postprocessing(self.y), self.y - 20)


class TestPostprocessingBounds(unittest.TestCase):
    def setUp(self):
        self._y = np.array([-1.0, 0.5])
        self.y_ = np.array([2.0, 1.5])

    def test_none(self):
        _u, u_ = NoPostprocessing().bounds(self._y, self.y_)
        np.testing.assert_array_equal(_u, self._y)
        np.testing.assert_array_equal(u_, self.y_)

    def test_additive(self):
        _u, u_ = UniformAdditivePostprocessing(-10.0).bounds(self._y, self.y_)
        np.testing.assert_allclose(_u, self._y - 10)
        np.testing.assert_allclose(u_, self.y_ - 10)

    def test_positive_scale(self):
        _u, u_ = LinearMapPostprocessing(11.0).bounds(self._y, self.y_)
        np.testing.assert_allclose(_u, 11 * self._y)
        np.testing.assert_allclose(u_, 11 * self.y_)

    def test_negative_scale_swaps(self):
        _u, u_ = LinearMapPostprocessing(-2.0).bounds(self._y, self.y_)
        np.testing.assert_allclose(_u, -2 * self.y_)
        np.testing.assert_allclose(u_, -2 * self._y)

    def test_matrix(self):
        a = np.array([[1.0, -1.0], [0.0, 2.0]])
        post = LinearMapPostprocessing(a)
        _u, u_ = post.bounds(self._y, self.y_)
        rng = np.random.default_rng(0)
        for y in rng.uniform(self._y, self.y_, (100, 2)):
            u = post(y)
            np.testing.assert_allclose(u, a @ y)
            self.assertTrue(np.all(_u <= u + 1e-12) and np.all(u <= u_ + 1e-12))


class TestControlAndDisturbance(unittest.TestCase):
    def test_linear_control_bounds(self):
        control = LinearControl(np.array([[-1.0, 2.0]]))
        _x, x_ = np.array([0.0, -1.0]), np.array([1.0, 1.0])
        _u, u_ = control.step_if(0, _x, x_)
        np.testing.assert_allclose(_u, [-3.0])
        np.testing.assert_allclose(u_, [2.0])
        np.testing.assert_allclose(control.step(0, np.array([0.5, 0.5])), [0.5])

    def test_constant_disturbance(self):
        dist = ConstantDisturbance([0.0], [-0.1], [0.2])
        w = dist.sample(np.random.default_rng(0))
        self.assertTrue(-0.1 <= w[0] <= 0.2)
        np.testing.assert_array_equal(dist.w(0, None), [0.0])
        with self.assertRaises(ValueError):
            ConstantDisturbance([0.0], [0.2], [-0.1])


if __name__ == "__main__":
    unittest.main()
