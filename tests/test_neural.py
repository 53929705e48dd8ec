import tempfile
import unittest
from pathlib import Path

import numpy as np
import torch
from scipy.io import savemat

from AINNCS.neural import NeuralNetwork, NeuralNetworkControl
from AINNCS.control import UniformAdditivePostprocessing


def cell(items):
    ret = np.empty(len(items), dtype=object)
    for i, item in enumerate(items):
        ret[i] = item
    return ret


def forward(Ws, bs, acts, x):
    for W, b, act in zip(Ws, bs, acts):
        x = W @ x + b
        if act == "relu":
            x = np.maximum(x, 0)
        elif act == "tanh":
            x = np.tanh(x)
        elif act == "sigmoid":
            x = 1 / (1 + np.exp(-x))
    return x


class TestNeuralNetwork(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.folder = Path(self.tmp.name)
        rng = np.random.default_rng(0)
        self.Ws = [rng.normal(size=(8, 3)), rng.normal(size=(8, 8)), rng.normal(size=(2, 8))]
        self.bs = [rng.normal(size=8), rng.normal(size=8), rng.normal(size=2)]
        self.acts = ["relu", "tanh", "linear"]
        self.rng = rng

    def tearDown(self):
        self.tmp.cleanup()

    def write_mat(self, act_key="act_fcns"):
        path = self.folder.joinpath("controller.mat")
        savemat(path, {"W": cell(self.Ws), "b": cell(self.bs), act_key: cell(self.acts)})
        return path

    def test_from_mat(self):
        net = NeuralNetwork.from_mat(self.write_mat())
        self.assertEqual(net.in_len, 3)
        self.assertEqual(net.out_len, 2)
        for x in self.rng.uniform(-1, 1, (20, 3)):
            y = net(torch.tensor(x, dtype=torch.float32).reshape(1, -1)).detach().numpy().reshape(-1)
            np.testing.assert_allclose(y, forward(self.Ws, self.bs, self.acts, x), rtol=1e-4, atol=1e-4)

    def test_act_key(self):
        net = NeuralNetwork.from_mat(self.write_mat("activation_fcns"), act_key="activation_fcns")
        self.assertEqual(net.out_len, 2)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            NeuralNetwork.from_mat(self.folder.joinpath("missing.mat"))

    def test_unknown_activation(self):
        with self.assertRaises(ValueError):
            NeuralNetwork(self.Ws, self.bs, ["relu", "softplus", "linear"])

    def test_preprocessing(self):
        net = NeuralNetwork(self.Ws, self.bs, self.acts)
        M = self.rng.normal(size=(3, 5))
        c = self.rng.normal(size=3)
        net.insert_preprocessing(M, c)
        self.assertEqual(net.in_len, 5)
        x = self.rng.uniform(-1, 1, 5)
        y = net(torch.tensor(x, dtype=torch.float32).reshape(1, -1)).detach().numpy().reshape(-1)
        np.testing.assert_allclose(y, forward(self.Ws, self.bs, self.acts, M @ x + c), rtol=1e-4, atol=1e-4)

    def test_crown_bounds(self):
        net = NeuralNetwork(self.Ws, self.bs, self.acts)
        control = NeuralNetworkControl(net, UniformAdditivePostprocessing(-10.0))
        _x, x_ = np.array([-0.2, 0.1, 0.3]), np.array([0.1, 0.3, 0.4])
        control.prime(_x, x_)
        _u, u_ = control.step_if(0, _x, x_)
        self.assertTrue(np.all(_u <= u_))
        for x in self.rng.uniform(_x, x_, (200, 3)):
            u = control.u(0, x)
            self.assertTrue(np.all(_u - 1e-4 <= u), f"{u} below {_u}")
            self.assertTrue(np.all(u <= u_ + 1e-4), f"{u} above {u_}")

    def test_crown_bounds_subset(self):
        # bounds primed on a box stay valid on its sub-boxes
        net = NeuralNetwork(self.Ws, self.bs, ["sigmoid", "relu", "linear"])
        control = NeuralNetworkControl(net, uclip=(-1.0, 1.0))
        _x, x_ = np.array([-0.5, -0.5, -0.5]), np.array([0.5, 0.5, 0.5])
        control.prime(_x, x_)
        _s, s_ = np.array([0.0, 0.0, 0.0]), np.array([0.25, 0.5, 0.1])
        _u, u_ = control.step_if(0, _s, s_)
        self.assertTrue(np.all(-1.0 <= _u) and np.all(u_ <= 1.0))
        for x in self.rng.uniform(_s, s_, (200, 3)):
            u = control.u(0, x)
            self.assertTrue(np.all(_u - 1e-4 <= u) and np.all(u <= u_ + 1e-4))


class TestNNetReader(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name).joinpath("net.nnet")
        self.W0 = np.array([[1.0, -1.0], [0.5, 2.0], [-1.0, 0.25]])
        self.b0 = np.array([0.1, -0.2, 0.3])
        self.W1 = np.array([[1.0, -2.0, 0.5]])
        self.b1 = np.array([0.05])
        self.means = np.array([1.0, 2.0, 0.5])
        self.ranges = np.array([2.0, 4.0, 3.0])
        lines = [
            "// Neural network in .nnet format",
            "// written for the reader test",
            "2,2,1,3,",
            "2,3,1,",
            "0,",
            "-10.0,-10.0,",
            "10.0,10.0,",
            ",".join(str(v) for v in self.means) + ",",
            ",".join(str(v) for v in self.ranges) + ",",
        ]
        lines += [",".join(str(v) for v in row) + "," for row in self.W0]
        lines += [f"{v}," for v in self.b0]
        lines += [",".join(str(v) for v in row) + "," for row in self.W1]
        lines += [f"{v}," for v in self.b1]
        self.path.write_text("\n".join(lines) + "\n")

    def tearDown(self):
        self.tmp.cleanup()

    def test_normalization_folded(self):
        net = NeuralNetwork.from_nnet(self.path)
        self.assertEqual(net.in_len, 2)
        self.assertEqual(net.out_len, 1)
        for x in [np.array([0.0, 0.0]), np.array([1.5, -3.0]), np.array([-2.0, 5.0])]:
            xn = (x - self.means[:2]) / self.ranges[:2]
            hidden = np.maximum(self.W0 @ xn + self.b0, 0)
            expected = (self.W1 @ hidden + self.b1) * self.ranges[2] + self.means[2]
            y = net(torch.tensor(x, dtype=torch.float32).reshape(1, -1)).detach().numpy().reshape(-1)
            np.testing.assert_allclose(y, expected, rtol=1e-5, atol=1e-5)


if __name__ == "__main__":
    unittest.main()
