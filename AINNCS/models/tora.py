"""Translational Oscillations by a Rotational Actuator (TORA).

A cart attached to a wall with a spring, free to move on a friction-less
surface, with a weight attached to an arm rotating about an axis. The arm
torque is the control input that stabilizes the cart at x = 0::

    x1' = x2
    x2' = -x1 + 0.1 sin(x3)
    x3' = x4
    x4' = u

Three controllers are considered: ReLU (u = f(x) - 10, period 1 s),
sigmoid and mixed ReLU/tanh (u = 11 f(x), period 0.5 s).
"""
import numpy as np
import sympy as sp
from AINNCS.time import ContinuousTimeSpec
from AINNCS.system import System, NNCSystem
from AINNCS.neural import NeuralNetwork
from AINNCS.control import UniformAdditivePostprocessing, LinearMapPostprocessing
from AINNCS.sets import Hyperrectangle
from AINNCS.specs import SafetyPredicate, ReachabilityPredicate
from AINNCS.plotting import PlotSpec
from AINNCS.benchmark import Instance, run_instances
from AINNCS.config import modelpath

NAME = 'TORA'
FOLDER = 'Sherlock-Benchmark-9-TORA'

x1, x2, x3, x4, u, w = sp.symbols('x1 x2 x3 x4 u w')
x_vars = [x1, x2, x3, x4]

f_eqn = [
    x2,
    -x1 + 0.1*sp.sin(x3),
    x4,
    u,
]

X0_ReLU = Hyperrectangle(low=[0.6, -0.7, -0.4, 0.5], high=[0.7, -0.6, -0.3, 0.6])
X0_others = Hyperrectangle(low=[-0.77, -0.45, 0.51, -0.3], high=[-0.75, -0.43, 0.54, -0.28])
initial_sets = [X0_ReLU, X0_others]

period_ReLU = 1.0
period_others = 0.5
T_ReLU = 20.0
T_others = 5.0

postprocessing_ReLU = UniformAdditivePostprocessing(-10.0)
postprocessing_others = LinearMapPostprocessing(11.0)

# Stay in [-2, 2]^4 for 20 s
safe_states = SafetyPredicate(Hyperrectangle(-2*np.ones(4), 2*np.ones(4)), (1, 2, 3, 4))
goal_states_x1x2 = Hyperrectangle(low=[-0.1, -0.9], high=[0.2, -0.6])

def system (period, t_step=0.01) :
    return System(x_vars, [u], [w], f_eqn, ContinuousTimeSpec(t_step, period))

def instances (opts) :
    controller_relu = NeuralNetwork.from_mat(modelpath(opts, FOLDER, 'controllerTora.mat'))
    controller_sigmoid = NeuralNetwork.from_mat(modelpath(opts, FOLDER, 'nn_tora_sigmoid.mat'))
    controller_relutanh = NeuralNetwork.from_mat(modelpath(opts, FOLDER, 'nn_tora_relu_tanh.mat'))

    reach_goal = ReachabilityPredicate(goal_states_x1x2, (1, 2), (T_others, T_others))
    return [
        Instance(NAME, 'relu',
                 NNCSystem(system(period_ReLU), controller_relu, postprocessing_ReLU),
                 X0_ReLU, T_ReLU if opts.verification else 2*period_ReLU, safe_states,
                 splits=(4, 4, 3, 5) if opts.verification else None,
                 trajectories=10, include_vertices=True,
                 plots=[PlotSpec((1, 2)), PlotSpec((3, 4))]),
        Instance(NAME, 'sigmoid',
                 NNCSystem(system(period_others), controller_sigmoid, postprocessing_others),
                 X0_others, T_others, reach_goal, trajectories=1, include_vertices=True,
                 plots=[PlotSpec((1, 2), inset=((0.1, 0.25), (-0.9, -0.8)))]),
        Instance(NAME, 'relutanh',
                 NNCSystem(system(period_others), controller_relutanh, postprocessing_others),
                 X0_others, T_others, reach_goal, trajectories=1, include_vertices=True,
                 plots=[PlotSpec((1, 2), inset=((0.0, 0.25), (-0.85, -0.7)))]),
    ]

def run (results, opts) :
    run_instances(instances(opts), results, opts)
