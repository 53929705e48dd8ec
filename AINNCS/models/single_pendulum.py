"""Single inverted pendulum.

    theta'' = g/L sin(theta) + (T - c theta')/(m L^2)

with m = L = 0.5, c = 0, g = 1. The angle must stay in [0, 1] between
0.5 s and 1 s.
"""
import sympy as sp
from AINNCS.time import ContinuousTimeSpec
from AINNCS.system import System, NNCSystem
from AINNCS.neural import NeuralNetwork
from AINNCS.sets import Hyperrectangle
from AINNCS.specs import SafetyPredicate
from AINNCS.plotting import PlotSpec
from AINNCS.benchmark import Instance, run_instances
from AINNCS.config import modelpath

NAME = 'Single-Pendulum'
FOLDER = 'Single-Pendulum'

th, thd, T_u, w = sp.symbols('theta thetadot T w')
x_vars = [th, thd]

m = 0.5; L = 0.5; c = 0.; g = 1.

f_eqn = [
    thd,
    g/L*sp.sin(th) + (T_u - c*thd)/(m*L**2),
]

X0 = Hyperrectangle(low=[1.0, 0.0], high=[1.2, 0.2])
initial_sets = [X0]

period = 0.05
T = 1.0

safe_theta = SafetyPredicate(Hyperrectangle(low=[0.], high=[1.]), (1,), (0.5, T))

def system (t_step=0.01) :
    return System(x_vars, [T_u], [w], f_eqn, ContinuousTimeSpec(t_step, period))

def instances (opts) :
    controller = NeuralNetwork.from_mat(modelpath(opts, FOLDER, 'controller_single_pendulum.mat'))
    clsys = NNCSystem(system(), controller)
    return [
        Instance(NAME, 'continuous', clsys, X0, T, safe_theta,
                 trajectories=10, include_vertices=True,
                 plots=[PlotSpec((0, 1))]),
    ]

def run (results, opts) :
    run_instances(instances(opts), results, opts)
