"""Double inverted pendulum.

Two equal point masses (m = L = 0.5, c = 0, g = 1) with torques T1, T2 at
the joints::

    2 th1'' + th2'' cos(d) - th2'^2 sin(d) - 2 g/L sin(th1) + c th1'/(m L^2) = T1/(m L^2)
    th1'' cos(d) + th2'' + th1'^2 sin(d) - g/L sin(th2) + c th2'/(m L^2) = T2/(m L^2)

with d = th2 - th1, solved for the accelerations (the mass matrix has
determinant 2 - cos(d)^2 >= 1). Two controllers, a more robust and a less
robust one, have to keep every state in a box.
"""
import numpy as np
import sympy as sp
from AINNCS.time import ContinuousTimeSpec
from AINNCS.system import System, NNCSystem
from AINNCS.neural import NeuralNetwork
from AINNCS.sets import Hyperrectangle
from AINNCS.specs import SafetyPredicate
from AINNCS.plotting import PlotSpec
from AINNCS.benchmark import Instance, run_instances
from AINNCS.config import modelpath

NAME = 'Double-Pendulum'
FOLDER = 'Double-Pendulum'

th1, th2, th1d, th2d = sp.symbols('theta1 theta2 theta1dot theta2dot')
x_vars = [th1, th2, th1d, th2d]
T1, T2, w = sp.symbols('T1 T2 w')
u_vars = [T1, T2]

m = 0.5; L = 0.5; c = 0.; g = 1.

a = sp.cos(th2 - th1)
r1 = (T1 - c*th1d)/(m*L**2) + th2d**2*sp.sin(th2 - th1) + 2*g/L*sp.sin(th1)
r2 = (T2 - c*th2d)/(m*L**2) - th1d**2*sp.sin(th2 - th1) + g/L*sp.sin(th2)
det = 2 - a**2

f_eqn = [
    th1d,
    th2d,
    (r1 - a*r2)/det,
    (2*r2 - a*r1)/det,
]

X0 = Hyperrectangle(low=np.ones(4), high=1.3*np.ones(4))
initial_sets = [X0]

# scenario: (controller, control period, horizon, safe box)
scenarios = {
    'more robust' : ('controller_double_pendulum_more_robust.mat', 0.05, 1.0,
                     Hyperrectangle(-1.0*np.ones(4), 1.7*np.ones(4))),
    'less robust' : ('controller_double_pendulum_less_robust.mat', 0.02, 0.4,
                     Hyperrectangle(-0.5*np.ones(4), 1.5*np.ones(4))),
}

def system (period, t_step=0.01) :
    return System(x_vars, u_vars, [w], f_eqn, ContinuousTimeSpec(t_step, period))

def instances (opts) :
    ret = []
    for scenario, (filename, period, T, safe_box) in scenarios.items() :
        controller = NeuralNetwork.from_mat(modelpath(opts, FOLDER, filename))
        clsys = NNCSystem(system(period), controller)
        ret.append(Instance(NAME, scenario, clsys, X0, T, SafetyPredicate(safe_box, (1, 2, 3, 4)),
                            trajectories=10, include_vertices=True,
                            plots=[PlotSpec((1, 2)), PlotSpec((3, 4))]))
    return ret

def run (results, opts) :
    run_instances(instances(opts), results, opts)
