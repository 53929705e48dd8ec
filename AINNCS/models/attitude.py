"""Attitude control of a rigid body.

Angular velocities (w1, w2, w3) and Rodrigues parameters (psi1, psi2, psi3)::

    w1' = 0.25 (u1 + w2 w3)
    w2' = 0.5 (u2 - 3 w1 w3)
    w3' = u3 + 2 w1 w2
    psi' = 0.5 (psi psi^T + I + S(psi)) w

The state must avoid a box of unsafe attitudes for 3 s.
"""
import sympy as sp
from AINNCS.time import ContinuousTimeSpec
from AINNCS.system import System, NNCSystem
from AINNCS.neural import NeuralNetwork
from AINNCS.sets import Hyperrectangle
from AINNCS.specs import AvoidPredicate
from AINNCS.plotting import PlotSpec
from AINNCS.benchmark import Instance, run_instances
from AINNCS.config import modelpath

NAME = 'AttitudeControl'
FOLDER = 'AttitudeControl'

# States
w1, w2, w3, p1, p2, p3 = sp.symbols('w1 w2 w3 p1 p2 p3')
x_vars = [w1, w2, w3, p1, p2, p3]
# Controls
u1, u2, u3 = sp.symbols('u1 u2 u3')
u_vars = [u1, u2, u3]
# Disturbance
w_dist = sp.symbols('w_dist')

f_eqn = [
    0.25*(u1 + w2*w3),
    0.5*(u2 - 3*w1*w3),
    u3 + 2*w1*w2,
    0.5*(w2*(p1*p2 - p3) + w3*(p1*p3 + p2) + w1*(p1**2 + 1)),
    0.5*(w1*(p1*p2 + p3) + w3*(p2*p3 - p1) + w2*(p2**2 + 1)),
    0.5*(w1*(p1*p3 - p2) + w2*(p2*p3 + p1) + w3*(p3**2 + 1)),
]

X0 = Hyperrectangle(low=[-0.45, -0.55, 0.65, -0.75, 0.85, -0.65],
                    high=[-0.44, -0.54, 0.66, -0.74, 0.86, -0.64])
initial_sets = [X0]

period = 0.1
T = 3.0

unsafe_box = Hyperrectangle(low=[-0.2, -0.5, 0, -0.7, 0.7, -0.4], high=[0, -0.4, 0.2, 0, 0.8, -0.2])

def system (t_step=0.01) :
    return System(x_vars, u_vars, [w_dist], f_eqn, ContinuousTimeSpec(t_step, period))

def instances (opts) :
    controller = NeuralNetwork.from_mat(modelpath(opts, FOLDER, 'CLF_controller_layer_num_3.mat'))
    clsys = NNCSystem(system(), controller)
    return [
        Instance(NAME, 'avoid', clsys, X0, T, AvoidPredicate(unsafe_box, (1, 2, 3, 4, 5, 6)),
                 trajectories=10, include_vertices=True,
                 plots=[PlotSpec((1, 2)), PlotSpec((4, 5))]),
    ]

def run (results, opts) :
    run_instances(instances(opts), results, opts)
