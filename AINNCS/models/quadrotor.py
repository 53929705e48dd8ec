"""Quadrotor.

Twelve-state quadrotor: inertial position (x1, x2, x3), body velocities
(x4, x5, x6), Euler angles (x7, x8, x9) and body rates (x10, x11, x12).
The network commands the thrust and the roll and pitch torques; the yaw
torque is zero. The altitude x3 has to reach [0.94, 1.06] at 5 s.
"""
import numpy as np
import sympy as sp
from AINNCS.time import ContinuousTimeSpec
from AINNCS.system import System, NNCSystem
from AINNCS.neural import NeuralNetwork
from AINNCS.sets import Hyperrectangle
from AINNCS.specs import ReachabilityPredicate
from AINNCS.plotting import PlotSpec
from AINNCS.benchmark import Instance, run_instances
from AINNCS.config import modelpath

NAME = 'Quadrotor'
FOLDER = 'Quadrotor'

# States
x1, x2, x3, x4, x5, x6, x7, x8, x9, x10, x11, x12 = sp.symbols('x1 x2 x3 x4 x5 x6 x7 x8 x9 x10 x11 x12')
x_vars = [x1, x2, x3, x4, x5, x6, x7, x8, x9, x10, x11, x12]
# Control
u1, u2, u3 = sp.symbols('u1 u2 u3')
u_vars = [u1, u2, u3]
# Disturbance
w_dist = sp.symbols('w_dist')

g = 9.81; m = 1.4
Jx = 0.054; Jy = 0.054; Jz = 0.104
tau = 0

f_eqn = [
    sp.cos(x8)*sp.cos(x9)*x4 + (sp.sin(x7)*sp.sin(x8)*sp.cos(x9) - sp.cos(x7)*sp.sin(x9))*x5 + (sp.cos(x7)*sp.sin(x8)*sp.cos(x9) + sp.sin(x7)*sp.sin(x9))*x6,
    sp.cos(x8)*sp.sin(x9)*x4 + (sp.sin(x7)*sp.sin(x8)*sp.sin(x9) + sp.cos(x7)*sp.cos(x9))*x5 + (sp.cos(x7)*sp.sin(x8)*sp.sin(x9) - sp.sin(x7)*sp.cos(x9))*x6,
    sp.sin(x8)*x4 - sp.sin(x7)*sp.cos(x8)*x5 - sp.cos(x7)*sp.cos(x8)*x6,
    x12*x5 - x11*x6 - g*sp.sin(x8),
    x10*x6 - x12*x4 + g*sp.cos(x8)*sp.sin(x7),
    x11*x4 - x10*x5 + g*sp.cos(x8)*sp.cos(x7) - g - u1/m,
    x10 + sp.sin(x7)*sp.tan(x8)*x11 + sp.cos(x7)*sp.tan(x8)*x12,
    sp.cos(x7)*x11 - sp.sin(x7)*x12,
    sp.sin(x7)*x11/sp.cos(x8) + sp.cos(x7)*x12/sp.cos(x8),
    (Jy - Jz)*x11*x12/Jx + u2/Jx,
    (Jz - Jx)*x10*x12/Jy + u3/Jy,
    (Jx - Jy)*x10*x11/Jz + tau/Jz,
]

X0 = Hyperrectangle(low=np.concatenate((-0.4*np.ones(6), np.zeros(6))),
                    high=np.concatenate((0.4*np.ones(6), np.zeros(6))))
initial_sets = [X0]

period = 0.1
T = 5.0

goal_x3 = Hyperrectangle(low=[0.94], high=[1.06])

def system (t_step=0.025) :
    return System(x_vars, u_vars, [w_dist], f_eqn, ContinuousTimeSpec(t_step, period))

def instances (opts) :
    controller = NeuralNetwork.from_mat(modelpath(opts, FOLDER, 'quad_controller_3_64.mat'))
    clsys = NNCSystem(system(), controller)
    return [
        Instance(NAME, 'continuous', clsys, X0, T, ReachabilityPredicate(goal_x3, (3,), (T, T)),
                 splits=(2, 2, 2, 1, 1, 1, 1, 1, 1, 1, 1, 1) if opts.verification else None,
                 trajectories=10, include_vertices=False,
                 plots=[PlotSpec((0, 3))]),
    ]

def run (results, opts) :
    run_instances(instances(opts), results, opts)
