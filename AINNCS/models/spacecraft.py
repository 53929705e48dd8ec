"""Spacecraft docking.

Clohessy-Wiltshire relative motion of a chaser with respect to a target in
circular orbit (mean motion n, chaser mass m)::

    sx'' =  2 n sy' + 3 n^2 sx + Fx/m
    sy'' = -2 n sx' + Fy/m

The chaser speed must stay below 0.2 + 2 n ||s|| over 40 s.
"""
import sympy as sp
from AINNCS.time import ContinuousTimeSpec
from AINNCS.system import System, NNCSystem
from AINNCS.neural import NeuralNetwork
from AINNCS.sets import Hyperrectangle
from AINNCS.specs import ConstraintPredicate
from AINNCS.plotting import PlotSpec, ExprPlotSpec
from AINNCS.benchmark import Instance, run_instances
from AINNCS.config import modelpath

NAME = 'Spacecraft'
FOLDER = 'Spacecraft'

sx, sy, vx, vy, Fx, Fy, w = sp.symbols('sx sy vx vy Fx Fy w')
x_vars = [sx, sy, vx, vy]
u_vars = [Fx, Fy]

m = 12
n = 0.001027

f_eqn = [
    vx,
    vy,
    2*n*vy + 3*n**2*sx + Fx/m,
    -2*n*vx + Fy/m,
]

speed = sp.sqrt(vx**2 + vy**2)
speed_limit = 0.2 + 2*n*sp.sqrt(sx**2 + sy**2)

X0 = Hyperrectangle(low=[70, 70, -0.28, -0.28], high=[106, 106, 0.28, 0.28])
initial_sets = [X0]

period = 1.0
T = 40.0

def system (t_step=0.1) :
    return System(x_vars, u_vars, [w], f_eqn, ContinuousTimeSpec(t_step, period))

def instances (opts) :
    controller = NeuralNetwork.from_mat(modelpath(opts, FOLDER, 'model.mat'))
    clsys = NNCSystem(system(), controller)
    return [
        Instance(NAME, 'docking', clsys, X0, T, ConstraintPredicate(x_vars, [speed_limit - speed]),
                 splits=(2, 2, 2, 2) if opts.verification else None,
                 trajectories=10, include_vertices=False,
                 plots=[PlotSpec((1, 2)),
                        ExprPlotSpec('speed', x_vars, {'$\\|v\\|$': speed, '$0.2 + 2n\\|s\\|$': speed_limit},
                                     'Speed (m/s)')]),
    ]

def run (results, opts) :
    run_instances(instances(opts), results, opts)
