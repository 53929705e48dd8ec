"""Adaptive Cruise Control.

An ego car follows a lead car. Both are modeled by position, velocity and
internal acceleration; the lead car brakes with a_lead = -2::

    x_lead' = v_lead,  v_lead' = g_lead,  g_lead' = -2 g_lead + 2 a_lead - mu v_lead^2
    x_ego'  = v_ego,   v_ego'  = g_ego,   g_ego'  = -2 g_ego  + 2 a_ego  - mu v_ego^2

The network reads (v_set, T_gap, v_ego, D_rel, v_rel) and must keep
D_rel >= D_safe = D_default + T_gap v_ego for 5 s.
"""
import numpy as np
import sympy as sp
from AINNCS.time import ContinuousTimeSpec
from AINNCS.system import System, NNCSystem
from AINNCS.neural import NeuralNetwork
from AINNCS.control import ConstantDisturbance
from AINNCS.sets import Hyperrectangle
from AINNCS.specs import ConstraintPredicate
from AINNCS.plotting import ExprPlotSpec
from AINNCS.benchmark import Instance, run_instances
from AINNCS.config import modelpath

NAME = 'ACC'
FOLDER = 'ACC'

# States
xlead, vlead, glead, xego, vego, gego = sp.symbols('xlead vlead glead xego vego gego')
x_vars = [xlead, vlead, glead, xego, vego, gego]
# Controls
aego = sp.symbols('aego')
# Disturbances
alead = sp.symbols('alead')
# Constants
mu = sp.Rational(1, 10000)
vset = 30.0
Tgap = 1.4
Ddefault = 10

f_eqn = [
    vlead,
    glead,
    -2*glead + 2*alead - mu*vlead**2,
    vego,
    gego,
    -2*gego + 2*aego - mu*vego**2,
]

Drel = xlead - xego
Dsafe = Ddefault + Tgap*vego

# (vset, Tgap, vego, Drel, vrel) = M x + c
M = np.array([
    [0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 1, 0],
    [1, 0, 0,-1, 0, 0],
    [0, 1, 0, 0,-1, 0],
])
c = np.array([vset, Tgap, 0, 0, 0])

X0 = Hyperrectangle(low=[90, 32, 0, 10, 30, 0], high=[110, 32.2, 0, 11, 30.2, 0])
initial_sets = [X0]

period = 0.1
T = 5.0

def system (t_step=0.01) :
    return System(x_vars, [aego], [alead], f_eqn, ContinuousTimeSpec(t_step, period))

def instances (opts) :
    predicate = ConstraintPredicate(x_vars, [Drel - Dsafe])
    plots = [ExprPlotSpec('Drel-Dsafe', x_vars, {'$D_{rel}$': Drel, '$D_{safe}$': Dsafe}, 'Distance (m)')]
    ret = []
    for scenario, filename in (('relu', 'controller_5_20.mat'), ('tanh', 'controller_5_20_tanh.mat')) :
        controller = NeuralNetwork.from_mat(modelpath(opts, FOLDER, filename))
        controller.insert_preprocessing(M, c)
        clsys = NNCSystem(system(), controller, dist=ConstantDisturbance([-2.0], [-2.0], [-2.0]))
        ret.append(Instance(NAME, scenario, clsys, X0, T, predicate, trajectories=10, plots=plots))
    return ret

def run (results, opts) :
    run_instances(instances(opts), results, opts)
