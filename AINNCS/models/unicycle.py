"""Unicycle car model (Benchmark 10 of Sherlock).

Position (x1, x2), heading x3 and speed x4 on the plane::

    x1' = x4 cos(x3)
    x2' = x4 sin(x3)
    x3' = u2
    x4' = u1 + w

with a bounded constant error w. The network output is shifted,
u_i = f(x)_i - 20, and the control period is 0.2 s.
"""
import sympy as sp
from AINNCS.time import ContinuousTimeSpec
from AINNCS.system import System, NNCSystem
from AINNCS.neural import NeuralNetwork
from AINNCS.control import UniformAdditivePostprocessing, ConstantDisturbance
from AINNCS.sets import Hyperrectangle
from AINNCS.specs import ReachabilityPredicate
from AINNCS.plotting import PlotSpec
from AINNCS.benchmark import Instance, run_instances
from AINNCS.config import modelpath

NAME = 'Unicycle'
FOLDER = 'Sherlock-Benchmark-10-Unicycle'

# With a fixed disturbance the reachability property can be proven
choose_disturbance = True

x1, x2, x3, x4, u1, u2, w = sp.symbols('x1 x2 x3 x4 u1 u2 w')
x_vars = [x1, x2, x3, x4]
u_vars = [u1, u2]

f_eqn = [
    x4*sp.cos(x3),
    x4*sp.sin(x3),
    u2,
    u1 + w,
]

w_l = -1e-4
w_u = w_l if choose_disturbance else 1e-1
X0 = Hyperrectangle(low=[9.5, -4.5, 2.1, 1.5], high=[9.55, -4.45, 2.11, 1.51])
initial_sets = [X0]

period = 0.2
T = 10.0

postprocessing = UniformAdditivePostprocessing(-20.0)

# [x1, x2, x3, x4] in +-[0.6, 0.2, 0.06, 0.3], checked over the last control period
target_set = Hyperrectangle(low=[-0.6, -0.2, -0.06, -0.3], high=[0.6, 0.2, 0.06, 0.3])

def system (t_step=0.01) :
    return System(x_vars, u_vars, [w], f_eqn, ContinuousTimeSpec(t_step, period))

def instances (opts) :
    controller = NeuralNetwork.from_mat(modelpath(opts, FOLDER, 'controllerB_nnv.mat'))
    clsys = NNCSystem(system(), controller, postprocessing,
                      dist=ConstantDisturbance([w_l], [w_l], [w_u]))
    predicate = ReachabilityPredicate(target_set, (1, 2, 3, 4), (T - period, T))
    return [
        Instance(NAME, 'constant w', clsys, X0, T, predicate,
                 splits=(3, 1, 8, 1) if opts.verification else None,
                 trajectories=10, include_vertices=False,
                 plots=[
                     PlotSpec((1, 2)),
                     PlotSpec((1, 2), tag='close', xlim=(0, 1), ylim=(-0.5, 0.5),
                              show_simulation=False, show_final=True),
                     PlotSpec((3, 4), legend_loc='lower right'),
                     PlotSpec((3, 4), tag='close', xlim=(-0.1, 0.1), ylim=(-0.4, 0),
                              show_simulation=False, show_final=True, legend_loc='lower right'),
                 ]),
    ]

def run (results, opts) :
    run_instances(instances(opts), results, opts)
