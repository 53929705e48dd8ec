"""Airplane.

A flying airplane with position (x, y, z), body velocities (u, v, w),
Euler angles (phi, theta, psi) and body rates (r, p, q), actuated by the
forces (Fx, Fy, Fz) and moments (Mx, My, Mz) in the body frame. Mass and
inertia are 1. The controller should keep y in [-0.5, 0.5] and the Euler
angles in [-1, 1] for 2 s.
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

NAME = 'Airplane'
FOLDER = 'Airplane'

x, y, z, u, v, w, phi, theta, psi, r, p, q = \
    sp.symbols('x y z u v w phi theta psi r p q')
x_vars = [x, y, z, u, v, w, phi, theta, psi, r, p, q]
Fx, Fy, Fz, Mx, My, Mz = sp.symbols('Fx Fy Fz Mx My Mz')
u_vars = [Fx, Fy, Fz, Mx, My, Mz]
w_dist = sp.symbols('w_dist')

m = 1; g = 1

T_psi = sp.Matrix([[sp.cos(psi), -sp.sin(psi), 0], [sp.sin(psi), sp.cos(psi), 0], [0, 0, 1]])
T_theta = sp.Matrix([[sp.cos(theta), 0, sp.sin(theta)], [0, 1, 0], [-sp.sin(theta), 0, sp.cos(theta)]])
T_phi = sp.Matrix([[1, 0, 0], [0, sp.cos(phi), -sp.sin(phi)], [0, sp.sin(phi), sp.cos(phi)]])
# Body velocities to inertial velocities
R = T_psi * T_theta * T_phi
# Body rates to Euler angle rates
E = sp.Matrix([
    [sp.cos(theta), sp.sin(theta)*sp.sin(phi), sp.sin(theta)*sp.cos(phi)],
    [0, sp.cos(theta)*sp.cos(phi), -sp.cos(theta)*sp.sin(phi)],
    [0, sp.sin(phi), sp.cos(phi)],
]) / sp.cos(theta)

f_eqn = list(R * sp.Matrix([u, v, w])) + [
    -g*sp.sin(theta) + Fx/m - q*w + r*v,
    g*sp.cos(theta)*sp.sin(phi) + Fy/m - r*u + p*w,
    g*sp.cos(theta)*sp.cos(phi) + Fz/m - p*v + q*u,
] + list(E * sp.Matrix([p, q, r])) + [
    Mz,
    Mx,
    My,
]

X0 = Hyperrectangle(low=np.zeros(12), high=[0, 0, 0, 1, 1, 1, 1, 1, 1, 0, 0, 0])
initial_sets = [X0]

period = 0.1
T = 2.0

safe_box = Hyperrectangle(low=[-0.5, -1, -1, -1], high=[0.5, 1, 1, 1])

def system (t_step=0.01) :
    return System(x_vars, u_vars, [w_dist], f_eqn, ContinuousTimeSpec(t_step, period))

def instances (opts) :
    controller = NeuralNetwork.from_mat(modelpath(opts, FOLDER, 'controller_airplane.mat'))
    clsys = NNCSystem(system(), controller)
    return [
        Instance(NAME, 'continuous', clsys, X0, T, SafetyPredicate(safe_box, (2, 7, 8, 9)),
                 trajectories=10, include_vertices=False,
                 plots=[PlotSpec((0, 2)), PlotSpec((7, 8)), PlotSpec((8, 9))]),
    ]

def run (results, opts) :
    run_instances(instances(opts), results, opts)
