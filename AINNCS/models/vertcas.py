"""Vertical collision avoidance (VertCAS).

Discrete-time encounter between an ownship and an intruder level flight.
The state is the relative altitude h of the intruder (ft), the climb rate
hd0 of the ownship (ft/s) and the time to loss of horizontal separation
tau (s)::

    h+   = h - hd0 - hdd/2
    hd0+ = hd0 + hdd
    tau+ = tau - 1

At each step the network associated with the previous advisory scores the
nine advisories and the best one is issued. The pilot then accelerates
with hdd = 0 when the climb rate already complies with the advisory, and
with the advisory acceleration otherwise. The aircraft must not be closer
than 100 ft after ten steps.
"""
from typing import NamedTuple
import numpy as np
import sympy as sp
from tqdm import tqdm
from AINNCS.time import DiscreteTimeSpec
from AINNCS.system import System, ControlledSystem, Trajectory
from AINNCS.neural import NeuralNetwork, NeuralNetworkControl
from AINNCS.control import NoControl
from AINNCS.sets import Hyperrectangle
from AINNCS.specs import AvoidPredicate
from AINNCS.plotting import PlotSpec
from AINNCS.benchmark import Instance, run_instances
from AINNCS.utils import run_time, format_time
from AINNCS.config import modelpath
from AINNCS.logger import Logger

logger = Logger.setup_logger(__name__)

NAME = 'VertCAS'
FOLDER = 'VertCAS'

h, hd0, tau, hdd, w = sp.symbols('h hd0 tau hdd w')
x_vars = [h, hd0, tau]

f_eqn = [
    h - hd0 - hdd/2,
    hd0 + hdd,
    tau - 1,
]

g = 32.2
# 1500 and 2500 ft/min in ft/s
v1500 = 1500/60
v2500 = 2500/60

class Advisory (NamedTuple) :
    name: str
    # Climb rates complying with the advisory
    hd_low: float
    hd_high: float
    # Acceleration of a non-complying ownship
    accel: float

    def hdd (self, hd0) :
        return 0. if self.hd_low <= hd0 <= self.hd_high else self.accel

    def hdd_if (self, _hd0, hd0_) :
        if self.hd_low <= _hd0 and hd0_ <= self.hd_high :
            return 0., 0.
        if hd0_ < self.hd_low or self.hd_high < _hd0 :
            return self.accel, self.accel
        return min(0., self.accel), max(0., self.accel)

ADVISORIES = [
    Advisory('COC',      -np.inf,  np.inf,  0.),
    Advisory('DNC',      -np.inf,  0.,     -g/4),
    Advisory('DND',       0.,      np.inf,  g/4),
    Advisory('DES1500',  -np.inf, -v1500,  -g/4),
    Advisory('CL1500',    v1500,   np.inf,  g/4),
    Advisory('SDES1500', -np.inf, -v1500,  -g/3),
    Advisory('SCL1500',   v1500,   np.inf,  g/3),
    Advisory('SDES2500', -np.inf, -v2500,  -g/3),
    Advisory('SCL2500',   v2500,   np.inf,  g/3),
]
COC = 0

# Networks read (h, hd0, hd1, tau), the intruder climb rate hd1 is 0
M = np.array([
    [1, 0, 0],
    [0, 1, 0],
    [0, 0, 0],
    [0, 0, 1],
])

steps = 10
hd0_values = [-19.5, -22.5, -25.5, -28.5]
h0 = (-133., -129.)
tau0 = 25.

initial_sets = [Hyperrectangle(low=[h0[0], v, tau0], high=[h0[1], v, tau0]) for v in hd0_values]

# |h| >= 100 ft after ten steps
unsafe = AvoidPredicate(Hyperrectangle(low=[-100.], high=[100.]), (1,), (steps, steps))

class AdvisoryReachSet :
    """Boxes reachable at each step, one per advisory possibly in effect."""
    def __init__(self, t0, branches) -> None:
        self.t0 = t0
        self.steps = [branches]

    @property
    def tf (self) :
        return self.t0 + len(self.steps) - 1

    def append (self, branches) :
        self.steps.append(branches)

    def get_all (self, t) :
        n = round(t - self.t0)
        if 0 <= n < len(self.steps) :
            return list(self.steps[n].values())
        raise Exception(f'Reachable set not defined at {t} \\notin [{self.t0}, {self.tf}]')

    def __call__ (self, t) :
        boxes = self.get_all(t)
        return np.min([b[0] for b in boxes], axis=0), np.max([b[1] for b in boxes], axis=0)

    def __len__ (self) :
        return len(self.steps[-1])

class VertCASSystem (ControlledSystem) :
    def __init__(self, sys:System, nets) -> None:
        super().__init__(sys, NoControl(1))
        # One controller per previous advisory
        self.controls = [NeuralNetworkControl(net) for net in nets]
        if len(self.controls) != len(ADVISORIES) :
            raise ValueError(f'{len(self.controls)} networks for {len(ADVISORIES)} advisories')

    def advisory (self, prev, x) :
        return int(np.argmax(self.controls[prev].y(x)))

    def possible_advisories (self, prev, _x, x_) :
        """Advisories whose score may be maximal on [_x, x_]."""
        control = self.controls[prev]
        control.prime(_x, x_)
        _y, y_ = control._y_bounds(_x, x_)
        return [j for j in range(len(y_)) if y_[j] >= np.max(_y)]

    def compute_trajectory (self, t0, tf, x0, w=None) :
        t_spec = self.sys.t_spec
        xx = Trajectory(t_spec, t0, x0, tf)
        adv = COC
        for tk in t_spec.uu(t0, tf)[:-1] :
            x = xx(tk)
            adv = self.advisory(adv, x)
            u = np.array([ADVISORIES[adv].hdd(x[1])])
            xx.set(tk + t_spec.t_step, self.sys.f(x, u, self.dist.w(tk, x)))
        return xx

    def compute_reachable_set (self, t0, tf, x0:Hyperrectangle, enable_bar=False) -> AdvisoryReachSet :
        t_spec = self.sys.t_spec
        rs = AdvisoryReachSet(t0, {COC: (x0.low, x0.high)})
        for tk in tqdm(t_spec.uu(t0, tf)[:-1], disable=not enable_bar) :
            _w, w_ = self.dist._w(tk, None, None), self.dist.w_(tk, None, None)
            branches = {}
            for prev, (_x, x_) in rs.steps[-1].items() :
                for adv in self.possible_advisories(prev, _x, x_) :
                    _u, u_ = ADVISORIES[adv].hdd_if(_x[1], x_[1])
                    _xn, xn_ = self.sys.f_all_if(_x, x_, np.array([_u]), np.array([u_]), _w, w_)
                    # Branches issuing the same advisory are merged
                    if adv in branches :
                        _xn = np.minimum(branches[adv][0], _xn)
                        xn_ = np.maximum(branches[adv][1], xn_)
                    branches[adv] = (_xn, xn_)
            logger.debug(f'step {tk}: advisories {[ADVISORIES[a].name for a in branches]}')
            rs.append(branches)
        return rs

def analyze (instance:Instance, t_end, popts=None) :
    rs, t_rs = run_time(instance.clsys.compute_reachable_set, 0, t_end, instance.x0,
                        popts is not None and popts.enable_bar)
    logger.info(f'advisory branching: {len(rs)} branches in {format_time(t_rs)}')
    tt = instance.t_spec.tt(0, t_end)
    return rs, instance.predicate.check(rs, tt)

def system () :
    return System(x_vars, [hdd], [w], f_eqn, DiscreteTimeSpec())

def instances (opts) :
    nets = []
    for i in range(1, len(ADVISORIES) + 1) :
        net = NeuralNetwork.from_nnet(modelpath(opts, FOLDER, f'VertCAS_noResp_pra0{i}_v9_20HU_200.nnet'))
        net.insert_preprocessing(M)
        nets.append(net)
    clsys = VertCASSystem(system(), nets)
    return [
        Instance(NAME, f'{v:g}', clsys, x0, steps, unsafe,
                 trajectories=10, include_vertices=True,
                 plots=[PlotSpec((0, 1)), PlotSpec((0, 2))])
        for v, x0 in zip(hd0_values, initial_sets)
    ]

def run (results, opts) :
    run_instances(instances(opts), results, opts, analyze)
