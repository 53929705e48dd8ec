from __future__ import annotations
import numpy as np
import sympy as sp
from scipy.integrate import solve_ivp
from AINNCS.time import TimeSpec
from AINNCS.inclusion import NaturalInclusion
from AINNCS.neural import NeuralNetwork, NeuralNetworkControl
from AINNCS.control import Control, Disturbance, NoDisturbance, NoPostprocessing
from AINNCS.sets import Hyperrectangle
from AINNCS.logger import Logger

logger = Logger.setup_logger(__name__)

class Trajectory :
    def __init__(self, t_spec:TimeSpec, t0, x0, t_alloc=None) -> None:
        self.t_spec = t_spec
        self.t0 = t0
        self.tf = t0
        t_alloc = t0 + 10 if t_alloc is None else t_alloc
        x0 = np.asarray(x0, dtype=float)
        self.xx = np.empty((self.t_spec.lentt(t0,t_alloc)+1,) + x0.shape, x0.dtype)
        self.set(t0,x0)

    def _n (self, t) :
        t = np.asarray(t)
        if t.ndim == 0 :
            return round((t - self.t0)/self.t_spec.t_step)
        return np.round((t - self.t0)/self.t_spec.t_step).astype(int)

    def set (self, t, x) :
        if self._n(t) > self._n(self.tf) :
            self.tf = t
        self.xx[self._n(t),:] = x

    def _call_single(self, t) :
        n = self._n(t)
        if 0 <= n <= self._n(self.tf) :
            return self.xx[n]
        raise Exception(f'Trajectory not defined at {t} \\notin [{self.t0},{self.tf}]')

    def __call__(self, t) :
        t = np.asarray(t)
        if t.ndim == 0:
            return self._call_single(t)
        not_def = np.logical_or(self._n(t) > self._n(self.tf), self._n(t) < 0)
        if np.any(not_def) :
            raise Exception(f'Trajectory not defined at {t[not_def]} \\notin [{self.t0},{self.tf}]')
        return self.xx[self._n(t),:]

def my_cse(exprs, symbols=None, optimizations=None, postprocess=None,
    order='canonical', ignore=(), list=True) :
    return sp.cse(exprs=exprs, symbols=sp.numbered_symbols('_dum'), optimizations='basic',
                  postprocess=postprocess, order=order, ignore=ignore, list=list)

class System :
    def __init__(self, x_vars, u_vars, w_vars, f_eqn, t_spec:TimeSpec) -> None:
        self.x_vars = sp.Matrix(x_vars)
        self.u_vars = sp.Matrix(u_vars)
        self.w_vars = sp.Matrix(w_vars)

        self.xlen = len(x_vars)
        self.ulen = len(u_vars)
        self.wlen = len(w_vars)

        self.t_spec = t_spec
        self.f_eqn = sp.Matrix(f_eqn)
        if len(self.f_eqn) != self.xlen :
            raise ValueError(f'{len(self.f_eqn)} equations for {self.xlen} states')

        tuple = (list(x_vars), list(u_vars), list(w_vars))
        self._f = sp.lambdify(tuple, list(self.f_eqn), 'numpy', cse=my_cse)
        self.f_if = NaturalInclusion(list(x_vars) + list(u_vars) + list(w_vars), list(self.f_eqn))

    def __str__ (self) :
        return f'''{str(self.t_spec)} System with
            \r  {'xdot' if self.t_spec.type == 'continuous' else 'x+'} = f(x,u,w) = {str(list(self.f_eqn))}'''

    def f (self, x, u, w) :
        return np.array(self._f(x, u, w), dtype=float).reshape(-1)

    def f_i_if (self, i, _x, x_, _u, u_, _w, w_) :
        return self.f_if.eval_i(i, np.concatenate((_x, _u, _w)), np.concatenate((x_, u_, w_)))

    def f_all_if (self, _x, x_, _u, u_, _w, w_) :
        return self.f_if(np.concatenate((_x, _u, _w)), np.concatenate((x_, u_, w_)))

def _inflate (_x, x_, eps=0.1) :
    r = eps*(x_ - _x) + 1e-9*(1 + np.abs(_x) + np.abs(x_))
    return _x - r, x_ + r

class ControlledSystem :
    picard_iter = 10

    def __init__(self, sys:System, control:Control, dist:Disturbance=NoDisturbance(1)) :
        self.sys = sys
        self.control = control
        self.dist = dist
        if dist.w_len != sys.wlen :
            raise ValueError(f'Disturbance of length {dist.w_len} for a system with {sys.wlen} disturbances')

    # Returns xdot (continuous) or x+ (discrete) with the held control uCALC
    def func (self, t, x, w=None) :
        w = self.dist.w(t, x) if w is None else w
        return self.sys.f(x, self.control.uCALC, w)

    # Bounds the held control over [_x, x_] for the next control period
    def prime_if (self, t, _x, x_) :
        self.control.prime(_x, x_)
        return self.control.step_if(t, _x, x_)

    # Bounds of the embedding field while _x(s) stays in [_a, a_] and x_(s) in [_b, b_]
    def _embedding_bounds (self, _a, a_, _b, b_, _u, u_, _w, w_) :
        n = self.sys.xlen
        d_x, dx_ = np.empty(n), np.empty(n)
        for i in range(n) :
            # every lower face x_i = _x_i(s) lies in this box
            hi = np.copy(b_); hi[i] = a_[i]
            d_x[i], _ = self.sys.f_i_if(i, _a, hi, _u, u_, _w, w_)
            lo = np.copy(_a); lo[i] = _b[i]
            _, dx_[i] = self.sys.f_i_if(i, lo, b_, _u, u_, _w, w_)
        # the lower face always holds the corner _x(s), the upper face the corner x_(s)
        _, d_x_ = self.sys.f_all_if(_a, a_, _u, u_, _w, w_)
        _dx, _ = self.sys.f_all_if(_b, b_, _u, u_, _w, w_)
        return d_x, d_x_, _dx, dx_

    def func_if (self, t, _x, x_) :
        _u, u_ = self.control._uCALC, self.control.u_CALC
        _w, w_ = self.dist._w(t, _x, x_), self.dist.w_(t, _x, x_)

        if self.sys.t_spec.type == 'discrete' :
            return self.sys.f_all_if(_x, x_, _u, u_, _w, w_)

        n = self.sys.xlen
        if not (np.all(np.isfinite(_x)) and np.all(np.isfinite(x_))) :
            return np.full(n, -np.inf), np.full(n, np.inf)

        # Embedding system: coordinate i is bounded on the faces x_i = _x_i and x_i = x_i_.
        # The step is taken with the field bounded over an a-priori enclosure of
        # the embedding trajectory on [t, t + t_step], found by Picard iteration.
        dt = self.sys.t_spec.t_step
        _a, a_, _b, b_ = _x, _x, x_, x_
        for _ in range(self.picard_iter) :
            d_x, d_x_, _dx, dx_ = self._embedding_bounds(_a, a_, _b, b_, _u, u_, _w, w_)
            _p, p_ = _x + dt*np.minimum(d_x, 0), _x + dt*np.maximum(d_x_, 0)
            _q, q_ = x_ + dt*np.minimum(_dx, 0), x_ + dt*np.maximum(dx_, 0)
            if np.all(_a <= _p) and np.all(p_ <= a_) and np.all(_b <= _q) and np.all(q_ <= b_) :
                return _x + dt*d_x, x_ + dt*dx_
            _a, a_ = _inflate(np.minimum(_a, _p), np.maximum(a_, p_))
            _b, b_ = _inflate(np.minimum(_b, _q), np.maximum(b_, q_))

        logger.warning(f'no enclosure of the embedding system found at t={t}')
        return np.full(n, -np.inf), np.full(n, np.inf)

    def compute_trajectory (self, t0, tf, x0, w=None) :
        t_spec = self.sys.t_spec
        xx = Trajectory(t_spec, t0, x0, tf)
        uu = t_spec.uu(t0, tf)
        for tk, tkp1 in zip(uu[:-1], uu[1:]) :
            x = xx(tk)
            wk = self.dist.w(tk, x) if w is None else w
            u = self.control.step(tk, x)
            if t_spec.type == 'continuous' :
                t_eval = np.clip(t_spec.tt(tk, tkp1), tk, tkp1)
                sol = solve_ivp(lambda t, x : self.sys.f(x, u, wk), (tk, tkp1), x,
                                t_eval=t_eval, rtol=1e-8, atol=1e-10)
                for t, xt in zip(sol.t[1:], sol.y.T[1:]) :
                    xx.set(t, xt)
            else :
                xx.set(tkp1, self.sys.f(x, u, wk))
        return xx

    def compute_mc_trajectories (self, t0, tf, x0:Hyperrectangle, N, include_vertices=False, rng=None) :
        rng = np.random.default_rng() if rng is None else rng
        points = x0.sample(N, rng)
        if include_vertices :
            points = np.vstack((points, x0.vertices()))
        return [self.compute_trajectory(t0, tf, p, self.dist.sample(rng)) for p in points]

class NNCSystem (ControlledSystem) :
    def __init__(self, sys:System, nn:NeuralNetwork, postprocessing=NoPostprocessing(),
                 dist:Disturbance=NoDisturbance(1), uclip=(-np.inf,np.inf)) -> None:
        self.nn = nn
        super().__init__(sys, NeuralNetworkControl(nn, postprocessing, uclip=uclip), dist)

    def __str__ (self) :
        return f'''===== Closed Loop System Definition =====
            \r{self.sys.__str__()}
            \rcontrolled by {self.control.__str__()}'''
