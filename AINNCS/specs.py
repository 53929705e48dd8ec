import numpy as np
from typing import Optional, Tuple
from AINNCS.sets import Hyperrectangle
from AINNCS.inclusion import NaturalInclusion
from AINNCS.reach import Partition

VERIFIED = 'verified'
FALSIFIED = 'falsified'
UNKNOWN = 'unknown'

class Predicate :
    """Property of the closed loop over the time window [t0, t1] (whole horizon if None)."""
    def __init__(self, t_window:Optional[Tuple[float, float]]=None) -> None:
        self.t_window = t_window

    def window (self, tt) :
        tt = np.asarray(tt)
        if self.t_window is None :
            return tt
        t0, t1 = self.t_window
        eps = 1e-9
        return tt[np.logical_and(tt >= t0 - eps, tt <= t1 + eps)]

    # Does the property hold for the box [_x, x_]
    def holds (self, _x, x_) :
        raise NotImplementedError

    # Does the point x violate the property
    def violated (self, x) :
        raise NotImplementedError

    def check (self, rs:Partition, tt) :
        return all(self.holds(_x, x_) for t in self.window(tt) for _x, x_ in rs.get_all(t))

    def falsified_by (self, trajs, tt) :
        tt = self.window(tt)
        return any(self.violated(x) for traj in trajs for x in traj(tt))

class _BoxPredicate (Predicate) :
    def __init__(self, box:Hyperrectangle, dims, t_window=None) -> None:
        super().__init__(t_window)
        self.box = box
        self.dims = tuple(dims)
        self._idx = [d - 1 for d in self.dims]
        if len(self.dims) != len(box) :
            raise ValueError(f'{len(box)}-dimensional box for dimensions {self.dims}')

class SafetyPredicate (_BoxPredicate) :
    # Reachable set stays inside the safe box
    def holds (self, _x, x_) :
        return self.box.issubset(_x[self._idx], x_[self._idx])

    def violated (self, x) :
        return not self.box.contains(x[self._idx])

class ReachabilityPredicate (SafetyPredicate) :
    # Reachable set lies inside the target box over the window
    def __init__(self, box:Hyperrectangle, dims, t_window) -> None:
        super().__init__(box, dims, t_window)

class AvoidPredicate (_BoxPredicate) :
    # Reachable set never meets the unsafe box
    def holds (self, _x, x_) :
        return self.box.isdisjoint(_x[self._idx], x_[self._idx])

    def violated (self, x) :
        return self.box.contains(x[self._idx])

class ConstraintPredicate (Predicate) :
    # Every g(x) in exprs stays nonnegative
    def __init__(self, x_vars, exprs, t_window=None) -> None:
        super().__init__(t_window)
        self.exprs = list(exprs)
        self.g_if = NaturalInclusion(x_vars, self.exprs)

    def holds (self, _x, x_) :
        _g, _ = self.g_if(_x, x_)
        return bool(np.all(_g >= 0))

    def violated (self, x) :
        x = np.asarray(x, dtype=float)
        g, _ = self.g_if(x, x)
        return bool(np.any(g < 0))
