import numpy as np
from typing import NamedTuple, Optional, Tuple
from tqdm import tqdm
from AINNCS.time import TimeSpec
from AINNCS.interval import get_half_intervals
from AINNCS.sets import Hyperrectangle
from AINNCS.system import ControlledSystem

class Partition :
    _id = 0

    def __init__(self, t_spec:TimeSpec, t0, _x0, x0_,
                 depth=0, primer_depth=0, primer:bool = False) :
        self.t_spec = t_spec
        self.t0 = t0
        self.tf = t0
        _x0 = np.asarray(_x0, dtype=float); x0_ = np.asarray(x0_, dtype=float)
        if np.any(_x0 > x0_) :
            raise ValueError(f'need _x0 <= x0_ to initialize a partition, got {_x0} and {x0_}')
        self.depth = depth
        self.primer_depth = primer_depth
        self.primer = primer

        self._xx = [_x0]
        self.xx_ = [x0_]
        self.subpartitions = None

        self._id = Partition._id
        Partition._id += 1

    def _n (self, t) :
        return round((t - self.t0)/self.t_spec.t_step)

    def set (self, t, _x, x_) :
        self._xx.append(_x)
        self.xx_.append(x_)
        self.tf = t

    def half_partition_all (self, primer:bool) :
        if self.subpartitions is None :
            primer_depth = self.primer_depth + 1 if primer else self.primer_depth
            intervals = get_half_intervals(self._xx[-1], self.xx_[-1])
            self.subpartitions = [Partition(self.t_spec, self.tf, _i, i_, self.depth+1, primer_depth, primer)
                                  for _i, i_ in intervals]
        else :
            for part in self.subpartitions :
                part.half_partition_all(primer)

    def split (self, counts) :
        """Grid split of the current box, each piece primed on its own."""
        box = Hyperrectangle(self._xx[-1], self.xx_[-1])
        self.subpartitions = [Partition(self.t_spec, self.tf, b.low, b.high, self.depth+1,
                                        self.primer_depth+1, True)
                              for b in box.split(counts)]

    def leaves (self) :
        if self.subpartitions is None :
            return [self]
        return [leaf for part in self.subpartitions for leaf in part.leaves()]

    def get_all (self, t) :
        n = self._n(t)
        if 0 <= n < len(self._xx) :
            return [(self._xx[n], self.xx_[n])]
        elif self.subpartitions is not None :
            boxes = []
            for part in self.subpartitions :
                boxes.extend(part.get_all(t))
            return boxes
        else :
            raise Exception(f'Partition not defined at {t} \\notin [{self.t0}, {self.tf}]')

    def __call__ (self, t) :
        boxes = self.get_all(t)
        _x = np.min([b[0] for b in boxes], axis=0)
        x_ = np.max([b[1] for b in boxes], axis=0)
        return _x, x_

    def __len__ (self) :
        return len(self.leaves())

class UniformPartitioner :
    class Opts (NamedTuple) :
        depth: int = 0
        primer_depth: int = 0
        splits: Optional[Tuple[int, ...]] = None
        enable_bar: bool = False

    def __init__(self, clsys:ControlledSystem) -> None:
        self.clsys = clsys

    def compute_reachable_set (self, t0, tf, x0:Hyperrectangle, opts:Opts=Opts()) -> Partition :
        t_spec = self.clsys.sys.t_spec
        parent = Partition(t_spec, t0, x0.low, x0.high,
                           depth=0, primer_depth=0, primer=True)

        if opts.splits is not None :
            parent.split(opts.splits)
        for d in range(opts.depth) :
            parent.half_partition_all(d < opts.primer_depth)

        for tt in tqdm(t_spec.tu(t0, tf), disable=not opts.enable_bar) :
            self.integrate_partition(parent, tt)

        return parent

    def integrate_partition (self, partition:Partition, tt) :
        _x0, x0_ = partition(tt[0])
        if partition.primer :
            self.clsys.prime_if(tt[0], _x0, x0_)
        if partition.subpartitions is None :
            if not partition.primer :
                self.clsys.control.step_if(tt[0], _x0, x0_)
            for t in tt :
                _x, x_ = partition(t)
                partition.set(t + self.clsys.sys.t_spec.t_step, *self.clsys.func_if(t, _x, x_))
        else :
            for subpartition in partition.subpartitions :
                self.integrate_partition(subpartition, tt)
