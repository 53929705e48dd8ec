import numpy as np
from itertools import product

class Hyperrectangle :
    """Axis aligned box {x : low <= x <= high}. Bounds may be infinite."""
    def __init__(self, low, high) -> None:
        self.low = np.asarray(low, dtype=float).reshape(-1)
        self.high = np.asarray(high, dtype=float).reshape(-1)
        if self.low.shape != self.high.shape :
            raise ValueError(f'low {self.low.shape} and high {self.high.shape} have different shapes')
        if np.any(self.low > self.high) :
            bad = np.nonzero(self.low > self.high)[0]
            raise ValueError(f'Hyperrectangle needs low <= high, violated in dimensions {bad.tolist()}')

    def __len__ (self) :
        return len(self.low)

    def __repr__ (self) :
        return f'Hyperrectangle(low={self.low.tolist()}, high={self.high.tolist()})'

    def project (self, dims) :
        """Project onto 1-based dimensions dims."""
        idx = [d - 1 for d in dims]
        return Hyperrectangle(self.low[idx], self.high[idx])

    def contains (self, x, atol=0.) :
        x = np.asarray(x)
        return bool(np.all(self.low - atol <= x) and np.all(x <= self.high + atol))

    def issubset (self, _x, x_) :
        """Is the box [_x, x_] a subset of this box."""
        return bool(np.all(self.low <= _x) and np.all(x_ <= self.high))

    def isdisjoint (self, _x, x_) :
        return bool(np.any(x_ < self.low) or np.any(self.high < _x))

    def split (self, counts) :
        """Uniform grid of prod(counts) boxes covering this box."""
        counts = np.asarray(counts, dtype=int)
        if counts.shape != self.low.shape or np.any(counts < 1) :
            raise ValueError(f'Cannot split a {len(self)}-dimensional box into {counts.tolist()} pieces')
        edges = [np.linspace(l, h, c + 1) for l, h, c in zip(self.low, self.high, counts)]
        boxes = []
        for idx in product(*[range(c) for c in counts]) :
            low = np.array([edges[d][i] for d, i in enumerate(idx)])
            high = np.array([edges[d][i+1] for d, i in enumerate(idx)])
            boxes.append(Hyperrectangle(low, high))
        return boxes

    def vertices (self) :
        return np.array([np.where(corner, self.high, self.low)
                         for corner in product((False, True), repeat=len(self))])

    def sample (self, N, rng=None) :
        rng = np.random.default_rng() if rng is None else rng
        return rng.uniform(self.low, self.high, (N, len(self)))
