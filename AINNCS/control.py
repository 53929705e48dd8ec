import numpy as np
from AINNCS.interval import d_positive

class Control :
    def __init__(self, u_len) :
        self.u_len = u_len
        # calculation buffers, held over one control period
        self.uCALC = None
        self._uCALC = None
        self.u_CALC = None

    def u (self, t, x) :
        raise NotImplementedError

    # Bounds of u over the box [_x, x_]; assumes prime was called on a superset
    def _u (self, t, _x, x_) :
        raise NotImplementedError

    def u_ (self, t, _x, x_) :
        raise NotImplementedError

    def prime (self, _x, x_) :
        pass

    def step (self, t, x) :
        self.uCALC = self.u (t, x)
        return self.uCALC

    def step_if (self, t, _x, x_) :
        self._uCALC = self._u (t, _x, x_)
        self.u_CALC = self.u_ (t, _x, x_)
        return self._uCALC, self.u_CALC

    def __call__(self, t, x) :
        return self.step(t,x)

class LinearControl (Control) :
    def __init__(self, K):
        K = np.atleast_2d(K)
        super().__init__(K.shape[0])
        self.K = K
        self.Kp, self.Kn = d_positive(K)

    def u (self, t, x) :
        return self.K @ x

    def _u (self, t, _x, x_) :
        return self.Kp @ _x + self.Kn @ x_

    def u_ (self, t, _x, x_) :
        return self.Kp @ x_ + self.Kn @ _x

class NoControl (Control) :
    def __init__(self, u_len=1):
        super().__init__(u_len)
        self.uZERO = np.zeros(self.u_len)

    def u (self, t, x) :
        return self.uZERO

    def _u (self, t, _x, x_) :
        return self.uZERO

    def u_ (self, t, _x, x_) :
        return self.uZERO

class Disturbance :
    def __init__(self, w_len) :
        self.w_len = w_len

    def w  (self, t, x) :
        raise NotImplementedError

    def _w  (self, t, _x, x_) :
        raise NotImplementedError

    def w_ (self, t, _x, x_) :
        raise NotImplementedError

    def sample (self, rng) :
        return self.w(0, None)

class NoDisturbance (Disturbance) :
    def __init__(self, w_len=1):
        super().__init__(w_len)
        self.wZERO = np.zeros((self.w_len))

    def w  (self, t, x) :
        return self.wZERO

    def _w  (self, t, _x, x_) :
        return self.wZERO

    def w_ (self, t, _x, x_) :
        return self.wZERO

class ConstantDisturbance (Disturbance) :
    # A constant w in [_wCONST, w_CONST], nominal value wCONST
    def __init__(self, wCONST, _wCONST, w_CONST):
        wCONST = np.atleast_1d(np.asarray(wCONST, dtype=float))
        super().__init__(len(wCONST))
        self.wCONST  = wCONST
        self._wCONST = np.atleast_1d(np.asarray(_wCONST, dtype=float))
        self.w_CONST = np.atleast_1d(np.asarray(w_CONST, dtype=float))
        if np.any(self._wCONST > self.w_CONST) :
            raise ValueError(f'Disturbance bounds need _w <= w_, got {self._wCONST} and {self.w_CONST}')

    def w (self, t, x) :
        return self.wCONST

    def _w  (self, t, _x, x_) :
        return self._wCONST

    def w_ (self, t, _x, x_) :
        return self.w_CONST

    def sample (self, rng) :
        return rng.uniform(self._wCONST, self.w_CONST)

class Postprocessing :
    """Affine correction of the raw network output y before use as u."""
    def __call__ (self, y) :
        raise NotImplementedError

    def bounds (self, _y, y_) :
        raise NotImplementedError

class NoPostprocessing (Postprocessing) :
    def __call__ (self, y) :
        return y

    def bounds (self, _y, y_) :
        return _y, y_

class UniformAdditivePostprocessing (Postprocessing) :
    # u = y + c
    def __init__(self, c) :
        self.c = c

    def __call__ (self, y) :
        return y + self.c

    def bounds (self, _y, y_) :
        return _y + self.c, y_ + self.c

    def __str__ (self) :
        return f'u = y + {self.c}'

class LinearMapPostprocessing (Postprocessing) :
    # u = a y, a scalar or matrix
    def __init__(self, a) :
        self.a = np.asarray(a, dtype=float)
        self.ap, self.an = d_positive(self.a)

    def __call__ (self, y) :
        if self.a.ndim == 0 :
            return self.a * y
        return self.a @ y

    def bounds (self, _y, y_) :
        if self.a.ndim == 0 :
            return self.ap*_y + self.an*y_, self.ap*y_ + self.an*_y
        return self.ap @ _y + self.an @ y_, self.ap @ y_ + self.an @ _y

    def __str__ (self) :
        return f'u = {self.a} y'
