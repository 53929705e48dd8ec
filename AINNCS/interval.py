"""Interval primitives on (lower, upper) pairs.

Every function takes the bounds of its arguments and returns the bounds
``(l, u)`` of an enclosure of the image. Scalars are Python/numpy floats.
"""
import numpy as np
from numpy import pi, inf, clip, floor, ceil

def i_add (a, b) :
    return a[0] + b[0], a[1] + b[1]

def i_mul (a, b) :
    # 0*inf is 0 in the product set
    values = [0. if x == 0 or y == 0 else x*y for x in a for y in b]
    return min(values), max(values)

def i_pow (a, n:int) :
    if n == 0 :
        return 1., 1.
    if n < 0 :
        return i_inv(i_pow(a, -n))
    l, u = a
    if n % 2 == 1 :
        return l**n, u**n
    if l >= 0 :
        return l**n, u**n
    if u <= 0 :
        return u**n, l**n
    return 0., max(l**n, u**n)

def i_inv (a) :
    l, u = a
    if l > 0 or u < 0 :
        return 1/u, 1/l
    return -inf, inf

def i_sqrt (a) :
    l, u = a
    if u < 0 :
        raise ValueError(f'sqrt of negative interval [{l}, {u}]')
    return np.sqrt(max(l, 0.)), np.sqrt(u)

def i_exp (a) :
    return np.exp(a[0]), np.exp(a[1])

def i_log (a) :
    l, u = a
    if u <= 0 :
        raise ValueError(f'log of nonpositive interval [{l}, {u}]')
    return (np.log(l) if l > 0 else -inf), np.log(u)

def i_tanh (a) :
    return np.tanh(a[0]), np.tanh(a[1])

def i_atan (a) :
    return np.arctan(a[0]), np.arctan(a[1])

def i_abs (a) :
    l, u = a
    if l >= 0 :
        return l, u
    if u <= 0 :
        return -u, -l
    return 0., max(-l, u)

def _contains_point (l, u, p) :
    # Is p + 2k pi in [l, u] for some integer k
    return ceil((l - p)/(2*pi)) <= floor((u - p)/(2*pi))

def i_sin (a) :
    l, u = a
    if u - l >= 2*pi :
        return -1., 1.
    sl, su = np.sin(l), np.sin(u)
    _s, s_ = min(sl, su), max(sl, su)
    if _contains_point(l, u, pi/2) :
        s_ = 1.
    if _contains_point(l, u, -pi/2) :
        _s = -1.
    return _s, s_

def i_cos (a) :
    return i_sin((a[0] + pi/2, a[1] + pi/2))

def i_tan (a) :
    l, u = a
    # tan is increasing between consecutive asymptotes pi/2 + k pi
    if u - l >= pi or ceil((l - pi/2)/pi) <= floor((u - pi/2)/pi) :
        return -inf, inf
    return np.tan(l), np.tan(u)

def d_positive (B) :
    Bp = clip(B, 0, inf); Bn = clip(B, -inf, 0)
    return Bp, Bn

def width (_x, x_, scale=1.) :
    return (x_ - _x) / scale

def get_half_intervals (_x, x_) :
    """Bisect the box [_x, x_] along every dimension into 2**n boxes."""
    n = len(_x)
    c = (_x + x_) / 2
    ret = []
    for part_i in range(2**n) :
        _y = np.copy(_x); y_ = np.copy(x_)
        for ind in range(n) :
            if (part_i >> ind) % 2 :
                _y[ind] = c[ind]
            else :
                y_[ind] = c[ind]
        ret.append((_y, y_))
    return ret
