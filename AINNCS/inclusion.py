import numpy as np
import sympy as sp
from AINNCS.interval import (i_add, i_mul, i_pow, i_inv, i_sqrt, i_exp, i_log,
                             i_sin, i_cos, i_tan, i_tanh, i_atan, i_abs)

_unary = {
    sp.sin  : i_sin,
    sp.cos  : i_cos,
    sp.tan  : i_tan,
    sp.tanh : i_tanh,
    sp.exp  : i_exp,
    sp.log  : i_log,
    sp.atan : i_atan,
    sp.Abs  : i_abs,
}

def _compile (index, exp) :
    if isinstance(exp, sp.Symbol) :
        if exp not in index :
            raise ValueError(f'Symbol {exp} is not an argument of the inclusion function')
        i = index[exp]
        return lambda _z, z_ : (_z[i], z_[i])
    elif isinstance(exp, (sp.Number, sp.NumberSymbol)) :
        c = float(exp)
        return lambda _z, z_ : (c, c)
    elif isinstance(exp, sp.Add) :
        terms = [_compile(index, e) for e in exp.args]
        def _add (_z, z_) :
            ret = terms[0](_z, z_)
            for term in terms[1:] :
                ret = i_add(ret, term(_z, z_))
            return ret
        return _add
    elif isinstance(exp, sp.Mul) :
        factors = [_compile(index, e) for e in exp.args]
        def _mul (_z, z_) :
            ret = factors[0](_z, z_)
            for factor in factors[1:] :
                ret = i_mul(ret, factor(_z, z_))
            return ret
        return _mul
    elif isinstance(exp, sp.Pow) :
        base = _compile(index, exp.args[0])
        e = exp.args[1]
        if e.is_Integer :
            n = int(e)
            return lambda _z, z_ : i_pow(base(_z, z_), n)
        if e == sp.Rational(1,2) :
            return lambda _z, z_ : i_sqrt(base(_z, z_))
        if e == sp.Rational(-1,2) :
            return lambda _z, z_ : i_inv(i_sqrt(base(_z, z_)))
        # x**e = exp(e log x)
        power = _compile(index, e)
        return lambda _z, z_ : i_exp(i_mul(power(_z, z_), i_log(base(_z, z_))))
    elif isinstance(exp, sp.Function) :
        for f, i_f in _unary.items() :
            if isinstance(exp, f) :
                arg = _compile(index, exp.args[0])
                return lambda _z, z_ : i_f(arg(_z, z_))
    raise ValueError(f'Could not build an inclusion function for {exp} (type: {type(exp)})')

class NaturalInclusion :
    """Natural inclusion function of a list of sympy expressions.

    Calling the object with the bounds ``_z, z_`` of the arguments (in the
    order of ``symbols``) returns arrays ``_f, f_`` such that
    ``_f <= f(z) <= f_`` for every ``z`` in ``[_z, z_]``.
    """
    def __init__(self, symbols, exprs) -> None:
        self.symbols = list(symbols)
        self.exprs = [sp.sympify(e) for e in exprs]
        index = {s: i for i, s in enumerate(self.symbols)}
        self._funcs = [_compile(index, e) for e in self.exprs]

    def __len__ (self) :
        return len(self._funcs)

    def eval_i (self, i, _z, z_) :
        return self._funcs[i](_z, z_)

    def __call__ (self, _z, z_) :
        _f = np.empty(len(self._funcs)); f_ = np.empty(len(self._funcs))
        for i, func in enumerate(self._funcs) :
            _f[i], f_[i] = func(_z, z_)
        return _f, f_
