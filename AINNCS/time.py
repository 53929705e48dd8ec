import numpy as np
from math import ceil

class TimeSpec :
    def __init__(self, type, t_step, u_step) -> None:
        # discrete or continuous
        self.type = type
        # Integration step
        self.t_step = t_step
        # Control update period
        self.u_step = u_step

    @property
    def n_step (self) :
        return round(self.u_step/self.t_step)

    def lentt (self, ti, tf) :
        return ceil((tf + self.t_step - ti)/self.t_step)

    def tt (self, ti, tf) :
        return ti + self.t_step*np.arange(round((tf - ti)/self.t_step) + 1)

    def tu (self, ti, tf) :
        N = round((tf - ti)/self.u_step)
        return (ti + self.t_step*np.arange(N*self.n_step)).reshape((-1,self.n_step))

    def uu (self, ti, tf) :
        return ti + self.u_step*np.arange(round((tf - ti)/self.u_step) + 1)

class DiscreteTimeSpec (TimeSpec) :
    def __init__(self) -> None:
        super().__init__('discrete', 1, 1)

    def __str__(self) -> str:
        return 'Discrete'

class ContinuousTimeSpec (TimeSpec) :
    def __init__(self, t_step, u_step) -> None:
        if t_step > u_step :
            raise ValueError('t_step should be smaller than u_step in ContinuousTimeSpec')
        if abs(u_step/t_step - round(u_step/t_step)) > 1e-9 :
            raise ValueError(f'u_step={u_step} should be a multiple of t_step={t_step}')
        super().__init__('continuous', t_step, u_step)

    def __str__(self) -> str:
        return f'Continuous (t_step: {self.t_step}, u_step: {self.u_step})'
