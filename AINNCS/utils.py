import time
import numpy as np
from tqdm import tqdm

def run_time (func, *args, **kwargs) :
    before = time.perf_counter()
    ret = func(*args, **kwargs)
    after = time.perf_counter()
    return ret, (after - before)

def run_times (N, func, *args, **kwargs) :
    times = np.empty(N)
    disable_bar = kwargs.pop('rt_disable_bar',True)
    for n in tqdm(range(N), disable=disable_bar) :
        ret, times[n] = run_time(func, *args, **kwargs)
    return ret, times

def format_time (seconds) :
    if seconds < 1e-3 :
        return f'{seconds*1e6:.1f} microseconds'
    if seconds < 1 :
        return f'{seconds*1e3:.1f} milliseconds'
    return f'{seconds:.3f} seconds'
