from typing import NamedTuple
from pathlib import Path

class Options (NamedTuple) :
    results_dir: str = 'results'
    results_file: str = 'results.csv'
    # Controllers are read from <models_dir>/<Benchmark>/
    models_dir: str = 'models'
    # Use the (slower) settings that prove the properties, e.g. splitting
    verification: bool = True
    # Analysis on a short horizon before the timed run
    warmup: bool = True
    plots: bool = True
    # Number of timed analyses to average
    runtime_N: int = 1
    seed: int = 0
    enable_bar: bool = False

def modelpath (opts:Options, benchmark, filename) -> Path :
    return Path(opts.models_dir).joinpath(benchmark, filename)
