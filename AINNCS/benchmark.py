from typing import NamedTuple, Optional, Tuple, Sequence
import numpy as np
from AINNCS.config import Options
from AINNCS.sets import Hyperrectangle
from AINNCS.system import ControlledSystem
from AINNCS.reach import UniformPartitioner
from AINNCS.results import ResultsFile
from AINNCS.specs import Predicate, VERIFIED, FALSIFIED, UNKNOWN
from AINNCS.plotting import ExprPlotSpec, plot_reach, plot_exprs, save_figure
from AINNCS.utils import run_time, run_times, format_time
from AINNCS.interval import width
from AINNCS.logger import Logger

logger = Logger.setup_logger(__name__)

class Instance (NamedTuple) :
    benchmark: str
    scenario: str
    clsys: ControlledSystem
    x0: Hyperrectangle
    t_end: float
    predicate: Predicate
    # Grid split of the initial set, number of pieces per dimension
    splits: Optional[Tuple[int, ...]] = None
    depth: int = 0
    trajectories: int = 10
    include_vertices: bool = False
    plots: Sequence = ()

    @property
    def t_spec (self) :
        return self.clsys.sys.t_spec

def analyze (instance:Instance, t_end, popts:UniformPartitioner.Opts) :
    """Flowpipe construction followed by property checking."""
    partitioner = UniformPartitioner(instance.clsys)
    rs, t_rs = run_time(partitioner.compute_reachable_set, 0, t_end, instance.x0, popts)
    logger.info(f'flowpipe construction: {len(rs)} partitions in {format_time(t_rs)}')
    logger.debug(f'width of the final reach set: {width(*rs(t_end))}')
    tt = instance.t_spec.tt(0, t_end)
    holds, t_pred = run_time(instance.predicate.check, rs, tt)
    logger.info(f'property checking: {format_time(t_pred)}')
    return rs, holds

def run_instance (instance:Instance, results:ResultsFile, opts:Options, analyze=analyze) :
    t_spec = instance.t_spec
    if opts.warmup :
        analyze(instance, 2*t_spec.u_step, UniformPartitioner.Opts())

    popts = UniformPartitioner.Opts(depth=instance.depth, splits=instance.splits,
                                    enable_bar=opts.enable_bar)
    (rs, holds), times = run_times(opts.runtime_N, analyze, instance, instance.t_end, popts)
    elapsed = float(np.mean(times))
    print(f'total analysis time: {format_time(elapsed)}')
    print('The property is satisfied.' if holds else 'The property may be violated.')

    rng = np.random.default_rng(opts.seed)
    trajs, t_sim = run_time(instance.clsys.compute_mc_trajectories, 0, instance.t_end, instance.x0,
                            instance.trajectories, instance.include_vertices, rng)
    logger.info(f'simulation: {len(trajs)} trajectories in {format_time(t_sim)}')

    tt = t_spec.tt(0, instance.t_end)
    # a violating simulation overrides the reach set check
    if instance.predicate.falsified_by(trajs, tt) :
        result = FALSIFIED
    elif holds :
        result = VERIFIED
    else :
        result = UNKNOWN
    results.add(instance.benchmark, instance.scenario, result, elapsed)

    if opts.plots :
        for spec in instance.plots :
            if isinstance(spec, ExprPlotSpec) :
                fig = plot_exprs(spec, rs, trajs, tt)
            else :
                fig = plot_reach(spec, rs, trajs, tt, instance.predicate, instance.t_end)
            path = results.folder.joinpath(spec.filename(instance.benchmark, instance.scenario))
            save_figure(fig, path)
            logger.info(f'saved {path}')

    return result

def run_instances (instances, results:ResultsFile, opts:Options, analyze=analyze) :
    for instance in instances :
        print(f'Running analysis of {instance.benchmark} ({instance.scenario})')
        logger.debug(str(instance.clsys))
        run_instance(instance, results, opts, analyze)
