"""Run the AINNCS benchmarks and collect the results table."""
import argparse
import torch
from tabulate import tabulate
from AINNCS.config import Options
from AINNCS.results import ResultsFile, HEADER
from AINNCS.logger import Logger

logger = Logger.setup_logger(__name__)

def run_benchmarks (opts:Options=Options(), benchmarks=None, registry=None) :
    """Run the selected benchmarks (all of them by default) in registry order.

    Every benchmark appends its rows to the same results file, which is
    closed even when a benchmark fails.
    """
    if registry is None :
        from AINNCS.models import BENCHMARKS as registry
    if benchmarks is None :
        benchmarks = list(registry)
    unknown = [b for b in benchmarks if b not in registry]
    if unknown :
        raise ValueError(f'Unknown benchmarks {unknown}, choose from {list(registry)}')

    print('Running AINNCS benchmarks...')
    with ResultsFile(opts.results_dir, opts.results_file) as results :
        for name, run in registry.items() :
            if name not in benchmarks :
                continue
            print(f'###\nRunning {name} benchmark\n###')
            run(results, opts)
        logger.info(f'{results.rows} results written to {results.path}')
    print(tabulate(results.table, headers=HEADER, floatfmt='.3f'))
    print('Finished running benchmarks.')
    return results

def parse_args (argv=None) :
    parser = argparse.ArgumentParser(prog='ainncs', description='Run the AINNCS benchmarks')
    parser.add_argument('--results-dir', default='results', help='Folder for results.csv and the plots')
    parser.add_argument('--models-dir', default='models', help='Folder holding <Benchmark>/<controller> files')
    parser.add_argument('--benchmarks', nargs='+', default=None, help='Subset of the benchmarks to run')
    parser.add_argument('--no-verification', action='store_true', help='Skip the splitting needed for proofs')
    parser.add_argument('--no-warmup', action='store_true', help='Do not run the warm-up analysis')
    parser.add_argument('--no-plots', action='store_true', help='Do not save plots')
    parser.add_argument('-N', type=int, default=1, help='Number of timed analyses to average')
    parser.add_argument('--seed', type=int, default=0, help='Seed of the simulations')
    parser.add_argument('-v', '--verbose', action='count', default=0, help='Increase verbosity')
    parser.add_argument('--bar', action='store_true', help='Show progress bars')
    return parser.parse_args(argv)

def main (argv=None) :
    args = parse_args(argv)
    Logger.set_logger_level(args.verbose)
    if args.N < 1 :
        raise ValueError(f'-N should be at least 1, got {args.N}')
    torch.set_num_threads(1)
    opts = Options(results_dir=args.results_dir, models_dir=args.models_dir,
                   verification=not args.no_verification, warmup=not args.no_warmup,
                   plots=not args.no_plots, runtime_N=args.N, seed=args.seed,
                   enable_bar=args.bar)
    run_benchmarks(opts, args.benchmarks)

if __name__ == '__main__' :
    main()
