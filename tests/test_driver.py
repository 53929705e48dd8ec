import csv
import tempfile
import unittest
from collections import OrderedDict
from pathlib import Path

from AINNCS.config import Options
from AINNCS.driver import run_benchmarks, parse_args


class TestRunBenchmarks(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.opts = Options(results_dir=str(Path(self.tmp.name).joinpath("results")), plots=False)
        self.calls = []

        def make_run(name, instances):
            def run(results, opts):
                self.calls.append(name)
                for instance in instances:
                    results.add(name, instance, "verified", 0.5)
            return run

        self.registry = OrderedDict([
            ("First", make_run("First", ["a", "b"])),
            ("Second", make_run("Second", [])),
            ("Third", make_run("Third", ["c", "d", "e"])),
        ])

    def tearDown(self):
        self.tmp.cleanup()

    def test_single_results_file(self):
        run_benchmarks(self.opts, registry=self.registry)
        folder = Path(self.opts.results_dir)
        self.assertEqual([p.name for p in folder.iterdir()], ["results.csv"])
        with open(folder.joinpath("results.csv"), newline="") as f:
            rows = [row for row in csv.reader(f) if row]
        self.assertEqual(rows[0], ["benchmark", "instance", "result", "time"])
        self.assertEqual(len(rows), 6)
        self.assertEqual(self.calls, ["First", "Second", "Third"])

    def test_subset_keeps_order(self):
        results = run_benchmarks(self.opts, benchmarks=["Third", "First"], registry=self.registry)
        self.assertEqual(self.calls, ["First", "Third"])
        self.assertEqual(results.rows, 5)

    def test_unknown_benchmark(self):
        with self.assertRaises(ValueError):
            run_benchmarks(self.opts, benchmarks=["Fourth"], registry=self.registry)

    def test_failure_closes_file(self):
        def fail(results, opts):
            raise FileNotFoundError("missing controller")

        registry = OrderedDict([("First", self.registry["First"]), ("Broken", fail)])
        with self.assertRaises(FileNotFoundError):
            run_benchmarks(self.opts, registry=registry)
        text = Path(self.opts.results_dir).joinpath("results.csv").read_text()
        self.assertTrue(text.endswith("\n\n"))


class TestParseArgs(unittest.TestCase):
    def test_defaults(self):
        args = parse_args([])
        self.assertEqual(args.results_dir, "results")
        self.assertIsNone(args.benchmarks)
        self.assertFalse(args.no_verification)
        self.assertEqual(args.N, 1)

    def test_flags(self):
        args = parse_args(["--benchmarks", "ACC", "VertCAS", "--no-plots", "-vv", "-N", "3"])
        self.assertEqual(args.benchmarks, ["ACC", "VertCAS"])
        self.assertTrue(args.no_plots)
        self.assertEqual(args.verbose, 2)
        self.assertEqual(args.N, 3)


if __name__ == "__main__":
    unittest.main()
