#!/usr/bin/env python3
"""
Polyline Reducer - Main Entry Point
Generates a seeded random walk and times both reduction variants on it.
"""

import argparse
import logging
import time

from polyline_reducer.config.settings import SimplifierConfig, SIMPLIFICATION_PRESETS, get_preset_config
from polyline_reducer.core.ramer_douglas_peucker import RamerDouglasPeucker
from polyline_reducer.utils.logger import ReductionLogger
from polyline_reducer.utils.sample_data import random_walk


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Time Ramer-Douglas-Peucker reduction on synthetic data.")
    ap.add_argument("--points", type=int, default=SimplifierConfig.SAMPLE_POINTS)
    ap.add_argument("--seed", type=int, default=SimplifierConfig.SAMPLE_SEED)
    ap.add_argument("--epsilon", type=float, default=None,
                    help="tolerance; overrides --preset")
    ap.add_argument("--preset", type=str, default="balanced", choices=sorted(SIMPLIFICATION_PRESETS))
    ap.add_argument("--full-scan", action="store_true",
                    help="also inspect the penultimate point of every range")
    ap.add_argument("--iterations", type=int, default=0,
                    help="run a benchmark with this many iterations per variant")
    ap.add_argument("--debug-file", type=str, default=None)
    ap.add_argument("--verbose", action="store_true")
    return ap


def main(argv=None):
    """Main entry point for the reduction harness."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")

    epsilon = args.epsilon if args.epsilon is not None else get_preset_config(args.preset)["epsilon"]
    reducer = RamerDouglasPeucker(epsilon, full_scan=args.full_scan)
    run_logger = ReductionLogger(args.debug_file)

    try:
        points = random_walk(args.points, seed=args.seed)
        run_logger.log_input(len(points), seed=args.seed)

        start_time = time.perf_counter()
        reduced = reducer.simplify(points)
        elapsed = (time.perf_counter() - start_time) * 1000
        run_logger.log_reduction(f"epsilon={epsilon:g}", len(points), len(reduced), elapsed)

        start_time = time.perf_counter()
        reduced = reducer.simplify_non_parametric(points)
        elapsed = (time.perf_counter() - start_time) * 1000
        run_logger.log_reduction("non-parametric", len(points), len(reduced), elapsed)

        if args.iterations > 0 and points:
            run_logger.log_benchmark(f"epsilon={epsilon:g}", reducer.benchmark(points, args.iterations))
            run_logger.log_benchmark("non-parametric",
                                     reducer.benchmark(points, args.iterations, non_parametric=True))
    finally:
        run_logger.close()


if __name__ == "__main__":
    main()
