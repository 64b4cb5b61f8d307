#!/usr/bin/env python3
"""
Calibrate the tile game heuristic weights, or benchmark a fixed weight vector.

Usage:
    python calibrate_tiles.py calibrate --runs 5 --depth 1
    python calibrate_tiles.py benchmark --runs 50 --empty-cells 10
    python calibrate_tiles.py compare --runs 20

The monotonicity feature measures roughness (differences between neighbouring
tiles), so a positive weight rewards rough boards and scores are clamped at 0.
The default sweep therefore holds its weight at 0.

The thread pool shares one interpreter, so CPU-bound games gain little from
more workers. Use --strategy ray for real parallelism.
"""

import argparse

from gridminimax.agents.features import TileFeatureEvaluator
from gridminimax.agents.greedy_bot import GreedyBot
from gridminimax.agents.minimax_bot import MinimaxBot
from gridminimax.agents.random_bot import RandomBot
from gridminimax.agents.scorer import WeightedScorer
from gridminimax.agents.weights import WeightRange, WeightVector
from gridminimax.evaluation.benchmark import benchmark_bots, run_benchmark
from gridminimax.evaluation.calibration import run_calibration
from gridminimax.evaluation.calibration_analysis import CalibrationAnalysis
from gridminimax.evaluation.execution_strategies import ExecutionStrategyFactory
from gridminimax.evaluation.simulation import GameSetupFactory
from gridminimax.game.tiles import PREFERRED_DIRECTIONS

# Default sweep: small enough to finish in minutes on a laptop
DEFAULT_RANGES = {
    "max_tile": WeightRange(0.0, 1.0, 0.5),
    "adjacent_tiles": WeightRange(0.0, 1.0, 0.5),
    "empty_cells": WeightRange(0.0, 20.0, 10.0),
    "monotonicity": WeightRange(0.0, 0.0, 0.1),
}


def weights_from_args(args: argparse.Namespace) -> WeightVector:
    return WeightVector.from_dict(
        {
            "max_tile": args.max_tile,
            "adjacent_tiles": args.adjacent_tiles,
            "empty_cells": args.empty_cells,
            "monotonicity": args.monotonicity,
        }
    )


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Tile game weight calibration",
        epilog=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("mode", choices=["calibrate", "benchmark", "compare"])
    parser.add_argument("--runs", type=int, default=5, help="games per candidate / benchmark")
    parser.add_argument("--depth", type=int, default=1, help="minimax search depth")
    parser.add_argument("--seed", type=int, default=42, help="base seed, -1 for fresh entropy")
    parser.add_argument(
        "--strategy",
        choices=["sequential", "threads", "ray"],
        default="threads",
        help="threads share the GIL, so use ray for real parallelism on CPU-bound games",
    )
    parser.add_argument("--workers", type=int, default=None)
    parser.add_argument("--report", type=str, default=None, help="write the calibration report here")
    parser.add_argument("--plots", type=str, default=None, help="save weight plots to this directory")
    # Fixed weights for benchmark / compare
    parser.add_argument("--max-tile", type=float, default=1.0)
    parser.add_argument("--adjacent-tiles", type=float, default=1.0)
    parser.add_argument("--empty-cells", type=float, default=10.0)
    parser.add_argument("--monotonicity", type=float, default=0.0)
    args = parser.parse_args()

    base_seed = None if args.seed == -1 else args.seed
    strategy = ExecutionStrategyFactory.create_strategy(args.strategy, num_workers=args.workers)
    setup = GameSetupFactory.tiles()

    if args.mode == "calibrate":
        report = run_calibration(
            DEFAULT_RANGES,
            args.runs,
            args.depth,
            setup=setup,
            strategy=strategy,
            base_seed=base_seed,
        )
        analysis = CalibrationAnalysis(report)
        print()
        print(analysis.generate_report(args.report))
        if args.plots:
            analysis.save_weight_plots(args.plots)

    elif args.mode == "benchmark":
        run_benchmark(
            weights_from_args(args),
            args.runs,
            args.depth,
            setup=setup,
            strategy=strategy,
            base_seed=base_seed,
        )

    else:
        scorer = WeightedScorer(TileFeatureEvaluator(), weights_from_args(args))
        bots = {
            RandomBot.name: RandomBot(),
            GreedyBot.name: GreedyBot(scorer, PREFERRED_DIRECTIONS),
            MinimaxBot.name: MinimaxBot(scorer, depth=args.depth),
        }
        benchmark_bots(bots, args.runs, setup=setup, strategy=strategy, base_seed=base_seed)


if __name__ == "__main__":
    main()
