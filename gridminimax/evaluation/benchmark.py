"""
Benchmark mode: a fixed weight vector (or bot) over many independent games.

This is the calibration harness with a single candidate, except that the
individual games, not the candidates, are the parallel units of work.
"""

import statistics
from functools import partial

from gridminimax.agents.minimax_bot import MinimaxBot
from gridminimax.agents.move_selector_base import MoveSelectorBase
from gridminimax.agents.scorer import WeightedScorer
from gridminimax.agents.weights import WeightVector
from gridminimax.errors import ConfigurationError
from gridminimax.evaluation.benchmark_data import BenchmarkReport, RunResult
from gridminimax.evaluation.execution_strategies import (
    ExecutionStrategy,
    ExecutionStrategyFactory,
)
from gridminimax.evaluation.simulation import GameSetup, GameSetupFactory, play_game, run_seeds


def summarize_runs(runs: list[RunResult], failed_runs: int = 0) -> BenchmarkReport:
    if not runs:
        raise RuntimeError("No benchmark game completed successfully")
    metrics = [run.terminal_metric for run in runs]
    return BenchmarkReport(
        best_metric=max(metrics),
        worst_metric=min(metrics),
        mean_metric=statistics.fmean(metrics),
        mean_moves=statistics.fmean(run.moves for run in runs),
        mean_duration=statistics.fmean(run.duration for run in runs),
        runs=runs,
        failed_runs=failed_runs,
    )


def _play_seed(seed: int | None, setup: GameSetup, bot: MoveSelectorBase) -> RunResult:
    return play_game(setup, bot, seed)


def run_bot_benchmark(
    bot: MoveSelectorBase,
    n_runs: int,
    *,
    setup: GameSetup | None = None,
    strategy: ExecutionStrategy | None = None,
    base_seed: int | None = 42,
    verbose: bool = True,
) -> BenchmarkReport:
    """Play n_runs games with bot and summarize them."""
    if n_runs < 1:
        raise ConfigurationError(f"n_runs must be at least 1, got {n_runs}")

    setup = setup or GameSetupFactory.default()
    strategy = strategy or ExecutionStrategyFactory.create_strategy("threads", show_progress=verbose)
    seeds = run_seeds(n_runs, base_seed)

    runs = strategy.run(partial(_play_seed, setup=setup, bot=bot), seeds, desc=f"Running {bot.name}")
    report = summarize_runs(runs, failed_runs=n_runs - len(runs))

    if verbose:
        print(f"{bot.name} on {setup.name}")
        print(report.summary())

    return report


def run_benchmark(
    weights: WeightVector,
    n_runs: int,
    depth: int,
    *,
    setup: GameSetup | None = None,
    strategy: ExecutionStrategy | None = None,
    base_seed: int | None = 42,
    verbose: bool = True,
) -> BenchmarkReport:
    """Play n_runs games with a MinimaxBot using weights at depth."""
    if depth < 1:
        raise ConfigurationError(f"Search depth must be at least 1, got {depth}")
    setup = setup or GameSetupFactory.default()
    bot = MinimaxBot(WeightedScorer(setup.evaluator, weights), depth=depth)
    return run_bot_benchmark(
        bot, n_runs, setup=setup, strategy=strategy, base_seed=base_seed, verbose=verbose
    )


def benchmark_bots(
    bots: dict[str, MoveSelectorBase],
    n_runs: int,
    *,
    setup: GameSetup | None = None,
    strategy: ExecutionStrategy | None = None,
    base_seed: int | None = 42,
    verbose: bool = True,
) -> dict[str, BenchmarkReport]:
    """Benchmark several bots on the same seeded games for a fair comparison."""
    results = {}
    for bot_name, bot in bots.items():
        if verbose:
            print(f"{bot_name}: playing {n_runs} games")
        results[bot_name] = run_bot_benchmark(
            bot, n_runs, setup=setup, strategy=strategy, base_seed=base_seed, verbose=False
        )

    if verbose:
        print("\nPerformance Results:")
        print("-" * 30)
        ranked = sorted(results.items(), key=lambda item: item[1].mean_metric, reverse=True)
        for i, (bot_name, report) in enumerate(ranked, 1):
            print(f"{i}. {bot_name}")
            print(f"   Avg terminal metric: {report.mean_metric:.1f}")
            print(f"   Best / worst: {report.best_metric} / {report.worst_metric}")
            print(f"   Avg moves: {report.mean_moves:.1f}")
            print()

    return results
