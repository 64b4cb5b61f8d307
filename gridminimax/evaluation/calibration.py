"""
Brute-force calibration of heuristic weights.

Every candidate weight vector from the Cartesian product of the per-feature
ranges plays n_runs full games with a MinimaxBot. Candidates that share a
quantized key with an earlier one are skipped before any game is played.
Candidates are independent units of work fanned out by an execution strategy;
the only shared state is the results table (one lock around each insert) and
the progress counter.
"""

import itertools
import statistics
import threading
import time
from functools import partial
from typing import Iterable

from tqdm import tqdm

from gridminimax.agents.minimax_bot import MinimaxBot
from gridminimax.agents.scorer import WeightedScorer
from gridminimax.agents.weights import (
    QUANTIZATION_FACTOR,
    WeightRange,
    WeightVector,
    candidate_vectors,
    count_candidates,
)
from gridminimax.errors import ConfigurationError
from gridminimax.evaluation.benchmark_data import CalibrationReport, CandidateResult, RunResult
from gridminimax.evaluation.execution_strategies import (
    ExecutionStrategy,
    ExecutionStrategyFactory,
)
from gridminimax.evaluation.simulation import GameSetup, GameSetupFactory, play_game, run_seeds


class ResultsTable:
    """
    Quantized key -> candidate result, safe for concurrent inserts.

    First writer wins: a later candidate whose key is already stored is dropped
    and counted as a collision, so the stored weights always belong to the
    vector that produced the stored statistics.
    """

    def __init__(self, factor: int = QUANTIZATION_FACTOR):
        self.factor = factor
        self._results: dict[tuple[int, ...], CandidateResult] = {}
        self._lock = threading.Lock()
        self.collisions = 0

    def insert(self, result: CandidateResult) -> bool:
        key = result.weights.quantized_key(self.factor)
        with self._lock:
            if key in self._results:
                self.collisions += 1
                return False
            self._results[key] = result
            return True

    def best(self) -> tuple[tuple[int, ...], CandidateResult] | None:
        """Highest mean terminal metric; ties go to the earliest insert."""
        with self._lock:
            best_entry = None
            for key, result in self._results.items():
                if best_entry is None or result.mean_metric > best_entry[1].mean_metric:
                    best_entry = (key, result)
            return best_entry

    def snapshot(self) -> dict[tuple[int, ...], CandidateResult]:
        with self._lock:
            return dict(self._results)

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)


class ProgressCounter:
    """Completion counter. next() on itertools.count is atomic, so no lock is taken."""

    def __init__(self):
        self._counter = itertools.count(1)

    def increment(self) -> int:
        """Count one completion and return the running total including it."""
        return next(self._counter)


def aggregate_runs(runs: list[RunResult]) -> tuple[float, float]:
    """Arithmetic means of terminal metric and move count."""
    if not runs:
        raise ValueError("Cannot aggregate an empty list of runs")
    return (
        statistics.fmean(run.terminal_metric for run in runs),
        statistics.fmean(run.moves for run in runs),
    )


def evaluate_candidate(
    weights: WeightVector,
    setup: GameSetup,
    depth: int,
    seeds: list[int | None],
) -> CandidateResult:
    """Play one game per seed with weights and aggregate the outcomes.

    Games that fail are reported and left out; if every game fails the candidate fails.
    """
    bot = MinimaxBot(WeightedScorer(setup.evaluator, weights), depth=depth)
    runs = []
    for seed in seeds:
        try:
            runs.append(play_game(setup, bot, seed))
        except Exception as e:
            tqdm.write(f"Warning: Game with seed {seed} failed for [{weights}]: {e!r}")

    if not runs:
        raise RuntimeError(f"All {len(seeds)} games failed for [{weights}]")

    mean_metric, mean_moves = aggregate_runs(runs)
    return CandidateResult(weights=weights, mean_metric=mean_metric, mean_moves=mean_moves, runs=len(runs))


def unique_candidates(
    candidates: Iterable[WeightVector], factor: int = QUANTIZATION_FACTOR
) -> tuple[list[WeightVector], int]:
    """
    Keep the first candidate of every quantized key, in enumeration order.

    Returns the kept candidates and how many were dropped as duplicates.
    """
    seen: set[tuple[int, ...]] = set()
    unique = []
    dropped = 0
    for weights in candidates:
        key = weights.quantized_key(factor)
        if key in seen:
            dropped += 1
            continue
        seen.add(key)
        unique.append(weights)
    return unique, dropped


def validate_calibration(
    ranges: dict[str, WeightRange], n_runs: int, depth: int, setup: GameSetup
) -> None:
    if not ranges:
        raise ConfigurationError("At least one weight range is required")
    missing = [name for name in setup.evaluator.feature_names if name not in ranges]
    if missing:
        raise ConfigurationError(f"No weight range given for feature(s): {', '.join(missing)}")
    if n_runs < 1:
        raise ConfigurationError(f"n_runs must be at least 1, got {n_runs}")
    if depth < 1:
        raise ConfigurationError(f"Search depth must be at least 1, got {depth}")


def run_calibration(
    ranges: dict[str, WeightRange],
    n_runs: int,
    depth: int,
    *,
    setup: GameSetup | None = None,
    strategy: ExecutionStrategy | None = None,
    base_seed: int | None = 42,
    quantization_factor: int = QUANTIZATION_FACTOR,
    verbose: bool = True,
) -> CalibrationReport:
    """
    Grid-search the weight space and report the best candidate.

    Args:
        ranges: feature name -> WeightRange, one per evaluator feature
        n_runs: games played per candidate
        depth: minimax depth of every simulated player
        setup: game to calibrate on, the tiles game by default
        strategy: how candidates are fanned out, a thread pool by default
        base_seed: seeds the per-run generators; run i uses the same seed for
            every candidate. None draws fresh entropy for every game.
        quantization_factor: resolution of the result keys
        verbose: print progress and the final summary

    Returns:
        CalibrationReport with the winning vector rebuilt from its quantized key
    """
    setup = setup or GameSetupFactory.default()
    validate_calibration(ranges, n_runs, depth, setup)

    total = count_candidates(ranges)
    candidates, duplicates = unique_candidates(candidate_vectors(ranges), quantization_factor)
    strategy = strategy or ExecutionStrategyFactory.create_strategy("threads", show_progress=verbose)
    seeds = run_seeds(n_runs, base_seed)

    table = ResultsTable(quantization_factor)
    progress = ProgressCounter()
    report_every = max(1, len(candidates) // 10)

    def on_complete(result: CandidateResult) -> None:
        table.insert(result)
        done = progress.increment()
        if verbose and done % report_every == 0:
            tqdm.write(f"  {done}/{len(candidates)} candidates ({done / len(candidates):.0%})")

    if verbose:
        print(f"Calibrating {setup.name}: {total} candidates x {n_runs} games at depth {depth}")
        if duplicates:
            print(f"  {duplicates} candidates share a quantized key with an earlier one and are skipped")

    start_time = time.perf_counter()
    work = partial(evaluate_candidate, setup=setup, depth=depth, seeds=seeds)
    completed = strategy.run(work, candidates, desc="Calibrating", on_complete=on_complete)
    elapsed = time.perf_counter() - start_time

    best = table.best()
    names = tuple(ranges)
    report = CalibrationReport(
        best_weights=WeightVector.from_key(names, best[0], quantization_factor) if best else None,
        best_key=best[0] if best else None,
        mean_metric=best[1].mean_metric if best else 0.0,
        mean_moves=best[1].mean_moves if best else 0.0,
        candidates_evaluated=len(table),
        total_candidates=total,
        iterations=len(completed),
        failed_candidates=len(candidates) - len(completed),
        collisions=duplicates + table.collisions,
        elapsed=elapsed,
        results=table.snapshot(),
    )

    if verbose:
        print(report.summary())

    return report
