"""
Tests for the calibration harness.

Validates candidate enumeration, aggregation, the shared results table and
progress counter, configuration errors and graceful partial failure.
"""

import random
import statistics
import threading
from unittest.mock import MagicMock

import pytest

from gridminimax.agents.weights import WeightRange, WeightVector
from gridminimax.errors import ConfigurationError
from gridminimax.evaluation.benchmark_data import CandidateResult, RunResult
from gridminimax.evaluation import calibration
from gridminimax.evaluation.calibration import (
    ProgressCounter,
    ResultsTable,
    aggregate_runs,
    evaluate_candidate,
    run_calibration,
    unique_candidates,
)
from gridminimax.evaluation.execution_strategies import (
    SequentialExecutionStrategy,
    ThreadedExecutionStrategy,
)
from gridminimax.evaluation.simulation import run_seeds
from .conftest import counter_setup


def candidate(value, mean_metric, mean_moves=1.0, runs=1):
    return CandidateResult(
        weights=WeightVector.from_dict({"value": value}),
        mean_metric=mean_metric,
        mean_moves=mean_moves,
        runs=runs,
    )


class TestAggregation:

    def test_means_match_independent_computation(self):
        pairs = [(128, 90), (256, 140), (64, 55), (256, 151)]
        runs = [RunResult(seed=i, terminal_metric=m, moves=n, duration=0.1) for i, (m, n) in enumerate(pairs)]

        mean_metric, mean_moves = aggregate_runs(runs)

        assert mean_metric == pytest.approx(sum(m for m, _ in pairs) / len(pairs))
        assert mean_moves == pytest.approx(sum(n for _, n in pairs) / len(pairs))

    def test_empty_runs_rejected(self):
        with pytest.raises(ValueError):
            aggregate_runs([])


class TestResultsTable:

    def test_first_writer_wins_on_collision(self):
        table = ResultsTable(factor=10)
        first = candidate(0.51, mean_metric=10)
        second = candidate(0.55, mean_metric=99)

        assert table.insert(first) is True
        assert table.insert(second) is False

        assert len(table) == 1
        assert table.collisions == 1
        assert table.snapshot()[(5,)] is first

    def test_best_is_highest_mean_metric(self):
        table = ResultsTable()
        table.insert(candidate(0.0, mean_metric=5))
        table.insert(candidate(1.0, mean_metric=8))
        table.insert(candidate(2.0, mean_metric=3))

        key, result = table.best()
        assert key == (10,)
        assert result.mean_metric == 8

    def test_best_ties_go_to_earliest_insert(self):
        table = ResultsTable()
        table.insert(candidate(2.0, mean_metric=8))
        table.insert(candidate(1.0, mean_metric=8))

        assert table.best()[0] == (20,)

    def test_empty_table_has_no_best(self):
        assert ResultsTable().best() is None

    def test_concurrent_inserts(self):
        table = ResultsTable()

        def insert_range(start):
            for value in range(start, start + 50):
                table.insert(candidate(float(value), mean_metric=value))

        threads = [threading.Thread(target=insert_range, args=(start,)) for start in range(0, 400, 50)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(table) == 400
        assert table.collisions == 0


class TestProgressCounter:

    def test_counts_up_from_one(self):
        counter = ProgressCounter()
        assert [counter.increment() for _ in range(3)] == [1, 2, 3]

    def test_concurrent_increments_are_unique(self):
        counter = ProgressCounter()
        seen = []
        lock = threading.Lock()

        def work():
            values = [counter.increment() for _ in range(100)]
            with lock:
                seen.extend(values)

        threads = [threading.Thread(target=work) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(seen) == list(range(1, 801))


class TestUniqueCandidates:

    def test_first_in_enumeration_order_is_kept(self):
        vectors = [WeightVector.from_dict({"value": v}) for v in (0.0, 0.05, 0.1, 0.15, 0.2)]

        unique, dropped = unique_candidates(vectors, factor=10)

        assert [v.values for v in unique] == [(0.0,), (0.1,), (0.2,)]
        assert dropped == 2

    def test_distinct_keys_untouched(self):
        vectors = [WeightVector.from_dict({"a": a, "b": b}) for a in (0, 1) for b in (0, 1)]
        unique, dropped = unique_candidates(vectors)
        assert unique == vectors
        assert dropped == 0


class TestEvaluateCandidate:

    def test_means_over_seeded_runs(self):
        setup = counter_setup()
        seeds = run_seeds(4, base_seed=7)
        result = evaluate_candidate(WeightVector.from_dict({"value": 0}), setup, depth=1, seeds=seeds)

        # a zero weight ties every move, so the bot adds 1 per step
        starts = [random.Random(seed).randint(0, 3) for seed in seeds]
        assert result.runs == 4
        assert result.mean_metric == pytest.approx(statistics.fmean(10 - s for s in starts))
        assert result.mean_moves == result.mean_metric

    def test_failed_runs_are_left_out(self):
        setup = counter_setup()
        original_new_game = setup.new_game
        calls = []

        def flaky_new_game(rng):
            calls.append(1)
            if len(calls) == 2:
                raise RuntimeError("broken start position")
            return original_new_game(rng)

        setup.new_game = flaky_new_game
        result = evaluate_candidate(WeightVector.from_dict({"value": 1}), setup, depth=1, seeds=[1, 2, 3])
        assert result.runs == 2

    def test_all_runs_failing_fails_the_candidate(self):
        setup = counter_setup()

        def broken(rng):
            raise RuntimeError("no start position")

        setup.new_game = broken
        with pytest.raises(RuntimeError, match="All 2 games failed"):
            evaluate_candidate(WeightVector.from_dict({"value": 1}), setup, depth=1, seeds=[1, 2])


class TestRunCalibration:

    def calibrate(self, ranges, strategy=None, **kwargs):
        kwargs.setdefault("n_runs", 3)
        kwargs.setdefault("depth", 1)
        return run_calibration(
            ranges,
            setup=counter_setup(),
            strategy=strategy or SequentialExecutionStrategy(show_progress=False),
            verbose=False,
            **kwargs,
        )

    def test_sweep_finds_best_weight(self):
        report = self.calibrate({"value": WeightRange(0, 2, 1)})

        assert report.total_candidates == 3
        assert report.candidates_evaluated == 3
        assert report.iterations == 3
        assert report.failed_candidates == 0
        assert report.collisions == 0
        assert report.best_key == (0,)
        assert report.best_weights.values == (0.0,)
        assert report.best_weights.names == ("value",)

        starts = [random.Random(seed).randint(0, 3) for seed in run_seeds(3, 42)]
        assert report.mean_metric == pytest.approx(statistics.fmean(10 - s for s in starts))

    def test_winning_vector_rebuilt_from_key(self):
        report = self.calibrate({"value": WeightRange(0, 2, 1)})
        assert report.best_weights == WeightVector.from_key(("value",), report.best_key)

    def test_threaded_matches_sequential(self):
        ranges = {"value": WeightRange(0, 3, 1)}
        sequential = self.calibrate(ranges)
        threaded = self.calibrate(ranges, strategy=ThreadedExecutionStrategy(num_workers=4, show_progress=False))

        assert threaded.results.keys() == sequential.results.keys()
        for key, result in sequential.results.items():
            assert threaded.results[key].mean_metric == result.mean_metric
        assert threaded.best_key == sequential.best_key

    @pytest.mark.parametrize(
        "strategy",
        [
            SequentialExecutionStrategy(show_progress=False),
            ThreadedExecutionStrategy(num_workers=4, show_progress=False),
        ],
        ids=["sequential", "threads"],
    )
    def test_colliding_keys_keep_first_candidate(self, strategy, monkeypatch):
        games = []
        original_play_game = calibration.play_game

        def counting_play_game(*args, **kwargs):
            games.append(1)
            return original_play_game(*args, **kwargs)

        monkeypatch.setattr(calibration, "play_game", counting_play_game)

        # with factor 1, weights 0.0 and 0.5 share key (0,)
        report = self.calibrate(
            {"value": WeightRange(0.0, 1.0, 0.5)}, strategy=strategy, n_runs=2, quantization_factor=1
        )

        assert report.total_candidates == 3
        assert report.candidates_evaluated == 2
        assert report.iterations == 2
        assert report.collisions == 1
        assert report.results[(0,)].weights.values == (0.0,)
        # the skipped duplicate never plays
        assert len(games) == 2 * 2

    def test_failed_candidates_are_absent(self):
        setup = counter_setup()

        def broken(rng):
            raise RuntimeError("no start position")

        setup.new_game = broken
        report = run_calibration(
            {"value": WeightRange(0, 1, 1)},
            2,
            1,
            setup=setup,
            strategy=SequentialExecutionStrategy(show_progress=False),
            verbose=False,
        )

        assert report.failed_candidates == 2
        assert report.candidates_evaluated == 0
        assert report.best_weights is None
        assert "No candidate completed" in report.summary()

    def test_verbose_prints_summary(self, capsys):
        run_calibration(
            {"value": WeightRange(0, 1, 1)},
            1,
            1,
            setup=counter_setup(),
            strategy=SequentialExecutionStrategy(show_progress=False),
        )
        out = capsys.readouterr().out
        assert "Calibrating counter" in out
        assert "Best weights: value=0" in out


class TestCalibrationConfigurationErrors:

    @pytest.mark.parametrize(
        "ranges, n_runs, depth",
        [
            ({}, 1, 1),
            ({"other": WeightRange(0, 1, 1)}, 1, 1),
            ({"value": WeightRange(0, 1, 1)}, 0, 1),
            ({"value": WeightRange(0, 1, 1)}, 1, 0),
        ],
    )
    def test_rejected_before_any_work(self, ranges, n_runs, depth):
        strategy = MagicMock()
        with pytest.raises(ConfigurationError):
            run_calibration(ranges, n_runs, depth, setup=counter_setup(), strategy=strategy, verbose=False)
        strategy.run.assert_not_called()
