"""Data classes for the benchmark and calibration harness."""

from dataclasses import dataclass, field

from gridminimax.agents.weights import WeightVector


@dataclass(frozen=True)
class RunResult:
    """Outcome of a single game played to completion"""

    seed: int | None
    terminal_metric: int
    moves: int
    duration: float
    completed: bool = True


@dataclass(frozen=True)
class CandidateResult:
    """Aggregate performance of one weight vector over n_runs games"""

    weights: WeightVector
    mean_metric: float
    mean_moves: float
    runs: int


@dataclass
class CalibrationReport:
    """Result of a full weight sweep"""

    best_weights: WeightVector | None
    best_key: tuple[int, ...] | None
    mean_metric: float
    mean_moves: float
    candidates_evaluated: int
    total_candidates: int
    iterations: int
    failed_candidates: int
    collisions: int
    elapsed: float
    results: dict[tuple[int, ...], CandidateResult] = field(default_factory=dict)

    def summary(self) -> str:
        lines = [
            f"Candidates evaluated: {self.candidates_evaluated}/{self.total_candidates}",
        ]
        if self.failed_candidates:
            lines.append(f"Failed candidates: {self.failed_candidates}")
        if self.collisions:
            lines.append(f"Duplicate quantized keys skipped: {self.collisions}")
        if self.best_weights is None:
            lines.append("No candidate completed successfully.")
        else:
            lines.append(f"Best weights: {self.best_weights}")
            lines.append(f"  Avg terminal metric: {self.mean_metric:.1f}")
            lines.append(f"  Avg moves: {self.mean_moves:.1f}")
        lines.append(f"Total time: {self.elapsed:.2f}s")
        return "\n".join(lines)


@dataclass
class BenchmarkReport:
    """Result of playing one fixed weight vector (or bot) for n_runs games"""

    best_metric: int
    worst_metric: int
    mean_metric: float
    mean_moves: float
    mean_duration: float
    runs: list[RunResult] = field(default_factory=list)
    failed_runs: int = 0

    def summary(self) -> str:
        lines = [
            f"Games played: {len(self.runs)}",
            f"Best terminal metric: {self.best_metric}",
            f"Worst terminal metric: {self.worst_metric}",
            f"Avg terminal metric: {self.mean_metric:.1f}",
            f"Avg moves: {self.mean_moves:.1f}",
            f"Avg game duration: {self.mean_duration:.3f}s",
        ]
        if self.failed_runs:
            lines.append(f"Failed games: {self.failed_runs}")
        return "\n".join(lines)
