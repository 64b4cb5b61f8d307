"""
Simulation, benchmarking and weight calibration.
"""

from .benchmark_data import RunResult, CandidateResult, CalibrationReport, BenchmarkReport
from .simulation import GameSetup, GameSetupFactory, play_game
from .calibration import run_calibration
from .benchmark import run_benchmark, benchmark_bots

__all__ = [
    'RunResult',
    'CandidateResult',
    'CalibrationReport',
    'BenchmarkReport',
    'GameSetup',
    'GameSetupFactory',
    'play_game',
    'run_calibration',
    'run_benchmark',
    'benchmark_bots',
]
