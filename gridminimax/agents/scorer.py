from typing import Any

from gridminimax.agents.features import FeatureEvaluator, TrivialFeatureEvaluator
from gridminimax.agents.weights import WeightVector
from gridminimax.errors import ConfigurationError
from gridminimax.game.game_state import Board


class WeightedScorer:
    """
    Linear combination of evaluator features and weight coefficients.

    Scores are truncated to non-negative integers so that search results stay
    comparable across games and weight vectors.
    """

    def __init__(self, evaluator: FeatureEvaluator, weights: WeightVector):
        missing = [name for name in evaluator.feature_names if name not in weights]
        if missing:
            raise ConfigurationError(f"No weight given for feature(s): {', '.join(missing)}")
        self.evaluator = evaluator
        self.weights = weights
        self._coefficients = [(name, weights[name]) for name in evaluator.feature_names]

    @classmethod
    def trivial(cls) -> "WeightedScorer":
        return cls(TrivialFeatureEvaluator(), WeightVector(names=(), values=()))

    def score(self, board: Board, perspective: Any) -> int:
        features = self.evaluator.evaluate(board, perspective)
        total = sum(features[name] * weight for name, weight in self._coefficients)
        return max(0, int(total))

    def __call__(self, board: Board, perspective: Any) -> int:
        return self.score(board, perspective)
