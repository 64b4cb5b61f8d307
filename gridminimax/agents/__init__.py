"""
Move selection for the grid games.

Feature evaluators and the weighted scorer turn boards into scores, the
minimax search and the bots turn scores into moves.
"""

from .features import (
    FeatureEvaluator,
    ConnectFeatureEvaluator,
    TileFeatureEvaluator,
    TrivialFeatureEvaluator,
)
from .weights import WeightVector, WeightRange
from .scorer import WeightedScorer
from .search import SearchResult, minimax

# Move selectors
from .move_selector_base import MoveSelectorBase
from .minimax_bot import MinimaxBot
from .greedy_bot import GreedyBot
from .random_bot import RandomBot
from .selector_config import SelectorConfig, create_selector, select_move

__all__ = [
    'FeatureEvaluator',
    'ConnectFeatureEvaluator',
    'TileFeatureEvaluator',
    'TrivialFeatureEvaluator',
    'WeightVector',
    'WeightRange',
    'WeightedScorer',
    'SearchResult',
    'minimax',
    'MoveSelectorBase',
    'MinimaxBot',
    'GreedyBot',
    'RandomBot',
    'SelectorConfig',
    'create_selector',
    'select_move',
]
