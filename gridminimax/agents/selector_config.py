"""Configuration-driven move selection used by the front-ends."""

from dataclasses import dataclass, field
from typing import Hashable, Sequence

from gridminimax.agents.features import FeatureEvaluator
from gridminimax.agents.greedy_bot import GreedyBot
from gridminimax.agents.minimax_bot import MinimaxBot
from gridminimax.agents.move_selector_base import MoveSelectorBase
from gridminimax.agents.scorer import WeightedScorer
from gridminimax.agents.weights import WeightVector
from gridminimax.errors import ConfigurationError
from gridminimax.game.game_state import GameState

STRATEGIES = ("search", "greedy")


@dataclass
class SelectorConfig:
    """strategy is "search" (minimax at depth) or "greedy" (one ply, preferred_order on ties)."""

    evaluator: FeatureEvaluator
    weights: WeightVector
    strategy: str = "search"
    depth: int = 1
    preferred_order: Sequence[Hashable] = field(default_factory=tuple)

    def validate(self):
        if self.strategy not in STRATEGIES:
            raise ConfigurationError(
                f"Invalid strategy '{self.strategy}'. Must be one of {', '.join(STRATEGIES)}"
            )
        if self.strategy == "search" and self.depth < 1:
            raise ConfigurationError(f"Search depth must be at least 1, got {self.depth}")


def create_selector(config: SelectorConfig) -> MoveSelectorBase:
    config.validate()
    scorer = WeightedScorer(config.evaluator, config.weights)
    if config.strategy == "search":
        return MinimaxBot(scorer, depth=config.depth)
    return GreedyBot(scorer, preferred_order=config.preferred_order)


def select_move(state: GameState, config: SelectorConfig) -> Hashable:
    """Pick one legal move for a non-terminal state."""
    return create_selector(config).select_move(state)
