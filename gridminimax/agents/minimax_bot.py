"""
MinimaxBot: search-backed move selection.

Runs the fixed-depth minimax search from the maximizing side of the player to
move and plays the move it returns.
"""

from typing import Hashable

from gridminimax.agents.move_selector_base import MoveSelectorBase
from gridminimax.agents.scorer import WeightedScorer
from gridminimax.agents.search import minimax
from gridminimax.errors import ConfigurationError, NoLegalMovesError
from gridminimax.game.game_state import GameState


class MinimaxBot(MoveSelectorBase):

    name = "MinimaxBot"

    def __init__(self, scorer: WeightedScorer, depth: int = 1):
        if depth < 1:
            raise ConfigurationError(f"MinimaxBot needs a search depth of at least 1, got {depth}")
        self.scorer = scorer
        self.depth = depth

    def select_move(self, state: GameState) -> Hashable:
        if not state.legal_moves():
            raise NoLegalMovesError("No legal moves to select from")
        result = minimax(state, self.depth, True, self.scorer)
        return result.move
