"""
GreedyBot implementation for single-agent play.

Scores the position after each legal move once (no lookahead) and plays the
best one, falling back to a fixed direction preference on ties.
"""

from typing import Hashable, Sequence

from gridminimax.agents.move_selector_base import MoveSelectorBase
from gridminimax.agents.scorer import WeightedScorer
from gridminimax.agents.search import evaluate_state
from gridminimax.errors import NoLegalMovesError
from gridminimax.game.game_state import GameState


class GreedyBot(MoveSelectorBase):
    """
    Bot that greedily maximises the one-ply weighted score.

    When several moves tie for the best score the move listed first in
    preferred_order is played; moves missing from preferred_order rank after
    all listed ones, in enumeration order.
    """

    name = "GreedyBot"

    def __init__(self, scorer: WeightedScorer, preferred_order: Sequence[Hashable] = ()):
        self.scorer = scorer
        self.preferred_order = tuple(preferred_order)

    def select_move(self, state: GameState) -> Hashable:
        valid_moves = state.legal_moves()

        if not valid_moves:
            raise NoLegalMovesError("No legal moves to select from")

        best_moves = []
        best_score = None

        for move in valid_moves:
            score = evaluate_state(state.apply(move), self.scorer)

            if best_score is None or score > best_score:
                best_score = score
                best_moves = [move]
            elif score == best_score:
                best_moves.append(move)

        if len(best_moves) == 1:
            return best_moves[0]

        return self._break_ties(best_moves)

    def _break_ties(self, tied_moves: list[Hashable]) -> Hashable:
        def priority(move: Hashable) -> int:
            if move in self.preferred_order:
                return self.preferred_order.index(move)
            return len(self.preferred_order)

        # min() is stable, so unlisted moves keep enumeration order
        return min(tied_moves, key=priority)
