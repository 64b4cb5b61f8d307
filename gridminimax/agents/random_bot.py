"""
RandomBot: uniform random move selection.

Provides a baseline for benchmarking the heuristic selectors.
"""

import hashlib
import random
from typing import Hashable

from gridminimax.agents.move_selector_base import MoveSelectorBase
from gridminimax.errors import NoLegalMovesError
from gridminimax.game.game_state import GameState


class RandomBot(MoveSelectorBase):
    """
    Bot that randomly selects from the legal moves.

    Every call draws from its own generator seeded from the board, so one bot
    can serve concurrent games without sharing random state.
    """

    name = "RandomBot"

    def __init__(self, seed: int = 42):
        self.seed = seed

    def select_move(self, state: GameState) -> Hashable:
        """
        Pick a random legal move. The same board and seed always give the same move.
        """
        valid_moves = state.legal_moves()

        if not valid_moves:
            raise NoLegalMovesError("No legal moves to select from")

        board_str = f"{self.seed}:{state.board}".encode("utf-8")
        stable_hash = int(hashlib.md5(board_str).hexdigest(), 16)
        return random.Random(stable_hash).choice(valid_moves)
