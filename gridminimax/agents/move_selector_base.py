"""
Base interface for move selectors.

A move selector picks exactly one legal move for a game state. Selectors do not
learn or persist anything; they are plain strategies that the interactive
front-end, the benchmark and the calibration sweep can all drive.
"""

from abc import ABC, abstractmethod
from typing import Hashable

from gridminimax.game.game_state import GameState


class MoveSelectorBase(ABC):
    """
    Abstract base class for deterministic (or locally seeded) move selectors.

    Callers must check for terminal states before asking for a move.
    """

    name: str = "MoveSelector"

    @abstractmethod
    def select_move(self, state: GameState) -> Hashable:
        """
        Select the next move to play in state.

        Args:
            state: Current, non-terminal game state

        Returns:
            One of state.legal_moves()

        Raises:
            NoLegalMovesError: if the state offers no legal move
        """
        pass
