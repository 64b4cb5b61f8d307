"""
Contract between the search core and the concrete games.

The core never implements game rules; it only relies on the members below.
States are immutable values: every transition returns a new state and equality
is structural, so two equal states always produce the same future moves.
"""

from typing import Any, Hashable, Protocol, Sequence

Board = tuple[tuple[int, ...], ...]


class GameState(Protocol):
    board: Board

    def legal_moves(self) -> list[Hashable]:
        """Legal moves in a fixed, deterministic order."""
        ...

    def apply(self, move: Hashable) -> "GameState":
        """Return the successor state. An illegal move returns an equal state."""
        ...

    def is_terminal(self) -> bool:
        ...

    def perspective(self) -> Any:
        """Player the evaluation of this state is taken for, None for solitaire games."""
        ...


def to_board(rows: Sequence[Sequence[int]]) -> Board:
    """Freeze a nested list into the tuple-of-tuples board representation."""
    return tuple(tuple(int(cell) for cell in row) for row in rows)


def board_to_list(board: Board) -> list[list[int]]:
    """Return a mutable copy of the board"""
    return [list(row) for row in board]
