from dataclasses import dataclass, field
from enum import Enum, IntEnum

from gridminimax.game.game_config import ConnectFourConfig, GameFactory
from gridminimax.game.game_state import Board, to_board

EMPTY = 0

LINE_DIRECTIONS = [(0, 1), (1, 0), (1, 1), (-1, 1)]


class Player(IntEnum):
    ONE = 1
    TWO = 2

    @property
    def other(self) -> "Player":
        return Player.TWO if self is Player.ONE else Player.ONE


class GameResult(Enum):
    PLAYER_ONE_WIN = "player_one_win"
    PLAYER_TWO_WIN = "player_two_win"
    DRAW = "draw"


@dataclass(frozen=True)
class ConnectFour:
    """Immutable connect-four position. Row 0 is the top of the board."""

    board: Board
    turn: Player = Player.ONE
    config: ConnectFourConfig = field(default_factory=GameFactory.connect_four)

    @classmethod
    def new(cls, config: ConnectFourConfig | None = None) -> "ConnectFour":
        config = config or GameFactory.connect_four()
        board = tuple(tuple(EMPTY for _ in range(config.num_cols)) for _ in range(config.num_rows))
        return cls(board=board, turn=Player.ONE, config=config)

    @classmethod
    def from_board(
        cls,
        rows: list[list[int]],
        turn: Player = Player.ONE,
        config: ConnectFourConfig | None = None,
    ) -> "ConnectFour":
        config = config or GameFactory.custom_connect(len(rows), len(rows[0]), 4)
        if len(rows) != config.num_rows:
            raise ValueError(
                f"Board row count {len(rows)} does not match expected {config.num_rows}"
            )
        if any(len(row) != config.num_cols for row in rows):
            raise ValueError("All board rows must match expected number of columns.")
        for row in rows:
            for val in row:
                if val not in (EMPTY, Player.ONE, Player.TWO):
                    raise ValueError(f"Invalid cell value {val}, must be 0, 1 or 2")
        return cls(board=to_board(rows), turn=turn, config=config)

    # === MOVES ===

    def legal_moves(self) -> list[int]:
        return [col for col in range(self.config.num_cols) if self.board[0][col] == EMPTY]

    def make_move(self, column: int) -> "ConnectFour":
        """Drop a piece for the player to move. Full or unknown columns leave the state unchanged."""
        if not 0 <= column < self.config.num_cols or self.is_terminal():
            return self

        for row in range(self.config.num_rows - 1, -1, -1):
            if self.board[row][column] == EMPTY:
                new_row = list(self.board[row])
                new_row[column] = int(self.turn)
                board = self.board[:row] + (tuple(new_row),) + self.board[row + 1:]
                return ConnectFour(board=board, turn=self.turn.other, config=self.config)

        return self

    def apply(self, move: int) -> "ConnectFour":
        return self.make_move(move)

    def next_turn(self) -> Player:
        return self.turn.other

    def perspective(self) -> Player:
        # the player who made the move that produced this position
        return self.next_turn()

    # === RESULT ===

    def winner(self) -> Player | None:
        rows, cols, length = self.config.num_rows, self.config.num_cols, self.config.win_length
        for row in range(rows):
            for col in range(cols):
                cell = self.board[row][col]
                if cell == EMPTY:
                    continue
                for dr, dc in LINE_DIRECTIONS:
                    end_row, end_col = row + dr * (length - 1), col + dc * (length - 1)
                    if not (0 <= end_row < rows and 0 <= end_col < cols):
                        continue
                    if all(self.board[row + dr * i][col + dc * i] == cell for i in range(1, length)):
                        return Player(cell)
        return None

    def is_full(self) -> bool:
        return all(cell != EMPTY for cell in self.board[0])

    def result(self) -> GameResult | None:
        winner = self.winner()
        if winner is Player.ONE:
            return GameResult.PLAYER_ONE_WIN
        if winner is Player.TWO:
            return GameResult.PLAYER_TWO_WIN
        if self.is_full():
            return GameResult.DRAW
        return None

    def is_terminal(self) -> bool:
        return self.result() is not None

    def render(self) -> str:
        symbols = {EMPTY: ".", Player.ONE: "X", Player.TWO: "O"}
        lines = [" ".join(symbols[cell] for cell in row) for row in self.board]
        lines.append(" ".join(str(col + 1) for col in range(self.config.num_cols)))
        return "\n".join(lines)
