import random
from dataclasses import dataclass, field
from enum import Enum

from gridminimax.game.game_config import GameFactory, TileConfig
from gridminimax.game.game_state import Board, board_to_list, to_board


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


# Order used when a greedy player sees several equally good moves:
# keep the big tiles in the bottom-left corner.
PREFERRED_DIRECTIONS = (Direction.DOWN, Direction.LEFT, Direction.RIGHT, Direction.UP)


def collapse_line(line: list[int]) -> tuple[list[int], int]:
    """
    Compact a single line toward its start.

    Slides the tiles together, merges each equal adjacent pair once (from the
    start of the line outwards) and slides again. Returns the new line and the
    points gained from merges.
    """
    tiles = [value for value in line if value != 0]
    merged = []
    gained = 0
    i = 0
    while i < len(tiles):
        if i + 1 < len(tiles) and tiles[i] == tiles[i + 1]:
            merged.append(tiles[i] * 2)
            gained += tiles[i] * 2
            i += 2
        else:
            merged.append(tiles[i])
            i += 1
    return merged + [0] * (len(line) - len(merged)), gained


@dataclass(frozen=True)
class TileGame:
    """Immutable 2048-style position. Equality covers the board and the score."""

    board: Board
    score: int = 0
    config: TileConfig = field(default_factory=GameFactory.tiles, compare=False)

    @classmethod
    def new(cls, rng: random.Random, config: TileConfig | None = None) -> "TileGame":
        config = config or GameFactory.tiles()
        empty = tuple(tuple(0 for _ in range(config.size)) for _ in range(config.size))
        return cls(board=empty, score=0, config=config).add_random_tile(rng).add_random_tile(rng)

    @classmethod
    def from_board(cls, rows: list[list[int]], score: int = 0) -> "TileGame":
        size = len(rows)
        if any(len(row) != size for row in rows):
            raise ValueError("Tile boards must be square")
        config = TileConfig(size=size)
        config.validate()
        return cls(board=to_board(rows), score=score, config=config)

    def add_random_tile(self, rng: random.Random) -> "TileGame":
        """Place a 2 (or sometimes a 4) on a random empty cell. A full board is returned as is."""
        empty_tiles = [
            (row, col)
            for row, cells in enumerate(self.board)
            for col, value in enumerate(cells)
            if value == 0
        ]
        if not empty_tiles:
            return self

        row, col = empty_tiles[rng.randrange(len(empty_tiles))]
        value = 4 if rng.randrange(self.config.new_tile_odds) == 0 else 2

        new_board = board_to_list(self.board)
        new_board[row][col] = value
        return TileGame(board=to_board(new_board), score=self.score, config=self.config)

    # === MOVES ===

    def move_tiles(self, direction: Direction) -> "TileGame | None":
        """Return the position after sliding toward direction, or None if nothing moves."""
        size = len(self.board)
        grid = board_to_list(self.board)
        gained = 0

        for index in range(size):
            if direction in (Direction.LEFT, Direction.RIGHT):
                line = grid[index][:]
            else:
                line = [grid[row][index] for row in range(size)]
            # every line is collapsed toward its start, so lines running away
            # from the target edge are reversed first
            reverse = direction in (Direction.RIGHT, Direction.DOWN)
            if reverse:
                line.reverse()
            new_line, points = collapse_line(line)
            gained += points
            if reverse:
                new_line.reverse()

            if direction in (Direction.LEFT, Direction.RIGHT):
                grid[index] = new_line
            else:
                for row in range(size):
                    grid[row][index] = new_line[row]

        new_board = to_board(grid)
        if new_board == self.board:
            return None
        return TileGame(board=new_board, score=self.score + gained, config=self.config)

    def apply(self, move: Direction) -> "TileGame":
        moved = self.move_tiles(move)
        return self if moved is None else moved

    def legal_moves(self) -> list[Direction]:
        return [direction for direction in Direction if self.move_tiles(direction) is not None]

    def is_terminal(self) -> bool:
        return not self.legal_moves()

    def perspective(self) -> None:
        return None

    def max_tile(self) -> int:
        return max(max(row) for row in self.board)

    def render(self) -> str:
        width = max(4, len(str(self.max_tile())))
        return "\n".join(" ".join(f"{value:>{width}d}" for value in row) for row in self.board)
