"""Game configuration system for the grid games driven by the search engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ConnectFourConfig:
    """win_length is the run needed to win; the heuristic rewards shorter partial runs."""

    num_rows: int = 6
    num_cols: int = 7
    win_length: int = 4

    @property
    def total_cells(self) -> int:
        return self.num_rows * self.num_cols

    def validate(self):
        if self.num_rows <= 0 or self.num_cols <= 0:
            raise ValueError("Board dimensions must be positive")
        if self.win_length < 2:
            raise ValueError("Winning runs must be at least 2 cells long")
        if self.win_length > max(self.num_rows, self.num_cols):
            raise ValueError(
                f"Win length {self.win_length} does not fit a "
                f"{self.num_rows}x{self.num_cols} board"
            )


@dataclass(frozen=True)
class TileConfig:
    """Square sliding-tile board. new_tile_odds is the 1-in-N chance of spawning a 4."""

    size: int = 4
    new_tile_odds: int = 4

    @property
    def total_cells(self) -> int:
        return self.size * self.size

    def validate(self):
        if self.size < 2:
            raise ValueError("Tile boards must be at least 2x2")
        if self.new_tile_odds < 1:
            raise ValueError("new_tile_odds must be a positive integer")


class GameFactory:

    @staticmethod
    def connect_four() -> ConnectFourConfig:
        config = ConnectFourConfig(num_rows=6, num_cols=7, win_length=4)
        config.validate()
        return config

    @staticmethod
    def tiles() -> TileConfig:
        config = TileConfig(size=4, new_tile_odds=4)
        config.validate()
        return config

    @staticmethod
    def custom_connect(num_rows: int, num_cols: int, win_length: int) -> ConnectFourConfig:
        config = ConnectFourConfig(num_rows=num_rows, num_cols=num_cols, win_length=win_length)
        config.validate()
        return config
