"""
Board features for heuristic evaluation.

Pure functions over the tuple-of-tuples board, plus the evaluator classes that
bundle them into named feature sets for the weighted scorer. Every feature is a
non-negative integer.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterator

import numpy as np

from gridminimax.game.game_state import Board

EMPTY = 0


def board_lines(board: Board, min_line: int) -> Iterator[list[int]]:
    """
    Yield every row, every column and every diagonal (both directions) whose
    length is at least min_line. Each diagonal is yielded exactly once.
    """
    if not board or not board[0]:
        return

    num_rows, num_cols = len(board), len(board[0])

    for row in board:
        yield list(row)

    for col in range(num_cols):
        yield [board[row][col] for row in range(num_rows)]

    # down-right diagonals start on the top row or the left column,
    # up-right diagonals on the bottom row or the left column
    down_starts = [(0, col) for col in range(num_cols)] + [(row, 0) for row in range(1, num_rows)]
    up_starts = [(num_rows - 1, col) for col in range(num_cols)] + [
        (row, 0) for row in range(num_rows - 1)
    ]
    for starts, row_step in ((down_starts, 1), (up_starts, -1)):
        for start_row, start_col in starts:
            line = []
            row, col = start_row, start_col
            while 0 <= row < num_rows and 0 <= col < num_cols:
                line.append(board[row][col])
                row += row_step
                col += 1
            if len(line) >= min_line:
                yield line


def line_run_score(line: list[int], player: int, threshold: int, bonus: int) -> int:
    """Add bonus at every position where the current run of player cells is at least threshold."""
    score = 0
    count = 0
    for cell in line:
        if cell == player:
            count += 1
        else:
            count = 0
        if count >= threshold:
            score += bonus
    return score


def run_length_score(
    board: Board, player: int, threshold: int = 3, bonus: int = 10, min_line: int = 4
) -> int:
    """
    Reward partial and complete runs of player pieces.

    A run of 5 with threshold 3 earns the bonus three times, once for each
    position at which the run has reached the threshold.
    """
    return sum(
        line_run_score(line, player, threshold, bonus) for line in board_lines(board, min_line)
    )


def max_value(board: Board) -> int:
    return int(np.asarray(board).max())


def empty_cells(board: Board) -> int:
    return int(np.count_nonzero(np.asarray(board) == EMPTY))


def adjacent_equal(board: Board) -> int:
    """
    Sum of cell values that repeat the cell above or the cell to the left.

    Up and left are checked independently, so a cell matching both counts twice.
    Empty cells never count.
    """
    grid = np.asarray(board, dtype=np.int64)
    below, above = grid[1:, :], grid[:-1, :]
    right, left = grid[:, 1:], grid[:, :-1]
    up_matches = (below == above) & (below != EMPTY)
    left_matches = (right == left) & (right != EMPTY)
    return int(below[up_matches].sum() + right[left_matches].sum())


def roughness(board: Board) -> int:
    """Sum of absolute differences to the up and left neighbours. Higher means less smooth."""
    grid = np.asarray(board, dtype=np.int64)
    return int(np.abs(np.diff(grid, axis=0)).sum() + np.abs(np.diff(grid, axis=1)).sum())


class FeatureEvaluator(ABC):
    """Computes a fixed, ordered set of named features for a board."""

    feature_names: tuple[str, ...] = ()

    @abstractmethod
    def evaluate(self, board: Board, perspective: Any) -> dict[str, int]:
        pass


class ConnectFeatureEvaluator(FeatureEvaluator):
    """Run-length threats for the player the position is scored for."""

    feature_names = ("three_in_a_row",)

    def __init__(self, threshold: int = 3, bonus: int = 10, min_line: int = 4):
        self.threshold = threshold
        self.bonus = bonus
        self.min_line = min_line

    def evaluate(self, board: Board, perspective: Any) -> dict[str, int]:
        return {
            "three_in_a_row": run_length_score(
                board, int(perspective), self.threshold, self.bonus, self.min_line
            )
        }


class TileFeatureEvaluator(FeatureEvaluator):
    """Sliding-tile features. The perspective is ignored (single player)."""

    feature_names = ("max_tile", "adjacent_tiles", "empty_cells", "monotonicity")

    def evaluate(self, board: Board, perspective: Any) -> dict[str, int]:
        return {
            "max_tile": max_value(board),
            "adjacent_tiles": adjacent_equal(board),
            "empty_cells": empty_cells(board),
            "monotonicity": roughness(board),
        }


class TrivialFeatureEvaluator(FeatureEvaluator):
    """No features at all; every board scores zero. Used by random and fixed-order agents."""

    feature_names = ()

    def evaluate(self, board: Board, perspective: Any) -> dict[str, int]:
        return {}
