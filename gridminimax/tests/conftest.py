"""
Shared test utilities for gridminimax tests.

- Static board configurations (TEST_BOARD_CONFIGS)
- Small hand-built game states for exercising the search engine
"""

import random

from gridminimax.agents.features import FeatureEvaluator
from gridminimax.evaluation.simulation import GameSetup

TEST_BOARD_CONFIGS = {
    "empty_4x4": [[0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]],
    "single_pair_4x4": [[2, 2, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]],
    "full_no_merges_4x4": [[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 2]],
    "full_2x2": [[2, 4], [8, 16]],
    "mixed_3x3": [[2, 2, 4], [0, 4, 4], [8, 0, 2]],
    # player one (1) has three in a row on the bottom, column 3 completes it
    "connect_three_open": [
        [0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0],
        [2, 2, 2, 0, 0, 0, 0],
        [1, 1, 1, 0, 0, 0, 0],
    ],
}


class TreeState:
    """
    Hand-built game tree for search tests.

    Nodes are named by their path ("", "a", "ab", ...). children maps a node
    to its ordered moves, leaf_scores maps a node to the board value the
    scorer will read.
    """

    def __init__(self, node, children, leaf_scores, perspective=1):
        self.node = node
        self.children = children
        self.leaf_scores = leaf_scores
        self._perspective = perspective
        self.board = ((leaf_scores.get(node, 0),),)

    def legal_moves(self):
        return list(self.children.get(self.node, []))

    def apply(self, move):
        if move not in self.children.get(self.node, []):
            return self
        return TreeState(self.node + move, self.children, self.leaf_scores, 3 - self._perspective)

    def is_terminal(self):
        return self.node not in self.children

    def perspective(self):
        return self._perspective

    def __eq__(self, other):
        return isinstance(other, TreeState) and self.node == other.node

    def __repr__(self):
        return f"TreeState({self.node!r})"


class CellValueEvaluator(FeatureEvaluator):
    """Reads the single board cell of a TreeState as its only feature."""

    feature_names = ("value",)

    def evaluate(self, board, perspective):
        return {"value": board[0][0]}


class CounterState:
    """Solitaire state that counts up to a limit; every move adds its value."""

    def __init__(self, total, limit=10, steps=0):
        self.total = total
        self.limit = limit
        self.steps = steps
        self.board = ((total,),)

    def legal_moves(self):
        return [1, 2] if self.total < self.limit else []

    def apply(self, move):
        return CounterState(min(self.limit, self.total + move), self.limit, self.steps + 1)

    def is_terminal(self):
        return self.total >= self.limit

    def perspective(self):
        return None

    def __eq__(self, other):
        return (
            isinstance(other, CounterState)
            and self.total == other.total
            and self.steps == other.steps
        )


def counter_setup(limit=10, max_moves=100):
    """GameSetup over CounterState; the start total is random, the metric is the number of steps taken.

    A positive weight makes the bot add 2 per step and finish sooner, a zero weight
    leaves every move tied so it adds 1 per step and scores the highest metric.
    """

    def new_game(rng: random.Random):
        return CounterState(rng.randint(0, 3), limit)

    return GameSetup(
        name="counter",
        new_game=new_game,
        after_move=lambda state, rng: state,
        terminal_metric=lambda state: state.steps,
        evaluator=CellValueEvaluator(),
        max_moves=max_moves,
    )
