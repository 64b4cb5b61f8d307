"""
Fixed-depth minimax search.

The search is unpruned: every legal move is expanded to the full
depth, so cost grows as branching_factor ** depth and depth stays small (1-3)
for interactive play.

Leaves are scored from the perspective the state reports, on both the
maximizing and the minimizing side. The minimizing branch does not negate the
evaluation; it minimises the same "player who just moved" score.
"""

import math
from dataclasses import dataclass
from typing import Any, Hashable

from gridminimax.agents.scorer import WeightedScorer
from gridminimax.errors import ConfigurationError, NoLegalMovesError
from gridminimax.game.game_state import GameState


@dataclass(frozen=True)
class SearchResult:
    score: int
    move: Hashable | None
    nodes: int = 1


def evaluate_state(state: GameState, scorer: WeightedScorer) -> int:
    return scorer.score(state.board, state.perspective())


def minimax(state: GameState, depth: int, maximizing: bool, scorer: WeightedScorer) -> SearchResult:
    """
    Return the best (score, move) reachable from state within depth plies.

    The first move reaching the best score wins ties: later moves replace it
    only with a strictly better score. At depth 0 or on a terminal state the
    move is None.
    """
    if depth < 0:
        raise ConfigurationError(f"Search depth must be non-negative, got {depth}")

    if depth == 0 or state.is_terminal():
        return SearchResult(score=evaluate_state(state, scorer), move=None)

    moves = state.legal_moves()
    if not moves:
        raise NoLegalMovesError(f"Non-terminal state has no legal moves:\n{state!r}")

    best_score = -math.inf if maximizing else math.inf
    best_move: Any = None
    nodes = 0

    for move in moves:
        child = state.apply(move)
        result = minimax(child, depth - 1, not maximizing, scorer)
        nodes += result.nodes
        if maximizing and result.score > best_score:
            best_score, best_move = result.score, move
        elif not maximizing and result.score < best_score:
            best_score, best_move = result.score, move

    return SearchResult(score=int(best_score), move=best_move, nodes=nodes)
