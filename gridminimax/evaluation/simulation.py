"""Self-play of a single game from a random start position to the end."""

import random
import time
from dataclasses import dataclass, field
from typing import Callable, Hashable

from gridminimax.agents.features import (
    ConnectFeatureEvaluator,
    FeatureEvaluator,
    TileFeatureEvaluator,
)
from gridminimax.agents.move_selector_base import MoveSelectorBase
from gridminimax.evaluation.benchmark_data import RunResult
from gridminimax.game.connect_four import ConnectFour, Player
from gridminimax.game.game_config import GameFactory
from gridminimax.game.game_state import GameState
from gridminimax.game.tiles import PREFERRED_DIRECTIONS, TileGame


@dataclass
class GameSetup:
    """
    Everything the harness needs to play a game it knows nothing about.

    new_game builds a random start position from the run's generator,
    after_move lets the environment react to a move (e.g. spawn a tile) and
    terminal_metric measures the final position.
    """

    name: str
    new_game: Callable[[random.Random], GameState]
    after_move: Callable[[GameState, random.Random], GameState]
    terminal_metric: Callable[[GameState], int]
    evaluator: FeatureEvaluator
    preferred_order: tuple[Hashable, ...] = field(default_factory=tuple)
    max_moves: int = 10_000


# Tiles: a random tile appears after every move, success is the largest tile reached


def _new_tile_game(rng: random.Random) -> TileGame:
    return TileGame.new(rng, GameFactory.tiles())


def _spawn_tile(state: TileGame, rng: random.Random) -> TileGame:
    return state.add_random_tile(rng)


def _max_tile(state: TileGame) -> int:
    return state.max_tile()


# Connect four: self-play after one random opening drop, success is a player one win


def _new_connect_four(rng: random.Random) -> ConnectFour:
    game = ConnectFour.new(GameFactory.connect_four())
    return game.make_move(rng.randrange(game.config.num_cols))


def _unchanged(state: GameState, rng: random.Random) -> GameState:
    return state


def _player_one_won(state: ConnectFour) -> int:
    return 1 if state.winner() is Player.ONE else 0


class GameSetupFactory:

    @staticmethod
    def tiles() -> GameSetup:
        return GameSetup(
            name="tiles",
            new_game=_new_tile_game,
            after_move=_spawn_tile,
            terminal_metric=_max_tile,
            evaluator=TileFeatureEvaluator(),
            preferred_order=PREFERRED_DIRECTIONS,
            max_moves=10_000,
        )

    @staticmethod
    def connect_four() -> GameSetup:
        config = GameFactory.connect_four()
        center = config.num_cols // 2
        # center column first, then alternating outwards
        center_out = tuple(sorted(range(config.num_cols), key=lambda col: (abs(col - center), col)))
        return GameSetup(
            name="connect_four",
            new_game=_new_connect_four,
            after_move=_unchanged,
            terminal_metric=_player_one_won,
            evaluator=ConnectFeatureEvaluator(threshold=config.win_length - 1, min_line=config.win_length),
            preferred_order=center_out,
            max_moves=config.total_cells,
        )

    @staticmethod
    def default() -> GameSetup:
        return GameSetupFactory.tiles()


def run_seeds(n_runs: int, base_seed: int | None) -> list[int | None]:
    """Seeds for n_runs games. Without a base seed every game draws fresh entropy."""
    if base_seed is None:
        return [None] * n_runs
    rng = random.Random(base_seed)
    return [rng.randint(0, 2**31 - 1) for _ in range(n_runs)]


def play_game(setup: GameSetup, selector: MoveSelectorBase, seed: int | None = None) -> RunResult:
    """Play one game with selector until it ends or hits the setup's move limit."""
    rng = random.Random(seed)
    start_time = time.perf_counter()

    state = setup.new_game(rng)
    moves_made = 0

    while moves_made < setup.max_moves and not state.is_terminal():
        move = selector.select_move(state)
        next_state = state.apply(move)
        if next_state == state:
            raise RuntimeError(f"{selector.name} chose illegal move {move!r}")

        state = setup.after_move(next_state, rng)
        moves_made += 1

    return RunResult(
        seed=seed,
        terminal_metric=setup.terminal_metric(state),
        moves=moves_made,
        duration=time.perf_counter() - start_time,
        completed=state.is_terminal(),
    )
