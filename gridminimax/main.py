"""Play connect four in the terminal against the minimax bot."""

import sys

from gridminimax.agents.features import ConnectFeatureEvaluator
from gridminimax.agents.minimax_bot import MinimaxBot
from gridminimax.agents.scorer import WeightedScorer
from gridminimax.agents.weights import WeightVector
from gridminimax.game.connect_four import ConnectFour, GameResult, Player
from gridminimax.game.game_config import GameFactory

AI_DEPTH = 1
AI_WEIGHTS = WeightVector.from_dict({"three_in_a_row": 1.0})

RESULT_MESSAGES = {
    GameResult.PLAYER_ONE_WIN: "YOU Win!",
    GameResult.PLAYER_TWO_WIN: "AI Wins!",
    GameResult.DRAW: "Draw!",
}


def check_end_of_game(game: ConnectFour) -> bool:
    print(f"\n{game.render()}\n")
    result = game.result()
    if result is None:
        return False
    print(RESULT_MESSAGES[result])
    return True


def prompt_human_move(game: ConnectFour) -> ConnectFour:
    num_cols = game.config.num_cols
    while True:
        raw_input = input(f"Enter a column number (1-{num_cols}): ").strip()
        if raw_input.isdigit() and 1 <= int(raw_input) <= num_cols:
            column = int(raw_input) - 1
            if column in game.legal_moves():
                return game.make_move(column)
            print("That column is full")
        else:
            print("Invalid input")


def make_ai_move(game: ConnectFour, bot: MinimaxBot) -> ConnectFour:
    column = bot.select_move(game)
    print(f"AI's move: {column + 1}")
    return game.make_move(column)


def main():
    config = GameFactory.connect_four()
    game = ConnectFour.new(config)
    evaluator = ConnectFeatureEvaluator(threshold=config.win_length - 1, min_line=config.win_length)
    bot = MinimaxBot(WeightedScorer(evaluator, AI_WEIGHTS), depth=AI_DEPTH)

    try:
        while not check_end_of_game(game):
            if game.turn is Player.ONE:
                print("YOUR Turn")
                game = prompt_human_move(game)
            else:
                print("AI's Turn")
                game = make_ai_move(game, bot)
    except (KeyboardInterrupt, EOFError):
        print("\nBye")
        sys.exit(0)


if __name__ == "__main__":
    main()
