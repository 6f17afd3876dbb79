from .random_bot import RandomBot
from .heuristic_bot import HeuristicBot
from .runner import GameResult, play_bot_game, play_bot_turn

__all__ = ['RandomBot', 'HeuristicBot', 'GameResult', 'play_bot_game', 'play_bot_turn']
