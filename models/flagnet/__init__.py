"""
Flag prediction: this is where I keep the small self-trained network and the two batch
drivers around it (self-play training and evaluation).

The network is a single sigmoid hidden layer trained one example at a time; labels come
from the board's own auto-flag solver, so no pre-labelled dataset is needed.
"""

from .config import EvalConfig, FlagNetConfig, MODEL_FILENAME, SelfPlayConfig
from .evaluate import EvaluationReport, GameOutcome, evaluate_network, load_and_evaluate, play_network_game
from .network import DimensionMismatch, NeuralNetwork, PersistenceError
from .policy import flag_confident_cells, make_random_move
from .selfplay import play_self_play_game, train_self_play

__all__ = [
    "FlagNetConfig",
    "SelfPlayConfig",
    "EvalConfig",
    "MODEL_FILENAME",
    "NeuralNetwork",
    "DimensionMismatch",
    "PersistenceError",
    "make_random_move",
    "flag_confident_cells",
    "play_self_play_game",
    "train_self_play",
    "GameOutcome",
    "EvaluationReport",
    "play_network_game",
    "evaluate_network",
    "load_and_evaluate",
]
