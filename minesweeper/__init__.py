"""
This is the top-level Minesweeper package I use for the project.

It only holds the board engine (grid mechanics, deductions, NN encodings); all learning
code lives under `models/`.
"""

from .board_metrics import available_cells, count_flags
from .game import GameState, MinesweeperGame

__all__ = ['MinesweeperGame', 'GameState', 'available_cells', 'count_flags']
