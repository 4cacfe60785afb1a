from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# The whole pipeline runs on 5x5 boards with 3 mines: one input and one output per cell.
BOARD_ROWS: int = 5
BOARD_COLS: int = 5
BOARD_BOMBS: int = 3

MODEL_FILENAME: str = "minesweeper_model.nn"


@dataclass(frozen=True)
class FlagNetConfig:
    input_size: int = BOARD_ROWS * BOARD_COLS
    hidden_size: int = 128
    output_size: int = BOARD_ROWS * BOARD_COLS
    learning_rate: float = 0.1


@dataclass(frozen=True)
class SelfPlayConfig:
    rows: int = BOARD_ROWS
    cols: int = BOARD_COLS
    num_bombs: int = BOARD_BOMBS
    num_games: int = 1_000_000
    report_every: int = 10_000
    model_path: Optional[str] = MODEL_FILENAME
    seed: Optional[int] = None


@dataclass(frozen=True)
class EvalConfig:
    rows: int = BOARD_ROWS
    cols: int = BOARD_COLS
    num_bombs: int = BOARD_BOMBS
    num_games: int = 1_000
    report_every: int = 100
    # Cells at or above this predicted mine probability get flagged.
    flag_threshold: float = 0.6
    # Per-game iteration cap; a capped game that isn't won counts as a loss.
    max_turns: int = 100
    # Pass iff win rate is strictly above this.
    pass_win_rate: float = 0.5
    seed: Optional[int] = None
