from __future__ import annotations

from typing import Any, List

import numpy as np

# Visible-board encoding for NN inputs (float64, one value per cell, row-major):
#   0.0: unrevealed ("E")
#   1.0: flagged ("F"), or a mine shown after a loss ("M")
#   (n + 1) * 0.1: revealed clue n (so a blank "0" is 0.1 and an "8" is 0.9)
ENC_UNREVEALED: float = 0.0
ENC_FLAGGED: float = 1.0
CLUE_STEP: float = 0.1


def encode_cell(v: Any) -> float:
    s = str(v)
    if s == "E":
        return ENC_UNREVEALED
    if s in {"F", "M"}:
        return ENC_FLAGGED
    try:
        n = int(s)
    except ValueError:
        return ENC_UNREVEALED
    return (min(8, max(0, n)) + 1) * CLUE_STEP


def visible_to_features(visible_board: List[List[Any]]) -> np.ndarray:
    """
    Convert a visible board (list[list[str]]) into a flat float64 vector [H*W].
    """
    return np.array([encode_cell(v) for row in visible_board for v in row], dtype=np.float64)


def flags_from_visible(visible_board: List[List[Any]]) -> np.ndarray:
    """
    Return a flat float64 vector [H*W] with 1.0 wherever the visible board holds a flag.
    """
    return np.array([1.0 if v == "F" else 0.0 for row in visible_board for v in row], dtype=np.float64)


def mine_mask_from_actual(actual_board: List[List[str]]) -> np.ndarray:
    """
    Return a flat float64 vector [H*W] with 1.0 wherever the actual board holds a mine.
    """
    return np.array([1.0 if v == "M" else 0.0 for row in actual_board for v in row], dtype=np.float64)
