from __future__ import annotations

import random
from typing import Optional, Sequence, Tuple

from minesweeper.board_metrics import available_cells
from minesweeper.game import MinesweeperGame


def make_random_move(game: MinesweeperGame, rng: random.Random) -> Optional[Tuple[int, int]]:
    """
    Reveal one cell picked uniformly among hidden, unflagged cells.

    Returns the revealed cell, or None (and does nothing) when no such cell is left.
    """
    candidates = available_cells(game.get_visible_board())
    if not candidates:
        return None
    r, c = rng.choice(candidates)
    game.reveal(r, c)
    return (r, c)


def flag_confident_cells(game: MinesweeperGame, probs: Sequence[float], *, threshold: float) -> int:
    """
    Flag every hidden, unflagged cell whose predicted mine probability is >= threshold.

    `probs` is row-major, one entry per cell. I never unflag anything here. Returns how
    many new flags were placed.
    """
    placed = 0
    for i, p in enumerate(probs):
        if float(p) < float(threshold):
            continue
        r, c = divmod(i, game.cols)
        if game.in_bounds(r, c) and game.is_hidden(r, c):
            game.toggle_flag(r, c)
            placed += 1
    return placed
