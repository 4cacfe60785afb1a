"""
I keep "board metrics" here so the project has one source of truth for:
- which cells a random move may pick (hidden and not flagged)
- how I count flags when deciding whether a deduction step made progress

Both harnesses (self-play training and evaluation) go through these helpers.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple


VisibleBoard = List[List[Any]]


def count_visible_cells(visible_board: VisibleBoard) -> Dict[str, int]:
    """
    Count visible-board symbols.

    Returns a dict:
      - unrevealed: count of "E"
      - flagged: count of "F"
      - mines_shown: count of "M" visible on the board
      - safe_opened: count of everything else (clue numbers)
    """
    counts = {"unrevealed": 0, "flagged": 0, "mines_shown": 0, "safe_opened": 0}
    for row in visible_board:
        for v in row:
            if v == "E":
                counts["unrevealed"] += 1
            elif v == "F":
                counts["flagged"] += 1
            elif v == "M":
                counts["mines_shown"] += 1
            else:
                counts["safe_opened"] += 1
    return counts


def count_flags(visible_board: VisibleBoard) -> int:
    return count_visible_cells(visible_board)["flagged"]


def available_cells(visible_board: VisibleBoard) -> List[Tuple[int, int]]:
    """Cells a random move may reveal: unrevealed and unflagged, in row-major order."""
    return [(r, c) for r, row in enumerate(visible_board) for c, v in enumerate(row) if v == "E"]

