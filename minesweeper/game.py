"""
This is the core Minesweeper game logic I use for self-play and evaluation.

I represent both the hidden board and the visible board with simple strings:
- `"E"` = unrevealed
- `"F"` = flagged (visible board only)
- `"M"` = mine
- `"0"`-`"8"` = clue numbers
"""

from __future__ import annotations

import random
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .encoding import flags_from_visible, mine_mask_from_actual, visible_to_features


class GameState(Enum):
    """I use these small status codes to track whether the game is ongoing or finished."""
    PROG = "PROG"
    WON = "WON"
    LOST = "LOST"


class MinesweeperGame:
    """
    This is my Minesweeper environment.

    Mines are placed lazily on the first reveal so the first click is always safe (only
    the clicked cell itself is excluded). All randomness goes through `self.rng`, so a
    seeded `random.Random` makes a whole game reproducible.
    """

    def __init__(self, rows: int = 5, cols: int = 5, num_bombs: int = 3,
                 rng: Optional[random.Random] = None, seed: Optional[int] = None):
        """
        Args:
            rows: Number of rows
            cols: Number of columns
            num_bombs: Number of mines placed on the first reveal
            rng: Random source shared with the caller (takes precedence over `seed`)
            seed: Seed for a private random source when `rng` is not given
        """
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Board must be at least 1x1, got {rows}x{cols}")
        if not 0 <= num_bombs < rows * cols:
            raise ValueError(f"num_bombs must be in [0, {rows * cols - 1}], got {num_bombs}")

        self.rows = int(rows)
        self.cols = int(cols)
        self.num_bombs = int(num_bombs)
        self.rng = rng if rng is not None else random.Random(seed)
        self.reset()

    @classmethod
    def from_mine_positions(cls, rows: int, cols: int, positions: Iterable[Tuple[int, int]],
                            rng: Optional[random.Random] = None) -> "MinesweeperGame":
        """Build a game with a fixed mine layout (bombs are treated as already placed)."""
        mines = sorted(set((int(r), int(c)) for r, c in positions))
        game = cls(rows, cols, len(mines), rng=rng)
        game._place_bombs(mines)
        return game

    def reset(self) -> None:
        """Reset the game to its initial state (no mines placed yet)."""
        self.game_state = GameState.PROG
        self._board_initialized = False
        self.actual_board: List[List[str]] = [["0"] * self.cols for _ in range(self.rows)]
        self.board: List[List[str]] = [["E"] * self.cols for _ in range(self.rows)]

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def neighbors(self, row: int, col: int) -> Iterator[Tuple[int, int]]:
        """Yield the up-to-8 neighbors of a cell (the cell itself excluded)."""
        for dr in (-1, 0, 1):
            for dc in (-1, 0, 1):
                if dr == 0 and dc == 0:
                    continue
                r, c = row + dr, col + dc
                if self.in_bounds(r, c):
                    yield (r, c)

    def _generate_board(self, safe_row: int, safe_col: int) -> None:
        candidates = [(r, c) for r in range(self.rows) for c in range(self.cols)
                      if (r, c) != (safe_row, safe_col)]
        self._place_bombs(self.rng.sample(candidates, self.num_bombs))

    def _place_bombs(self, positions: Iterable[Tuple[int, int]]) -> None:
        self.actual_board = [["0"] * self.cols for _ in range(self.rows)]
        for r, c in positions:
            if not self.in_bounds(r, c):
                raise ValueError(f"Mine position out of bounds: {(r, c)}")
            self.actual_board[r][c] = "M"
        self._compute_clue_numbers()
        self._board_initialized = True

    def _compute_clue_numbers(self) -> None:
        for r in range(self.rows):
            for c in range(self.cols):
                if self.actual_board[r][c] == "M":
                    continue
                count = sum(1 for nr, nc in self.neighbors(r, c) if self.actual_board[nr][nc] == "M")
                self.actual_board[r][c] = str(count)

    def is_bomb(self, row: int, col: int) -> bool:
        return self._board_initialized and self.actual_board[row][col] == "M"

    def is_revealed(self, row: int, col: int) -> bool:
        return self.board[row][col] not in ("E", "F")

    def is_flagged(self, row: int, col: int) -> bool:
        return self.board[row][col] == "F"

    def is_hidden(self, row: int, col: int) -> bool:
        """Unrevealed and not flagged."""
        return self.board[row][col] == "E"

    def adjacent_bombs(self, row: int, col: int) -> int:
        v = self.actual_board[row][col]
        return 0 if v == "M" else int(v)

    def _revealed_clue(self, row: int, col: int) -> int:
        """Clue number of a revealed non-mine cell, or 0 for anything else."""
        v = self.board[row][col]
        return int(v) if v.isdigit() else 0

    def reveal(self, row: int, col: int) -> None:
        """
        Reveal a cell.

        The first reveal generates the board. Revealing a mine loses the game and shows
        every mine; revealing a zero opens the connected zero region with an explicit stack.
        Flagged cells are never opened.
        """
        if self.is_game_over() or not self.in_bounds(row, col):
            return
        if not self._board_initialized:
            self._generate_board(row, col)
        if self.board[row][col] != "E":
            return

        if self.actual_board[row][col] == "M":
            self.game_state = GameState.LOST
            self._reveal_all_mines()
            return

        stack = [(row, col)]
        while stack:
            r, c = stack.pop()
            if self.board[r][c] != "E":
                continue
            self.board[r][c] = self.actual_board[r][c]
            if self.actual_board[r][c] == "0":
                stack.extend((nr, nc) for nr, nc in self.neighbors(r, c) if self.board[nr][nc] == "E")

        if self._all_safe_revealed():
            self.game_state = GameState.WON

    def _reveal_all_mines(self) -> None:
        for r in range(self.rows):
            for c in range(self.cols):
                if self.actual_board[r][c] == "M":
                    self.board[r][c] = "M"

    def _all_safe_revealed(self) -> bool:
        for r in range(self.rows):
            for c in range(self.cols):
                if self.actual_board[r][c] != "M" and not self.is_revealed(r, c):
                    return False
        return True

    def toggle_flag(self, row: int, col: int) -> None:
        """Flip the flag on a hidden cell; no-op once the game is over or on revealed cells."""
        if self.is_game_over() or not self.in_bounds(row, col):
            return
        if self.board[row][col] == "E":
            self.board[row][col] = "F"
        elif self.board[row][col] == "F":
            self.board[row][col] = "E"

    def auto_flag(self) -> None:
        """
        One pass of the "all remaining neighbors are mines" rule.

        For every revealed clue n > 0: if (hidden neighbors + flagged neighbors) == n, every
        hidden neighbor must be a mine, so I flag it.
        """
        if self.is_game_over():
            return
        for r in range(self.rows):
            for c in range(self.cols):
                clue = self._revealed_clue(r, c)
                if clue == 0:
                    continue
                hidden = [(nr, nc) for nr, nc in self.neighbors(r, c) if self.is_hidden(nr, nc)]
                flagged = sum(1 for nr, nc in self.neighbors(r, c) if self.is_flagged(nr, nc))
                if hidden and len(hidden) + flagged == clue:
                    for nr, nc in hidden:
                        self.board[nr][nc] = "F"

    def auto_reveal(self) -> None:
        """
        One pass of the "all mines accounted for" rule.

        For every revealed clue n > 0 with exactly n flagged neighbors, I reveal the rest of
        its hidden neighbors. A wrong flag can make this lose the game.
        """
        for r in range(self.rows):
            for c in range(self.cols):
                if self.is_game_over():
                    return
                clue = self._revealed_clue(r, c)
                if clue == 0:
                    continue
                flagged = sum(1 for nr, nc in self.neighbors(r, c) if self.is_flagged(nr, nc))
                if flagged != clue:
                    continue
                for nr, nc in list(self.neighbors(r, c)):
                    if self.is_hidden(nr, nc):
                        self.reveal(nr, nc)

    def is_game_over(self) -> bool:
        return self.game_state != GameState.PROG

    def is_game_won(self) -> bool:
        return self.game_state == GameState.WON

    def get_game_state(self) -> GameState:
        return self.game_state

    def get_visible_board(self) -> List[List[str]]:
        return self.board

    def get_actual_board(self) -> Optional[List[List[str]]]:
        """Ground truth (mines + clues), or None before the first reveal."""
        if not self._board_initialized:
            return None
        return self.actual_board

    def deep_copy(self) -> "MinesweeperGame":
        """
        Independent copy of this game: same cells, same state, no shared board storage.

        The copy shares `self.rng`; only board storage is duplicated.
        """
        other = MinesweeperGame.__new__(MinesweeperGame)
        other.rows = self.rows
        other.cols = self.cols
        other.num_bombs = self.num_bombs
        other.rng = self.rng
        other.game_state = self.game_state
        other._board_initialized = self._board_initialized
        other.actual_board = [row[:] for row in self.actual_board]
        other.board = [row[:] for row in self.board]
        return other

    def to_feature_vector(self) -> np.ndarray:
        return visible_to_features(self.board)

    def to_flag_vector(self) -> np.ndarray:
        return flags_from_visible(self.board)

    def to_mine_vector(self) -> np.ndarray:
        """True mine layout (all zeros before the first reveal). The trainer doesn't use this."""
        return mine_mask_from_actual(self.actual_board)

    def __repr__(self) -> str:
        rows = "\n".join(" ".join(row) for row in self.board)
        return f"MinesweeperGame({self.rows}x{self.cols}, bombs={self.num_bombs}, state={self.game_state.value})\n{rows}"
