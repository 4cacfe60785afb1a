"""
Shared metrics helpers for my Minesweeper flag-prediction project.

I keep these here so training and evaluation count wins/losses the same way (and so
I don't accidentally compare apples-to-oranges between the two progress reports).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List


@dataclass
class OutcomeTally:
    """Win/loss counters for one run. Both only ever go up."""

    wins: int = 0
    losses: int = 0

    def record(self, won: bool) -> None:
        if won:
            self.wins += 1
        else:
            self.losses += 1

    @property
    def games(self) -> int:
        return self.wins + self.losses

    @property
    def win_rate(self) -> float:
        """Fraction of games won, in [0, 1] (0.0 before any game is recorded)."""
        return self.wins / max(1, self.games)

    def progress_line(self, total_games: int) -> str:
        return (
            f"Game {self.games:,} / {total_games:,} - Win Rate: {self.win_rate * 100.0:.2f}% "
            f"({self.wins:,} wins, {self.losses:,} losses)"
        )

    def summary_lines(self) -> List[str]:
        return [
            f"Total Games: {self.games:,}",
            f"Wins: {self.wins:,}",
            f"Losses: {self.losses:,}",
            f"Win Rate: {self.win_rate * 100.0:.2f}%",
        ]
