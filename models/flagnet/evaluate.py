"""
Evaluation for a trained flag-prediction network.

The network plays on its own: every turn I flag the cells it is confident about, let the
board auto-reveal around those flags, and fall back to a random click when it flags
nothing new. Games are capped at `EvalConfig.max_turns` so a stalled game still ends.

Run it with `python -m models.flagnet.evaluate` (or the `flagnet-evaluate` script) after
training has written the model file.
"""

from __future__ import annotations

import random
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Union

from minesweeper.game import MinesweeperGame

from ..metrics import OutcomeTally
from .config import MODEL_FILENAME, EvalConfig
from .network import NeuralNetwork, PersistenceError
from .policy import flag_confident_cells, make_random_move


class GameOutcome(Enum):
    WON = "WON"
    LOST = "LOST"
    # Hit the turn cap without finishing; tallied as a loss.
    ABORTED = "ABORTED"


@dataclass
class EvaluationReport:
    tally: OutcomeTally = field(default_factory=OutcomeTally)
    aborted: int = 0
    pass_win_rate: float = 0.5

    @property
    def passed(self) -> bool:
        return self.tally.win_rate > self.pass_win_rate

    def verdict(self) -> str:
        pct = self.pass_win_rate * 100.0
        if self.passed:
            return f"SUCCESS! Win rate is > {pct:.0f}%"
        return f"Win rate is <= {pct:.0f}%. More training may be needed."


def play_network_game(
    network: NeuralNetwork,
    rng: random.Random,
    *,
    config: EvalConfig = EvalConfig(),
) -> GameOutcome:
    game = MinesweeperGame(config.rows, config.cols, config.num_bombs, rng=rng)
    make_random_move(game, rng)

    turns = 0
    while not game.is_game_over():
        turns += 1
        if turns > int(config.max_turns):
            return GameOutcome.ABORTED

        probs = network.guess(game.to_feature_vector())
        placed = flag_confident_cells(game, probs, threshold=config.flag_threshold)
        if placed > 0:
            game.auto_reveal()
        else:
            make_random_move(game, rng)

    return GameOutcome.WON if game.is_game_won() else GameOutcome.LOST


def evaluate_network(
    network: NeuralNetwork,
    *,
    config: EvalConfig = EvalConfig(),
    verbose: bool = True,
) -> EvaluationReport:
    """Play `config.num_games` games with `network` and return the tally + verdict."""
    rng = random.Random(config.seed)
    report = EvaluationReport(pass_win_rate=config.pass_win_rate)
    if verbose:
        print(f"\n[eval] Starting testing for {config.num_games:,} games...\n")

    for game_num in range(1, int(config.num_games) + 1):
        outcome = play_network_game(network, rng, config=config)
        report.tally.record(outcome == GameOutcome.WON)
        if outcome == GameOutcome.ABORTED:
            report.aborted += 1

        if verbose and config.report_every > 0 and game_num % config.report_every == 0:
            print(f"[eval] {report.tally.progress_line(config.num_games)}")

    if verbose:
        print("\n=== Testing Complete ===")
        for line in report.tally.summary_lines():
            print(line)
        print(f"Aborted (turn cap): {report.aborted:,}")
        print(f"\n{report.verdict()}")
    return report


def load_and_evaluate(
    path: Union[str, Path] = MODEL_FILENAME,
    *,
    config: EvalConfig = EvalConfig(),
    verbose: bool = True,
) -> EvaluationReport:
    """
    Load a saved network and evaluate it.

    PersistenceError propagates and nothing is played, including when the saved network
    doesn't have one input and one output per cell of the configured board.
    """
    network = NeuralNetwork.load(path)
    cells = config.rows * config.cols
    if network.input_size != cells or network.output_size != cells:
        raise PersistenceError(
            f"Model file {path} has input/output sizes {network.input_size}/{network.output_size}, "
            f"expected {cells}/{cells} for a {config.rows}x{config.cols} board"
        )
    if verbose:
        print(f"[eval] Neural network loaded from: {path}")
    return evaluate_network(network, config=config, verbose=verbose)


def main() -> int:
    try:
        load_and_evaluate()
    except PersistenceError as e:
        print(f"Error loading neural network: {e}", file=sys.stderr)
        print("Make sure you run training (flagnet-train) first to create the network file.", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
