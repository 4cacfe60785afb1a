"""
Self-play training for the flag-prediction network.

Each game is played by the board's own deterministic solver (auto-flag + auto-reveal,
with a random click whenever it is stuck). At every step I train the network to map the
board *before* deduction to the flags the solver places *after* deduction, so the network
learns to reproduce the solver's flags (not the true mine layout).

Run it with `python -m models.flagnet.selfplay` (or the `flagnet-train` script).
"""

from __future__ import annotations

import random
import sys
from typing import Optional, Tuple

from minesweeper.board_metrics import count_flags
from minesweeper.game import MinesweeperGame

from ..metrics import OutcomeTally
from .config import FlagNetConfig, SelfPlayConfig
from .network import NeuralNetwork
from .policy import make_random_move


def play_self_play_game(
    network: NeuralNetwork,
    rng: random.Random,
    *,
    rows: int,
    cols: int,
    num_bombs: int,
) -> bool:
    """
    Play one solver-driven game, training `network` on every step. Returns True if won.
    """
    original = MinesweeperGame(rows, cols, num_bombs, rng=rng)
    make_random_move(original, rng)

    while not original.is_game_over():
        # The copy gets the deductions; the original keeps the pre-deduction board.
        deduced = original.deep_copy()
        flags_before = count_flags(deduced.get_visible_board())
        deduced.auto_flag()
        flags_after = count_flags(deduced.get_visible_board())

        network.train(original.to_feature_vector(), deduced.to_flag_vector())

        original = deduced
        if flags_after > flags_before:
            original.auto_reveal()
        elif make_random_move(original, rng) is None:
            # Nothing left to deduce or click; the game can't progress.
            break

    return original.is_game_won()


def train_self_play(
    network: Optional[NeuralNetwork] = None,
    *,
    config: SelfPlayConfig = SelfPlayConfig(),
    net_config: FlagNetConfig = FlagNetConfig(),
    verbose: bool = True,
) -> Tuple[NeuralNetwork, OutcomeTally]:
    """
    Play `config.num_games` self-play games, then save the network to `config.model_path`.

    If `network` is None I build a fresh one from `net_config`. `config.model_path=None`
    skips saving. A failed save raises OSError; the trained network itself is untouched.
    """
    rng = random.Random(config.seed)
    if network is None:
        network = NeuralNetwork.from_config(net_config, seed=config.seed)
        if verbose:
            print(network.describe())

    tally = OutcomeTally()
    if verbose:
        print(f"\n[train] Starting training for {config.num_games:,} games...\n")

    for game_num in range(1, int(config.num_games) + 1):
        won = play_self_play_game(
            network,
            rng,
            rows=config.rows,
            cols=config.cols,
            num_bombs=config.num_bombs,
        )
        tally.record(won)

        if verbose and config.report_every > 0 and game_num % config.report_every == 0:
            print(f"[train] {tally.progress_line(config.num_games)}")

    if verbose:
        print("\n=== Training Complete ===")
        for line in tally.summary_lines():
            print(line)

    if config.model_path is not None:
        out_path = network.save(config.model_path)
        if verbose:
            print(f"\n[train] Neural network saved to: {out_path}")

    return network, tally


def main() -> int:
    try:
        train_self_play()
    except OSError as e:
        print(f"Error saving neural network: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
