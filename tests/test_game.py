import random

import pytest

from minesweeper.board_metrics import available_cells, count_flags, count_visible_cells
from minesweeper.game import GameState, MinesweeperGame


def _three_by_three():
    # Mines at two opposite corners; revealing (0,2) opens a small zero region.
    game = MinesweeperGame.from_mine_positions(3, 3, [(0, 0), (2, 2)])
    game.reveal(0, 2)
    return game


def test_first_reveal_places_bombs_away_from_click():
    game = MinesweeperGame(5, 5, 3, rng=random.Random(11))
    assert game.get_actual_board() is None
    game.reveal(2, 3)
    actual = game.get_actual_board()
    assert sum(v == "M" for row in actual for v in row) == 3
    assert actual[2][3] != "M"
    assert not game.is_bomb(2, 3)
    assert game.is_revealed(2, 3)
    assert game.get_game_state() != GameState.LOST


def test_adjacency_counts():
    game = MinesweeperGame.from_mine_positions(3, 3, [(0, 0), (2, 2)])
    assert game.is_bomb(0, 0)
    assert game.adjacent_bombs(1, 1) == 2
    assert game.adjacent_bombs(0, 1) == 1
    assert game.adjacent_bombs(0, 2) == 0


def test_reset_clears_the_board():
    game = MinesweeperGame(5, 5, 3, seed=1)
    game.reveal(0, 0)
    game.reset()
    assert game.get_actual_board() is None
    assert not game.is_game_over()
    assert all(v == "E" for row in game.board for v in row)


def test_same_seed_same_layout():
    a = MinesweeperGame(5, 5, 3, seed=5)
    b = MinesweeperGame(5, 5, 3, seed=5)
    a.reveal(0, 0)
    b.reveal(0, 0)
    assert a.get_actual_board() == b.get_actual_board()


def test_invalid_bomb_count_rejected():
    with pytest.raises(ValueError):
        MinesweeperGame(2, 2, 4)


def test_zero_reveal_flood_fills_and_wins():
    game = MinesweeperGame.from_mine_positions(5, 5, [(0, 0)])
    game.reveal(4, 4)
    assert game.is_game_over()
    assert game.is_game_won()
    assert game.board[0][0] == "E"
    assert game.board[1][1] == "1"
    assert game.board[4][4] == "0"


def test_revealing_a_mine_loses_and_shows_all_mines():
    game = MinesweeperGame.from_mine_positions(5, 5, [(0, 0), (4, 4)])
    game.reveal(0, 0)
    assert game.is_game_over()
    assert not game.is_game_won()
    assert game.board[4][4] == "M"


def test_reveal_after_game_over_is_noop():
    game = MinesweeperGame.from_mine_positions(5, 5, [(0, 0), (4, 4)])
    game.reveal(0, 0)
    game.reveal(2, 2)
    assert game.board[2][2] == "E"


def test_flood_fill_skips_flagged_cells():
    game = MinesweeperGame.from_mine_positions(5, 5, [(0, 0)])
    game.toggle_flag(4, 4)
    game.reveal(2, 2)
    assert game.board[4][4] == "F"
    assert not game.is_game_over()


def test_toggle_flag_rules():
    game = _three_by_three()
    game.toggle_flag(0, 0)
    assert game.is_flagged(0, 0)
    game.reveal(0, 0)
    assert game.is_flagged(0, 0)
    assert not game.is_game_over()

    game.toggle_flag(0, 0)
    assert game.is_hidden(0, 0)

    # Revealed cells can't be flagged.
    game.toggle_flag(0, 1)
    assert game.board[0][1] == "1"


def test_toggle_flag_ignored_once_game_is_over():
    game = MinesweeperGame.from_mine_positions(3, 3, [(0, 0), (2, 2)])
    game.reveal(2, 2)
    game.toggle_flag(1, 0)
    assert game.board[1][0] == "E"


def test_auto_flag_flags_forced_mines():
    # A full wall of mines in column 2 keeps the right half closed.
    game = MinesweeperGame.from_mine_positions(5, 5, [(r, 2) for r in range(5)])
    game.reveal(0, 0)
    assert all(game.board[r][0] == "0" for r in range(5))
    assert count_flags(game.board) == 0

    game.auto_flag()
    assert all(game.is_flagged(r, 2) for r in range(5))
    assert count_flags(game.board) == 5
    assert all(game.is_hidden(r, c) for r in range(5) for c in (3, 4))
    assert not game.is_game_over()


def test_auto_flag_without_forced_cells_changes_nothing():
    game = _three_by_three()
    before = [row[:] for row in game.board]
    game.auto_flag()
    assert game.board == before


def test_auto_reveal_opens_around_satisfied_clues():
    game = _three_by_three()
    game.toggle_flag(0, 0)
    game.auto_reveal()
    assert game.is_game_won()
    assert game.board[2][0] == "0"
    assert game.board[2][1] == "1"


def test_auto_reveal_with_wrong_flag_can_lose():
    game = _three_by_three()
    game.toggle_flag(1, 0)
    game.auto_reveal()
    assert game.get_game_state() == GameState.LOST


def test_deep_copy_is_independent():
    game = _three_by_three()
    copy = game.deep_copy()
    assert copy.board == game.board
    assert copy.get_actual_board() == game.get_actual_board()
    assert copy.board is not game.board
    assert copy.get_game_state() == game.get_game_state()

    copy.toggle_flag(0, 0)
    copy.reveal(2, 0)
    assert game.is_hidden(0, 0)
    assert game.is_hidden(2, 0)


def test_deep_copy_keeps_terminal_flags():
    game = MinesweeperGame.from_mine_positions(5, 5, [(0, 0)])
    game.reveal(4, 4)
    copy = game.deep_copy()
    assert copy.is_game_over()
    assert copy.is_game_won()


def test_feature_flag_and_mine_vectors():
    game = _three_by_three()
    game.toggle_flag(0, 0)

    features = game.to_feature_vector()
    assert features.shape == (9,)
    assert list(features) == pytest.approx([1.0, 0.2, 0.1, 0.0, 0.3, 0.2, 0.0, 0.0, 0.0])

    assert list(game.to_flag_vector()) == [1.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0]
    assert list(game.to_mine_vector()) == [1.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 1.0]


def test_board_metrics_helpers():
    game = _three_by_three()
    game.toggle_flag(0, 0)
    assert available_cells(game.board) == [(1, 0), (2, 0), (2, 1), (2, 2)]
    counts = count_visible_cells(game.board)
    assert counts == {"unrevealed": 4, "flagged": 1, "mines_shown": 0, "safe_opened": 4}
