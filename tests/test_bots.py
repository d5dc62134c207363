from collections import Counter

import numpy as np
import pytest

from knucklebones_engine import (
    InvalidState,
    new_board,
    simulate_placement,
    to_board,
    total_score,
)
from random_bot import choose_column_random
from heuristic import choose_column_heuristic, column_heuristic, heuristic_scores
from expectimax_bot import choose_column_expectimax, expectimax_value

FULL = [[1, 2, 3], [4, 5, 6], [6, 5, 4]]
EMPTY = [[None] * 3 for _ in range(3)]


# ---- easy ----

def test_random_bot_is_roughly_uniform():
    rng = np.random.default_rng(1234)
    board = new_board()
    counts = Counter(choose_column_random(board, rng) for _ in range(6000))
    assert set(counts) == {0, 1, 2}
    for col in range(3):
        assert 1700 < counts[col] < 2300


def test_random_bot_only_picks_open_columns():
    rng = np.random.default_rng(7)
    board = to_board([[1, 2, 3], [None, None, None], [4, 4, 4]])
    assert {choose_column_random(board, rng) for _ in range(50)} == {1}


def test_random_bot_same_seed_same_choices():
    board = new_board()
    a = [choose_column_random(board, np.random.default_rng(99)) for _ in range(5)]
    b = [choose_column_random(board, np.random.default_rng(99)) for _ in range(5)]
    assert a == b


# ---- medium ----

def test_heuristic_worked_example():
    own = to_board([[3, None, None], [None, None, None], [None, None, None]])
    opp = to_board([[3, 3, None], [None, None, None], [None, None, None]])
    # gain 12 - 3, cancel 2 * 3 * 1.5, pair bonus 3
    assert column_heuristic(own, opp, 0, 3) == 21.0
    assert column_heuristic(own, opp, 1, 3) == 3.0
    assert choose_column_heuristic(own, opp, 3) == 0


def test_heuristic_triple_bonus():
    own = to_board([[None, None, None], [5, 5, None], [None, None, None]])
    opp = new_board()
    # gain 45 - 20, triple bonus 5 * 4
    assert column_heuristic(own, opp, 1, 5) == 45.0
    assert choose_column_heuristic(own, opp, 5) == 1


def test_heuristic_ties_keep_first_column():
    assert choose_column_heuristic(new_board(), new_board(), 4) == 0
    own = to_board([[1, 2, 3], [None, None, None], [None, None, None]])
    assert choose_column_heuristic(own, new_board(), 4) == 1


def test_heuristic_prefers_cancelling():
    opp = to_board([[None, None, None], [None, None, None], [6, 6, None]])
    assert choose_column_heuristic(new_board(), opp, 6) == 2
    assert heuristic_scores(new_board(), opp, 6) == [6.0, 6.0, 24.0]


# ---- hard ----

def test_expectimax_averages_over_die_faces():
    # any face lands on an empty board unopposed: mean of 1..6
    assert expectimax_value(new_board(), new_board(), 1, True) == pytest.approx(3.5)
    assert expectimax_value(new_board(), new_board(), 1, False) == pytest.approx(-3.5)


def test_expectimax_min_player_cancels():
    mine = to_board([[6, None, None], [None, None, None], [None, None, None]])
    # opponent with a 6 wipes ours (-6); any other face d leaves 6 - d
    expected = (-6 + 5 + 4 + 3 + 2 + 1) / 6
    assert expectimax_value(mine, new_board(), 1, False) == pytest.approx(expected)


def test_expectimax_depth_zero_is_margin():
    mine = to_board([[6, 6, None], [None, None, None], [None, None, None]])
    theirs = to_board([[2, None, None], [None, None, None], [None, None, None]])
    assert expectimax_value(mine, theirs, 0, True) == 22.0


def test_expectimax_full_board_is_terminal():
    full = to_board(FULL)
    mine = to_board([[6, None, None], [None, None, None], [None, None, None]])
    assert expectimax_value(mine, full, 2, False) == float(total_score(mine) - total_score(full))


def test_expectimax_matches_greedy_when_search_collapses():
    # opponent board full with no 5s: every line ends right after our move
    own = to_board([[5, 5, None], [1, None, None], [6, 6, 6]])
    opp = to_board([[1, 2, 3], [4, 6, 6], [6, 4, 1]])
    best_col, best = None, None
    for col in (0, 1):
        a, b = simulate_placement(own, opp, col, 5)
        margin = total_score(a) - total_score(b)
        if best is None or margin > best:
            best_col, best = col, margin
    assert choose_column_expectimax(own, opp, 5) == best_col == 0


def test_expectimax_stops_when_own_board_fills():
    # our last open slot is filled at the root; the opponent still has room
    own = to_board([[1, 2, 3], [4, 5, None], [6, 6, 6]])
    opp = to_board([[5, None, None], [5, 2, None], [None, None, None]])
    mine, theirs = simulate_placement(own, opp, 1, 5)
    margin = float(total_score(mine) - total_score(theirs))
    assert expectimax_value(mine, theirs, 2, False) == margin
    assert expectimax_value(mine, theirs, 2, True) == margin
    assert choose_column_expectimax(own, opp, 5) == 1


def test_expectimax_takes_triple():
    own = to_board([[None, None, None], [None, None, None], [4, 4, None]])
    assert choose_column_expectimax(own, new_board(), 4) == 2


# ---- shared ----

@pytest.mark.parametrize("chooser", [
    lambda own, opp, die: choose_column_random(own, np.random.default_rng(0)),
    choose_column_heuristic,
    choose_column_expectimax,
])
def test_single_open_column_is_chosen(chooser):
    own = to_board([[1, 2, 3], [4, 5, 6], [2, None, None]])
    opp = to_board([[None, None, None], [3, None, None], [2, 2, None]])
    assert chooser(own, opp, 2) == 2


@pytest.mark.parametrize("chooser", [
    lambda own, opp, die: choose_column_random(own),
    choose_column_heuristic,
    choose_column_expectimax,
])
def test_full_board_raises(chooser):
    with pytest.raises(InvalidState):
        chooser(to_board(FULL), to_board(EMPTY), 3)
