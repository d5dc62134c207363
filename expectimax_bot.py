# expectimax_bot.py
"""
Two-ply expectimax for Knucklebones (uses knucklebones_engine).

- Root: the die is already rolled, so each open column is tried deterministically.
- Deeper plies alternate opponent (min) and bot (max). The die for those turns
  is unknown: every face 1..6 is tried and the best/worst column value per face
  is averaged with weight 1/6.
- Leaves score (bot total) - (opponent total), always from the root bot's side.
- Search stops early when either board is full.
- Fixed depth, exhaustive (no pruning, no transposition table).
"""

from __future__ import annotations
import math
import numpy as np

from knucklebones_engine import (
    MAX_FACE,
    MIN_FACE,
    InvalidState,
    available_columns,
    is_full,
    simulate_placement,
    total_score,
)

SEARCH_DEPTH = 2
DIE_FACES = tuple(range(MIN_FACE, MAX_FACE + 1))

def score_margin(my_board: np.ndarray, opp_board: np.ndarray) -> float:
    return float(total_score(my_board) - total_score(opp_board))

def expectimax_value(my_board: np.ndarray, opp_board: np.ndarray,
                     depth: int, maximizing: bool) -> float:
    if depth == 0 or is_full(my_board) or is_full(opp_board):
        return score_margin(my_board, opp_board)

    if maximizing:
        available = available_columns(my_board)
        if not available:
            return score_margin(my_board, opp_board)

        total_expected = 0.0
        for die in DIE_FACES:
            best = -math.inf
            for col in available:
                sim_mine, sim_opp = simulate_placement(my_board, opp_board, col, die)
                val = expectimax_value(sim_mine, sim_opp, depth - 1, False)
                if val > best:
                    best = val
            total_expected += best
        return total_expected / len(DIE_FACES)

    available = available_columns(opp_board)
    if not available:
        return score_margin(my_board, opp_board)

    total_expected = 0.0
    for die in DIE_FACES:
        worst = math.inf
        for col in available:
            # opponent moves: fill theirs, cancel ours
            sim_opp, sim_mine = simulate_placement(opp_board, my_board, col, die)
            val = expectimax_value(sim_mine, sim_opp, depth - 1, True)
            if val < worst:
                worst = val
        total_expected += worst
    return total_expected / len(DIE_FACES)

def choose_column_expectimax(own_board: np.ndarray, opp_board: np.ndarray, die_value: int) -> int:
    available = available_columns(own_board)
    if not available:
        raise InvalidState("No open column on the bot's board")

    best_col = available[0]
    best_val = -math.inf
    for col in available:
        sim_mine, sim_opp = simulate_placement(own_board, opp_board, col, die_value)
        val = expectimax_value(sim_mine, sim_opp, SEARCH_DEPTH, False)
        if val > best_val:
            best_val = val
            best_col = col

    return best_col
