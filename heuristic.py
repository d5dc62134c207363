# ---- Medium bot: one-ply weighted heuristic ----

from typing import List
import math
import numpy as np

from knucklebones_engine import (
    InvalidState,
    available_columns,
    column_score,
    count_face,
    place_in_column,
)

# Opponent dice wiped out are worth 1.5x their face
CANCEL_WEIGHT = 1.5
# Completing a triple (two matches already in the column)
TRIPLE_BONUS = 4
# Building a pair (one match already in the column)
PAIR_BONUS = 1

def column_heuristic(own_board: np.ndarray, opp_board: np.ndarray, column: int, die_value: int) -> float:
    """
    Score dropping die_value into column as the sum of:
      1. own gain: column score with the die placed minus column score as is
      2. cancellation bonus: matching opponent dice in the same column * face * 1.5
      3. multiplier progress: face * 4 for a triple, face * 1 for a pair
    """
    own_col = own_board[column]
    score = float(column_score(place_in_column(own_col, die_value)) - column_score(own_col))

    score += count_face(opp_board[column], die_value) * die_value * CANCEL_WEIGHT

    same_in_col = count_face(own_col, die_value)
    if same_in_col == 2:
        score += die_value * TRIPLE_BONUS
    elif same_in_col == 1:
        score += die_value * PAIR_BONUS

    return score

def heuristic_scores(own_board: np.ndarray, opp_board: np.ndarray, die_value: int) -> List[float]:
    """Heuristic of every open column, in available_columns order."""
    return [column_heuristic(own_board, opp_board, col, die_value) for col in available_columns(own_board)]

def choose_column_heuristic(own_board: np.ndarray, opp_board: np.ndarray, die_value: int) -> int:
    available = available_columns(own_board)
    if not available:
        raise InvalidState("No open column on the bot's board")

    best_col = available[0]
    best_score = -math.inf
    for col in available:
        score = column_heuristic(own_board, opp_board, col, die_value)
        # strict '>' keeps the first column seen on ties
        if score > best_score:
            best_score = score
            best_col = col

    return best_col
