"""
controller.py
-------------
Single entry point for the Knucklebones bots, plus an interactive advisor that
suggests a column for a board typed in by hand.
"""

from __future__ import annotations
from typing import List, Optional
import numpy as np
import time

from knucklebones_engine import (
    N_COLUMNS, N_SLOTS,
    InvalidState, KnucklebonesError,
    available_columns, format_board, to_board, total_score, validate_die, warmup,
)
from random_bot import choose_column_random
from heuristic import choose_column_heuristic, heuristic_scores
from expectimax_bot import choose_column_expectimax

DIFFICULTIES = ("easy", "medium", "hard")
DEFAULT_DIFFICULTY = "medium"

def choose_column(own_board, opponent_board, die_value: int, difficulty: str = DEFAULT_DIFFICULTY,
                  rng: Optional[np.random.Generator] = None) -> int:
    """
    Return the column (0..2) the bot should fill with die_value.

    Boards may be engine arrays or 3 columns of 3 slots (face 1..6 or None).
    Inputs are validated and copied; the caller's boards are never touched.
    Unknown difficulty tags use the medium bot. rng only matters for "easy".

    Raises InvalidInput for a malformed board or die, InvalidState when
    own_board has no open column.
    """
    own = to_board(own_board)
    opp = to_board(opponent_board)
    die = validate_die(die_value)
    if not available_columns(own):
        raise InvalidState("No open column on the bot's board")

    if difficulty == "easy":
        return choose_column_random(own, rng)
    if difficulty == "hard":
        return choose_column_expectimax(own, opp, die)
    return choose_column_heuristic(own, opp, die)

# ---------- Helpers ----------

def parse_column(text: str) -> List[Optional[int]]:
    """'5 2' -> [5, 2, None]; 0 or '.' also mean empty."""
    vals: List[Optional[int]] = []
    for tok in text.split():
        if tok in ("0", "."):
            vals.append(None)
        else:
            vals.append(int(tok))
    if len(vals) > N_SLOTS:
        raise ValueError(f"A column holds at most {N_SLOTS} dice.")
    return vals + [None] * (N_SLOTS - len(vals))

def read_board(owner: str) -> Optional[np.ndarray]:
    cols = []
    for c in range(N_COLUMNS):
        text = input(f"{owner} column {c + 1} (bottom first): ")
        if text.strip().lower() == "q":
            return None
        cols.append(parse_column(text))
    return to_board(cols)

# ---------- Main ----------

def main():
    print("=== Knucklebones Advisor ===")
    print("Enter each column's dice from the first-filled slot; blank = empty. 'q' quits.\n")

    difficulty = input(f"Difficulty {DIFFICULTIES} [{DEFAULT_DIFFICULTY}]: ").strip().lower() or DEFAULT_DIFFICULTY
    warmup()

    while True:
        try:
            mine = read_board("Your")
            theirs = read_board("Opponent") if mine is not None else None
            if mine is None or theirs is None:
                print("Goodbye!")
                break
            raw = input("Die rolled (1-6, q to quit): ").strip()
            if raw.lower() == "q":
                print("Goodbye!")
                break
            die = validate_die(int(raw))
            t0 = time.perf_counter()
            col = choose_column(mine, theirs, die, difficulty)
            dt = time.perf_counter() - t0
        except (KnucklebonesError, ValueError) as e:
            print(f"Invalid input: {e}")
            continue

        print("\nYour board:")
        print(format_board(mine))
        print(f"Score: {total_score(mine)}  Opponent score: {total_score(theirs)}")
        scores = heuristic_scores(mine, theirs, die)
        for c, s in zip(available_columns(mine), scores):
            print(f"  column {c + 1}: heuristic {s:.1f}")
        print(f"Suggested column: {col + 1} ({difficulty}, computed in {dt:.3f}s)")
        print("=" * 40)

if __name__ == "__main__":
    main()
