# random_bot.py
"""
Easy Knucklebones bot.

Strategy:
- Pick one of the open columns uniformly at random.

The randomness source is passed in (numpy Generator) so games can be replayed
from a seed; a fresh unseeded generator is used when none is given.
"""

from __future__ import annotations
from typing import Optional
import numpy as np

from knucklebones_engine import InvalidState, available_columns

def choose_column_random(own_board: np.ndarray, rng: Optional[np.random.Generator] = None) -> int:
    available = available_columns(own_board)
    if not available:
        raise InvalidState("No open column on the bot's board")
    if rng is None:
        rng = np.random.default_rng()
    return available[int(rng.integers(len(available)))]
