# knucklebones_engine.py
# Knucklebones board primitives: numpy boards + Numba-compiled hot paths.
# Python 3.10+

from __future__ import annotations
from numbers import Integral
from typing import List, Optional, Sequence, Tuple
import numpy as _np  # type: ignore
from numba import njit  # type: ignore

N_COLUMNS = 3
N_SLOTS = 3
MIN_FACE = 1
MAX_FACE = 6
EMPTY = 0

BOARD_SHAPE = (N_COLUMNS, N_SLOTS)
BOARD_DTYPE = _np.int8

# ---------------------------
# Errors
# ---------------------------

class KnucklebonesError(ValueError):
    """Base class for every error the engine raises."""

class InvalidInput(KnucklebonesError):
    """Malformed board, die value or column index."""

class InvalidState(KnucklebonesError):
    """The board cannot take a move (no open column)."""

# ---------------------------
# Encoding helpers
# ---------------------------
# Boards are int8 arrays indexed board[column, slot]. Slot 0 fills first,
# EMPTY (0) marks a free slot.

def new_board() -> _np.ndarray:
    return _np.zeros(BOARD_SHAPE, dtype=BOARD_DTYPE)

def _is_face(v) -> bool:
    return isinstance(v, Integral) and not isinstance(v, bool) and MIN_FACE <= v <= MAX_FACE

def _check_no_gaps(board: _np.ndarray) -> None:
    filled = board != EMPTY
    for c in range(N_COLUMNS):
        if _np.any(filled[c, 1:] & ~filled[c, :-1]):
            raise InvalidInput(f"Column {c} has an empty slot below a filled slot: {board[c].tolist()}")

def validate_board(board: _np.ndarray) -> None:
    """Check an engine board: shape (3, 3), integer cells in 0..6, no gaps."""
    if not isinstance(board, _np.ndarray):
        raise InvalidInput(f"Expected a numpy board, got {type(board).__name__}")
    if board.shape != BOARD_SHAPE:
        raise InvalidInput(f"Board must have shape {BOARD_SHAPE}, got {board.shape}")
    if not _np.issubdtype(board.dtype, _np.integer):
        raise InvalidInput(f"Board cells must be integers, got dtype {board.dtype}")
    if _np.any((board < EMPTY) | (board > MAX_FACE)):
        raise InvalidInput(f"Board cells must be empty or {MIN_FACE}..{MAX_FACE}: {board.tolist()}")
    _check_no_gaps(board)

def validate_die(die_value) -> int:
    if not _is_face(die_value):
        raise InvalidInput(f"Die value must be an integer {MIN_FACE}..{MAX_FACE}, got {die_value!r}")
    return int(die_value)

def to_board(seq) -> _np.ndarray:
    """
    Convert a caller board into an engine board (always a fresh array).

    Accepts either an engine array or 3 columns of 3 slots where each slot is
    a face 1..6 or None. Raises InvalidInput on anything else.
    """
    if isinstance(seq, _np.ndarray):
        validate_board(seq)
        return _np.array(seq, dtype=BOARD_DTYPE, order="C")

    try:
        columns = list(seq)
    except TypeError:
        raise InvalidInput(f"Board must be a sequence of columns, got {type(seq).__name__}") from None
    if len(columns) != N_COLUMNS:
        raise InvalidInput(f"Board must have {N_COLUMNS} columns, got {len(columns)}")

    board = new_board()
    for c, col in enumerate(columns):
        try:
            slots = list(col)
        except TypeError:
            raise InvalidInput(f"Column {c} must be a sequence of slots") from None
        if len(slots) != N_SLOTS:
            raise InvalidInput(f"Column {c} must have {N_SLOTS} slots, got {len(slots)}")
        for s, v in enumerate(slots):
            if v is None:
                continue
            if not _is_face(v):
                raise InvalidInput(f"Slot {c},{s} must be None or {MIN_FACE}..{MAX_FACE}, got {v!r}")
            board[c, s] = v
    _check_no_gaps(board)
    return board

def from_board(board: _np.ndarray) -> List[List[Optional[int]]]:
    return [[int(v) if v != EMPTY else None for v in col] for col in board]

def format_board(board: _np.ndarray) -> str:
    # one text row per slot, slot 0 first
    rows = []
    for s in range(N_SLOTS):
        cells = [f"{int(board[c, s]):>2}" if board[c, s] != EMPTY else " ." for c in range(N_COLUMNS)]
        rows.append(" ".join(cells))
    return "\n".join(rows)

def _as_board(board) -> _np.ndarray:
    arr = _np.asarray(board)
    if arr.shape != BOARD_SHAPE or not _np.issubdtype(arr.dtype, _np.integer):
        raise InvalidInput(f"Board must be a {BOARD_SHAPE} integer array, got {arr.dtype} {arr.shape}")
    if _np.any((arr < EMPTY) | (arr > MAX_FACE)):
        raise InvalidInput(f"Board cells must be empty or {MIN_FACE}..{MAX_FACE}: {arr.tolist()}")
    return _np.ascontiguousarray(arr, dtype=BOARD_DTYPE)

def _as_column(column) -> _np.ndarray:
    # kernels index by face with no bounds checks: only 0..6 may reach them
    if isinstance(column, _np.ndarray):
        if column.ndim != 1 or not _np.issubdtype(column.dtype, _np.integer):
            raise InvalidInput(f"Column must be a 1-d integer array, got {column.dtype} {column.shape}")
        if _np.any((column < EMPTY) | (column > MAX_FACE)):
            raise InvalidInput(f"Column cells must be empty or {MIN_FACE}..{MAX_FACE}: {column.tolist()}")
        return _np.ascontiguousarray(column, dtype=BOARD_DTYPE)
    slots = []
    for v in column:
        if v is None or (isinstance(v, Integral) and not isinstance(v, bool) and v == EMPTY):
            slots.append(EMPTY)
        elif _is_face(v):
            slots.append(int(v))
        else:
            raise InvalidInput(f"Column slot must be None or {MIN_FACE}..{MAX_FACE}, got {v!r}")
    return _np.array(slots, dtype=BOARD_DTYPE)

# ---------------------------
# Numba hot functions
# ---------------------------

@njit(cache=True)
def _count_face_nb(col: _np.ndarray, die: int) -> int:
    n = 0
    for i in range(col.shape[0]):
        if col[i] == die:
            n += 1
    return n

@njit(cache=True)
def _column_score_nb(col: _np.ndarray) -> int:
    """Sum of face * count**2 over distinct faces; empties never count."""
    counts = _np.zeros(MAX_FACE + 1, dtype=_np.int64)
    for i in range(col.shape[0]):
        v = col[i]
        if v != EMPTY:
            counts[v] += 1
    total = 0
    for face in range(MIN_FACE, MAX_FACE + 1):
        n = counts[face]
        total += face * n * n
    return total

@njit(cache=True)
def _total_score_nb(board: _np.ndarray) -> int:
    total = 0
    for c in range(board.shape[0]):
        total += _column_score_nb(board[c])
    return total

@njit(cache=True)
def _compact_nb(col: _np.ndarray) -> _np.ndarray:
    out = _np.zeros_like(col)
    j = 0
    for i in range(col.shape[0]):
        v = col[i]
        if v != EMPTY:
            out[j] = v
            j += 1
    return out

@njit(cache=True)
def _place_in_column_nb(col: _np.ndarray, die: int) -> _np.ndarray:
    out = col.copy()
    for i in range(out.shape[0]):
        if out[i] == EMPTY:
            out[i] = die
            break
    return out

@njit(cache=True)
def _simulate_placement_nb(board_a: _np.ndarray, board_b: _np.ndarray,
                           column: int, die: int) -> Tuple[_np.ndarray, _np.ndarray]:
    """
    Fill board_a's column with die, cancel every matching die from board_b's
    same column and compact it. Returns fresh copies of both boards.
    """
    new_a = board_a.copy()
    new_b = board_b.copy()
    new_a[column, :] = _place_in_column_nb(board_a[column], die)
    cancelled = new_b[column].copy()
    for i in range(cancelled.shape[0]):
        if cancelled[i] == die:
            cancelled[i] = EMPTY
    new_b[column, :] = _compact_nb(cancelled)
    return new_a, new_b

# ---------------------------
# Board primitives
# ---------------------------

def available_columns(board: _np.ndarray) -> List[int]:
    """Indices of columns with at least one empty slot, ascending."""
    return [c for c in range(N_COLUMNS) if _np.any(board[c] == EMPTY)]

def is_full(board: _np.ndarray) -> bool:
    return not _np.any(board == EMPTY)

def column_score(column: Sequence[int]) -> int:
    return int(_column_score_nb(_as_column(column)))

def total_score(board: _np.ndarray) -> int:
    return int(_total_score_nb(_as_board(board)))

def count_face(column: Sequence[int], die_value: int) -> int:
    return int(_count_face_nb(_as_column(column), int(die_value)))

def compact(column: Sequence[int]) -> _np.ndarray:
    return _compact_nb(_as_column(column))

def place_in_column(column: Sequence[int], die_value: int) -> _np.ndarray:
    """Copy of column with die_value in its lowest empty slot (unchanged copy if full)."""
    return _place_in_column_nb(_as_column(column), validate_die(die_value))

def simulate_placement(board_a: _np.ndarray, board_b: _np.ndarray,
                       column: int, die_value: int) -> Tuple[_np.ndarray, _np.ndarray]:
    """
    "Fill mine, cancel yours" as one step. Inputs are never mutated.

    In the copy of board_a the die goes into the lowest empty slot of column
    (no-op if it is full). In the copy of board_b every die equal to die_value
    in the same column is removed and that column is compacted.
    """
    if not (isinstance(column, Integral) and not isinstance(column, bool) and 0 <= column < N_COLUMNS):
        raise InvalidInput(f"column must be an integer 0..{N_COLUMNS - 1}, got {column!r}")
    die = validate_die(die_value)
    return _simulate_placement_nb(_as_board(board_a), _as_board(board_b), int(column), die)

# ---------------------------
# Numba warmup
# ---------------------------

def warmup():
    """Touch kernels once so they JIT before timing the real game."""
    a = new_board()
    b = new_board()
    a, b = simulate_placement(a, b, 0, 1)
    total_score(a)
    column_score(a[0])
    count_face(a[0], 1)
    compact(b[0])
    place_in_column(b[1], 2)

# ---------------------------
# Quick demo
# ---------------------------

if __name__ == "__main__":
    mine = to_board([[2, 2, None], [5, None, None], [None, None, None]])
    theirs = to_board([[2, 4, None], [None, None, None], [6, 6, 1]])
    print("Before:")
    print(format_board(mine))
    print(f"Score: {total_score(mine)}")
    mine, theirs = simulate_placement(mine, theirs, 0, 2)
    print("\nAfter placing a 2 in column 0:")
    print(format_board(mine))
    print(f"Score: {total_score(mine)}  Opponent column 0: {from_board(theirs)[0]}")
