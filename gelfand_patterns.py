"""
GELFAND PATTERN ROWS
====================

Compact representation of one row of a Gelfand pattern and the small set of
operations the reduction needs on it.

A row is stored as R = [r_L, ..., r_1, r_0]: entry k counts how many labels of
value (L - k) the row contains. For example the U(6) irrep [4,2,2,2,2,0] with
L = 4 is the row [1,0,4,0,1].

Key concepts:
- Canonical mask: bit (L - k) is set iff entry k is nonzero. Rows with the
  same nonzero positions share one mask (and one set of lowering steps).
- decode(mask) gives the canonical 0/1 representative of a mask, used to
  drive lowering-step generation.
"""

import numpy as np
from typing import Sequence, Tuple


# Maximum U(N) label L. Rows have L + 1 entries and there are 2^(L+1) masks.
MAXIMUM_UN_LABEL = 4


# =============================================================================
# CODEC
# =============================================================================

def encode(pattern: Sequence[int]) -> int:
    """
    Canonical mask of a row.

    Sets bit (L - k) for every position k whose entry is nonzero, where
    L = len(pattern) - 1. Magnitudes are discarded.
    """
    L = len(pattern) - 1
    mask = 0
    for k in range(L + 1):
        if pattern[k] != 0:
            mask |= 1 << (L - k)
    return mask


def decode(mask: int, max_label: int = MAXIMUM_UN_LABEL) -> np.ndarray:
    """
    Canonical 0/1 row for a mask.

    Not an inverse of encode() for arbitrary rows, only for 0/1 rows:
    encode(decode(m)) == m for every m in [0, 2^(L+1)).
    """
    pattern = np.zeros(max_label + 1, dtype=np.int64)
    for k in range(max_label + 1):
        pattern[k] = (mask >> (max_label - k)) & 0x01
    return pattern


def add(a: Sequence[int], b: Sequence[int]) -> np.ndarray:
    """Elementwise sum of two rows."""
    return np.asarray(a, dtype=np.int64) + np.asarray(b, dtype=np.int64)


def zero_pattern(max_label: int = MAXIMUM_UN_LABEL) -> np.ndarray:
    """The empty row (no particles left)."""
    return np.zeros(max_label + 1, dtype=np.int64)


def is_zero(pattern: Sequence[int]) -> bool:
    return not np.any(np.asarray(pattern))


def as_pattern(pattern: Sequence[int], max_label: int = MAXIMUM_UN_LABEL) -> np.ndarray:
    """
    Convert a list/tuple row into the int64 vector used internally.

    Rows longer than L + 1 are rejected; the cache has no lowering steps
    for them.
    """
    arr = np.asarray(pattern, dtype=np.int64)
    if arr.ndim != 1 or len(arr) != max_label + 1:
        raise ValueError(
            f"Row must have {max_label + 1} entries for L={max_label}, got {list(pattern)}"
        )
    return arr


# =============================================================================
# TEXT RENDERING
# =============================================================================

def pattern_to_string(pattern: Sequence[int]) -> str:
    """Human-readable row, e.g. '[1,0,4,0,1]'."""
    return "[" + ",".join(str(int(v)) for v in pattern) + "]"


def weight_to_string(weight: Tuple[int, int, int]) -> str:
    """Human-readable U(3) weight, e.g. '[4,2,0]'."""
    return f"[{weight[0]},{weight[1]},{weight[2]}]"
