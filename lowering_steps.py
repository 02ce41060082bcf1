"""
LOWERING-STEP CACHE
===================

Enumeration of every admissible way to lower one row of a Gelfand pattern
by one unit (one particle), precomputed for every canonical mask.

Key concepts:
- Only the nonzero positions of a row matter for which lowering steps are
  allowed, so steps are generated once per canonical mask (2^(L+1) masks).
- A lowering step is a delta vector: -1 at every nonzero position, plus +1
  at one position i in [first, second] for each pair of consecutive nonzero
  positions (first, second). This is the betweenness condition of Gelfand
  patterns written in the count representation, so every delta sums to -1.
- Number of deltas for a mask = product over consecutive nonzero pairs of
  (second - first + 1).
- Derived index of a delta = sum_k delta[k] * (L - k) * (-1), which is the
  label removed by the step and lies in [0, L]. The traversal multiplies it
  by the HO quanta of the removed state.

Storage mirrors a flat block layout: all deltas of all masks in one array,
with the first row and the row count of each mask kept alongside.
"""

import argparse
import numpy as np
from typing import List, Optional, Sequence, Tuple
from dataclasses import dataclass
from functools import lru_cache, reduce

from gelfand_patterns import (
    MAXIMUM_UN_LABEL, encode, decode, add, as_pattern, pattern_to_string,
)


# =============================================================================
# BRANCHING-RULE ENUMERATION
# =============================================================================

def nonzero_positions(pattern: Sequence[int]) -> List[int]:
    """Positions of nonzero entries in increasing order."""
    return [int(k) for k in np.flatnonzero(np.asarray(pattern))]


def _generate_rules_recursive(positions: List[int], j: int,
                              diff: np.ndarray, out: List[np.ndarray]) -> None:
    """
    Place one +1 between positions[j] and positions[j + 1], then recurse.

    diff is a shared working buffer: every increment is undone before the
    next candidate position is tried.
    """
    if j + 1 == len(positions):
        out.append(diff.copy())
        return

    first, second = positions[j], positions[j + 1]
    for i in range(first, second + 1):
        diff[i] += 1
        _generate_rules_recursive(positions, j + 1, diff, out)
        diff[i] -= 1


def generate_rules(pattern: Sequence[int]) -> List[np.ndarray]:
    """
    All lowering deltas for a (canonical) row.

    Returns an empty list for the empty row and the single negation delta
    for a row with exactly one nonzero position.
    """
    positions = nonzero_positions(pattern)
    if not positions:
        return []

    diff = -(np.asarray(pattern) != 0).astype(np.int64)

    rules: List[np.ndarray] = []
    _generate_rules_recursive(positions, 0, diff, rules)
    return rules


def derived_index(delta: Sequence[int]) -> int:
    """Label removed by a lowering step: sum_k delta[k] * (L - k) * (-1)."""
    delta = np.asarray(delta, dtype=np.int64)
    L = len(delta) - 1
    weights = L - np.arange(L + 1, dtype=np.int64)
    return int(-np.dot(delta, weights))


def expected_step_count(mask: int, max_label: int = MAXIMUM_UN_LABEL) -> int:
    """Product of (gap + 1) over consecutive nonzero positions of a mask."""
    positions = nonzero_positions(decode(mask, max_label))
    if not positions:
        return 0
    gaps = [b - a + 1 for a, b in zip(positions, positions[1:])]
    return reduce(lambda x, y: x * y, gaps, 1)


# =============================================================================
# CACHE
# =============================================================================

@dataclass(frozen=True, eq=False)
class LoweringSteps:
    """
    Read-only view of the lowering steps of one mask.

    Iterating yields (delta, index) pairs. The arrays are views into the
    cache storage and must not outlive the cache.
    """
    deltas: np.ndarray
    indices: np.ndarray

    def __len__(self) -> int:
        return len(self.indices)

    def __iter__(self):
        return zip(self.deltas, (int(i) for i in self.indices))

    def __repr__(self):
        return f"LoweringSteps(n={len(self)})"


class LoweringStepCache:
    """
    Lowering steps for every canonical mask, generated eagerly.

    The cache is never modified after construction, so one instance can be
    shared by any number of reductions.
    """

    def __init__(self, max_label: int = MAXIMUM_UN_LABEL, verbose: bool = False):
        """
        Build the full table.

        Args:
            max_label: Maximum U(N) label L (rows have L + 1 entries)
            verbose: Print a summary after generation
        """
        if max_label < 0:
            raise ValueError(f"max_label must be non-negative, got {max_label}")

        self.max_label = max_label
        self.n_masks = 1 << (max_label + 1)

        self._first = np.zeros(self.n_masks, dtype=np.int64)
        self._counts = np.zeros(self.n_masks, dtype=np.int64)

        deltas: List[np.ndarray] = []
        indices: List[int] = []

        for mask in range(self.n_masks):
            rules = generate_rules(decode(mask, max_label))

            self._first[mask] = len(deltas)
            self._counts[mask] = len(rules)

            for delta in rules:
                index = derived_index(delta)
                assert int(delta.sum()) == -1, \
                    f"Delta {pattern_to_string(delta)} does not remove exactly one unit"
                assert 0 <= index <= max_label, \
                    f"Derived index {index} of {pattern_to_string(delta)} outside [0, {max_label}]"
                deltas.append(delta)
                indices.append(index)

        self._differences = np.array(deltas, dtype=np.int64).reshape(-1, max_label + 1)
        self._indices = np.array(indices, dtype=np.int64)

        # Read-only after construction
        for arr in (self._differences, self._indices, self._first, self._counts):
            arr.flags.writeable = False

        if verbose:
            print(f"Lowering-step cache: L={max_label}, {self.n_masks} masks, "
                  f"{len(self._indices)} deltas")

    def lookup_by_mask(self, mask: int) -> LoweringSteps:
        """Lowering steps for a canonical mask (empty iff mask == 0)."""
        assert 0 <= mask < self.n_masks, f"Mask {mask} outside [0, {self.n_masks})"
        first = int(self._first[mask])
        count = int(self._counts[mask])
        return LoweringSteps(
            self._differences[first:first + count],
            self._indices[first:first + count],
        )

    def lookup_by_pattern(self, pattern: Sequence[int]) -> LoweringSteps:
        """Lowering steps for a row, via its canonical mask."""
        assert len(pattern) == self.max_label + 1, \
            f"Row {pattern_to_string(pattern)} has wrong length for L={self.max_label}"
        return self.lookup_by_mask(encode(pattern))

    @property
    def total_steps(self) -> int:
        return len(self._indices)

    def __len__(self) -> int:
        return self.n_masks

    def __repr__(self):
        return f"LoweringStepCache(L={self.max_label}, masks={self.n_masks}, deltas={self.total_steps})"


# =============================================================================
# INSPECTION HELPERS
# =============================================================================

def lower_patterns(cache: LoweringStepCache, pattern: Sequence[int]) -> List[np.ndarray]:
    """All rows reachable from a row in one lowering step."""
    pattern = np.asarray(pattern, dtype=np.int64)
    return [add(pattern, delta) for delta in cache.lookup_by_pattern(pattern).deltas]


def count_descent_paths(cache: LoweringStepCache, pattern: Sequence[int]) -> int:
    """
    Number of distinct step sequences from a row down to the empty row.

    For a U(N) top row this is the number of Gelfand patterns, i.e. the
    dimension of the irrep. Memoized per intermediate row.
    """

    @lru_cache(maxsize=None)
    def _count(row: Tuple[int, ...]) -> int:
        steps = cache.lookup_by_pattern(row)
        if len(steps) == 0:
            return 1
        arr = np.array(row, dtype=np.int64)
        return sum(_count(tuple(int(v) for v in arr + delta)) for delta in steps.deltas)

    return _count(tuple(int(v) for v in pattern))


# =============================================================================
# CACHE CORRECTNESS TESTS
# =============================================================================

def test_delta_sums(cache: LoweringStepCache, verbose: bool = False) -> bool:
    """Every delta of every mask removes exactly one unit."""
    all_passed = True
    for mask in range(cache.n_masks):
        for delta, _ in cache.lookup_by_mask(mask):
            if int(delta.sum()) != -1:
                if verbose:
                    print(f"FAIL: mask {mask}: sum({pattern_to_string(delta)}) = {int(delta.sum())}")
                all_passed = False
    return all_passed


def test_derived_index_range(cache: LoweringStepCache, verbose: bool = False) -> bool:
    """Every derived index lies in [0, L] and matches its delta."""
    all_passed = True
    for mask in range(cache.n_masks):
        for delta, index in cache.lookup_by_mask(mask):
            if not (0 <= index <= cache.max_label) or index != derived_index(delta):
                if verbose:
                    print(f"FAIL: mask {mask}: index {index} for {pattern_to_string(delta)}")
                all_passed = False
    return all_passed


def test_mask_round_trip(max_label: int = MAXIMUM_UN_LABEL, verbose: bool = False) -> bool:
    """encode(decode(m)) == m for every mask."""
    all_passed = True
    for mask in range(1 << (max_label + 1)):
        if encode(decode(mask, max_label)) != mask:
            if verbose:
                print(f"FAIL: encode(decode({mask})) = {encode(decode(mask, max_label))}")
            all_passed = False
    return all_passed


def test_step_counts(cache: LoweringStepCache, verbose: bool = False) -> bool:
    """Each mask has the product-of-gaps number of deltas."""
    all_passed = True
    for mask in range(cache.n_masks):
        expected = expected_step_count(mask, cache.max_label)
        found = len(cache.lookup_by_mask(mask))
        if expected != found:
            if verbose:
                print(f"FAIL: mask {mask}: {found} deltas, expected {expected}")
            all_passed = False
    return all_passed


def run_all_correctness_tests(max_labels: Optional[List[int]] = None, verbose: bool = True) -> bool:
    """
    Run the cache invariants for each L.

    Checks delta sums, derived index range, mask round trip and the number
    of deltas per mask.
    """
    if max_labels is None:
        max_labels = [1, 2, 3, MAXIMUM_UN_LABEL]

    if verbose:
        print("=" * 70)
        print("LOWERING-STEP CACHE CORRECTNESS TESTS")
        print("=" * 70)

    all_passed = True

    for L in max_labels:
        cache = LoweringStepCache(max_label=L)
        results = {
            'sums': test_delta_sums(cache, verbose=verbose),
            'index': test_derived_index_range(cache, verbose=verbose),
            'round trip': test_mask_round_trip(L, verbose=verbose),
            'counts': test_step_counts(cache, verbose=verbose),
        }
        passed = all(results.values())
        all_passed = all_passed and passed

        if verbose:
            status = "ALL PASSED ✓" if passed else \
                ", ".join(f"{k}={v}" for k, v in results.items())
            print(f"  L={L}: {cache.n_masks} masks, {cache.total_steps} deltas: {status}")

    return all_passed


# =============================================================================
# MAIN
# =============================================================================

def main(argv: Optional[List[str]] = None):
    """Print the one-step lower rows of a row and its number of descent paths."""
    parser = argparse.ArgumentParser(description="Lowering steps of a Gelfand-pattern row")
    parser.add_argument("row", type=int, nargs="*", default=[1, 0, 4, 0, 1],
                        help=f"Row entries r_L ... r_0 ({MAXIMUM_UN_LABEL + 1} integers)")
    parser.add_argument("--check", action="store_true", help="Run cache correctness tests")
    args = parser.parse_args(argv)

    if args.check:
        run_all_correctness_tests(verbose=True)
        print()

    row = as_pattern(args.row)
    cache = LoweringStepCache()

    print(f"Input: {pattern_to_string(row)}")
    for lower in lower_patterns(cache, row):
        print(f"   {pattern_to_string(lower)}")
    print(f"Count: {count_descent_paths(cache, row)}")


if __name__ == "__main__":
    main()
