"""
U(N) → U(3) REDUCTION
=====================

Reduction of a U(N) irrep, N = (n+1)(n+2)/2 for HO shell n, into U(3) irreps.

Method:
- Walk every Gelfand pattern of the input irrep row by row. Each lowering
  step removes one particle; the removed label (derived index of the step)
  times the HO quanta (nz, nx, ny) of that particle's state is added to a
  running U(3) weight.
- Each completed descent (empty row reached) adds one to the multiplicity
  of its final weight.
- Level dimensionality of a dominant weight [f1, f2, f3] (the number of
  times the U(3) irrep [f1, f2, f3] occurs) follows from the weight
  multiplicities by a six-term alternating sum.

Validation target: [4,2,2,2,2,0] in n=2 (R = [1,0,4,0,1], N=6) gives
sum D_l * dim[f1,f2,f3] = 405 = dim of the U(6) irrep.

Usage:
    python u3_reduction.py                 # [4,2,2,2,2,0], n=2
    python u3_reduction.py 2 1 0 4 0 1     # n r4 r3 r2 r1 r0
    python u3_reduction.py 3 1 0 0 0 9 --time
"""

import argparse
import time
import numpy as np
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from gelfand_patterns import (
    MAXIMUM_UN_LABEL, as_pattern, is_zero, pattern_to_string, weight_to_string,
)
from lowering_steps import LoweringStepCache
from ho_quanta import HOQuantaTable
from irrep_labels import (
    ReductionRequest, un_irrep_dimension, u3_irrep_dimension, su3_labels,
)


U3Weight = Tuple[int, int, int]

# (shift of (f1, f2, f3), sign) terms of the level-dimensionality formula
LEVEL_DIMENSIONALITY_TERMS = (
    ((0, 0, 0), +1),
    ((1, 1, -2), +1),
    ((2, -1, -1), +1),
    ((2, 0, -2), -1),
    ((1, -1, 0), -1),
    ((0, 1, -1), -1),
)


@dataclass
class U3Irrep:
    """A U(3) irrep occurring in a reduction."""
    weight: U3Weight
    multiplicity: int   # level dimensionality D_l
    dimension: int      # dim of the U(3) irrep

    @property
    def su3(self) -> Tuple[int, int]:
        return su3_labels(self.weight)

    def __repr__(self):
        return f"U3Irrep({weight_to_string(self.weight)}, D_l={self.multiplicity})"


class UNtoU3:
    """
    U(N) → U(3) reduction context.

    Owns the HO quanta table and the multiplicity map of the last reduction;
    the lowering-step cache is read-only and may be shared.
    """

    def __init__(self, cache: Optional[LoweringStepCache] = None):
        """
        Args:
            cache: Shared lowering-step cache (built with MAXIMUM_UN_LABEL if None)
        """
        self.cache = cache if cache is not None else LoweringStepCache()
        self.quanta = HOQuantaTable()
        self._mult_map: Dict[U3Weight, int] = {}

    # ─────────────────────────────────────────────────────────────────────
    # Weight generation
    # ─────────────────────────────────────────────────────────────────────

    def generate_xyz(self, n: int) -> None:
        """Generate the HO quanta of shell n (must precede the reduction)."""
        self.quanta.generate(n)

    def reduce(self, pattern: Sequence[int], remaining_count: int,
               running_weight: Sequence[int] = (0, 0, 0)) -> None:
        """
        Accumulate all descents from a row into the multiplicity map.

        Args:
            pattern: Current row
            remaining_count: Particles left in the row (sum of its entries)
            running_weight: U(3) weight accumulated on the way to this row
        """
        pattern = np.asarray(pattern, dtype=np.int64)

        if is_zero(pattern):
            key = (int(running_weight[0]), int(running_weight[1]), int(running_weight[2]))
            self._mult_map[key] = self._mult_map.get(key, 0) + 1
            return

        assert 1 <= remaining_count <= self.quanta.size, \
            f"No HO state for particle {remaining_count} (shell has {self.quanta.size})"

        steps = self.cache.lookup_by_pattern(pattern)

        # Weight contribution of each step: index * (nz, nx, ny) of the removed state
        lowers = pattern + steps.deltas
        increments = np.outer(steps.indices, self.quanta.column(remaining_count - 1))
        running = np.asarray(running_weight, dtype=np.int64)

        for lower, increment in zip(lowers, increments):
            self.reduce(lower, remaining_count - 1, running + increment)

    def generate_u3_weights(self, pattern: Sequence[int], particle_count: int) -> Dict[U3Weight, int]:
        """
        Reduce a U(N) top row into U(3) weight multiplicities.

        Resets the multiplicity map. The quanta table must have been generated
        for the shell with (n+1)(n+2)/2 == particle_count.

        Returns:
            Multiplicity map {(f1, f2, f3): count}
        """
        pattern = as_pattern(pattern, self.cache.max_label)

        assert int(pattern.sum()) == particle_count, \
            f"Row {pattern_to_string(pattern)} holds {int(pattern.sum())} particles, not {particle_count}"
        assert self.quanta.size == particle_count, \
            f"Quanta table has {self.quanta.size} states (n={self.quanta.n}), " \
            f"reduction needs {particle_count}; call generate_xyz() first"

        self._mult_map = {}
        self.reduce(pattern, particle_count)
        return self._mult_map

    @property
    def mult_map(self) -> Dict[U3Weight, int]:
        """Weight multiplicities of the last reduction."""
        return self._mult_map

    # ─────────────────────────────────────────────────────────────────────
    # Level dimensionality
    # ─────────────────────────────────────────────────────────────────────

    def level_dimensionality(self, weight: Sequence[int]) -> int:
        """
        Multiplicity of the U(3) irrep [f1, f2, f3] in the last reduction.

        Returns 0 for non-dominant weights (f1 < f2 or f2 < f3).
        """
        f1, f2, f3 = (int(w) for w in weight)

        if f1 < f2 or f2 < f3:
            return 0

        assert (f1, f2, f3) in self._mult_map, \
            f"Weight {weight_to_string((f1, f2, f3))} was not generated by the reduction"

        result = 0
        for (d1, d2, d3), sign in LEVEL_DIMENSIONALITY_TERMS:
            result += sign * self._mult_map.get((f1 + d1, f2 + d2, f3 + d3), 0)
        return result

    def u3_irreps(self) -> List[U3Irrep]:
        """U(3) irreps with nonzero level dimensionality, highest weight first."""
        irreps = []
        for weight in sorted(self._mult_map, reverse=True):
            D_l = self.level_dimensionality(weight)
            if D_l:
                irreps.append(U3Irrep(weight, D_l, u3_irrep_dimension(weight)))
        return irreps

    def total_dimension(self) -> int:
        """sum D_l * dim[f1, f2, f3]; equals dim of the U(N) irrep."""
        return sum(irrep.multiplicity * irrep.dimension for irrep in self.u3_irreps())

    def __repr__(self):
        return f"UNtoU3(L={self.cache.max_label}, n={self.quanta.n}, weights={len(self._mult_map)})"


# =============================================================================
# HIGH-LEVEL API
# =============================================================================

@dataclass
class ReductionResult:
    """Outcome of reducing one U(N) irrep."""
    request: ReductionRequest
    mult_map: Dict[U3Weight, int]
    irreps: List[U3Irrep]
    un_dimension: int
    elapsed: float = 0.0

    @property
    def total_dimension(self) -> int:
        return sum(irrep.multiplicity * irrep.dimension for irrep in self.irreps)

    @property
    def consistent(self) -> bool:
        return self.total_dimension == self.un_dimension


def reduce_irrep(request: ReductionRequest,
                 cache: Optional[LoweringStepCache] = None,
                 verbose: bool = False) -> ReductionResult:
    """
    Validate a request and run the full reduction.

    Raises:
        ValueError: If the request is inconsistent (see ReductionRequest.validate)
    """
    issues = request.validate()
    if issues:
        raise ValueError("; ".join(issues))

    gen = UNtoU3(cache)
    gen.generate_xyz(request.n)

    start = time.perf_counter()
    mult_map = gen.generate_u3_weights(request.representation, request.particle_count)
    elapsed = time.perf_counter() - start

    if verbose:
        print(f"Reduced {pattern_to_string(request.representation)} (n={request.n}): "
              f"{len(mult_map)} weights, {sum(mult_map.values())} paths in {elapsed:.3f} s")

    return ReductionResult(
        request=request,
        mult_map=dict(mult_map),
        irreps=gen.u3_irreps(),
        un_dimension=un_irrep_dimension(request.labels),
        elapsed=elapsed,
    )


# =============================================================================
# MAIN
# =============================================================================

def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="U(N) to U(3) reduction",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("n", type=int, nargs="?", default=2, help="HO shell n")
    parser.add_argument("row", type=int, nargs="*", default=[1, 0, 4, 0, 1],
                        help=f"Representation r_{MAXIMUM_UN_LABEL} ... r_0")
    parser.add_argument("--time", action="store_true", help="Print weight generation time")
    parser.add_argument("--all-weights", action="store_true", help="Print raw weight multiplicities")
    args = parser.parse_args(argv)

    request = ReductionRequest(args.n, args.row)
    result = reduce_irrep(request)

    print(f"U(N) irrep dim = {result.un_dimension}")

    if args.time:
        print(f"U3 weights generation time: {result.elapsed} [s]")

    if args.all_weights:
        for weight in sorted(result.mult_map, reverse=True):
            print(f"  {weight_to_string(weight)} : {result.mult_map[weight]}")

    for irrep in result.irreps:
        print(f"{weight_to_string(irrep.weight)} : {irrep.multiplicity}")

    print(f"U(3) irreps total dim = {result.total_dimension}")


if __name__ == "__main__":
    main()
