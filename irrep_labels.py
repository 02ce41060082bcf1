"""
Irrep Labels and Analytic Dimensions

Conversions between U(N) irrep labels [f_1, ..., f_N] and the compact row
representation R = [r_L, ..., r_0], HO shell bookkeeping, and the closed-form
dimension formulas used to cross-check a reduction.
"""

from dataclasses import dataclass, field
from fractions import Fraction
from typing import List, Sequence, Tuple

from gelfand_patterns import MAXIMUM_UN_LABEL


# ─────────────────────────────────────────────────────────────────────────────
# HO Shell Bookkeeping
# ─────────────────────────────────────────────────────────────────────────────

def shell_particle_count(n: int) -> int:
    """Number of single-particle states in HO shell n: N = (n+1)(n+2)/2."""
    if n < 0:
        raise ValueError(f"Oscillator shell must be non-negative, got n={n}")
    return (n + 1) * (n + 2) // 2


def shell_from_particle_count(N: int) -> int:
    """Inverse of shell_particle_count()."""
    n = 0
    while shell_particle_count(n) < N:
        n += 1
    if shell_particle_count(n) != N:
        raise ValueError(f"N={N} is not (n+1)(n+2)/2 for any HO shell n")
    return n


# ─────────────────────────────────────────────────────────────────────────────
# Label Conversions
# ─────────────────────────────────────────────────────────────────────────────

def labels_from_representation(representation: Sequence[int]) -> List[int]:
    """
    Expand R = [r_L, ..., r_0] into non-increasing labels.

    Examples:
        [1, 0, 4, 0, 1] → [4, 2, 2, 2, 2, 0]
    """
    L = len(representation) - 1
    labels = []
    for k, count in enumerate(representation):
        labels.extend([L - k] * int(count))
    return labels


def representation_from_labels(labels: Sequence[int],
                               max_label: int = MAXIMUM_UN_LABEL) -> List[int]:
    """Count labels of each value into R = [r_L, ..., r_0]."""
    representation = [0] * (max_label + 1)
    for f in labels:
        if not 0 <= f <= max_label:
            raise ValueError(f"Label {f} outside [0, {max_label}]")
        representation[max_label - f] += 1
    return representation


# ─────────────────────────────────────────────────────────────────────────────
# Analytic Dimensions
# ─────────────────────────────────────────────────────────────────────────────

def un_irrep_dimension(labels: Sequence[int]) -> int:
    """
    Dimension of the U(N) irrep [f_1, ..., f_N].

    dim[f] = prod_{1 <= k < l <= N} (f_k - f_l + l - k) / (l - k),
    evaluated exactly with rational arithmetic.
    """
    N = len(labels)
    result = Fraction(1)
    for l in range(2, N + 1):
        for k in range(1, l):
            result *= Fraction(labels[k - 1] - labels[l - 1] + l - k, l - k)

    assert result.denominator == 1, f"Non-integral dimension {result} for {list(labels)}"
    return result.numerator


def u3_irrep_dimension(weight: Tuple[int, int, int]) -> int:
    """Dimension of the U(3) irrep [f1, f2, f3]."""
    f1, f2, f3 = weight
    return (f1 - f2 + 1) * (f1 - f3 + 2) * (f2 - f3 + 1) // 2


def su3_labels(weight: Tuple[int, int, int]) -> Tuple[int, int]:
    """Elliott SU(3) labels (λ, μ) = (f1 - f2, f2 - f3)."""
    f1, f2, f3 = weight
    return f1 - f2, f2 - f3


# ─────────────────────────────────────────────────────────────────────────────
# Reduction Request
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ReductionRequest:
    """A U(N) irrep in HO shell n, given by its row R = [r_L, ..., r_0]."""
    n: int
    representation: List[int]
    max_label: int = MAXIMUM_UN_LABEL
    particle_count: int = field(init=False)

    def __post_init__(self):
        self.representation = [int(r) for r in self.representation]
        self.particle_count = (self.n + 1) * (self.n + 2) // 2

    @property
    def labels(self) -> List[int]:
        return labels_from_representation(self.representation)

    def validate(self) -> List[str]:
        """Return list of issues (empty if valid)."""
        issues = []

        if self.n < 0:
            issues.append(f"HO shell must be non-negative, got n={self.n}")

        if len(self.representation) != self.max_label + 1:
            issues.append(
                f"Representation needs {self.max_label + 1} entries, "
                f"got {len(self.representation)}"
            )

        if any(r < 0 for r in self.representation):
            issues.append(f"Negative entries in representation {self.representation}")

        total = sum(self.representation)
        if total != self.particle_count:
            issues.append(
                f"Arguments mismatch! sum(R)={total} but n={self.n} "
                f"requires N=(n+1)(n+2)/2={self.particle_count}"
            )

        return issues
