"""
Harmonic-oscillator quanta table.

For a shell n the single-particle states are the triples (nz, nx, ny) with
nz + nx + ny = n; there are (n+1)(n+2)/2 of them. The enumeration order is
fixed (k = 0..n, nx = k..0, nz = n - k, ny = k - nx) because the reduction
indexes the table by "remaining particle count - 1".
"""

import numpy as np
from typing import Optional, Tuple


AXES = ('z', 'x', 'y')


class HOQuantaTable:
    """Ordered (nz, nx, ny) triples of one oscillator shell."""

    def __init__(self, n: Optional[int] = None):
        self.n = None
        self._table = np.zeros((3, 0), dtype=np.int64)
        if n is not None:
            self.generate(n)

    def generate(self, n: int) -> None:
        """
        Rebuild the table for shell n.

        Args:
            n: Oscillator shell index (n >= 0)
        """
        if n < 0:
            raise ValueError(f"Oscillator shell must be non-negative, got n={n}")

        nz, nx, ny = [], [], []
        for k in range(n + 1):
            for x in range(k, -1, -1):
                nz.append(n - k)
                nx.append(x)
                ny.append(k - x)

        self._table = np.array([nz, nx, ny], dtype=np.int64)
        self._table.flags.writeable = False
        self.n = n

    @property
    def size(self) -> int:
        """Number of single-particle states, (n+1)(n+2)/2."""
        return self._table.shape[1]

    @property
    def table(self) -> np.ndarray:
        """(3, size) array, rows in axis order z, x, y."""
        return self._table

    def column(self, state: int) -> np.ndarray:
        return self._table[:, state]

    def quanta(self, state: int) -> Tuple[int, int, int]:
        nz, nx, ny = self._table[:, state]
        return int(nz), int(nx), int(ny)

    def __len__(self) -> int:
        return self.size

    def __repr__(self):
        return f"HOQuantaTable(n={self.n}, states={self.size})"
