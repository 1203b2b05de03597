"""
Bounded integer coefficient enumeration.

Every coefficient vector in ``[-L, L]**d`` is visited in lexicographic order
(most significant digit first).  The full product has ``(2L+1)**d`` members,
which overflows any fixed-width integer for large ``d``, so nothing here ever
materializes it: the numba kernel advances an odometer of ``d`` digits and
writes directly into a caller-owned buffer, stopping as soon as the buffer is
full.
"""

from __future__ import annotations

import itertools
from typing import Iterator, Tuple

import numpy as np
from numba import njit

from .basis import check_sum_limit


def count_coefficients(dimension: int, sum_limit: int) -> int:
    """Exact size of ``[-L, L]**d`` as a Python int (no overflow)."""
    if dimension <= 0:
        return 0
    return (2 * int(sum_limit) + 1) ** int(dimension)


def iter_coefficients(dimension: int, sum_limit: int) -> Iterator[Tuple[int, ...]]:
    """Lazily yield every coefficient vector as a tuple, in reference order."""
    limit = check_sum_limit(sum_limit)
    if dimension <= 0:
        return iter(())
    return itertools.product(range(-limit, limit + 1), repeat=int(dimension))


def start_state(dimension: int, sum_limit: int) -> np.ndarray:
    """Odometer positioned on the first vector ``(-L, ..., -L)``."""
    return np.full(int(dimension), -int(sum_limit), dtype=np.int64)


@njit(cache=True)
def fill_coefficients(state: np.ndarray, limit: int, out: np.ndarray) -> Tuple[int, bool]:
    """
    Copy successive odometer readings into ``out`` and advance ``state``.

    Returns ``(written, exhausted)``.  ``exhausted`` is True once the last
    vector ``(L, ..., L)`` has been written; ``state`` is then meaningless.
    """
    n_rows = out.shape[0]
    d = state.shape[0]
    written = 0
    while written < n_rows:
        for k in range(d):
            out[written, k] = state[k]
        written += 1

        k = d - 1
        while k >= 0:
            if state[k] < limit:
                state[k] += 1
                break
            state[k] = -limit
            k -= 1
        if k < 0:
            return written, True
    return written, False


class CoefficientStream:
    """
    Resumable, chunked view of ``[-L, L]**d`` capped at ``budget`` vectors.

    ``next_chunk`` returns int64 arrays of at most ``chunk_size`` rows until
    either the product or the budget runs out.
    """

    def __init__(self, dimension: int, sum_limit: int, budget: int):
        self.dimension = int(dimension)
        self.sum_limit = check_sum_limit(sum_limit)
        self.total = count_coefficients(self.dimension, self.sum_limit)
        self.target = min(self.total, int(budget))
        self.produced = 0
        self._state = start_state(self.dimension, self.sum_limit)
        self._exhausted = self.target == 0

    @property
    def done(self) -> bool:
        return self._exhausted or self.produced >= self.target

    def next_chunk(self, chunk_size: int) -> np.ndarray:
        if self.done:
            return np.empty((0, self.dimension), dtype=np.int64)
        rows = min(int(chunk_size), self.target - self.produced)
        buf = np.empty((rows, self.dimension), dtype=np.int64)
        written, exhausted = fill_coefficients(self._state, self.sum_limit, buf)
        self.produced += written
        self._exhausted = exhausted
        return buf[:written]


def enumerate_coefficients(dimension: int, sum_limit: int, budget: int) -> np.ndarray:
    """Return the first ``min(budget, (2L+1)**d)`` coefficient vectors."""
    stream = CoefficientStream(dimension, sum_limit, budget)
    if stream.target == 0:
        return np.empty((0, stream.dimension), dtype=np.int64)
    return stream.next_chunk(stream.target)


__all__ = [
    "count_coefficients",
    "iter_coefficients",
    "fill_coefficients",
    "CoefficientStream",
    "enumerate_coefficients",
]
