"""Span membership testing over a basis kept in reduced row-echelon form."""

import logging
from collections.abc import Iterable, Sequence

import numpy as np

from canon.space import VectorSpace, add

logger = logging.getLogger(__name__)

DEFAULT_CACHE_MAX_WIDTH = 16
# Ceiling on the cache table size: 2**24 entries.
MAX_CACHE_WIDTH = 24


def reduce(x: int, rows: Sequence[int], pivots: Sequence[int]) -> int:
    """Reduce `x` against a basis in reduced row-echelon form.

    Every row must have a unique pivot (its leading bit) that is clear in all
    other rows. Under that invariant one scan in any order is a complete
    Gaussian elimination.

    Args:
        x: The value to reduce.
        rows: Reduced basis rows.
        pivots: Pivot bit index of each row.

    Returns:
        The residue. It is zero iff `x` lies in the span of `rows`.
    """
    residue = x
    for row, pivot in zip(rows, pivots):
        if (residue >> pivot) & 1:
            residue = add(residue, row)
    return residue


def is_in_span(x: int, rows: Sequence[int], pivots: Sequence[int]) -> bool:
    """Check whether `x` is an XOR combination of `rows`."""
    return reduce(x, rows, pivots) == 0


class SpanOracle:
    """Answers span membership queries, with a value-indexed reachability cache.

    The cache is derived state: entry `v` is True only if `v` has been proven
    to be in the span of the basis elements registered via `extend`. A False
    entry means "unknown" and falls back to the full reduction.

    For spaces wider than `cache_max_width` bits, or than `MAX_CACHE_WIDTH` bits
    whatever the setting, the table would not fit in memory, so no cache is kept
    and every query runs the reduction.
    """

    def __init__(
        self, space: VectorSpace, cache_max_width: int = DEFAULT_CACHE_MAX_WIDTH
    ):
        self.space = space
        self.cache: np.ndarray | None = None
        if space.width <= min(cache_max_width, MAX_CACHE_WIDTH):
            self.cache = np.zeros(space.size, dtype=np.bool_)
            # The empty combination.
            self.cache[0] = True
            self._index = np.arange(space.size, dtype=np.min_scalar_type(space.mask))

    @property
    def has_cache(self) -> bool:
        return self.cache is not None

    def is_cached(self, x: int) -> bool:
        return self.cache is not None and bool(self.cache[x])

    def contains(self, x: int, rows: Sequence[int], pivots: Sequence[int]) -> bool:
        """Check span membership, consulting the cache before reducing."""
        if self.is_cached(x):
            return True
        return is_in_span(x, rows, pivots)

    def extend(self, x: int, elements: Iterable[int]) -> None:
        """Record that `x` has just joined a basis whose other elements are `elements`.

        Marks `x` and `add(b, x)` for every existing element `b`, then closes the
        cache over the new span: every value reachable before, XORed with `x`,
        is reachable now.
        """
        if self.cache is None:
            return
        self.cache[x] = True
        for b in elements:
            self.cache[add(b, x)] = True
        self.cache |= self.cache[self._index ^ x]
        logger.debug(
            "Cache extended by %#x; %d values reachable", x, int(self.cache.sum())
        )

    def rebuild(self, elements: Iterable[int]) -> None:
        """Recompute the cache from scratch for the given basis elements."""
        if self.cache is None:
            return
        self.cache[:] = False
        self.cache[0] = True
        seen: list[int] = []
        for x in elements:
            self.extend(x, seen)
            seen.append(x)

    def reachable(self) -> np.ndarray:
        """Return the sorted array of values currently marked reachable."""
        if self.cache is None:
            raise ValueError(
                f"No membership cache is kept for {self.space.width}-bit values"
            )
        return np.flatnonzero(self.cache)
