"""The growing basis of a stream, in discovery order."""

import logging
from collections.abc import Iterable

import numpy as np

from canon.errors import CapacityExceededError
from canon.oracle import DEFAULT_CACHE_MAX_WIDTH, SpanOracle, reduce
from canon.space import VectorSpace, add, leading_bit

logger = logging.getLogger(__name__)


class BasisStore:
    """Append-only collection of linearly independent values.

    Two views of the same span are kept side by side:

    - `elements` / `positions`: the values exactly as they were observed, in the
      order they were found independent, together with the stream position of
      each. This is what gets persisted and reported.
    - `rows` / `pivots`: the same span in reduced row-echelon form, so that a
      single scan decides membership. Row `i` is `elements[i]` reduced against
      the other rows; its pivot is its leading bit and is clear in all other rows.

    Args:
        space: The vector space the values live in.
        capacity: Largest rank the store accepts. Defaults to the dimension of the
            space, which no independent set can exceed.
        cache_max_width: Widest space for which the membership cache is kept.
    """

    def __init__(
        self,
        space: VectorSpace | None = None,
        *,
        capacity: int | None = None,
        cache_max_width: int = DEFAULT_CACHE_MAX_WIDTH,
    ):
        self.space = space or VectorSpace()
        if capacity is None:
            capacity = self.space.dimension
        if not 0 <= capacity <= self.space.dimension:
            raise ValueError(
                f"capacity must be between 0 and {self.space.dimension}, got {capacity}"
            )
        self.capacity = capacity
        self.oracle = SpanOracle(self.space, cache_max_width=cache_max_width)
        self._elements: list[int] = []
        self._positions: list[int] = []
        self._rows: list[int] = []
        self._pivots: list[int] = []

    @classmethod
    def from_elements(
        cls,
        elements: Iterable[int],
        positions: Iterable[int],
        space: VectorSpace | None = None,
        **kwargs,
    ) -> "BasisStore":
        """Rebuild a store from a persisted basis.

        The reduced rows and the membership cache are recomputed; only the values
        and positions are trusted.

        Raises:
            ValueError: If lengths differ or the elements are linearly dependent.
        """
        elements = list(elements)
        positions = list(positions)
        if len(elements) != len(positions):
            raise ValueError(
                f"Got {len(elements)} basis elements but {len(positions)} positions"
            )
        store = cls(space, **kwargs)
        for x, position in zip(elements, positions):
            if not store.try_insert(x, position):
                raise ValueError(
                    f"Basis element {int(x):#x} at position {position} is linearly "
                    "dependent on the elements before it"
                )
        return store

    @property
    def rank(self) -> int:
        return len(self._elements)

    @property
    def elements(self) -> tuple[int, ...]:
        return tuple(self._elements)

    @property
    def positions(self) -> tuple[int, ...]:
        return tuple(self._positions)

    @property
    def rows(self) -> tuple[int, ...]:
        return tuple(self._rows)

    @property
    def pivots(self) -> tuple[int, ...]:
        return tuple(self._pivots)

    @property
    def is_full(self) -> bool:
        return self.rank >= self.capacity

    def __len__(self) -> int:
        return self.rank

    def __iter__(self):
        return iter(zip(self._elements, self._positions))

    def __repr__(self) -> str:
        return (
            f"BasisStore(width={self.space.width}, rank={self.rank}, "
            f"elements={[hex(x) for x in self._elements]})"
        )

    def contains(self, x: int) -> bool:
        """Check whether `x` is in the span of the basis."""
        x = self.space.check(x)
        return self.oracle.contains(x, self._rows, self._pivots)

    def try_insert(self, x: int, position: int) -> bool:
        """Insert `x` if it is linearly independent of the current basis.

        Args:
            x: The candidate value.
            position: Stream position of `x`, recorded if it is inserted.

        Returns:
            True if `x` was appended to the basis, False if it was already in the span.

        Raises:
            CapacityExceededError: If `x` is independent but the basis is full.
        """
        x = self.space.check(x)
        position = int(position)
        if position < 0:
            raise ValueError(f"position must be nonnegative, got {position}")

        if self.oracle.is_cached(x):
            return False
        residue = reduce(x, self._rows, self._pivots)
        if residue == 0:
            return False
        if self.rank >= self.capacity:
            raise CapacityExceededError(x, position, self.capacity)

        pivot = leading_bit(residue)
        for i, row in enumerate(self._rows):
            if (row >> pivot) & 1:
                self._rows[i] = add(row, residue)
        self._rows.append(residue)
        self._pivots.append(pivot)

        self.oracle.extend(x, self._elements)
        self._elements.append(x)
        self._positions.append(position)
        logger.debug(
            "Inserted %#x at position %d (pivot %d, rank %d)",
            x,
            position,
            pivot,
            self.rank,
        )
        return True

    def as_arrays(self) -> tuple[np.ndarray, np.ndarray]:
        """Return `(elements, positions)` as numpy arrays."""
        return (
            np.array(self._elements, dtype=np.uint64),
            np.array(self._positions, dtype=np.int64),
        )
