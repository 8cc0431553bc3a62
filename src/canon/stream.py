"""Single-pass basis construction over a stream of values."""

import logging
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ProcessPoolExecutor

import numpy as np

from canon.basis import BasisStore
from canon.errors import PassCancelledError
from canon.oracle import DEFAULT_CACHE_MAX_WIDTH
from canon.space import VectorSpace

logger = logging.getLogger(__name__)


class StreamProcessor:
    """Drives one forward pass, offering every value to a fresh `BasisStore`.

    Args:
        space: The vector space of the stream's values.
        capacity: Optional rank cap below the dimension of the space.
        cache_max_width: Widest space for which the membership cache is kept.
        should_stop: Optional callable checked between insertion attempts. When it
            returns True the pass is aborted with `PassCancelledError`.
    """

    def __init__(
        self,
        space: VectorSpace | None = None,
        *,
        capacity: int | None = None,
        cache_max_width: int = DEFAULT_CACHE_MAX_WIDTH,
        should_stop: Callable[[], bool] | None = None,
    ):
        self.space = space or VectorSpace()
        self.capacity = capacity
        self.cache_max_width = cache_max_width
        self.should_stop = should_stop

    def new_store(self) -> BasisStore:
        return BasisStore(
            self.space, capacity=self.capacity, cache_max_width=self.cache_max_width
        )

    def run(self, stream: Iterable[int], *, start: int = 0) -> BasisStore:
        """Build the basis of `stream`.

        Args:
            stream: The values, in stream order.
            start: Position of the first value. Used when the stream is a shard of a
                longer one, so that recorded positions stay global.

        Returns:
            The basis, with the derivation position of each element.
        """
        store = self.new_store()
        count = 0
        for count, value in enumerate(stream, start=1):
            if self.should_stop is not None and self.should_stop():
                raise PassCancelledError(count - 1)
            store.try_insert(value, start + count - 1)
        logger.info("Processed %d values, final rank %d", count, store.rank)
        return store

    def run_bytes(self, data: bytes) -> BasisStore:
        """Unpack raw bytes into values of the configured width and run the pass."""
        return self.run(self.space.unpack(data).tolist())

    def _stop_requested(self) -> bool:
        return self.should_stop is not None and self.should_stop()

    def merge(self, stores: Iterable[BasisStore]) -> BasisStore:
        """Combine local bases into one by re-inserting their elements in order.

        When the local bases come from consecutive shards of a stream, taken in
        stream order, the result is exactly the basis a single pass would build.
        `should_stop` is checked before each re-insertion; the count on the
        resulting `PassCancelledError` is the number of elements re-inserted.
        """
        merged = self.new_store()
        consumed = 0
        for store in stores:
            for value, position in store:
                if self._stop_requested():
                    raise PassCancelledError(consumed)
                merged.try_insert(value, position)
                consumed += 1
        return merged

    def run_sharded(
        self,
        stream: Sequence[int] | np.ndarray,
        shard_size: int,
        *,
        max_workers: int | None = None,
    ) -> BasisStore:
        """Build local bases over fixed-size shards, then merge them.

        Args:
            stream: The values, in stream order.
            shard_size: Number of values per shard.
            max_workers: If greater than one, shards are processed in a process
                pool. Otherwise they are processed one after another.

        Raises:
            PassCancelledError: If `should_stop` fires. Shards processed in-process
                check it between values; pooled shards are checked as they
                complete. The count is the number of stream values consumed.
        """
        if shard_size <= 0:
            raise ValueError(f"shard_size must be positive, got {shard_size}")
        values = [self.space.check(v) for v in stream]
        starts = list(range(0, len(values), shard_size))
        shards = [values[s : s + shard_size] for s in starts]
        logger.info(
            "Building %d local bases of up to %d values", len(shards), shard_size
        )

        local: list[BasisStore] = []
        if max_workers is not None and max_workers > 1:
            with ProcessPoolExecutor(max_workers=max_workers) as pool:
                results = pool.map(
                    _run_shard,
                    [self.space] * len(shards),
                    [self.cache_max_width] * len(shards),
                    shards,
                    starts,
                )
                consumed = 0
                for shard, store in zip(shards, results):
                    if self._stop_requested():
                        raise PassCancelledError(consumed)
                    local.append(store)
                    consumed += len(shard)
        else:
            for shard, start in zip(shards, starts):
                try:
                    local.append(
                        _run_shard(
                            self.space,
                            self.cache_max_width,
                            shard,
                            start,
                            should_stop=self.should_stop,
                        )
                    )
                except PassCancelledError as exc:
                    raise PassCancelledError(start + exc.consumed) from exc
        if self._stop_requested():
            raise PassCancelledError(len(values))
        return self.merge(local)


def _run_shard(
    space: VectorSpace,
    cache_max_width: int,
    shard: list[int],
    start: int,
    should_stop: Callable[[], bool] | None = None,
) -> BasisStore:
    # Local bases are never capped: the cap applies to the merged result.
    processor = StreamProcessor(
        space, cache_max_width=cache_max_width, should_stop=should_stop
    )
    return processor.run(shard, start=start)


def extract_basis(
    data: bytes, space: VectorSpace | None = None, **kwargs
) -> BasisStore:
    """Build the basis of a byte string in one call."""
    return StreamProcessor(space, **kwargs).run_bytes(data)
