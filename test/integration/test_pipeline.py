import numpy as np
import pytest
from helpers.gen import gen_stream
from helpers.util import gf2_rank, span

from canon import archive
from canon.config import CanonConfig
from canon.space import VectorSpace
from canon.stream import StreamProcessor


@pytest.mark.parametrize("seed", [0, 1, 42])
@pytest.mark.parametrize("width", [8, 16])
def test_random_bytes_round_trip_through_archive(tmp_path, seed, width):
    rng = np.random.default_rng(seed)
    data = rng.integers(0, 256, size=4096, dtype=np.uint8).tobytes()
    config = CanonConfig(width=width)

    store = config.processor().run_bytes(data)
    values = config.space.unpack(data).tolist()
    assert store.rank == gf2_rank(values, width)

    path = tmp_path / "random.canon"
    archive.save(path, store)
    restored = archive.load(path, config.space)
    assert restored.elements == store.elements
    assert restored.positions == store.positions
    assert all(restored.contains(v) for v in values[:200])


@pytest.mark.parametrize("rank", [3, 20, 31])
def test_structured_stream_wide_space(rank):
    space = VectorSpace(32, "big")
    values = gen_stream(2000, rank=rank, width=32, seed=rank)
    data = space.pack(values)

    store = StreamProcessor(space).run_bytes(data)
    assert store.rank == rank
    assert not store.oracle.has_cache
    for value, position in store:
        assert values[position] == value


def test_low_rank_stream_spans_input():
    values = gen_stream(10000, rank=4, seed=9)
    store = StreamProcessor().run(values)
    assert store.rank == 4
    assert span(store.elements) == set(values) | {0}


def test_process_pool_shards_match_single_pass():
    values = gen_stream(3000, rank=8, seed=13)
    processor = StreamProcessor()
    single = processor.run(values)
    sharded = processor.run_sharded(values, 500, max_workers=2)
    assert sharded.elements == single.elements
    assert sharded.positions == single.positions
