"""Binary persistence of a basis.

Layout, little-endian::

    b"CANON"                 magic, 5 bytes
    rank                     uint32
    elements                 rank values of width W, in the space's byte order
    positions                rank uint32 derivation positions

The width is not stored: readers must be given the same `VectorSpace` the
archive was written with. For 8-bit values this is byte-for-byte the layout of
the original CANON tool. The membership cache is never stored; it is rebuilt on
load.
"""

import logging
from pathlib import Path

import numpy as np

from canon.basis import BasisStore
from canon.errors import ArchiveError, InvalidInputError
from canon.space import VectorSpace

logger = logging.getLogger(__name__)

MAGIC = b"CANON"
_RANK = np.dtype("<u4")
_POSITION = np.dtype("<u4")


def read_input(path: str | Path) -> bytes:
    """Read a whole file into memory."""
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise InvalidInputError(f"Cannot read {path}: {exc}") from exc


def dumps(store: BasisStore) -> bytes:
    """Serialize a basis to bytes."""
    elements, positions = store.as_arrays()
    if positions.size and positions.max() > np.iinfo(_POSITION).max:
        raise ArchiveError(
            f"Derivation position {int(positions.max())} does not fit in 32 bits"
        )
    return b"".join(
        [
            MAGIC,
            np.array(store.rank, dtype=_RANK).tobytes(),
            store.space.pack(elements),
            positions.astype(_POSITION).tobytes(),
        ]
    )


def loads(
    data: bytes, space: VectorSpace | None = None, **kwargs
) -> BasisStore:
    """Deserialize a basis written by `dumps`.

    Args:
        data: The archive contents.
        space: The vector space the archive was written with.
        **kwargs: Forwarded to `BasisStore`.

    Raises:
        ArchiveError: If the data is not a well-formed archive for `space`.
    """
    space = space or VectorSpace()
    header_size = len(MAGIC) + _RANK.itemsize
    if len(data) < header_size or data[: len(MAGIC)] != MAGIC:
        raise ArchiveError("Not a CANON archive")

    rank = int(np.frombuffer(data, dtype=_RANK, count=1, offset=len(MAGIC))[0])
    if rank > space.dimension:
        raise ArchiveError(
            f"Archive declares rank {rank}, above the dimension {space.dimension} "
            f"of {space.width}-bit values"
        )
    elements_size = rank * space.value_bytes
    expected = header_size + elements_size + rank * _POSITION.itemsize
    if len(data) != expected:
        raise ArchiveError(
            f"Archive of rank {rank} should be {expected} bytes, got {len(data)}"
        )

    elements: list[int] = []
    positions: list[int] = []
    if rank:
        elements = np.frombuffer(
            data, dtype=space.dtype, count=rank, offset=header_size
        ).tolist()
        positions = np.frombuffer(
            data, dtype=_POSITION, count=rank, offset=header_size + elements_size
        ).tolist()
    try:
        return BasisStore.from_elements(elements, positions, space, **kwargs)
    except ValueError as exc:
        raise ArchiveError(f"Corrupt basis: {exc}") from exc


def save(path: str | Path, store: BasisStore) -> None:
    """Write a basis to `path`."""
    Path(path).write_bytes(dumps(store))
    logger.info("Saved basis of rank %d to %s", store.rank, path)


def load(path: str | Path, space: VectorSpace | None = None, **kwargs) -> BasisStore:
    """Read a basis from `path`."""
    store = loads(read_input(path), space, **kwargs)
    logger.info("Loaded basis of rank %d from %s", store.rank, path)
    return store
