import numpy as np


def gen_stream(
    length: int,
    rank: int,
    width: int = 8,
    seed: int | None = None,
) -> list[int]:
    """Generate a random stream of `width`-bit values spanning a subspace of `rank`.

    Args:
        length: Number of values.
        rank: Dimension of the spanned subspace. Must not exceed `width`.
        width: Bits per value.
        seed: Random seed.

    Returns:
        The values. Every value is an XOR of `rank` independent generators, and each
        generator appears on its own somewhere in the stream, so the stream's span
        has exactly dimension `rank` (provided `length >= rank`).
    """
    assert 0 <= rank <= width
    rng = np.random.default_rng(seed)

    # Distinct leading bits make the generators independent.
    generators = []
    for bit in rng.permutation(width)[:rank]:
        low_bits = rng.integers(0, 2, size=int(bit))
        low = sum(1 << j for j, b in enumerate(low_bits) if b)
        generators.append((1 << int(bit)) | low)

    values = []
    for _ in range(length):
        picks = rng.integers(0, 2, size=rank)
        v = 0
        for g, pick in zip(generators, picks):
            if pick:
                v ^= g
        values.append(v)

    slots = rng.choice(length, size=min(rank, length), replace=False)
    for slot, g in zip(slots, generators):
        values[int(slot)] = g
    return values
