import numpy as np
from galois import GF2


def to_bit_matrix(values, width: int) -> np.ndarray:
    """Unpack integers into rows of bits, least significant bit first."""
    values = [int(v) for v in values]
    return np.array(
        [[(v >> j) & 1 for j in range(width)] for v in values], dtype=np.uint8
    ).reshape(len(values), width)


def gf2_rank(values, width: int) -> int:
    """Rank of `values` over GF(2), computed independently with galois."""
    if len(values) == 0:
        return 0
    return int(np.linalg.matrix_rank(GF2(to_bit_matrix(values, width))))


def span(values) -> set[int]:
    """Enumerate every XOR combination of `values`."""
    out = {0}
    for v in values:
        out |= {s ^ int(v) for s in out}
    return out
