"""Vector space primitives for fixed-width values over GF(2)."""

from dataclasses import dataclass
from typing import Literal

import numpy as np

SUPPORTED_WIDTHS = (8, 16, 32, 64)

ByteOrder = Literal["little", "big"]


def add(a: int, b: int) -> int:
    """Vector addition over GF(2), i.e. bitwise XOR."""
    return a ^ b


def leading_bit(v: int) -> int:
    """Return the index of the highest set bit of `v`, or -1 if `v == 0`."""
    return v.bit_length() - 1


@dataclass(frozen=True)
class VectorSpace:
    """The space (GF(2))^W of W-bit values.

    Values are read from raw bytes in whole-byte blocks, so the width must be
    one of `SUPPORTED_WIDTHS`.

    Attributes:
        width: Number of bits per value. This is also the dimension of the space
            and thus the largest possible rank.
        byteorder: Byte order used when a value spans more than one byte.
    """

    width: int = 8
    byteorder: ByteOrder = "little"

    def __post_init__(self):
        if self.width not in SUPPORTED_WIDTHS:
            raise ValueError(
                f"width must be one of {SUPPORTED_WIDTHS}, got {self.width}"
            )
        if self.byteorder not in ("little", "big"):
            raise ValueError(f"Invalid byte order: {self.byteorder}")

    @property
    def dimension(self) -> int:
        return self.width

    @property
    def size(self) -> int:
        """Number of distinct values in the space."""
        return 1 << self.width

    @property
    def mask(self) -> int:
        return self.size - 1

    @property
    def value_bytes(self) -> int:
        return self.width // 8

    @property
    def dtype(self) -> np.dtype:
        """Numpy dtype of a single value, including the byte order."""
        prefix = "<" if self.byteorder == "little" else ">"
        return np.dtype(f"{prefix}u{self.value_bytes}")

    def check(self, value: int) -> int:
        """Return `value` as a plain int, raising if it lies outside the space."""
        value = int(value)
        if value < 0 or value > self.mask:
            raise ValueError(f"Value {value:#x} is not a {self.width}-bit vector")
        return value

    def unpack(self, data: bytes) -> np.ndarray:
        """Split raw bytes into W-bit values.

        A trailing partial block is zero-padded to a full value.

        Args:
            data: The raw input.

        Returns:
            Array of shape `(ceil(len(data) / value_bytes),)` in native byte order.
        """
        remainder = len(data) % self.value_bytes
        if remainder:
            data = bytes(data) + b"\x00" * (self.value_bytes - remainder)
        values = np.frombuffer(data, dtype=self.dtype)
        return values.astype(self.dtype.newbyteorder("="))

    def pack(self, values) -> bytes:
        """Serialize values into raw bytes, the inverse of `unpack` on full blocks."""
        return np.asarray(values, dtype=np.uint64).astype(self.dtype).tobytes()
