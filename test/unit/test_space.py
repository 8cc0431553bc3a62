import numpy as np
import pytest

from canon.space import VectorSpace, add, leading_bit


@pytest.mark.parametrize("a", [0, 1, 0x5A, 0xFF])
@pytest.mark.parametrize("b", [0, 0x0F, 0xA5])
def test_add_group_laws(a, b):
    assert add(a, b) == add(b, a)
    assert add(a, 0) == a
    assert add(a, a) == 0
    assert add(add(a, b), 0x33) == add(a, add(b, 0x33))


@pytest.mark.parametrize(
    "v, expected",
    [(0, -1), (1, 0), (2, 1), (3, 1), (0x80, 7), (0xFF, 7), (1 << 40, 40)],
)
def test_leading_bit(v, expected):
    assert leading_bit(v) == expected


def test_space_properties():
    space = VectorSpace(16)
    assert space.dimension == 16
    assert space.size == 65536
    assert space.mask == 0xFFFF
    assert space.value_bytes == 2


@pytest.mark.parametrize("width", [0, 7, 12, 128])
def test_unsupported_width(width):
    with pytest.raises(ValueError):
        VectorSpace(width)


def test_invalid_byteorder():
    with pytest.raises(ValueError):
        VectorSpace(8, "middle")


def test_check_rejects_out_of_range():
    space = VectorSpace(8)
    assert space.check(np.uint8(200)) == 200
    with pytest.raises(ValueError):
        space.check(256)
    with pytest.raises(ValueError):
        space.check(-1)


def test_unpack_bytes():
    values = VectorSpace(8).unpack(b"\x01\x02\xff")
    assert values.tolist() == [1, 2, 255]


def test_unpack_multibyte_byteorder():
    data = b"\x01\x02\x03\x04"
    assert VectorSpace(16, "little").unpack(data).tolist() == [0x0201, 0x0403]
    assert VectorSpace(16, "big").unpack(data).tolist() == [0x0102, 0x0304]


def test_unpack_pads_partial_block():
    assert VectorSpace(32, "big").unpack(b"\xaa\xbb").tolist() == [0xAABB0000]
    assert VectorSpace(32, "little").unpack(b"\xaa\xbb").tolist() == [0xBBAA]


def test_unpack_empty():
    assert VectorSpace(16).unpack(b"").tolist() == []


@pytest.mark.parametrize("byteorder", ["little", "big"])
def test_pack_inverts_unpack(byteorder):
    space = VectorSpace(32, byteorder)
    data = bytes(range(16))
    assert space.pack(space.unpack(data)) == data
