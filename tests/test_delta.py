import pytest

from lrzkit.delta import DeltaCoder


SAMPLE = bytes(range(256)) * 3 + b"lrzip delta filter sample data" * 7


@pytest.mark.parametrize("distance", [1, 2, 3, 4, 7, 16, 255, 256])
def test_round_trip(distance):
    encoded = DeltaCoder(distance).encode(SAMPLE)
    assert len(encoded) == len(SAMPLE)
    assert DeltaCoder(distance).decode(encoded) == SAMPLE


def test_distance_one_small_example():
    assert DeltaCoder(1).encode(bytes([1, 2, 3])) == bytes([1, 1, 1])


def test_first_bytes_unchanged_from_zero_state():
    encoded = DeltaCoder(4).encode(SAMPLE)
    assert encoded[:4] == SAMPLE[:4]


def test_periodic_data_encodes_to_zeros():
    data = b"abcd" * 20
    encoded = DeltaCoder(4).encode(data)
    assert encoded[4:] == bytes(len(data) - 4)


@pytest.mark.parametrize("distance", [1, 3, 8, 64])
@pytest.mark.parametrize("piece", [1, 2, 5, 100])
def test_chunked_encode_matches_whole(distance, piece):
    whole = DeltaCoder(distance).encode(SAMPLE)
    coder = DeltaCoder(distance)
    parts = b"".join(
        coder.encode(SAMPLE[start:start + piece]) for start in range(0, len(SAMPLE), piece)
    )
    assert parts == whole


@pytest.mark.parametrize("distance", [1, 3, 8, 64])
@pytest.mark.parametrize("piece", [1, 2, 5, 100])
def test_chunked_decode_matches_whole(distance, piece):
    encoded = DeltaCoder(distance).encode(SAMPLE)
    coder = DeltaCoder(distance)
    parts = b"".join(
        coder.decode(encoded[start:start + piece]) for start in range(0, len(encoded), piece)
    )
    assert parts == SAMPLE


def test_state_holds_last_bytes():
    coder = DeltaCoder(5)
    coder.encode(SAMPLE)
    assert coder.state == SAMPLE[-5:]


def test_reset_restores_initial_behaviour():
    coder = DeltaCoder(3)
    first = coder.encode(SAMPLE)
    coder.reset()
    assert coder.encode(SAMPLE) == first


def test_empty_input():
    coder = DeltaCoder(2)
    coder.encode(b"xy")
    assert coder.encode(b"") == b""
    assert coder.decode(b"") == b""
    assert coder.state == b"xy"


def test_accepts_bytearray():
    data = bytearray(b"hello world")
    assert DeltaCoder(2).decode(DeltaCoder(2).encode(data)) == bytes(data)


@pytest.mark.parametrize("distance", [0, -1, 257])
def test_invalid_distance(distance):
    with pytest.raises(ValueError):
        DeltaCoder(distance)