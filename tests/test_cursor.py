"""Tests for the byte cursor and VLQ coding."""

import pytest

from chiptune.cursor import ByteCursor, encode_vlq
from chiptune.errors import UnexpectedEndOfData


def test_big_endian_reads():
    cursor = ByteCursor(bytes([0x12, 0x34, 0x56, 0x78, 0x9A, 0xBC, 0xDE]))
    assert cursor.read_u8() == 0x12
    assert cursor.read_u16_be() == 0x3456
    assert cursor.read_u32_be() == 0x789ABCDE
    assert cursor.position == 7
    assert not cursor.has_more()


@pytest.mark.parametrize("data, value", [
    (b"\x00", 0),
    (b"\x7f", 127),
    (b"\x81\x00", 128),
    (b"\x83\x60", 480),
    (b"\xc0\x00", 0x2000),
    (b"\xff\xff\xff\x7f", 0x0FFFFFFF),
])
def test_read_vlq_known_encodings(data, value):
    cursor = ByteCursor(data)
    assert cursor.read_vlq() == value
    assert cursor.position == len(data)


@pytest.mark.parametrize("value", [0, 1, 127, 128, 16383, 16384, 2_097_151, 2_097_152, 2**28 - 1])
def test_vlq_round_trip(value):
    assert ByteCursor(encode_vlq(value)).read_vlq() == value


def test_encode_vlq_rejects_negative():
    with pytest.raises(ValueError):
        encode_vlq(-1)


def test_read_past_end_does_not_move():
    cursor = ByteCursor(b"\x01\x02\x03")
    cursor.skip(2)
    with pytest.raises(UnexpectedEndOfData):
        cursor.read_u16_be()
    assert cursor.position == 2


def test_unterminated_vlq_rewinds():
    cursor = ByteCursor(b"\x81\x82")
    with pytest.raises(UnexpectedEndOfData):
        cursor.read_vlq()
    assert cursor.position == 0


def test_window_limits_reads():
    cursor = ByteCursor(b"\x01\x02\x03\x04")
    cursor.skip(1)
    body = cursor.window(2)
    assert body.read_u16_be() == 0x0203
    assert not body.has_more()
    with pytest.raises(UnexpectedEndOfData):
        body.read_u8()
    assert cursor.position == 1


def test_window_is_clamped_to_buffer():
    body = ByteCursor(b"\x01\x02").window(100)
    assert body.end == 2
