import pytest
from dsstore import ByteCursor, FormatError, InsufficientData, OutOfRange


def test_reads_big_endian_integers():
    cursor = ByteCursor(b"\x01\x02\x00\x00\x01\x00\xff\xff\xff\xfe")
    assert cursor.read_uint16() == 0x0102
    assert cursor.read_uint32() == 0x100
    assert cursor.read_int32() == -2
    assert cursor.remaining == 0


def test_read_past_end_raises_insufficient_data():
    cursor = ByteCursor(b"\x00\x00\x01")
    with pytest.raises(InsufficientData) as excinfo:
        cursor.read_uint32()
    assert excinfo.value.offset == 0
    # A failed read does not move the cursor
    assert cursor.position == 0
    assert cursor.read_uint16() == 0


def test_read_text16():
    cursor = ByteCursor("héllo".encode("utf-16-be"))
    assert cursor.read_text16(5) == "héllo"


def test_read_text16_rejects_unpaired_surrogate():
    with pytest.raises(FormatError):
        ByteCursor(b"\xd8\x00").read_text16(1)


def test_read_tag_is_raw_bytes():
    assert ByteCursor(b"\x00\xffab").read_tag() == b"\x00\xffab"


def test_seek():
    cursor = ByteCursor(b"abcdef")
    cursor.seek(4)
    assert cursor.read_bytes(2) == b"ef"
    cursor.seek(6)
    assert cursor.remaining == 0


def test_seek_past_end_raises_out_of_range():
    cursor = ByteCursor(b"abc")
    with pytest.raises(OutOfRange) as excinfo:
        cursor.seek(4)
    assert excinfo.value.offset == 4
    assert isinstance(excinfo.value, InsufficientData)
