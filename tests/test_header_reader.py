"""Tests for header_reader: synthetic 12-byte headers."""

import pytest

from chunk_builders import ChunkBuilder
from luac_chunk.errors import InvalidHeader, TooShort
from luac_chunk.models.constants import Endianness
from luac_chunk.parser.cursor_reader import CursorReader
from luac_chunk.parser.header_reader import read_header


def _read(data: bytes):
    return read_header(CursorReader(data))


def test_standard_x86_64_header():
    header = _read(ChunkBuilder().header())
    assert header.signature == 0x1B4C7561
    assert header.version == 0x51
    assert header.version_string == "5.1"
    assert header.format_version == 0
    assert header.endianness is Endianness.LITTLE
    assert header.int_size == 4
    assert header.size_t_size == 8
    assert header.instruction_size == 4
    assert header.number_size == 8
    assert header.integral is False


def test_header_configures_and_freezes_reader():
    reader = CursorReader(ChunkBuilder(little_endian=False, int_size=2, size_t_size=4).header())
    read_header(reader)
    assert reader.endianness is Endianness.BIG
    assert reader.integer_width == 2
    assert reader.size_width == 4
    assert reader.frozen
    assert reader.position == 12


def test_integral_header():
    header = _read(ChunkBuilder(integral=True, number_size=4).header())
    assert header.integral is True
    assert header.number_size == 4


@pytest.mark.parametrize("length", range(12))
def test_short_buffers_are_too_short(length):
    data = ChunkBuilder().header()[:length]
    with pytest.raises(TooShort) as excinfo:
        _read(data)
    assert excinfo.value.length == length


def test_too_short_is_checked_before_signature():
    with pytest.raises(TooShort):
        _read(b"NOPE")


def test_bad_signature():
    data = b"\x1bLuB" + ChunkBuilder().header()[4:]
    with pytest.raises(InvalidHeader, match="signature") as excinfo:
        _read(data)
    assert excinfo.value.reason == "signature"


def test_bad_signature_reported_before_other_fields():
    # Every later field is also invalid; the signature still wins.
    reader = CursorReader(b"\x7fELF" + b"\xff" * 8)
    with pytest.raises(InvalidHeader) as excinfo:
        read_header(reader)
    assert excinfo.value.reason == "signature"
    assert reader.position == 4


@pytest.mark.parametrize("version", [0x50, 0x52, 0x53, 0x00])
def test_unsupported_version(version):
    data = b"\x1bLua" + bytes([version]) + b"\xff" * 7
    with pytest.raises(InvalidHeader, match="unsupported version") as excinfo:
        _read(data)
    assert excinfo.value.value == version


def test_format_version_is_not_checked():
    header = _read(ChunkBuilder().header(format_version=7))
    assert header.format_version == 7


def test_bad_endianness():
    with pytest.raises(InvalidHeader) as excinfo:
        _read(ChunkBuilder().header(endianness=2))
    assert excinfo.value.reason == "endianness"


@pytest.mark.parametrize("int_size", [0, 17])
def test_bad_int_size(int_size):
    with pytest.raises(InvalidHeader) as excinfo:
        _read(ChunkBuilder().header(int_size=int_size))
    assert excinfo.value.reason == "int size"


def test_largest_widths_accepted():
    header = _read(ChunkBuilder().header(int_size=16, size_t_size=8))
    assert header.int_size == 16
    assert header.size_t_size == 8


@pytest.mark.parametrize("size_t_size", [0, 9])
def test_bad_size_t_size(size_t_size):
    with pytest.raises(InvalidHeader) as excinfo:
        _read(ChunkBuilder().header(size_t_size=size_t_size))
    assert excinfo.value.reason == "size_t size"


def test_bad_instruction_size():
    with pytest.raises(InvalidHeader) as excinfo:
        _read(ChunkBuilder().header(instruction_size=8))
    assert excinfo.value.reason == "instruction size"


def test_bad_integral_flag():
    with pytest.raises(InvalidHeader) as excinfo:
        _read(ChunkBuilder().header(integral=2))
    assert excinfo.value.reason == "integral flag"


@pytest.mark.parametrize("number_size, integral", [(6, 0), (0, 1), (9, 1)])
def test_bad_number_size(number_size, integral):
    with pytest.raises(InvalidHeader) as excinfo:
        _read(ChunkBuilder().header(number_size=number_size, integral=integral))
    assert excinfo.value.reason == "number size"


def test_header_error_message():
    with pytest.raises(InvalidHeader, match=r"malformed: endianness \(got 0x5\)"):
        _read(ChunkBuilder().header(endianness=5))
