"""Decode and validate the 12-byte Lua 5.1 chunk header.

Layout (offsets from the start of the chunk):
  0  4  signature       1B 4C 75 61 ("\\x1bLua")
  4  1  version         0x51
  5  1  format version  unchecked
  6  1  endianness      0 = big, 1 = little
  7  1  sizeof(int)     1..16
  8  1  sizeof(size_t)  1..8
  9  1  sizeof(Instruction)  4
  10 1  sizeof(lua_Number)
  11 1  integral flag   0 = floating point, 1 = integer

Fields are read strictly in order, and the reader is configured as soon as
each width or byte-order field is known.
"""

import logging

from luac_chunk.errors import InvalidHeader, TooShort
from luac_chunk.models.chunk import ChunkHeader
from luac_chunk.models.constants import (
    LUA_SIGNATURE,
    LUAC_HEADER_SIZE,
    LUAC_INSTRUCTION_SIZE,
    LUAC_VERSION,
    MAX_INT_SIZE,
    MAX_SIZE_T_SIZE,
    Endianness,
)
from luac_chunk.parser.cursor_reader import CursorReader


logger = logging.getLogger(__name__)

_FLOAT_NUMBER_SIZES = (4, 8)


def read_header(reader: CursorReader) -> ChunkHeader:
    """Read the header from `reader` and configure it for the rest of the chunk.

    Raises:
        TooShort: If fewer than 12 bytes remain.
        InvalidHeader: If a field is out of range. The reason names the field.
    """
    if reader.remaining < LUAC_HEADER_SIZE:
        raise TooShort(reader.remaining, LUAC_HEADER_SIZE)

    signature = reader.read_u32_be()
    if signature != LUA_SIGNATURE:
        raise InvalidHeader("signature", signature)

    version = reader.read_u8()
    if version != LUAC_VERSION:
        raise InvalidHeader("unsupported version", version)

    format_version = reader.read_u8()

    endianness = reader.read_u8()
    if endianness not in (Endianness.BIG, Endianness.LITTLE):
        raise InvalidHeader("endianness", endianness)
    reader.set_endianness(endianness)

    int_size = reader.read_u8()
    if not 1 <= int_size <= MAX_INT_SIZE:
        raise InvalidHeader("int size", int_size)
    reader.set_integer_width(int_size)

    size_t_size = reader.read_u8()
    if not 1 <= size_t_size <= MAX_SIZE_T_SIZE:
        raise InvalidHeader("size_t size", size_t_size)
    reader.set_size_width(size_t_size)

    instruction_size = reader.read_u8()
    if instruction_size != LUAC_INSTRUCTION_SIZE:
        raise InvalidHeader("instruction size", instruction_size)

    number_size = reader.read_u8()

    integral = reader.read_u8()
    if integral > 1:
        raise InvalidHeader("integral flag", integral)

    if integral:
        if not 1 <= number_size <= 8:
            raise InvalidHeader("number size", number_size)
    elif number_size not in _FLOAT_NUMBER_SIZES:
        raise InvalidHeader("number size", number_size)

    reader.freeze()

    header = ChunkHeader(
        signature=signature,
        version=version,
        format_version=format_version,
        endianness=Endianness(endianness),
        int_size=int_size,
        size_t_size=size_t_size,
        instruction_size=instruction_size,
        number_size=number_size,
        integral=bool(integral),
    )
    logger.debug(
        "Lua %s chunk: %s-endian, int=%d size_t=%d instruction=%d number=%d%s",
        header.version_string,
        header.endianness.byteorder,
        int_size,
        size_t_size,
        instruction_size,
        number_size,
        " (integral)" if integral else "",
    )
    return header
