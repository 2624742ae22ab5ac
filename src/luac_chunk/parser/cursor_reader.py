"""Cursor over a chunk buffer with header-configurable integer widths.

The header declares the sizes of C `int` and `size_t` on the machine that
produced the chunk, plus its byte order. Those are data, not constants: the
header reader sets them once and then freezes the reader. Every width- or
endian-dependent read goes through read_sized_uint / read_sized_int /
read_word.
"""

import struct

from luac_chunk.errors import InvalidString, ReaderFrozenError, UnexpectedEof
from luac_chunk.models.constants import MAX_INT_SIZE, MAX_SIZE_T_SIZE, Endianness


class CursorReader:
    """Wraps an immutable bytes buffer with a forward-only cursor."""

    __slots__ = ("_data", "_pos", "_int_width", "_size_width", "_endianness", "_frozen")

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0
        # Placeholders until the header is read (values of a common x86 build).
        self._int_width = 4
        self._size_width = 4
        self._endianness = Endianness.LITTLE
        self._frozen = False

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    @property
    def integer_width(self) -> int:
        return self._int_width

    @property
    def size_width(self) -> int:
        return self._size_width

    @property
    def endianness(self) -> Endianness:
        return self._endianness

    @property
    def frozen(self) -> bool:
        return self._frozen

    # --- header phase configuration ---

    def _check_configurable(self, name: str) -> None:
        if self._frozen:
            raise ReaderFrozenError(f"Cannot set {name} after the header has been read")

    def set_endianness(self, flag: int) -> None:
        self._check_configurable("endianness")
        self._endianness = Endianness(flag)

    def set_integer_width(self, width: int) -> None:
        self._check_configurable("integer width")
        if not 1 <= width <= MAX_INT_SIZE:
            raise ValueError(f"Integer width {width} outside [1, {MAX_INT_SIZE}]")
        self._int_width = width

    def set_size_width(self, width: int) -> None:
        self._check_configurable("size_t width")
        if not 1 <= width <= MAX_SIZE_T_SIZE:
            raise ValueError(f"size_t width {width} outside [1, {MAX_SIZE_T_SIZE}]")
        self._size_width = width

    def freeze(self) -> None:
        """End the header phase. Further set_* calls raise ReaderFrozenError."""
        self._frozen = True

    # --- primitive reads ---

    def read_bytes(self, size: int) -> bytes:
        if size < 0:
            raise ValueError(f"Negative read size {size}")
        available = self.remaining
        if size > available:
            raise UnexpectedEof(requested=size, available=available, offset=self._pos)
        chunk = self._data[self._pos : self._pos + size]
        self._pos += size
        return chunk

    def read_u8(self) -> int:
        return self.read_bytes(1)[0]

    def read_u32_be(self) -> int:
        """Read the signature word. Byte order here never depends on the header."""
        return struct.unpack(">I", self.read_bytes(4))[0]

    def read_sized_uint(self) -> int:
        """Read a size_t-class field (lengths and counts)."""
        return int.from_bytes(
            self.read_bytes(self._size_width), self._endianness.byteorder, signed=False
        )

    def read_sized_int(self) -> int:
        """Read a C int field (line numbers, pcs)."""
        return int.from_bytes(
            self.read_bytes(self._int_width), self._endianness.byteorder, signed=True
        )

    def read_word(self, width: int) -> int:
        """Read an unsigned word of `width` bytes, e.g. one instruction."""
        return int.from_bytes(self.read_bytes(width), self._endianness.byteorder, signed=False)

    def read_number(self, width: int, integral: bool) -> int | float:
        """Read a lua_Number of `width` bytes."""
        raw = self.read_bytes(width)
        if integral:
            return int.from_bytes(raw, self._endianness.byteorder, signed=True)
        prefix = "<" if self._endianness is Endianness.LITTLE else ">"
        code = {4: "f", 8: "d"}.get(width)
        if code is None:
            raise ValueError(f"No floating-point format is {width} bytes wide")
        return struct.unpack(prefix + code, raw)[0]

    def read_length_prefixed_string(self) -> str | None:
        """Read a Lua string: size_t length (counting the trailing NUL), then bytes.

        A length of 0 means the string is absent and returns None. The
        terminator is consumed but not returned. On a decode failure the
        cursor has already moved past the whole declared run.
        """
        size = self.read_sized_uint()
        if size == 0:
            return None
        start = self._pos
        raw = self.read_bytes(size)
        if raw[-1] != 0:
            raise InvalidString(start, f"missing NUL terminator (last byte {raw[-1]:#04x})")
        try:
            return raw[:-1].decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidString(start, f"not valid UTF-8 ({exc.reason})") from exc
