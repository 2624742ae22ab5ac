"""Lua 5.1 chunk format constants and small enumerations.

Values come from lundump.h / lobject.h in the Lua 5.1 sources.
"""

from enum import IntEnum, IntFlag


LUA_SIGNATURE = 0x1B4C7561      # ESC 'L' 'u' 'a', read big-endian
LUAC_VERSION = 0x51             # Lua 5.1
LUAC_HEADER_SIZE = 12
LUAC_INSTRUCTION_SIZE = 4

MAX_INT_SIZE = 16
MAX_SIZE_T_SIZE = 8


class Endianness(IntEnum):
    """Header byte 6. Lua writes 1 on little-endian hosts."""
    BIG = 0
    LITTLE = 1

    @property
    def byteorder(self) -> str:
        """Name accepted by int.from_bytes()."""
        return "little" if self is Endianness.LITTLE else "big"


class ConstantTag(IntEnum):
    """Type tag preceding each constant (LUA_T* values)."""
    NIL = 0
    BOOLEAN = 1
    NUMBER = 3
    STRING = 4


class VarargFlag(IntFlag):
    """Prototype is_vararg byte. Bits combine, e.g. IS_VARARG | NEEDS_ARG."""
    NONE = 0
    HAS_ARG = 1        # VARARG_HASARG
    IS_VARARG = 2      # VARARG_ISVARARG
    NEEDS_ARG = 4      # VARARG_NEEDSARG

