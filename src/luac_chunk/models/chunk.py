"""Chunk-level data classes: the 12-byte header and the decoded chunk."""

from dataclasses import dataclass

from luac_chunk.models.constants import Endianness
from luac_chunk.models.prototype import FunctionPrototype


@dataclass(slots=True)
class ChunkHeader:
    """Validated header. Widths are in bytes."""
    signature: int
    version: int
    format_version: int
    endianness: Endianness
    int_size: int
    size_t_size: int
    instruction_size: int
    number_size: int
    integral: bool       # True when lua_Number is an integer type

    @property
    def version_string(self) -> str:
        return f"{self.version >> 4}.{self.version & 0x0F}"


@dataclass(slots=True)
class Chunk:
    """A fully decoded chunk: header + root function prototype."""
    header: ChunkHeader
    root: FunctionPrototype

    def iter_prototypes(self):
        return self.root.iter_prototypes()
