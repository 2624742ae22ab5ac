"""Lua 5.1 bytecode chunk decoding."""

from luac_chunk.parser.chunk_reader import decode_chunk, load_chunk_file
from luac_chunk.parser.cursor_reader import CursorReader
from luac_chunk.parser.decode_config import DecodeConfig
from luac_chunk.parser.header_reader import read_header
from luac_chunk.parser.prototype_reader import read_prototype

__all__ = [
    "CursorReader",
    "DecodeConfig",
    "decode_chunk",
    "load_chunk_file",
    "read_header",
    "read_prototype",
]
