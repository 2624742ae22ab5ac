"""Top-level entry points: decode a whole chunk from bytes or from a file."""

import logging
from pathlib import Path

from luac_chunk.errors import TrailingData
from luac_chunk.models.chunk import Chunk
from luac_chunk.parser.cursor_reader import CursorReader
from luac_chunk.parser.decode_config import DecodeConfig
from luac_chunk.parser.header_reader import read_header
from luac_chunk.parser.prototype_reader import read_prototype


logger = logging.getLogger(__name__)


def decode_chunk(data: bytes, config: DecodeConfig | None = None) -> Chunk:
    """Decode a precompiled Lua 5.1 chunk.

    Args:
        data: The complete chunk, e.g. the contents of a luac.out file.
        config: Decode limits; defaults to DecodeConfig().

    Returns:
        The header and the fully materialized root prototype.

    Raises:
        ChunkDecodeError: One of its subclasses, naming what was wrong. No
            partially decoded chunk is ever returned.
    """
    config = config or DecodeConfig()
    reader = CursorReader(data)
    header = read_header(reader)
    root = read_prototype(reader, header, config)

    if reader.remaining and not config.allow_trailing_data:
        raise TrailingData(reader.position, reader.remaining)

    logger.debug(
        "Decoded chunk: %d prototypes from %d bytes",
        sum(1 for _ in root.iter_prototypes()),
        reader.position,
    )
    return Chunk(header=header, root=root)


def load_chunk_file(path: str | Path, config: DecodeConfig | None = None) -> Chunk:
    """Read `path` and decode it. OSError from reading propagates unchanged."""
    data = Path(path).read_bytes()
    logger.debug("Loaded %s (%d bytes)", path, len(data))
    return decode_chunk(data, config)
