"""Decoder limits that a chunk cannot declare about itself.

Defaults accept anything the reference Lua 5.1 loader accepts. Tighten
them when decoding bytecode from an untrusted source.
"""

from dataclasses import dataclass


@dataclass(slots=True)
class DecodeConfig:
    """Limits and strictness switches applied on top of the header's parameters."""

    max_nesting_depth: int = 200       # LUAI_MAXCCALLS in Lua 5.1
    allow_trailing_data: bool = False  # accept bytes after the root prototype
