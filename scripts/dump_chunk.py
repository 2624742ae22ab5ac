"""Dump the contents of a precompiled Lua 5.1 chunk.

Usage:
    python -m scripts.dump_chunk PATH [--verbose] [--allow-trailing] [--max-depth N]
"""

import argparse
import logging
from pathlib import Path

from luac_chunk.errors import ChunkDecodeError
from luac_chunk.models.chunk import Chunk, ChunkHeader
from luac_chunk.models.prototype import FunctionPrototype
from luac_chunk.parser.chunk_reader import load_chunk_file
from luac_chunk.parser.decode_config import DecodeConfig


def format_header(header: ChunkHeader) -> list[str]:
    number_kind = "integral" if header.integral else "floating-point"
    return [
        f"Lua {header.version_string} chunk (format {header.format_version})",
        f"  endianness: {header.endianness.byteorder}",
        f"  sizes: int={header.int_size} size_t={header.size_t_size} "
        f"instruction={header.instruction_size} number={header.number_size} ({number_kind})",
    ]


def format_constant(value) -> str:
    """Format a constant the way it would appear in Lua source."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return repr(value)
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def format_prototype(proto: FunctionPrototype, indent: int = 0) -> list[str]:
    pad = "  " * indent
    source = proto.source_name if proto.source_name is not None else "(inherited)"
    lines = [
        f"{pad}function <{source}:{proto.line_defined},{proto.last_line_defined}>",
        f"{pad}  params={proto.num_params} upvalues={proto.num_upvalues} "
        f"vararg={int(proto.vararg_flag)} stack={proto.max_stack_size}",
        f"{pad}  instructions ({len(proto.instructions)}):",
    ]
    for pc, word in enumerate(proto.instructions):
        line = proto.debug.line_info[pc] if pc < len(proto.debug.line_info) else None
        line_str = f"[{line}]" if line is not None else "[-]"
        lines.append(f"{pad}    {pc + 1:4d} {line_str:>6} 0x{word:08X}")

    lines.append(f"{pad}  constants ({len(proto.constants)}):")
    for i, value in enumerate(proto.constants):
        lines.append(f"{pad}    {i:4d} {format_constant(value)}")

    lines.append(f"{pad}  locals ({len(proto.debug.locals)}):")
    for i, local in enumerate(proto.debug.locals):
        lines.append(f"{pad}    {i:4d} {local.name} {local.start_pc + 1} {local.end_pc + 1}")

    lines.append(f"{pad}  upvalues ({len(proto.debug.upvalue_names)}):")
    for i, name in enumerate(proto.debug.upvalue_names):
        lines.append(f"{pad}    {i:4d} {name}")
    return lines


def format_tree(root: FunctionPrototype) -> list[str]:
    """List `root` and its descendants, each child indented under its parent."""
    lines: list[str] = []
    stack = [(root, 0)]
    while stack:
        proto, indent = stack.pop()
        if lines:
            lines.append("")
        lines.extend(format_prototype(proto, indent))
        stack.extend((child, indent + 1) for child in reversed(proto.prototypes))
    return lines


def format_chunk(chunk: Chunk) -> str:
    lines = format_header(chunk.header)
    lines.append("")
    lines.extend(format_tree(chunk.root))
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Dump a precompiled Lua 5.1 chunk")
    parser.add_argument("path", type=Path, help="Chunk file (e.g. luac.out)")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log decode progress")
    parser.add_argument("--allow-trailing", action="store_true",
                        help="Ignore bytes after the main function")
    parser.add_argument("--max-depth", type=int, default=DecodeConfig().max_nesting_depth,
                        help="Maximum nesting depth of function prototypes")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = DecodeConfig(
        max_nesting_depth=args.max_depth,
        allow_trailing_data=args.allow_trailing,
    )
    try:
        chunk = load_chunk_file(args.path, config)
    except OSError as exc:
        print(f"Error: couldn't read {args.path}: {exc}")
        return 1
    except ChunkDecodeError as exc:
        print(f"Error: {exc}")
        return 1

    print(format_chunk(chunk))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
