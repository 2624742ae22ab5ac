"""Decode of Lua 5.1 function prototype trees.

A prototype is dumped as:
  source name, line defined, last line defined,
  nups, numparams, is_vararg, maxstacksize   (one byte each)
  code       count + instruction words
  constants  count + (tag, payload) pairs
  protos     count + nested prototypes
  lineinfo   count + ints
  locvars    count + (name, startpc, endpc)
  upvalues   count + names

Every count is an int. Only string lengths are size_t.

Each nested prototype is consumed in full (including its own children and
debug section) before the parent continues. The tree is walked with an
explicit stack, so nesting depth is bounded by DecodeConfig alone and never
by the interpreter's recursion limit.
"""

import logging
from dataclasses import dataclass

from luac_chunk.errors import (
    CountTooLarge,
    InvalidConstant,
    InvalidCount,
    InvalidString,
    NestingTooDeep,
)
from luac_chunk.models.chunk import ChunkHeader
from luac_chunk.models.constants import ConstantTag, VarargFlag
from luac_chunk.models.prototype import (
    Constant,
    DebugInfo,
    FunctionPrototype,
    LocalVariable,
)
from luac_chunk.parser.cursor_reader import CursorReader
from luac_chunk.parser.decode_config import DecodeConfig


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Frame:
    """A prototype whose head is read but whose children are still pending."""

    proto: FunctionPrototype
    pending: int  # nested prototypes not yet read
    start: int    # offset of the prototype's first byte
    depth: int


def _read_count(reader: CursorReader, min_element_size: int) -> int:
    """Read a sequence count and reject it if the elements can't possibly fit.

    Fails before looping so a corrupt count never drives a huge loop.
    """
    offset = reader.position
    count = reader.read_sized_int()
    if count < 0:
        raise InvalidCount(count, offset)
    needed = count * min_element_size
    if needed > reader.remaining:
        raise CountTooLarge(count, needed, reader.remaining, offset)
    return count


def _min_prototype_size(reader: CursorReader) -> int:
    """Smallest possible encoding of a prototype: absent name, all counts zero."""
    # size_t source length, 2 line numbers + 6 counts as ints, 4 single bytes
    return reader.size_width + 8 * reader.integer_width + 4


def _read_constant(reader: CursorReader, header: ChunkHeader) -> Constant:
    offset = reader.position
    tag = reader.read_u8()
    if tag == ConstantTag.NIL:
        return None
    if tag == ConstantTag.BOOLEAN:
        return reader.read_u8() != 0
    if tag == ConstantTag.NUMBER:
        return reader.read_number(header.number_size, header.integral)
    if tag == ConstantTag.STRING:
        value = reader.read_length_prefixed_string()
        if value is None:
            raise InvalidString(offset + 1, "string constant has no payload")
        return value
    raise InvalidConstant(tag, offset)


def _read_head(reader: CursorReader, header: ChunkHeader) -> tuple[FunctionPrototype, int]:
    """Read everything up to and including the nested prototype count.

    Returns the prototype (children and debug info still empty) and the
    number of nested prototypes that follow it.
    """
    source_name = reader.read_length_prefixed_string()
    line_defined = reader.read_sized_int()
    last_line_defined = reader.read_sized_int()
    num_upvalues = reader.read_u8()
    num_params = reader.read_u8()
    vararg_flag = VarargFlag(reader.read_u8())
    max_stack_size = reader.read_u8()

    instruction_count = _read_count(reader, header.instruction_size)
    instructions = [reader.read_word(header.instruction_size) for _ in range(instruction_count)]

    constant_count = _read_count(reader, 1)
    constants = [_read_constant(reader, header) for _ in range(constant_count)]

    proto_count = _read_count(reader, _min_prototype_size(reader))

    proto = FunctionPrototype(
        source_name=source_name,
        line_defined=line_defined,
        last_line_defined=last_line_defined,
        num_upvalues=num_upvalues,
        num_params=num_params,
        vararg_flag=vararg_flag,
        max_stack_size=max_stack_size,
        instructions=instructions,
        constants=constants,
    )
    return proto, proto_count


def _read_debug_info(reader: CursorReader) -> DebugInfo:
    int_width = reader.integer_width
    size_width = reader.size_width

    line_count = _read_count(reader, int_width)
    line_info = [reader.read_sized_int() for _ in range(line_count)]

    local_count = _read_count(reader, size_width + 2 * int_width)
    locals_: list[LocalVariable] = []
    for _ in range(local_count):
        name = reader.read_length_prefixed_string()
        start_pc = reader.read_sized_int()
        end_pc = reader.read_sized_int()
        locals_.append(LocalVariable(name=name, start_pc=start_pc, end_pc=end_pc))

    upvalue_count = _read_count(reader, size_width)
    upvalue_names = [reader.read_length_prefixed_string() for _ in range(upvalue_count)]

    return DebugInfo(line_info=line_info, locals=locals_, upvalue_names=upvalue_names)


def read_prototype(
    reader: CursorReader,
    header: ChunkHeader,
    config: DecodeConfig | None = None,
    depth: int = 0,
) -> FunctionPrototype:
    """Read one function prototype and all of its descendants.

    Args:
        reader: Cursor positioned at the start of the prototype. Its widths
            and byte order must already be set from `header`.
        header: The chunk header (number format, instruction size).
        config: Decode limits; defaults to DecodeConfig().
        depth: Nesting level of this prototype (0 for the main function).

    Raises:
        NestingTooDeep: If any prototype's depth exceeds config.max_nesting_depth.
        InvalidCount: If a sequence count is negative.
        UnexpectedEof, InvalidString, InvalidConstant: On malformed input.
    """
    config = config or DecodeConfig()
    limit = config.max_nesting_depth
    if depth > limit:
        raise NestingTooDeep(depth, limit)

    start = reader.position
    proto, pending = _read_head(reader, header)
    stack = [_Frame(proto, pending, start, depth)]

    while True:
        frame = stack[-1]
        if frame.pending:
            frame.pending -= 1
            child_depth = frame.depth + 1
            if child_depth > limit:
                raise NestingTooDeep(child_depth, limit)
            start = reader.position
            child, pending = _read_head(reader, header)
            frame.proto.prototypes.append(child)
            stack.append(_Frame(child, pending, start, child_depth))
            continue

        done = frame.proto
        done.debug = _read_debug_info(reader)
        stack.pop()

        logger.debug(
            "Prototype at offset %d (depth %d, lines %d-%d): %d instructions, "
            "%d constants, %d nested, %d bytes",
            frame.start,
            frame.depth,
            done.line_defined,
            done.last_line_defined,
            len(done.instructions),
            len(done.constants),
            len(done.prototypes),
            reader.position - frame.start,
        )

        if not stack:
            return done
