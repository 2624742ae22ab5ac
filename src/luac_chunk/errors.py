"""Errors raised while decoding a precompiled Lua 5.1 chunk.

Every decode failure is a ChunkDecodeError. It subclasses ValueError, so
callers that only care about "bad input" can catch that.
"""


class ChunkDecodeError(ValueError):
    """Base class for all chunk decode failures."""


class TooShort(ChunkDecodeError):
    """The buffer cannot even hold the 12-byte header."""

    def __init__(self, length: int, minimum: int = 12) -> None:
        self.length = length
        self.minimum = minimum
        super().__init__(
            f"Bytecode too short: {length} bytes, header needs {minimum}"
        )


class UnexpectedEof(ChunkDecodeError):
    """A read asked for more bytes than remain in the buffer."""

    def __init__(self, requested: int, available: int, offset: int) -> None:
        self.requested = requested
        self.available = available
        self.offset = offset
        super().__init__(
            f"Tried to read {requested} bytes at offset {offset}, "
            f"but only {available} bytes remain"
        )


class CountTooLarge(UnexpectedEof):
    """A sequence count claims more elements than the remaining bytes can hold.

    `offset` is where the count field starts. `requested` is the minimum
    encoded size of `count` elements, not the size of any single read.
    """

    def __init__(self, count: int, needed: int, available: int, offset: int) -> None:
        self.count = count
        ChunkDecodeError.__init__(
            self,
            f"Count {count} at offset {offset} needs at least {needed} bytes, "
            f"but only {available} bytes remain",
        )
        self.requested = needed
        self.available = available
        self.offset = offset


class InvalidCount(ChunkDecodeError):
    """A sequence count is negative."""

    def __init__(self, count: int, offset: int) -> None:
        self.count = count
        self.offset = offset
        super().__init__(f"Negative count {count} at offset {offset}")


class InvalidHeader(ChunkDecodeError):
    """A header field is malformed. `reason` names the field."""

    def __init__(self, reason: str, value: int | None = None) -> None:
        self.reason = reason
        self.value = value
        detail = f" (got {value:#x})" if value is not None else ""
        super().__init__(f"Lua header is malformed: {reason}{detail}")


class InvalidString(ChunkDecodeError):
    """A string field could not be decoded."""

    def __init__(self, offset: int, reason: str = "not valid UTF-8") -> None:
        self.offset = offset
        self.reason = reason
        super().__init__(f"Invalid string at offset {offset}: {reason}")


class InvalidConstant(ChunkDecodeError):
    """A constant carries a type tag outside nil/boolean/number/string."""

    def __init__(self, tag: int, offset: int) -> None:
        self.tag = tag
        self.offset = offset
        super().__init__(f"Unknown constant tag {tag} at offset {offset}")


class NestingTooDeep(ChunkDecodeError):
    """Nested function prototypes exceed the configured depth limit."""

    def __init__(self, depth: int, limit: int) -> None:
        self.depth = depth
        self.limit = limit
        super().__init__(
            f"Function prototypes nested {depth} levels deep (limit {limit})"
        )


class TrailingData(ChunkDecodeError):
    """Bytes remain after the root prototype was fully decoded."""

    def __init__(self, offset: int, count: int) -> None:
        self.offset = offset
        self.count = count
        super().__init__(f"{count} trailing bytes after chunk at offset {offset}")


class ReaderFrozenError(RuntimeError):
    """A reader setter was called after the header phase ended."""
