"""Function prototype data classes."""

from collections.abc import Iterator
from dataclasses import dataclass, field

from luac_chunk.models.constants import VarargFlag


# nil / boolean / number (float, or int for integral chunks) / string
Constant = None | bool | float | int | str


@dataclass(slots=True)
class LocalVariable:
    """A local variable descriptor from the debug section."""
    name: str | None
    start_pc: int        # first instruction where the local is active
    end_pc: int          # first instruction where it is dead


@dataclass(slots=True)
class DebugInfo:
    """Optional debug metadata. All lists are empty for stripped chunks."""
    line_info: list[int] = field(default_factory=list)   # source line per instruction
    locals: list[LocalVariable] = field(default_factory=list)
    upvalue_names: list[str | None] = field(default_factory=list)

    @property
    def is_stripped(self) -> bool:
        return not (self.line_info or self.locals or self.upvalue_names)


@dataclass(slots=True)
class FunctionPrototype:
    """One compiled function body and everything nested inside it."""
    source_name: str | None       # None when the dump omitted it (nested functions)
    line_defined: int
    last_line_defined: int
    num_upvalues: int
    num_params: int
    vararg_flag: VarargFlag
    max_stack_size: int

    instructions: list[int] = field(default_factory=list)    # raw 32-bit words
    constants: list[Constant] = field(default_factory=list)
    prototypes: list["FunctionPrototype"] = field(default_factory=list)
    debug: DebugInfo = field(default_factory=DebugInfo)

    @property
    def is_vararg(self) -> bool:
        return bool(self.vararg_flag & VarargFlag.IS_VARARG)

    def iter_prototypes(self) -> Iterator["FunctionPrototype"]:
        """Yield this prototype and every nested one, parents before children."""
        stack = [self]
        while stack:
            proto = stack.pop()
            yield proto
            stack.extend(reversed(proto.prototypes))
