"""In-memory program representation consumed by the embedders.

This is deliberately small: types, values, instructions, basic blocks,
functions and modules, plus the diagnostic context a module reports
errors through. Nothing here parses or prints IR files; callers build
the objects directly (see ``BasicBlock.append`` and ``Function.add_block``).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class TypeKind(Enum):
    """Top-level category of a type."""

    VOID = "void"
    FLOAT = "float"
    INTEGER = "integer"
    FUNCTION = "function"
    STRUCT = "struct"
    ARRAY = "array"
    POINTER = "pointer"
    VECTOR = "vector"
    LABEL = "label"
    TOKEN = "token"
    METADATA = "metadata"
    OPAQUE = "opaque"  # target extension types, x86_amx, ...


# Spelling of floating-point types by bit width
_FLOAT_NAMES = {16: "half", 32: "float", 64: "double", 80: "x86_fp80", 128: "fp128"}


@dataclass(frozen=True)
class Type:
    """A static type.

    ``elements`` holds struct members, the array/vector element type, or
    the function return type followed by its parameter types.
    ``count`` is the number of array/vector elements.
    """

    kind: TypeKind
    bits: int = 0
    elements: tuple["Type", ...] = ()
    count: int = 0
    name: str = ""

    # ── Factories ──────────────────────────────────────────────

    @classmethod
    def void(cls) -> "Type":
        return cls(TypeKind.VOID)

    @classmethod
    def integer(cls, bits: int) -> "Type":
        return cls(TypeKind.INTEGER, bits=bits)

    @classmethod
    def floating(cls, bits: int = 32) -> "Type":
        return cls(TypeKind.FLOAT, bits=bits)

    @classmethod
    def pointer(cls) -> "Type":
        return cls(TypeKind.POINTER)

    @classmethod
    def function(cls, ret: "Type", params: tuple["Type", ...] = ()) -> "Type":
        return cls(TypeKind.FUNCTION, elements=(ret, *params))

    @classmethod
    def struct(cls, members: tuple["Type", ...] = (), name: str = "") -> "Type":
        return cls(TypeKind.STRUCT, elements=tuple(members), name=name)

    @classmethod
    def array(cls, element: "Type", count: int) -> "Type":
        return cls(TypeKind.ARRAY, elements=(element,), count=count)

    @classmethod
    def vector(cls, element: "Type", count: int) -> "Type":
        return cls(TypeKind.VECTOR, elements=(element,), count=count)

    @classmethod
    def label(cls) -> "Type":
        return cls(TypeKind.LABEL)

    @classmethod
    def token(cls) -> "Type":
        return cls(TypeKind.TOKEN)

    @classmethod
    def metadata(cls) -> "Type":
        return cls(TypeKind.METADATA)

    # ── Category predicates ────────────────────────────────────

    @property
    def is_void(self) -> bool:
        return self.kind is TypeKind.VOID

    @property
    def is_floating_point(self) -> bool:
        return self.kind is TypeKind.FLOAT

    @property
    def is_integer(self) -> bool:
        return self.kind is TypeKind.INTEGER

    @property
    def is_function(self) -> bool:
        return self.kind is TypeKind.FUNCTION

    @property
    def is_struct(self) -> bool:
        return self.kind is TypeKind.STRUCT

    @property
    def is_array(self) -> bool:
        return self.kind is TypeKind.ARRAY

    @property
    def is_pointer(self) -> bool:
        return self.kind is TypeKind.POINTER

    @property
    def is_vector(self) -> bool:
        return self.kind is TypeKind.VECTOR

    @property
    def is_empty(self) -> bool:
        """True for aggregates that occupy no storage."""
        if self.is_struct:
            return all(member.is_empty for member in self.elements)
        if self.is_array:
            return self.count == 0 or self.elements[0].is_empty
        return False

    @property
    def is_label(self) -> bool:
        return self.kind is TypeKind.LABEL

    @property
    def is_token(self) -> bool:
        return self.kind is TypeKind.TOKEN

    @property
    def is_metadata(self) -> bool:
        return self.kind is TypeKind.METADATA

    def __str__(self) -> str:
        if self.is_integer:
            return f"i{self.bits}"
        if self.is_floating_point:
            return _FLOAT_NAMES.get(self.bits, f"f{self.bits}")
        if self.is_pointer:
            return "ptr"
        if self.is_array:
            return f"[{self.count} x {self.elements[0]}]"
        if self.is_vector:
            return f"<{self.count} x {self.elements[0]}>"
        if self.is_struct:
            if self.name:
                return f"%{self.name}"
            if not self.elements:
                return "{}"
            return "{ " + ", ".join(str(m) for m in self.elements) + " }"
        if self.is_function:
            ret, *params = self.elements
            return f"{ret} (" + ", ".join(str(p) for p in params) + ")"
        return self.name or self.kind.value


class ValueKind(Enum):
    """What a value is, as far as operand categorization cares."""

    ARGUMENT = "argument"
    INSTRUCTION = "instruction"
    BASIC_BLOCK = "basic_block"
    CONSTANT = "constant"
    GLOBAL = "global"
    FUNCTION = "function"
    METADATA = "metadata"


@dataclass(eq=False)
class Value:
    """Anything that can be used as an operand.

    Values hash and compare by identity, so they can key the embedding
    caches directly.
    """

    name: str
    type: Type
    kind: ValueKind = ValueKind.ARGUMENT

    @property
    def is_function(self) -> bool:
        return self.kind is ValueKind.FUNCTION

    @property
    def is_constant(self) -> bool:
        # Globals and functions are link-time constants
        return self.kind in (ValueKind.CONSTANT, ValueKind.GLOBAL, ValueKind.FUNCTION)

    @property
    def has_pointer_type(self) -> bool:
        return self.type.is_pointer

    @property
    def reference(self) -> str:
        """How this value is spelled when used as an operand."""
        if self.kind is ValueKind.CONSTANT:
            return self.name
        if self.kind in (ValueKind.GLOBAL, ValueKind.FUNCTION):
            return f"@{self.name}"
        return f"%{self.name}"

    def __str__(self) -> str:
        return f"{self.type} {self.reference}"


def constant(text: str, type_: Type) -> Value:
    """Create a constant operand such as ``constant("1", Type.integer(32))``."""
    return Value(name=text, type=type_, kind=ValueKind.CONSTANT)


def global_variable(name: str) -> Value:
    return Value(name=name, type=Type.pointer(), kind=ValueKind.GLOBAL)


# Opcodes that end a basic block
TERMINATORS = frozenset({
    "ret", "br", "switch", "indirectbr", "invoke", "resume",
    "unreachable", "cleanupret", "catchret", "catchswitch", "callbr",
})

_BINARY_OPCODES = frozenset({
    "add", "sub", "mul", "udiv", "sdiv", "urem", "srem",
    "fadd", "fsub", "fmul", "fdiv", "frem",
    "shl", "lshr", "ashr", "and", "or", "xor",
})

# Intrinsics skipped by ``BasicBlock.instructions_without_debug``
_DEBUG_INTRINSIC_PREFIXES = ("llvm.dbg.", "llvm.pseudoprobe")


@dataclass(eq=False, repr=False)
class Instruction(Value):
    """A single instruction; its own value is the instruction result."""

    opcode: str = ""
    operands: list[Value] = field(default_factory=list)
    parent: Optional["BasicBlock"] = None

    def __post_init__(self):
        self.kind = ValueKind.INSTRUCTION

    @property
    def is_terminator(self) -> bool:
        return self.opcode in TERMINATORS

    @property
    def called_function(self) -> Optional[Value]:
        """Callee of a ``call``/``invoke``, which LLVM places last."""
        if self.opcode in ("call", "invoke", "callbr") and self.operands:
            return self.operands[-1]
        return None

    @property
    def is_debug_or_pseudo(self) -> bool:
        callee = self.called_function
        if callee is None or not callee.is_function:
            return False
        return callee.name.startswith(_DEBUG_INTRINSIC_PREFIXES)

    def __str__(self) -> str:
        if self.opcode in _BINARY_OPCODES and self.operands:
            # Binary operators spell the operand type once
            operands = f"{self.operands[0].type} " + ", ".join(op.reference for op in self.operands)
        else:
            operands = ", ".join(f"{op.type} {op.reference}" for op in self.operands)
        body = f"{self.opcode} {operands}".rstrip()
        if self.type.is_void or not self.name:
            return f"  {body}"
        return f"  %{self.name} = {body}"


@dataclass(eq=False, repr=False)
class BasicBlock(Value):
    """A straight-line sequence of instructions ending in a terminator."""

    instructions: list[Instruction] = field(default_factory=list)
    parent: Optional["Function"] = None

    def __post_init__(self):
        self.kind = ValueKind.BASIC_BLOCK

    def append(
        self,
        opcode: str,
        type_: Optional[Type] = None,
        operands: Optional[list[Value]] = None,
        name: str = "",
    ) -> Instruction:
        """
        Append a new instruction to this block.

        Args:
            opcode: Opcode name, e.g. "add", "br", "call"
            type_: Result type (void if omitted)
            operands: Ordered operand list
            name: Result name (without the leading %)

        Returns:
            The created instruction
        """
        inst = Instruction(
            name=name,
            type=type_ or Type.void(),
            opcode=opcode,
            operands=list(operands or []),
            parent=self,
        )
        self.instructions.append(inst)
        return inst

    @property
    def terminator(self) -> Optional[Instruction]:
        if self.instructions and self.instructions[-1].is_terminator:
            return self.instructions[-1]
        return None

    @property
    def successors(self) -> list["BasicBlock"]:
        """Successor blocks in terminator operand order (duplicates kept)."""
        term = self.terminator
        if term is None:
            return []
        return [op for op in term.operands if isinstance(op, BasicBlock)]

    def instructions_without_debug(self) -> list[Instruction]:
        return [inst for inst in self.instructions if not inst.is_debug_or_pseudo]

    def __str__(self) -> str:
        return self.name


@dataclass(eq=False, repr=False)
class Function(Value):
    """A function definition or, when it has no blocks, a declaration."""

    arguments: list[Value] = field(default_factory=list)
    blocks: list[BasicBlock] = field(default_factory=list)

    def __post_init__(self):
        self.kind = ValueKind.FUNCTION

    @classmethod
    def define(cls, name: str, ret: Type, params: Optional[list[tuple[str, Type]]] = None) -> "Function":
        """Create a function with named parameters and no body yet."""
        params = params or []
        func = cls(name=name, type=Type.function(ret, tuple(t for _, t in params)))
        for param_name, param_type in params:
            func.add_argument(param_name, param_type)
        return func

    @property
    def return_type(self) -> Type:
        return self.type.elements[0]

    def add_argument(self, name: str, type_: Type) -> Value:
        arg = Value(name=name, type=type_, kind=ValueKind.ARGUMENT)
        self.arguments.append(arg)
        return arg

    def add_block(self, name: str) -> BasicBlock:
        block = BasicBlock(name=name, type=Type.label(), parent=self)
        self.blocks.append(block)
        return block

    @property
    def is_declaration(self) -> bool:
        return not self.blocks

    @property
    def entry_block(self) -> Optional[BasicBlock]:
        return self.blocks[0] if self.blocks else None

    def __str__(self) -> str:
        return self.name


@dataclass
class Context:
    """Diagnostic channel shared by everything analysing a module."""

    errors: list[str] = field(default_factory=list)

    def emit_error(self, message: str) -> None:
        logger.error(message)
        self.errors.append(message)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


@dataclass
class Module:
    """A translation unit: functions plus the context they report to."""

    name: str
    functions: list[Function] = field(default_factory=list)
    context: Context = field(default_factory=Context)

    def add_function(self, func: Function) -> Function:
        self.functions.append(func)
        return func

    def get_function(self, name: str) -> Optional[Function]:
        for func in self.functions:
            if func.name == name:
                return func
        return None

    def __iter__(self):
        return iter(self.functions)

    def __len__(self) -> int:
        return len(self.functions)
