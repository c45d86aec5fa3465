"""IR Module — The program representation that embeddings are computed from.

Provides:
    - Types with category predicates (void, integer, pointer, ...)
    - Values, instructions, basic blocks, functions and modules
    - A diagnostic Context that analyses report errors through
    - Depth-first traversal of the control-flow graph

Usage:
    from irlens.ir import Function, Type

    i32 = Type.integer(32)
    func = Function.define("add", i32, [("x", i32), ("y", i32)])
    entry = func.add_block("entry")
    x, y = func.arguments
    r = entry.append("add", i32, [x, y], name="r")
    entry.append("ret", operands=[r])
"""

from irlens.ir.base import (
    BasicBlock,
    Context,
    Function,
    Instruction,
    Module,
    Type,
    TypeKind,
    Value,
    ValueKind,
    constant,
    global_variable,
)
from irlens.ir.cfg import depth_first, reachable_blocks, unreachable_blocks

__all__ = [
    "BasicBlock",
    "Context",
    "Function",
    "Instruction",
    "Module",
    "Type",
    "TypeKind",
    "Value",
    "ValueKind",
    "constant",
    "global_variable",
    "depth_first",
    "reachable_blocks",
    "unreachable_blocks",
]
