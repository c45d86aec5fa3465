"""Control-flow graph traversal over basic blocks.

Blocks are visited in depth-first preorder starting at the entry block.
Successors are explored in terminator operand order, so the visit order
is stable for a given function layout. Blocks that cannot be reached
from the entry are never yielded.
"""

from collections.abc import Iterator

from irlens.ir.base import BasicBlock, Function


def depth_first(function: Function) -> Iterator[BasicBlock]:
    """
    Yield the blocks reachable from the entry, each exactly once.

    Args:
        function: Function to walk (declarations yield nothing)

    Yields:
        Basic blocks in depth-first preorder

    Example:
        entry -> [a, b], a -> [c]   yields   entry, a, c, b
    """
    entry = function.entry_block
    if entry is None:
        return

    visited: set[int] = {id(entry)}
    # Each frame holds a block and an iterator over its remaining successors
    stack = [(entry, iter(entry.successors))]
    yield entry

    while stack:
        _, successors = stack[-1]
        for succ in successors:
            if id(succ) not in visited:
                visited.add(id(succ))
                stack.append((succ, iter(succ.successors)))
                yield succ
                break
        else:
            stack.pop()


def reachable_blocks(function: Function) -> list[BasicBlock]:
    return list(depth_first(function))


def unreachable_blocks(function: Function) -> list[BasicBlock]:
    """Blocks in layout order that the entry block cannot reach."""
    reachable = {id(bb) for bb in depth_first(function)}
    return [bb for bb in function.blocks if id(bb) not in reachable]
