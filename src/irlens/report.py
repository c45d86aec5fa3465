"""Text reports of computed embeddings and of the vocabulary itself."""

import sys
from collections.abc import Mapping
from typing import Optional, TextIO

from irlens.embeddings.embedder import Embedder, EmbedderKind
from irlens.embeddings.embedding import Embedding
from irlens.ir.base import Module


def print_embeddings(
    module: Module,
    vocabulary: Mapping[str, Embedding],
    out: Optional[TextIO] = None,
    kind: EmbedderKind = EmbedderKind.SYMBOLIC,
    strict: bool = False,
) -> None:
    """
    Write function, basic-block and instruction vectors for every function.

    Blocks and instructions are listed in layout order; ones without a
    vector (unreachable, or debug instructions) are left out.

    Example output:
        IR2Vec embeddings for function add:
        Function vector:  [ 1.40  0.90 ]
        Basic block vectors:
        Basic block: entry:
         [ 1.40  0.90 ]
        Instruction vectors:
        Instruction:   %r = add i32 %x, %y [ 1.40  0.90 ]
    """
    out = out or sys.stdout

    for func in module.functions:
        embedder = Embedder.create(kind, func, vocabulary, strict=strict)

        out.write(f"IR2Vec embeddings for function {func.name}:\n")
        out.write("Function vector: ")
        embedder.get_function_vector().print(out)

        out.write("Basic block vectors:\n")
        bb_map = embedder.get_bb_vec_map()
        for block in func.blocks:
            if block in bb_map:
                out.write(f"Basic block: {block.name}:\n")
                bb_map[block].print(out)

        out.write("Instruction vectors:\n")
        inst_map = embedder.get_inst_vec_map()
        for block in func.blocks:
            for inst in block.instructions:
                if inst in inst_map:
                    out.write(f"Instruction: {inst}")
                    inst_map[inst].print(out)


def print_vocabulary(vocabulary: Mapping[str, Embedding], out: Optional[TextIO] = None) -> None:
    """Write every vocabulary key, sorted, with its weighted vector."""
    out = out or sys.stdout
    for key in sorted(vocabulary):
        out.write(f"Key: {key}: ")
        vocabulary[key].print(out)
