"""Embeddings Module — Turns IR into fixed-dimension vectors.

Uses a precomputed vocabulary (opcodes, type categories, operand
categories → vectors) and sums the entries per instruction, per basic
block and per function.

Usage:
    from irlens.embeddings import Embedder, EmbedderKind

    embedder = Embedder.create(EmbedderKind.SYMBOLIC, func, vocab)
    vector = embedder.get_function_vector()
    blocks = embedder.get_bb_vec_map()
"""

from irlens.embeddings.embedding import Embedding
from irlens.embeddings.embedder import (
    Embedder,
    EmbedderKind,
    SymbolicEmbedder,
    operand_key,
    type_key,
)

__all__ = [
    "Embedding",
    "Embedder",
    "EmbedderKind",
    "SymbolicEmbedder",
    "operand_key",
    "type_key",
]
