"""Instruction, basic-block and function embeddings from a vocabulary.

An embedder is built per function. Vectors are computed bottom-up:

    instruction = opcode + result type + sum(operand categories)
    basic block = sum(instructions), debug/pseudo instructions skipped
    function    = sum(blocks reachable from entry, depth-first)

Instruction and block vectors are cached on first request for the life
of the embedder. Build a new embedder if the function changes.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from enum import Enum

from irlens.embeddings.embedding import Embedding
from irlens.ir.base import BasicBlock, Function, Instruction, Type, Value
from irlens.ir.cfg import depth_first
from irlens.vocab.errors import VocabularyMissError

logger = logging.getLogger(__name__)


class EmbedderKind(Enum):
    SYMBOLIC = "symbolic"


# First matching predicate picks the vocabulary key; order matters
TYPE_KEYS: list[tuple[Callable[[Type], bool], str]] = [
    (lambda ty: ty.is_void, "voidTy"),
    (lambda ty: ty.is_floating_point, "floatTy"),
    (lambda ty: ty.is_integer, "integerTy"),
    (lambda ty: ty.is_function, "functionTy"),
    (lambda ty: ty.is_struct, "structTy"),
    (lambda ty: ty.is_array, "arrayTy"),
    (lambda ty: ty.is_pointer, "pointerTy"),
    (lambda ty: ty.is_vector, "vectorTy"),
    (lambda ty: ty.is_empty, "emptyTy"),
    (lambda ty: ty.is_label, "labelTy"),
    (lambda ty: ty.is_token, "tokenTy"),
    (lambda ty: ty.is_metadata, "metadataTy"),
]
UNKNOWN_TYPE_KEY = "unknownTy"

OPERAND_KEYS: list[tuple[Callable[[Value], bool], str]] = [
    (lambda op: op.is_function, "function"),
    (lambda op: op.has_pointer_type, "pointer"),
    (lambda op: op.is_constant, "constant"),
]
DEFAULT_OPERAND_KEY = "variable"


def type_key(ty: Type) -> str:
    """Vocabulary key for a type category."""
    for predicate, key in TYPE_KEYS:
        if predicate(ty):
            return key
    return UNKNOWN_TYPE_KEY


def operand_key(op: Value) -> str:
    """Vocabulary key for an operand category."""
    for predicate, key in OPERAND_KEYS:
        if predicate(op):
            return key
    return DEFAULT_OPERAND_KEY


class Embedder(ABC):
    """
    Base class for embedding strategies.

    Not safe for concurrent use: the caches are filled on first access
    without locking. Use one embedder per thread. The vocabulary itself
    is read-only and may be shared.
    """

    def __init__(self, function: Function, vocabulary: Mapping[str, Embedding], strict: bool = False):
        assert len(vocabulary) > 0, "IR2Vec Vocabulary is empty"
        self.function = function
        self.vocabulary = vocabulary
        self.dimension = len(next(iter(vocabulary.values())))
        self.strict = strict
        self.vocab_misses = 0

        self._inst_vecs: dict[Instruction, Embedding] = {}
        self._bb_vecs: dict[BasicBlock, Embedding] = {}
        self._func_vec = Embedding.zeros(self.dimension)

    @staticmethod
    def create(
        kind: EmbedderKind,
        function: Function,
        vocabulary: Mapping[str, Embedding],
        strict: bool = False,
    ) -> "Embedder":
        """Factory for the embedder implementing ``kind``."""
        if kind is EmbedderKind.SYMBOLIC:
            return SymbolicEmbedder(function, vocabulary, strict=strict)
        raise ValueError(f"Unsupported embedder kind: {kind}")

    def lookup_vocab(self, key: str) -> Embedding:
        """
        Return a copy of the vocabulary vector for ``key``.

        A missing key is counted in ``vocab_misses`` and yields a zero
        vector, unless the embedder is strict, in which case it raises
        VocabularyMissError.
        """
        vec = self.vocabulary.get(key)
        if vec is not None:
            return vec.copy()
        if self.strict:
            raise VocabularyMissError(key)
        logger.debug("cannot find key in map : %s", key)
        self.vocab_misses += 1
        return Embedding.zeros(self.dimension)

    @abstractmethod
    def compute_block_embeddings(self, block: BasicBlock) -> None:
        """Compute and cache the vectors of ``block`` and its instructions."""
        pass

    @abstractmethod
    def compute_embeddings(self) -> None:
        """Compute and cache all reachable block vectors and the function vector."""
        pass

    def get_inst_vec_map(self) -> dict[Instruction, Embedding]:
        if not self._inst_vecs:
            self.compute_embeddings()
        return self._inst_vecs

    def get_bb_vec_map(self) -> dict[BasicBlock, Embedding]:
        if not self._bb_vecs:
            self.compute_embeddings()
        return self._bb_vecs

    def get_bb_vector(self, block: BasicBlock) -> Embedding:
        vec = self._bb_vecs.get(block)
        if vec is not None:
            return vec
        self.compute_block_embeddings(block)
        return self._bb_vecs[block]

    def get_function_vector(self) -> Embedding:
        # Always recomputed; holding on to the aggregate is not worth it
        self.compute_embeddings()
        return self._func_vec


class SymbolicEmbedder(Embedder):
    """
    Embed from opcode identity, static result type and operand category.

    No data-flow or value-specific information is used.

    Usage:
        emb = SymbolicEmbedder(func, vocab)
        emb.get_function_vector()
        emb.get_bb_vec_map()[func.entry_block]
    """

    def get_type_embedding(self, ty: Type) -> Embedding:
        return self.lookup_vocab(type_key(ty))

    def get_operand_embedding(self, op: Value) -> Embedding:
        return self.lookup_vocab(operand_key(op))

    def compute_block_embeddings(self, block: BasicBlock) -> None:
        bb_vec = Embedding.zeros(self.dimension)

        for inst in block.instructions_without_debug():
            inst_vec = Embedding.zeros(self.dimension)
            inst_vec += self.lookup_vocab(inst.opcode)
            inst_vec += self.get_type_embedding(inst.type)
            for op in inst.operands:
                inst_vec += self.get_operand_embedding(op)
            self._inst_vecs[inst] = inst_vec
            bb_vec += inst_vec

        self._bb_vecs[block] = bb_vec

    def compute_embeddings(self) -> None:
        self._func_vec = Embedding.zeros(self.dimension)
        if self.function.is_declaration:
            return

        # Only blocks reachable from the entry contribute
        for block in depth_first(self.function):
            self.compute_block_embeddings(block)
            self._func_vec += self._bb_vecs[block]
