"""Vocabulary loading: JSON sections → weighted, merged lookup table.

A vocabulary file is a JSON object with three sections, each mapping
symbolic keys to vectors of the same length:

    {
        "Opcodes":   {"add": [...], "br": [...], ...},
        "Types":     {"integerTy": [...], "pointerTy": [...], ...},
        "Arguments": {"variable": [...], "constant": [...], ...}
    }

Each section is scaled by its weight and the three are merged, in that
order, into one Vocabulary. On a key collision the later section wins.
"""

import json
import logging
import sys
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, Optional

from irlens.config import EmbeddingConfig
from irlens.embeddings.embedding import Embedding
from irlens.ir.base import Context
from irlens.vocab.errors import (
    DimensionMismatchError,
    InvalidArgumentError,
    MalformedDataError,
    VocabIOError,
    VocabularyError,
)

logger = logging.getLogger(__name__)

# Section names in merge order
SECTIONS = ("Opcodes", "Types", "Arguments")

# Path that means "read from standard input"
STDIN_PATH = "-"


class Vocabulary(Mapping):
    """
    Read-only mapping from symbolic key to Embedding.

    All entries share one dimension, taken from the first entry.
    """

    def __init__(self, entries: Mapping[str, Embedding]):
        self._entries = MappingProxyType({key: vec.copy().freeze() for key, vec in entries.items()})
        self._dimension = len(next(iter(self._entries.values()))) if self._entries else 0

    @classmethod
    def from_json(cls, raw: Any, weights: tuple[float, float, float] = EmbeddingConfig().weights) -> "Vocabulary":
        """
        Validate, weight and merge the three sections of a decoded JSON value.

        Args:
            raw: Decoded JSON (normally a dict)
            weights: (opcode, type, argument) section weights

        Returns:
            The merged vocabulary

        Raises:
            InvalidArgumentError, MalformedDataError, DimensionMismatchError
        """
        parsed = [parse_section(key, raw) for key in SECTIONS]

        dims = {dim for _, dim in parsed}
        if len(dims) != 1:
            raise DimensionMismatchError("Vocabulary sections have different dimensions")

        merged: dict[str, Embedding] = {}
        for key, (section, _), weight in zip(SECTIONS, parsed, weights):
            for name, vector in section.items():
                if name in merged:
                    logger.warning("Vocabulary key '%s' from '%s' overrides an earlier section", name, key)
                vector *= weight
                merged[name] = vector
        return cls(merged)

    @classmethod
    def from_sections(
        cls,
        opcodes: Mapping[str, list[float]],
        types: Mapping[str, list[float]],
        arguments: Mapping[str, list[float]],
        weights: tuple[float, float, float] = EmbeddingConfig().weights,
    ) -> "Vocabulary":
        """Build a vocabulary from in-memory sections, with the same checks as a file."""
        raw = {"Opcodes": dict(opcodes), "Types": dict(types), "Arguments": dict(arguments)}
        return cls.from_json(raw, weights)

    @property
    def dimension(self) -> int:
        return self._dimension

    def __getitem__(self, key: str) -> Embedding:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Vocabulary(entries={len(self)}, dimension={self.dimension})"


def _is_vector(value: Any) -> bool:
    return isinstance(value, list) and all(
        isinstance(x, (int, float)) and not isinstance(x, bool) for x in value
    )


def parse_section(key: str, raw: Any) -> tuple[dict[str, Embedding], int]:
    """
    Extract one named section from a decoded vocabulary JSON value.

    The first entry's length defines the section dimension.

    Args:
        key: Section name ("Opcodes", "Types" or "Arguments")
        raw: Decoded JSON value of the whole file

    Returns:
        (entries, dimension)

    Raises:
        InvalidArgumentError: root is not an object or the section is missing
        MalformedDataError: section is not key -> number array, or its
            dimension is zero, or entries differ in length
    """
    if not isinstance(raw, dict):
        raise InvalidArgumentError("JSON root is not an object")
    if key not in raw:
        raise InvalidArgumentError(f"Missing '{key}' section in vocabulary file")

    section = raw[key]
    if not isinstance(section, dict) or not all(_is_vector(v) for v in section.values()):
        raise MalformedDataError(f"Unable to parse '{key}' section from vocabulary")

    try:
        entries = {name: Embedding(vector) for name, vector in section.items()}
    except (OverflowError, ValueError) as e:
        raise MalformedDataError(f"Unable to parse '{key}' section from vocabulary") from e
    dim = len(next(iter(entries.values()))) if entries else 0
    if dim == 0:
        raise MalformedDataError(f"Dimension of '{key}' section of the vocabulary is zero")

    if any(len(vector) != dim for vector in entries.values()):
        raise MalformedDataError(
            f"All vectors in the '{key}' section of the vocabulary are not of the same dimension"
        )
    return entries, dim


def load_from_file(path: str, weights: tuple[float, float, float] = EmbeddingConfig().weights) -> Vocabulary:
    """
    Read, validate and merge a vocabulary file.

    Args:
        path: File path, or "-" for standard input
        weights: (opcode, type, argument) section weights

    Returns:
        The merged, weighted vocabulary

    Raises:
        VocabIOError: the file cannot be read
        MalformedDataError: the content is not JSON, or a section is malformed
        InvalidArgumentError: the root is not an object or a section is missing
        DimensionMismatchError: the sections disagree on dimension
    """
    try:
        if path == STDIN_PATH:
            content = sys.stdin.read()
        else:
            content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise VocabIOError(path, e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        raise MalformedDataError(f"Vocabulary file is not valid UTF-8: {e}") from e

    try:
        raw = json.loads(content)
    except json.JSONDecodeError as e:
        raise MalformedDataError(f"Invalid JSON in vocabulary file: {e}") from e

    vocab = Vocabulary.from_json(raw, weights)
    logger.debug("Loaded vocabulary from %s: %d entries, dimension %d", path, len(vocab), vocab.dimension)
    return vocab


class VocabResult:
    """
    Outcome of running the vocabulary store.

    An invalid result (loading failed) is distinct from a valid result
    holding an empty vocabulary. Check ``is_valid`` before use; reading
    the vocabulary of an invalid result is a programming error.
    """

    def __init__(self, vocabulary: Optional[Vocabulary] = None):
        self._vocabulary = vocabulary

    @classmethod
    def invalid(cls) -> "VocabResult":
        return cls()

    @property
    def is_valid(self) -> bool:
        return self._vocabulary is not None

    @property
    def vocabulary(self) -> Vocabulary:
        assert self.is_valid, "IR2Vec Vocabulary is invalid"
        return self._vocabulary

    @property
    def dimension(self) -> int:
        assert self.is_valid, "IR2Vec Vocabulary is invalid"
        return self._vocabulary.dimension

    def __bool__(self) -> bool:
        return self.is_valid


class VocabularyStore:
    """
    Provide the vocabulary for one analysis unit.

    Usage:
        store = VocabularyStore(config=EmbeddingConfig(vocab_path="vocab.json"))
        result = store.run(module.context)
        if result.is_valid:
            vocab = result.vocabulary

    A vocabulary passed to the constructor is returned as-is and the
    configured path is ignored. A successfully loaded vocabulary is kept
    until ``invalidate()``; the file is not read again.
    """

    def __init__(
        self,
        vocabulary: Optional[Mapping[str, Embedding]] = None,
        config: Optional[EmbeddingConfig] = None,
    ):
        self.config = config or EmbeddingConfig()
        if vocabulary is not None and not isinstance(vocabulary, Vocabulary):
            vocabulary = Vocabulary(vocabulary)
        self._supplied = vocabulary
        self._result: Optional[VocabResult] = None

    def run(self, context: Context) -> VocabResult:
        """
        Return the vocabulary, loading it from the configured file if needed.

        Errors are emitted through ``context`` and produce an invalid result.
        """
        if self._result is not None:
            return self._result

        # A non-empty vocabulary from the constructor takes precedence
        if self._supplied:
            self._result = VocabResult(self._supplied)
            return self._result

        if not self.config.vocab_path:
            context.emit_error("IR2Vec vocabulary file path not specified")
            return VocabResult.invalid()

        try:
            vocab = load_from_file(self.config.vocab_path, self.config.weights)
        except VocabularyError as e:
            context.emit_error(f"Error reading vocabulary: {e}")
            return VocabResult.invalid()

        self._result = VocabResult(vocab)
        return self._result

    def invalidate(self) -> None:
        """Forget a loaded vocabulary so the next ``run`` reads the file again."""
        self._result = None

    @property
    def is_loaded(self) -> bool:
        return self._result is not None
