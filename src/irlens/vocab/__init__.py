"""Vocabulary Module — Loads the key → vector table embeddings are built from.

Usage:
    from irlens.vocab import VocabularyStore, load_from_file

    vocab = load_from_file("seed_embeddings.json")
    store = VocabularyStore(config=EmbeddingConfig(vocab_path="seed_embeddings.json"))
    result = store.run(module.context)
"""

from irlens.vocab.errors import (
    DimensionMismatchError,
    InvalidArgumentError,
    MalformedDataError,
    VocabIOError,
    VocabularyError,
    VocabularyMissError,
)
from irlens.vocab.store import (
    SECTIONS,
    Vocabulary,
    VocabResult,
    VocabularyStore,
    load_from_file,
    parse_section,
)

__all__ = [
    "DimensionMismatchError",
    "InvalidArgumentError",
    "MalformedDataError",
    "VocabIOError",
    "VocabularyError",
    "VocabularyMissError",
    "SECTIONS",
    "Vocabulary",
    "VocabResult",
    "VocabularyStore",
    "load_from_file",
    "parse_section",
]
