"""Tests for vocabulary parsing, loading and the vocabulary store."""

import io
import logging

import pytest

from irlens.config import EmbeddingConfig
from irlens.embeddings import Embedding
from irlens.ir import Context
from irlens.vocab import (
    DimensionMismatchError,
    InvalidArgumentError,
    MalformedDataError,
    VocabIOError,
    Vocabulary,
    VocabResult,
    VocabularyStore,
    load_from_file,
    parse_section,
)

TINY_VOCAB = {
    "Opcodes": {"add": [1, 0]},
    "Types": {"integerTy": [0, 1]},
    "Arguments": {"variable": [1, 1]},
}


class TestParseSection:
    """Validation of a single section."""

    def test_parse_valid_section(self):
        entries, dim = parse_section("Opcodes", {"Opcodes": {"add": [1, 2], "sub": [3, 4]}})
        assert dim == 2
        assert entries["sub"] == Embedding([3.0, 4.0])

    def test_root_not_object(self):
        with pytest.raises(InvalidArgumentError, match="root is not an object"):
            parse_section("Opcodes", [1, 2, 3])

    def test_missing_section(self):
        with pytest.raises(InvalidArgumentError, match="Missing 'Types' section"):
            parse_section("Types", {"Opcodes": {"add": [1]}})

    def test_section_not_a_mapping(self):
        with pytest.raises(MalformedDataError, match="Unable to parse"):
            parse_section("Opcodes", {"Opcodes": [[1, 2]]})

    def test_non_numeric_vector(self):
        with pytest.raises(MalformedDataError, match="Unable to parse"):
            parse_section("Opcodes", {"Opcodes": {"add": ["a", "b"]}})

    def test_zero_dimension(self):
        with pytest.raises(MalformedDataError, match="is zero"):
            parse_section("Opcodes", {"Opcodes": {"add": []}})

    def test_empty_section_has_zero_dimension(self):
        with pytest.raises(MalformedDataError, match="is zero"):
            parse_section("Opcodes", {"Opcodes": {}})

    def test_ragged_vectors(self):
        with pytest.raises(MalformedDataError, match="not of the same dimension"):
            parse_section("Opcodes", {"Opcodes": {"add": [1, 2], "sub": [1, 2, 3]}})

    def test_number_too_large_for_float(self):
        with pytest.raises(MalformedDataError, match="Unable to parse 'Opcodes'"):
            parse_section("Opcodes", {"Opcodes": {"add": [10 ** 400, 0]}})


class TestLoadFromFile:
    """Reading, weighting and merging a whole vocabulary file."""

    def test_load_merges_and_weights(self, write_vocab):
        content = {
            "Opcodes": {"add": [1, 0, 0], "br": [0, 2, 0]},
            "Types": {"integerTy": [2, 2, 2]},
            "Arguments": {"variable": [5, 0, 5], "constant": [1, 1, 1]},
        }
        vocab = load_from_file(write_vocab(content))

        assert len(vocab) == 5
        assert vocab.dimension == 3
        assert vocab["br"] == Embedding([0.0, 2.0, 0.0])
        assert vocab["integerTy"] == Embedding([1.0, 1.0, 1.0])
        assert vocab["variable"].approximately_equals(Embedding([1.0, 0.0, 1.0]))

    def test_custom_weights(self, write_vocab):
        vocab = load_from_file(write_vocab(TINY_VOCAB), weights=(2.0, 1.0, 0.0))
        assert vocab["add"] == Embedding([2.0, 0.0])
        assert vocab["integerTy"] == Embedding([0.0, 1.0])
        assert vocab["variable"] == Embedding([0.0, 0.0])

    def test_seed_vocabulary(self, seed_vocab_path):
        vocab = load_from_file(seed_vocab_path)
        assert vocab.dimension == 4
        assert "unknownTy" in vocab
        assert "pointer" in vocab

    def test_dimension_mismatch(self, write_vocab):
        content = {
            "Opcodes": {"add": [1, 2, 3, 4]},
            "Types": {"integerTy": [1, 2, 3]},
            "Arguments": {"variable": [1, 2, 3, 4]},
        }
        with pytest.raises(DimensionMismatchError):
            load_from_file(write_vocab(content))

    def test_zero_dimension_section(self, write_vocab):
        content = dict(TINY_VOCAB, Arguments={"variable": []})
        with pytest.raises(MalformedDataError):
            load_from_file(write_vocab(content))

    def test_missing_section(self, write_vocab):
        content = {"Opcodes": TINY_VOCAB["Opcodes"], "Types": TINY_VOCAB["Types"]}
        with pytest.raises(InvalidArgumentError, match="Arguments"):
            load_from_file(write_vocab(content))

    def test_invalid_json(self, write_vocab):
        with pytest.raises(MalformedDataError, match="Invalid JSON"):
            load_from_file(write_vocab("{not json"))

    def test_unreadable_file(self, tmp_path):
        missing = str(tmp_path / "nope.json")
        with pytest.raises(VocabIOError) as exc_info:
            load_from_file(missing)
        assert exc_info.value.path == missing

    def test_read_from_stdin(self, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO(
            '{"Opcodes": {"add": [1]}, "Types": {"voidTy": [2]}, "Arguments": {"constant": [5]}}'
        ))
        vocab = load_from_file("-")
        assert vocab["voidTy"] == Embedding([1.0])
        assert vocab["constant"] == Embedding([1.0])

    def test_collision_last_section_wins(self, write_vocab, caplog):
        content = {
            "Opcodes": {"shared": [1, 1]},
            "Types": {"shared": [2, 2]},
            "Arguments": {"shared": [10, 10]},
        }
        with caplog.at_level(logging.WARNING, logger="irlens.vocab.store"):
            vocab = load_from_file(write_vocab(content))

        assert len(vocab) == 1
        assert vocab["shared"] == Embedding([2.0, 2.0])  # 10 * 0.2
        assert "shared" in caplog.text


class TestVocabulary:
    """The read-only mapping type."""

    def test_from_sections(self):
        vocab = Vocabulary.from_sections(
            opcodes={"add": [1, 0]},
            types={"integerTy": [0, 1]},
            arguments={"variable": [1, 1]},
        )
        assert vocab == Vocabulary.from_json(TINY_VOCAB)

    def test_read_only(self, tiny_vocab):
        with pytest.raises(TypeError):
            tiny_vocab["add"] = Embedding([0.0, 0.0])
        with pytest.raises(TypeError):
            tiny_vocab._entries["new"] = Embedding([0.0, 0.0])

    def test_entries_are_frozen(self, tiny_vocab):
        entry = tiny_vocab["add"]
        with pytest.raises(ValueError):
            entry *= 0.0
        with pytest.raises(ValueError):
            entry.scale_and_add(Embedding([5.0, 5.0]), 1.0)
        assert tiny_vocab["add"] == Embedding([1.0, 0.0])

    def test_source_vectors_are_not_frozen(self):
        source = Embedding([1.0, 2.0])
        Vocabulary({"add": source})
        source *= 2.0
        assert source == Embedding([2.0, 4.0])

    def test_empty_vocabulary_has_zero_dimension(self):
        assert Vocabulary({}).dimension == 0


class TestVocabResult:
    """Validity marker of the store's result."""

    def test_invalid_result(self):
        result = VocabResult.invalid()
        assert not result.is_valid
        assert not result
        with pytest.raises(AssertionError):
            result.vocabulary
        with pytest.raises(AssertionError):
            result.dimension

    def test_empty_vocabulary_is_still_valid(self):
        assert VocabResult(Vocabulary({})).is_valid


class TestVocabularyStore:
    """Analysis entry point and its caching."""

    def setup_method(self):
        self.context = Context()

    def test_supplied_vocabulary_ignores_path(self, tiny_vocab):
        store = VocabularyStore(tiny_vocab, EmbeddingConfig(vocab_path="/does/not/exist.json"))
        result = store.run(self.context)
        assert result.is_valid
        assert result.vocabulary is tiny_vocab
        assert not self.context.has_errors

    def test_supplied_plain_mapping(self):
        store = VocabularyStore({"add": Embedding([1.0, 2.0])})
        result = store.run(self.context)
        assert result.dimension == 2

    def test_no_source(self):
        result = VocabularyStore().run(self.context)
        assert not result.is_valid
        assert self.context.errors == ["IR2Vec vocabulary file path not specified"]

    def test_load_error_is_reported(self, write_vocab):
        path = write_vocab({"Opcodes": {"add": [1]}})
        result = VocabularyStore(config=EmbeddingConfig(vocab_path=path)).run(self.context)
        assert not result.is_valid
        assert len(self.context.errors) == 1
        assert self.context.errors[0].startswith("Error reading vocabulary: Missing 'Types'")

    def test_oversized_number_is_reported(self, write_vocab):
        content = '{"Opcodes": {"add": [1' + "0" * 400 + ']}, "Types": {}, "Arguments": {}}'
        result = VocabularyStore(config=EmbeddingConfig(vocab_path=write_vocab(content))).run(self.context)
        assert not result.is_valid
        assert self.context.errors == ["Error reading vocabulary: Unable to parse 'Opcodes' section from vocabulary"]

    def test_loads_with_configured_weights(self, write_vocab):
        config = EmbeddingConfig(vocab_path=write_vocab(TINY_VOCAB), type_weight=1.0)
        result = VocabularyStore(config=config).run(self.context)
        assert result.vocabulary["integerTy"] == Embedding([0.0, 1.0])

    def test_file_read_once(self, write_vocab, tmp_path):
        path = write_vocab(TINY_VOCAB)
        store = VocabularyStore(config=EmbeddingConfig(vocab_path=path))

        first = store.run(self.context)
        (tmp_path / "vocab.json").unlink()
        second = store.run(self.context)

        assert second is first
        assert store.is_loaded

    def test_invalidate_forces_reload(self, write_vocab, tmp_path):
        path = write_vocab(TINY_VOCAB)
        store = VocabularyStore(config=EmbeddingConfig(vocab_path=path))
        assert store.run(self.context).is_valid

        (tmp_path / "vocab.json").unlink()
        store.invalidate()
        assert not store.run(self.context).is_valid
        assert "Error reading vocabulary" in self.context.errors[0]

    def test_failed_load_is_retried(self, write_vocab, tmp_path):
        path = str(tmp_path / "late.json")
        store = VocabularyStore(config=EmbeddingConfig(vocab_path=path))
        assert not store.run(self.context).is_valid

        write_vocab(TINY_VOCAB, name="late.json")
        assert store.run(self.context).is_valid
