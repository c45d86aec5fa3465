"""Errors raised while loading or querying a vocabulary."""


class VocabularyError(Exception):
    """Base class for vocabulary loading failures."""


class InvalidArgumentError(VocabularyError):
    """The JSON root is not an object, or a required section is missing."""


class MalformedDataError(VocabularyError):
    """A section could not be decoded, or its dimensions are zero or ragged."""


class DimensionMismatchError(VocabularyError):
    """The Opcodes, Types and Arguments sections disagree on dimension."""


class VocabIOError(VocabularyError):
    """The vocabulary file could not be read."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"'{path}': {reason}")
        self.path = path


class VocabularyMissError(KeyError):
    """A key was looked up in strict mode and is not in the vocabulary."""

    def __str__(self) -> str:
        return f"cannot find key in vocabulary: {self.args[0]}"
