"""Fixed-dimension numeric vectors with elementwise arithmetic."""

import sys
from collections.abc import Iterable
from typing import Optional, TextIO

import numpy as np

_DIM_MISMATCH = "Vectors must have the same dimension"


class Embedding:
    """
    A dense float64 vector.

    Every binary operation requires both operands to have the same
    dimension; a mismatch is an internal error and raises AssertionError.

    Usage:
        a = Embedding([1.0, 0.0])
        b = Embedding.zeros(2)
        b += a * 0.5
        b.approximately_equals(Embedding([0.5, 0.0]))  # True
    """

    __slots__ = ("_data",)

    def __init__(self, values: Iterable[float] = ()):
        self._data = np.array(list(values), dtype=np.float64)

    @classmethod
    def zeros(cls, dimension: int) -> "Embedding":
        return cls._wrap(np.zeros(dimension, dtype=np.float64))

    @classmethod
    def _wrap(cls, data: np.ndarray) -> "Embedding":
        emb = cls.__new__(cls)
        emb._data = data
        return emb

    # ── Sequence protocol ──────────────────────────────────────

    @property
    def dimension(self) -> int:
        return self._data.shape[0]

    def __len__(self) -> int:
        return self.dimension

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __iter__(self):
        return (float(x) for x in self._data)

    def to_list(self) -> list[float]:
        return self._data.tolist()

    def to_numpy(self) -> np.ndarray:
        return self._data.copy()

    def copy(self) -> "Embedding":
        return self._wrap(self._data.copy())

    def freeze(self) -> "Embedding":
        """Make this vector read-only; in-place operations on it then raise ValueError."""
        self._data.flags.writeable = False
        return self

    # ── Arithmetic ─────────────────────────────────────────────

    def _check(self, other: "Embedding") -> None:
        assert self.dimension == other.dimension, _DIM_MISMATCH

    def __iadd__(self, other: "Embedding") -> "Embedding":
        self._check(other)
        self._data += other._data
        return self

    def __add__(self, other: "Embedding") -> "Embedding":
        result = self.copy()
        result += other
        return result

    def __isub__(self, other: "Embedding") -> "Embedding":
        self._check(other)
        self._data -= other._data
        return self

    def __sub__(self, other: "Embedding") -> "Embedding":
        result = self.copy()
        result -= other
        return result

    def __imul__(self, factor: float) -> "Embedding":
        self._data *= factor
        return self

    def __mul__(self, factor: float) -> "Embedding":
        result = self.copy()
        result *= factor
        return result

    __rmul__ = __mul__

    # Named forms of the operators, for callers that prefer methods
    def add(self, other: "Embedding") -> "Embedding":
        return self + other

    def subtract(self, other: "Embedding") -> "Embedding":
        return self - other

    def scale(self, factor: float) -> "Embedding":
        return self * factor

    def scale_and_add(self, src: "Embedding", factor: float) -> "Embedding":
        """In place: ``self += src * factor``. Returns self."""
        self._check(src)
        self._data += src._data * factor
        return self

    # ── Comparison ─────────────────────────────────────────────

    def approximately_equals(self, other: "Embedding", tolerance: float = 1e-6) -> bool:
        """True if every coordinate differs from ``other`` by at most ``tolerance``."""
        self._check(other)
        return bool(np.all(np.abs(self._data - other._data) <= tolerance))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Embedding):
            return NotImplemented
        return self.dimension == other.dimension and bool(np.array_equal(self._data, other._data))

    __hash__ = None  # mutable

    # ── Rendering ──────────────────────────────────────────────

    def format(self) -> str:
        """Render as `` [ 1.00  2.00 ]`` followed by a newline."""
        return " [" + "".join(f" {x:.2f} " for x in self._data) + "]\n"

    def print(self, out: Optional[TextIO] = None) -> None:
        (out or sys.stdout).write(self.format())

    def __str__(self) -> str:
        return self.format().strip()

    def __repr__(self) -> str:
        return f"Embedding({self.to_list()!r})"
