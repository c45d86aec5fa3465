"""Shared fixtures: small vocabularies and hand-built functions."""

import json
from pathlib import Path

import pytest

from irlens.ir import Function, Type
from irlens.vocab import Vocabulary, load_from_file

SEED_VOCAB = Path(__file__).parent.parent / "data" / "seed_vocab.json"

# Two-dimensional vocabulary where every instruction part is easy to add up
TINY_VOCAB = {
    "Opcodes": {"add": [1, 0]},
    "Types": {"integerTy": [0, 1]},
    "Arguments": {"variable": [1, 1]},
}


@pytest.fixture
def tiny_vocab() -> Vocabulary:
    return Vocabulary.from_json(TINY_VOCAB)


@pytest.fixture
def seed_vocab_path() -> str:
    return str(SEED_VOCAB)


@pytest.fixture
def seed_vocab(seed_vocab_path) -> Vocabulary:
    return load_from_file(seed_vocab_path)


@pytest.fixture
def write_vocab(tmp_path):
    """Write a vocabulary dict to a JSON file and return its path."""
    def _write(content, name: str = "vocab.json") -> str:
        path = tmp_path / name
        if isinstance(content, str):
            path.write_text(content)
        else:
            path.write_text(json.dumps(content))
        return str(path)
    return _write


@pytest.fixture
def add_function() -> Function:
    """
    define i32 @add(i32 %x, i32 %y) {
    entry:
      %r = add i32 %x, %y
      ret i32 %r
    }
    """
    i32 = Type.integer(32)
    func = Function.define("add", i32, [("x", i32), ("y", i32)])
    x, y = func.arguments
    entry = func.add_block("entry")
    r = entry.append("add", i32, [x, y], name="r")
    entry.append("ret", operands=[r])
    return func


@pytest.fixture
def diamond_function() -> Function:
    """
    entry -> (left, right), left -> join, right -> join, plus an orphan block.
    """
    i1 = Type.integer(1)
    i32 = Type.integer(32)
    func = Function.define("diamond", i32, [("c", i1), ("x", i32)])
    c, x = func.arguments
    entry = func.add_block("entry")
    left = func.add_block("left")
    right = func.add_block("right")
    join = func.add_block("join")
    orphan = func.add_block("orphan")

    entry.append("br", operands=[c, left, right])
    a = left.append("add", i32, [x, x], name="a")
    left.append("br", operands=[join])
    b = right.append("add", i32, [x, x], name="b")
    right.append("br", operands=[join])
    join.append("ret", operands=[x])
    orphan.append("add", i32, [a, b], name="dead")
    orphan.append("br", operands=[join])
    return func
