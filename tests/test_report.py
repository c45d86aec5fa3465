"""Tests for the text reports."""

import io

from irlens.ir import Function, Module, Type
from irlens.report import print_embeddings, print_vocabulary


class TestPrintEmbeddings:
    """Per-function embedding report."""

    def test_single_function(self, add_function, tiny_vocab):
        module = Module(name="m", functions=[add_function])
        out = io.StringIO()
        print_embeddings(module, tiny_vocab, out)

        assert out.getvalue() == (
            "IR2Vec embeddings for function add:\n"
            "Function vector:  [ 1.60  1.10 ]\n"
            "Basic block vectors:\n"
            "Basic block: entry:\n"
            " [ 1.60  1.10 ]\n"
            "Instruction vectors:\n"
            "Instruction:   %r = add i32 %x, %y [ 1.40  0.90 ]\n"
            "Instruction:   ret i32 %r [ 0.20  0.20 ]\n"
        )

    def test_unreachable_block_left_out(self, diamond_function, seed_vocab):
        module = Module(name="m", functions=[diamond_function])
        out = io.StringIO()
        print_embeddings(module, seed_vocab, out)

        text = out.getvalue()
        assert "Basic block: join:" in text
        assert "Basic block: orphan:" not in text
        assert "%dead" not in text

    def test_blocks_in_layout_order(self, diamond_function, seed_vocab):
        out = io.StringIO()
        print_embeddings(Module(name="m", functions=[diamond_function]), seed_vocab, out)

        names = [
            line.split(": ", 1)[1].rstrip(":")
            for line in out.getvalue().splitlines()
            if line.startswith("Basic block: ")
        ]
        assert names == ["entry", "left", "right", "join"]

    def test_declaration(self, tiny_vocab):
        decl = Function.define("ext", Type.void())
        out = io.StringIO()
        print_embeddings(Module(name="m", functions=[decl]), tiny_vocab, out)

        assert out.getvalue() == (
            "IR2Vec embeddings for function ext:\n"
            "Function vector:  [ 0.00  0.00 ]\n"
            "Basic block vectors:\n"
            "Instruction vectors:\n"
        )


class TestPrintVocabulary:
    """Vocabulary dump."""

    def test_sorted_weighted_entries(self, tiny_vocab):
        out = io.StringIO()
        print_vocabulary(tiny_vocab, out)

        assert out.getvalue() == (
            "Key: add:  [ 1.00  0.00 ]\n"
            "Key: integerTy:  [ 0.00  0.50 ]\n"
            "Key: variable:  [ 0.20  0.20 ]\n"
        )
