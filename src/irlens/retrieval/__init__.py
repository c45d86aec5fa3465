"""Retrieval Module — Similarity search over function vectors.

Usage:
    from irlens.retrieval import FunctionIndex

    index = FunctionIndex(db_path="./my_db")
    index.store_module(module, vocab)
    results = index.search(embedder.get_function_vector(), top_k=3)
"""

from irlens.retrieval.index import FunctionIndex

__all__ = ["FunctionIndex"]
