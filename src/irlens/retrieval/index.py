"""Function vector index backed by ChromaDB for similarity search."""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

import chromadb
from chromadb.config import Settings

from irlens.embeddings.embedder import Embedder, EmbedderKind
from irlens.embeddings.embedding import Embedding
from irlens.ir.base import Function, Module

logger = logging.getLogger(__name__)

# Function vectors are compared by direction, so scale does not matter
_SPACE = {"hnsw:space": "cosine"}


class FunctionIndex:
    """Store function vectors and find structurally similar functions."""

    def __init__(
        self,
        db_path: str = "./irlens_db",
        collection_name: str = "functions",
    ):
        """
        Initialize the index.

        Args:
            db_path: Directory holding the persisted function vectors
            collection_name: Collection the vectors of this index live in
        """
        self._db_path = Path(db_path)
        self._collection_name = collection_name

        # Opened by _functions() on first use
        self._client: Optional[chromadb.PersistentClient] = None
        self._collection: Optional[chromadb.Collection] = None

    def _functions(self) -> "chromadb.Collection":
        """Return the function collection, opening the store on first use."""
        if self._collection is None:
            self._db_path.mkdir(parents=True, exist_ok=True)
            self._client = chromadb.PersistentClient(
                path=str(self._db_path),
                settings=Settings(anonymized_telemetry=False),
            )
            self._collection = self._client.get_or_create_collection(self._collection_name, metadata=_SPACE)
            logger.debug("Opened function index %s at %s", self._collection_name, self._db_path)
        return self._collection

    @staticmethod
    def make_id(module_name: str, function: Function) -> str:
        return f"{module_name}::{function.name}"

    @staticmethod
    def _metadata(module_name: str, function: Function) -> dict:
        return {
            "module": module_name,
            "function": function.name,
            "blocks": len(function.blocks),
            "instructions": sum(len(bb.instructions) for bb in function.blocks),
        }

    def store(self, module_name: str, function: Function, vector: Embedding) -> str:
        """
        Store one function vector.

        Args:
            module_name: Name of the module the function belongs to
            function: The embedded function
            vector: Its function vector

        Returns:
            The ID used to store the vector
        """
        doc_id = self.make_id(module_name, function)
        self._functions().upsert(
            ids=[doc_id],
            embeddings=[vector.to_list()],
            metadatas=[self._metadata(module_name, function)],
        )
        return doc_id

    def store_module(
        self,
        module: Module,
        vocabulary: Mapping[str, Embedding],
        kind: EmbedderKind = EmbedderKind.SYMBOLIC,
        strict: bool = False,
    ) -> int:
        """
        Embed and store every defined function of a module.

        Declarations and functions whose vector is all zeros are skipped,
        since they have no direction to compare by cosine. With ``strict``
        a vocabulary miss raises VocabularyMissError and nothing is stored.

        Returns:
            Number of functions stored
        """
        ids = []
        embeddings = []
        metadatas = []
        for func in module.functions:
            if func.is_declaration:
                continue
            vector = Embedder.create(kind, func, vocabulary, strict=strict).get_function_vector()
            if not any(vector):
                logger.warning("Skipping %s: function vector is zero", func.name)
                continue

            ids.append(self.make_id(module.name, func))
            embeddings.append(vector.to_list())
            metadatas.append(self._metadata(module.name, func))

        if ids:
            self._functions().upsert(ids=ids, embeddings=embeddings, metadatas=metadatas)
        logger.info("Stored %d/%d functions from %s", len(ids), len(module), module.name)
        return len(ids)

    def search(self, vector: Embedding, top_k: int = 5) -> list[dict]:
        """
        Find the functions closest to ``vector``.

        Returns:
            List of results with id, metadata and cosine distance
        """
        results = self._functions().query(
            query_embeddings=[vector.to_list()],
            n_results=top_k,
            include=["metadatas", "distances"],
        )

        return [
            {"id": doc_id, "metadata": meta, "distance": distance}
            for doc_id, meta, distance in zip(
                results["ids"][0], results["metadatas"][0], results["distances"][0]
            )
        ]

    def get_stats(self) -> dict:
        """Number of indexed functions and where they are kept."""
        return {
            "total_functions": self._functions().count(),
            "collection_name": self._collection_name,
            "db_path": str(self._db_path),
        }

    def clear(self) -> None:
        """Drop every indexed function vector."""
        self._functions()
        self._client.delete_collection(self._collection_name)
        self._collection = self._client.create_collection(self._collection_name, metadata=_SPACE)
        logger.info("Cleared function index %s", self._collection_name)
