# airnope/services/embeddings/__init__.py
from airnope.services.embeddings.backend import (
    EmbeddingBackend,
    SentenceTransformerBackend,
)
from airnope.services.embeddings.service import EMBEDDINGS_SIZE, Embeddings

__all__ = [
    "EMBEDDINGS_SIZE",
    "EmbeddingBackend",
    "Embeddings",
    "SentenceTransformerBackend",
]
