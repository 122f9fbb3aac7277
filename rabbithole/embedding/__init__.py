"""Embedding provider client with lexical fallback."""

from rabbithole.embedding.service import (
    MAX_EMBEDDING_CHARS,
    EmbeddingBackend,
    EmbeddingRequest,
    EmbeddingService,
    HTTPEmbeddingBackend,
)

__all__ = [
    "MAX_EMBEDDING_CHARS",
    "EmbeddingBackend",
    "EmbeddingRequest",
    "EmbeddingService",
    "HTTPEmbeddingBackend",
]
