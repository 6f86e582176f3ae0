"""Embedding backend contract, OpenAI backend factory and anchor cache.

The praise filter only needs two coroutines, matching LangChain's
``Embeddings`` interface:

- ``aembed_query(text) -> list[float]``
- ``aembed_documents(texts) -> list[list[float]]``

so any LangChain embeddings object (or a test double) can be injected.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

import numpy as np
from langchain_core.embeddings import Embeddings

from .config import Settings
from .errors import EmbeddingBackendError
from .logging_config import get_logger
from .retry_policy import embedding_retry

logger = get_logger(__name__)


@runtime_checkable
class EmbeddingBackend(Protocol):
    async def aembed_query(self, text: str) -> list[float]: ...

    async def aembed_documents(self, texts: list[str]) -> list[list[float]]: ...


class RetryingEmbeddings:
    """Wrap an embeddings client with tenacity retries.

    Exhausted retries and non-transient failures surface as
    EmbeddingBackendError.
    """

    def __init__(self, inner: Embeddings | EmbeddingBackend, max_attempts: int = 3, initial_wait: float = 1.0, jitter: float = 1.0):
        self._inner = inner
        self.max_attempts = max_attempts
        self._retry = embedding_retry(max_attempts, initial=initial_wait, jitter=jitter)

    async def aembed_query(self, text: str) -> list[float]:
        return await self._call(self._inner.aembed_query, text)

    async def aembed_documents(self, texts: list[str]) -> list[list[float]]:
        return await self._call(self._inner.aembed_documents, texts)

    async def _call(self, fn, arg):
        try:
            return await self._retry(fn)(arg)
        except Exception as e:
            raise EmbeddingBackendError(
                f"Embedding call failed: {type(e).__name__}: {e}",
                attempts=self.max_attempts,
            ) from e


def create_embedding_backend(settings: Settings) -> RetryingEmbeddings:
    """Create the OpenAI embeddings backend with client-side retries.

    LangChain's own retries are disabled so attempts are counted (and logged)
    in one place.
    """
    from langchain_openai import OpenAIEmbeddings

    inner = OpenAIEmbeddings(
        model=settings.embedding_model,
        dimensions=settings.embedding_dimensions,
        api_key=settings.openai_api_key or None,
        request_timeout=settings.embedding_timeout_seconds,
        max_retries=0,
    )
    return RetryingEmbeddings(inner, max_attempts=settings.embedding_max_retries)


def cosine_similarity(a: Sequence[float] | np.ndarray, b: Sequence[float] | np.ndarray) -> float:
    """Cosine similarity of two vectors; 0.0 for empty, zero or mismatched vectors."""
    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    if va.size == 0 or va.shape != vb.shape:
        return 0.0
    norm = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if norm == 0.0 or not np.isfinite(norm):
        return 0.0
    return float(np.dot(va, vb) / norm)


class AnchorCache:
    """Holds anchor embeddings for the life of the process.

    Created once at startup and passed to every PraiseFilter that should
    share it. Concurrent first calls compute the anchors only once; a failed
    computation caches nothing, so the next call tries again.
    """

    def __init__(self) -> None:
        self._vectors: dict[tuple[str, ...], list[np.ndarray]] = {}
        self._lock = asyncio.Lock()
        self.computations = 0

    async def get(self, backend: EmbeddingBackend, texts: Sequence[str]) -> list[np.ndarray]:
        key = tuple(texts)
        cached = self._vectors.get(key)
        if cached is not None:
            return cached

        async with self._lock:
            cached = self._vectors.get(key)
            if cached is not None:
                return cached

            raw = await backend.aembed_documents(list(key))
            if not raw or len(raw) != len(key) or any(v is None or len(v) == 0 for v in raw):
                raise EmbeddingBackendError("Backend returned no vectors for anchor texts")

            vectors = [np.asarray(v, dtype=float) for v in raw]
            self._vectors[key] = vectors
            self.computations += 1
            logger.debug("anchor_embeddings_cached", anchors=len(vectors))
            return vectors

    def clear(self) -> None:
        self._vectors.clear()
