"""Text embedding implementations: local (sentence-transformers) and Voyage API."""

from __future__ import annotations

import asyncio
import hashlib
import json
from typing import TYPE_CHECKING, Any

import structlog

from cvmatch_core.exceptions import EmbeddingError

if TYPE_CHECKING:
    from cvmatch_core.interfaces.cache import CacheClient
    from cvmatch_core.interfaces.embedder import EmbedderBase

logger = structlog.get_logger()

VOYAGE_URL = "https://api.voyageai.com/v1/embeddings"
VOYAGE_MODEL = "voyage-multilingual-2"


class LocalEmbedder:
    """sentence-transformers based embedder. Free, multilingual, no API key."""

    def __init__(self, model_name: str = "paraphrase-multilingual-MiniLM-L12-v2") -> None:
        """Initialize with a model name (lazy-loaded)."""
        self._model_name = model_name
        self._model: Any = None

    def _get_model(self) -> Any:  # noqa: ANN401
        """Lazy-load the sentence transformer model."""
        if self._model is None:
            from sentence_transformers import SentenceTransformer

            logger.info("embedding_model_load", model=self._model_name)
            self._model = SentenceTransformer(self._model_name)
        return self._model

    async def embed_text(self, text: str) -> list[float]:
        """Embed a single text string into a normalized vector."""
        model = self._get_model()
        try:
            embedding = await asyncio.to_thread(
                model.encode, text, normalize_embeddings=True
            )
        except Exception as e:
            raise EmbeddingError(f"Local embedding failed: {e}") from e
        return list(embedding.tolist())

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed multiple texts into normalized vectors."""
        if not texts:
            return []
        model = self._get_model()
        try:
            embeddings = await asyncio.to_thread(
                model.encode, texts, normalize_embeddings=True
            )
        except Exception as e:
            raise EmbeddingError(f"Local embedding failed: {e}") from e
        return [list(e.tolist()) for e in embeddings]


class VoyageEmbedder:
    """Voyage AI embeddings via API."""

    def __init__(self, api_key: str, model: str = VOYAGE_MODEL) -> None:
        """Initialize with Voyage API key."""
        self._api_key = api_key
        self._model = model

    async def embed_text(self, text: str) -> list[float]:
        """Embed a single text string via Voyage API."""
        results = await self.embed_batch([text])
        return results[0]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed multiple texts via Voyage API."""
        if not texts:
            return []
        import httpx

        try:
            async with httpx.AsyncClient(timeout=60.0) as client:
                response = await client.post(
                    VOYAGE_URL,
                    headers={
                        "Authorization": f"Bearer {self._api_key}",
                        "Content-Type": "application/json",
                    },
                    json={"input": texts, "model": self._model},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise EmbeddingError(f"Voyage embedding failed: {e}") from e
        return [item["embedding"] for item in data["data"]]


class CachedEmbedder:
    """Wrapper that caches embeddings by model namespace and text content hash.

    Vectors from different models never share a key, so switching provider or
    model on the same cache directory cannot mix vector spaces.
    """

    def __init__(
        self,
        embedder: EmbedderBase,
        cache: CacheClient,
        ttl_seconds: int = 86400 * 30,
        namespace: str = "default",
    ) -> None:
        """Initialize with an embedder, a cache client, an entry TTL and a model namespace."""
        self._embedder = embedder
        self._cache = cache
        self._ttl_seconds = ttl_seconds
        self._namespace = namespace

    def _cache_key(self, text: str) -> str:
        """Generate cache key from the namespace and text hash."""
        return f"emb:{self._namespace}:{hashlib.sha256(text.encode()).hexdigest()}"

    async def embed_text(self, text: str) -> list[float]:
        """Embed with cache lookup."""
        key = self._cache_key(text)
        cached = await self._cache.get(key)
        if cached:
            logger.debug("embedding_cache_hit", namespace=self._namespace, key=key[-16:])
            return json.loads(cached)  # type: ignore[no-any-return]

        embedding = await self._embedder.embed_text(text)
        await self._cache.set(key, json.dumps(embedding), ttl_seconds=self._ttl_seconds)
        return embedding

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed batch with per-text caching."""
        results: list[list[float]] = []
        for text in texts:
            results.append(await self.embed_text(text))
        return results
