"""Embedding provider client with lexical fallback.

Steps are embedded through an external, OpenAI-compatible ``/embeddings``
endpoint. The core never depends on an embedding being present: when the
provider fails, ``EmbeddingService.try_embed`` logs the failure and returns
None, and similarity falls back to lexical measures for that step.

Architecture:
    EmbeddingService owns an ``EmbeddingBackend`` (the HTTP client in
    production, a stub in tests) and an asyncio.Semaphore bounding
    concurrent provider calls. No retries happen here; retrying is the
    caller's decision.

Usage:
    from rabbithole.embedding import EmbeddingService, HTTPEmbeddingBackend

    service = EmbeddingService(HTTPEmbeddingBackend.from_settings())
    vector = await service.try_embed(step.text)
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

import aiohttp
import numpy as np
from pydantic import BaseModel, Field, field_validator

from rabbithole.errors import ProviderError

if TYPE_CHECKING:
    from rabbithole.models import Step
    from rabbithole.settings import Settings

logger = logging.getLogger(__name__)

MAX_EMBEDDING_CHARS = 8000
DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"
DEFAULT_EMBEDDING_DIMENSIONS = 512
DEFAULT_TIMEOUT_S = 10.0
DEFAULT_CONCURRENCY = 4


class EmbeddingRequest(BaseModel):
    """Request sent to the embedding provider.

    Text longer than 8000 characters is truncated on construction.
    """

    model_config = {"frozen": True}

    text: str
    model: str = DEFAULT_EMBEDDING_MODEL
    dimensions: int = Field(default=DEFAULT_EMBEDDING_DIMENSIONS, gt=0)

    @field_validator("text")
    @classmethod
    def _truncate(cls, v: str) -> str:
        return v[:MAX_EMBEDDING_CHARS]

    def to_payload(self) -> dict:
        """Body for an OpenAI-compatible embeddings endpoint."""
        return {"input": self.text, "model": self.model, "dimensions": self.dimensions}


@runtime_checkable
class EmbeddingBackend(Protocol):
    """Protocol for anything that turns an EmbeddingRequest into a vector.

    Implementations raise ProviderError when the provider cannot serve the
    request.
    """

    async def embed(self, request: EmbeddingRequest) -> np.ndarray:
        """Embed one request."""
        ...


class HTTPEmbeddingBackend:
    """EmbeddingBackend over an OpenAI-compatible HTTP API.

    Attributes:
        api_base: Base URL, e.g. ``https://api.openai.com/v1``
        api_key: Bearer token (optional for local providers)
        timeout_s: Total timeout per request
    """

    def __init__(
        self,
        api_base: str,
        api_key: Optional[str] = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """Initialize the HTTP backend.

        Args:
            api_base: Base URL of the provider API
            api_key: Bearer token, if the provider needs one
            timeout_s: Total timeout per request in seconds
            session: Shared ClientSession. If None, a session is opened per request.
        """
        self.api_base = api_base.rstrip("/")
        self.api_key = api_key
        self.timeout_s = timeout_s
        self._session = session

    @classmethod
    def from_settings(cls, settings: Optional["Settings"] = None) -> "HTTPEmbeddingBackend":
        if settings is None:
            from rabbithole.settings import get_settings

            settings = get_settings()
        return cls(
            api_base=settings.embedding_api_base,
            api_key=settings.embedding_api_key,
            timeout_s=settings.embedding_timeout_s,
        )

    @property
    def url(self) -> str:
        return f"{self.api_base}/embeddings"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def embed(self, request: EmbeddingRequest) -> np.ndarray:
        """POST the request and parse the first embedding in the response.

        Raises:
            ProviderError: On transport errors, timeouts, non-200 responses
                or malformed bodies.
        """
        try:
            if self._session is not None:
                return await self._post(self._session, request)
            async with aiohttp.ClientSession() as session:
                return await self._post(session, request)
        except asyncio.TimeoutError as e:
            raise ProviderError(f"Embedding request timed out after {self.timeout_s}s") from e
        except aiohttp.ClientError as e:
            raise ProviderError(f"Embedding request failed: {e}") from e

    async def _post(self, session: aiohttp.ClientSession, request: EmbeddingRequest) -> np.ndarray:
        async with session.post(
            self.url,
            json=request.to_payload(),
            headers=self._headers(),
            timeout=aiohttp.ClientTimeout(total=self.timeout_s),
        ) as response:
            if response.status != 200:
                detail = await response.text()
                raise ProviderError(
                    f"Embedding provider returned {response.status}: {detail[:200]}"
                )
            data = await response.json()

        try:
            vector = data["data"][0]["embedding"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError("Embedding provider returned a malformed body") from e
        return np.asarray(vector, dtype=np.float64)


class EmbeddingService:
    """Embeds step text through a backend, bounding concurrency.

    Attributes:
        backend: Provider backend
        model: Model name sent with every request
        dimensions: Requested (and expected) embedding dimension
    """

    def __init__(
        self,
        backend: EmbeddingBackend,
        model: str = DEFAULT_EMBEDDING_MODEL,
        dimensions: int = DEFAULT_EMBEDDING_DIMENSIONS,
        max_concurrency: int = DEFAULT_CONCURRENCY,
    ):
        self.backend = backend
        self.model = model
        self.dimensions = dimensions
        self._semaphore = asyncio.Semaphore(max_concurrency)

        # Statistics
        self._success_count = 0
        self._failure_count = 0

    @classmethod
    def from_settings(cls, settings: Optional["Settings"] = None) -> "EmbeddingService":
        if settings is None:
            from rabbithole.settings import get_settings

            settings = get_settings()
        return cls(
            backend=HTTPEmbeddingBackend.from_settings(settings),
            model=settings.embedding_model,
            dimensions=settings.embedding_dimensions,
        )

    def request_for(self, text: str) -> EmbeddingRequest:
        return EmbeddingRequest(text=text, model=self.model, dimensions=self.dimensions)

    async def embed(self, text: str) -> np.ndarray:
        """Embed ``text``.

        Raises:
            ProviderError: If the backend fails or returns a vector of the
                wrong dimension.
        """
        request = self.request_for(text)
        async with self._semaphore:
            vector = await self.backend.embed(request)

        if vector.ndim != 1 or vector.shape[0] != self.dimensions:
            raise ProviderError(
                f"Expected a {self.dimensions}-dim embedding, got shape {vector.shape}"
            )
        return vector

    async def try_embed(self, text: str) -> Optional[np.ndarray]:
        """Embed ``text``, returning None (lexical fallback) on provider failure."""
        try:
            vector = await self.embed(text)
        except ProviderError as e:
            self._failure_count += 1
            logger.warning(f"Embedding unavailable, falling back to lexical similarity: {e}")
            return None
        self._success_count += 1
        return vector

    async def embed_step(self, step: "Step") -> "Step":
        """Return ``step`` with an embedding attached, or unchanged on failure."""
        if step.embedding is not None:
            return step
        vector = await self.try_embed(step.text)
        if vector is None:
            return step
        return step.with_embedding(vector)

    def get_stats(self) -> dict[str, int]:
        return {"success_count": self._success_count, "failure_count": self._failure_count}
