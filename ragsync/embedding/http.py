# ragsync/embedding/http.py
"""
Embedder for OpenAI-compatible /embeddings endpoints.

Batching uses recursive halving: requests start at batch_size texts and
a rejected batch is retried at half the size, down to a single text.
Top-level batches may be sent concurrently (max_workers); output order
always matches input order.

A rate-limited request (HTTP 429) is not halved: the same batch is
retried after an exponential backoff, or after the server's Retry-After
delay when it sends one.
"""

from __future__ import annotations

import os
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional

import httpx

from ragsync.core.exceptions import EmbeddingError
from ragsync.core.http import (
    APIError,
    AuthenticationError,
    ModelNotFoundError,
    RateLimitError,
    create_api_client,
    handle_api_error,
    raise_for_status,
)
from ragsync.logging.logger import get_logger
from ragsync.logging.tags import EMBEDDING

logger = get_logger(__name__)

ENDPOINT = "/embeddings"

RETRY_BACKOFF_BASE = 0.5  # seconds
RETRY_BACKOFF_MAX = 10.0  # seconds


def _rate_limit_delay(error: RateLimitError, attempt: int) -> float:
    """Retry-After from the response if present, else exponential backoff."""
    response = getattr(error.original_error, "response", None)
    if response is not None:
        try:
            return min(float(response.headers["Retry-After"]), RETRY_BACKOFF_MAX)
        except (KeyError, ValueError):
            pass
    return min(RETRY_BACKOFF_BASE * (2 ** attempt), RETRY_BACKOFF_MAX)


class HTTPEmbedder:
    """
    Usage:
        embedder = HTTPEmbedder(model="text-embedding-3-small", api_key="sk-...")
        vectors = embedder.embed_batch(["first chunk", "second chunk"])
    """

    provider = "openai"

    def __init__(
        self,
        model: str,
        base_url: str = "https://api.openai.com/v1",
        api_key: Optional[str] = None,
        api_key_env: Optional[str] = "OPENAI_API_KEY",
        batch_size: int = 96,
        max_workers: int = 1,
        timeout: Optional[float] = None,
        rate_limit_retries: int = 3,
        **client_kwargs: Any,
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if max_workers <= 0:
            raise ValueError("max_workers must be positive")
        if rate_limit_retries < 0:
            raise ValueError("rate_limit_retries must not be negative")

        if api_key is None and api_key_env:
            api_key = os.getenv(api_key_env)
        if not api_key:
            raise EmbeddingError(
                f"No API key for {self.provider} embeddings (set {api_key_env or 'api_key'})"
            )

        self.model = model
        self.batch_size = batch_size
        self.max_workers = max_workers
        self.rate_limit_retries = rate_limit_retries
        self._client = create_api_client(
            base_url=base_url,
            api_key=api_key,
            timeout=timeout,
            timeout_type="embedding",
            **client_kwargs,
        )

    @property
    def embedding_id(self) -> str:
        return f"{self.provider}:{self.model}"

    def close(self) -> None:
        self._client.close()

    def embed(self, text: str) -> List[float]:
        return self.embed_batch([text])[0]

    def embed_batch(self, texts: List[str]) -> List[List[float]]:
        """
        Embed texts in order.

        Raises:
            EmbeddingError: If a request still fails at batch size 1, or the
                response is malformed
        """
        if not texts:
            return []

        batches = [texts[i : i + self.batch_size] for i in range(0, len(texts), self.batch_size)]
        logger.info(
            f"{EMBEDDING} Embedding {len(texts)} texts in {len(batches)} batches "
            f"(size={self.batch_size}, workers={self.max_workers})"
        )

        try:
            if self.max_workers == 1 or len(batches) == 1:
                results = [self._embed_with_retry(b, self.batch_size) for b in batches]
            else:
                with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                    results = list(
                        pool.map(lambda b: self._embed_with_retry(b, self.batch_size), batches)
                    )
        except APIError as e:
            raise EmbeddingError(f"Embedding request failed: {e}") from e

        vectors: List[List[float]] = []
        for batch_vectors in results:
            vectors.extend(batch_vectors)
        return vectors

    def _embed_with_retry(self, texts: List[str], batch_size: int) -> List[List[float]]:
        vectors: List[List[float]] = []

        for i in range(0, len(texts), batch_size):
            batch = texts[i : i + batch_size]
            try:
                t0 = time.perf_counter()
                vectors.extend(self._embed_single_batch(batch))
                logger.debug(
                    f"{EMBEDDING} {len(batch)} texts in {time.perf_counter() - t0:.2f}s"
                )
            except (AuthenticationError, ModelNotFoundError, RateLimitError):
                raise
            except (APIError, EmbeddingError) as e:
                if len(batch) == 1:
                    raise

                new_size = max(1, min(batch_size, len(batch)) // 2)
                logger.warning(
                    f"{EMBEDDING} Batch of {len(batch)} failed, retrying with size {new_size}: {e}"
                )
                vectors.extend(self._embed_with_retry(batch, new_size))

        return vectors

    def _post(self, payload: dict) -> httpx.Response:
        attempt = 0
        while True:
            try:
                try:
                    response = self._client.post(ENDPOINT, json=payload)
                except httpx.HTTPError as e:
                    raise handle_api_error(e, provider=self.provider, endpoint=ENDPOINT) from e
                raise_for_status(response, provider=self.provider, endpoint=ENDPOINT)
                return response
            except RateLimitError as e:
                if attempt >= self.rate_limit_retries:
                    raise
                delay = _rate_limit_delay(e, attempt)
                attempt += 1
                logger.warning(
                    f"{EMBEDDING} Rate limited, retry {attempt}/{self.rate_limit_retries} "
                    f"in {delay:.1f}s"
                )
                time.sleep(delay)

    def _embed_single_batch(self, texts: List[str]) -> List[List[float]]:
        response = self._post({"model": self.model, "input": texts})

        try:
            data = response.json()["data"]
            items = sorted(data, key=lambda d: d.get("index", 0))
            vectors = [list(map(float, item["embedding"])) for item in items]
        except (ValueError, KeyError, TypeError) as e:
            raise EmbeddingError(f"Malformed embedding response: {e}") from e

        if len(vectors) != len(texts):
            raise EmbeddingError(f"Expected {len(texts)} embeddings, got {len(vectors)}")

        return vectors


__all__ = ["HTTPEmbedder"]
