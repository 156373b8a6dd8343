"""Remote embedding service client (`POST {base_url}/embedding`)."""

from __future__ import annotations

import httpx
from pydantic import ValidationError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from observability.logger import get_logger
from pipeline.errors import EmbeddingMalformed, EmbeddingUnavailable
from schemas.embeddings import EmbeddingRequest, EmbeddingResponse

log = get_logger(__name__)


class HTTPEmbeddings:
    """Embeds text through a remote HTTP service. Implements EmbeddingProvider protocol.

    Transport failures (connection errors, timeouts) are retried up to
    ``max_attempts`` times; HTTP error statuses are not. The reply must match
    EmbeddingResponse or the call fails with EmbeddingMalformed.
    """

    provider_name: str = "http"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        max_attempts: int = 2,
        retry_wait: float = 0.5,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = f"{base_url.rstrip('/')}/embedding"
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        self.retry_wait = retry_wait
        self._client = client

    async def embed(self, text: str) -> list[float]:
        try:
            response = await self._post(text)
        except httpx.HTTPError as e:
            log.error("embedding.http.failed", url=self.url, error=str(e))
            raise EmbeddingUnavailable(f"embedding request to {self.url} failed: {e}") from e

        try:
            parsed = EmbeddingResponse.model_validate_json(response.content)
        except ValidationError as e:
            log.error("embedding.http.malformed", url=self.url, errors=e.error_count())
            raise EmbeddingMalformed(f"embedding response from {self.url} is malformed: {e}") from e

        log.debug("embedding.http.success", dimension=len(parsed.embedding))
        return parsed.embedding

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [await self.embed(t) for t in texts]

    async def _post(self, text: str) -> httpx.Response:
        if self._client is not None:
            return await self._post_with_retry(self._client, text)
        async with httpx.AsyncClient() as client:
            return await self._post_with_retry(client, text)

    async def _post_with_retry(self, client: httpx.AsyncClient, text: str) -> httpx.Response:
        payload = EmbeddingRequest(text=text).model_dump()
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.retry_wait, max=8),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    log.warning(
                        "embedding.http.retry",
                        url=self.url,
                        attempt=attempt.retry_state.attempt_number,
                    )
                response = await client.post(self.url, json=payload, timeout=self.timeout)
                response.raise_for_status()
        return response
