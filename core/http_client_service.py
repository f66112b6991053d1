# core/http_client_service.py
"""Perform HTTP I/O for the AI-backed parser.

This module centralizes concurrency limits and response handling so the parser
does not re-implement network concerns.

Notes:
    - Requests are concurrency-limited via a semaphore.
    - Each call issues exactly one request. Retry and backoff belong to the
      calling layer; failures propagate as `httpx` exceptions.
    - Cancellation and timeouts surface at the awaiting call site.
"""

import asyncio
from typing import Any

import httpx
import structlog

import config

logger = structlog.get_logger(__name__)


class HTTPClientService:
    """Perform concurrency-limited, single-attempt HTTP requests."""

    def __init__(
        self,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        max_concurrency: int | None = None,
    ):
        """Initialize the HTTP client.

        Args:
            timeout: Request timeout in seconds. Defaults to `config.HTTPX_TIMEOUT`.
            transport: Optional transport override (tests use `httpx.MockTransport`).
            max_concurrency: Concurrent request limit. Defaults to
                `config.MAX_CONCURRENT_LLM_CALLS`.
        """
        effective_timeout = timeout if timeout is not None else config.HTTPX_TIMEOUT
        concurrency = max_concurrency if max_concurrency is not None else config.MAX_CONCURRENT_LLM_CALLS
        self._client = httpx.AsyncClient(timeout=effective_timeout, transport=transport)
        self._semaphore = asyncio.Semaphore(concurrency)
        self.request_count = 0
        self._stats = {
            "total_requests": 0,
            "successful_requests": 0,
            "failed_requests": 0,
        }

        logger.debug(f"HTTPClientService initialized with timeout={effective_timeout}s, concurrency_limit={concurrency}")

    async def __aenter__(self) -> "HTTPClientService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client and release resources."""
        await self._client.aclose()
        logger.debug("HTTPClientService closed")

    async def post_json(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """POST a JSON payload once.

        Args:
            url: Target URL for the request.
            payload: JSON payload to send.
            headers: Optional HTTP headers.

        Returns:
            The successful HTTP response.

        Raises:
            httpx.TimeoutException: When the request times out.
            httpx.HTTPStatusError: When the server answers with a 4xx/5xx status.
            httpx.RequestError: When the request cannot be sent.
        """
        async with self._semaphore:
            self._stats["total_requests"] += 1
            self.request_count += 1

            try:
                logger.debug(f"HTTP POST to {url}")
                response = await self._client.post(url, json=payload, headers=headers or {})
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                self._stats["failed_requests"] += 1
                logger.warning(
                    f"HTTP status error: {e.response.status_code}",
                    url=url,
                    body=e.response.text[:200],
                )
                raise
            except httpx.HTTPError as e:
                self._stats["failed_requests"] += 1
                logger.warning(f"HTTP request error: {type(e).__name__}: {e}", url=url)
                raise

            self._stats["successful_requests"] += 1
            logger.debug(f"HTTP POST successful: {response.status_code}")
            return response

    def get_statistics(self) -> dict[str, Any]:
        """Return HTTP request statistics for monitoring."""
        total = self._stats["total_requests"]
        return {
            **self._stats,
            "success_rate": (self._stats["successful_requests"] / total * 100) if total > 0 else 0,
            "failure_rate": (self._stats["failed_requests"] / total * 100) if total > 0 else 0,
        }


class CompletionHTTPClient:
    """Call an OpenAI-compatible chat completion API using a shared HTTP client."""

    def __init__(self, http_client: HTTPClientService, api_base: str | None = None, api_key: str | None = None):
        """Initialize the completion client.

        Args:
            http_client: Shared HTTP client used for requests.
            api_base: Base URL; defaults to `config.OPENAI_API_BASE`.
            api_key: Bearer token; defaults to `config.OPENAI_API_KEY`.
        """
        self._http_client = http_client
        self._api_base = (api_base if api_base is not None else config.OPENAI_API_BASE).rstrip("/")
        self._api_key = api_key if api_key is not None else config.OPENAI_API_KEY

    async def get_completion(
        self,
        model: str,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Request a chat completion.

        Args:
            model: Model identifier.
            messages: Chat messages payload.
            temperature: Sampling temperature.
            max_tokens: Maximum tokens to generate.
            **kwargs: Additional provider-specific parameters merged into the request.

        Returns:
            Parsed JSON response from the completion provider.

        Raises:
            httpx.HTTPError: If the HTTP request fails.
            ValueError: If a successful response body is not JSON.
        """
        payload = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "stream": False,
            **kwargs,
        }

        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        logger.debug(f"Requesting completion from {self._api_base} for model '{model}' with {len(messages)} messages")

        response = await self._http_client.post_json(f"{self._api_base}/chat/completions", payload, headers)

        return response.json()
