"""
Ollama Client - Local LLM server over HTTP.

Features:
- Async HTTP client, created lazily
- Retry with exponential backoff on transport errors
- Failures surfaced as ModelUnavailableError
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from taskforge.config import ModelUnavailableError

logger = logging.getLogger(__name__)

__all__ = ["OllamaClient"]


class OllamaClient:
    """
    Ollama local LLM client.

    Example:
        >>> client = OllamaClient()
        >>> text = await client.generate("llama3.2", "Summarize the Q3 report")
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        timeout: float = 120.0,
        max_attempts: int = 3,
        backoff_seconds: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize Ollama client.

        Args:
            base_url: Ollama server URL
            timeout: Request timeout in seconds
            max_attempts: Attempts per request on transport errors
            backoff_seconds: Exponential backoff multiplier
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        """Send a request, retrying transport errors, and decode the JSON body."""
        client = await self._get_client()
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(httpx.TransportError),
                stop=stop_after_attempt(self.max_attempts),
                wait=wait_exponential(multiplier=self.backoff_seconds, max=10),
                reraise=True,
            ):
                with attempt:
                    if attempt.retry_state.attempt_number > 1:
                        logger.warning(
                            "Retrying Ollama %s %s (attempt %d/%d)",
                            method,
                            path,
                            attempt.retry_state.attempt_number,
                            self.max_attempts,
                        )
                    response = await client.request(method, path, json=payload)
                    response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ModelUnavailableError(
                f"Ollama returned HTTP {e.response.status_code}",
                {"url": str(e.request.url), "status_code": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            raise ModelUnavailableError(
                f"Ollama request failed: {e}",
                {"url": f"{self.base_url}{path}", "attempts": self.max_attempts},
            ) from e

        return response.json()

    async def generate(
        self,
        model: str,
        prompt: str,
        system: str | None = None,
        temperature: float = 0.7,
    ) -> str:
        """
        Generate text response.

        Args:
            model: Model name (e.g., "llama3.2")
            prompt: User prompt
            system: Optional system prompt
            temperature: Sampling temperature

        Returns:
            Generated text
        """
        payload: dict[str, Any] = {
            "model": model,
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": temperature},
        }
        if system:
            payload["system"] = system

        data = await self._request("POST", "/api/generate", payload)
        return data.get("response", "")

    async def list_models(self) -> list[str]:
        """List available models."""
        data = await self._request("GET", "/api/tags")
        return [m["name"] for m in data.get("models", [])]

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
