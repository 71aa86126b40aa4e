"""Text embedding providers."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from beliefpixels.config import settings
from beliefpixels.errors import StoreConfigurationError, StoreTransientError

logger = logging.getLogger(__name__)

_AUTH_MARKERS = ("api key", "api_key", "authentication", "401", "invalid_api_key")


class Embedder(Protocol):
    async def embed(self, text: str) -> list[float]: ...


class OpenAIEmbedder:
    """LangChain OpenAIEmbeddings wrapper. Default model yields 1536 dims."""

    def __init__(self, model: str | None = None, api_key: str | None = None) -> None:
        self.model = model or settings.embedding_model
        self.api_key = api_key if api_key is not None else settings.openai_api_key
        self._client: Any = None

    def _get_client(self) -> Any:
        if not self.api_key:
            raise StoreConfigurationError(
                "Embedding provider not configured, set OPENAI_API_KEY in .env"
            )
        if self._client is None:
            from langchain_openai import OpenAIEmbeddings

            self._client = OpenAIEmbeddings(model=self.model, api_key=self.api_key)
        return self._client

    async def embed(self, text: str) -> list[float]:
        client = self._get_client()
        try:
            vector = await client.aembed_query(text)
        except Exception as e:
            message = str(e)
            if any(marker in message.lower() for marker in _AUTH_MARKERS):
                raise StoreConfigurationError(
                    f"Embedding provider rejected the credentials: {message}"
                ) from e
            raise StoreTransientError(f"Embedding provider unavailable: {message}") from e
        logger.debug("Embedded %d chars into %d dims", len(text), len(vector))
        return [float(x) for x in vector]
