"""Chroma client construction and error classification.

The client is built at most once per process by ``ChromaClientProvider``.
Construction is lazy; the first caller builds it under a lock and every
later caller gets the same client, or the same cached construction error.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any
from urllib.parse import urlparse

from beliefpixels.config import Settings, settings
from beliefpixels.errors import (
    StoreConfigurationError,
    StoreError,
    StorePermissionError,
    StoreTransientError,
)

logger = logging.getLogger(__name__)

_PERMISSION_HINT = (
    "Please check your CHROMA_API_KEY, CHROMA_TENANT, and CHROMA_DATABASE environment variables."
)
_PERMISSION_MARKERS = ("permission", "unauthorized", "forbidden", "not authorized")
_CONFIG_MARKERS = (
    "not configured",
    "api key",
    "api_key",
    "dimension",
    "are you sure it exists",
    "tenant not found",
    "database not found",
    "does not exist",
)


def classify_store_error(exc: Exception, action: str) -> StoreError:
    """Map a raw chroma/network exception onto a StoreError subclass."""
    if isinstance(exc, StoreError):
        return exc

    message = str(exc) or type(exc).__name__
    lowered = message.lower()
    if any(marker in lowered for marker in _PERMISSION_MARKERS):
        return StorePermissionError(
            f"Chroma permission error while {action}: {_PERMISSION_HINT} ({message})"
        )
    if any(marker in lowered for marker in _CONFIG_MARKERS):
        return StoreConfigurationError(f"Chroma configuration error while {action}: {message}")
    return StoreTransientError(f"Chroma unavailable while {action}: {message}")


def build_chroma_client(config: Settings) -> Any:
    """Pick a client from config: cloud triple, then URL, then local directory."""
    import chromadb

    if config.chroma_tenant and config.chroma_database and config.chroma_api_key:
        client = chromadb.CloudClient(
            tenant=config.chroma_tenant,
            database=config.chroma_database,
            api_key=config.chroma_api_key,
        )
        logger.info("Chroma Cloud client initialized (tenant=%s)", config.chroma_tenant)
        return client

    if config.chroma_url:
        parsed = urlparse(config.chroma_url)
        use_ssl = parsed.scheme == "https"
        headers = {"x-chroma-token": config.chroma_api_key} if config.chroma_api_key else None
        client = chromadb.HttpClient(
            host=parsed.hostname or "localhost",
            port=parsed.port or (443 if use_ssl else 8000),
            ssl=use_ssl,
            headers=headers,
        )
        logger.info("Chroma HTTP client initialized (%s)", config.chroma_url)
        return client

    if config.chroma_persist_dir:
        from chromadb.config import Settings as ChromaSettings

        client = chromadb.PersistentClient(
            path=config.chroma_persist_dir,
            settings=ChromaSettings(anonymized_telemetry=False),
        )
        logger.info("Chroma local client initialized (%s)", config.chroma_persist_dir)
        return client

    if config.chroma_api_key or config.chroma_tenant or config.chroma_database:
        raise StoreConfigurationError(
            "Chroma configuration incomplete. Provide CHROMA_TENANT + CHROMA_DATABASE + "
            "CHROMA_API_KEY for Chroma Cloud, or CHROMA_URL for self-hosted."
        )
    raise StoreConfigurationError(
        "Chroma not configured. Set CHROMA_TENANT/CHROMA_DATABASE/CHROMA_API_KEY, "
        "CHROMA_URL, or CHROMA_PERSIST_DIR."
    )


class ChromaClientProvider:
    """Owns the single chroma client of the process."""

    def __init__(
        self,
        factory: Callable[[], Any] | None = None,
        config: Settings | None = None,
    ) -> None:
        cfg = config or settings
        self._factory = factory or (lambda: build_chroma_client(cfg))
        self._lock = threading.Lock()
        self._attempted = False
        self._client: Any = None
        self._error: StoreError | None = None

    def get(self) -> Any:
        if not self._attempted:
            with self._lock:
                if not self._attempted:
                    self._construct()
        if self._error is not None:
            raise self._error
        return self._client

    def _construct(self) -> None:
        try:
            self._client = self._factory()
        except Exception as e:
            error = classify_store_error(e, "initializing the client")
            if error is not e:
                error.__cause__ = e
            self._error = error
            logger.error("Chroma initialization failed: %s", error)
        finally:
            self._attempted = True
