"""FastAPI dependency injection.

The store, extractor and message log are built once at startup (see
``main.create_app``) and handed to routes through ``app.state``.
"""

from __future__ import annotations

from fastapi import Header, HTTPException, Request

from beliefpixels.config import Settings, settings
from beliefpixels.extraction.extractor import Extractor
from beliefpixels.pipeline.coordinator import ProcessingCoordinator
from beliefpixels.pipeline.processed_log import MessageMarker, ProcessedMessageLog
from beliefpixels.store.client import ChromaClientProvider
from beliefpixels.store.embedding_store import EmbeddingStore
from beliefpixels.store.embeddings import OpenAIEmbedder


def get_settings() -> Settings:
    return settings


def build_store(config: Settings | None = None) -> EmbeddingStore:
    cfg = config or settings
    return EmbeddingStore(
        clients=ChromaClientProvider(config=cfg),
        embedder=OpenAIEmbedder(model=cfg.embedding_model, api_key=cfg.openai_api_key),
        prefix=cfg.collection_prefix,
    )


def build_marker(config: Settings | None = None) -> MessageMarker:
    cfg = config or settings
    return ProcessedMessageLog(cfg.processed_log_path)


def get_store(request: Request) -> EmbeddingStore:
    return request.app.state.store


def get_extractor(request: Request) -> Extractor:
    return request.app.state.extractor


def get_coordinator(request: Request) -> ProcessingCoordinator:
    state = request.app.state
    return ProcessingCoordinator(
        extractor=state.extractor,
        store=state.store,
        marker=state.marker,
        deterministic_ids=settings.deterministic_pixel_ids,
    )


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """User id set by the authenticating proxy in front of this service."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized: missing user")
    return x_user_id
