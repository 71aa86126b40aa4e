"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from beliefpixels import __version__
from beliefpixels.config import settings
from beliefpixels.extraction.extractor import Extractor
from beliefpixels.pipeline.processed_log import MessageMarker
from beliefpixels.store.embedding_store import EmbeddingStore

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.pixels_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app(
    store: EmbeddingStore | None = None,
    extractor: Extractor | None = None,
    marker: MessageMarker | None = None,
) -> FastAPI:
    """Build the app. Collaborators are created here once and shared by all requests."""
    from beliefpixels.dependencies import build_marker, build_store

    app = FastAPI(
        title="Belief Pixels",
        description="Belief extraction, per-user vector storage and 3D projection",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.store = store or build_store()
    app.state.extractor = extractor or Extractor()
    app.state.marker = marker or build_marker()

    from beliefpixels.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
