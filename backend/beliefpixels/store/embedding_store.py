"""Per-user pixel collections in Chroma.

Every user gets one collection, named ``{prefix}-{user_id}``. Collections are
created lazily on first access with cosine distance; that setting is fixed
at creation time. Chroma's client is synchronous, so calls run in a worker
thread to keep the event loop free.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import re
from typing import Any

from beliefpixels.errors import PixelValidationError, StoreError
from beliefpixels.models.pixel import PixelMetadata, PixelRecords
from beliefpixels.store.client import ChromaClientProvider, classify_store_error
from beliefpixels.store.embeddings import Embedder

logger = logging.getLogger(__name__)

COLLECTION_METADATA = {
    "hnsw:space": "cosine",
    "hnsw:construction_ef": 100,
    "hnsw:search_ef": 100,
}

# Chroma: 3-63 chars of [a-zA-Z0-9._-], alphanumeric at both ends
_VALID_NAME = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9._-]{1,61}[a-zA-Z0-9]$")


def collection_name_for(user_id: str, prefix: str = "pixels") -> str:
    """Stable collection name for a user. Hashes ids chroma would reject."""
    if not user_id:
        raise PixelValidationError("user_id is required")
    name = f"{prefix}-{user_id}"
    if _VALID_NAME.match(name):
        return name
    digest = hashlib.sha256(user_id.encode("utf-8")).hexdigest()[:32]
    return f"{prefix}-{digest}"


class EmbeddingStore:
    """add / get_all / delete / delete_all over a user's collection."""

    def __init__(
        self,
        clients: ChromaClientProvider,
        embedder: Embedder,
        prefix: str = "pixels",
    ) -> None:
        self._clients = clients
        self._embedder = embedder
        self._prefix = prefix

    def collection_name(self, user_id: str) -> str:
        return collection_name_for(user_id, self._prefix)

    async def _collection(self, user_id: str) -> Any:
        name = self.collection_name(user_id)
        # First use builds the client; that can hit the network
        client = await asyncio.to_thread(self._clients.get)
        return await asyncio.to_thread(
            client.get_or_create_collection,
            name=name,
            metadata=COLLECTION_METADATA,
            embedding_function=None,
        )

    async def add(
        self,
        user_id: str,
        document_text: str,
        metadata: PixelMetadata,
        pixel_id: str,
    ) -> None:
        """Embed ``document_text`` and insert one record. Raises StoreError on failure."""
        flat = metadata.to_flat()
        embedding = await self._embedder.embed(document_text)
        try:
            collection = await self._collection(user_id)
            await asyncio.to_thread(
                collection.add,
                ids=[pixel_id],
                embeddings=[embedding],
                documents=[document_text],
                metadatas=[flat],
            )
        except StoreError:
            raise
        except Exception as e:
            raise self._fail(e, "adding a pixel", user_id) from e
        logger.info("Stored pixel %s for user %s (%d dims)", pixel_id, user_id, len(embedding))

    async def get_all(self, user_id: str) -> PixelRecords:
        try:
            collection = await self._collection(user_id)
            result = await asyncio.to_thread(
                collection.get,
                include=["embeddings", "documents", "metadatas"],
            )
        except StoreError:
            raise
        except Exception as e:
            raise self._fail(e, "fetching pixels", user_id) from e

        ids = list(result.get("ids") or [])
        embeddings = _column(result, "embeddings", len(ids))
        documents = _column(result, "documents", len(ids))
        metadatas = _column(result, "metadatas", len(ids))

        return PixelRecords(
            ids=ids,
            embeddings=[[float(x) for x in e] if e is not None else [] for e in embeddings],
            documents=[d or "" for d in documents],
            metadatas=[PixelMetadata.from_flat(m) for m in metadatas],
        )

    async def delete(self, user_id: str, pixel_id: str) -> None:
        """Remove one record. Deleting an absent id is a no-op."""
        try:
            collection = await self._collection(user_id)
            await asyncio.to_thread(collection.delete, ids=[pixel_id])
        except StoreError:
            raise
        except Exception as e:
            raise self._fail(e, "deleting a pixel", user_id) from e
        logger.info("Deleted pixel %s for user %s", pixel_id, user_id)

    async def delete_all(self, user_id: str) -> int:
        """Remove every record of the user. Returns how many were removed."""
        try:
            collection = await self._collection(user_id)
            result = await asyncio.to_thread(collection.get, include=[])
            ids = list(result.get("ids") or [])
            if ids:
                await asyncio.to_thread(collection.delete, ids=ids)
        except StoreError:
            raise
        except Exception as e:
            raise self._fail(e, "deleting all pixels", user_id) from e
        logger.info("Deleted %d pixels for user %s", len(ids), user_id)
        return len(ids)

    def _fail(self, exc: Exception, action: str, user_id: str) -> StoreError:
        error = classify_store_error(exc, action)
        logger.error("Chroma error for user %s: %s", user_id, error)
        return error


def _column(result: Any, key: str, size: int) -> list[Any]:
    # Chroma may hand back numpy arrays; never truth-test them
    values = result.get(key)
    if values is None:
        return [None] * size
    return list(values)
