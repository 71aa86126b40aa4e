"""Tests for the per-user embedding store (against an in-memory chroma fake)."""

from __future__ import annotations

import asyncio
import time

import pytest

from beliefpixels.errors import (
    PixelValidationError,
    StoreConfigurationError,
    StorePermissionError,
    StoreTransientError,
)
from beliefpixels.models.pixel import PixelMetadata, document_text
from beliefpixels.models.stage import PixelDraft
from beliefpixels.store.client import ChromaClientProvider
from beliefpixels.store.embedding_store import (
    COLLECTION_METADATA,
    EmbeddingStore,
    collection_name_for,
)
from tests.conftest import PIXEL_OUTPUT, FakeChromaClient, FakeEmbedder


def _metadata() -> PixelMetadata:
    draft = PixelDraft.model_validate(PIXEL_OUTPUT["pixel"])
    return PixelMetadata.from_draft(draft, chat_id="chat-1", user_email="u@x.io")


def _add(store: EmbeddingStore, user_id: str, pixel_id: str) -> None:
    meta = _metadata()
    asyncio.run(
        store.add(user_id, document_text(meta.statement, meta.context), meta, pixel_id)
    )


def test_add_then_get_all_returns_parallel_lists(store, chroma_client, embedder):
    _add(store, "user-1", "p1")
    _add(store, "user-1", "p2")

    records = asyncio.run(store.get_all("user-1"))

    assert records.ids == ["p1", "p2"]
    assert len(records.embeddings) == len(records.documents) == len(records.metadatas) == 2
    assert len(records.embeddings[0]) == embedder.dims
    assert records.documents[0].startswith("context: ")
    assert records.metadatas[0].color_stage.orange == 0.8
    assert records.metadatas[0].chat_id == "chat-1"


def test_stored_metadata_is_flat(store, chroma_client):
    _add(store, "user-1", "p1")
    stored = chroma_client.collections["pixels-user-1"].records["p1"]["metadata"]
    assert isinstance(stored["color_stage"], str)


def test_embedding_is_computed_from_document_text(store, embedder):
    _add(store, "user-1", "p1")
    assert embedder.calls == [document_text("I never do enough at work", _metadata().context)]


def test_collection_created_lazily_with_cosine_space(store, chroma_client):
    assert chroma_client.collections == {}
    asyncio.run(store.get_all("user-1"))
    collection = chroma_client.collections["pixels-user-1"]
    assert collection.metadata == COLLECTION_METADATA
    assert collection.metadata["hnsw:space"] == "cosine"


def test_users_are_isolated(store):
    _add(store, "alice", "p1")
    _add(store, "bob", "p2")
    assert asyncio.run(store.get_all("alice")).ids == ["p1"]
    assert asyncio.run(store.get_all("bob")).ids == ["p2"]


def test_empty_collection(store):
    records = asyncio.run(store.get_all("nobody"))
    assert len(records) == 0
    assert records.embeddings == []


def test_delete_single_and_absent_id(store):
    _add(store, "user-1", "p1")
    _add(store, "user-1", "p2")
    asyncio.run(store.delete("user-1", "p1"))
    asyncio.run(store.delete("user-1", "does-not-exist"))
    assert asyncio.run(store.get_all("user-1")).ids == ["p2"]


def test_delete_all_twice_second_returns_zero(store):
    for i in range(3):
        _add(store, "user-1", f"p{i}")
    assert asyncio.run(store.delete_all("user-1")) == 3
    assert asyncio.run(store.delete_all("user-1")) == 0


def test_delete_all_leaves_other_users(store):
    _add(store, "alice", "p1")
    _add(store, "bob", "p2")
    asyncio.run(store.delete_all("alice"))
    assert asyncio.run(store.get_all("bob")).ids == ["p2"]


def test_embedding_failure_writes_nothing(store, chroma_client, embedder):
    embedder.fail_with = StoreTransientError("provider down")
    with pytest.raises(StoreTransientError):
        _add(store, "user-1", "p1")
    assert "pixels-user-1" not in chroma_client.collections


def test_permission_error_is_classified(store, chroma_client):
    asyncio.run(store.get_all("user-1"))
    chroma_client.collections["pixels-user-1"].fail_with = RuntimeError("Permission denied")
    with pytest.raises(StorePermissionError, match="CHROMA_API_KEY"):
        _add(store, "user-1", "p1")


def test_other_errors_are_transient(store, chroma_client):
    asyncio.run(store.get_all("user-1"))
    chroma_client.collections["pixels-user-1"].fail_with = ConnectionError("connection reset")
    with pytest.raises(StoreTransientError):
        asyncio.run(store.delete_all("user-1"))


def test_client_construction_failure_is_cached():
    attempts = []

    def factory():
        attempts.append(1)
        raise StoreConfigurationError("Chroma not configured")

    store = EmbeddingStore(ChromaClientProvider(factory=factory), FakeEmbedder())
    for _ in range(3):
        with pytest.raises(StoreConfigurationError):
            asyncio.run(store.get_all("user-1"))
    assert len(attempts) == 1


def test_collection_names():
    assert collection_name_for("user-1") == "pixels-user-1"
    assert collection_name_for("abc", prefix="beliefs") == "beliefs-abc"

    odd = collection_name_for("someone@example.com")
    assert odd.startswith("pixels-")
    assert "@" not in odd
    assert odd == collection_name_for("someone@example.com")
    assert odd != collection_name_for("other@example.com")

    long_name = collection_name_for("x" * 100)
    assert len(long_name) <= 63


def test_empty_user_id_is_rejected():
    with pytest.raises(PixelValidationError):
        collection_name_for("")


def test_numpy_embeddings_from_client_are_converted(chroma_client):
    np = pytest.importorskip("numpy")
    store = EmbeddingStore(ChromaClientProvider(factory=lambda: chroma_client), FakeEmbedder())
    _add(store, "user-1", "p1")
    collection = chroma_client.collections["pixels-user-1"]
    original_get = collection.get

    def numpy_get(include=None):
        result = original_get(include=include)
        result["embeddings"] = np.array(result["embeddings"])
        return result

    collection.get = numpy_get
    records = asyncio.run(store.get_all("user-1"))
    assert isinstance(records.embeddings[0], list)
    assert isinstance(records.embeddings[0][0], float)


def test_slow_client_construction_does_not_block_the_loop():
    def slow_factory():
        time.sleep(0.5)
        return FakeChromaClient()

    store = EmbeddingStore(ChromaClientProvider(factory=slow_factory), FakeEmbedder())

    async def scenario():
        ticks = 0
        done = asyncio.Event()

        async def ticker():
            nonlocal ticks
            while not done.is_set():
                await asyncio.sleep(0.05)
                ticks += 1

        async def fetch():
            try:
                return await store.get_all("user-1")
            finally:
                done.set()

        records, _ = await asyncio.gather(fetch(), ticker())
        return records, ticks

    records, ticks = asyncio.run(scenario())
    assert len(records) == 0
    assert ticks >= 5
