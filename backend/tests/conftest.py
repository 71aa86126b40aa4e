"""Shared test fixtures and in-memory fakes (no network, no chroma server)."""

from __future__ import annotations

import hashlib
import json

import pytest

from beliefpixels.extraction.extractor import Extractor
from beliefpixels.models.requests import ChatMessage, MessagePart
from beliefpixels.store.client import ChromaClientProvider
from beliefpixels.store.embedding_store import EmbeddingStore

STAGES = {
    "beige": 0.0,
    "purple": 0.1,
    "red": -0.2,
    "blue": 0.3,
    "orange": 0.8,
    "green": 0.0,
    "yellow": 0.1,
    "turquoise": 0.0,
    "coral": 0.0,
    "teal": 0.0,
}

PIXEL_OUTPUT = {
    "pixel": {
        "statement": "I never do enough at work",
        "context": "User describes constant pressure to over-deliver at their job.",
        "explanation": "Achievement focus with an absolute framing.",
        "color_stage": STAGES,
        "confidence_score": 0.7,
        "too_nuanced": False,
        "absolute_thinking": True,
    }
}

NO_PIXEL_OUTPUT = {"no_pixel": True, "reason": "Small talk only"}


def fenced(payload: dict) -> str:
    return "```json\n" + json.dumps(payload) + "\n```"


def make_messages(*lines: tuple[str, str, str]) -> list[ChatMessage]:
    """(id, role, text) triples → ChatMessage list."""
    return [
        ChatMessage(id=msg_id, role=role, parts=[MessagePart(type="text", text=text)])
        for msg_id, role, text in lines
    ]


class FakeCollection:
    def __init__(self, name: str, metadata: dict | None) -> None:
        self.name = name
        self.metadata = metadata
        self.records: dict[str, dict] = {}
        self.fail_with: Exception | None = None
        self.add_calls = 0

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def add(self, ids, embeddings, documents, metadatas) -> None:
        self._check()
        self.add_calls += 1
        for i, record_id in enumerate(ids):
            self.records[record_id] = {
                "embedding": embeddings[i],
                "document": documents[i],
                "metadata": metadatas[i],
            }

    def get(self, include=None) -> dict:
        self._check()
        include = include if include is not None else ["documents", "metadatas"]
        ids = list(self.records)
        result: dict = {"ids": ids}
        result["embeddings"] = (
            [self.records[i]["embedding"] for i in ids] if "embeddings" in include else None
        )
        result["documents"] = (
            [self.records[i]["document"] for i in ids] if "documents" in include else None
        )
        result["metadatas"] = (
            [self.records[i]["metadata"] for i in ids] if "metadatas" in include else None
        )
        return result

    def delete(self, ids) -> None:
        self._check()
        for record_id in ids:
            self.records.pop(record_id, None)


class FakeChromaClient:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def get_or_create_collection(self, name, metadata=None, embedding_function=None):
        if name not in self.collections:
            self.collections[name] = FakeCollection(name, metadata)
        return self.collections[name]


class FakeEmbedder:
    """Deterministic 8-dim vectors derived from the text hash."""

    def __init__(self, dims: int = 8) -> None:
        self.dims = dims
        self.fail_with: Exception | None = None
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.fail_with is not None:
            raise self.fail_with
        digest = hashlib.sha256(text.encode()).digest()
        return [(digest[i] / 255.0) * 2 - 1 for i in range(self.dims)]


class FakeMarker:
    def __init__(self) -> None:
        self.marked: list[list[str]] = []
        self.fail_with: Exception | None = None

    async def mark_processed(self, message_ids) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.marked.append(list(message_ids))

    @property
    def all_ids(self) -> set[str]:
        return {i for batch in self.marked for i in batch}


class ScriptedLLM:
    """Returns queued answers in order; records the prompts it was given."""

    def __init__(self, *answers: str | Exception) -> None:
        self.answers = list(answers)
        self.calls: list[tuple[str, str]] = []

    async def __call__(self, system: str, prompt: str) -> str:
        self.calls.append((system, prompt))
        answer = self.answers.pop(0) if len(self.answers) > 1 else self.answers[0]
        if isinstance(answer, Exception):
            raise answer
        return answer


@pytest.fixture
def chroma_client() -> FakeChromaClient:
    return FakeChromaClient()


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def store(chroma_client, embedder) -> EmbeddingStore:
    return EmbeddingStore(ChromaClientProvider(factory=lambda: chroma_client), embedder)


@pytest.fixture
def marker() -> FakeMarker:
    return FakeMarker()


def make_extractor(*answers: str | Exception) -> tuple[Extractor, ScriptedLLM]:
    llm = ScriptedLLM(*answers)
    return Extractor(complete=llm, system_prompt="Extract beliefs."), llm
