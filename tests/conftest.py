"""
Shared test fixtures and configuration for pytest.
"""

import os
from pathlib import Path

import pytest

# Settings() is instantiated at import time and requires an API key
os.environ.setdefault("GOOGLE_API_KEY", "test-key-0000")
os.environ.setdefault("ENV", "dev")

from langchain_core.messages import AIMessage  # noqa: E402

from ragbot.config.settings import Settings  # noqa: E402
from ragbot.src.database.records import ChunkRecord  # noqa: E402
from ragbot.src.database.vector_store import JsonVectorStore  # noqa: E402


# ============================================================================
# Provider doubles
# ============================================================================

class FakeEmbedder:
    """Deterministic embedder: looks texts up in a table, falls back to *default*."""

    def __init__(self, vectors=None, default=None, fail_on=()):
        self.vectors = dict(vectors or {})
        self.default = default if default is not None else [1.0, 0.0]
        self.fail_on = set(fail_on)
        self.calls = []

    def _vector(self, text):
        self.calls.append(text)
        if text in self.fail_on:
            raise RuntimeError(f"provider down for {text!r}")
        return list(self.vectors.get(text, self.default))

    def embed_documents(self, texts):
        return [self._vector(t) for t in texts]

    async def aembed_query(self, text):
        return self._vector(text)


class FakeChatModel:
    """Records every prompt and answers with a canned reply (or raises)."""

    def __init__(self, reply="Base is an Ethereum L2.", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def ainvoke(self, messages, config=None, **kwargs):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.reply)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "embeddings" / "vector_store.json"


@pytest.fixture
def store(store_path: Path) -> JsonVectorStore:
    return JsonVectorStore(store_path)


@pytest.fixture
def blockchain_records():
    return [
        ChunkRecord(text="Base is a blockchain.", embedding=[1.0, 0.0, 0.0]),
        ChunkRecord(text="Ethereum is a blockchain.", embedding=[0.0, 1.0, 0.0]),
    ]


@pytest.fixture
def app_settings(tmp_path: Path, store_path: Path) -> Settings:
    return Settings(
        GOOGLE_API_KEY="test-key-0000",
        BASE_DIR=tmp_path,
        VECTOR_STORE_PATH=store_path,
        RAW_CORPUS_PATH=tmp_path / "data" / "base_knowledge.txt",
        STATIC_DIR=None,
        MAX_WORKERS=2,
        REQUEST_TIMEOUT_SECONDS=5.0,
    )
