"""
RagBot - Record Types
======================
Typed shapes shared by the store, the ranker and the context assembler.

``ChunkRecord`` is what lives on disk; ``ScoredChunk`` only exists for
the lifetime of a single query.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, TypeAdapter

# ── Type Aliases ──────────────────────────────────────────────────────
EmbeddingVector = list[float]


class ChunkRecord(BaseModel):
    """One unit of source text together with its embedding."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    text: str
    embedding: EmbeddingVector


class ScoredChunk(BaseModel):
    """A stored text paired with its similarity to the current query."""

    model_config = ConfigDict(frozen=True)

    text: str
    score: float


# Serialises / validates the whole on-disk array in one call.
CHUNK_LIST_ADAPTER: TypeAdapter[list[ChunkRecord]] = TypeAdapter(list[ChunkRecord])
