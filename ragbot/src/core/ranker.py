"""
RagBot - Similarity Ranker
===========================
Linear-scan nearest-neighbour search over an in-memory corpus.

Implements:
- Cosine similarity scoring (zero vectors score 0.0, never NaN)
- Top-K selection
- Deterministic ordering: ties keep corpus insertion order
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from ragbot.src.database.records import ChunkRecord, ScoredChunk


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """
    Compute cosine similarity between two vectors.

    Args:
        vec_a: First vector
        vec_b: Second vector

    Returns:
        Similarity in [-1, 1]; 0.0 when either vector has zero norm.

    Raises:
        ValueError: If vectors are empty or have different dimensions
    """
    if not vec_a or not vec_b:
        raise ValueError("Vectors cannot be empty")

    if len(vec_a) != len(vec_b):
        raise ValueError(f"Vector dimensions must match: {len(vec_a)} != {len(vec_b)}")

    dot_product = math.fsum(a * b for a, b in zip(vec_a, vec_b))
    magnitude_a = math.sqrt(math.fsum(a * a for a in vec_a))
    magnitude_b = math.sqrt(math.fsum(b * b for b in vec_b))

    if magnitude_a == 0 or magnitude_b == 0:
        return 0.0

    return dot_product / (magnitude_a * magnitude_b)


def rank(query: Sequence[float], corpus: Sequence[ChunkRecord], k: int) -> list[ScoredChunk]:
    """
    Score every record against *query* and return the top *k*.

    Args:
        query: Query embedding
        corpus: Stored records, in insertion order
        k: Maximum number of results

    Returns:
        ``min(k, len(corpus))`` chunks sorted by score descending.  Equal
        scores keep their corpus order.

    Raises:
        ValueError: If *k* is negative or a record's dimensionality differs
            from the query's
    """
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")
    if k == 0 or not corpus:
        return []

    scored = [ScoredChunk(text=record.text, score=cosine_similarity(query, record.embedding)) for record in corpus]

    # list.sort is stable, so equal scores stay in corpus order
    scored.sort(key=lambda chunk: chunk.score, reverse=True)
    return scored[:k]
