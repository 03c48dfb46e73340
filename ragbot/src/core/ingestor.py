"""
RagBot - IngestionPipeline
===========================
Reads the raw corpus, turns every non-empty line into a chunk, embeds
each chunk and replaces the vector store with the result.

Key design decisions:
    • **Dependency Injection** – receives the store and the embedder.
    • **Bounded fan-out** – one embedding call per line, run through a
      ``ThreadPoolExecutor`` capped at ``MAX_WORKERS`` so a large corpus
      cannot exhaust the provider's concurrent-request quota.
    • **All or nothing** – the first failed (or timed-out) call cancels
      the pending ones and raises ``IngestionPartialFailure`` naming the
      chunk; the existing store is left untouched.
    • **Source order** – records are persisted in corpus order whatever
      order the calls complete in.

Usage:
    from ragbot.src.core.ingestor import IngestionPipeline
    pipeline = IngestionPipeline(store, embedder)
    summary  = pipeline.run(settings.RAW_CORPUS_PATH)
"""

from __future__ import annotations

import math
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FuturesTimeoutError
from pathlib import Path
from typing import Any

from ragbot.src.core.exceptions import IngestionPartialFailure
from ragbot.src.core.providers import Embedder
from ragbot.src.database.records import ChunkRecord, EmbeddingVector
from ragbot.src.database.vector_store import JsonVectorStore
from ragbot.src.utils.logger import get_logger, log_duration
from ragbot.src.utils.text_utils import split_corpus

logger = get_logger(__name__)

_MAX_WORKERS = 4
_DEFAULT_TIMEOUT_SECONDS = 30.0


class IngestionPipeline:
    """
    End-to-end corpus ingestion: read → split → embed → store.

    Parameters
    ----------
    vector_store
        The ``JsonVectorStore`` to overwrite (injected).
    embedder
        An embedding model exposing ``embed_documents`` (e.g.
        ``GoogleGenerativeAIEmbeddings``).
    max_workers
        Upper bound on concurrent embedding calls.
    timeout
        Per-call time budget in seconds.  The whole batch gets one budget
        per wave of ``max_workers`` calls.
    """

    def __init__(self, vector_store: JsonVectorStore, embedder: Embedder, max_workers: int = _MAX_WORKERS, timeout: float = _DEFAULT_TIMEOUT_SECONDS) -> None:
        self._store = vector_store
        self._embedder = embedder
        self._max_workers = max_workers
        self._timeout = timeout

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC ENTRY POINTS
    # ══════════════════════════════════════════════════════════════════

    def run(self, corpus_path: Path) -> dict[str, Any]:
        """
        Ingest the corpus file at *corpus_path*.

        Returns
        -------
        dict
            Execution summary with keys:
            ``total_lines``, ``total_chunks``, ``elapsed_seconds``, ``store_path``.

        Raises
        ------
        FileNotFoundError
            If the corpus file does not exist.
        IngestionPartialFailure
            If any chunk fails to embed.
        """
        t_start = time.perf_counter()
        corpus_path = Path(corpus_path)

        logger.info("Reading corpus: %s", corpus_path)
        raw_text = corpus_path.read_text(encoding="utf-8")
        total_lines = len(raw_text.split("\n"))

        records = self.ingest(raw_text)

        elapsed = time.perf_counter() - t_start
        logger.info("Ingestion complete — %d line(s) → %d chunk(s) stored in %.2fs.", total_lines, len(records), elapsed)
        return self._summary(total_lines, len(records), elapsed)


    def ingest(self, raw_text: str) -> list[ChunkRecord]:
        """
        Split *raw_text* into line chunks, embed them and replace the store.

        Returns
        -------
        list[ChunkRecord]
            The persisted records, in corpus order.
        """
        chunks = split_corpus(raw_text)
        logger.info("Embedding %d chunk(s) with up to %d worker(s) …", len(chunks), self._max_workers)

        with log_duration(logger, "Embedding fan-out") as embed_timing:
            vectors = self._embed_all(chunks)

        records = [ChunkRecord(text=text, embedding=vec) for text, vec in zip(chunks, vectors)]
        self._store.save(records)

        logger.info("Embedded %d chunk(s) in %.1fms.", len(records), embed_timing.ms)
        return records

    # ══════════════════════════════════════════════════════════════════
    #  EMBEDDING FAN-OUT
    # ══════════════════════════════════════════════════════════════════

    def _embed_all(self, chunks: list[str]) -> list[EmbeddingVector]:
        if not chunks:
            return []

        results: list[EmbeddingVector | None] = [None] * len(chunks)
        budget = self._timeout * math.ceil(len(chunks) / self._max_workers)

        # Not a ``with`` block: its exit would join workers still stuck in a hung call
        pool = ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="ragbot-embed")
        future_to_index: dict[Future[EmbeddingVector], int] = {pool.submit(self._embed_one, text): idx for idx, text in enumerate(chunks)}

        try:
            for future in as_completed(future_to_index, timeout=budget):
                idx = future_to_index[future]
                try:
                    results[idx] = future.result()
                except Exception as exc:
                    logger.error("Embedding failed for chunk %d: %s", idx, exc)
                    raise IngestionPartialFailure(idx, chunks[idx], str(exc) or type(exc).__name__) from exc
        except FuturesTimeoutError as exc:
            idx = next(i for i, vec in enumerate(results) if vec is None)
            logger.error("Embedding timed out after %.1fs; first pending chunk is %d.", budget, idx)
            pool.shutdown(wait=False, cancel_futures=True)
            raise IngestionPartialFailure(idx, chunks[idx], f"timed out after {budget:.1f}s") from exc
        except IngestionPartialFailure:
            pool.shutdown(wait=False, cancel_futures=True)
            raise

        pool.shutdown(wait=True)

        vectors: list[EmbeddingVector] = [vec for vec in results if vec is not None]
        self._check_dimensions(chunks, vectors)
        return vectors


    def _embed_one(self, text: str) -> EmbeddingVector:
        """Embed a single chunk as a retrieval document."""
        vectors = self._embedder.embed_documents([text])
        if len(vectors) != 1 or not vectors[0]:
            raise ValueError(f"Embedder returned {len(vectors)} vector(s) for one text")
        return [float(x) for x in vectors[0]]


    @staticmethod
    def _check_dimensions(chunks: list[str], vectors: list[EmbeddingVector]) -> None:
        expected = len(vectors[0])
        for idx, vec in enumerate(vectors):
            if len(vec) != expected:
                raise IngestionPartialFailure(idx, chunks[idx], f"dimension {len(vec)} differs from {expected}")

    # ── Summary helper ─────────────────────────────────────────────────

    def _summary(self, total_lines: int, chunks: int, elapsed: float) -> dict[str, Any]:
        return {
            "total_lines": total_lines,
            "total_chunks": chunks,
            "elapsed_seconds": round(elapsed, 2),
            "store_path": str(self._store.path),
        }
