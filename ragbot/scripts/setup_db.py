"""
RagBot - Vector Store Setup & Ingestion Script
===============================================
CLI entry point that orchestrates:
    1. Validate that ``GOOGLE_API_KEY`` is set (fail-fast).
    2. Initialise the embedding model.
    3. Run the ``IngestionPipeline`` over the raw corpus.
    4. Print a structured execution summary with timing breakdown.

The HTTP ``/embed`` route does the same thing; this script exists for
deployments that do not expose it.

Flags:
    --corpus PATH   Raw corpus file (default: ``settings.RAW_CORPUS_PATH``).
    --store PATH    Vector store file (default: ``settings.VECTOR_STORE_PATH``).

Usage:
    python -m ragbot.scripts.setup_db
    python -m ragbot.scripts.setup_db --corpus data/knowledge.txt --store embeddings/vector_store.json
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path


# ── CLI Argument Parsing ───────────────────────────────────────────────

def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="setup_db", description="RagBot — Embed the raw corpus and overwrite the vector store.")
    parser.add_argument("--corpus", type=Path, default=None, help="Raw corpus file, one chunk per line.")
    parser.add_argument("--store", type=Path, default=None, help="Vector store JSON file to overwrite.")
    return parser.parse_args(argv)


# ── Main Orchestration ─────────────────────────────────────────────────

def main(argv: list[str] | None = None, embedder: object | None = None) -> int:
    args = _parse_args(argv)
    t_start = time.perf_counter()

    # ── 0. Load settings + .env (timed) ────────────────────────────────
    t_settings = time.perf_counter()
    try:
        from ragbot.config.settings import settings
    except Exception as exc:
        print("\n[FATAL] Configuration error — check your .env file:\n")
        print(f"  {exc}")
        print()
        return 1
    settings_ms = (time.perf_counter() - t_settings) * 1000

    # Now that settings is loaded, we can safely import the logger
    from ragbot.src.utils.logger import get_logger
    logger = get_logger(__name__)

    corpus_path: Path = args.corpus or settings.RAW_CORPUS_PATH
    store_path: Path = args.store or settings.VECTOR_STORE_PATH
    _print_header(settings, corpus_path, store_path)

    # ── 1. Initialise embedder (timed) ─────────────────────────────────
    t_embedder = time.perf_counter()
    if embedder is None:
        from ragbot.src.core.providers import build_embedder

        try:
            embedder = build_embedder(settings)
        except Exception:
            logger.exception("Failed to initialise embedding model.")
            return 1
    embedder_ms = (time.perf_counter() - t_embedder) * 1000

    # ── 2. Run IngestionPipeline ───────────────────────────────────────
    from ragbot.src.core.exceptions import IngestionPartialFailure, StoreUnavailable
    from ragbot.src.core.ingestor import IngestionPipeline
    from ragbot.src.database.vector_store import JsonVectorStore

    pipeline = IngestionPipeline(JsonVectorStore(store_path), embedder, max_workers=settings.MAX_WORKERS, timeout=settings.REQUEST_TIMEOUT_SECONDS)  # type: ignore[arg-type]
    try:
        summary = pipeline.run(corpus_path)
    except FileNotFoundError:
        logger.error("Raw corpus not found: %s", corpus_path)
        return 1
    except IngestionPartialFailure as exc:
        logger.error("Ingestion aborted at chunk %d (%r): %s — store left unchanged.", exc.index, exc.text, exc.reason)
        return 1
    except StoreUnavailable as exc:
        logger.error("%s", exc)
        return 1

    # ── 3. Print execution summary ─────────────────────────────────────
    elapsed = time.perf_counter() - t_start
    _print_footer(summary["total_lines"], summary["total_chunks"], elapsed, settings_ms, embedder_ms)
    return 0


# ── Pretty-print helpers ──────────────────────────────────────────────

def _print_header(settings: object, corpus_path: Path, store_path: Path) -> None:
    api_key_val = settings.GOOGLE_API_KEY.get_secret_value()  # type: ignore[attr-defined]
    masked = f"****{api_key_val[-4:]}" if len(api_key_val) > 4 else "****"

    print()
    print("=" * 60)
    print("  RAGBOT — Vector Store Setup & Ingestion")
    print("=" * 60)
    print(f"  Environment  : {settings.ENV}")                   # type: ignore[attr-defined]
    print(f"  Embedding    : {settings.EMBEDDING_MODEL}")       # type: ignore[attr-defined]
    print(f"  Corpus       : {corpus_path}")
    print(f"  Store        : {store_path}")
    print(f"  Workers      : {settings.MAX_WORKERS}")           # type: ignore[attr-defined]
    print(f"  API Key      : {masked}")
    print("=" * 60)
    print()


def _print_footer(total_lines: int, total_chunks: int, elapsed: float, settings_ms: float, embedder_ms: float) -> None:
    startup_ms = settings_ms + embedder_ms
    processing_s = elapsed - (startup_ms / 1000)

    print()
    print("=" * 60)
    print("  EXECUTION SUMMARY")
    print("-" * 60)
    print(f"  Corpus lines         : {total_lines}")
    print(f"  Lines skipped (blank): {total_lines - total_chunks}")
    print(f"  Total chunks stored  : {total_chunks}")
    print("-" * 60)
    print("  TIMING BREAKDOWN")
    print("-" * 60)
    print(f"  Settings + .env load : {settings_ms:>8.1f}ms")
    print(f"  Embedder init        : {embedder_ms:>8.1f}ms")
    print(f"  Processing time      : {processing_s:>8.2f}s")
    print(f"  Total elapsed        : {elapsed:>8.2f}s")
    print("=" * 60)
    print()


# ── Entry point ────────────────────────────────────────────────────────

if __name__ == "__main__":
    sys.exit(main())
