"""
RagBot - RAG Engine
====================
Orchestrates the query pipeline for a single chat message.

Flow (strictly sequential):
    1. Load   → read the whole vector store
    2. Embed  → embed the query (timed out after ``timeout`` seconds)
    3. Rank   → cosine top-k over the loaded records
    4. Build  → persona + context system turn, verbatim user turn
    5. Call   → chat model (timed out after ``timeout`` seconds)
    6. Return → reply text

State machine
-------------
``handle_query`` walks ``IDLE → PROCESSING → REPLIED | FAILED``.  Every
failure is logged with its cause and collapsed into the same generic
reply; callers cannot tell a missing store from a provider outage.

Usage:
    from ragbot.src.core.rag_engine import RAGManager
    rag = RAGManager(store, embedder, chat_model)
    result = await rag.handle_query("What is Base?")
"""

from __future__ import annotations

import asyncio
import enum
import time
from dataclasses import dataclass

from ragbot.config.prompt_templates import GENERIC_ERROR_REPLY
from ragbot.src.core.context import assemble
from ragbot.src.core.exceptions import CompletionProviderError, EmbeddingProviderError
from ragbot.src.core.providers import ChatModel, Embedder, message_text
from ragbot.src.core.ranker import rank
from ragbot.src.database.records import EmbeddingVector
from ragbot.src.database.vector_store import JsonVectorStore
from ragbot.src.utils.logger import get_logger, log_duration

logger = get_logger(__name__)

_DEFAULT_TOP_K = 3
_DEFAULT_TIMEOUT_SECONDS = 30.0


class QueryState(str, enum.Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    REPLIED = "replied"
    FAILED = "failed"


@dataclass
class QueryResult:
    """Outcome of one query: terminal state, reply text and the cause on failure."""

    state: QueryState
    reply: str
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.state is QueryState.REPLIED


class RAGManager:
    """
    Stateless query orchestrator; safe to share across concurrent requests.

    Parameters
    ----------
    vector_store
        Store re-read on every query.
    embedder
        Embedding client used for the query text.
    chat_model
        Completion client receiving the assembled prompt.
    persona
        Key into ``PERSONAS`` for the system turn.
    top_k
        Number of chunks injected as context.
    timeout
        Seconds allowed for each remote call.
    """

    __slots__ = ("_store", "_embedder", "_llm", "_persona", "_top_k", "_timeout")

    def __init__(self, vector_store: JsonVectorStore, embedder: Embedder, chat_model: ChatModel, persona: str = "base", top_k: int = _DEFAULT_TOP_K, timeout: float = _DEFAULT_TIMEOUT_SECONDS) -> None:
        self._store = vector_store
        self._embedder = embedder
        self._llm = chat_model
        self._persona = persona
        self._top_k = top_k
        self._timeout = timeout


    async def handle_query(self, user_query: str) -> QueryResult:
        """Run the pipeline and never raise; failures become the generic reply."""
        state = QueryState.IDLE
        logger.debug("[RAG] %s → %s", state.value, QueryState.PROCESSING.value)
        state = QueryState.PROCESSING

        try:
            answer = await self.generate_response(user_query)
        except Exception as exc:
            logger.exception("[RAG] Query failed (%s): %s", type(exc).__name__, exc)
            state = QueryState.FAILED
            return QueryResult(state=state, reply=GENERIC_ERROR_REPLY, error=exc)

        state = QueryState.REPLIED
        return QueryResult(state=state, reply=answer)


    async def generate_response(self, user_query: str) -> str:
        """
        Full RAG pipeline for *user_query*.

        Raises
        ------
        StoreUnavailable
            The vector store is missing or corrupt.
        EmbeddingProviderError
            The query could not be embedded.
        CompletionProviderError
            The chat model failed or timed out.
        """
        t_start = time.perf_counter()

        # ── 1. Load store ─────────────────────────────────────────────
        records = self._store.load()

        # ── 2. Embed query ────────────────────────────────────────────
        with log_duration(logger, "[RAG] Embed query") as embed_timing:
            query_vector = await self._embed_query(user_query)

        # ── 3. Rank ───────────────────────────────────────────────────
        top_chunks = rank(query_vector, records, self._top_k)
        logger.info("[RAG] Ranked %d record(s) → top %d: %s", len(records), len(top_chunks), [round(c.score, 4) for c in top_chunks])

        # ── 4. Assemble prompt ────────────────────────────────────────
        prompt = assemble(top_chunks, user_query, self._persona)

        # ── 5. Call chat model ────────────────────────────────────────
        with log_duration(logger, "[RAG] Completion") as llm_timing:
            answer = await self._complete(prompt.to_langchain())

        total_ms = (time.perf_counter() - t_start) * 1000
        logger.info("[RAG] Pipeline total: %.1fms (embed=%.1f, llm=%.1f, %d chars)", total_ms, embed_timing.ms, llm_timing.ms, len(answer))
        return answer


    async def _embed_query(self, text: str) -> EmbeddingVector:
        try:
            vector = await asyncio.wait_for(self._embedder.aembed_query(text), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            raise EmbeddingProviderError(f"Query embedding timed out after {self._timeout:.1f}s", provider=type(self._embedder).__name__) from exc
        except Exception as exc:
            raise EmbeddingProviderError(f"Query embedding failed: {exc}", provider=type(self._embedder).__name__) from exc
        return list(vector)


    async def _complete(self, messages: list) -> str:
        try:
            response = await asyncio.wait_for(self._llm.ainvoke(messages), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            raise CompletionProviderError(f"Completion timed out after {self._timeout:.1f}s", provider=type(self._llm).__name__) from exc
        except Exception as exc:
            raise CompletionProviderError(f"Completion failed: {exc}", provider=type(self._llm).__name__) from exc
        return message_text(response)
