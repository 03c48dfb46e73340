"""
RagBot - API Routes
====================
Thin controllers between HTTP and the core pipeline:

  - POST /api/chat  → answer a message with retrieved context
  - *    /api/chat  → any other verb is rejected with 405 (verbs not
                      listed here are caught by the app-level 405 handler)
  - GET  /embed     → re-ingest the raw corpus (optional router)
  - GET  /health    → liveness check

No business logic lives here; handlers pull the injected ``RAGManager``
and ``IngestionPipeline`` from ``app.state``.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from ragbot.config.prompt_templates import EMBED_CONFIRMATION
from ragbot.src.core.exceptions import IngestionPartialFailure, MethodNotAllowed, StoreUnavailable
from ragbot.src.core.ingestor import IngestionPipeline
from ragbot.src.core.rag_engine import RAGManager
from ragbot.src.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()
embed_router = APIRouter()

CHAT_PATH = "/api/chat"
_REJECTED_CHAT_METHODS = ["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"]


class ChatRequest(BaseModel):
    message: str


class ChatResponse(BaseModel):
    reply: str


def get_rag_manager(request: Request) -> RAGManager:
    return request.app.state.rag


def get_ingestion_pipeline(request: Request) -> IngestionPipeline:
    return request.app.state.ingestion


@router.post(CHAT_PATH, response_model=ChatResponse)
async def chat(body: ChatRequest, rag: RAGManager = Depends(get_rag_manager)):
    result = await rag.handle_query(body.message)
    if not result.ok:
        return JSONResponse(status_code=500, content={"reply": result.reply})
    return ChatResponse(reply=result.reply)


@router.api_route(CHAT_PATH, methods=_REJECTED_CHAT_METHODS, include_in_schema=False)
async def chat_wrong_method(request: Request):
    raise MethodNotAllowed(request.method)


@router.get("/health")
async def health():
    return {"status": "ok"}


@embed_router.get("/embed", response_class=PlainTextResponse)
async def embed(request: Request, pipeline: IngestionPipeline = Depends(get_ingestion_pipeline)):
    corpus_path = request.app.state.settings.RAW_CORPUS_PATH
    try:
        summary = await run_in_threadpool(pipeline.run, corpus_path)
    except IngestionPartialFailure as exc:
        logger.error("[EMBED] Aborted at chunk %d: %s", exc.index, exc.reason)
        return PlainTextResponse(f"Embedding failed at chunk {exc.index}: {exc.reason}", status_code=500)
    except FileNotFoundError:
        logger.error("[EMBED] Raw corpus not found: %s", corpus_path)
        return PlainTextResponse("Embedding failed: raw corpus not found.", status_code=500)
    except StoreUnavailable as exc:
        logger.error("[EMBED] %s", exc)
        return PlainTextResponse("Embedding failed: vector store unwritable.", status_code=500)

    logger.info("[EMBED] %d chunk(s) written to %s", summary["total_chunks"], summary["store_path"])
    return EMBED_CONFIRMATION
