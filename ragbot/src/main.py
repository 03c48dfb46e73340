"""
RagBot - Application Entry Point
=================================
FastAPI application factory.  Builds the provider clients once,
injects them into the ``RAGManager`` and ``IngestionPipeline``, registers
the routers and configures CORS and static file serving.

Every hosting setup runs this same factory; the differences between
them (paths, persona, static directory, whether ``/embed`` is exposed)
come from ``Settings``.

Usage:
    python -m ragbot.src.main
    uvicorn ragbot.src.main:create_app --factory --port 3000
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from ragbot.config.prompt_templates import METHOD_NOT_ALLOWED_ERROR
from ragbot.config.settings import Settings, settings as default_settings
from ragbot.src.api.routes import CHAT_PATH, embed_router, router
from ragbot.src.core.exceptions import MethodNotAllowed
from ragbot.src.core.ingestor import IngestionPipeline
from ragbot.src.core.providers import ChatModel, Embedder, build_chat_model, build_embedder
from ragbot.src.core.rag_engine import RAGManager
from ragbot.src.database.vector_store import JsonVectorStore
from ragbot.src.utils.logger import get_logger, resolve_level

logger = get_logger(__name__)


def create_app(app_settings: Settings | None = None, embedder: Embedder | None = None, chat_model: ChatModel | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Parameters
    ----------
    app_settings
        Deployment profile.  Defaults to the process-wide ``settings``.
    embedder, chat_model
        Provider clients.  Built from ``app_settings`` when omitted; tests
        pass doubles here.
    """
    cfg = app_settings or default_settings
    embedder = embedder or build_embedder(cfg)
    chat_model = chat_model or build_chat_model(cfg)

    store = JsonVectorStore(cfg.VECTOR_STORE_PATH)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("RagBot starting — persona=%s, store=%s, top_k=%d", cfg.PERSONA, store.path, cfg.TOP_K)
        if not store.exists():
            logger.warning("Vector store %s does not exist yet; chat requests will fail until ingestion runs.", store.path)
        yield
        logger.info("RagBot shutting down.")

    app = FastAPI(title="RagBot", lifespan=lifespan)
    app.state.settings = cfg
    app.state.rag = RAGManager(store, embedder, chat_model, persona=cfg.PERSONA, top_k=cfg.TOP_K, timeout=cfg.REQUEST_TIMEOUT_SECONDS)
    app.state.ingestion = IngestionPipeline(store, embedder, max_workers=cfg.MAX_WORKERS, timeout=cfg.REQUEST_TIMEOUT_SECONDS)

    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.add_exception_handler(MethodNotAllowed, _method_not_allowed_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)

    app.include_router(router)
    if cfg.EXPOSE_EMBED_ROUTE:
        app.include_router(embed_router)

    # Mounted last so API routes take precedence over files at "/"
    if cfg.STATIC_DIR is not None and cfg.STATIC_DIR.is_dir():
        app.mount("/", StaticFiles(directory=cfg.STATIC_DIR, html=True), name="static")
        logger.info("Serving static files from %s", cfg.STATIC_DIR)

    return app


async def _method_not_allowed_handler(request: Request, exc: MethodNotAllowed) -> JSONResponse:
    logger.warning("Rejected %s %s", request.method, request.url.path)
    return JSONResponse(status_code=405, content={"error": METHOD_NOT_ALLOWED_ERROR}, headers={"Allow": ", ".join(exc.allowed)})


async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Give verbs without an explicit route on the chat path the same 405 body."""
    if exc.status_code == 405 and request.url.path == CHAT_PATH:
        return await _method_not_allowed_handler(request, MethodNotAllowed(request.method))
    return await http_exception_handler(request, exc)


def main() -> None:
    import uvicorn

    log_level = logging.getLevelName(resolve_level(default_settings.ENV, default_settings.LOG_LEVEL)).lower()
    uvicorn.run("ragbot.src.main:create_app", factory=True, host=default_settings.HOST, port=default_settings.PORT, log_level=log_level)


if __name__ == "__main__":
    main()
