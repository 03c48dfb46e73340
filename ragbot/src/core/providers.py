"""
RagBot - Model Providers
=========================
Structural types for the two remote collaborators and factories that
build the production (Gemini via LangChain) implementations.

Nothing here is a module-level singleton: the app factory constructs the
clients once and injects them, so tests can pass any object with the
same methods.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ragbot.config.settings import Settings
from ragbot.src.utils.logger import get_logger

logger = get_logger(__name__)


@runtime_checkable
class Embedder(Protocol):
    """Anything that can produce embedding vectors from text (LangChain ``Embeddings``)."""

    def embed_documents(self, texts: list[str]) -> list[list[float]]: ...

    async def aembed_query(self, text: str) -> list[float]: ...


@runtime_checkable
class ChatModel(Protocol):
    """Anything exposing LangChain's async ``ainvoke`` over a message list."""

    async def ainvoke(self, input: Any, config: Any = None, **kwargs: Any) -> Any: ...


def build_embedder(settings: Settings) -> Embedder:
    """Initialise the Gemini embedding model via LangChain."""
    from langchain_google_genai import GoogleGenerativeAIEmbeddings

    embedder = GoogleGenerativeAIEmbeddings(model=settings.EMBEDDING_MODEL, google_api_key=settings.GOOGLE_API_KEY.get_secret_value())
    logger.info("Embedder initialised: %s", settings.EMBEDDING_MODEL)
    return embedder


def build_chat_model(settings: Settings) -> ChatModel:
    """Initialise the Gemini chat model via LangChain (no automatic retries)."""
    from langchain_google_genai import ChatGoogleGenerativeAI

    llm = ChatGoogleGenerativeAI(model=settings.LLM_MODEL, temperature=settings.LLM_TEMPERATURE, google_api_key=settings.GOOGLE_API_KEY.get_secret_value(), timeout=settings.REQUEST_TIMEOUT_SECONDS, max_retries=0)
    logger.info("LLM initialised: %s (temperature=%.1f)", settings.LLM_MODEL, settings.LLM_TEMPERATURE)
    return llm


def message_text(response: Any) -> str:
    """Extract plain text from a chat model response."""
    content = response.content if hasattr(response, "content") else response
    if isinstance(content, list):
        # Multi-part content: keep the text parts in order
        return "".join(part if isinstance(part, str) else str(part.get("text", "")) for part in content)
    return str(content)
