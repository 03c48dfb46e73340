"""
Custom exceptions for RagBot.

Query-path errors are caught by ``RAGManager.handle_query`` and turned
into a generic reply.  Ingestion errors propagate to the caller (HTTP
route or CLI), which reports the failing chunk.
"""


class RagBotError(Exception):
    """Base exception for all RagBot errors."""
    pass


class MethodNotAllowed(RagBotError):
    """Request used an HTTP verb the route does not accept."""

    def __init__(self, method: str, allowed: tuple[str, ...] = ("POST",)):
        super().__init__(f"Method {method} not allowed (allowed: {', '.join(allowed)})")
        self.method = method
        self.allowed = allowed


class StoreUnavailable(RagBotError, OSError):
    """
    The persisted vector store cannot be used.

    Raised when:
    - The store file is missing or unreadable
    - The file is not valid JSON or not a list of ``{text, embedding}``
    - Records have mixed embedding dimensionality
    - The store cannot be written during ingestion
    """

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class ProviderError(RagBotError):
    """
    Error communicating with a remote model provider.

    Raised when:
    - Provider is unreachable
    - Request times out
    - Provider returns an error response
    """

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(message)
        self.provider = provider


class EmbeddingProviderError(ProviderError):
    """The embedding provider failed to embed a text."""
    pass


class CompletionProviderError(ProviderError):
    """The chat-completion provider failed to generate a reply."""
    pass


class IngestionPartialFailure(RagBotError):
    """
    An embedding call failed during ingestion.

    The whole batch is aborted and nothing is persisted.  ``index`` is
    the zero-based position of the failing line among the non-empty
    corpus lines; ``text`` is that line.
    """

    def __init__(self, index: int, text: str, reason: str):
        super().__init__(f"Embedding failed for chunk {index} ({text[:60]!r}): {reason}")
        self.index = index
        self.text = text
        self.reason = reason
