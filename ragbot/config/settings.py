"""
RagBot - Centralized Configuration
===================================
Uses ``pydantic-settings`` (``BaseSettings``) to load *all* configuration
from environment variables and the project-level ``.env`` file.

Security
--------
- ``GOOGLE_API_KEY`` is typed as ``SecretStr`` and has **no default value**.
  If the key is missing at startup, Pydantic will raise a ``ValidationError``
  with a clear error message.  The raw value is never exposed in repr,
  logs, or tracebacks.

Deployment profile
------------------
The same application serves every hosting setup.  What differs between
them is captured here: where the vector store and raw corpus live, which
persona the assistant speaks with, whether a static directory is served,
and whether the ``/embed`` ingestion route is mounted at all.

Paths
-----
Relative paths are resolved against ``BASE_DIR`` so the app behaves the
same regardless of the working directory it was launched from.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application-wide settings.

    Every field is loaded from environment variables (or ``.env``).
    Fields *without* a default are **required** — the app will refuse
    to start until they are provided.

    Attributes
    ----------
    GOOGLE_API_KEY : SecretStr
        API key for Google AI Studio (Gemini).  **Required.**
    ENV : Literal["dev", "prod"]
        Environment mode controlling logging verbosity.
    LOG_LEVEL : Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None
        Explicit log level; overrides the level implied by ``ENV``.
    EMBEDDING_MODEL : str
        Model identifier passed to ``GoogleGenerativeAIEmbeddings``.
    LLM_MODEL : str
        Model identifier for the chat-completion model.
    VECTOR_STORE_PATH : Path
        JSON file holding the ``[{text, embedding}, ...]`` array.
    RAW_CORPUS_PATH : Path
        Line-oriented text file re-ingested by ``/embed``.
    STATIC_DIR : Path | None
        Directory served at ``/``.  ``None`` disables static serving.
    PERSONA : Literal["base", "agent"]
        Which system persona opens every prompt.
    TOP_K : int
        Number of chunks injected as context per query.
    MAX_WORKERS : int
        Upper bound on concurrent embedding calls during ingestion.
    REQUEST_TIMEOUT_SECONDS : float
        Timeout applied to every remote provider call.
    """

    # ── Resolved Absolute Paths ────────────────────────────────────────
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    VECTOR_STORE_PATH: Path = Path("public/embeddings/vector_store.json")
    RAW_CORPUS_PATH: Path = Path("public/data/base_knowledge.txt")
    STATIC_DIR: Path | None = Path("public")

    # ── Environment Mode ───────────────────────────────────────────────
    ENV: Literal["dev", "prod"] = "dev"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None

    # ── API Keys (REQUIRED, no default) ───────────────────────────────
    GOOGLE_API_KEY: SecretStr

    # ── Model Configuration ────────────────────────────────────────────
    EMBEDDING_MODEL: str = "gemini-embedding-001"
    LLM_MODEL: str = "gemini-2.0-flash"
    LLM_TEMPERATURE: float = 0.7

    # ── Retrieval / Prompt ─────────────────────────────────────────────
    PERSONA: Literal["base", "agent"] = "base"
    TOP_K: int = 3

    # ── Concurrency & Timeouts ─────────────────────────────────────────
    MAX_WORKERS: int = 4
    REQUEST_TIMEOUT_SECONDS: float = 30.0

    # ── HTTP ───────────────────────────────────────────────────────────
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    EXPOSE_EMBED_ROUTE: bool = True

    # ── Validators ─────────────────────────────────────────────────────

    @field_validator("TOP_K")
    @classmethod
    def _top_k_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"TOP_K must be ≥ 1, got {v}")
        return v


    @field_validator("MAX_WORKERS")
    @classmethod
    def _workers_range(cls, v: int) -> int:
        if not 1 <= v <= 16:
            raise ValueError(f"MAX_WORKERS must be 1–16, got {v}")
        return v


    @field_validator("REQUEST_TIMEOUT_SECONDS")
    @classmethod
    def _timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"REQUEST_TIMEOUT_SECONDS must be > 0, got {v}")
        return v


    @model_validator(mode="after")
    def _resolve_paths(self) -> "Settings":
        self.VECTOR_STORE_PATH = self._resolve(self.VECTOR_STORE_PATH)
        self.RAW_CORPUS_PATH = self._resolve(self.RAW_CORPUS_PATH)
        if self.STATIC_DIR is not None:
            self.STATIC_DIR = self._resolve(self.STATIC_DIR)
        return self


    def _resolve(self, path: Path) -> Path:
        return path if path.is_absolute() else (self.BASE_DIR / path).resolve()

    # ── Pydantic Settings Configuration ────────────────────────────────
    model_config = SettingsConfigDict(env_file=Path(__file__).resolve().parent.parent.parent / ".env", env_file_encoding="utf-8", extra="ignore")


# ── Singleton Instance ─────────────────────────────────────────────────
# Import this throughout the project:
#     from ragbot.config.settings import settings
settings = Settings()
