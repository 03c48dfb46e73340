"""
RagBot - JsonVectorStore
=========================
Flat-file vector store: a single JSON array of ``{text, embedding}``
objects, loaded wholesale into memory for every query.

Design decisions:
  • **Whole-file ownership** — ingestion is the only writer and always
    replaces the full content; there is no partial update.
  • **Atomic save** — records are written to a temp file next to the
    target and moved into place with ``os.replace``, so a reader never
    sees a half-written store.  The replaced file keeps the permissions
    of the one it overwrites.
  • **Validation on load** — the file is parsed through pydantic; a
    missing, malformed or mixed-dimension store raises
    ``StoreUnavailable`` instead of silently yielding an empty corpus.

Usage:
    from ragbot.src.database.vector_store import JsonVectorStore

    store = JsonVectorStore(settings.VECTOR_STORE_PATH)
    store.save(records)
    records = store.load()
"""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from ragbot.src.core.exceptions import StoreUnavailable
from ragbot.src.database.records import CHUNK_LIST_ADAPTER, ChunkRecord
from ragbot.src.utils.logger import get_logger

logger = get_logger(__name__)

# Mode for a store created from scratch; an existing store keeps its own
_NEW_FILE_MODE = 0o644


class JsonVectorStore:
    """
    Ordered collection of ``ChunkRecord`` persisted as one JSON file.

    Parameters
    ----------
    path
        Location of the JSON file.  Parent directories are created on
        the first ``save``.
    """

    __slots__ = ("_path",)

    def __init__(self, path: str | Path) -> None:
        self._path: Path = Path(path)


    @property
    def path(self) -> Path:
        return self._path


    def exists(self) -> bool:
        return self._path.is_file()


    def load(self) -> list[ChunkRecord]:
        """
        Read and validate the whole store.

        Returns
        -------
        list[ChunkRecord]
            Records in the order they were saved.  An existing file holding
            ``[]`` is a valid empty corpus.

        Raises
        ------
        StoreUnavailable
            If the file is missing, unreadable, not a valid record array,
            or mixes embeddings of different dimensionality.
        """
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError as exc:
            raise StoreUnavailable(f"Vector store not found: {self._path}. Run ingestion first.", path=str(self._path)) from exc
        except OSError as exc:
            raise StoreUnavailable(f"Vector store unreadable: {self._path}: {exc}", path=str(self._path)) from exc

        try:
            records = CHUNK_LIST_ADAPTER.validate_json(raw)
        except ValidationError as exc:
            raise StoreUnavailable(f"Vector store is corrupt: {self._path} ({exc.error_count()} error(s))", path=str(self._path)) from exc

        dimensions = {len(r.embedding) for r in records}
        if len(dimensions) > 1:
            raise StoreUnavailable(f"Vector store mixes embedding dimensions {sorted(dimensions)}: {self._path}", path=str(self._path))

        logger.debug("Loaded %d record(s) from %s", len(records), self._path)
        return records


    def save(self, records: Sequence[ChunkRecord]) -> int:
        """
        Replace the store content with *records*.

        Returns
        -------
        int
            Number of records written.

        Raises
        ------
        StoreUnavailable
            If the target directory cannot be created or written.
        """
        payload = CHUNK_LIST_ADAPTER.dump_json(list(records), indent=2)
        tmp_name: str | None = None

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile("wb", dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp", delete=False) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.chmod(tmp_name, self._target_mode())
            os.replace(tmp_name, self._path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error("Failed to write vector store %s: %s", self._path, exc)
            raise StoreUnavailable(f"Vector store unwritable: {self._path}: {exc}", path=str(self._path)) from exc

        logger.info("Saved %d record(s) to %s", len(records), self._path)
        return len(records)


    def _target_mode(self) -> int:
        try:
            return stat.S_IMODE(os.stat(self._path).st_mode)
        except FileNotFoundError:
            return _NEW_FILE_MODE


    def count(self) -> int:
        """Return the number of stored records, or 0 if the store is missing."""
        if not self.exists():
            return 0
        return len(self.load())


    def __repr__(self) -> str:
        return f"JsonVectorStore(path='{self._path}')"
