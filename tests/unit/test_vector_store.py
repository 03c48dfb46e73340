"""
Unit tests for the JSON vector store.
"""

import json
import os
import stat

import pytest

from ragbot.src.core.exceptions import StoreUnavailable
from ragbot.src.database.records import ChunkRecord
from ragbot.src.database.vector_store import JsonVectorStore


class TestLoad:

    def test_missing_store_is_hard_failure(self, store):
        """A missing file is never treated as an empty corpus."""
        with pytest.raises(StoreUnavailable, match="not found"):
            store.load()

    def test_store_unavailable_is_an_oserror(self, store):
        with pytest.raises(OSError):
            store.load()

    def test_empty_array_is_valid_empty_corpus(self, store, store_path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text("[]", encoding="utf-8")

        assert store.load() == []

    def test_reads_original_layout(self, store, store_path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text(json.dumps([{"text": "Base is a blockchain.", "embedding": [0.1, 0.2, 3]}], indent=2), encoding="utf-8")

        records = store.load()

        assert records == [ChunkRecord(text="Base is a blockchain.", embedding=[0.1, 0.2, 3.0])]

    @pytest.mark.parametrize("content", [
        "not json",
        '{"text": "a", "embedding": [1.0]}',
        '[{"text": "a"}]',
        '[{"text": "a", "embedding": ["x"]}]',
    ])
    def test_corrupt_store(self, store, store_path, content):
        store_path.parent.mkdir(parents=True)
        store_path.write_text(content, encoding="utf-8")

        with pytest.raises(StoreUnavailable, match="corrupt"):
            store.load()

    def test_mixed_dimensions_rejected(self, store, store_path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text(json.dumps([
            {"text": "a", "embedding": [1.0, 0.0]},
            {"text": "b", "embedding": [1.0, 0.0, 0.0]},
        ]), encoding="utf-8")

        with pytest.raises(StoreUnavailable, match="mixes embedding dimensions"):
            store.load()


class TestSave:

    def test_round_trip(self, store, blockchain_records):
        store.save(blockchain_records)

        assert store.load() == blockchain_records

    def test_round_trip_preserves_float_precision(self, store):
        records = [ChunkRecord(text="π", embedding=[0.1 + 0.2, -1e-300, 123456.789012345])]
        store.save(records)

        assert store.load() == records

    def test_creates_parent_directories(self, store, store_path, blockchain_records):
        assert not store_path.parent.exists()

        assert store.save(blockchain_records) == 2
        assert store_path.is_file()

    def test_written_as_text_embedding_array(self, store, store_path, blockchain_records):
        store.save(blockchain_records)

        data = json.loads(store_path.read_text(encoding="utf-8"))
        assert data == [
            {"text": "Base is a blockchain.", "embedding": [1.0, 0.0, 0.0]},
            {"text": "Ethereum is a blockchain.", "embedding": [0.0, 1.0, 0.0]},
        ]

    def test_full_overwrite(self, store, blockchain_records):
        store.save(blockchain_records)
        replacement = [ChunkRecord(text="only", embedding=[1.0])]
        store.save(replacement)

        assert store.load() == replacement

    def test_no_temp_files_left_behind(self, store, store_path, blockchain_records):
        store.save(blockchain_records)
        store.save(blockchain_records)

        assert os.listdir(store_path.parent) == [store_path.name]

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
    def test_new_store_is_world_readable(self, store, store_path, blockchain_records):
        store.save(blockchain_records)

        assert stat.S_IMODE(os.stat(store_path).st_mode) == 0o644

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
    def test_overwrite_keeps_existing_permissions(self, store, store_path, blockchain_records):
        store.save(blockchain_records)
        os.chmod(store_path, 0o640)

        store.save(blockchain_records)

        assert stat.S_IMODE(os.stat(store_path).st_mode) == 0o640

    def test_unwritable_target(self, tmp_path, blockchain_records):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        store = JsonVectorStore(blocker / "vector_store.json")

        with pytest.raises(StoreUnavailable, match="unwritable"):
            store.save(blockchain_records)


class TestHelpers:

    def test_count_and_exists(self, store, blockchain_records):
        assert not store.exists()
        assert store.count() == 0

        store.save(blockchain_records)

        assert store.exists()
        assert store.count() == 2

    def test_repr(self, store, store_path):
        assert repr(store) == f"JsonVectorStore(path='{store_path}')"
