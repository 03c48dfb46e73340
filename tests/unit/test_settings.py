"""
Unit tests for configuration loading and validation.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from ragbot.config.settings import Settings


class TestSettings:

    def test_defaults(self, tmp_path):
        cfg = Settings(GOOGLE_API_KEY="k", BASE_DIR=tmp_path)

        assert cfg.TOP_K == 3
        assert cfg.PORT == 3000
        assert cfg.PERSONA == "base"
        assert cfg.VECTOR_STORE_PATH == (tmp_path / "public" / "embeddings" / "vector_store.json").resolve()
        assert cfg.RAW_CORPUS_PATH == (tmp_path / "public" / "data" / "base_knowledge.txt").resolve()

    def test_absolute_paths_kept(self, tmp_path):
        target = tmp_path / "elsewhere" / "store.json"
        cfg = Settings(GOOGLE_API_KEY="k", BASE_DIR=Path("/srv/app"), VECTOR_STORE_PATH=target)

        assert cfg.VECTOR_STORE_PATH == target

    def test_api_key_hidden(self):
        cfg = Settings(GOOGLE_API_KEY="super-secret")

        assert "super-secret" not in repr(cfg)
        assert cfg.GOOGLE_API_KEY.get_secret_value() == "super-secret"

    def test_api_key_required(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("TOP_K", "5")
        monkeypatch.setenv("PERSONA", "agent")

        cfg = Settings(GOOGLE_API_KEY="k")

        assert cfg.TOP_K == 5
        assert cfg.PERSONA == "agent"

    @pytest.mark.parametrize("field, value", [
        ("TOP_K", 0),
        ("MAX_WORKERS", 0),
        ("MAX_WORKERS", 17),
        ("REQUEST_TIMEOUT_SECONDS", 0),
        ("PERSONA", "pirate"),
        ("LOG_LEVEL", "LOUD"),
    ])
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            Settings(GOOGLE_API_KEY="k", **{field: value})
