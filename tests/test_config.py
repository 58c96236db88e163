from pathlib import Path

import pytest

from formshare.config import Settings


class TestSettings:
    def test_env(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("STORAGE_BACKEND", "JSON")
        monkeypatch.setenv("SHARE_ID_LENGTH", "12")
        settings = Settings()
        assert settings.port == 8080
        assert settings.storage_backend == "json"
        assert settings.share_id_length == 12
        assert settings.public_base_url == "http://localhost:8080"

    def test_invalid_values_fall_back(self, monkeypatch):
        monkeypatch.setenv("PORT", "abc")
        monkeypatch.setenv("STORAGE_BACKEND", "mongo")
        settings = Settings()
        assert settings.port == 5000
        assert settings.storage_backend == "sqlite"

    def test_overrides(self, tmp_path):
        settings = Settings(json_path=str(tmp_path / "db.json"), public_base_url="https://forms.example/")
        assert settings.json_path == tmp_path / "db.json"
        assert settings.public_base_url == "https://forms.example"

    def test_unknown_override(self):
        with pytest.raises(TypeError):
            Settings(mongo_uri="x")

    def test_sqlite_path(self):
        assert Settings(database_url="sqlite:///./data/app.db").sqlite_path == Path("./data/app.db")
        assert Settings(database_url="sqlite:///:memory:").sqlite_path is None
