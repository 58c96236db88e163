from __future__ import annotations

import os
from pathlib import Path

from sqlalchemy.engine import make_url

BASE_DIR = Path(__file__).resolve().parent

QUESTION_TYPES = {"categorize", "cloze", "comprehension"}
LEGACY_QUESTION_TYPES = {"multiple-choice", "text"}
STORAGE_BACKENDS = {"sqlite", "json"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


class Settings:
    def __init__(self, **overrides: object) -> None:
        self.storage_backend = os.getenv("STORAGE_BACKEND", "sqlite").lower()
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///./data/app.db")
        self.json_path = Path(os.getenv("JSON_PATH", "./data/jsonstore.json"))
        self.draft_dir = Path(os.getenv("DRAFT_DIR", "./data/drafts"))
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = _env_int("PORT", 5000)
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.form_id_length = _env_int("FORM_ID_LENGTH", 6)
        self.edit_key_length = _env_int("EDIT_KEY_LENGTH", 10)
        self.share_id_length = _env_int("SHARE_ID_LENGTH", 8)
        public_base_url = os.getenv("PUBLIC_BASE_URL", "")
        for key, value in overrides.items():
            if key == "public_base_url":
                public_base_url = str(value or "")
                continue
            if not hasattr(self, key):
                raise TypeError(f"unknown setting: {key}")
            setattr(self, key, value)
        if self.storage_backend not in STORAGE_BACKENDS:
            self.storage_backend = "sqlite"
        self.json_path = Path(self.json_path)
        self.draft_dir = Path(self.draft_dir)
        self.public_base_url = (
            public_base_url or f"http://localhost:{self.port}"
        ).rstrip("/")

    @property
    def sqlite_path(self) -> Path | None:
        url = make_url(self.database_url)
        if url.get_backend_name() != "sqlite" or not url.database:
            return None
        if url.database == ":memory:":
            return None
        return Path(url.database)


def ensure_dirs(settings: Settings) -> None:
    sqlite_path = settings.sqlite_path
    if settings.storage_backend == "sqlite" and sqlite_path is not None:
        sqlite_path.parent.mkdir(parents=True, exist_ok=True)
    if settings.storage_backend == "json":
        settings.json_path.parent.mkdir(parents=True, exist_ok=True)
