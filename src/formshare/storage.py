from __future__ import annotations

from typing import Any, Protocol

from formshare.config import Settings, ensure_dirs
from formshare.repo_json import JSONStorage
from formshare.repo_sqlite import SQLiteStorage


class FormRepository(Protocol):
    def get_form(self, form_id: str) -> dict[str, Any] | None: ...

    def get_form_by_share_id(self, share_id: str) -> dict[str, Any] | None: ...

    def create_form(self, form: dict[str, Any]) -> None: ...

    def update_form(self, form_id: str, updates: dict[str, Any]) -> dict[str, Any]: ...


class ResponseRepository(Protocol):
    def list_responses(self, form_id: str) -> list[dict[str, Any]]: ...

    def count_responses(self, form_id: str) -> int: ...

    def create_response(self, response: dict[str, Any]) -> None: ...


class QuestionRepository(Protocol):
    def list_questions(self) -> list[dict[str, Any]]: ...

    def create_question(self, question: dict[str, Any]) -> None: ...


class Storage(Protocol):
    forms: FormRepository
    responses: ResponseRepository
    questions: QuestionRepository

    def close(self) -> None: ...


def init_storage(settings: Settings) -> Storage:
    ensure_dirs(settings)
    if settings.storage_backend == "json":
        return JSONStorage(settings.json_path)
    return SQLiteStorage(settings.database_url)
