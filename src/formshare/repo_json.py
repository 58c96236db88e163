from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator

from filelock import FileLock
from tinydb import Query, TinyDB

from formshare.errors import DuplicateKeyError, StorageError
from formshare.utils import parse_dt, to_iso

FORM_FIELDS = {
    "edit_key",
    "share_id",
    "title",
    "description",
    "header_image_url",
    "questions",
    "updated_at",
}


class JSONRepoBase:
    def __init__(self, path: Path, lock: FileLock) -> None:
        self._path = path
        self._lock = lock

    @contextmanager
    def _db(self) -> Iterator[TinyDB]:
        try:
            with self._lock:
                db = TinyDB(self._path)
                try:
                    yield db
                finally:
                    db.close()
        except (OSError, ValueError) as exc:
            raise StorageError(str(exc)) from exc

    @staticmethod
    def _dates_to_iso(record: dict[str, Any]) -> dict[str, Any]:
        return {
            key: to_iso(value) if isinstance(value, datetime) else value
            for key, value in record.items()
        }


class JSONFormRepo(JSONRepoBase):
    def get_form(self, form_id: str) -> dict[str, Any] | None:
        with self._db() as db:
            item = db.table("forms").get(Query().form_id == form_id)
        return self._from_record(item) if item else None

    def get_form_by_share_id(self, share_id: str) -> dict[str, Any] | None:
        with self._db() as db:
            item = db.table("forms").get(Query().share_id == share_id)
        return self._from_record(item) if item else None

    def create_form(self, form: dict[str, Any]) -> None:
        record = self._dates_to_iso(form)
        with self._db() as db:
            table = db.table("forms")
            form_q = Query()
            if table.contains(
                (form_q.form_id == record["form_id"])
                | (form_q.share_id == record["share_id"])
            ):
                raise DuplicateKeyError(
                    f"form identifier already exists: {record['form_id']}"
                )
            table.insert(record)

    def update_form(self, form_id: str, updates: dict[str, Any]) -> dict[str, Any]:
        with self._db() as db:
            table = db.table("forms")
            form_q = Query()
            item = table.get(form_q.form_id == form_id)
            if not item:
                raise KeyError(form_id)
            changes = {
                key: value for key, value in updates.items() if key in FORM_FIELDS
            }
            new_share_id = changes.get("share_id")
            if new_share_id and new_share_id != item.get("share_id"):
                if table.contains(form_q.share_id == new_share_id):
                    raise DuplicateKeyError(f"share id already exists: {new_share_id}")
            item.update(self._dates_to_iso(changes))
            table.update(item, form_q.form_id == form_id)
        return self._from_record(item)

    @staticmethod
    def _from_record(record: dict[str, Any]) -> dict[str, Any]:
        return {
            "form_id": record["form_id"],
            "edit_key": record["edit_key"],
            "share_id": record["share_id"],
            "title": record.get("title", ""),
            "description": record.get("description", ""),
            "header_image_url": record.get("header_image_url"),
            "questions": record.get("questions", []),
            "created_at": parse_dt(record.get("created_at")),
            "updated_at": parse_dt(record.get("updated_at")),
        }


class JSONResponseRepo(JSONRepoBase):
    def list_responses(self, form_id: str) -> list[dict[str, Any]]:
        with self._db() as db:
            items = db.table("responses").search(Query().form_id == form_id)
        items.sort(key=lambda item: item.doc_id)
        return [self._from_record(item) for item in items]

    def count_responses(self, form_id: str) -> int:
        with self._db() as db:
            return db.table("responses").count(Query().form_id == form_id)

    def create_response(self, response: dict[str, Any]) -> None:
        record = self._dates_to_iso(response)
        with self._db() as db:
            db.table("responses").insert(record)

    @staticmethod
    def _from_record(record: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": record["id"],
            "form_id": record["form_id"],
            "answers": record.get("answers"),
            "submitted_at": parse_dt(record.get("submitted_at")),
        }


class JSONQuestionRepo(JSONRepoBase):
    def list_questions(self) -> list[dict[str, Any]]:
        with self._db() as db:
            items = db.table("questions").all()
        items.sort(key=lambda item: item.doc_id)
        return [self._from_record(item) for item in items]

    def create_question(self, question: dict[str, Any]) -> None:
        record = self._dates_to_iso(question)
        with self._db() as db:
            db.table("questions").insert(record)

    @staticmethod
    def _from_record(record: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": record["id"],
            "type": record["type"],
            "title": record.get("title", ""),
            "content": record.get("content", ""),
            "options": record.get("options") or [],
            "correct_answer": record.get("correct_answer"),
            "image_url": record.get("image_url"),
            "created_at": parse_dt(record.get("created_at")),
            "updated_at": parse_dt(record.get("updated_at")),
        }


class JSONStorage:
    def __init__(self, path: Path) -> None:
        self._lock = FileLock(f"{path}.lock")
        self.forms = JSONFormRepo(path, self._lock)
        self.responses = JSONResponseRepo(path, self._lock)
        self.questions = JSONQuestionRepo(path, self._lock)

    def close(self) -> None:
        return None
