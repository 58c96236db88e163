"""Client-side form drafts.

A draft is an immutable snapshot; every edit returns a new ``FormDraft``. Drafts
are saved to a local directory under their own client id, which has nothing to
do with the server's formId.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Union

import orjson
from filelock import FileLock

from formshare.config import QUESTION_TYPES

logger = logging.getLogger(__name__)

Answer = Union[str, tuple[str, ...], None]

DRAFT_PREFIX = "formBuilder_"
DEFAULT_OPTIONS = ("Option 1", "Option 2")
FORM_FIELDS = {"title", "description", "header_image_url"}
QUESTION_FIELDS = {"type", "title", "content", "options", "correct_answer", "image_url"}


@dataclass(frozen=True)
class DraftQuestion:
    id: str
    type: str
    title: str
    content: str = ""
    options: tuple[str, ...] | None = None
    correct_answer: Answer = None
    image_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "content": self.content,
        }
        if self.options is not None:
            data["options"] = list(self.options)
        if self.correct_answer is not None:
            data["correctAnswer"] = (
                list(self.correct_answer)
                if isinstance(self.correct_answer, tuple)
                else self.correct_answer
            )
        if self.image_url:
            data["imageUrl"] = self.image_url
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DraftQuestion:
        options = data.get("options")
        answer = data.get("correctAnswer")
        return cls(
            id=str(data["id"]),
            type=str(data["type"]),
            title=str(data.get("title") or ""),
            content=str(data.get("content") or ""),
            options=tuple(options) if options is not None else None,
            correct_answer=tuple(answer) if isinstance(answer, list) else answer,
            image_url=data.get("imageUrl"),
        )


@dataclass(frozen=True)
class FormDraft:
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    title: str = "Untitled Form"
    description: str = "Add a description for your form"
    header_image_url: str | None = None
    questions: tuple[DraftQuestion, ...] = ()

    def update(self, **changes: Any) -> FormDraft:
        unknown = set(changes) - FORM_FIELDS
        if unknown:
            raise TypeError(f"cannot update draft fields: {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def add_question(self, question_type: str) -> FormDraft:
        if question_type not in QUESTION_TYPES:
            raise ValueError(f"unsupported question type: {question_type}")
        question = DraftQuestion(
            id=str(uuid.uuid4()),
            type=question_type,
            title=f"New {question_type.capitalize()} Question",
            options=DEFAULT_OPTIONS if question_type == "categorize" else None,
        )
        return replace(self, questions=(*self.questions, question))

    def get_question(self, question_id: str) -> DraftQuestion | None:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def update_question(self, question_id: str, **changes: Any) -> FormDraft:
        unknown = set(changes) - QUESTION_FIELDS
        if unknown:
            raise TypeError(f"cannot update question fields: {', '.join(sorted(unknown))}")
        if "options" in changes and changes["options"] is not None:
            changes["options"] = tuple(changes["options"])
        if isinstance(changes.get("correct_answer"), list):
            changes["correct_answer"] = tuple(changes["correct_answer"])
        return replace(
            self,
            questions=tuple(
                replace(q, **changes) if q.id == question_id else q
                for q in self.questions
            ),
        )

    def remove_question(self, question_id: str) -> FormDraft:
        return replace(
            self,
            questions=tuple(q for q in self.questions if q.id != question_id),
        )

    def move_question(self, question_id: str, index: int) -> FormDraft:
        question = self.get_question(question_id)
        if question is None:
            return self
        rest = [q for q in self.questions if q.id != question_id]
        index = max(0, min(index, len(rest)))
        rest.insert(index, question)
        return replace(self, questions=tuple(rest))

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "questions": [q.to_dict() for q in self.questions],
        }
        if self.header_image_url:
            payload["headerImageUrl"] = self.header_image_url
        return payload

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, **self.to_payload()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FormDraft:
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            header_image_url=data.get("headerImageUrl"),
            questions=tuple(DraftQuestion.from_dict(q) for q in data.get("questions") or []),
        )


class DraftStore:
    def __init__(self, directory: Path) -> None:
        self._dir = Path(directory)
        self._lock = FileLock(str(self._dir / ".drafts.lock"))

    def _path(self, draft_id: str) -> Path:
        if not draft_id or "/" in draft_id or "\\" in draft_id:
            raise ValueError(f"invalid draft id: {draft_id!r}")
        return self._dir / f"{DRAFT_PREFIX}{draft_id}.json"

    def save(self, draft: FormDraft) -> Path:
        self._dir.mkdir(parents=True, exist_ok=True)
        path = self._path(draft.id)
        with self._lock:
            path.write_bytes(orjson.dumps(draft.to_dict(), option=orjson.OPT_INDENT_2))
        logger.info("Draft %s saved to %s", draft.id, path)
        return path

    def load(self, draft_id: str) -> FormDraft:
        path = self._path(draft_id)
        if not path.exists():
            raise KeyError(draft_id)
        with self._lock:
            data = orjson.loads(path.read_bytes())
        return FormDraft.from_dict(data)

    def list_ids(self) -> list[str]:
        if not self._dir.exists():
            return []
        return sorted(
            path.stem[len(DRAFT_PREFIX):]
            for path in self._dir.glob(f"{DRAFT_PREFIX}*.json")
        )

    def delete(self, draft_id: str) -> None:
        path = self._path(draft_id)
        if not path.exists():
            return
        with self._lock:
            path.unlink(missing_ok=True)
