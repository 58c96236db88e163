from __future__ import annotations

import re
import uuid
from typing import Any

from jsonschema import Draft7Validator

from formshare.config import LEGACY_QUESTION_TYPES, QUESTION_TYPES
from formshare.errors import ValidationError
from formshare.utils import now_utc, to_iso

CLOZE_BLANK = re.compile(r"_{3,}")

_ANSWER_SCHEMA: dict[str, Any] = {
    "anyOf": [
        {"type": "string"},
        {"type": "array", "items": {"type": "string"}},
        {"type": "null"},
    ]
}

QUESTION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "id": {"type": "string"},
        "type": {"type": "string", "minLength": 1},
        "title": {"type": ["string", "null"]},
        "content": {"type": ["string", "null"]},
        "prompt": {"type": ["string", "null"]},
        "options": {"type": ["array", "null"], "items": {"type": "string"}},
        "correctAnswer": _ANSWER_SCHEMA,
        "answer": _ANSWER_SCHEMA,
        "imageUrl": {"type": ["string", "null"]},
    },
    "required": ["type"],
}

FORM_PAYLOAD_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": {"type": ["string", "null"]},
        "description": {"type": ["string", "null"]},
        "headerImageUrl": {"type": ["string", "null"]},
        "questions": {"type": "array", "items": QUESTION_SCHEMA},
        "editKey": {"type": "string", "minLength": 1},
        "shareId": {"type": "string", "minLength": 1},
    },
}

BANK_QUESTION_SCHEMA: dict[str, Any] = {
    **QUESTION_SCHEMA,
    "properties": {**QUESTION_SCHEMA["properties"], "id": {"type": "string", "minLength": 1}},
    "required": ["id", "type"],
}

# camelCase payload key -> stored form key; anything else in a payload is ignored
FORM_FIELD_MAP = {
    "title": "title",
    "description": "description",
    "headerImageUrl": "header_image_url",
    "questions": "questions",
    "editKey": "edit_key",
    "shareId": "share_id",
}


def validate_payload(payload: Any, schema: dict[str, Any]) -> None:
    validator = Draft7Validator(schema)
    errors = sorted(validator.iter_errors(payload), key=lambda err: list(err.path))
    if errors:
        messages = []
        for error in errors:
            location = ".".join(str(part) for part in error.path)
            messages.append(f"{location}: {error.message}" if location else error.message)
        raise ValidationError("; ".join(messages))


def is_known_question_type(question_type: str) -> bool:
    return question_type in QUESTION_TYPES or question_type in LEGACY_QUESTION_TYPES


def normalize_question(raw: dict[str, Any]) -> dict[str, Any]:
    """Bring a question into its stored shape.

    ``prompt`` and ``answer`` are accepted as aliases of ``content`` and
    ``correctAnswer``. Whether ``options`` fits the type is left to rendering.
    """
    content = raw.get("content")
    if content is None:
        content = raw.get("prompt")
    correct_answer = raw.get("correctAnswer")
    if correct_answer is None:
        correct_answer = raw.get("answer")
    question: dict[str, Any] = {
        "id": str(raw.get("id") or uuid.uuid4()),
        "type": str(raw["type"]).strip(),
        "title": str(raw.get("title") or ""),
        "content": str(content or ""),
        "options": [str(option) for option in raw.get("options") or []],
        "correctAnswer": correct_answer,
    }
    if raw.get("imageUrl"):
        question["imageUrl"] = str(raw["imageUrl"])
    return question


def normalize_questions(raw_questions: list[dict[str, Any]] | None) -> list[dict[str, Any]]:
    return [normalize_question(raw) for raw in raw_questions or []]


def form_updates_from_payload(payload: dict[str, Any]) -> dict[str, Any]:
    updates: dict[str, Any] = {}
    for key, target in FORM_FIELD_MAP.items():
        if key not in payload:
            continue
        value = payload[key]
        if target == "questions":
            updates[target] = normalize_questions(value)
        elif target in {"title", "description"}:
            updates[target] = str(value or "")
        else:
            updates[target] = value
    return updates


def extract_answers(payload: Any) -> Any:
    if isinstance(payload, dict) and "answers" in payload:
        return payload["answers"]
    return payload


def split_cloze(content: str) -> list[str]:
    """Split cloze text on its blank markers; n blanks yield n + 1 segments."""
    return CLOZE_BLANK.split(content or "")


def cloze_blank_count(content: str) -> int:
    return len(CLOZE_BLANK.findall(content or ""))


def sanitize_form_output(
    form: dict[str, Any], response_count: int | None = None
) -> dict[str, Any]:
    output = {
        "formId": form["form_id"],
        "editKey": form["edit_key"],
        "shareId": form["share_id"],
        "title": form.get("title", ""),
        "description": form.get("description", ""),
        "headerImageUrl": form.get("header_image_url"),
        "questions": form.get("questions", []),
        "createdAt": to_iso(form.get("created_at") or now_utc()),
        "updatedAt": to_iso(form.get("updated_at") or now_utc()),
    }
    if response_count is not None:
        output["responseCount"] = response_count
    return output


def sanitize_response_output(response: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": response["id"],
        "formId": response["form_id"],
        "answers": response.get("answers"),
        "submittedAt": to_iso(response["submitted_at"]),
    }


def sanitize_question_output(question: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": question["id"],
        "type": question["type"],
        "title": question.get("title", ""),
        "content": question.get("content", ""),
        "options": question.get("options") or [],
        "correctAnswer": question.get("correct_answer"),
        "imageUrl": question.get("image_url"),
        "createdAt": to_iso(question["created_at"]),
        "updatedAt": to_iso(question["updated_at"]),
    }
