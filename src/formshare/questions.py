"""Standalone question bank.

These questions live in their own collection and are never linked to the
questions embedded in forms.
"""

from __future__ import annotations

import logging
from typing import Any

from formshare.errors import InternalError, StorageError
from formshare.schema import BANK_QUESTION_SCHEMA, normalize_question, validate_payload
from formshare.storage import Storage
from formshare.utils import now_utc

logger = logging.getLogger(__name__)


def create_question(storage: Storage, payload: Any) -> dict[str, Any]:
    validate_payload(payload, BANK_QUESTION_SCHEMA)
    normalized = normalize_question(payload)
    now = now_utc()
    question = {
        "id": normalized["id"],
        "type": normalized["type"],
        "title": normalized["title"],
        "content": normalized["content"],
        "options": normalized["options"],
        "correct_answer": normalized["correctAnswer"],
        "image_url": normalized.get("imageUrl"),
        "created_at": now,
        "updated_at": now,
    }
    try:
        storage.questions.create_question(question)
    except StorageError as exc:
        logger.exception("Create question failed")
        raise InternalError("Failed to create question") from exc
    return question


def list_questions(storage: Storage) -> list[dict[str, Any]]:
    try:
        return storage.questions.list_questions()
    except StorageError as exc:
        logger.exception("List questions failed")
        raise InternalError("Failed to fetch questions") from exc
