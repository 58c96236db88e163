"""Form lifecycle: create, read by either identifier, keyed update, submit.

Reads return the whole form including ``editKey``; anyone holding the formId or
the shareId can therefore learn the edit key. Updates merge whatever form
fields the caller sends, ``editKey`` and ``shareId`` included, once the current
key matches.
"""

from __future__ import annotations

import hmac
import logging
from typing import Any

from formshare.config import Settings
from formshare.errors import (
    DuplicateKeyError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    StorageError,
)
from formshare.identifiers import new_form_identifiers
from formshare.responses import create_response
from formshare.schema import (
    FORM_PAYLOAD_SCHEMA,
    form_updates_from_payload,
    is_known_question_type,
    normalize_questions,
    validate_payload,
)
from formshare.storage import Storage
from formshare.utils import now_utc

logger = logging.getLogger(__name__)


def share_url(settings: Settings, share_id: str) -> str:
    return f"{settings.public_base_url}/f/{share_id}"


def create_form(
    storage: Storage, payload: Any, settings: Settings
) -> dict[str, str]:
    validate_payload(payload, FORM_PAYLOAD_SCHEMA)
    questions = normalize_questions(payload.get("questions"))
    for question in questions:
        if not is_known_question_type(question["type"]):
            logger.warning("Unknown question type %r stored as-is", question["type"])

    identifiers = new_form_identifiers(settings)
    now = now_utc()
    form = {
        **identifiers,
        "title": str(payload.get("title") or ""),
        "description": str(payload.get("description") or ""),
        "header_image_url": payload.get("headerImageUrl"),
        "questions": questions,
        "created_at": now,
        "updated_at": now,
    }
    try:
        storage.forms.create_form(form)
    except DuplicateKeyError as exc:
        logger.error("Generated identifier collided: %s", exc)
        raise InternalError("Failed to create form") from exc
    except StorageError as exc:
        logger.exception("Create form failed")
        raise InternalError("Failed to create form") from exc

    logger.info("Form %s created with %d questions", form["form_id"], len(questions))
    return {
        "formId": form["form_id"],
        "editKey": form["edit_key"],
        "shareId": form["share_id"],
        "shareUrl": share_url(settings, form["share_id"]),
    }


def get_form(storage: Storage, form_id: str) -> dict[str, Any]:
    try:
        form = storage.forms.get_form(form_id)
    except StorageError as exc:
        logger.exception("Fetch form %s failed", form_id)
        raise InternalError("Failed to fetch form") from exc
    if not form:
        raise NotFoundError()
    return form


def get_form_by_share_id(storage: Storage, share_id: str) -> dict[str, Any]:
    try:
        form = storage.forms.get_form_by_share_id(share_id)
    except StorageError as exc:
        logger.exception("Fetch form by share id %s failed", share_id)
        raise InternalError("Failed to fetch form") from exc
    if not form or form["share_id"] != share_id:
        raise NotFoundError()
    return form


def update_form(
    storage: Storage, form_id: str, edit_key: str | None, payload: Any
) -> dict[str, Any]:
    try:
        form = storage.forms.get_form(form_id)
    except StorageError as exc:
        logger.exception("Fetch form %s failed", form_id)
        raise InternalError("Failed to edit form") from exc
    if not form or not edit_key or not hmac.compare_digest(
        form["edit_key"].encode("utf-8"), edit_key.encode("utf-8")
    ):
        logger.warning("Rejected edit of form %s", form_id)
        raise ForbiddenError()

    validate_payload(payload, FORM_PAYLOAD_SCHEMA)
    updates = form_updates_from_payload(payload)
    updates["updated_at"] = now_utc()
    try:
        updated = storage.forms.update_form(form_id, updates)
    except (StorageError, KeyError) as exc:
        logger.exception("Edit form %s failed", form_id)
        raise InternalError("Failed to edit form") from exc
    logger.info("Form %s updated (%s)", form_id, ", ".join(sorted(updates)))
    return updated


def append_response(
    storage: Storage,
    *,
    answers: Any,
    form_id: str | None = None,
    share_id: str | None = None,
) -> dict[str, Any]:
    if share_id is not None:
        form = get_form_by_share_id(storage, share_id)
    elif form_id is not None:
        form = get_form(storage, form_id)
    else:
        raise ValueError("form_id or share_id is required")
    return create_response(storage, form["form_id"], answers)
