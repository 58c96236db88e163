from __future__ import annotations

import logging
from typing import Any

from formshare.errors import InternalError, NotFoundError, StorageError
from formshare.storage import Storage
from formshare.utils import new_ulid, now_utc

logger = logging.getLogger(__name__)


def create_response(storage: Storage, form_id: str, answers: Any) -> dict[str, Any]:
    """Store one submission for ``form_id``.

    The form is not looked up and ``answers`` is stored as sent.
    """
    response = {
        "id": new_ulid(),
        "form_id": form_id,
        "answers": answers,
        "submitted_at": now_utc(),
    }
    try:
        storage.responses.create_response(response)
    except StorageError as exc:
        logger.exception("Failed to store response for form %s", form_id)
        raise InternalError("Failed to submit response") from exc
    logger.info("Response %s stored for form %s", response["id"], form_id)
    return response


def create_response_by_share_id(
    storage: Storage, share_id: str, answers: Any
) -> dict[str, Any]:
    try:
        form = storage.forms.get_form_by_share_id(share_id)
    except StorageError as exc:
        logger.exception("Failed to resolve share id %s", share_id)
        raise InternalError("Failed to submit response") from exc
    if not form:
        raise NotFoundError()
    return create_response(storage, form["form_id"], answers)


def list_responses(storage: Storage, form_id: str) -> list[dict[str, Any]]:
    try:
        return storage.responses.list_responses(form_id)
    except StorageError as exc:
        logger.exception("Failed to list responses for form %s", form_id)
        raise InternalError("Failed to fetch responses") from exc


def count_responses(storage: Storage, form_id: str) -> int:
    try:
        return storage.responses.count_responses(form_id)
    except StorageError as exc:
        logger.exception("Failed to count responses for form %s", form_id)
        raise InternalError("Failed to fetch form") from exc
