from __future__ import annotations

import secrets
import string

from formshare.config import Settings

ALPHABET = string.ascii_letters + string.digits + "_-"


def new_token(length: int) -> str:
    if length < 1:
        raise ValueError("token length must be positive")
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


def new_form_identifiers(settings: Settings) -> dict[str, str]:
    """Generate formId, editKey and shareId, pairwise distinct.

    Global uniqueness is not checked here; the store rejects duplicates.
    """
    while True:
        identifiers = {
            "form_id": new_token(settings.form_id_length),
            "edit_key": new_token(settings.edit_key_length),
            "share_id": new_token(settings.share_id_length),
        }
        if len(set(identifiers.values())) == len(identifiers):
            return identifiers
