"""Respondent-side state for answering a shared form.

    loading -> loaded | not_found
    loaded -> submitting -> submitted | loaded (error kept on the session)
    submitted -> loaded (reset)
"""

from __future__ import annotations

import enum
import logging
from typing import Any

import httpx

from formshare.client import ApiError, FormShareClient

logger = logging.getLogger(__name__)


class RespondentState(str, enum.Enum):
    LOADING = "loading"
    LOADED = "loaded"
    NOT_FOUND = "not_found"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"


class InvalidStateError(Exception):
    """Raised when an action is not allowed in the session's current state."""


class RespondentSession:
    def __init__(self, client: FormShareClient, share_id: str) -> None:
        self.client = client
        self.share_id = share_id
        self.state = RespondentState.LOADING
        self.form: dict[str, Any] | None = None
        self.answers: list[dict[str, Any]] = []
        self.error: str | None = None

    def _require(self, *states: RespondentState) -> None:
        if self.state not in states:
            raise InvalidStateError(f"not allowed while {self.state.value}")

    def load(self) -> RespondentState:
        self._require(RespondentState.LOADING)
        try:
            self.form = self.client.get_form_by_share_id(self.share_id)
        except (ApiError, httpx.HTTPError) as exc:
            logger.warning("Could not load form %s: %s", self.share_id, exc)
            self.form = None
            self.error = "Form not found"
            self.state = RespondentState.NOT_FOUND
        else:
            self.error = None
            self.state = RespondentState.LOADED
        return self.state

    def get_answer(self, question_id: str) -> Any:
        for answer in self.answers:
            if answer["questionId"] == question_id:
                return answer["value"]
        return ""

    def set_answer(self, question_id: str, value: str | list[str]) -> None:
        self._require(RespondentState.LOADED)
        for answer in self.answers:
            if answer["questionId"] == question_id:
                answer["value"] = value
                return
        self.answers.append({"questionId": question_id, "value": value})

    @property
    def can_submit(self) -> bool:
        return self.state == RespondentState.LOADED and bool(self.answers)

    def submit(self) -> bool:
        self._require(RespondentState.LOADED)
        if not self.answers:
            raise InvalidStateError("no answers to submit")
        self.state = RespondentState.SUBMITTING
        try:
            self.client.submit_by_share_id(self.share_id, list(self.answers))
        except (ApiError, httpx.HTTPError) as exc:
            logger.warning("Submission for %s failed: %s", self.share_id, exc)
            self.error = "Submission failed. Try again later."
            self.state = RespondentState.LOADED
            return False
        self.error = None
        self.state = RespondentState.SUBMITTED
        return True

    def reset(self) -> None:
        """Go back to answering so the same respondent can submit again."""
        self._require(RespondentState.SUBMITTED)
        self.state = RespondentState.LOADED
