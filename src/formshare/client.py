from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when the server answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class FormShareClient:
    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        http_client: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._client = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> FormShareClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        response = self._client.request(method, url, **kwargs)
        if response.is_error:
            logger.warning("%s %s failed with %s", method, url, response.status_code)
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = ""
            if isinstance(body, dict):
                message = str(body.get("error") or body.get("message") or "")
            raise ApiError(response.status_code, message or response.reason_phrase)
        return response.json()

    def create_form(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/api/forms", json=payload)

    def get_form(self, form_id: str) -> dict[str, Any]:
        return self._request("GET", f"/api/forms/{form_id}")

    def get_form_by_share_id(self, share_id: str) -> dict[str, Any]:
        return self._request("GET", f"/api/forms/respond/{share_id}")

    def update_form(
        self, form_id: str, edit_key: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        return self._request(
            "PUT", f"/api/forms/{form_id}", params={"key": edit_key}, json=payload
        )

    def submit_by_form_id(self, form_id: str, answers: Any) -> dict[str, Any]:
        return self._request(
            "POST", f"/api/forms/{form_id}/submit", json={"answers": answers}
        )

    def submit_by_share_id(self, share_id: str, answers: Any) -> dict[str, Any]:
        return self._request(
            "POST", f"/api/forms/share/{share_id}/submit", json={"answers": answers}
        )

    def create_response(self, form_id: str, answers: Any) -> dict[str, Any]:
        return self._request(
            "POST", f"/api/responses/{form_id}", json={"answers": answers}
        )

    def list_responses(self, form_id: str) -> list[dict[str, Any]]:
        return self._request("GET", f"/api/responses/{form_id}")

    def create_question(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/api/questions", json=payload)

    def list_questions(self) -> list[dict[str, Any]]:
        return self._request("GET", "/api/questions")
