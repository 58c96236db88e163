import pytest

from formshare.errors import StorageError
from tests.conftest import CLOZE_FORM

DETAIL = "disk gone /secret/path"


@pytest.fixture
def storage(api_client):
    return api_client.app.state.storage


def _assert_opaque_500(resp, message, caplog, log_text):
    assert resp.status_code == 500
    assert resp.json() == {"error": message}
    assert "secret" not in resp.text
    records = [r for r in caplog.records if log_text in r.getMessage()]
    assert records
    assert records[0].exc_info is not None


class TestFormStoreFailures:
    def test_create(self, api_client, storage, mocker, caplog):
        mocker.patch.object(storage.forms, "create_form", side_effect=StorageError(DETAIL))
        resp = api_client.post("/api/forms", json=CLOZE_FORM)
        _assert_opaque_500(resp, "Failed to create form", caplog, "Create form failed")

    def test_fetch(self, api_client, storage, mocker, caplog):
        mocker.patch.object(storage.forms, "get_form", side_effect=StorageError(DETAIL))
        resp = api_client.get("/api/forms/abc123")
        _assert_opaque_500(resp, "Failed to fetch form", caplog, "Fetch form abc123 failed")

    def test_fetch_by_share_id(self, api_client, storage, mocker, caplog):
        mocker.patch.object(storage.forms, "get_form_by_share_id", side_effect=StorageError(DETAIL))
        resp = api_client.get("/api/forms/respond/share000")
        _assert_opaque_500(resp, "Failed to fetch form", caplog, "Fetch form by share id share000 failed")

    def test_update(self, api_client, storage, created_form, mocker, caplog):
        mocker.patch.object(storage.forms, "update_form", side_effect=StorageError(DETAIL))
        resp = api_client.put(
            f"/api/forms/{created_form['formId']}",
            params={"key": created_form["editKey"]},
            json={"title": "x"},
        )
        _assert_opaque_500(resp, "Failed to edit form", caplog, "Edit form")


class TestResponseStoreFailures:
    def test_submit(self, api_client, storage, created_form, mocker, caplog):
        mocker.patch.object(storage.responses, "create_response", side_effect=StorageError(DETAIL))
        resp = api_client.post(
            f"/api/forms/share/{created_form['shareId']}/submit",
            json={"answers": [{"questionId": "q-cloze", "value": "blue"}]},
        )
        _assert_opaque_500(resp, "Failed to submit response", caplog, "Failed to store response")
        mocker.stopall()
        assert api_client.get(f"/api/responses/{created_form['formId']}").json() == []

    def test_list(self, api_client, storage, mocker, caplog):
        mocker.patch.object(storage.responses, "list_responses", side_effect=StorageError(DETAIL))
        resp = api_client.get("/api/responses/abc123")
        _assert_opaque_500(resp, "Failed to fetch responses", caplog, "Failed to list responses")


class TestQuestionStoreFailures:
    def test_create(self, api_client, storage, mocker, caplog):
        mocker.patch.object(storage.questions, "create_question", side_effect=StorageError(DETAIL))
        resp = api_client.post("/api/questions", json={"id": "q", "type": "cloze"})
        _assert_opaque_500(resp, "Failed to create question", caplog, "Create question failed")

    def test_list(self, api_client, storage, mocker, caplog):
        mocker.patch.object(storage.questions, "list_questions", side_effect=StorageError(DETAIL))
        resp = api_client.get("/api/questions")
        _assert_opaque_500(resp, "Failed to fetch questions", caplog, "List questions failed")
