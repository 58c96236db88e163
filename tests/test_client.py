import httpx
import pytest

from formshare.client import ApiError, FormShareClient
from tests.conftest import CATEGORIZE_FORM


@pytest.fixture
def client(api_client):
    return FormShareClient(http_client=api_client)


class TestFormShareClient:
    def test_full_flow(self, client):
        created = client.create_form(CATEGORIZE_FORM)
        assert client.get_form(created["formId"])["title"] == "Sorting"
        assert client.get_form_by_share_id(created["shareId"])["formId"] == created["formId"]
        assert client.update_form(created["formId"], created["editKey"], {"title": "Renamed"}) == {
            "success": True
        }
        client.submit_by_share_id(created["shareId"], [{"questionId": "q-cat", "value": "A"}])
        client.submit_by_form_id(created["formId"], [{"questionId": "q-cat", "value": "B"}])
        client.create_response(created["formId"], [{"questionId": "q-read", "value": "ok"}])
        responses = client.list_responses(created["formId"])
        assert [r["answers"][0]["value"] for r in responses] == ["A", "B", "ok"]

    def test_error_carries_status_and_message(self, client, created_form):
        with pytest.raises(ApiError) as excinfo:
            client.update_form(created_form["formId"], "bad", {"title": "x"})
        assert excinfo.value.status_code == 403
        assert excinfo.value.message == "Invalid edit key"

    def test_question_bank(self, client):
        client.create_question({"id": "q", "type": "comprehension", "content": "Passage"})
        assert [q["id"] for q in client.list_questions()] == ["q"]

    def test_non_json_error_body(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(502, text="bad gateway"))
        client = FormShareClient(http_client=httpx.Client(transport=transport, base_url="http://test"))
        with pytest.raises(ApiError) as excinfo:
            client.get_form("x")
        assert excinfo.value.status_code == 502
        assert excinfo.value.message == "Bad Gateway"
