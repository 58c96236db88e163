import pytest
from fastapi.testclient import TestClient

from formshare.app import create_app
from formshare.config import Settings
from formshare.storage import init_storage


CLOZE_FORM = {
    "title": "T",
    "description": "Weather quiz",
    "questions": [{"id": "q-cloze", "type": "cloze", "title": "Sky", "content": "The sky is ___"}],
}

CATEGORIZE_FORM = {
    "title": "Sorting",
    "questions": [
        {"id": "q-cat", "type": "categorize", "title": "Pick one", "options": ["A", "B"]},
        {"id": "q-read", "type": "comprehension", "title": "Read", "content": "A short passage."},
    ],
}


def make_settings(tmp_path, backend="sqlite"):
    return Settings(
        storage_backend=backend,
        database_url=f"sqlite:///{tmp_path / 'app.db'}",
        json_path=tmp_path / "jsonstore.json",
        draft_dir=tmp_path / "drafts",
        public_base_url="http://testserver",
    )


@pytest.fixture(params=["sqlite", "json"])
def settings(request, tmp_path):
    return make_settings(tmp_path, request.param)


@pytest.fixture
def storage(settings):
    store = init_storage(settings)
    yield store
    store.close()


@pytest.fixture
def api_client(settings):
    """FastAPI TestClient backed by a fresh store for each backend."""
    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture
def created_form(api_client):
    resp = api_client.post("/api/forms", json=CLOZE_FORM)
    assert resp.status_code == 200
    return resp.json()
