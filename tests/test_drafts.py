import dataclasses

import pytest

from formshare.drafts import DraftStore, FormDraft


@pytest.fixture
def draft():
    return FormDraft().add_question("categorize").add_question("cloze")


class TestFormDraft:
    def test_defaults(self):
        draft = FormDraft()
        assert draft.title == "Untitled Form"
        assert draft.questions == ()
        assert draft.id

    def test_snapshots_are_immutable(self, draft):
        with pytest.raises(dataclasses.FrozenInstanceError):
            draft.title = "x"
        updated = draft.update(title="Quiz")
        assert updated.title == "Quiz"
        assert draft.title == "Untitled Form"

    def test_update_rejects_unknown_fields(self, draft):
        with pytest.raises(TypeError):
            draft.update(questions=())

    def test_add_question(self, draft):
        categorize, cloze = draft.questions
        assert categorize.title == "New Categorize Question"
        assert categorize.options == ("Option 1", "Option 2")
        assert cloze.options is None
        assert categorize.id != cloze.id

    def test_add_unknown_type(self, draft):
        with pytest.raises(ValueError):
            draft.add_question("essay")

    def test_update_question(self, draft):
        target = draft.questions[1].id
        updated = draft.update_question(target, content="The sky is ___", correct_answer=["blue"])
        assert updated.get_question(target).content == "The sky is ___"
        assert updated.get_question(target).correct_answer == ("blue",)
        assert draft.get_question(target).content == ""

    def test_update_unknown_question_is_noop(self, draft):
        assert draft.update_question("missing", title="x") == draft

    def test_remove_question(self, draft):
        target = draft.questions[0].id
        updated = draft.remove_question(target)
        assert [q.type for q in updated.questions] == ["cloze"]
        assert len(draft.questions) == 2

    def test_move_question(self, draft):
        third = draft.add_question("comprehension")
        moved = third.move_question(third.questions[2].id, 0)
        assert [q.type for q in moved.questions] == ["comprehension", "categorize", "cloze"]
        assert third.move_question("missing", 0) == third

    def test_payload(self, draft):
        payload = draft.update(header_image_url="http://img").to_payload()
        assert payload["headerImageUrl"] == "http://img"
        assert payload["questions"][0]["options"] == ["Option 1", "Option 2"]
        assert "options" not in payload["questions"][1]
        assert "id" not in payload


class TestDraftStore:
    def test_save_and_load(self, tmp_path, draft):
        store = DraftStore(tmp_path / "drafts")
        path = store.save(draft)
        assert path.name == f"formBuilder_{draft.id}.json"
        assert store.load(draft.id) == draft

    def test_list_and_delete(self, tmp_path, draft):
        store = DraftStore(tmp_path / "drafts")
        assert store.list_ids() == []
        store.save(draft)
        assert store.list_ids() == [draft.id]
        store.delete(draft.id)
        assert store.list_ids() == []
        store.delete(draft.id)

    def test_load_missing(self, tmp_path):
        with pytest.raises(KeyError):
            DraftStore(tmp_path).load("missing")

    @pytest.mark.parametrize("draft_id", ["../x", "a/b", "..\\x", ""])
    def test_rejects_ids_with_paths(self, tmp_path, draft_id):
        store = DraftStore(tmp_path / "drafts")
        with pytest.raises(ValueError):
            store.load(draft_id)
        with pytest.raises(ValueError):
            store.delete(draft_id)
        with pytest.raises(ValueError):
            store.save(FormDraft(id=draft_id))
