BANK_QUESTION = {
    "id": "3f7c1e",
    "type": "categorize",
    "title": "Fruit or vegetable",
    "content": "Sort these",
    "options": ["Fruit", "Vegetable"],
    "correctAnswer": ["Fruit"],
}


class TestQuestionBank:
    def test_create(self, api_client):
        resp = api_client.post("/api/questions", json=BANK_QUESTION)
        assert resp.status_code == 201
        data = resp.json()
        assert data["id"] == "3f7c1e"
        assert data["options"] == ["Fruit", "Vegetable"]
        assert data["correctAnswer"] == ["Fruit"]
        assert data["createdAt"]

    def test_requires_id_and_type(self, api_client):
        assert api_client.post("/api/questions", json={"type": "cloze"}).status_code == 400
        assert api_client.post("/api/questions", json={"id": "x"}).status_code == 400

    def test_list_in_insertion_order(self, api_client):
        for index in range(3):
            api_client.post("/api/questions", json={**BANK_QUESTION, "id": f"q{index}"})
        listed = api_client.get("/api/questions").json()
        assert [q["id"] for q in listed] == ["q0", "q1", "q2"]

    def test_not_linked_to_forms(self, api_client, created_form):
        api_client.post("/api/questions", json=BANK_QUESTION)
        form = api_client.get(f"/api/forms/{created_form['formId']}").json()
        assert [q["id"] for q in form["questions"]] == ["q-cloze"]
        assert [q["id"] for q in api_client.get("/api/questions").json()] == ["3f7c1e"]
