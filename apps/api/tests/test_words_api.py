"""
HTTP tests for /words and /editor/words: camelCase bodies, role gating and
the error envelope.
"""
from conftest import headers_for, make_word


def _body(lemma="cachai", **extra):
    body = {
        "lemma": lemma,
        "root": "cachar",
        "values": [
            {
                "meaning": "Entender algo.",
                "grammarCategory": "verbo",
                "examples": [{"value": "¿Cachai?", "source": "La Tercera"}],
            }
        ],
    }
    body.update(extra)
    return body


class TestCreate:
    def test_create_word(self, client, staff_headers):
        resp = client.post("/words/cachai", json=_body(), headers=staff_headers)

        assert resp.status_code == 201
        data = resp.json()
        assert data["success"] is True
        assert data["data"]["lemma"] == "cachai"
        assert data["data"]["letter"] == "c"
        assert isinstance(data["data"]["wordId"], int)

    def test_created_by_defaults_to_caller(self, client, users, staff_headers):
        client.post("/words/cachai", json=_body(), headers=staff_headers)

        resp = client.get("/editor/words/cachai", headers=staff_headers)
        assert resp.json()["data"]["createdBy"] == users["lexicographer"]["id"]

    def test_requires_staff_role(self, client, users):
        resp = client.post("/words/cachai", json=_body())

        assert resp.status_code == 403
        assert resp.json()["error"] == "forbidden"

    def test_path_and_body_must_agree(self, client, staff_headers):
        resp = client.post("/words/otra", json=_body(), headers=staff_headers)

        assert resp.status_code == 400
        assert resp.json()["error"] == "validation_error"

    def test_duplicate_is_409(self, client, staff_headers):
        client.post("/words/cachai", json=_body(), headers=staff_headers)

        resp = client.post("/words/cachai", json=_body(), headers=staff_headers)

        assert resp.status_code == 409
        env = resp.json()
        assert env["error"] == "conflict"
        assert set(env.keys()) == {"error", "message", "request_id", "details"}

    def test_unknown_assignee_is_400(self, client, staff_headers):
        resp = client.post("/words/pino", json=_body(lemma="pino", assignedTo=9999), headers=staff_headers)

        assert resp.status_code == 400
        env = resp.json()
        assert env["error"] == "validation_error"
        assert env["details"] == {"assignedTo": 9999}
        assert client.get("/editor/words/pino", headers=staff_headers).status_code == 404

    def test_unknown_caller_id_is_400(self, client):
        resp = client.post("/words/pino", json=_body(lemma="pino"), headers={"X-User-Id": "9999", "X-User-Role": "editor"})

        assert resp.status_code == 400
        assert resp.json()["details"] == {"createdBy": 9999}

    def test_missing_values_field_is_request_validation(self, client, staff_headers):
        resp = client.post("/words/cachai", json={"values": "nope"}, headers=staff_headers)

        assert resp.status_code == 422
        assert resp.json()["error"] == "validation_error"

    def test_request_id_is_echoed_on_errors(self, client, staff_headers):
        headers = dict(staff_headers, **{"X-Request-Id": "REQ-123"})
        client.post("/words/cachai", json=_body(), headers=headers)

        resp = client.post("/words/cachai", json=_body(), headers=headers)

        assert resp.headers["X-Request-Id"] == "REQ-123"
        assert resp.json()["request_id"] == "REQ-123"


class TestRead:
    def test_public_read_only_published(self, client, configured_db):
        make_word("cachai", status="redacted")
        make_word("guagua", status="published")

        assert client.get("/words/cachai").status_code == 404
        resp = client.get("/words/guagua")
        assert resp.status_code == 200
        assert resp.json()["data"]["lemma"] == "guagua"

    def test_editor_read_includes_camelcase_meanings(self, client, staff_headers):
        client.post("/words/cachai", json=_body(), headers=staff_headers)

        data = client.get("/editor/words/cachai", headers=staff_headers).json()["data"]

        assert data["status"] == "included"
        meaning = data["values"][0]
        assert meaning["grammarCategory"] == "verbo"
        assert meaning["examples"][0]["publication"] == "La Tercera"


class TestUpdateDelete:
    def test_update_word(self, client, staff_headers):
        client.post("/words/cachai", json=_body(), headers=staff_headers)

        resp = client.put(
            "/words/cachai",
            json=_body(values=[{"meaning": "Comprender."}], status="reviewed"),
            headers=staff_headers,
        )

        assert resp.status_code == 200
        assert resp.json() == {"success": True, "data": {"lemma": "cachai"}}
        data = client.get("/editor/words/cachai", headers=staff_headers).json()["data"]
        assert data["status"] == "reviewed"
        assert [m["meaning"] for m in data["values"]] == ["Comprender."]

    def test_update_without_assignee_keeps_it(self, client, users, staff_headers):
        editor_id = users["editor"]["id"]
        client.post("/words/cachai", json=_body(assignedTo=editor_id), headers=staff_headers)

        client.put("/words/cachai", json=_body(), headers=staff_headers)

        data = client.get("/editor/words/cachai", headers=staff_headers).json()["data"]
        assert data["assignedTo"] == editor_id

    def test_update_unknown_assignee_is_400(self, client, staff_headers):
        client.post("/words/cachai", json=_body(), headers=staff_headers)

        resp = client.put("/words/cachai", json=_body(assignedTo=9999), headers=staff_headers)

        assert resp.status_code == 400
        assert resp.json()["details"] == {"assignedTo": 9999}
        data = client.get("/editor/words/cachai", headers=staff_headers).json()["data"]
        assert data["assignedTo"] is None

    def test_update_missing_is_404(self, client, staff_headers):
        resp = client.put("/words/nada", json=_body(lemma="nada"), headers=staff_headers)

        assert resp.status_code == 404
        assert resp.json()["error"] == "not_found"

    def test_delete_word(self, client, staff_headers):
        client.post("/words/cachai", json=_body(), headers=staff_headers)

        resp = client.delete("/words/cachai", headers=staff_headers)

        assert resp.status_code == 200
        assert client.get("/editor/words/cachai", headers=staff_headers).status_code == 404


class TestNotes:
    def test_add_note(self, client, users):
        headers = headers_for(users["editor"])
        client.post("/words/cachai", json=_body(), headers=headers)

        resp = client.post("/words/cachai/notes", json={"note": "revisar"}, headers=headers)

        assert resp.status_code == 201
        note = resp.json()["data"]
        assert note["note"] == "revisar"
        assert note["user"]["username"] == "edith"
        assert note["resolved"] is False

    def test_empty_note_is_400(self, client, staff_headers):
        client.post("/words/cachai", json=_body(), headers=staff_headers)

        resp = client.post("/words/cachai/notes", json={"note": "  "}, headers=staff_headers)

        assert resp.status_code == 400


class TestHealth:
    def test_health_keys(self, client):
        resp = client.get("/health")

        assert resp.status_code == 200
        body = resp.json()
        assert set(body.keys()) == {"status", "version", "db", "last_error_summary"}
        assert body["db"]["status"] == "ok"
        assert "X-Request-Id" in resp.headers
