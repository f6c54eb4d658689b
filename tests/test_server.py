"""
Tests for the board HTTP API (board_server).

Covers:
    - GET /api/board                      — default board, reads existing file
    - POST /api/<collection>              — append, round-trips full document
    - PUT /api/<collection>/<id>          — partial merge
    - DELETE /api/<collection>/<id>       — removal, missing id no-op
    - error handling                      — 500 + {"error"} on failures
"""
import json

import pytest

import board_server
from visionboard.store import StorageError, open_file_store


EMPTY = {"stickers": [], "cards": [], "notes": []}


class TestGetBoard:

    def test_default_on_absence(self, client, board_file):
        r = client.get("/api/board")
        assert r.status_code == 200
        assert r.get_json() == EMPTY
        assert json.loads(board_file.read_text()) == EMPTY

    def test_reads_existing_file(self, client, board_file):
        doc = {"stickers": [], "cards": [{"id": "c1", "title": "A"}], "notes": []}
        board_file.parent.mkdir(parents=True, exist_ok=True)
        board_file.write_text(json.dumps(doc))
        assert client.get("/api/board").get_json() == doc

    def test_corrupt_file_reset(self, client, board_file):
        client.get("/api/board")
        board_file.write_text("not json")
        assert client.get("/api/board").get_json() == EMPTY


class TestCreate:

    def test_create_appends(self, client):
        r = client.post("/api/cards", json={"id": "c1", "title": "Run a marathon"})
        assert r.status_code == 200
        doc = r.get_json()
        assert doc["cards"] == [{"id": "c1", "title": "Run a marathon"}]
        assert client.get("/api/board").get_json() == doc

    @pytest.mark.parametrize("collection", ["stickers", "cards", "notes"])
    def test_create_in_each_collection(self, client, collection):
        doc = client.post(f"/api/{collection}", json={"id": "x1"}).get_json()
        assert doc[collection] == [{"id": "x1"}]
        others = [c for c in ("stickers", "cards", "notes") if c != collection]
        assert all(doc[c] == [] for c in others)

    def test_create_preserves_order(self, client):
        client.post("/api/notes", json={"id": "n1", "text": "one"})
        doc = client.post("/api/notes", json={"id": "n2", "text": "two"}).get_json()
        assert [n["id"] for n in doc["notes"]] == ["n1", "n2"]

    def test_payload_not_validated(self, client):
        doc = client.post("/api/stickers", json={"whatever": True}).get_json()
        assert doc["stickers"] == [{"whatever": True}]

    def test_non_json_body_stored_as_empty_item(self, client):
        doc = client.post("/api/notes", data="plain text").get_json()
        assert doc["notes"] == [{}]

    def test_unknown_collection_is_404(self, client):
        assert client.post("/api/widgets", json={"id": "w1"}).status_code == 404


class TestUpdate:

    def test_partial_update_preserves_untouched_fields(self, client):
        client.post("/api/cards", json={"id": "c1", "title": "A", "description": "B"})
        doc = client.put("/api/cards/c1", json={"description": "C"}).get_json()
        assert doc["cards"] == [{"id": "c1", "title": "A", "description": "C"}]

    def test_update_position(self, client):
        client.post("/api/stickers", json={"id": "s1", "position": {"x": 0, "y": 0}})
        doc = client.put("/api/stickers/s1", json={"position": {"x": -50, "y": 9000}}).get_json()
        assert doc["stickers"][0]["position"] == {"x": -50, "y": 9000}

    def test_update_missing_id_unchanged(self, client):
        before = client.post("/api/notes", json={"id": "n1", "text": "a"}).get_json()
        after = client.put("/api/notes/zzz", json={"text": "b"}).get_json()
        assert after == before

    def test_non_object_body_is_error(self, client):
        r = client.put("/api/cards/c1", json=[1, 2])
        assert r.status_code == 500
        assert "error" in r.get_json()


class TestDelete:

    def test_delete_removes_item(self, client):
        client.post("/api/cards", json={"id": "c1"})
        client.post("/api/cards", json={"id": "c2"})
        doc = client.delete("/api/cards/c1").get_json()
        assert doc["cards"] == [{"id": "c2"}]

    def test_delete_missing_id_is_noop(self, client):
        before = client.post("/api/cards", json={"id": "c1"}).get_json()
        r = client.delete("/api/cards/doesnotexist")
        assert r.status_code == 200
        assert r.get_json() == before


class TestErrors:

    def test_write_failure_returns_500(self, client, board_file, monkeypatch):
        store = open_file_store(str(board_file))

        def broken(document):
            raise StorageError("Save failed: disk full")

        monkeypatch.setattr(store, "write", broken)
        r = client.post("/api/cards", json={"id": "c1"})
        assert r.status_code == 500
        assert r.get_json() == {"error": "Save failed: disk full"}

    def test_health(self, client, board_file):
        r = client.get("/health")
        assert r.get_json() == {"status": "ok", "data": str(board_file)}


def test_data_path_from_env(board_file):
    assert board_server.get_data_path() == str(board_file)


def test_data_path_from_config_file(tmp_path, monkeypatch):
    cfg_path = tmp_path / "visionboard.yaml"
    cfg_path.write_text(f"data_file: {tmp_path / 'boards' / 'mine.json'}\n")
    monkeypatch.delenv("VISIONBOARD_DATA", raising=False)
    monkeypatch.setenv("VISIONBOARD_CONFIG", str(cfg_path))
    monkeypatch.setattr(board_server, "_config", None)
    assert board_server.get_data_path() == str(tmp_path / "boards" / "mine.json")
