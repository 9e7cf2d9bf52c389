"""Tests for the FastAPI document API.

WHY: Validates every endpoint: happy paths, 404s, structuring failures
mapped to 422 with a machine-readable reason, and the full-cache 503.

HOW: Each test uses the FastAPI TestClient against the module-level app.
Documents are created through POST /documents, exactly as a client would.

RULES:
- All tests use the FastAPI TestClient (synchronous)
- The document store is cleared before and after each test
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from focus_reader.server.app import app, document_store


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_document_store():
    document_store._documents.clear()
    yield
    document_store._documents.clear()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def document_id(client, sample_text):
    response = client.post("/documents", json={"text": sample_text, "title": "Sample"})
    assert response.status_code == 201
    return response.json()["id"]


# ---------------------------------------------------------------------------
# POST /documents
# ---------------------------------------------------------------------------


class TestCreateDocument:

    def test_returns_summary(self, client, sample_text):
        response = client.post("/documents", json={"text": sample_text, "title": "Sample"})
        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Sample"
        assert body["total_words"] == 45
        assert [s["kind"] for s in body["sections"]] == ["heading", "heading", "bullet", "paragraph"]
        assert body["id"].startswith("sample-")
        assert "words" not in body

    def test_default_title(self, client, sample_text):
        response = client.post("/documents", json={"text": sample_text})
        assert response.json()["title"] == "Untitled Document"

    def test_empty_text_is_422_with_reason(self, client):
        response = client.post("/documents", json={"text": "   \n\n"})
        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["reason"] == "empty"
        assert detail["word_count"] == 0

    def test_too_short_is_422(self, client):
        response = client.post("/documents", json={"text": "Just three words."})
        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["reason"] == "too_short"
        assert detail["word_count"] == 3
        assert "minimum" in detail["message"]

    def test_missing_text_is_validation_error(self, client):
        response = client.post("/documents", json={"title": "No text"})
        assert response.status_code == 422

    def test_full_store_is_503(self, client, sample_text, monkeypatch):
        monkeypatch.setattr(document_store, "max_documents", 1)
        assert client.post("/documents", json={"text": sample_text}).status_code == 201
        response = client.post("/documents", json={"text": sample_text})
        assert response.status_code == 503
        assert "Maximum number" in response.json()["detail"]


# ---------------------------------------------------------------------------
# GET /documents/{id}
# ---------------------------------------------------------------------------


class TestGetDocument:

    def test_returns_full_structure(self, client, document_id):
        response = client.get("/documents/{}".format(document_id))
        assert response.status_code == 200
        body = response.json()
        assert body["id"] == document_id
        assert len(body["words"]) == 45
        assert body["words"][0] == {
            "text": "INTRODUCTION",
            "orp": 3,
            "base_delay_ms": 350,
            "punctuation_pause_ms": 0,
            "is_long_word": True,
        }
        assert body["last_position"] == 0

    def test_unknown_id_is_404(self, client):
        response = client.get("/documents/nope")
        assert response.status_code == 404
        assert "nope" in response.json()["detail"]


# ---------------------------------------------------------------------------
# GET /documents/{id}/timeline
# ---------------------------------------------------------------------------


class TestTimeline:

    def test_default_speed(self, client, document_id):
        body = client.get("/documents/{}/timeline".format(document_id)).json()
        assert body["document_id"] == document_id
        assert len(body["entries"]) == 45
        first = body["entries"][0]
        assert first["word"] == "INTRODUCTION"
        assert first["start_ms"] == 0
        assert first["section_index"] == 0

    def test_entries_are_contiguous(self, client, document_id):
        body = client.get("/documents/{}/timeline?wpm=300".format(document_id)).json()
        assert body["wpm"] == 300
        entries = body["entries"]
        for prev, nxt in zip(entries, entries[1:]):
            expected = prev["start_ms"] + prev["duration_ms"] + prev["pause_after_ms"]
            assert nxt["start_ms"] == pytest.approx(expected)
        last = entries[-1]
        assert body["total_duration_ms"] == pytest.approx(
            last["start_ms"] + last["duration_ms"] + last["pause_after_ms"]
        )

    def test_bullet_words_carry_bullet_pause(self, client, document_id):
        entries = client.get("/documents/{}/timeline".format(document_id)).json()["entries"]
        assert entries[20]["word"] == "•"
        assert entries[20]["pause_after_ms"] == 200

    @pytest.mark.parametrize("wpm, expected", [(5000, 600), (20, 100)])
    def test_speed_is_clamped(self, client, document_id, wpm, expected):
        body = client.get("/documents/{}/timeline?wpm={}".format(document_id, wpm)).json()
        assert body["wpm"] == expected

    def test_non_positive_wpm_is_rejected(self, client, document_id):
        response = client.get("/documents/{}/timeline?wpm=0".format(document_id))
        assert response.status_code == 422

    def test_unknown_id_is_404(self, client):
        assert client.get("/documents/nope/timeline").status_code == 404


# ---------------------------------------------------------------------------
# GET /documents/{id}/files/{format}
# ---------------------------------------------------------------------------


class TestExport:

    def test_outline(self, client, document_id):
        response = client.get("/documents/{}/files/outline".format(document_id))
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.headers["content-disposition"] == (
            'attachment; filename="{}-outline.txt"'.format(document_id)
        )
        assert "[3] BULLET: Bullet Points (words 20-34)" in response.text

    def test_structure_json(self, client, document_id):
        response = client.get("/documents/{}/files/structure_json".format(document_id))
        assert response.status_code == 200
        assert response.json()["total_words"] == 45

    def test_timeline_honours_wpm(self, client, document_id):
        response = client.get("/documents/{}/files/timeline?wpm=600".format(document_id))
        assert response.status_code == 200
        # INTRODUCTION is a long word: 100 ms × 1.5
        assert response.text.startswith("1\n00:00:00,000 --> 00:00:00,150\nINT[R]ODUCTION\n")

    def test_unknown_format_is_404(self, client, document_id):
        response = client.get("/documents/{}/files/docx".format(document_id))
        assert response.status_code == 404
        assert "Unknown format" in response.json()["detail"]

    def test_unknown_document_is_404(self, client):
        assert client.get("/documents/nope/files/outline").status_code == 404


# ---------------------------------------------------------------------------
# DELETE /documents/{id}
# ---------------------------------------------------------------------------


class TestDelete:

    def test_delete_then_404(self, client, document_id):
        assert client.delete("/documents/{}".format(document_id)).status_code == 204
        assert client.get("/documents/{}".format(document_id)).status_code == 404

    def test_delete_unknown_is_404(self, client):
        assert client.delete("/documents/nope").status_code == 404


# ---------------------------------------------------------------------------
# GET /formats, GET /health
# ---------------------------------------------------------------------------


class TestFormatsAndHealth:

    def test_formats(self, client):
        body = client.get("/formats").json()
        assert [f["key"] for f in body] == ["outline", "structure_json", "timeline"]
        assert {f["suffix"] for f in body} == {"-outline.txt", "-structure.json", "-timeline.srt"}

    def test_health(self, client, document_id):
        body = client.get("/health").json()
        assert body["status"] == "ok"
        assert body["version"] == "0.1.0"
        assert body["documents"] == 1
