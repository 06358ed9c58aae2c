"""Tests for API endpoints (no external API keys required)."""

from unittest.mock import MagicMock, patch

import httpx
from anthropic import APIStatusError
from fastapi.testclient import TestClient

from townhall.minutes.generation import GenerationNotConfiguredError
from townhall.transcription.client import (
    TranscriptionNotConfiguredError,
    TranscriptionRejectedError,
    TranscriptionUnavailableError,
)
from townhall.transcription.models import WordToken

AUDIO = b"\xff\xfb\x90\x00" + b"\x00" * 100  # fake MP3 binary header


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200


# ---------------------------------------------------------------------------
# Transcription
# ---------------------------------------------------------------------------


def test_segment_endpoint(client: TestClient) -> None:
    response = client.post(
        "/api/transcriptions/segment",
        json={
            "words": [
                {"speaker_id": "A", "text": "Hi ", "start": 0, "end": 1},
                {"speaker_id": "A", "text": "there", "start": 1, "end": 2},
                {"speaker_id": "B", "text": "Hello", "start": 2, "end": 3},
            ]
        },
    )
    assert response.status_code == 200
    data = response.json()
    assert data["transcript"] == "A: Hi there\nB: Hello"
    assert data["timeline"] == ["[00:00–00:02] A: Hi there", "[00:02–00:03] B: Hello"]
    assert data["num_speakers"] == 2
    assert [len(s["words"]) for s in data["segments"]] == [2, 1]


def test_segment_endpoint_empty(client: TestClient) -> None:
    response = client.post("/api/transcriptions/segment", json={"words": []})
    assert response.status_code == 200
    assert response.json() == {"segments": [], "timeline": [], "transcript": "", "num_speakers": 0}


def test_segment_endpoint_missing_speaker_uses_label(client: TestClient) -> None:
    response = client.post(
        "/api/transcriptions/segment",
        json={"words": [{"text": "hm", "start": 0, "end": 1}]},
    )
    data = response.json()
    assert data["segments"][0]["speaker_id"] is None
    assert data["transcript"] == "Unknown: hm"
    assert data["num_speakers"] == 0


def test_segment_endpoint_validates_words(client: TestClient) -> None:
    response = client.post("/api/transcriptions/segment", json={"words": [{"text": "x"}]})
    assert response.status_code == 422


def test_import_internal_words(client: TestClient) -> None:
    response = client.post(
        "/api/transcriptions/import",
        json={
            "words": [
                {"speaker_id": "A", "text": "Hi ", "start": 0, "end": 1},
                {"speaker_id": "B", "text": "Hello", "start": 1, "end": 2},
            ]
        },
    )
    assert response.status_code == 200
    assert response.json()["transcript"] == "A: Hi \nB: Hello"


def test_import_saved_elevenlabs_response(client: TestClient) -> None:
    payload = {
        "text": "Hi there",
        "words": [
            {"text": "Hi", "start": 0.0, "end": 0.4, "type": "word", "speaker_id": "speaker_0"},
            {"text": " ", "start": 0.4, "end": 0.5, "type": "spacing", "speaker_id": "speaker_0"},
            {"text": "(laughs)", "start": 0.5, "end": 0.9, "type": "audio_event", "speaker_id": "speaker_1"},
            {"text": "there", "start": 0.9, "end": 1.2, "type": "word", "speaker_id": "speaker_0"},
        ],
    }
    response = client.post("/api/transcriptions/import?format=elevenlabs", json=payload)
    assert response.status_code == 200
    assert response.json()["transcript"] == "speaker_0: Hi there"


def test_import_unknown_format(client: TestClient) -> None:
    response = client.post("/api/transcriptions/import?format=srt", json={"words": []})
    assert response.status_code == 422


def test_import_payload_without_words(client: TestClient) -> None:
    response = client.post("/api/transcriptions/import", json={"utterances": []})
    assert response.status_code == 422


def test_import_word_missing_timing(client: TestClient) -> None:
    response = client.post("/api/transcriptions/import", json={"words": [{"text": "x"}]})
    assert response.status_code == 422


def test_transcribe_requires_file(client: TestClient) -> None:
    response = client.post("/api/transcriptions")
    assert response.status_code == 422


def test_transcribe_returns_segments(client: TestClient) -> None:
    words = [
        WordToken("speaker_0", "こんにちは", 0.0, 0.9),
        WordToken("speaker_1", "どうも", 1.0, 1.5),
    ]
    with patch("townhall.api.routes.transcription.transcribe_audio", return_value=words) as mock:
        response = client.post(
            "/api/transcriptions",
            files={"file": ("meeting.mp3", AUDIO, "audio/mpeg")},
        )
    assert response.status_code == 200, response.text
    assert response.json()["transcript"] == "speaker_0: こんにちは\nspeaker_1: どうも"
    assert mock.call_args.args == (AUDIO, "meeting.mp3")


def test_transcribe_empty_upload_returns_400(client: TestClient) -> None:
    response = client.post(
        "/api/transcriptions",
        files={"file": ("meeting.mp3", b"", "audio/mpeg")},
    )
    assert response.status_code == 400


def test_transcribe_not_configured_returns_501(client: TestClient) -> None:
    with patch(
        "townhall.api.routes.transcription.transcribe_audio",
        side_effect=TranscriptionNotConfiguredError("ELEVENLABS_API_KEY is not configured"),
    ):
        response = client.post(
            "/api/transcriptions",
            files={"file": ("meeting.mp3", AUDIO, "audio/mpeg")},
        )
    assert response.status_code == 501
    assert "not configured" in response.json()["detail"].lower()


def test_transcribe_rejected_returns_400(client: TestClient) -> None:
    with patch(
        "townhall.api.routes.transcription.transcribe_audio",
        side_effect=TranscriptionRejectedError("bad audio"),
    ):
        response = client.post(
            "/api/transcriptions",
            files={"file": ("meeting.mp3", AUDIO, "audio/mpeg")},
        )
    assert response.status_code == 400


def test_transcribe_unavailable_returns_503(client: TestClient) -> None:
    with patch(
        "townhall.api.routes.transcription.transcribe_audio",
        side_effect=TranscriptionUnavailableError("outage"),
    ):
        response = client.post(
            "/api/transcriptions",
            files={"file": ("meeting.mp3", AUDIO, "audio/mpeg")},
        )
    assert response.status_code == 503


def test_transcribe_too_large_returns_413(client: TestClient) -> None:
    with patch("townhall.api.routes.transcription.MAX_UPLOAD_BYTES", 10):
        response = client.post(
            "/api/transcriptions",
            files={"file": ("meeting.mp3", AUDIO, "audio/mpeg")},
        )
    assert response.status_code == 413


# ---------------------------------------------------------------------------
# Minutes generation
# ---------------------------------------------------------------------------


def test_generate_minutes(client: TestClient) -> None:
    with patch("townhall.api.routes.minutes.generate_minutes", return_value="# 議事録"):
        response = client.post("/api/minutes/generate", json={"transcript": "A: Hi"})
    assert response.status_code == 200
    assert response.json() == {"minutes": "# 議事録"}


def test_summarize_minutes(client: TestClient) -> None:
    with patch("townhall.api.routes.minutes.summarize_minutes", return_value="**要約**"):
        response = client.post("/api/minutes/summarize", json={"transcript": "A: Hi"})
    assert response.status_code == 200
    assert response.json() == {"summary": "**要約**"}


def test_generate_minutes_empty_transcript_returns_400(client: TestClient) -> None:
    response = client.post("/api/minutes/generate", json={"transcript": "  "})
    assert response.status_code == 400


def test_generate_minutes_no_key_returns_501(client: TestClient) -> None:
    with patch(
        "townhall.api.routes.minutes.generate_minutes",
        side_effect=GenerationNotConfiguredError("ANTHROPIC_API_KEY is not configured"),
    ):
        response = client.post("/api/minutes/generate", json={"transcript": "A: Hi"})
    assert response.status_code == 501


def test_summarize_llm_overloaded_returns_503(client: TestClient) -> None:
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    error = APIStatusError(
        "Overloaded",
        response=httpx.Response(529, request=request),
        body=None,
    )
    with patch("townhall.api.routes.minutes.summarize_minutes", side_effect=error):
        response = client.post("/api/minutes/summarize", json={"transcript": "A: Hi"})
    assert response.status_code == 503
    assert "LLM unavailable" in response.json()["detail"]


# ---------------------------------------------------------------------------
# Saved minutes
# ---------------------------------------------------------------------------


def test_list_minutes_newest_first(client: TestClient) -> None:
    response = client.get("/api/minutes")
    assert response.status_code == 200
    assert [m["id"] for m in response.json()] == ["2", "1"]


def test_search_minutes(client: TestClient) -> None:
    response = client.get("/api/minutes", params={"q": "提灯"})
    assert [m["title"] for m in response.json()] == ["2024年5月定例役員会"]


def test_save_minutes_uses_filename_as_title(client: TestClient) -> None:
    response = client.post(
        "/api/minutes",
        json={
            "filename": "6月役員会.m4a",
            "date": "2024-06-20",
            "transcription": "A: Hi",
            "minutes": "# 議事録",
            "summary": "要約",
        },
    )
    assert response.status_code == 201, response.text
    saved = response.json()
    assert saved["title"] == "6月役員会"

    listed = client.get("/api/minutes").json()
    assert listed[0]["id"] == saved["id"]
    assert client.get(f"/api/minutes/{saved['id']}").json()["summary"] == "要約"


def test_save_minutes_explicit_title(client: TestClient) -> None:
    response = client.post(
        "/api/minutes",
        json={"title": "臨時総会", "transcription": "A: Hi", "minutes": "m", "summary": "s"},
    )
    assert response.status_code == 201
    assert response.json()["title"] == "臨時総会"


def test_save_incomplete_minutes_returns_422(client: TestClient) -> None:
    response = client.post(
        "/api/minutes",
        json={"filename": "a.mp3", "transcription": "A: Hi", "minutes": "", "summary": "s"},
    )
    assert response.status_code == 422


def test_get_unknown_minutes_returns_404(client: TestClient) -> None:
    assert client.get("/api/minutes/nope").status_code == 404


def test_delete_minutes(client: TestClient) -> None:
    assert client.delete("/api/minutes/1").status_code == 204
    assert client.delete("/api/minutes/1").status_code == 404


def test_minutes_storage_error_returns_500(client_no_raise: TestClient) -> None:
    """A failing datastore surfaces as a server error, not a crash of the app."""
    repo = MagicMock()
    repo.list.side_effect = RuntimeError("database down")
    with patch("townhall.api.routes.minutes.get_minutes_repository", return_value=repo):
        response = client_no_raise.get("/api/minutes")
    assert response.status_code == 500


# ---------------------------------------------------------------------------
# Schedule
# ---------------------------------------------------------------------------


def test_list_schedule_in_date_order(client: TestClient) -> None:
    dates = [i["date"] for i in client.get("/api/schedule").json()]
    assert dates == sorted(dates)
    assert len(dates) == 6


def test_schedule_for_date(client: TestClient) -> None:
    response = client.get("/api/schedule", params={"date": "2024-08-10"})
    assert [i["title"] for i in response.json()] == ["夏祭り当日"]


def test_event_days(client: TestClient) -> None:
    client.post("/api/schedule", json={"date": "2024-08-10", "title": "片付け"})
    days = client.get("/api/schedule/days").json()
    assert days == [
        "2024-07-20",
        "2024-08-10",
        "2024-10-01",
        "2024-10-30",
        "2025-03-15",
        "2025-04-05",
    ]


def test_schedule_crud(client: TestClient) -> None:
    created = client.post(
        "/api/schedule",
        json={"date": "2024-11-03", "title": " 防災訓練 ", "description": ""},
    )
    assert created.status_code == 201
    item = created.json()
    assert item["title"] == "防災訓練"
    assert item["description"] is None

    updated = client.put(
        f"/api/schedule/{item['id']}",
        json={"date": "2024-11-10", "title": "防災訓練", "description": "公園集合"},
    )
    assert updated.status_code == 200
    assert updated.json()["date"] == "2024-11-10"

    assert client.delete(f"/api/schedule/{item['id']}").status_code == 204
    assert client.get("/api/schedule", params={"date": "2024-11-10"}).json() == []


def test_schedule_blank_title_returns_422(client: TestClient) -> None:
    response = client.post("/api/schedule", json={"date": "2024-11-03", "title": "  "})
    assert response.status_code == 422


def test_update_unknown_schedule_item_returns_404(client: TestClient) -> None:
    response = client.put("/api/schedule/nope", json={"date": "2024-11-03", "title": "x"})
    assert response.status_code == 404


# ---------------------------------------------------------------------------
# Workflows
# ---------------------------------------------------------------------------


def test_list_workflows(client: TestClient) -> None:
    workflows = client.get("/api/workflows").json()
    assert [w["name"] for w in workflows] == ["会費集金フロー", "新役員選出フロー"]
    assert workflows[0]["files"][0]["name"] == "集金案内状テンプレート.docx"


def test_create_workflow_default_mermaid(client: TestClient) -> None:
    response = client.post("/api/workflows", json={"name": "清掃当番"})
    assert response.status_code == 201
    assert response.json()["mermaid_code"].startswith("graph TD")


def test_create_workflow_blank_mermaid_returns_422(client: TestClient) -> None:
    response = client.post("/api/workflows", json={"name": "清掃当番", "mermaid_code": " "})
    assert response.status_code == 422


def test_update_workflow_keeps_files(client: TestClient) -> None:
    response = client.put(
        "/api/workflows/1",
        json={"name": "会費集金フロー v2", "mermaid_code": "graph TD\n A --> B"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "会費集金フロー v2"
    assert [f["id"] for f in data["files"]] == ["f1"]


def test_workflow_files(client: TestClient) -> None:
    added = client.post("/api/workflows/2/files", json={"name": "推薦書.pdf"})
    assert added.status_code == 201
    file_id = added.json()["files"][0]["id"]

    removed = client.delete(f"/api/workflows/2/files/{file_id}")
    assert removed.status_code == 200
    assert removed.json()["files"] == []

    assert client.delete(f"/api/workflows/2/files/{file_id}").status_code == 404


def test_workflow_not_found(client: TestClient) -> None:
    assert client.get("/api/workflows/nope").status_code == 404
    assert client.delete("/api/workflows/nope").status_code == 404
    assert client.post("/api/workflows/nope/files", json={"name": "x"}).status_code == 404
