"""
test_api.py — Tests for the FastAPI web API endpoints.

Uses FastAPI's TestClient (backed by httpx) so tests run in-process without
needing a live server.  Transcript fetching is mocked so these tests are fast
and don't require network access.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from yt_transcript_resolver.api import app
from yt_transcript_resolver.catalog import TranscriptCatalog
from yt_transcript_resolver.errors import (
    AgeRestrictedError,
    DataUnparsableError,
    IpBlockedError,
    NoTranscriptFoundError,
    NotTranslatableError,
    PoTokenRequiredError,
    TranscriptsDisabledError,
    VideoUnavailableError,
)
from yt_transcript_resolver.models import TrackDescriptor, TranslationTarget

VIDEO_ID = "dQw4w9WgXcQ"

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def client() -> TestClient:
    """Create a fresh TestClient for each test."""
    return TestClient(app)


# Sample data returned by mocked extract() calls.
_SAMPLE_TEXT = "Hello world\nSecond line"
_SAMPLE_JSON = {
    "video_id": VIDEO_ID,
    "segment_count": 2,
    "segments": [
        {"text": "Hello world", "start": 0.0, "duration": 1.5},
        {"text": "Second line", "start": 1.5, "duration": 2.0},
    ],
}


def _track(code: str, name: str, generated: bool, translatable: bool) -> TrackDescriptor:
    return TrackDescriptor(
        video_id=VIDEO_ID,
        source_url=f"https://www.youtube.com/api/timedtext?v={VIDEO_ID}&lang={code}",
        language=name,
        language_code=code,
        is_generated=generated,
        is_translatable=translatable,
    )


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------

class TestHealth:

    def test_health_returns_ok(self, client: TestClient) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


# ---------------------------------------------------------------------------
# Transcript endpoint — success cases
# ---------------------------------------------------------------------------

class TestTranscriptEndpoint:
    """Tests for GET /transcript/{video_id} with mocked extraction."""

    @patch("yt_transcript_resolver.api.extract")
    def test_text_format(self, mock_extract: MagicMock, client: TestClient) -> None:
        """Default format=text returns plain text with 200."""
        mock_extract.return_value = _SAMPLE_TEXT

        resp = client.get(f"/transcript/{VIDEO_ID}")

        assert resp.status_code == 200
        assert resp.text == _SAMPLE_TEXT
        assert resp.headers["content-type"].startswith("text/plain")
        mock_extract.assert_called_once_with(
            VIDEO_ID, languages=None, fmt="text",
            translate_to=None, preserve_formatting=False,
        )

    @patch("yt_transcript_resolver.api.extract")
    def test_json_format(self, mock_extract: MagicMock, client: TestClient) -> None:
        mock_extract.return_value = _SAMPLE_JSON

        resp = client.get(f"/transcript/{VIDEO_ID}?format=json")

        assert resp.status_code == 200
        assert resp.json() == _SAMPLE_JSON

    @patch("yt_transcript_resolver.api.extract")
    def test_all_query_parameters(self, mock_extract: MagicMock, client: TestClient) -> None:
        mock_extract.return_value = "**[00:00]** Bonjour"

        resp = client.get(
            f"/transcript/{VIDEO_ID}",
            params={"format": "doc", "lang": "de, en", "translate": "fr", "preserve_formatting": "true"},
        )

        assert resp.status_code == 200
        mock_extract.assert_called_once_with(
            VIDEO_ID, languages=["de", "en"], fmt="doc",
            translate_to="fr", preserve_formatting=True,
        )

    def test_invalid_format_rejected(self, client: TestClient) -> None:
        """format must match the allowed pattern; FastAPI returns 422."""
        resp = client.get(f"/transcript/{VIDEO_ID}?format=srt")
        assert resp.status_code == 422

    def test_invalid_video_id(self, client: TestClient) -> None:
        """Rejected before any network traffic, as a 400."""
        resp = client.get("/transcript/invalid-url")
        assert resp.status_code == 400
        assert "Could not extract a video ID" in resp.json()["error"]


# ---------------------------------------------------------------------------
# Transcript endpoint — error mapping
# ---------------------------------------------------------------------------

class TestErrorHandler:
    """Each TranscriptError subclass maps to its own HTTP status."""

    @pytest.mark.parametrize(
        "error, status",
        [
            (TranscriptsDisabledError(VIDEO_ID), 404),
            (VideoUnavailableError(VIDEO_ID), 404),
            (AgeRestrictedError(VIDEO_ID), 403),
            (PoTokenRequiredError(VIDEO_ID), 403),
            (IpBlockedError(VIDEO_ID), 429),
            (DataUnparsableError(VIDEO_ID), 502),
            (NotTranslatableError(VIDEO_ID), 400),
        ],
    )
    @patch("yt_transcript_resolver.api.extract")
    def test_status_codes(
        self, mock_extract: MagicMock, error: Exception, status: int, client: TestClient,
    ) -> None:
        mock_extract.side_effect = error

        resp = client.get(f"/transcript/{VIDEO_ID}")

        assert resp.status_code == status
        body = resp.json()
        assert body["video_id"] == VIDEO_ID
        assert body["error"]
        assert "available_languages" not in body

    @patch("yt_transcript_resolver.api.extract")
    def test_no_transcript_lists_alternatives(self, mock_extract: MagicMock, client: TestClient) -> None:
        mock_extract.side_effect = NoTranscriptFoundError(VIDEO_ID, ["ja"], ["de", "en"])

        resp = client.get(f"/transcript/{VIDEO_ID}?lang=ja")

        assert resp.status_code == 404
        assert resp.json() == {
            "error": "No transcript found for language(s) [ja]",
            "video_id": VIDEO_ID,
            "available_languages": ["de", "en"],
        }


# ---------------------------------------------------------------------------
# Catalog endpoint
# ---------------------------------------------------------------------------

class TestTranscriptsEndpoint:
    """Tests for GET /transcripts/{video_id}."""

    @patch("yt_transcript_resolver.api.list_transcripts")
    def test_lists_tracks(self, mock_list: MagicMock, client: TestClient) -> None:
        mock_list.return_value = TranscriptCatalog(
            video_id=VIDEO_ID,
            manual_tracks={"en": _track("en", "English", False, True)},
            generated_tracks={"en": _track("en", "English (auto-generated)", True, False)},
            translation_targets=(TranslationTarget("fr", "French"),),
        )

        resp = client.get(f"/transcripts/{VIDEO_ID}")

        assert resp.status_code == 200
        assert resp.json() == {
            "video_id": VIDEO_ID,
            "available_languages": ["en"],
            "manually_created": [
                {"language": "English", "language_code": "en", "is_generated": False, "is_translatable": True},
            ],
            "generated": [
                {
                    "language": "English (auto-generated)", "language_code": "en",
                    "is_generated": True, "is_translatable": False,
                },
            ],
            "translation_languages": [{"language": "French", "language_code": "fr"}],
        }
        mock_list.assert_called_once_with(VIDEO_ID)

    @patch("yt_transcript_resolver.api.list_transcripts")
    def test_disabled(self, mock_list: MagicMock, client: TestClient) -> None:
        mock_list.side_effect = TranscriptsDisabledError(VIDEO_ID)

        resp = client.get(f"/transcripts/{VIDEO_ID}")

        assert resp.status_code == 404
        assert resp.json()["error"] == "Transcripts are disabled for this video"
