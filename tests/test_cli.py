"""
test_cli.py — Tests for the `yt-transcript` command group.

Covers:
    - _parse_languages() splitting of --lang values
    - `get` option forwarding, JSON rendering, and --output file writing
    - `list` and `languages` output
    - Error reporting (message on stderr, exit code 1, no traceback)
"""

from __future__ import annotations

import json
import logging
import os
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from yt_transcript_resolver.catalog import TranscriptCatalog
from yt_transcript_resolver.cli import _parse_languages, main
from yt_transcript_resolver.errors import (
    NoTranscriptFoundError,
    TranscriptsDisabledError,
)
from yt_transcript_resolver.models import TrackDescriptor, TranslationTarget

VIDEO_ID = "dQw4w9WgXcQ"


def _track(code: str, generated: bool = False) -> TrackDescriptor:
    return TrackDescriptor(
        video_id=VIDEO_ID,
        source_url=f"https://www.youtube.com/api/timedtext?v={VIDEO_ID}&lang={code}",
        language=code.upper(),
        language_code=code,
        is_generated=generated,
        is_translatable=True,
    )


_SAMPLE_CATALOG = TranscriptCatalog(
    video_id=VIDEO_ID,
    manual_tracks={"en": _track("en")},
    generated_tracks={"de": _track("de", generated=True)},
    translation_targets=(TranslationTarget("fr", "French"),),
)


# ---------------------------------------------------------------------------
# _parse_languages — --lang value handling
# ---------------------------------------------------------------------------

class TestParseLanguages:

    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, None),
            ("", None),
            ("en", ["en"]),
            ("de,en", ["de", "en"]),
            (" de , en ,", ["de", "en"]),
            (",,", None),
        ],
    )
    def test_values(self, value: str | None, expected: list[str] | None) -> None:
        assert _parse_languages(value) == expected


# ---------------------------------------------------------------------------
# CLI `get` subcommand
# ---------------------------------------------------------------------------

class TestGet:

    @patch("yt_transcript_resolver.cli.extract")
    def test_defaults(self, mock_extract: MagicMock) -> None:
        """Without flags, `get` asks for plain text in the default language."""
        mock_extract.return_value = "Hello world\nSecond line"

        result = CliRunner().invoke(main, ["get", VIDEO_ID])

        assert result.exit_code == 0
        assert "Hello world\nSecond line" in result.output
        mock_extract.assert_called_once_with(
            VIDEO_ID,
            languages=None,
            fmt="text",
            translate_to=None,
            preserve_formatting=False,
        )

    @patch("yt_transcript_resolver.cli.extract")
    def test_options_are_forwarded(self, mock_extract: MagicMock) -> None:
        mock_extract.return_value = "**[00:00]** Hallo"

        result = CliRunner().invoke(main, [
            "get", f"https://youtu.be/{VIDEO_ID}",
            "--lang", "de,en", "--format", "DOC", "--translate", "fr", "--preserve-formatting",
        ])

        assert result.exit_code == 0
        mock_extract.assert_called_once_with(
            f"https://youtu.be/{VIDEO_ID}",
            languages=["de", "en"],
            fmt="doc",
            translate_to="fr",
            preserve_formatting=True,
        )

    @patch("yt_transcript_resolver.cli.extract")
    def test_json_is_pretty_printed(self, mock_extract: MagicMock) -> None:
        payload = {
            "video_id": VIDEO_ID,
            "segment_count": 1,
            "segments": [{"text": "Grüße", "start": 0.0, "duration": 1.0}],
        }
        mock_extract.return_value = payload

        result = CliRunner().invoke(main, ["get", VIDEO_ID, "-f", "json"])

        assert result.exit_code == 0
        assert json.loads(result.output) == payload
        assert "Grüße" in result.output

    @patch("yt_transcript_resolver.cli.extract")
    def test_output_file(self, mock_extract: MagicMock, tmp_path) -> None:
        mock_extract.return_value = "Hello world"
        out_file = str(tmp_path / "transcript.txt")

        result = CliRunner().invoke(main, ["get", VIDEO_ID, "-o", out_file])

        assert result.exit_code == 0
        assert os.path.exists(out_file)
        with open(out_file, encoding="utf-8") as fh:
            assert fh.read() == "Hello world\n"
        # Only the confirmation (stderr) shows up, not the transcript itself.
        assert "Transcript written to" in result.output
        assert "Hello world" not in result.output

    @patch("yt_transcript_resolver.cli.extract")
    def test_error_exits_nonzero(self, mock_extract: MagicMock) -> None:
        mock_extract.side_effect = NoTranscriptFoundError(VIDEO_ID, ["ja"], ["de", "en"])

        result = CliRunner().invoke(main, ["get", VIDEO_ID, "--lang", "ja"])

        assert result.exit_code == 1
        assert "Error: No transcript found for language(s) [ja]" in result.output
        assert "available languages: de, en" in result.output
        assert "Traceback" not in result.output

    def test_invalid_format_rejected_by_click(self) -> None:
        result = CliRunner().invoke(main, ["get", VIDEO_ID, "--format", "srt"])
        assert result.exit_code == 2

    def test_invalid_video_reference(self) -> None:
        """Bad input fails before any network traffic."""
        result = CliRunner().invoke(main, ["get", "invalid-url"])
        assert result.exit_code == 1
        assert "Could not extract a video ID" in result.output


# ---------------------------------------------------------------------------
# CLI `list` and `languages` subcommands
# ---------------------------------------------------------------------------

class TestList:

    @patch("yt_transcript_resolver.cli.list_transcripts")
    def test_prints_catalog(self, mock_list: MagicMock) -> None:
        mock_list.return_value = _SAMPLE_CATALOG

        result = CliRunner().invoke(main, ["list", VIDEO_ID])

        assert result.exit_code == 0
        mock_list.assert_called_once_with(VIDEO_ID)
        assert "(MANUALLY CREATED)" in result.output
        assert 'en ("EN") [TRANSLATABLE]' in result.output
        assert 'de ("DE") [TRANSLATABLE]' in result.output
        assert 'fr ("French")' in result.output

    @patch("yt_transcript_resolver.cli.list_transcripts")
    def test_error(self, mock_list: MagicMock) -> None:
        mock_list.side_effect = TranscriptsDisabledError(VIDEO_ID)

        result = CliRunner().invoke(main, ["list", VIDEO_ID])

        assert result.exit_code == 1
        assert "Transcripts are disabled" in result.output


class TestLanguages:

    @patch("yt_transcript_resolver.cli.list_transcripts")
    def test_one_code_per_line(self, mock_list: MagicMock) -> None:
        mock_list.return_value = _SAMPLE_CATALOG

        result = CliRunner().invoke(main, ["languages", VIDEO_ID])

        assert result.exit_code == 0
        assert result.output.splitlines() == ["de", "en"]

    @patch("yt_transcript_resolver.cli.list_transcripts")
    def test_empty_catalog(self, mock_list: MagicMock) -> None:
        mock_list.return_value = TranscriptCatalog(VIDEO_ID, {}, {})

        result = CliRunner().invoke(main, ["languages", VIDEO_ID])

        assert result.exit_code == 0
        assert "No transcripts available." in result.output


class TestVerbose:

    @patch("yt_transcript_resolver.cli.logging.basicConfig")
    @patch("yt_transcript_resolver.cli.list_transcripts")
    def test_verbose_enables_debug_logging(self, mock_list: MagicMock, mock_config: MagicMock) -> None:
        mock_list.return_value = _SAMPLE_CATALOG

        result = CliRunner().invoke(main, ["-v", "languages", VIDEO_ID])

        assert result.exit_code == 0
        mock_config.assert_called_once()
        assert mock_config.call_args.kwargs["level"] == logging.DEBUG


class TestHelp:

    def test_get_help_lists_url_shapes(self) -> None:
        result = CliRunner().invoke(main, ["get", "--help"])

        assert result.exit_code == 0
        assert "Accepted URL_OR_ID shapes:" in result.output
        assert "https://youtu.be/VIDEO_ID" in result.output
        assert "https://www.youtube.com/shorts/VIDEO_ID" in result.output
