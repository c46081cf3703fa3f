"""
cli.py — Command-line interface for yt-transcript-resolver.

Provides the `yt-transcript` command group (registered as a console script
in pyproject.toml).  The CLI is organized into subcommands:

    get        Fetch a transcript, optionally translated.
    list       Show every caption track a video has.
    languages  Print the available language codes, one per line.

Usage examples:
    yt-transcript get "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    yt-transcript get dQw4w9WgXcQ --lang de,en --format json
    yt-transcript get dQw4w9WgXcQ --translate fr
    yt-transcript list https://youtu.be/dQw4w9WgXcQ
    yt-transcript languages dQw4w9WgXcQ
"""

from __future__ import annotations

import json
import logging
import sys
from typing import NoReturn

import click

from yt_transcript_resolver.errors import TranscriptError
from yt_transcript_resolver.extractor import extract, list_transcripts
from yt_transcript_resolver.video_id import SUPPORTED_URL_SHAPES

# "\b" stops click from rewrapping the list.
_URL_SHAPES_HELP = "\b\nAccepted URL_OR_ID shapes:\n" + "\n".join(
    f"  {shape}" for shape in SUPPORTED_URL_SHAPES
)


def _parse_languages(lang: str | None) -> list[str] | None:
    """Split a comma-separated --lang value, ignoring empty entries."""
    if not lang:
        return None
    codes = [code.strip() for code in lang.split(",") if code.strip()]
    return codes or None


def _fail(exc: TranscriptError) -> NoReturn:
    # No traceback for end-users; the message already says what went wrong.
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


# ---------------------------------------------------------------------------
# CLI group — the top-level `yt-transcript` command
# ---------------------------------------------------------------------------

@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log each request to stderr.")
def main(verbose: bool) -> None:
    """
    YouTube Transcript Resolver — fetch and inspect video transcripts.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )


# ---------------------------------------------------------------------------
# Subcommand: get — fetch a transcript from YouTube
# ---------------------------------------------------------------------------

@main.command(epilog=_URL_SHAPES_HELP)
@click.argument("video", metavar="URL_OR_ID")
@click.option(
    "--format", "-f",
    "fmt",                           # avoid shadowing the builtin "format"
    type=click.Choice(["text", "json", "doc"], case_sensitive=False),
    default="text",
    show_default=True,
    help="Output format: plain text, JSON with timestamps, or readable markdown document.",
)
@click.option(
    "--lang", "-l",
    default=None,
    help="Comma-separated language codes in priority order (e.g. 'de,en'). Defaults to English.",
)
@click.option(
    "--translate", "-t",
    "translate_to",
    default=None,
    metavar="CODE",
    help="Machine-translate the resolved transcript into this language code.",
)
@click.option(
    "--preserve-formatting",
    is_flag=True,
    default=False,
    help="Keep HTML entities in the caption text instead of decoding them.",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    default=None,
    help="Write output to a file instead of stdout.",
)
def get(
    video: str,
    fmt: str,
    lang: str | None,
    translate_to: str | None,
    preserve_formatting: bool,
    output: str | None,
) -> None:
    """
    Fetch a YouTube video transcript.

    VIDEO can be a full YouTube URL or an 11-character video ID.  When no
    track matches --lang, the transcript in the first available language is
    returned instead.
    """
    try:
        result = extract(
            video,
            languages=_parse_languages(lang),
            fmt=fmt.lower(),
            translate_to=translate_to,
            preserve_formatting=preserve_formatting,
        )
    except TranscriptError as exc:
        _fail(exc)

    if isinstance(result, dict):
        text = json.dumps(result, indent=2, ensure_ascii=False)
    else:
        text = result

    if output:
        with open(output, "w", encoding="utf-8") as fh:
            fh.write(text)
            fh.write("\n")
        click.echo(f"Transcript written to {output}", err=True)
    else:
        click.echo(text)


# ---------------------------------------------------------------------------
# Subcommand: list — show the track catalog
# ---------------------------------------------------------------------------

@main.command("list")
@click.argument("video", metavar="URL_OR_ID")
def list_tracks(video: str) -> None:
    """
    List every caption track available for a video.

    Shows manually-created tracks, auto-generated tracks, and the languages
    YouTube can machine-translate into.
    """
    try:
        catalog = list_transcripts(video)
    except TranscriptError as exc:
        _fail(exc)

    click.echo(str(catalog))


# ---------------------------------------------------------------------------
# Subcommand: languages — print available language codes
# ---------------------------------------------------------------------------

@main.command()
@click.argument("video", metavar="URL_OR_ID")
def languages(video: str) -> None:
    """
    Print the language codes a video has transcripts in, one per line.
    """
    try:
        codes = list_transcripts(video).available_languages()
    except TranscriptError as exc:
        _fail(exc)

    if not codes:
        click.echo("No transcripts available.", err=True)
        return

    for code in codes:
        click.echo(code)
