"""
extractor.py — Public transcript operations.

This is the heart of yt-transcript-resolver.  It chains the pipeline stages
together and exposes a small, high-level interface:

    1. Discovering tracks           → list_transcripts(), has_transcripts(),
                                      available_languages()
    2. Picking a track              → resolve_track()
    3. Fetching segments            → get_transcript()
    4. Formatting output            → format_text(), format_json(), format_doc()
    5. One-call convenience         → extract()

Every function accepts either a URL or a bare video ID.  Callers may pass
their own requests.Session; otherwise each call opens and closes a private
one, so concurrent calls share nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

import requests

from yt_transcript_resolver.catalog import TranscriptCatalog, build_catalog
from yt_transcript_resolver.errors import NoTranscriptFoundError
from yt_transcript_resolver.fetcher import (
    DEFAULT_TIMEOUT,
    CaptionMetadataFetcher,
    TrackContentFetcher,
)
from yt_transcript_resolver.models import TrackDescriptor, TranscriptSegment
from yt_transcript_resolver.parser import TimedTextParser
from yt_transcript_resolver.translator import translate_track
from yt_transcript_resolver.video_id import extract_video_id

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_DEFAULT_LANGUAGES = ["en"]

_FORMATS = ("text", "json", "doc")


@contextmanager
def _session_scope(session: requests.Session | None) -> Iterator[requests.Session]:
    """Yield the caller's session, or a fresh one that is closed afterwards."""
    if session is not None:
        yield session
        return
    with requests.Session() as own:
        yield own


# ---------------------------------------------------------------------------
# Track discovery
# ---------------------------------------------------------------------------

def list_transcripts(
    url_or_id: str,
    *,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> TranscriptCatalog:
    """
    Fetch the catalog of caption tracks for a video.

    Raises:
        InvalidVideoIdError: url_or_id isn't a recognisable video reference.
        TranscriptError:     (or subclass) on any fetch or parse failure.
    """
    video_id = extract_video_id(url_or_id)
    with _session_scope(session) as http:
        renderer = CaptionMetadataFetcher(http, timeout=timeout).fetch(video_id)
    return build_catalog(video_id, renderer)


def has_transcripts(
    url_or_id: str,
    *,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> bool:
    """True when the video has at least one caption track; any failure means False."""
    try:
        return bool(list_transcripts(url_or_id, session=session, timeout=timeout))
    except Exception as exc:
        logger.debug("Treating %r as having no transcripts: %s", url_or_id, exc)
        return False


def available_languages(
    url_or_id: str,
    *,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[str]:
    """Sorted language codes of every track the video has."""
    return list_transcripts(url_or_id, session=session, timeout=timeout).available_languages()


# ---------------------------------------------------------------------------
# Language resolution
# ---------------------------------------------------------------------------

def resolve_track(
    catalog: TranscriptCatalog,
    languages: list[str] | None = None,
) -> TrackDescriptor:
    """
    Pick one track from the catalog for the given language priority list.

    Three tiers, each tried only when the previous one failed:
        1. catalog.find_track(languages)
        2. the track for the alphabetically-first available language
        3. the first track in the catalog (manual before generated)

    If all tiers fail, the tier-1 NoTranscriptFoundError is raised; the
    errors of tiers 2 and 3 are discarded.

    Args:
        catalog:   The video's track catalog.
        languages: Language codes in descending priority; None means ["en"].
                   An empty list skips straight to the fallback tiers.
    """
    langs = languages if languages is not None else _DEFAULT_LANGUAGES

    try:
        return catalog.find_track(langs)
    except NoTranscriptFoundError as original:
        logger.debug(
            "No track for %s in %s, falling back to any available language",
            langs, catalog.video_id,
        )
        try:
            codes = catalog.available_languages()
            if codes:
                return catalog.find_track([codes[0]])
            tracks = catalog.all_tracks()
            if tracks:
                return tracks[0]
        except NoTranscriptFoundError:
            pass
        raise original


# ---------------------------------------------------------------------------
# Transcript fetching
# ---------------------------------------------------------------------------

def fetch_segments(
    track: TrackDescriptor,
    preserve_formatting: bool = False,
    *,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[TranscriptSegment]:
    """Download and parse the timed-text document for one track."""
    with _session_scope(session) as http:
        document = TrackContentFetcher(http, timeout=timeout).fetch(track)
    parser = TimedTextParser(preserve_formatting=preserve_formatting, video_id=track.video_id)
    return parser.parse(document)


def get_transcript(
    url_or_id: str,
    languages: list[str] | None = None,
    preserve_formatting: bool = False,
    *,
    translate_to: str | None = None,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[TranscriptSegment]:
    """
    Fetch transcript segments for a single YouTube video.

    Args:
        url_or_id:           A YouTube URL or bare video ID.
        languages:           Language codes in descending priority
                             (e.g. ["de", "en"]).  Defaults to ["en"].
        preserve_formatting: Keep HTML entities in the text undecoded.
        translate_to:        Optional language code; the resolved track is
                             machine-translated into it before fetching.
        session:             Optional requests.Session to reuse.
        timeout:             Per-request timeout in seconds.

    Returns:
        Segments in document order.

    Raises:
        InvalidVideoIdError:     url_or_id isn't a recognisable video reference.
        NoTranscriptFoundError:  No track could be resolved at all.
        NotTranslatableError / TranslationLanguageNotAvailableError:
                                 translate_to can't be honoured.
        TranscriptError:         (or subclass) on any other failure.
    """
    with _session_scope(session) as http:
        catalog = list_transcripts(url_or_id, session=http, timeout=timeout)
        track = resolve_track(catalog, languages)
        if translate_to:
            track = translate_track(track, translate_to)
        logger.debug("Resolved %s to track %s", catalog.video_id, track)
        return fetch_segments(track, preserve_formatting, session=http, timeout=timeout)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def format_text(segments: Iterable[TranscriptSegment]) -> str:
    """Plain text, one line per segment, no timestamps."""
    return "\n".join(segment.text for segment in segments)


def format_json(segments: list[TranscriptSegment], video_id: str) -> dict:
    """
    Build a JSON-serialisable dict with the video ID and timestamped segments.

    Returns:
        A dict with keys: video_id, segment_count, segments.
        Each segment has: text, start, duration.
    """
    return {
        "video_id": video_id,
        "segment_count": len(segments),
        "segments": [segment.to_dict() for segment in segments],
    }


# Segments are grouped into paragraphs; a new paragraph starts once a
# segment begins this many seconds after the current paragraph's start.
_DOC_PARAGRAPH_INTERVAL_SECS = 30


def _seconds_to_mmss(seconds: float) -> str:
    total = int(seconds)
    mins, secs = divmod(total, 60)
    return f"{mins:02d}:{secs:02d}"


def format_doc(segments: Iterable[TranscriptSegment]) -> str:
    """
    Convert segments into a readable markdown document.

    Segments are joined with spaces into flowing paragraphs, with a new
    paragraph starting every ~30 seconds.  Each paragraph is prefixed with a
    bold **[MM:SS]** timestamp.  Returns "" for an empty transcript.
    """
    paragraphs: list[str] = []
    current_texts: list[str] = []
    paragraph_start: float | None = None

    for segment in segments:
        if paragraph_start is None:
            paragraph_start = segment.start
            current_texts.append(segment.text)
        elif segment.start - paragraph_start >= _DOC_PARAGRAPH_INTERVAL_SECS:
            paragraphs.append(f"**[{_seconds_to_mmss(paragraph_start)}]** {' '.join(current_texts)}")
            paragraph_start = segment.start
            current_texts = [segment.text]
        else:
            current_texts.append(segment.text)

    if current_texts and paragraph_start is not None:
        paragraphs.append(f"**[{_seconds_to_mmss(paragraph_start)}]** {' '.join(current_texts)}")

    return "\n\n".join(paragraphs)


# ---------------------------------------------------------------------------
# High-level convenience function
# ---------------------------------------------------------------------------

def extract(
    url_or_id: str,
    languages: list[str] | None = None,
    fmt: str = "text",
    *,
    translate_to: str | None = None,
    preserve_formatting: bool = False,
) -> str | dict:
    """
    One-call interface: parse URL → resolve track → fetch → format output.

    This is what the CLI and the REST API call.

    Args:
        url_or_id:           A YouTube URL or raw video ID.
        languages:           Optional language priority list (e.g. ["de", "en"]).
        fmt:                 "text", "json" (returns a dict), or "doc" (markdown).
        translate_to:        Optional translation target language code.
        preserve_formatting: Keep HTML entities undecoded.

    Raises:
        ValueError:      If fmt is not "text", "json", or "doc".
        TranscriptError: (or subclass) on any extraction failure.
    """
    if fmt not in _FORMATS:
        raise ValueError(f"Unknown format {fmt!r}; expected 'text', 'json', or 'doc'")

    video_id = extract_video_id(url_or_id)
    segments = get_transcript(
        video_id,
        languages=languages,
        preserve_formatting=preserve_formatting,
        translate_to=translate_to,
    )

    if fmt == "json":
        return format_json(segments, video_id)
    if fmt == "doc":
        return format_doc(segments)
    return format_text(segments)
