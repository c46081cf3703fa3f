"""
yt_transcript_resolver — Fetch YouTube transcripts straight from YouTube's player API.

Public API:
    get_transcript()        Fetch timed segments, with language fallback and
                            optional machine translation.
    list_transcripts()      Fetch the catalog of caption tracks for a video.
    has_transcripts()       True if the video has any caption track.
    available_languages()   Sorted language codes of a video's tracks.
    extract_video_id()      Parse a YouTube URL or validate a bare video ID.
    fetch_segments()        Download and parse one already-resolved track.
    extract()               High-level one-call interface (URL → formatted output).
    TranscriptCatalog       Manual + generated tracks of one video.
    TrackDescriptor         One caption track.
    TranscriptSegment       One timed caption line.

Exception hierarchy (all importable from this package):
    TranscriptError                      Base exception for all transcript errors.
    ├── InvalidVideoIdError              Input isn't a recognisable video reference.
    ├── YouTubeRequestError              An HTTP round trip failed.
    ├── IpBlockedError                   YouTube served a CAPTCHA.
    ├── ConsentCookieError               YouTube served its consent form.
    ├── DataUnparsableError              A response had an unexpected shape.
    ├── VideoUnplayableError             Playability status wasn't OK.
    │   ├── VideoUnavailableError
    │   ├── AgeRestrictedError
    │   └── RequestBlockedError
    ├── TranscriptsDisabledError         The video has no caption tracks.
    ├── NoTranscriptFoundError           No track in the requested language(s).
    ├── NotTranslatableError             Track can't be machine-translated.
    ├── TranslationLanguageNotAvailableError
    └── PoTokenRequiredError             Track needs a proof-of-origin token.

Usage:
    from yt_transcript_resolver import get_transcript
    segments = get_transcript("https://youtu.be/dQw4w9WgXcQ", languages=["de", "en"])
"""

from yt_transcript_resolver.catalog import TranscriptCatalog, build_catalog
from yt_transcript_resolver.errors import (
    AgeRestrictedError,
    ConsentCookieError,
    DataUnparsableError,
    InvalidVideoIdError,
    IpBlockedError,
    NoTranscriptFoundError,
    NotTranslatableError,
    PoTokenRequiredError,
    RequestBlockedError,
    TranscriptError,
    TranscriptsDisabledError,
    TranslationLanguageNotAvailableError,
    VideoUnavailableError,
    VideoUnplayableError,
    YouTubeRequestError,
)
from yt_transcript_resolver.extractor import (
    available_languages,
    extract,
    fetch_segments,
    get_transcript,
    has_transcripts,
    list_transcripts,
    resolve_track,
)
from yt_transcript_resolver.models import (
    TrackDescriptor,
    TranscriptSegment,
    TranslationTarget,
)
from yt_transcript_resolver.translator import translate_track
from yt_transcript_resolver.video_id import extract_video_id, is_valid_video_id

__all__ = [
    "get_transcript",
    "list_transcripts",
    "has_transcripts",
    "available_languages",
    "extract_video_id",
    "is_valid_video_id",
    "fetch_segments",
    "extract",
    "resolve_track",
    "build_catalog",
    "translate_track",
    "TranscriptCatalog",
    "TrackDescriptor",
    "TranscriptSegment",
    "TranslationTarget",
    "TranscriptError",
    "InvalidVideoIdError",
    "YouTubeRequestError",
    "IpBlockedError",
    "ConsentCookieError",
    "DataUnparsableError",
    "VideoUnplayableError",
    "VideoUnavailableError",
    "AgeRestrictedError",
    "RequestBlockedError",
    "TranscriptsDisabledError",
    "NoTranscriptFoundError",
    "NotTranslatableError",
    "TranslationLanguageNotAvailableError",
    "PoTokenRequiredError",
]
