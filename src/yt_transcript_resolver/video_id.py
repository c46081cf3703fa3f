"""
video_id.py — Turn arbitrary user input into a canonical YouTube video ID.

Accepts any of the common URL shapes (watch, embed, /v/, youtu.be, mobile,
live, shorts) or a bare 11-character ID.  Pure string handling, no I/O.
"""

from __future__ import annotations

import re

from yt_transcript_resolver.errors import InvalidVideoIdError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Tried in order; the first pattern whose capture passes _VIDEO_ID_SHAPE wins.
_URL_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"(?:https?://)?(?:www\.)?youtube\.com/watch\?v=([A-Za-z0-9_-]{11})"),
    re.compile(r"(?:https?://)?(?:www\.)?youtube\.com/embed/([A-Za-z0-9_-]{11})"),
    re.compile(r"(?:https?://)?(?:www\.)?youtube\.com/v/([A-Za-z0-9_-]{11})"),
    re.compile(r"(?:https?://)?youtu\.be/([A-Za-z0-9_-]{11})"),
    re.compile(r"(?:https?://)?(?:m\.)?youtube\.com/watch\?v=([A-Za-z0-9_-]{11})"),
    re.compile(r"(?:https?://)?(?:www\.)?youtube\.com/live/([A-Za-z0-9_-]{11})"),
    re.compile(r"(?:https?://)?(?:www\.)?youtube\.com/shorts/([A-Za-z0-9_-]{11})"),
    re.compile(r"^([A-Za-z0-9_-]{11})$"),
]

# IDs encode 64 bits in 11 base64url characters, so the last character only
# carries 4 bits and is limited to these 16 values.
_VIDEO_ID_SHAPE = re.compile(r"[A-Za-z0-9_-]{10}[AEIMQUYcgkosw048]")

SUPPORTED_URL_SHAPES: tuple[str, ...] = (
    "https://www.youtube.com/watch?v=VIDEO_ID",
    "https://www.youtube.com/embed/VIDEO_ID",
    "https://www.youtube.com/v/VIDEO_ID",
    "https://youtu.be/VIDEO_ID",
    "https://m.youtube.com/watch?v=VIDEO_ID",
    "https://www.youtube.com/live/VIDEO_ID",
    "https://www.youtube.com/shorts/VIDEO_ID",
    "VIDEO_ID",
)


def is_valid_video_id(value: str) -> bool:
    """True when value has the shape of a YouTube video ID."""
    return _VIDEO_ID_SHAPE.fullmatch(value) is not None


def extract_video_id(url_or_id: str) -> str:
    """
    Extract a YouTube video ID from a URL string, or validate a raw 11-char ID.

    Args:
        url_or_id: A YouTube URL in one of SUPPORTED_URL_SHAPES, or a bare ID.

    Returns:
        The 11-character video ID.

    Raises:
        InvalidVideoIdError: If the input is blank or matches no known shape.
    """
    if not url_or_id or not url_or_id.strip():
        raise InvalidVideoIdError(url_or_id)

    candidate = url_or_id.strip()

    for pattern in _URL_PATTERNS:
        match = pattern.search(candidate)
        if match and is_valid_video_id(match.group(1)):
            return match.group(1)

    raise InvalidVideoIdError(url_or_id)
