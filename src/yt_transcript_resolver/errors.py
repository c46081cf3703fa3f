"""
errors.py — Custom exception hierarchy for yt-transcript-resolver.

Every exception carries the video ID it relates to and an `http_status`
attribute so the FastAPI error handler can translate library-level errors
directly into the correct HTTP response code without a separate mapping table.

Hierarchy:
    TranscriptError (base, 500)
    ├── InvalidVideoIdError (400)
    ├── YouTubeRequestError (502)
    ├── IpBlockedError (429)
    ├── ConsentCookieError (502)
    ├── DataUnparsableError (502)
    ├── VideoUnplayableError (403)
    │   ├── VideoUnavailableError (404)
    │   ├── AgeRestrictedError (403)
    │   └── RequestBlockedError (429)
    ├── TranscriptsDisabledError (404)
    ├── NoTranscriptFoundError (404)
    ├── NotTranslatableError (400)
    ├── TranslationLanguageNotAvailableError (400)
    └── PoTokenRequiredError (403)
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class TranscriptError(Exception):
    """
    Root exception for all transcript-related errors.

    Attributes:
        message:     Human-readable description of what went wrong.
        http_status: Suggested HTTP status code for the API layer.
        video_id:    The video the failure relates to ("" when unknown).
    """

    def __init__(self, message: str, http_status: int = 500, video_id: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.http_status = http_status
        self.video_id = video_id

    def __str__(self) -> str:
        if self.video_id:
            return f"{self.message} (video {self.video_id})"
        return self.message


# ---------------------------------------------------------------------------
# Input errors
# ---------------------------------------------------------------------------

class InvalidVideoIdError(TranscriptError):
    """Raised when a string can't be turned into an 11-character video ID."""

    def __init__(self, value: str) -> None:
        super().__init__(
            message=f"Could not extract a video ID from: {value!r}",
            http_status=400,
            video_id=value,
        )

    def __str__(self) -> str:
        # The message already quotes the input.
        return self.message


# ---------------------------------------------------------------------------
# Transport / page-level errors
# ---------------------------------------------------------------------------

class YouTubeRequestError(TranscriptError):
    """
    Raised when an HTTP round trip to YouTube fails.

    Covers non-2xx responses, empty bodies, and transport failures such as
    timeouts or refused connections (status_code is None for those).
    """

    def __init__(
        self,
        video_id: str,
        reason: str,
        status_code: int | None = None,
        body: str = "",
    ) -> None:
        super().__init__(message=reason, http_status=502, video_id=video_id)
        self.status_code = status_code
        self.body = body


class IpBlockedError(TranscriptError):
    """
    Raised when YouTube answers with a CAPTCHA page instead of the watch page.

    The requesting IP has been flagged; waiting or switching networks is the
    only remedy.
    """

    def __init__(self, video_id: str) -> None:
        super().__init__(
            message="IP address is blocked by YouTube",
            http_status=429,
            video_id=video_id,
        )


class ConsentCookieError(TranscriptError):
    """Raised when YouTube serves its cookie-consent form instead of the watch page."""

    def __init__(self, video_id: str) -> None:
        super().__init__(
            message="YouTube requires a consent cookie for this request",
            http_status=502,
            video_id=video_id,
        )


class DataUnparsableError(TranscriptError):
    """
    Raised when a YouTube response doesn't have the structure we expect.

    Usually means YouTube changed its page or API layout.  Maps to HTTP 502
    because the failure is upstream.
    """

    def __init__(self, video_id: str, reason: str = "YouTube data could not be parsed") -> None:
        super().__init__(message=reason, http_status=502, video_id=video_id)


# ---------------------------------------------------------------------------
# Playability errors
# ---------------------------------------------------------------------------

class VideoUnplayableError(TranscriptError):
    """
    Raised when the player API reports a playability status other than OK.

    The reason string comes straight from YouTube's response.
    """

    def __init__(self, video_id: str, reason: str, http_status: int = 403) -> None:
        super().__init__(
            message=f"Video is not playable: {reason}",
            http_status=http_status,
            video_id=video_id,
        )
        self.reason = reason


class VideoUnavailableError(VideoUnplayableError):
    """Raised when the video doesn't exist, was removed, or is private."""

    def __init__(self, video_id: str, reason: str = "This video is unavailable") -> None:
        super().__init__(video_id, reason, http_status=404)


class AgeRestrictedError(VideoUnplayableError):
    """Raised when the video is age-gated and needs a signed-in session."""

    def __init__(self, video_id: str, reason: str = "Video is age-restricted") -> None:
        super().__init__(video_id, reason, http_status=403)


class RequestBlockedError(VideoUnplayableError):
    """Raised when YouTube asks us to sign in to prove we're not a bot."""

    def __init__(self, video_id: str, reason: str = "Request was blocked") -> None:
        super().__init__(video_id, reason, http_status=429)


# ---------------------------------------------------------------------------
# Catalog / track errors
# ---------------------------------------------------------------------------

class TranscriptsDisabledError(TranscriptError):
    """
    Raised when the video exists but has no caption tracks at all.

    This happens for videos where the creator disabled captions and YouTube
    hasn't generated automatic ones.
    """

    def __init__(self, video_id: str) -> None:
        super().__init__(
            message="Transcripts are disabled for this video",
            http_status=404,
            video_id=video_id,
        )


class NoTranscriptFoundError(TranscriptError):
    """
    Raised when the video has tracks, but none in the requested language(s).

    Carries both the requested codes and a snapshot of what *is* available so
    callers can offer alternatives.
    """

    def __init__(
        self,
        video_id: str,
        requested: list[str],
        available: list[str],
    ) -> None:
        langs = ", ".join(requested)
        super().__init__(
            message=f"No transcript found for language(s) [{langs}]",
            http_status=404,
            video_id=video_id,
        )
        self.requested = list(requested)
        self.available = list(available)

    def __str__(self) -> str:
        base = super().__str__()
        if self.available:
            return f"{base} (available languages: {', '.join(self.available)})"
        return base


class NotTranslatableError(TranscriptError):
    """Raised when translation is requested for a track YouTube can't translate."""

    def __init__(self, video_id: str) -> None:
        super().__init__(
            message="Transcript is not translatable",
            http_status=400,
            video_id=video_id,
        )


class TranslationLanguageNotAvailableError(TranscriptError):
    """Raised when the requested translation target isn't offered for the track."""

    def __init__(self, video_id: str, language_code: str) -> None:
        super().__init__(
            message=f"Translation language not available: {language_code}",
            http_status=400,
            video_id=video_id,
        )
        self.language_code = language_code


class PoTokenRequiredError(TranscriptError):
    """
    Raised when a track's delivery URL needs a proof-of-origin token.

    We can't mint those tokens, so the track content is out of reach.
    """

    def __init__(self, video_id: str) -> None:
        super().__init__(
            message="Transcript requires a PO token to be fetched",
            http_status=403,
            video_id=video_id,
        )
