"""
fetcher.py — HTTP exchanges with YouTube.

Two fetchers live here:

    CaptionMetadataFetcher  Watch page → INNERTUBE_API_KEY → player API →
                            the raw `playerCaptionsTracklistRenderer` object.
    TrackContentFetcher     GET a track's delivery URL → timed-text document.

Everything YouTube-specific about the wire protocol (URLs, the pinned Android
client identity, headers, page markers) is a constant in this module and
nowhere else, so when YouTube changes something only this file needs editing.

Both fetchers take a `requests.Session` owned by the caller; neither keeps
any state between calls beyond that session.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

import requests

from yt_transcript_resolver.errors import (
    AgeRestrictedError,
    ConsentCookieError,
    DataUnparsableError,
    IpBlockedError,
    PoTokenRequiredError,
    RequestBlockedError,
    TranscriptsDisabledError,
    VideoUnavailableError,
    VideoUnplayableError,
    YouTubeRequestError,
)
from yt_transcript_resolver.models import TrackDescriptor, VideoId

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Protocol constants
# ---------------------------------------------------------------------------

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
INNERTUBE_API_URL = "https://www.youtube.com/youtubei/v1/player?key={api_key}"

# The Android app identity.  A desktop-browser User-Agent gets a watch page
# without the embedded API key.
CLIENT_NAME = "ANDROID"
CLIENT_VERSION = "20.10.38"
USER_AGENT = f"com.google.android.youtube/{CLIENT_VERSION} (Linux; U; Android 11) gzip"

_API_KEY_PATTERN = re.compile(r'"INNERTUBE_API_KEY":\s*"([a-zA-Z0-9_-]+)"')
_CAPTCHA_MARKER = 'class="g-recaptcha"'
_CONSENT_MARKER = 'action="https://consent.youtube.com/s"'

# Present in delivery URLs that need a proof-of-origin token.
_PO_TOKEN_MARKER = "&exp=xpe"

# Playability reasons that get a more specific error than VideoUnplayableError.
_UNAVAILABLE_REASON = "This video is unavailable"
_BOT_CHECK_MARKER = "not a bot"
_AGE_CHECK_PATTERN = re.compile(r"\bage\b")

# Seconds; applies to connect and read separately, per requests semantics.
DEFAULT_TIMEOUT = 30


def _send(
    send: Callable[..., requests.Response],
    url: str,
    video_id: VideoId,
    timeout: float,
    **kwargs,
) -> requests.Response:
    """
    Issue a request via `send` (e.g. session.get or session.post), turning
    transport failures into YouTubeRequestError.
    """
    try:
        return send(url, timeout=timeout, **kwargs)
    except requests.RequestException as exc:
        raise YouTubeRequestError(video_id, f"Request to YouTube failed: {exc}") from exc


# ---------------------------------------------------------------------------
# Caption metadata
# ---------------------------------------------------------------------------

class CaptionMetadataFetcher:
    """
    Discover which caption tracks exist for a video.

    Usage:
        with requests.Session() as session:
            renderer = CaptionMetadataFetcher(session).fetch("dQw4w9WgXcQ")
    """

    def __init__(self, session: requests.Session, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.session = session
        self.timeout = timeout

    def fetch(self, video_id: VideoId) -> dict:
        """
        Run the two-request exchange and return the caption renderer object.

        Returns:
            The `playerCaptionsTracklistRenderer` dict, guaranteed to contain
            a `captionTracks` key.

        Raises:
            YouTubeRequestError:      A request failed or returned nothing.
            IpBlockedError:           YouTube served a CAPTCHA page.
            ConsentCookieError:       YouTube served its consent form.
            DataUnparsableError:      The page or API response had an unexpected shape.
            VideoUnplayableError:     (or subclass) playability status wasn't OK.
            TranscriptsDisabledError: The video has no caption tracks.
        """
        html = self._fetch_watch_page(video_id)
        api_key = self._extract_api_key(html, video_id)
        player_data = self._fetch_player_data(video_id, api_key)
        return self._extract_captions(player_data, video_id)

    def _fetch_watch_page(self, video_id: VideoId) -> str:
        url = WATCH_URL.format(video_id=video_id)
        logger.debug("Fetching watch page for %s", video_id)
        response = _send(
            self.session.get, url, video_id, self.timeout,
            headers={"User-Agent": USER_AGENT},
        )

        if not response.ok:
            raise YouTubeRequestError(
                video_id,
                f"Failed to fetch video page: HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        if not response.text:
            raise YouTubeRequestError(
                video_id, "Empty response from video page",
                status_code=response.status_code,
            )
        return response.text

    def _extract_api_key(self, html: str, video_id: VideoId) -> str:
        match = _API_KEY_PATTERN.search(html)
        if match:
            return match.group(1)

        if _CAPTCHA_MARKER in html:
            raise IpBlockedError(video_id)
        if _CONSENT_MARKER in html:
            raise ConsentCookieError(video_id)
        raise DataUnparsableError(video_id, "Could not extract API key from video page")

    def _fetch_player_data(self, video_id: VideoId, api_key: str) -> dict:
        url = INNERTUBE_API_URL.format(api_key=api_key)
        payload = {
            "context": {
                "client": {"clientName": CLIENT_NAME, "clientVersion": CLIENT_VERSION},
            },
            "videoId": video_id,
        }
        headers = {
            "User-Agent": USER_AGENT,
            "Accept-Language": "en-US",
            "Content-Type": "application/json",
        }

        logger.debug("Querying player API for %s", video_id)
        response = _send(
            self.session.post, url, video_id, self.timeout,
            json=payload, headers=headers,
        )

        if not response.ok:
            body = response.text or "No error body"
            raise YouTubeRequestError(
                video_id,
                f"Failed to fetch player data: HTTP {response.status_code} - {body}",
                status_code=response.status_code,
                body=body,
            )
        if not response.text:
            raise YouTubeRequestError(
                video_id, "Empty response from player API",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise DataUnparsableError(video_id, "Player API returned invalid JSON") from exc
        if not isinstance(data, dict):
            raise DataUnparsableError(video_id, "Player API returned unexpected JSON")
        return data

    def _extract_captions(self, player_data: dict, video_id: VideoId) -> dict:
        playability = player_data.get("playabilityStatus")
        if isinstance(playability, dict):
            status = playability.get("status") or ""
            if status and status != "OK":
                reason = playability.get("reason") or "Unknown error"
                raise _playability_error(video_id, status, reason)

        captions = player_data.get("captions")
        renderer = (
            captions.get("playerCaptionsTracklistRenderer")
            if isinstance(captions, dict) else None
        )
        if not isinstance(renderer, dict) or "captionTracks" not in renderer:
            raise TranscriptsDisabledError(video_id)

        logger.debug(
            "Found %d caption track(s) for %s",
            len(renderer.get("captionTracks") or []), video_id,
        )
        return renderer


def _playability_error(video_id: VideoId, status: str, reason: str) -> VideoUnplayableError:
    """Pick the most specific VideoUnplayableError for a non-OK status."""
    lowered = reason.lower()
    if status == "ERROR" and reason == _UNAVAILABLE_REASON:
        return VideoUnavailableError(video_id, reason)
    if status == "LOGIN_REQUIRED":
        if _BOT_CHECK_MARKER in lowered:
            return RequestBlockedError(video_id, reason)
        if _AGE_CHECK_PATTERN.search(lowered):
            return AgeRestrictedError(video_id, reason)
    return VideoUnplayableError(video_id, reason)


# ---------------------------------------------------------------------------
# Track content
# ---------------------------------------------------------------------------

class TrackContentFetcher:
    """Download the timed-text document behind a TrackDescriptor."""

    def __init__(self, session: requests.Session, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.session = session
        self.timeout = timeout

    def fetch(self, track: TrackDescriptor) -> str:
        """
        Return the raw timed-text body for `track`.

        Raises:
            PoTokenRequiredError: The delivery URL needs a proof-of-origin token.
            YouTubeRequestError:  Non-2xx response, empty body, or transport failure.
        """
        if _PO_TOKEN_MARKER in track.source_url:
            raise PoTokenRequiredError(track.video_id)

        logger.debug("Fetching %s track content for %s", track.language_code, track.video_id)
        response = _send(self.session.get, track.source_url, track.video_id, self.timeout)

        if not response.ok:
            raise YouTubeRequestError(
                track.video_id,
                f"Failed to fetch transcript: HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        if not response.text:
            raise YouTubeRequestError(
                track.video_id, "Empty transcript response",
                status_code=response.status_code,
            )
        return response.text
