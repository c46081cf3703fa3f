"""
api.py — FastAPI REST API for yt-transcript-resolver.

Endpoints:
    GET /transcript/{video_id}   — Fetch a transcript (text, JSON, or markdown doc).
    GET /transcripts/{video_id}  — Describe every caption track the video has.
    GET /health                  — Simple health-check for load balancers / monitoring.

Run with:
    uv run uvicorn yt_transcript_resolver.api:app

The global exception handler catches any TranscriptError and converts it to
the appropriate HTTP response using the status code stored on the exception.
"""

from __future__ import annotations

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from yt_transcript_resolver.errors import NoTranscriptFoundError, TranscriptError
from yt_transcript_resolver.extractor import extract, list_transcripts
from yt_transcript_resolver.models import TrackDescriptor

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(
    title="YouTube Transcript Resolver API",
    description="Fetch YouTube video transcripts as plain text or structured JSON, "
                "with language fallback and on-demand machine translation.",
    version="0.1.0",
)


# ---------------------------------------------------------------------------
# Global error handler
# ---------------------------------------------------------------------------

@app.exception_handler(TranscriptError)
async def transcript_error_handler(request: Request, exc: TranscriptError) -> JSONResponse:
    """
    Translate any TranscriptError (or subclass) into an HTTP error response.

    The http_status on the exception drives the response code.  When the
    error says which languages *are* available, they're included so clients
    can retry with one of them.
    """
    content: dict = {"error": exc.message, "video_id": exc.video_id}
    if isinstance(exc, NoTranscriptFoundError):
        content["available_languages"] = exc.available
    return JSONResponse(status_code=exc.http_status, content=content)


def _track_json(track: TrackDescriptor) -> dict:
    return {
        "language": track.language,
        "language_code": track.language_code,
        "is_generated": track.is_generated,
        "is_translatable": track.is_translatable,
    }


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

# response_model=None is required because we return different Response
# subclasses (PlainTextResponse or JSONResponse) depending on the format param.
@app.get("/transcript/{video_id}", response_model=None)
def get_transcript(
    video_id: str,
    format: str = Query(
        default="text",
        description="Output format: 'text' for plain transcript, 'json' for structured data with timestamps, 'doc' for readable markdown document.",
        pattern="^(text|json|doc)$",
    ),
    lang: str = Query(
        default="",
        description="Comma-separated language codes in priority order (e.g. 'de,en'). Empty defaults to English.",
    ),
    translate: str = Query(
        default="",
        description="Optional language code to machine-translate the transcript into.",
    ),
    preserve_formatting: bool = Query(
        default=False,
        description="Keep HTML entities in caption text undecoded.",
    ),
) -> PlainTextResponse | JSONResponse:
    """
    Fetch the transcript for a single YouTube video.

    **video_id** is the 11-character YouTube video identifier
    (e.g. `dQw4w9WgXcQ`).
    """
    languages: list[str] | None = None
    if lang:
        languages = [code.strip() for code in lang.split(",") if code.strip()] or None

    result = extract(
        video_id,
        languages=languages,
        fmt=format,
        translate_to=translate or None,
        preserve_formatting=preserve_formatting,
    )

    if isinstance(result, dict):
        return JSONResponse(content=result)
    return PlainTextResponse(content=result)


@app.get("/transcripts/{video_id}")
def list_video_transcripts(video_id: str) -> JSONResponse:
    """
    Describe the caption tracks available for a video.

    Manually-created and auto-generated tracks are listed separately, along
    with the languages YouTube can machine-translate into.
    """
    catalog = list_transcripts(video_id)

    return JSONResponse(content={
        "video_id": catalog.video_id,
        "available_languages": catalog.available_languages(),
        "manually_created": [_track_json(t) for t in catalog.manual_tracks()],
        "generated": [_track_json(t) for t in catalog.generated_tracks()],
        "translation_languages": [
            {"language": t.display_name, "language_code": t.language_code}
            for t in catalog.translation_targets
        ],
    })


@app.get("/health")
async def health() -> dict:
    """Minimal health-check endpoint returning {"status": "ok"}."""
    return {"status": "ok"}
