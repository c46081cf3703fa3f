"""
models.py — Value objects shared across the resolution pipeline.

Everything here is a frozen dataclass: created once while parsing a YouTube
response, never mutated afterwards, and scoped to the call that produced it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# A canonical 11-character YouTube video identifier.
VideoId = str


# ---------------------------------------------------------------------------
# Tracks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TranslationTarget:
    """
    A language YouTube can machine-translate a track into.

    Attributes:
        language_code: Target language tag (e.g. "de").
        display_name:  Human-readable name as YouTube shows it (e.g. "German").
    """
    language_code: str
    display_name: str


@dataclass(frozen=True)
class TrackDescriptor:
    """
    One caption track of a video: a language, either manual or auto-generated.

    Attributes:
        video_id:            The video this track belongs to.
        source_url:          Timed-text delivery URL (never carries &fmt=srv3).
        language:            Display name (e.g. "English (auto-generated)").
        language_code:       Language tag (e.g. "en").
        is_generated:        True for YouTube's automatic speech recognition.
        is_translatable:     True when YouTube offers machine translation.
        translation_targets: Languages this track can be translated into;
                             always empty for non-translatable tracks.
    """
    video_id: VideoId
    source_url: str
    language: str
    language_code: str
    is_generated: bool
    is_translatable: bool
    translation_targets: tuple[TranslationTarget, ...] = field(default=())

    def __str__(self) -> str:
        suffix = " [TRANSLATABLE]" if self.is_translatable else ""
        return f'{self.language_code} ("{self.language}"){suffix}'


# ---------------------------------------------------------------------------
# Segments
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TranscriptSegment:
    """
    A single timed line of a transcript.

    duration is how long the line stays on screen, not how long the speech
    lasts, so neighbouring segments can overlap.

    Attributes:
        text:     The caption text.
        start:    On-screen start time in seconds.
        duration: On-screen time in seconds.
    """
    text: str
    start: float
    duration: float

    @property
    def end(self) -> float:
        return self.start + self.duration

    @property
    def timestamp(self) -> str:
        """Start time as M:SS (minutes are not wrapped into hours)."""
        minutes, seconds = divmod(int(self.start), 60)
        return f"{minutes}:{seconds:02d}"

    def overlaps(self, other: TranscriptSegment) -> bool:
        """True when the two on-screen intervals intersect."""
        return self.start < other.end and self.end > other.start

    def to_dict(self) -> dict:
        return {"text": self.text, "start": self.start, "duration": self.duration}

    def __str__(self) -> str:
        return f"[{self.timestamp}] {self.text}"
