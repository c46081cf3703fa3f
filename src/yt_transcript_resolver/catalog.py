"""
catalog.py — The per-video collection of caption tracks.

build_catalog() turns the raw `playerCaptionsTracklistRenderer` object returned
by the player API into a TranscriptCatalog.  The catalog keeps manually-created
and auto-generated tracks in two separate mappings keyed by language code; a
code may appear in both, and lookups always consult the manual mapping first.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from yt_transcript_resolver.errors import NoTranscriptFoundError
from yt_transcript_resolver.models import TrackDescriptor, TranslationTarget, VideoId

# This query fragment selects YouTube's srv3 format, which the timed-text
# parser doesn't understand.  It is stripped from every delivery URL.
_SRV3_FRAGMENT = "&fmt=srv3"


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class TranscriptCatalog:
    """
    All caption tracks discovered for one video.

    Instances are built by build_catalog() and not modified afterwards.
    """

    def __init__(
        self,
        video_id: VideoId,
        manual_tracks: Mapping[str, TrackDescriptor],
        generated_tracks: Mapping[str, TrackDescriptor],
        translation_targets: tuple[TranslationTarget, ...] = (),
    ) -> None:
        self.video_id = video_id
        self._manual = dict(manual_tracks)
        self._generated = dict(generated_tracks)
        self.translation_targets = tuple(translation_targets)

    # --- queries -----------------------------------------------------------

    def all_tracks(self) -> list[TrackDescriptor]:
        """Every track, manual ones first, each group in insertion order."""
        return [*self._manual.values(), *self._generated.values()]

    def manual_tracks(self) -> list[TrackDescriptor]:
        return list(self._manual.values())

    def generated_tracks(self) -> list[TrackDescriptor]:
        return list(self._generated.values())

    def find_track(self, language_codes: list[str]) -> TrackDescriptor:
        """
        Return the first track matching the caller's language priority list.

        For each code in order, a manually-created track beats a generated one.

        Raises:
            NoTranscriptFoundError: If no code matches either mapping.
        """
        return self._find(language_codes, (self._manual, self._generated))

    def find_manual_track(self, language_codes: list[str]) -> TrackDescriptor:
        return self._find(language_codes, (self._manual,))

    def find_generated_track(self, language_codes: list[str]) -> TrackDescriptor:
        return self._find(language_codes, (self._generated,))

    def available_languages(self) -> list[str]:
        """Sorted, de-duplicated language codes across both mappings."""
        return sorted(set(self._manual) | set(self._generated))

    def manual_languages(self) -> list[str]:
        return sorted(self._manual)

    def generated_languages(self) -> list[str]:
        return sorted(self._generated)

    def _find(
        self,
        language_codes: list[str],
        mappings: tuple[dict[str, TrackDescriptor], ...],
    ) -> TrackDescriptor:
        for code in language_codes:
            for mapping in mappings:
                if code in mapping:
                    return mapping[code]

        raise NoTranscriptFoundError(
            self.video_id,
            requested=list(language_codes),
            available=self.available_languages(),
        )

    # --- container protocol ------------------------------------------------

    def __len__(self) -> int:
        return len(self._manual) + len(self._generated)

    def __bool__(self) -> bool:
        return len(self) > 0

    def __iter__(self) -> Iterator[TrackDescriptor]:
        return iter(self.all_tracks())

    def __str__(self) -> str:
        def _section(lines: list[str]) -> str:
            return "\n".join(lines) if lines else "None"

        manual = [f" - {track}" for track in self.manual_tracks()]
        generated = [f" - {track}" for track in self.generated_tracks()]
        targets = [
            f' - {t.language_code} ("{t.display_name}")'
            for t in self.translation_targets
        ]
        return (
            f"For this video ({self.video_id}) transcripts are available in "
            "the following languages:\n\n"
            f"(MANUALLY CREATED)\n{_section(manual)}\n\n"
            f"(GENERATED)\n{_section(generated)}\n\n"
            f"(TRANSLATION LANGUAGES)\n{_section(targets)}"
        )


# ---------------------------------------------------------------------------
# Building a catalog from player API data
# ---------------------------------------------------------------------------

def _first_run_text(name: object) -> str:
    """
    Pull a display string out of YouTube's text structure.

    YouTube uses either {"runs": [{"text": ...}, ...]} or {"simpleText": ...}.
    """
    if not isinstance(name, dict):
        return ""
    runs = name.get("runs")
    if isinstance(runs, list) and runs and isinstance(runs[0], dict):
        return runs[0].get("text") or ""
    return name.get("simpleText") or ""


def _parse_translation_targets(renderer: Mapping) -> tuple[TranslationTarget, ...]:
    """Parse the video-wide translation language list, skipping partial entries."""
    targets: list[TranslationTarget] = []
    for entry in renderer.get("translationLanguages") or []:
        if not isinstance(entry, dict):
            continue
        code = entry.get("languageCode") or ""
        name = _first_run_text(entry.get("languageName"))
        if code and name:
            targets.append(TranslationTarget(language_code=code, display_name=name))
    return tuple(targets)


def build_catalog(video_id: VideoId, renderer: Mapping) -> TranscriptCatalog:
    """
    Build a TranscriptCatalog from a `playerCaptionsTracklistRenderer` object.

    Caption entries without a language code or a base URL are skipped —
    YouTube's metadata is occasionally incomplete and that isn't an error.
    When two entries share a language code within the same mapping, the later
    one wins.

    Args:
        video_id: The video the metadata belongs to.
        renderer: The renderer dict with `captionTracks` and (optionally)
                  `translationLanguages`.

    Returns:
        The populated catalog.
    """
    translation_targets = _parse_translation_targets(renderer)
    manual: dict[str, TrackDescriptor] = {}
    generated: dict[str, TrackDescriptor] = {}

    for caption in renderer.get("captionTracks") or []:
        if not isinstance(caption, dict):
            continue
        language_code = caption.get("languageCode") or ""
        base_url = (caption.get("baseUrl") or "").replace(_SRV3_FRAGMENT, "")
        if not language_code or not base_url:
            continue

        is_generated = caption.get("kind") == "asr"
        is_translatable = bool(caption.get("isTranslatable", False))

        track = TrackDescriptor(
            video_id=video_id,
            source_url=base_url,
            language=_first_run_text(caption.get("name")),
            language_code=language_code,
            is_generated=is_generated,
            is_translatable=is_translatable,
            translation_targets=translation_targets if is_translatable else (),
        )

        if is_generated:
            generated[language_code] = track
        else:
            manual[language_code] = track

    return TranscriptCatalog(
        video_id=video_id,
        manual_tracks=manual,
        generated_tracks=generated,
        translation_targets=translation_targets,
    )
