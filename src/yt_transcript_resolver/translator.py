"""
translator.py — Derive machine-translated variants of caption tracks.

YouTube translates a track on the fly when its delivery URL carries a
`tlang` query parameter, so translation is purely a matter of building a new
TrackDescriptor; nothing is fetched here.
"""

from __future__ import annotations

from yt_transcript_resolver.errors import (
    NotTranslatableError,
    TranslationLanguageNotAvailableError,
)
from yt_transcript_resolver.models import TrackDescriptor


def translate_track(track: TrackDescriptor, language_code: str) -> TrackDescriptor:
    """
    Return a descriptor for `track` machine-translated into `language_code`.

    The result is marked generated and is itself not translatable.

    Raises:
        NotTranslatableError:                 The source track can't be translated.
        TranslationLanguageNotAvailableError: language_code isn't a listed target.
    """
    if not track.is_translatable:
        raise NotTranslatableError(track.video_id)

    target = next(
        (t for t in track.translation_targets if t.language_code == language_code),
        None,
    )
    if target is None:
        raise TranslationLanguageNotAvailableError(track.video_id, language_code)

    return TrackDescriptor(
        video_id=track.video_id,
        source_url=f"{track.source_url}&tlang={language_code}",
        language=target.display_name,
        language_code=language_code,
        is_generated=True,
        is_translatable=False,
        translation_targets=(),
    )
