"""
parser.py — Turn a timed-text XML document into TranscriptSegments.

YouTube's timed-text payload looks like:

    <transcript>
      <text start="0.24" dur="3.1">We&amp;#39;re no strangers to love</text>
      ...
    </transcript>

Note the double escaping: after XML parsing the text still contains HTML
entities, which decode_entities() resolves against a fixed table.

The document is fed to an xml.etree.ElementTree.XMLParser in chunks, with a
parser target receiving start / data / end callbacks as the bytes arrive; no
element tree is built.  Each callback drives an explicit two-state machine
(Idle / InElement) through the pure step() function, so the emission rules
can be tested without any XML at all.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from dataclasses import dataclass

from yt_transcript_resolver.errors import DataUnparsableError
from yt_transcript_resolver.models import TranscriptSegment

# ---------------------------------------------------------------------------
# Entity decoding
# ---------------------------------------------------------------------------

_ENTITIES: dict[str, str] = {
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "#39": "'",
    "apos": "'",
    "nbsp": " ",
    "copy": "©",
    "reg": "®",
    "trade": "™",
    "hellip": "…",
    "mdash": "—",
    "ndash": "–",
    "lsquo": "‘",
    "rsquo": "’",
    "ldquo": "“",
    "rdquo": "”",
    "bull": "•",
    "middot": "·",
    "sect": "§",
    "para": "¶",
    "euro": "€",
    "pound": "£",
    "yen": "¥",
    "cent": "¢",
    "deg": "°",
    "plusmn": "±",
    "times": "×",
    "divide": "÷",
    "frac14": "¼",
    "frac12": "½",
    "frac34": "¾",
    "sup1": "¹",
    "sup2": "²",
    "sup3": "³",
}

# Greek letters, lower and upper case: &alpha; → α, &Alpha; → Α, ...
# Code points after rho skip one slot (final sigma / unassigned U+03A2).
_GREEK = (
    "alpha beta gamma delta epsilon zeta eta theta iota kappa lambda mu "
    "nu xi omicron pi rho sigma tau upsilon phi chi psi omega"
).split()
_ENTITIES.update({name: chr(0x3B1 + i + (i > 16)) for i, name in enumerate(_GREEK)})
_ENTITIES.update({name.capitalize(): chr(0x391 + i + (i > 16)) for i, name in enumerate(_GREEK)})

_ENTITY_PATTERN = re.compile(r"&(#\d+|[A-Za-z][A-Za-z0-9]*);")


def _decode_once(text: str) -> str:
    return _ENTITY_PATTERN.sub(lambda m: _ENTITIES.get(m.group(1), m.group(0)), text)


def decode_entities(text: str) -> str:
    """
    Replace the known HTML entities in `text` with literal characters.

    Passes repeat until nothing changes, so nested escapes such as
    "&amp;lt;" resolve all the way to "<" and decoding the result again is a
    no-op.  Entities outside the table are left untouched.
    """
    decoded = _decode_once(text)
    while decoded != text:
        text, decoded = decoded, _decode_once(decoded)
    return decoded


# ---------------------------------------------------------------------------
# Parser state machine
# ---------------------------------------------------------------------------

# Element that carries one caption line.
_TEXT_TAG = "text"

# Characters handed to the XML parser per feed() call.
_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class Idle:
    """Between caption elements, or inside one whose start time was unusable."""


@dataclass(frozen=True)
class InElement:
    """Inside a caption element, holding the character data seen so far."""
    start: float
    duration: float
    text: str = ""


ParserState = Idle | InElement

IDLE = Idle()


def _to_float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def step(
    state: ParserState,
    event: str,
    *,
    tag: str = "",
    attrib: Mapping[str, str] | None = None,
    data: str = "",
    preserve_formatting: bool = False,
) -> tuple[ParserState, TranscriptSegment | None]:
    """
    Advance the parser by one callback.

    Args:
        state:               Current state.
        event:               "start", "data" or "end".
        tag:                 Element tag for start/end events.
        attrib:              Element attributes for start events.
        data:                Character data for data events.
        preserve_formatting: Skip entity decoding when True.

    Returns:
        (next state, segment to emit or None)
    """
    if event == "data":
        if isinstance(state, InElement):
            return InElement(state.start, state.duration, state.text + data), None
        return state, None

    # Markup nested inside a caption (e.g. <font>) only contributes its data.
    if tag != _TEXT_TAG:
        return state, None

    if event == "start":
        attrib = attrib or {}
        start = _to_float(attrib.get("start"))
        if start is None:
            return IDLE, None
        duration = _to_float(attrib.get("dur"))
        return InElement(start=start, duration=duration if duration is not None else 0.0), None

    if event == "end" and isinstance(state, InElement):
        text = state.text.strip()
        if not preserve_formatting:
            text = decode_entities(text)
        if not text:
            return IDLE, None
        return IDLE, TranscriptSegment(text=text, start=state.start, duration=state.duration)

    return IDLE, None


class _SegmentCollector:
    """ElementTree parser target that folds callbacks through step()."""

    def __init__(self, preserve_formatting: bool) -> None:
        self.preserve_formatting = preserve_formatting
        self.state: ParserState = IDLE
        self.segments: list[TranscriptSegment] = []

    def _advance(self, event: str, **kwargs) -> None:
        self.state, segment = step(
            self.state, event, preserve_formatting=self.preserve_formatting, **kwargs
        )
        if segment is not None:
            self.segments.append(segment)

    def start(self, tag: str, attrib: dict[str, str]) -> None:
        self._advance("start", tag=tag, attrib=attrib)

    def data(self, data: str) -> None:
        self._advance("data", data=data)

    def end(self, tag: str) -> None:
        self._advance("end", tag=tag)

    def close(self) -> list[TranscriptSegment]:
        return self.segments


class TimedTextParser:
    """
    Parse timed-text documents into ordered segment lists.

    Args:
        preserve_formatting: Keep HTML entities as-is instead of decoding them.
        video_id:            Used only to label parse errors.
    """

    def __init__(self, preserve_formatting: bool = False, video_id: str = "") -> None:
        self.preserve_formatting = preserve_formatting
        self.video_id = video_id

    def parse(self, document: str) -> list[TranscriptSegment]:
        """
        Return the document's segments in document order.

        Raises:
            DataUnparsableError: If the document isn't well-formed XML.
        """
        parser = ET.XMLParser(target=_SegmentCollector(self.preserve_formatting))
        try:
            for offset in range(0, len(document), _CHUNK_SIZE):
                parser.feed(document[offset:offset + _CHUNK_SIZE])
            return parser.close()
        except ET.ParseError as exc:
            raise DataUnparsableError(
                self.video_id, f"Failed to parse transcript XML: {exc}"
            ) from exc
