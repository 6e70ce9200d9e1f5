"""Ruby (furigana) markup lexer.

Converts inline ruby markup into display segments:

    ｜今日《きょう》は｜学校《がっこう》です。

- ｜ opens an explicit base span (may contain kana, e.g. ｜お茶《おちゃ》)
- 《...》 holds the reading for the base span right before it
- Kanji runs without ｜ are detected automatically, so 今日《きょう》 also works

Malformed spans are dropped silently; the lexer never raises.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

BASE_MARKER = "｜"
READING_OPEN = "《"
READING_CLOSE = "》"

# CJK ideograph blocks (unified, extension A, extension B)
KANJI_RANGES = (
    (0x4E00, 0x9FAF),
    (0x3400, 0x4DBF),
    (0x20000, 0x2A6DF),
)


@dataclass(frozen=True)
class RubySegment:
    """Base text with an optional reading (empty for plain text)."""

    text: str
    ruby: str = ""

    @property
    def has_ruby(self) -> bool:
        return bool(self.ruby)

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "ruby": self.ruby}


class _Mode(Enum):
    PLAIN = auto()
    KANJI = auto()
    READING = auto()


def is_kanji(char: str) -> bool:
    """Check whether a character is a CJK ideograph."""
    if not char:
        return False
    code = ord(char[0])
    return any(low <= code <= high for low, high in KANJI_RANGES)


def _append(segments: list[RubySegment], text: str, ruby: str = "") -> None:
    """Append a segment, merging consecutive plain text."""
    if not text:
        return
    if not ruby and segments and not segments[-1].has_ruby:
        segments[-1] = RubySegment(segments[-1].text + text)
        return
    segments.append(RubySegment(text, ruby))


def parse_ruby(text: str) -> list[RubySegment]:
    """Parse ruby markup into ordered display segments.

    Args:
        text: Text using ｜base《reading》 markup

    Returns:
        List of RubySegment; ruby is empty for plain segments
    """
    segments: list[RubySegment] = []
    mode = _Mode.PLAIN
    buffer = ""
    base = ""
    reading = ""
    explicit = False

    for char in text:
        if mode is _Mode.READING:
            if char == READING_CLOSE:
                # Empty reading keeps the base as plain text
                _append(segments, base, reading)
                base = ""
                reading = ""
                mode = _Mode.PLAIN
            else:
                reading += char
            continue

        if char == BASE_MARKER:
            _append(segments, buffer)
            buffer = ""
            mode = _Mode.KANJI
            explicit = True
        elif char == READING_OPEN:
            if mode is _Mode.KANJI:
                base = buffer
            else:
                # No base span to annotate
                _append(segments, buffer)
                base = ""
            buffer = ""
            reading = ""
            mode = _Mode.READING
        elif char == READING_CLOSE:
            continue
        elif mode is _Mode.KANJI:
            if explicit or is_kanji(char):
                buffer += char
            else:
                _append(segments, buffer)
                buffer = char
                mode = _Mode.PLAIN
        elif is_kanji(char):
            _append(segments, buffer)
            buffer = char
            mode = _Mode.KANJI
            explicit = False
        else:
            buffer += char

    if mode is _Mode.READING:
        # Unclosed reading span
        _append(segments, base)
    else:
        _append(segments, buffer)

    return segments


def plain_text(text: str) -> str:
    """Strip ruby markup, keeping only base text."""
    return "".join(segment.text for segment in parse_ruby(text))


def reading_text(segments: list[RubySegment]) -> str:
    """Phonetic rendering: readings for annotated spans, base text elsewhere."""
    return "".join(s.ruby if s.has_ruby else s.text for s in segments)


def accessibility_text(segments: list[RubySegment]) -> str:
    """Screen-reader text with readings in full-width parentheses."""
    return "".join(
        f"{s.text}（{s.ruby}）" if s.has_ruby else s.text for s in segments
    )
