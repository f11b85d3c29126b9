from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple


class CharacterSet(str, Enum):
    """Supported alphabets. Declaration order is the fallback search order."""

    LATIN = "latin"
    NUMBERS = "numbers"
    PUNCTUATION = "punctuation"
    LATIN_EXTENDED = "latin_extended"
    CYRILLIC = "cyrillic"
    GREEK = "greek"
    HEBREW = "hebrew"
    ARABIC = "arabic"
    PERSIAN = "persian"
    JAPANESE = "japanese"
    KOREAN = "korean"
    THAI = "thai"

    @classmethod
    def from_name(cls, name: str) -> Optional["CharacterSet"]:
        key = str(name or "").strip().lower().replace("-", "_").replace(" ", "_")
        for charset in cls:
            if charset.value == key or charset.name.lower() == key:
                return charset
        return None


class Mark(str, Enum):
    DOT = "."
    DASH = "-"


Pattern = Tuple[Mark, ...]


@dataclass(frozen=True)
class MappingEntry:
    charset: CharacterSet
    char: str
    pattern: Pattern


def parse_marks(marks: str) -> Pattern:
    """Parse a '.'/'-' string from the data asset into a Pattern."""
    if not marks:
        raise ValueError("empty mark string")
    out = []
    for ch in marks:
        if ch == Mark.DOT.value:
            out.append(Mark.DOT)
        elif ch == Mark.DASH.value:
            out.append(Mark.DASH)
        else:
            raise ValueError(f"invalid mark {ch!r} in {marks!r}")
    return tuple(out)


def render_pattern(pattern: Iterable[Mark], dot: str, dash: str) -> str:
    return "".join(dot if mark is Mark.DOT else dash for mark in pattern)


def parse_glyphs(token: str, dot: str, dash: str) -> Optional[Pattern]:
    """
    Read a run of dot/dash glyphs back into a Pattern.
    Glyphs may be longer than one character; the longer one is tried first.
    Returns None when the token contains anything else.
    """
    if not token:
        return None
    glyphs = sorted(((dot, Mark.DOT), (dash, Mark.DASH)), key=lambda item: len(item[0]), reverse=True)
    out = []
    pos = 0
    while pos < len(token):
        for glyph, mark in glyphs:
            if token.startswith(glyph, pos):
                out.append(mark)
                pos += len(glyph)
                break
        else:
            return None
    return tuple(out)
