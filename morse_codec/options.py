from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence, Tuple

from .charsets import CharacterSet

InvalidCharHandler = Callable[[str], str]

INVALID_POLICIES = ("passthrough", "replace", "drop")


def passthrough(char: str) -> str:
    return char


def drop(char: str) -> str:
    return ""


def replace_with(replacement: str) -> InvalidCharHandler:
    def _replace(char: str) -> str:
        return replacement

    return _replace


def handler_for_policy(policy: str, invalid: str = "#") -> InvalidCharHandler:
    name = str(policy or "").strip().lower()
    if name == "drop":
        return drop
    if name == "replace":
        return replace_with(invalid)
    return passthrough


@dataclass(frozen=True)
class Options:
    """
    Glyphs and lookup policy shared by encode and decode.

    ``invalid`` is the placeholder handed to ``invalid_char_callback`` when a
    decoded token has no source character. The callback returns the text to
    emit; an empty string removes the character.
    """

    dash: str = "-"
    dot: str = "."
    space: str = "/"
    separator: str = " "
    invalid: str = "#"
    invalid_char_callback: InvalidCharHandler = passthrough
    priority: Tuple[CharacterSet, ...] = (CharacterSet.LATIN,)
    fallback: bool = True
    _search_order: Tuple[CharacterSet, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for name in ("dash", "dot", "space", "separator"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ValueError(f"Options.{name} must be a non-empty string")
        if self.dot == self.dash:
            raise ValueError("Options.dot and Options.dash must differ")
        if self.separator == self.space:
            raise ValueError("Options.separator and Options.space must differ")
        for name in ("separator", "space"):
            delimiter = getattr(self, name)
            for mark in (self.dot, self.dash):
                if mark in delimiter or delimiter in mark:
                    raise ValueError(f"Options.{name} {delimiter!r} overlaps the mark glyph {mark!r}")
        if not callable(self.invalid_char_callback):
            raise ValueError("Options.invalid_char_callback must be callable")

        priority = _normalize_priority(self.priority)
        object.__setattr__(self, "priority", priority)
        search = priority
        if self.fallback:
            search = priority + tuple(cs for cs in CharacterSet if cs not in priority)
        object.__setattr__(self, "_search_order", search)

    def search_order(self) -> Tuple[CharacterSet, ...]:
        return self._search_order


def _normalize_priority(priority: Sequence[CharacterSet] | CharacterSet) -> Tuple[CharacterSet, ...]:
    if isinstance(priority, CharacterSet):
        priority = (priority,)
    out = []
    for item in priority:
        if not isinstance(item, CharacterSet):
            raise ValueError(f"Options.priority entries must be CharacterSet values, got {item!r}")
        if item not in out:
            out.append(item)
    if not out:
        raise ValueError("Options.priority must name at least one character set")
    return tuple(out)
