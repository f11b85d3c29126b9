from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .charsets import CharacterSet, parse_glyphs, render_pattern
from .options import Options
from .registry import MorseRegistry, default_registry

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS = Options()


def encode(text: str, options: Optional[Options] = None, registry: Optional[MorseRegistry] = None) -> str:
    opts = options or DEFAULT_OPTIONS
    reg = registry or default_registry()
    order = opts.search_order()

    words: List[str] = []
    for word in text.split():
        letters: List[str] = []
        for ch in word.upper():
            pattern = reg.forward_lookup(ch, order)
            if pattern is not None:
                letters.append(render_pattern(pattern, opts.dot, opts.dash))
                continue
            replacement = _handle_invalid(opts, ch)
            if replacement:
                letters.append(replacement)
        if letters:
            words.append(opts.separator.join(letters))
    # the word space stands as its own letter between separators
    return (opts.separator + opts.space + opts.separator).join(words)


def decode(code: str, options: Optional[Options] = None, registry: Optional[MorseRegistry] = None) -> str:
    opts = options or DEFAULT_OPTIONS
    reg = registry or default_registry()
    table = reg.reverse_table(opts.search_order())
    strip_tokens = not (opts.dot.isspace() or opts.dash.isspace())

    words: List[str] = []
    for raw_word in code.split(opts.space):
        chars: List[str] = []
        for token in raw_word.split(opts.separator):
            if strip_tokens:
                token = token.strip()
            if not token:
                continue
            pattern = parse_glyphs(token, opts.dot, opts.dash)
            char = table.get(pattern) if pattern is not None else None
            if char is None:
                char = _handle_invalid(opts, opts.invalid, token)
            if char:
                chars.append(char)
        if chars:
            words.append("".join(chars))
    return " ".join(words)


def characters(
    options: Optional[Options] = None,
    use_priority: bool = True,
    registry: Optional[MorseRegistry] = None,
) -> Dict[CharacterSet, Dict[str, str]]:
    """
    Render every table with the caller's glyphs.

    With ``use_priority`` the sets come in search order (priority first),
    otherwise in declaration order.
    """
    opts = options or DEFAULT_OPTIONS
    reg = registry or default_registry()
    order = opts.search_order() if use_priority else tuple(CharacterSet)

    out: Dict[CharacterSet, Dict[str, str]] = {}
    for charset in order:
        table: Dict[str, str] = {}
        for entry in reg.entries(charset):
            table.setdefault(entry.char, render_pattern(entry.pattern, opts.dot, opts.dash))
        out[charset] = table
    return out


def _handle_invalid(opts: Options, char: str, token: Optional[str] = None) -> str:
    replacement = opts.invalid_char_callback(char)
    logger.debug("No mapping for %r, substituted %r", token if token is not None else char, replacement)
    return "" if replacement is None else str(replacement)
