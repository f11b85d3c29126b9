from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import yaml

from .charsets import CharacterSet, MappingEntry, Pattern, parse_marks

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).resolve().parent / "data" / "charsets.yaml"
SUPPORTED_DATA_VERSIONS = (1,)

PriorityOrder = Tuple[CharacterSet, ...]
ReverseTable = Mapping[Pattern, str]


class RegistryError(ValueError):
    pass


class ReverseTableCache:
    """
    Merged pattern -> character tables keyed by priority order.

    Lookups of cached orders take no lock; builds happen under the lock, so
    each distinct order is built at most once while it stays cached. Least
    recently used orders are evicted past ``capacity``.
    """

    def __init__(self, capacity: int = 32):
        self.capacity = max(int(capacity), 1)
        self.hits = 0
        self.misses = 0
        self._tables: "OrderedDict[PriorityOrder, ReverseTable]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._tables)

    def __contains__(self, order: object) -> bool:
        return order in self._tables

    def get_or_build(self, order: PriorityOrder, build) -> ReverseTable:
        table = self._tables.get(order)
        if table is not None:
            self._touch(order)
            return table
        with self._lock:
            table = self._tables.get(order)
            if table is not None:
                self._touch(order)
                return table
            self.misses += 1
            table = build(order)
            self._tables[order] = table
            while len(self._tables) > self.capacity:
                evicted, _ = self._tables.popitem(last=False)
                logger.debug("Evicted reverse table for %s", _order_label(evicted))
            return table

    def clear(self) -> None:
        with self._lock:
            self._tables.clear()
            self.hits = 0
            self.misses = 0

    def _touch(self, order: PriorityOrder) -> None:
        self.hits += 1
        try:
            self._tables.move_to_end(order)
        except KeyError:
            # evicted by a concurrent build
            pass


class MorseRegistry:
    """Read-only character <-> pattern tables, one per CharacterSet."""

    def __init__(
        self,
        tables: Mapping[CharacterSet, Sequence[MappingEntry]],
        cache: Optional[ReverseTableCache] = None,
    ):
        self._entries: Dict[CharacterSet, Tuple[MappingEntry, ...]] = {}
        self._forward: Dict[CharacterSet, Dict[str, Pattern]] = {}
        for charset in CharacterSet:
            entries = tuple(tables.get(charset, ()))
            forward: Dict[str, Pattern] = {}
            for entry in entries:
                forward.setdefault(entry.char, entry.pattern)
            self._entries[charset] = entries
            self._forward[charset] = forward
        self.cache = cache if cache is not None else ReverseTableCache()

    def entries(self, charset: CharacterSet) -> Tuple[MappingEntry, ...]:
        return self._entries.get(charset, ())

    def forward_lookup(self, char: str, priority_order: Sequence[CharacterSet]) -> Optional[Pattern]:
        canonical = char.upper()
        for charset in priority_order:
            forward = self._forward.get(charset, {})
            pattern = forward.get(char)
            if pattern is None and canonical != char:
                pattern = forward.get(canonical)
            if pattern is not None:
                return pattern
        return None

    def reverse_table(self, priority_order: Sequence[CharacterSet]) -> ReverseTable:
        return self.cache.get_or_build(tuple(priority_order), self._build_reverse_table)

    def reverse_lookup(self, pattern: Pattern, priority_order: Sequence[CharacterSet]) -> Optional[str]:
        return self.reverse_table(priority_order).get(tuple(pattern))

    def _build_reverse_table(self, order: PriorityOrder) -> ReverseTable:
        merged: Dict[Pattern, str] = {}
        for charset in order:
            # within a set the lowest code point owns a shared pattern
            for entry in sorted(self._entries.get(charset, ()), key=lambda e: e.char):
                # first writer wins: earlier sets own shared patterns
                if entry.pattern not in merged:
                    merged[entry.pattern] = entry.char
        logger.debug("Built reverse table for %s (%d patterns)", _order_label(order), len(merged))
        return MappingProxyType(merged)


def load_registry(path: Optional[str | Path] = None, cache: Optional[ReverseTableCache] = None) -> MorseRegistry:
    p = Path(path) if path else DEFAULT_DATA_FILE
    if not p.exists():
        raise RegistryError(f"Character set file not found: {p}")
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise RegistryError(f"Character set file could not be parsed: {p} ({exc})") from exc
    tables = parse_registry_data(raw, source=str(p))
    logger.debug("Loaded %d character sets from %s", len(tables), p)
    return MorseRegistry(tables, cache=cache)


def parse_registry_data(raw: Any, source: str = "<data>") -> Dict[CharacterSet, List[MappingEntry]]:
    if not isinstance(raw, Mapping):
        raise RegistryError(f"Character set data has invalid format: {source}")
    version = raw.get("version", 1)
    if version not in SUPPORTED_DATA_VERSIONS:
        raise RegistryError(f"Unsupported character set data version {version!r}: {source}")
    node = raw.get("charsets")
    if not isinstance(node, Mapping):
        raise RegistryError(f"Character set data has no 'charsets' mapping: {source}")

    tables: Dict[CharacterSet, List[MappingEntry]] = {}
    for raw_name, raw_items in node.items():
        charset = CharacterSet.from_name(str(raw_name))
        if charset is None:
            raise RegistryError(f"Unknown character set {raw_name!r} in {source}")
        if not isinstance(raw_items, Sequence) or isinstance(raw_items, str):
            raise RegistryError(f"Character set {raw_name!r} must be a list of pairs: {source}")
        tables[charset] = _parse_entries(charset, raw_items, source)
    return tables


def _parse_entries(charset: CharacterSet, raw_items: Sequence[Any], source: str) -> List[MappingEntry]:
    entries: List[MappingEntry] = []
    seen = set()
    for idx, item in enumerate(raw_items):
        if not isinstance(item, Sequence) or isinstance(item, str) or len(item) != 2:
            raise RegistryError(f"{charset.value}[{idx}] must be a [character, marks] pair: {source}")
        char, marks = item
        if not isinstance(char, str) or not char:
            raise RegistryError(f"{charset.value}[{idx}] has an empty or non-text character: {source}")
        try:
            pattern = parse_marks(str(marks))
        except ValueError as exc:
            raise RegistryError(f"{charset.value}[{idx}] {char!r}: {exc}: {source}") from exc
        if char in seen:
            logger.warning("Duplicate character %r in %s, keeping the first entry", char, charset.value)
            continue
        seen.add(char)
        entries.append(MappingEntry(charset=charset, char=char, pattern=pattern))
    return entries


@lru_cache(maxsize=None)
def default_registry() -> MorseRegistry:
    return load_registry(DEFAULT_DATA_FILE)


def _order_label(order: Sequence[CharacterSet]) -> str:
    return ",".join(charset.value for charset in order)
