from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .charsets import CharacterSet
from .options import INVALID_POLICIES, Options, handler_for_policy
from .registry import MorseRegistry, default_registry, load_registry

logger = logging.getLogger(__name__)


@dataclass
class CodecConfig:
    dash: str = "-"
    dot: str = "."
    space: str = "/"
    separator: str = " "
    invalid: str = "#"
    invalid_policy: str = "passthrough"  # passthrough | replace | drop
    priority: List[str] = field(default_factory=lambda: [CharacterSet.LATIN.value])
    fallback: bool = True
    data_file: Optional[str] = None


def load_config(path: str | Path) -> CodecConfig:
    p = Path(path)
    if not p.exists():
        cfg = CodecConfig()
        save_config(p, cfg)
        return cfg

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Config file could not be parsed: {p} ({exc})") from exc
    cfg = CodecConfig()
    if not isinstance(raw, dict):
        logger.warning("Config %s has no mapping at the root, using defaults", p)
        return cfg

    _apply_dataclass_updates(cfg, raw)
    normalize_config(cfg)
    return cfg


def save_config(path: str | Path, config: CodecConfig) -> None:
    p = Path(path)
    p.write_text(yaml.safe_dump(asdict(config), sort_keys=False, allow_unicode=True), encoding="utf-8")


def normalize_config(cfg: CodecConfig) -> CodecConfig:
    for name in ("dash", "dot", "space", "separator", "invalid"):
        value = getattr(cfg, name)
        default = getattr(CodecConfig, name)
        if value is None or str(value) == "":
            logger.warning("Config value %s is empty, using %r", name, default)
            value = default
        setattr(cfg, name, str(value))

    policy = str(cfg.invalid_policy or "").strip().lower()
    if policy not in INVALID_POLICIES:
        logger.warning("Unknown invalid_policy %r, using passthrough", cfg.invalid_policy)
        policy = "passthrough"
    cfg.invalid_policy = policy

    raw_priority = cfg.priority
    if isinstance(raw_priority, str):
        raw_priority = [raw_priority]
    elif not isinstance(raw_priority, (list, tuple)):
        if raw_priority is not None:
            logger.warning("priority must be a list of character set names, got %r", raw_priority)
        raw_priority = []
    names: List[str] = []
    for item in raw_priority:
        charset = CharacterSet.from_name(str(item))
        if charset is None:
            logger.warning("Ignoring unknown character set %r in priority", item)
            continue
        if charset.value not in names:
            names.append(charset.value)
    cfg.priority = names or [CharacterSet.LATIN.value]

    cfg.fallback = _as_bool(cfg.fallback, default=True, name="fallback")
    cfg.data_file = str(cfg.data_file).strip() if cfg.data_file else None
    return cfg


def build_options(cfg: CodecConfig) -> Options:
    priority = tuple(cs for cs in (CharacterSet.from_name(name) for name in cfg.priority) if cs is not None)
    return Options(
        dash=cfg.dash,
        dot=cfg.dot,
        space=cfg.space,
        separator=cfg.separator,
        invalid=cfg.invalid,
        invalid_char_callback=handler_for_policy(cfg.invalid_policy, cfg.invalid),
        priority=priority or (CharacterSet.LATIN,),
        fallback=cfg.fallback,
    )


def load_registry_for(cfg: CodecConfig) -> MorseRegistry:
    if cfg.data_file:
        return load_registry(cfg.data_file)
    return default_registry()


def _as_bool(value: Any, default: bool, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    text = str(value or "").strip().lower()
    if text in {"true", "yes", "on", "1"}:
        return True
    if text in {"false", "no", "off", "0"}:
        return False
    logger.warning("Config value %s=%r is not a boolean, using %r", name, value, default)
    return default


def _apply_dataclass_updates(target: Any, updates: Dict[str, Any]) -> None:
    for key, value in updates.items():
        if hasattr(target, key):
            setattr(target, key, value)
        else:
            logger.warning("Ignoring unknown config key %r", key)
