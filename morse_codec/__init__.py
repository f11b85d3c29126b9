from .charsets import CharacterSet, MappingEntry, Mark, Pattern, parse_glyphs, parse_marks, render_pattern
from .codec import characters, decode, encode
from .config import CodecConfig, build_options, load_config, save_config
from .options import Options, drop, handler_for_policy, passthrough, replace_with
from .registry import MorseRegistry, RegistryError, ReverseTableCache, default_registry, load_registry

__all__ = [
    "CharacterSet",
    "MappingEntry",
    "Mark",
    "Pattern",
    "parse_glyphs",
    "parse_marks",
    "render_pattern",
    "characters",
    "decode",
    "encode",
    "CodecConfig",
    "build_options",
    "load_config",
    "save_config",
    "Options",
    "drop",
    "handler_for_policy",
    "passthrough",
    "replace_with",
    "MorseRegistry",
    "RegistryError",
    "ReverseTableCache",
    "default_registry",
    "load_registry",
]
