from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .charsets import CharacterSet
from .codec import characters, decode, encode
from .config import CodecConfig, build_options, load_config, load_registry_for, normalize_config
from .options import INVALID_POLICIES


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="morse-codec", description="Convert text to and from Morse code.")
    p.add_argument("text", nargs="*", help="Text or Morse code. Reads stdin when omitted.")
    p.add_argument("--config", default=None, help="YAML config path.")
    p.add_argument("-d", "--decode", action="store_true", help="Decode Morse code instead of encoding text.")
    p.add_argument("--dot", default=None, help="Dot glyph.")
    p.add_argument("--dash", default=None, help="Dash glyph.")
    p.add_argument("--space", default=None, help="Word space glyph.")
    p.add_argument("--separator", default=None, help="Letter separator glyph.")
    p.add_argument("--invalid", default=None, help="Placeholder for undecodable tokens.")
    p.add_argument("--invalid-policy", choices=INVALID_POLICIES, default=None, help="Unmappable character handling.")
    p.add_argument(
        "--priority",
        nargs="+",
        choices=[cs.value for cs in CharacterSet],
        default=None,
        help="Character sets in priority order.",
    )
    p.add_argument("--no-fallback", action="store_true", help="Only search the priority character sets.")
    p.add_argument("--data-file", default=None, help="Alternative character set YAML file.")
    p.add_argument("--list-charsets", action="store_true", help="Print the active tables and exit.")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return p


def _apply_cli_overrides(cfg: CodecConfig, args: argparse.Namespace) -> None:
    for name in ("dot", "dash", "space", "separator", "invalid", "data_file"):
        value = getattr(args, name)
        if value is not None:
            setattr(cfg, name, value)
    if args.invalid_policy:
        cfg.invalid_policy = args.invalid_policy
    if args.priority:
        cfg.priority = list(args.priority)
    if args.no_fallback:
        cfg.fallback = False
    normalize_config(cfg)


def _print_charsets(cfg: CodecConfig) -> int:
    options = build_options(cfg)
    registry = load_registry_for(cfg)
    for charset, table in characters(options, use_priority=True, registry=registry).items():
        if not table:
            continue
        print(f"[{charset.value}]")
        for char, code in table.items():
            print(f"{char}\t{code}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = load_config(Path(args.config)) if args.config else CodecConfig()
        _apply_cli_overrides(cfg, args)
        if args.list_charsets:
            return _print_charsets(cfg)
        options = build_options(cfg)
        registry = load_registry_for(cfg)
    except ValueError as exc:
        print(f"morse-codec: {exc}", file=sys.stderr)
        return 2

    source = " ".join(args.text) if args.text else sys.stdin.read()
    if args.decode:
        lines = [decode(line, options, registry) for line in source.splitlines()]
    else:
        lines = [encode(line, options, registry) for line in source.splitlines()]
    print("\n".join(lines))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
