"""
BCS decode command.

SUMMARY: Resolve BCS codes to rule file paths or content
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List

from bcs.cli import (
    OutputFormatter,
    add_json_flag,
    add_root_flags,
    add_tier_flags,
    build_context,
    display_path,
    handle_error,
)
from bcs.core.rules.canonical import resolve_default_tier
from bcs.core.rules.codes import normalize_code
from bcs.core.rules.errors import ExitCode
from bcs.core.rules.query import ALL_TIERS_ORDER, DecodeMode, decode, decode_all_tiers

SUMMARY = "Resolve BCS codes to rule file paths or content"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument("codes", nargs="+", metavar="CODE", help="BCS code(s), e.g. BCS0102 or 0102")
    add_tier_flags(parser)
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("-p", "--print", dest="print_content", action="store_true", help="Print file content")
    mode.add_argument("--exists", action="store_true", help="Only set the exit status; print nothing")
    parser.add_argument("--all", dest="all_tiers", action="store_true", help="Show every tier of the code")
    fmt = parser.add_mutually_exclusive_group()
    fmt.add_argument("--relative", action="store_true", help="Print paths relative to the project")
    fmt.add_argument("--basename", action="store_true", help="Print file names only")
    add_json_flag(parser)
    add_root_flags(parser)


def _render_path(path: Path, args: argparse.Namespace, context) -> str:
    if args.basename:
        return path.name
    if args.relative:
        return display_path(path, args, context)
    return str(path)


def main(args: argparse.Namespace) -> int:
    """Decode each code in turn; stop at the first failure."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        context = build_context(args)
        store = context.build_store()
        tier = resolve_default_tier(context, args.tier)

        if args.exists:
            tiers = ALL_TIERS_ORDER if args.all_tiers else (tier,)
            found = all(
                any(decode(store, code, t, DecodeMode.EXISTS) for t in tiers) for code in args.codes
            )
            return 0 if found else int(ExitCode.NOT_FOUND)

        mode = DecodeMode.PRINT if args.print_content else DecodeMode.PATH
        results: List[Dict[str, Any]] = []
        for index, raw in enumerate(args.codes):
            code = normalize_code(raw)
            if args.all_tiers:
                by_tier = decode_all_tiers(store, code, mode)
                if formatter.json_mode:
                    results.append({"code": code, "tiers": {t.value: _json_value(v, args, context) for t, v in by_tier.items()}})
                    continue
                for position, (t, value) in enumerate(by_tier.items()):
                    if mode is DecodeMode.PRINT:
                        if position:
                            formatter.text("\n---\n")
                        formatter.text(f"{t.value.capitalize()} tier ({code})\n")
                        formatter.raw(str(value))
                    else:
                        formatter.text(f"{t.value.capitalize()}: {_render_path(value, args, context)}")
                continue

            value = decode(store, code, tier, mode)
            if formatter.json_mode:
                results.append({"code": code, "tier": tier.value, mode.value: _json_value(value, args, context)})
            elif mode is DecodeMode.PRINT:
                if index:
                    formatter.text("")
                formatter.raw(str(value))
            else:
                formatter.text(_render_path(value, args, context))

        if formatter.json_mode:
            formatter.json_output(results)
        return 0

    except Exception as e:
        return handle_error(formatter, e)


def _json_value(value, args: argparse.Namespace, context):
    if isinstance(value, Path):
        return _render_path(value, args, context)
    return value


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
