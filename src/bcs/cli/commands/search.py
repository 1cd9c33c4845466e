"""
BCS search command.

SUMMARY: Search the standard with a regular expression
"""

from __future__ import annotations

import argparse
import sys

from bcs.cli import OutputFormatter, add_json_flag, add_root_flags, add_tier_flags, build_context, handle_error
from bcs.core.rules.canonical import resolve_default_tier
from bcs.core.rules.query import format_matches, load_search_document, search

SUMMARY = "Search the standard with a regular expression"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument("pattern", help="Regular expression (Python syntax)")
    parser.add_argument("-i", "--ignore-case", action="store_true", help="Case-insensitive match")
    parser.add_argument(
        "-C",
        "--context",
        dest="context_lines",
        type=int,
        default=0,
        metavar="N",
        help="Show N lines of context around each match",
    )
    parser.add_argument("-F", "--fixed-strings", dest="fixed", action="store_true", help="Treat pattern as a literal string")
    parser.add_argument("--fresh", action="store_true", help="Search a freshly assembled document")
    add_tier_flags(parser)
    add_json_flag(parser)
    add_root_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Print grep-style matches; exit 1 when nothing matches."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        context = build_context(args)
        tier = resolve_default_tier(context, args.tier)
        document = load_search_document(context, tier, fresh=args.fresh)
        matches = search(
            document,
            args.pattern,
            ignore_case=args.ignore_case,
            context_lines=args.context_lines,
            fixed=args.fixed,
        )

        if formatter.json_mode:
            formatter.json_output(
                {
                    "pattern": args.pattern,
                    "tier": tier.value,
                    "matches": [
                        {
                            "line": m.line_number,
                            "text": m.line,
                            "before": [list(c) for c in m.before],
                            "after": [list(c) for c in m.after],
                        }
                        for m in matches
                    ],
                }
            )
            return 0 if matches else 1

        if not matches:
            formatter.notice(f"No matches for '{args.pattern}'")
            return 1
        for line in format_matches(matches):
            formatter.text(line)
        return 0

    except Exception as e:
        return handle_error(formatter, e)


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
