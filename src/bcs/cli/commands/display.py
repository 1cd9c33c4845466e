"""
BCS display command.

SUMMARY: Print the Bash Coding Standard for the default (or given) tier
"""

from __future__ import annotations

import argparse
import sys

from bcs.cli import OutputFormatter, add_root_flags, add_tier_flags, build_context, handle_error
from bcs.core.rules.assembler import assemble_selection
from bcs.core.rules.canonical import context_canonical_path, resolve_default_tier

SUMMARY = "Print the Bash Coding Standard for the default (or given) tier"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_tier_flags(parser)
    parser.add_argument(
        "--fresh",
        action="store_true",
        help="Assemble from the rule files instead of reading the canonical document",
    )
    add_root_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Print the canonical document, assembling it when it is missing."""
    formatter = OutputFormatter()

    try:
        context = build_context(args)
        tier = resolve_default_tier(context, args.tier)
        path = context_canonical_path(context, tier)
        if path.is_file() and not args.fresh:
            formatter.raw(path.read_text(encoding="utf-8"))
            return 0
        store = context.build_store()
        formatter.raw(assemble_selection(store, None, tier, context.config.assembly).text)
        return 0

    except Exception as e:
        return handle_error(formatter, e)


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
