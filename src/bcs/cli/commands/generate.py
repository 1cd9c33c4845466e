"""
BCS generate command.

SUMMARY: Assemble rule files into a single standard document
"""

from __future__ import annotations

import argparse
import sys

from bcs.cli import (
    OutputFormatter,
    add_filter_args,
    add_json_flag,
    add_root_flags,
    add_tier_flags,
    build_context,
    filter_from_args,
    handle_error,
    print_success,
)
from bcs.core.rules.assembler import generate
from bcs.core.rules.errors import InvalidOptionError

SUMMARY = "Assemble rule files into a single standard document"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_tier_flags(parser)
    add_filter_args(parser)
    parser.add_argument(
        "-o",
        "--output",
        help="Write to this file instead of stdout",
    )
    parser.add_argument(
        "--canonical",
        action="store_true",
        help="Overwrite the canonical BASH-CODING-STANDARD.<tier>.md document",
    )
    parser.add_argument(
        "--all-tiers",
        action="store_true",
        help="With --canonical, regenerate every required tier",
    )
    add_json_flag(parser)
    add_root_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Generate a document to stdout, a file, or the canonical path."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        context = build_context(args)
        rule_filter = filter_from_args(args)

        if args.all_tiers:
            if not args.canonical or args.output or args.tier:
                raise InvalidOptionError("--all-tiers requires --canonical and no --output or tier flag")
            tiers = context.config.required_tiers
        else:
            tiers = [args.tier]

        written = []
        for tier in tiers:
            result = generate(
                context,
                tier,
                rule_filter,
                output=args.output,
                overwrite_canonical=args.canonical,
            )
            if result.destination is not None:
                written.append(
                    {
                        "tier": result.document.tier.value,
                        "path": str(result.destination),
                        "rules": len(result.document.codes),
                    }
                )

        if formatter.json_mode and written:
            formatter.json_output({"written": written})
        else:
            for item in written:
                print_success(f"Wrote {item['tier']} tier ({item['rules']} rules) to {item['path']}")
        return 0

    except Exception as e:
        return handle_error(formatter, e)


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
