"""
BCS codes command.

SUMMARY: List every BCS code with its slug and title
"""

from __future__ import annotations

import argparse
import sys

from bcs.cli import OutputFormatter, add_json_flag, add_root_flags, add_tier_flags, build_context, handle_error
from bcs.core.rules.query import list_codes

SUMMARY = "List every BCS code with its slug and title"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_tier_flags(parser, help_default="listing.tier, abstract")
    add_json_flag(parser)
    add_root_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Print ``BCS0102:shebang:Title`` lines in corpus order."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        context = build_context(args)
        tier = args.tier or context.config.listing_tier
        entries = list_codes(context.build_store(), tier)

        if formatter.json_mode:
            formatter.json_output(
                [{"code": e.code, "slug": e.slug, "title": e.title, "path": str(e.path)} for e in entries]
            )
        else:
            for entry in entries:
                formatter.text(entry.format())
        return 0

    except Exception as e:
        return handle_error(formatter, e)


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
