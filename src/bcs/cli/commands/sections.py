"""
BCS sections command.

SUMMARY: List the numbered sections of the standard
"""

from __future__ import annotations

import argparse
import sys

from bcs.cli import OutputFormatter, add_json_flag, add_root_flags, add_tier_flags, build_context, handle_error
from bcs.core.rules.query import list_sections

SUMMARY = "List the numbered sections of the standard"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_tier_flags(parser, help_default="listing.tier, abstract")
    add_json_flag(parser)
    add_root_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        context = build_context(args)
        tier = args.tier or context.config.listing_tier
        sections = list_sections(context.build_store(), tier)

        if formatter.json_mode:
            formatter.json_output(
                [{"number": s.number, "code": s.code, "slug": s.slug, "title": s.title} for s in sections]
            )
        else:
            for section in sections:
                formatter.text(f"{section.number}. {section.title}")
        return 0

    except Exception as e:
        return handle_error(formatter, e)


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
