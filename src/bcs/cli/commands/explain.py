"""
BCS explain command.

SUMMARY: Show the full text of a rule
"""

from __future__ import annotations

import argparse
import sys

from bcs.cli import OutputFormatter, add_json_flag, add_root_flags, add_tier_flags, build_context, handle_error
from bcs.core.rules.codes import normalize_code
from bcs.core.rules.models import parse_tier
from bcs.core.rules.query import explain

SUMMARY = "Show the full text of a rule"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument("code", help="BCS code, e.g. BCS0102")
    add_tier_flags(parser, help_default="explain.tier, complete")
    parser.add_argument(
        "--subrules",
        action="store_true",
        help="Append the text of every subrule below the code",
    )
    add_json_flag(parser)
    add_root_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        context = build_context(args)
        tier = args.tier or context.config.explain_tier
        text = explain(context.build_store(), args.code, tier, with_subrules=args.subrules)

        if formatter.json_mode:
            formatter.json_output({"code": normalize_code(args.code), "tier": parse_tier(tier).value, "text": text})
        else:
            formatter.raw(text)
        return 0

    except Exception as e:
        return handle_error(formatter, e)


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
