"""
BCS default command.

SUMMARY: Show or set the default tier
"""

from __future__ import annotations

import argparse
import sys

from bcs.cli import (
    OutputFormatter,
    add_json_flag,
    add_root_flags,
    build_context,
    display_path,
    handle_error,
)
from bcs.core.rules.canonical import (
    available_tiers,
    read_symlink_tier,
    resolve_default_tier,
    set_default_tier,
    symlink_path,
)
from bcs.core.rules.models import Tier, parse_tier

SUMMARY = "Show or set the default tier"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "new_tier",
        nargs="?",
        metavar="TIER",
        help="Tier to make the default (" + ", ".join(t.value for t in Tier) + ")",
    )
    parser.add_argument("-l", "--list", dest="list_tiers", action="store_true", help="List tiers, marking the default with *")
    parser.add_argument("-f", "--file", dest="show_file", action="store_true", help="Show the default symlink path")
    add_json_flag(parser)
    add_root_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        context = build_context(args)

        if args.new_tier:
            tier = parse_tier(args.new_tier)
            link = set_default_tier(context, tier)
            formatter.success(
                {"tier": tier.value, "symlink": str(link)},
                f"✓ Default tier set to {tier.value}",
            )
            return 0

        current = resolve_default_tier(context)
        link = symlink_path(context.corpus_root, context.config.symlink_name)

        if args.list_tiers:
            present = available_tiers(context)
            if formatter.json_mode:
                formatter.json_output({"default": current.value, "available": [t.value for t in present]})
            else:
                for t in present:
                    marker = "*" if t is current else " "
                    formatter.text(f"{marker} {t.value}")
            return 0

        if args.show_file:
            formatter.success({"symlink": str(link)}, display_path(link, args, context))
            return 0

        linked = read_symlink_tier(context.corpus_root, context.config.symlink_name)
        formatter.success(
            {"default": current.value, "symlink_tier": linked.value if linked else None},
            current.value,
        )
        return 0

    except Exception as e:
        return handle_error(formatter, e)


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
