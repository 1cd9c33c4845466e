"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse

from bcs.core.rules.models import Tier


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode.

    Args:
        parser: ArgumentParser to add the flag to
    """
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_root_flags(parser: argparse.ArgumentParser) -> None:
    """Add --repo-root and --root overrides.

    Args:
        parser: ArgumentParser to add the flags to
    """
    parser.add_argument(
        "--repo-root",
        type=str,
        help="Project directory used for configuration lookup (default: cwd)",
    )
    parser.add_argument(
        "--root",
        dest="corpus_root",
        type=str,
        help="Rule corpus directory (default: corpus.root or ./data)",
    )


def add_tier_flags(parser: argparse.ArgumentParser, *, help_default: str = "default tier") -> None:
    """Add -t/--tier plus the -a/-s/-c/-r shortcuts, all writing ``args.tier``.

    Args:
        parser: ArgumentParser to add the flags to
        help_default: Description of the tier used when none is given
    """
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "-t",
        "--tier",
        choices=[t.value for t in Tier],
        default=None,
        help=f"Tier to use (default: {help_default})",
    )
    for short, tier in (("-a", Tier.ABSTRACT), ("-s", Tier.SUMMARY), ("-c", Tier.COMPLETE), ("-r", Tier.RULET)):
        group.add_argument(
            short,
            f"--{tier.value}",
            dest="tier",
            action="store_const",
            const=tier.value,
            help=f"Use the {tier.value} tier",
        )


def add_filter_args(parser: argparse.ArgumentParser) -> None:
    """Add rule selectors: positional codes/section numbers and --section.

    Args:
        parser: ArgumentParser to add the arguments to
    """
    parser.add_argument(
        "selectors",
        nargs="*",
        metavar="CODE|SECTION",
        help="BCS codes (prefix match) or section numbers to include",
    )
    parser.add_argument(
        "--section",
        "-S",
        dest="sections",
        action="append",
        type=int,
        default=[],
        help="Include a whole section by number (repeatable)",
    )


def add_dry_run_flag(parser: argparse.ArgumentParser) -> None:
    """Add --dry-run flag.

    Args:
        parser: ArgumentParser to add the flag to
    """
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Preview without performing the action",
    )


__all__ = [
    "add_json_flag",
    "add_root_flags",
    "add_tier_flags",
    "add_filter_args",
    "add_dry_run_flag",
]
