"""
BCS validate command.

SUMMARY: Check corpus naming, code uniqueness and tier completeness
"""

from __future__ import annotations

import argparse
import sys

from bcs.cli import OutputFormatter, add_json_flag, add_root_flags, build_context, handle_error, print_success
from bcs.core.rules.errors import ExitCode

SUMMARY = "Check corpus naming, code uniqueness and tier completeness"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat warnings (oversized rules) as errors",
    )
    add_json_flag(parser)
    add_root_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Report every violation; exit 4 when any error (or warning with --strict) exists."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        context = build_context(args)
        store = context.build_store()
        violations = store.validate(
            required_tiers=context.config.required_tiers,
            size_limits=context.config.size_limits,
        )
        errors = [v for v in violations if not v.is_warning]
        warnings = [v for v in violations if v.is_warning]
        failed = bool(errors) or (args.strict and bool(warnings))

        if formatter.json_mode:
            formatter.json_output(
                {
                    "root": str(context.corpus_root),
                    "files": len(store),
                    "valid": not failed,
                    "errors": [v.to_dict() for v in errors],
                    "warnings": [v.to_dict() for v in warnings],
                }
            )
        else:
            for v in errors:
                formatter.notice(f"✗ {v}")
            for v in warnings:
                formatter.notice(f"⚠ {v}")
            if not failed:
                print_success(
                    f"{len(store)} rule files valid"
                    + (f" ({len(warnings)} warnings)" if warnings else "")
                )
            else:
                formatter.text(f"{len(errors)} errors, {len(warnings)} warnings")

        return int(ExitCode.VALIDATION) if failed else 0

    except Exception as e:
        return handle_error(formatter, e)


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
