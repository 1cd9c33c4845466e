"""
BCS check command.

SUMMARY: Check a Bash script for compliance using an external AI validator
"""

from __future__ import annotations

import argparse
import sys

from bcs.cli import (
    OutputFormatter,
    add_dry_run_flag,
    add_root_flags,
    add_tier_flags,
    build_context,
    filter_from_args,
    handle_error,
)
from bcs.core.rules.canonical import resolve_default_tier
from bcs.core.rules.compliance import prepare_request, run_validator

SUMMARY = "Check a Bash script for compliance using an external AI validator"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument("script", nargs="?", help="Bash script to check")
    add_tier_flags(parser)
    parser.add_argument(
        "--code",
        dest="selectors",
        action="append",
        default=[],
        metavar="CODE",
        help="Limit the standard to codes with this prefix (repeatable)",
    )
    parser.add_argument(
        "--section",
        "-S",
        dest="sections",
        action="append",
        type=int,
        default=[],
        help="Limit the standard to a section (repeatable)",
    )
    parser.add_argument("--strict", action="store_true", help="Report warnings as violations")
    parser.add_argument(
        "--format",
        dest="output_format",
        default=None,
        help="Validator output format: text, json or markdown (default: compliance.output_format)",
    )
    parser.add_argument(
        "--claude-cmd",
        "--validator-cmd",
        dest="validator_cmd",
        default=None,
        help="Validator executable (default: compliance.command)",
    )
    parser.add_argument("--timeout", type=float, default=None, help="Validator timeout in seconds")
    add_dry_run_flag(parser)
    add_root_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Prepare the request and print the validator's reply verbatim."""
    formatter = OutputFormatter()

    try:
        context = build_context(args)
        cfg = context.config
        request = prepare_request(
            context.build_store(),
            args.script,
            resolve_default_tier(context, args.tier),
            filter_from_args(args),
            strict=args.strict,
            output_format=args.output_format or cfg.compliance_output_format,
            options=cfg.assembly,
        )
        if args.dry_run:
            formatter.raw(request.prompt)
            return 0

        reply = run_validator(
            request,
            args.validator_cmd or cfg.compliance_command,
            cfg.compliance_args,
            timeout=args.timeout or cfg.compliance_timeout,
        )
        formatter.raw(reply if reply.endswith("\n") else reply + "\n")
        return 0

    except Exception as e:
        return handle_error(formatter, e)


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
