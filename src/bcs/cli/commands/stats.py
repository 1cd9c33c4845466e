"""
BCS stats command.

SUMMARY: Show section, rule and canonical document counts
"""

from __future__ import annotations

import argparse
import sys

from bcs.cli import OutputFormatter, add_json_flag, add_root_flags, build_context, handle_error
from bcs.core.rules.query import corpus_stats

SUMMARY = "Show section, rule and canonical document counts"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_json_flag(parser)
    add_root_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        context = build_context(args)
        stats = corpus_stats(context)

        if formatter.json_mode:
            formatter.json_output(
                {
                    "sections": stats.sections,
                    "rules": {t.value: n for t, n in stats.rules.items()},
                    "documents": {
                        t.value: {"bytes": size, "lines": lines}
                        for t, (size, lines) in stats.documents.items()
                    },
                    "default_tier": stats.default_tier.value,
                }
            )
            return 0

        formatter.text("BCS corpus statistics")
        formatter.text(f"Sections: {stats.sections}")
        formatter.text("Rules:")
        for t, n in stats.rules.items():
            formatter.text(f"  {t.value}: {n}")
        if stats.documents:
            formatter.text("Canonical documents:")
            for t, (size, lines) in stats.documents.items():
                formatter.text(f"  {t.value}: {size} bytes, {lines} lines")
        else:
            formatter.text("Canonical documents: none")
        formatter.text(f"Default tier: {stats.default_tier.value}")
        return 0

    except Exception as e:
        return handle_error(formatter, e)


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
