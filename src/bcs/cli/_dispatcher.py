"""
CLI dispatcher for BCS.

Commands form a closed set: each :class:`Command` member is bound to one
module under ``bcs.cli.commands`` exposing ``SUMMARY``, ``register_args``
and ``main``. Running ``bcs`` with no command displays the standard.
"""

from __future__ import annotations

import argparse
import importlib
import sys
from collections.abc import Callable
from contextlib import nullcontext
from enum import Enum
from types import ModuleType
from typing import Dict, Tuple

from bcs.core.utils.profiling import Profiler, enable_profiler, span


class Command(str, Enum):
    DISPLAY = "display"
    GENERATE = "generate"
    DECODE = "decode"
    SEARCH = "search"
    CODES = "codes"
    SECTIONS = "sections"
    EXPLAIN = "explain"
    DEFAULT = "default"
    VALIDATE = "validate"
    CHECK = "check"
    STATS = "stats"

    @property
    def module_name(self) -> str:
        return f"bcs.cli.commands.{self.value}"


COMMAND_ALIASES: Dict[Command, Tuple[str, ...]] = {
    Command.DISPLAY: ("show",),
    Command.GENERATE: ("gen",),
    Command.SEARCH: ("grep",),
    Command.CODES: ("list-codes",),
    Command.EXPLAIN: ("show-rule",),
    Command.STATS: ("about",),
}

DEFAULT_COMMAND = Command.DISPLAY


def load_command(command: Command) -> ModuleType:
    return importlib.import_module(command.module_name)


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser for every command.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="bcs",
        description="Bash Coding Standard - rule lookup, validation and document assembly",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Emit profiling information for store, assembly and command execution (sent to stderr).",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors")

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    for command in Command:
        module = load_command(command)
        cmd_parser = subparsers.add_parser(
            command.value,
            aliases=list(COMMAND_ALIASES.get(command, ())),
            help=module.SUMMARY,
            description=module.SUMMARY,
        )
        module.register_args(cmd_parser)
        cmd_parser.set_defaults(_func=module.main, _command=command)

    return parser


def _get_version() -> str:
    """Get BCS version string."""
    from bcs import __version__

    return __version__


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the BCS CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)

    with span("cli.parser.build"):
        parser = build_parser()
    args = parser.parse_args(argv)
    if getattr(args, "_func", None) is None:
        args = parser.parse_args([*argv, DEFAULT_COMMAND.value])

    profiler = Profiler() if args.profile else None
    ctx = enable_profiler(profiler) if profiler else nullcontext()

    result: int
    with ctx:
        func: Callable[[argparse.Namespace], int] = args._func
        try:
            with span("cli.command.exec", command=args._command.value):
                result = func(args)
        except KeyboardInterrupt:
            print("\nInterrupted.", file=sys.stderr)
            result = 130
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            result = 1

    if profiler is not None:
        print("\nProfiling (top spans):", file=sys.stderr)
        for line in profiler.report_lines():
            print(line, file=sys.stderr)

    return result


if __name__ == "__main__":
    sys.exit(main())
