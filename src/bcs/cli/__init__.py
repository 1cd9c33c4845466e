"""
BCS CLI package.

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities
- _dispatcher: argparse entry point over the closed command set
"""
from ._output import OutputFormatter, print_success
from ._args import (
    add_json_flag,
    add_root_flags,
    add_tier_flags,
    add_filter_args,
    add_dry_run_flag,
)
from ._utils import (
    get_repo_root,
    build_context,
    filter_from_args,
    display_path,
    handle_error,
)

__all__ = [
    # Output formatting
    "OutputFormatter",
    "print_success",
    # Argument helpers
    "add_json_flag",
    "add_root_flags",
    "add_tier_flags",
    "add_filter_args",
    "add_dry_run_flag",
    # Utilities
    "get_repo_root",
    "build_context",
    "filter_from_args",
    "display_path",
    "handle_error",
]
