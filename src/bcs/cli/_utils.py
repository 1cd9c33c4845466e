"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from bcs.core.config import BcsContext, load_context
from bcs.core.rules.errors import BcsError, ExitCode
from bcs.core.rules.selector import Filter
from bcs.core.stdlib_logging import configure_logging, suppress_lastresort_in_json_mode

from ._output import OutputFormatter

logger = logging.getLogger(__name__)


def get_repo_root(args: argparse.Namespace) -> Path:
    """Project directory from ``--repo-root`` or the current directory."""
    raw = getattr(args, "repo_root", None)
    return Path(raw).expanduser().resolve() if raw else Path.cwd().resolve()


def build_context(args: argparse.Namespace) -> BcsContext:
    """Load configuration and build the invocation context from parsed args.

    Also applies the logging level: ``--verbose`` / ``--quiet`` win over
    the configured ``logging.level``.
    """
    context = load_context(
        get_repo_root(args),
        corpus_root=getattr(args, "corpus_root", None),
    )
    if getattr(args, "json", False):
        suppress_lastresort_in_json_mode()
    if getattr(args, "verbose", False):
        configure_logging("DEBUG")
    elif getattr(args, "quiet", False):
        configure_logging("ERROR")
    else:
        configure_logging(context.config.log_level)
    logger.debug("Corpus root: %s", context.corpus_root)
    return context


def filter_from_args(args: argparse.Namespace) -> Optional[Filter]:
    tokens = list(getattr(args, "selectors", None) or [])
    sections = list(getattr(args, "sections", None) or [])
    if not tokens and not sections:
        return None
    return Filter.parse([*tokens, *sections])


def display_path(path: Path, args: argparse.Namespace, context: BcsContext) -> str:
    """Path relative to the project directory, else to the corpus parent."""
    for base in (get_repo_root(args), context.corpus_root.parent):
        try:
            return path.relative_to(base).as_posix()
        except ValueError:
            continue
    return str(path)


def handle_error(formatter: OutputFormatter, exc: Exception) -> int:
    """Report ``exc`` and return the exit code the command should use."""
    if isinstance(exc, BcsError):
        formatter.error(exc, error_code=exc.error_code)
        return int(exc.exit_code)
    formatter.error(exc, error_code="error")
    return int(ExitCode.ERROR)


__all__ = [
    "get_repo_root",
    "build_context",
    "filter_from_args",
    "display_path",
    "handle_error",
]
