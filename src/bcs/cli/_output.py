"""Unified CLI output formatting utilities.

Every BCS command prints through :class:`OutputFormatter`. Results go to
stdout; errors, violation reports and "no match" notices go to stderr so
that piping ``bcs decode -p`` or ``bcs generate`` stays clean.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional


class OutputFormatter:
    """Text or ``--json`` output for one command invocation."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON; otherwise output text
            indent: JSON indentation level
        """
        self.json_mode = json_mode
        self.indent = indent

    def success(
        self,
        data: Dict[str, Any],
        message: str,
        *,
        status: str = "success",
    ) -> None:
        """Output a result: ``data`` in JSON mode, ``message`` otherwise."""
        if self.json_mode:
            self.json_output({"status": status, **data})
        else:
            print(message)

    def error(
        self,
        error: Exception,
        message: Optional[str] = None,
        *,
        error_code: str = "error",
    ) -> None:
        """Report ``error`` on stderr.

        In JSON mode errors that know how to serialize themselves (``to_dict``)
        are emitted as-is, so the paths of duplicate or ambiguous codes survive.
        """
        msg = message or str(error)
        if not self.json_mode:
            print(f"Error: {msg}", file=sys.stderr)
            return
        to_dict = getattr(error, "to_dict", None)
        payload: Dict[str, Any] = to_dict() if callable(to_dict) else {"error": error_code}
        payload["message"] = msg
        if not payload.get("paths"):
            payload.pop("paths", None)
        print(json.dumps(payload, indent=self.indent, default=str), file=sys.stderr)

    def json_output(self, data: Any) -> None:
        print(json.dumps(data, indent=self.indent, default=str))

    def text(self, message: str) -> None:
        print(message)

    def notice(self, message: str) -> None:
        """Text-mode diagnostic on stderr; silent with ``--json``."""
        if not self.json_mode:
            print(message, file=sys.stderr)

    def raw(self, content: str) -> None:
        """Write ``content`` to stdout unchanged (no added newline)."""
        sys.stdout.write(content)
        sys.stdout.flush()


def print_success(message: str) -> None:
    """Print success message with checkmark."""
    print(f"✓ {message}")


__all__ = [
    "OutputFormatter",
    "print_success",
]
