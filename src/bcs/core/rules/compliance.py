"""Preparation of compliance-check requests for an external AI validator.

The engine only scopes and assembles the standard and pairs it with the
script under review. Judging compliance is the validator's job.
"""
from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

from bcs.core.utils.subprocess import run_with_timeout

from .assembler import assemble_selection
from .errors import BcsError, InvalidOptionError, NotFoundError
from .models import AssemblyOptions, Tier, parse_tier
from .selector import Filter
from .store import RuleStore

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("text", "json", "markdown")

_PROMPT = """\
You are reviewing a Bash script for compliance with the Bash Coding Standard.
The standard ({tier} tier) is given first, then the script.

Report every violation with its BCS code, the script line number, and a
short fix. {strictness}
Respond in {fmt_description}.

=== BASH CODING STANDARD ===
{standard}
=== END STANDARD ===

=== SCRIPT: {script_name} ===
{script}
=== END SCRIPT ===
"""

_FORMAT_DESCRIPTIONS = {
    "text": "plain text",
    "json": 'a single JSON object {"compliant": bool, "violations": [{"code", "line", "message", "fix"}]}',
    "markdown": "markdown with one section per violation",
}


@dataclass(frozen=True)
class ComplianceRequest:
    tier: Tier
    script_path: Path
    script_text: str
    standard_text: str
    prompt: str
    output_format: str = "text"
    strict: bool = False


def read_script(script_path: Optional[Union[str, Path]]) -> tuple[Path, str]:
    """Read the script to check.

    Raises:
        NotFoundError: If no path was given or the file does not exist
        BcsError: If the file cannot be read
    """
    if not script_path:
        raise NotFoundError("No script file specified")
    path = Path(script_path)
    if not path.is_file():
        raise NotFoundError(f"Script file not found: {path}", paths=[path])
    if not os.access(path, os.R_OK):
        raise BcsError(f"Script file not readable: {path}", paths=[path])
    try:
        return path, path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise BcsError(f"Cannot read script file {path}: {exc}", paths=[path]) from exc


def prepare_request(
    store: RuleStore,
    script_path: Optional[Union[str, Path]],
    tier: Union[str, Tier],
    rule_filter: Optional[Filter] = None,
    *,
    strict: bool = False,
    output_format: str = "text",
    options: Optional[AssemblyOptions] = None,
) -> ComplianceRequest:
    """Assemble the scoped standard and build the validator prompt.

    Raises:
        InvalidOptionError: If ``output_format`` is unknown
        NotFoundError: If the script is missing
        EmptyFilterError: If ``rule_filter`` selects nothing
        DuplicateCodeError: If a selected code maps to several files
    """
    if output_format not in OUTPUT_FORMATS:
        raise InvalidOptionError(
            f"Invalid output format: {output_format} (expected one of: {', '.join(OUTPUT_FORMATS)})"
        )
    t = parse_tier(tier)
    path, script_text = read_script(script_path)
    standard = assemble_selection(store, rule_filter, t, options).text
    strictness = (
        "Treat warnings as violations; the script is compliant only if nothing is reported."
        if strict
        else "Separate hard violations from style warnings."
    )
    prompt = _PROMPT.format(
        tier=t.value,
        strictness=strictness,
        fmt_description=_FORMAT_DESCRIPTIONS[output_format],
        standard=standard.rstrip("\n"),
        script_name=path.name,
        script=script_text.rstrip("\n"),
    )
    logger.debug("Prepared compliance request for %s (%d chars)", path, len(prompt))
    return ComplianceRequest(
        tier=t,
        script_path=path,
        script_text=script_text,
        standard_text=standard,
        prompt=prompt,
        output_format=output_format,
        strict=strict,
    )


def run_validator(
    request: ComplianceRequest,
    command: str,
    args: Sequence[str] = (),
    *,
    timeout: float = 600,
) -> str:
    """Send ``request`` to the validator command and return its stdout.

    Raises:
        NotFoundError: If ``command`` is not on PATH
        BcsError: If the validator fails or times out
    """
    exe = shutil.which(command)
    if exe is None:
        raise NotFoundError(f"Validator command not found: {command}")
    try:
        proc = run_with_timeout([exe, *args], timeout=timeout, input=request.prompt)
    except subprocess.TimeoutExpired as exc:
        raise BcsError(f"Validator timed out after {timeout:.0f}s") from exc
    if proc.returncode != 0:
        detail = (proc.stderr or "").strip()
        raise BcsError(f"Validator exited with status {proc.returncode}" + (f": {detail}" if detail else ""))
    return proc.stdout


__all__ = ["OUTPUT_FORMATS", "ComplianceRequest", "read_script", "prepare_request", "run_validator"]
