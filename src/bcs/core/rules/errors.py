"""
Exception classes for the BCS rule corpus.

Every error raised by the engine derives from :class:`BcsError`, which
carries the process exit code the CLI should return and a severity.
``RuleStore.validate()`` returns instances of these classes instead of
raising them, so a single report can list every problem in the corpus.
"""
from __future__ import annotations

from enum import IntEnum
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple


class ExitCode(IntEnum):
    """Process exit codes used by the CLI."""

    OK = 0
    ERROR = 1
    USAGE = 2
    NOT_FOUND = 3
    VALIDATION = 4
    WRITE_CONFLICT = 5


class BcsError(Exception):
    """Base class for all BCS errors."""

    exit_code: ExitCode = ExitCode.ERROR
    severity: str = "error"
    error_code: str = "error"

    def __init__(self, message: str, *, paths: Iterable[Path] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.paths: Tuple[Path, ...] = tuple(Path(p) for p in paths)

    @property
    def is_warning(self) -> bool:
        return self.severity == "warning"

    def to_dict(self) -> dict:
        return {
            "error": self.error_code,
            "severity": self.severity,
            "message": self.message,
            "paths": [str(p) for p in self.paths],
        }


class ConfigError(BcsError):
    """Raised when the layered configuration is invalid."""

    error_code = "config_error"


class NotFoundError(BcsError, LookupError):
    """No file exists for the requested code, tier or path."""

    exit_code = ExitCode.NOT_FOUND
    error_code = "not_found"


class AmbiguousCodeError(BcsError):
    """More than one file resolves to the same code for one tier."""

    exit_code = ExitCode.VALIDATION
    error_code = "ambiguous_code"

    def __init__(self, code: str, tier: str, paths: Sequence[Path]) -> None:
        listing = ", ".join(str(p) for p in paths)
        super().__init__(
            f"Code {code} is ambiguous in tier '{tier}': {listing}", paths=paths
        )
        self.code = code
        self.tier = tier


class DuplicateCodeError(BcsError):
    """Two or more files encode to the same code within one tier."""

    exit_code = ExitCode.VALIDATION
    error_code = "duplicate_code"

    def __init__(self, code: str, tier: str, paths: Sequence[Path]) -> None:
        listing = ", ".join(str(p) for p in paths)
        super().__init__(
            f"Duplicate code {code} in tier '{tier}': {listing}", paths=paths
        )
        self.code = code
        self.tier = tier


class MalformedPrefixError(BcsError, ValueError):
    """A path segment carries a numeric prefix that is not two plain digits."""

    exit_code = ExitCode.VALIDATION
    error_code = "malformed_prefix"

    def __init__(self, path: Path, segment: str, reason: Optional[str] = None) -> None:
        detail = reason or "numeric prefix must be exactly two digits"
        super().__init__(
            f"Malformed prefix '{segment}' in {path}: {detail}", paths=[path]
        )
        self.segment = segment


class EmptyFilterError(BcsError):
    """A non-empty filter matched no rule."""

    exit_code = ExitCode.VALIDATION
    error_code = "empty_filter"


class WriteConflictError(BcsError):
    """Refused to overwrite the canonical document."""

    exit_code = ExitCode.WRITE_CONFLICT
    error_code = "write_conflict"


class InvalidCodeError(BcsError, ValueError):
    exit_code = ExitCode.VALIDATION
    error_code = "invalid_code"


class InvalidPatternError(BcsError, ValueError):
    exit_code = ExitCode.VALIDATION
    error_code = "invalid_pattern"


class InvalidOptionError(BcsError, ValueError):
    exit_code = ExitCode.USAGE
    error_code = "invalid_option"


class MissingTierError(BcsError):
    """A code exists in one required tier but not in another."""

    exit_code = ExitCode.VALIDATION
    error_code = "missing_tier"

    def __init__(self, code: str, tier: str, present: Sequence[Path]) -> None:
        super().__init__(
            f"Code {code} has no '{tier}' tier file (present: "
            + ", ".join(str(p) for p in present)
            + ")",
            paths=present,
        )
        self.code = code
        self.tier = tier


class MissingSectionIntroError(BcsError):
    """A section directory lacks its 00- intro file for a tier."""

    exit_code = ExitCode.VALIDATION
    error_code = "missing_section_intro"

    def __init__(self, directory: Path, tier: str) -> None:
        super().__init__(
            f"Section {directory} has no 00-*.{tier}.md intro file", paths=[directory]
        )
        self.tier = tier


class OversizedRuleWarning(BcsError):
    """A rule file is larger than the configured limit for its tier."""

    severity = "warning"
    error_code = "oversized_rule"

    def __init__(self, path: Path, tier: str, size: int, limit: int) -> None:
        super().__init__(
            f"{path} is {size} bytes, over the {limit} byte limit for '{tier}'",
            paths=[path],
        )
        self.size = size
        self.limit = limit


__all__ = [
    "ExitCode",
    "BcsError",
    "ConfigError",
    "NotFoundError",
    "AmbiguousCodeError",
    "DuplicateCodeError",
    "MalformedPrefixError",
    "EmptyFilterError",
    "WriteConflictError",
    "InvalidCodeError",
    "InvalidPatternError",
    "InvalidOptionError",
    "MissingTierError",
    "MissingSectionIntroError",
    "OversizedRuleWarning",
]
