"""Mapping between BCS codes and corpus paths.

A code is ``BCS`` followed by the two-digit numeric prefix of every
numbered path component, outermost first::

    01-script-structure/02-shebang.abstract.md                -> BCS0102
    01-script-structure/02-shebang/01-dual-purpose.abstract.md -> BCS010201
    00-header.abstract.md                                      -> BCS00

Decoding walks the directory tree one group at a time instead of matching
filename globs, so a rule file and the subrule directory that shares its
number are never confused.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .errors import AmbiguousCodeError, InvalidCodeError, MalformedPrefixError, NotFoundError
from .models import Tier, parse_tier

logger = logging.getLogger(__name__)

CODE_PREFIX = "BCS"

_TIER_SUFFIX_RE = re.compile(r"\.(abstract|complete|summary|rulet)\.md$")
_NUMERIC_PREFIX_RE = re.compile(r"^(\d+)([A-Za-z]*)-", re.ASCII)
_SEGMENT_RE = re.compile(r"^(\d{2})-", re.ASCII)
_CODE_DIGITS_RE = re.compile(r"(?:\d{2})+", re.ASCII)


def parse_tier_suffix(name: str) -> Optional[Tuple[str, Tier]]:
    """Split ``name`` into its stem and tier, or return None if it has no tier suffix."""
    m = _TIER_SUFFIX_RE.search(name)
    if not m:
        return None
    return name[: m.start()], Tier(m.group(1))


def segment_number(name: str) -> Optional[str]:
    """Return the two-digit prefix of a well-formed path component."""
    m = _SEGMENT_RE.match(name)
    return m.group(1) if m else None


def check_segment(path: Path, name: str) -> Optional[str]:
    """Return the numeric prefix of ``name``; raise if it is malformed.

    Components without any leading digits return None and are not part of
    the code.
    """
    m = _NUMERIC_PREFIX_RE.match(name)
    if not m:
        return None
    digits, suffix = m.groups()
    if suffix:
        raise MalformedPrefixError(path, name, f"alphabetic suffix '{suffix}' after the number")
    if len(digits) != 2:
        raise MalformedPrefixError(path, name)
    return digits


def slug_of(name: str) -> str:
    parsed = parse_tier_suffix(name)
    stem = parsed[0] if parsed else name
    m = _NUMERIC_PREFIX_RE.match(stem)
    return stem[m.end():] if m else stem


def encode(path: Union[str, Path], root: Optional[Union[str, Path]] = None) -> str:
    """Derive the BCS code for ``path``.

    Args:
        path: Rule file or directory path
        root: Corpus root; when given only components below it count

    Raises:
        MalformedPrefixError: If a component has a malformed numeric prefix
            or the path has no numbered component at all
    """
    p = Path(path)
    parts = p.relative_to(root).parts if root is not None else p.parts
    if not parts:
        raise MalformedPrefixError(p, str(p), "empty path")

    last = parts[-1]
    parsed = parse_tier_suffix(last)
    if parsed:
        parts = parts[:-1] + (parsed[0],)

    groups: List[str] = []
    for part in parts:
        digits = check_segment(p, part)
        if digits is not None:
            groups.append(digits)
    if not groups:
        raise MalformedPrefixError(p, last, "no numbered path component")
    return CODE_PREFIX + "".join(groups)


def normalize_code(raw: str) -> str:
    """Canonicalize user input such as ``bcs0102`` or ``0102`` to ``BCS0102``."""
    s = str(raw or "").strip()
    if s[:3].upper() == CODE_PREFIX:
        s = s[3:]
    if not _CODE_DIGITS_RE.fullmatch(s):
        raise InvalidCodeError(
            f"Invalid BCS code: '{raw}' (expected BCS followed by pairs of digits)"
        )
    return CODE_PREFIX + s


def split_code(code: str) -> Tuple[str, ...]:
    digits = normalize_code(code)[len(CODE_PREFIX):]
    return tuple(digits[i : i + 2] for i in range(0, len(digits), 2))


def _entries(directory: Path) -> List[Path]:
    return sorted(p for p in directory.iterdir() if not p.name.startswith("."))


def _tier_files(directory: Path, number: str, suffix: str) -> List[Path]:
    return [
        p
        for p in _entries(directory)
        if p.is_file() and segment_number(p.name) == number and p.name.endswith(suffix)
    ]


def decode(root: Union[str, Path], code: str, tier: Union[str, Tier]) -> Path:
    """Resolve ``code`` to the single file holding it for ``tier``.

    When the last group only names a directory, that directory's ``00-``
    intro file is returned, so ``BCS01`` and ``BCS0100`` both decode to the
    section intro.

    Raises:
        InvalidCodeError: If ``code`` is not a well-formed code
        NotFoundError: If no file exists for the code and tier
        AmbiguousCodeError: If more than one file matches
    """
    root = Path(root)
    tier = parse_tier(tier)
    canonical = normalize_code(code)
    groups = split_code(canonical)
    suffix = f".{tier.value}.md"

    dirs: List[Path] = [root]
    for index, group in enumerate(groups):
        is_last = index == len(groups) - 1
        next_dirs: List[Path] = []
        files: List[Path] = []
        for directory in dirs:
            for entry in _entries(directory):
                if segment_number(entry.name) != group:
                    continue
                if entry.is_dir():
                    next_dirs.append(entry)
                elif is_last and entry.name.endswith(suffix):
                    files.append(entry)

        if is_last:
            if not files:
                for directory in next_dirs:
                    files.extend(_tier_files(directory, "00", suffix))
            if not files:
                raise NotFoundError(f"{canonical} not found for tier '{tier.value}'")
            if len(files) > 1:
                raise AmbiguousCodeError(canonical, tier.value, files)
            logger.debug("Decoded %s (%s) -> %s", canonical, tier.value, files[0])
            return files[0]

        if not next_dirs:
            raise NotFoundError(f"{canonical} not found for tier '{tier.value}'")
        dirs = next_dirs

    raise NotFoundError(f"{canonical} not found for tier '{tier.value}'")


__all__ = [
    "CODE_PREFIX",
    "parse_tier_suffix",
    "segment_number",
    "check_segment",
    "slug_of",
    "encode",
    "normalize_code",
    "split_code",
    "decode",
]
