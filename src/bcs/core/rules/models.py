"""
Data models for the BCS rule corpus.

This module defines the value types shared by the store, selector,
assembler and query layers:
- Tier: detail level of a rule file
- RuleFile: one indexed markdown file of the corpus
- Section: a top-level section directory
- CodeEntry: one line of the code listing
- Match: one search hit with its context
- AssemblyOptions: header, separator and footer framing
- CanonicalDocument: an assembled document for one tier
- CorpusStats: counts for the stats view
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from pathlib import Path
from typing import Dict, Optional, Tuple

from .errors import InvalidOptionError


class Tier(str, Enum):
    ABSTRACT = "abstract"
    COMPLETE = "complete"
    SUMMARY = "summary"
    RULET = "rulet"


def parse_tier(raw: "Optional[str | Tier]") -> Tier:
    if isinstance(raw, Tier):
        return raw
    v = str(raw or "").strip().lower()
    for t in Tier:
        if v == t.value:
            return t
    raise InvalidOptionError(
        f"Invalid tier: {raw} (expected one of: "
        + ", ".join(t.value for t in Tier)
        + ")"
    )


@dataclass(frozen=True)
class RuleFile:
    """A single tier file of the corpus.

    Attributes:
        path: Absolute filesystem path
        relpath: POSIX path relative to the corpus root
        segments: Two-digit numeric groups, outermost first
        tier: Detail tier of this file
        code: BCS code derived from ``segments``
        slug: Filename slug without numeric prefix and tier suffix
    """

    path: Path
    relpath: str
    segments: Tuple[str, ...]
    tier: Tier
    code: str
    slug: str

    @cached_property
    def text(self) -> str:
        return self.path.read_text(encoding="utf-8")

    @property
    def size(self) -> int:
        return self.path.stat().st_size

    @property
    def is_header(self) -> bool:
        return self.segments == ("00",)

    @property
    def is_section_intro(self) -> bool:
        return len(self.segments) == 2 and self.segments[1] == "00"


@dataclass(frozen=True)
class Section:
    number: int
    code: str
    slug: str
    title: str
    path: Path


@dataclass(frozen=True)
class CodeEntry:
    code: str
    slug: str
    title: str
    path: Path

    def format(self) -> str:
        return f"{self.code}:{self.slug}:{self.title}"


@dataclass(frozen=True)
class Match:
    """A search hit.

    ``before`` and ``after`` hold ``(line_number, line)`` pairs of context.
    """

    line_number: int
    line: str
    before: Tuple[Tuple[int, str], ...] = ()
    after: Tuple[Tuple[int, str], ...] = ()


@dataclass(frozen=True)
class AssemblyOptions:
    """Framing emitted around each rule body.

    ``header`` is formatted with ``code``, ``slug`` and ``path`` (the
    corpus-relative path). An empty header or footer is omitted.
    """

    header: str = "<!-- {code} -->"
    separator: str = "\n"
    footer: str = "#fin"


@dataclass(frozen=True)
class CanonicalDocument:
    tier: Tier
    text: str
    codes: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CorpusStats:
    """Size of a corpus.

    ``rules`` counts distinct codes per tier; ``documents`` maps each tier
    with a canonical document on disk to its ``(bytes, lines)``.
    """

    sections: int
    rules: Dict[Tier, int]
    documents: Dict[Tier, Tuple[int, int]]
    default_tier: Tier


__all__ = [
    "Tier",
    "parse_tier",
    "RuleFile",
    "Section",
    "CodeEntry",
    "Match",
    "AssemblyOptions",
    "CanonicalDocument",
    "CorpusStats",
]
