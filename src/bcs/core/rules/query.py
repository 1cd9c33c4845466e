"""Read-only queries over the rule corpus.

Every function is a stateless function of a :class:`RuleStore` (or an
assembled document) and its arguments.
"""
from __future__ import annotations

import logging
import re
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple, Union

from . import codes as code_map
from .assembler import assemble_selection
from .canonical import available_tiers, context_canonical_path, resolve_default_tier
from .errors import AmbiguousCodeError, InvalidCodeError, InvalidPatternError, NotFoundError
from .models import CanonicalDocument, CodeEntry, CorpusStats, Match, Section, Tier, parse_tier
from .selector import Filter, select
from .store import RuleStore

if TYPE_CHECKING:
    from bcs.core.config.context import BcsContext

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^#{1,6}\s+(.+?)\s*#*\s*$")
_BOLD_RE = re.compile(r"^\*\*(.+?)\*\*")
_SECTION_NUMBERING_RE = re.compile(r"^(?:section\s+)?\d+(?:\.\d+)*[.:)]?\s+", re.IGNORECASE)

ALL_TIERS_ORDER = (Tier.COMPLETE, Tier.ABSTRACT, Tier.SUMMARY, Tier.RULET)


class DecodeMode(str, Enum):
    PATH = "path"
    PRINT = "print"
    EXISTS = "exists"


# ---------- search ----------


def search(
    document: Union[str, CanonicalDocument],
    pattern: str,
    *,
    ignore_case: bool = False,
    context_lines: int = 0,
    fixed: bool = False,
) -> List[Match]:
    """Find lines of ``document`` matching ``pattern``.

    Line numbers are 1-based and matches come back in document order.

    Raises:
        InvalidPatternError: If ``pattern`` is not a valid regular expression
    """
    text = document.text if isinstance(document, CanonicalDocument) else document
    if context_lines < 0:
        raise InvalidPatternError(f"Context lines must be >= 0, got {context_lines}")
    flags = re.IGNORECASE if ignore_case else 0
    try:
        rx = re.compile(re.escape(pattern) if fixed else pattern, flags)
    except re.error as exc:
        raise InvalidPatternError(f"Invalid search pattern '{pattern}': {exc}") from exc

    lines = text.splitlines()
    matches: List[Match] = []
    for i, line in enumerate(lines):
        if not rx.search(line):
            continue
        lo = max(0, i - context_lines)
        hi = min(len(lines), i + 1 + context_lines)
        matches.append(
            Match(
                line_number=i + 1,
                line=line,
                before=tuple((j + 1, lines[j]) for j in range(lo, i)),
                after=tuple((j + 1, lines[j]) for j in range(i + 1, hi)),
            )
        )
    return matches


def format_matches(matches: List[Match]) -> List[str]:
    """Render matches grep-style: ``N:line`` for hits, ``N-line`` for context."""
    hits = {m.line_number: m.line for m in matches}
    rows: Dict[int, str] = {}
    for m in matches:
        for n, line in m.before + m.after:
            rows.setdefault(n, f"{n}-{line}")
    for n, line in hits.items():
        rows[n] = f"{n}:{line}"

    has_context = any(m.before or m.after for m in matches)
    out: List[str] = []
    prev: Optional[int] = None
    for n in sorted(rows):
        if has_context and prev is not None and n > prev + 1:
            out.append("--")
        out.append(rows[n])
        prev = n
    return out


def load_search_document(
    context: "BcsContext",
    tier: Union[str, Tier],
    *,
    fresh: bool = False,
    store: Optional[RuleStore] = None,
) -> str:
    """Return the text to search for ``tier``.

    The on-disk canonical document is used when present; otherwise (or with
    ``fresh``) the corpus is assembled in memory.

    Raises:
        DuplicateCodeError: If a fresh assembly meets a non-unique code
    """
    t = parse_tier(tier)
    path = context_canonical_path(context, t)
    if not fresh and path.is_file():
        logger.debug("Searching canonical document %s", path)
        return path.read_text(encoding="utf-8")
    st = store or context.build_store()
    logger.debug("Searching freshly assembled %s tier", t.value)
    return assemble_selection(st, None, t, context.config.assembly).text


# ---------- decode ----------


def decode(
    store: RuleStore,
    code: str,
    tier: Union[str, Tier],
    mode: Union[str, DecodeMode] = DecodeMode.PATH,
) -> Union[Path, str, bool]:
    """Resolve ``code`` for ``tier``.

    Returns the file path (``path``), its content (``print``), or whether it
    exists (``exists``). ``exists`` reports a missing, malformed or
    ambiguous code as False instead of raising.
    """
    m = DecodeMode(mode)
    if m is DecodeMode.EXISTS:
        try:
            code_map.decode(store.root, code, tier)
        except (NotFoundError, InvalidCodeError, AmbiguousCodeError):
            return False
        return True
    path = code_map.decode(store.root, code, tier)
    if m is DecodeMode.PRINT:
        return path.read_text(encoding="utf-8")
    return path


def decode_all_tiers(
    store: RuleStore,
    code: str,
    mode: Union[str, DecodeMode] = DecodeMode.PATH,
) -> Dict[Tier, Union[Path, str]]:
    """Decode ``code`` in every tier where it exists.

    Raises:
        NotFoundError: If the code exists in no tier
    """
    m = DecodeMode(mode)
    if m is DecodeMode.EXISTS:
        raise ValueError("decode_all_tiers does not support exists mode")
    out: Dict[Tier, Union[Path, str]] = {}
    for t in ALL_TIERS_ORDER:
        try:
            out[t] = decode(store, code, t, m)  # type: ignore[assignment]
        except NotFoundError:
            continue
    if not out:
        raise NotFoundError(f"{code_map.normalize_code(code)} not found in any tier")
    return out


# ---------- listings ----------


def humanize_slug(slug: str) -> str:
    return " ".join(w.capitalize() for w in slug.split("-") if w)


def extract_title(text: str) -> str:
    """Return the first markdown heading (or leading bold text) of ``text``."""
    bold: Optional[str] = None
    for line in text.splitlines():
        m = _HEADING_RE.match(line)
        if m:
            return m.group(1).strip()
        if bold is None:
            b = _BOLD_RE.match(line.strip())
            if b:
                bold = b.group(1).strip()
    return bold or ""


def list_codes(store: RuleStore, tier: Union[str, Tier] = Tier.ABSTRACT) -> List[CodeEntry]:
    """One entry per code of ``tier``, in corpus order.

    Raises:
        DuplicateCodeError: If any code in ``tier`` is duplicated
    """
    t = parse_tier(tier)
    duplicates = store.duplicates(t)
    if duplicates:
        raise duplicates[0]
    return [
        CodeEntry(
            code=rec.code,
            slug=rec.slug,
            title=extract_title(rec.text) or humanize_slug(rec.slug),
            path=rec.path,
        )
        for rec in store.records_for_tier(t)
    ]


def list_sections(store: RuleStore, tier: Union[str, Tier] = Tier.ABSTRACT) -> List[Section]:
    """Top-level sections with titles taken from their intro files."""
    t = parse_tier(tier)
    intros = {
        rec.path.parent: rec
        for rec in store.records_for_tier(t)
        if rec.is_section_intro
    }
    sections: List[Section] = []
    for directory in store.section_dirs:
        number = code_map.segment_number(directory.name)
        if number is None:
            continue
        slug = code_map.slug_of(directory.name)
        intro = intros.get(directory)
        title = extract_title(intro.text) if intro is not None else ""
        title = _SECTION_NUMBERING_RE.sub("", title).strip() or humanize_slug(slug)
        sections.append(
            Section(
                number=int(number),
                code=f"{code_map.CODE_PREFIX}{number}",
                slug=slug,
                title=title,
                path=directory,
            )
        )
    return sections


def explain(
    store: RuleStore,
    code: str,
    tier: Union[str, Tier] = Tier.COMPLETE,
    *,
    with_subrules: bool = False,
) -> str:
    """Return the text of one rule, optionally followed by its subrules."""
    path = code_map.decode(store.root, code, tier)
    text = path.read_text(encoding="utf-8")
    if not with_subrules:
        return text
    canonical = code_map.normalize_code(code)
    parts = [text]
    for rec in select(store, Filter(codes=(canonical,)), tier):
        if rec.path == path:
            continue
        parts.append(rec.text)
    return "\n".join(p if p.endswith("\n") else p + "\n" for p in parts)


def corpus_stats(context: "BcsContext", store: Optional[RuleStore] = None) -> CorpusStats:
    """Section and rule counts plus the size of every canonical document."""
    st = store or context.build_store()
    documents: Dict[Tier, Tuple[int, int]] = {}
    for t in available_tiers(context):
        data = context_canonical_path(context, t).read_bytes()
        documents[t] = (len(data), data.count(b"\n"))
    return CorpusStats(
        sections=st.section_count(),
        rules={t: len(st.codes(t)) for t in Tier},
        documents=documents,
        default_tier=resolve_default_tier(context, None),
    )


__all__ = [
    "DecodeMode",
    "ALL_TIERS_ORDER",
    "search",
    "format_matches",
    "load_search_document",
    "decode",
    "decode_all_tiers",
    "humanize_slug",
    "extract_title",
    "list_codes",
    "list_sections",
    "explain",
    "corpus_stats",
]
