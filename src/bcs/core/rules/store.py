"""In-memory index of the rule corpus.

The store is built fresh from the filesystem on every invocation and never
written back. Only numbered directories are descended, so support folders
such as ``templates/`` and the canonical ``BASH-CODING-STANDARD.*.md``
outputs never enter the index.
"""
from __future__ import annotations

import fnmatch
import logging
from collections import OrderedDict
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from bcs.core.utils.profiling import span

from .codes import CODE_PREFIX, check_segment, normalize_code, parse_tier_suffix, slug_of
from .errors import (
    AmbiguousCodeError,
    BcsError,
    DuplicateCodeError,
    MalformedPrefixError,
    MissingSectionIntroError,
    MissingTierError,
    NotFoundError,
    OversizedRuleWarning,
)
from .models import RuleFile, Tier, parse_tier

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE: Tuple[str, ...] = ("README.md", "BASH-CODING-STANDARD*.md")
DEFAULT_REQUIRED_TIERS: Tuple[Tier, ...] = (Tier.COMPLETE, Tier.SUMMARY, Tier.ABSTRACT)
DEFAULT_SIZE_LIMITS: Dict[Tier, int] = {Tier.SUMMARY: 10000, Tier.ABSTRACT: 1500}


class RuleStore:
    """Ordered, indexed view of every tier file in a corpus."""

    def __init__(
        self,
        root: Path,
        records: Sequence[RuleFile],
        *,
        malformed: Sequence[MalformedPrefixError] = (),
        section_dirs: Sequence[Path] = (),
    ) -> None:
        self.root = Path(root)
        self.records: Tuple[RuleFile, ...] = tuple(sorted(records, key=lambda r: r.relpath))
        self.malformed: Tuple[MalformedPrefixError, ...] = tuple(malformed)
        self.section_dirs: Tuple[Path, ...] = tuple(sorted(section_dirs))

        self._index: Dict[Tuple[str, Tier], List[RuleFile]] = OrderedDict()
        for rec in self.records:
            self._index.setdefault((rec.code, rec.tier), []).append(rec)

    @classmethod
    def build(cls, root: Union[str, Path], *, exclude: Iterable[str] = DEFAULT_EXCLUDE) -> "RuleStore":
        """Scan ``root`` and return a new store.

        Raises:
            NotFoundError: If ``root`` is not a directory
        """
        root = Path(root)
        if not root.is_dir():
            raise NotFoundError(f"Corpus directory not found: {root}", paths=[root])

        patterns = tuple(exclude)
        records: List[RuleFile] = []
        malformed: List[MalformedPrefixError] = []
        section_dirs: List[Path] = []

        def _scan(directory: Path, segments: Tuple[str, ...]) -> None:
            for entry in sorted(directory.iterdir()):
                name = entry.name
                if name.startswith("."):
                    continue
                if any(fnmatch.fnmatch(name, pat) for pat in patterns):
                    continue
                try:
                    digits = check_segment(entry, name)
                except MalformedPrefixError as exc:
                    malformed.append(exc)
                    continue
                if digits is None:
                    continue

                if entry.is_dir():
                    if not segments:
                        section_dirs.append(entry)
                    _scan(entry, segments + (digits,))
                    continue

                parsed = parse_tier_suffix(name)
                if parsed is None or not entry.is_file():
                    continue
                full = segments + (digits,)
                records.append(
                    RuleFile(
                        path=entry,
                        relpath=entry.relative_to(root).as_posix(),
                        segments=full,
                        tier=parsed[1],
                        code=CODE_PREFIX + "".join(full),
                        slug=slug_of(name),
                    )
                )

        with span("store.build"):
            _scan(root, ())

        logger.debug(
            "Built rule store from %s: %d files, %d sections, %d malformed",
            root,
            len(records),
            len(section_dirs),
            len(malformed),
        )
        return cls(root, records, malformed=malformed, section_dirs=section_dirs)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[RuleFile]:
        return iter(self.records)

    def records_for_tier(self, tier: Union[str, Tier]) -> List[RuleFile]:
        t = parse_tier(tier)
        return [r for r in self.records if r.tier is t]

    def lookup(self, code: str, tier: Union[str, Tier]) -> RuleFile:
        """Return the single record for ``code`` in ``tier``.

        Raises:
            NotFoundError: If no record exists
            AmbiguousCodeError: If several records share the code
        """
        canonical = normalize_code(code)
        t = parse_tier(tier)
        recs = self._index.get((canonical, t), [])
        if not recs:
            raise NotFoundError(f"{canonical} not found for tier '{t.value}'")
        if len(recs) > 1:
            raise AmbiguousCodeError(canonical, t.value, [r.path for r in recs])
        return recs[0]

    def codes(self, tier: Union[str, Tier]) -> List[str]:
        seen: "OrderedDict[str, None]" = OrderedDict()
        for rec in self.records_for_tier(tier):
            seen.setdefault(rec.code, None)
        return list(seen)

    def tiers_for(self, code: str) -> List[Tier]:
        canonical = normalize_code(code)
        return [t for t in Tier if (canonical, t) in self._index]

    def duplicates(self, tier: Optional[Union[str, Tier]] = None) -> List[DuplicateCodeError]:
        only = parse_tier(tier) if tier is not None else None
        out: List[DuplicateCodeError] = []
        for (code, t), recs in self._index.items():
            if only is not None and t is not only:
                continue
            if len(recs) > 1:
                out.append(DuplicateCodeError(code, t.value, [r.path for r in recs]))
        return out

    def section_count(self) -> int:
        return len(self.section_dirs)

    def validate(
        self,
        *,
        required_tiers: Sequence[Union[str, Tier]] = DEFAULT_REQUIRED_TIERS,
        size_limits: Optional[Mapping[Union[str, Tier], int]] = None,
    ) -> List[BcsError]:
        """Check every corpus invariant and return all violations found.

        Nothing is raised; an empty list means the corpus is valid. Entries
        with ``severity == "warning"`` do not make the corpus invalid.
        """
        tiers = [parse_tier(t) for t in required_tiers]
        limits = {
            parse_tier(k): int(v)
            for k, v in (DEFAULT_SIZE_LIMITS if size_limits is None else size_limits).items()
        }
        violations: List[BcsError] = list(self.malformed)
        violations.extend(self.duplicates())

        present: "OrderedDict[str, Dict[Tier, List[Path]]]" = OrderedDict()
        for rec in self.records:
            if rec.tier in tiers:
                present.setdefault(rec.code, {}).setdefault(rec.tier, []).append(rec.path)
        for code, by_tier in present.items():
            for t in tiers:
                if t not in by_tier:
                    paths = [p for ps in by_tier.values() for p in ps]
                    violations.append(MissingTierError(code, t.value, paths))

        for directory in self.section_dirs:
            for t in tiers:
                intro = [
                    r for r in self.records
                    if r.tier is t and r.is_section_intro and r.path.parent == directory
                ]
                if not intro:
                    violations.append(MissingSectionIntroError(directory, t.value))

        for rec in self.records:
            limit = limits.get(rec.tier)
            if limit is None or rec.is_header:
                continue
            size = rec.size
            if size > limit:
                violations.append(OversizedRuleWarning(rec.path, rec.tier.value, size, limit))

        logger.info(
            "Validated %s: %d errors, %d warnings",
            self.root,
            sum(1 for v in violations if not v.is_warning),
            sum(1 for v in violations if v.is_warning),
        )
        return violations


__all__ = [
    "RuleStore",
    "DEFAULT_EXCLUDE",
    "DEFAULT_REQUIRED_TIERS",
    "DEFAULT_SIZE_LIMITS",
]
