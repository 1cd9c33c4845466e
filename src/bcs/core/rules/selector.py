"""Rule selection by codes and section numbers."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .codes import CODE_PREFIX, normalize_code
from .errors import EmptyFilterError, InvalidCodeError
from .models import RuleFile, Tier, parse_tier
from .store import RuleStore

logger = logging.getLogger(__name__)

_SECTION_TOKEN_RE = re.compile(r"\d{1,2}", re.ASCII)


@dataclass(frozen=True)
class Filter:
    """Codes and/or section numbers narrowing the rule set.

    A code matches every record whose code starts with it, so ``BCS01``
    selects the whole first section and ``BCS0102`` selects a rule with all
    of its subrules. Section ``k`` is shorthand for the code ``BCS%02d``.
    """

    codes: Tuple[str, ...] = ()
    sections: Tuple[int, ...] = ()

    @classmethod
    def parse(cls, tokens: Iterable[Union[str, int]]) -> "Filter":
        """Split mixed CLI tokens: bare 1-2 digit numbers are sections, the rest are codes."""
        codes: List[str] = []
        sections: List[int] = []
        for token in tokens:
            if isinstance(token, int):
                sections.append(token)
                continue
            for part in str(token).replace(",", " ").split():
                if _SECTION_TOKEN_RE.fullmatch(part):
                    sections.append(int(part))
                else:
                    codes.append(normalize_code(part))
        return cls(codes=tuple(codes), sections=tuple(sections))

    def is_empty(self) -> bool:
        return not self.codes and not self.sections

    def prefixes(self, section_count: Optional[int] = None) -> Tuple[str, ...]:
        """Return the code prefixes this filter selects, in input order.

        Raises:
            InvalidCodeError: If a section number is outside ``1..section_count``
        """
        out: List[str] = []
        for number in self.sections:
            upper = section_count if section_count is not None else 99
            if not 1 <= number <= upper:
                raise InvalidCodeError(
                    f"Invalid section number: {number} (expected 1-{upper})"
                )
            out.append(f"{CODE_PREFIX}{number:02d}")
        out.extend(normalize_code(c) for c in self.codes)
        return tuple(dict.fromkeys(out))

    def matches(self, code: str, prefixes: Sequence[str]) -> bool:
        return any(code.startswith(p) for p in prefixes)


def select(
    store: RuleStore,
    rule_filter: Optional[Filter] = None,
    tier: Optional[Union[str, Tier]] = None,
) -> List[RuleFile]:
    """Return the records matching ``rule_filter`` in store order.

    With no filter (or an empty one) every record is returned. When ``tier``
    is given only records of that tier are considered.

    Raises:
        EmptyFilterError: If a non-empty filter selects nothing
        InvalidCodeError: If a section number is out of range
    """
    records = store.records_for_tier(tier) if tier is not None else list(store.records)
    if rule_filter is None or rule_filter.is_empty():
        return records

    prefixes = rule_filter.prefixes(store.section_count())
    selected = [r for r in records if rule_filter.matches(r.code, prefixes)]
    if not selected:
        scope = f" in tier '{parse_tier(tier).value}'" if tier is not None else ""
        raise EmptyFilterError(f"No rules match {', '.join(prefixes)}{scope}")
    logger.debug("Selected %d of %d records for %s", len(selected), len(records), prefixes)
    return selected


__all__ = ["Filter", "select"]
