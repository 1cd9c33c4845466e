"""Assembly of rule records into a single document.

For every record of the requested tier the assembler emits::

    <!-- BCS0102 -->
    <blank line>
    <rule body, verbatim>
    <separator>

followed by the footer line (``#fin``). Output is a pure function of the
records and options, so assembling an unchanged corpus twice yields
byte-identical documents.
"""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Optional, TextIO, Union

from bcs.core.utils.io import write_text
from bcs.core.utils.profiling import span

from .canonical import context_canonical_path, resolve_default_tier
from .errors import WriteConflictError
from .models import AssemblyOptions, CanonicalDocument, RuleFile, Tier, parse_tier
from .selector import Filter, select
from .store import RuleStore

if TYPE_CHECKING:
    from bcs.core.config.context import BcsContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerateResult:
    document: CanonicalDocument
    destination: Optional[Path] = None

    @property
    def to_sink(self) -> bool:
        return self.destination is None


def assemble(
    records: Iterable[RuleFile],
    tier: Union[str, Tier],
    options: Optional[AssemblyOptions] = None,
) -> CanonicalDocument:
    """Concatenate the bodies of ``records`` that belong to ``tier``."""
    t = parse_tier(tier)
    opts = options or AssemblyOptions()
    parts: List[str] = []
    codes: List[str] = []
    for rec in records:
        if rec.tier is not t:
            continue
        if opts.header:
            parts.append(opts.header.format(code=rec.code, slug=rec.slug, path=rec.relpath))
            parts.append("\n\n")
        body = rec.text
        parts.append(body if body.endswith("\n") else body + "\n")
        parts.append(opts.separator)
        codes.append(rec.code)
    if opts.footer:
        parts.append(opts.footer + "\n")
    return CanonicalDocument(tier=t, text="".join(parts), codes=tuple(codes))


def check_unique_codes(store: RuleStore, records: Iterable[RuleFile], tier: Union[str, Tier]) -> None:
    """Refuse to assemble a code that more than one file of ``tier`` encodes to.

    Raises:
        DuplicateCodeError: For the first selected code with several files,
            naming every one of them
    """
    t = parse_tier(tier)
    selected = {rec.code for rec in records if rec.tier is t}
    for dup in store.duplicates(t):
        if dup.code in selected:
            raise dup


def assemble_selection(
    store: RuleStore,
    rule_filter: Optional[Filter],
    tier: Union[str, Tier],
    options: Optional[AssemblyOptions] = None,
) -> CanonicalDocument:
    """Select, check for duplicate codes, then assemble.

    Raises:
        EmptyFilterError: If ``rule_filter`` selects nothing
        DuplicateCodeError: If a selected code is not unique in ``tier``
    """
    t = parse_tier(tier)
    with span("assembler.select"):
        records = select(store, rule_filter, t)
    check_unique_codes(store, records, t)
    with span("assembler.assemble", tier=t.value):
        return assemble(records, t, options)


def write_to_sink(document: CanonicalDocument, sink: Optional[TextIO] = None) -> None:
    out = sink or sys.stdout
    out.write(document.text)
    out.flush()


def _same_file(a: Path, b: Path) -> bool:
    return a.expanduser().resolve() == b.expanduser().resolve()


def write_to_path(
    document: CanonicalDocument,
    path: Union[str, Path],
    *,
    canonical_path: Optional[Path] = None,
    overwrite_canonical: bool = False,
    partial: bool = False,
) -> Path:
    """Atomically write ``document`` to ``path``.

    Raises:
        WriteConflictError: If ``path`` is the canonical document and
            ``overwrite_canonical`` is False, or if a filtered (``partial``)
            document would replace it
    """
    target = Path(path).expanduser().resolve()
    if canonical_path is not None and _same_file(target, canonical_path):
        if not overwrite_canonical:
            raise WriteConflictError(
                f"Refusing to overwrite canonical document {canonical_path} "
                "(pass overwrite_canonical to replace it)",
                paths=[canonical_path],
            )
        if partial:
            raise WriteConflictError(
                f"Refusing to write a filtered excerpt to canonical document {canonical_path}",
                paths=[canonical_path],
            )
    with span("assembler.write", path=str(target)):
        write_text(target, document.text)
    logger.info("Wrote %s tier document (%d rules) to %s", document.tier.value, len(document.codes), target)
    return target


def generate(
    context: "BcsContext",
    tier: Optional[Union[str, Tier]] = None,
    rule_filter: Optional[Filter] = None,
    *,
    sink: Optional[TextIO] = None,
    output: Optional[Union[str, Path]] = None,
    overwrite_canonical: bool = False,
) -> GenerateResult:
    """Assemble the corpus (or a filtered part of it) and write it out.

    Exactly one destination receives the document: ``output`` when given,
    the canonical path when ``overwrite_canonical`` is set, otherwise
    ``sink`` (default: the context's output sink).

    Raises:
        EmptyFilterError: If ``rule_filter`` selects nothing
        DuplicateCodeError: If two files of the tier share a selected code
        WriteConflictError: On a forbidden canonical write
    """
    t = resolve_default_tier(context, tier)
    store = context.build_store()
    document = assemble_selection(store, rule_filter, t, context.config.assembly)

    canonical = context_canonical_path(context, t)
    partial = rule_filter is not None and not rule_filter.is_empty()
    if output is not None:
        for other in Tier:
            if other is not t and _same_file(Path(output), context_canonical_path(context, other)):
                raise WriteConflictError(
                    f"{output} is the canonical document for tier '{other.value}', not '{t.value}'",
                    paths=[Path(output)],
                )
        dest = write_to_path(
            document,
            output,
            canonical_path=canonical,
            overwrite_canonical=overwrite_canonical,
            partial=partial,
        )
        return GenerateResult(document, dest)
    if overwrite_canonical:
        dest = write_to_path(
            document,
            canonical,
            canonical_path=canonical,
            overwrite_canonical=True,
            partial=partial,
        )
        return GenerateResult(document, dest)

    write_to_sink(document, sink or context.output_sink)
    return GenerateResult(document)


__all__ = [
    "GenerateResult",
    "assemble",
    "assemble_selection",
    "check_unique_codes",
    "write_to_sink",
    "write_to_path",
    "generate",
]
