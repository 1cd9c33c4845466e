from __future__ import annotations

from pathlib import Path

import pytest

from bcs.core.config import BcsContext
from bcs.core.rules.canonical import canonical_path
from bcs.core.rules.errors import DuplicateCodeError, InvalidCodeError, InvalidPatternError, NotFoundError
from bcs.core.rules.models import Tier
from bcs.core.rules.query import (
    DecodeMode,
    corpus_stats,
    decode,
    decode_all_tiers,
    explain,
    extract_title,
    format_matches,
    list_codes,
    list_sections,
    load_search_document,
    search,
)
from bcs.core.rules.store import RuleStore

from helpers.corpus import write_rule

LETTERS = "a\nb\nc\nd\ne\nf\ng\n"


def test_search_reports_one_based_line_numbers() -> None:
    hits = search(LETTERS, "^[bf]$")

    assert [(m.line_number, m.line) for m in hits] == [(2, "b"), (6, "f")]
    assert format_matches(hits) == ["2:b", "6:f"]


def test_search_context_and_group_separator() -> None:
    hits = search(LETTERS, "^[bf]$", context_lines=1)

    assert hits[0].before == ((1, "a"),)
    assert hits[0].after == ((3, "c"),)
    assert format_matches(hits) == ["1-a", "2:b", "3-c", "--", "5-e", "6:f", "7-g"]


def test_search_overlapping_context_is_merged() -> None:
    hits = search(LETTERS, "^[cd]$", context_lines=1)

    assert format_matches(hits) == ["2-b", "3:c", "4:d", "5-e"]


def test_search_ignore_case_and_fixed_strings() -> None:
    doc = "Use [[ ]] for tests\nuse [ ] never\n"

    assert [m.line_number for m in search(doc, "USE", ignore_case=True)] == [1, 2]
    assert [m.line_number for m in search(doc, "[[", fixed=True)] == [1]


def test_search_invalid_pattern() -> None:
    with pytest.raises(InvalidPatternError):
        search(LETTERS, "[unclosed")
    with pytest.raises(InvalidPatternError):
        search(LETTERS, "a", context_lines=-1)


def test_search_assembled_document_finds_rule(context: BcsContext) -> None:
    text = load_search_document(context, "abstract")

    hits = search(text, "^## Shebang$")

    assert len(hits) == 1
    assert text.splitlines()[hits[0].line_number - 3] == "<!-- BCS0102 -->"


def test_load_search_document_prefers_canonical_unless_fresh(context: BcsContext, corpus: Path) -> None:
    canonical_path(corpus, "summary").write_text("stale canonical\n", encoding="utf-8")

    assert load_search_document(context, "summary") == "stale canonical\n"
    assert "summary text for 06-quoting." in load_search_document(context, "summary", fresh=True)


def test_decode_modes(corpus: Path) -> None:
    store = RuleStore.build(corpus)
    path = corpus / "02-variables" / "06-quoting.complete.md"

    assert decode(store, "BCS0206", "complete") == path
    assert decode(store, "BCS0206", "complete", DecodeMode.PRINT) == path.read_text(encoding="utf-8")
    assert decode(store, "BCS0206", "complete", "exists") is True


def test_decode_exists_is_false_for_unknown_or_invalid_codes(corpus: Path) -> None:
    store = RuleStore.build(corpus)

    assert decode(store, "BCS99", "abstract", DecodeMode.EXISTS) is False
    assert decode(store, "nonsense", "abstract", DecodeMode.EXISTS) is False


def test_decode_path_mode_raises_for_unknown_code(corpus: Path) -> None:
    store = RuleStore.build(corpus)

    with pytest.raises(NotFoundError):
        decode(store, "BCS99", "abstract")
    with pytest.raises(InvalidCodeError):
        decode(store, "nonsense", "abstract")


def test_decode_all_tiers_uses_fixed_order(corpus: Path) -> None:
    store = RuleStore.build(corpus)

    intro = decode_all_tiers(store, "BCS0100")
    rule = decode_all_tiers(store, "BCS0102", DecodeMode.PRINT)

    assert list(intro) == [Tier.COMPLETE, Tier.ABSTRACT, Tier.SUMMARY, Tier.RULET]
    assert list(rule) == [Tier.COMPLETE, Tier.ABSTRACT, Tier.SUMMARY]
    assert rule[Tier.SUMMARY] == "## Shebang\n\nsummary text for 02-shebang.\n"

    with pytest.raises(NotFoundError):
        decode_all_tiers(store, "BCS0999")
    with pytest.raises(ValueError):
        decode_all_tiers(store, "BCS0102", DecodeMode.EXISTS)


def test_extract_title() -> None:
    assert extract_title("intro\n## Quoting Rules ##\n") == "Quoting Rules"
    assert extract_title("**Bold lead** text\nmore\n") == "Bold lead"
    assert extract_title("plain\n") == ""


def test_list_codes(corpus: Path) -> None:
    entries = list_codes(RuleStore.build(corpus))

    assert [e.format() for e in entries] == [
        "BCS00:header:Bash Coding Standard",
        "BCS0100:section:Section 1: Script Structure",
        "BCS0101:layout:Script Layout",
        "BCS0102:shebang:Shebang",
        "BCS010201:dual-purpose:Dual-Purpose Scripts",
        "BCS0200:section:2. Variables",
        "BCS0201:declaration:Declaration",
        "BCS0206:quoting:Quoting",
    ]


def test_list_codes_falls_back_to_slug_title(corpus: Path) -> None:
    write_rule(corpus, "02-variables/07-read-only-values.abstract.md", "no heading here\n")

    entries = list_codes(RuleStore.build(corpus), "abstract")

    assert entries[-1].format() == "BCS0207:read-only-values:Read Only Values"


def test_list_codes_refuses_duplicates(corpus: Path) -> None:
    write_rule(corpus, "02-variables/06-arrays.abstract.md", "## Arrays\n")

    with pytest.raises(DuplicateCodeError):
        list_codes(RuleStore.build(corpus), "abstract")
    assert list_codes(RuleStore.build(corpus), "complete")


def test_list_sections_strips_numbering(corpus: Path) -> None:
    sections = list_sections(RuleStore.build(corpus))

    assert [(s.number, s.code, s.title) for s in sections] == [
        (1, "BCS01", "Script Structure"),
        (2, "BCS02", "Variables"),
    ]


def test_list_sections_without_intro_uses_slug(corpus: Path) -> None:
    (corpus / "02-variables" / "00-section.summary.md").unlink()

    sections = list_sections(RuleStore.build(corpus), "summary")

    assert sections[1].title == "Variables"
    assert sections[1].slug == "variables"


def test_explain_with_and_without_subrules(corpus: Path) -> None:
    store = RuleStore.build(corpus)

    plain = explain(store, "bcs0102")
    full = explain(store, "BCS0102", with_subrules=True)

    assert plain == "## Shebang\n\ncomplete text for 02-shebang.\n"
    assert full == plain + "\n### Dual-Purpose Scripts\n\ncomplete text for 01-dual-purpose.\n"


def test_explain_unknown_code(corpus: Path) -> None:
    with pytest.raises(NotFoundError):
        explain(RuleStore.build(corpus), "BCS0300")


def test_fresh_search_document_refuses_duplicate_codes(context: BcsContext, corpus: Path) -> None:
    write_rule(corpus, "02-variables/06-arrays.abstract.md", "## Arrays\n")

    with pytest.raises(DuplicateCodeError) as exc:
        load_search_document(context, "abstract", fresh=True)

    assert len(exc.value.paths) == 2


def test_decode_exists_is_false_for_ambiguous_code(corpus: Path) -> None:
    write_rule(corpus, "02-variables/06-arrays.abstract.md", "## Arrays\n")
    store = RuleStore.build(corpus)

    assert decode(store, "BCS0206", "abstract", DecodeMode.EXISTS) is False
    assert decode(store, "BCS0206", "summary", DecodeMode.EXISTS) is True


def test_corpus_stats(context: BcsContext, corpus: Path) -> None:
    canonical_path(corpus, "summary").write_text("one\ntwo\n", encoding="utf-8")

    stats = corpus_stats(context)

    assert stats.sections == 2
    assert stats.rules == {Tier.ABSTRACT: 8, Tier.COMPLETE: 8, Tier.SUMMARY: 8, Tier.RULET: 1}
    assert stats.documents == {Tier.SUMMARY: (8, 2)}
    assert stats.default_tier is Tier.ABSTRACT
