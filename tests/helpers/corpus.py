"""Builders for small on-disk rule corpora."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable

TIERS = ("abstract", "complete", "summary")

# relpath stem -> heading
SAMPLE_RULES: Dict[str, str] = {
    "00-header": "# Bash Coding Standard",
    "01-script-structure/00-section": "# Section 1: Script Structure",
    "01-script-structure/01-layout": "## Script Layout",
    "01-script-structure/02-shebang": "## Shebang",
    "01-script-structure/02-shebang/01-dual-purpose": "### Dual-Purpose Scripts",
    "02-variables/00-section": "# 2. Variables",
    "02-variables/01-declaration": "## Declaration",
    "02-variables/06-quoting": "## Quoting",
}


def write_rule(root: Path, relpath: str, text: str) -> Path:
    path = root / relpath
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def rule_text(heading: str, stem: str, tier: str) -> str:
    slug = stem.rsplit("/", 1)[-1]
    return f"{heading}\n\n{tier} text for {slug}.\n"


def build_sample_corpus(root: Path, tiers: Iterable[str] = TIERS) -> Path:
    """Create the sample corpus plus files the scanner must ignore."""
    for stem, heading in SAMPLE_RULES.items():
        for tier in tiers:
            write_rule(root, f"{stem}.{tier}.md", rule_text(heading, stem, tier))
    write_rule(root, "01-script-structure/00-structure.rulet.md", "# Structure rulets\n\n- [BCS0102] shebang\n")
    write_rule(root, "README.md", "# Corpus\n")
    write_rule(root, "templates/01-minimal.abstract.md", "#!/usr/bin/env bash\n")
    return root
