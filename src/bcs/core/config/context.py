"""Explicit per-invocation context passed to every engine operation."""
from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, TextIO, Union

from bcs.core.rules.models import Tier, parse_tier
from bcs.core.rules.store import RuleStore

from .manager import ConfigManager
from .settings import BcsConfig


@dataclass(frozen=True)
class BcsContext:
    """Where the corpus lives and how to read and write it.

    Attributes:
        corpus_root: Directory holding the numbered rule tree
        default_tier: Configured tier; None defers to the symlink
        output_sink: Stream that receives generated documents
        config: Merged configuration
    """

    corpus_root: Path
    default_tier: Optional[Tier] = None
    output_sink: TextIO = field(default_factory=lambda: sys.stdout)
    config: BcsConfig = field(default_factory=lambda: BcsConfig({}))

    def build_store(self) -> RuleStore:
        if self.config.exclude:
            return RuleStore.build(self.corpus_root, exclude=self.config.exclude)
        return RuleStore.build(self.corpus_root)


def resolve_corpus_root(project_root: Path, configured: str = "", explicit: Optional[Union[str, Path]] = None) -> Path:
    """Pick the corpus directory.

    Order: explicit argument, configured ``corpus.root`` (relative to the
    project), ``<project>/data`` when it exists, the project itself.
    """
    if explicit:
        return Path(explicit).expanduser().resolve()
    if configured:
        p = Path(configured).expanduser()
        return (p if p.is_absolute() else project_root / p).resolve()
    data_dir = project_root / "data"
    if data_dir.is_dir():
        return data_dir.resolve()
    return project_root.resolve()


def load_context(
    project_root: Optional[Union[str, Path]] = None,
    *,
    corpus_root: Optional[Union[str, Path]] = None,
    default_tier: Optional[Union[str, Tier]] = None,
    output_sink: Optional[TextIO] = None,
    manager: Optional[ConfigManager] = None,
) -> BcsContext:
    """Load layered configuration and build a :class:`BcsContext`.

    Raises:
        ConfigError: If the configuration is invalid
    """
    mgr = manager or ConfigManager(Path(project_root) if project_root else None)
    config = BcsConfig(mgr.load_config())
    tier = parse_tier(default_tier) if default_tier else config.default_tier
    return BcsContext(
        corpus_root=resolve_corpus_root(mgr.project_root, config.corpus_root, corpus_root),
        default_tier=tier,
        output_sink=output_sink or sys.stdout,
        config=config,
    )


__all__ = ["BcsContext", "load_context", "resolve_corpus_root"]
