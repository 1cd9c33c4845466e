"""Canonical per-tier documents and the default-tier symlink.

Each tier has one canonical assembled document in the corpus root, and
``BASH-CODING-STANDARD.md`` is a symlink naming the tier users get by
default::

    BASH-CODING-STANDARD.md -> BASH-CODING-STANDARD.abstract.md
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Union

from bcs.core.utils.io import atomic_symlink

from .codes import parse_tier_suffix
from .errors import NotFoundError, WriteConflictError
from .models import Tier, parse_tier

if TYPE_CHECKING:
    from bcs.core.config.context import BcsContext

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "BASH-CODING-STANDARD.{tier}.md"
DEFAULT_SYMLINK = "BASH-CODING-STANDARD.md"
FALLBACK_TIER = Tier.ABSTRACT


def canonical_path(root: Union[str, Path], tier: Union[str, Tier], filename: str = DEFAULT_FILENAME) -> Path:
    return Path(root) / filename.format(tier=parse_tier(tier).value)


def symlink_path(root: Union[str, Path], name: str = DEFAULT_SYMLINK) -> Path:
    return Path(root) / name


def context_canonical_path(context: "BcsContext", tier: Union[str, Tier]) -> Path:
    return canonical_path(context.corpus_root, tier, context.config.canonical_filename)


def read_symlink_tier(root: Union[str, Path], name: str = DEFAULT_SYMLINK) -> Optional[Tier]:
    """Return the tier the default symlink points at, or None."""
    link = symlink_path(root, name)
    if not link.is_symlink():
        return None
    parsed = parse_tier_suffix(Path(os.readlink(link)).name)
    return parsed[1] if parsed else None


def resolve_default_tier(context: "BcsContext", explicit: Optional[Union[str, Tier]] = None) -> Tier:
    """Pick the tier for an operation.

    Order: explicit argument, configured default, symlink target, abstract.
    """
    if explicit:
        return parse_tier(explicit)
    if context.default_tier is not None:
        return context.default_tier
    linked = read_symlink_tier(context.corpus_root, context.config.symlink_name)
    if linked is not None:
        return linked
    return FALLBACK_TIER


def available_tiers(context: "BcsContext") -> List[Tier]:
    """Tiers whose canonical document exists on disk."""
    return [t for t in Tier if context_canonical_path(context, t).is_file()]


def set_default_tier(context: "BcsContext", tier: Union[str, Tier]) -> Path:
    """Repoint the default symlink at ``tier``'s canonical document.

    Raises:
        NotFoundError: If the canonical document for ``tier`` does not exist
    """
    t = parse_tier(tier)
    target = context_canonical_path(context, t)
    if not target.is_file():
        raise NotFoundError(
            f"Canonical document for tier '{t.value}' not found: {target}", paths=[target]
        )
    link = symlink_path(context.corpus_root, context.config.symlink_name)
    if link.exists() and not link.is_symlink():
        raise WriteConflictError(f"{link} exists and is not a symlink", paths=[link])
    atomic_symlink(link, target.name)
    logger.info("Default tier set to %s", t.value)
    return link


__all__ = [
    "DEFAULT_FILENAME",
    "DEFAULT_SYMLINK",
    "FALLBACK_TIER",
    "canonical_path",
    "symlink_path",
    "context_canonical_path",
    "read_symlink_tier",
    "resolve_default_tier",
    "available_tiers",
    "set_default_tier",
]
