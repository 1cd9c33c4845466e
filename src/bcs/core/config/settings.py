"""Typed accessors over the merged configuration mapping."""
from __future__ import annotations

from functools import cached_property
from typing import Any, Dict, List, Optional, Tuple

from bcs.core.rules.models import AssemblyOptions, Tier, parse_tier


class BcsConfig:
    """Read-only view of a merged configuration dict.

    Usage:
        cfg = BcsConfig(ConfigManager(project_root).load_config())
        cfg.assembly.footer
    """

    def __init__(self, data: Dict[str, Any]) -> None:
        self._data = data

    def section(self, name: str) -> Dict[str, Any]:
        return self._data.get(name, {}) or {}

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._data)

    @cached_property
    def corpus_root(self) -> str:
        return str(self.section("corpus").get("root") or "")

    @cached_property
    def exclude(self) -> Tuple[str, ...]:
        return tuple(self.section("corpus").get("exclude") or ())

    @cached_property
    def default_tier(self) -> Optional[Tier]:
        raw = self._data.get("default_tier")
        return parse_tier(raw) if raw else None

    @cached_property
    def canonical_filename(self) -> str:
        return str(self.section("canonical").get("filename") or "BASH-CODING-STANDARD.{tier}.md")

    @cached_property
    def symlink_name(self) -> str:
        return str(self.section("canonical").get("symlink") or "BASH-CODING-STANDARD.md")

    @cached_property
    def assembly(self) -> AssemblyOptions:
        sec = self.section("assembly")
        defaults = AssemblyOptions()
        return AssemblyOptions(
            header=str(sec.get("header", defaults.header)),
            separator=str(sec.get("separator", defaults.separator)),
            footer=str(sec.get("footer", defaults.footer)),
        )

    @cached_property
    def listing_tier(self) -> Tier:
        return parse_tier(self.section("listing").get("tier") or Tier.ABSTRACT.value)

    @cached_property
    def explain_tier(self) -> Tier:
        return parse_tier(self.section("explain").get("tier") or Tier.COMPLETE.value)

    @cached_property
    def required_tiers(self) -> List[Tier]:
        raw = self.section("validation").get("required_tiers") or ["complete", "summary", "abstract"]
        return [parse_tier(t) for t in raw]

    @cached_property
    def size_limits(self) -> Dict[Tier, int]:
        raw = self.section("validation").get("size_limits") or {}
        return {parse_tier(k): int(v) for k, v in raw.items()}

    @cached_property
    def compliance_command(self) -> str:
        return str(self.section("compliance").get("command") or "claude")

    @cached_property
    def compliance_args(self) -> List[str]:
        return [str(a) for a in (self.section("compliance").get("args") or [])]

    @cached_property
    def compliance_timeout(self) -> float:
        return float(self.section("compliance").get("timeout_seconds") or 600)

    @cached_property
    def compliance_output_format(self) -> str:
        return str(self.section("compliance").get("output_format") or "text")

    @cached_property
    def log_level(self) -> str:
        return str(self.section("logging").get("level") or "WARNING")


__all__ = ["BcsConfig"]
