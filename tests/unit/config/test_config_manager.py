from __future__ import annotations

import os
from pathlib import Path

import pytest

from bcs.core.config import BcsConfig, ConfigManager, load_context, resolve_corpus_root
from bcs.core.rules.errors import ConfigError
from bcs.core.rules.models import Tier


def test_bundled_defaults_validate(tmp_path: Path) -> None:
    cfg = BcsConfig(ConfigManager(tmp_path).load_config())

    assert cfg.default_tier is None
    assert cfg.assembly.footer == "#fin"
    assert cfg.assembly.header == "<!-- {code} -->"
    assert cfg.required_tiers == [Tier.COMPLETE, Tier.SUMMARY, Tier.ABSTRACT]
    assert cfg.size_limits == {Tier.SUMMARY: 10000, Tier.ABSTRACT: 1500}
    assert cfg.listing_tier is Tier.ABSTRACT
    assert cfg.explain_tier is Tier.COMPLETE
    assert cfg.compliance_args == ["-p"]


def test_project_file_overrides_user_file(tmp_path: Path) -> None:
    user_dir = tmp_path / "user"
    user_dir.mkdir()
    (user_dir / "config.yaml").write_text("default_tier: complete\nlisting:\n  tier: summary\n", encoding="utf-8")
    project = tmp_path / "proj"
    project.mkdir()
    (project / ".bcs.yaml").write_text("default_tier: summary\n", encoding="utf-8")

    cfg = BcsConfig(ConfigManager(project, user_config_dir=user_dir).load_config())

    assert cfg.default_tier is Tier.SUMMARY
    assert cfg.listing_tier is Tier.SUMMARY


def test_user_config_defaults_to_xdg_home(tmp_path: Path) -> None:
    user_dir = Path(os.environ["XDG_CONFIG_HOME"]) / "bcs"
    user_dir.mkdir(parents=True)
    (user_dir / "config.yaml").write_text("assembly:\n  footer: '#end'\n", encoding="utf-8")

    cfg = BcsConfig(ConfigManager(tmp_path).load_config())

    assert cfg.assembly.footer == "#end"


def test_list_markers_extend_bundled_lists(tmp_path: Path) -> None:
    (tmp_path / ".bcs.yaml").write_text("corpus:\n  exclude: ['+', 'drafts*']\n", encoding="utf-8")

    cfg = BcsConfig(ConfigManager(tmp_path).load_config())

    assert cfg.exclude == ("README.md", "BASH-CODING-STANDARD*.md", "drafts*")


def test_env_overrides_are_coerced(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BCS_DEFAULT_TIER", "rulet")
    monkeypatch.setenv("BCS_COMPLIANCE__TIMEOUT_SECONDS", "30")
    monkeypatch.setenv("BCS_VALIDATION__REQUIRED_TIERS", '["abstract"]')
    monkeypatch.setenv("BCS_UNRELATED_THING", "ignored")

    mgr = ConfigManager(tmp_path)
    cfg = BcsConfig(mgr.load_config())

    assert cfg.default_tier is Tier.RULET
    assert cfg.compliance_timeout == 30.0
    assert cfg.required_tiers == [Tier.ABSTRACT]
    assert mgr.get("compliance.timeout_seconds") == 30
    assert mgr.get("compliance.missing", "fallback") == "fallback"


def test_env_key_with_empty_segment_is_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BCS_ASSEMBLY____FOOTER", "x")

    with pytest.raises(ConfigError):
        ConfigManager(tmp_path).load_config()


def test_invalid_value_fails_schema_validation(tmp_path: Path) -> None:
    (tmp_path / ".bcs.yaml").write_text("listing:\n  tier: verbose\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="listing.tier"):
        ConfigManager(tmp_path).load_config()


def test_unknown_key_fails_schema_validation(tmp_path: Path) -> None:
    (tmp_path / ".bcs.yaml").write_text("colour: blue\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        ConfigManager(tmp_path).load_config()


def test_broken_yaml_is_a_config_error(tmp_path: Path) -> None:
    (tmp_path / ".bcs.yaml").write_text("assembly: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match=".bcs.yaml"):
        ConfigManager(tmp_path).load_config()


def test_non_mapping_yaml_is_a_config_error(tmp_path: Path) -> None:
    (tmp_path / ".bcs.yaml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="must contain a mapping"):
        ConfigManager(tmp_path).load_config()


def test_resolve_corpus_root_order(tmp_path: Path) -> None:
    explicit = tmp_path / "elsewhere"

    assert resolve_corpus_root(tmp_path, "rules", explicit) == explicit.resolve()
    assert resolve_corpus_root(tmp_path, "rules") == (tmp_path / "rules").resolve()
    assert resolve_corpus_root(tmp_path) == tmp_path.resolve()
    (tmp_path / "data").mkdir()
    assert resolve_corpus_root(tmp_path) == (tmp_path / "data").resolve()


def test_load_context_uses_project_data_dir(project: Path, corpus: Path) -> None:
    ctx = load_context(project)

    assert ctx.corpus_root == corpus.resolve()
    assert ctx.default_tier is None
    assert len(ctx.build_store()) == 25


def test_load_context_applies_configured_root_and_tier(project: Path, corpus: Path) -> None:
    (project / ".bcs.yaml").write_text("corpus:\n  root: data\ndefault_tier: complete\n", encoding="utf-8")

    ctx = load_context(project)
    explicit = load_context(project, default_tier="summary")

    assert ctx.corpus_root == corpus.resolve()
    assert ctx.default_tier is Tier.COMPLETE
    assert explicit.default_tier is Tier.SUMMARY
