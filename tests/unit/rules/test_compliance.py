from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from bcs.core.rules.compliance import prepare_request, read_script, run_validator
from bcs.core.rules.errors import BcsError, DuplicateCodeError, InvalidOptionError, NotFoundError
from bcs.core.rules.models import Tier
from bcs.core.rules.selector import Filter
from bcs.core.rules.store import RuleStore

from helpers.corpus import write_rule


@pytest.fixture
def script(tmp_path: Path) -> Path:
    path = tmp_path / "deploy.sh"
    path.write_text("#!/usr/bin/env bash\necho $1\n", encoding="utf-8")
    return path


def test_read_script_errors(tmp_path: Path) -> None:
    with pytest.raises(NotFoundError, match="No script file specified"):
        read_script(None)
    with pytest.raises(NotFoundError, match="Script file not found"):
        read_script(tmp_path / "missing.sh")


def test_prepare_request_scopes_standard(corpus: Path, script: Path) -> None:
    store = RuleStore.build(corpus)

    req = prepare_request(store, script, "abstract", Filter(codes=("BCS0206",)), strict=True)

    assert req.tier is Tier.ABSTRACT
    assert req.standard_text.startswith("<!-- BCS0206 -->")
    assert "BCS0102" not in req.standard_text
    assert "echo $1" in req.prompt
    assert "=== SCRIPT: deploy.sh ===" in req.prompt
    assert "Treat warnings as violations" in req.prompt


def test_prepare_request_refuses_duplicate_codes(corpus: Path, script: Path) -> None:
    write_rule(corpus, "02-variables/06-arrays.abstract.md", "## Arrays\n")
    store = RuleStore.build(corpus)

    with pytest.raises(DuplicateCodeError):
        prepare_request(store, script, "abstract")

    req = prepare_request(store, script, "abstract", Filter(sections=(1,)))
    assert "BCS0206" not in req.standard_text


def test_prepare_request_rejects_unknown_format(corpus: Path, script: Path) -> None:
    with pytest.raises(InvalidOptionError):
        prepare_request(RuleStore.build(corpus), script, "abstract", output_format="xml")


@pytest.mark.skipif(shutil.which("cat") is None, reason="cat not available")
def test_run_validator_pipes_prompt_to_command(corpus: Path, script: Path) -> None:
    req = prepare_request(RuleStore.build(corpus), script, "summary", output_format="json")

    out = run_validator(req, "cat", timeout=10)

    assert out == req.prompt


def test_run_validator_missing_command(corpus: Path, script: Path) -> None:
    req = prepare_request(RuleStore.build(corpus), script, "abstract")

    with pytest.raises(NotFoundError):
        run_validator(req, "bcs-no-such-validator-command")


@pytest.mark.skipif(shutil.which("false") is None, reason="false not available")
def test_run_validator_nonzero_exit(corpus: Path, script: Path) -> None:
    req = prepare_request(RuleStore.build(corpus), script, "abstract")

    with pytest.raises(BcsError, match="exited with status 1"):
        run_validator(req, "false", timeout=10)
