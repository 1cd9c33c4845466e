import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'bcs' and tests/ importable for helpers
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from bcs.core.config import BcsConfig, BcsContext, ConfigManager
from bcs.core.stdlib_logging import reset_logging_for_tests
from helpers.corpus import build_sample_corpus


@pytest.fixture(autouse=True)
def _isolated_bcs_env(tmp_path_factory, monkeypatch):
    """Keep developer BCS_* variables and user config out of every test."""
    for key in list(os.environ):
        if key.startswith("BCS_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path_factory.mktemp("xdg")))
    yield
    reset_logging_for_tests()


@pytest.fixture
def corpus(tmp_path: Path) -> Path:
    """A small three-tier corpus under ``<tmp>/project/data``."""
    root = tmp_path / "project" / "data"
    build_sample_corpus(root)
    return root


@pytest.fixture
def project(corpus: Path) -> Path:
    """Project directory that contains the sample corpus as ./data."""
    return corpus.parent


@pytest.fixture
def config(project: Path) -> BcsConfig:
    return BcsConfig(ConfigManager(project).load_config())


@pytest.fixture
def context(corpus: Path, config: BcsConfig) -> BcsContext:
    return BcsContext(corpus_root=corpus, config=config)
