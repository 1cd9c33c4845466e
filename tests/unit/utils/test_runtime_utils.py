from __future__ import annotations

import io
import logging
import shutil
import subprocess

import pytest

from bcs.core.stdlib_logging import configure_logging, level_from_name
from bcs.core.utils.merge import deep_merge, merge_arrays
from bcs.core.utils.profiling import Profiler, enable_profiler, get_active_profiler, span
from bcs.core.utils.subprocess import run_with_timeout, split_command


def test_deep_merge_does_not_mutate_inputs() -> None:
    base = {"assembly": {"header": "h", "footer": "f"}, "exclude": ["README.md"]}
    override = {"assembly": {"footer": "#end"}, "exclude": ["+", "drafts/*"]}

    merged = deep_merge(base, override)

    assert merged == {"assembly": {"header": "h", "footer": "#end"}, "exclude": ["README.md", "drafts/*"]}
    assert base["assembly"]["footer"] == "f"


def test_merge_arrays_markers() -> None:
    assert merge_arrays(["a"], ["=", "b"]) == ["b"]
    assert merge_arrays(["a"], ["b"]) == ["b"]
    assert merge_arrays(["a"], []) == ["a"]


def test_span_is_noop_without_profiler() -> None:
    assert get_active_profiler() is None
    with span("ignored"):
        pass


def test_profiler_records_nested_spans() -> None:
    profiler = Profiler()

    with enable_profiler(profiler):
        with span("outer"):
            with span("inner", tier="abstract"):
                pass

    assert get_active_profiler() is None
    names = [(s.name, s.depth) for s in profiler.spans]
    assert names == [("inner", 1), ("outer", 0)]
    assert profiler.spans[0].meta == {"tier": "abstract"}
    assert profiler.totals()["inner"][1] == 1
    assert sorted(line.split(":")[0] for line in profiler.report_lines()) == ["- inner", "- outer"]
    assert all(line.endswith("(1x)") for line in profiler.report_lines())


def test_split_command() -> None:
    assert split_command("claude -p --model x") == ["claude", "-p", "--model", "x"]
    assert split_command(("cat", 1)) == ["cat", "1"]


@pytest.mark.skipif(shutil.which("cat") is None, reason="cat not available")
def test_run_with_timeout_passes_stdin() -> None:
    proc = run_with_timeout(["cat"], timeout=10, input="rules\n")

    assert proc.returncode == 0
    assert proc.stdout == "rules\n"


@pytest.mark.skipif(shutil.which("sleep") is None, reason="sleep not available")
def test_run_with_timeout_kills_slow_commands() -> None:
    with pytest.raises(subprocess.TimeoutExpired):
        run_with_timeout(["sleep", "5"], timeout=0.2)


def test_configure_logging_routes_bcs_loggers() -> None:
    stream = io.StringIO()

    configure_logging("info", stream=stream)
    logging.getLogger("bcs.core.rules.store").info("built %d", 3)
    logging.getLogger("bcs.core.rules.store").debug("hidden")

    assert stream.getvalue() == "INFO bcs.core.rules.store: built 3\n"
    assert level_from_name("bogus") == logging.WARNING
