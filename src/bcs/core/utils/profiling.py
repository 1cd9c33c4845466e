"""Lightweight hierarchical profiler.

Spans are no-ops unless a profiler is active in the current context, which
the CLI enables with the global ``--profile`` flag. The report groups spans
by name so repeated work (one ``store.build`` per command, one
``assembler.write`` per tier) shows up as a call count.
"""
from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from time import perf_counter
from typing import Any, Dict, Iterator, List, Optional, Tuple

_ACTIVE_PROFILER: ContextVar["Profiler | None"] = ContextVar("_ACTIVE_PROFILER", default=None)


@dataclass(frozen=True)
class SpanRecord:
    name: str
    duration_ms: float
    depth: int
    meta: Dict[str, Any]


class Profiler:
    """Collects timed spans in completion order."""

    def __init__(self) -> None:
        self._spans: List[SpanRecord] = []
        self._depth = 0

    @property
    def spans(self) -> List[SpanRecord]:
        return list(self._spans)

    @contextmanager
    def span(self, name: str, **meta: Any) -> Iterator[None]:
        start = perf_counter()
        depth = self._depth
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1
            self._spans.append(SpanRecord(name, (perf_counter() - start) * 1000.0, depth, dict(meta)))

    def totals(self) -> Dict[str, Tuple[float, int]]:
        """Total milliseconds and call count per span name."""
        out: Dict[str, Tuple[float, int]] = {}
        for s in self._spans:
            ms, calls = out.get(s.name, (0.0, 0))
            out[s.name] = (ms + s.duration_ms, calls + 1)
        return out

    def report_lines(self, limit: int = 20) -> List[str]:
        ranked = sorted(self.totals().items(), key=lambda kv: kv[1][0], reverse=True)[:limit]
        return [f"- {name}: {ms:.1f}ms ({calls}x)" for name, (ms, calls) in ranked]


@contextmanager
def enable_profiler(profiler: Profiler) -> Iterator[None]:
    token = _ACTIVE_PROFILER.set(profiler)
    try:
        yield
    finally:
        _ACTIVE_PROFILER.reset(token)


@contextmanager
def span(name: str, **meta: Any) -> Iterator[None]:
    """Time the enclosed block on the active profiler, if any."""
    profiler = _ACTIVE_PROFILER.get()
    if profiler is None:
        yield
        return
    with profiler.span(name, **meta):
        yield


def get_active_profiler() -> Optional[Profiler]:
    return _ACTIVE_PROFILER.get()


__all__ = ["Profiler", "SpanRecord", "enable_profiler", "span", "get_active_profiler"]
