"""I/O utilities for BCS.

- Core: atomic writes and symlink swaps, text I/O
- YAML: locked reads
"""
from __future__ import annotations

from .core import (
    PathLike,
    atomic_symlink,
    atomic_write,
    ensure_parent_dir,
    read_text,
    write_text,
)
from .yaml import read_yaml

__all__ = [
    "PathLike",
    "atomic_symlink",
    "atomic_write",
    "ensure_parent_dir",
    "read_text",
    "write_text",
    "read_yaml",
]
