"""Layered configuration for BCS."""
from .context import BcsContext, load_context, resolve_corpus_root
from .manager import ConfigManager
from .settings import BcsConfig

__all__ = ["BcsConfig", "BcsContext", "ConfigManager", "load_context", "resolve_corpus_root"]
