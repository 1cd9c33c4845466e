"""
BCS rule corpus engine.

- codes: path <-> code mapping
- store: corpus scan, index and validation
- selector: code / section filters
- assembler: document assembly and writes
- canonical: canonical documents and the default tier
- query: search, decode and listings
- compliance: requests for the external validator
"""
from __future__ import annotations

from .assembler import GenerateResult, assemble, assemble_selection, generate, write_to_path, write_to_sink
from .canonical import canonical_path, resolve_default_tier, set_default_tier
from .codes import decode as decode_path, encode, normalize_code
from .compliance import ComplianceRequest, prepare_request, run_validator
from .errors import (
    AmbiguousCodeError,
    BcsError,
    ConfigError,
    DuplicateCodeError,
    EmptyFilterError,
    ExitCode,
    InvalidCodeError,
    InvalidOptionError,
    InvalidPatternError,
    MalformedPrefixError,
    MissingSectionIntroError,
    MissingTierError,
    NotFoundError,
    OversizedRuleWarning,
    WriteConflictError,
)
from .models import (
    AssemblyOptions,
    CanonicalDocument,
    CodeEntry,
    CorpusStats,
    Match,
    RuleFile,
    Section,
    Tier,
    parse_tier,
)
from .query import DecodeMode, corpus_stats, decode, explain, list_codes, list_sections, search
from .selector import Filter, select
from .store import RuleStore

__all__ = [
    # Models
    "Tier",
    "parse_tier",
    "RuleFile",
    "Section",
    "CodeEntry",
    "Match",
    "AssemblyOptions",
    "CanonicalDocument",
    "CorpusStats",
    # Errors
    "ExitCode",
    "BcsError",
    "ConfigError",
    "NotFoundError",
    "AmbiguousCodeError",
    "DuplicateCodeError",
    "MalformedPrefixError",
    "EmptyFilterError",
    "WriteConflictError",
    "InvalidCodeError",
    "InvalidPatternError",
    "InvalidOptionError",
    "MissingTierError",
    "MissingSectionIntroError",
    "OversizedRuleWarning",
    # Engine
    "encode",
    "decode_path",
    "normalize_code",
    "RuleStore",
    "Filter",
    "select",
    "assemble",
    "assemble_selection",
    "generate",
    "write_to_path",
    "write_to_sink",
    "GenerateResult",
    "canonical_path",
    "resolve_default_tier",
    "set_default_tier",
    "DecodeMode",
    "decode",
    "search",
    "list_codes",
    "list_sections",
    "explain",
    "corpus_stats",
    "ComplianceRequest",
    "prepare_request",
    "run_validator",
]
