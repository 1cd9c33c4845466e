"""
BCS configuration management (layered YAML + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import yaml

from bcs.core.rules.errors import ConfigError
from bcs.core.schemas.validation import SchemaValidationError, validate_payload
from bcs.core.utils.io import read_yaml
from bcs.core.utils.merge import deep_merge
from bcs.core.utils.profiling import span
from bcs.data import get_data_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "BCS_"
PROJECT_CONFIG_FILENAME = ".bcs.yaml"
SCHEMA_NAME = "config.schema.yaml"


def default_user_config_dir() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME")
    return (Path(base) if base else Path.home() / ".config") / "bcs"


class ConfigManager:
    """Load, merge, and validate BCS configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: BCS_* (``__`` separates nested keys)
    2. Project config: <project>/.bcs.yaml
    3. User config: $XDG_CONFIG_HOME/bcs/config.yaml (default ~/.config/bcs)
    4. Bundled defaults: bcs.data/config/*.yaml (alphabetical order)

    Command-line flags are applied on top by the CLI when it builds the
    :class:`~bcs.core.config.context.BcsContext`.
    """

    def __init__(
        self,
        project_root: Optional[Path] = None,
        *,
        user_config_dir: Optional[Path] = None,
    ) -> None:
        self.project_root = Path(project_root or Path.cwd()).resolve()
        self.core_config_dir = get_data_path("config")
        self.user_config_dir = Path(user_config_dir) if user_config_dir else default_user_config_dir()
        self.project_config_file = self.project_root / PROJECT_CONFIG_FILENAME

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: configuration must never silently ignore invalid YAML.
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Invalid configuration file {path}: {exc}", paths=[path]) from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file {path} must contain a mapping", paths=[path])
        return data

    def _layer_files(self) -> List[Path]:
        files = sorted(self.core_config_dir.glob("*.yaml"))
        files.append(self.user_config_dir / "config.yaml")
        files.append(self.project_config_file)
        return files

    # ---------- environment overrides ----------

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value

    def _iter_env_overrides(self, known: Dict[str, Any]) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            path = [seg.lower() for seg in raw.split("__")]
            if not raw or any(seg == "" for seg in path):
                raise ConfigError(f"Malformed {ENV_PREFIX}* key: '{key}'")
            if path[0] not in known:
                logger.debug("Ignoring unrelated environment variable %s", key)
                continue
            yield path, self._coerce_type(os.environ[key])

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path, value in self._iter_env_overrides(cfg):
            cur = cfg
            for part in path[:-1]:
                nxt = cur.get(part)
                if not isinstance(nxt, dict):
                    nxt = {}
                    cur[part] = nxt
                cur = nxt
            cur[path[-1]] = value
            logger.debug("Config override from environment: %s", ".".join(path))
        return cfg

    # ---------- loading ----------

    def validate_schema(self, config: Dict[str, Any]) -> None:
        try:
            validate_payload(config, SCHEMA_NAME)
        except SchemaValidationError as exc:
            raise ConfigError(str(exc)) from exc

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load and merge every configuration layer.

        Raises:
            ConfigError: If a layer is unreadable or the merged result fails
                schema validation
        """
        with span("config.load"):
            cfg: Dict[str, Any] = {}
            for path in self._layer_files():
                if path.exists():
                    cfg = deep_merge(cfg, self.load_yaml(path))
                    logger.debug("Loaded config layer %s", path)
            cfg = self.apply_env_overrides(cfg)
            if validate:
                self.validate_schema(cfg)
        return cfg

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-notation key (e.g. ``assembly.footer``)."""
        current: Any = self.load_config(validate=False)
        for part in key.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current


__all__ = ["ConfigManager", "ENV_PREFIX", "PROJECT_CONFIG_FILENAME", "default_user_config_dir"]
