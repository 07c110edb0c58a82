"""Runtime configuration: YAML/JSON config file, environment, CLI overrides.

Precedence, lowest to highest: built-in ``Constants`` defaults, config file,
environment variables, command-line flags. Values are applied onto
``Constants`` so every module reads a single source.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Callable, Dict, Mapping, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)


def _path(value: Any) -> str:
    return os.path.abspath(os.path.expanduser(str(value)))


def _positive_int(value: Any) -> int:
    number = int(value)
    if number <= 0:
        raise ValueError(f"expected a positive integer, got {value!r}")
    return number


# config key -> (Constants attribute, converter)
_CONFIG_KEYS: Dict[str, tuple] = {
    "install_dir": ("INSTALL_DIR", _path),
    "sdk_dir": ("SDK_DIR", _path),
    "catalog_url": ("CATALOG_URL", str),
    "go_executable": ("GO_EXECUTABLE", str),
    "dl_module": ("DL_MODULE", str),
    "request_timeout": ("REQUEST_TIMEOUT", _positive_int),
    "list_all_limit": ("LIST_ALL_LIMIT", _positive_int),
}

_ENV_KEYS = {
    Constants.ENV_INSTALL_DIR: "install_dir",
    Constants.ENV_CATALOG_URL: "catalog_url",
    Constants.ENV_GO_BIN: "go_executable",
}


def _read_file(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as fh:
        if path.lower().endswith(".json"):
            data = json.load(fh)
        else:
            data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("top-level value must be a mapping")
    section = data.get("gvm", data)
    return section if isinstance(section, dict) else {}


def find_config_file(explicit: Optional[str] = None, environ: Mapping[str, str] = os.environ) -> Optional[str]:
    """Return the config path to load: explicit, then ``GVM_CONFIG``, then default locations."""
    if explicit:
        return explicit
    from_env = environ.get(Constants.ENV_CONFIG)
    if from_env:
        return from_env
    for candidate in Constants.CONFIG_LOCATIONS:
        if os.path.isfile(candidate):
            return candidate
    return None


def load_config_file(path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML (or ``.json``) config file; problems are logged and yield ``{}``."""
    if not path:
        return {}
    if not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
        return {}
    try:
        cfg = _read_file(path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logger.error("Failed to load config %s: %s", path, exc)
        return {}
    logger.debug("Loaded config from %s", path)
    return cfg


def apply_config(cfg: Mapping[str, Any], source: str = "config") -> None:
    """Apply known keys onto ``Constants``; unknown keys and bad values are logged and skipped."""
    for key, value in cfg.items():
        spec = _CONFIG_KEYS.get(key)
        if spec is None:
            logger.warning("Ignoring unknown %s key: %s", source, key)
            continue
        attr, convert = spec
        if value is None:
            continue
        try:
            setattr(Constants, attr, convert(value))
        except (TypeError, ValueError) as exc:
            logger.warning("Ignoring invalid %s value for %s: %s", source, key, exc)


def apply_env_overrides(environ: Mapping[str, str] = os.environ) -> None:
    overrides = {key: environ[var] for var, key in _ENV_KEYS.items() if environ.get(var)}
    if overrides:
        apply_config(overrides, source="environment")


def apply_cli_overrides(args) -> None:
    """Apply command-line flags, which win over every other source."""
    overrides = {
        "install_dir": getattr(args, "INSTALL_DIR", None),
        "catalog_url": getattr(args, "CATALOG_URL", None),
    }
    apply_config({k: v for k, v in overrides.items() if v is not None}, source="command-line")


def configure(args, environ: Mapping[str, str] = os.environ,
              loader: Callable[[Optional[str]], Dict[str, Any]] = load_config_file) -> None:
    """Resolve the full configuration for one CLI invocation."""
    path = find_config_file(getattr(args, "CONFIG", None), environ)
    apply_config(loader(path))
    apply_env_overrides(environ)
    apply_cli_overrides(args)
