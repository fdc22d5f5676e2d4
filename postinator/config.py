"""Configuration loading: JSON file, defaults and environment overrides."""
from __future__ import annotations

import copy
import json
import logging
import os
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, TypeVar

from .constants import (
    CONFIG_FILE,
    DEFAULT_ASSETS_DIR,
    DEFAULT_BACKGROUND_FILE,
    DEFAULT_FONT_FILE,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_OVERLAY_FILE,
    DEFAULT_TEMP_DIR,
)
from .errors import ConfigError
from .models import ProjectMapping

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CONFIG: Dict[str, Any] = {
    "assets_dir": DEFAULT_ASSETS_DIR,
    "temp_dir": DEFAULT_TEMP_DIR,
    "background_file": DEFAULT_BACKGROUND_FILE,
    "background_stats_file": "",
    "overlay_file": DEFAULT_OVERLAY_FILE,
    "font_file": DEFAULT_FONT_FILE,
    "max_file_size": DEFAULT_MAX_FILE_SIZE,
    "reporting_token": "",
    "reporting_workspace": 0,
    "stats": {
        "mappings": [],
        "other": {"display_name": "other", "color": "#D35400"},
    },
}

ENV_OVERRIDES: Tuple[Tuple[str, str, Callable[[str], Any]], ...] = (
    ("ASSETS_DIR", "assets_dir", str),
    ("TEMP_DIR", "temp_dir", str),
    ("MAX_FILE_SIZE", "max_file_size", int),
    ("REPORTING_TOKEN", "reporting_token", str),
    ("REPORTING_WORKSPACE", "reporting_workspace", int),
)


def ensure_directory(dir_name: str, auto_create: bool = False) -> Tuple[bool, Optional[str]]:
    """Ensure a directory exists, creating it if requested."""
    if os.path.isdir(dir_name):
        return True, None

    if not auto_create:
        return False, f"Directory '{dir_name}' does not exist."

    try:
        os.makedirs(dir_name, exist_ok=True)
        return True, None
    except OSError as exc:  # pragma: no cover - filesystem errors are environment specific
        return False, str(exc)


def load_json_config(filepath: str, default_data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Load a JSON configuration file with optional defaults."""
    if not os.path.exists(filepath):
        return copy.deepcopy(default_data) if default_data is not None else {}

    try:
        with open(filepath, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError) as exc:
        logger.warning("Could not read %s (%s), using defaults", filepath, exc)
        return copy.deepcopy(default_data) if default_data is not None else {}

    if not isinstance(data, dict):
        raise ConfigError(f"{filepath} must contain a JSON object", stage="config")
    return data


def _merge(defaults: Mapping[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(dict(defaults))
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def get_env(key: str, default: T, parser: Callable[[str], T]) -> T:
    """Read ``key`` from the environment, keeping ``default`` when unset or invalid."""
    raw = os.environ.get(key, "")
    if raw == "":
        return default
    try:
        return parser(raw)
    except ValueError:
        logger.warning("Invalid value for %s (%s), using %r", key, raw, default)
        return default


def apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    for env_key, config_key, parser in ENV_OVERRIDES:
        config[config_key] = get_env(env_key, config[config_key], parser)
    return config


def load_main_config(filepath: str = CONFIG_FILE) -> Dict[str, Any]:
    """Load the application configuration with defaults and env overrides.

    Relative directories are resolved against the directory of ``filepath``.
    """
    config = _merge(DEFAULT_CONFIG, load_json_config(filepath, {}))
    config = apply_env_overrides(config)

    if not config.get("background_stats_file"):
        config["background_stats_file"] = config["background_file"]

    base_dir = os.path.dirname(os.path.abspath(filepath))
    for key in ("assets_dir", "temp_dir"):
        if not os.path.isabs(config[key]):
            config[key] = os.path.join(base_dir, config[key])
    return config


def parse_mapping(data: Mapping[str, Any]) -> ProjectMapping:
    display_name = data.get("display_name")
    if not display_name:
        raise ConfigError(f"mapping without display_name: {dict(data)!r}", stage="config")
    aliases = data.get("aliases") or data.get("toggl_names") or []
    return ProjectMapping(
        display_name=str(display_name),
        color=str(data.get("color", "")),
        aliases=tuple(str(alias) for alias in aliases),
    )


def load_stats_mappings(config: Mapping[str, Any]) -> Tuple[List[ProjectMapping], ProjectMapping]:
    """Return the configured project mappings and the "other" bucket mapping."""
    stats = config.get("stats") or {}
    mappings = [parse_mapping(entry) for entry in stats.get("mappings", [])]
    other = parse_mapping(stats.get("other") or DEFAULT_CONFIG["stats"]["other"])
    return mappings, other
