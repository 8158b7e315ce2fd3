"""Configuration files for loggerplus.

Three-layer settings resolution (highest priority wins):
  1. Explicit overrides — keyword arguments to init_engine()
  2. Project config — .loggerplus.json in the working tree
  3. Global config — ~/.loggerplus/config.json

Keys may be written camelCase (as in ``{"useTags": true}``) or
snake_case. Besides the engine settings, two keys configure the
diagnostics output:

    "verbosity": 1                  global diagnostic threshold
    "show": ["pipeline:2", "trace"] per-channel overrides
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from .diagnostics import get_diagnostics, trace
from .diagnostics.levels import REGISTRY, WARNING
from .settings import Settings, normalize_option


PROJECT_CONFIG_NAME = ".loggerplus.json"

# Keys that configure diagnostics rather than the engine
DIAGNOSTIC_KEYS = {'verbosity', 'show'}


# ---------------------------------------------------------------------------
# Config file locations
# ---------------------------------------------------------------------------
def get_global_config_dir():
    """Return the global config directory (~/.loggerplus/)."""
    return Path.home() / ".loggerplus"


def get_global_config_path():
    """Return path to the global config file."""
    return get_global_config_dir() / "config.json"


def find_project_config(start_dir=None):
    """Walk up from start_dir looking for .loggerplus.json.

    Returns the path if found, None otherwise.
    """
    current = Path(start_dir or os.getcwd()).resolve()
    for _ in range(20):  # safety limit
        candidate = current / PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


# ---------------------------------------------------------------------------
# Config loading
# ---------------------------------------------------------------------------
def load_json(path):
    """Load a JSON object from path, returning {} when missing or malformed."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError as e:
        get_diagnostics().emit(WARNING, "Ignoring malformed config {path}: {err}",
                               channel='config', path=path, err=e)
        return {}
    if not isinstance(data, dict):
        get_diagnostics().emit(WARNING, "Ignoring config {path}: top level is not an object",
                               channel='config', path=path)
        return {}
    return data


def load_global_config():
    """Load the global config file."""
    return load_json(get_global_config_path())


def load_project_config(start_dir=None) -> Tuple[Dict[str, Any], Optional[Path]]:
    """Load the nearest .loggerplus.json walking upward from start_dir."""
    path = find_project_config(start_dir)
    if path:
        return load_json(path), path
    return {}, None


# ---------------------------------------------------------------------------
# Config resolution
# ---------------------------------------------------------------------------
def _normalized(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {normalize_option(key): value for key, value in data.items()}


@trace
def resolve_config(overrides: Optional[Mapping[str, Any]] = None, start_dir=None) -> Dict[str, Any]:
    """Merge overrides, project config and global config.

    For each key, the first layer that defines it (not None) wins:
      1. overrides
      2. project .loggerplus.json
      3. global ~/.loggerplus/config.json

    Returns:
        Dict of snake_case keys, including diagnostic keys if present
    """
    project_cfg, project_path = load_project_config(start_dir)
    global_cfg = load_global_config()

    diag = get_diagnostics()
    if project_path:
        diag.emit(REGISTRY, "Loaded project config {path}", channel='config', path=project_path)
    if global_cfg:
        diag.emit(REGISTRY, "Loaded global config {path}", channel='config',
                  path=get_global_config_path())

    resolved: Dict[str, Any] = {}
    # Lowest priority first so higher layers overwrite
    for layer in (global_cfg, project_cfg, overrides or {}):
        for key, value in _normalized(layer).items():
            if value is not None:
                resolved[key] = value
    return resolved


def resolve_settings(overrides: Optional[Mapping[str, Any]] = None, start_dir=None) -> Settings:
    """Build Settings from the three config layers.

    Raises:
        ValueError: If any layer contains an unknown setting
    """
    resolved = resolve_config(overrides, start_dir)
    return Settings.from_dict({key: value for key, value in resolved.items()
                               if key not in DIAGNOSTIC_KEYS})


# ---------------------------------------------------------------------------
# Config writing
# ---------------------------------------------------------------------------
def save_project_config(data, directory=None):
    """Write .loggerplus.json to directory (default: cwd)."""
    target = Path(directory or os.getcwd()) / PROJECT_CONFIG_NAME
    with open(target, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")
    return target


def save_global_config(data):
    """Write the global config file."""
    config_dir = get_global_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = get_global_config_path()
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")
    return config_path
