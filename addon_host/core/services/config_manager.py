"""
config_manager.py
-----------------
Loads host configuration and template catalogs from disk.

Features:
- YAML (.yaml/.yml), JSON and Python (DEFAULT_CONFIG) files
- One-time index of the config search path, so bare names resolve in O(1)
- Recursive merge of loaded values over code defaults
- '_notes' keys are documentation only and never reach the caller
"""

import importlib.util
import json
import os
from typing import Any, Callable, Dict, Optional

import yaml

from addon_host.core.debug.debug_logger import DebugLogger
from addon_host.core.runtime.host_settings import Paths


# ===========================================================
# Configuration
# ===========================================================

SEARCH_DIRS = [
    ".",
    Paths.CONFIG_DIR,
    os.path.join(Paths.CONFIG_DIR, "templates"),
]

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json", ".py")

NOTES_KEY = "_notes"

# filename -> path, and stem -> path for extension-less lookups
_FILE_INDEX: Optional[Dict[str, str]] = None


# ===========================================================
# Public API
# ===========================================================

def load_config(filename: str, default_dict: Optional[Dict[str, Any]] = None,
                strict: bool = False) -> Dict[str, Any]:
    """
    Load a config file and merge it over defaults.

    Args:
        filename: Absolute path, or a name looked up in SEARCH_DIRS
            (extension optional)
        default_dict: Values used for any key the file does not set
        strict: Raise FileNotFoundError instead of falling back to defaults

    Returns:
        Merged configuration dict (never the defaults object itself)
    """
    defaults = default_dict or {}
    path = filename if os.path.isabs(filename) else _resolve_search_path(filename)
    loader = _loader_for(path)

    try:
        data = loader(path)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        if strict:
            raise FileNotFoundError(f"Config not found or unreadable: {filename}") from e
        DebugLogger.warn(f"Could not load {filename} ({e}); using defaults", category="loading")
        return merge_config(defaults, None)

    if data is not None and not isinstance(data, dict):
        DebugLogger.warn(f"{filename} does not contain a mapping; using defaults", category="loading")
        data = None
    return merge_config(defaults, data)


def merge_config(default_dict: Dict[str, Any], override: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Recursively merge ``override`` over ``default_dict`` into a new dict."""
    merged = {key: _copy_value(value) for key, value in default_dict.items()}
    for key, value in (override or {}).items():
        if key == NOTES_KEY:
            continue
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def build_file_index():
    """Scan SEARCH_DIRS once; the first file found for a name wins."""
    global _FILE_INDEX
    _FILE_INDEX = {}

    for directory in SEARCH_DIRS:
        if not os.path.isdir(directory):
            continue
        for root, _, files in os.walk(directory):
            for file in sorted(files):
                if not file.endswith(CONFIG_EXTENSIONS):
                    continue
                path = os.path.join(root, file)
                _FILE_INDEX.setdefault(file, path)
                _FILE_INDEX.setdefault(os.path.splitext(file)[0], path)

    DebugLogger.init(f"Config index: {len(_FILE_INDEX)} entries", category="loading")


def rebuild_file_index():
    """Drop the cached index and scan again (after SEARCH_DIRS changes)."""
    global _FILE_INDEX
    _FILE_INDEX = None
    build_file_index()


# ===========================================================
# Path Resolution
# ===========================================================

def _resolve_search_path(filename: str) -> str:
    if _FILE_INDEX is None:
        build_file_index()
    key = filename.replace("\\", "/").lstrip("/")
    # Unindexed names are returned as-is and fail at open time
    return _FILE_INDEX.get(key) or _FILE_INDEX.get(os.path.basename(key)) or key


# ===========================================================
# File Loaders
# ===========================================================

def _loader_for(path: str) -> Callable[[str], Any]:
    ext = os.path.splitext(path)[1].lower()
    if ext == ".py":
        return _load_py_module
    if ext in (".yaml", ".yml"):
        return _load_yaml
    return _load_json


def _load_yaml(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    DebugLogger.system(f"Loaded {os.path.basename(path)}", category="loading")
    return data


def _load_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    DebugLogger.system(f"Loaded {os.path.basename(path)}", category="loading")
    return data


def _load_py_module(path: str) -> Any:
    """Execute a Python config file and return its DEFAULT_CONFIG."""
    if not os.path.exists(path):
        raise FileNotFoundError(path)
    module_name = f"_addon_host_config_{os.path.splitext(os.path.basename(path))[0]}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except (ImportError, SyntaxError) as e:
        DebugLogger.warn(f"Failed to run Python config {path}: {e}", category="loading")
        return None
    DebugLogger.system(f"Loaded {os.path.basename(path)} (Python)", category="loading")
    return getattr(module, "DEFAULT_CONFIG", None)


def _copy_value(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _copy_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return list(value)
    return value
