"""
Configuration loader.

Reads ``config.yaml`` from the Crux home directory and deep-merges it over
DEFAULT_CONFIG. A missing or malformed file is not fatal: the defaults are
used and a warning is logged.
"""

import copy
import logging
import os
from typing import Any, Dict, Mapping, Optional

import yaml

from crux.config.defaults import DEFAULT_CONFIG
from crux.config.paths import crux_home

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.yaml"


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge ``override`` into a copy of ``base``; ``override`` wins.

    Nested mappings are merged key by key, any other value replaces the
    base value. ``None`` values in ``override`` are ignored.
    """
    result = copy.deepcopy(dict(base))
    for key, value in override.items():
        if value is None:
            continue
        if isinstance(value, Mapping) and isinstance(result.get(key), Mapping):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load the user config merged over the defaults.

    Args:
        path: Explicit config file (default: ``<crux home>/config.yaml``)

    Returns:
        A fresh config dict; never shares state with DEFAULT_CONFIG
    """
    path = path or crux_home(CONFIG_FILENAME)
    if not os.path.exists(path):
        logger.debug(f"No config file at {path}, using defaults")
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(path, "r", encoding="utf-8") as f:
            parsed = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return copy.deepcopy(DEFAULT_CONFIG)

    if parsed is None:
        return copy.deepcopy(DEFAULT_CONFIG)
    if not isinstance(parsed, Mapping):
        logger.warning(f"Ignoring config {path}: top level must be a mapping")
        return copy.deepcopy(DEFAULT_CONFIG)

    return deep_merge(DEFAULT_CONFIG, parsed)
