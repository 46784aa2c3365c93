"""User configuration: ``<crux home>/config.yaml`` merged over defaults."""

from crux.config.defaults import DEFAULT_CONFIG
from crux.config.loader import deep_merge, load_config
from crux.config.paths import crux_home

__all__ = ["DEFAULT_CONFIG", "crux_home", "deep_merge", "load_config"]
