"""Configuration — defaults, option schema and the layered config hierarchy."""

from cachescribe.config.hierarchy import load_config_hierarchy, options_from_config
from cachescribe.config.schema import CacheOptions, parse_options

__all__ = [
    "CacheOptions",
    "load_config_hierarchy",
    "options_from_config",
    "parse_options",
]
