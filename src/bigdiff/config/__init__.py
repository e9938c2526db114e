"""Configuration loading, schema, and defaults."""

from bigdiff.config.loader import ConfigError, load_config, parse_size, validate_roots
from bigdiff.config.schema import BigDiffConfig

__all__ = [
    "BigDiffConfig",
    "ConfigError",
    "load_config",
    "parse_size",
    "validate_roots",
]
