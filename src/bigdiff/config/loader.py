"""Load and merge configuration from .bigdiff.toml, env vars, and roots."""

from __future__ import annotations

import dataclasses
import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[no-redef]

from bigdiff.config.schema import (
    SIZE_UNITS,
    BigDiffConfig,
    CommentsConfig,
    DiffConfig,
    IgnoreConfig,
    OutputConfig,
)
from bigdiff.scanner.ignore import split_patterns

CONFIG_FILENAME = ".bigdiff.toml"

_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([a-z]*)\s*$")
_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


class ConfigError(Exception):
    """Raised when config is malformed, unreadable, or the roots are unusable."""


def parse_size(value: Union[str, int]) -> int:
    """Parse a human size like ``5MB``, ``512kib`` or ``102400`` into bytes."""
    if isinstance(value, bool):
        raise ConfigError(f"Invalid size: {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise ConfigError(f"Size must not be negative: {value}")
        return value
    m = _SIZE_RE.match(str(value).lower())
    if m is None:
        raise ConfigError(f"Invalid size: {value!r}")
    number, unit = m.groups()
    if unit not in SIZE_UNITS:
        raise ConfigError(f"Unknown size unit {unit!r} in {value!r}")
    return int(float(number) * SIZE_UNITS[unit])


def parse_bool(value: str, name: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {value!r}")


def find_config_file(start_dir: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = start_dir / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _merge_env_overrides(cfg: BigDiffConfig) -> None:
    """Apply BIGDIFF_* environment variable overrides."""
    if val := os.environ.get("BIGDIFF_MAX_TEXT_SIZE"):
        cfg.diff.max_text_size = parse_size(val)
    if val := os.environ.get("BIGDIFF_NORMALIZE_EOL"):
        cfg.diff.normalize_eol = parse_bool(val, "BIGDIFF_NORMALIZE_EOL")
    if val := os.environ.get("BIGDIFF_IGNORE"):
        cfg.ignore.patterns.extend(split_patterns([val]))
    if val := os.environ.get("BIGDIFF_FORMAT"):
        if val in ("terminal", "json"):
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("BIGDIFF_WORKERS"):
        try:
            cfg.diff.workers = int(val)
        except ValueError:
            pass


def validate(cfg: BigDiffConfig) -> None:
    """Check value ranges after all sources are merged."""
    cfg.diff.max_text_size = parse_size(cfg.diff.max_text_size)
    if cfg.diff.workers is not None and cfg.diff.workers < 1:
        raise ConfigError(f"workers must be at least 1, got {cfg.diff.workers}")
    if cfg.output.format not in ("terminal", "json"):
        raise ConfigError(f"Invalid output format: {cfg.output.format}")
    if not isinstance(cfg.ignore.patterns, list):
        raise ConfigError("[ignore] patterns must be a list of globs")


def load_config(
    start_dir: Path,
    config_override: Optional[str] = None,
) -> BigDiffConfig:
    """Load, validate, and return a BigDiffConfig."""
    config_path = find_config_file(start_dir, config_override)

    if config_path is None:
        cfg = BigDiffConfig()
    else:
        raw = _parse_toml(config_path)
        try:
            cfg = BigDiffConfig(
                version=raw.get("version", "1.0"),
                diff=_build_section(raw, DiffConfig, "diff"),
                ignore=_build_section(raw, IgnoreConfig, "ignore"),
                output=_build_section(raw, OutputConfig, "output"),
                comments=_build_section(raw, CommentsConfig, "comments"),
            )
        except TypeError as exc:
            raise ConfigError(f"Invalid config in {config_path}: {exc}") from exc

    _merge_env_overrides(cfg)
    validate(cfg)
    return cfg


def validate_roots(base: Path, target: Path, output: Path) -> Tuple[Path, Path, Path]:
    """Resolve the three roots and reject unusable combinations.

    Returns the resolved (base, target, output) paths.
    """
    for label, root in (("base", base), ("target", target)):
        if not root.exists():
            raise ConfigError(f"{label} directory not found: {root}")
        if not root.is_dir():
            raise ConfigError(f"{label} path is not a directory: {root}")
        if not os.access(root, os.R_OK | os.X_OK):
            raise ConfigError(f"{label} directory is not readable: {root}")

    base_abs = base.resolve()
    target_abs = target.resolve()
    out_abs = output.resolve()

    if base_abs == target_abs:
        raise ConfigError("base and target cannot be the same directory.")
    for root in (base_abs, target_abs):
        if out_abs == root or root in out_abs.parents:
            raise ConfigError("output cannot be inside base/target nor be equal to them.")
    if out_abs.exists() and not out_abs.is_dir():
        raise ConfigError(f"output path exists and is not a directory: {output}")

    return base_abs, target_abs, out_abs
