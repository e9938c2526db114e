"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

OutputFormat = Literal["terminal", "json"]

DEFAULT_MAX_TEXT_SIZE = 5_000_000  # 5MB, decimal like the CLI default

# Unit suffix -> multiplier. Decimal units for k/m/g, binary for the *ib forms.
SIZE_UNITS: dict[str, int] = {
    "": 1,
    "b": 1,
    "k": 1000,
    "kb": 1000,
    "kib": 1024,
    "m": 1000**2,
    "mb": 1000**2,
    "mib": 1024**2,
    "g": 1000**3,
    "gb": 1000**3,
    "gib": 1024**3,
}


@dataclass
class DiffConfig:
    normalize_eol: bool = False
    max_text_size: int = DEFAULT_MAX_TEXT_SIZE  # bytes; files above this are copied whole
    workers: Optional[int] = None  # None = ThreadPoolExecutor default


@dataclass
class IgnoreConfig:
    patterns: List[str] = field(default_factory=list)
    use_defaults: bool = True  # .git, __pycache__, .DS_Store, Thumbs.db
    file: Optional[str] = None  # .bigdiffignore-style pattern file


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True


@dataclass
class CommentsConfig:
    profiles_file: Optional[str] = None  # YAML file with extra comment profiles


@dataclass
class BigDiffConfig:
    version: str = "1.0"
    diff: DiffConfig = field(default_factory=DiffConfig)
    ignore: IgnoreConfig = field(default_factory=IgnoreConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    comments: CommentsConfig = field(default_factory=CommentsConfig)
