"""Comment profile table — which comment syntax annotates which file type.

Profiles are plain records looked up by extension (or by exact filename for
extension-less files such as ``Makefile``). Unknown files get the fallback
``#`` profile. Extra profiles can be registered in code or loaded from YAML::

    - extensions: [".vue", ".svelte"]
      block: ["<!--", "-->"]
    - names: ["Jenkinsfile"]
      line: "//"
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, Optional, Tuple

import yaml


@dataclass(frozen=True)
class CommentProfile:
    """How to turn a line into a comment for one language."""

    line_token: Optional[str] = None
    block: Optional[Tuple[str, str]] = None
    fallback_token: str = "#"


SLASH = CommentProfile(line_token="//")
HASH = CommentProfile(line_token="#")
DASH = CommentProfile(line_token="--")
PERCENT = CommentProfile(line_token="%")
SEMICOLON = CommentProfile(line_token=";")
MARKUP = CommentProfile(block=("<!--", "-->"))
C_BLOCK = CommentProfile(block=("/*", "*/"))
FALLBACK = CommentProfile()

_BUILTIN_EXTENSIONS: Dict[CommentProfile, Tuple[str, ...]] = {
    SLASH: (
        ".c", ".h", ".cpp", ".hpp", ".cc", ".java", ".js", ".jsx", ".ts", ".tsx",
        ".cs", ".swift", ".go", ".kt", ".kts", ".scala", ".dart", ".php", ".rs",
    ),
    HASH: (
        ".py", ".sh", ".rb", ".r", ".ps1", ".toml", ".yaml", ".yml", ".cfg",
        ".txt", ".log", ".conf", ".md", ".csv", ".tsv",
    ),
    DASH: (".sql", ".hs", ".lua"),
    PERCENT: (".tex", ".m"),
    SEMICOLON: (".ini",),
    MARKUP: (".html", ".htm", ".xml", ".xhtml", ".svg"),
    C_BLOCK: (".css", ".scss", ".less", ".json"),
}

_BUILTIN_NAMES: Dict[CommentProfile, Tuple[str, ...]] = {
    HASH: (
        "Makefile", "Dockerfile", "Gemfile", "Rakefile",
        ".gitignore", ".dockerignore", ".gitattributes", ".env",
    ),
}


class CommentTable:
    """Extensible extension/filename -> CommentProfile mapping."""

    def __init__(self, fallback: CommentProfile = FALLBACK) -> None:
        self._by_extension: Dict[str, CommentProfile] = {}
        self._by_name: Dict[str, CommentProfile] = {}
        self.fallback = fallback

    # ---- registration ----

    def register(
        self,
        profile: CommentProfile,
        extensions: Iterable[str] = (),
        names: Iterable[str] = (),
    ) -> None:
        for ext in extensions:
            ext = ext.lower()
            self._by_extension[ext if ext.startswith(".") else f".{ext}"] = profile
        for name in names:
            self._by_name[name] = profile

    def load_yaml(self, path: Path) -> int:
        """Register profiles from a YAML file. Returns the number of entries."""
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or []
        if not isinstance(data, list):
            data = [data]
        count = 0
        for entry in data:
            if not isinstance(entry, dict):
                raise ValueError(f"{path}: each comment profile must be a mapping, got {entry!r}")
            block = entry.get("block")
            if block is not None and (not isinstance(block, list) or len(block) != 2):
                raise ValueError(f"{path}: 'block' must be a [open, close] pair, got {block!r}")
            profile = CommentProfile(
                line_token=entry.get("line"),
                block=tuple(block) if block else None,  # type: ignore[arg-type]
                fallback_token=entry.get("fallback", "#"),
            )
            self.register(profile, entry.get("extensions", []), entry.get("names", []))
            count += 1
        return count

    # ---- lookup ----

    def lookup(self, path: str) -> CommentProfile:
        """Return the profile for a relative path (``/``-separated)."""
        p = PurePosixPath(path)
        if p.name in self._by_name:
            return self._by_name[p.name]
        return self._by_extension.get(p.suffix.lower(), self.fallback)


def build_table(profiles_file: Optional[Path] = None) -> CommentTable:
    """Create the built-in table, plus any profiles from *profiles_file*."""
    table = CommentTable()
    for profile, exts in _BUILTIN_EXTENSIONS.items():
        table.register(profile, extensions=exts)
    for profile, names in _BUILTIN_NAMES.items():
        table.register(profile, names=names)
    if profiles_file is not None:
        table.load_yaml(profiles_file)
    return table


DEFAULT_TABLE = build_table()


def profile_for(path: str) -> CommentProfile:
    return DEFAULT_TABLE.lookup(path)
