"""Shared test fixtures — base/target/output trees under tmp_path."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Dict, Union

import pytest

TreeLayout = Dict[str, Union[str, bytes]]


def build_tree(root: Path, layout: TreeLayout) -> Path:
    """Create files under *root* from ``{"rel/path": content}``.

    A key ending in ``/`` creates an empty directory.
    """
    root.mkdir(parents=True, exist_ok=True)
    for rel, content in layout.items():
        path = root / rel
        if rel.endswith("/"):
            path.mkdir(parents=True, exist_ok=True)
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_bytes(content.encode("utf-8"))
    return root


def _read_tree(root: Path) -> Dict[str, bytes]:
    """Map every file under *root* to its bytes, keyed by POSIX relative path."""
    out: Dict[str, bytes] = {}
    for dirpath, _dirs, files in os.walk(root):
        for name in files:
            full = Path(dirpath) / name
            out[full.relative_to(root).as_posix()] = full.read_bytes()
    return out


@pytest.fixture
def read_tree() -> Callable[[Path], Dict[str, bytes]]:
    return _read_tree


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[str, TreeLayout], Path]:
    """Factory: ``make_tree("base", {...})`` builds ``tmp_path/base``."""

    def _make(name: str, layout: TreeLayout) -> Path:
        return build_tree(tmp_path / name, layout)

    return _make


@pytest.fixture
def roots(tmp_path: Path, make_tree):
    """The three-file sample pair used across the engine and CLI tests."""
    base = make_tree("base", {
        "a.txt": "x\ny\n",
        "img.bin": b"\x00\x01\x02\x03",
        "gone.py": "print('bye')\n",
        "same/keep.md": "# same\n",
        "olddir/inner/old.txt": "old\n",
    })
    target = make_tree("target", {
        "a.txt": "x\nz\n",
        "img.bin": b"\x00\x01\x02\x04",
        "fresh.rs": "fn main() {}\n",
        "same/keep.md": "# same\n",
    })
    return base, target, tmp_path / "out"


@pytest.fixture
def sample_profiles_yaml(tmp_path: Path) -> Path:
    path = tmp_path / "profiles.yaml"
    path.write_text(
        "- extensions: [\".vue\"]\n"
        "  block: [\"<!--\", \"-->\"]\n"
        "- names: [\"Jenkinsfile\"]\n"
        "  line: \"//\"\n",
        encoding="utf-8",
    )
    return path
