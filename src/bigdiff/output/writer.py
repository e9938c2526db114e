"""Output materializer — mirrored artifacts under the output root.

Every artifact is written to a temporary file in its destination directory
and renamed into place, so an interrupted run never leaves a half-written
``.new`` / ``.deleted`` / ``.modified`` file behind. In dry-run mode nothing
touches the filesystem; the writer only remembers what it would have made.
"""

from __future__ import annotations

import contextlib
import errno
import os
import shutil
import tempfile
import threading
from pathlib import Path
from typing import BinaryIO, Callable, Iterable, List, Optional, Set

from bigdiff.log import get_logger

logger = get_logger(__name__)

NEW_SUFFIX = ".new"
DELETED_SUFFIX = ".deleted"
MODIFIED_SUFFIX = ".modified"
NOTE_SUFFIX = ".modified.NOTE.txt"
SUFFIXES = (NEW_SUFFIX, DELETED_SUFFIX, MODIFIED_SUFFIX, NOTE_SUFFIX)

# A binary artifact and its note are renamed together.
_COMPANIONS = {
    MODIFIED_SUFFIX: (MODIFIED_SUFFIX, NOTE_SUFFIX),
    NOTE_SUFFIX: (MODIFIED_SUFFIX, NOTE_SUFFIX),
}

# Conditions under which no further artifact can be written.
FATAL_ERRNOS = frozenset(
    code for code in (errno.ENOSPC, errno.EROFS, getattr(errno, "EDQUOT", None)) if code is not None
)


class WriteError(Exception):
    """Raised when one artifact cannot be created."""

    def __init__(self, path: str, message: str, errno_: Optional[int] = None) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.errno = errno_

    @property
    def fatal(self) -> bool:
        return self.errno in FATAL_ERRNOS


class OutputWriter:
    """Write artifacts for one run under *root*."""

    def __init__(self, root: Path, *, dry_run: bool = False) -> None:
        self.root = Path(root)
        self.dry_run = dry_run
        self._planned: List[str] = []
        self._lock = threading.Lock()
        self._reserved_dirs: Set[str] = set()
        self._natural: Set[str] = set()

    @property
    def planned(self) -> List[str]:
        """Relative artifact paths produced (or, in dry-run, that would be)."""
        with self._lock:
            return sorted(self._planned)

    def prepare_root(self) -> None:
        """Create the output root and check it is writable."""
        if self.dry_run:
            return
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise WriteError(str(self.root), f"cannot create output root: {exc.strerror or exc}", exc.errno) from exc
        if not os.access(self.root, os.W_OK | os.X_OK):
            raise WriteError(str(self.root), "output root is not writable", errno.EACCES)

    def reserve(self, relative_paths: Iterable[str]) -> None:
        """Claim the output directories that will mirror *relative_paths*.

        Call once, before any artifact is written. An artifact whose name
        lands on one of these directories (file ``a`` next to a directory
        ``a.new/``) is renamed ``a (1).new`` instead, whatever order the
        paths are processed in.
        """
        for rel in relative_paths:
            self._natural.update(rel + suffix for suffix in SUFFIXES)
            parent = rel.rpartition("/")[0]
            while parent and parent not in self._reserved_dirs:
                self._reserved_dirs.add(parent)
                parent = parent.rpartition("/")[0]

    def artifact_name(self, relative_path: str, suffix: str) -> str:
        """Relative artifact path for *relative_path*, clear of directories."""
        suffixes = _COMPANIONS.get(suffix, (suffix,))
        if not any(self._blocked(relative_path + s) for s in suffixes):
            return relative_path + suffix

        parent, _, stem = relative_path.rpartition("/")
        prefix = f"{parent}/" if parent else ""
        n = 1
        while True:
            candidate = f"{prefix}{stem} ({n})"
            names = [candidate + s for s in suffixes]
            if not any(name in self._natural or self._blocked(name) for name in names):
                logger.info("Renamed %s%s to %s%s: a directory has that name", relative_path, suffix, candidate, suffix)
                return candidate + suffix
            n += 1

    def destination(self, artifact: str) -> Path:
        return self.root.joinpath(*artifact.split("/"))

    def _blocked(self, artifact: str) -> bool:
        if artifact in self._reserved_dirs:
            return True
        return not self.dry_run and self.destination(artifact).is_dir()

    # ---- artifact writers ----

    def copy(self, source: Path, relative_path: str, suffix: str) -> str:
        """Copy *source* verbatim to the artifact for *relative_path*."""

        def fill(fh: BinaryIO) -> None:
            with open(source, "rb") as src:
                shutil.copyfileobj(src, fh)

        return self._write(relative_path, suffix, fill, mode_source=source)

    def write_text(self, relative_path: str, suffix: str, text: str) -> str:
        """Write *text* as UTF-8 to the artifact for *relative_path*."""
        data = text.encode("utf-8")
        return self._write(relative_path, suffix, lambda fh: fh.write(data))

    # ---- internals ----

    def _write(
        self,
        relative_path: str,
        suffix: str,
        fill: Callable[[BinaryIO], object],
        mode_source: Optional[Path] = None,
    ) -> str:
        artifact = self.artifact_name(relative_path, suffix)
        with self._lock:
            self._planned.append(artifact)
        if self.dry_run:
            return artifact

        dest = self.destination(artifact)
        try:
            ensure_dir(dest.parent)
            _atomic_write(dest, fill, mode_source)
        except OSError as exc:
            with self._lock:
                self._planned.remove(artifact)
            raise WriteError(artifact, exc.strerror or str(exc), exc.errno) from exc
        return artifact


def ensure_dir(path: Path) -> None:
    """Create *path* and its parents; safe when another thread races us."""
    path.mkdir(parents=True, exist_ok=True)


def _atomic_write(
    dest: Path,
    fill: Callable[[BinaryIO], object],
    mode_source: Optional[Path] = None,
) -> None:
    fd, tmp = tempfile.mkstemp(prefix=f".{dest.name}.", suffix=".tmp", dir=dest.parent)
    try:
        with os.fdopen(fd, "wb") as fh:
            fill(fh)
        if mode_source is not None:
            shutil.copymode(mode_source, tmp)
        else:
            os.chmod(tmp, 0o644)  # mkstemp creates 0600
        os.replace(tmp, dest)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp)
        raise
