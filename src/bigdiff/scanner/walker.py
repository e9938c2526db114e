"""Tree scanner — lazy, iterative directory walk with ignore pruning.

Symlinks are never followed outside the root and never into a directory that
is already an ancestor of the link (tracked by ``(st_dev, st_ino)``), so the
walk always terminates. Unreadable directories and rejected links become
:class:`ScanWarning` items instead of exceptions.
"""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Callable, FrozenSet, Iterator, List, Tuple, Union

from bigdiff.log import get_logger
from bigdiff.scanner.models import PathEntry, ScanWarning, TreeListing, WarningKind

logger = get_logger(__name__)

IgnorePredicate = Callable[[str], bool]
_InodeKey = Tuple[int, int]


def _never(_relative_path: str) -> bool:
    return False


def _inside(path: str, root: str) -> bool:
    return path == root or path.startswith(root.rstrip(os.sep) + os.sep)


def walk(
    root: Path,
    should_ignore: IgnorePredicate = _never,
) -> Iterator[Union[PathEntry, ScanWarning]]:
    """Yield a PathEntry for every file and directory under *root*.

    Ignored directories are pruned, so nothing below them is listed.
    """
    root_real = os.path.realpath(root)
    try:
        root_stat = os.stat(root_real)
    except OSError as exc:
        yield ScanWarning("", WarningKind.UNREADABLE, f"cannot stat root: {exc.strerror or exc}")
        return

    # (absolute dir, relative prefix, inode keys of the dir and its ancestors)
    stack: List[Tuple[str, str, FrozenSet[_InodeKey]]] = [
        (root_real, "", frozenset({(root_stat.st_dev, root_stat.st_ino)}))
    ]

    while stack:
        abs_dir, prefix, ancestors = stack.pop()
        try:
            with os.scandir(abs_dir) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as exc:
            yield ScanWarning(
                prefix.rstrip("/"),
                WarningKind.UNREADABLE,
                f"cannot list directory: {exc.strerror or exc}",
            )
            continue

        subdirs: List[Tuple[str, str, FrozenSet[_InodeKey]]] = []
        for entry in entries:
            rel = prefix + entry.name
            if should_ignore(rel):
                continue

            try:
                if entry.is_symlink():
                    item = _resolve_link(entry, rel, root_real, ancestors)
                    if isinstance(item, ScanWarning):
                        yield item
                        continue
                    if item is None:
                        continue
                    entry_out, key = item
                elif entry.is_dir(follow_symlinks=False):
                    st = entry.stat(follow_symlinks=False)
                    entry_out, key = PathEntry(rel, True), (st.st_dev, st.st_ino)
                elif entry.is_file(follow_symlinks=False):
                    st = entry.stat(follow_symlinks=False)
                    entry_out, key = PathEntry(rel, False, st.st_size), None
                else:
                    continue  # sockets, fifos, devices
            except OSError as exc:
                yield ScanWarning(rel, WarningKind.UNREADABLE, f"cannot stat: {exc.strerror or exc}")
                continue

            yield entry_out
            if entry_out.is_dir and key is not None:
                subdirs.append((os.path.join(abs_dir, entry.name), rel + "/", ancestors | {key}))

        # Reverse so the first sibling is popped first.
        stack.extend(reversed(subdirs))


def _resolve_link(
    entry: os.DirEntry,
    rel: str,
    root_real: str,
    ancestors: FrozenSet[_InodeKey],
):
    """Vet a symlink. Returns (PathEntry, inode key), a ScanWarning, or None."""
    target = os.path.realpath(entry.path)
    if not os.path.exists(target):
        return ScanWarning(rel, WarningKind.BROKEN_LINK, f"dangling symlink -> {os.readlink(entry.path)}")
    if not _inside(target, root_real):
        return ScanWarning(rel, WarningKind.LINK_ESCAPES_ROOT, f"symlink points outside the root -> {target}")

    st = os.stat(target)
    if stat.S_ISDIR(st.st_mode):
        key = (st.st_dev, st.st_ino)
        if key in ancestors:
            return ScanWarning(rel, WarningKind.LINK_CYCLE, "symlink cycle back to an ancestor directory")
        return PathEntry(rel, True), key
    if stat.S_ISREG(st.st_mode):
        return PathEntry(rel, False, st.st_size), None
    return None


def scan_tree(root: Path, should_ignore: IgnorePredicate = _never) -> TreeListing:
    """Run :func:`walk` to completion and collect the results."""
    listing = TreeListing(root=Path(root))
    for item in walk(root, should_ignore):
        if isinstance(item, ScanWarning):
            logger.warning("Scan warning in %s: %s", root, item)
            listing.warnings.append(item)
        elif item.is_dir:
            listing.dirs.add(item.relative_path)
        else:
            listing.files[item.relative_path] = item
    logger.debug(
        "Scanned %s: %d files, %d dirs, %d warnings",
        root, len(listing.files), len(listing.dirs), len(listing.warnings),
    )
    return listing
