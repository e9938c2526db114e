"""Content classifier — unchanged, binary/oversized, or diffable text."""

from __future__ import annotations

import codecs
import filecmp
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from bigdiff.compare.models import BinaryContentDetected, BinaryReason, SizeExceedsLimit
from bigdiff.diff.lines import normalize_eol

SNIFF_BYTES = 8192
FALLBACK_ENCODING = "cp1252"


class ClassificationError(Exception):
    """Raised when a file vanished or became unreadable after the scan."""


class ContentKind(str, Enum):
    UNCHANGED = "unchanged"
    BINARY = "binary"
    TEXT = "text"


@dataclass(frozen=True)
class ContentVerdict:
    kind: ContentKind
    reason: Optional[BinaryReason] = None
    base_text: Optional[str] = None
    target_text: Optional[str] = None
    target_size: int = 0


def looks_binary(path: Path, sniff_bytes: int = SNIFF_BYTES) -> bool:
    """True if the first *sniff_bytes* hold a NUL or an invalid UTF-8 sequence.

    A multibyte character cut off by the end of the window is not invalid.
    """
    with open(path, "rb") as f:
        chunk = f.read(sniff_bytes)
        at_eof = not f.read(1)
    if b"\x00" in chunk:
        return True
    try:
        codecs.getincrementaldecoder("utf-8")().decode(chunk, final=at_eof)
    except UnicodeDecodeError:
        return True
    return False


def read_text(path: Path, *, eol_normalize: bool = False) -> str:
    """Decode a file as UTF-8, falling back to cp1252 for stray bytes."""
    data = Path(path).read_bytes()
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        text = data.decode(FALLBACK_ENCODING, errors="replace")
    return normalize_eol(text) if eol_normalize else text


def classify_content(
    base_path: Path,
    target_path: Path,
    *,
    max_text_size: int,
    normalize_eol: bool = False,
    sniff_bytes: int = SNIFF_BYTES,
) -> ContentVerdict:
    """Decide how a path present in both trees should be materialized."""
    try:
        if filecmp.cmp(base_path, target_path, shallow=False):
            return ContentVerdict(ContentKind.UNCHANGED)

        base_size = os.stat(base_path).st_size
        target_size = os.stat(target_path).st_size
        if base_size > max_text_size or target_size > max_text_size:
            return ContentVerdict(
                ContentKind.BINARY,
                reason=SizeExceedsLimit(actual=max(base_size, target_size), limit=max_text_size),
                target_size=target_size,
            )

        if looks_binary(base_path, sniff_bytes) or looks_binary(target_path, sniff_bytes):
            return ContentVerdict(
                ContentKind.BINARY,
                reason=BinaryContentDetected(sniff_bytes),
                target_size=target_size,
            )

        base_text = read_text(base_path, eol_normalize=normalize_eol)
        target_text = read_text(target_path, eol_normalize=normalize_eol)
    except OSError as exc:
        raise ClassificationError(f"cannot read for comparison: {exc.strerror or exc}") from exc

    if base_text == target_text:
        return ContentVerdict(ContentKind.UNCHANGED)
    return ContentVerdict(ContentKind.TEXT, base_text=base_text, target_text=target_text)
