"""Annotation renderer — fold an edit script into one readable file.

Equal lines are copied, deleted lines come back as comments prefixed with
``DELETED:``, inserted lines get a trailing ``NEW`` comment. Lines that are
already comments are wrapped all the same.
"""

from __future__ import annotations

from typing import List, Tuple

from bigdiff.diff.comments import CommentProfile
from bigdiff.diff.models import EditScript, OpKind

DELETED_MARKER = "DELETED:"
NEW_MARKER = "NEW"


def _split_cr(line: str) -> Tuple[str, str]:
    """Separate a trailing CR (unnormalized CRLF) so markers go before it."""
    if line.endswith("\r"):
        return line[:-1], "\r"
    return line, ""


def deleted_line(line: str, profile: CommentProfile) -> str:
    content, end = _split_cr(line)
    if profile.line_token:
        return f"{profile.line_token} {DELETED_MARKER} {content}{end}"
    if profile.block:
        open_, close = profile.block
        return f"{open_} {DELETED_MARKER} {content} {close}{end}"
    return f"{profile.fallback_token} {DELETED_MARKER} {content}{end}"


def inserted_line(line: str, profile: CommentProfile) -> str:
    content, end = _split_cr(line)
    if profile.line_token:
        return f"{content} {profile.line_token} {NEW_MARKER}{end}"
    if profile.block:
        open_, close = profile.block
        return f"{content} {open_} {NEW_MARKER} {close}{end}"
    return f"{content} {profile.fallback_token} {NEW_MARKER}{end}"


def render(script: EditScript, profile: CommentProfile, *, trailing_newline: bool = True) -> str:
    """Return the annotated merge of *script* as one string."""
    out: List[str] = []
    for op in script:
        if op.kind == OpKind.EQUAL:
            out.extend(op.lines)
        elif op.kind == OpKind.DELETE:
            out.extend(deleted_line(line, profile) for line in op.lines)
        else:
            out.extend(inserted_line(line, profile) for line in op.lines)

    text = "\n".join(out)
    if out and trailing_newline:
        text += "\n"
    return text
