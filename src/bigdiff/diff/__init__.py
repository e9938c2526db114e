"""Line diffing — edit scripts, comment profiles, annotation rendering."""

from bigdiff.diff.annotate import DELETED_MARKER, NEW_MARKER, render
from bigdiff.diff.comments import CommentProfile, CommentTable, build_table, profile_for
from bigdiff.diff.lines import LineDiffer, diff_lines, diff_texts, normalize_eol, split_lines
from bigdiff.diff.models import EditScript, Op, OpKind

__all__ = [
    "DELETED_MARKER",
    "NEW_MARKER",
    "CommentProfile",
    "CommentTable",
    "EditScript",
    "LineDiffer",
    "Op",
    "OpKind",
    "build_table",
    "diff_lines",
    "diff_texts",
    "normalize_eol",
    "profile_for",
    "render",
    "split_lines",
]
