"""JSON reporter for scripted use."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from bigdiff.compare.models import ChangeKind, RunResult


def to_dict(result: RunResult, output_root: str) -> Dict[str, Any]:
    """Convert RunResult to a JSON-serialisable dict."""
    summary = result.summary

    issues_list: List[Dict[str, Any]] = []
    for issue in result.issues:
        issues_list.append({
            "path": issue.path,
            "kind": issue.kind.value,
            "message": issue.message,
        })

    modified_binary: List[Dict[str, Any]] = []
    for c in result.classifications:
        if c.is_binary_change:
            modified_binary.append({"path": c.path, "reason": c.outcome.reason.describe()})  # type: ignore[union-attr]

    return {
        "version": "1.0",
        "output": output_root,
        "dry_run": result.dry_run,
        "summary": {
            "unchanged": summary.unchanged,
            "added": summary.added,
            "deleted": summary.deleted,
            "modified_text": summary.modified_text,
            "modified_binary": summary.modified_binary,
            "deleted_dirs": summary.deleted_dirs,
        },
        "added": result.by_kind(ChangeKind.ADDED),
        "deleted": result.by_kind(ChangeKind.DELETED),
        "modified_text": sorted(c.path for c in result.classifications if c.is_text_change),
        "modified_binary": modified_binary,
        "artifacts": result.artifacts,
        "issues": issues_list,
        "cancelled": result.cancelled,
        **({"fatal": result.fatal} if result.fatal else {}),
        "exit_code": result.exit_code,
        "duration_ms": result.duration_ms,
    }


def render(result: RunResult, output_root: str) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result, output_root), indent=2)
