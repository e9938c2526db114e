"""Comparison — path and content classification plus the run pipeline."""

from bigdiff.compare.engine import Pipeline, RunError, run
from bigdiff.compare.models import (
    ChangeKind,
    Classification,
    RunIssue,
    RunResult,
    Summary,
)
from bigdiff.compare.paths import PathPlan, classify_paths

__all__ = [
    "ChangeKind",
    "Classification",
    "PathPlan",
    "Pipeline",
    "RunError",
    "RunIssue",
    "RunResult",
    "Summary",
    "classify_paths",
    "run",
]
