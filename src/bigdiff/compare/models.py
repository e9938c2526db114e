"""Classification, summary, and run result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from bigdiff.diff.models import EditScript


class ChangeKind(str, Enum):
    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class BinaryContentDetected:
    sniff_bytes: int = 0

    def describe(self) -> str:
        return (
            "binary content detected (NUL byte or invalid UTF-8 "
            f"within the first {self.sniff_bytes} bytes)"
        )


@dataclass(frozen=True)
class SizeExceedsLimit:
    actual: int
    limit: int

    def describe(self) -> str:
        return f"size {self.actual} bytes exceeds the text diff limit of {self.limit} bytes"


BinaryReason = Union[BinaryContentDetected, SizeExceedsLimit]


@dataclass(frozen=True)
class TextDiff:
    # None unless the run keeps scripts (Pipeline(keep_scripts=True)).
    script: Optional[EditScript] = None


@dataclass(frozen=True)
class BinaryOrOversized:
    reason: BinaryReason


DiffOutcome = Union[TextDiff, BinaryOrOversized]


@dataclass(frozen=True)
class Classification:
    """The single verdict for one relative file path."""

    path: str
    kind: ChangeKind
    outcome: Optional[DiffOutcome] = None

    @property
    def is_text_change(self) -> bool:
        return self.kind == ChangeKind.MODIFIED and isinstance(self.outcome, TextDiff)

    @property
    def is_binary_change(self) -> bool:
        return self.kind == ChangeKind.MODIFIED and isinstance(self.outcome, BinaryOrOversized)


class IssueKind(str, Enum):
    SCAN = "scan"
    CLASSIFY = "classify"
    WRITE = "write"


@dataclass(frozen=True)
class RunIssue:
    """A per-path problem that did not stop the run."""

    path: str
    kind: IssueKind
    message: str


@dataclass
class Summary:
    """Per-category counts, identical for dry and real runs."""

    added: int = 0
    deleted: int = 0
    modified_text: int = 0
    modified_binary: int = 0
    unchanged: int = 0
    deleted_dirs: int = 0

    def record(self, classification: Classification) -> None:
        if classification.kind == ChangeKind.ADDED:
            self.added += 1
        elif classification.kind == ChangeKind.DELETED:
            self.deleted += 1
        elif classification.kind == ChangeKind.UNCHANGED:
            self.unchanged += 1
        elif classification.is_binary_change:
            self.modified_binary += 1
        else:
            self.modified_text += 1

    @property
    def modified(self) -> int:
        return self.modified_text + self.modified_binary

    @property
    def total_files(self) -> int:
        return self.added + self.deleted + self.modified + self.unchanged


EXIT_CLEAN = 0
EXIT_WARNINGS = 1
EXIT_FATAL = 2
EXIT_INTERRUPTED = 130


@dataclass
class RunResult:
    """Complete result of one comparison run."""

    summary: Summary = field(default_factory=Summary)
    classifications: List[Classification] = field(default_factory=list)
    issues: List[RunIssue] = field(default_factory=list)
    artifacts: List[str] = field(default_factory=list)  # relative to the output root
    dry_run: bool = False
    cancelled: bool = False
    fatal: Optional[str] = None
    duration_ms: float = 0.0

    @property
    def exit_code(self) -> int:
        if self.fatal:
            return EXIT_FATAL
        if self.cancelled:
            return EXIT_INTERRUPTED
        if self.issues:
            return EXIT_WARNINGS
        return EXIT_CLEAN

    def by_kind(self, kind: ChangeKind) -> List[str]:
        return sorted(c.path for c in self.classifications if c.kind == kind)
