"""Core pipeline — scan, classify, diff, render, materialize.

Both trees are scanned concurrently, then every relative file path runs
through its own pipeline on a thread pool. Pipelines share nothing but the
output root; all bookkeeping happens on the calling thread as results come
back, so a failure in one path never stops the others.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from bigdiff.compare.content import ClassificationError, ContentKind, classify_content
from bigdiff.compare.models import (
    BinaryOrOversized,
    BinaryReason,
    ChangeKind,
    Classification,
    IssueKind,
    RunIssue,
    RunResult,
    TextDiff,
)
from bigdiff.compare.paths import classify_paths
from bigdiff.config.schema import DiffConfig
from bigdiff.diff.annotate import render
from bigdiff.diff.comments import DEFAULT_TABLE, CommentTable
from bigdiff.diff.lines import LineDiffer, split_lines
from bigdiff.log import get_logger
from bigdiff.output.writer import (
    DELETED_SUFFIX,
    MODIFIED_SUFFIX,
    NEW_SUFFIX,
    NOTE_SUFFIX,
    OutputWriter,
    WriteError,
)
from bigdiff.scanner.models import TreeListing
from bigdiff.scanner.walker import scan_tree

logger = get_logger(__name__)

IgnorePredicate = Callable[[str], bool]


class RunError(Exception):
    """Raised when the run cannot start at all (e.g. unusable output root)."""


@dataclass
class _TaskOutcome:
    classification: Optional[Classification] = None
    issues: List[RunIssue] = field(default_factory=list)


def _never(_relative_path: str) -> bool:
    return False


def note_text(reason: BinaryReason, base_file: Path, target_file: Path, size: int) -> str:
    """Human-readable explanation stored next to a binary '.modified' copy."""
    return (
        "File treated as binary or too large for line diff.\n"
        f"Reason: {reason.describe()}\n"
        f"Base origin (A): {base_file}\n"
        f"Target origin (B): {target_file}\n"
        f"Size: {size} bytes\n"
        "Strategy: direct copy from target to '.modified'.\n"
    )


class Pipeline:
    """One comparison run of *base* against *target* into *output*."""

    def __init__(
        self,
        base: Path,
        target: Path,
        output: Path,
        options: Optional[DiffConfig] = None,
        *,
        should_ignore: IgnorePredicate = _never,
        comments: CommentTable = DEFAULT_TABLE,
        dry_run: bool = False,
        differ: Optional[LineDiffer] = None,
        keep_scripts: bool = False,
    ) -> None:
        self.base = Path(base)
        self.target = Path(target)
        self.options = options or DiffConfig()
        self.should_ignore = should_ignore
        self.comments = comments
        self.dry_run = dry_run
        self.keep_scripts = keep_scripts
        self.differ = differ or LineDiffer()
        self.writer = OutputWriter(Path(output), dry_run=dry_run)
        self._cancel = threading.Event()
        self._fatal: Optional[str] = None

    def cancel(self) -> None:
        """Stop scheduling new paths; in-flight writes still finish."""
        self._cancel.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    # ---- orchestration ----

    def run(self) -> RunResult:
        start = time.perf_counter()
        result = RunResult(dry_run=self.dry_run)

        try:
            self.writer.prepare_root()
        except WriteError as exc:
            raise RunError(str(exc)) from exc

        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="bigdiff-scan") as pool:
            base_future = pool.submit(scan_tree, self.base, self.should_ignore)
            target_future = pool.submit(scan_tree, self.target, self.should_ignore)
            base_listing = base_future.result()
            target_listing = target_future.result()

        for side, listing in (("base", base_listing), ("target", target_listing)):
            for warning in listing.warnings:
                result.issues.append(RunIssue(f"{side}:{warning.relative_path}", IssueKind.SCAN, warning.message))

        plan = classify_paths(base_listing, target_listing)
        result.summary.deleted_dirs = len(plan.deleted_dirs)
        self.writer.reserve(plan.added + plan.deleted + plan.common)
        logger.info(
            "Planned %d new, %d deleted, %d common paths",
            len(plan.added), len(plan.deleted), len(plan.common),
        )

        tasks = (
            [(ChangeKind.ADDED, rel) for rel in plan.added]
            + [(ChangeKind.DELETED, rel) for rel in plan.deleted]
            + [(None, rel) for rel in plan.common]
        )
        self._run_tasks(tasks, base_listing, target_listing, result)

        result.cancelled = self.cancelled and self._fatal is None
        result.fatal = self._fatal
        result.classifications.sort(key=lambda c: c.path)
        result.artifacts = self.writer.planned
        result.duration_ms = round((time.perf_counter() - start) * 1000, 2)
        return result

    def _run_tasks(
        self,
        tasks: list,
        base_listing: TreeListing,
        target_listing: TreeListing,
        result: RunResult,
    ) -> None:
        executor = ThreadPoolExecutor(max_workers=self.options.workers, thread_name_prefix="bigdiff")
        futures: Dict[Future, str] = {}
        recorded: set = set()
        try:
            for kind, rel in tasks:
                if self.cancelled:
                    break
                future = executor.submit(self._process, kind, rel, base_listing, target_listing)
                futures[future] = rel
            for future in as_completed(futures):
                self._record(future.result(), result)
                recorded.add(future)
        except KeyboardInterrupt:
            logger.warning("Interrupted, letting in-flight files finish")
            self.cancel()
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

        # Results that finished while we were shutting down.
        for future in futures:
            if future not in recorded and future.done() and not future.cancelled():
                self._record(future.result(), result)

    def _record(self, outcome: _TaskOutcome, result: RunResult) -> None:
        if outcome.classification is not None:
            result.summary.record(outcome.classification)
            result.classifications.append(outcome.classification)
        for issue in outcome.issues:
            logger.warning("%s (%s): %s", issue.path, issue.kind.value, issue.message)
            result.issues.append(issue)

    # ---- per-path pipeline ----

    def _process(
        self,
        kind: Optional[ChangeKind],
        rel: str,
        base_listing: TreeListing,
        target_listing: TreeListing,
    ) -> _TaskOutcome:
        outcome = _TaskOutcome()
        if self.cancelled:
            return outcome

        base_file = base_listing.abspath(rel)
        target_file = target_listing.abspath(rel)
        try:
            classification, text = self._classify(kind, rel, base_file, target_file)
        except ClassificationError as exc:
            outcome.issues.append(RunIssue(rel, IssueKind.CLASSIFY, str(exc)))
            return outcome
        outcome.classification = classification

        try:
            self._materialize(classification, text, base_file, target_file)
        except WriteError as exc:
            outcome.issues.append(RunIssue(rel, IssueKind.WRITE, str(exc)))
            if exc.fatal:
                self._fatal = f"output is no longer writable: {exc}"
                self.cancel()
        logger.debug("Processed %s (%s)", rel, classification.kind.value)
        return outcome

    def _classify(
        self,
        kind: Optional[ChangeKind],
        rel: str,
        base_file: Path,
        target_file: Path,
    ) -> Tuple[Classification, Optional[str]]:
        """Return the verdict for *rel* plus the text artifact, if any."""
        if kind is not None:
            return Classification(rel, kind), None

        verdict = classify_content(
            base_file,
            target_file,
            max_text_size=self.options.max_text_size,
            normalize_eol=self.options.normalize_eol,
        )

        if verdict.kind == ContentKind.UNCHANGED:
            return Classification(rel, ChangeKind.UNCHANGED), None

        if verdict.kind == ContentKind.BINARY:
            assert verdict.reason is not None
            note = note_text(verdict.reason, base_file, target_file, verdict.target_size)
            return Classification(rel, ChangeKind.MODIFIED, BinaryOrOversized(verdict.reason)), note

        if self.dry_run and not self.keep_scripts:
            return Classification(rel, ChangeKind.MODIFIED, TextDiff()), None

        assert verdict.base_text is not None and verdict.target_text is not None
        script = self.differ.diff(split_lines(verdict.base_text), split_lines(verdict.target_text))
        outcome = TextDiff(script if self.keep_scripts else None)
        if self.dry_run:
            return Classification(rel, ChangeKind.MODIFIED, outcome), None

        trailing = (
            verdict.target_text.endswith("\n")
            if verdict.target_text
            else verdict.base_text.endswith("\n")
        )
        annotated = render(script, self.comments.lookup(rel), trailing_newline=trailing)
        logger.debug("%s: +%d -%d lines", rel, script.inserted, script.deleted)
        return Classification(rel, ChangeKind.MODIFIED, outcome), annotated

    def _materialize(
        self,
        classification: Classification,
        text: Optional[str],
        base_file: Path,
        target_file: Path,
    ) -> None:
        rel = classification.path
        if classification.kind == ChangeKind.ADDED:
            self.writer.copy(target_file, rel, NEW_SUFFIX)
        elif classification.kind == ChangeKind.DELETED:
            self.writer.copy(base_file, rel, DELETED_SUFFIX)
        elif classification.is_binary_change:
            self.writer.copy(target_file, rel, MODIFIED_SUFFIX)
            self.writer.write_text(rel, NOTE_SUFFIX, text or "")
        elif classification.is_text_change:
            self.writer.write_text(rel, MODIFIED_SUFFIX, text or "")


def run(
    base: Path,
    target: Path,
    output: Path,
    options: Optional[DiffConfig] = None,
    *,
    should_ignore: IgnorePredicate = _never,
    comments: CommentTable = DEFAULT_TABLE,
    dry_run: bool = False,
    keep_scripts: bool = False,
) -> RunResult:
    """Convenience wrapper: build a :class:`Pipeline` and run it.

    With *keep_scripts*, each text change carries its edit script.
    """
    return Pipeline(
        base,
        target,
        output,
        options,
        should_ignore=should_ignore,
        comments=comments,
        dry_run=dry_run,
        keep_scripts=keep_scripts,
    ).run()
