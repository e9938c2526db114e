"""Line diff engine — minimal edit scripts between two line sequences.

The core is Myers' O((N+M)·D) difference algorithm in its linear-space
form: find the middle snake of the shortest edit path by running the
forward and reverse searches towards each other, split there, and solve the
two halves. Common prefixes and suffixes are stripped first, so when several
minimal alignments exist the earliest lines are matched first.

Regions whose line counts multiply past ``large_input_cells`` (the size of
the edit grid, so a 60 000 x 4 000 pair qualifies as much as 20 000 x 20 000)
are first cut at lines that occur exactly once in each side (patience
anchoring, longest increasing subsequence over the anchor positions). The
gaps between anchors are then diffed with a capped search: a gap that would
need more than ``cost_limit`` edit steps is emitted as one delete run plus
one insert run. The result is still a valid edit script, only not
guaranteed minimal.
"""

from __future__ import annotations

from bisect import bisect_left
from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple

from bigdiff.diff.models import EditScript, Op, OpKind

LARGE_INPUT_CELLS = 10_000_000  # len(a) * len(b)
DEFAULT_COST_LIMIT = 512

# (kind, a_start, a_end, b_start, b_end)
_Span = Tuple[OpKind, int, int, int, int]


def normalize_eol(text: str) -> str:
    """Rewrite CRLF and lone CR to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def split_lines(text: str) -> List[str]:
    """Split on ``\\n``; a final terminator does not add an empty line."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


class LineDiffer:
    """Compute an :class:`EditScript` between two line sequences."""

    def __init__(
        self,
        *,
        large_input_cells: int = LARGE_INPUT_CELLS,
        cost_limit: int = DEFAULT_COST_LIMIT,
    ) -> None:
        self.large_input_cells = large_input_cells
        self.cost_limit = cost_limit

    def diff(self, a: Sequence[str], b: Sequence[str]) -> EditScript:
        # Intern lines so the hot loops compare ints, not strings.
        ids: Dict[str, int] = {}
        a_ids = [ids.setdefault(line, len(ids)) for line in a]
        b_ids = [ids.setdefault(line, len(ids)) for line in b]

        spans: List[_Span] = []
        self._diff_range(a_ids, 0, len(a_ids), b_ids, 0, len(b_ids), spans, None)
        return _build_script(a, b, spans)

    # ---- recursion ----

    def _diff_range(
        self,
        a: List[int], alo: int, ahi: int,
        b: List[int], blo: int, bhi: int,
        out: List[_Span],
        limit: Optional[int],
    ) -> None:
        start_a, start_b = alo, blo
        while alo < ahi and blo < bhi and a[alo] == b[blo]:
            alo += 1
            blo += 1
        if alo > start_a:
            out.append((OpKind.EQUAL, start_a, alo, start_b, blo))

        end_a, end_b = ahi, bhi
        while ahi > alo and bhi > blo and a[ahi - 1] == b[bhi - 1]:
            ahi -= 1
            bhi -= 1

        self._diff_middle(a, alo, ahi, b, blo, bhi, out, limit)

        if end_a > ahi:
            out.append((OpKind.EQUAL, ahi, end_a, bhi, end_b))

    def _diff_middle(
        self,
        a: List[int], alo: int, ahi: int,
        b: List[int], blo: int, bhi: int,
        out: List[_Span],
        limit: Optional[int],
    ) -> None:
        if alo == ahi:
            if blo < bhi:
                out.append((OpKind.INSERT, alo, alo, blo, bhi))
            return
        if blo == bhi:
            out.append((OpKind.DELETE, alo, ahi, blo, blo))
            return

        if limit is None and (ahi - alo) * (bhi - blo) > self.large_input_cells:
            self._diff_anchored(a, alo, ahi, b, blo, bhi, out)
            return

        split = _middle_snake(a, alo, ahi, b, blo, bhi, limit)
        if split is None or split in ((alo, blo), (ahi, bhi)):
            out.append((OpKind.DELETE, alo, ahi, blo, blo))
            out.append((OpKind.INSERT, ahi, ahi, blo, bhi))
            return

        x, y = split
        self._diff_range(a, alo, x, b, blo, y, out, limit)
        self._diff_range(a, x, ahi, b, y, bhi, out, limit)

    def _diff_anchored(
        self,
        a: List[int], alo: int, ahi: int,
        b: List[int], blo: int, bhi: int,
        out: List[_Span],
    ) -> None:
        count_a = Counter(a[alo:ahi])
        count_b = Counter(b[blo:bhi])
        b_pos = {b[j]: j for j in range(blo, bhi) if count_b[b[j]] == 1}
        pairs = [
            (i, b_pos[a[i]])
            for i in range(alo, ahi)
            if count_a[a[i]] == 1 and a[i] in b_pos
        ]

        i, j = alo, blo
        for k in longest_increasing_subsequence([p[1] for p in pairs]):
            ai, bj = pairs[k]
            self._diff_range(a, i, ai, b, j, bj, out, self.cost_limit)
            out.append((OpKind.EQUAL, ai, ai + 1, bj, bj + 1))
            i, j = ai + 1, bj + 1
        self._diff_range(a, i, ahi, b, j, bhi, out, self.cost_limit)


def _middle_snake(
    a: List[int], alo: int, ahi: int,
    b: List[int], blo: int, bhi: int,
    limit: Optional[int],
) -> Optional[Tuple[int, int]]:
    """Return a point on a shortest edit path, or None if there is none
    within *limit* steps (or the sides share no line at all)."""
    n = ahi - alo
    m = bhi - blo
    max_d = (n + m + 1) // 2
    if limit is not None:
        max_d = min(max_d, limit)
    if max_d < 1:
        return None
    # One spare slot on each side so k ± 1 never leaves the arrays.
    v_offset = max_d + 1
    v_length = 2 * max_d + 3
    v1 = [-1] * v_length
    v1[v_offset + 1] = 0
    v2 = v1[:]
    delta = n - m
    # With an odd delta the forward path is the one that meets the reverse.
    front = delta % 2 != 0
    # Trim the k range once a path runs off the edge of the grid.
    k1start = k1end = k2start = k2end = 0

    for d in range(max_d):
        for k1 in range(-d + k1start, d + 1 - k1end, 2):
            k1_offset = v_offset + k1
            if k1 == -d or (k1 != d and v1[k1_offset - 1] < v1[k1_offset + 1]):
                x1 = v1[k1_offset + 1]
            else:
                x1 = v1[k1_offset - 1] + 1
            y1 = x1 - k1
            while x1 < n and y1 < m and a[alo + x1] == b[blo + y1]:
                x1 += 1
                y1 += 1
            v1[k1_offset] = x1
            if x1 > n:
                k1end += 2
            elif y1 > m:
                k1start += 2
            elif front:
                k2_offset = v_offset + delta - k1
                if 0 <= k2_offset < v_length and v2[k2_offset] != -1:
                    if x1 >= n - v2[k2_offset]:
                        return alo + x1, blo + y1

        for k2 in range(-d + k2start, d + 1 - k2end, 2):
            k2_offset = v_offset + k2
            if k2 == -d or (k2 != d and v2[k2_offset - 1] < v2[k2_offset + 1]):
                x2 = v2[k2_offset + 1]
            else:
                x2 = v2[k2_offset - 1] + 1
            y2 = x2 - k2
            while x2 < n and y2 < m and a[ahi - 1 - x2] == b[bhi - 1 - y2]:
                x2 += 1
                y2 += 1
            v2[k2_offset] = x2
            if x2 > n:
                k2end += 2
            elif y2 > m:
                k2start += 2
            elif not front:
                k1_offset = v_offset + delta - k2
                if 0 <= k1_offset < v_length and v1[k1_offset] != -1:
                    x1 = v1[k1_offset]
                    y1 = v_offset + x1 - k1_offset
                    if x1 >= n - x2:
                        return alo + x1, blo + y1

    return None


def longest_increasing_subsequence(seq: Sequence[int]) -> List[int]:
    """Indices into *seq* of one strictly increasing subsequence of max length."""
    tails: List[int] = []  # smallest tail value for each length
    tail_idx: List[int] = []
    parent = [-1] * len(seq)

    for i, val in enumerate(seq):
        pos = bisect_left(tails, val)
        if pos == len(tails):
            tails.append(val)
            tail_idx.append(i)
        else:
            tails[pos] = val
            tail_idx[pos] = i
        parent[i] = tail_idx[pos - 1] if pos > 0 else -1

    result: List[int] = []
    idx = tail_idx[-1] if tail_idx else -1
    while idx >= 0:
        result.append(idx)
        idx = parent[idx]
    result.reverse()
    return result


def _build_script(a: Sequence[str], b: Sequence[str], spans: List[_Span]) -> EditScript:
    """Turn raw spans into maximal runs.

    Every change region between two equal runs becomes one DELETE run
    followed by one INSERT run.
    """
    ops: List[Op] = []
    equal: List[str] = []
    deleted: List[str] = []
    inserted: List[str] = []

    def flush_changes() -> None:
        if deleted:
            ops.append(Op(OpKind.DELETE, tuple(deleted)))
            deleted.clear()
        if inserted:
            ops.append(Op(OpKind.INSERT, tuple(inserted)))
            inserted.clear()

    for kind, a1, a2, b1, b2 in spans:
        if kind == OpKind.EQUAL:
            if a2 == a1:
                continue
            flush_changes()
            equal.extend(a[a1:a2])
            continue
        if equal:
            ops.append(Op(OpKind.EQUAL, tuple(equal)))
            equal.clear()
        if kind == OpKind.DELETE:
            deleted.extend(a[a1:a2])
        else:
            inserted.extend(b[b1:b2])

    flush_changes()
    if equal:
        ops.append(Op(OpKind.EQUAL, tuple(equal)))
    return EditScript(tuple(ops))


_DEFAULT = LineDiffer()


def diff_lines(a: Sequence[str], b: Sequence[str]) -> EditScript:
    """Diff two line sequences with the default engine settings."""
    return _DEFAULT.diff(a, b)


def diff_texts(a_text: str, b_text: str, *, eol_normalize: bool = False) -> EditScript:
    """Split two texts into lines (optionally normalizing EOLs) and diff them."""
    if eol_normalize:
        a_text = normalize_eol(a_text)
        b_text = normalize_eol(b_text)
    return _DEFAULT.diff(split_lines(a_text), split_lines(b_text))
