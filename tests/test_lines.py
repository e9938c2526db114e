"""Tests for the line diff engine."""

import random

from bigdiff.diff.lines import (
    LineDiffer,
    diff_lines,
    diff_texts,
    longest_increasing_subsequence,
    normalize_eol,
    split_lines,
)
from bigdiff.diff.models import OpKind


def _lcs_length(a, b) -> int:
    prev = [0] * (len(b) + 1)
    for x in a:
        cur = [0]
        for j, y in enumerate(b):
            cur.append(prev[j] + 1 if x == y else max(prev[j + 1], cur[j]))
        prev = cur
    return prev[-1]


def _edit_cost(script) -> int:
    return script.inserted + script.deleted


def _kinds(script):
    return [op.kind for op in script]


class TestSplitLines:
    def test_trailing_newline_adds_no_line(self):
        assert split_lines("a\nb\n") == ["a", "b"]

    def test_no_trailing_newline(self):
        assert split_lines("a\nb") == ["a", "b"]

    def test_empty(self):
        assert split_lines("") == []

    def test_blank_lines_kept(self):
        assert split_lines("a\n\nb\n") == ["a", "", "b"]

    def test_crlf_kept_without_normalization(self):
        assert split_lines("a\r\nb\r\n") == ["a\r", "b\r"]

    def test_normalize_eol(self):
        assert normalize_eol("a\r\nb\rc\n") == "a\nb\nc\n"


class TestDiffLines:
    def test_identical(self):
        script = diff_lines(["a", "b"], ["a", "b"])
        assert script.is_identity
        assert _kinds(script) == [OpKind.EQUAL]

    def test_both_empty(self):
        script = diff_lines([], [])
        assert len(script) == 0
        assert script.is_identity

    def test_insert_only(self):
        script = diff_lines([], ["a", "b"])
        assert _kinds(script) == [OpKind.INSERT]
        assert script.inserted == 2

    def test_delete_only(self):
        script = diff_lines(["a", "b"], [])
        assert _kinds(script) == [OpKind.DELETE]
        assert script.deleted == 2

    def test_single_replacement(self):
        script = diff_lines(["x", "y"], ["x", "z"])
        assert [(op.kind, op.lines) for op in script] == [
            (OpKind.EQUAL, ("x",)),
            (OpKind.DELETE, ("y",)),
            (OpKind.INSERT, ("z",)),
        ]

    def test_delete_run_precedes_insert_run(self):
        script = diff_lines(["1", "2"], ["3", "4"])
        assert [(op.kind, op.lines) for op in script] == [
            (OpKind.DELETE, ("1", "2")),
            (OpKind.INSERT, ("3", "4")),
        ]

    def test_separate_regions(self):
        script = diff_lines(["a", "b", "c", "d"], ["a", "x", "c", "y"])
        assert _kinds(script) == [
            OpKind.EQUAL, OpKind.DELETE, OpKind.INSERT,
            OpKind.EQUAL, OpKind.DELETE, OpKind.INSERT,
        ]

    def test_no_adjacent_runs_of_same_kind(self):
        a = list("abcabba")
        b = list("cbabac")
        kinds = _kinds(diff_lines(a, b))
        assert all(k1 != k2 for k1, k2 in zip(kinds, kinds[1:]))

    def test_classic_example_is_minimal(self):
        a = list("abcabba")
        b = list("cbabac")
        script = diff_lines(a, b)
        assert _edit_cost(script) == 5
        assert script.base_lines() == a
        assert script.target_lines() == b

    def test_shared_prefix_matched_first(self):
        script = diff_lines(["a", "a"], ["a"])
        assert [(op.kind, op.lines) for op in script] == [
            (OpKind.EQUAL, ("a",)),
            (OpKind.DELETE, ("a",)),
        ]

    def test_reconstruction_and_minimality(self):
        rng = random.Random(1234)
        for _ in range(150):
            a = [rng.choice("abcd") for _ in range(rng.randint(0, 12))]
            b = [rng.choice("abcd") for _ in range(rng.randint(0, 12))]
            script = diff_lines(a, b)
            assert script.base_lines() == a
            assert script.target_lines() == b
            assert _edit_cost(script) == len(a) + len(b) - 2 * _lcs_length(a, b)


class TestDiffTexts:
    def test_eol_normalize(self):
        assert diff_texts("a\r\nb\r\n", "a\nb\n", eol_normalize=True).is_identity
        assert not diff_texts("a\r\nb\r\n", "a\nb\n").is_identity


class TestLargeInputs:
    def test_anchored_path_reconstructs(self):
        differ = LineDiffer(large_input_cells=100)
        a = [f"line {i}" for i in range(60)]
        b = list(a)
        b[5] = "changed"
        del b[20:23]
        b.insert(40, "inserted")
        script = differ.diff(a, b)
        assert script.base_lines() == a
        assert script.target_lines() == b
        assert _edit_cost(script) == 2 + 3 + 1

    def test_anchored_with_repeated_lines(self):
        differ = LineDiffer(large_input_cells=100)
        a = ["head a"] + ["{", "}"] * 20 + ["mid"] + ["{", "}"] * 20
        b = ["head b"] + ["{", "}"] * 19 + ["mid"] + ["{", "}"] * 21
        script = differ.diff(a, b)
        assert script.base_lines() == a
        assert script.target_lines() == b

    def test_cost_limit_falls_back_to_replace(self):
        a = ["x"] + ["r"] * 6
        b = ["r"] * 6 + ["y"]
        assert _edit_cost(diff_lines(a, b)) == 2

        script = LineDiffer(large_input_cells=16, cost_limit=1).diff(a, b)
        assert _kinds(script) == [OpKind.DELETE, OpKind.INSERT]
        assert script.deleted == 7
        assert script.inserted == 7
        assert script.base_lines() == a
        assert script.target_lines() == b

    def test_lopsided_sizes_take_capped_search(self, monkeypatch):
        import bigdiff.diff.lines as lines_mod

        limits = []
        real_snake = lines_mod._middle_snake

        def recording_snake(*args):
            limits.append(args[-1])
            return real_snake(*args)

        monkeypatch.setattr(lines_mod, "_middle_snake", recording_snake)

        a = [f"old {i}" for i in range(60_000)]
        b = [f"new {i}" for i in range(4_000)]
        differ = LineDiffer()
        script = differ.diff(a, b)

        assert limits
        assert all(limit == differ.cost_limit for limit in limits)
        assert _kinds(script) == [OpKind.DELETE, OpKind.INSERT]
        assert script.deleted == 60_000
        assert script.inserted == 4_000
        assert script.base_lines() == a
        assert script.target_lines() == b

    def test_big_files_with_scattered_edits(self):
        a = [f"row {i}" for i in range(30_000)]
        b = list(a)
        for i in range(0, 30_000, 1000):
            b[i] = f"edited {i}"
        script = diff_lines(a, b)
        assert script.base_lines() == a
        assert script.target_lines() == b
        assert script.deleted == 30
        assert script.inserted == 30


class TestLIS:
    def test_basic(self):
        seq = [3, 1, 4, 1, 5, 9, 2, 6]
        idx = longest_increasing_subsequence(seq)
        values = [seq[i] for i in idx]
        assert len(values) == 4
        assert values == sorted(set(values))
        assert idx == sorted(idx)

    def test_empty(self):
        assert longest_increasing_subsequence([]) == []
