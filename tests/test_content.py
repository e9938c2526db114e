"""Tests for content classification: unchanged, binary, oversized, text."""

from pathlib import Path

import pytest

from bigdiff.compare.content import (
    ClassificationError,
    ContentKind,
    classify_content,
    looks_binary,
    read_text,
)
from bigdiff.compare.models import BinaryContentDetected, SizeExceedsLimit


def _pair(tmp_path: Path, a: bytes, b: bytes):
    pa, pb = tmp_path / "a", tmp_path / "b"
    pa.write_bytes(a)
    pb.write_bytes(b)
    return pa, pb


class TestLooksBinary:
    def test_nul_byte(self, tmp_path: Path):
        p = tmp_path / "f"
        p.write_bytes(b"abc\x00def")
        assert looks_binary(p) is True

    def test_invalid_utf8(self, tmp_path: Path):
        p = tmp_path / "f"
        p.write_bytes(b"caf\xe9 latin-1")
        assert looks_binary(p) is True

    def test_plain_utf8(self, tmp_path: Path):
        p = tmp_path / "f"
        p.write_text("héllo wörld\n", encoding="utf-8")
        assert looks_binary(p) is False

    def test_multibyte_cut_at_window(self, tmp_path: Path):
        p = tmp_path / "f"
        p.write_bytes(b"a" * 7 + "é".encode("utf-8") + b"tail")
        # the window ends inside the two-byte sequence
        assert looks_binary(p, sniff_bytes=8) is False

    def test_truncated_at_eof(self, tmp_path: Path):
        p = tmp_path / "f"
        p.write_bytes(b"abc" + "é".encode("utf-8")[:1])
        assert looks_binary(p) is True

    def test_empty(self, tmp_path: Path):
        p = tmp_path / "f"
        p.write_bytes(b"")
        assert looks_binary(p) is False


class TestReadText:
    def test_utf8(self, tmp_path: Path):
        p = tmp_path / "f"
        p.write_text("über\n", encoding="utf-8")
        assert read_text(p) == "über\n"

    def test_cp1252_fallback(self, tmp_path: Path):
        p = tmp_path / "f"
        p.write_bytes(b"caf\xe9\n")
        assert read_text(p) == "café\n"

    def test_eol_normalize(self, tmp_path: Path):
        p = tmp_path / "f"
        p.write_bytes(b"a\r\nb\rc\n")
        assert read_text(p, eol_normalize=True) == "a\nb\nc\n"
        assert read_text(p) == "a\r\nb\rc\n"


class TestClassifyContent:
    def test_identical(self, tmp_path: Path):
        a, b = _pair(tmp_path, b"same\n", b"same\n")
        assert classify_content(a, b, max_text_size=100).kind == ContentKind.UNCHANGED

    def test_text_change(self, tmp_path: Path):
        a, b = _pair(tmp_path, b"x\ny\n", b"x\nz\n")
        verdict = classify_content(a, b, max_text_size=100)
        assert verdict.kind == ContentKind.TEXT
        assert verdict.base_text == "x\ny\n"
        assert verdict.target_text == "x\nz\n"

    def test_binary(self, tmp_path: Path):
        a, b = _pair(tmp_path, b"\x00\x01", b"\x00\x02")
        verdict = classify_content(a, b, max_text_size=100)
        assert verdict.kind == ContentKind.BINARY
        assert isinstance(verdict.reason, BinaryContentDetected)
        assert verdict.target_size == 2

    def test_binary_on_one_side(self, tmp_path: Path):
        a, b = _pair(tmp_path, b"text\n", b"text\x00\n")
        assert classify_content(a, b, max_text_size=100).kind == ContentKind.BINARY

    def test_size_exactly_at_limit_is_text(self, tmp_path: Path):
        a, b = _pair(tmp_path, b"a" * 99 + b"\n", b"b" * 99 + b"\n")
        verdict = classify_content(a, b, max_text_size=100)
        assert verdict.kind == ContentKind.TEXT

    def test_one_byte_over_limit_is_oversized(self, tmp_path: Path):
        a, b = _pair(tmp_path, b"a" * 99 + b"\n", b"b" * 100 + b"\n")
        verdict = classify_content(a, b, max_text_size=100)
        assert verdict.kind == ContentKind.BINARY
        assert isinstance(verdict.reason, SizeExceedsLimit)
        assert verdict.reason.actual == 101
        assert verdict.reason.limit == 100
        assert verdict.target_size == 101

    def test_eol_only_difference(self, tmp_path: Path):
        a, b = _pair(tmp_path, b"a\nb\n", b"a\r\nb\r\n")
        assert classify_content(a, b, max_text_size=100).kind == ContentKind.TEXT
        normalized = classify_content(a, b, max_text_size=100, normalize_eol=True)
        assert normalized.kind == ContentKind.UNCHANGED

    def test_vanished_file(self, tmp_path: Path):
        a, b = _pair(tmp_path, b"a", b"b")
        b.unlink()
        with pytest.raises(ClassificationError):
            classify_content(a, b, max_text_size=100)
