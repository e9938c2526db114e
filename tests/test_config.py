"""Tests for config loading, size parsing, env overrides, and root checks."""

from pathlib import Path

import pytest

from bigdiff.config.loader import ConfigError, load_config, parse_size, validate_roots
from bigdiff.config.schema import DEFAULT_MAX_TEXT_SIZE, BigDiffConfig


class TestParseSize:
    def test_plain_integer(self):
        assert parse_size(102400) == 102400
        assert parse_size("102400") == 102400

    def test_decimal_units(self):
        assert parse_size("5MB") == 5_000_000
        assert parse_size("2k") == 2000
        assert parse_size("1gb") == 1_000_000_000

    def test_binary_units(self):
        assert parse_size("512KiB") == 512 * 1024
        assert parse_size("1mib") == 1024 * 1024

    def test_fraction(self):
        assert parse_size("1.5MB") == 1_500_000

    def test_invalid(self):
        with pytest.raises(ConfigError):
            parse_size("lots")
        with pytest.raises(ConfigError):
            parse_size("5 parsecs")

    def test_negative(self):
        with pytest.raises(ConfigError):
            parse_size(-1)


class TestConfigLoading:
    def test_default_config(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert isinstance(cfg, BigDiffConfig)
        assert cfg.diff.max_text_size == DEFAULT_MAX_TEXT_SIZE
        assert cfg.diff.normalize_eol is False
        assert cfg.output.format == "terminal"
        assert cfg.ignore.use_defaults is True

    def test_custom_toml(self, tmp_path: Path):
        (tmp_path / ".bigdiff.toml").write_text(
            'version = "1.0"\n'
            '[diff]\n'
            'normalize_eol = true\n'
            'max_text_size = "1MB"\n'
            '[ignore]\n'
            'patterns = ["*.log", "node_modules"]\n'
        )
        cfg = load_config(tmp_path)
        assert cfg.diff.normalize_eol is True
        assert cfg.diff.max_text_size == 1_000_000
        assert cfg.ignore.patterns == ["*.log", "node_modules"]

    def test_config_override_path(self, tmp_path: Path):
        custom = tmp_path / "custom.toml"
        custom.write_text('[output]\nformat = "json"\n')
        cfg = load_config(tmp_path, config_override=str(custom))
        assert cfg.output.format == "json"

    def test_missing_override(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path, config_override=str(tmp_path / "nope.toml"))

    def test_malformed_toml(self, tmp_path: Path):
        (tmp_path / ".bigdiff.toml").write_text("[diff\nbroken")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_unknown_keys_ignored(self, tmp_path: Path):
        (tmp_path / ".bigdiff.toml").write_text('[diff]\ncolour = "blue"\n')
        cfg = load_config(tmp_path)
        assert cfg.diff.max_text_size == DEFAULT_MAX_TEXT_SIZE

    def test_invalid_format(self, tmp_path: Path):
        (tmp_path / ".bigdiff.toml").write_text('[output]\nformat = "xml"\n')
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_invalid_workers(self, tmp_path: Path):
        (tmp_path / ".bigdiff.toml").write_text("[diff]\nworkers = 0\n")
        with pytest.raises(ConfigError):
            load_config(tmp_path)


class TestEnvOverrides:
    def test_max_text_size(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("BIGDIFF_MAX_TEXT_SIZE", "10kb")
        cfg = load_config(tmp_path)
        assert cfg.diff.max_text_size == 10_000

    def test_normalize_eol(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("BIGDIFF_NORMALIZE_EOL", "yes")
        cfg = load_config(tmp_path)
        assert cfg.diff.normalize_eol is True

    def test_bad_boolean(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("BIGDIFF_NORMALIZE_EOL", "maybe")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_ignore_appends(self, tmp_path: Path, monkeypatch):
        (tmp_path / ".bigdiff.toml").write_text('[ignore]\npatterns = ["*.log"]\n')
        monkeypatch.setenv("BIGDIFF_IGNORE", "build, dist")
        cfg = load_config(tmp_path)
        assert cfg.ignore.patterns == ["*.log", "build", "dist"]

    def test_format(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("BIGDIFF_FORMAT", "json")
        cfg = load_config(tmp_path)
        assert cfg.output.format == "json"

    def test_workers(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("BIGDIFF_WORKERS", "3")
        cfg = load_config(tmp_path)
        assert cfg.diff.workers == 3


class TestValidateRoots:
    def test_valid(self, make_tree, tmp_path: Path):
        base = make_tree("base", {"a.txt": "a\n"})
        target = make_tree("target", {"a.txt": "b\n"})
        b, t, o = validate_roots(base, target, tmp_path / "out")
        assert b == base.resolve()
        assert t == target.resolve()
        assert o == (tmp_path / "out").resolve()

    def test_missing_base(self, make_tree, tmp_path: Path):
        target = make_tree("target", {})
        with pytest.raises(ConfigError, match="not found"):
            validate_roots(tmp_path / "missing", target, tmp_path / "out")

    def test_base_is_file(self, make_tree, tmp_path: Path):
        target = make_tree("target", {})
        f = tmp_path / "file.txt"
        f.write_text("x")
        with pytest.raises(ConfigError, match="not a directory"):
            validate_roots(f, target, tmp_path / "out")

    def test_same_roots(self, make_tree, tmp_path: Path):
        base = make_tree("base", {})
        with pytest.raises(ConfigError, match="same"):
            validate_roots(base, base, tmp_path / "out")

    def test_output_inside_base(self, make_tree):
        base = make_tree("base", {})
        target = make_tree("target", {})
        with pytest.raises(ConfigError, match="inside"):
            validate_roots(base, target, base / "out")

    def test_output_equals_target(self, make_tree):
        base = make_tree("base", {})
        target = make_tree("target", {})
        with pytest.raises(ConfigError):
            validate_roots(base, target, target)

    def test_output_is_file(self, make_tree, tmp_path: Path):
        base = make_tree("base", {})
        target = make_tree("target", {})
        out = tmp_path / "out"
        out.write_text("x")
        with pytest.raises(ConfigError, match="not a directory"):
            validate_roots(base, target, out)
