"""Starter .bigdiff.toml template."""

DEFAULT_TOML = """\
# BigDiff Configuration
version = "1.0"

[diff]
normalize_eol = false     # rewrite CRLF / lone CR to LF before comparing text
max_text_size = "5MB"     # larger files are copied whole into '.modified'
# workers = 8             # parallel per-file pipelines (default: CPU based)

[ignore]
use_defaults = true       # .git, __pycache__, .DS_Store, Thumbs.db
# patterns = ["node_modules", "*.log", "build/*"]
# file = ".bigdiffignore"

[output]
format = "terminal"       # terminal | json
show_summary = true

[comments]
# profiles_file = "comment-profiles.yaml"
"""
