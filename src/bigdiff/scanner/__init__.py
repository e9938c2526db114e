"""Scanner — tree walk, ignore rules, scan models."""

from bigdiff.scanner.ignore import DEFAULT_IGNORED_NAMES, IgnoreRules, split_patterns
from bigdiff.scanner.models import PathEntry, ScanWarning, TreeListing, WarningKind
from bigdiff.scanner.walker import scan_tree, walk

__all__ = [
    "DEFAULT_IGNORED_NAMES",
    "IgnoreRules",
    "PathEntry",
    "ScanWarning",
    "TreeListing",
    "WarningKind",
    "scan_tree",
    "split_patterns",
    "walk",
]
