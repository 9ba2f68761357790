# phind/core/discovery/__init__.py
"""
Filesystem traversal for phind.

Walks a directory tree and emits the paths that pass the include/exclude
patterns, the entry-type filter and the depth bound.
"""
from .override import OverrideResolver, VisitedEntry
from .path_resolution import validate_start_path
from .pattern_matching import GlobPattern, PatternSet, matches_any
from .walker import DirectoryTraverser, TraversalStats, collect_paths

__all__ = [
    "DirectoryTraverser",
    "GlobPattern",
    "OverrideResolver",
    "PatternSet",
    "TraversalStats",
    "VisitedEntry",
    "collect_paths",
    "matches_any",
    "validate_start_path",
]
