"""phind: recursive file and directory finder with glob filtering."""

__version__ = "3.1.0"

from phind.logging_setup import install_library_defaults

install_library_defaults()

from phind.config.settings import EntryType, FilterConfig
from phind.core.discovery import DirectoryTraverser, TraversalStats, collect_paths
from phind.core.output import CollectingSink, StdoutSink

__all__ = [
    "CollectingSink",
    "DirectoryTraverser",
    "EntryType",
    "FilterConfig",
    "StdoutSink",
    "TraversalStats",
    "__version__",
    "collect_paths",
]
