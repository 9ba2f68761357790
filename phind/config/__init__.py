from .settings import DEFAULT_EXCLUDE_PATTERNS, EntryType, FilterConfig, UNLIMITED_DEPTH
from .loader import build_filter_config, get_global_ignore_path, load_global_ignore_patterns

__all__ = [
    "DEFAULT_EXCLUDE_PATTERNS",
    "EntryType",
    "FilterConfig",
    "UNLIMITED_DEPTH",
    "build_filter_config",
    "get_global_ignore_path",
    "load_global_ignore_patterns",
]
